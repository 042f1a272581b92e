import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.exc import IntegrityError

from restaurant_api import security
from restaurant_api.errors import ConflictError, UnauthorizedError, ValidationError
from restaurant_api.models.models import Driver, User, ROLES

logger = logging.getLogger(__name__)

PASSWORD_POLICY_MESSAGE = (
    'Password must be at least 8 characters long and contain uppercase, lowercase, and number'
)
INVALID_CREDENTIALS_MESSAGE = 'Invalid email or password'

# Password, role and verification flags have their own flows
PROFILE_FIELDS = {'name', 'email', 'contact_phone'}


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class AccountService:
    """Registration, login, profile updates and credential recovery."""

    def __init__(self, session, reset_token_ttl: timedelta = timedelta(hours=1)):
        self.session = session
        self.reset_token_ttl = reset_token_ttl

    def register(self, name: str, email: str, password: str,
                 contact_phone: Optional[str] = None, role: Optional[str] = None) -> Tuple[User, str]:
        """Create an account and return it together with a fresh bearer token."""
        email = _normalize_email(email)
        role = role or 'customer'

        if self.get_user_by_email(email):
            raise ConflictError('User with this email already exists')

        if not security.is_valid_password(password):
            raise ValidationError(PASSWORD_POLICY_MESSAGE)

        if role not in ROLES:
            raise ValidationError(f'Unknown role: {role}')

        user = User(
            name=name.strip(),
            email=email,
            password_hash=security.hash_password(password),
            contact_phone=contact_phone,
            role=role,
            confirmation_code=security.generate_confirmation_code(),
            email_verified=False,
            phone_verified=False
        )

        try:
            self.session.add(user)
            self.session.flush()

            if role == 'driver':
                self.session.add(Driver(user_id=user.id, online=False, delivering=False))

            self.session.commit()
        except IntegrityError:
            # Lost a race against a concurrent registration with the same email
            self.session.rollback()
            raise ConflictError('User with this email already exists')
        except Exception:
            self.session.rollback()
            raise

        logger.info(f"Registered user {user.id} with role {role}")
        return user, security.issue_token(user)

    def login(self, email: str, password: str) -> Tuple[User, str]:
        user = self.get_user_by_email(email)

        if not user or not security.verify_password(password, user.password_hash):
            logger.info(f"Failed login attempt for {email}")
            raise UnauthorizedError(INVALID_CREDENTIALS_MESSAGE)

        return user, security.issue_token(user)

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        return self.session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        if not email:
            return None
        return self.session.query(User).filter_by(email=_normalize_email(email)).first()

    def update_user(self, user_id: int, update_data: Dict[str, Any]) -> Optional[User]:
        """Merge profile fields into the user.

        Credentials, role and verification flags are silently dropped; they have
        their own flows.
        """
        user = self.get_user_by_id(user_id)
        if not user:
            return None

        changes = {
            field: value for field, value in update_data.items()
            if field in PROFILE_FIELDS
        }

        if 'email' in changes:
            changes['email'] = _normalize_email(changes['email'])
            existing = self.get_user_by_email(changes['email'])
            if existing and existing.id != user.id:
                raise ConflictError('User with this email already exists')

        try:
            for field, value in changes.items():
                setattr(user, field, value)
            user.updated_at = datetime.utcnow()
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return user

    def verify_email(self, user_id: int, confirmation_code: str) -> bool:
        if not confirmation_code:
            return False

        user = self.session.query(User).filter_by(
            id=user_id,
            confirmation_code=confirmation_code
        ).first()

        if not user:
            return False

        try:
            user.email_verified = True
            user.confirmation_code = None
            user.updated_at = datetime.utcnow()
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info(f"Email verified for user {user.id}")
        return True

    def request_password_reset(self, email: str) -> Optional[str]:
        """Store a one-hour reset token for the account and return it, or None."""
        user = self.get_user_by_email(email)
        if not user:
            return None

        reset_token = security.generate_reset_token()

        try:
            user.password_reset_token = reset_token
            user.password_reset_expires = datetime.utcnow() + self.reset_token_ttl
            user.updated_at = datetime.utcnow()
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return reset_token

    def reset_password(self, token: str, new_password: str) -> bool:
        if not token:
            return False

        user = self.session.query(User).filter_by(password_reset_token=token).first()
        if not user:
            return False

        if not user.password_reset_expires or user.password_reset_expires < datetime.utcnow():
            return False

        if not security.is_valid_password(new_password):
            raise ValidationError(PASSWORD_POLICY_MESSAGE)

        try:
            user.password_hash = security.hash_password(new_password)
            user.password_reset_token = None
            user.password_reset_expires = None
            user.updated_at = datetime.utcnow()
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info(f"Password reset for user {user.id}")
        return True

