from flask import Blueprint, current_app
from flask_jwt_extended import jwt_required

from restaurant_api.routes.helpers import api_response, current_caller, error_response, parse_body
from restaurant_api.schemas import (
    LoginRequest, PasswordResetRequest, RegisterRequest, ResetPasswordRequest,
    UpdateProfileRequest, VerifyEmailRequest,
)

auth_bp = Blueprint('auth', __name__)

@auth_bp.route('/api/auth/register', methods=['POST'])
def register():
    """Register a new user"""
    payload = parse_body(RegisterRequest)

    user, access_token = current_app.account_service.register(
        name=payload.name,
        email=payload.email,
        password=payload.password,
        contact_phone=payload.contact_phone,
        role=payload.role
    )

    # Registration stands even if the welcome email cannot be sent
    current_app.notification_service.send_welcome_email(user)

    return api_response(
        {'user': user.to_dict(), 'token': access_token},
        message='User registered successfully',
        status=201
    )

@auth_bp.route('/api/auth/login', methods=['POST'])
def login():
    """Login user and return JWT token"""
    payload = parse_body(LoginRequest)
    user, access_token = current_app.account_service.login(payload.email, payload.password)

    return api_response({'user': user.to_dict(), 'token': access_token}, message='Login successful')

@auth_bp.route('/api/auth/profile', methods=['GET'])
@jwt_required()
def get_profile():
    """Get current user profile"""
    user_id, _ = current_caller()
    user = current_app.account_service.get_user_by_id(user_id)

    if not user:
        return error_response('User not found', 404)

    return api_response(user.to_dict())

@auth_bp.route('/api/auth/profile', methods=['PUT'])
@jwt_required()
def update_profile():
    """Update user profile"""
    user_id, _ = current_caller()
    payload = parse_body(UpdateProfileRequest)

    user = current_app.account_service.update_user(user_id, payload.model_dump(exclude_unset=True))
    if not user:
        return error_response('User not found', 404)

    return api_response(user.to_dict(), message='Profile updated successfully')

@auth_bp.route('/api/auth/verify-email', methods=['POST'])
def verify_email():
    payload = parse_body(VerifyEmailRequest)

    if not current_app.account_service.verify_email(payload.user_id, payload.confirmation_code):
        return error_response('Invalid confirmation code or user not found', 400)

    return api_response(message='Email verified successfully')

@auth_bp.route('/api/auth/request-password-reset', methods=['POST'])
def request_password_reset():
    payload = parse_body(PasswordResetRequest)

    reset_token = current_app.account_service.request_password_reset(payload.email)
    if not reset_token:
        return error_response('User not found', 404)

    current_app.notification_service.send_password_reset_email(payload.email, reset_token)
    return api_response(message='Password reset email sent')

@auth_bp.route('/api/auth/reset-password', methods=['POST'])
def reset_password():
    payload = parse_body(ResetPasswordRequest)

    if not current_app.account_service.reset_password(payload.token, payload.new_password):
        return error_response('Invalid or expired reset token', 400)

    return api_response(message='Password reset successfully')
