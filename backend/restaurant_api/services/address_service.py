from datetime import datetime
from typing import Any, Dict, List, Optional

from restaurant_api.errors import ForbiddenError, NotFoundError
from restaurant_api.models.models import Address, City

ADDRESS_FIELDS = {'street_address_1', 'street_address_2', 'city_id', 'zip_code', 'delivery_instructions'}


class AddressService:
    def __init__(self, session):
        self.session = session

    def _require_city(self, city_id):
        if self.session.get(City, city_id) is None:
            raise NotFoundError(f'City with ID {city_id} not found')

    def create_address(self, user_id: int, data: Dict[str, Any]) -> Address:
        self._require_city(data['city_id'])

        address = Address(
            user_id=user_id,
            **{field: value for field, value in data.items() if field in ADDRESS_FIELDS}
        )

        try:
            self.session.add(address)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return address

    def list_addresses(self, user_id: int) -> List[Address]:
        return (
            self.session.query(Address)
            .filter(Address.user_id == user_id)
            .order_by(Address.created_at.desc(), Address.id.desc())
            .all()
        )

    def get_address(self, address_id: int, user_id: int) -> Optional[Address]:
        address = self.session.get(Address, address_id)
        if address is None:
            return None
        if address.user_id != user_id:
            raise ForbiddenError('You do not have permission to access this address')
        return address

    def update_address(self, address_id: int, user_id: int, update_data: Dict[str, Any]) -> Optional[Address]:
        address = self.get_address(address_id, user_id)
        if address is None:
            return None

        if 'city_id' in update_data:
            self._require_city(update_data['city_id'])

        try:
            for field, value in update_data.items():
                if field in ADDRESS_FIELDS:
                    setattr(address, field, value)
            address.updated_at = datetime.utcnow()
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return address
