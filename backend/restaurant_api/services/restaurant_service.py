import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from restaurant_api.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from restaurant_api.models.models import Category, City, MenuItem, Restaurant, RestaurantOwner, User
from restaurant_api.services.pagination import paginate

logger = logging.getLogger(__name__)

RESTAURANT_FIELDS = {
    'name', 'street_address', 'zip_code', 'city_id', 'phone', 'email',
    'description', 'image_url', 'active',
}


def is_owner(session, user_id: int, restaurant_id: int) -> bool:
    """True when the ownership join links the user to the restaurant."""
    return session.query(RestaurantOwner).filter_by(
        user_id=user_id,
        restaurant_id=restaurant_id
    ).first() is not None


class RestaurantService:
    def __init__(self, session):
        self.session = session

    def _require_city(self, city_id):
        if self.session.get(City, city_id) is None:
            raise NotFoundError(f'City with ID {city_id} not found')

    def create_restaurant(self, data: Dict[str, Any], owner_id: int) -> Restaurant:
        """Create a restaurant and record the caller as its owner."""
        self._require_city(data['city_id'])

        restaurant = Restaurant(
            **{field: value for field, value in data.items() if field in RESTAURANT_FIELDS}
        )
        restaurant.active = True

        try:
            self.session.add(restaurant)
            self.session.flush()
            self.session.add(RestaurantOwner(user_id=owner_id, restaurant_id=restaurant.id))
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info(f"Restaurant {restaurant.id} created by user {owner_id}")
        return restaurant

    def get_restaurants(self, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        query = (
            self.session.query(Restaurant)
            .filter(Restaurant.active.is_(True))
            .order_by(Restaurant.name.asc(), Restaurant.id.asc())
        )
        return paginate(query, page, limit)

    def get_restaurant_by_id(self, restaurant_id: int) -> Optional[Restaurant]:
        # Inactive restaurants stay resolvable for historical orders
        return self.session.get(Restaurant, restaurant_id)

    def update_restaurant(self, restaurant_id: int, update_data: Dict[str, Any], user_id: int) -> Optional[Restaurant]:
        restaurant = self.get_restaurant_by_id(restaurant_id)
        if not restaurant:
            return None

        if not is_owner(self.session, user_id, restaurant_id):
            raise ForbiddenError('You do not have permission to update this restaurant')

        if 'city_id' in update_data:
            self._require_city(update_data['city_id'])

        try:
            for field, value in update_data.items():
                if field in RESTAURANT_FIELDS:
                    setattr(restaurant, field, value)
            restaurant.updated_at = datetime.utcnow()
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return restaurant

    def delete_restaurant(self, restaurant_id: int, user_id: int) -> bool:
        """Soft delete: the row is kept with ``active=False``."""
        restaurant = self.get_restaurant_by_id(restaurant_id)
        if not restaurant:
            return False

        if not is_owner(self.session, user_id, restaurant_id):
            raise ForbiddenError('You do not have permission to delete this restaurant')

        try:
            restaurant.active = False
            restaurant.updated_at = datetime.utcnow()
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info(f"Restaurant {restaurant_id} deactivated by user {user_id}")
        return True

    def get_restaurants_by_owner(self, owner_id: int) -> List[Restaurant]:
        return (
            self.session.query(Restaurant)
            .join(RestaurantOwner, RestaurantOwner.restaurant_id == Restaurant.id)
            .filter(RestaurantOwner.user_id == owner_id)
            .order_by(Restaurant.name.asc())
            .all()
        )

    def get_restaurant_menu(self, restaurant_id: int) -> List[MenuItem]:
        return (
            self.session.query(MenuItem)
            .join(Category, MenuItem.category_id == Category.id)
            .filter(MenuItem.restaurant_id == restaurant_id, MenuItem.active.is_(True))
            .order_by(Category.name.asc(), MenuItem.name.asc())
            .all()
        )

    def assign_restaurant_owner(self, user_id: int, restaurant_id: int) -> RestaurantOwner:
        user = self.session.get(User, user_id)
        if not user or user.role != 'restaurant_owner':
            raise ValidationError('User must have restaurant_owner role')

        if self.get_restaurant_by_id(restaurant_id) is None:
            raise NotFoundError(f'Restaurant with ID {restaurant_id} not found')

        if is_owner(self.session, user_id, restaurant_id):
            raise ConflictError('User is already assigned to this restaurant')

        assignment = RestaurantOwner(user_id=user_id, restaurant_id=restaurant_id)
        try:
            self.session.add(assignment)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return assignment
