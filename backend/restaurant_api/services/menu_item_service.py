import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from restaurant_api.errors import ForbiddenError, NotFoundError
from restaurant_api.models.models import Category, MenuItem, Restaurant
from restaurant_api.services.pagination import paginate
from restaurant_api.services.restaurant_service import is_owner

logger = logging.getLogger(__name__)

MENU_ITEM_FIELDS = {'category_id', 'name', 'description', 'ingredients', 'price', 'image_url', 'active'}


class MenuItemService:
    def __init__(self, session):
        self.session = session

    def _require_category(self, category_id):
        if self.session.get(Category, category_id) is None:
            raise NotFoundError(f'Category with ID {category_id} not found')

    def _active_items(self):
        return (
            self.session.query(MenuItem)
            .join(Restaurant, MenuItem.restaurant_id == Restaurant.id)
            .filter(MenuItem.active.is_(True), Restaurant.active.is_(True))
        )

    def create_menu_item(self, data: Dict[str, Any], user_id: int) -> MenuItem:
        restaurant_id = data['restaurant_id']
        if self.session.get(Restaurant, restaurant_id) is None:
            raise NotFoundError(f'Restaurant with ID {restaurant_id} not found')

        if not is_owner(self.session, user_id, restaurant_id):
            raise ForbiddenError('You do not have permission to add menu items to this restaurant')

        self._require_category(data['category_id'])

        menu_item = MenuItem(
            restaurant_id=restaurant_id,
            category_id=data['category_id'],
            name=data['name'],
            description=data.get('description'),
            ingredients=data.get('ingredients'),
            price=Decimal(str(data['price'])),
            image_url=data.get('image_url'),
            active=True
        )

        try:
            self.session.add(menu_item)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info(f"Menu item {menu_item.id} added to restaurant {restaurant_id}")
        return menu_item

    def get_menu_items(self, restaurant_id: Optional[int] = None, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        query = self._active_items().join(Category, MenuItem.category_id == Category.id)

        if restaurant_id:
            query = query.filter(MenuItem.restaurant_id == restaurant_id)

        query = query.order_by(Category.name.asc(), MenuItem.name.asc(), MenuItem.id.asc())
        return paginate(query, page, limit)

    def get_menu_item_by_id(self, menu_item_id: int) -> Optional[MenuItem]:
        # Inactive items stay resolvable for historical order lines
        return self.session.get(MenuItem, menu_item_id)

    def update_menu_item(self, menu_item_id: int, update_data: Dict[str, Any], user_id: int) -> Optional[MenuItem]:
        menu_item = self.get_menu_item_by_id(menu_item_id)
        if not menu_item:
            return None

        if not is_owner(self.session, user_id, menu_item.restaurant_id):
            raise ForbiddenError('You do not have permission to update this menu item')

        if 'category_id' in update_data:
            self._require_category(update_data['category_id'])

        try:
            for field, value in update_data.items():
                if field not in MENU_ITEM_FIELDS:
                    continue
                if field == 'price':
                    value = Decimal(str(value))
                setattr(menu_item, field, value)
            menu_item.updated_at = datetime.utcnow()
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return menu_item

    def delete_menu_item(self, menu_item_id: int, user_id: int) -> bool:
        """Soft delete: the row is kept with ``active=False``."""
        menu_item = self.get_menu_item_by_id(menu_item_id)
        if not menu_item:
            return False

        if not is_owner(self.session, user_id, menu_item.restaurant_id):
            raise ForbiddenError('You do not have permission to delete this menu item')

        try:
            menu_item.active = False
            menu_item.updated_at = datetime.utcnow()
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return True

    def get_menu_items_by_category(self, category_id: int, restaurant_id: Optional[int] = None) -> List[MenuItem]:
        query = self._active_items().filter(MenuItem.category_id == category_id)

        if restaurant_id:
            query = query.filter(MenuItem.restaurant_id == restaurant_id)

        return query.order_by(MenuItem.name.asc()).all()

    def get_categories(self) -> List[Category]:
        return self.session.query(Category).order_by(Category.name.asc()).all()
