import logging
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import false

from restaurant_api.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from restaurant_api.models.models import (
    Address, Comment, Driver, MenuItem, Order, OrderMenuItem, OrderStatus,
    Restaurant, StatusCatalog,
)
from restaurant_api.services.pagination import paginate

logger = logging.getLogger(__name__)

PENDING = 'Pending'
PICKED_UP = 'Picked Up'
DELIVERED = 'Delivered'
CANCELLED = 'Cancelled'


class OrderService:
    """
    Order placement, status history, driver assignment and cancellation.

    Status changes are unguarded: any catalog status may follow any other.
    Every append goes through ``append_status`` so rules can be added there.
    """

    def __init__(self, session, estimated_delivery: timedelta = timedelta(minutes=45)):
        self.session = session
        self.estimated_delivery = estimated_delivery

    def _driver_for_user(self, user_id) -> Optional[Driver]:
        if user_id is None:
            return None
        return self.session.query(Driver).filter_by(user_id=user_id).first()

    def _can_view(self, order: Order, caller_id, caller_role) -> bool:
        if caller_role == 'customer':
            return order.user_id == caller_id
        if caller_role == 'driver':
            driver = self._driver_for_user(caller_id)
            return driver is not None and order.driver_id == driver.id
        return True

    def create_order(self, buyer_id: int, restaurant_id: int, delivery_address_id: int,
                     items: Iterable[Dict[str, Any]], comment: Optional[str] = None) -> Order:
        """Price the line items, store the order and open its history with Pending."""
        if self.session.get(Restaurant, restaurant_id) is None:
            raise NotFoundError(f'Restaurant with ID {restaurant_id} not found')

        address = self.session.get(Address, delivery_address_id)
        if address is None:
            raise NotFoundError(f'Address with ID {delivery_address_id} not found')
        if address.user_id != buyer_id:
            raise ForbiddenError('Delivery address does not belong to you')

        try:
            total = Decimal('0.00')
            lines = []
            for item in items:
                menu_item = self.session.get(MenuItem, item['menu_item_id'])
                if menu_item is None:
                    raise NotFoundError(f"Menu item with ID {item['menu_item_id']} not found")
                if not menu_item.active:
                    raise ValidationError(f'Menu item {menu_item.name} is not available')

                unit_price = Decimal(menu_item.price)
                total += unit_price * item['quantity']
                lines.append((menu_item, item['quantity'], unit_price, item.get('comment')))

            order = Order(
                restaurant_id=restaurant_id,
                user_id=buyer_id,
                delivery_address_id=delivery_address_id,
                estimated_delivery_time=datetime.utcnow() + self.estimated_delivery,
                price=total,
                discount=Decimal('0.00'),
                final_price=total,
                comment=comment
            )
            self.session.add(order)
            self.session.flush()

            for menu_item, quantity, unit_price, line_comment in lines:
                self.session.add(OrderMenuItem(
                    order_id=order.id,
                    menu_item_id=menu_item.id,
                    quantity=quantity,
                    item_price=unit_price,
                    comment=line_comment
                ))

            self.append_status(order.id, PENDING)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info(f"Order {order.id} placed by user {buyer_id} for {total}")
        return order

    def append_status(self, order_id: int, status_name: str) -> OrderStatus:
        """Add one history row. Flushes only; the caller owns the transaction."""
        status = self.session.query(StatusCatalog).filter_by(name=status_name).first()
        if status is None:
            raise NotFoundError(f"Status '{status_name}' not found")

        entry = OrderStatus(order_id=order_id, status_catalog_id=status.id)
        self.session.add(entry)
        self.session.flush()
        logger.info(f"Order {order_id} -> {status_name}")
        return entry

    def get_orders(self, caller_id: Optional[int] = None, caller_role: Optional[str] = None,
                   page: int = 1, limit: int = 10) -> Dict[str, Any]:
        query = self.session.query(Order)

        if caller_role == 'customer':
            query = query.filter(Order.user_id == caller_id)
        elif caller_role == 'driver':
            driver = self._driver_for_user(caller_id)
            query = query.filter(Order.driver_id == driver.id if driver else false())

        query = query.order_by(Order.created_at.desc(), Order.id.desc())
        return paginate(query, page, limit, serialize=lambda order: order.to_summary_dict())

    def get_status_history(self, order_id: int) -> List[OrderStatus]:
        return (
            self.session.query(OrderStatus)
            .filter(OrderStatus.order_id == order_id)
            .order_by(OrderStatus.created_at.desc(), OrderStatus.id.desc())
            .all()
        )

    def get_order_by_id(self, order_id: int, caller_id: Optional[int] = None,
                        caller_role: Optional[str] = None) -> Optional[Dict[str, Any]]:
        order = self.session.get(Order, order_id)
        if order is None:
            return None

        if not self._can_view(order, caller_id, caller_role):
            raise ForbiddenError('You do not have permission to view this order')

        history = self.get_status_history(order.id)
        data = order.to_summary_dict()
        data['items'] = [line.to_dict() for line in order.items]
        data['status_history'] = [entry.to_dict() for entry in history]
        data['current_status'] = history[0].status.name if history else None
        return data

    def update_order_status(self, order_id: int, status_name: str, actor_id: Optional[int] = None) -> OrderStatus:
        try:
            entry = self.append_status(order_id, status_name)

            if status_name == DELIVERED:
                order = self.session.get(Order, order_id)
                if order is not None:
                    order.actual_delivery_time = datetime.utcnow()
                    order.updated_at = datetime.utcnow()

            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        logger.info(f"Order {order_id} status set to {status_name} by user {actor_id}")
        return entry

    def assign_driver(self, order_id: int, driver_user_id: int) -> Order:
        order = self.session.get(Order, order_id)
        if order is None:
            raise NotFoundError(f'Order with ID {order_id} not found')

        driver = self._driver_for_user(driver_user_id)
        if driver is None:
            raise NotFoundError('Driver not found')

        try:
            # Check and claim in one statement so two assignments cannot take the same driver
            claimed = (
                self.session.query(Driver)
                .filter(Driver.id == driver.id, Driver.online.is_(True), Driver.delivering.is_(False))
                .update({'delivering': True, 'updated_at': datetime.utcnow()}, synchronize_session=False)
            )
            if claimed == 0:
                raise ConflictError('Driver is not available')

            order.driver_id = driver.id
            order.updated_at = datetime.utcnow()
            self.append_status(order.id, PICKED_UP)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        self.session.refresh(driver)
        logger.info(f"Driver {driver.id} (user {driver_user_id}) assigned to order {order_id}")
        return order

    def cancel_order(self, order_id: int, caller_id: int, caller_role: str) -> bool:
        order = self.session.get(Order, order_id)
        if order is None:
            return False

        if caller_role in ('customer', 'driver') and not self._can_view(order, caller_id, caller_role):
            raise ForbiddenError('You do not have permission to cancel this order')

        try:
            self.append_status(order.id, CANCELLED)

            if order.driver_id is not None:
                # Frees the driver; online is left as it was
                self.session.query(Driver).filter(Driver.id == order.driver_id).update(
                    {'delivering': False, 'updated_at': datetime.utcnow()},
                    synchronize_session=False
                )

            order.updated_at = datetime.utcnow()
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        if order.driver is not None:
            self.session.refresh(order.driver)
        logger.info(f"Order {order_id} cancelled by user {caller_id}")
        return True

    def add_comment(self, order_id: int, user_id: int, comment_text: str,
                    is_complaint: bool = False, is_praise: bool = False) -> Comment:
        order = self.session.get(Order, order_id)
        if order is None:
            raise NotFoundError(f'Order with ID {order_id} not found')
        if order.user_id != user_id:
            raise ForbiddenError('Only the customer who placed the order can comment on it')

        comment = Comment(
            order_id=order_id,
            user_id=user_id,
            comment_text=comment_text,
            is_complaint=is_complaint,
            is_praise=is_praise
        )

        try:
            self.session.add(comment)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        return comment

    def list_comments(self, order_id: int, caller_id: Optional[int] = None,
                      caller_role: Optional[str] = None) -> List[Comment]:
        order = self.session.get(Order, order_id)
        if order is None:
            raise NotFoundError(f'Order with ID {order_id} not found')
        if not self._can_view(order, caller_id, caller_role):
            raise ForbiddenError('You do not have permission to view this order')

        return (
            self.session.query(Comment)
            .filter(Comment.order_id == order_id)
            .order_by(Comment.created_at.asc(), Comment.id.asc())
            .all()
        )
