from restaurant_api import db
from datetime import datetime

ROLES = ('customer', 'driver', 'restaurant_owner', 'admin')


def _iso(value):
    return value.isoformat() if value else None


def _money(value):
    return str(value) if value is not None else None


class State(db.Model):
    __tablename__ = 'states'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    code = db.Column(db.String(2), unique=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    cities = db.relationship('City', backref='state', lazy=True)


class City(db.Model):
    __tablename__ = 'cities'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    state_id = db.Column(db.Integer, db.ForeignKey('states.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    contact_phone = db.Column(db.String(20))
    phone_verified = db.Column(db.Boolean, default=False)
    email_verified = db.Column(db.Boolean, default=False)
    confirmation_code = db.Column(db.String(6))
    password_reset_token = db.Column(db.String(255))
    password_reset_expires = db.Column(db.DateTime)
    role = db.Column(db.String(20), default='customer')  # customer, driver, restaurant_owner, admin
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    addresses = db.relationship('Address', backref='user', lazy=True)
    orders = db.relationship('Order', backref='user', lazy=True)
    driver = db.relationship('Driver', backref='user', lazy=True, uselist=False)

    def to_dict(self):
        """Public representation; credentials and one-time codes are left out."""
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'contact_phone': self.contact_phone,
            'phone_verified': bool(self.phone_verified),
            'email_verified': bool(self.email_verified),
            'role': self.role,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class Address(db.Model):
    __tablename__ = 'addresses'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    street_address_1 = db.Column(db.String(255), nullable=False)
    street_address_2 = db.Column(db.String(255))
    city_id = db.Column(db.Integer, db.ForeignKey('cities.id'), nullable=False)
    zip_code = db.Column(db.String(10), nullable=False)
    delivery_instructions = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    city = db.relationship('City', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'street_address_1': self.street_address_1,
            'street_address_2': self.street_address_2,
            'city_id': self.city_id,
            'city': self.city.name if self.city else None,
            'zip_code': self.zip_code,
            'delivery_instructions': self.delivery_instructions,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class Restaurant(db.Model):
    __tablename__ = 'restaurants'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    street_address = db.Column(db.String(255), nullable=False)
    zip_code = db.Column(db.String(10), nullable=False)
    city_id = db.Column(db.Integer, db.ForeignKey('cities.id'), nullable=False)
    phone = db.Column(db.String(20))
    email = db.Column(db.String(255))
    description = db.Column(db.Text)
    image_url = db.Column(db.String(500))
    active = db.Column(db.Boolean, default=True)  # soft delete marker
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    city = db.relationship('City', lazy=True)
    menu_items = db.relationship('MenuItem', backref='restaurant', lazy=True)
    orders = db.relationship('Order', backref='restaurant', lazy=True)
    owners = db.relationship('RestaurantOwner', backref='restaurant', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'street_address': self.street_address,
            'zip_code': self.zip_code,
            'city_id': self.city_id,
            'city': self.city.name if self.city else None,
            'state': self.city.state.name if self.city and self.city.state else None,
            'phone': self.phone,
            'email': self.email,
            'description': self.description,
            'image_url': self.image_url,
            'active': bool(self.active),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class RestaurantOwner(db.Model):
    __tablename__ = 'restaurant_owners'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    restaurant_id = db.Column(db.Integer, db.ForeignKey('restaurants.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class Category(db.Model):
    __tablename__ = 'categories'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {'id': self.id, 'name': self.name}


class MenuItem(db.Model):
    __tablename__ = 'menu_items'

    id = db.Column(db.Integer, primary_key=True)
    restaurant_id = db.Column(db.Integer, db.ForeignKey('restaurants.id'), nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text)
    ingredients = db.Column(db.Text)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    image_url = db.Column(db.String(500))
    active = db.Column(db.Boolean, default=True)  # soft delete marker
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    category = db.relationship('Category', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'restaurant_id': self.restaurant_id,
            'category_id': self.category_id,
            'category': self.category.name if self.category else None,
            'restaurant': self.restaurant.name if self.restaurant else None,
            'name': self.name,
            'description': self.description,
            'ingredients': self.ingredients,
            'price': _money(self.price),
            'image_url': self.image_url,
            'active': bool(self.active),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class Driver(db.Model):
    __tablename__ = 'drivers'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    car_make = db.Column(db.String(50))
    car_model = db.Column(db.String(50))
    car_year = db.Column(db.Integer)
    car_color = db.Column(db.String(30))
    car_plate_number = db.Column(db.String(20))
    online = db.Column(db.Boolean, default=False)
    delivering = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'car_make': self.car_make,
            'car_model': self.car_model,
            'car_year': self.car_year,
            'car_color': self.car_color,
            'car_plate_number': self.car_plate_number,
            'online': bool(self.online),
            'delivering': bool(self.delivering),
            'updated_at': _iso(self.updated_at)
        }


class StatusCatalog(db.Model):
    __tablename__ = 'status_catalog'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False)
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class Order(db.Model):
    __tablename__ = 'orders'

    id = db.Column(db.Integer, primary_key=True)
    restaurant_id = db.Column(db.Integer, db.ForeignKey('restaurants.id'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    driver_id = db.Column(db.Integer, db.ForeignKey('drivers.id'))
    delivery_address_id = db.Column(db.Integer, db.ForeignKey('addresses.id'), nullable=False)
    estimated_delivery_time = db.Column(db.DateTime)
    actual_delivery_time = db.Column(db.DateTime)
    price = db.Column(db.Numeric(10, 2), nullable=False)
    discount = db.Column(db.Numeric(10, 2), default=0)
    final_price = db.Column(db.Numeric(10, 2), nullable=False)
    comment = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    items = db.relationship('OrderMenuItem', backref='order', lazy=True)
    status_history = db.relationship('OrderStatus', backref='order', lazy=True)
    driver = db.relationship('Driver', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'restaurant_id': self.restaurant_id,
            'user_id': self.user_id,
            'driver_id': self.driver_id,
            'delivery_address_id': self.delivery_address_id,
            'estimated_delivery_time': _iso(self.estimated_delivery_time),
            'actual_delivery_time': _iso(self.actual_delivery_time),
            'price': _money(self.price),
            'discount': _money(self.discount),
            'final_price': _money(self.final_price),
            'comment': self.comment,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }

    def to_summary_dict(self):
        data = self.to_dict()
        data.update({
            'restaurant': self.restaurant.name if self.restaurant else None,
            'customer_name': self.user.name if self.user else None,
            'customer_email': self.user.email if self.user else None
        })
        return data


class OrderMenuItem(db.Model):
    __tablename__ = 'order_menu_items'

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey('orders.id'), nullable=False)
    menu_item_id = db.Column(db.Integer, db.ForeignKey('menu_items.id'), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    item_price = db.Column(db.Numeric(10, 2), nullable=False)  # unit price captured at order time
    comment = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    menu_item = db.relationship('MenuItem', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'menu_item_id': self.menu_item_id,
            'quantity': self.quantity,
            'item_price': _money(self.item_price),
            'comment': self.comment,
            'menu_item_name': self.menu_item.name if self.menu_item else None,
            'menu_item_description': self.menu_item.description if self.menu_item else None
        }


class OrderStatus(db.Model):
    """One row of an order's append-only status history."""
    __tablename__ = 'order_status'

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(db.Integer, db.ForeignKey('orders.id'), nullable=False)
    status_catalog_id = db.Column(db.Integer, db.ForeignKey('status_catalog.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    status = db.relationship('StatusCatalog', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'status_name': self.status.name if self.status else None,
            'status_description': self.status.description if self.status else None,
            'created_at': _iso(self.created_at)
        }


class Comment(db.Model):
    __tablename__ = 'comments'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    order_id = db.Column(db.Integer, db.ForeignKey('orders.id'), nullable=False)
    comment_text = db.Column(db.Text, nullable=False)
    is_complaint = db.Column(db.Boolean, default=False)
    is_praise = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'order_id': self.order_id,
            'comment_text': self.comment_text,
            'is_complaint': bool(self.is_complaint),
            'is_praise': bool(self.is_praise),
            'created_at': _iso(self.created_at)
        }
