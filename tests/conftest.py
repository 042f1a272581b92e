from decimal import Decimal

import pytest

from restaurant_api import create_app, db
from restaurant_api.config import TestingConfig
from restaurant_api.models.models import Category, City
from restaurant_api.security import issue_token
from restaurant_api.seed import seed_reference_data


PASSWORD = "Secret123"


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        seed_reference_data(db.session)
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session(app):
    return db.session


@pytest.fixture
def sent_emails(app, monkeypatch):
    sent = []

    def fake_send(to_email, subject, body):
        sent.append({"to": to_email, "subject": subject, "body": body})
        return True

    monkeypatch.setattr(app.notification_service, "send_email", fake_send)
    return sent


@pytest.fixture
def city(session):
    return session.query(City).order_by(City.id).first()


@pytest.fixture
def category(session):
    return session.query(Category).filter_by(name="Pizza").one()


@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make(role="customer", email=None, name="Test User"):
        counter["n"] += 1
        email = email or f"{role}{counter['n']}@example.com"
        user, token = app.account_service.register(name, email, PASSWORD, role=role)
        return user, token

    return _make


@pytest.fixture
def make_admin(app, session, make_user):
    def _make():
        # admin is not a self-service role
        user, _ = make_user()
        user.role = "admin"
        session.commit()
        return user, issue_token(user)

    return _make


@pytest.fixture
def make_restaurant(app, city):
    def _make(owner, name="Luigi's"):
        return app.restaurant_service.create_restaurant(
            {
                "name": name,
                "street_address": "100 Market Street",
                "zip_code": "94105",
                "city_id": city.id,
                "phone": "+1 555 010 2000",
            },
            owner.id,
        )

    return _make


@pytest.fixture
def make_menu_item(app, category):
    def _make(restaurant, owner, name="Margherita", price="12.99", category_id=None):
        return app.menu_item_service.create_menu_item(
            {
                "restaurant_id": restaurant.id,
                "category_id": category_id or category.id,
                "name": name,
                "price": Decimal(price),
            },
            owner.id,
        )

    return _make


@pytest.fixture
def make_address(app, city):
    def _make(user):
        return app.address_service.create_address(
            user.id,
            {
                "street_address_1": "42 Elm Street",
                "city_id": city.id,
                "zip_code": "94110",
                "delivery_instructions": "Ring twice",
            },
        )

    return _make


@pytest.fixture
def shop(make_user, make_restaurant, make_menu_item):
    """An owner with one restaurant serving a pizza (12.99) and a soda (4.99)."""
    owner, owner_token = make_user(role="restaurant_owner")
    restaurant = make_restaurant(owner)
    pizza = make_menu_item(restaurant, owner, name="Margherita", price="12.99")
    soda = make_menu_item(restaurant, owner, name="Soda", price="4.99")
    return {
        "owner": owner,
        "owner_token": owner_token,
        "restaurant": restaurant,
        "pizza": pizza,
        "soda": soda,
    }


@pytest.fixture
def customer(make_user, make_address):
    user, token = make_user(role="customer")
    address = make_address(user)
    return {"user": user, "token": token, "address": address}
