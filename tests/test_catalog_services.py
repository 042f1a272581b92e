from decimal import Decimal

import pytest

from restaurant_api.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from restaurant_api.models.models import Category, RestaurantOwner


def test_create_restaurant_records_owner(app, session, make_user, make_restaurant):
    owner, _ = make_user(role="restaurant_owner")
    restaurant = make_restaurant(owner)

    assert restaurant.active is True
    assert session.query(RestaurantOwner).filter_by(
        user_id=owner.id, restaurant_id=restaurant.id
    ).count() == 1
    assert restaurant.to_dict()["city"] == "Los Angeles"
    assert restaurant.to_dict()["state"] == "California"


def test_create_restaurant_unknown_city(app, make_user):
    owner, _ = make_user(role="restaurant_owner")

    with pytest.raises(NotFoundError):
        app.restaurant_service.create_restaurant(
            {"name": "Nowhere", "street_address": "1 Nowhere Road", "zip_code": "00000", "city_id": 999},
            owner.id,
        )


def test_only_owners_mutate_restaurants(app, make_user, make_restaurant):
    owner, _ = make_user(role="restaurant_owner")
    intruder, _ = make_user(role="restaurant_owner")
    restaurant = make_restaurant(owner)

    with pytest.raises(ForbiddenError):
        app.restaurant_service.update_restaurant(restaurant.id, {"name": "Taken"}, intruder.id)
    with pytest.raises(ForbiddenError):
        app.restaurant_service.delete_restaurant(restaurant.id, intruder.id)

    updated = app.restaurant_service.update_restaurant(restaurant.id, {"name": "Luigi's Trattoria"}, owner.id)
    assert updated.name == "Luigi's Trattoria"


def test_update_missing_restaurant(app, make_user):
    owner, _ = make_user(role="restaurant_owner")
    assert app.restaurant_service.update_restaurant(999, {"name": "Ghost"}, owner.id) is None
    assert app.restaurant_service.delete_restaurant(999, owner.id) is False


def test_soft_deleted_restaurant_leaves_listing(app, make_user, make_restaurant):
    owner, _ = make_user(role="restaurant_owner")
    kept = make_restaurant(owner, name="Alpha Grill")
    dropped = make_restaurant(owner, name="Beta Bistro")

    assert app.restaurant_service.delete_restaurant(dropped.id, owner.id) is True

    listing = app.restaurant_service.get_restaurants()
    assert [row["id"] for row in listing["data"]] == [kept.id]
    # still resolvable for historical orders
    assert app.restaurant_service.get_restaurant_by_id(dropped.id).active is False


def test_restaurant_pagination(app, make_user, make_restaurant):
    owner, _ = make_user(role="restaurant_owner")
    make_restaurant(owner, name="Beta Bistro")
    make_restaurant(owner, name="Alpha Grill")

    page = app.restaurant_service.get_restaurants(page=2, limit=1)

    assert [row["name"] for row in page["data"]] == ["Beta Bistro"]
    assert page["pagination"] == {"page": 2, "limit": 1, "total": 2, "totalPages": 2}


def test_restaurants_by_owner(app, make_user, make_restaurant):
    owner, _ = make_user(role="restaurant_owner")
    other, _ = make_user(role="restaurant_owner")
    mine = make_restaurant(owner, name="Mine")
    make_restaurant(other, name="Theirs")

    assert [r.id for r in app.restaurant_service.get_restaurants_by_owner(owner.id)] == [mine.id]


def test_assign_restaurant_owner(app, make_user, make_restaurant):
    owner, _ = make_user(role="restaurant_owner")
    partner, _ = make_user(role="restaurant_owner")
    customer, _ = make_user(role="customer")
    restaurant = make_restaurant(owner)

    app.restaurant_service.assign_restaurant_owner(partner.id, restaurant.id)
    updated = app.restaurant_service.update_restaurant(restaurant.id, {"phone": "+1 555 999 0000"}, partner.id)
    assert updated.phone == "+1 555 999 0000"

    with pytest.raises(ConflictError):
        app.restaurant_service.assign_restaurant_owner(partner.id, restaurant.id)
    with pytest.raises(ValidationError):
        app.restaurant_service.assign_restaurant_owner(customer.id, restaurant.id)
    with pytest.raises(NotFoundError):
        app.restaurant_service.assign_restaurant_owner(partner.id, 999)


def test_menu_item_price_is_exact(app, shop):
    pizza = app.menu_item_service.get_menu_item_by_id(shop["pizza"].id)

    assert pizza.price == Decimal("12.99")
    assert pizza.to_dict()["price"] == "12.99"


def test_menu_item_requires_ownership(app, make_user, shop, category):
    intruder, _ = make_user(role="restaurant_owner")

    with pytest.raises(ForbiddenError):
        app.menu_item_service.create_menu_item(
            {"restaurant_id": shop["restaurant"].id, "category_id": category.id,
             "name": "Stolen", "price": Decimal("1.00")},
            intruder.id,
        )
    with pytest.raises(ForbiddenError):
        app.menu_item_service.update_menu_item(shop["pizza"].id, {"price": Decimal("0.50")}, intruder.id)
    with pytest.raises(ForbiddenError):
        app.menu_item_service.delete_menu_item(shop["pizza"].id, intruder.id)


def test_menu_item_unknown_category(app, shop):
    with pytest.raises(NotFoundError):
        app.menu_item_service.create_menu_item(
            {"restaurant_id": shop["restaurant"].id, "category_id": 999,
             "name": "Mystery", "price": Decimal("3.00")},
            shop["owner"].id,
        )


def test_menu_item_unknown_restaurant(app, shop, category):
    with pytest.raises(NotFoundError) as exc:
        app.menu_item_service.create_menu_item(
            {"restaurant_id": 999, "category_id": category.id,
             "name": "Orphan", "price": Decimal("3.00")},
            shop["owner"].id,
        )

    assert "999" in exc.value.message


def test_update_menu_item_price(app, shop):
    updated = app.menu_item_service.update_menu_item(shop["pizza"].id, {"price": Decimal("13.49")}, shop["owner"].id)
    assert updated.price == Decimal("13.49")


def test_menu_listing_orders_by_category_then_name(app, session, shop, make_menu_item):
    desserts = session.query(Category).filter_by(name="Desserts").one()
    make_menu_item(shop["restaurant"], shop["owner"], name="Tiramisu", price="6.50", category_id=desserts.id)

    listing = app.menu_item_service.get_menu_items(restaurant_id=shop["restaurant"].id)

    assert [row["name"] for row in listing["data"]] == ["Tiramisu", "Margherita", "Soda"]
    assert listing["pagination"]["total"] == 3


def test_soft_deleted_menu_item(app, shop):
    assert app.menu_item_service.delete_menu_item(shop["soda"].id, shop["owner"].id) is True

    listing = app.menu_item_service.get_menu_items()
    assert [row["name"] for row in listing["data"]] == ["Margherita"]
    assert [item.name for item in app.restaurant_service.get_restaurant_menu(shop["restaurant"].id)] == ["Margherita"]
    assert app.menu_item_service.get_menu_item_by_id(shop["soda"].id).active is False


def test_items_of_inactive_restaurant_hidden(app, shop):
    app.restaurant_service.delete_restaurant(shop["restaurant"].id, shop["owner"].id)

    assert app.menu_item_service.get_menu_items()["data"] == []


def test_menu_items_by_category(app, session, make_user, make_restaurant, make_menu_item, category):
    owner, _ = make_user(role="restaurant_owner")
    first = make_restaurant(owner, name="First")
    second = make_restaurant(owner, name="Second")
    make_menu_item(first, owner, name="Pepperoni")
    make_menu_item(second, owner, name="Hawaiian")
    soups = session.query(Category).filter_by(name="Soups").one()
    make_menu_item(first, owner, name="Minestrone", category_id=soups.id)

    all_pizza = app.menu_item_service.get_menu_items_by_category(category.id)
    assert [item.name for item in all_pizza] == ["Hawaiian", "Pepperoni"]

    scoped = app.menu_item_service.get_menu_items_by_category(category.id, restaurant_id=first.id)
    assert [item.name for item in scoped] == ["Pepperoni"]


def test_categories_are_seeded(app):
    names = [category.name for category in app.menu_item_service.get_categories()]
    assert names == sorted(names)
    assert "Pizza" in names and len(names) == 10
