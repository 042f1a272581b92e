from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from restaurant_api.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from restaurant_api.models.models import Driver, Order, OrderMenuItem, OrderStatus


def place(app, shop, customer, lines=None):
    lines = lines or [
        {"menu_item_id": shop["pizza"].id, "quantity": 2},
        {"menu_item_id": shop["soda"].id, "quantity": 1},
    ]
    return app.order_service.create_order(
        buyer_id=customer["user"].id,
        restaurant_id=shop["restaurant"].id,
        delivery_address_id=customer["address"].id,
        items=lines,
    )


@pytest.fixture
def online_driver(app, make_user):
    user, token = make_user(role="driver")
    app.driver_service.update_driver_profile(user.id, {"online": True})
    return user, token


def test_order_total_is_exact_decimal(app, shop, customer):
    order = place(app, shop, customer)

    assert order.price == Decimal("30.97")
    assert order.final_price == Decimal("30.97")
    assert order.discount == Decimal("0.00")
    assert order.to_dict()["final_price"] == "30.97"


def test_order_snapshots_prices_and_starts_pending(app, session, shop, customer):
    order = place(app, shop, customer)

    lines = session.query(OrderMenuItem).filter_by(order_id=order.id).order_by(OrderMenuItem.id).all()
    assert [(line.menu_item_id, line.quantity, line.item_price) for line in lines] == [
        (shop["pizza"].id, 2, Decimal("12.99")),
        (shop["soda"].id, 1, Decimal("4.99")),
    ]

    app.menu_item_service.update_menu_item(shop["pizza"].id, {"price": Decimal("20.00")}, shop["owner"].id)
    details = app.order_service.get_order_by_id(order.id)
    assert details["items"][0]["item_price"] == "12.99"
    assert details["current_status"] == "Pending"


def test_order_eta_is_45_minutes_out(app, shop, customer):
    before = datetime.utcnow()
    order = place(app, shop, customer)

    assert before + timedelta(minutes=44) < order.estimated_delivery_time < datetime.utcnow() + timedelta(minutes=46)


def test_unknown_menu_item_rolls_back(app, session, shop, customer):
    with pytest.raises(NotFoundError) as exc:
        place(app, shop, customer, [
            {"menu_item_id": shop["pizza"].id, "quantity": 1},
            {"menu_item_id": 999, "quantity": 1},
        ])

    assert "999" in exc.value.message
    assert session.query(Order).count() == 0
    assert session.query(OrderMenuItem).count() == 0
    assert session.query(OrderStatus).count() == 0


def test_inactive_menu_item_named_in_error(app, shop, customer):
    app.menu_item_service.delete_menu_item(shop["soda"].id, shop["owner"].id)

    with pytest.raises(ValidationError) as exc:
        place(app, shop, customer)

    assert "Soda" in exc.value.message


def test_delivery_address_must_belong_to_buyer(app, shop, customer, make_user, make_address):
    other, _ = make_user()
    foreign = make_address(other)

    with pytest.raises(ForbiddenError):
        app.order_service.create_order(
            buyer_id=customer["user"].id,
            restaurant_id=shop["restaurant"].id,
            delivery_address_id=foreign.id,
            items=[{"menu_item_id": shop["pizza"].id, "quantity": 1}],
        )


def test_status_history_newest_first(app, shop, customer):
    order = place(app, shop, customer)

    app.order_service.update_order_status(order.id, "Confirmed")
    app.order_service.update_order_status(order.id, "Preparing")

    details = app.order_service.get_order_by_id(order.id)
    assert [row["status_name"] for row in details["status_history"]] == ["Preparing", "Confirmed", "Pending"]
    assert details["current_status"] == "Preparing"


def test_transitions_are_unguarded(app, shop, customer):
    order = place(app, shop, customer)

    app.order_service.update_order_status(order.id, "Delivered")
    app.order_service.update_order_status(order.id, "Pending")

    assert app.order_service.get_order_by_id(order.id)["current_status"] == "Pending"


def test_delivered_stamps_delivery_time(app, shop, customer):
    order = place(app, shop, customer)
    assert order.actual_delivery_time is None

    app.order_service.update_order_status(order.id, "Delivered")

    assert order.actual_delivery_time is not None


def test_unknown_status(app, session, shop, customer):
    order = place(app, shop, customer)

    with pytest.raises(NotFoundError) as exc:
        app.order_service.update_order_status(order.id, "Teleported")

    assert "Teleported" in exc.value.message
    assert session.query(OrderStatus).filter_by(order_id=order.id).count() == 1


def test_customer_cannot_view_or_cancel_foreign_order(app, shop, customer, make_user):
    order = place(app, shop, customer)
    stranger, _ = make_user()

    with pytest.raises(ForbiddenError):
        app.order_service.get_order_by_id(order.id, stranger.id, "customer")
    with pytest.raises(ForbiddenError):
        app.order_service.cancel_order(order.id, stranger.id, "customer")


def test_missing_order(app, customer):
    assert app.order_service.get_order_by_id(999) is None
    assert app.order_service.cancel_order(999, customer["user"].id, "customer") is False


def test_listing_filters_by_caller(app, shop, customer, make_user, make_address):
    other, _ = make_user()
    other_customer = {"user": other, "address": make_address(other)}
    first = place(app, shop, customer)
    second = place(app, shop, other_customer)

    mine = app.order_service.get_orders(customer["user"].id, "customer")
    assert [row["id"] for row in mine["data"]] == [first.id]
    assert mine["data"][0]["customer_email"] == customer["user"].email
    assert mine["data"][0]["restaurant"] == shop["restaurant"].name

    everything = app.order_service.get_orders()
    assert [row["id"] for row in everything["data"]] == [second.id, first.id]
    assert app.order_service.get_orders(999, "admin")["pagination"]["total"] == 2


def test_assign_driver_claims_driver(app, session, shop, customer, online_driver):
    driver_user, _ = online_driver
    order = place(app, shop, customer)

    app.order_service.assign_driver(order.id, driver_user.id)

    driver = session.query(Driver).filter_by(user_id=driver_user.id).one()
    assert driver.delivering is True
    assert order.driver_id == driver.id
    assert app.order_service.get_order_by_id(order.id)["current_status"] == "Picked Up"


def test_busy_or_offline_driver_cannot_be_assigned(app, shop, customer, online_driver, make_user):
    driver_user, _ = online_driver
    first = place(app, shop, customer)
    second = place(app, shop, customer)
    app.order_service.assign_driver(first.id, driver_user.id)

    with pytest.raises(ConflictError):
        app.order_service.assign_driver(second.id, driver_user.id)

    offline, _ = make_user(role="driver")
    with pytest.raises(ConflictError):
        app.order_service.assign_driver(second.id, offline.id)

    assert app.order_service.get_order_by_id(second.id)["current_status"] == "Pending"


def test_assign_unknown_driver_or_order(app, shop, customer, online_driver):
    order = place(app, shop, customer)

    with pytest.raises(NotFoundError):
        app.order_service.assign_driver(order.id, 999)
    with pytest.raises(NotFoundError):
        app.order_service.assign_driver(999, online_driver[0].id)


def test_driver_sees_only_assigned_orders(app, shop, customer, online_driver):
    driver_user, _ = online_driver
    assigned = place(app, shop, customer)
    unassigned = place(app, shop, customer)
    app.order_service.assign_driver(assigned.id, driver_user.id)

    listing = app.order_service.get_orders(driver_user.id, "driver")
    assert [row["id"] for row in listing["data"]] == [assigned.id]

    assert app.order_service.get_order_by_id(assigned.id, driver_user.id, "driver")["id"] == assigned.id
    with pytest.raises(ForbiddenError):
        app.order_service.get_order_by_id(unassigned.id, driver_user.id, "driver")


def test_cancel_releases_driver(app, session, shop, customer, online_driver):
    driver_user, _ = online_driver
    order = place(app, shop, customer)
    app.order_service.assign_driver(order.id, driver_user.id)

    assert app.order_service.cancel_order(order.id, customer["user"].id, "customer") is True

    driver = session.query(Driver).filter_by(user_id=driver_user.id).one()
    assert driver.delivering is False
    assert driver.online is True
    assert app.order_service.get_order_by_id(order.id)["current_status"] == "Cancelled"


def test_cancel_without_driver_leaves_drivers(app, session, shop, customer, online_driver):
    order = place(app, shop, customer)

    assert app.order_service.cancel_order(order.id, customer["user"].id, "customer") is True
    assert session.query(Driver).filter_by(delivering=True).count() == 0


def test_driver_cannot_cancel_unassigned_order(app, shop, customer, online_driver):
    order = place(app, shop, customer)

    with pytest.raises(ForbiddenError):
        app.order_service.cancel_order(order.id, online_driver[0].id, "driver")


def test_comments(app, shop, customer, make_user):
    order = place(app, shop, customer)
    stranger, _ = make_user()

    comment = app.order_service.add_comment(order.id, customer["user"].id, "Great pizza", is_praise=True)
    assert comment.is_praise is True

    with pytest.raises(ForbiddenError):
        app.order_service.add_comment(order.id, stranger.id, "Not mine")
    with pytest.raises(ForbiddenError):
        app.order_service.list_comments(order.id, stranger.id, "customer")

    comments = app.order_service.list_comments(order.id, customer["user"].id, "customer")
    assert [c.comment_text for c in comments] == ["Great pizza"]
