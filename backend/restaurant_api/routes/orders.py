from flask import Blueprint, current_app
from flask_jwt_extended import jwt_required

from restaurant_api.routes.helpers import (
    api_response, current_caller, error_response, parse_body, parse_pagination, role_required,
)
from restaurant_api.schemas import CommentCreate, DriverAssignment, OrderCreate, OrderStatusUpdate

orders_bp = Blueprint('orders', __name__)

@orders_bp.route('/api/orders', methods=['POST'])
@role_required('customer', 'admin')
def create_order():
    """Place an order for the calling user"""
    user_id, _ = current_caller()
    payload = parse_body(OrderCreate)

    order = current_app.order_service.create_order(
        buyer_id=user_id,
        restaurant_id=payload.restaurant_id,
        delivery_address_id=payload.delivery_address_id,
        items=[item.model_dump() for item in payload.items],
        comment=payload.comment
    )
    details = current_app.order_service.get_order_by_id(order.id)

    # Best-effort confirmation
    current_app.notification_service.send_order_confirmation_email(order.user.email, details)

    return api_response(details, message='Order created successfully', status=201)

@orders_bp.route('/api/orders', methods=['GET'])
@jwt_required(optional=True)
def get_orders():
    """List orders visible to the caller"""
    user_id, role = current_caller()
    page, limit = parse_pagination()

    result = current_app.order_service.get_orders(user_id, role, page, limit)
    return api_response(result['data'], pagination=result['pagination'])

@orders_bp.route('/api/orders/<int:order_id>', methods=['GET'])
@jwt_required(optional=True)
def get_order(order_id):
    user_id, role = current_caller()

    order = current_app.order_service.get_order_by_id(order_id, user_id, role)
    if not order:
        return error_response('Order not found', 404)

    return api_response(order)

@orders_bp.route('/api/orders/<int:order_id>/status', methods=['PUT'])
@role_required('restaurant_owner', 'admin')
def update_order_status(order_id):
    user_id, _ = current_caller()
    payload = parse_body(OrderStatusUpdate)

    current_app.order_service.update_order_status(order_id, payload.status, user_id)
    return api_response(message='Order status updated successfully')

@orders_bp.route('/api/orders/<int:order_id>/assign-driver', methods=['PUT'])
@role_required('restaurant_owner', 'admin')
def assign_driver(order_id):
    payload = parse_body(DriverAssignment)

    current_app.order_service.assign_driver(order_id, payload.driver_id)
    return api_response(message='Driver assigned successfully')

@orders_bp.route('/api/orders/<int:order_id>/cancel', methods=['PUT'])
@role_required('customer', 'admin')
def cancel_order(order_id):
    user_id, role = current_caller()

    if not current_app.order_service.cancel_order(order_id, user_id, role):
        return error_response('Order not found', 404)

    return api_response(message='Order cancelled successfully')

@orders_bp.route('/api/orders/<int:order_id>/comments', methods=['POST'])
@jwt_required()
def add_comment(order_id):
    user_id, _ = current_caller()
    payload = parse_body(CommentCreate)

    comment = current_app.order_service.add_comment(
        order_id,
        user_id,
        payload.comment_text,
        is_complaint=payload.is_complaint,
        is_praise=payload.is_praise
    )
    return api_response(comment.to_dict(), message='Comment added successfully', status=201)

@orders_bp.route('/api/orders/<int:order_id>/comments', methods=['GET'])
@jwt_required(optional=True)
def get_comments(order_id):
    user_id, role = current_caller()
    comments = current_app.order_service.list_comments(order_id, user_id, role)
    return api_response([comment.to_dict() for comment in comments])
