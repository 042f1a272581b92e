from flask import Blueprint, current_app

from restaurant_api.routes.helpers import (
    api_response, current_caller, error_response, parse_body, parse_pagination, role_required,
)
from restaurant_api.schemas import OwnerAssignment, RestaurantCreate, RestaurantUpdate

restaurants_bp = Blueprint('restaurants', __name__)

@restaurants_bp.route('/api/restaurants', methods=['GET'])
def get_restaurants():
    """List active restaurants"""
    page, limit = parse_pagination()
    result = current_app.restaurant_service.get_restaurants(page, limit)
    return api_response(result['data'], pagination=result['pagination'])

@restaurants_bp.route('/api/restaurants/owner/my-restaurants', methods=['GET'])
@role_required('restaurant_owner', 'admin')
def get_my_restaurants():
    user_id, _ = current_caller()
    restaurants = current_app.restaurant_service.get_restaurants_by_owner(user_id)
    return api_response([restaurant.to_dict() for restaurant in restaurants])

@restaurants_bp.route('/api/restaurants/<int:restaurant_id>', methods=['GET'])
def get_restaurant(restaurant_id):
    restaurant = current_app.restaurant_service.get_restaurant_by_id(restaurant_id)
    if not restaurant:
        return error_response('Restaurant not found', 404)
    return api_response(restaurant.to_dict())

@restaurants_bp.route('/api/restaurants/<int:restaurant_id>/menu', methods=['GET'])
def get_restaurant_menu(restaurant_id):
    """Active menu of one restaurant, grouped by category order"""
    if not current_app.restaurant_service.get_restaurant_by_id(restaurant_id):
        return error_response('Restaurant not found', 404)

    menu_items = current_app.restaurant_service.get_restaurant_menu(restaurant_id)
    return api_response([item.to_dict() for item in menu_items])

@restaurants_bp.route('/api/restaurants', methods=['POST'])
@role_required('restaurant_owner', 'admin')
def create_restaurant():
    user_id, _ = current_caller()
    payload = parse_body(RestaurantCreate)

    restaurant = current_app.restaurant_service.create_restaurant(payload.model_dump(), user_id)
    current_app.logger.info(f"Restaurant {restaurant.id} created")
    return api_response(restaurant.to_dict(), message='Restaurant created successfully', status=201)

@restaurants_bp.route('/api/restaurants/<int:restaurant_id>', methods=['PUT'])
@role_required('restaurant_owner', 'admin')
def update_restaurant(restaurant_id):
    user_id, _ = current_caller()
    payload = parse_body(RestaurantUpdate)

    restaurant = current_app.restaurant_service.update_restaurant(
        restaurant_id, payload.model_dump(exclude_unset=True), user_id
    )
    if not restaurant:
        return error_response('Restaurant not found', 404)

    return api_response(restaurant.to_dict(), message='Restaurant updated successfully')

@restaurants_bp.route('/api/restaurants/<int:restaurant_id>', methods=['DELETE'])
@role_required('restaurant_owner', 'admin')
def delete_restaurant(restaurant_id):
    user_id, _ = current_caller()

    if not current_app.restaurant_service.delete_restaurant(restaurant_id, user_id):
        return error_response('Restaurant not found', 404)

    return api_response(message='Restaurant deleted successfully')

@restaurants_bp.route('/api/restaurants/<int:restaurant_id>/owners', methods=['POST'])
@role_required('admin')
def assign_owner(restaurant_id):
    payload = parse_body(OwnerAssignment)
    current_app.restaurant_service.assign_restaurant_owner(payload.user_id, restaurant_id)
    return api_response(
        {'user_id': payload.user_id, 'restaurant_id': restaurant_id},
        message='Owner assigned successfully',
        status=201
    )
