from flask import Blueprint, current_app, request

from restaurant_api.routes.helpers import (
    api_response, current_caller, error_response, parse_body, parse_pagination, role_required,
)
from restaurant_api.schemas import MenuItemCreate, MenuItemUpdate

menu_items_bp = Blueprint('menu_items', __name__)

@menu_items_bp.route('/api/menu-items', methods=['GET'])
def get_menu_items():
    """List active menu items, optionally for one restaurant"""
    page, limit = parse_pagination()
    restaurant_id = request.args.get('restaurant_id', type=int)

    result = current_app.menu_item_service.get_menu_items(restaurant_id, page, limit)
    return api_response(result['data'], pagination=result['pagination'])

@menu_items_bp.route('/api/menu-items/categories', methods=['GET'])
def get_categories():
    categories = current_app.menu_item_service.get_categories()
    return api_response([category.to_dict() for category in categories])

@menu_items_bp.route('/api/menu-items/category/<int:category_id>', methods=['GET'])
def get_menu_items_by_category(category_id):
    restaurant_id = request.args.get('restaurant_id', type=int)
    menu_items = current_app.menu_item_service.get_menu_items_by_category(category_id, restaurant_id)
    return api_response([item.to_dict() for item in menu_items])

@menu_items_bp.route('/api/menu-items/<int:menu_item_id>', methods=['GET'])
def get_menu_item(menu_item_id):
    menu_item = current_app.menu_item_service.get_menu_item_by_id(menu_item_id)
    if not menu_item:
        return error_response('Menu item not found', 404)
    return api_response(menu_item.to_dict())

@menu_items_bp.route('/api/menu-items', methods=['POST'])
@role_required('restaurant_owner', 'admin')
def create_menu_item():
    user_id, _ = current_caller()
    payload = parse_body(MenuItemCreate)

    menu_item = current_app.menu_item_service.create_menu_item(payload.model_dump(), user_id)
    return api_response(menu_item.to_dict(), message='Menu item created successfully', status=201)

@menu_items_bp.route('/api/menu-items/<int:menu_item_id>', methods=['PUT'])
@role_required('restaurant_owner', 'admin')
def update_menu_item(menu_item_id):
    user_id, _ = current_caller()
    payload = parse_body(MenuItemUpdate)

    menu_item = current_app.menu_item_service.update_menu_item(
        menu_item_id, payload.model_dump(exclude_unset=True), user_id
    )
    if not menu_item:
        return error_response('Menu item not found', 404)

    return api_response(menu_item.to_dict(), message='Menu item updated successfully')

@menu_items_bp.route('/api/menu-items/<int:menu_item_id>', methods=['DELETE'])
@role_required('restaurant_owner', 'admin')
def delete_menu_item(menu_item_id):
    user_id, _ = current_caller()

    if not current_app.menu_item_service.delete_menu_item(menu_item_id, user_id):
        return error_response('Menu item not found', 404)

    return api_response(message='Menu item deleted successfully')
