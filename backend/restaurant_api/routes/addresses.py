from flask import Blueprint, current_app
from flask_jwt_extended import jwt_required

from restaurant_api.routes.helpers import api_response, current_caller, error_response, parse_body
from restaurant_api.schemas import AddressCreate, AddressUpdate

addresses_bp = Blueprint('addresses', __name__)

@addresses_bp.route('/api/addresses', methods=['GET'])
@jwt_required()
def list_addresses():
    user_id, _ = current_caller()
    addresses = current_app.address_service.list_addresses(user_id)
    return api_response([address.to_dict() for address in addresses])

@addresses_bp.route('/api/addresses', methods=['POST'])
@jwt_required()
def create_address():
    user_id, _ = current_caller()
    payload = parse_body(AddressCreate)

    address = current_app.address_service.create_address(user_id, payload.model_dump())
    return api_response(address.to_dict(), message='Address created successfully', status=201)

@addresses_bp.route('/api/addresses/<int:address_id>', methods=['GET'])
@jwt_required()
def get_address(address_id):
    user_id, _ = current_caller()

    address = current_app.address_service.get_address(address_id, user_id)
    if not address:
        return error_response('Address not found', 404)

    return api_response(address.to_dict())

@addresses_bp.route('/api/addresses/<int:address_id>', methods=['PUT'])
@jwt_required()
def update_address(address_id):
    user_id, _ = current_caller()
    payload = parse_body(AddressUpdate)

    address = current_app.address_service.update_address(
        address_id, user_id, payload.model_dump(exclude_unset=True)
    )
    if not address:
        return error_response('Address not found', 404)

    return api_response(address.to_dict(), message='Address updated successfully')
