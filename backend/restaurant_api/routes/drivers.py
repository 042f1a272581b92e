from flask import Blueprint, current_app

from restaurant_api.routes.helpers import api_response, current_caller, parse_body, role_required
from restaurant_api.schemas import DriverUpdate

drivers_bp = Blueprint('drivers', __name__)

@drivers_bp.route('/api/drivers/me', methods=['GET'])
@role_required('driver')
def get_driver_profile():
    user_id, _ = current_caller()
    driver = current_app.driver_service.get_driver_profile(user_id)
    return api_response(driver.to_dict())

@drivers_bp.route('/api/drivers/me', methods=['PUT'])
@role_required('driver')
def update_driver_profile():
    """Update vehicle details or go online/offline"""
    user_id, _ = current_caller()
    payload = parse_body(DriverUpdate)

    driver = current_app.driver_service.update_driver_profile(user_id, payload.model_dump(exclude_unset=True))
    return api_response(driver.to_dict(), message='Driver profile updated successfully')
