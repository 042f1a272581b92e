"""
Shared pieces of the HTTP boundary: response envelope, payload parsing and
role checks.
"""
from functools import wraps

from flask import jsonify, request
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request

from restaurant_api.schemas import PaginationQuery

def api_response(data=None, message=None, status=200, **extra):
    body = {'success': True}
    if data is not None:
        body['data'] = data
    if message:
        body['message'] = message
    body.update(extra)
    return jsonify(body), status

def error_response(error, status):
    return jsonify({'success': False, 'error': error}), status

def parse_body(schema):
    """Validate the JSON body; a bad shape surfaces as a 400 through the app handler."""
    payload = request.get_json(silent=True) or {}
    return schema.model_validate(payload)

def parse_pagination():
    query = PaginationQuery.model_validate(request.args.to_dict())
    return query.page, query.limit

def current_caller():
    """(user id, role) for the verified token, or (None, None) when anonymous."""
    identity = get_jwt_identity()
    if identity is None:
        return None, None
    return int(identity), get_jwt().get('role')

def role_required(*roles):
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if get_jwt().get('role') not in roles:
                return error_response('Insufficient permissions', 403)
            return fn(*args, **kwargs)
        return wrapper
    return decorator
