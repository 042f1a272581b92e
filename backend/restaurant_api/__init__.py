import logging
from datetime import datetime, timedelta

from flask import Flask, jsonify, request
from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from pydantic import ValidationError as SchemaValidationError
from werkzeug.exceptions import HTTPException

from restaurant_api.config import Config
from restaurant_api.errors import ServiceError

__version__ = '1.0.0'

db = SQLAlchemy()
jwt = JWTManager()
migrate = Migrate()

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    logging.basicConfig(level=app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)

    # Import models to ensure they are registered with SQLAlchemy
    from restaurant_api.models import models

    from restaurant_api.routes import auth, restaurants, menu_items, orders, addresses, drivers
    app.register_blueprint(auth.auth_bp)
    app.register_blueprint(restaurants.restaurants_bp)
    app.register_blueprint(menu_items.menu_items_bp)
    app.register_blueprint(orders.orders_bp)
    app.register_blueprint(addresses.addresses_bp)
    app.register_blueprint(drivers.drivers_bp)

    # Services are built once per application and share the scoped session
    from restaurant_api.services.account_service import AccountService
    from restaurant_api.services.restaurant_service import RestaurantService
    from restaurant_api.services.menu_item_service import MenuItemService
    from restaurant_api.services.order_service import OrderService
    from restaurant_api.services.address_service import AddressService
    from restaurant_api.services.driver_service import DriverService
    from restaurant_api.services.notification_service import NotificationService

    app.account_service = AccountService(
        db.session,
        reset_token_ttl=timedelta(minutes=app.config['PASSWORD_RESET_EXPIRES_MINUTES'])
    )
    app.restaurant_service = RestaurantService(db.session)
    app.menu_item_service = MenuItemService(db.session)
    app.order_service = OrderService(
        db.session,
        estimated_delivery=timedelta(minutes=app.config['ORDER_ESTIMATED_DELIVERY_MINUTES'])
    )
    app.address_service = AddressService(db.session)
    app.driver_service = DriverService(db.session)
    app.notification_service = NotificationService.from_config(app.config)

    register_error_handlers(app)
    register_jwt_callbacks()

    from restaurant_api.seed import register_commands
    register_commands(app)

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint"""
        return jsonify({
            'success': True,
            'message': 'Restaurant Management API is running',
            'timestamp': datetime.utcnow().isoformat(),
            'version': __version__
        })

    return app

def register_error_handlers(app):
    @app.errorhandler(ServiceError)
    def handle_service_error(error):
        return jsonify({'success': False, 'error': error.message}), error.status_code

    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(error):
        details = [
            {'field': '.'.join(str(part) for part in err['loc']), 'message': err['msg']}
            for err in error.errors()
        ]
        return jsonify({'success': False, 'error': 'Validation failed', 'data': details}), 400

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({'success': False, 'error': f'Route {request.path} not found'}), 404

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        if isinstance(error, HTTPException):
            return jsonify({'success': False, 'error': error.description}), error.code

        db.session.rollback()
        app.logger.exception(f"Unhandled error on {request.method} {request.path}: {error}")
        return jsonify({'success': False, 'error': 'Internal server error'}), 500

def register_jwt_callbacks():
    @jwt.unauthorized_loader
    def missing_token(reason):
        return jsonify({'success': False, 'error': 'Access token is required'}), 401

    @jwt.invalid_token_loader
    def invalid_token(reason):
        return jsonify({'success': False, 'error': 'Invalid or expired token'}), 403

    @jwt.expired_token_loader
    def expired_token(jwt_header, jwt_payload):
        return jsonify({'success': False, 'error': 'Invalid or expired token'}), 403
