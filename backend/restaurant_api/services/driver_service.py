import logging
from datetime import datetime
from typing import Any, Dict

from restaurant_api.errors import NotFoundError
from restaurant_api.models.models import Driver

logger = logging.getLogger(__name__)

# delivering is owned by order assignment and cancellation
DRIVER_FIELDS = {'car_make', 'car_model', 'car_year', 'car_color', 'car_plate_number', 'online'}


class DriverService:
    def __init__(self, session):
        self.session = session

    def get_driver_profile(self, user_id: int) -> Driver:
        driver = self.session.query(Driver).filter_by(user_id=user_id).first()
        if driver is None:
            raise NotFoundError('Driver profile not found')
        return driver

    def update_driver_profile(self, user_id: int, update_data: Dict[str, Any]) -> Driver:
        driver = self.get_driver_profile(user_id)

        try:
            for field, value in update_data.items():
                if field in DRIVER_FIELDS:
                    setattr(driver, field, value)
            driver.updated_at = datetime.utcnow()
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        if 'online' in update_data:
            logger.info(f"Driver {driver.id} is now {'online' if driver.online else 'offline'}")
        return driver
