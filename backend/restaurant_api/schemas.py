"""
Request payload models for the HTTP boundary
"""
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, PositiveInt, field_validator

from restaurant_api.security import is_valid_phone

def _check_phone(value):
    if value is not None and not is_valid_phone(value):
        raise ValueError('Invalid phone number')
    return value

def _reject_null(value):
    # Update fields may be omitted, but NOT NULL columns cannot be cleared
    if value is None:
        raise ValueError('Field cannot be null')
    return value

# Auth

class RegisterRequest(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(min_length=1)
    contact_phone: Optional[str] = None
    role: Optional[Literal['customer', 'driver', 'restaurant_owner']] = None

    @field_validator('contact_phone')
    @classmethod
    def check_phone(cls, value):
        return _check_phone(value)

class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)

class VerifyEmailRequest(BaseModel):
    user_id: PositiveInt
    confirmation_code: str = Field(min_length=6, max_length=6)

class PasswordResetRequest(BaseModel):
    email: EmailStr

class ResetPasswordRequest(BaseModel):
    token: str = Field(min_length=1)
    new_password: str = Field(min_length=1)

class UpdateProfileRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None

    @field_validator('contact_phone')
    @classmethod
    def check_phone(cls, value):
        return _check_phone(value)

    @field_validator('name', 'email')
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)

# Catalog

class RestaurantCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    street_address: str = Field(min_length=5, max_length=255)
    zip_code: str = Field(min_length=5, max_length=10)
    city_id: PositiveInt
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    description: Optional[str] = None
    image_url: Optional[str] = Field(default=None, max_length=500)

class RestaurantUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    street_address: Optional[str] = Field(default=None, min_length=5, max_length=255)
    zip_code: Optional[str] = Field(default=None, min_length=5, max_length=10)
    city_id: Optional[PositiveInt] = None
    phone: Optional[str] = None
    email: Optional[EmailStr] = None
    description: Optional[str] = None
    image_url: Optional[str] = Field(default=None, max_length=500)
    active: Optional[bool] = None

    @field_validator('name', 'street_address', 'zip_code', 'city_id', 'active')
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)

class OwnerAssignment(BaseModel):
    user_id: PositiveInt

class MenuItemCreate(BaseModel):
    restaurant_id: PositiveInt
    category_id: PositiveInt
    name: str = Field(min_length=2, max_length=100)
    description: Optional[str] = None
    ingredients: Optional[str] = None
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = Field(default=None, max_length=500)

class MenuItemUpdate(BaseModel):
    category_id: Optional[PositiveInt] = None
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = None
    ingredients: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, gt=0, max_digits=10, decimal_places=2)
    image_url: Optional[str] = Field(default=None, max_length=500)
    active: Optional[bool] = None

    @field_validator('category_id', 'name', 'price', 'active')
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)

# Orders

class OrderItemRequest(BaseModel):
    menu_item_id: PositiveInt
    quantity: PositiveInt
    comment: Optional[str] = None

class OrderCreate(BaseModel):
    restaurant_id: PositiveInt
    delivery_address_id: PositiveInt
    items: List[OrderItemRequest] = Field(min_length=1)
    comment: Optional[str] = None

class OrderStatusUpdate(BaseModel):
    status: str = Field(min_length=1, max_length=50)

class DriverAssignment(BaseModel):
    driver_id: PositiveInt  # the driver's user id

class CommentCreate(BaseModel):
    comment_text: str = Field(min_length=1, max_length=1000)
    is_complaint: bool = False
    is_praise: bool = False

# Addresses and drivers

class AddressCreate(BaseModel):
    street_address_1: str = Field(min_length=5, max_length=255)
    street_address_2: Optional[str] = Field(default=None, max_length=255)
    city_id: PositiveInt
    zip_code: str = Field(min_length=5, max_length=10)
    delivery_instructions: Optional[str] = None

class AddressUpdate(BaseModel):
    street_address_1: Optional[str] = Field(default=None, min_length=5, max_length=255)
    street_address_2: Optional[str] = Field(default=None, max_length=255)
    city_id: Optional[PositiveInt] = None
    zip_code: Optional[str] = Field(default=None, min_length=5, max_length=10)
    delivery_instructions: Optional[str] = None

    @field_validator('street_address_1', 'city_id', 'zip_code')
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)

class DriverUpdate(BaseModel):
    car_make: Optional[str] = Field(default=None, max_length=50)
    car_model: Optional[str] = Field(default=None, max_length=50)
    car_year: Optional[int] = Field(default=None, ge=1900, le=2100)
    car_color: Optional[str] = Field(default=None, max_length=30)
    car_plate_number: Optional[str] = Field(default=None, max_length=20)
    online: Optional[bool] = None

    @field_validator('online')
    @classmethod
    def not_null(cls, value):
        return _reject_null(value)

# Query strings

class PaginationQuery(BaseModel):
    page: PositiveInt = 1
    limit: PositiveInt = Field(default=10, le=100)
