# storefront/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# money travels as a JSON number, it is kept as Decimal everywhere else
Money = Annotated[Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")]

# largest value an INTEGER column holds on every supported backend
MAX_QUANTITY = 2_147_483_647
# bearer tokens issued here are a few hundred bytes
MAX_TOKEN_LENGTH = 2048


class ApiModel(BaseModel):
    """Wire format is camelCase, services hand over snake_case dicts."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# users


class CredentialsIn(ApiModel):
    """Schema for registration and login."""

    username: str = Field(..., min_length=1, max_length=150, description="Unique user name")
    password: str = Field(..., min_length=1, max_length=1024, description="Plain text password")


class LogoutIn(ApiModel):
    token: str = Field(..., min_length=1, max_length=MAX_TOKEN_LENGTH, description="Token to revoke")


class RefreshIn(ApiModel):
    refresh_token: str = Field(..., min_length=1, max_length=MAX_TOKEN_LENGTH, description="Refresh token issued at login")


class MessageOut(ApiModel):
    message: str


class LoginOut(ApiModel):
    """Both token layouts the clients know: `token`, and the access/refresh pair."""

    token: str
    access_token: str
    refresh_token: str


class AccessTokenOut(ApiModel):
    access_token: str


# catalog


class CategoryOut(ApiModel):
    id: str
    name: str
    image: str | None = None


class ProductOut(ApiModel):
    id: str
    title: str
    price: Money
    description: str
    availability: bool
    image: str
    category_id: str


# cart


class AddItemIn(ApiModel):
    """Schema for adding a product to the cart."""

    product_id: str = Field(..., min_length=1, max_length=64, description="Product id")
    quantity: int = Field(..., ge=0, le=MAX_QUANTITY, description="Quantity, added to an existing line")
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2, description="Unit price, ignored when the line exists")
    title: str | None = Field(None, max_length=255)
    image: str | None = Field(None, max_length=1024)


class UpdateItemIn(ApiModel):
    """Schema for replacing the quantity of a cart line."""

    quantity: int = Field(..., ge=0, le=MAX_QUANTITY, description="New quantity")


class LineItemOut(ApiModel):
    product_id: str
    quantity: int
    price: Money
    total: Money
    title: str | None = None
    image: str | None = None


class CartOut(ApiModel):
    id: str
    user_id: str
    status: str
    items: List[LineItemOut]
    total: Money


# orders


class OrderOut(ApiModel):
    id: str
    user_id: str
    items: List[LineItemOut]
    total: Money
    date: datetime
    status: str


class HealthOut(ApiModel):
    status: str
