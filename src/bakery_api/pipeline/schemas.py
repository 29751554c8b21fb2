"""
bakery_api.pipeline.schemas

Rule sets attached to storefront endpoints.

Responsibilities:
- Shared query/path rule sets (pagination, search, numeric ids).
- Body rule sets for categories, products, users and development tokens.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from bakery_api.pipeline.rules import QueryInt, RuleSet

RoleName = Literal["customer", "staff", "customerService", "admin"]


class PaginationQuery(RuleSet):
    page: QueryInt = Field(default=1, gt=0)
    limit: QueryInt = Field(default=10, gt=0, le=100)
    sort: str | None = Field(default=None, min_length=1)
    order: Literal["asc", "desc"] = "desc"


class SearchQuery(RuleSet):
    q: str = Field(min_length=1)
    page: QueryInt = Field(default=1, gt=0)
    limit: QueryInt = Field(default=20, gt=0, le=100)


class IdParams(RuleSet):
    id: QueryInt = Field(gt=0)


class CategoryCreate(RuleSet):
    name: str = Field(min_length=1, max_length=100)
    description: str = ""
    image: str = ""
    parent_id: int | None = Field(default=None, gt=0)
    display_order: int = 0


class CategoryUpdate(RuleSet):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    image: str | None = None
    parent_id: int | None = Field(default=None, gt=0)
    display_order: int | None = None
    active: bool | None = None


class CustomOption(RuleSet):
    name: str = Field(min_length=1)
    choices: list[str] = Field(default_factory=list)


class ProductCreate(RuleSet):
    name: str = Field(min_length=1, max_length=100)
    category: str = Field(min_length=1, max_length=50)
    price: float = Field(gt=0)
    available: bool = True
    min_order_quantity: int = Field(default=1, gt=0)
    max_order_quantity: int = Field(default=10, gt=0)
    description: str | None = Field(default=None, max_length=500)
    image: str | None = None
    preparation_time_hours: int | None = Field(default=None, gt=0)
    has_taxes: bool = True
    allergens: str | None = None
    custom_options: list[CustomOption] | None = None


class ProductUpdate(RuleSet):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    category: str | None = Field(default=None, min_length=1, max_length=50)
    price: float | None = Field(default=None, gt=0)
    available: bool | None = None
    min_order_quantity: int | None = Field(default=None, gt=0)
    max_order_quantity: int | None = Field(default=None, gt=0)
    description: str | None = Field(default=None, max_length=500)
    image: str | None = None
    preparation_time_hours: int | None = Field(default=None, gt=0)
    has_taxes: bool | None = None
    allergens: str | None = None
    custom_options: list[CustomOption] | None = None


class UserProfile(RuleSet):
    bio: str | None = Field(default=None, max_length=500)
    avatar: str | None = Field(default=None, pattern=r"^https?://\S+$")
    phone_number: str | None = Field(default=None, pattern=r"^\+?[1-9][0-9]{1,14}$")


class ProfileSync(RuleSet):
    email: str = Field(max_length=254, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    name: str = Field(min_length=2, max_length=100)


class UserSelfUpdate(RuleSet):
    name: str | None = Field(default=None, min_length=2, max_length=100)
    profile: UserProfile | None = None


class UserUpdate(UserSelfUpdate):
    role: RoleName | None = None


class DevTokenRequest(RuleSet):
    subject: str = Field(min_length=1, max_length=256)
    role: RoleName = "customer"
    ttl_minutes: int = Field(default=60, ge=1, le=24 * 60)


# --- Module Notes -----------------------------------------------------------
# Attribute names are snake_case; the wire (and the normalized dicts handlers
# receive) uses camelCase via the RuleSet alias generator.
