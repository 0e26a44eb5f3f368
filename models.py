import math
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from werkzeug.security import generate_password_hash, check_password_hash

# ----------------------------
# Records
# ----------------------------

class User(BaseModel):
    username: str
    password_hash: str

    @model_validator(mode="before")
    @classmethod
    def hash_plain_password(cls, data):
        # records written before hashing was introduced carry "password"
        if isinstance(data, dict) and "password_hash" not in data and "password" in data:
            if not isinstance(data["password"], str):
                raise ValueError("password must be a string")
            data = dict(data)
            data["password_hash"] = generate_password_hash(data.pop("password"))
        return data

    @classmethod
    def create(cls, username, password):
        return cls(username=username, password_hash=generate_password_hash(password))

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)


class Product(BaseModel):
    id: Optional[int] = None # assigned by the inventory store, stable across removals
    name: str
    description: str
    category: str
    price: float = Field(gt=0)
    quantity: int = Field(gt=0)


# ----------------------------
# Forms
# ----------------------------

class Credentials(BaseModel):
    username: str
    password: str

    @field_validator("username", "password", mode="before")
    def must_not_be_empty(cls, v):
        if not isinstance(v, str) or not v:
            raise ValueError("field is required")
        return v


class ProductForm(BaseModel):
    """Raw add-product form. Text fields are trimmed, price and quantity parsed from text."""

    name: str
    description: str
    category: str
    price: float
    quantity: int

    @field_validator("name", "description", "category", mode="before")
    def must_not_be_blank(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise ValueError("field must not be empty")
        return v.strip()

    @field_validator("price", mode="before")
    def parse_price(cls, v):
        if isinstance(v, bool):
            raise ValueError("price must be a number")
        price = float(str(v).strip())
        if not math.isfinite(price) or price <= 0:
            raise ValueError("price must be positive")
        return price

    @field_validator("quantity", mode="before")
    def parse_quantity(cls, v):
        if isinstance(v, bool):
            raise ValueError("quantity must be a number")
        if isinstance(v, float):
            if not v.is_integer():
                raise ValueError("quantity must be a whole number")
            v = int(v)
        quantity = int(str(v).strip())
        if quantity <= 0:
            raise ValueError("quantity must be positive")
        return quantity
