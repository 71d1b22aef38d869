"""
Pydantic schemas for data access inputs.
Validates users and properties before insert, and property search options before query building.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from email_validator import validate_email, EmailNotValidError
from typing import Optional
from decimal import Decimal


class UserCreate(BaseModel):
    """Schema for inserting a user. The password arrives already hashed."""

    name: str = Field(..., min_length=1, max_length=255, description="User's display name")
    email: str = Field(..., max_length=255, description="Unique email address")
    password: str = Field(..., min_length=1, description="Hashed password, stored as given")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        """Validate and clean name."""
        if not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip()

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v):
        """
        Check email syntax with email-validator.
        The value is returned unchanged so lookups by the same string match.
        """
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError as e:
            raise ValueError(f"Invalid email format: {str(e)}")
        return v


class PropertyCreate(BaseModel):
    """Schema for inserting a property. Field order matches the insert column order."""

    owner_id: int = Field(..., ge=1, description="Owning user's id")
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., description="Listing description")
    thumbnail_photo_url: str = Field(..., max_length=255)
    cover_photo_url: str = Field(..., max_length=255)
    cost_per_night: int = Field(..., ge=0, description="Nightly price in cents")
    street: str = Field(..., max_length=255)
    city: str = Field(..., max_length=255)
    province: str = Field(..., max_length=255)
    post_code: str = Field(..., max_length=255)
    country: str = Field(..., max_length=255)
    parking_spaces: int = Field(..., ge=0)
    number_of_bathrooms: int = Field(..., ge=0)
    number_of_bedrooms: int = Field(..., ge=0)

    @classmethod
    def column_names(cls) -> tuple:
        return tuple(cls.model_fields)

    def column_values(self) -> list:
        return [getattr(self, name) for name in self.column_names()]


class PropertySearchOptions(BaseModel):
    """
    Filters for property search. Prices are in whole currency units and
    are converted to cents when the query is built. Unset, empty or zero
    values are not applied.
    """

    model_config = ConfigDict(extra="ignore")

    city: Optional[str] = Field(None, description="Matched with LIKE, wildcards are up to the caller")
    minimum_price_per_night: Optional[Decimal] = Field(None, ge=0)
    maximum_price_per_night: Optional[Decimal] = Field(None, ge=0)
    minimum_rating: Optional[Decimal] = Field(None, ge=0)

    @field_validator(
        "city",
        "minimum_price_per_night",
        "maximum_price_per_night",
        "minimum_rating",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v):
        # Search forms submit empty strings for untouched inputs
        if isinstance(v, str) and not v.strip():
            return None
        return v
