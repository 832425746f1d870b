"""
Pydantic schemas for Contact requests and responses.

This module defines request/response schemas for FastAPI endpoints that
handle contacts, membership edits, import/export and smart suggestions.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import List, Optional

from contactnexus.models import ContactSource, DisplayLanguage
from contactnexus.schemas.groups import GroupSummary


class LabeledAddressSchema(BaseModel):
    """Postal address with an optional label."""
    model_config = ConfigDict(from_attributes=True)

    label: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None


class DisplayNameSchema(BaseModel):
    """Contact name in one of the supported languages."""
    model_config = ConfigDict(from_attributes=True)

    lang: DisplayLanguage
    name: str


# Base schema for common attributes
class ContactBase(BaseModel):
    """Base Contact schema with common attributes."""
    name: str
    phone_number: str
    email: Optional[EmailStr] = None
    notes: Optional[str] = None
    avatar_url: Optional[str] = None
    alternative_numbers: List[str] = []
    addresses: List[LabeledAddressSchema] = []
    display_names: List[DisplayNameSchema] = []
    group_ids: List[str] = []

    @field_validator('email', mode='before')
    @classmethod
    def blank_email_is_none(cls, v):
        """Treat an empty email field as no email."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


# Request schemas (for creating/updating)
class ContactCreate(ContactBase):
    """Schema for creating a new contact."""
    sources: List[ContactSource] = []


class ContactUpdate(ContactBase):
    """Schema for replacing a contact; omitted ``sources`` are kept."""
    sources: Optional[List[ContactSource]] = None


# Response schemas
class ContactResponse(BaseModel):
    """Contact API response."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    phone_number: str
    email: Optional[str] = None
    notes: Optional[str] = None
    avatar_url: Optional[str] = None
    alternative_numbers: List[str] = []
    addresses: List[LabeledAddressSchema] = []
    display_names: List[DisplayNameSchema] = []
    group_ids: List[str] = []
    sources: List[ContactSource] = []

    @field_validator('group_ids', mode='before')
    @classmethod
    def sorted_group_ids(cls, v):
        """Group ids are a set on the record; present them in a stable order."""
        return sorted(v or [])

    @field_validator('sources', mode='before')
    @classmethod
    def sorted_sources(cls, v):
        return sorted(v or [], key=lambda s: getattr(s, "value", s))


class ContactSummary(BaseModel):
    """Summary schema for contact references in other responses."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    phone_number: str
    email: Optional[str] = None


class ContactDetailResponse(ContactResponse):
    """Contact response with resolved group references."""
    groups: List[GroupSummary] = []


# Import / export schemas
class ContactImportResponse(BaseModel):
    """Outcome of a contact import."""
    imported: int
    skipped: int
    contacts: List[ContactSummary] = []
    warnings: List[str] = []


# Smart suggestion schemas
class SuggestionRequest(BaseModel):
    """Request a group suggestion for a (possibly unsaved) contact name."""
    contact_name: str


class SuggestionResponse(BaseModel):
    """Suggested group and how sure the suggester is."""
    suggested_group: Optional[str] = None
    confidence: float = Field(ge=0.0, le=1.0)
    group: Optional[GroupSummary] = None
    warnings: List[str] = []


class SuggestionAccept(BaseModel):
    """Accept a suggestion by adding the contact to the named group."""
    group_name: str
