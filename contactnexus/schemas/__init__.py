"""
Pydantic schemas package.

This module imports all Pydantic schemas for API request/response validation
and provides a centralized place to access all schema definitions.
"""

# Group schemas
from contactnexus.schemas.groups import (
    GroupBase, GroupCreate, GroupUpdate, GroupResponse, GroupSummary, GroupNodeResponse,
    GroupDetailResponse, GroupLineageResponse, GroupDescendantsResponse
)

# Contact schemas
from contactnexus.schemas.contacts import (
    LabeledAddressSchema, DisplayNameSchema, ContactBase, ContactCreate, ContactUpdate,
    ContactResponse, ContactSummary, ContactDetailResponse, ContactImportResponse,
    SuggestionRequest, SuggestionResponse, SuggestionAccept
)

# Export all schemas
__all__ = [
    # Group schemas
    "GroupBase", "GroupCreate", "GroupUpdate", "GroupResponse", "GroupSummary", "GroupNodeResponse",
    "GroupDetailResponse", "GroupLineageResponse", "GroupDescendantsResponse",

    # Contact schemas
    "LabeledAddressSchema", "DisplayNameSchema", "ContactBase", "ContactCreate", "ContactUpdate",
    "ContactResponse", "ContactSummary", "ContactDetailResponse",

    # Import and suggestion schemas
    "ContactImportResponse", "SuggestionRequest", "SuggestionResponse", "SuggestionAccept",
]
