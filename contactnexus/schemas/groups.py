"""
Pydantic schemas for Group requests and responses.

This module defines request/response schemas for FastAPI endpoints
that handle group and hierarchy operations, providing validation and
serialization.
"""

from pydantic import BaseModel, ConfigDict
from typing import List, Optional


class GroupBase(BaseModel):
    """Base Group schema with common attributes."""
    name: str
    description: Optional[str] = None


# Request schemas (for creating/updating)
class GroupCreate(GroupBase):
    """Schema for creating a new group."""
    parent_id: Optional[str] = None


class GroupUpdate(GroupBase):
    """
    Schema for updating an existing group.

    All fields are written: an omitted ``parent_id`` moves the group to the top level.
    """
    parent_id: Optional[str] = None


# Response schemas
class GroupResponse(GroupBase):
    """Schema for group API responses."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    parent_id: Optional[str] = None


class GroupSummary(BaseModel):
    """Summary schema for group references in other responses."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None


class GroupNodeResponse(BaseModel):
    """One node of the decorated group tree."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    parent_id: Optional[str] = None
    level: int
    children: List['GroupNodeResponse'] = []
    sub_group_count: int = 0
    member_count: int = 0


GroupNodeResponse.model_rebuild()


class GroupDetailResponse(GroupResponse):
    """Detailed group response with relationships and aggregates."""
    parent_group: Optional[GroupSummary] = None
    child_groups: List[GroupSummary] = []
    child_group_count: int = 0
    member_count: int = 0


class GroupLineageResponse(BaseModel):
    """Parent chain (root first) and child tree of a group."""
    group: GroupResponse
    parent_chain: List[GroupSummary] = []
    child_tree: List[GroupNodeResponse] = []
    member_count: int = 0


class GroupDescendantsResponse(BaseModel):
    """The descendant closure of a group, including the group itself."""
    group_id: str
    descendant_ids: List[str]
