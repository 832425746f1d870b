"""
Group management API endpoints.

This module provides REST API endpoints for group CRUD operations,
membership views, and group hierarchy operations.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from typing import List, Optional

from contactnexus.core.dependencies import get_group_service
from contactnexus.schemas.contacts import ContactSummary
from contactnexus.schemas.groups import (
    GroupCreate, GroupUpdate, GroupResponse, GroupDetailResponse, GroupSummary,
    GroupNodeResponse, GroupLineageResponse, GroupDescendantsResponse
)
from contactnexus.services.domain import GroupService

router = APIRouter()


@router.get("/", response_model=List[GroupResponse])
async def list_groups(
    parent_id: Optional[str] = Query(None, description="Only direct children of this group"),
    roots_only: bool = Query(False, description="Only top-level groups"),
    service: GroupService = Depends(get_group_service)
):
    """
    Retrieve the flat list of groups.

    - **parent_id**: Restrict to the direct children of a group
    - **roots_only**: Restrict to top-level groups
    """
    return service.list_groups(parent_id=parent_id, roots_only=roots_only).unwrap()


@router.get("/tree", response_model=List[GroupNodeResponse])
async def get_group_tree(
    search: Optional[str] = Query(None, description="Keep groups whose name or description matches"),
    service: GroupService = Depends(get_group_service)
):
    """
    Retrieve the whole group forest.

    Every node carries its level, its children ordered by name, the number of
    direct sub-groups and the number of distinct contacts in its subtree.
    Matching groups keep their ancestors when **search** is given.
    """
    return service.get_hierarchy(search=search).unwrap()


@router.get("/{group_id}", response_model=GroupDetailResponse)
async def get_group(
    group_id: str,
    service: GroupService = Depends(get_group_service)
):
    """
    Retrieve a specific group by ID with detailed information.

    Returns group details including:
    - Basic group information
    - Parent and child group relationships
    - Member count across the whole subtree

    A parent id that no longer resolves leaves ``parent_group`` empty; the
    group is then shown as a root, as in the tree view.
    """
    group = service.get_group(group_id).unwrap()
    parent = None
    if group.parent_id:
        result = service.get_group(group.parent_id)
        if result.success:
            parent = result.data
    children = service.children_of(group_id).unwrap()

    return GroupDetailResponse(
        id=group.id,
        name=group.name,
        description=group.description,
        parent_id=group.parent_id,
        parent_group=GroupSummary.model_validate(parent) if parent else None,
        child_groups=[GroupSummary.model_validate(child) for child in children],
        child_group_count=len(children),
        member_count=service.get_member_count(group_id).unwrap(),
    )


@router.post("/", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    group_data: GroupCreate,
    service: GroupService = Depends(get_group_service)
):
    """
    Create a new group.

    The parent group, when given, must exist. Blank names are rejected.
    """
    return service.create_group(
        group_data.name, description=group_data.description, parent_id=group_data.parent_id
    ).unwrap()


@router.put("/{group_id}", response_model=GroupResponse)
async def update_group(
    group_id: str,
    group_data: GroupUpdate,
    service: GroupService = Depends(get_group_service)
):
    """
    Update an existing group.

    Re-parenting a group below itself or below one of its own descendants is
    rejected with 409.
    """
    return service.update_group(
        group_id, group_data.name, description=group_data.description, parent_id=group_data.parent_id
    ).unwrap()


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
    group_id: str,
    service: GroupService = Depends(get_group_service)
):
    """
    Delete a group.

    Child groups move up to the deleted group's parent; contacts keep their
    other group references.
    """
    service.delete_group(group_id).unwrap()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{group_id}/members", response_model=List[ContactSummary])
async def get_group_members(
    group_id: str,
    service: GroupService = Depends(get_group_service)
):
    """
    Get all members of a group.

    Returns every contact tagged with the group or any of its subgroups,
    each contact once.
    """
    return service.get_members(group_id).unwrap()


@router.get("/{group_id}/children", response_model=List[GroupResponse])
async def get_child_groups(
    group_id: str,
    service: GroupService = Depends(get_group_service)
):
    """
    Get all child groups of a parent group.

    Returns all groups that have the specified group as their parent.
    """
    return service.children_of(group_id).unwrap()


@router.get("/{group_id}/descendants", response_model=GroupDescendantsResponse)
async def get_descendants(
    group_id: str,
    service: GroupService = Depends(get_group_service)
):
    """Get the ids of the group and every group below it."""
    return GroupDescendantsResponse(
        group_id=group_id,
        descendant_ids=service.get_descendant_ids(group_id).unwrap(),
    )


@router.get("/hierarchy/{group_id}", response_model=GroupLineageResponse)
async def get_group_hierarchy(
    group_id: str,
    service: GroupService = Depends(get_group_service)
):
    """
    Get the complete hierarchy for a group.

    Returns both parent chain and child tree for the specified group.
    """
    return service.get_group_lineage(group_id).unwrap()
