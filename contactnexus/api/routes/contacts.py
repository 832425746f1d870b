"""
Contact management API endpoints.

This module provides REST API endpoints for contact CRUD operations,
search and group filtering, membership edits, import/export and smart
group suggestions.
"""

from fastapi import APIRouter, Depends, Query, Request, Response, status
from typing import List, Optional

from contactnexus.core.dependencies import (
    get_contact_service, get_group_service, get_suggestion_service, get_transfer_service
)
from contactnexus.schemas.contacts import (
    ContactCreate, ContactUpdate, ContactResponse, ContactDetailResponse, ContactSummary,
    ContactImportResponse, SuggestionRequest, SuggestionResponse, SuggestionAccept
)
from contactnexus.schemas.groups import GroupSummary
from contactnexus.services.base import ValidationError
from contactnexus.services.domain import ContactService, GroupService
from contactnexus.services.integration import SuggestionService, TransferService

router = APIRouter()


@router.get("/", response_model=List[ContactResponse])
async def list_contacts(
    search: Optional[str] = Query(None, description="Search contact fields and group names"),
    group_id: Optional[str] = Query(None, description="Filter by group, including its subgroups"),
    sort: str = Query("name-asc", description="name-asc or name-desc"),
    service: ContactService = Depends(get_contact_service)
):
    """
    Retrieve a list of contacts with optional filtering.

    - **search**: Case-insensitive match on name, numbers, email, notes,
      addresses, display names and group names
    - **group_id**: Keep contacts of the group or any of its subgroups
    - **sort**: Order by name ascending or descending
    """
    return service.list_contacts(search=search, group_id=group_id, sort=sort).unwrap()


@router.get("/export")
async def export_contacts(
    format: str = Query("csv", description="csv or txt"),
    group_id: Optional[str] = Query(None, description="Export only this group's subtree"),
    service: TransferService = Depends(get_transfer_service)
):
    """
    Export contacts as a downloadable file.

    Group references are written as group names.
    """
    result = service.export_contacts(fmt=format, group_id=group_id)
    body = result.unwrap()
    return Response(
        content=body,
        media_type=result.metadata["media_type"],
        headers={"Content-Disposition": f'attachment; filename="{result.metadata["filename"]}"'},
    )


@router.post("/import", response_model=ContactImportResponse)
async def import_contacts(
    request: Request,
    source: str = Query("csv", description="Source tag for the imported contacts"),
    service: TransferService = Depends(get_transfer_service)
):
    """
    Import contacts from a CSV request body in the export layout.

    Every imported contact receives a fresh id. Invalid rows are skipped and
    unknown groups dropped; both are reported as warnings.
    """
    try:
        text = (await request.body()).decode("utf-8-sig")
    except UnicodeDecodeError:
        raise ValidationError("CSV body must be UTF-8", "body", None)
    result = service.import_csv(text, source=source)
    created = result.unwrap()
    return ContactImportResponse(
        imported=result.metadata["imported"],
        skipped=result.metadata["skipped"],
        contacts=[ContactSummary.model_validate(c) for c in created],
        warnings=result.warnings,
    )


@router.post("/suggest-group", response_model=SuggestionResponse)
def suggest_group(
    suggestion_request: SuggestionRequest,
    service: SuggestionService = Depends(get_suggestion_service)
):
    """
    Suggest a family or friend group for a contact name.

    The suggested name is matched case-insensitively against existing groups.
    Declared sync so the suggester's blocking HTTP call runs in the threadpool.
    """
    result = service.suggest_for(suggestion_request.contact_name)
    data = result.unwrap()
    return SuggestionResponse(
        suggested_group=data["suggested_group"],
        confidence=data["confidence"],
        group=GroupSummary.model_validate(data["group"]) if data["group"] else None,
        warnings=result.warnings,
    )


@router.get("/{contact_id}", response_model=ContactDetailResponse)
async def get_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service),
    groups: GroupService = Depends(get_group_service)
):
    """
    Retrieve a specific contact by ID.

    Group references are resolved; references to groups that no longer
    exist are left out of ``groups``.
    """
    contact = service.get_contact(contact_id).unwrap()
    resolved = []
    for group_id in sorted(contact.group_ids):
        result = groups.get_group(group_id)
        if result.success:
            resolved.append(GroupSummary.model_validate(result.data))

    detail = ContactDetailResponse.model_validate(contact)
    detail.groups = sorted(resolved, key=lambda g: g.name.casefold())
    return detail


@router.post("/", response_model=ContactResponse, status_code=status.HTTP_201_CREATED)
async def create_contact(
    contact_data: ContactCreate,
    service: ContactService = Depends(get_contact_service)
):
    """
    Create a new contact.

    Referenced groups must exist. At most five alternative numbers and three
    addresses are accepted.
    """
    return service.create_contact(contact_data.model_dump(mode="json")).unwrap()


@router.put("/{contact_id}", response_model=ContactResponse)
async def update_contact(
    contact_id: str,
    contact_data: ContactUpdate,
    service: ContactService = Depends(get_contact_service)
):
    """
    Replace an existing contact's fields.

    Provenance sources are kept when the request omits them.
    """
    data = contact_data.model_dump(mode="json")
    if contact_data.sources is None:
        data.pop("sources")
    return service.update_contact(contact_id, data).unwrap()


@router.delete("/{contact_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact(
    contact_id: str,
    service: ContactService = Depends(get_contact_service)
):
    """Delete a contact."""
    service.delete_contact(contact_id).unwrap()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{contact_id}/groups/{group_id}", response_model=ContactResponse)
async def add_contact_to_group(
    contact_id: str,
    group_id: str,
    service: ContactService = Depends(get_contact_service)
):
    """Add a contact to an existing group."""
    return service.add_to_group(contact_id, group_id).unwrap()


@router.delete("/{contact_id}/groups/{group_id}", response_model=ContactResponse)
async def remove_contact_from_group(
    contact_id: str,
    group_id: str,
    service: ContactService = Depends(get_contact_service)
):
    """Remove a contact from a group."""
    return service.remove_from_group(contact_id, group_id).unwrap()


@router.post("/{contact_id}/suggestion/accept", response_model=ContactResponse)
def accept_suggestion(
    contact_id: str,
    accept: SuggestionAccept,
    service: SuggestionService = Depends(get_suggestion_service)
):
    """Accept a group suggestion by adding the contact to the named group."""
    return service.accept(contact_id, accept.group_name).unwrap()
