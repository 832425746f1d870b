"""
FastAPI dependency injection functions.

This module wires the services around the single in-memory database and
provides dependency functions that can be injected into FastAPI route
handlers.
"""

from dataclasses import dataclass

from fastapi import Request

from contactnexus.core.store import InMemoryDatabase
from contactnexus.services.domain import ContactService, GroupService
from contactnexus.services.integration import SuggestionService, TransferService
from contactnexus.services.integration.suggestion_service import GroupSuggester


@dataclass
class ServiceContainer:
    """All services of one application instance, sharing one database."""
    db: InMemoryDatabase
    groups: GroupService
    contacts: ContactService
    suggestions: SuggestionService
    transfer: TransferService


def build_services(db: InMemoryDatabase, suggester: GroupSuggester) -> ServiceContainer:
    """Create the services for ``db`` and link their dependencies."""
    groups = GroupService(db)
    contacts = ContactService(db)

    suggestions = SuggestionService(db, suggester)
    suggestions.add_dependency("groups", groups)
    suggestions.add_dependency("contacts", contacts)

    transfer = TransferService(db)
    transfer.add_dependency("groups", groups)
    transfer.add_dependency("contacts", contacts)

    return ServiceContainer(db=db, groups=groups, contacts=contacts, suggestions=suggestions, transfer=transfer)


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_database(request: Request) -> InMemoryDatabase:
    """
    FastAPI dependency for the in-memory database.

    Returns:
        InMemoryDatabase: the application's single data holder
    """
    return get_services(request).db


def get_group_service(request: Request) -> GroupService:
    return get_services(request).groups


def get_contact_service(request: Request) -> ContactService:
    return get_services(request).contacts


def get_suggestion_service(request: Request) -> SuggestionService:
    return get_services(request).suggestions


def get_transfer_service(request: Request) -> TransferService:
    return get_services(request).transfer
