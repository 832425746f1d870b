"""
Domain Services

This module contains business logic services for each domain entity.
Domain services encapsulate business rules, validation, and orchestration
specific to each business domain.

Available Domain Services:
=========================

1. **GroupService** - Group hierarchy, re-parenting and deletion
2. **ContactService** - Contact management, search and membership edits

The pure tree and membership functions live in :mod:`.hierarchy`.
"""

from .group_service import GroupService
from .contact_service import ContactService

__all__ = [
    'GroupService',
    'ContactService'
]
