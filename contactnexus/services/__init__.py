"""
Service Layer

This module provides the business logic layer between the API endpoints and
the in-memory stores. It implements the Service Layer pattern to encapsulate
business rules, validation, and workflow coordination.

Architecture:
============

1. **Base Services** (base.py):
   - Abstract base class and the ``service_method`` decorator
   - Error types and the ``ServiceResult`` wrapper

2. **Domain Services** (domain/):
   - Group hierarchy and membership resolution
   - Contact management

3. **Integration Services** (integration/):
   - Smart group suggestion collaborator
   - Contact import and export

Usage Example:
=============

```python
from contactnexus.core.store import InMemoryDatabase
from contactnexus.services.domain import GroupService

db = InMemoryDatabase()
groups = GroupService(db)

family = groups.create_group("Savani Parivar").unwrap()
result = groups.update_group(family.id, "Savani Parivar", parent_id=family.id)
assert not result.success  # CycleError
```
"""

from .base import BaseService, ServiceError, ServiceResult

__all__ = [
    'BaseService',
    'ServiceError',
    'ServiceResult'
]
