"""
Group model.

A group is a named node in the contact-organization hierarchy. The hierarchy
is stored flat: each group points at its parent through ``parent_id`` and the
tree view is derived on demand.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Group:
    """
    Group record held by the group store.

    ``parent_id`` of ``None`` marks a top-level group. Records are mutated in
    place by the group service; ``id`` never changes once assigned.
    """
    id: str
    name: str
    description: Optional[str] = None
    parent_id: Optional[str] = None

    @property
    def is_root(self) -> bool:
        return self.parent_id is None
