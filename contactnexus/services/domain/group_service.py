"""
Group Domain Service

This service handles group management business logic including group hierarchy,
re-parenting with cycle prevention, deletion with child re-parenting, and the
membership views derived from contact group references.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional, Tuple

from contactnexus.core.store import InMemoryDatabase
from contactnexus.models import Contact, Group
from contactnexus.services.base import (
    BaseService, ServiceResult, service_method, ValidationError, NotFoundError, CycleError
)
from contactnexus.services.domain import hierarchy

logger = logging.getLogger(__name__)


def _clean_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Group name is required", "name", name)
    return cleaned


def _clean_optional(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


class GroupService(BaseService):
    """Service for group and organizational hierarchy management."""

    def __init__(self, db: InMemoryDatabase):
        super().__init__("GroupService")
        self._db = db
        self.initialize()

    def _snapshot(self) -> Tuple[List[Group], List[Contact]]:
        with self._db.groups.lock, self._db.contacts.lock:
            return self._db.groups.list_all(), self._db.contacts.list_all()

    def _require(self, group_id: str) -> Group:
        group = self._db.groups.find_by_id(group_id)
        if group is None:
            raise NotFoundError("Group", group_id)
        return group

    def _new_id(self) -> str:
        group_id = uuid.uuid4().hex
        while group_id in self._db.groups:
            group_id = uuid.uuid4().hex
        return group_id

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    @service_method
    def create_group(
        self, name: str, description: Optional[str] = None, parent_id: Optional[str] = None
    ) -> ServiceResult[Group]:
        """Create a new group, optionally below an existing parent."""
        name = _clean_name(name)
        parent_id = parent_id or None

        with self._db.groups.lock:
            if parent_id is not None:
                self._require(parent_id)
            group = Group(
                id=self._new_id(),
                name=name,
                description=_clean_optional(description),
                parent_id=parent_id,
            )
            self._db.groups.insert(group)

        self.logger.info(f"Created group {group.id} ({group.name!r}) under {parent_id or 'root'}")
        return ServiceResult.success_result(group)

    @service_method
    def update_group(
        self,
        group_id: str,
        name: str,
        description: Optional[str] = None,
        parent_id: Optional[str] = None,
    ) -> ServiceResult[Group]:
        """
        Rename, re-describe and re-parent a group.

        The new parent may be neither the group itself nor any group in its
        subtree. The check and the write happen under the group store lock.
        """
        parent_id = parent_id or None

        with self._db.groups.lock:
            group = self._require(group_id)
            name = _clean_name(name)
            if parent_id is not None:
                self._require(parent_id)
                if hierarchy.would_create_cycle(group_id, parent_id, self._db.groups.list_all()):
                    raise CycleError(group_id, parent_id)

            previous_parent = group.parent_id
            group.name = name
            group.description = _clean_optional(description)
            group.parent_id = parent_id

        if previous_parent != parent_id:
            self.logger.info(f"Moved group {group_id} from {previous_parent or 'root'} to {parent_id or 'root'}")
        else:
            self.logger.info(f"Updated group {group_id}")
        return ServiceResult.success_result(group)

    @service_method
    def delete_group(self, group_id: str) -> ServiceResult[None]:
        """
        Delete a group.

        Direct children move up to the deleted group's former parent and
        contacts drop the deleted id from their group references.
        """
        with self._db.groups.lock, self._db.contacts.lock:
            group = self._require(group_id)
            former_parent = group.parent_id

            reparented = []
            for child in self._db.groups.list_all():
                if child.parent_id == group_id:
                    child.parent_id = former_parent
                    reparented.append(child.id)
            self._db.groups.remove(group_id)

            untagged = 0
            for contact in self._db.contacts.list_all():
                if group_id in contact.group_ids:
                    contact.group_ids.discard(group_id)
                    untagged += 1

        self.logger.info(
            f"Deleted group {group_id}; re-parented {len(reparented)} children to "
            f"{former_parent or 'root'}, untagged {untagged} contacts"
        )
        return ServiceResult.success_result(
            None, metadata={"reparented": reparented, "contacts_updated": untagged}
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @service_method
    def get_group(self, group_id: str) -> ServiceResult[Group]:
        return ServiceResult.success_result(self._require(group_id))

    @service_method
    def list_groups(self, parent_id: Optional[str] = None, roots_only: bool = False) -> ServiceResult[List[Group]]:
        """List groups, optionally only the direct children of ``parent_id`` or only roots."""
        groups = self._db.groups.list_all()
        if parent_id is not None:
            groups = [g for g in groups if g.parent_id == parent_id]
        elif roots_only:
            groups = [g for g in groups if g.parent_id is None]
        return ServiceResult.success_result(groups)

    @service_method
    def children_of(self, group_id: str) -> ServiceResult[List[Group]]:
        """Direct children of a group, ordered by name."""
        self._require(group_id)
        index = hierarchy.children_index(self._db.groups.list_all())
        return ServiceResult.success_result(index.get(group_id, []))

    @service_method
    def get_hierarchy(self, search: Optional[str] = None) -> ServiceResult[List[hierarchy.GroupNode]]:
        """The whole decorated forest, optionally filtered by a search term."""
        groups, contacts = self._snapshot()
        nodes = hierarchy.build_hierarchy(groups, contacts)
        return ServiceResult.success_result(hierarchy.filter_hierarchy(nodes, search))

    @service_method
    def get_group_lineage(self, group_id: str) -> ServiceResult[Dict[str, Any]]:
        """Parent chain (root first) and decorated child tree of a group."""
        groups, contacts = self._snapshot()
        group = next((g for g in groups if g.id == group_id), None)
        if group is None:
            raise NotFoundError("Group", group_id)
        chain = hierarchy.ancestor_chain(group_id, groups)
        return ServiceResult.success_result({
            "group": group,
            "parent_chain": chain,
            "child_tree": hierarchy.build_hierarchy(groups, contacts, parent_id=group_id, level=len(chain) + 1),
            "member_count": hierarchy.member_count(group_id, groups, contacts),
        })

    @service_method
    def get_descendant_ids(self, group_id: str) -> ServiceResult[List[str]]:
        """Ids of the group and every group below it."""
        groups = self._db.groups.list_all()
        if not any(g.id == group_id for g in groups):
            raise NotFoundError("Group", group_id)
        return ServiceResult.success_result(sorted(hierarchy.descendant_ids(group_id, groups)))

    @service_method
    def get_members(self, group_id: str) -> ServiceResult[List[Contact]]:
        """Contacts of the group's whole subtree, ordered by name."""
        groups, contacts = self._snapshot()
        if not any(g.id == group_id for g in groups):
            raise NotFoundError("Group", group_id)
        found = hierarchy.members(group_id, groups, contacts)
        found.sort(key=lambda c: (c.name.casefold(), c.id))
        return ServiceResult.success_result(found)

    @service_method
    def get_member_count(self, group_id: str) -> ServiceResult[int]:
        groups, contacts = self._snapshot()
        if not any(g.id == group_id for g in groups):
            raise NotFoundError("Group", group_id)
        return ServiceResult.success_result(hierarchy.member_count(group_id, groups, contacts))

    @service_method
    def find_by_name(self, name: str) -> ServiceResult[Optional[Group]]:
        """Case-insensitive exact name lookup; first match in name order."""
        wanted = (name or "").strip().casefold()
        matches = [g for g in self._db.groups.list_all() if g.name.casefold() == wanted]
        matches.sort(key=lambda g: (g.name, g.id))
        return ServiceResult.success_result(matches[0] if matches else None)
