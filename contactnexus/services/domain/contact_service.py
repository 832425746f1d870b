"""
Contact Domain Service

This service handles contact management business logic including field
normalization and limits, group membership edits, and the search, group
filter and sort rules of the contact list.
"""

import logging
import uuid
from typing import Any, Dict, Iterable, List, Optional

from contactnexus.config.settings import settings
from contactnexus.core.store import InMemoryDatabase
from contactnexus.models import Contact, ContactSource, DisplayLanguage, DisplayName, LabeledAddress
from contactnexus.services.base import (
    BaseService, ServiceResult, service_method, ValidationError, NotFoundError
)
from contactnexus.services.domain import hierarchy

logger = logging.getLogger(__name__)

SORT_ORDERS = ("name-asc", "name-desc")
ADDRESS_FIELDS = ("label", "street", "city", "state", "zip", "country")


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _required(data: Dict[str, Any], key: str, label: str) -> str:
    value = _blank_to_none(data.get(key))
    if value is None:
        raise ValidationError(f"{label} is required", key, data.get(key))
    return value


def _address(raw: Any) -> LabeledAddress:
    if isinstance(raw, LabeledAddress):
        raw = {name: getattr(raw, name) for name in ADDRESS_FIELDS}
    return LabeledAddress(**{name: _blank_to_none(raw.get(name)) for name in ADDRESS_FIELDS})


def _display_names(raw: Any) -> List[DisplayName]:
    """Accept ``{"gu": "..."}`` or a list of ``{"lang", "name"}`` entries; one name per language."""
    if not raw:
        return []
    if isinstance(raw, dict):
        pairs = list(raw.items())
    else:
        pairs = []
        for entry in raw:
            if isinstance(entry, DisplayName):
                pairs.append((entry.lang, entry.name))
            else:
                pairs.append((entry.get("lang"), entry.get("name")))

    by_lang: Dict[DisplayLanguage, str] = {}
    for lang, name in pairs:
        try:
            lang = DisplayLanguage(lang.value if isinstance(lang, DisplayLanguage) else lang)
        except ValueError:
            raise ValidationError(f"Unsupported display name language: {lang}", "display_names", lang)
        name = _blank_to_none(name)
        if name:
            by_lang[lang] = name
    return [DisplayName(lang=lang, name=by_lang[lang]) for lang in DisplayLanguage if lang in by_lang]


def _sources(raw: Iterable[Any]) -> set:
    sources = set()
    for value in raw or ():
        try:
            sources.add(ContactSource(value.value if isinstance(value, ContactSource) else value))
        except ValueError:
            raise ValidationError(f"Unknown contact source: {value}", "sources", value)
    return sources


def matches_search(contact: Contact, term: str, group_names: Dict[str, str]) -> bool:
    """Case-insensitive match on any contact field or the name of any of its groups."""
    needle = term.casefold()

    def found(value: Optional[str]) -> bool:
        return value is not None and needle in value.casefold()

    if found(contact.name) or found(contact.phone_number) or found(contact.email) or found(contact.notes):
        return True
    if any(found(number) for number in contact.alternative_numbers):
        return True
    if any(found(value) for address in contact.addresses for value in address.searchable_values()):
        return True
    if any(found(entry.name) for entry in contact.display_names):
        return True
    return any(found(group_names.get(group_id)) for group_id in contact.group_ids)


class ContactService(BaseService):
    """Service for contact management."""

    def __init__(self, db: InMemoryDatabase):
        super().__init__("ContactService")
        self._db = db
        self.initialize({
            "max_alternative_numbers": settings.max_alternative_numbers,
            "max_addresses": settings.max_addresses,
        })

    def _require(self, contact_id: str) -> Contact:
        contact = self._db.contacts.find_by_id(contact_id)
        if contact is None:
            raise NotFoundError("Contact", contact_id)
        return contact

    def _new_id(self) -> str:
        contact_id = uuid.uuid4().hex
        while contact_id in self._db.contacts:
            contact_id = uuid.uuid4().hex
        return contact_id

    def _build_contact(self, contact_id: str, data: Dict[str, Any], existing: Optional[Contact] = None) -> Contact:
        """Validate and normalize ``data`` into a contact record."""
        name = _required(data, "name", "Name")
        phone_number = _required(data, "phone_number", "Phone number")

        alternative_numbers = [
            number for number in (_blank_to_none(n) for n in data.get("alternative_numbers") or []) if number
        ]
        max_numbers = self.get_config("max_alternative_numbers", 5)
        if len(alternative_numbers) > max_numbers:
            raise ValidationError(
                f"At most {max_numbers} alternative numbers are allowed",
                "alternative_numbers", len(alternative_numbers),
            )

        addresses = [a for a in (_address(raw) for raw in data.get("addresses") or []) if not a.is_empty()]
        max_addresses = self.get_config("max_addresses", 3)
        if len(addresses) > max_addresses:
            raise ValidationError(f"At most {max_addresses} addresses are allowed", "addresses", len(addresses))

        group_ids = set(data.get("group_ids") or [])
        for group_id in sorted(group_ids):
            if group_id not in self._db.groups:
                raise NotFoundError("Group", group_id)

        if "sources" in data or existing is None:
            sources = _sources(data.get("sources"))
        else:
            sources = set(existing.sources)

        return Contact(
            id=contact_id,
            name=name,
            phone_number=phone_number,
            email=_blank_to_none(data.get("email")),
            notes=_blank_to_none(data.get("notes")),
            avatar_url=_blank_to_none(data.get("avatar_url")),
            alternative_numbers=alternative_numbers,
            addresses=addresses,
            display_names=_display_names(data.get("display_names")),
            group_ids=group_ids,
            sources=sources,
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    @service_method
    def create_contact(self, contact_data: Dict[str, Any]) -> ServiceResult[Contact]:
        """Create a contact with a fresh id."""
        with self._db.groups.lock, self._db.contacts.lock:
            contact = self._build_contact(self._new_id(), contact_data)
            self._db.contacts.insert(contact)

        self.logger.info(f"Created contact {contact.id} ({contact.name!r})")
        return ServiceResult.success_result(contact)

    @service_method
    def update_contact(self, contact_id: str, contact_data: Dict[str, Any]) -> ServiceResult[Contact]:
        """Replace a contact's fields; sources are kept unless given."""
        with self._db.groups.lock, self._db.contacts.lock:
            existing = self._require(contact_id)
            contact = self._build_contact(contact_id, contact_data, existing=existing)
            self._db.contacts.replace(contact)

        self.logger.info(f"Updated contact {contact_id}")
        return ServiceResult.success_result(contact)

    @service_method
    def delete_contact(self, contact_id: str) -> ServiceResult[None]:
        with self._db.contacts.lock:
            self._require(contact_id)
            self._db.contacts.remove(contact_id)

        self.logger.info(f"Deleted contact {contact_id}")
        return ServiceResult.success_result(None)

    @service_method
    def add_to_group(self, contact_id: str, group_id: str) -> ServiceResult[Contact]:
        """Tag a contact with an existing group."""
        with self._db.groups.lock, self._db.contacts.lock:
            contact = self._require(contact_id)
            if group_id not in self._db.groups:
                raise NotFoundError("Group", group_id)
            contact.group_ids.add(group_id)

        self.logger.info(f"Added contact {contact_id} to group {group_id}")
        return ServiceResult.success_result(contact)

    @service_method
    def remove_from_group(self, contact_id: str, group_id: str) -> ServiceResult[Contact]:
        """Drop a group reference from a contact; a missing reference is a no-op."""
        with self._db.contacts.lock:
            contact = self._require(contact_id)
            contact.group_ids.discard(group_id)

        self.logger.info(f"Removed contact {contact_id} from group {group_id}")
        return ServiceResult.success_result(contact)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @service_method
    def get_contact(self, contact_id: str) -> ServiceResult[Contact]:
        return ServiceResult.success_result(self._require(contact_id))

    @service_method
    def list_contacts(
        self,
        search: Optional[str] = None,
        group_id: Optional[str] = None,
        sort: str = "name-asc",
    ) -> ServiceResult[List[Contact]]:
        """
        List contacts.

        - **group_id** keeps contacts of the group or any of its subgroups
        - **search** matches contact fields and group names, case-insensitively
        - **sort** is ``name-asc`` or ``name-desc``
        """
        if sort not in SORT_ORDERS:
            raise ValidationError(f"Unknown sort order: {sort}", "sort", sort)

        with self._db.groups.lock, self._db.contacts.lock:
            groups = self._db.groups.list_all()
            contacts = self._db.contacts.list_all()

        if group_id:
            if not any(g.id == group_id for g in groups):
                raise NotFoundError("Group", group_id)
            contacts = hierarchy.members(group_id, groups, contacts)

        if search and search.strip():
            group_names = {g.id: g.name for g in groups}
            contacts = [c for c in contacts if matches_search(c, search.strip(), group_names)]

        contacts = sorted(contacts, key=lambda c: (c.name.casefold(), c.id), reverse=(sort == "name-desc"))
        return ServiceResult.success_result(contacts, metadata={"total": len(contacts)})

    @service_method
    def group_names_for(self, contact_id: str) -> ServiceResult[List[str]]:
        """Names of the groups a contact references; dangling ids are skipped."""
        contact = self._require(contact_id)
        names = []
        for group_id in sorted(contact.group_ids):
            group = self._db.groups.find_by_id(group_id)
            if group is not None:
                names.append(group.name)
        return ServiceResult.success_result(sorted(names, key=str.casefold))
