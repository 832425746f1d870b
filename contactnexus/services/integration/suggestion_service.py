"""
Smart Group Suggestion Service

This service asks a suggestion collaborator which family or friend group a
contact should join, and maps the suggested group name back onto an existing
group. The collaborator itself is opaque: an HTTP endpoint (typically backed
by a language model) or a local surname heuristic.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from contactnexus.core.store import InMemoryDatabase
from contactnexus.services.base import (
    BaseService, ServiceResult, service_method, ValidationError, NotFoundError, SuggestionError
)

logger = logging.getLogger(__name__)

FAMILY_KEYWORDS = ("parivar", "family", "parent", "sibling", "cousin", "elder", "relative")
FRIEND_KEYWORDS = ("friend", "buddies", "club")
HOUSEHOLD_KEYWORDS = ("parivar", "family")


class GroupSuggestion(BaseModel):
    """Reply of a group suggester."""
    model_config = ConfigDict(populate_by_name=True)

    suggested_group: Optional[str] = Field(default=None, alias="suggestedGroup")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)


class GroupSuggester(Protocol):
    """Anything that can suggest a group name for a contact."""

    def __call__(
        self,
        contact_name: str,
        existing_contact_names: List[str],
        family_group_names: List[str],
        friend_group_names: List[str],
    ) -> GroupSuggestion:
        ...


class HttpGroupSuggester:
    """Suggester backed by a remote JSON endpoint."""

    def __init__(self, url: str, timeout: float = 10.0, client: Optional[httpx.Client] = None):
        self.url = url
        self.client = client or httpx.Client(timeout=timeout)

    def __call__(
        self,
        contact_name: str,
        existing_contact_names: List[str],
        family_group_names: List[str],
        friend_group_names: List[str],
    ) -> GroupSuggestion:
        payload = {
            "contactName": contact_name,
            "existingContactNames": existing_contact_names,
            "familyGroupNames": family_group_names,
            "friendGroupNames": friend_group_names,
        }
        try:
            response = self.client.post(self.url, json=payload)
            response.raise_for_status()
            return GroupSuggestion.model_validate(response.json())
        except httpx.HTTPError as e:
            raise SuggestionError(f"Suggestion request failed: {e}", {"url": self.url})
        except (ValueError, PydanticValidationError) as e:
            raise SuggestionError(f"Malformed suggestion reply: {e}", {"url": self.url})

    def close(self) -> None:
        self.client.close()


class SurnameGroupSuggester:
    """
    Local fallback: suggest the family group named after the contact's surname.

    Confidence rises when existing contacts already share the surname.
    """

    def __call__(
        self,
        contact_name: str,
        existing_contact_names: List[str],
        family_group_names: List[str],
        friend_group_names: List[str],
    ) -> GroupSuggestion:
        parts = contact_name.split()
        if len(parts) < 2:
            return GroupSuggestion(suggested_group=None, confidence=0.0)

        surname = parts[-1].casefold()
        relatives = sum(
            1 for name in existing_contact_names
            if name.split() and name.split()[-1].casefold() == surname and name != contact_name
        )
        candidates = [name for name in family_group_names if surname in name.casefold()]
        if not candidates:
            return GroupSuggestion(suggested_group=None, confidence=0.0)

        # the household group itself beats its branches and sub-circles
        households = [name for name in candidates if any(k in name.casefold() for k in HOUSEHOLD_KEYWORDS)]
        return GroupSuggestion(suggested_group=(households or candidates)[0], confidence=0.9 if relatives else 0.6)


def build_suggester(url: Optional[str], timeout: float = 10.0) -> GroupSuggester:
    """HTTP suggester when an endpoint is configured, the local heuristic otherwise."""
    if url:
        return HttpGroupSuggester(url, timeout=timeout)
    return SurnameGroupSuggester()


def classify_group_names(names: List[str]) -> Dict[str, List[str]]:
    """Split group names into family-like and friend-like lists by keyword."""
    family = [n for n in names if any(k in n.casefold() for k in FAMILY_KEYWORDS)]
    friend = [n for n in names if any(k in n.casefold() for k in FRIEND_KEYWORDS)]
    return {"family": family, "friend": friend}


class SuggestionService(BaseService):
    """Service that resolves smart group suggestions onto stored groups."""

    def __init__(self, db: InMemoryDatabase, suggester: GroupSuggester):
        super().__init__("SuggestionService")
        self._db = db
        self._suggester = suggester
        self.initialize()

    @service_method
    def suggest_for(self, contact_name: str) -> ServiceResult[Dict[str, Any]]:
        """
        Ask the suggester for a group and look it up by case-insensitive name.

        The store locks are released before the suggester is called.
        """
        contact_name = (contact_name or "").strip()
        if not contact_name:
            raise ValidationError("Contact name is required for suggestions", "contact_name", contact_name)

        with self._db.groups.lock, self._db.contacts.lock:
            existing_names = [c.name for c in self._db.contacts.list_all()]
            group_names = sorted((g.name for g in self._db.groups.list_all()), key=str.casefold)
        lists = classify_group_names(group_names)

        suggestion = self._suggester(contact_name, existing_names, lists["family"], lists["friend"])
        self.logger.info(
            f"Suggestion for {contact_name!r}: {suggestion.suggested_group!r} ({suggestion.confidence:.2f})"
        )

        group = None
        if suggestion.suggested_group:
            group = self.get_dependency("groups").find_by_name(suggestion.suggested_group).unwrap()

        warnings = []
        if suggestion.suggested_group and group is None:
            warnings.append(f"Suggested group {suggestion.suggested_group!r} does not exist")
        return ServiceResult.success_result({
            "suggested_group": suggestion.suggested_group,
            "confidence": suggestion.confidence,
            "group": group,
        }, warnings=warnings)

    @service_method
    def accept(self, contact_id: str, group_name: str) -> ServiceResult[Any]:
        """Add the contact to the group whose name matches ``group_name``."""
        group = self.get_dependency("groups").find_by_name(group_name).unwrap()
        if group is None:
            raise NotFoundError("Group", group_name)
        return self.get_dependency("contacts").add_to_group(contact_id, group.id)
