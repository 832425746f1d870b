"""
Contact models.

This module defines the contact record and its value objects: labeled postal
addresses, per-language display names and provenance sources.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set
import enum


class ContactSource(enum.Enum):
    """Enumeration for the channel a contact was obtained from."""
    GMAIL = "gmail"
    SIM = "sim"
    WHATSAPP = "whatsapp"
    OTHER = "other"
    CSV = "csv"


class DisplayLanguage(enum.Enum):
    """Enumeration for supported display-name languages."""
    EN = "en"
    GU = "gu"
    HI = "hi"


@dataclass
class LabeledAddress:
    """Postal address with an optional label such as "Home" or "Work"."""
    label: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None

    def is_empty(self) -> bool:
        return not any((self.label, self.street, self.city, self.state, self.zip, self.country))

    def searchable_values(self) -> List[str]:
        return [v for v in (self.street, self.city, self.state, self.zip, self.country) if v]


@dataclass(frozen=True)
class DisplayName:
    """Name of the contact as written in one of the supported languages."""
    lang: DisplayLanguage
    name: str


@dataclass
class Contact:
    """
    Contact record held by the contact store.

    ``group_ids`` references groups by id; the group side never stores a
    member list. ``sources`` is informational only.
    """
    id: str
    name: str
    phone_number: str
    email: Optional[str] = None
    notes: Optional[str] = None
    avatar_url: Optional[str] = None
    alternative_numbers: List[str] = field(default_factory=list)
    addresses: List[LabeledAddress] = field(default_factory=list)
    display_names: List[DisplayName] = field(default_factory=list)
    group_ids: Set[str] = field(default_factory=set)
    sources: Set[ContactSource] = field(default_factory=set)

    def display_name(self, lang: DisplayLanguage) -> Optional[str]:
        """Return the display name for ``lang`` if one is set."""
        for entry in self.display_names:
            if entry.lang == lang:
                return entry.name
        return None
