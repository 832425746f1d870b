"""
Domain models package.

Plain in-memory records for groups and contacts. Records are owned by the
stores in :mod:`contactnexus.core.store`; membership is expressed only as
group id references held by contacts.
"""

from contactnexus.models.groups import Group
from contactnexus.models.contacts import (
    Contact, LabeledAddress, DisplayName, ContactSource, DisplayLanguage
)

__all__ = [
    # Group model
    "Group",

    # Contact models
    "Contact",
    "LabeledAddress",
    "DisplayName",

    # Enums
    "ContactSource",
    "DisplayLanguage",
]
