"""
Contact Import/Export Service

This service moves contact lists in and out of the stores. Imported records
always receive fresh ids before insertion; exported listings resolve group
references to group names through the group store.
"""

import csv
import io
import logging
from typing import Any, Dict, Iterable, List, Optional

from contactnexus.core.store import InMemoryDatabase
from contactnexus.models import Contact, ContactSource
from contactnexus.services.base import BaseService, ServiceResult, service_method, ValidationError

logger = logging.getLogger(__name__)

EXPORT_FORMATS = {
    "csv": ("text/csv", "contacts.csv"),
    "txt": ("text/plain", "contacts.txt"),
}

CSV_COLUMNS = [
    "name", "phone_number", "email", "alternative_numbers", "groups",
    "display_names", "addresses", "notes", "sources",
]
ADDRESS_PARTS = ("label", "street", "city", "state", "zip", "country")
LIST_DELIMITER = ";"
ADDRESS_DELIMITER = "|"


def join_values(values: Iterable[str], delimiter: str = LIST_DELIMITER) -> str:
    """
    Pack several values into one cell.

    Values holding the delimiter or a quote are quoted CSV-style, so they
    come back intact from :func:`split_values`.
    """
    values = list(values)
    if not values:
        return ""
    buffer = io.StringIO()
    csv.writer(buffer, delimiter=delimiter, lineterminator="\n").writerow(values)
    return buffer.getvalue()[:-1]


def _read_row(value: str, delimiter: str) -> List[str]:
    return next(csv.reader(io.StringIO(value), delimiter=delimiter, skipinitialspace=True), [])


def split_values(value: Optional[str], delimiter: str = LIST_DELIMITER) -> List[str]:
    """Unpack a cell written by :func:`join_values`; blank entries are dropped."""
    if not value or not value.strip():
        return []
    return [part.strip() for part in _read_row(value, delimiter) if part.strip()]


def format_address(address) -> str:
    return join_values((getattr(address, part) or "" for part in ADDRESS_PARTS), ADDRESS_DELIMITER)


def parse_address(value: str) -> Dict[str, Optional[str]]:
    parts = _read_row(value, ADDRESS_DELIMITER)
    parts += [""] * (len(ADDRESS_PARTS) - len(parts))
    return {name: (part.strip() or None) for name, part in zip(ADDRESS_PARTS, parts)}


def parse_csv(text: str) -> List[Dict[str, Any]]:
    """Read the CSV export layout back into import records."""
    reader = csv.DictReader(io.StringIO(text))
    if reader.fieldnames is None or "name" not in reader.fieldnames:
        raise ValidationError("CSV must have a header row with a 'name' column", "header", reader.fieldnames)

    records = []
    for row in reader:
        display_names = {}
        for entry in split_values(row.get("display_names")):
            lang, _, name = entry.partition("=")
            display_names[lang.strip()] = name.strip()
        records.append({
            "name": row.get("name"),
            "phone_number": row.get("phone_number"),
            "email": row.get("email"),
            "alternative_numbers": split_values(row.get("alternative_numbers")),
            "group_names": split_values(row.get("groups")),
            "display_names": display_names,
            "addresses": [parse_address(a) for a in split_values(row.get("addresses"))],
            "notes": row.get("notes"),
            "sources": split_values(row.get("sources")),
        })
    return records


class TransferService(BaseService):
    """Service for contact import and export."""

    def __init__(self, db: InMemoryDatabase):
        super().__init__("TransferService")
        self._db = db
        self.initialize()

    def _group_names(self, contact: Contact) -> List[str]:
        names = []
        for group_id in contact.group_ids:
            group = self._db.groups.find_by_id(group_id)
            if group is not None:
                names.append(group.name)
        return sorted(names, key=str.casefold)

    # ------------------------------------------------------------------
    # Import
    # ------------------------------------------------------------------
    @service_method
    def import_contacts(self, records: List[Dict[str, Any]], source: str = "csv") -> ServiceResult[List[Contact]]:
        """
        Create a contact for every valid record.

        Ids in the records are ignored. Unknown group references are dropped
        and invalid records skipped; both are reported as warnings.
        """
        try:
            source = ContactSource(source)
        except ValueError:
            raise ValidationError(f"Unknown contact source: {source}", "source", source)

        contacts_service = self.get_dependency("contacts")
        groups_service = self.get_dependency("groups")
        created: List[Contact] = []
        warnings: List[str] = []

        for row_number, record in enumerate(records, start=1):
            data = {key: value for key, value in record.items() if key not in ("id", "group_names")}

            group_ids = []
            for group_id in record.get("group_ids") or []:
                if group_id in self._db.groups:
                    group_ids.append(group_id)
                else:
                    warnings.append(f"Record {row_number}: unknown group id {group_id} dropped")
            for group_name in record.get("group_names") or []:
                group = groups_service.find_by_name(group_name).unwrap()
                if group is None:
                    warnings.append(f"Record {row_number}: unknown group {group_name!r} dropped")
                else:
                    group_ids.append(group.id)
            data["group_ids"] = group_ids

            sources = list(data.get("sources") or [])
            sources.append(source)
            data["sources"] = sources

            result = contacts_service.create_contact(data)
            if result.success:
                created.append(result.data)
            else:
                warnings.append(f"Record {row_number} skipped: {result.error.message}")

        self.logger.info(f"Imported {len(created)} of {len(records)} contacts from {source.value}")
        return ServiceResult.success_result(
            created,
            metadata={"imported": len(created), "skipped": len(records) - len(created)},
            warnings=warnings,
        )

    @service_method
    def import_csv(self, text: str, source: str = "csv") -> ServiceResult[List[Contact]]:
        return self.import_contacts(parse_csv(text), source=source)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------
    def export_row(self, contact: Contact) -> Dict[str, str]:
        """Flatten a contact into CSV column values."""
        return {
            "name": contact.name,
            "phone_number": contact.phone_number,
            "email": contact.email or "",
            "alternative_numbers": join_values(contact.alternative_numbers),
            "groups": join_values(self._group_names(contact)),
            "display_names": join_values(f"{d.lang.value}={d.name}" for d in contact.display_names),
            "addresses": join_values(format_address(a) for a in contact.addresses),
            "notes": contact.notes or "",
            "sources": join_values(sorted(s.value for s in contact.sources)),
        }

    def render_csv(self, contacts: List[Contact]) -> str:
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=CSV_COLUMNS, lineterminator="\n")
        writer.writeheader()
        for contact in contacts:
            writer.writerow(self.export_row(contact))
        return buffer.getvalue()

    def render_text(self, contacts: List[Contact]) -> str:
        blocks = []
        for contact in contacts:
            lines = [f"Name: {contact.name}", f"Phone: {contact.phone_number}"]
            if contact.email:
                lines.append(f"Email: {contact.email}")
            if contact.alternative_numbers:
                lines.append(f"Alternative numbers: {', '.join(contact.alternative_numbers)}")
            groups = self._group_names(contact)
            if groups:
                lines.append(f"Groups: {', '.join(groups)}")
            for address in contact.addresses:
                label = address.label or "Address"
                lines.append(f"{label}: {', '.join(address.searchable_values())}")
            if contact.notes:
                lines.append(f"Notes: {contact.notes}")
            blocks.append("\n".join(lines))
        return "\n\n".join(blocks) + ("\n" if blocks else "")

    @service_method
    def export_contacts(self, fmt: str = "csv", group_id: Optional[str] = None) -> ServiceResult[str]:
        """Render all contacts (or one group's subtree) as CSV or plain text."""
        if fmt not in EXPORT_FORMATS:
            raise ValidationError(f"Unsupported export format: {fmt}", "format", fmt)

        contacts = self.get_dependency("contacts").list_contacts(group_id=group_id).unwrap()
        body = self.render_csv(contacts) if fmt == "csv" else self.render_text(contacts)
        media_type, filename = EXPORT_FORMATS[fmt]

        self.logger.info(f"Exported {len(contacts)} contacts as {fmt}")
        return ServiceResult.success_result(
            body, metadata={"count": len(contacts), "media_type": media_type, "filename": filename}
        )
