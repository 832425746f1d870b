"""
Seed data for the in-memory stores.

Provides the built-in demo address book and a loader for JSON fixtures
generated by ``scripts/seed_data.py``. Seed records arrive with their own
stable ids; they are loaded as-is rather than created through the services.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from contactnexus.core.store import InMemoryDatabase
from contactnexus.models import (
    Contact, ContactSource, DisplayLanguage, DisplayName, Group, LabeledAddress
)

logger = logging.getLogger(__name__)


DEMO_GROUPS: List[Dict[str, Any]] = [
    # Top level society
    {"id": "patel-society", "name": "Patel Society", "description": "Main community group"},

    # Savani family
    {"id": "savani-family", "name": "Savani Parivar", "parent_id": "patel-society", "description": "Savani kutumb members"},
    {"id": "savani-bhavnagar", "name": "Savani - Bhavnagar Branch", "parent_id": "savani-family", "description": "Immediate family in Bhavnagar"},
    {"id": "savani-nanasurka", "name": "Savani - Nanasurka Village", "parent_id": "savani-family", "description": "Relatives from Nanasurka"},
    {"id": "savani-elders", "name": "Savani Elders", "parent_id": "savani-family", "description": "Uncles, Aunts from Savani side"},
    {"id": "savani-cousins", "name": "Savani Cousins", "parent_id": "savani-family", "description": "Cousins from Savani side"},

    # Golakiya family
    {"id": "golakiya-family", "name": "Golakiya Parivar", "parent_id": "patel-society", "description": "Golakiya kutumb members"},
    {"id": "golakiya-immediate", "name": "Golakiya - Immediate Circle", "parent_id": "golakiya-family", "description": "Close family members"},
    {"id": "golakiya-relatives", "name": "Golakiya Relatives", "parent_id": "golakiya-family", "description": "Extended family"},

    # Soni family
    {"id": "soni-family", "name": "Soni Parivar", "parent_id": "patel-society", "description": "Soni kutumb members"},
    {"id": "soni-main", "name": "Soni - Main Household", "parent_id": "soni-family"},

    # Friends
    {"id": "friends-main", "name": "Friends Circle", "description": "General friends group"},
    {"id": "friends-college", "name": "College Buddies", "parent_id": "friends-main", "description": "Friends from engineering college"},
    {"id": "friends-childhood", "name": "Childhood Friends", "parent_id": "friends-main"},

    # Professional
    {"id": "prof-network", "name": "Professional Network", "description": "Work and career related contacts"},
    {"id": "prof-colleagues", "name": "Work Colleagues - Tech Solutions Inc.", "parent_id": "prof-network"},
    {"id": "prof-teachers-school", "name": "School Teachers (VKM High)", "parent_id": "prof-network"},
    {"id": "prof-professors-college", "name": "College Professors (NIT Surat)", "parent_id": "prof-network"},
    {"id": "clients-customers", "name": "Clients & Customers", "parent_id": "prof-network", "description": "Business clients"},

    {"id": "club-sports", "name": "Sports Club Members"},
]

DEMO_CONTACTS: List[Dict[str, Any]] = [
    {
        "id": "contact-ramesh-savani",
        "name": "Rameshbhai Savani",
        "phone_number": "9825011111",
        "email": "ramesh.savani@example.in",
        "sources": ["sim", "whatsapp"],
        "group_ids": ["savani-family", "savani-bhavnagar", "patel-society"],
        "notes": "Head of Bhavnagar Savani family. Retired businessman.",
        "addresses": [
            {"label": "Home (Bhavnagar)", "street": "101, Diamond Chowk", "city": "Bhavnagar", "state": "Gujarat", "zip": "364001", "country": "India"},
        ],
        "display_names": [{"lang": "gu", "name": "રમેશભાઈ સવાણી"}],
    },
    {
        "id": "contact-mukesh-savani",
        "name": "Mukesh Savani",
        "phone_number": "9925022222",
        "email": "mukesh.s@example.in",
        "sources": ["gmail", "whatsapp"],
        "group_ids": ["savani-family", "savani-nanasurka", "patel-society", "savani-elders"],
        "notes": "Lives in Nanasurka village. Farmer.",
        "addresses": [
            {"label": "Home (Nanasurka)", "street": "Savani Faliyu", "city": "Nanasurka", "state": "Gujarat", "zip": "364060", "country": "India"},
        ],
    },
    {
        "id": "contact-rahul-savani",
        "name": "Rahul Savani",
        "phone_number": "9624044444",
        "email": "rahul.s.eng@example.in",
        "sources": ["whatsapp"],
        "group_ids": ["savani-family", "savani-bhavnagar", "patel-society", "prof-network", "friends-college"],
        "notes": "Software Engineer at Tech Solutions Inc.",
        "alternative_numbers": ["8800544444"],
        "addresses": [
            {"label": "Work", "street": "5th Floor, Tech Park", "city": "Ahmedabad", "state": "Gujarat", "zip": "380015", "country": "India"},
        ],
    },
    {
        "id": "contact-aarav-savani",
        "name": "Aarav Savani",
        "phone_number": "9586055555",
        "group_ids": ["savani-family", "savani-nanasurka", "savani-cousins", "patel-society", "friends-childhood"],
        "notes": "Studying in college.",
    },
    {
        "id": "contact-ashok-golakiya",
        "name": "Ashokbhai Golakiya",
        "phone_number": "9879012345",
        "email": "ashok.g@example.in",
        "sources": ["sim"],
        "group_ids": ["golakiya-family", "golakiya-immediate", "patel-society", "clients-customers"],
        "notes": "Owns a hardware store.",
        "addresses": [
            {"label": "Store", "street": "Golakiya Hardware, Station Road", "city": "Surat", "state": "Gujarat", "zip": "395003", "country": "India"},
            {"label": "Home", "street": "A-1, Vesu Residency", "city": "Surat", "state": "Gujarat", "zip": "395007", "country": "India"},
        ],
    },
    {
        "id": "contact-deepak-golakiya",
        "name": "Deepak Golakiya",
        "phone_number": "9712067890",
        "email": "deepak.golakiya@example.in",
        "sources": ["gmail", "whatsapp"],
        "group_ids": ["golakiya-family", "golakiya-relatives", "patel-society", "prof-colleagues"],
    },
    {
        "id": "contact-hitesh-soni",
        "name": "Hitesh Soni",
        "phone_number": "9426054321",
        "email": "hsoni.jewellers@example.com",
        "group_ids": ["soni-family", "soni-main", "patel-society", "clients-customers"],
        "notes": "Jeweller.",
        "addresses": [
            {"label": "Shop", "street": "Soni Jewellers, MG Road", "city": "Mumbai", "state": "Maharashtra", "zip": "400001", "country": "India"},
        ],
    },
    {
        "id": "contact-tirth-shah",
        "name": "Tirth Shah",
        "phone_number": "9099010101",
        "email": "tirth.shah@example.com",
        "sources": ["whatsapp", "gmail"],
        "group_ids": ["friends-main", "friends-college", "prof-colleagues"],
        "display_names": [{"lang": "gu", "name": "તીર્થ શાહ"}],
    },
    {
        "id": "contact-jay-patel",
        "name": "Jay Patel",
        "phone_number": "9099020202",
        "sources": ["whatsapp"],
        "group_ids": ["friends-main", "friends-college", "club-sports"],
        "notes": "Plays cricket with Rahul.",
    },
    {
        "id": "contact-fenil-mehta",
        "name": "Fenil Mehta",
        "phone_number": "9099030303",
        "email": "fenil.m@example.com",
        "group_ids": ["friends-main", "friends-childhood"],
    },
    {
        "id": "contact-shreeja-iyer",
        "name": "Shreeja Iyer",
        "phone_number": "9099080808",
        "email": "shreeja.iyer@example.com",
        "sources": ["gmail"],
        "group_ids": ["friends-main", "friends-college", "prof-colleagues"],
        "notes": "Team lead at Tech Solutions Inc.",
        "display_names": [{"lang": "hi", "name": "श्रीजा अय्यर"}],
    },
    {
        "id": "contact-prof-anil",
        "name": "Professor Anil Kumar",
        "phone_number": "9099110011",
        "group_ids": ["prof-network", "prof-professors-college"],
    },
    {
        "id": "contact-sunita-gandhi",
        "name": "Sunita Gandhi",
        "phone_number": "9099150015",
        "group_ids": ["golakiya-relatives", "club-sports"],
    },
    {
        "id": "contact-kiran-desai",
        "name": "Kiran Desai",
        "phone_number": "9099190019",
        "group_ids": ["friends-childhood", "club-sports"],
    },
]


def group_from_dict(data: Dict[str, Any]) -> Group:
    return Group(
        id=data["id"],
        name=data["name"],
        description=data.get("description"),
        parent_id=data.get("parent_id"),
    )


def contact_from_dict(data: Dict[str, Any]) -> Contact:
    return Contact(
        id=data["id"],
        name=data["name"],
        phone_number=data["phone_number"],
        email=data.get("email"),
        notes=data.get("notes"),
        avatar_url=data.get("avatar_url"),
        alternative_numbers=list(data.get("alternative_numbers", [])),
        addresses=[LabeledAddress(**a) for a in data.get("addresses", [])],
        display_names=[
            DisplayName(lang=DisplayLanguage(d["lang"]), name=d["name"]) for d in data.get("display_names", [])
        ],
        group_ids=set(data.get("group_ids", [])),
        sources={ContactSource(s) for s in data.get("sources", [])},
    )


def load_records(db: InMemoryDatabase, groups: List[Dict[str, Any]], contacts: List[Dict[str, Any]]) -> Dict[str, int]:
    """Insert fixture records with their own ids."""
    with db.groups.lock, db.contacts.lock:
        for data in groups:
            db.groups.insert(group_from_dict(data))
        for data in contacts:
            db.contacts.insert(contact_from_dict(data))
    logger.info(f"Loaded {len(groups)} groups and {len(contacts)} contacts")
    return {"groups": len(groups), "contacts": len(contacts)}


def load_demo_data(db: InMemoryDatabase) -> Dict[str, int]:
    """Populate ``db`` with the built-in demo address book."""
    return load_records(db, DEMO_GROUPS, DEMO_CONTACTS)


def load_seed_file(db: InMemoryDatabase, path: Union[str, Path]) -> Dict[str, int]:
    """Populate ``db`` from a JSON fixture with ``groups`` and ``contacts`` lists."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return load_records(db, data.get("groups", []), data.get("contacts", []))
