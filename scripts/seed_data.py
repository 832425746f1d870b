#!/usr/bin/env python3
"""
Seed fixture generator for ContactNexus.

This script writes a JSON fixture with a realistic group hierarchy and
mock contacts generated with Faker. Start the API with ``SEED_FILE``
pointing at the generated file to load it instead of the demo data.

Usage:
    python scripts/seed_data.py [small] [output.json]
"""

import json
import random
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from faker import Faker

# Initialize Faker
fake = Faker()
Faker.seed(42)  # For reproducible data
random.seed(42)


class DataSeeder:
    """Builds the group tree and contacts of a fixture file."""

    def __init__(self):
        self.groups: List[Dict[str, Any]] = []
        self.contacts: List[Dict[str, Any]] = []
        self._group_counter = 0
        self._contact_counter = 0

    def _add_group(self, name: str, parent_id: Optional[str] = None, description: Optional[str] = None) -> str:
        self._group_counter += 1
        group_id = f"group-{self._group_counter:04d}"
        group = {"id": group_id, "name": name, "parent_id": parent_id}
        if description:
            group["description"] = description
        self.groups.append(group)
        return group_id

    def create_groups(self, family_count: int = 5):
        """Create family trees plus friend and professional circles."""
        print(f"👥 Creating {family_count} family trees...")

        society = self._add_group("Community Society", description="Main community group")
        for _ in range(family_count):
            surname = fake.unique.last_name()
            family = self._add_group(f"{surname} Family", society, f"{surname} relatives")
            for _ in range(random.randint(1, 3)):
                self._add_group(f"{surname} - {fake.city()} Branch", family)
            self._add_group(f"{surname} Cousins", family)

        friends = self._add_group("Friends Circle", description="General friends group")
        self._add_group("College Buddies", friends)
        self._add_group("Childhood Friends", friends)

        network = self._add_group("Professional Network", description="Work and career related contacts")
        for _ in range(3):
            self._add_group(f"Colleagues - {fake.company()}", network)

        self._add_group("Sports Club Members")
        print(f"✅ Created {len(self.groups)} groups")

    def create_contacts(self, count: int = 60):
        """Create contacts tagged with one to three random groups."""
        print(f"👤 Creating {count} contacts...")

        group_ids = [g["id"] for g in self.groups]
        for _ in range(count):
            self._contact_counter += 1
            contact = {
                "id": f"contact-{self._contact_counter:05d}",
                "name": fake.name(),
                "phone_number": fake.msisdn()[:10],
                "group_ids": random.sample(group_ids, k=random.randint(1, 3)),
                "sources": random.sample(["gmail", "sim", "whatsapp", "other"], k=random.randint(0, 2)),
            }
            if random.random() < 0.7:
                contact["email"] = fake.email()
            if random.random() < 0.3:
                contact["alternative_numbers"] = [fake.msisdn()[:10] for _ in range(random.randint(1, 2))]
            if random.random() < 0.5:
                contact["addresses"] = [{
                    "label": random.choice(["Home", "Work", "Other"]),
                    "street": fake.street_address(),
                    "city": fake.city(),
                    "state": fake.state(),
                    "zip": fake.postcode(),
                    "country": fake.country(),
                }]
            if random.random() < 0.3:
                contact["notes"] = fake.sentence()
            self.contacts.append(contact)

        print(f"✅ Created {count} contacts")

    def write(self, path: Path):
        path.write_text(
            json.dumps({"groups": self.groups, "contacts": self.contacts}, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        print(f"📄 Fixture written to {path}")


def main():
    """Main fixture generation function."""
    args = sys.argv[1:]
    small = bool(args) and args[0] == "small"
    if small:
        args = args[1:]
    output = Path(args[0]) if args else Path("seed_data.json")

    seeder = DataSeeder()
    if small:
        # Smaller dataset for quick testing
        seeder.create_groups(family_count=2)
        seeder.create_contacts(count=20)
    else:
        seeder.create_groups()
        seeder.create_contacts()
    seeder.write(output)


if __name__ == "__main__":
    main()
