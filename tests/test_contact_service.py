import pytest

from contactnexus.models import ContactSource, DisplayLanguage, Group
from contactnexus.services.base import NotFoundError, ValidationError


@pytest.fixture
def family(db):
    db.groups.insert(Group(id="fam", name="Savani Parivar"))
    db.groups.insert(Group(id="branch", name="Bhavnagar Branch", parent_id="fam"))
    db.groups.insert(Group(id="friends", name="Friends Circle"))


def _create(services, **data):
    data.setdefault("phone_number", "9825011111")
    return services.contacts.create_contact(data)


def test_create_contact_normalizes_fields(services, family):
    contact = _create(
        services,
        name="  Rahul Savani ",
        email="",
        alternative_numbers=["8800544444", "  "],
        addresses=[{"label": "Work", "city": "Ahmedabad"}, {}],
        display_names={"gu": "રાહુલ", "hi": "  "},
        group_ids=["branch"],
        sources=["whatsapp"],
    ).unwrap()

    assert contact.name == "Rahul Savani"
    assert contact.email is None
    assert contact.alternative_numbers == ["8800544444"]
    assert len(contact.addresses) == 1 and contact.addresses[0].city == "Ahmedabad"
    assert contact.display_name(DisplayLanguage.GU) == "રાહુલ"
    assert contact.display_name(DisplayLanguage.HI) is None
    assert contact.group_ids == {"branch"}
    assert contact.sources == {ContactSource.WHATSAPP}


def test_required_fields(services):
    assert _create(services, name=" ").error.message == "Name is required"
    result = services.contacts.create_contact({"name": "Jay"})
    assert isinstance(result.error, ValidationError)
    assert result.error.field == "phone_number"


def test_limits(services):
    too_many_numbers = _create(services, name="Jay", alternative_numbers=[str(n) for n in range(6)])
    assert isinstance(too_many_numbers.error, ValidationError)

    too_many_addresses = _create(services, name="Jay", addresses=[{"city": f"City {n}"} for n in range(4)])
    assert isinstance(too_many_addresses.error, ValidationError)

    assert _create(services, name="Jay", alternative_numbers=["1", "2", "3", "4", "5"]).success


def test_bad_language_and_source(services):
    assert isinstance(_create(services, name="Jay", display_names={"fr": "Jay"}).error, ValidationError)
    assert isinstance(_create(services, name="Jay", sources=["fax"]).error, ValidationError)


def test_unknown_group_is_rejected(db, services):
    result = _create(services, name="Jay", group_ids=["ghost"])
    assert isinstance(result.error, NotFoundError)
    assert len(db.contacts) == 0


def test_update_keeps_sources_unless_given(services, family):
    contact = _create(services, name="Jay", sources=["sim"]).unwrap()

    updated = services.contacts.update_contact(contact.id, {"name": "Jay Patel", "phone_number": "1"}).unwrap()
    assert updated.id == contact.id
    assert updated.name == "Jay Patel"
    assert updated.sources == {ContactSource.SIM}

    cleared = services.contacts.update_contact(contact.id, {"name": "Jay", "phone_number": "1", "sources": []})
    assert cleared.unwrap().sources == set()

    assert isinstance(services.contacts.update_contact("missing", {"name": "x"}).error, NotFoundError)


def test_delete_contact(db, services):
    contact = _create(services, name="Jay").unwrap()
    assert services.contacts.delete_contact(contact.id).success
    assert contact.id not in db.contacts
    assert isinstance(services.contacts.delete_contact(contact.id).error, NotFoundError)


def test_membership_edits(services, family):
    contact = _create(services, name="Jay").unwrap()
    assert services.contacts.add_to_group(contact.id, "friends").unwrap().group_ids == {"friends"}
    assert isinstance(services.contacts.add_to_group(contact.id, "ghost").error, NotFoundError)
    assert services.contacts.remove_from_group(contact.id, "friends").unwrap().group_ids == set()
    # removing a reference that is not there is a no-op
    assert services.contacts.remove_from_group(contact.id, "friends").success


def test_list_filters_by_group_subtree(services, family):
    branch_member = _create(services, name="Ramesh", group_ids=["branch"]).unwrap()
    family_member = _create(services, name="Mukesh", group_ids=["fam", "branch"]).unwrap()
    friend = _create(services, name="Tirth", group_ids=["friends"]).unwrap()

    result = services.contacts.list_contacts(group_id="fam")
    assert [c.id for c in result.unwrap()] == [family_member.id, branch_member.id]
    assert result.metadata["total"] == 2

    assert [c.id for c in services.contacts.list_contacts(group_id="friends").unwrap()] == [friend.id]
    assert isinstance(services.contacts.list_contacts(group_id="ghost").error, NotFoundError)


def test_search_covers_fields_and_group_names(services, family):
    rahul = _create(
        services, name="Rahul", email="rahul@example.in", notes="Software engineer",
        addresses=[{"label": "Work", "city": "Ahmedabad"}], group_ids=["branch"],
    ).unwrap()
    jay = _create(services, name="Jay", alternative_numbers=["8800512345"], display_names={"gu": "જય"}).unwrap()

    def search(term):
        return [c.id for c in services.contacts.list_contacts(search=term).unwrap()]

    assert search("SOFTWARE") == [rahul.id]
    assert search("ahmedabad") == [rahul.id]
    assert search("bhavnagar") == [rahul.id]
    assert search("88005") == [jay.id]
    assert search("જય") == [jay.id]
    assert search("example.in") == [rahul.id]
    assert search("nobody") == []
    # the address label is not searched
    assert search("work") == []


def test_sort_orders(services):
    for name in ("bob", "Alice", "carol"):
        _create(services, name=name)

    asc = [c.name for c in services.contacts.list_contacts().unwrap()]
    desc = [c.name for c in services.contacts.list_contacts(sort="name-desc").unwrap()]
    assert asc == ["Alice", "bob", "carol"]
    assert desc == list(reversed(asc))
    assert isinstance(services.contacts.list_contacts(sort="age").error, ValidationError)


def test_group_names_skip_dangling_ids(db, services, family):
    contact = _create(services, name="Jay", group_ids=["friends", "fam"]).unwrap()
    contact.group_ids.add("deleted-group")
    assert services.contacts.group_names_for(contact.id).unwrap() == ["Friends Circle", "Savani Parivar"]
