import pytest

from contactnexus.models import Contact, Group
from contactnexus.services.base import CycleError, NotFoundError, ValidationError


@pytest.fixture
def chain(db, services):
    """A -> B -> C with contact X tagged {C}; D is an unrelated root."""
    groups = services.groups
    a = groups.create_group("A").unwrap()
    b = groups.create_group("B", parent_id=a.id).unwrap()
    c = groups.create_group("C", parent_id=b.id).unwrap()
    d = groups.create_group("D").unwrap()
    db.contacts.insert(Contact(id="x", name="X", phone_number="1", group_ids={c.id}))
    return a, b, c, d


def test_create_group_assigns_fresh_id(services):
    first = services.groups.create_group("Close Friends", description="  ").unwrap()
    second = services.groups.create_group("Close Friends").unwrap()
    assert first.id != second.id
    assert first.description is None
    assert first.parent_id is None


def test_create_group_rejects_blank_name(services):
    result = services.groups.create_group("")
    assert not result.success
    assert isinstance(result.error, ValidationError)

    with pytest.raises(ValidationError):
        services.groups.create_group("   ").unwrap()


def test_create_group_rejects_unknown_parent(db, services):
    result = services.groups.create_group("Close Friends", parent_id="nonexistent")
    assert isinstance(result.error, NotFoundError)
    assert len(db.groups) == 0


def test_blank_parent_means_root(services):
    group = services.groups.create_group("Root", parent_id="").unwrap()
    assert group.parent_id is None


def test_chain_member_counts(services, chain):
    a, b, c, _ = chain
    for group in (a, b, c):
        assert services.groups.get_member_count(group.id).unwrap() == 1


def test_update_group_to_itself_is_cycle(services, chain):
    a, _, _, _ = chain
    result = services.groups.update_group(a.id, "A", parent_id=a.id)
    assert isinstance(result.error, CycleError)
    assert a.parent_id is None


def test_update_group_under_descendant_is_cycle(services, chain):
    a, b, c, _ = chain
    for descendant in services.groups.get_descendant_ids(a.id).unwrap():
        result = services.groups.update_group(a.id, "A", parent_id=descendant)
        assert isinstance(result.error, CycleError)
    assert a.parent_id is None
    assert b.parent_id == a.id


def test_update_group_under_other_group_succeeds(services, chain):
    a, b, c, d = chain
    moved = services.groups.update_group(a.id, "A renamed", description="top", parent_id=d.id).unwrap()
    assert moved.parent_id == d.id
    assert moved.name == "A renamed"
    assert moved.description == "top"
    assert services.groups.get_member_count(d.id).unwrap() == 1

    # moving a group up under one of its own ancestors is allowed
    assert services.groups.update_group(c.id, "C", parent_id=a.id).unwrap().parent_id == a.id


def test_update_group_errors(services, chain):
    a, _, _, _ = chain
    assert isinstance(services.groups.update_group("missing", "X").error, NotFoundError)
    assert isinstance(services.groups.update_group(a.id, "").error, ValidationError)
    assert isinstance(services.groups.update_group(a.id, "A", parent_id="missing").error, NotFoundError)


def test_delete_middle_group_reparents_children(db, services, chain):
    a, b, c, _ = chain
    result = services.groups.delete_group(b.id)
    assert result.success
    assert result.metadata["reparented"] == [c.id]

    assert isinstance(services.groups.get_group(b.id).error, NotFoundError)
    assert db.groups.find_by_id(c.id).parent_id == a.id
    assert services.groups.get_member_count(a.id).unwrap() == 1

    forest = services.groups.get_hierarchy().unwrap()
    a_node = next(n for n in forest if n.id == a.id)
    assert [n.id for n in a_node.children] == [c.id]
    assert a_node.children[0].level == 1


def test_delete_root_promotes_children_to_roots(db, services, chain):
    a, b, _, _ = chain
    services.groups.delete_group(a.id).unwrap()
    assert db.groups.find_by_id(b.id).parent_id is None


def test_delete_group_untags_contacts(db, services, chain):
    _, _, c, _ = chain
    result = services.groups.delete_group(c.id)
    assert result.metadata["contacts_updated"] == 1
    assert db.contacts.find_by_id("x").group_ids == set()


def test_delete_missing_group(services):
    assert isinstance(services.groups.delete_group("missing").error, NotFoundError)


def test_lineage(services, chain):
    a, b, c, _ = chain
    lineage = services.groups.get_group_lineage(b.id).unwrap()
    assert lineage["group"].id == b.id
    assert [g.id for g in lineage["parent_chain"]] == [a.id]
    assert [n.id for n in lineage["child_tree"]] == [c.id]
    assert lineage["child_tree"][0].level == 2
    assert lineage["member_count"] == 1


def test_list_and_children(services, chain):
    a, b, _, d = chain
    roots = services.groups.list_groups(roots_only=True).unwrap()
    assert {g.id for g in roots} == {a.id, d.id}
    assert [g.id for g in services.groups.list_groups(parent_id=a.id).unwrap()] == [b.id]
    assert [g.id for g in services.groups.children_of(a.id).unwrap()] == [b.id]
    assert isinstance(services.groups.children_of("missing").error, NotFoundError)


def test_members_sorted_by_name(db, services, chain):
    a, _, _, _ = chain
    db.contacts.insert(Contact(id="y", name="alice", phone_number="2", group_ids={a.id}))
    assert [c.id for c in services.groups.get_members(a.id).unwrap()] == ["y", "x"]


def test_hierarchy_search(services, chain):
    a, b, c, _ = chain
    forest = services.groups.get_hierarchy(search="c").unwrap()
    assert [n.id for n in forest] == [a.id]
    assert forest[0].children[0].children[0].id == c.id


def test_find_by_name_is_case_insensitive(db, services):
    db.groups.insert(Group(id="g1", name="Savani Parivar"))
    assert services.groups.find_by_name("savani parivar").unwrap().id == "g1"
    assert services.groups.find_by_name("Savani").unwrap() is None
