import asyncio

import pytest
from fastapi.testclient import TestClient

from contactnexus.config.settings import Settings
from contactnexus.core.seed import load_demo_data, load_records
from contactnexus.core.store import InMemoryDatabase
from contactnexus.main import create_app
from contactnexus.services.base import SuggestionError
from contactnexus.services.integration.suggestion_service import GroupSuggestion, SurnameGroupSuggester

API = "/api/v1"


@pytest.fixture
def db():
    database = InMemoryDatabase()
    load_demo_data(database)
    return database


@pytest.fixture
def client(db):
    app = create_app(settings=Settings(debug=False), db=db, suggester=SurnameGroupSuggester())
    with TestClient(app) as test_client:
        yield test_client


def _create_group(client, name, parent_id=None):
    response = client.post(f"{API}/groups/", json={"name": name, "parent_id": parent_id})
    assert response.status_code == 201
    return response.json()


def test_root_and_health(client, db):
    assert client.get("/").json()["endpoints"]["groups"] == f"{API}/groups"
    health = client.get("/health").json()
    assert health["status"] == "healthy"
    assert health["store"] == db.get_metrics()


def test_group_crud_and_errors(client):
    a = _create_group(client, "A")
    b = _create_group(client, "B", a["id"])
    c = _create_group(client, "C", b["id"])

    assert client.post(f"{API}/groups/", json={"name": ""}).status_code == 400
    missing_parent = client.post(f"{API}/groups/", json={"name": "Close Friends", "parent_id": "nonexistent"})
    assert missing_parent.status_code == 404
    assert missing_parent.json()["error_code"] == "NOT_FOUND"

    cycle = client.put(f"{API}/groups/{a['id']}", json={"name": "A", "parent_id": c["id"]})
    assert cycle.status_code == 409
    assert cycle.json()["error"] == "CycleError"

    renamed = client.put(f"{API}/groups/{b['id']}", json={"name": "B2", "parent_id": a["id"]})
    assert renamed.status_code == 200
    assert renamed.json()["name"] == "B2"

    assert client.delete(f"{API}/groups/{b['id']}").status_code == 204
    assert client.get(f"{API}/groups/{b['id']}").status_code == 404
    assert client.get(f"{API}/groups/{c['id']}").json()["parent_id"] == a["id"]


def test_group_detail_counts_subtree_members(client):
    detail = client.get(f"{API}/groups/savani-family").json()
    assert detail["parent_group"]["id"] == "patel-society"
    assert detail["child_group_count"] == 4
    assert [g["name"] for g in detail["child_groups"]] == [
        "Savani - Bhavnagar Branch", "Savani - Nanasurka Village", "Savani Cousins", "Savani Elders",
    ]
    assert detail["member_count"] == 4

    members = client.get(f"{API}/groups/savani-family/members").json()
    assert len(members) == 4


def test_group_tree_and_lineage(client):
    tree = client.get(f"{API}/groups/tree").json()
    assert [n["name"] for n in tree] == [
        "Friends Circle", "Patel Society", "Professional Network", "Sports Club Members",
    ]
    society = tree[1]
    assert society["level"] == 0
    assert society["sub_group_count"] == 3
    assert society["children"][0]["level"] == 1

    filtered = client.get(f"{API}/groups/tree", params={"search": "nanasurka"}).json()
    assert [n["id"] for n in filtered] == ["patel-society"]
    assert filtered[0]["children"][0]["children"][0]["id"] == "savani-nanasurka"

    lineage = client.get(f"{API}/groups/hierarchy/savani-bhavnagar").json()
    assert [g["id"] for g in lineage["parent_chain"]] == ["patel-society", "savani-family"]
    assert lineage["child_tree"] == []

    descendants = client.get(f"{API}/groups/friends-main/descendants").json()
    assert descendants["descendant_ids"] == ["friends-childhood", "friends-college", "friends-main"]


def test_contact_lifecycle(client):
    payload = {
        "name": "Hetal Savani",
        "phone_number": "9800011111",
        "email": "",
        "group_ids": ["savani-cousins"],
        "sources": ["sim"],
    }
    created = client.post(f"{API}/contacts/", json=payload)
    assert created.status_code == 201
    contact = created.json()
    assert contact["email"] is None
    assert contact["group_ids"] == ["savani-cousins"]

    detail = client.get(f"{API}/contacts/{contact['id']}").json()
    assert [g["name"] for g in detail["groups"]] == ["Savani Cousins"]

    updated = client.put(f"{API}/contacts/{contact['id']}", json={"name": "Hetal S", "phone_number": "1"})
    assert updated.json()["sources"] == ["sim"]
    assert updated.json()["group_ids"] == []

    added = client.post(f"{API}/contacts/{contact['id']}/groups/friends-main")
    assert added.json()["group_ids"] == ["friends-main"]
    removed = client.delete(f"{API}/contacts/{contact['id']}/groups/friends-main")
    assert removed.json()["group_ids"] == []

    assert client.delete(f"{API}/contacts/{contact['id']}").status_code == 204
    assert client.get(f"{API}/contacts/{contact['id']}").status_code == 404


def test_contact_validation_errors(client):
    assert client.post(f"{API}/contacts/", json={"name": "Jay"}).status_code == 422
    assert client.post(f"{API}/contacts/", json={"name": " ", "phone_number": "1"}).status_code == 400
    unknown_group = client.post(f"{API}/contacts/", json={"name": "Jay", "phone_number": "1", "group_ids": ["ghost"]})
    assert unknown_group.status_code == 404
    assert client.get(f"{API}/contacts/", params={"sort": "age"}).status_code == 400


def test_list_contacts_filters(client):
    by_group = client.get(f"{API}/contacts/", params={"group_id": "friends-main"}).json()
    names = [c["name"] for c in by_group]
    assert names == sorted(names, key=str.casefold)
    assert "Jay Patel" in names and "Aarav Savani" in names

    by_search = client.get(f"{API}/contacts/", params={"search": "jeweller"}).json()
    assert [c["id"] for c in by_search] == ["contact-hitesh-soni"]

    desc = client.get(f"{API}/contacts/", params={"sort": "name-desc"}).json()
    assert desc[0]["name"] == "Tirth Shah"


def test_export_and_import(client, db):
    export = client.get(f"{API}/contacts/export", params={"format": "txt", "group_id": "soni-family"})
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("text/plain")
    assert 'filename="contacts.txt"' in export.headers["content-disposition"]
    assert export.text.startswith("Name: Hitesh Soni")

    before = len(db.contacts)
    body = "name,phone_number,groups\nNew Person,123,Friends Circle; Unknown Group\n,456,\n"
    response = client.post(f"{API}/contacts/import", content=body.encode("utf-8"))
    assert response.status_code == 200
    result = response.json()
    assert result["imported"] == 1 and result["skipped"] == 1
    assert len(result["warnings"]) == 2
    assert len(db.contacts) == before + 1


def test_suggestion_flow(client):
    suggestion = client.post(f"{API}/contacts/suggest-group", json={"contact_name": "Hetal Golakiya"}).json()
    assert suggestion["suggested_group"] == "Golakiya Parivar"
    assert suggestion["group"]["id"] == "golakiya-family"

    accepted = client.post(
        f"{API}/contacts/contact-jay-patel/suggestion/accept", json={"group_name": "golakiya parivar"}
    )
    assert "golakiya-family" in accepted.json()["group_ids"]


def test_suggestion_failure_maps_to_bad_gateway(db):
    def failing(*args):
        raise SuggestionError("suggestion endpoint unreachable")

    app = create_app(settings=Settings(debug=False), db=db, suggester=failing)
    with TestClient(app) as client:
        response = client.post(f"{API}/contacts/suggest-group", json={"contact_name": "Hetal Savani"})
    assert response.status_code == 502
    assert response.json()["error_code"] == "SUGGESTION_ERROR"


def test_group_with_dangling_parent_is_shown_as_root(client, db):
    load_records(db, [{"id": "orphan", "name": "Orphan", "parent_id": "gone"}], [])

    roots = [n["id"] for n in client.get(f"{API}/groups/tree").json()]
    assert "orphan" in roots

    response = client.get(f"{API}/groups/orphan")
    assert response.status_code == 200
    detail = response.json()
    assert detail["parent_id"] == "gone"
    assert detail["parent_group"] is None


def test_import_rejects_body_that_is_not_utf8(client, db):
    before = len(db.contacts)
    response = client.post(f"{API}/contacts/import", content=b"name,phone_number\n\xff\xfe,123\n")
    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"
    assert len(db.contacts) == before


def test_suggester_runs_outside_the_event_loop(db):
    calls = []

    def suggester(contact_name, existing, family, friends):
        try:
            asyncio.get_running_loop()
            calls.append("event loop")
        except RuntimeError:
            calls.append("worker thread")
        return GroupSuggestion(suggested_group="Savani Parivar", confidence=0.5)

    app = create_app(settings=Settings(debug=False), db=db, suggester=suggester)
    with TestClient(app) as client:
        response = client.post(f"{API}/contacts/suggest-group", json={"contact_name": "Hetal Savani"})
    assert response.status_code == 200
    assert calls == ["worker thread"]
