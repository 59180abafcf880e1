import pytest
from google.api_core import exceptions as google_exceptions

from conftest import NOW, seed_object, seed_report
from services.content_store import StoreError, slugify


def test_slugify():
    assert slugify("Potholes issue at 5th & Main") == "potholes-issue-at-5th-main"
    assert slugify("!!!") == "object"


def test_insert_one_builds_stored_shape(store, firestore_db):
    document = store.insert_one("comments", "Comment on abc", {"content": "hi"})

    assert document["type"] == "comments"
    assert document["slug"].startswith("comment-on-abc-")
    assert document["created_at"] == NOW
    assert firestore_db.data["comments"][document["id"]]["metadata"] == {"content": "hi"}


def test_find_filters_and_projects(store, firestore_db):
    seed_object(firestore_db, "comments", {"issue_report": "r1", "content": "a"})
    seed_object(firestore_db, "comments", {"issue_report": "r2", "content": "b"})

    found = store.find("comments", query={"metadata.issue_report": "r1"}, props=["id", "metadata"])

    assert len(found) == 1
    assert set(found[0]) == {"id", "metadata"}
    assert found[0]["metadata"]["content"] == "a"


def test_find_one_missing_is_404(store):
    with pytest.raises(StoreError) as exc:
        store.find_one("issue-reports", {"slug": "nope"})
    assert exc.value.status == 404


def test_find_one_by_slug_and_id(store, firestore_db):
    seeded = seed_report(firestore_db, title="Dark corner")

    assert store.find_one("issue-reports", {"slug": seeded["slug"]})["id"] == seeded["id"]
    assert store.find_one("issue-reports", {"id": seeded["id"]})["slug"] == seeded["slug"]


def test_depth_expands_known_references_only(store, firestore_db):
    department = seed_object(
        firestore_db, "departments", {"contact_email": "pw@city.gov", "categories": ["potholes"]}
    )
    staff = seed_object(
        firestore_db, "staff-members", {"email": "ana@city.gov", "department": department["id"]},
        title="Ana",
    )
    seed_report(firestore_db, assigned_to=staff["id"])
    seed_report(firestore_db, assigned_to="Someone Else")

    reports = store.find("issue-reports", depth=1)
    assigned = sorted(
        (r["metadata"]["assigned_to"] for r in reports), key=lambda value: isinstance(value, dict)
    )

    assert assigned[0] == "Someone Else"
    assert assigned[1]["title"] == "Ana"
    # depth=1 no expande el departamento del personal
    assert assigned[1]["metadata"]["department"] == department["id"]


def test_update_one_merges_metadata(store, firestore_db):
    seeded = seed_report(firestore_db, resolution_notes="old")

    updated = store.update_one("issue-reports", seeded["id"], {"status": "acknowledged"})

    assert updated["metadata"]["status"] == "acknowledged"
    assert updated["metadata"]["resolution_notes"] == "old"
    assert updated["modified_at"] == NOW


def test_update_one_missing_document_is_404(store):
    with pytest.raises(StoreError) as exc:
        store.update_one("issue-reports", "missing", {"status": "closed"})
    assert exc.value.status == 404


def test_google_errors_keep_their_status(store, firestore_db):
    firestore_db.error = google_exceptions.ServiceUnavailable("backend down")

    with pytest.raises(StoreError) as exc:
        store.find("issue-reports")
    assert exc.value.status == 503
