# tests/services/test_lifecycle.py

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest

from app.middleware.error_handler import (
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
)
from app.services.lifecycle import (
    BUSINESS,
    CATALOGUE,
    EVENT,
    KYC,
    Operation,
    apply_partial_update,
    authorize,
    check_version,
    creation_fields,
)

EARLIER = datetime(2026, 1, 1, tzinfo=timezone.utc)
LATER = datetime(2026, 2, 1, tzinfo=timezone.utc)


def make_item(owner_id="owner", status="draft", **fields):
    defaults = {
        "title": "Battery offer",
        "description": "Old",
        "offer_details": "Free fitting",
        "image_urls": ["https://cdn.test/a.png"],
        "version": 1,
        "createdAt": EARLIER,
        "updatedAt": EARLIER,
    }
    defaults.update(fields)
    return SimpleNamespace(owner_id=owner_id, status=status, **defaults)


@pytest.mark.parametrize("status", CATALOGUE.statuses)
@pytest.mark.parametrize("operation", list(Operation))
def test_non_owner_is_always_forbidden(status, operation):
    item = make_item(owner_id="owner", status=status)
    with pytest.raises(ForbiddenError):
        authorize(CATALOGUE, item, "intruder", operation)


@pytest.mark.parametrize("owner_id", ["", None])
def test_missing_owner_is_forbidden(owner_id):
    with pytest.raises(ForbiddenError):
        authorize(CATALOGUE, make_item(owner_id=owner_id), "owner", Operation.READ)


def test_missing_resource_is_not_found():
    with pytest.raises(NotFoundError) as exc_info:
        authorize(EVENT, None, "owner", Operation.READ)
    assert exc_info.value.message == "Event not found."


@pytest.mark.parametrize("policy", [CATALOGUE, EVENT])
@pytest.mark.parametrize("status", ["pending", "verified"])
def test_locked_resources_refuse_update_and_delete(policy, status):
    item = make_item(status=status)

    with pytest.raises(ConflictError) as update_exc:
        authorize(policy, item, "owner", Operation.UPDATE)
    with pytest.raises(ConflictError) as delete_exc:
        authorize(policy, item, "owner", Operation.DELETE)

    assert update_exc.value.message == f"{policy.label} cannot be edited while pending or verified."
    assert delete_exc.value.message == f"{policy.label} cannot be deleted while pending or verified."
    assert authorize(policy, item, "owner", Operation.READ) is item


@pytest.mark.parametrize("status", ["draft", "rejected"])
def test_unlocked_resources_allow_mutation(status):
    item = make_item(status=status)
    assert authorize(CATALOGUE, item, "owner", Operation.UPDATE) is item
    assert authorize(CATALOGUE, item, "owner", Operation.DELETE) is item


def test_business_locks_while_under_review():
    with pytest.raises(ConflictError) as exc_info:
        authorize(BUSINESS, make_item(status="submitted"), "owner", Operation.UPDATE)
    assert exc_info.value.message == "Business cannot be edited while submitted or pending."
    assert authorize(BUSINESS, make_item(status="verified"), "owner", Operation.UPDATE)


def test_authorize_is_repeatable_and_leaves_resource_untouched():
    item = make_item(status="pending")
    before = dict(vars(item))

    outcomes = []
    for _ in range(2):
        try:
            authorize(CATALOGUE, item, "owner", Operation.UPDATE)
            outcomes.append("allowed")
        except ConflictError as exc:
            outcomes.append(exc.message)

    assert outcomes[0] == outcomes[1]
    assert vars(item) == before


@pytest.mark.parametrize("bad_status", ["archived", "PENDING", "", None, 3])
def test_unknown_status_rejects_whole_patch(bad_status):
    item = make_item()
    before = dict(vars(item))

    with pytest.raises(InvalidArgumentError) as exc_info:
        apply_partial_update(CATALOGUE, item, {"title": "New", "status": bad_status}, now=LATER)

    assert exc_info.value.message == "Invalid status."
    assert vars(item) == before


def test_partial_update_touches_only_patched_fields():
    item = make_item()
    before = dict(vars(item))

    apply_partial_update(CATALOGUE, item, {"description": "x"}, now=LATER)

    after = vars(item)
    assert after["description"] == "x"
    assert after["updatedAt"] == LATER
    for field in before:
        if field not in ("description", "updatedAt"):
            assert after[field] == before[field]


def test_partial_update_accepts_known_status():
    item = make_item(status="rejected")
    apply_partial_update(CATALOGUE, item, {"status": "pending"}, now=LATER)
    assert item.status == "pending"
    assert item.updatedAt == LATER


def test_empty_patch_still_stamps_updated_at():
    item = make_item()
    apply_partial_update(EVENT, item, {}, now=LATER)
    assert item.updatedAt == LATER
    assert item.createdAt == EARLIER


def test_creation_fields_fix_owner_status_and_timestamps():
    fields = creation_fields(CATALOGUE, "owner", requested_status="verified", now=LATER)
    assert fields == {
        "owner_id": "owner",
        "status": "draft",
        "createdAt": LATER,
        "updatedAt": LATER,
    }


def test_events_may_be_created_pending():
    assert creation_fields(EVENT, "owner", "pending")["status"] == "pending"
    assert creation_fields(EVENT, "owner", "verified")["status"] == "draft"
    assert creation_fields(KYC, "owner")["status"] == "pending"


def test_check_version_refuses_stale_patch():
    item = make_item(version=3)
    check_version(CATALOGUE, item, None)
    check_version(CATALOGUE, item, 3)
    with pytest.raises(ConflictError):
        check_version(CATALOGUE, item, 2)
