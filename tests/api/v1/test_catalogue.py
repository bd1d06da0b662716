# tests/api/v1/test_catalogue.py

from sqlalchemy.exc import OperationalError

from app.core.config import settings
from app.crud import crud_catalogue, crud_flash_sale
from app.services import flash_sale as flash_sale_service
from app.services.uploads import MAX_IMAGE_BYTES
from app.utils.timestamps import now_ms
from tests.utils.catalogue import create_catalogue_item, utc
from tests.utils.flash_sale import create_flash_sale
from tests.utils.uploads import image

CATALOGUE_URL = "/api/v1/catalogue"
HOUR_MS = 60 * 60 * 1000

FORM = {
    "title": "  Winter tyre offer ",
    "description": "All-season tyres",
    "offerDetails": "20% off on a set of four",
}


def post_catalogue(client, headers, data=None, files=None):
    if files is None:
        files = [("images", image("front.png")), ("images", image("side.png"))]
    return client.post(CATALOGUE_URL, headers=headers, data=FORM if data is None else data, files=files)


def test_create_catalogue(test_client, db_session, object_store, owner_headers):
    response = post_catalogue(test_client, owner_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["ok"] is True
    assert body["id"].startswith("cat_")
    assert body["status"] == "draft"
    assert body["message"] == "Catalogue draft saved."

    item = crud_catalogue.catalogue.get(db_session, body["id"])
    assert item.owner_id == "user_owner"
    assert item.title == "Winter tyre offer"
    assert [url.rsplit("_", 1)[-1] for url in item.image_urls] == ["front.png", "side.png"]
    assert all(path.startswith("catalogueImages/user_owner/") for path in object_store.uploaded)


def test_create_keeps_same_named_images_apart(test_client, db_session, object_store, owner_headers):
    files = [("images", image("image.jpg")), ("images", image("image.jpg"))]

    response = post_catalogue(test_client, owner_headers, files=files)

    item = crud_catalogue.catalogue.get(db_session, response.json()["id"])
    assert len(set(item.image_urls)) == 2
    assert len(object_store.objects) == 2


def test_create_ignores_requested_status(test_client, db_session, owner_headers):
    response = post_catalogue(test_client, owner_headers, data={**FORM, "status": "verified"})
    assert response.json()["status"] == "draft"


def test_create_requires_fields(test_client, object_store, owner_headers):
    response = post_catalogue(test_client, owner_headers, data={**FORM, "title": "   "})
    assert response.status_code == 400
    assert response.json() == {"ok": False, "message": "Title is required."}

    response = post_catalogue(test_client, owner_headers, data={**FORM, "offerDetails": ""})
    assert response.json()["message"] == "Offer details is required."
    assert object_store.uploaded == []


def test_create_image_count_limits(test_client, owner_headers):
    response = test_client.post(CATALOGUE_URL, headers=owner_headers, data=FORM)
    assert response.status_code == 400
    assert response.json()["message"] == "Please add at least 1 image."

    files = [("images", image(f"{i}.png")) for i in range(6)]
    response = post_catalogue(test_client, owner_headers, files=files)
    assert response.status_code == 400
    assert response.json()["message"] == "You can upload maximum 5 images."


def test_create_rejects_bad_images(test_client, object_store, owner_headers):
    files = [("images", image()), ("images", ("doc.pdf", b"%PDF", "application/pdf"))]
    response = post_catalogue(test_client, owner_headers, files=files)
    assert response.status_code == 400
    assert response.json()["message"] == "All uploads must be images."

    files = [("images", image(size=MAX_IMAGE_BYTES))]
    response = post_catalogue(test_client, owner_headers, files=files)
    assert response.status_code == 400
    assert response.json()["message"] == "Each image must be under 5MB."
    assert object_store.uploaded == []


def test_create_refused_after_flash_sale_cutoff(test_client, db_session, object_store, owner_headers):
    now = now_ms()
    create_flash_sale(
        db_session,
        starts_at=now - HOUR_MS,
        ends_at=now + HOUR_MS,
        business_cutoff_at=now - 1000,
    )

    response = post_catalogue(test_client, owner_headers)

    assert response.status_code == 403
    assert response.json() == {
        "ok": False,
        "message": "Catalogue cannot be added after the flash sale cutoff.",
    }
    assert object_store.uploaded == []


def test_create_allowed_before_cutoff(test_client, db_session, owner_headers):
    now = now_ms()
    create_flash_sale(
        db_session,
        starts_at=now - HOUR_MS,
        ends_at=now + HOUR_MS,
        cutoff_at=now + HOUR_MS,
    )

    response = post_catalogue(test_client, owner_headers)
    assert response.status_code == 200


def test_unusable_cutoff_does_not_block_creation(test_client, db_session, owner_headers):
    now = now_ms()
    create_flash_sale(
        db_session,
        starts_at=now - HOUR_MS,
        ends_at=now + HOUR_MS,
        business_cutoff_at={"seconds": 1e307},
    )

    response = post_catalogue(test_client, owner_headers)
    assert response.status_code == 200


def test_cutoff_evaluation_failure_fails_open(test_client, db_session, monkeypatch, owner_headers):
    now = now_ms()
    create_flash_sale(db_session, starts_at=now - HOUR_MS, ends_at=now + HOUR_MS, cutoff_at=now - 1000)

    def unreadable(active):
        raise ValueError("unreadable cutoff")

    monkeypatch.setattr(flash_sale_service, "cutoff_at_ms", unreadable)

    response = post_catalogue(test_client, owner_headers)
    assert response.status_code == 200


def test_cutoff_lookup_failure_fails_open(test_client, monkeypatch, owner_headers):
    def unavailable(db):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(crud_flash_sale.flash_sale, "get_all", unavailable)

    response = post_catalogue(test_client, owner_headers)
    assert response.status_code == 200


def test_cutoff_lookup_failure_fails_closed_when_configured(test_client, monkeypatch, object_store, owner_headers):
    def unavailable(db):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(crud_flash_sale.flash_sale, "get_all", unavailable)
    monkeypatch.setattr(settings, "FLASH_SALE_CUTOFF_FAIL_OPEN", False)

    response = post_catalogue(test_client, owner_headers)
    assert response.status_code == 500
    assert response.json() == {"ok": False, "message": "Internal server error."}
    assert object_store.uploaded == []


def test_create_upload_failure(test_client, db_session, object_store, owner_headers):
    object_store.fail_after = 1

    response = post_catalogue(test_client, owner_headers)

    assert response.status_code == 500
    assert response.json() == {"ok": False, "message": "Failed to create catalogue."}
    assert crud_catalogue.catalogue.get_multi_by_owner(db_session, owner_id="user_owner") == []


def test_list_catalogue(test_client, db_session, owner_headers):
    create_catalogue_item(db_session, "user_owner", title="Old", created_at=utc(2026, 1, 1))
    create_catalogue_item(db_session, "user_owner", status="verified", title="New", created_at=utc(2026, 2, 1))
    create_catalogue_item(db_session, "user_other", title="Not mine")

    response = test_client.get(CATALOGUE_URL, headers=owner_headers)

    assert response.status_code == 200
    body = response.json()
    assert [item["title"] for item in body["catalogue"]] == ["New", "Old"]
    first = body["catalogue"][0]
    assert first["ownerId"] == "user_owner"
    assert first["offerDetails"] == "20% off on a set of four"
    assert first["imageUrls"] == ["https://cdn.test/catalogueImages/a.png"]
    assert "createdAt" in first and "updatedAt" in first


def test_list_catalogue_status_filter(test_client, db_session, owner_headers):
    create_catalogue_item(db_session, "user_owner", title="Draft")
    create_catalogue_item(db_session, "user_owner", status="verified", title="Live")

    response = test_client.get(CATALOGUE_URL, params={"status": "verified"}, headers=owner_headers)
    assert [item["title"] for item in response.json()["catalogue"]] == ["Live"]

    response = test_client.get(CATALOGUE_URL, params={"status": "bogus"}, headers=owner_headers)
    assert len(response.json()["catalogue"]) == 2


def test_get_catalogue_item(test_client, db_session, owner_headers, other_headers):
    item = create_catalogue_item(db_session, "user_owner")

    response = test_client.get(f"{CATALOGUE_URL}/{item.id}", headers=owner_headers)
    assert response.status_code == 200
    assert response.json()["item"]["id"] == item.id

    response = test_client.get(f"{CATALOGUE_URL}/{item.id}", headers=other_headers)
    assert response.status_code == 403
    assert response.json() == {"ok": False, "message": "Forbidden."}

    response = test_client.get(f"{CATALOGUE_URL}/cat_missing", headers=owner_headers)
    assert response.status_code == 404
    assert response.json() == {"ok": False, "message": "Catalogue not found."}


def test_patch_updates_only_given_fields(test_client, db_session, owner_headers):
    item = create_catalogue_item(db_session, "user_owner")
    before = item.updatedAt

    response = test_client.patch(
        f"{CATALOGUE_URL}/{item.id}",
        headers=owner_headers,
        json={"title": "  Summer offer  ", "unknown": "ignored"},
    )

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    db_session.expire_all()
    item = crud_catalogue.catalogue.get(db_session, item.id)
    assert item.title == "Summer offer"
    assert item.description == "All-season tyres at a discount"
    assert item.offer_details == "20% off on a set of four"
    assert item.updatedAt >= before


def test_patch_submits_for_review(test_client, db_session, owner_headers):
    item = create_catalogue_item(db_session, "user_owner")

    response = test_client.patch(
        f"{CATALOGUE_URL}/{item.id}", headers=owner_headers, json={"status": "pending"}
    )

    assert response.status_code == 200
    db_session.expire_all()
    assert crud_catalogue.catalogue.get(db_session, item.id).status == "pending"


def test_patch_invalid_status_writes_nothing(test_client, db_session, owner_headers):
    item = create_catalogue_item(db_session, "user_owner")

    response = test_client.patch(
        f"{CATALOGUE_URL}/{item.id}",
        headers=owner_headers,
        json={"title": "Changed", "status": "approved"},
    )

    assert response.status_code == 400
    assert response.json() == {"ok": False, "message": "Invalid status."}
    db_session.expire_all()
    item = crud_catalogue.catalogue.get(db_session, item.id)
    assert item.status == "draft"
    assert item.title == "Winter tyre offer"


def test_patch_locked_item(test_client, db_session, owner_headers):
    item = create_catalogue_item(db_session, "user_owner", status="pending")

    response = test_client.patch(
        f"{CATALOGUE_URL}/{item.id}", headers=owner_headers, json={"title": "x"}
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Catalogue cannot be edited while pending or verified."


def test_patch_rejected_item_is_editable(test_client, db_session, owner_headers):
    item = create_catalogue_item(db_session, "user_owner", status="rejected")

    response = test_client.patch(
        f"{CATALOGUE_URL}/{item.id}", headers=owner_headers, json={"status": "draft"}
    )

    assert response.status_code == 200


def test_patch_someone_elses_item(test_client, db_session, other_headers):
    item = create_catalogue_item(db_session, "user_owner")

    response = test_client.patch(
        f"{CATALOGUE_URL}/{item.id}", headers=other_headers, json={"title": "x"}
    )

    assert response.status_code == 403


def test_patch_with_stale_version(test_client, db_session, owner_headers):
    item = create_catalogue_item(db_session, "user_owner")

    response = test_client.patch(
        f"{CATALOGUE_URL}/{item.id}", headers=owner_headers, json={"title": "x", "version": 7}
    )

    assert response.status_code == 409
    assert response.json()["message"] == (
        "Catalogue was modified by another request. Reload and try again."
    )

    response = test_client.patch(
        f"{CATALOGUE_URL}/{item.id}", headers=owner_headers, json={"title": "x", "version": 1}
    )
    assert response.status_code == 200


def test_patch_bad_body(test_client, db_session, owner_headers):
    item = create_catalogue_item(db_session, "user_owner")
    url = f"{CATALOGUE_URL}/{item.id}"

    response = test_client.patch(
        url, headers={**owner_headers, "Content-Type": "application/json"}, content="{not json"
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid JSON body."

    response = test_client.patch(url, headers=owner_headers, json=["title"])
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid request body."


def test_delete_catalogue(test_client, db_session, owner_headers):
    item = create_catalogue_item(db_session, "user_owner", status="rejected")

    response = test_client.delete(f"{CATALOGUE_URL}/{item.id}", headers=owner_headers)

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert crud_catalogue.catalogue.get(db_session, item.id) is None


def test_delete_locked_catalogue(test_client, db_session, owner_headers, other_headers):
    item = create_catalogue_item(db_session, "user_owner", status="verified")

    response = test_client.delete(f"{CATALOGUE_URL}/{item.id}", headers=owner_headers)
    assert response.status_code == 409
    assert response.json()["message"] == "Catalogue cannot be deleted while pending or verified."

    response = test_client.delete(f"{CATALOGUE_URL}/{item.id}", headers=other_headers)
    assert response.status_code == 403
