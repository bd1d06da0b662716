# app/api/v1/endpoints/catalogue.py
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError
from sqlalchemy.orm import Session
from starlette.datastructures import FormData

from app.api import deps
from app.core.s3 import ObjectStore, get_object_store
from app.crud import crud_catalogue
from app.db.session import get_db
from app.middleware.error_handler import InvalidArgumentError, store_errors
from app.schemas.catalogue import (
    CatalogueCreate,
    CatalogueItemResponse,
    CatalogueListResponse,
    CataloguePatch,
)
from app.schemas.common import CreatedResponse, OkResponse
from app.schemas.token import TokenPayload
from app.services.flash_sale import enforce_catalogue_cutoff
from app.services.lifecycle import (
    CATALOGUE,
    Operation,
    apply_partial_update,
    authorize,
    check_version,
    creation_fields,
)
from app.services.uploads import UploadBatch, check_image, form_files
from app.utils.validators import clean_str

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalogue", tags=["Catalogue"])

MIN_IMAGES = 1
MAX_IMAGES = 5
IMAGE_FOLDER = "catalogueImages"


def _catalogue_id(catalogue_id: str) -> str:
    catalogue_id = catalogue_id.strip()
    if not catalogue_id:
        raise InvalidArgumentError("Missing catalogue id.")
    return catalogue_id


@router.get("", response_model=CatalogueListResponse)
def list_catalogue(
    current_user: TokenPayload = Depends(deps.get_current_user),
    status_filter: Optional[str] = Query(None, alias="status"),
    db: Session = Depends(get_db),
):
    """
    List the caller's catalogue items, newest first.
    An unrecognized status filter is ignored.
    """
    with store_errors("/api/v1/catalogue GET", "Failed to load catalogue."):
        items = crud_catalogue.catalogue.get_multi_by_owner(
            db, owner_id=current_user.sub, status=CATALOGUE.parse_status(status_filter)
        )
    return {"ok": True, "catalogue": items}


@router.post("", response_model=CreatedResponse)
def create_catalogue(
    current_user: TokenPayload = Depends(deps.get_current_user),
    form: FormData = Depends(deps.get_form),
    db: Session = Depends(get_db),
    store: ObjectStore = Depends(get_object_store),
):
    """
    Create a catalogue draft from a multipart form with 1 to 5 images.
    Refused once the active flash sale's cutoff has passed.
    """
    enforce_catalogue_cutoff(db)

    title = clean_str(form.get("title"))
    description = clean_str(form.get("description"))
    offer_details = clean_str(form.get("offerDetails"))

    if not title:
        raise InvalidArgumentError("Title is required.")
    if not description:
        raise InvalidArgumentError("Description is required.")
    if not offer_details:
        raise InvalidArgumentError("Offer details is required.")

    images = form_files(form, "images")
    if len(images) < MIN_IMAGES:
        raise InvalidArgumentError("Please add at least 1 image.")
    if len(images) > MAX_IMAGES:
        raise InvalidArgumentError("You can upload maximum 5 images.")
    for image in images:
        check_image(image, "Each image must be under 5MB.", "All uploads must be images.")

    with store_errors("/api/v1/catalogue POST", "Failed to create catalogue."):
        with UploadBatch(store, current_user.sub) as batch:
            image_urls = batch.upload_all(images, IMAGE_FOLDER)
            item = crud_catalogue.catalogue.create(
                db,
                obj_in=CatalogueCreate(
                    title=title,
                    description=description,
                    offer_details=offer_details,
                    image_urls=image_urls,
                ),
                extra=creation_fields(CATALOGUE, current_user.sub),
            )

    logger.info("Catalogue %s created by %s", item.id, current_user.sub)
    return {
        "ok": True,
        "id": item.id,
        "status": item.status,
        "message": "Catalogue draft saved.",
    }


@router.get("/{catalogue_id}", response_model=CatalogueItemResponse)
def get_catalogue(
    catalogue_id: str,
    current_user: TokenPayload = Depends(deps.get_current_user),
    db: Session = Depends(get_db),
):
    catalogue_id = _catalogue_id(catalogue_id)
    with store_errors("/api/v1/catalogue/{id} GET", "Failed to load catalogue."):
        item = crud_catalogue.catalogue.get(db, catalogue_id)
    authorize(CATALOGUE, item, current_user.sub, Operation.READ)
    return {"ok": True, "item": item}


@router.patch("/{catalogue_id}", response_model=OkResponse, response_model_exclude_none=True)
def update_catalogue(
    catalogue_id: str,
    current_user: TokenPayload = Depends(deps.get_current_user),
    body: dict = Depends(deps.get_json_body),
    db: Session = Depends(get_db),
):
    """
    Partially update a catalogue item. Only the keys present in the body are
    written; `status` must be one of the catalogue statuses.
    """
    catalogue_id = _catalogue_id(catalogue_id)
    try:
        patch = CataloguePatch.model_validate(body)
    except ValidationError:
        raise InvalidArgumentError("Invalid request body.")

    changes = patch.model_dump(exclude_unset=True)
    expected_version = changes.pop("version", None)

    with store_errors("/api/v1/catalogue/{id} PATCH", "Failed to update catalogue."):
        item = crud_catalogue.catalogue.get(db, catalogue_id)
        authorize(CATALOGUE, item, current_user.sub, Operation.UPDATE)
        check_version(CATALOGUE, item, expected_version)
        apply_partial_update(CATALOGUE, item, changes)
        crud_catalogue.catalogue.save(db, db_obj=item)

    return {"ok": True}


@router.delete("/{catalogue_id}", response_model=OkResponse, response_model_exclude_none=True)
def delete_catalogue(
    catalogue_id: str,
    current_user: TokenPayload = Depends(deps.get_current_user),
    db: Session = Depends(get_db),
):
    catalogue_id = _catalogue_id(catalogue_id)
    with store_errors("/api/v1/catalogue/{id} DELETE", "Failed to delete catalogue."):
        item = crud_catalogue.catalogue.get(db, catalogue_id)
        authorize(CATALOGUE, item, current_user.sub, Operation.DELETE)
        crud_catalogue.catalogue.remove(db, db_obj=item)

    logger.info("Catalogue %s deleted by %s", catalogue_id, current_user.sub)
    return {"ok": True}
