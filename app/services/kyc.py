# app/services/kyc.py
import logging
from typing import Dict

from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile

from app.core.s3 import ObjectStore
from app.crud import crud_business, crud_kyc
from app.middleware.error_handler import ConflictError, InvalidArgumentError
from app.models.kyc import KycRecord
from app.services.lifecycle import BUSINESS, KYC
from app.services.uploads import UploadBatch, check_video, form_file, media_metadata
from app.utils.sanitize import safe_object_name
from app.utils.timestamps import utcnow
from app.utils.validators import clean_str

logger = logging.getLogger(__name__)

# Businesses with a physical shop prove each location with a video.
OFFLINE_BUSINESS_TYPES = frozenset({"offline", "both"})

LOCATION_VIDEO_FIELD = "locationVideo_{}"
SUBMITTED_STATUS = "submitted"
LOCATION_PENDING_STATUS = "pending"


def submit_kyc(db: Session, store: ObjectStore, owner_id: str, form) -> KycRecord:
    """
    Validate a KYC submission, upload its videos and move the business into
    review.

    Every check runs before the first upload. The KYC record, each location's
    verification state and the business status are committed together.
    """
    script_text = clean_str(form.get("scriptText"))
    selfie = form_file(form, "selfieVideo")
    if selfie is None:
        raise InvalidArgumentError("Self video is required.")
    check_video(selfie, "Self video must be under 50MB.", "Self video must be a video.")

    business = crud_business.business.get(db, owner_id)
    if business is None:
        raise InvalidArgumentError("Business profile is missing.")

    status = BUSINESS.parse_status(business.status) or BUSINESS.initial
    if status == "verified":
        raise ConflictError("Business is already verified.")
    if BUSINESS.is_locked(status):
        raise ConflictError("Business is already under review.")
    if status == "rejected":
        raise InvalidArgumentError("Business is rejected. Please resubmit from registration.")

    locations = list(business.locations)
    if not locations:
        raise InvalidArgumentError("Please add at least one business location.")

    location_videos: Dict[str, UploadFile] = {}
    if business.business_type in OFFLINE_BUSINESS_TYPES:
        for location in locations:
            video = form_file(form, LOCATION_VIDEO_FIELD.format(location.id))
            if video is None:
                raise InvalidArgumentError("Please upload shop proof video for each location.")
            check_video(video, "Shop proof video must be under 50MB.", "Shop proof must be a video.")
            location_videos[location.id] = video

    now = utcnow()
    with UploadBatch(store, owner_id) as batch:
        selfie_url = batch.upload(selfie, "kyc/selfie", "video")

        location_media = {}
        for location in locations:
            video = location_videos.get(location.id)
            if video is None:
                continue
            folder = f"kyc/location/{safe_object_name(location.id, 'location')}"
            url = batch.upload(video, folder, "video")
            location_media[location.id] = media_metadata(video, url)

        record = crud_kyc.kyc.submit(
            db,
            business=business,
            kyc_status=KYC.initial,
            location_status=LOCATION_PENDING_STATUS,
            business_status=SUBMITTED_STATUS,
            script_text=script_text,
            selfie_video=media_metadata(selfie, selfie_url),
            location_videos=location_media,
            now=now,
        )

    logger.info("KYC submitted for %s with %d location(s)", owner_id, len(locations))
    return record
