"""Vehicle-entry submission.

A submission is validated completely before anything is written. Photos are
then stored one after another (required slots in fixed order, optional photos
in the order received) and only when every object is stored are the entry and
its photo rows inserted, in a single transaction. Any failure removes the
objects stored so far, so a failed submission leaves nothing behind.
"""
import logging
import uuid
from dataclasses import dataclass, field

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import ping
from app.models.entry import VehicleEntry
from app.models.photo import Photo, REQUIRED_PHOTO_TYPES, OPTIONAL_PHOTO_TYPE
from app.models.user import STATUS_ACTIVE
from app.models.vehicle import Vehicle
from app.services.photo_storage import PhotoStorage, StorageError, build_object_key
from app.services.photo_validator import PhotoUpload, validate_photo
from app.utils.clock import utc_now_iso
from app.utils.exceptions import (
    InvalidMileage,
    MissingRequiredField,
    MissingRequiredPhoto,
    NetworkUnavailable,
    PhotoPersistFailure,
)

logger = logging.getLogger(__name__)

# upper bound of the mileage column on every supported backend
MAX_MILEAGE = 2_147_483_647


@dataclass
class EntrySubmission:
    vehicle_id: str | None
    mileage: str | int | None
    notes: str | None = None
    required: dict[str, PhotoUpload | None] = field(default_factory=dict)
    optional: list[PhotoUpload] = field(default_factory=list)


@dataclass
class _StagedPhoto:
    photo_type: str
    storage_key: str
    image_url: str


def _parse_mileage(value: str | int) -> int:
    if isinstance(value, bool):
        raise InvalidMileage()
    if isinstance(value, int):
        mileage = value
    else:
        text = value.strip()
        if not text.isdecimal():
            raise InvalidMileage()
        mileage = int(text)
    if mileage < 0 or mileage > MAX_MILEAGE:
        raise InvalidMileage()
    return mileage


def validate_submission(submission: EntrySubmission) -> int:
    """Check fields, required slots and files in that order; return the parsed mileage."""
    mileage_missing = submission.mileage is None or (
        isinstance(submission.mileage, str) and not submission.mileage.strip()
    )
    if not submission.vehicle_id or mileage_missing:
        raise MissingRequiredField()
    mileage = _parse_mileage(submission.mileage)

    missing = [label for slot, label in REQUIRED_PHOTO_TYPES.items() if not submission.required.get(slot)]
    if missing:
        raise MissingRequiredPhoto(missing)

    for slot, label in REQUIRED_PHOTO_TYPES.items():
        validate_photo(submission.required[slot], label)
    for i, photo in enumerate(submission.optional):
        validate_photo(photo, f"Optional photo {i + 1}")

    return mileage


async def _ensure_reachable(db: AsyncSession, storage: PhotoStorage) -> None:
    if not storage.is_available():
        logger.error("Photo storage unavailable, submission aborted before any write")
        raise NetworkUnavailable()
    if not await ping(db):
        logger.error("Database unavailable, submission aborted before any write")
        raise NetworkUnavailable()


def _discard(storage: PhotoStorage, staged: list[_StagedPhoto]) -> None:
    for item in staged:
        try:
            storage.delete(item.storage_key)
        except (StorageError, OSError):
            logger.exception("Could not remove orphaned photo object %s", item.storage_key)


def _stage_photos(
    storage: PhotoStorage, user_id: str, entry_id: str, submission: EntrySubmission
) -> list[_StagedPhoto]:
    uploads: list[tuple[str, str, PhotoUpload]] = [
        (slot, slot, submission.required[slot]) for slot in REQUIRED_PHOTO_TYPES
    ]
    uploads += [
        (OPTIONAL_PHOTO_TYPE, f"{OPTIONAL_PHOTO_TYPE}-{i}", photo)
        for i, photo in enumerate(submission.optional)
    ]

    staged: list[_StagedPhoto] = []
    for photo_type, key_slot, photo in uploads:
        key = build_object_key(user_id, entry_id, key_slot, photo.extension)
        try:
            storage.save(key, photo.content)
        except StorageError as e:
            logger.error("Upload of %s photo for entry %s failed: %s", key_slot, entry_id, e)
            _discard(storage, staged)
            raise PhotoPersistFailure(f"Upload of the {key_slot} photo failed, nothing was saved") from e
        staged.append(_StagedPhoto(photo_type=photo_type, storage_key=key, image_url=storage.public_url(key)))
        logger.debug("Staged %s photo as %s", key_slot, key)
    return staged


async def submit_entry(
    db: AsyncSession, storage: PhotoStorage, user_id: str, submission: EntrySubmission
) -> VehicleEntry:
    mileage = validate_submission(submission)
    await _ensure_reachable(db, storage)

    vehicle = await db.get(Vehicle, submission.vehicle_id)
    if vehicle is None:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    if vehicle.status != STATUS_ACTIVE:
        logger.warning("Rejected entry for inactive vehicle %s by user %s", vehicle.id, user_id)
        raise HTTPException(status_code=404, detail="Vehicle is not in service")

    entry_id = str(uuid.uuid4())
    created_at = utc_now_iso()

    staged = _stage_photos(storage, user_id, entry_id, submission)

    entry = VehicleEntry(
        id=entry_id,
        user_id=user_id,
        vehicle_id=vehicle.id,
        mileage=mileage,
        notes=(submission.notes or "").strip() or None,
        created_at=created_at,
        photos=[
            Photo(
                id=str(uuid.uuid4()),
                entry_id=entry_id,
                image_url=item.image_url,
                storage_key=item.storage_key,
                photo_type=item.photo_type,
                position=position,
                created_at=created_at,
            )
            for position, item in enumerate(staged)
        ],
    )
    db.add(entry)
    try:
        await db.commit()
    except Exception as e:
        # driver errors such as OverflowError reach here unwrapped
        await db.rollback()
        logger.exception("Saving entry %s failed, removing %d stored photos", entry_id, len(staged))
        _discard(storage, staged)
        raise PhotoPersistFailure("Saving the entry failed, nothing was saved") from e

    logger.info(
        "Entry %s saved for user %s vehicle %s with %d photos",
        entry_id, user_id, vehicle.id, len(staged),
    )
    return entry
