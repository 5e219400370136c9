from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import get_session_context
from app.schemas.entry import EntryResponse, HistoryEntryResponse
from app.services.auth_service import SessionContext
from app.services.entry_query import recent_entries_for_user
from app.services.entry_service import EntrySubmission, submit_entry
from app.services.photo_storage import PhotoStorage, get_photo_storage
from app.services.photo_validator import PhotoUpload
from app.utils.response import success_response

router = APIRouter(prefix="/entries", tags=["entries"])


async def _read_upload(file: UploadFile | None) -> PhotoUpload | None:
    if file is None:
        return None
    content = await file.read()
    return PhotoUpload(
        filename=file.filename or "",
        content_type=file.content_type or "",
        content=content,
    )


@router.post("", status_code=201)
async def create_entry(
    vehicle_id: str | None = Form(default=None),
    mileage: str | None = Form(default=None),
    notes: str | None = Form(default=None),
    vorne_links: UploadFile | None = File(default=None),
    vorne_rechts: UploadFile | None = File(default=None),
    hinten_links: UploadFile | None = File(default=None),
    hinten_rechts: UploadFile | None = File(default=None),
    optional: list[UploadFile] = File(default=[]),
    context: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
    storage: PhotoStorage = Depends(get_photo_storage),
):
    submission = EntrySubmission(
        vehicle_id=vehicle_id,
        mileage=mileage,
        notes=notes,
        required={
            "vorne_links": await _read_upload(vorne_links),
            "vorne_rechts": await _read_upload(vorne_rechts),
            "hinten_links": await _read_upload(hinten_links),
            "hinten_rechts": await _read_upload(hinten_rechts),
        },
        optional=[await _read_upload(f) for f in optional],
    )

    entry = await submit_entry(db, storage, context.user_id, submission)

    return success_response(
        data=EntryResponse.model_validate(entry).model_dump(),
        message=f"Vehicle condition recorded at {entry.created_at}",
    )


@router.get("/history")
async def get_history(
    context: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    entries = await recent_entries_for_user(db, context.user_id)
    data = [HistoryEntryResponse.model_validate(e).model_dump() for e in entries]
    return success_response(data=data)
