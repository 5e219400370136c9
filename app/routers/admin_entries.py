from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.dependencies import require_admin
from app.models.photo import REQUIRED_PHOTO_TYPES, OPTIONAL_PHOTO_TYPE
from app.schemas.entry import AdminEntryResponse, PhotoResponse
from app.schemas.filters import DEFAULT_STATUS, EntryFilters, EntryListState, SortDirection, SortField
from app.services.entry_query import filter_options, get_entry, query_entries
from app.utils.response import page_meta, success_response

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin)])


def _status_values(status: list[str] | None) -> list[str]:
    # omitted -> default; "?status=" (only blanks) -> no status filter
    if status is None:
        return list(DEFAULT_STATUS)
    return [s for s in status if s.strip()]


@router.get("/entries")
async def list_entries(
    drivers: list[str] = Query(default=[]),
    vehicles: list[str] = Query(default=[]),
    date_from: date | None = Query(default=None),
    date_to: date | None = Query(default=None),
    status: list[str] | None = Query(default=None),
    sort_field: SortField = Query(default="created_at"),
    sort_direction: SortDirection = Query(default="desc"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    filters = EntryFilters(
        drivers=drivers,
        vehicles=vehicles,
        date_from=date_from,
        date_to=date_to,
        status=_status_values(status),
    )
    state = EntryListState(sort_field=sort_field, sort_direction=sort_direction, page=page, page_size=page_size)

    result = await query_entries(db, filters, state)

    return success_response(data={
        "entries": [AdminEntryResponse.model_validate(e).model_dump() for e in result.entries],
        **page_meta(result.total, state.page, state.page_size),
        "shown": len(result.entries),
        "sort_field": state.sort_field,
        "sort_direction": state.sort_direction,
    })


@router.get("/entries/{entry_id}")
async def get_entry_details(entry_id: str, db: AsyncSession = Depends(get_db)):
    entry = await get_entry(db, entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Entry not found")

    required = {}
    for slot, label in REQUIRED_PHOTO_TYPES.items():
        photo = next((p for p in entry.photos if p.photo_type == slot), None)
        required[slot] = {
            "label": label,
            "photo": PhotoResponse.model_validate(photo).model_dump() if photo else None,
        }
    optional = [
        PhotoResponse.model_validate(p).model_dump()
        for p in entry.photos
        if p.photo_type == OPTIONAL_PHOTO_TYPE
    ]

    return success_response(data={
        "entry": AdminEntryResponse.model_validate(entry).model_dump(),
        "required_photos": required,
        "optional_photos": optional,
    })


@router.get("/filter-options")
async def get_filter_options(db: AsyncSession = Depends(get_db)):
    return success_response(data=await filter_options(db))
