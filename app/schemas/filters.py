"""Filter and list-view state for the admin entry table.

``EntryFilters`` holds the multi-select criteria shared between the filter
panel and the query builder. ``EntryListState`` is the sort/page state owned
by the list view; every transition returns a new instance.
"""
import math
from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

SortField = Literal["created_at", "mileage", "driver_name"]
SortDirection = Literal["asc", "desc"]

MULTI_SELECT_KEYS = ("drivers", "vehicles", "status")
DEFAULT_STATUS = ["active"]
PAGE_SIZES = (10, 20, 50, 100)


class EntryFilters(BaseModel):
    drivers: list[str] = []
    vehicles: list[str] = []
    date_from: date | None = None
    date_to: date | None = None
    # driver status; an empty list disables the filter
    status: list[str] = Field(default_factory=lambda: list(DEFAULT_STATUS))

    def toggle(self, key: str, value: str) -> "EntryFilters":
        current = self._values(key)
        if value in current:
            updated = [v for v in current if v != value]
        else:
            updated = [*current, value]
        return self.model_copy(update={key: updated})

    def remove(self, key: str, value: str) -> "EntryFilters":
        return self.model_copy(update={key: [v for v in self._values(key) if v != value]})

    def cleared(self) -> "EntryFilters":
        return EntryFilters()

    @property
    def active_count(self) -> int:
        count = len(self.drivers) + len(self.vehicles) + len(self.status)
        return count + (self.date_from is not None) + (self.date_to is not None)

    def _values(self, key: str) -> list[str]:
        if key not in MULTI_SELECT_KEYS:
            raise KeyError(f"'{key}' is not a multi-select filter")
        return getattr(self, key)


class EntryListState(BaseModel):
    sort_field: SortField = "created_at"
    sort_direction: SortDirection = "desc"
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def sort_by(self, field: SortField) -> "EntryListState":
        if field == self.sort_field:
            direction = "asc" if self.sort_direction == "desc" else "desc"
            return self.model_copy(update={"sort_direction": direction, "page": 1})
        return self.model_copy(update={"sort_field": field, "sort_direction": "desc", "page": 1})

    def with_page_size(self, page_size: int) -> "EntryListState":
        return EntryListState(
            sort_field=self.sort_field,
            sort_direction=self.sort_direction,
            page=1,
            page_size=page_size,
        )

    def total_pages(self, total: int) -> int:
        return math.ceil(total / self.page_size)

    def next_page(self, total: int) -> "EntryListState":
        return self.model_copy(update={"page": max(1, min(self.total_pages(total), self.page + 1))})

    def previous_page(self) -> "EntryListState":
        return self.model_copy(update={"page": max(1, self.page - 1)})
