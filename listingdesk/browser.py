"""Paging, status filtering and multi-select state for the apartment list."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Set

from .models import SALE_STATUSES, Apartment

PAGE_SIZE = 20


@dataclass
class ApartmentBrowser:
    """Holds the list view state; the selection is an explicit set of ids."""

    apartments: List[Apartment]
    page_size: int = PAGE_SIZE
    status_filter: str = ""
    page: int = 0
    selected: Set[str] = field(default_factory=set)

    def choose_filter(self, status: str) -> None:
        if status and status not in SALE_STATUSES:
            raise ValueError(f"Unknown sale status: {status}")
        self.status_filter = status
        self.page = 0

    @property
    def filtered(self) -> List[Apartment]:
        if not self.status_filter:
            return list(self.apartments)
        return [apartment for apartment in self.apartments
                if apartment.sale_status == self.status_filter]

    @property
    def start(self) -> int:
        return self.page * self.page_size

    @property
    def page_items(self) -> List[Apartment]:
        return self.filtered[self.start:self.start + self.page_size]

    @property
    def page_count(self) -> int:
        return math.ceil(len(self.filtered) / self.page_size)

    @property
    def can_next(self) -> bool:
        return self.start + self.page_size < len(self.filtered)

    @property
    def can_prev(self) -> bool:
        return self.start > 0

    def next_page(self) -> None:
        if self.can_next:
            self.page += 1

    def prev_page(self) -> None:
        if self.can_prev:
            self.page -= 1

    def toggle(self, apartment_id: str) -> None:
        if apartment_id in self.selected:
            self.selected.discard(apartment_id)
        else:
            self.selected.add(apartment_id)

    def select_all(self, checked: bool) -> None:
        """Check or uncheck every apartment on the current page."""
        ids = {apartment.apartment_id for apartment in self.page_items}
        if checked:
            self.selected |= ids
        else:
            self.selected -= ids

    @property
    def all_selected(self) -> bool:
        items = self.page_items
        return bool(items) and all(
            apartment.apartment_id in self.selected for apartment in items)

    def pending_deletion(self) -> List[str]:
        return sorted(self.selected)

    def clear_selection(self) -> None:
        self.selected.clear()
