"""Pre-submission checks for listing drafts."""

from __future__ import annotations

from decimal import Decimal
from typing import Dict

from .diff import CollectionTracker
from .models import SALE_STATUSES, EntityDraft, ValidationResult

GENERIC_MESSAGE = "Some fields are empty"


def validate_listing(
    draft: EntityDraft,
    features: CollectionTracker,
    images: CollectionTracker,
) -> ValidationResult:
    """Check every field and report all problems at once."""
    messages: Dict[str, str] = {}

    if not draft.name.strip():
        messages["name"] = "Apartment name is required"
    if not draft.desc.strip():
        messages["desc"] = "Apartment description is required"
    if draft.sale_status not in SALE_STATUSES:
        messages["sale_status"] = "Select a sale status"
    if draft.sale_price is not None:
        if not draft.sale_price.is_finite():
            messages["sale_price"] = "Sale price must be a number"
        elif draft.sale_price < 0:
            messages["sale_price"] = "Sale price cannot be negative"
    # Zero coordinates count as missing.
    if not _is_coordinate(draft.longitude):
        messages["longitude"] = "Longitude is required"
    if not _is_coordinate(draft.latitude):
        messages["latitude"] = "Latitude is required"
    if features.is_invalidly_empty():
        messages["features"] = "Add at least one feature"
    if images.is_invalidly_empty():
        messages["images"] = "Add at least one image"

    if messages:
        messages["message"] = GENERIC_MESSAGE
    return ValidationResult(failed=bool(messages), messages=messages)


def _is_coordinate(value: Decimal | None) -> bool:
    return bool(value) and value.is_finite()
