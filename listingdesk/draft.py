"""Working state for one create/edit form session."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from .diff import CollectionTracker
from .models import Apartment, EntityDraft, ImagePreview, IngestionResult, to_decimal

logger = logging.getLogger(__name__)

TEXT_FIELDS = ("name", "desc", "sale_status")
DECIMAL_FIELDS = ("sale_price", "longitude", "latitude")
FIELDS = TEXT_FIELDS + DECIMAL_FIELDS


def _image_key(image: ImagePreview) -> str:
    return image.file_name


class DraftStore:
    """Single owner of the draft, its collections, queued uploads and errors."""

    def __init__(self) -> None:
        self.draft = EntityDraft()
        self.features: CollectionTracker[str] = CollectionTracker()
        self.images: CollectionTracker[ImagePreview] = CollectionTracker(
            key=_image_key, unique=False)
        self.uploads: List[Any] = []
        self.errors: Dict[str, str] = {}

    @property
    def edit_mode(self) -> bool:
        return self.features.edit_mode

    def reset(self) -> None:
        self.draft = EntityDraft()
        self.features.reset()
        self.images.reset()
        self.uploads = []
        self.errors = {}

    def seed(self, apartment: Apartment) -> None:
        """Populate every field and collection from a loaded apartment."""
        self.reset()
        self.draft = EntityDraft.from_apartment(apartment)
        self.features.seed(apartment.features)
        self.images.seed(apartment.images)
        logger.debug("Seeded draft from apartment %s (%d features, %d images)",
                     apartment.apartment_id, len(apartment.features),
                     len(apartment.images))

    def set_field(self, key: str, value: Any) -> None:
        """Overwrite one scalar field and clear its error."""
        if key not in FIELDS:
            raise KeyError(f"Unknown listing field: {key}")
        self.errors.pop(key, None)

        if key in DECIMAL_FIELDS:
            try:
                value = to_decimal(value)
            except ValueError:
                self.errors[key] = "Must be a number"
                value = None
        else:
            value = "" if value is None else str(value)
        setattr(self.draft, key, value)

    def add_feature(self, text: str) -> bool:
        self.errors.pop("features", None)
        feature = (text or "").strip()
        if not feature:
            return False
        return self.features.add(feature)

    def remove_feature(self, feature: str, index: int) -> bool:
        self.errors.pop("features", None)
        return self.features.remove(feature, index)

    def extend_images(self, result: IngestionResult) -> None:
        """Append a finished ingestion batch to the images and upload queue."""
        self.errors.pop("images", None)
        for preview in result.previews:
            self.images.add(preview)
            self.uploads.append(preview.source_file)
        if result.error_message:
            self.errors["images"] = result.error_message

    def remove_image(self, image: ImagePreview, index: int) -> bool:
        self.errors.pop("images", None)
        if not self.images.remove(image, index):
            return False
        if image.source_file is not None:
            for position, handle in enumerate(self.uploads):
                if handle is image.source_file:
                    del self.uploads[position]
                    break
        return True
