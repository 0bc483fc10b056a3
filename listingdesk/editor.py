"""Create/edit session for a single apartment."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Sequence

from .draft import DraftStore
from .files import FileHandle, ingest_files
from .loader import BaselineLoader
from .models import CreatePayload, EditPayload, ImagePreview, ValidationResult
from .validation import GENERIC_MESSAGE, validate_listing

logger = logging.getLogger(__name__)

Payload = CreatePayload | EditPayload


def _noop() -> None:
    return None


def build_payload(store: DraftStore, apartment_id: str | None) -> Payload:
    """Assemble what gets sent for the current session."""
    draft = store.draft
    if apartment_id is None or not store.edit_mode:
        return CreatePayload(
            name=draft.name,
            desc=draft.desc,
            sale_price=draft.sale_price,
            sale_status=draft.sale_status,
            features=list(store.features.items),
            longitude=draft.longitude,
            latitude=draft.latitude,
            images=list(store.uploads),
        )

    features = store.features.diff()
    images = store.images.diff()
    return EditPayload(
        apartment_id=apartment_id,
        name=draft.name,
        desc=draft.desc,
        sale_status=draft.sale_status,
        longitude=draft.longitude,
        latitude=draft.latitude,
        features_added=list(features.added),
        features_removed=list(features.removed),
        images_added=[image.source_file for image in images.added],
        images_removed=list(images.removed),
    )


@dataclass
class ListingEditor:
    """Coordinates loading, editing and submitting one apartment form."""

    loader: BaselineLoader
    on_submit: Callable[[Payload], Any]
    on_close: Callable[[], Any] = _noop
    on_scroll_into_view: Callable[[], Any] = _noop
    mounted: bool = False
    _session: int = field(default=0, repr=False)

    @property
    def store(self) -> DraftStore:
        return self.loader.store

    @property
    def errors(self) -> Dict[str, str]:
        return self.store.errors

    async def open_create(self) -> None:
        self._session += 1
        self.mounted = True
        await self.loader.load(None)

    async def open_edit(self, apartment_id: str) -> bool:
        self._session += 1
        self.mounted = True
        return await self.loader.load(str(apartment_id))

    def close(self) -> None:
        """Dismiss the form and discard the draft."""
        self.mounted = False
        self._session += 1
        self.store.reset()
        self.on_close()

    def set_field(self, key: str, value: Any) -> None:
        self.store.set_field(key, value)

    def add_feature(self, text: str) -> bool:
        return self.store.add_feature(text)

    def remove_feature(self, feature: str, index: int) -> bool:
        return self.store.remove_feature(feature, index)

    def remove_image(self, image: ImagePreview, index: int) -> bool:
        return self.store.remove_image(image, index)

    async def add_images(self, handles: Sequence[FileHandle]) -> bool:
        """Ingest selected files and append them once the whole batch is read.

        Results are dropped if the form was closed or reopened meanwhile.
        """
        if not handles:
            return False
        session = self._session
        result = await ingest_files(handles)
        if not self.mounted or session != self._session:
            logger.info("Editor closed while reading %d file(s); discarding", len(handles))
            return False
        self.store.extend_images(result)
        return not result.errors

    def validate(self) -> ValidationResult:
        store = self.store
        try:
            return validate_listing(store.draft, store.features, store.images)
        except Exception:
            logger.exception("Validation raised unexpectedly")
            return ValidationResult(failed=True, messages={"message": GENERIC_MESSAGE})

    def submit(self) -> bool:
        """Validate and hand the payload to the caller.

        On failure the errors replace any from the previous attempt.
        """
        self.store.errors = {}
        result = self.validate()
        if result.failed:
            logger.info("Submission blocked: %s",
                        ", ".join(key for key in result.messages if key != "message"))
            self.store.errors = dict(result.messages)
            self.on_scroll_into_view()
            return False

        payload = build_payload(self.store, self.loader.apartment_id)
        logger.info("Submitting %s", type(payload).__name__)
        self.on_submit(payload)
        self.close()
        return True
