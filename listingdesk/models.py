"""Core data models for listingdesk."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Generic, List, Mapping, Tuple, TypeVar

SALE_STATUSES = ("on_sale", "sold")


@dataclass(frozen=True)
class ImagePreview:
    """Display-ready representation of an attached image."""

    file_name: str
    file_size: str
    content: str
    # Raw handle queued for upload; None for images that came with the baseline.
    source_file: Any = field(default=None, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ImagePreview":
        return cls(
            file_name=str(data.get("fileName", data.get("file_name", ""))),
            file_size=str(data.get("fileSize", data.get("file_size", ""))),
            content=str(data.get("content", data.get("src", "")) or ""),
        )


@dataclass(frozen=True)
class Apartment:
    """Immutable snapshot of a catalog entry as loaded for editing."""

    apartment_id: str
    name: str
    desc: str
    sale_status: str
    longitude: Decimal | None
    latitude: Decimal | None
    sale_price: Decimal | None = None
    features: Tuple[str, ...] = ()
    images: Tuple[ImagePreview, ...] = ()
    created_at: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Apartment":
        """Build an apartment from a catalog JSON record."""
        if "id" not in data:
            raise ValueError(f"Apartment record without id: {data!r}")
        return cls(
            apartment_id=str(data["id"]),
            name=str(data.get("name") or ""),
            desc=str(data.get("desc") or ""),
            sale_status=str(data.get("saleStatus", data.get("sale_status", "")) or ""),
            longitude=to_decimal(data.get("longitude")),
            latitude=to_decimal(data.get("latitude")),
            sale_price=to_decimal(data.get("salePrice", data.get("sale_price"))),
            features=tuple(str(item) for item in data.get("features") or ()),
            images=tuple(ImagePreview.from_dict(item) for item in data.get("images") or ()),
            created_at=data.get("created_at") or data.get("createdAt"),
        )


@dataclass
class EntityDraft:
    """Working copy of the scalar listing fields for one form session."""

    name: str = ""
    desc: str = ""
    sale_price: Decimal | None = None
    sale_status: str = ""
    longitude: Decimal | None = None
    latitude: Decimal | None = None

    @classmethod
    def from_apartment(cls, apartment: Apartment) -> "EntityDraft":
        return cls(
            name=apartment.name,
            desc=apartment.desc,
            sale_price=apartment.sale_price,
            sale_status=apartment.sale_status,
            longitude=apartment.longitude,
            latitude=apartment.latitude,
        )


T = TypeVar("T")


@dataclass(frozen=True)
class CollectionDiff(Generic[T]):
    """Changes to a tracked collection relative to its baseline."""

    added: Tuple[T, ...]
    removed: Tuple[str, ...]
    baseline_count: int


@dataclass
class ValidationResult:
    """Outcome of validating a draft before submission."""

    failed: bool = False
    messages: Dict[str, str] = field(default_factory=dict)


@dataclass
class IngestionResult:
    """Previews produced from one batch of selected files."""

    previews: List[ImagePreview] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def error_message(self) -> str | None:
        if not self.errors:
            return None
        return "; ".join(self.errors)


@dataclass
class CreatePayload:
    """Full listing sent when a new apartment is submitted."""

    name: str
    desc: str
    sale_price: Decimal | None
    sale_status: str
    features: List[str]
    longitude: Decimal | None
    latitude: Decimal | None
    images: List[Any]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "desc": self.desc,
            "sale_price": _number(self.sale_price),
            "sale_status": self.sale_status,
            "features": list(self.features),
            "longitude": _number(self.longitude),
            "latitude": _number(self.latitude),
            "images": [_handle_name(handle) for handle in self.images],
        }


@dataclass
class EditPayload:
    """Scalar fields plus collection deltas sent when an apartment is edited."""

    apartment_id: str
    name: str
    desc: str
    sale_status: str
    longitude: Decimal | None
    latitude: Decimal | None
    features_added: List[str]
    features_removed: List[str]
    images_added: List[Any]
    images_removed: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.apartment_id,
            "name": self.name,
            "desc": self.desc,
            "sale_status": self.sale_status,
            "longitude": _number(self.longitude),
            "latitude": _number(self.latitude),
            "features_added": list(self.features_added),
            "features_removed": list(self.features_removed),
            "images_added": [_handle_name(handle) for handle in self.images_added],
            "images_removed": list(self.images_removed),
        }


def to_decimal(value: Any) -> Decimal | None:
    """Coerce a JSON/form value into a finite Decimal; blanks become None."""
    if value is None:
        return None
    if isinstance(value, Decimal):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = Decimal(text)
        except InvalidOperation as exc:
            raise ValueError(f"Not a number: {value!r}") from exc
    if not number.is_finite():
        raise ValueError(f"Not a number: {value!r}")
    return number


def _number(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


def _handle_name(handle: Any) -> str:
    return str(getattr(handle, "name", handle))
