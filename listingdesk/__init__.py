"""listingdesk package initialization."""

from .browser import ApartmentBrowser
from .catalog import ApartmentNotFound, CatalogClient, JsonCatalog, build_catalog_from_env
from .diff import CollectionTracker
from .draft import DraftStore
from .editor import ListingEditor, build_payload
from .files import MAX_FILE_SIZE, LocalFile, format_file_size, ingest_files
from .loader import BaselineLoader
from .models import (
    Apartment,
    CollectionDiff,
    CreatePayload,
    EditPayload,
    EntityDraft,
    ImagePreview,
    IngestionResult,
    ValidationResult,
)
from .validation import validate_listing

__all__ = [
    "Apartment",
    "ApartmentBrowser",
    "ApartmentNotFound",
    "BaselineLoader",
    "CatalogClient",
    "CollectionDiff",
    "CollectionTracker",
    "CreatePayload",
    "DraftStore",
    "EditPayload",
    "EntityDraft",
    "ImagePreview",
    "IngestionResult",
    "JsonCatalog",
    "ListingEditor",
    "LocalFile",
    "MAX_FILE_SIZE",
    "ValidationResult",
    "build_catalog_from_env",
    "build_payload",
    "format_file_size",
    "ingest_files",
    "validate_listing",
]
