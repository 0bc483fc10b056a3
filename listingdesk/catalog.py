"""Sources the editor loads baseline apartments from."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Protocol
from urllib.parse import urljoin

import requests

from .models import Apartment

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 20


class ApartmentNotFound(LookupError):
    """Raised when the catalog has no apartment with the requested id."""

    def __init__(self, apartment_id: str):
        super().__init__(f"Apartment {apartment_id} not found")
        self.apartment_id = apartment_id


class Catalog(Protocol):
    """Read-only view of the apartment catalog."""

    def get_apartment(self, apartment_id: str) -> Apartment:
        ...

    def list_apartments(self) -> List[Apartment]:
        ...


class CatalogClient:
    """Lightweight wrapper around the catalog HTTP API."""

    def __init__(self,
                 base_url: str,
                 session: requests.Session | None = None,
                 timeout: int = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/") + "/"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": "listingdesk/1.0",
            "Accept": "application/json",
        })

    def get(self, endpoint: str) -> requests.Response:
        return self.session.get(urljoin(self.base_url, endpoint),
                                timeout=self.timeout)

    def get_apartment(self, apartment_id: str) -> Apartment:
        logger.debug("Fetching apartment %s from %s", apartment_id, self.base_url)
        response = self.get(f"apartments/{apartment_id}")
        if response.status_code == 404:
            raise ApartmentNotFound(apartment_id)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError(f"Unexpected response payload: {payload!r}")
        return Apartment.from_dict(payload)

    def list_apartments(self) -> List[Apartment]:
        response = self.get("apartments")
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, list):
            raise ValueError(f"Unexpected response payload: {payload!r}")
        return [Apartment.from_dict(row) for row in payload]


@dataclass
class JsonCatalog:
    """Catalog stored as a JSON array of apartment records."""

    path: Path

    def list_apartments(self) -> List[Apartment]:
        with self.path.open(encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, list):
            raise ValueError(f"{self.path} must contain a JSON array")
        return [Apartment.from_dict(row) for row in payload]

    def get_apartment(self, apartment_id: str) -> Apartment:
        for apartment in self.list_apartments():
            if apartment.apartment_id == str(apartment_id):
                return apartment
        raise ApartmentNotFound(apartment_id)


def build_catalog_from_env() -> Catalog | None:
    """Construct a catalog source from environment configuration."""
    catalog_url = (os.getenv("CATALOG_URL") or "").strip()
    if catalog_url:
        return CatalogClient(base_url=catalog_url)

    catalog_path = (os.getenv("CATALOG_PATH") or "").strip()
    if catalog_path:
        return JsonCatalog(path=Path(catalog_path).expanduser())

    return None


__all__ = [
    "ApartmentNotFound",
    "Catalog",
    "CatalogClient",
    "JsonCatalog",
    "build_catalog_from_env",
]
