from decimal import Decimal

import pytest

from listingdesk.draft import DraftStore
from listingdesk.models import ImagePreview, IngestionResult
from listingdesk.validation import GENERIC_MESSAGE, validate_listing


def valid_store() -> DraftStore:
    store = DraftStore()
    store.set_field("name", "Harbour View")
    store.set_field("desc", "Sea-facing loft")
    store.set_field("sale_status", "on_sale")
    store.set_field("sale_price", "199000")
    store.set_field("longitude", "33.36")
    store.set_field("latitude", "35.17")
    store.add_feature("Terrace")
    store.extend_images(IngestionResult(previews=[
        ImagePreview("loft.jpg", "2.00 KB", "data:image/jpeg;base64,AA==", source_file=object()),
    ]))
    return store


def run(store: DraftStore):
    return validate_listing(store.draft, store.features, store.images)


def test_valid_draft_passes():
    result = run(valid_store())

    assert result.failed is False
    assert result.messages == {}


@pytest.mark.parametrize(
    "field, value",
    [
        ("name", "   "),
        ("desc", ""),
        ("sale_status", ""),
        ("sale_status", "rented"),
        ("longitude", "0"),
        ("latitude", None),
        ("sale_price", "-1"),
    ],
)
def test_single_missing_field_is_reported_alone(field, value):
    store = valid_store()
    store.set_field(field, value)

    result = run(store)

    assert result.failed is True
    assert set(result.messages) == {field, "message"}
    assert result.messages["message"] == GENERIC_MESSAGE


def test_missing_collections_are_reported():
    store = valid_store()
    store.remove_feature("Terrace", 0)
    store.remove_image(store.images.items[0], 0)

    result = run(store)

    assert set(result.messages) == {"features", "images", "message"}


def test_empty_draft_reports_every_field():
    result = run(DraftStore())

    assert set(result.messages) == {
        "name", "desc", "sale_status", "longitude", "latitude", "features", "images", "message",
    }


def test_sale_price_is_optional():
    store = valid_store()
    store.set_field("sale_price", "")

    assert run(store).failed is False


def test_edit_collections_fail_only_when_all_baseline_removed():
    store = valid_store()
    store.features.seed(["A", "B"])

    store.remove_feature("A", 0)
    store.remove_feature("B", 0)
    assert "features" in run(store).messages

    store.add_feature("C")
    assert "features" not in run(store).messages


@pytest.mark.parametrize("field", ["longitude", "latitude"])
@pytest.mark.parametrize("value", ["NaN", "Infinity"])
def test_non_finite_coordinate_is_rejected(field, value):
    store = valid_store()
    store.set_field(field, value)

    result = run(store)

    assert result.failed is True
    assert set(result.messages) == {field, "message"}


@pytest.mark.parametrize("field", ["sale_price", "longitude", "latitude"])
def test_non_finite_decimal_on_draft_is_reported_not_raised(field):
    store = valid_store()
    setattr(store.draft, field, Decimal("NaN"))

    result = run(store)

    assert result.failed is True
    assert set(result.messages) == {field, "message"}
