"""CLI entrypoint for creating or editing one apartment listing."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path

from listingdesk.catalog import CatalogClient, JsonCatalog, build_catalog_from_env
from listingdesk.editor import ListingEditor
from listingdesk.files import LocalFile
from listingdesk.loader import FAILED, BaselineLoader
from listingdesk.models import SALE_STATUSES

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Apartment listing editor")
    parser.add_argument("--edit", metavar="ID", help="edit an existing apartment instead of creating one")
    parser.add_argument("--name")
    parser.add_argument("--desc")
    parser.add_argument("--price", help="sale price")
    parser.add_argument("--status", choices=list(SALE_STATUSES), help="sale status")
    parser.add_argument("--longitude")
    parser.add_argument("--latitude")
    parser.add_argument("--feature", action="append", default=[], help="add a feature (repeatable)")
    parser.add_argument(
        "--remove-feature",
        action="append",
        default=[],
        help="remove an existing feature (repeatable)",
    )
    parser.add_argument("--image", action="append", default=[], type=Path, help="attach an image file (repeatable)")
    parser.add_argument(
        "--remove-image",
        action="append",
        default=[],
        help="remove an attached image by file name (repeatable)",
    )
    parser.add_argument(
        "--catalog-url",
        default=os.getenv("CATALOG_URL"),
        help="catalog API base URL (overrides CATALOG_URL env var)",
    )
    parser.add_argument(
        "--catalog-path",
        type=Path,
        default=None,
        help="JSON catalog file (overrides CATALOG_PATH env var)",
    )
    parser.add_argument("--verbose", action="store_true", help="enable debug logging")
    return parser


def resolve_catalog(args: argparse.Namespace):
    if args.catalog_url:
        return CatalogClient(base_url=args.catalog_url)
    if args.catalog_path:
        return JsonCatalog(path=args.catalog_path)
    return build_catalog_from_env()


async def run_session(args: argparse.Namespace, catalog) -> int:
    submitted = []

    def fetch(apartment_id: str):
        if catalog is None:
            raise RuntimeError("No catalog configured (set CATALOG_URL or CATALOG_PATH)")
        return catalog.get_apartment(apartment_id)

    editor = ListingEditor(loader=BaselineLoader(fetcher=fetch), on_submit=submitted.append)
    if args.edit:
        await editor.open_edit(args.edit)
        if editor.loader.state == FAILED:
            logger.error("Could not load apartment %s: %s", args.edit, editor.loader.error)
            return 2
    else:
        await editor.open_create()

    for key, value in (
        ("name", args.name),
        ("desc", args.desc),
        ("sale_price", args.price),
        ("sale_status", args.status),
        ("longitude", args.longitude),
        ("latitude", args.latitude),
    ):
        if value is not None:
            editor.set_field(key, value)

    for feature in args.remove_feature:
        items = editor.store.features.items
        if feature in items:
            editor.remove_feature(feature, items.index(feature))
        else:
            logger.warning("Feature %r is not present", feature)
    for feature in args.feature:
        editor.add_feature(feature)

    for file_name in args.remove_image:
        images = editor.store.images.items
        matches = [index for index, image in enumerate(images) if image.file_name == file_name]
        if not matches:
            logger.warning("Image %r is not attached", file_name)
            continue
        editor.remove_image(images[matches[0]], matches[0])
    if args.image:
        await editor.add_images([LocalFile(path) for path in args.image])
        if "images" in editor.errors:
            logger.warning("%s", editor.errors["images"])

    if not editor.submit():
        for key, message in editor.errors.items():
            if key != "message":
                print(f"{key}: {message}", file=sys.stderr)
        logger.error("%s", editor.errors.get("message", "Validation failed"))
        return 1

    print(json.dumps(submitted[0].to_dict(), indent=2, ensure_ascii=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)
    catalog = resolve_catalog(args)
    return asyncio.run(run_session(args, catalog))


if __name__ == "__main__":
    sys.exit(main())
