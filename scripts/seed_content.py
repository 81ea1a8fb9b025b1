"""
Seed the single-row pages (hero, headmaster message, visi-misi).

The API only exposes updates for these resources, so a fresh database needs
one row of each before the admin UI can edit them. Existing rows are left
untouched.
"""

from __future__ import annotations

import argparse
import logging
import mimetypes
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from school_cms.db import DbClient, ResourceKind
from school_cms.dependencies import get_db_client, get_storage_client
from school_cms.storage import StorageClient


logger = logging.getLogger(__name__)

DEFAULT_ROWS = {
    ResourceKind.HERO: {
        "welcome_message": "Selamat Datang",
        "description": "Website resmi sekolah",
    },
    ResourceKind.HEADMASTER_MESSAGE: {
        "message": "Sambutan Kepala Sekolah",
        "description": "",
        "headmaster_name": "Kepala Sekolah",
    },
    ResourceKind.VISI_MISI: {
        "visi": "",
        "misi": [],
    },
}

NEEDS_IMAGE = {ResourceKind.HERO, ResourceKind.HEADMASTER_MESSAGE}


def seed(db: DbClient, storage: StorageClient, image_path: Path) -> int:
    created = 0
    content_type = mimetypes.guess_type(image_path.name)[0]
    for kind, defaults in DEFAULT_ROWS.items():
        if db.first_row(kind) is not None:
            logger.info("%s already has a row, skipping", kind.value)
            continue
        values = dict(defaults)
        if kind in NEEDS_IMAGE:
            # One blob per row: replacing one image must not remove the other.
            values["image"] = storage.upload(
                image_path.read_bytes(), image_path.name, content_type
            )
        row = db.create_row(kind, values)
        logger.info("Created %s row id=%s", kind.value, row["id"])
        created += 1
    return created


def main() -> int:
    parser = argparse.ArgumentParser(description="Seed single-row content")
    parser.add_argument(
        "--image",
        type=Path,
        required=True,
        help="Placeholder image uploaded for the hero and headmaster rows",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")
    if not args.image.is_file():
        logger.error("Image not found: %s", args.image)
        return 1

    created = seed(get_db_client(), get_storage_client(), args.image)
    logger.info("Seeded %d rows", created)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
