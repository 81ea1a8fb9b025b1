"""
Create the administrator account, or reset its password if it exists.
"""

from __future__ import annotations

import argparse
import getpass
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from school_cms.db import InMemoryDbClient
from school_cms.dependencies import get_db_client
from school_cms.security import hash_password


logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Create or reset the admin user")
    parser.add_argument("--username", required=True, help="Admin username")
    parser.add_argument(
        "--password",
        default=None,
        help="Plaintext password (prompted for when omitted)",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(message)s")
    password = args.password or getpass.getpass("Password: ")
    if not password:
        logger.error("Password must not be empty")
        return 1

    db = get_db_client()
    if isinstance(db, InMemoryDbClient):
        logger.warning("DATABASE_URL is not set; the admin will not be persisted")

    admin = db.save_admin(args.username, hash_password(password))
    logger.info("Saved admin %s (id=%d)", admin.username, admin.id)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
