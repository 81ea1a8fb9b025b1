"""
Run the API with uvicorn: ``python -m school_cms``.
"""

from __future__ import annotations

import logging

import uvicorn

from school_cms.config import get_settings


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
    )
    settings = get_settings()
    logging.getLogger(__name__).info("Server running on port %d", settings.port)
    uvicorn.run("school_cms.app:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
