"""Run the notevault HTTP server: ``python -m notevault``."""

from __future__ import annotations

import logging

import uvicorn

from notevault.api import create_app
from notevault.config import Settings


def main() -> None:
    settings = Settings.load()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(
        "Serving %s snapshot at %s on %s:%d",
        settings.backend,
        settings.data_path,
        settings.host,
        settings.port,
    )
    uvicorn.run(
        create_app(settings=settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
