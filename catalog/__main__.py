# catalog/__main__.py
from __future__ import annotations

import uvicorn

from catalog.core.logging import setup_logging
from catalog.core.settings import settings


def main() -> None:
    uvicorn.run(
        "catalog.main:app",
        host=settings.HOST,
        port=settings.PORT,
        # numeric level, so an unknown LOG_LEVEL name degrades to INFO here too
        log_level=setup_logging(settings.LOG_LEVEL),
    )


if __name__ == "__main__":
    main()
