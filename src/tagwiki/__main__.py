"""Run the TagWiki server: ``python -m tagwiki``."""

import uvicorn

from tagwiki.config import settings
from tagwiki.logging_setup import configure_logging


def main() -> None:
    configure_logging(settings.log_level)
    uvicorn.run(
        "tagwiki.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
