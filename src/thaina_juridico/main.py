"""Entry point: ``thaina-juridico`` console script.

Configures logging from ``LOG_LEVEL`` and serves the app factory with
uvicorn on ``HOST``/``PORT``.
"""

from __future__ import annotations

import logging

import uvicorn

from thaina_juridico.infrastructure.config import get_settings

_LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


def main() -> None:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level.upper(), format=_LOG_FORMAT)
    # httpx logs every upstream request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    uvicorn.run(
        "thaina_juridico.interface.app:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
