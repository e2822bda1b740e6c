"""Entry point for running ClassicXO via ``python -m classicxo``."""

from __future__ import annotations

import uvicorn

from .config import load_settings
from .logging_setup import setup_logging


def main() -> None:
    """Start the FastAPI-powered ClassicXO web server."""

    settings = load_settings()
    setup_logging(settings.log_level)
    # log_config=None keeps the handlers installed by setup_logging
    uvicorn.run(
        "classicxo.ui:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_config=None,
    )


if __name__ == "__main__":
    main()
