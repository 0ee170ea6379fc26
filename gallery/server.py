import logging

import uvicorn

from .core.config import settings

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the API with uvicorn on the configured host and port."""
    from .main import app

    logger.info("Server starting on %s:%s...", settings.host, settings.port)
    # keep our logging setup instead of uvicorn's default dictConfig
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
