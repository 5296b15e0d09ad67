import logging
import sys
import uvicorn
from pydantic import ValidationError

logger = logging.getLogger(__name__)


def main() -> int:
    """Load settings, then serve the app with uvicorn. Exits non-zero when configuration is missing"""
    # settings are built on import, so the import itself is what fails on a missing variable
    try:
        from app.configs.app_settings import settings
    except ValidationError as e:
        logging.basicConfig(level=logging.INFO)
        missing = ", ".join(".".join(str(part) for part in error["loc"]) for error in e.errors())
        logger.critical(f"❌ config_missing: set {missing} in the environment or .env")
        return 1

    from app.configs.logging_config import setup_logging

    setup_logging(settings.LOG_LEVEL)
    logger.info(f"✅ Server listening on port {settings.PORT}")
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
    return 0


if __name__ == "__main__":
    sys.exit(main())
