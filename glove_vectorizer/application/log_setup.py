# glove_vectorizer/application/log_setup.py
import sys
from loguru import logger
from glove_vectorizer.application.settings import Settings, get_settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


def resolve_log_level(settings: Settings) -> str:
    if settings.log_level:
        return settings.log_level.upper()
    return "DEBUG" if settings.debug else "INFO"


def setup_logging(settings: Settings | None = None) -> None:
    """Configure Loguru once: a single stdout sink, level from Settings."""
    settings = settings or get_settings()

    logger.remove()  # remove default handler(s) to avoid duplicates on reload
    logger.add(
        sys.stdout,
        level=resolve_log_level(settings),
        format=LOG_FORMAT,
        serialize=settings.log_json,
        backtrace=False,
        diagnose=False,
    )
    logger.debug("Logging configured (env='{}', json={})", settings.app_env, settings.log_json)
