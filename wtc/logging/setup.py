import sys
import logging
from typing import Any, Optional

from loguru import logger

from wtc.config.settings import AppSettings, settings

SENSITIVE_KEYS = ["key", "token", "password", "secret"]


def _mask(value: str) -> str:
    if len(value) > 8:
        return value[:4] + "****" + value[-4:]
    return "********"


def make_sensitive_data_filter(app_settings: AppSettings):
    """Builds a filter that masks configured secrets in log records."""
    secrets = [s for s in (app_settings.supabase_key,) if s]

    def sensitive_data_filter(record: dict[str, Any]) -> bool:
        extra = record.get("extra")
        if isinstance(extra, dict):
            for extra_key, extra_value in extra.items():
                if isinstance(extra_value, str) and any(
                    sk in extra_key.lower() for sk in SENSITIVE_KEYS
                ):
                    extra[extra_key] = _mask(extra_value)

        for secret in secrets:
            if secret in record["message"]:
                record["message"] = record["message"].replace(secret, "********")

        return True  # Keep the record after masking

    return sensitive_data_filter


class InterceptHandler(logging.Handler):
    """Routes standard logging records (httpx, hpack, ...) through loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(
    level: Optional[str] = None,
    silent: Optional[bool] = None,
    app_settings: AppSettings = settings,
) -> None:
    """Configures Loguru logger based on application settings."""
    level = (level or app_settings.log_level).upper()
    silent = app_settings.silent if silent is None else silent

    logger.remove()  # Remove default handler

    if not silent:
        logger.add(
            sys.stderr,
            level=level,
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{extra[stage]}</cyan> | "
                "<level>{message}</level> <dim>{extra}</dim>"
            ),
            colorize=True,
            backtrace=True,
            diagnose=False,
            filter=make_sensitive_data_filter(app_settings),
        )

    # Every record carries a stage so the format above never misses the key
    logger.configure(extra={"stage": "main"})

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logger.debug(f"Logging initialized with level: {level}")
