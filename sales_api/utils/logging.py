# sales_api/utils/logging.py
import logging
import logging.config
from typing import Optional

def configure_logging(level: str = "INFO"):
    """
    Sends every log record to stderr as "time | level | logger | message".
    Called once by the API lifespan; the worker relies on Prefect's own logging.
    """
    level = level.upper()
    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {
                "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": "console",
                "level": level,
            },
        },
        "root": {"handlers": ["default"], "level": level},
    })

def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)
