import logging
import logging.config
import sys
import json
import os
from typing import Any

# Emojis for Visual Grepping
EMOJI_PAYLOAD = "📦"
EMOJI_FLOW_START = "🚀"
EMOJI_FLOW_END = "🏁"
EMOJI_FLOW_SKIP = "⏭️"
EMOJI_SUCCESS = "✅"
EMOJI_WARNING = "🟠"
EMOJI_ERROR = "❌"
EMOJI_DB = "💾"
EMOJI_AUTH = "🔐"

REDACT_KEYS = {
    "password", "password_hash", "confirm_password",
    "token", "api_key", "authorization", "secret", "cookie",
}

class PrettyJSONFormatter(logging.Formatter):
    """
    Formatter that dumps dict/list message arguments as pretty JSON.
    """
    def format(self, record):
        # Allow passing a dict/list as the message directly
        if isinstance(record.msg, (dict, list)):
            try:
                record.msg = f"\n{json.dumps(record.msg, indent=2, default=str)}"
            except (TypeError, ValueError):
                pass
        return super().format(record)

def setup_logging(log_level="INFO", log_dir="logs", log_filename="client_reporter.log", log_to_file=True):
    """
    Configures logging with Console and Rotating File handlers.
    """
    if isinstance(log_level, str):
        log_level = getattr(logging, log_level.upper(), logging.INFO)

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "stream": sys.stdout,
            "formatter": "pretty",
            "level": log_level
        },
    }

    if log_to_file:
        # Ensure log directory exists
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)

        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": os.path.join(log_dir, log_filename),
            "maxBytes": 10 * 1024 * 1024, # 10 MB
            "backupCount": 5,
            "formatter": "pretty",
            "level": log_level,
            "encoding": "utf-8"
        }

    handler_names = list(handlers)

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            },
            "pretty": {
                "()": PrettyJSONFormatter,
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            }
        },
        "handlers": handlers,
        "root": {
            "handlers": handler_names,
            "level": log_level
        },
        "loggers": {
            "uvicorn": {
                "handlers": handler_names,
                "level": "INFO",
                "propagate": False
            },
            "sqlalchemy.engine": {
                "handlers": handler_names,
                "level": "WARNING", # Prevent SQL spam unless debugging
                "propagate": False
            }
        }
    }

    logging.config.dictConfig(logging_config)

def redact(payload: Any) -> Any:
    """Mask secret-looking keys before a payload reaches the logs."""
    if isinstance(payload, dict):
        return {
            k: "******" if any(s in str(k).lower() for s in REDACT_KEYS) else redact(v)
            for k, v in payload.items()
        }
    if isinstance(payload, list):
        return [redact(item) for item in payload]
    return payload

# Helper functions for standardized logging
def log_payload(logger, payload, msg="Payload Received"):
    try:
        # Manually pretty print to ensure it survives f-strings
        pretty_payload = json.dumps(redact(payload), indent=2, default=str)
        logger.info(f"{EMOJI_PAYLOAD} {msg}:\n{pretty_payload}")
    except (TypeError, ValueError):
        # Fallback
        logger.info(f"{EMOJI_PAYLOAD} {msg}: {payload}")

def log_start(logger, msg):
    logger.info(f"{EMOJI_FLOW_START} {msg}")

def log_end(logger, msg):
    logger.info(f"{EMOJI_FLOW_END} {msg}")

def log_skip(logger, msg):
    logger.info(f"{EMOJI_FLOW_SKIP} {msg}")

def log_success(logger, msg):
    logger.info(f"{EMOJI_SUCCESS} success: {msg}")

def log_warning(logger, msg):
    logger.warning(f"{EMOJI_WARNING} {msg}")

def log_error(logger, msg, exc_info=False):
    logger.error(f"{EMOJI_ERROR} error: {msg}", exc_info=exc_info)

def log_auth(logger, msg):
    logger.info(f"{EMOJI_AUTH} auth: {msg}")

def log_db(logger, msg):
    logger.info(f"{EMOJI_DB} DB: {msg}")
