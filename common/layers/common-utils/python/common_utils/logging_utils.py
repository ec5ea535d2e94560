import logging
import json
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

__all__ = ["configure_logger"]


def _setting(name: str) -> Optional[str]:
    """Return ``name`` from the environment or Parameter Store, if available."""
    from common_utils import get_ssm  # late import to avoid circular dependency

    try:
        return get_ssm.get_config(name)
    except (BotoCoreError, ClientError, RuntimeError) as exc:
        logging.getLogger(__name__).debug("No %s in Parameter Store: %s", name, exc)
        return None


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def configure_logger(name: str, level: str = "INFO") -> logging.Logger:
    """Return a logger configured with a standard formatter.

    The log level can be overridden via the ``LOG_LEVEL`` setting. When
    ``LOG_JSON`` is ``true`` logs are formatted as JSON. Both settings are
    read from the environment first and then from Parameter Store.
    """
    logger = logging.getLogger(name)

    log_level = _setting("LOG_LEVEL") or level
    logger.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))

    json_flag = _setting("LOG_JSON") or "false"
    if str(json_flag).lower() == "true":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s",
            "%Y-%m-%dT%H:%M:%S%z",
        )
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    else:
        for handler in logger.handlers:
            handler.setFormatter(formatter)
    return logger
