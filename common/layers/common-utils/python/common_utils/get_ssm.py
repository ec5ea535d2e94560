"""Shared helpers for retrieving configuration from SSM Parameter Store."""

import logging
import os
from typing import List, Optional
import boto3

__author__ = "Koushik Sinha"
__version__ = "1.1.0"
__modified_by__ = "Koushik Sinha"

logger = logging.getLogger(__name__)
_ssm_client = boto3.client("ssm")

SSM_ROOT = "/parameters/aio/ameritasAI"

# Simple in-memory cache so functions within a single Lambda invocation
# don't repeatedly hit SSM
_SSM_CACHE: dict[str, str] = {}


def get_values_from_ssm(name: str, decrypt: bool = False) -> Optional[str]:
    """Retrieve a parameter value from SSM with optional decryption."""
    if name in _SSM_CACHE:
        return _SSM_CACHE[name]
    try:
        resp = _ssm_client.get_parameter(Name=name, WithDecryption=decrypt)
        value = resp["Parameter"]["Value"]
        _SSM_CACHE[name] = value
        logger.info("Parameter Value for %s: %s", name, value)
        return value
    except _ssm_client.exceptions.ParameterNotFound:
        logger.info("Parameter %s not found", name)
        return None
    except Exception as exc:
        logger.error("Error retrieving parameter %s: %s", name, exc)
        raise


def get_environment_prefix() -> str:
    """Return the base SSM prefix for the current environment."""
    env = get_values_from_ssm(f"{SSM_ROOT}/SERVER_ENV")
    if not env:
        raise RuntimeError("SERVER_ENV not set in SSM")
    return f"{SSM_ROOT}/{env}"


def get_config(name: str, decrypt: bool = False) -> Optional[str]:
    """Return configuration ``name``.

    The process environment is consulted first; when ``name`` is not set
    there the value is read from SSM under ``get_environment_prefix()``.
    """
    value = os.environ.get(name)
    if value:
        return value
    return get_values_from_ssm(f"{get_environment_prefix()}/{name}", decrypt)


def split_csv(value: Optional[str]) -> List[str]:
    """Split a comma-separated setting, dropping blank entries."""
    return [item.strip() for item in (value or "").split(",") if item.strip()]
