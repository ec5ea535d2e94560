"""Utilities for building Lambda-style responses."""

from typing import Any, Dict

from models import LambdaResponse

__all__ = ["lambda_response"]


def lambda_response(status: int, body: Any) -> Dict[str, Any]:
    """Return a standard Lambda response dictionary."""
    return LambdaResponse(statusCode=status, body=body).to_dict()
