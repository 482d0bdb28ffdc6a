"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

from typing import Iterable

from flask import Request
from werkzeug.exceptions import BadRequest

from .sanitize import strip_markup


def parse_json_request(
    req: Request,
    *,
    required_keys: Iterable[str] | None = None,
    allow_empty: bool = False,
) -> dict:
    """Return the parsed JSON body or raise a 400 error."""

    if not req.is_json:
        raise BadRequest("Request content type must be application/json.")

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request JSON body is required.")

    if not isinstance(data, dict):
        raise BadRequest("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise BadRequest("Request JSON body must not be empty.")

    if required_keys:
        missing = [key for key in required_keys if data.get(key) in (None, "")]
        if missing:
            raise BadRequest(
                "Missing required fields: {}.".format(
                    ", ".join(sorted(missing))
                )
            )

    return data


def get_string(
    data: dict,
    key: str,
    *,
    max_length: int | None = 255,
    required: bool = True,
) -> str | None:
    """Return a stripped, non-empty string field from ``data``.

    The length limit applies to the text as sent; markup is neutralized
    afterwards.
    """

    value = data.get(key)
    if value is None:
        if required:
            raise BadRequest(f"{key} is required.")
        return None
    if not isinstance(value, str):
        raise BadRequest(f"{key} must be a string.")

    value = value.strip()
    if not value:
        raise BadRequest(f"{key} must not be empty.")
    if max_length is not None and len(value) > max_length:
        raise BadRequest(f"{key} must be at most {max_length} characters.")
    return strip_markup(value)


def get_int(data: dict, key: str, *, required: bool = True) -> int | None:
    """Return an integer field from ``data``."""

    value = data.get(key)
    if value is None:
        if required:
            raise BadRequest(f"{key} is required.")
        return None
    if isinstance(value, bool):
        raise BadRequest(f"{key} must be an integer.")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequest(f"{key} must be an integer.") from None


def query_arg(req: Request, key: str, type=None):
    """Return the last value of a query parameter.

    Repeated parameters (``?a=1&a=2``) collapse to the final value.
    """

    values = req.args.getlist(key)
    if not values:
        return None
    value = values[-1]
    if type is None:
        return value
    try:
        return type(value)
    except (TypeError, ValueError):
        raise BadRequest(f"Invalid value for query parameter {key}.") from None
