"""Parsing of the TidyApi Authorization header."""

import time
from dataclasses import dataclass
from typing import Optional

from tidyapi_auth.config import get_settings
from tidyapi_auth.results import ErrorCode, TidyApiError
from tidyapi_auth.signing import SIGN_ALGORITHM


@dataclass(frozen=True)
class ParsedAuthorization:
    """The parts of a well-formed Authorization header."""

    unix_seconds: int
    access_key: str
    signature: str
    algorithm: str = SIGN_ALGORITHM


def _parse_unix_seconds(text: str) -> Optional[int]:
    # int() accepts "+5", " 5", "0005" and "1_000"; only the canonical form is allowed
    try:
        value = int(text)
    except ValueError:
        return None
    if str(value) != text:
        return None
    return value


def parse_authorization_header(
    value: str,
    max_seconds_gap: Optional[int] = None,
    now: Optional[int] = None,
) -> ParsedAuthorization:
    """
    Parse and check an Authorization header value.

    Expected format:
    Authorization: HS256 <unix_seconds> <access_key> <signature>

    Args:
        value: The Authorization header value
        max_seconds_gap: Maximum allowed |now - unix_seconds| (default: from settings)
        now: Current unix time in seconds (default: wall clock)

    Returns:
        ParsedAuthorization with the timestamp, access key and signature

    Raises:
        TidyApiError: If the header is malformed or the timestamp is out of window
    """
    if not isinstance(value, str):
        raise TidyApiError(ErrorCode.InvalidAuthorization, "Invalid Authorization Format")

    parts = value.split(" ")
    if len(parts) != 4:
        raise TidyApiError(ErrorCode.InvalidAuthorization, "Invalid Authorization Format")

    algorithm, unix_seconds_text, access_key, signature = parts
    if algorithm != SIGN_ALGORITHM:
        raise TidyApiError(ErrorCode.InvalidAuthorization, f"Invalid Algorithm:{algorithm}")

    if max_seconds_gap is None:
        max_seconds_gap = get_settings().max_seconds_gap
    if now is None:
        now = int(time.time())

    unix_seconds = _parse_unix_seconds(unix_seconds_text)
    if unix_seconds is None or abs(now - unix_seconds) > max_seconds_gap:
        raise TidyApiError(ErrorCode.InvalidTime, f"Invalid Time:{unix_seconds_text}")

    if not access_key:
        raise TidyApiError(ErrorCode.InvalidAuthorization, "Missing AccessKey")

    if not signature:
        raise TidyApiError(ErrorCode.InvalidAuthorization, "Missing Signature")

    return ParsedAuthorization(
        unix_seconds=unix_seconds,
        access_key=access_key,
        signature=signature,
    )
