"""
Server-side validation of TidyApi requests.

Pipeline: parse header -> check time window -> resolve secret ->
verify signature -> decode request envelope. Every rejection is returned
as a ValidationFailure; nothing raised by the header codec, the JSON
decoder or the secret resolver escapes to the caller.
"""

import hmac
import inspect
import json
import logging
from typing import Any, Optional, Union

from tidyapi_auth.authorization import ParsedAuthorization, parse_authorization_header
from tidyapi_auth.config import get_settings
from tidyapi_auth.resolvers import AsyncSecretLoader, SecretResolver, SyncSecretLoader
from tidyapi_auth.results import (
    ErrorCode,
    RequestEnvelope,
    TidyApiError,
    ValidationFailure,
    ValidationResult,
    ValidationSuccess,
    failure,
)
from tidyapi_auth.signing import Body, compute_signature

logger = logging.getLogger(__name__)

_MISSING = object()


def _render_member(value: Any) -> str:
    if value is _MISSING:
        return "undefined"
    if isinstance(value, str):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name} in JSON")


def _body_text(body: Body) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


def _reject(
    result: ValidationFailure,
    end_point_name: str,
    access_key: Optional[str] = None,
) -> ValidationFailure:
    level = logging.INFO if get_settings().log_rejections else logging.DEBUG
    logger.log(
        level,
        "Rejected request: end_point=%s access_key=%s code=%d",
        end_point_name,
        access_key,
        result.code,
    )
    return result


def _invalid_access_key(access_key: str) -> ValidationFailure:
    return failure(ErrorCode.InvalidAuthorization, f"Invalid AccessKey:{access_key}")


def _parse(
    end_point_name: str,
    authorization_header: str,
    max_seconds_gap: Optional[int],
) -> Union[ParsedAuthorization, ValidationFailure]:
    try:
        return parse_authorization_header(authorization_header, max_seconds_gap)
    except TidyApiError as e:
        return _reject(ValidationFailure(error=e.error), end_point_name)


def _decode_envelope(body: Body) -> Union[RequestEnvelope, ValidationFailure]:
    try:
        document = json.loads(body, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        return failure(ErrorCode.InvalidRequestObject, f"Invalid Request Body, error: {e}")

    if not isinstance(document, dict):
        return failure(
            ErrorCode.InvalidRequestObject,
            f"Invalid type of Request Body: {_body_text(body)}",
        )

    tidyapi = document.get("tidyapi", _MISSING)
    # JSON 1 and 1.0 are the same number
    if isinstance(tidyapi, bool) or not isinstance(tidyapi, (int, float)) or tidyapi != 1:
        return failure(
            ErrorCode.InvalidRequestObject,
            f"Invalid Request member: tidyapi={_render_member(tidyapi)}",
        )

    for member in ("method", "id"):
        value = document.get(member, _MISSING)
        if not isinstance(value, str) or not value:
            return failure(
                ErrorCode.InvalidRequestObject,
                f"Invalid Request member: {member}={_render_member(value)}",
            )

    return RequestEnvelope.from_document(document)


def _validate_with_secret(
    authorization: ParsedAuthorization,
    end_point_name: str,
    body: Body,
    access_secret: Any,
) -> ValidationResult:
    access_key = authorization.access_key

    # A resolver must never hand back an empty or non-text secret
    if not isinstance(access_secret, str) or not access_secret:
        logger.warning("Secret resolver returned no secret for access_key=%s", access_key)
        return _reject(_invalid_access_key(access_key), end_point_name, access_key)

    expected_signature = compute_signature(
        end_point_name,
        body,
        str(authorization.unix_seconds),
        access_key,
        access_secret,
    )
    if not hmac.compare_digest(
        expected_signature.encode("utf-8"), authorization.signature.encode("utf-8")
    ):
        return _reject(
            failure(ErrorCode.InvalidAuthorization, "Invalid Signature"),
            end_point_name,
            access_key,
        )

    envelope = _decode_envelope(body)
    if isinstance(envelope, ValidationFailure):
        return _reject(envelope, end_point_name, access_key)

    logger.debug(
        "Accepted request: end_point=%s access_key=%s method=%s id=%s",
        end_point_name,
        access_key,
        envelope.method,
        envelope.id,
    )
    return ValidationSuccess(
        request=envelope,
        end_point_name=end_point_name,
        unix_seconds=authorization.unix_seconds,
        access_key=access_key,
    )


def validate_request(
    end_point_name: str,
    authorization_header: str,
    body: Body,
    secret_resolver: Union[SecretResolver, SyncSecretLoader],
    max_seconds_gap: Optional[int] = None,
) -> ValidationResult:
    """
    Validate a signed request with a synchronous secret resolver.

    Args:
        end_point_name: Name of the end point the request was sent to
        authorization_header: The Authorization header value
        body: The raw request body
        secret_resolver: Callable or SecretResolver mapping access key to secret
        max_seconds_gap: Allowed clock difference in seconds (default: from settings, 300)

    Returns:
        ValidationSuccess with the decoded request, or ValidationFailure
    """
    authorization = _parse(end_point_name, authorization_header, max_seconds_gap)
    if isinstance(authorization, ValidationFailure):
        return authorization

    access_key = authorization.access_key
    try:
        if isinstance(secret_resolver, SecretResolver):
            access_secret = secret_resolver.resolve(access_key)
        else:
            access_secret = secret_resolver(access_key)
    except Exception as e:
        logger.warning("Secret resolution failed for access_key=%s: %s", access_key, type(e).__name__)
        return _reject(_invalid_access_key(access_key), end_point_name, access_key)

    if inspect.iscoroutine(access_secret):
        # an async resolver passed to the sync entry point
        access_secret.close()

    return _validate_with_secret(authorization, end_point_name, body, access_secret)


async def validate_request_async(
    end_point_name: str,
    authorization_header: str,
    body: Body,
    secret_resolver: Union[SecretResolver, AsyncSecretLoader],
    max_seconds_gap: Optional[int] = None,
) -> ValidationResult:
    """
    Validate a signed request, awaiting the secret resolver.

    Same checks and results as validate_request. The resolver may be a
    coroutine function, a callable returning an awaitable or the secret
    itself, or a SecretResolver (its resolve_async is awaited).
    Cancelling the resolver cancels validation.
    """
    authorization = _parse(end_point_name, authorization_header, max_seconds_gap)
    if isinstance(authorization, ValidationFailure):
        return authorization

    access_key = authorization.access_key
    try:
        if isinstance(secret_resolver, SecretResolver):
            access_secret = secret_resolver.resolve_async(access_key)
        else:
            access_secret = secret_resolver(access_key)
        if inspect.isawaitable(access_secret):
            access_secret = await access_secret
    except Exception as e:
        logger.warning("Secret resolution failed for access_key=%s: %s", access_key, type(e).__name__)
        return _reject(_invalid_access_key(access_key), end_point_name, access_key)

    return _validate_with_secret(authorization, end_point_name, body, access_secret)
