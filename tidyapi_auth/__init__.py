"""
TidyApi request authentication.

Signs API requests with a shared secret (HMAC-SHA256) and validates them
on the server: header format, time window, signature and request envelope.

Basic Usage:
    from tidyapi_auth import create_signed_request, validate_request

    # Client: Sign a request
    body = '{"tidyapi":1,"method":"create","id":"r1"}'
    headers = create_signed_request(
        end_point_name="orders",
        body=body,
        access_key="ak1",
        access_secret="s3cr3t",
    )

    # Server: Validate a request
    result = validate_request(
        "orders", headers["Authorization"], body, {"ak1": "s3cr3t"}.__getitem__
    )
    if result.ok:
        print(result.request.method)
    else:
        print(result.error.code, result.error.message)

Async Usage:
    async def load_secret(access_key):
        return await vault.get(access_key)

    result = await validate_request_async("orders", header, body, load_secret)
"""

from tidyapi_auth.authorization import ParsedAuthorization, parse_authorization_header
from tidyapi_auth.config import Settings, get_settings
from tidyapi_auth.resolvers import SecretResolver, StaticSecretResolver, UnknownAccessKeyError
from tidyapi_auth.results import (
    ApiError,
    ErrorCode,
    RequestEnvelope,
    TidyApiError,
    ValidationFailure,
    ValidationResult,
    ValidationSuccess,
)
from tidyapi_auth.signing import (
    SIGN_ALGORITHM,
    SignatureOptions,
    build_content_to_sign,
    compute_signature,
    create_authorization_header,
    create_request_body,
    create_signed_request,
    derive_signing_key,
    format_authorization_header,
    sha256,
)
from tidyapi_auth.validation import validate_request, validate_request_async

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Signing
    "SIGN_ALGORITHM",
    "SignatureOptions",
    "build_content_to_sign",
    "compute_signature",
    "create_authorization_header",
    "create_request_body",
    "create_signed_request",
    "derive_signing_key",
    "format_authorization_header",
    "sha256",
    # Header parsing
    "ParsedAuthorization",
    "parse_authorization_header",
    # Validation
    "validate_request",
    "validate_request_async",
    # Results
    "ApiError",
    "ErrorCode",
    "RequestEnvelope",
    "TidyApiError",
    "ValidationFailure",
    "ValidationResult",
    "ValidationSuccess",
    # Secret resolvers
    "SecretResolver",
    "StaticSecretResolver",
    "UnknownAccessKeyError",
    # Settings
    "Settings",
    "get_settings",
]
