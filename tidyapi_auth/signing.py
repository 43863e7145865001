import base64
import json
import time
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives import hmac as crypto_hmac

SIGN_ALGORITHM = "HS256"

Body = Union[str, bytes]


def _to_bytes(data: Body, encoding: str = "utf-8") -> bytes:
    if isinstance(data, bytes):
        return data
    return data.encode(encoding)


def _unix_seconds_text(unix_seconds: Union[int, str]) -> str:
    if isinstance(unix_seconds, bool):
        raise TypeError("unix_seconds must be an int or its decimal string")
    if isinstance(unix_seconds, int):
        return str(unix_seconds)
    return unix_seconds


def sha256(data: Body) -> bytes:
    """
    Compute the raw SHA-256 digest of data.

    Args:
        data: Bytes, or text which is UTF-8 encoded first

    Returns:
        The 32-byte digest
    """
    digest = hashes.Hash(hashes.SHA256())
    digest.update(_to_bytes(data))
    return digest.finalize()


def derive_signing_key(
    end_point_name: str,
    unix_seconds: Union[int, str],
    access_secret: str,
) -> bytes:
    """
    Derive the per-request signing key.

    SigningKey := SHA256(EndPointName + ';' + UnixSeconds + ';' + AccessSecret)
    """
    return sha256(f"{end_point_name};{_unix_seconds_text(unix_seconds)};{access_secret}")


def build_content_to_sign(
    end_point_name: str,
    body: Body,
    unix_seconds: Union[int, str],
    access_key: str,
    access_secret: str,
) -> bytes:
    """
    Build the canonical binary content that is signed.

    ContentToSign :=
        Algorithm + ';' +
        EndPointName + ';' +
        SHA256(Body) + ';' +
        UnixSeconds + ';' +
        AccessKey + ';' +
        AccessSecret

    The body digest is included as its raw 32 bytes, not hex or base64.
    """
    return b";".join(
        [
            SIGN_ALGORITHM.encode("ascii"),
            end_point_name.encode("utf-8"),
            sha256(body),
            _unix_seconds_text(unix_seconds).encode("utf-8"),
            access_key.encode("utf-8"),
            access_secret.encode("utf-8"),
        ]
    )


def compute_signature(
    end_point_name: str,
    body: Body,
    unix_seconds: Union[int, str],
    access_key: str,
    access_secret: str,
) -> str:
    """
    Compute the TidyApi signature for a request.

    Signature := Base64(HMAC_SHA256(SigningKey, ContentToSign))

    Args:
        end_point_name: Name of the API end point being called
        body: The request body (text is UTF-8 encoded)
        unix_seconds: Request time, as an int or its canonical decimal string
        access_key: Public identifier of the caller
        access_secret: Secret shared between caller and server

    Returns:
        Base64-encoded signature (standard alphabet, padded)
    """
    mac = crypto_hmac.HMAC(
        derive_signing_key(end_point_name, unix_seconds, access_secret),
        hashes.SHA256(),
    )
    mac.update(build_content_to_sign(end_point_name, body, unix_seconds, access_key, access_secret))
    return base64.b64encode(mac.finalize()).decode("ascii")


def format_authorization_header(unix_seconds: int, access_key: str, signature: str) -> str:
    """Authorization := Algorithm + ' ' + UnixSeconds + ' ' + AccessKey + ' ' + Signature"""
    return f"{SIGN_ALGORITHM} {_unix_seconds_text(unix_seconds)} {access_key} {signature}"


def create_authorization_header(
    end_point_name: str,
    body: Body,
    unix_seconds: int,
    access_key: str,
    access_secret: str,
) -> str:
    """
    Sign a request and encode the Authorization header value.

    Returns:
        Header value of the form "HS256 <unix_seconds> <access_key> <signature>"
    """
    signature = compute_signature(end_point_name, body, unix_seconds, access_key, access_secret)
    return format_authorization_header(unix_seconds, access_key, signature)


@dataclass(frozen=True)
class SignatureOptions:
    """Everything needed to sign one request."""

    end_point_name: str
    body: Body
    unix_seconds: int
    access_key: str
    access_secret: str

    def signature(self) -> str:
        return compute_signature(
            self.end_point_name,
            self.body,
            self.unix_seconds,
            self.access_key,
            self.access_secret,
        )

    def authorization_header(self) -> str:
        return format_authorization_header(self.unix_seconds, self.access_key, self.signature())


def create_request_body(
    method: str,
    request_id: str,
    params: Optional[Any] = None,
) -> str:
    """
    Serialize a request envelope as compact JSON.

    Args:
        method: Name of the remote method
        request_id: Caller-chosen request identifier
        params: Optional JSON-serializable parameters

    Returns:
        JSON text of the form {"tidyapi":1,"method":...,"id":...,"params":...}
    """
    envelope: Dict[str, Any] = {"tidyapi": 1, "method": method, "id": request_id}
    if params is not None:
        envelope["params"] = params
    return json.dumps(envelope, separators=(",", ":"))


def create_signed_request(
    end_point_name: str,
    body: Body,
    access_key: str,
    access_secret: str,
    unix_seconds: Optional[int] = None,
) -> Dict[str, str]:
    """
    Create the headers for a signed request.

    Args:
        end_point_name: Name of the API end point being called
        body: The exact request body that will be sent
        access_key: Public identifier of the caller
        access_secret: Secret shared between caller and server
        unix_seconds: Request time (default: current time)

    Returns:
        Dictionary of headers to add to the request
    """
    if unix_seconds is None:
        unix_seconds = int(time.time())

    return {
        "Authorization": create_authorization_header(
            end_point_name=end_point_name,
            body=body,
            unix_seconds=unix_seconds,
            access_key=access_key,
            access_secret=access_secret,
        )
    }
