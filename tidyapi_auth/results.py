"""
Result types for TidyApi request validation.

Validation never raises for a bad request: the outcome is either a
ValidationFailure carrying an ApiError or a ValidationSuccess carrying the
decoded request envelope. Callers branch on ``result.ok``.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Optional, Union


class ErrorCode(IntEnum):
    """Error codes returned to callers. Values are part of the wire contract."""

    InvalidAuthorization = 102
    InvalidRequestObject = 103
    InvalidTime = 104


@dataclass(frozen=True)
class ApiError:
    """A structured validation error."""

    code: ErrorCode
    message: str
    data: Any = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"code": int(self.code), "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        return result


class TidyApiError(ValueError):
    """
    Raised by the header codec when an authorization header is rejected.

    The validation pipeline catches this and turns it into a ValidationFailure.
    """

    def __init__(self, code: ErrorCode, message: str, data: Any = None):
        super().__init__(message)
        self.error = ApiError(code=code, message=message, data=data)

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message


@dataclass(frozen=True)
class RequestEnvelope:
    """The decoded JSON request object carried in the body."""

    tidyapi: int
    method: str
    id: str
    params: Any = None
    document: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> "RequestEnvelope":
        return cls(
            tidyapi=int(document["tidyapi"]),
            method=document["method"],
            id=document["id"],
            params=document.get("params"),
            document=document,
        )

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.document)


@dataclass(frozen=True)
class ValidationFailure:
    """Validation rejected the request."""

    error: ApiError
    ok: bool = field(default=False, init=False)

    @property
    def code(self) -> ErrorCode:
        return self.error.code

    @property
    def message(self) -> str:
        return self.error.message


@dataclass(frozen=True)
class ValidationSuccess:
    """Validation accepted the request."""

    request: RequestEnvelope
    end_point_name: str
    unix_seconds: int
    access_key: str
    ok: bool = field(default=True, init=False)


ValidationResult = Union[ValidationFailure, ValidationSuccess]


def failure(code: ErrorCode, message: str, data: Optional[Any] = None) -> ValidationFailure:
    return ValidationFailure(error=ApiError(code=code, message=message, data=data))
