"""
Secret resolution for the validation pipeline.

A resolver maps an access key to its shared secret. The pipeline accepts
either a plain callable ``resolver(access_key)`` or an object implementing
SecretResolver. Unknown keys are reported by raising; the pipeline turns
that into an authorization failure.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Mapping, Union


class UnknownAccessKeyError(KeyError):
    """Raised by a resolver that has no secret for the access key."""

    def __init__(self, access_key: str):
        super().__init__(access_key)
        self.access_key = access_key

    def __str__(self) -> str:
        return f"Unknown access key: {self.access_key}"


class SecretResolver(ABC):
    """Base class for secret lookups by access key."""

    @abstractmethod
    def resolve(self, access_key: str) -> str:
        """Return the secret for access_key, raising if it is unknown."""

    async def resolve_async(self, access_key: str) -> str:
        return self.resolve(access_key)


SyncSecretLoader = Callable[[str], str]
AsyncSecretLoader = Callable[[str], Union[Awaitable[str], str]]


class StaticSecretResolver(SecretResolver):
    """
    Resolves secrets from a fixed mapping of access key to secret.

    Usage:
        resolver = StaticSecretResolver({"ak1": "s3cr3t"})
        result = validate_request("orders", header, body, resolver)
    """

    def __init__(self, secrets: Mapping[str, str]):
        self._secrets = dict(secrets)

    def __contains__(self, access_key: object) -> bool:
        return access_key in self._secrets

    def __len__(self) -> int:
        return len(self._secrets)

    def resolve(self, access_key: str) -> str:
        try:
            return self._secrets[access_key]
        except KeyError:
            raise UnknownAccessKeyError(access_key) from None
