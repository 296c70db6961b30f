"""
Decentralized Identifiers.

Only the did:web method is supported.
https://w3c-ccg.github.io/did-method-web/
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cryptography.hazmat.primitives.asymmetric import ec

    from did_web_key.fetcher import DocumentFetcher


DID_WEB = "did:web:"


class InvalidDIDError(ValueError):
    """Raised when a string is not a supported Decentralized Identifier."""


@dataclass(frozen=True)
class DecentralizedIdentifier:
    """A parsed did:web identifier."""

    domain: str
    method: str = field(default="web", init=False)

    @classmethod
    def parse(cls, did: str) -> DecentralizedIdentifier:
        """Parse a DID whose method must be web (starting with 'did:web:').

        Args:
            did: The identifier text, e.g. the ``iss`` claim of a pass.

        Returns:
            The parsed identifier.

        Raises:
            InvalidDIDError: If the DID does not start with 'did:web:'.
        """
        if not isinstance(did, str) or not did.startswith(DID_WEB):
            raise InvalidDIDError("invalid DID")
        return cls(domain=did[len(DID_WEB):])

    @property
    def did(self) -> str:
        return f"{DID_WEB}{self.domain}"

    def absolute_key(self, kid: str) -> str:
        """Return the absolute DID URL of a key, ``<did>#<kid>``."""
        return f"{self.did}#{kid}"

    async def resolve_verifying_key(
        self,
        kid: str,
        fetcher: DocumentFetcher | None = None,
    ) -> ec.EllipticCurvePublicKey:
        """Resolve this identifier's assertion key ``kid`` to a P-256 public key."""
        from did_web_key.resolver import resolve_verifying_key

        return await resolve_verifying_key(self, kid, fetcher=fetcher)

    def __str__(self) -> str:
        return self.did
