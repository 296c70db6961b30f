"""
Errors raised while resolving a did:web identifier to a verifying key.

Every error is terminal: a failure anywhere in the chain must abort
signature verification.
"""

from __future__ import annotations


class DIDResolutionError(Exception):
    """Raised when DID resolution fails."""

    message = "DID resolution failed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class ResolutionError(DIDResolutionError):
    """The document could not be fetched or decoded."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"DID resolution error: {detail}")


class EmptyDocument(DIDResolutionError):
    message = "an empty DID resolution document was returned"


class MissingAssertionMethods(DIDResolutionError):
    message = "assertionMethod array was missing from the DID document"


class MissingAssertionMethod(DIDResolutionError):
    """No assertionMethod references the absolute key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(
            f"assertionMethod with absolute key '{key}' was missing from the DID document"
        )


class MissingVerificationMethods(DIDResolutionError):
    message = "verificationMethod was missing from the DID document"


class MissingVerificationMethod(DIDResolutionError):
    """No verificationMethod has the absolute key as its id."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(
            f"verificationMethod with the absolute key '{key}' was missing from the DID document"
        )


class NotJsonWebKey2020(DIDResolutionError):
    message = "verificationMethod type was not 'JsonWebKey2020'"


class MissingJWK(DIDResolutionError):
    message = "verificationMethod was missing publicKeyJwk"


class JWKNotEllipticCurve(DIDResolutionError):
    message = "publicKeyJwk was not elliptic curve"


class JWKMissingX(DIDResolutionError):
    message = "publicKeyJwk was missing x coordinate"


class JWKMissingY(DIDResolutionError):
    message = "publicKeyJwk was missing y coordinate"


class JWKWrongCurve(DIDResolutionError):
    message = "publicKeyJwk 'crv' was not 'P-256'"


class InvalidJWK(DIDResolutionError):
    message = "publicKeyJwk was invalid"
