"""
did-web-key - resolve did:web issuers to signature verifying keys.

Supports:
- did:web DID method resolution
- assertionMethod authorization checks
- JsonWebKey2020 verification methods
- ECDSA P-256 (secp256r1) public keys
"""

from did_web_key.identifier import DecentralizedIdentifier, InvalidDIDError
from did_web_key.errors import (
    DIDResolutionError,
    ResolutionError,
    EmptyDocument,
    MissingAssertionMethods,
    MissingAssertionMethod,
    MissingVerificationMethods,
    MissingVerificationMethod,
    NotJsonWebKey2020,
    MissingJWK,
    JWKNotEllipticCurve,
    JWKMissingX,
    JWKMissingY,
    JWKWrongCurve,
    InvalidJWK,
)
from did_web_key.fetcher import DIDWebFetcher, DocumentFetcher
from did_web_key.resolver import DIDWebKeyResolver, resolve_verifying_key

__version__ = "0.1.0"

__all__ = [
    "DecentralizedIdentifier",
    "InvalidDIDError",
    "DIDResolutionError",
    "ResolutionError",
    "EmptyDocument",
    "MissingAssertionMethods",
    "MissingAssertionMethod",
    "MissingVerificationMethods",
    "MissingVerificationMethod",
    "NotJsonWebKey2020",
    "MissingJWK",
    "JWKNotEllipticCurve",
    "JWKMissingX",
    "JWKMissingY",
    "JWKWrongCurve",
    "InvalidJWK",
    "DIDWebFetcher",
    "DocumentFetcher",
    "DIDWebKeyResolver",
    "resolve_verifying_key",
]
