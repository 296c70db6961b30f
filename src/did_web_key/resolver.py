"""
Verifying key resolution for did:web issuers.

Given the ``iss`` and ``kid`` of a signed pass, fetch the issuer's DID
Document, check the key is authorized for assertion and rebuild the
P-256 public key from its JWK.
"""

from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric import ec

from did_web_key.document import DIDDocument, ECParams, parse_document
from did_web_key.errors import (
    EmptyDocument,
    InvalidJWK,
    JWKMissingX,
    JWKMissingY,
    JWKNotEllipticCurve,
    JWKWrongCurve,
    MissingAssertionMethod,
    MissingAssertionMethods,
    MissingJWK,
    MissingVerificationMethod,
    MissingVerificationMethods,
    NotJsonWebKey2020,
    ResolutionError,
)
from did_web_key.fetcher import DIDWebFetcher, DocumentFetcher, ResolutionInputMetadata
from did_web_key.identifier import DecentralizedIdentifier

JSON_WEB_KEY_2020 = "JsonWebKey2020"
P256_CURVE = "P-256"
P256_COORDINATE_SIZE = 32


class DIDWebKeyResolver:
    """Resolves did:web assertion keys through a document fetcher."""

    def __init__(self, fetcher: DocumentFetcher | None = None) -> None:
        self.fetcher = fetcher or DIDWebFetcher()

    async def resolve_document(self, identifier: DecentralizedIdentifier) -> DIDDocument:
        """Fetch and decode the DID Document of ``identifier``.

        A resolution error reported by the fetcher wins over any document
        it returned alongside it.

        Raises:
            ResolutionError: If fetching or decoding failed.
            EmptyDocument: If no document was produced.
        """
        metadata, raw, _ = await self.fetcher.resolve_representation(
            identifier.did, ResolutionInputMetadata()
        )

        try:
            document = parse_document(raw)
        except ValueError as e:
            raise ResolutionError(str(e)) from e

        if metadata.error is not None:
            raise ResolutionError(metadata.error)
        if document is None:
            raise EmptyDocument()
        return document

    async def resolve_verifying_key(
        self,
        identifier: DecentralizedIdentifier,
        kid: str,
    ) -> ec.EllipticCurvePublicKey:
        """Resolve the assertion key ``kid`` of ``identifier``.

        Args:
            identifier: The issuer, parsed from ``iss``.
            kid: The key id from the token header.

        Returns:
            The P-256 public key.

        Raises:
            DIDResolutionError: If any step of the resolution fails.
        """
        document = await self.resolve_document(identifier)
        absolute_key = identifier.absolute_key(kid)

        if document.assertion_method is None:
            raise MissingAssertionMethods()
        if not document.has_assertion_method(absolute_key):
            raise MissingAssertionMethod(absolute_key)

        if document.verification_method is None:
            raise MissingVerificationMethods()
        verification_method = document.get_verification_method(absolute_key)
        if verification_method is None:
            raise MissingVerificationMethod(absolute_key)

        if verification_method.type != JSON_WEB_KEY_2020:
            raise NotJsonWebKey2020()

        jwk = verification_method.public_key_jwk
        if jwk is None:
            raise MissingJWK()
        if not isinstance(jwk.params, ECParams):
            raise JWKNotEllipticCurve()

        return ec_params_to_verifying_key(jwk.params)


def ec_params_to_verifying_key(params: ECParams) -> ec.EllipticCurvePublicKey:
    """Build a P-256 public key from EC JWK parameters.

    Raises:
        JWKWrongCurve: If the curve is not P-256.
        JWKMissingX: If the x coordinate is absent.
        JWKMissingY: If the y coordinate is absent.
        InvalidJWK: If the coordinates are not a point on the curve.
    """
    if params.curve != P256_CURVE:
        raise JWKWrongCurve()
    if params.x is None:
        raise JWKMissingX()
    if params.y is None:
        raise JWKMissingY()

    if len(params.x) != P256_COORDINATE_SIZE or len(params.y) != P256_COORDINATE_SIZE:
        raise InvalidJWK()

    # SEC1 uncompressed point
    point = b"\x04" + params.x + params.y
    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(ec.SECP256R1(), point)
    except ValueError as e:
        raise InvalidJWK() from e


async def resolve_verifying_key(
    identifier: DecentralizedIdentifier,
    kid: str,
    fetcher: DocumentFetcher | None = None,
) -> ec.EllipticCurvePublicKey:
    """Convenience function to resolve a verifying key.

    Args:
        identifier: The issuer, parsed from ``iss``.
        kid: The key id from the token header.
        fetcher: Custom document fetcher. A ``DIDWebFetcher`` if not provided.

    Returns:
        The P-256 public key.
    """
    resolver = DIDWebKeyResolver(fetcher=fetcher)
    return await resolver.resolve_verifying_key(identifier, kid)
