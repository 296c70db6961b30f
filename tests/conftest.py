"""Shared fixtures for did-web-key tests."""

from __future__ import annotations

import base64
import json
from typing import Any

import pytest

from cryptography.hazmat.primitives.asymmetric import ec

from did_web_key.fetcher import ResolutionInputMetadata, ResolutionMetadata


def b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode().rstrip("=")


class StaticFetcher:
    """Document fetcher returning a fixed representation."""

    def __init__(self, raw: bytes = b"", error: str | None = None) -> None:
        self.raw = raw
        self.error = error
        self.requested: list[str] = []

    @classmethod
    def from_document(cls, document: Any, error: str | None = None) -> StaticFetcher:
        return cls(json.dumps(document).encode(), error=error)

    async def resolve_representation(
        self, did: str, input_metadata: ResolutionInputMetadata
    ) -> tuple[ResolutionMetadata, bytes, dict[str, Any]]:
        self.requested.append(did)
        return ResolutionMetadata(error=self.error), self.raw, {}


@pytest.fixture
def static_fetcher():
    """The fixed-representation fetcher class."""
    return StaticFetcher


@pytest.fixture
def ec_key_pair():
    """Generate a test EC P-256 key pair."""
    private_key = ec.generate_private_key(ec.SECP256R1())
    return private_key, private_key.public_key()


@pytest.fixture
def coordinates(ec_key_pair):
    """The raw 32 byte x and y coordinates of the test public key."""
    _, public_key = ec_key_pair
    numbers = public_key.public_numbers()
    return numbers.x.to_bytes(32, byteorder="big"), numbers.y.to_bytes(32, byteorder="big")


@pytest.fixture
def public_key_jwk(coordinates):
    """Get the public key as JWK."""
    x, y = coordinates
    return {"kty": "EC", "crv": "P-256", "x": b64url(x), "y": b64url(y)}


@pytest.fixture
def did_document(public_key_jwk):
    """Create a test DID Document."""
    return {
        "@context": "https://w3id.org/did/v1",
        "id": "did:web:example.com",
        "verificationMethod": [
            {
                "id": "did:web:example.com#key-1",
                "type": "JsonWebKey2020",
                "controller": "did:web:example.com",
                "publicKeyJwk": public_key_jwk,
            }
        ],
        "assertionMethod": ["did:web:example.com#key-1"],
    }
