"""
DID Document decoding.

A fetched document is decoded in two explicit stages: first into untyped
JSON, where the ``@context`` is normalized, then into the structured
subset of the W3C DID Document needed to find an assertion key.
https://www.w3.org/TR/did-core/
"""

from __future__ import annotations

import base64
import binascii
import json
import re
from dataclasses import dataclass
from typing import Any, Union

DID_CONTEXT = "https://www.w3.org/ns/did/v1"

NON_EC_KEY_TYPES = frozenset({"RSA", "OKP", "oct"})

BASE64URL_NO_PAD = re.compile(r"[A-Za-z0-9_-]*")


class DocumentFormatError(ValueError):
    """Raised when a DID Document does not have the expected shape."""


def _base64url_decode(data: str) -> bytes:
    """Decode base64url without padding."""
    if not BASE64URL_NO_PAD.fullmatch(data):
        raise ValueError("not unpadded base64url")
    padding = 4 - (len(data) % 4)
    if padding != 4:
        data += "=" * padding
    return base64.urlsafe_b64decode(data)


@dataclass(frozen=True)
class ECParams:
    """Elliptic curve JWK parameters. Any of them may be absent."""

    curve: str | None = None
    x: bytes | None = None
    y: bytes | None = None


@dataclass(frozen=True)
class OtherParams:
    """Parameters of a non elliptic curve JWK; their content is not used."""

    kty: str


@dataclass(frozen=True)
class JWK:
    """Public key in JWK format."""

    kty: str
    params: ECParams | OtherParams

    @classmethod
    def from_dict(cls, data: Any) -> JWK:
        """Create a JWK from a JWK dictionary.

        Raises:
            DocumentFormatError: If ``kty`` is unknown or a member is malformed.
        """
        if not isinstance(data, dict):
            raise DocumentFormatError("publicKeyJwk must be an object")

        kty = data.get("kty")
        if kty == "EC":
            return cls(
                kty=kty,
                params=ECParams(
                    curve=_optional_str(data, "crv"),
                    x=_optional_coordinate(data, "x"),
                    y=_optional_coordinate(data, "y"),
                ),
            )
        if kty in NON_EC_KEY_TYPES:
            return cls(kty=kty, params=OtherParams(kty=kty))
        raise DocumentFormatError(f"unknown JWK key type: {kty!r}")


def _optional_str(data: dict[str, Any], name: str) -> str | None:
    value = data.get(name)
    if value is not None and not isinstance(value, str):
        raise DocumentFormatError(f"'{name}' must be a string")
    return value


def _optional_coordinate(data: dict[str, Any], name: str) -> bytes | None:
    value = _optional_str(data, name)
    if value is None:
        return None
    try:
        return _base64url_decode(value)
    except (binascii.Error, ValueError) as e:
        raise DocumentFormatError(f"'{name}' is not valid base64url: {e}") from e


@dataclass(frozen=True)
class VerificationMethodMap:
    """An inline DID Document verification method."""

    id: str
    type: str
    controller: str | None = None
    public_key_jwk: JWK | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VerificationMethodMap:
        method_id = data.get("id")
        method_type = data.get("type")
        if not isinstance(method_id, str):
            raise DocumentFormatError("verification method is missing a string 'id'")
        if not isinstance(method_type, str):
            raise DocumentFormatError(
                f"verification method {method_id} is missing a string 'type'"
            )

        public_key_jwk = None
        if data.get("publicKeyJwk") is not None:
            public_key_jwk = JWK.from_dict(data["publicKeyJwk"])

        return cls(
            id=method_id,
            type=method_type,
            controller=_optional_str(data, "controller"),
            public_key_jwk=public_key_jwk,
        )


# A verification method is either a DID URL reference or an inline map.
VerificationMethodRef = Union[str, VerificationMethodMap]


def reference_id(method: VerificationMethodRef) -> str:
    """Return the id a verification method reference points at."""
    if isinstance(method, VerificationMethodMap):
        return method.id
    return method


def matches(method: VerificationMethodRef, absolute_key: str) -> bool:
    """Check whether a reference or inline map identifies ``absolute_key``."""
    return reference_id(method) == absolute_key


@dataclass(frozen=True)
class DIDDocument:
    """The subset of a W3C DID Document used to find assertion keys.

    A relationship is ``None`` when it was absent from the JSON, which is
    distinct from an empty list.
    """

    id: str | None
    assertion_method: list[VerificationMethodRef] | None
    verification_method: list[VerificationMethodRef] | None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DIDDocument:
        """Parse a DID Document from JSON. Unknown members are ignored.

        Raises:
            DocumentFormatError: If a consumed member has the wrong shape.
        """
        if not isinstance(data, dict):
            raise DocumentFormatError("DID Document must be an object")

        return cls(
            id=_optional_str(data, "id"),
            assertion_method=_parse_verification_relationship(
                data.get("assertionMethod"), "assertionMethod"
            ),
            verification_method=_parse_verification_relationship(
                data.get("verificationMethod"), "verificationMethod"
            ),
        )

    def has_assertion_method(self, absolute_key: str) -> bool:
        return any(matches(method, absolute_key) for method in self.assertion_method or [])

    def get_verification_method(self, method_id: str) -> VerificationMethodMap | None:
        """Get the first inline verification method with the given id."""
        for vm in self.verification_method or []:
            if isinstance(vm, VerificationMethodMap) and vm.id == method_id:
                return vm
        return None


def _parse_verification_relationship(
    items: Any, name: str
) -> list[VerificationMethodRef] | None:
    """Parse a verification relationship array.

    Items can be either strings (references) or objects (embedded methods).
    """
    if items is None:
        return None
    if not isinstance(items, list):
        raise DocumentFormatError(f"'{name}' must be an array")

    result: list[VerificationMethodRef] = []
    for item in items:
        if isinstance(item, str):
            result.append(item)
        elif isinstance(item, dict):
            result.append(VerificationMethodMap.from_dict(item))
        else:
            raise DocumentFormatError(
                f"'{name}' entries must be DID URLs or verification method objects"
            )
    return result


def decode_untyped(raw: bytes) -> Any | None:
    """Decode raw document bytes into untyped JSON.

    Empty bytes mean no document was retrieved and decode to ``None``.

    Raises:
        json.JSONDecodeError: If the bytes are not valid JSON.
    """
    if not raw:
        return None
    return json.loads(raw)


def normalize_context(document: Any) -> dict[str, Any] | None:
    """Rewrite a string ``@context`` to the DID core context.

    Some producers emit a context the structured decoder does not accept
    verbatim. A document without a string ``@context`` (or one that is not
    an object at all) is treated as no document.
    """
    if not isinstance(document, dict):
        return None
    if not isinstance(document.get("@context"), str):
        return None
    return {**document, "@context": DID_CONTEXT}


def parse_document(raw: bytes) -> DIDDocument | None:
    """Run both decode stages over fetched bytes.

    Returns:
        The structured document, or ``None`` when there is none.

    Raises:
        json.JSONDecodeError: If the bytes are not valid JSON.
        DocumentFormatError: If the normalized document has the wrong shape.
    """
    normalized = normalize_context(decode_untyped(raw))
    if normalized is None:
        return None
    return DIDDocument.from_dict(normalized)
