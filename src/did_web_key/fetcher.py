"""
did:web DID Document fetching.

Retrieves the raw representation of a did:web DID Document over HTTPS.
Failures are reported through resolution metadata rather than raised, so
callers decide how to treat partial results.
https://w3c-ccg.github.io/did-method-web/
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import quote, unquote

import httpx

from did_web_key.identifier import DID_WEB

logger = logging.getLogger(__name__)

DID_JSON_ACCEPT = "application/did+ld+json, application/json"


@dataclass
class ResolutionInputMetadata:
    """Options passed to a DID resolver."""

    accept: str | None = None


@dataclass
class ResolutionMetadata:
    """Outcome of fetching a DID Document representation."""

    error: str | None = None
    content_type: str | None = None


class DocumentFetcher(Protocol):
    """Anything that can fetch a DID Document representation."""

    async def resolve_representation(
        self,
        did: str,
        input_metadata: ResolutionInputMetadata,
    ) -> tuple[ResolutionMetadata, bytes, dict[str, Any]]:
        """Return resolution metadata, the raw document bytes and document metadata.

        The bytes are empty when no document could be retrieved.
        """
        ...


def did_to_url(did: str) -> str:
    """Convert a did:web identifier to its resolution URL.

    did:web:example.com -> https://example.com/.well-known/did.json
    did:web:example.com:path:to:doc -> https://example.com/path/to/doc/did.json
    did:web:example.com%3A8080 -> https://example.com:8080/.well-known/did.json

    Args:
        did: The did:web identifier.

    Returns:
        The HTTPS URL to fetch the DID Document.

    Raises:
        ValueError: If the DID format is invalid.
    """
    if not did.startswith(DID_WEB):
        raise ValueError(f"Invalid did:web identifier: {did}")

    domain_path = did[len(DID_WEB):].split("#")[0]

    parts = domain_path.split(":")

    # First part is the domain (with potential port encoded as %3A)
    domain = unquote(parts[0])
    if not domain:
        raise ValueError(f"Invalid did:web identifier: {did}")

    if len(parts) > 1:
        path = "/" + "/".join(quote(unquote(p), safe="") for p in parts[1:]) + "/did.json"
    else:
        path = "/.well-known/did.json"

    return f"https://{domain}{path}"


class DIDWebFetcher:
    """Fetches did:web DID Documents with httpx."""

    def __init__(
        self,
        timeout: float = 30.0,
        verify_ssl: bool = True,
    ) -> None:
        """Initialize the fetcher.

        Args:
            timeout: HTTP request timeout in seconds.
            verify_ssl: Whether to verify SSL certificates.
        """
        self.timeout = timeout
        self.verify_ssl = verify_ssl

    async def resolve_representation(
        self,
        did: str,
        input_metadata: ResolutionInputMetadata,
    ) -> tuple[ResolutionMetadata, bytes, dict[str, Any]]:
        try:
            url = httpx.URL(did_to_url(did))
        except (ValueError, httpx.InvalidURL):
            return ResolutionMetadata(error="invalidDid"), b"", {}

        logger.debug("Fetching DID Document for %s from %s", did, url)
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                verify=self.verify_ssl,
                follow_redirects=True,
            ) as client:
                response = await client.get(
                    url,
                    headers={"Accept": input_metadata.accept or DID_JSON_ACCEPT},
                )
                response.raise_for_status()

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("HTTP %s fetching DID Document for %s", status, did)
            if status == 404:
                return ResolutionMetadata(error="notFound"), b"", {}
            return ResolutionMetadata(error=f"HTTP error resolving {did}: {status}"), b"", {}
        except (httpx.RequestError, httpx.InvalidURL) as e:
            logger.warning("Network error fetching DID Document for %s: %s", did, e)
            return ResolutionMetadata(error=f"Network error resolving {did}: {e}"), b"", {}

        metadata = ResolutionMetadata(content_type=response.headers.get("content-type"))
        return metadata, response.content, {}
