"""Tests for did:web document fetching."""

import json

import httpx
import pytest
import respx
from httpx import Response

from did_web_key.fetcher import (
    DIDWebFetcher,
    ResolutionInputMetadata,
    did_to_url,
)


class TestDIDToURL:
    """Tests for did:web to URL conversion."""

    def test_did_to_url_simple(self):
        """Test simple did:web to URL conversion."""
        url = did_to_url("did:web:example.com")
        assert url == "https://example.com/.well-known/did.json"

    def test_did_to_url_with_path(self):
        """Test did:web with path to URL conversion."""
        url = did_to_url("did:web:example.com:users:alice")
        assert url == "https://example.com/users/alice/did.json"

    def test_did_to_url_with_port(self):
        """Test did:web with port to URL conversion."""
        url = did_to_url("did:web:example.com%3A8080")
        assert url == "https://example.com:8080/.well-known/did.json"

    def test_did_to_url_with_fragment(self):
        """Test did:web with fragment."""
        url = did_to_url("did:web:example.com#key-1")
        assert url == "https://example.com/.well-known/did.json"

    @pytest.mark.parametrize("did", ["did:key:z6Mk", "did:web:", "example.com"])
    def test_did_to_url_invalid(self, did):
        """Test non did:web identifiers are rejected."""
        with pytest.raises(ValueError):
            did_to_url(did)


class TestDIDWebFetcher:
    """Tests for fetching DID Document representations."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch(self, did_document):
        """Test a document is returned as raw bytes."""
        route = respx.get("https://example.com/.well-known/did.json").mock(
            return_value=Response(200, json=did_document)
        )

        metadata, raw, _ = await DIDWebFetcher().resolve_representation(
            "did:web:example.com", ResolutionInputMetadata()
        )

        assert metadata.error is None
        assert metadata.content_type == "application/json"
        assert json.loads(raw) == did_document
        assert route.calls.last.request.headers["Accept"] == (
            "application/did+ld+json, application/json"
        )

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_custom_accept(self, did_document):
        """Test the requested media type is sent."""
        route = respx.get("https://example.com/.well-known/did.json").mock(
            return_value=Response(200, json=did_document)
        )

        await DIDWebFetcher().resolve_representation(
            "did:web:example.com", ResolutionInputMetadata(accept="application/did+json")
        )

        assert route.calls.last.request.headers["Accept"] == "application/did+json"

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_not_found(self):
        """Test a 404 is reported as notFound with no document."""
        respx.get("https://example.com/.well-known/did.json").mock(
            return_value=Response(404)
        )

        metadata, raw, _ = await DIDWebFetcher().resolve_representation(
            "did:web:example.com", ResolutionInputMetadata()
        )

        assert metadata.error == "notFound"
        assert raw == b""

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_server_error(self):
        """Test other HTTP errors carry the status code."""
        respx.get("https://example.com/.well-known/did.json").mock(
            return_value=Response(500)
        )

        metadata, raw, _ = await DIDWebFetcher().resolve_representation(
            "did:web:example.com", ResolutionInputMetadata()
        )

        assert metadata.error == "HTTP error resolving did:web:example.com: 500"
        assert raw == b""

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_network_error(self):
        """Test network failures are reported, not raised."""
        respx.get("https://example.com/.well-known/did.json").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        metadata, raw, _ = await DIDWebFetcher().resolve_representation(
            "did:web:example.com", ResolutionInputMetadata()
        )

        assert metadata.error.startswith("Network error resolving did:web:example.com")
        assert raw == b""

    @pytest.mark.asyncio
    async def test_fetch_invalid_did(self):
        """Test an invalid did:web is reported without a request."""
        metadata, raw, _ = await DIDWebFetcher().resolve_representation(
            "did:key:z6Mk", ResolutionInputMetadata()
        )

        assert metadata.error == "invalidDid"
        assert raw == b""

    @pytest.mark.asyncio
    async def test_fetch_unparseable_url(self):
        """Test a did:web whose URL has an invalid port is reported as invalidDid."""
        metadata, raw, _ = await DIDWebFetcher().resolve_representation(
            "did:web:example.com%3Aabc", ResolutionInputMetadata()
        )

        assert metadata.error == "invalidDid"
        assert raw == b""

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_follows_redirect(self, did_document):
        """Test a redirected well-known document is followed."""
        respx.get("https://example.com/.well-known/did.json").mock(
            return_value=Response(
                301, headers={"Location": "https://www.example.com/.well-known/did.json"}
            )
        )
        respx.get("https://www.example.com/.well-known/did.json").mock(
            return_value=Response(200, json=did_document)
        )

        metadata, raw, _ = await DIDWebFetcher().resolve_representation(
            "did:web:example.com", ResolutionInputMetadata()
        )

        assert metadata.error is None
        assert json.loads(raw) == did_document
