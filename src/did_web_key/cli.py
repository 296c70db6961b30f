"""
Command-line interface for did-web-key.

Usage:
    did-web-key did:web:example.com key-1
    did-web-key did:web:example.com key-1 --json-output
    did-web-key did:web:example.com key-1 --pem
"""

from __future__ import annotations

import asyncio
import base64
import sys
from typing import Any

import click
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from did_web_key.errors import DIDResolutionError
from did_web_key.fetcher import DIDWebFetcher
from did_web_key.identifier import DecentralizedIdentifier, InvalidDIDError
from did_web_key.resolver import P256_COORDINATE_SIZE, resolve_verifying_key


console = Console()


def _base64url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode().rstrip("=")


def key_to_jwk(public_key: ec.EllipticCurvePublicKey) -> dict[str, Any]:
    """Export a P-256 public key as a JWK dictionary."""
    numbers = public_key.public_numbers()
    return {
        "kty": "EC",
        "crv": "P-256",
        "x": _base64url_encode(numbers.x.to_bytes(P256_COORDINATE_SIZE, byteorder="big")),
        "y": _base64url_encode(numbers.y.to_bytes(P256_COORDINATE_SIZE, byteorder="big")),
    }


def key_to_pem(public_key: ec.EllipticCurvePublicKey) -> str:
    return public_key.public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()


def format_key(identifier: DecentralizedIdentifier, kid: str, jwk: dict[str, Any]) -> None:
    """Format and print a resolved key."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("Status", "[bold green]RESOLVED[/]")
    table.add_row("Issuer", str(identifier))
    table.add_row("Verification Method", identifier.absolute_key(kid))
    table.add_row("Curve", jwk["crv"])
    table.add_row("x", jwk["x"])
    table.add_row("y", jwk["y"])

    console.print(Panel(table, title="Verifying Key", border_style="green"))


def _fail(message: str, json_output: bool, code: int) -> None:
    if json_output:
        console.print_json(data={"error": message})
    else:
        console.print(f"[red]Error:[/] {message}")
    sys.exit(code)


@click.command()
@click.argument("iss", required=True)
@click.argument("kid", required=True)
@click.option(
    "--no-ssl-verify",
    is_flag=True,
    help="Disable SSL certificate verification",
)
@click.option(
    "--json-output",
    is_flag=True,
    help="Output the key as a JWK",
)
@click.option(
    "--pem",
    is_flag=True,
    help="Output the key as a PEM SubjectPublicKeyInfo",
)
@click.option(
    "--timeout",
    type=float,
    default=30.0,
    help="HTTP request timeout in seconds",
)
@click.version_option(package_name="did-web-key")
def main(
    iss: str,
    kid: str,
    no_ssl_verify: bool,
    json_output: bool,
    pem: bool,
    timeout: float,
) -> None:
    """Resolve the assertion key KID of a did:web issuer ISS.

    Examples:

        did-web-key did:web:nzcp.identity.health.nz z12Kf7UQ

        did-web-key did:web:example.com key-1 --pem
    """
    try:
        identifier = DecentralizedIdentifier.parse(iss)
    except InvalidDIDError as e:
        _fail(f"{e}: {iss}", json_output, 2)

    fetcher = DIDWebFetcher(timeout=timeout, verify_ssl=not no_ssl_verify)
    try:
        public_key = asyncio.run(resolve_verifying_key(identifier, kid, fetcher=fetcher))
    except DIDResolutionError as e:
        _fail(str(e), json_output, 1)

    if pem:
        click.echo(key_to_pem(public_key), nl=False)
    elif json_output:
        console.print_json(data=key_to_jwk(public_key))
    else:
        format_key(identifier, kid, key_to_jwk(public_key))


if __name__ == "__main__":
    main()
