"""Commerce SDK CLI.

Issue one API request from the shell and print the result as JSON.

Usage:
    commerce-sdk request products --data '{"limit": 5}'
    commerce-sdk request carts/cart_123 --method post --data '{"id": "prod_1"}'
    commerce-sdk request merchants --full

The public key is read from --public-key or CHEC_PUBLIC_KEY.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from typing import Any

import click
import httpx

from .client import Commerce
from .config import DEFAULT_URL, DEFAULT_VERSION
from .errors import CommerceSDKError


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log request tracing to stderr")
def main(verbose: bool) -> None:
    """Commerce SDK - command line access to the Chec API."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _parse_data(raw: str | None) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--data") from e


@main.command()
@click.argument("endpoint")
@click.option("--method", "-X", default="get", help="HTTP method")
@click.option("--data", "-d", "raw_data", help="Request payload as JSON")
@click.option("--public-key", envvar="CHEC_PUBLIC_KEY", default="", help="Public API key")
@click.option("--url", envvar="CHEC_API_URL", default=DEFAULT_URL, help="API root URL")
@click.option("--api-version", envvar="CHEC_API_VERSION", default=DEFAULT_VERSION, help="API version")
@click.option("--timeout-ms", envvar="CHEC_TIMEOUT_MS", type=int, help="Request timeout (ms)")
@click.option("--debug", is_flag=True, help="Show API debug diagnostics")
@click.option("--full", is_flag=True, help="Print status, headers and raw body")
def request(
    endpoint: str,
    method: str,
    raw_data: str | None,
    public_key: str,
    url: str,
    api_version: str,
    timeout_ms: int | None,
    debug: bool,
    full: bool,
) -> None:
    """Send one request to ENDPOINT and print the response."""
    data = _parse_data(raw_data)

    try:
        commerce = Commerce(
            public_key,
            debug=debug,
            config={"url": url, "version": api_version, "timeout_ms": timeout_ms},
        )
        result = asyncio.run(commerce.request(endpoint, method, data, return_full_response=full))
    except CommerceSDKError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    except httpx.HTTPError as e:
        # Only reachable with --full, where failures are not translated
        click.echo(f"HTTP error: {e}", err=True)
        sys.exit(1)

    if full:
        result = {
            "status": result.status_code,
            "headers": dict(result.headers),
            "body": result.text,
        }
    click.echo(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
