"""Command-line interface for S3 Credentials."""

import asyncio
import logging
import os
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from .config import get_settings
from .credentials.cache import CredentialCache
from .credentials.iam import ECS_RELATIVE_URI_VAR


logger = logging.getLogger(__name__)

CREDENTIAL_ENV_VARS = [
    "AWS_ACCESS_KEY_ID",
    "AWS_ACCESS_KEY",
    "AWS_SECRET_ACCESS_KEY",
    "AWS_SECRET_KEY",
    "AWS_SESSION_TOKEN",
    "MINIO_ACCESS_KEY",
    "MINIO_SECRET_KEY",
    ECS_RELATIVE_URI_VAR,
]


def _mask(value: Optional[str]) -> str:
    if not value:
        return "-"
    return value[:4] + "****" if len(value) > 8 else "****"


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
def main(debug: bool):
    """S3 Credentials - resolve object storage credentials."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


@main.command()
@click.option('--endpoint', '-e', default=None, help='Metadata service endpoint')
@click.option('--show-secret', is_flag=True, help='Print the secret key unmasked')
def resolve(endpoint: Optional[str], show_secret: bool):
    """Resolve credentials through the default provider chain."""
    try:
        overrides = {"metadata_endpoint": endpoint} if endpoint else {}
        cache = CredentialCache.from_settings(get_settings(**overrides))
        credentials = asyncio.run(cache.get())
    except Exception as e:
        click.echo(f"Error: {e}", err=True)
        raise click.exceptions.Exit(1)

    current = getattr(cache.provider, "current", None)
    source = current.__class__.__name__ if current else "anonymous"

    table = Table(title="Resolved credentials")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("Source", source)
    table.add_row("Signature", credentials.signature_type.value)
    table.add_row("Access key", credentials.access_key or "-")
    table.add_row("Secret key", credentials.secret_key if show_secret else _mask(credentials.secret_key))
    table.add_row("Session token", "set" if credentials.session_token else "-")
    Console().print(table)


@main.command()
def env():
    """Show which credential environment variables are set."""
    for name in CREDENTIAL_ENV_VARS:
        status = "✓" if os.environ.get(name) else "✗"
        click.echo(f"  {status} {name}")


if __name__ == "__main__":
    main()
