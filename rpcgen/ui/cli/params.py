"""
CLI commands for generator parameters.

Thin wrappers over ``rpcgen.core.services.parameters``.
"""

from __future__ import annotations

import json
import sys

import click


@click.group()
def params() -> None:
    """Generator parameters — validate and list."""


@params.command("check")
@click.argument("parameter")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def check(parameter: str, as_json: bool) -> None:
    """Validate a parameter string and show the parsed options."""
    from rpcgen.core.models.errors import GeneratorError
    from rpcgen.core.services.parameters import format_parameters, parse_parameters

    try:
        options = parse_parameters(parameter)
    except GeneratorError as e:
        if as_json:
            click.echo(json.dumps({"valid": False, "error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({
            "valid": True,
            "options": options.model_dump(mode="json"),
            "normalized": format_parameters(options),
        }, indent=2))
        return

    click.secho("✅ Parameters are valid", fg="green", bold=True)
    for key, value in options.model_dump().items():
        if isinstance(value, tuple):
            value = ":".join(value) or "(none)"
        click.echo(f"   {key:<28} {value}")


@params.command("keys")
def keys() -> None:
    """List the recognized parameter keys."""
    from rpcgen.core.services.parameters import KNOWN_KEYS

    for key in sorted(KNOWN_KEYS):
        click.echo(key)
