"""
rpcgen — CLI entrypoint.

Usage:
    python -m rpcgen.main --help
    python -m rpcgen.main generate descriptors.pb --out gen/
    python -m rpcgen.main params check "generate_mock_code=true"
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from rpcgen import __version__
from rpcgen.core.observability.logging_config import resolve_level, setup_from_env


@click.group()
@click.version_option(version=__version__, prog_name="rpcgen")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to rpcgen.yml (default: auto-detect).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """rpcgen — generate C++ RPC bindings from protobuf descriptors."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    setup_from_env(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        quiet_third_party=not debug,
    )


def _load_config(ctx: click.Context):
    """Load rpcgen.yml (explicit or auto-detected); exit 1 on errors."""
    from rpcgen.core.config.loader import ConfigError, config_root, find_config_file, load_config

    config_path: Path | None = ctx.obj.get("config_path")
    try:
        config = load_config(config_path)
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    source = config_path or find_config_file()
    base = config_root(source) if source else Path.cwd()
    return config, base


def _load_schemas(descriptor_set: str):
    from rpcgen.adapters.protoc import load_descriptor_set

    try:
        return load_descriptor_set(Path(descriptor_set))
    except (OSError, ValueError) as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


@cli.command()
@click.argument("descriptor_set", type=click.Path(exists=True, dir_okay=False))
@click.option("--out", "-o", "out_dir", default=None, help="Output directory.")
@click.option("--param", "-p", "parameter", default=None, help="Parameter string (key=value,...).")
@click.option(
    "--mode",
    type=click.Choice(["all", "per-file", "batch"]),
    default=None,
    help="Run the batch path, the per-file path, or both.",
)
@click.option("--file", "-f", "files", multiple=True, help="Schema file to generate (repeatable).")
@click.option("--report/--no-report", default=None, help="Also write __report__.log.")
@click.option("--dry-run", is_flag=True, help="Compose everything but write nothing.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def generate(
    ctx: click.Context,
    descriptor_set: str,
    out_dir: str | None,
    parameter: str | None,
    mode: str | None,
    files: tuple[str, ...],
    report: bool | None,
    dry_run: bool,
    as_json: bool,
) -> None:
    """Generate bindings from a FileDescriptorSet.

    Build the descriptor set with protoc first:

        protoc --include_imports --descriptor_set_out=descriptors.pb greeter.proto

        rpcgen generate descriptors.pb --out gen --param generate_mock_code=true
    """
    from rpcgen.adapters.filesystem import DirectorySinkFactory
    from rpcgen.adapters.memory import MemorySinkFactory
    from rpcgen.core.use_cases.generate import run_generate

    config, base = _load_config(ctx)
    schemas = _load_schemas(descriptor_set)

    out_path = Path(out_dir) if out_dir else base / config.output_dir
    factory = MemorySinkFactory() if dry_run else DirectorySinkFactory(out_path)

    result = run_generate(
        schemas,
        parameter if parameter is not None else config.parameters,
        factory,
        mode=mode or config.mode,
        files_to_generate=list(files) or config.files,
        report=config.report if report is None else report,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    assert result.dispatch is not None
    quiet = ctx.obj.get("quiet", False)
    label = "[dry-run] " if dry_run else ""

    if not quiet:
        click.secho(f"\n⚙️  {label}rpcgen — {result.mode}", fg="cyan", bold=True)
        if not dry_run:
            click.echo(f"   Output: {out_path}")
        click.echo()

    for name in result.dispatch.written:
        click.secho("   ✓ ", fg="green", nl=False)
        click.echo(name)
    for failure in result.dispatch.failures:
        click.secho("   ✗ ", fg="red", nl=False)
        click.echo(str(failure))

    click.echo()
    if not result.dispatch.ok:
        click.secho(
            f"   {len(result.dispatch.failures)} file(s) could not be written",
            fg="red", bold=True,
        )
        sys.exit(1)

    click.secho(f"   {len(result.dispatch.written)} file(s) generated", fg="green", bold=True)
    click.echo()


@cli.command()
@click.argument("descriptor_set", type=click.Path(exists=True, dir_okay=False))
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def inspect(descriptor_set: str, as_json: bool) -> None:
    """Summarize the files, services and methods in a FileDescriptorSet."""
    from rpcgen.core.services.aggregator import summarize

    schemas = _load_schemas(descriptor_set)
    summary = summarize(schemas)

    if as_json:
        click.echo(json.dumps(summary.to_dict(), indent=2))
        return

    click.secho(f"\n📦 {descriptor_set}", fg="cyan", bold=True)
    click.echo(f"   Proto-files: {summary.file_count} ({summary.files_with_services} with services)")
    click.echo(f"   Services:    {summary.service_count}")
    click.echo(f"   Methods:     {summary.method_count}")
    click.echo()
    for schema in schemas:
        click.echo(f"   • {schema.name}")
        for service in schema.services:
            click.echo(f"       {service.name} ({len(service.methods)} methods)")
    click.echo()


@cli.command()
@click.argument("target", type=click.Path(exists=True, dir_okay=False))
@click.argument("insertion_point")
@click.argument("content_file", type=click.File("r", encoding="utf-8"))
def insert(target: str, insertion_point: str, content_file) -> None:
    """Insert CONTENT_FILE at INSERTION_POINT inside an existing TARGET."""
    from rpcgen.adapters.filesystem import DirectorySinkFactory
    from rpcgen.core.models.errors import OutputWriteFailed
    from rpcgen.core.services.dispatcher import OutputDispatcher

    path = Path(target).resolve()
    dispatcher = OutputDispatcher(DirectorySinkFactory(path.parent))
    try:
        dispatcher.write_at_insertion_point(path.name, insertion_point, content_file.read())
    except OutputWriteFailed as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    click.secho(f"✓ Inserted at {insertion_point} in {target}", fg="green")


# ── Register sub-command groups from rpcgen/ui/cli/ ───────────────

from rpcgen.ui.cli.params import params

cli.add_command(params)


if __name__ == "__main__":
    cli()
