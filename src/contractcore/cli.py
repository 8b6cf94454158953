"""contractctl - validate and inspect YAML contracts."""

from __future__ import annotations

import logging
import sys
import traceback
from pathlib import Path

import click

from contractcore import __version__
from contractcore.canonical import canonical_json
from contractcore.config import GeneratorSettings
from contractcore.property_utils import get_property, is_property_set, set_system_property
from contractcore.spec.errors import ContractError
from contractcore.spec.generator import ExampleGenerator, set_generator
from contractcore.spec.patterns import by_name, pattern_names
from contractcore.yaml_contracts import load_contracts


def handle_error(error: Exception, debug: bool) -> None:
    """Handle errors with structured output.

    Args:
        error: The exception that occurred
        debug: Whether to show full traceback
    """
    if debug:
        traceback.print_exc()
    else:
        click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def _parse_define(define: str) -> tuple[str, str]:
    key, sep, value = define.partition("=")
    if not sep or not key.strip():
        raise click.BadParameter(f"Expected key=value, got [{define}]", param_hint="--define")
    return key.strip(), value


@click.group()
@click.version_option(version=__version__, prog_name="contractctl")
@click.option('--debug', is_flag=True, help='Enable debug mode (debug logging, full tracebacks)')
@click.option('--define', '-D', 'defines', multiple=True, help='System property as key=value (repeatable)')
@click.option('--seed', type=int, help='Seed for example generation')
@click.pass_context
def cli(ctx: click.Context, debug: bool, defines: tuple[str, ...], seed: int | None):
    """Contract Core CLI - consumer/producer contracts with dual-sided values."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug
    logging.basicConfig(level=logging.DEBUG if debug else logging.WARNING)

    for define in defines:
        key, value = _parse_define(define)
        set_system_property(key, value)

    settings = GeneratorSettings.from_properties()
    if seed is not None:
        settings.seed = seed
    set_generator(ExampleGenerator.from_settings(settings))


@cli.command()
@click.argument('files', nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def validate(ctx: click.Context, files: tuple[Path, ...]):
    """Validate YAML contract files."""
    debug = ctx.obj.get('debug', False)
    failed = False

    for path in files:
        try:
            contracts = load_contracts(path)
        except ContractError as e:
            if debug:
                traceback.print_exc()
            click.echo(f"FAIL {e}", err=True)
            failed = True
            continue
        for index, contract in enumerate(contracts):
            click.echo(f"OK {contract.name or f'{path.name}#{index}'}")

    if failed:
        sys.exit(1)


@cli.command()
@click.argument('file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--side', type=click.Choice(['stub', 'test']), default='stub', help='Which side to project')
@click.option('--indent', type=int, default=None, help='Pretty-print with this indentation')
@click.pass_context
def project(ctx: click.Context, file: Path, side: str, indent: int | None):
    """Print the stub-side or test-side projection of each contract as JSON."""
    debug = ctx.obj.get('debug', False)

    try:
        contracts = load_contracts(file)
        if side == 'stub':
            projections = [contract.to_stub_side() for contract in contracts]
        else:
            projections = [contract.to_test_side() for contract in contracts]
        click.echo(canonical_json(projections, indent=indent))
    except (ContractError, ValueError) as e:
        handle_error(e, debug)


@cli.command()
@click.argument('pattern')
@click.argument('text')
@click.pass_context
def match(ctx: click.Context, pattern: str, text: str):
    """Check TEXT against a library pattern, e.g. ``match uuid4 <value>``."""
    debug = ctx.obj.get('debug', False)

    try:
        compiled = by_name(pattern)
    except KeyError as e:
        handle_error(e, debug)
        return

    if compiled.matches(text):
        click.echo(f"MATCH {pattern}")
    else:
        click.echo(f"NO MATCH {pattern}: [{text}] does not match [{compiled}]")
        sys.exit(1)


@cli.command()
def patterns():
    """List library pattern names."""
    for name in pattern_names():
        click.echo(f"{name}: {by_name(name)}")


@cli.command(name='property')
@click.argument('key')
@click.option('--flag', is_flag=True, help='Resolve as a boolean flag')
def property_(key: str, flag: bool):
    """Resolve KEY through system properties and the environment."""
    if flag:
        click.echo("true" if is_property_set(key) else "false")
        return

    value = get_property(None, key)
    if value is None:
        click.echo(f"Error: Property [{key}] is not set", err=True)
        sys.exit(1)
    click.echo(value)


def main() -> None:
    """Entry point."""
    cli()


if __name__ == '__main__':
    main()
