"""CLI entry point for rulekit.

This module defines the Click-based command-line interface:

    rulekit eval 'a > 5 && a < 10' --set a=7
    rulekit eval 'order.total * 0.9' --context order.yaml --as float
    rulekit check 'a >'
    rulekit functions
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from rulekit import __version__
from rulekit.cli.context import ContextError, ExitCode, load_context
from rulekit.cli.output import ResultType, format_error, format_value
from rulekit.config import RulekitConfig, load_config
from rulekit.exceptions import ConfigError
from rulekit.expressions.errors import (
    ExpressionError,
    ExpressionEvaluationError,
    KeyNotFoundError,
    UnknownFunctionError,
)
from rulekit.expressions.evaluator import ExpressionEvaluator
from rulekit.expressions.functions import default_registry
from rulekit.expressions.parser import parse_expression
from rulekit.logging import configure_logging

_VERBOSITY_LEVELS = {
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}


def _suggest(error: ExpressionEvaluationError) -> str | None:
    if isinstance(error, UnknownFunctionError):
        return "Run 'rulekit functions' to list available functions"
    if isinstance(error, KeyNotFoundError):
        return "Provide values with --set KEY=VALUE or --context FILE"
    return None


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="rulekit")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, path_type=str),
    default=None,
    help="Path to config file (overrides ./rulekit.yaml).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Suppress non-essential output (ERROR level only).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: str | None,
    verbose: int,
    quiet: bool,
) -> None:
    """rulekit - evaluate rule expressions against key-value data."""
    ctx.ensure_object(dict)

    # Load configuration first (before logging setup)
    try:
        config = load_config(Path(config_file) if config_file else None)
    except ConfigError as e:
        details = []
        if e.field:
            details.append(f"Field: {e.field}")
        if e.value is not None:
            details.append(f"Value: {e.value}")
        click.echo(format_error(e.message, details=details), err=True)
        ctx.exit(ExitCode.FAILURE)

    ctx.obj["config"] = config

    # Priority: quiet > verbose > config
    if quiet:
        level = logging.ERROR
    elif verbose > 0:
        level = logging.INFO if verbose == 1 else logging.DEBUG
    else:
        level = _VERBOSITY_LEVELS.get(config.verbosity, logging.WARNING)

    configure_logging(level=level)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("eval")
@click.argument("expression")
@click.option(
    "--context",
    "context_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML or JSON file holding the context mapping.",
)
@click.option(
    "--set",
    "assignments",
    multiple=True,
    metavar="KEY=VALUE",
    help="Set a context value (YAML scalar; dotted keys nest). Repeatable.",
)
@click.option(
    "--as",
    "result_type",
    type=click.Choice([t.value for t in ResultType]),
    default=ResultType.AUTO.value,
    show_default=True,
    help="Assert the result type before printing.",
)
@click.pass_context
def eval_command(
    ctx: click.Context,
    expression: str,
    context_file: Path | None,
    assignments: tuple[str, ...],
    result_type: str,
) -> None:
    """Evaluate EXPRESSION and print the result."""
    config: RulekitConfig = ctx.obj["config"]

    try:
        data = load_context(context_file, assignments)
    except ContextError as e:
        click.echo(format_error(str(e)), err=True)
        ctx.exit(ExitCode.FAILURE)

    evaluator = ExpressionEvaluator(
        functions=default_registry(),
        settings=config.evaluation,
    )
    dispatch = {
        ResultType.AUTO: evaluator.evaluate,
        ResultType.BOOL: evaluator.evaluate_bool,
        ResultType.INT: evaluator.evaluate_int,
        ResultType.FLOAT: evaluator.evaluate_float,
    }

    try:
        expr = parse_expression(expression)
        result = dispatch[ResultType(result_type)](expr, data)
    except ExpressionEvaluationError as e:
        click.echo(
            format_error(
                e.detail,
                details=[f"Expression: {expression}"],
                suggestion=_suggest(e),
            ),
            err=True,
        )
        ctx.exit(ExitCode.FAILURE)
    except ExpressionError as e:
        click.echo(format_error(e.message), err=True)
        ctx.exit(ExitCode.FAILURE)

    click.echo(format_value(result))


@cli.command("check")
@click.argument("expression")
@click.pass_context
def check_command(ctx: click.Context, expression: str) -> None:
    """Parse EXPRESSION without evaluating it."""
    try:
        parse_expression(expression)
    except ExpressionError as e:
        click.echo(format_error(e.message), err=True)
        ctx.exit(ExitCode.FAILURE)
    click.echo("OK")


@cli.command("functions")
def functions_command() -> None:
    """List functions callable from expressions."""
    for name in default_registry().names():
        click.echo(name)


if __name__ == "__main__":
    cli()
