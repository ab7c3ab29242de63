"""Process entry point: build the application runtime and run one command.

Global flags are consumed here; every other argument is handed to the
dispatcher, which picks the command from the first ``--<name>`` token::

    bootkit -v --server --port 8080
"""

from __future__ import annotations

import click

from bootkit import __version__
from bootkit.config.logging import configure_logging
from bootkit.config.settings import BootSettings
from bootkit.errors import BootError
from bootkit.output.formatters import format_outcome
from bootkit.runtime.builder import RuntimeBuilder


@click.command(
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
        # --help belongs to the dispatcher's help command.
        "help_option_names": [],
    }
)
@click.version_option(version=__version__, prog_name="bootkit")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON logs to stderr.")
@click.option("--json", "json_output", is_flag=True, help="JSON outcome output.")
@click.option("-c", "--config", "config_path", default=None, help="Config file path.")
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
def cli(
    verbose: bool,
    log_json: bool,
    json_output: bool,
    config_path: str | None,
    args: tuple[str, ...],
) -> None:
    """bootkit — assemble the application from its modules and run a command."""
    flags = {"verbose": verbose, "log_json": log_json, "json_output": json_output}
    settings = BootSettings.load(
        config_path=config_path,
        **{name: value for name, value in flags.items() if value},
    )
    configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    builder = RuntimeBuilder(*args, settings=settings)
    try:
        if settings.modules.autoload:
            builder.auto_load_modules()
        runtime = builder.build()
    except BootError as exc:
        raise click.ClickException(str(exc)) from exc

    try:
        outcome = runtime.run()
    finally:
        runtime.shutdown()

    output = format_outcome(outcome, json_output=settings.json_output)
    if outcome.ok:
        click.echo(output)
    else:
        click.echo(output, err=True)
    if outcome.status != 0:
        raise SystemExit(outcome.status)
