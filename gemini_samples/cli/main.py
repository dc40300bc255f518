"""CLI commands for the Gemini samples."""

import logging
import sys
import uuid
from pathlib import Path

import click
import structlog

from gemini_samples import __version__
from gemini_samples.llm.dispatcher import Mode, execute
from gemini_samples.llm.errors import ConfigError, InputFileError, ProviderError
from gemini_samples.observability.logging import (
    bind_invocation_context,
    clear_invocation_context,
    configure_logging,
)
from gemini_samples.settings import get_settings


logger = structlog.get_logger()

_MODE_DESCRIPTIONS = {
    Mode.TEXT: "Generate text from a text-only prompt.",
    Mode.TEXT_AND_IMAGE: "Generate text from two images and an instruction.",
    Mode.CHAT: "Continue a seeded conversation with one more message.",
    Mode.STREAM: "Stream generated text as it is produced.",
}


@click.group()
@click.version_option(version=__version__)
def cli() -> None:
    """Gemini API sample programs."""


@cli.command()
@click.option(
    "--mode",
    type=click.Choice([m.value for m in Mode]),
    default=Mode.TEXT.value,
    show_default=True,
    help="Request mode to run.",
)
@click.option(
    "--prompt",
    type=str,
    default=None,
    help="Override the sample prompt (text and stream modes).",
)
@click.option(
    "--image-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path(),
    help="Directory containing the sample PNG images (image mode).",
)
@click.option(
    "--model",
    type=str,
    default=None,
    help="Model identifier (default: GEMINI_MODEL or gemini-1.5-flash).",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=False,
    help="Use JSON format for logs (default: false).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def run(  # noqa: PLR0913
    mode: str,
    prompt: str | None,
    image_dir: Path,
    model: str | None,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Send one request to Gemini and print the response.

    Model output goes to stdout; logs and errors go to stderr.
    """
    log_level = logging.DEBUG if verbose else logging.WARNING
    configure_logging(level=log_level, output=sys.stderr, json_format=json_logs)

    selected = Mode(mode)
    invocation_id = str(uuid.uuid4())
    bind_invocation_context(invocation_id, selected.value)
    log = logger.bind(component="cli", command="run")

    try:
        settings = get_settings()
        if model:
            settings = settings.model_copy(update={"gemini_model": model})
        execute(
            selected,
            settings,
            sink=click.echo,
            image_dir=image_dir,
            prompt=prompt,
        )
    except (ConfigError, InputFileError, ProviderError) as exc:
        log.warning("run_failed", error_type=type(exc).__name__)
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    finally:
        clear_invocation_context()

    log.info("run_complete")


@cli.command()
def modes() -> None:
    """List the available request modes."""
    for mode, description in _MODE_DESCRIPTIONS.items():
        click.echo(f"{mode.value:<8}{description}")


def main() -> None:
    """Console script entry point."""
    cli()
