"""CLI entry point."""

from __future__ import annotations

import rich_click as click
from dotenv import load_dotenv

from burrow.core.config import Config
from burrow.core.io import ChainedInput, InputSource, LineInput
from burrow.core.logging_config import configure_logging
from burrow.core.session import Session

# Configure rich-click styling
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.USE_MARKDOWN = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try running '--help' for more information."
click.rich_click.MAX_WIDTH = 100


@click.command()
@click.version_option(package_name="burrow")
@click.option(
    "--memory-size",
    "-m",
    type=click.IntRange(min=1),
    default=None,
    help="Number of inputs and results to remember (default: 100)",
)
@click.option("--no-rc", is_flag=True, help="Do not load ~/.burrowrc or ./.burrowrc")
@click.option("--no-color", is_flag=True, help="Disable highlighting")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Log level for diagnostics on stderr",
)
@click.option(
    "--exec",
    "-e",
    "exec_lines",
    multiple=True,
    help="Line to run before the prompt appears (repeatable)",
)
def cli(
    memory_size: int | None,
    no_rc: bool,
    no_color: bool,
    log_level: str | None,
    exec_lines: tuple[str, ...],
) -> None:
    """Interactive Python session with nested contexts.

    **Commands inside the session:**

        cd <expr>     Move into an object

        exit          Leave the current object

        exit-all      End the session

        help          List all commands

    **Examples:**

        burrow

        burrow -e "import json" --memory-size 500
    """
    from burrow.frontends.cli.terminal import ConsoleOutput, PromptInput, RichPrinter

    load_dotenv()
    configure_logging(level=log_level)

    options: dict[str, object] = {}
    if memory_size is not None:
        options["memory_size"] = memory_size
    if no_rc:
        options["should_load_rc"] = False
    if no_color:
        options["color"] = False
    config = Config.from_env(**options)

    if config.disabled:
        return

    input_source: InputSource = PromptInput()
    if exec_lines:
        input_source = ChainedInput(LineInput(exec_lines), input_source)

    session = Session(
        config=config,
        input=input_source,
        output=ConsoleOutput(color=config.color),
        printer=RichPrinter(),
    )
    session.run()


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
