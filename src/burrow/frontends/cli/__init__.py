"""Terminal front end and ``burrow`` command."""

from burrow.frontends.cli.terminal import ConsoleOutput, PromptInput, RichPrinter, create_theme

__all__ = ["ConsoleOutput", "PromptInput", "RichPrinter", "create_theme"]
