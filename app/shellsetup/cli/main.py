"""Main CLI application entry point.

Defines the Typer application and its options.
"""

import os
from typing import Annotated

import typer

from shellsetup import __version__
from shellsetup.cli.display import print_summary
from shellsetup.core.errors import SetupError
from shellsetup.core.sequencer import Sequencer, SetupSummary, exec_shell
from shellsetup.core.settings import load_settings
from shellsetup.core.setup_log import close_log, configure_console_logging
from shellsetup.utils.formatting import print_error, print_info

app = typer.Typer(
    name="shellsetup",
    help="Provision a zsh, tmux and terminal development environment.",
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"shellsetup version {__version__}")
        raise typer.Exit()


@app.command()
def main(
    non_interactive: Annotated[
        bool,
        typer.Option(
            "--non-interactive",
            envvar="CI",
            help="Never prompt: skip the default shell change and the final shell reload.",
        ),
    ] = False,
    no_exec: Annotated[
        bool,
        typer.Option(
            "--no-exec",
            help="Do not replace this process with zsh when done.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Show debug output.",
        ),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """Install and configure zsh, tmux, Starship, Ghostty and their plugins.

    Safe to re-run: installed components are skipped and every configuration
    file is backed up before it is replaced.
    """
    configure_console_logging(verbose)
    summary = SetupSummary()
    try:
        settings = load_settings()
        sequencer = Sequencer(settings, interactive=not non_interactive)
        sequencer.run(summary)
    except SetupError as e:
        print_error(str(e))
        if summary.log_file is not None:
            print_info(f"See {summary.log_file} for details")
        close_log()
        raise typer.Exit(code=1) from e
    except KeyboardInterrupt:
        print_error("Interrupted")
        close_log()
        raise typer.Exit(code=130) from None

    print_summary(summary, sequencer.home)
    close_log()

    if not (non_interactive or no_exec) and os.isatty(0):
        exec_shell()


if __name__ == "__main__":
    app()
