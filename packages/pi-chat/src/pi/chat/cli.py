"""CLI entry point for pi-chat. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import os
import sys
import termios

import click

from pi.chat.app import ChatApp, run_app
from pi.chat.keybindings import ChatKeybindingsManager
from pi.chat.render import FrameRenderer
from pi.chat.settings import SettingsManager, default_chat_dir
from pi.chat.terminal import ProcessTerminal, TerminalError, terminal_session

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _configure_logging(log_file: str, log_level: str) -> None:
    # The screen belongs to the UI, so records never go to the terminal
    os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=LOG_FORMAT,
        filename=log_file,
    )


@click.command()
@click.option("--peer", default=None, help="Name shown in the chat title")
@click.option(
    "--messages-height",
    type=click.IntRange(min=0),
    default=None,
    help="Rows reserved for the message list, borders included",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Log file (default: ~/.pi/chat/pi-chat.log)",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="info",
    show_default=True,
)
@click.option(
    "--print-history/--no-print-history",
    default=False,
    help="Print the submitted messages after the terminal is restored",
)
def main(peer, messages_height, log_file, log_level, print_history):
    """Type messages in a terminal input box. Press e to edit, q to quit."""
    log_file = log_file or os.path.join(default_chat_dir(), "pi-chat.log")
    try:
        _configure_logging(log_file, log_level)
    except OSError as e:
        click.echo(f"Error: cannot open log file {log_file}: {e}", err=True)
        sys.exit(1)

    settings = SettingsManager.create(os.getcwd())
    settings.apply_overrides({"peerName": peer, "messagesHeight": messages_height})

    try:
        bindings = ChatKeybindingsManager(settings.get_keybindings())
    except ValueError as e:
        click.echo(f"Error: invalid keybindings: {e}", err=True)
        sys.exit(1)

    app = ChatApp(bindings)
    terminal = ProcessTerminal(escape_timeout=settings.get_escape_timeout())
    renderer = FrameRenderer(
        terminal,
        peer_name=settings.get_peer_name(),
        messages_height=settings.get_messages_height(),
        bindings=bindings,
    )

    try:
        with terminal_session(terminal):
            history = run_app(terminal, app, renderer)
    except (OSError, termios.error, TerminalError) as e:
        logger.exception("Chat session failed")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if print_history:
        for message in history:
            click.echo(message)


if __name__ == "__main__":
    main()
