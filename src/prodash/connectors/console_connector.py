# src/prodash/connectors/console_connector.py

from __future__ import annotations

import logging
import sys
from datetime import datetime

from ..cli.commands import LOGIN_HINT
from ..cli.commands import registry as command_registry
from ..core.errors import ChatBusyError, MissingCredentialError
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _rewrite_prev_line(line: str) -> None:
    """
    Replace the last terminal line with `line`.
    Best-effort: if not a TTY, just print a new line.
    """
    if sys.stdout.isatty():
        sys.stdout.write("\033[1A\033[2K\r")
        sys.stdout.write(line + "\n")
        sys.stdout.flush()
    else:
        print(line)


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def handle_chat_line(state: AppState, text: str) -> list[str]:
    """
    Send free text to the chat assistant and return the lines to display.

    Notices (failed request, missing key) are transient: shown, never stored.
    """
    if state.session is None:
        return [LOGIN_HINT]

    app_name = str(getattr(state.settings, "app_name", "prodash"))
    try:
        outcome = state.chat.send(text)
    except MissingCredentialError as e:
        return [f"[CHAT] {e}"]
    except ChatBusyError as e:
        return [f"[CHAT] {e}"]

    if outcome is None:
        return []

    lines = [f"<<< {app_name}: {outcome.reply.text}"]
    if outcome.notice:
        lines.append(f"[!] Failed to get a response: {outcome.notice}")
    return lines


def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started (logged_in=%s).", state.logged_in)
    _print_ts("[CONSOLE] Productivity Dashboard. Use /help for commands. Use /exit to quit.\n")
    if state.session is None:
        _print_ts(LOGIN_HINT)
    else:
        _print_ts(f"Welcome back, {state.session.display_name}.")

    def emit(text: str) -> None:
        print(f"[{_ts_local()}] {text}", flush=True)

    while True:
        try:
            user_input = input(">>> You: ").strip()
            _rewrite_prev_line(f"[{_ts_local()}] >>> You: {user_input}")
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            cmd_response = command_registry.handle(state, user_input, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            cmd_response = "Internal error while handling a command."

        if cmd_response is not None:
            _print_ts(cmd_response)
            continue

        try:
            if state.session is not None:
                print(f"[{_ts_local()}] ... thinking", flush=True)
            lines = handle_chat_line(state, user_input)
        except Exception:
            logger.exception("Console chat handler crashed.")
            lines = ["Internal error while generating a reply."]

        for line in lines:
            _print_ts(line)
        print()

    logger.info("Console connector finished.")
