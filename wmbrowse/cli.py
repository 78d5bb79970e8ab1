"""
CLI — Interactive world model console

One session owns two links to the world model (observation and mutation)
and runs a cooperative loop over operator input:

    CONNECTING -> RUNNING -> STOPPING -> TERMINATED

The loop never blocks on input: each step checks whether a line is
available, sleeps briefly if not, and otherwise runs exactly one command
to completion before the next step. Command failures are reported and the
session continues; anything unexpected stops the session after both
links are disconnected.
"""

import argparse
import sys
import time
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Set

from loguru import logger

from .config import Config, ConfigManager, parse_port
from .content import ABOUT_TEXT
from .core.errors import LinkError, WorldModelError
from .core.negotiator import TypeNegotiator
from .core.registry import AttributeTypeRegistry
from .core.tokenizer import split_keyword
from .presentation.console import Console
from .presentation.symbols import (
    CONNECT_FAIL, CONNECT_OK, CONNECT_OPEN, CONNECT_TICK, DISCONNECTED,
)
from .services.links import ConnectPolicy, Link, LinkPair, LinkStatus, load_backend
from .commands import Keyword, dispatch, resolve_keyword, suggest_keyword
from .commands.help_cmd import HelpCommand
from .commands.quit_cmd import QuitCommand
from .commands.search import SearchCommand
from .commands.status import StatusCommand
from .commands.history import HistoryCommand
from .commands.touch import TouchCommand
from .commands.update import UpdateCommand
from .commands.expire import ExpireCommand
from .commands.remove import RemoveCommand
from .commands.copy_cmd import CopyCommand
from .utils.logger import setup_logging, shutdown_logging
from . import TITLE, __version__


class SessionState(Enum):
    CONNECTING = "connecting"
    RUNNING = "running"
    STOPPING = "stopping"
    TERMINATED = "terminated"


class BrowserCLI:
    """Session controller for the world model console."""

    def __init__(
        self,
        config: Config,
        links: LinkPair,
        console: Optional[Console] = None,
        registry: Optional[AttributeTypeRegistry] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.links = links
        self.console = console or Console()
        self.registry = registry if registry is not None else AttributeTypeRegistry.from_mapping(config.attribute_types)
        self.sleep = sleep

        self.origin = config.session.origin
        self.prompt = f"{config.connection.host}{config.session.prompt}"
        self.state = SessionState.CONNECTING
        self.exit_code = 0

        # Attribute specs already registered on the mutation link
        self.registered_specs: Set[str] = set()

        self.negotiator = TypeNegotiator(
            self.registry,
            ask=self.console.ask,
            write=self.console.write,
            max_attempts=config.session.type_attempts,
        )

        # Initialize command handlers
        self._help_cmd = HelpCommand(self)
        self._quit_cmd = QuitCommand(self)
        self._search_cmd = SearchCommand(self)
        self._status_cmd = StatusCommand(self)
        self._history_cmd = HistoryCommand(self)
        self._touch_cmd = TouchCommand(self)
        self._update_cmd = UpdateCommand(self)
        self._expire_cmd = ExpireCommand(self)
        self._remove_cmd = RemoveCommand(self)
        self._copy_cmd = CopyCommand(self)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def keep_running(self) -> bool:
        return self.state == SessionState.RUNNING

    def stop(self) -> None:
        """Request shutdown. The state only ever moves forward."""
        if self.state in (SessionState.CONNECTING, SessionState.RUNNING):
            logger.info("Session stopping")
            self.state = SessionState.STOPPING

    def start(self) -> bool:
        """
        Connect both links, observation first.

        Returns:
            True if the session entered RUNNING
        """
        if self.state != SessionState.CONNECTING:
            return self.state == SessionState.RUNNING

        try:
            connected = self.links.connect(
                on_start=self._on_connect_start,
                on_progress=lambda mark: self.console.write(mark, end=""),
                on_done=self._on_connect_done,
            )
        except Exception:
            self.exit_code = 1
            self.terminate()
            raise
        if not connected:
            logger.error("Startup aborted: a link never became ready")
            self.exit_code = 1
            self.terminate()
            return False

        self.state = SessionState.RUNNING
        self.console.write("")
        self.console.write(self.prompt, end="")
        return True

    def _on_connect_start(self, link: Link) -> None:
        self.console.write(f"{CONNECT_OPEN}{link}{CONNECT_TICK}", end="")

    def _on_connect_done(self, link: Link, status: LinkStatus) -> None:
        self.console.write(CONNECT_OK if status == LinkStatus.READY else CONNECT_FAIL)

    def run(self) -> int:
        """
        Run the session until quit, end of input or an unexpected fault.

        Returns:
            Process exit code
        """
        try:
            if not self.start():
                return self.exit_code
            while self.keep_running:
                self.step()
        except Exception as e:
            logger.exception("Unexpected fault; ending session")
            self.console.write("")
            self.console.write(f"An unexpected error has occurred: {e}")
            self.exit_code = 1
            self.stop()
        finally:
            self.terminate()
        return self.exit_code

    def step(self) -> bool:
        """
        One scheduling step.

        Returns:
            True if a line was handled, False if no input was ready
        """
        if not self.console.input_ready():
            self.sleep(self.config.session.idle_sleep_ms / 1000.0)
            return False

        line = self.console.readline()
        if line is None:
            logger.info("End of input")
            self.console.write("")
            self.stop()
            return True

        self.handle_command(line.strip())
        if self.keep_running:
            self.console.write("")
            self.console.write(self.prompt, end="")
        return True

    def terminate(self) -> None:
        """Disconnect both links and emit the final status line. Idempotent."""
        if self.state == SessionState.TERMINATED:
            return
        self.stop()
        self.links.disconnect()
        self.state = SessionState.TERMINATED
        self.console.write(DISCONNECTED)
        logger.info("Session terminated")

    # =========================================================================
    # Commands
    # =========================================================================

    def handle_command(self, line: str) -> None:
        """
        Tokenize and dispatch one line.

        Command failures (WorldModelError, including link faults) are
        reported as one line and logged in full; other exceptions
        propagate to run().
        """
        word, args = split_keyword(line)
        if not word:
            return

        keyword = resolve_keyword(word)
        if keyword is None:
            self.console.write(f"Command not found \"{word}\".")
            suggestion = suggest_keyword(word)
            if suggestion:
                self.console.write(f"Did you mean \"{suggestion}\"?")
            self.console.write("Type \"help\" for a list of commands.")
            return

        logger.debug("Dispatching {} {}", keyword.value, args)
        try:
            self._dispatch(keyword, args)
        except WorldModelError as e:
            logger.exception("Command {} failed", keyword.value)
            self.console.write(f"Error: {e}")

    def _dispatch(self, keyword: Keyword, args: List[str]) -> None:
        """
        Run one handler.

        Raises:
            LinkError: A link call faulted at the socket level
        """
        try:
            dispatch(keyword, self, args)
        except OSError as e:
            raise LinkError(f"World model link fault: {e}") from e

    def ensure_attribute_spec(self, name: str) -> None:
        """Register an attribute spec (not on-demand) once per session."""
        if name in self.registered_specs:
            return
        self.links.mutation.register_attribute_spec(name, False)
        self.registered_specs.add(name)
        logger.debug("Registered attribute spec {}", name)


# =============================================================================
# Entry point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wmbrowse",
        description=f"{TITLE} -- interactive world model console",
        epilog="Omit ORIGIN for a read-only (search/status/history) session."
    )
    parser.add_argument('host', nargs='?', help='World model hostname/IP address')
    parser.add_argument('origin', nargs='?', help='Origin string for Identifiers and Attributes sent')
    parser.add_argument('solver_port', nargs='?', help='Solver (mutation) port override')
    parser.add_argument('client_port', nargs='?', help='Client (observation) port override')
    parser.add_argument('--config', '-c', type=Path, help='Additional YAML config file')
    parser.add_argument('--backend', help="'memory' or 'package.module:factory'")
    parser.add_argument('--seed', help='JSON seed file for the memory backend')
    parser.add_argument('--show-config', action='store_true', help='Print effective configuration and exit')
    parser.add_argument('--version', '-V', action='version', version=f'wmbrowse {__version__}')
    return parser


def _overrides_from_args(args: argparse.Namespace) -> dict:
    overrides: dict = {}
    if args.host:
        overrides.setdefault("connection", {})["host"] = args.host
    if args.origin:
        overrides.setdefault("session", {})["origin"] = args.origin
    if args.solver_port is not None:
        port = parse_port(args.solver_port, "solver port")
        if port is not None:
            overrides.setdefault("connection", {})["solver_port"] = port
    if args.client_port is not None:
        port = parse_port(args.client_port, "client port")
        if port is not None:
            overrides.setdefault("connection", {})["client_port"] = port
    if args.backend:
        overrides.setdefault("connection", {})["backend"] = args.backend
    if args.seed:
        overrides.setdefault("connection", {})["seed"] = args.seed
    return overrides


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Positional arguments follow the classic order: host, origin, solver
    port, client port. Each may also come from config files or the
    environment.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    print(ABOUT_TEXT)

    manager = ConfigManager(args.config)
    try:
        config = manager.load(_overrides_from_args(args))
    except (TypeError, ValueError) as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    if args.show_config:
        print(manager.display())
        return 0

    if not args.host and config.connection.host == "localhost" and config.connection.backend != "memory":
        print("Missing world model hostname/IP address.", file=sys.stderr)
        return 2

    error = config.validate()
    if error:
        print(error, file=sys.stderr)
        return 2

    setup_logging(config.logging)
    try:
        try:
            observation, mutation = load_backend(config)
        except (ValueError, WorldModelError) as e:
            logger.exception("Backend setup failed")
            print(f"Unable to set up backend: {e}", file=sys.stderr)
            return 2

        if mutation is None:
            print("No origin given: starting a read-only session.")

        policy = ConnectPolicy(
            timeout_ms=config.connection.connect_timeout_ms,
            poll_interval_ms=config.connection.poll_interval_ms,
            poll_attempts=config.connection.poll_attempts,
        )
        cli = BrowserCLI(config, LinkPair(observation, mutation, policy=policy))
        return cli.run()
    finally:
        shutdown_logging()


if __name__ == '__main__':
    sys.exit(main())
