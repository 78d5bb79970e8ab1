"""
BaseCommand — Shared foundation for all console commands

Provides access to session resources via composition.
Commands receive the session (BrowserCLI) and reach its links, registry
and console through properties.
"""

from concurrent.futures import CancelledError
from typing import List, Optional, TYPE_CHECKING

from loguru import logger

from ..core.errors import LinkError, UsageError, WorldModelError

if TYPE_CHECKING:
    from ..cli import BrowserCLI
    from ..core.model import WorldState


class BaseCommand:
    """
    Base class for console commands with access to shared resources.

    Commands don't own resources; they use the session's.
    """

    USAGE = ""

    def __init__(self, cli: 'BrowserCLI'):
        """
        Initialize command with session instance.

        Args:
            cli: The BrowserCLI session holding links, registry and console
        """
        self._cli = cli

    # -------------------------------------------------------------------------
    # Session resources (convenience properties)
    # -------------------------------------------------------------------------

    @property
    def config(self):
        return self._cli.config

    @property
    def console(self):
        return self._cli.console

    @property
    def registry(self):
        """Attribute-type registry for this session."""
        return self._cli.registry

    @property
    def negotiator(self):
        return self._cli.negotiator

    @property
    def observation(self):
        return self._cli.links.observation

    @property
    def mutation(self):
        """
        Mutation link.

        Raises:
            UsageError: If the session is read-only (no origin)
        """
        if self._cli.links.mutation is None:
            raise UsageError("Read-only session: start with an origin to modify the world model.")
        return self._cli.links.mutation

    def require_writable(self):
        """Mutation link, checked before any prompt or fetch."""
        return self.mutation

    @property
    def origin(self) -> Optional[str]:
        return self._cli.origin

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def write(self, text: str = "") -> None:
        self.console.write(text)

    def write_lines(self, lines: List[str]) -> None:
        for line in lines:
            self.console.write(line)

    def require_args(self, args: List[str], minimum: int, maximum: Optional[int] = None) -> None:
        """
        Raises:
            UsageError: If the argument count is outside [minimum, maximum]
        """
        if len(args) < minimum:
            raise UsageError("Missing arguments.", self.USAGE)
        if maximum is not None and len(args) > maximum:
            raise UsageError("Too many arguments.", self.USAGE)

    def fetch_snapshot(self, id_regex: str, attr_regex: str = ".*") -> 'WorldState':
        """
        Fetch the current snapshot, blocking until the link answers.

        Raises:
            LinkError: If the request fails
        """
        future = self.observation.get_current_snapshot(id_regex, attr_regex)
        try:
            return future.result()
        except WorldModelError:
            raise
        except (OSError, TimeoutError, CancelledError) as e:
            raise LinkError(f"Snapshot request for \"{id_regex}\" failed: {e}") from e

    def check_sent(self, accepted: bool, action: str) -> None:
        """
        Raises:
            LinkError: If the world model rejected a mutation
        """
        if not accepted:
            raise LinkError(f"World model rejected {action}.")
        logger.info("Accepted {}", action)
