"""
World Model Links — Read and write connections to the world model

Two independent connections:
- ObservationLink (client port): searches, snapshots, range streams
- MutationLink (solver port): creates, updates, expires, deletes

Both share the same lifecycle: connect with a timeout, then poll a
readiness predicate at a fixed interval for a bounded number of attempts.
The wire protocol is the backend's concern; this module only defines
the seam and drives the lifecycle.
"""

import importlib
import time
from abc import ABC, abstractmethod
from concurrent.futures import Future
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple, TYPE_CHECKING

from loguru import logger

from ..core.model import Attribute, WorldState
from ..core.stream import RangeStream

if TYPE_CHECKING:
    from ..config import Config


DEFAULT_SOLVER_PORT = 7009
DEFAULT_CLIENT_PORT = 7010


class Link(ABC):
    """Lifecycle shared by both link kinds."""

    host: str = "localhost"
    port: int = 0

    @abstractmethod
    def connect(self, timeout_ms: int) -> bool:
        """
        Open the low-level connection.

        Returns:
            True if the socket-level connect succeeded (readiness may lag)
        """
        pass

    @abstractmethod
    def is_ready(self) -> bool:
        """Handshake completed and requests may be issued."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Close the connection. Must be safe to call repeatedly."""
        pass

    def __str__(self) -> str:
        return f"{type(self).__name__}@{self.host}:{self.port}"


class ObservationLink(Link):
    """Read-oriented connection."""

    @abstractmethod
    def search_ids(self, id_regex: str) -> List[str]:
        pass

    @abstractmethod
    def get_current_snapshot(self, id_regex: str, attr_regex: str = ".*") -> 'Future[WorldState]':
        pass

    @abstractmethod
    def get_range_stream(self, id_regex: str, from_ts: int, to_ts: int, attr_regex: str = ".*") -> RangeStream:
        pass


class MutationLink(Link):
    """Write-oriented connection, attributed to an origin."""

    origin: str = ""

    def set_origin(self, origin: str) -> None:
        self.origin = origin

    @abstractmethod
    def register_attribute_spec(self, name: str, on_demand: bool = False) -> None:
        pass

    @abstractmethod
    def create_identifier(self, identifier: str) -> bool:
        pass

    @abstractmethod
    def update_attribute(self, attribute: Attribute) -> bool:
        pass

    @abstractmethod
    def expire(self, identifier: str, expires: int, attribute: Optional[str] = None) -> bool:
        pass

    @abstractmethod
    def delete(self, identifier: str, attribute: Optional[str] = None) -> bool:
        pass


class LinkStatus(Enum):
    READY = "ready"
    FAILED = "failed"


@dataclass
class ConnectPolicy:
    """Timeout and readiness-poll budget for one link."""
    timeout_ms: int = 10000
    poll_interval_ms: int = 500
    poll_attempts: int = 20


def open_link(
    link: Link,
    policy: ConnectPolicy,
    sleep: Callable[[float], None] = time.sleep,
    on_progress: Optional[Callable[[str], None]] = None,
) -> LinkStatus:
    """
    Connect a link and wait for it to become ready.

    A failed connect returns FAILED immediately (no retry). After a
    successful connect, readiness is polled every poll_interval_ms up to
    poll_attempts times; a link that never becomes ready, or whose
    readiness check raises, is released.

    Args:
        link: Link to open
        policy: Timeout and poll budget
        sleep: Injected sleep (seconds), for deterministic tests
        on_progress: Called with "." once per poll attempt
    """
    logger.info("Connecting {} (timeout {} ms)", link, policy.timeout_ms)
    try:
        connected = link.connect(policy.timeout_ms)
    except OSError as e:
        logger.exception("Connect to {} raised: {}", link, e)
        connected = False
    if not connected:
        logger.warning("Connect to {} failed", link)
        return LinkStatus.FAILED

    attempts = 0
    while True:
        try:
            ready = link.is_ready()
        except OSError as e:
            logger.exception("Readiness check of {} raised: {}", link, e)
            _release(link)
            return LinkStatus.FAILED
        if ready:
            break
        if attempts >= policy.poll_attempts:
            logger.warning("{} not ready after {} polls; releasing", link, attempts)
            _release(link)
            return LinkStatus.FAILED
        sleep(policy.poll_interval_ms / 1000.0)
        attempts += 1
        if on_progress:
            on_progress(".")

    logger.info("{} ready after {} poll(s)", link, attempts)
    return LinkStatus.READY


def _release(link: Link) -> None:
    try:
        link.disconnect()
    except OSError as e:
        logger.exception("Disconnect of {} raised: {}", link, e)


class LinkPair:
    """
    Owns the observation and mutation links of one session.

    The mutation link is optional: a session without an origin is
    read-only and never opens it.
    """

    def __init__(
        self,
        observation: ObservationLink,
        mutation: Optional[MutationLink] = None,
        policy: Optional[ConnectPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.observation = observation
        self.mutation = mutation
        self.policy = policy or ConnectPolicy()
        self.sleep = sleep
        self._opened: List[Link] = []

    @property
    def read_only(self) -> bool:
        return self.mutation is None

    @property
    def is_connected(self) -> bool:
        return bool(self._opened) and len(self._opened) == len(self.links())

    def links(self) -> List[Tuple[str, Link]]:
        pairs: List[Tuple[str, Link]] = [("observation", self.observation)]
        if self.mutation is not None:
            pairs.append(("mutation", self.mutation))
        return pairs

    def connect(
        self,
        on_start: Optional[Callable[[Link], None]] = None,
        on_progress: Optional[Callable[[str], None]] = None,
        on_done: Optional[Callable[[Link, LinkStatus], None]] = None,
    ) -> bool:
        """
        Open observation first, then mutation.

        On any failure, links already opened are disconnected and False is
        returned.
        """
        for _, link in self.links():
            if on_start:
                on_start(link)
            status = open_link(link, self.policy, sleep=self.sleep, on_progress=on_progress)
            if on_done:
                on_done(link, status)
            if status != LinkStatus.READY:
                self.disconnect()
                return False
            self._opened.append(link)
        return True

    def disconnect(self) -> None:
        """Disconnect every link. Idempotent."""
        for _, link in self.links():
            _release(link)
        self._opened.clear()


# =============================================================================
# Backend loading
# =============================================================================

def load_backend(config: 'Config') -> Tuple[ObservationLink, Optional[MutationLink]]:
    """
    Build the links for the configured backend.

    "memory" selects the in-process world model. Any other value is a
    "package.module:factory" path; the factory receives the Config and
    returns (ObservationLink, MutationLink).

    Raises:
        ValueError: If the backend string cannot be resolved
    """
    backend = config.connection.backend
    if backend == "memory":
        from .memory import memory_backend
        factory = memory_backend
    else:
        module_name, _, attr = backend.partition(":")
        if not module_name or not attr:
            raise ValueError(f"Backend must be 'memory' or 'module:factory', got '{backend}'")
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            raise ValueError(f"Cannot import backend module '{module_name}': {e}") from e
        factory = getattr(module, attr, None)
        if factory is None:
            raise ValueError(f"Backend module '{module_name}' has no '{attr}'")

    observation, mutation = factory(config)
    observation.host = config.connection.host
    observation.port = config.connection.client_port
    if mutation is not None:
        mutation.host = config.connection.host
        mutation.port = config.connection.solver_port
        mutation.set_origin(config.session.origin or "")
    if not config.session.origin:
        mutation = None
    return observation, mutation
