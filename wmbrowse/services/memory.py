"""
Memory World Model — In-process backend for both link kinds

Keeps Identifier and Attribute history in memory, behaving like a world
model server closely enough for offline use and for tests:
- Mutation links stamp every Attribute with their own origin
- Attribute names must be registered on a mutation link before updates
- Expired and deleted data disappear from current snapshots

Optional seed file (JSON, parsed with orjson):
    {"identifiers": {
        "room.101": [
            {"name": "temperature", "type": "double", "value": "21.5",
             "origin": "thermostat", "created": 1700000000000}
        ]
    }}
"""

import re
import threading
from dataclasses import replace
from concurrent.futures import Future
from pathlib import Path
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

import orjson
from loguru import logger

from ..core.errors import LinkError
from ..core.model import Attribute, WorldState, now_ms
from ..core.stream import RangeStream
from ..core.values import get_value_type
from .links import MutationLink, ObservationLink

if TYPE_CHECKING:
    from ..config import Config


class MemoryWorldModel:
    """Thread-safe in-memory store of Identifiers and Attribute history."""

    def __init__(self):
        self._lock = threading.RLock()
        self._created: Dict[str, int] = {}
        self._history: Dict[str, List[Attribute]] = {}

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def search_ids(self, id_regex: str) -> List[str]:
        pattern = _compile(id_regex)
        with self._lock:
            return sorted(i for i in self._created if pattern.fullmatch(i))

    def snapshot(self, id_regex: str, attr_regex: str = ".*", at: Optional[int] = None) -> WorldState:
        """Latest live value of each attribute for every matching Identifier."""
        at = now_ms() if at is None else at
        id_pattern = _compile(id_regex)
        attr_pattern = _compile(attr_regex)
        state = WorldState(timestamp=at)
        with self._lock:
            for identifier in sorted(self._created):
                if not id_pattern.fullmatch(identifier):
                    continue
                latest: Dict[str, Attribute] = {}
                for attr in self._history.get(identifier, []):
                    if attr.created > at or not attr_pattern.fullmatch(attr.name):
                        continue
                    current = latest.get(attr.name)
                    if current is None or attr.created >= current.created:
                        latest[attr.name] = attr
                state.entries[identifier] = [
                    a for a in sorted(latest.values(), key=lambda a: a.name)
                    if not a.is_expired(at)
                ]
        return state

    def range(self, id_regex: str, from_ts: int, to_ts: int, attr_regex: str = ".*") -> List[WorldState]:
        """Attribute history in [from_ts, to_ts], one snapshot per creation instant."""
        id_pattern = _compile(id_regex)
        attr_pattern = _compile(attr_regex)
        with self._lock:
            matched = [
                a for identifier, attrs in self._history.items()
                if id_pattern.fullmatch(identifier)
                for a in attrs
                if from_ts <= a.created <= to_ts and attr_pattern.fullmatch(a.name)
            ]
        matched.sort(key=lambda a: (a.created, a.identifier, a.name))

        snapshots: List[WorldState] = []
        for attr in matched:
            if not snapshots or snapshots[-1].timestamp != attr.created:
                snapshots.append(WorldState(timestamp=attr.created))
            snapshots[-1].add(attr)
        return snapshots

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create(self, identifier: str, at: Optional[int] = None) -> bool:
        with self._lock:
            if identifier in self._created:
                return True
            self._created[identifier] = now_ms() if at is None else at
            self._history.setdefault(identifier, [])
        return True

    def put(self, attribute: Attribute) -> None:
        with self._lock:
            self.create(attribute.identifier, attribute.created)
            self._history[attribute.identifier].append(attribute)

    def expire(self, identifier: str, expires: int, attribute: Optional[str] = None) -> bool:
        with self._lock:
            if identifier not in self._created:
                return False
            history = self._history[identifier]
            touched = False
            for i, attr in enumerate(history):
                if attribute is not None and attr.name != attribute:
                    continue
                if attr.expires == 0 or attr.expires > expires:
                    history[i] = replace(attr, expires=expires)
                    touched = True
            return touched or attribute is None

    def delete(self, identifier: str, attribute: Optional[str] = None) -> bool:
        with self._lock:
            if identifier not in self._created:
                return False
            if attribute is None:
                del self._created[identifier]
                self._history.pop(identifier, None)
                return True
            before = len(self._history[identifier])
            self._history[identifier] = [a for a in self._history[identifier] if a.name != attribute]
            return len(self._history[identifier]) != before

    # -------------------------------------------------------------------------
    # Seeding
    # -------------------------------------------------------------------------

    def load(self, path: Path) -> int:
        """
        Load Identifiers and Attributes from a JSON seed file.

        Returns:
            Number of attributes loaded

        Raises:
            ValueError: If the file is malformed or names an unknown type
        """
        try:
            data = orjson.loads(Path(path).read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            raise ValueError(f"Cannot read seed file {path}: {e}") from e

        loaded = 0
        for identifier, attrs in (data.get("identifiers") or {}).items():
            self.create(identifier)
            for entry in attrs or []:
                self.put(_attribute_from_seed(identifier, entry))
                loaded += 1
        logger.info("Seeded memory world model from {} ({} attributes)", path, loaded)
        return loaded


def _attribute_from_seed(identifier: str, entry: Dict) -> Attribute:
    if "hex" in entry:
        data = bytes.fromhex(entry["hex"])
    else:
        value_type = get_value_type(entry.get("type", "string"))
        if value_type is None:
            raise ValueError(f"Unknown value type '{entry.get('type')}' in seed for {identifier}")
        data = value_type.encode(str(entry.get("value", "")))
    return Attribute(
        identifier=identifier,
        name=entry["name"],
        created=int(entry.get("created", now_ms())),
        data=data,
        origin=entry.get("origin", "seed"),
        expires=int(entry.get("expires", 0)),
    )


def _compile(regex: str) -> 're.Pattern':
    try:
        return re.compile(regex)
    except re.error as e:
        raise LinkError(f"Invalid regular expression \"{regex}\": {e}") from e


# =============================================================================
# Links
# =============================================================================

class _MemoryLink:
    """Connection state shared by both memory link kinds."""

    def __init__(self, model: MemoryWorldModel, ready_after: int = 0, reachable: bool = True):
        self.model = model
        self.ready_after = ready_after
        self.reachable = reachable
        self.connected = False
        self.readiness_checks = 0
        self.disconnects = 0

    def connect(self, timeout_ms: int) -> bool:
        self.connected = self.reachable
        self.readiness_checks = 0
        return self.connected

    def is_ready(self) -> bool:
        if not self.connected:
            return False
        self.readiness_checks += 1
        return self.readiness_checks > self.ready_after

    def disconnect(self) -> None:
        if self.connected:
            self.disconnects += 1
        self.connected = False

    def _require_connected(self) -> None:
        if not self.connected:
            raise LinkError(f"{self} is not connected")


class MemoryObservationLink(_MemoryLink, ObservationLink):

    def search_ids(self, id_regex: str) -> List[str]:
        self._require_connected()
        return self.model.search_ids(id_regex)

    def get_current_snapshot(self, id_regex: str, attr_regex: str = ".*") -> 'Future[WorldState]':
        self._require_connected()
        future: Future = Future()
        try:
            future.set_result(self.model.snapshot(id_regex, attr_regex))
        except LinkError as e:
            future.set_exception(e)
        return future

    def get_range_stream(self, id_regex: str, from_ts: int, to_ts: int, attr_regex: str = ".*") -> RangeStream:
        self._require_connected()
        stream = RangeStream()
        try:
            for snapshot in self.model.range(id_regex, from_ts, to_ts, attr_regex):
                stream.deliver(snapshot)
        except LinkError as e:
            stream.fail(e)
        stream.finish()
        return stream


class MemoryMutationLink(_MemoryLink, MutationLink):

    def __init__(self, model: MemoryWorldModel, origin: str = "", **kwargs):
        super().__init__(model, **kwargs)
        self.origin = origin
        self.specs: Dict[str, bool] = {}

    def register_attribute_spec(self, name: str, on_demand: bool = False) -> None:
        self._require_connected()
        self.specs[name] = on_demand

    def create_identifier(self, identifier: str) -> bool:
        self._require_connected()
        return self.model.create(identifier)

    def update_attribute(self, attribute: Attribute) -> bool:
        self._require_connected()
        if attribute.name not in self.specs:
            logger.warning("Rejected update of unregistered attribute {}", attribute.name)
            return False
        self.model.put(attribute.with_origin(self.origin))
        return True

    def expire(self, identifier: str, expires: int, attribute: Optional[str] = None) -> bool:
        self._require_connected()
        return self.model.expire(identifier, expires, attribute)

    def delete(self, identifier: str, attribute: Optional[str] = None) -> bool:
        self._require_connected()
        return self.model.delete(identifier, attribute)


def memory_backend(config: 'Config') -> Tuple[MemoryObservationLink, MemoryMutationLink]:
    """Backend factory for connection.backend = "memory"."""
    model = MemoryWorldModel()
    if config.connection.seed:
        model.load(Path(config.connection.seed).expanduser())
    return MemoryObservationLink(model), MemoryMutationLink(model, origin=config.session.origin or "")
