"""
wmbrowse — World Model Browser

Interactive console for browsing and editing a world model over two links:
an observation link (search, snapshots, history streams) and a mutation
link (identifiers, attribute values, expirations, deletions).

Usage:
    wmbrowse HOST ORIGIN [SOLVER_PORT [CLIENT_PORT]]
    wmbrowse HOST                         (read-only session)
    wmbrowse --backend memory --seed world.json localhost console

Console commands:
    search ID_REGEX        status ID_REGEX        history ID_REGEX
    touch ID               update ID ATTR         expire ID [ATTR]
    rm ID [ATTR]           cp [-r] SRC DST        help | quit
"""

__version__ = "1.0.0"

TITLE = "World Model Browser"

# Core layer (data)
from .core.errors import (
    WorldModelError, UsageError, LinkError, NegotiationError, ValueEncodingError, StreamError,
)
from .core.model import Attribute, WorldState, now_ms
from .core.registry import AttributeTypeRegistry
from .core.stream import RangeStream, StreamState, drain

# Services layer
from .services.links import LinkPair, LinkStatus, ConnectPolicy, ObservationLink, MutationLink
from .services.memory import MemoryWorldModel

__all__ = [
    '__version__', 'TITLE',
    'WorldModelError', 'UsageError', 'LinkError', 'NegotiationError', 'ValueEncodingError', 'StreamError',
    'Attribute', 'WorldState', 'now_ms', 'AttributeTypeRegistry',
    'RangeStream', 'StreamState', 'drain',
    'LinkPair', 'LinkStatus', 'ConnectPolicy', 'ObservationLink', 'MutationLink', 'MemoryWorldModel',
]
