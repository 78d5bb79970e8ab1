"""
Services — World model links and backends
"""

from .links import (
    Link, ObservationLink, MutationLink, LinkStatus, ConnectPolicy, LinkPair,
    open_link, load_backend, DEFAULT_SOLVER_PORT, DEFAULT_CLIENT_PORT,
)
from .memory import MemoryWorldModel, MemoryObservationLink, MemoryMutationLink, memory_backend

__all__ = [
    'Link', 'ObservationLink', 'MutationLink', 'LinkStatus', 'ConnectPolicy', 'LinkPair',
    'open_link', 'load_backend', 'DEFAULT_SOLVER_PORT', 'DEFAULT_CLIENT_PORT',
    'MemoryWorldModel', 'MemoryObservationLink', 'MemoryMutationLink', 'memory_backend',
]
