"""Live-session services: presence registry, spell history and event relay.

Everything here is in-memory and process-local; Socket.IO handlers and the
presence HTTP routes import from this package rather than touching the
underlying maps directly.
"""

from .fanout import FanOut
from .registry import DEFAULT_MAX_HEALTH, DEFAULT_ZONE_ID, ConnectionState, Position, Session, SessionRegistry
from .relay import EventRelay, parse_position
from .spells import SpellBuffer, now_ms

__all__ = [
    'DEFAULT_MAX_HEALTH',
    'DEFAULT_ZONE_ID',
    'ConnectionState',
    'EventRelay',
    'FanOut',
    'Position',
    'Session',
    'SessionRegistry',
    'SpellBuffer',
    'now_ms',
    'parse_position',
]
