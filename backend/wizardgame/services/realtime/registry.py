import threading
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Optional, Tuple


DEFAULT_ZONE_ID = 'great_hall'
DEFAULT_MAX_HEALTH = 100


class ConnectionState(Enum):
    UNJOINED = 'unjoined'
    JOINED = 'joined'


@dataclass
class Position:
    x: float = 0
    y: float = 0

    def to_dict(self):
        return {'x': self.x, 'y': self.y}


@dataclass
class Session:
    """Live presence snapshot for one connected player."""
    player_id: str
    connection_id: str
    health: int
    max_health: int
    zone_id: str
    username: Optional[str] = None
    house: Optional[str] = None
    position: Position = field(default_factory=Position)

    def public_dict(self):
        return {
            'playerId': self.player_id,
            'username': self.username,
            'house': self.house,
            'position': self.position.to_dict(),
        }

    def presence_dict(self):
        data = self.public_dict()
        data.update({
            'zoneId': self.zone_id,
            'health': self.health,
            'maxHealth': self.max_health,
        })
        return data

    def copy(self) -> 'Session':
        return replace(self, position=replace(self.position))


class SessionRegistry:
    """In-memory index of live sessions, keyed by connection and by player.

    Both indices and the per-connection state table are only ever touched
    while holding ``_lock``, and every read hands back a copy.
    """

    def __init__(self, default_zone_id: str = DEFAULT_ZONE_ID, default_max_health: int = DEFAULT_MAX_HEALTH):
        self.default_zone_id = default_zone_id
        self.default_max_health = default_max_health
        self._lock = threading.RLock()
        self._by_connection: Dict[str, Session] = {}
        self._by_player: Dict[str, str] = {}
        self._states: Dict[str, ConnectionState] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_connection)

    def connect(self, connection_id: str) -> None:
        with self._lock:
            self._states.setdefault(connection_id, ConnectionState.UNJOINED)

    def state_of(self, connection_id: str) -> ConnectionState:
        with self._lock:
            return self._states.get(connection_id, ConnectionState.UNJOINED)

    def register(self, connection_id: str, player_id: str, username: Optional[str] = None,
                 house: Optional[str] = None, position: Optional[Position] = None,
                 require_connected: bool = False) -> Tuple[Optional[Session], Optional[str]]:
        """Create or replace the session on ``connection_id``.

        Returns the new session and the connection id that previously held
        ``player_id``, if that was a different connection. The superseded
        connection loses its session and goes back to UNJOINED.

        With ``require_connected`` the call is refused, returning
        ``(None, None)``, unless ``connect`` was seen for the connection and
        ``deregister`` has not run since.
        """
        session = Session(
            player_id=player_id,
            connection_id=connection_id,
            username=username,
            house=house,
            position=replace(position) if position else Position(),
            health=self.default_max_health,
            max_health=self.default_max_health,
            zone_id=self.default_zone_id,
        )
        with self._lock:
            if require_connected and connection_id not in self._states:
                return None, None
            previous = self._by_connection.get(connection_id)
            if previous and previous.player_id != player_id and self._by_player.get(previous.player_id) == connection_id:
                del self._by_player[previous.player_id]

            superseded = self._by_player.get(player_id)
            if superseded == connection_id:
                superseded = None
            if superseded is not None:
                self._by_connection.pop(superseded, None)
                self._states[superseded] = ConnectionState.UNJOINED

            self._by_connection[connection_id] = session
            self._by_player[player_id] = connection_id
            self._states[connection_id] = ConnectionState.JOINED
            return session.copy(), superseded

    def update_position(self, connection_id: str, position: Position, zone_id: Optional[str] = None) -> Optional[Session]:
        with self._lock:
            session = self._by_connection.get(connection_id)
            if session is None:
                return None
            session.position = replace(position)
            if zone_id:
                session.zone_id = zone_id
            return session.copy()

    def update_presence(self, player_id: str, position: Optional[Position] = None, zone_id: Optional[str] = None,
                        health: Optional[int] = None, max_health: Optional[int] = None) -> Optional[Session]:
        with self._lock:
            session = self._session_for_player(player_id)
            if session is None:
                return None
            if position is not None:
                session.position = replace(position)
            if zone_id:
                session.zone_id = zone_id
            if max_health is not None:
                session.max_health = max_health
            if health is not None:
                session.health = health
            return session.copy()

    def apply_damage(self, player_id: str, amount: float) -> Optional[Session]:
        with self._lock:
            session = self._session_for_player(player_id)
            if session is None:
                return None
            session.health = max(0, session.health - amount)
            return session.copy()

    def resolve(self, player_id: str) -> Optional[str]:
        with self._lock:
            return self._by_player.get(player_id)

    def get(self, connection_id: str) -> Optional[Session]:
        with self._lock:
            session = self._by_connection.get(connection_id)
            return session.copy() if session else None

    def deregister(self, connection_id: str) -> Optional[Session]:
        with self._lock:
            self._states.pop(connection_id, None)
            session = self._by_connection.pop(connection_id, None)
            if session is None:
                return None
            if self._by_player.get(session.player_id) == connection_id:
                del self._by_player[session.player_id]
            return session

    def list_others(self, excluding_connection_id: Optional[str]) -> List[Session]:
        with self._lock:
            return [s.copy() for cid, s in self._by_connection.items() if cid != excluding_connection_id]

    def list_all(self) -> List[Session]:
        return self.list_others(None)

    def _session_for_player(self, player_id: str) -> Optional[Session]:
        connection_id = self._by_player.get(player_id)
        return self._by_connection.get(connection_id) if connection_id else None
