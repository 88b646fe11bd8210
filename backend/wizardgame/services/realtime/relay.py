import logging
from numbers import Real
from typing import Any, Callable, Dict, Optional

from .fanout import FanOut
from .registry import ConnectionState, Position, Session, SessionRegistry
from .spells import SpellBuffer, now_ms


DEFAULT_SPELL_COLOR = {'r': 1, 'g': 1, 'b': 1, 'a': 1}
DEFAULT_SPELL_DAMAGE = 10
DEFAULT_SPELL_SPEED = 5


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    return value


def parse_position(value: Any) -> Optional[Position]:
    """Return a Position for ``{x, y}`` payloads, None for anything else."""
    if not isinstance(value, dict):
        return None
    x, y = _number(value.get('x')), _number(value.get('y'))
    if x is None or y is None:
        return None
    return Position(x=x, y=y)


def _player_id(value: Any) -> Optional[Any]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str) and value:
        return value
    if isinstance(value, int):
        return value
    return None


def _text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


class EventRelay:
    """Applies inbound real-time events to the registry and fans them out.

    Only ``join`` and ``disconnect`` act on an UNJOINED connection; every
    other event from such a connection is dropped. Malformed payloads and
    missing unicast targets are dropped as well. Nothing here raises back
    to the transport.
    """

    def __init__(self, registry: SessionRegistry, spells: SpellBuffer, fanout: FanOut,
                 logger: Optional[logging.Logger] = None, clock: Callable[[], int] = now_ms):
        self.registry = registry
        self.spells = spells
        self.fanout = fanout
        self.logger = logger or logging.getLogger(__name__)
        self._clock = clock

    def connect(self, connection_id: str) -> None:
        self.registry.connect(connection_id)
        self.logger.debug(f"[connect] sid={connection_id}")

    def join(self, connection_id: str, data: Any) -> None:
        data = data if isinstance(data, dict) else {}
        player_id = _player_id(data.get('playerId'))
        if player_id is None:
            self.logger.debug(f"[join-drop] sid={connection_id} missing playerId")
            return
        position = parse_position(data.get('position')) or Position()

        previous = self.registry.get(connection_id)
        session, superseded = self.registry.register(
            connection_id,
            player_id,
            username=_text(data.get('username')),
            house=_text(data.get('house')),
            position=position,
            require_connected=True,
        )
        if session is None:
            # Connection closed before its join was handled
            self.logger.debug(f"[join-drop] sid={connection_id} player={player_id} not connected")
            return

        if previous and previous.player_id != player_id:
            self.fanout.to_others(connection_id, 'player-left', previous.player_id)
        if superseded:
            self.fanout.to_one(superseded, 'session-replaced', {'playerId': player_id})
            self.logger.info(f"[join-supersede] player={player_id} old_sid={superseded} new_sid={connection_id}")

        roster = [s.public_dict() for s in self.registry.list_others(connection_id)]
        self.fanout.reply(connection_id, 'roster', {'players': roster})
        self.fanout.to_others(connection_id, 'player-joined', session.public_dict(),
                              exclude=(superseded,) if superseded else ())
        self.logger.info(
            f"[join] player={player_id} username={session.username} house={session.house} "
            f"sid={connection_id} online={len(self.registry)}"
        )

    def move(self, connection_id: str, data: Any) -> None:
        if self._joined(connection_id) is None:
            return
        data = data if isinstance(data, dict) else {}
        position = parse_position(data.get('position'))
        if position is None:
            return
        session = self.registry.update_position(connection_id, position, zone_id=_text(data.get('zoneId')))
        if session is None:
            return
        payload = session.public_dict()
        payload.update({'health': session.health, 'maxHealth': session.max_health})
        self.fanout.to_others(connection_id, 'player-moved', payload)

    def spell_cast(self, connection_id: str, data: Any) -> None:
        session = self._joined(connection_id)
        if session is None:
            return
        data = data if isinstance(data, dict) else {}
        spell_name = _text(data.get('spellName'))
        position = parse_position(data.get('position'))
        if not spell_name or position is None:
            return
        damage = _number(data.get('damage'))
        speed = _number(data.get('speed'))
        color = data.get('color')
        spell = {
            'casterId': session.player_id,
            'casterName': session.username,
            'spellName': spell_name,
            'position': position.to_dict(),
            'direction': data.get('direction'),
            'color': color if isinstance(color, dict) else dict(DEFAULT_SPELL_COLOR),
            'damage': DEFAULT_SPELL_DAMAGE if damage is None else damage,
            'speed': DEFAULT_SPELL_SPEED if speed is None else speed,
            'timestamp': self._clock(),
        }
        self.spells.append(spell)
        self.fanout.to_others(connection_id, 'spell-casted', spell)
        self.logger.debug(f"[spell] player={session.player_id} spell={spell_name}")

    def damage_dealt(self, connection_id: str, data: Any) -> None:
        session = self._joined(connection_id)
        if session is None:
            return
        data = data if isinstance(data, dict) else {}
        target_id = _player_id(data.get('targetId'))
        damage = _number(data.get('damage'))
        if target_id is None or damage is None:
            return
        target_sid = self.registry.resolve(target_id)
        if target_sid is None:
            self.logger.debug(f"[damage-drop] attacker={session.player_id} target={target_id} not connected")
            return
        self.registry.apply_damage(target_id, damage)
        self.fanout.to_one(target_sid, 'damage-received', {
            'attackerId': session.player_id,
            'damage': damage,
            'source': data.get('source'),
        })
        self.logger.info(f"[damage] attacker={session.player_id} target={target_id} amount={damage}")

    def player_death(self, connection_id: str, data: Any) -> None:
        session = self._joined(connection_id)
        if session is None:
            return
        data = data if isinstance(data, dict) else {}
        self.fanout.to_others(connection_id, 'player-died', {
            'playerId': session.player_id,
            'killerId': data.get('killerId'),
        })
        self.logger.info(f"[death] player={session.player_id} killer={data.get('killerId')}")

    def chat_message(self, connection_id: str, data: Any) -> None:
        session = self._joined(connection_id)
        if session is None:
            return
        data = data if isinstance(data, dict) else {}
        message = _text(data.get('message'))
        if not message:
            return
        self.fanout.to_all('chat-message', {
            'username': session.username,
            'house': session.house,
            'message': message,
            'timestamp': self._clock(),
        })

    def disconnect(self, connection_id: str) -> None:
        session = self.registry.deregister(connection_id)
        if session is None:
            self.logger.debug(f"[disconnect] sid={connection_id} no session")
            return
        self.fanout.to_others(connection_id, 'player-left', session.player_id)
        self.logger.info(
            f"[disconnect] player={session.player_id} sid={connection_id} online={len(self.registry)}"
        )

    def sweep_spells(self) -> int:
        return self.spells.sweep()

    def _joined(self, connection_id: str) -> Optional[Session]:
        if self.registry.state_of(connection_id) is not ConnectionState.JOINED:
            return None
        return self.registry.get(connection_id)

    @property
    def online_count(self) -> int:
        return len(self.registry)

    def active_players(self) -> Dict[str, Any]:
        return {'players': [s.presence_dict() for s in self.registry.list_all()]}
