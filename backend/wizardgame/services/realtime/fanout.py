from typing import Any, Iterable, Optional


class FanOut:
    """Delivery targets for relayed events.

    Thin wrapper over ``SocketIO.emit``; every call is fire-and-forget on a
    single namespace.
    """

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace

    def reply(self, connection_id: str, event: str, data: Any) -> None:
        self.to_one(connection_id, event, data)

    def to_one(self, connection_id: str, event: str, data: Any) -> None:
        self.socketio.emit(event, data, to=connection_id, namespace=self.namespace)

    def to_others(self, sender_id: Optional[str], event: str, data: Any, exclude: Iterable[str] = ()) -> None:
        skip = [sender_id, *exclude] if exclude else sender_id
        self.socketio.emit(event, data, namespace=self.namespace, skip_sid=skip)

    def to_all(self, event: str, data: Any) -> None:
        self.socketio.emit(event, data, namespace=self.namespace)
