import threading

from wizardgame import socketio


_sweeper_lock = threading.Lock()
_sweeper_stop = None


def start_spell_sweeper(app) -> bool:
    """Start the periodic recent-spell sweep once per process.

    - No-ops in TESTING mode unless ENABLE_SCHEDULER_IN_TESTS is set
    - Runs as a Socket.IO background task so it cooperates with eventlet/gevent
    - Returns True only for the call that actually started the task
    """
    global _sweeper_stop
    if app.config.get('TESTING') and not app.config.get('ENABLE_SCHEDULER_IN_TESTS'):
        return False

    with _sweeper_lock:
        if _sweeper_stop is not None:
            return False
        stop = _sweeper_stop = threading.Event()

    interval = float(app.config.get('SPELL_SWEEP_INTERVAL_SEC', 5))
    relay = app.extensions['wizardgame.relay']

    def _worker():
        app.logger.info(f"[spell-sweep] started interval={interval}s max_age={relay.spells.max_age_ms}ms")
        while not stop.is_set():
            socketio.sleep(interval)
            if stop.is_set():
                break
            try:
                removed = relay.sweep_spells()
            except Exception:
                app.logger.exception("[spell-sweep] sweep failed, retrying next interval")
                continue
            if removed:
                app.logger.debug(f"[spell-sweep] removed={removed} remaining={len(relay.spells)}")
        app.logger.info("[spell-sweep] stopped")

    socketio.start_background_task(_worker)
    return True


def stop_spell_sweeper() -> None:
    """Ask a running sweeper to exit after its current sleep; allows a restart."""
    global _sweeper_stop
    with _sweeper_lock:
        if _sweeper_stop is not None:
            _sweeper_stop.set()
        _sweeper_stop = None
