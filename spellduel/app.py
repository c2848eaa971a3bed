# spellduel/app.py
import argparse
import logging
from typing import Any, Mapping, Optional, Tuple

from flask import Flask
from flask_socketio import SocketIO

from . import init_duel
from .content.balance import BOT, TIMING

DEFAULT_CONFIG = {
    "SECRET_KEY": "spellduel-dev",
    "SOCKETIO_ASYNC_MODE": "threading",
    "DUEL_THINK_SECONDS": BOT["think_seconds"],
    "DUEL_REALTIME_GAP_SECONDS": BOT["realtime_gap_seconds"],
    "DUEL_TICK_SECONDS": TIMING["tick_seconds"],
    "DUEL_REPLY_DELAY_SECONDS": TIMING["reply_delay_seconds"],
}


def create_app(config: Optional[Mapping[str, Any]] = None) -> Tuple[Flask, SocketIO]:
    app = Flask(__name__)
    app.config.update(DEFAULT_CONFIG)
    if config:
        app.config.update(config)
    socketio = SocketIO(app, async_mode=app.config["SOCKETIO_ASYNC_MODE"])
    init_duel(app, socketio)
    return app, socketio


def main(argv=None) -> None:
    parser = argparse.ArgumentParser(description="Run the spell duel server.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5000)
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app, socketio = create_app()
    socketio.run(app, host=args.host, port=args.port, debug=args.debug, allow_unsafe_werkzeug=True)


if __name__ == "__main__":
    main()
