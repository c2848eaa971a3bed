# spellduel/sockets.py
import logging
import time

from flask import current_app, request
from flask_socketio import emit

from . import state
from .engine.catalog import CATALOG, suggest_tools
from .engine.models import ActionResult, MatchSettings
from .content.balance import BOT, TIMING

logger = logging.getLogger(__name__)


def snapshot_for(room: state.DuelRoom) -> dict:
    with room.lock:
        snap = room.engine.snapshot()
    return {"room_id": room.room_id, **snap}


def _window(value, default):
    try:
        lo, hi = value
        return float(lo), float(hi)
    except (TypeError, ValueError):
        return default


def _timing():
    """Read timing knobs while a request context is available."""
    config = current_app.config
    return {
        "think": _window(config.get("DUEL_THINK_SECONDS"), BOT["think_seconds"]),
        "gap": _window(config.get("DUEL_REALTIME_GAP_SECONDS"), BOT["realtime_gap_seconds"]),
        "tick": float(config.get("DUEL_TICK_SECONDS", TIMING["tick_seconds"])),
        "reply": float(config.get("DUEL_REPLY_DELAY_SECONDS", TIMING["reply_delay_seconds"])),
    }


def register_duel_socket_handlers(socketio):

    def push_result(room, result: ActionResult) -> None:
        socketio.emit("duel_result", result.to_dict(), to=room.sid)
        socketio.emit("duel_snapshot", snapshot_for(room), to=room.sid)
        if room.engine.get_state().game_over:
            announce_end(room)

    def announce_end(room) -> None:
        winner = room.engine.get_state().winner
        logger.info("Duel %s ended, winner=%s", room.room_id, winner)
        socketio.emit("duel_system", "Duel ended.", to=room.sid)

    def bot_reply(room, delay: float) -> None:
        socketio.sleep(delay)
        if room.closed:
            return
        room.bot.take_turn(
            socketio.sleep,
            on_complete=lambda result: push_result(room, result),
            cancelled=lambda: room.closed,
        )

    def realtime_ticker(room, tick: float) -> None:
        while not room.closed:
            with room.lock:
                room.engine.update_real_time()
                over = room.engine.get_state().game_over
            socketio.emit("duel_snapshot", snapshot_for(room), to=room.sid)
            if over:
                return
            socketio.sleep(tick)

    def realtime_bot(room) -> None:
        room.bot.run_real_time_loop(
            socketio.sleep,
            on_action=lambda result: push_result(room, result),
            cancelled=lambda: room.closed,
        )

    def begin(sid: str, settings: MatchSettings, seed) -> None:
        timing = _timing()
        room = state.create_room(sid, settings, seed=seed)
        room.bot.think_seconds = timing["think"]
        room.bot.gap_seconds = timing["gap"]
        with room.lock:
            room.engine.start()
        logger.info("Duel %s created (%s, dodging=%s)", room.room_id, settings.combat_mode, settings.dodging_enabled)

        emit("duel_system", "Duel begins. FIGHT!")
        emit("duel_snapshot", snapshot_for(room))
        if settings.is_real_time:
            socketio.start_background_task(realtime_ticker, room, timing["tick"])
            socketio.start_background_task(realtime_bot, room)

    @socketio.on("duel_start")
    def duel_start(payload=None):
        sid = request.sid
        settings = MatchSettings.from_payload(payload)
        seed = payload.get("seed") if isinstance(payload, dict) else None
        if seed is None:
            seed = int(time.time() * 1000) & 0xFFFFFFFF
        begin(sid, settings, seed)

    @socketio.on("duel_action")
    def duel_action(payload):
        sid = request.sid
        room = state.get_room_by_sid(sid)
        if not room:
            emit("duel_system", "Not in a duel.")
            return

        text = payload.get("tool", "") if isinstance(payload, dict) else str(payload or "")
        with room.lock:
            result = room.engine.use_tool(text, is_player=True)
            engine_state = room.engine.get_state()
            bot_to_move = (
                result.success
                and not room.engine.is_real_time
                and not engine_state.game_over
                and engine_state.turn == "bot"
            )

        emit("duel_result", result.to_dict())
        emit("duel_snapshot", snapshot_for(room))
        if result.success and engine_state.game_over:
            announce_end(room)
        if bot_to_move:
            socketio.start_background_task(bot_reply, room, _timing()["reply"])

    @socketio.on("duel_suggest")
    def duel_suggest(payload):
        sid = request.sid
        room = state.get_room_by_sid(sid)
        text = payload.get("text", "") if isinstance(payload, dict) else str(payload or "")
        dodging = room.settings.dodging_enabled if room else False
        emit("duel_suggestions", [
            {"key": tool.key, "name": tool.name, "aliases": list(tool.aliases)}
            for tool in suggest_tools(CATALOG, text, dodging_enabled=dodging)
        ])

    @socketio.on("duel_reset")
    def duel_reset():
        sid = request.sid
        room = state.get_room_by_sid(sid)
        if not room:
            emit("duel_system", "Not in a duel.")
            return
        state.cleanup_room(room.room_id)
        begin(sid, room.settings, room.seed)

    @socketio.on("disconnect")
    def duel_disconnect(*args):
        sid = request.sid
        room = state.get_room_by_sid(sid)
        if not room:
            return
        logger.info("Duel %s abandoned", room.room_id)
        state.cleanup_room(room.room_id)
