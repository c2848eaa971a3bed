# spellduel/routes.py
from flask import Blueprint, abort, jsonify

from . import state
from .engine.catalog import CATALOG

duel_bp = Blueprint("duel", __name__)


@duel_bp.route("/duel/tools")
def duel_tools():
    return jsonify({key: tool.to_dict() for key, tool in CATALOG.items()})


@duel_bp.route("/duel/rooms/<room_id>")
def duel_room(room_id):
    room = state.get_room(room_id)
    if room is None:
        abort(404)
    with room.lock:
        snap = room.engine.snapshot()
    return jsonify({"room_id": room.room_id, **snap})
