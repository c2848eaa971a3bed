# spellduel/state.py
import threading
from dataclasses import dataclass, field
from typing import Dict, Optional

from .engine.bot_ai import BotAI
from .engine.dice import rng_for
from .engine.models import MatchSettings
from .engine.resolver import CombatEngine

@dataclass
class DuelRoom:
    room_id: str
    sid: str                                # the human player's socket id
    settings: MatchSettings
    seed: Optional[int] = None
    lock: threading.Lock = field(default_factory=threading.Lock)
    closed: bool = False                    # set on disconnect/reset; loops stop
    engine: CombatEngine = field(init=False)
    bot: BotAI = field(init=False)

    def __post_init__(self) -> None:
        self.new_match()

    def new_match(self) -> None:
        self.engine = CombatEngine(self.settings)
        self.bot = BotAI(self.engine, rng=rng_for(self.seed), lock=self.lock)

duel_rooms: Dict[str, DuelRoom] = {}
sid_to_room: Dict[str, str] = {}

def create_room(sid: str, settings: MatchSettings, seed: Optional[int] = None) -> DuelRoom:
    cleanup_room(sid_to_room.get(sid, ""))
    room_id = f"duel-{sid}-bot"
    room = DuelRoom(room_id=room_id, sid=sid, settings=settings, seed=seed)
    duel_rooms[room_id] = room
    sid_to_room[sid] = room_id
    return room

def get_room(room_id: str) -> Optional[DuelRoom]:
    return duel_rooms.get(room_id)

def get_room_by_sid(sid: str) -> Optional[DuelRoom]:
    room_id = sid_to_room.get(sid)
    if not room_id:
        return None
    return duel_rooms.get(room_id)

def cleanup_room(room_id: str) -> None:
    room = duel_rooms.pop(room_id, None)
    if not room:
        return
    room.closed = True
    sid_to_room.pop(room.sid, None)
