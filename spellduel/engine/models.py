# spellduel/engine/models.py
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union

PLAYER = "player"
BOT = "bot"
SIDES = (PLAYER, BOT)

TURN_BASED = "turnbased"
REAL_TIME = "realtime"
COMBAT_MODES = (TURN_BASED, REAL_TIME)

CATEGORIES = ("attack", "defense", "utility")


@dataclass
class Entity:
    hp: int
    hp_max: int
    mana: float                     # fractional only if a caller regenerates by fractions
    mana_max: int
    shield: int = 0
    cooldowns: Dict[str, float] = field(default_factory=dict)   # turns or seconds
    is_dodging: bool = False
    last_mana_regen: float = 0.0    # clock seconds, real-time only
    last_cooldown_update: float = 0.0


# Effects: one frozen dataclass per kind, dispatched with isinstance.

@dataclass(frozen=True)
class Damage:
    amount: int
    kind: ClassVar[str] = "damage"


@dataclass(frozen=True)
class Heal:
    amount: int
    kind: ClassVar[str] = "heal"


@dataclass(frozen=True)
class Shield:
    amount: int
    duration: Optional[float] = None    # informational
    kind: ClassVar[str] = "shield"


@dataclass(frozen=True)
class Dodge:
    duration: float = 1
    kind: ClassVar[str] = "dodge"


@dataclass(frozen=True)
class Slow:
    duration: float = 1
    value: Optional[float] = None       # informational
    kind: ClassVar[str] = "slow"


Effect = Union[Damage, Heal, Shield, Dodge, Slow]


@dataclass(frozen=True)
class Tool:
    key: str
    name: str
    aliases: Tuple[str, ...]
    category: str                       # "attack" | "defense" | "utility"
    mana_cost: int
    cooldown: float                     # turns in turn-based, seconds in real-time
    effects: Tuple[Effect, ...]
    description: str = ""

    @property
    def is_dodge(self) -> bool:
        return any(isinstance(e, Dodge) for e in self.effects)

    def first_of(self, effect_type) -> Optional[Effect]:
        for e in self.effects:
            if isinstance(e, effect_type):
                return e
        return None

    def first_damage(self) -> int:
        damage = self.first_of(Damage)
        return damage.amount if damage else 0

    def to_dict(self) -> Dict[str, Any]:
        effects = []
        for e in self.effects:
            entry = {"type": getattr(e, "kind", "unknown")}
            entry.update({k: v for k, v in vars(e).items() if v is not None})
            effects.append(entry)
        return {
            "key": self.key,
            "name": self.name,
            "aliases": list(self.aliases),
            "type": self.category,
            "mana_cost": self.mana_cost,
            "cooldown": self.cooldown,
            "effects": effects,
            "description": self.description,
        }


@dataclass
class EffectResult:
    kind: str
    value: float = 0                    # requested amount (damage) / actual amount (heal, shield)
    absorbed: Optional[int] = None
    final: Optional[int] = None         # hp actually lost
    dodged: bool = False
    duration: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.kind, "value": self.value}
        if self.absorbed is not None:
            data["absorbed"] = self.absorbed
        if self.final is not None:
            data["final"] = self.final
        if self.dodged:
            data["dodged"] = True
        if self.duration is not None:
            data["duration"] = self.duration
        return data


@dataclass
class Validation:
    valid: bool
    reason: Optional[str] = None


@dataclass
class ActionResult:
    success: bool
    tool: Optional[str] = None          # display name
    tool_key: Optional[str] = None
    caster: Optional[str] = None
    results: List[EffectResult] = field(default_factory=list)
    reason: Optional[str] = None
    message: str = ""

    @property
    def dodged(self) -> bool:
        return any(r.dodged for r in self.results)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "tool": self.tool,
            "tool_key": self.tool_key,
            "caster": self.caster,
            "results": [r.to_dict() for r in self.results],
            "reason": self.reason,
            "message": self.message,
            "dodged": self.dodged,
        }


@dataclass
class LastAction:
    caster: str
    tool: str
    tool_key: str
    results: List[EffectResult]
    timestamp: float


@dataclass
class MatchSettings:
    combat_mode: str = TURN_BASED
    dodging_enabled: bool = False

    @property
    def is_real_time(self) -> bool:
        return self.combat_mode == REAL_TIME

    @classmethod
    def from_payload(cls, payload: Any) -> "MatchSettings":
        if not isinstance(payload, dict):
            payload = {}
        mode = str(payload.get("combat_mode") or TURN_BASED).strip().lower()
        if mode not in COMBAT_MODES:
            mode = TURN_BASED
        dodging = payload.get("dodging_enabled", False)
        if isinstance(dodging, str):
            dodging = dodging.strip().lower() in ("1", "true", "yes", "on")
        return cls(combat_mode=mode, dodging_enabled=bool(dodging))


@dataclass
class MatchState:
    player: Entity
    bot: Entity
    turn: str = PLAYER                  # turn-based only
    turn_count: int = 0
    started: bool = False
    game_over: bool = False
    winner: Optional[str] = None        # None with game_over means double KO
    last_action: Optional[LastAction] = None
    log: List[str] = field(default_factory=list)
    combat_totals: Dict[str, Dict[str, int]] = field(default_factory=dict)
