# spellduel/engine/resolver.py
import copy
import time
from dataclasses import asdict
from typing import Any, Callable, Dict, Mapping, Optional

from .models import (
    BOT,
    PLAYER,
    SIDES,
    ActionResult,
    Entity,
    LastAction,
    MatchSettings,
    MatchState,
    Tool,
    Validation,
)
from .catalog import CATALOG, find_tool
from .effects import apply_effect, describe, end_of_turn, regen_mana, tick_cooldowns
from ..content.balance import DEFAULTS


def new_entity(now: float) -> Entity:
    return Entity(
        hp=DEFAULTS["hp"],
        hp_max=DEFAULTS["hp"],
        mana=DEFAULTS["mana"],
        mana_max=DEFAULTS["mana"],
        shield=DEFAULTS["shield"],
        last_mana_regen=now,
        last_cooldown_update=now,
    )


def other_side(side: str) -> str:
    return BOT if side == PLAYER else PLAYER


def format_cooldown(remaining: float, real_time: bool) -> str:
    if real_time:
        return f"Cooldown: {remaining:.1f}s"
    return f"Cooldown: {int(remaining)} turns"


class CombatEngine:
    """
    Owns one match. use_tool() is the only mutation path for actions;
    end_turn() and update_real_time() are the two upkeep paths.
    Nothing here sleeps or does I/O; callers serialize access.
    """

    def __init__(
        self,
        settings: Optional[MatchSettings] = None,
        catalog: Optional[Mapping[str, Tool]] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.settings = settings or MatchSettings()
        self.catalog = CATALOG if catalog is None else catalog
        self.clock = clock
        self.state = self.initial_state()

    @property
    def is_real_time(self) -> bool:
        return self.settings.is_real_time

    @property
    def phase(self) -> str:
        if self.state.game_over:
            return "ended"
        if not self.state.started:
            return "idle"
        return self.settings.combat_mode

    def initial_state(self) -> MatchState:
        now = self.clock()
        return MatchState(
            player=new_entity(now),
            bot=new_entity(now),
            combat_totals={side: {"damage": 0, "healing": 0} for side in SIDES},
        )

    def get_state(self) -> MatchState:
        return self.state

    def entity(self, side: str) -> Entity:
        return self.state.player if side == PLAYER else self.state.bot

    def snapshot(self) -> Dict[str, Any]:
        """Read-only copy of the match for observers."""
        state = self.state
        last = None
        if state.last_action:
            last = {
                "caster": state.last_action.caster,
                "tool": state.last_action.tool,
                "tool_key": state.last_action.tool_key,
                "results": [r.to_dict() for r in state.last_action.results],
                "timestamp": state.last_action.timestamp,
            }
        return {
            "phase": self.phase,
            "combat_mode": self.settings.combat_mode,
            "dodging_enabled": self.settings.dodging_enabled,
            "player": asdict(state.player),
            "bot": asdict(state.bot),
            "turn": state.turn,
            "turn_count": state.turn_count,
            "game_over": state.game_over,
            "winner": state.winner,
            "last_action": last,
            "log": list(state.log[-DEFAULTS["log_tail"]:]),
            "log_length": len(state.log),
            "combat_totals": copy.deepcopy(state.combat_totals),
        }

    def start(self) -> None:
        if self.state.started or self.state.game_over:
            return
        now = self.clock()
        for side in SIDES:
            ent = self.entity(side)
            ent.last_mana_regen = now
            ent.last_cooldown_update = now
        self.state.started = True
        self.state.log.append(f"Duel begins ({self.settings.combat_mode}).")

    def find_tool(self, text) -> Optional[Tool]:
        return find_tool(self.catalog, text)

    def can_use_tool(self, entity: Entity, tool_key: str) -> Validation:
        tool = self.catalog.get(tool_key)
        if tool is None:
            return Validation(False, "Tool not found")
        if tool.is_dodge and not self.settings.dodging_enabled:
            return Validation(False, "Dodging is disabled")
        if entity.mana < tool.mana_cost:
            return Validation(False, "Not enough mana")
        remaining = entity.cooldowns.get(tool_key, 0)
        if remaining > 0:
            return Validation(False, format_cooldown(remaining, self.is_real_time))
        return Validation(True)

    def use_tool(self, text, is_player: bool = True) -> ActionResult:
        state = self.state
        side = PLAYER if is_player else BOT
        if state.game_over:
            return ActionResult(False, caster=side, reason="Game is over", message="Game is over")

        if not self.is_real_time and state.turn != side:
            return ActionResult(False, caster=side, reason="Not your turn", message="Not your turn")

        tool = self.find_tool(text)
        if tool is None:
            return ActionResult(False, caster=side, reason="Unknown tool", message="Unknown tool")

        caster = self.entity(side)
        target = self.entity(other_side(side))

        check = self.can_use_tool(caster, tool.key)
        if not check.valid:
            return ActionResult(
                False, tool=tool.name, tool_key=tool.key, caster=side,
                reason=check.reason, message=check.reason or "",
            )

        if not state.started:
            self.start()
        # settle elapsed time first so the new cooldown starts from now
        self.update_real_time()

        caster.mana -= tool.mana_cost
        caster.cooldowns[tool.key] = tool.cooldown

        results = [apply_effect(effect, caster, target) for effect in tool.effects]

        totals = state.combat_totals.setdefault(side, {"damage": 0, "healing": 0})
        for r in results:
            if r.kind == "damage":
                totals["damage"] += int(r.final or 0)
            elif r.kind == "heal":
                totals["healing"] += int(r.value or 0)

        state.last_action = LastAction(
            caster=side,
            tool=tool.name,
            tool_key=tool.key,
            results=results,
            timestamp=self.clock(),
        )
        summary = describe(results)
        state.log.append(f"{side} casts {tool.name}" + (f": {summary}." if summary else "."))

        self.check_game_over()

        if not self.is_real_time and not state.game_over:
            self.end_turn()

        return ActionResult(
            True,
            tool=tool.name,
            tool_key=tool.key,
            caster=side,
            results=results,
            message=f"{tool.name} used!",
        )

    def end_turn(self) -> None:
        state = self.state
        if state.game_over:
            return
        state.turn = other_side(state.turn)
        state.turn_count += 1
        # upkeep belongs to the side whose turn now begins, so a dodge
        # survives exactly one opposing turn
        end_of_turn(self.entity(state.turn), DEFAULTS["mana_regen_per_turn"])

    def update_real_time(self) -> None:
        """One real-time tick; safe to call at any rate."""
        state = self.state
        if state.game_over or not self.is_real_time:
            return
        now = self.clock()
        for side in SIDES:
            ent = self.entity(side)
            if now - ent.last_mana_regen >= DEFAULTS["mana_regen_interval"]:
                regen_mana(ent, DEFAULTS["mana_regen_realtime"])
                ent.last_mana_regen = now
                ent.is_dodging = False
            elapsed = max(0.0, now - ent.last_cooldown_update)
            tick_cooldowns(ent, elapsed)
            ent.last_cooldown_update = now

    def check_game_over(self) -> None:
        state = self.state
        player_down = state.player.hp <= 0
        bot_down = state.bot.hp <= 0
        if not (player_down or bot_down):
            return
        state.game_over = True
        totals = state.combat_totals
        state.log.append(
            "Post-Combat Summary|PD:{pd}|PH:{ph}|BD:{bd}|BH:{bh}".format(
                pd=totals[PLAYER]["damage"], ph=totals[PLAYER]["healing"],
                bd=totals[BOT]["damage"], bh=totals[BOT]["healing"],
            )
        )
        if player_down and bot_down:
            state.winner = None
            state.log.append("Double KO. No winner.")
        else:
            state.winner = BOT if player_down else PLAYER
            state.log.append(f"{state.winner} wins the duel.")

    def reset(self) -> None:
        self.state = self.initial_state()
