# spellduel/engine/bot_ai.py
import random
from contextlib import nullcontext
from typing import Callable, List, Optional

from .dice import between, chance
from .models import ActionResult, BOT, Heal, Shield, Tool
from .resolver import CombatEngine
from ..content.balance import BOT as BOT_BALANCE


class BotAI:
    """
    Picks tools for the bot side using only engine.can_use_tool, then submits
    them through engine.use_tool like any other caller.

    Timing is injected: `sleep` is whatever the host uses to yield
    (socketio.sleep in the server, a recorder in tests). `lock` guards the
    decide + submit step so it never interleaves with a tick or a player action.
    """

    def __init__(self, engine: CombatEngine, rng: Optional[random.Random] = None, lock=None):
        self.engine = engine
        self.rng = rng or random.Random()
        self.lock = lock if lock is not None else nullcontext()
        self.is_thinking = False
        self.think_seconds = BOT_BALANCE["think_seconds"]
        self.gap_seconds = BOT_BALANCE["realtime_gap_seconds"]

    def usable_tools(self) -> List[Tool]:
        bot = self.engine.get_state().bot
        return [
            tool for key, tool in self.engine.catalog.items()
            if self.engine.can_use_tool(bot, key).valid
        ]

    def decide(self) -> Optional[Tool]:
        bot = self.engine.get_state().bot
        available = self.usable_tools()
        if not available:
            return None

        if self.engine.settings.dodging_enabled and chance(BOT_BALANCE["dodge_chance"], self.rng):
            dodge = next((t for t in available if t.is_dodge), None)
            if dodge:
                return dodge

        if bot.hp < bot.hp_max * BOT_BALANCE["heal_below"]:
            heal = next((t for t in available if t.first_of(Heal)), None)
            if heal:
                return heal

        if bot.shield == 0:
            shield = next((t for t in available if t.first_of(Shield)), None)
            if shield and chance(BOT_BALANCE["shield_chance"], self.rng):
                return shield

        attacks = [t for t in available if t.category == "attack"]
        if attacks:
            # max() keeps the first of equal values, i.e. catalog order
            return max(attacks, key=lambda t: t.first_damage())

        return self.rng.choice(available)

    def think_delay(self) -> float:
        return between(self.think_seconds, self.rng)

    def take_turn(
        self,
        sleep: Callable[[float], None],
        on_complete: Optional[Callable[[ActionResult], None]] = None,
        cancelled: Optional[Callable[[], bool]] = None,
    ) -> Optional[ActionResult]:
        """Think, then act once. Returns None if already thinking or cancelled meanwhile."""
        if self.is_thinking:
            return None
        self.is_thinking = True
        try:
            sleep(self.think_delay())
            if cancelled and cancelled():
                return None
            with self.lock:
                tool = self.decide()
                if tool:
                    result = self.engine.use_tool(tool.key, is_player=False)
                else:
                    result = ActionResult(False, caster=BOT, reason="Bot has no valid moves",
                                          message="Bot has no valid moves")
        finally:
            self.is_thinking = False
        if on_complete:
            on_complete(result)
        return result

    def should_continue(self, cancelled: Optional[Callable[[], bool]] = None) -> bool:
        if cancelled and cancelled():
            return False
        return self.engine.is_real_time and not self.engine.get_state().game_over

    def run_real_time_loop(
        self,
        sleep: Callable[[float], None],
        on_action: Optional[Callable[[ActionResult], None]] = None,
        cancelled: Optional[Callable[[], bool]] = None,
    ) -> None:
        """Act, wait a random gap, repeat until the match ends or the caller cancels."""
        while self.should_continue(cancelled):
            result = self.take_turn(sleep, cancelled=cancelled)
            if result is not None and result.success and on_action:
                on_action(result)
            if not self.should_continue(cancelled):
                break
            sleep(between(self.gap_seconds, self.rng))
