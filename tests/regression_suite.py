"""Regression scenarios for the spell duel engine.

Each scenario drives a real CombatEngine (and BotAI where relevant) end to
end and asserts on the resulting state. Run them with
`python tests/run_regression.py`, or through pytest via test_regression.py.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from spellduel.engine.bot_ai import BotAI
from spellduel.engine.dice import rng_for
from spellduel.engine.models import BOT, PLAYER, REAL_TIME, MatchSettings
from spellduel.engine.resolver import CombatEngine


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def state_extract(engine: CombatEngine) -> Dict[str, Any]:
    state = engine.get_state()
    out: Dict[str, Any] = {
        "turn": state.turn,
        "turn_count": state.turn_count,
        "game_over": state.game_over,
        "winner": state.winner,
        "log_length": len(state.log),
        "entities": {},
    }
    for side in (PLAYER, BOT):
        ent = engine.entity(side)
        out["entities"][side] = {
            "hp": ent.hp,
            "mana": ent.mana,
            "shield": ent.shield,
            "cooldowns": dict(sorted(ent.cooldowns.items())),
            "is_dodging": ent.is_dodging,
        }
    return out


def _assert_invariants(engine: CombatEngine) -> None:
    for side in (PLAYER, BOT):
        ent = engine.entity(side)
        assert 0 <= ent.hp <= ent.hp_max, f"hp out of range for {side}"
        assert 0 <= ent.mana <= ent.mana_max, f"mana out of range for {side}"
        assert ent.shield >= 0, f"negative shield for {side}"
        for key, remaining in ent.cooldowns.items():
            assert remaining >= 0, f"negative cooldown {key} for {side}"


def make_engine(combat_mode: str = "turnbased", dodging_enabled: bool = False, clock=None) -> CombatEngine:
    settings = MatchSettings(combat_mode=combat_mode, dodging_enabled=dodging_enabled)
    engine = CombatEngine(settings, clock=clock or FakeClock())
    engine.start()
    return engine


def cast(engine: CombatEngine, text: str, is_player: bool = True):
    result = engine.use_tool(text, is_player=is_player)
    _assert_invariants(engine)
    return result


def scenario_fireball_opening() -> bool:
    engine = make_engine()
    result = cast(engine, "fireball")
    state = engine.get_state()

    assert result.success, result.reason
    assert state.bot.hp == 60, "Fireball should deal 40 to an unshielded bot"
    assert state.player.mana == 70, "Fireball costs 30 mana"
    assert state.player.cooldowns["fireball"] == 3, "Fireball cooldown should be 3"
    assert state.turn == BOT and state.turn_count == 1, "Turn should pass to the bot"
    return True


def scenario_second_cast_is_not_your_turn() -> bool:
    engine = make_engine()
    cast(engine, "fireball")
    before = state_extract(engine)

    result = cast(engine, "fireball")

    assert not result.success and result.reason == "Not your turn"
    assert state_extract(engine) == before, "A rejected action must not mutate anything"
    return True


def scenario_cooldown_blocks_in_realtime() -> bool:
    engine = make_engine(REAL_TIME)
    assert cast(engine, "fireball").success
    result = cast(engine, "Fire Ball")
    assert not result.success and result.reason.startswith("Cooldown"), result.reason
    return True


def scenario_shield_soaks_before_hp() -> bool:
    engine = make_engine()
    player = engine.get_state().player

    cast(engine, "shield")
    cast(engine, "iceball", is_player=False)
    assert player.shield == 5 and player.hp == 100, "25 damage into a 30 shield leaves 5"

    cast(engine, "strike")
    cast(engine, "strike", is_player=False)
    assert player.shield == 0 and player.hp == 90, "15 damage into a 5 shield costs 10 hp"
    return True


def scenario_dodge_nullifies_next_hit() -> bool:
    engine = make_engine(dodging_enabled=True)
    player = engine.get_state().player

    cast(engine, "jump")
    assert player.is_dodging
    result = cast(engine, "lightning", is_player=False)

    damage = result.results[0]
    assert damage.dodged and damage.final == 0
    assert player.hp == 100
    assert not player.is_dodging, "Dodge is consumed by the hit"
    return True


def scenario_unused_dodge_expires() -> bool:
    engine = make_engine(dodging_enabled=True)
    player = engine.get_state().player

    cast(engine, "dodge")
    cast(engine, "shield", is_player=False)
    assert not player.is_dodging, "Dodge should expire when the player's next turn starts"

    cast(engine, "strike")
    result = cast(engine, "strike", is_player=False)
    assert not result.results[0].dodged
    return True


def scenario_unaffordable_cast_is_inert() -> bool:
    engine = make_engine()
    engine.get_state().player.mana = 5
    before = state_extract(engine)

    result = cast(engine, "fireball")

    assert not result.success and "mana" in result.reason.lower()
    assert state_extract(engine) == before
    return True


def scenario_lethal_hit_ends_match() -> bool:
    engine = make_engine()
    engine.get_state().bot.hp = 30

    cast(engine, "fireball")
    state = engine.get_state()
    assert state.game_over and state.winner == PLAYER
    assert state.turn == PLAYER, "No turn change after the match ends"

    frozen = state_extract(engine)
    for text, is_player in (("strike", False), ("strike", True), ("heal", False)):
        result = cast(engine, text, is_player=is_player)
        assert not result.success and result.reason == "Game is over"
    engine.end_turn()
    engine.update_real_time()
    assert state_extract(engine) == frozen, "Terminal state must stay frozen"
    assert engine.phase == "ended"
    return True


def scenario_double_ko_has_no_winner() -> bool:
    engine = make_engine()
    state = engine.get_state()
    state.player.hp = 0
    state.bot.hp = 0
    engine.check_game_over()
    assert state.game_over and state.winner is None
    assert state.log[-1] == "Double KO. No winner."
    return True


def scenario_realtime_upkeep() -> bool:
    clock = FakeClock()
    engine = make_engine(REAL_TIME, clock=clock)
    player = engine.get_state().player

    cast(engine, "fireball")
    clock.advance(0.5)
    engine.update_real_time()
    assert abs(player.cooldowns["fireball"] - 2.5) < 1e-9
    assert player.mana == 70, "No regen before a full second"

    clock.advance(0.6)
    engine.update_real_time()
    assert player.mana == 80
    assert abs(player.cooldowns["fireball"] - 1.9) < 1e-9

    clock.advance(5)
    engine.update_real_time()
    assert player.cooldowns["fireball"] == 0
    assert cast(engine, "fireball").success
    return True


def scenario_bot_wins_realtime_against_idle_player() -> bool:
    clock = FakeClock()
    engine = make_engine(REAL_TIME, dodging_enabled=True, clock=clock)
    bot = BotAI(engine, rng=rng_for(7))
    waits: List[float] = []

    def sleep(seconds: float) -> None:
        waits.append(seconds)
        clock.advance(seconds)
        engine.update_real_time()
        _assert_invariants(engine)

    bot.run_real_time_loop(sleep, cancelled=lambda: len(waits) > 2000)

    state = engine.get_state()
    assert state.game_over and state.winner == BOT, "Bot should eventually defeat a player who never acts"
    assert all(w >= 0 for w in waits)
    return True


def scenario_turn_based_match_alternates() -> bool:
    engine = make_engine(dodging_enabled=True)
    bot = BotAI(engine, rng=rng_for(11))
    plan = ["strike", "fireball", "strike", "lightning", "shield", "heal", "strike"]
    step = 0
    while not engine.get_state().game_over and step < 200:
        turn_count = engine.get_state().turn_count
        result = cast(engine, plan[step % len(plan)])
        if not result.success:
            # fall back to the cheapest attack, then skip the plan entry
            result = cast(engine, "strike")
        if not result.success:
            engine.end_turn()
        if not engine.get_state().game_over:
            assert engine.get_state().turn == BOT
            assert engine.get_state().turn_count == turn_count + 1
            bot_result = bot.take_turn(lambda _: None)
            if bot_result is None or not bot_result.success:
                engine.end_turn()
            _assert_invariants(engine)
        step += 1
    assert engine.get_state().game_over, "Match should finish"
    return True


SCENARIOS = [
    scenario_fireball_opening,
    scenario_second_cast_is_not_your_turn,
    scenario_cooldown_blocks_in_realtime,
    scenario_shield_soaks_before_hp,
    scenario_dodge_nullifies_next_hit,
    scenario_unused_dodge_expires,
    scenario_unaffordable_cast_is_inert,
    scenario_lethal_hit_ends_match,
    scenario_double_ko_has_no_winner,
    scenario_realtime_upkeep,
    scenario_bot_wins_realtime_against_idle_player,
    scenario_turn_based_match_alternates,
]


def run_all() -> List[Tuple[str, bool, str]]:
    results: List[Tuple[str, bool, str]] = []
    for scenario in SCENARIOS:
        try:
            scenario()
            results.append((scenario.__name__, True, ""))
        except AssertionError as exc:
            results.append((scenario.__name__, False, str(exc)))
    return results
