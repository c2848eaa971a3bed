# spellduel/content/balance.py
DEFAULTS = {
    "hp": 100,
    "mana": 100,
    "shield": 0,
    "mana_regen_per_turn": 10,
    "mana_regen_realtime": 10,
    "mana_regen_interval": 1.0,   # seconds between real-time regen pulses
    "log_tail": 30,
}

BOT = {
    "dodge_chance": 0.3,
    "heal_below": 0.4,            # fraction of hp_max
    "shield_chance": 0.4,
    "think_seconds": (0.8, 1.5),
    "realtime_gap_seconds": (1.5, 3.0),
}

TIMING = {
    "tick_seconds": 0.1,
    "reply_delay_seconds": 0.5,
}
