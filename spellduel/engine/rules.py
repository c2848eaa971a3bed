# spellduel/engine/rules.py
from typing import Tuple

def clamp(x, lo, hi):
    return max(lo, min(hi, x))

def normalize(text) -> str:
    return str(text or "").strip().casefold()

def split_damage(shield: int, amount: int) -> Tuple[int, int]:
    """Returns (absorbed, remaining): shield soaks first, never below zero."""
    absorbed = min(max(shield, 0), max(amount, 0))
    return absorbed, max(amount, 0) - absorbed
