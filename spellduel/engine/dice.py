# spellduel/engine/dice.py
import random
from typing import Optional, Tuple

def rng_for(seed: Optional[int] = None) -> random.Random:
    # deterministic per match seed; unseeded matches use system entropy
    if seed is None:
        return random.Random()
    return random.Random(f"spellduel:{seed}")

def chance(probability: float, r: random.Random) -> bool:
    return r.random() < probability

def between(window: Tuple[float, float], r: random.Random) -> float:
    lo, hi = window
    if hi <= lo:
        return float(lo)
    return r.uniform(lo, hi)
