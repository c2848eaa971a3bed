# spellduel/engine/catalog.py
import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from .models import CATEGORIES, Damage, Dodge, Effect, Heal, Shield, Slow, Tool
from .rules import normalize
from ..content.tools import TOOLS

logger = logging.getLogger(__name__)


class CatalogError(ValueError):
    """Raised when tool data is broken (duplicate alias, unknown effect kind...)."""


def _amount(entry: Dict[str, Any]) -> int:
    value = entry.get("value", entry.get("amount"))
    if value is None:
        raise CatalogError(f"{entry.get('type')} effect needs a value")
    return int(value)


EFFECT_PARSERS: Dict[str, Callable[[Dict[str, Any]], Effect]] = {
    "damage": lambda e: Damage(amount=_amount(e)),
    "heal": lambda e: Heal(amount=_amount(e)),
    "shield": lambda e: Shield(amount=_amount(e), duration=e.get("duration")),
    "dodge": lambda e: Dodge(duration=e.get("duration", 1)),
    "slow": lambda e: Slow(duration=e.get("duration", 1), value=e.get("value")),
}


def parse_effect(entry: Dict[str, Any]) -> Effect:
    kind = entry.get("type")
    parser = EFFECT_PARSERS.get(kind)
    if parser is None:
        raise CatalogError(f"unknown effect kind {kind!r}")
    return parser(entry)


def parse_tool(key: str, data: Mapping[str, Any]) -> Tool:
    category = data.get("type")
    if category not in CATEGORIES:
        raise CatalogError(f"{key}: unknown category {category!r}")
    mana_cost = int(data.get("mana_cost", 0) or 0)
    cooldown = data.get("cooldown", 0) or 0
    if mana_cost < 0 or cooldown < 0:
        raise CatalogError(f"{key}: mana cost and cooldown must be non-negative")
    aliases = tuple(normalize(a) for a in data.get("aliases", []) if normalize(a))
    if not aliases:
        raise CatalogError(f"{key}: needs at least one alias")
    effects = tuple(parse_effect(e) for e in data.get("effects", []))
    return Tool(
        key=key,
        name=str(data.get("name") or key),
        aliases=aliases,
        category=category,
        mana_cost=mana_cost,
        cooldown=cooldown,
        effects=effects,
        description=str(data.get("description", "")),
    )


def load_catalog(raw: Optional[Mapping[str, Mapping[str, Any]]] = None) -> Dict[str, Tool]:
    """
    Parse raw tool data into immutable Tool records.
    Fails fast on any alias (or key) claimed by two different tools.
    """
    raw = TOOLS if raw is None else raw
    catalog: Dict[str, Tool] = {}
    owners: Dict[str, str] = {}
    for key, data in raw.items():
        tool = parse_tool(key, data)
        for name in (normalize(key),) + tool.aliases:
            owner = owners.get(name)
            if owner is not None and owner != key:
                raise CatalogError(f"alias {name!r} is claimed by both {owner} and {key}")
            owners[name] = key
        catalog[key] = tool
    logger.debug("Loaded %d tools", len(catalog))
    return catalog


def find_tool(catalog: Mapping[str, Tool], text) -> Optional[Tool]:
    """Exact alias match on the normalized text; the catalog key also resolves."""
    normalized = normalize(text)
    if not normalized:
        return None
    for tool in catalog.values():
        if normalized in tool.aliases:
            return tool
    for key, tool in catalog.items():
        if normalize(key) == normalized:
            return tool
    return None


def suggest_tools(
    catalog: Mapping[str, Tool],
    prefix,
    dodging_enabled: bool = False,
    limit: int = 5,
) -> List[Tool]:
    """Prefix completion for typed input. Not used for resolution."""
    normalized = normalize(prefix)
    if not normalized:
        return []
    matches = []
    for tool in catalog.values():
        if tool.is_dodge and not dodging_enabled:
            continue
        if any(alias.startswith(normalized) for alias in tool.aliases):
            matches.append(tool)
        if len(matches) >= limit:
            break
    return matches


CATALOG: Dict[str, Tool] = load_catalog()
