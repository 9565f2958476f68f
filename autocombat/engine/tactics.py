"""Tactical decision provider contract and decision parsing."""

import json
import logging
import re
from typing import Any, Optional, Protocol, Union

from pydantic import ValidationError

from autocombat.models.tactics import CombatInfo, TacticalAction, TacticalDecision

logger = logging.getLogger(__name__)

_FENCED_JSON = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```", re.IGNORECASE)
_BRACED_JSON = re.compile(r"\{[\s\S]*\}")

# Keys and action words used by the original Portuguese prompt
_KEY_ALIASES = {
    "acao": "action",
    "ação": "action",
    "alvo": "target",
    "habilidade": "ability",
    "descricao": "description",
    "descrição": "description",
}

_ACTION_ALIASES = {
    "atacar": TacticalAction.ATTACK,
    "defender": TacticalAction.DEFEND,
    "habilidade": TacticalAction.ABILITY,
    "mover": TacticalAction.MOVE,
    "fugir": TacticalAction.FLEE,
}

RawDecision = Union[TacticalDecision, dict[str, Any], str, None]


class TacticalDecisionProvider(Protocol):
    """Chooses an action for an enemy turn. May raise or return garbage."""

    def decide(self, combat_info: CombatInfo, history: list[dict[str, str]]) -> RawDecision: ...


def default_attack_decision(target: Optional[str] = None) -> TacticalDecision:
    """Fallback when no usable decision is available."""
    return TacticalDecision(action=TacticalAction.ATTACK, target=target, description="attacks ferociously")


def _extract_json(text: str) -> Optional[dict[str, Any]]:
    match = _FENCED_JSON.search(text) or _BRACED_JSON.search(text)
    candidate = match.group(1) if match and match.lastindex else (match.group(0) if match else text)
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError:
        logger.debug(f"Could not parse JSON from tactical response: {text[:100]!r}")
        return None
    return data if isinstance(data, dict) else None


def parse_tactical_decision(raw: RawDecision) -> Optional[TacticalDecision]:
    """
    Coerce provider output into a TacticalDecision.

    Accepts a TacticalDecision, a dict, or model text containing JSON (fenced
    or bare). Portuguese keys and action words are translated.

    Args:
        raw: Provider output

    Returns:
        Parsed decision, or None if the output is unusable
    """
    if isinstance(raw, TacticalDecision):
        return raw
    if isinstance(raw, str):
        raw = _extract_json(raw)
    if not isinstance(raw, dict):
        return None

    data = {_KEY_ALIASES.get(str(key).lower(), str(key).lower()): value for key, value in raw.items()}
    action = data.get("action")
    if isinstance(action, str):
        action = action.strip().lower()
        data["action"] = _ACTION_ALIASES.get(action, action)

    try:
        return TacticalDecision.model_validate(
            {key: data.get(key) for key in ("action", "target", "ability", "description")}
        )
    except ValidationError as e:
        logger.warning(f"Unusable tactical decision {raw}: {e.errors()}")
        return None
