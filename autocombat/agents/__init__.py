"""LangChain agents and serializers."""

from autocombat.agents.state_serializer import StateSerializer
from autocombat.agents.tactics_agent import TacticsAgent

__all__ = ["StateSerializer", "TacticsAgent"]
