"""Tactics Agent using LangChain for choosing enemy actions."""

import logging
from typing import Optional

from langchain.agents import create_agent
from langchain.chat_models import BaseChatModel
from langchain_ollama import ChatOllama

from autocombat.config import (
    DEFAULT_LLM_MODEL,
    DEFAULT_LLM_NUM_CTX,
    DEFAULT_LLM_TIMEOUT,
    DEFAULT_OLLAMA_BASE_URL,
    DEFAULT_TACTICS_TEMPERATURE,
)
from autocombat.engine.tactics import parse_tactical_decision
from autocombat.models.tactics import CombatInfo, TacticalDecision

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """
You are the combat system of a fantasy RPG. Analyze the situation and choose the best action for the enemy.

COMBAT RULES:
- Consider the enemy's personality and intelligence
- If HP is below 30%, prioritize survival (flee, defend)
- Intelligent enemies focus weak targets
- Bestial enemies attack the closest target
- Consider tactical positioning

RESPONSE FORMAT (JSON only):
{
  "action": "attack|defend|ability|move|flee",
  "target": "target_name",
  "ability": "name_if_applicable",
  "description": "short narrative description of the action"
}
""".strip()


class TacticsAgent:
    """Tactics Agent that decides what an enemy does on its turn."""

    def __init__(self, llm: Optional[BaseChatModel] = None) -> None:
        """
        Initialize Tactics Agent.

        Args:
            llm: LangChain LLM instance (if None, will be created with defaults)
        """
        self._llm = llm or self._create_default_llm()
        self._agent = None
        self._build_agent()

    def _create_default_llm(self) -> ChatOllama:
        """Create default LLM instance."""
        return ChatOllama(
            model=DEFAULT_LLM_MODEL,
            temperature=DEFAULT_TACTICS_TEMPERATURE,
            base_url=DEFAULT_OLLAMA_BASE_URL,
            num_ctx=DEFAULT_LLM_NUM_CTX,
            client_kwargs={"timeout": DEFAULT_LLM_TIMEOUT},
        )

    def _build_agent(self) -> None:
        """Build the agent using create_agent."""
        self._agent = create_agent(
            model=self._llm,
            tools=[],
            system_prompt=SYSTEM_PROMPT,
        )

    def update_llm(self, llm: BaseChatModel) -> None:
        """Update the LLM instance (for hot-reconfiguration)."""
        self._llm = llm
        self._build_agent()

    @staticmethod
    def build_messages(combat_info: CombatInfo, history: list[dict[str, str]]) -> list[dict[str, str]]:
        """
        Build the chat messages for one decision.

        Args:
            combat_info: Situation summary
            history: Recent combat log as chat messages

        Returns:
            Messages: situation, history, then the question
        """
        situation = f"""
Enemy: {combat_info.enemy_name}
HP: {combat_info.enemy_hp}/{combat_info.enemy_max_hp}
Personality: {combat_info.enemy_personality}
Player positions: {", ".join(combat_info.player_positions)}
""".strip()

        messages = [{"role": "system", "content": situation}]
        messages.extend(history)
        messages.append({"role": "user", "content": f"What is {combat_info.enemy_name}'s next action?"})
        return messages

    @staticmethod
    def _extract_content(result: dict) -> str:
        """Extract the text of the last message in an agent result."""
        if result.get("messages"):
            last_message = result["messages"][-1]
            # Handle both AIMessage objects and dicts
            content = last_message.content if hasattr(last_message, "content") else last_message.get("content", "")
            if isinstance(content, str):
                return content
            if isinstance(content, list):
                # Handle content blocks
                return " ".join(
                    item.get("text", "") if isinstance(item, dict) else str(item) for item in content
                )
        return result.get("output", "")

    def decide(self, combat_info: CombatInfo, history: list[dict[str, str]]) -> Optional[TacticalDecision]:
        """
        Choose the enemy's next action.

        Args:
            combat_info: Situation summary
            history: Recent combat log as chat messages

        Returns:
            Parsed decision, or None if the model's answer is unusable

        Raises:
            Exception: Whatever the LLM client raises (timeouts, connection errors)
        """
        result = self._agent.invoke({"messages": self.build_messages(combat_info, history)})
        content = self._extract_content(result)
        logger.debug(f"Tactics response for {combat_info.enemy_name}: {content[:200]!r}")
        return parse_tactical_decision(content)
