"""Central configuration defaults and constants for AutoCombat."""

import os

# LLM Provider Defaults
DEFAULT_LLM_PROVIDER = os.getenv("AUTOCOMBAT_LLM_PROVIDER", "ollama")
DEFAULT_OLLAMA_BASE_URL = os.getenv("AUTOCOMBAT_OLLAMA_BASE_URL", "http://localhost:11434/")
DEFAULT_OPENAI_BASE_URL = os.getenv("AUTOCOMBAT_OPENAI_BASE_URL", "https://api.openai.com/v1")
DEFAULT_OPENAI_API_KEY = os.getenv("AUTOCOMBAT_OPENAI_API_KEY", "")
DEFAULT_LLM_MODEL = os.getenv("AUTOCOMBAT_LLM_MODEL", "gpt-oss:20b")
DEFAULT_LLM_TIMEOUT = int(os.getenv("AUTOCOMBAT_LLM_TIMEOUT", "30"))  # Bounds every tactical decision request
DEFAULT_LLM_NUM_CTX = int(os.getenv("AUTOCOMBAT_LLM_NUM_CTX", str(2**13)))  # 8192 tokens context window

# Ollama API Key (Ollama doesn't require real API key, but some libraries expect it)
DEFAULT_OLLAMA_API_KEY = os.getenv("AUTOCOMBAT_OLLAMA_API_KEY", "ollama")

# Tactics Agent Defaults
DEFAULT_TACTICS_TEMPERATURE = float(os.getenv("AUTOCOMBAT_TACTICS_TEMPERATURE", "0.5"))
DEFAULT_TACTICS_HISTORY_LIMIT = int(os.getenv("AUTOCOMBAT_TACTICS_HISTORY_LIMIT", "5"))  # Last N log entries sent as context

# Combat Rules
# "cosmetic" only logs the defend bonus, "condition" applies it until the defender's next turn
DEFAULT_DEFEND_MODE = os.getenv("AUTOCOMBAT_DEFEND_MODE", "cosmetic").lower()
DEFAULT_DEFEND_ARMOR_BONUS = int(os.getenv("AUTOCOMBAT_DEFEND_ARMOR_BONUS", "2"))
DEFAULT_BUFF_DURATION = int(os.getenv("AUTOCOMBAT_BUFF_DURATION", "3"))  # Player actions a potion buff lasts
DEFAULT_XP_PER_HP = int(os.getenv("AUTOCOMBAT_XP_PER_HP", "5"))
DEFAULT_FLEE_HP_THRESHOLD = float(os.getenv("AUTOCOMBAT_FLEE_HP_THRESHOLD", "0.2"))
DEFAULT_DESPERATE_HP_THRESHOLD = float(os.getenv("AUTOCOMBAT_DESPERATE_HP_THRESHOLD", "0.3"))
DEFAULT_STARTING_GOLD = int(os.getenv("AUTOCOMBAT_STARTING_GOLD", "50"))
