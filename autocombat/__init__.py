"""AutoCombat: turn-based tabletop combat resolver."""
