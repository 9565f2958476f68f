"""Flask API application."""

import logging
import uuid
from typing import Optional

from flask import Flask, jsonify, request
from pydantic import ValidationError
from werkzeug.exceptions import HTTPException

from autocombat.agents.state_serializer import StateSerializer
from autocombat.agents.tactics_agent import TacticsAgent
from autocombat.config import DEFAULT_DEFEND_MODE
from autocombat.engine.bestiary import ENEMY_TEMPLATES, UnknownEnemyTemplateError
from autocombat.engine.combat import CombatStateError
from autocombat.engine.combat_engine import CombatEngine
from autocombat.engine.inventory_manager import InventoryManager
from autocombat.models.character import CharacterSnapshot
from ..api.llm_config import LLMConfig, LLMConfigManager

logging.basicConfig(level=logging.DEBUG, format='[%(name)-19s - %(levelname)5s] %(message)s')

app = Flask("flask.autocombat")


@app.before_request
def log_request_info():
    app.logger.info('Access to: %s from %s (%s)',
        request.url,
        request.headers.get('X-Forwarded-For', request.remote_addr),
        request.headers.get('User-Agent'))


# Error handlers for API routes
@app.errorhandler(HTTPException)
def handle_http_exception(e: HTTPException):
    """Return JSON instead of HTML for HTTP errors in API routes."""
    if request.path.startswith("/api/"):
        response = e.get_response()
        response.data = jsonify(
            {
                "error": e.name,
                "code": e.code,
                "description": e.description,
            }
        ).data
        response.content_type = "application/json"
        return response
    return e


@app.errorhandler(500)
def handle_internal_error(e: Exception):
    """Handle 500 errors."""
    if request.path.startswith("/api/"):
        app.logger.error(f"Internal server error: {e}", exc_info=True)
        return jsonify({"error": "Internal Server Error", "message": "An unexpected error occurred"}), 500
    return "Internal Server Error", 500


# Global combat storage: combat key -> CombatEngine
_combats: dict[str, CombatEngine] = {}
_llm_config_manager = LLMConfigManager()


def _create_tactics() -> Optional[TacticsAgent]:
    """Create a tactics agent over the configured LLM, or None if no LLM is available."""
    llm = _llm_config_manager.get_llm()
    if llm is None:
        return None
    return TacticsAgent(llm=llm)


def _get_combat_engine(combat_key: str) -> Optional[CombatEngine]:
    """Get combat engine by key, or return None if not found."""
    return _combats.get(combat_key)


def _serialize_combat(combat_key: str, engine: CombatEngine) -> dict:
    """Serialize combat for API (HUD view of the state)."""
    return {"combat_key": combat_key, **StateSerializer.extract_hud_context(engine.state, engine.inventory)}


@app.route("/api/enemies", methods=["GET"])
def list_enemies():
    """List registered enemy templates."""
    return jsonify(
        {
            "enemies": [
                {"template_id": template_id, "name": enemy.name, "max_hp": enemy.max_hp}
                for template_id, enemy in ENEMY_TEMPLATES.items()
            ]
        }
    )


@app.route("/api/combats", methods=["POST"])
def create_combat():
    """Start a new combat for a character against a list of enemy templates."""
    if not request.is_json:
        return jsonify({"error": "Content-Type must be application/json"}), 400

    data = request.get_json() or {}

    character_data = data.get("character")
    enemy_ids = data.get("enemies")
    if not character_data:
        return jsonify({"error": "character is required"}), 400
    if not enemy_ids or not isinstance(enemy_ids, list):
        return jsonify({"error": "enemies must be a non-empty list of template ids"}), 400

    try:
        character = CharacterSnapshot.model_validate(character_data)
    except ValidationError as e:
        return jsonify({"error": "Invalid character", "message": str(e)}), 400

    defend_mode = data.get("defend_mode", DEFAULT_DEFEND_MODE)
    inventory = InventoryManager.with_starter_items() if data.get("starter_items", True) else None

    try:
        engine = CombatEngine(
            tactics=_create_tactics() if data.get("use_llm", True) else None,
            inventory=inventory,
            defend_mode=defend_mode,
        )
        engine.start_combat(character, enemy_ids)
    except UnknownEnemyTemplateError as e:
        return jsonify({"error": "Unknown enemy template", "message": str(e)}), 400
    except ValueError as e:
        return jsonify({"error": "Invalid combat settings", "message": str(e)}), 400
    except Exception as e:
        app.logger.error(f"Error creating combat: {e}", exc_info=True)
        return jsonify({"error": "Failed to create combat", "message": str(e)}), 500

    combat_key = str(uuid.uuid4())
    _combats[combat_key] = engine
    return jsonify({"success": True, "combat_key": combat_key, "state": _serialize_combat(combat_key, engine)})


@app.route("/api/combats/<combat_key>", methods=["GET"])
def get_combat(combat_key: str):
    """Get combat state (HUD view, or the full state with ?full=1)."""
    engine = _get_combat_engine(combat_key)
    if not engine:
        return jsonify({"error": "Combat not found"}), 404
    if request.args.get("full"):
        return jsonify({"state": StateSerializer.serialize_full_state(engine.state)})
    return jsonify({"state": _serialize_combat(combat_key, engine)})


@app.route("/api/combats/<combat_key>", methods=["DELETE"])
def delete_combat(combat_key: str):
    """Delete a combat."""
    engine = _combats.pop(combat_key, None)
    if not engine:
        return jsonify({"error": "Combat not found"}), 404
    return jsonify({"success": True, "message": f"Combat {combat_key} has been deleted"})


@app.route("/api/combats/<combat_key>/attack", methods=["POST"])
def player_attack(combat_key: str):
    """Player attacks a target."""
    if not request.is_json:
        return jsonify({"error": "Content-Type must be application/json"}), 400

    data = request.get_json() or {}
    target_id = data.get("target_id")
    if not target_id:
        return jsonify({"error": "target_id is required"}), 400

    engine = _get_combat_engine(combat_key)
    if not engine:
        return jsonify({"error": "Combat not found"}), 404

    result = engine.player_attack(target_id, data.get("attack"))
    if result is None:
        return jsonify({"error": "Attack not possible", "state": _serialize_combat(combat_key, engine)}), 400

    return jsonify(
        {
            "success": True,
            "attack_roll": result.model_dump(mode="json"),
            "state": _serialize_combat(combat_key, engine),
        }
    )


@app.route("/api/combats/<combat_key>/defend", methods=["POST"])
def player_defend(combat_key: str):
    """Player takes the defend action."""
    engine = _get_combat_engine(combat_key)
    if not engine:
        return jsonify({"error": "Combat not found"}), 404

    entry = engine.player_defend()
    if entry is None:
        return jsonify({"error": "Defend not possible"}), 400

    return jsonify(
        {
            "success": True,
            "log_entry": entry.model_dump(mode="json"),
            "state": _serialize_combat(combat_key, engine),
        }
    )


@app.route("/api/combats/<combat_key>/enemy-turn", methods=["POST"])
def enemy_turn(combat_key: str):
    """Run the current enemy's turn."""
    engine = _get_combat_engine(combat_key)
    if not engine:
        return jsonify({"error": "Combat not found"}), 404

    result = engine.execute_enemy_turn()
    if result is None:
        return jsonify({"error": "No enemy turn to execute", "state": _serialize_combat(combat_key, engine)}), 400

    return jsonify(
        {
            "success": True,
            "result": result.model_dump(mode="json"),
            "state": _serialize_combat(combat_key, engine),
        }
    )


@app.route("/api/combats/<combat_key>/next-turn", methods=["POST"])
def next_turn(combat_key: str):
    """Advance to the next combatant."""
    engine = _get_combat_engine(combat_key)
    if not engine:
        return jsonify({"error": "Combat not found"}), 404

    try:
        phase = engine.next_turn()
    except CombatStateError as e:
        return jsonify({"error": "Combat not started", "message": str(e)}), 400

    return jsonify({"success": True, "phase": phase.value, "state": _serialize_combat(combat_key, engine)})


@app.route("/api/combats/<combat_key>/end", methods=["POST"])
def end_combat(combat_key: str):
    """End combat and report the outcome."""
    engine = _get_combat_engine(combat_key)
    if not engine:
        return jsonify({"error": "Combat not found"}), 404

    outcome = engine.end_combat()
    return jsonify({"success": True, "outcome": outcome.model_dump(mode="json")})


@app.route("/api/config/llm", methods=["GET"])
def get_llm_config():
    """Get current LLM configuration."""
    return jsonify({"config": _llm_config_manager.config.model_dump(exclude={"api_key"})})


@app.route("/api/config/llm", methods=["POST"])
def update_llm_config():
    """Update LLM configuration (hot-reload)."""
    if not request.is_json:
        return jsonify({"error": "Content-Type must be application/json"}), 400

    data = request.get_json()
    if not data:
        return jsonify({"error": "No data provided"}), 400

    try:
        new_config = LLMConfig(**data)
    except ValidationError as e:
        return jsonify({"error": "Invalid configuration", "message": str(e)}), 400

    _llm_config_manager.update_config(new_config)
    # Update running combats with the new LLM
    for engine in _combats.values():
        engine.set_tactics(_create_tactics())
    return jsonify({"success": True, "config": _llm_config_manager.config.model_dump(exclude={"api_key"})})


if __name__ == "__main__":
    app.run(debug=True, port=5000)
