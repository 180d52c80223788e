#!/usr/bin/env python3
"""
Roulette Strategy Simulator - Flask Web Application
REST API running simulations from a request body or the bundled files.
"""

import logging
from pathlib import Path

from flask import Flask, jsonify, request
from flask_cors import CORS

from roulette_sim.loader import parse_agents, read_agents_file
from roulette_sim.models import ConfigurationError, DeserializationError, GameConfig
from roulette_sim.runner import run_simulation
from roulette_sim.stats import Stats

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

RESOURCES_DIR = Path(__file__).parent / 'res'
GAME_CONFIG_FILE = RESOURCES_DIR / 'game.json'
AGENTS_FILE = RESOURCES_DIR / 'agents.json'

app = Flask(__name__)
CORS(app)


def _simulate(config: GameConfig, agents) -> dict:
    result = run_simulation(config, agents)
    stats = Stats.from_games(result.games, games_failed=result.failed)
    return stats.to_dict()


# ============================================================================
# API ENDPOINTS
# ============================================================================

@app.route('/api/simulate', methods=['POST'])
def api_simulate():
    """
    Run a simulation described in the request body.

    Request Body:
        - config: dict - Game configuration
        - agents: list - Agent roster with strategic bets

    Response:
        - average_agent_balances: dict
        - bet_statistics: list
        - games_played: int
        - games_failed: int
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({'success': False, 'error': 'No data provided'}), 400

    try:
        config = GameConfig.from_dict(data.get('config'))
        agents = parse_agents(data.get('agents'))
    except DeserializationError as e:
        logger.error(f"Invalid simulation request: {e}")
        return jsonify({'success': False, 'error': str(e)}), 400

    return jsonify(_simulate(config, agents))


@app.route('/api/simulate/files', methods=['GET'])
def api_simulate_files():
    """Run the simulation described by the bundled game and agent files."""
    try:
        config = GameConfig.from_file(GAME_CONFIG_FILE)
        agents = read_agents_file(AGENTS_FILE)
    except (ConfigurationError, DeserializationError) as e:
        logger.error(f"Failed to read simulation files: {e}")
        return jsonify({'success': False, 'error': 'Failed to read simulation files'}), 500

    return jsonify(_simulate(config, agents))


@app.route('/api/health', methods=['GET'])
def api_health():
    """Health check endpoint."""
    return jsonify({'status': 'healthy', 'version': '1.0.0'})


# ============================================================================
# ERROR HANDLERS
# ============================================================================

@app.errorhandler(404)
def not_found(error):
    return jsonify({'success': False, 'error': 'Resource not found'}), 404


@app.errorhandler(500)
def internal_error(error):
    logger.exception("Internal server error")
    return jsonify({'success': False, 'error': 'Internal server error'}), 500


if __name__ == '__main__':
    app.run(host='0.0.0.0', port=5000)
