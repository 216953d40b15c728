"""
Mini-game endpoints: catalogue, score submission and progress
"""

from flask import Blueprint, jsonify

from greenspark.routes import get_request_data
from greenspark.services import get_service
from greenspark.utils.auth_middleware import require_auth, require_capability, get_current_user
from greenspark.utils.error_handler import handle_error, validate_request_data

games_bp = Blueprint('games', __name__, url_prefix='/games')

@games_bp.route('', methods=['GET'])
def get_games():
    try:
        return jsonify(get_service('games').get_all_games())
    except Exception as e:
        return handle_error(e)

@games_bp.route('/<game_id>', methods=['GET'])
def get_game(game_id):
    try:
        return jsonify(get_service('games').get_game(game_id))
    except Exception as e:
        return handle_error(e)

@games_bp.route('', methods=['POST'])
@require_capability('games:manage')
def create_game():
    try:
        game = get_service('games').create_game(get_request_data(), uploaded_by=get_current_user()['id'])
        return jsonify(game), 201
    except Exception as e:
        return handle_error(e)

@games_bp.route('/<game_id>', methods=['PUT'])
@require_capability('games:manage')
def update_game(game_id):
    try:
        return jsonify(get_service('games').update_game(game_id, get_request_data()))
    except Exception as e:
        return handle_error(e)

@games_bp.route('/<game_id>', methods=['DELETE'])
@require_capability('games:manage')
def delete_game(game_id):
    try:
        return jsonify(get_service('games').delete_game(game_id))
    except Exception as e:
        return handle_error(e)

@games_bp.route('/<game_id>/submit-score', methods=['POST'])
@require_capability('games:play')
def submit_score(game_id):
    """Submit a game score; only improvement over the best score earns points"""
    try:
        data = get_request_data()
        validate_request_data(data, ['score'])

        result = get_service('games').submit_score(
            user_id=get_current_user()['id'],
            game_id=game_id,
            score=data['score']
        )
        return jsonify(result)
    except Exception as e:
        return handle_error(e)

@games_bp.route('/<game_id>/progress', methods=['GET'])
@require_auth
def get_progress(game_id):
    try:
        return jsonify(get_service('games').get_progress(get_current_user()['id'], game_id))
    except Exception as e:
        return handle_error(e)
