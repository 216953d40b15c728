from flask import Blueprint, request, jsonify

from greenspark.services import get_service
from greenspark.services.leaderboard_service import MAX_LEADERBOARD_SIZE
from greenspark.utils.error_handler import ValidationError, handle_error

leaderboard_bp = Blueprint('leaderboard', __name__, url_prefix='/leaderboard')

@leaderboard_bp.route('', methods=['GET'])
def get_leaderboard():
    """Top users by eco points"""
    try:
        limit = request.args.get('limit', MAX_LEADERBOARD_SIZE)
        try:
            limit = int(limit)
        except (TypeError, ValueError):
            raise ValidationError("limit must be an integer", field='limit')

        return jsonify(get_service('leaderboard').get_leaderboard(limit=limit))
    except Exception as e:
        return handle_error(e)
