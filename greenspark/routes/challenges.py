"""
Challenge endpoints
"""

from flask import Blueprint, jsonify

from greenspark.routes import get_request_data
from greenspark.services import get_service
from greenspark.services.badge_service import get_all_badges
from greenspark.utils.auth_middleware import require_capability, get_current_user
from greenspark.utils.error_handler import handle_error, validate_request_data

challenges_bp = Blueprint('challenges', __name__, url_prefix='/challenges')

@challenges_bp.route('', methods=['GET'])
def get_challenges():
    """Get all available challenges"""
    try:
        return jsonify(get_service('challenges').get_all_challenges())
    except Exception as e:
        return handle_error(e)

@challenges_bp.route('/badges', methods=['GET'])
def get_badges():
    """Badge catalogue with the eco points each one needs"""
    return jsonify(get_all_badges())

@challenges_bp.route('/complete', methods=['POST'])
@require_capability('challenges:complete')
def complete_challenge():
    """Complete a challenge and collect its eco points"""
    try:
        data = get_request_data()
        validate_request_data(data, ['challenge_id'])

        result = get_service('challenges').complete_challenge(
            user_id=get_current_user()['id'],
            challenge_id=data['challenge_id']
        )
        return jsonify(result)
    except Exception as e:
        return handle_error(e)
