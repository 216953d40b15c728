from flask import Blueprint, jsonify

from greenspark.services import get_service
from greenspark.utils.auth_middleware import require_auth, get_current_user
from greenspark.utils.error_handler import handle_error

assignments_bp = Blueprint('assignments', __name__, url_prefix='/assignments')

@assignments_bp.route('/my-assignments', methods=['GET'])
@require_auth
def get_my_assignments():
    """Open assignments of the logged-in student"""
    try:
        return jsonify(get_service('assignments').get_my_assignments(get_current_user()['id']))
    except Exception as e:
        return handle_error(e)
