"""
Auth endpoints: registration, login, profile and logout
"""

from flask import Blueprint, jsonify

from greenspark.routes import USER_FIELD_TYPES, get_request_data
from greenspark.services import get_service
from greenspark.utils.auth_middleware import require_auth, get_current_user
from greenspark.utils.error_handler import handle_error, validate_request_data

auth_bp = Blueprint('auth', __name__, url_prefix='/auth')

@auth_bp.route('/register', methods=['POST'])
def register():
    """Register a new student"""
    try:
        data = get_request_data()
        validate_request_data(data, ['name', 'email', 'password'], USER_FIELD_TYPES)

        result = get_service('auth').register(
            name=data['name'],
            email=data['email'],
            password=data['password']
        )
        return jsonify(result), 201
    except Exception as e:
        return handle_error(e)

@auth_bp.route('/login', methods=['POST'])
def login():
    """Login user and return a bearer token"""
    try:
        data = get_request_data()
        validate_request_data(data, ['email', 'password'], USER_FIELD_TYPES)

        result = get_service('auth').login_user(data['email'], data['password'])
        return jsonify(result)
    except Exception as e:
        return handle_error(e)

@auth_bp.route('/profile', methods=['GET'])
@require_auth
def get_profile():
    try:
        profile = get_service('users').get_user_profile(get_current_user()['id'])
        return jsonify(profile)
    except Exception as e:
        return handle_error(e)

@auth_bp.route('/profile', methods=['PUT'])
@require_auth
def update_profile():
    """Partial update of name, email and avatar"""
    try:
        data = get_request_data()
        if data:
            validate_request_data(data, [], USER_FIELD_TYPES)

        result = get_service('users').update_user_profile(get_current_user()['id'], data)
        return jsonify(result)
    except Exception as e:
        return handle_error(e)

@auth_bp.route('/logout', methods=['POST'])
@require_auth
def logout():
    # Tokens are stateless; the client discards its copy
    return jsonify({'message': 'Logged out successfully'})
