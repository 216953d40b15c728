"""
Admin endpoints: user management, challenge management and seeding
"""

from flask import Blueprint, current_app, jsonify

from greenspark.routes import USER_FIELD_TYPES, get_request_data
from greenspark.services import get_service
from greenspark.utils.auth_middleware import require_capability, get_current_user
from greenspark.utils.error_handler import AuthorizationError, handle_error, validate_request_data

admin_bp = Blueprint('admin', __name__, url_prefix='/admin')

# ============= USERS =============

@admin_bp.route('/users', methods=['GET'])
@require_capability('users:manage')
def list_users():
    try:
        return jsonify(get_service('users').list_users())
    except Exception as e:
        return handle_error(e)

@admin_bp.route('/users', methods=['POST'])
@require_capability('users:manage')
def create_user():
    """Create a user with an explicit role"""
    try:
        data = get_request_data()
        validate_request_data(data, ['name', 'email', 'password', 'role'], USER_FIELD_TYPES)

        user = get_service('auth').create_user(
            name=data['name'],
            email=data['email'],
            password=data['password'],
            role=data['role']
        )
        return jsonify(user), 201
    except Exception as e:
        return handle_error(e)

@admin_bp.route('/users/<user_id>', methods=['PUT'])
@require_capability('users:manage')
def update_user(user_id):
    try:
        data = get_request_data()
        if data:
            validate_request_data(data, [], USER_FIELD_TYPES)

        return jsonify(get_service('users').update_user(user_id, data))
    except Exception as e:
        return handle_error(e)

@admin_bp.route('/users/<user_id>', methods=['DELETE'])
@require_capability('users:manage')
def delete_user(user_id):
    try:
        result = get_service('users').delete_user(user_id, acting_user_id=get_current_user()['id'])
        return jsonify(result)
    except Exception as e:
        return handle_error(e)

# ============= CHALLENGES =============

@admin_bp.route('/challenges', methods=['GET'])
@require_capability('challenges:manage')
def list_challenges():
    try:
        return jsonify(get_service('challenges').get_all_challenges())
    except Exception as e:
        return handle_error(e)

@admin_bp.route('/challenges', methods=['POST'])
@require_capability('challenges:manage')
def create_challenge():
    try:
        data = get_request_data()
        validate_request_data(data, ['title', 'points'])

        challenge = get_service('challenges').create_challenge(
            title=data['title'],
            points=data['points'],
            description=data.get('description', ''),
            icon=data.get('icon')
        )
        return jsonify(challenge), 201
    except Exception as e:
        return handle_error(e)

@admin_bp.route('/challenges/<challenge_id>', methods=['PUT'])
@require_capability('challenges:manage')
def update_challenge(challenge_id):
    try:
        return jsonify(get_service('challenges').update_challenge(challenge_id, get_request_data()))
    except Exception as e:
        return handle_error(e)

@admin_bp.route('/challenges/<challenge_id>', methods=['DELETE'])
@require_capability('challenges:manage')
def delete_challenge(challenge_id):
    try:
        return jsonify(get_service('challenges').delete_challenge(challenge_id))
    except Exception as e:
        return handle_error(e)

# ============= SEED =============

@admin_bp.route('/seed', methods=['POST'])
@require_capability('database:seed')
def seed_database():
    """Seed database with initial data (for development)"""
    try:
        # Only allow in development environment
        if current_app.config.get('ENVIRONMENT') != 'development':
            raise AuthorizationError('Not allowed in production')

        challenges = get_service('challenges').seed_challenges()
        lessons = get_service('quizzes').seed_lessons()

        return jsonify({
            'message': 'Database seeded successfully',
            'challenges': challenges,
            'lessons': lessons
        })
    except Exception as e:
        return handle_error(e)
