"""
Lesson and quiz endpoints
"""

from flask import Blueprint, jsonify

from greenspark.routes import get_request_data
from greenspark.services import get_service
from greenspark.services.quiz_service import DEFAULT_QUIZ_POINTS
from greenspark.utils.auth_middleware import require_auth, require_capability, get_current_user
from greenspark.utils.error_handler import handle_error, validate_request_data

learn_bp = Blueprint('learn', __name__, url_prefix='/learn')

@learn_bp.route('/lessons', methods=['GET'])
def get_lessons():
    try:
        return jsonify(get_service('quizzes').get_all_lessons())
    except Exception as e:
        return handle_error(e)

@learn_bp.route('/lessons/<lesson_id>', methods=['GET'])
@require_auth
def get_lesson(lesson_id):
    """Lesson with its quiz, without the answers"""
    try:
        return jsonify(get_service('quizzes').get_lesson_with_quiz(lesson_id))
    except Exception as e:
        return handle_error(e)

@learn_bp.route('/quizzes/<quiz_id>/submit', methods=['POST'])
@require_capability('quizzes:submit')
def submit_quiz(quiz_id):
    """Submit quiz answers and get graded results"""
    try:
        data = get_request_data()
        validate_request_data(data, ['answers'])

        result = get_service('quizzes').submit_quiz(
            user_id=get_current_user()['id'],
            quiz_id=quiz_id,
            answers=data['answers']
        )
        return jsonify(result)
    except Exception as e:
        return handle_error(e)

# ============= LESSON MANAGEMENT =============

@learn_bp.route('/admin/lessons', methods=['GET'])
@require_capability('lessons:manage')
def list_managed_lessons():
    try:
        return jsonify(get_service('quizzes').get_lessons_for_management())
    except Exception as e:
        return handle_error(e)

@learn_bp.route('/admin/lessons', methods=['POST'])
@require_capability('lessons:manage')
def create_lesson():
    """Create a lesson and its quiz"""
    try:
        data = get_request_data()
        result = get_service('quizzes').create_lesson(
            data,
            questions=data.get('questions'),
            points_awarded=data.get('points_awarded', DEFAULT_QUIZ_POINTS)
        )
        return jsonify(result), 201
    except Exception as e:
        return handle_error(e)

@learn_bp.route('/admin/lessons/<lesson_id>', methods=['PUT'])
@require_capability('lessons:manage')
def update_lesson(lesson_id):
    try:
        return jsonify(get_service('quizzes').update_lesson(lesson_id, get_request_data()))
    except Exception as e:
        return handle_error(e)

@learn_bp.route('/admin/lessons/<lesson_id>', methods=['DELETE'])
@require_capability('lessons:manage')
def delete_lesson(lesson_id):
    try:
        return jsonify(get_service('quizzes').delete_lesson(lesson_id))
    except Exception as e:
        return handle_error(e)
