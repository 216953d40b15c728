"""
Teacher endpoints: students, assignments and verification
"""

from flask import Blueprint, jsonify

from greenspark.routes import get_request_data
from greenspark.services import get_service
from greenspark.utils.auth_middleware import require_roles, get_current_user
from greenspark.utils.error_handler import handle_error, validate_request_data

teacher_bp = Blueprint('teacher', __name__, url_prefix='/teacher')

@teacher_bp.route('/students', methods=['GET'])
@require_roles('teacher')
def get_students():
    try:
        return jsonify(get_service('users').list_students())
    except Exception as e:
        return handle_error(e)

@teacher_bp.route('/assigned-students', methods=['GET'])
@require_roles('teacher')
def get_assigned_students():
    """Students this teacher has assigned challenges to"""
    try:
        students = get_service('assignments').get_assigned_students(get_current_user()['id'])
        return jsonify(students)
    except Exception as e:
        return handle_error(e)

@teacher_bp.route('/assignments', methods=['POST'])
@require_roles('teacher')
def create_assignment():
    """Assign a challenge to a student"""
    try:
        data = get_request_data()
        validate_request_data(data, ['challenge_id', 'student_id'])

        assignment = get_service('assignments').create_assignment(
            teacher_id=get_current_user()['id'],
            challenge_id=data['challenge_id'],
            student_id=data['student_id'],
            due_date=data.get('due_date')
        )
        return jsonify({
            'message': 'Challenge assigned successfully',
            'assignment': assignment
        }), 201
    except Exception as e:
        return handle_error(e)

@teacher_bp.route('/students/<student_id>/assignments', methods=['GET'])
@require_roles('teacher')
def get_student_assignments(student_id):
    try:
        return jsonify(get_service('assignments').get_student_assignments(student_id))
    except Exception as e:
        return handle_error(e)

@teacher_bp.route('/assignments/<assignment_id>/verify', methods=['PUT'])
@require_roles('teacher')
def verify_assignment(assignment_id):
    """Mark a completed assignment as verified"""
    try:
        assignment = get_service('assignments').verify_assignment(
            assignment_id, get_current_user()['id']
        )
        return jsonify(assignment)
    except Exception as e:
        return handle_error(e)
