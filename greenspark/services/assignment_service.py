"""
Assignment Service for GreenSpark Platform
Teachers assign challenges to students and verify completed work
"""

from datetime import datetime
import logging

from dateutil import parser as date_parser
from google.api_core.exceptions import AlreadyExists

from greenspark.services.challenge_service import assignment_id
from greenspark.utils.error_handler import (
    ConflictError,
    NotFoundError,
    ValidationError,
)
from greenspark.utils.firestore_utils import doc_to_dict, get_document
from greenspark.utils.roles import Role

logger = logging.getLogger(__name__)

STATUS_ASSIGNED = 'assigned'
STATUS_COMPLETED = 'completed'
STATUS_VERIFIED = 'verified'

def parse_due_date(value):
    """Parse an optional ISO-8601 due date"""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value
    try:
        return date_parser.isoparse(str(value))
    except (ValueError, OverflowError):
        raise ValidationError("due_date must be an ISO-8601 date", field='due_date')

class AssignmentService:
    def __init__(self, db):
        self.db = db
        self.assignments_ref = db.collection('assignments')
        self.challenges_ref = db.collection('challenges')
        self.users_ref = db.collection('users')

    def create_assignment(self, teacher_id, challenge_id, student_id, due_date=None):
        """
        Assign a challenge to a student. A (challenge, student) pair can
        only be assigned once.
        """
        if get_document(self.challenges_ref, challenge_id) is None:
            raise NotFoundError("Challenge not found")

        student_doc = get_document(self.users_ref, student_id)
        if student_doc is None or student_doc.to_dict().get('role') != Role.STUDENT.value:
            raise NotFoundError("Student not found")

        now = datetime.utcnow()
        assignment_data = {
            'challenge_id': challenge_id,
            'student_id': student_id,
            'assigned_by': teacher_id,
            'status': STATUS_ASSIGNED,
            'due_date': parse_due_date(due_date),
            'created_at': now,
            'updated_at': now
        }

        doc_id = assignment_id(challenge_id, student_id)
        try:
            self.assignments_ref.document(doc_id).create(assignment_data)
        except AlreadyExists:
            logger.warning(f"Duplicate assignment of challenge {challenge_id} to student {student_id}")
            raise ConflictError("This challenge has already been assigned to this student")

        logger.info(f"Teacher {teacher_id} assigned challenge {challenge_id} to student {student_id}")

        assignment_data['id'] = doc_id
        return assignment_data

    def _populate(self, assignment, challenge_fields):
        """
        Attach challenge details and the assigning teacher's name
        """
        challenge_doc = get_document(self.challenges_ref, assignment.get('challenge_id'))
        if challenge_doc is not None:
            challenge_data = challenge_doc.to_dict()
            assignment['challenge'] = {'id': challenge_doc.id}
            for field in challenge_fields:
                assignment['challenge'][field] = challenge_data.get(field)
        else:
            assignment['challenge'] = None

        teacher_doc = get_document(self.users_ref, assignment.get('assigned_by'))
        assignment['assigned_by_name'] = teacher_doc.to_dict().get('name') if teacher_doc else None
        return assignment

    def get_student_assignments(self, student_id):
        """
        All assignments of a student (teacher view)
        """
        assignments = [
            self._populate(doc_to_dict(doc), ('title', 'points', 'icon'))
            for doc in self.assignments_ref.where('student_id', '==', student_id).stream()
        ]
        assignments.sort(key=lambda x: x.get('created_at') or datetime.min)
        return assignments

    def get_my_assignments(self, student_id):
        """
        Open assignments of the calling student
        """
        query = self.assignments_ref.where('student_id', '==', student_id).where('status', '==', STATUS_ASSIGNED)
        assignments = [
            self._populate(doc_to_dict(doc), ('title', 'description', 'points', 'icon'))
            for doc in query.stream()
        ]
        assignments.sort(key=lambda x: x.get('created_at') or datetime.min)
        return assignments

    def get_assigned_students(self, teacher_id):
        """
        Distinct students this teacher has assigned challenges to
        """
        students = {}
        for doc in self.assignments_ref.where('assigned_by', '==', teacher_id).stream():
            student_id = doc.to_dict().get('student_id')
            if student_id in students:
                continue

            student_doc = get_document(self.users_ref, student_id)
            if student_doc is None:
                continue

            student_data = student_doc.to_dict()
            students[student_id] = {
                'id': student_id,
                'name': student_data.get('name'),
                'email': student_data.get('email'),
                'eco_points': student_data.get('eco_points', 0),
                'badges': student_data.get('badges', [])
            }

        return list(students.values())

    def verify_assignment(self, assignment_doc_id, teacher_id):
        """
        Move a completed assignment to verified
        """
        assignment_doc = get_document(self.assignments_ref, assignment_doc_id)
        if assignment_doc is None:
            raise NotFoundError("Assignment not found")

        status = assignment_doc.to_dict().get('status')
        if status != STATUS_COMPLETED:
            raise ValidationError(f"Only completed assignments can be verified (status: {status})", field='status')

        self.assignments_ref.document(assignment_doc_id).update({
            'status': STATUS_VERIFIED,
            'verified_by': teacher_id,
            'updated_at': datetime.utcnow()
        })

        logger.info(f"Teacher {teacher_id} verified assignment {assignment_doc_id}")
        return doc_to_dict(self.assignments_ref.document(assignment_doc_id).get())
