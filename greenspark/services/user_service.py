"""
User Service for GreenSpark Platform
Handles user profiles and admin user management
"""

from datetime import datetime
import logging

from greenspark.services.auth_service import normalize_email
from greenspark.utils.error_handler import (
    ConflictError,
    NotFoundError,
    ValidationError,
)
from greenspark.utils.firestore_utils import doc_to_dict, get_document
from greenspark.utils.roles import Role

logger = logging.getLogger(__name__)

HIDDEN_FIELDS = ('password_hash',)

class UserService:
    def __init__(self, db):
        self.db = db
        self.users_ref = db.collection('users')

    def _get_user_doc(self, user_id):
        user_doc = get_document(self.users_ref, user_id)
        if user_doc is None:
            raise NotFoundError("User not found")
        return user_doc

    def _ensure_email_available(self, email, user_id):
        for doc in self.users_ref.where('email', '==', email).limit(1).stream():
            if doc.id != user_id:
                raise ConflictError("A user with this email already exists")

    def get_user_profile(self, user_id):
        """
        Get a user profile without the password hash
        """
        return doc_to_dict(self._get_user_doc(user_id), hidden=HIDDEN_FIELDS)

    def update_user_profile(self, user_id, update_data):
        """
        Partially update name, email and avatar.
        Absent fields keep their value; avatar may be cleared with None.
        """
        self._get_user_doc(user_id)
        update_data = update_data or {}
        filtered_data = {}

        if update_data.get('name'):
            filtered_data['name'] = update_data['name']

        if update_data.get('email'):
            email = normalize_email(update_data['email'])
            self._ensure_email_available(email, user_id)
            filtered_data['email'] = email

        if 'avatar' in update_data:
            filtered_data['avatar'] = update_data['avatar']

        filtered_data['updated_at'] = datetime.utcnow()

        # Update in Firestore
        self.users_ref.document(user_id).update(filtered_data)

        logger.info(f"Updated profile for user: {user_id}")

        return {
            'message': 'Profile updated successfully',
            'updated_fields': sorted(k for k in filtered_data if k != 'updated_at')
        }

    def list_users(self):
        """
        All users for the admin panel
        """
        users = [doc_to_dict(doc, hidden=HIDDEN_FIELDS) for doc in self.users_ref.stream()]
        users.sort(key=lambda x: x.get('created_at') or datetime.min)
        return users

    def list_students(self):
        """
        Students with their progress summary (teacher feature)
        """
        students = []
        for user_doc in self.users_ref.where('role', '==', Role.STUDENT.value).stream():
            user_data = user_doc.to_dict()
            students.append({
                'id': user_doc.id,
                'name': user_data.get('name'),
                'email': user_data.get('email'),
                'eco_points': user_data.get('eco_points', 0),
                'badges': user_data.get('badges', [])
            })

        # Sort students by eco points
        students.sort(key=lambda x: x['eco_points'], reverse=True)
        return students

    def update_user(self, user_id, update_data):
        """
        Admin update of name, email and role
        """
        self._get_user_doc(user_id)
        update_data = update_data or {}
        filtered_data = {}

        if update_data.get('name'):
            filtered_data['name'] = update_data['name']

        if update_data.get('email'):
            email = normalize_email(update_data['email'])
            self._ensure_email_available(email, user_id)
            filtered_data['email'] = email

        if update_data.get('role') is not None:
            role = Role.parse(update_data['role'])
            if role is None:
                raise ValidationError(f"Invalid role: {update_data['role']}", field='role')
            filtered_data['role'] = role.value

        if not filtered_data:
            raise ValidationError("No valid fields to update")

        filtered_data['updated_at'] = datetime.utcnow()
        self.users_ref.document(user_id).update(filtered_data)

        logger.info(f"Admin updated user {user_id}: {sorted(filtered_data)}")
        return self.get_user_profile(user_id)

    def delete_user(self, user_id, acting_user_id=None):
        """
        Hard-delete a user (admin function)
        """
        if user_id == acting_user_id:
            raise ValidationError("Admins cannot delete their own account")

        self._get_user_doc(user_id)
        self.users_ref.document(user_id).delete()

        logger.info(f"Deleted user: {user_id}")
        return {'message': 'User deleted successfully'}
