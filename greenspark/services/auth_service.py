"""
Authentication Service for GreenSpark Platform
Handles user registration, login, password hashing and bearer tokens
"""

from datetime import datetime, timedelta
import logging

import jwt
from werkzeug.security import generate_password_hash, check_password_hash

from greenspark.utils.error_handler import (
    AuthenticationError,
    ConflictError,
    InvalidCredentialsError,
    ValidationError,
)
from greenspark.utils.roles import Role

logger = logging.getLogger(__name__)

def normalize_email(email):
    """Normalize email casing to prevent duplicate vs not-found issues"""
    return (email or '').strip().lower()

class AuthService:
    def __init__(self, db, secret, algorithm='HS256', token_ttl_days=7):
        self.db = db
        self.users_ref = db.collection('users')
        self.secret = secret
        self.algorithm = algorithm
        self.token_ttl = timedelta(days=token_ttl_days)

    def find_user_by_email(self, email):
        """
        Return the user snapshot with this email, or None
        """
        for user_doc in self.users_ref.where('email', '==', normalize_email(email)).limit(1).stream():
            return user_doc
        return None

    def create_user(self, name, email, password, role=Role.STUDENT):
        """
        Create a user document with a salted password hash
        """
        email = normalize_email(email)
        parsed_role = Role.parse(role)
        if parsed_role is None:
            raise ValidationError(f"Invalid role: {role}", field='role')

        if self.find_user_by_email(email) is not None:
            logger.warning(f"Attempt to create user with existing email: {email}")
            raise ConflictError("User already exists")

        now = datetime.utcnow()
        user_data = {
            'name': name,
            'email': email,
            'password_hash': generate_password_hash(password),
            'role': parsed_role.value,
            'eco_points': 0,
            'badges': [],
            'completed': [],
            'passed_quizzes': [],
            'avatar': None,
            'created_at': now,
            'updated_at': now
        }

        _, user_ref = self.users_ref.add(user_data)

        logger.info(f"Created new {parsed_role.value}: {email} with ID: {user_ref.id}")

        user_data.pop('password_hash')
        user_data['id'] = user_ref.id
        return user_data

    def register(self, name, email, password):
        """
        Self-registration always creates a student
        """
        self.create_user(name, email, password, role=Role.STUDENT)
        return {'message': 'User registered successfully'}

    def login_user(self, email, password):
        """
        Check credentials and issue a bearer token
        """
        user_doc = self.find_user_by_email(email)
        if user_doc is None:
            logger.warning(f"Login attempt with non-existent email: {normalize_email(email)}")
            raise InvalidCredentialsError()

        user_data = user_doc.to_dict()
        if not check_password_hash(user_data.get('password_hash', ''), password):
            logger.warning(f"Login attempt with wrong password for: {user_data.get('email')}")
            raise InvalidCredentialsError()

        token = self.issue_token(user_doc.id, user_data.get('role'), user_data.get('name'))

        logger.info(f"User logged in: {user_data.get('email')}")

        return {
            'token': token,
            'role': user_data.get('role'),
            'name': user_data.get('name')
        }

    def issue_token(self, user_id, role, name):
        now = datetime.utcnow()
        payload = {
            'id': user_id,
            'role': role,
            'name': name,
            'iat': now,
            'exp': now + self.token_ttl
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify_token(self, token):
        """
        Decode a bearer token and return {id, role, name}
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token")

        if not payload.get('id') or not payload.get('role'):
            raise AuthenticationError("Invalid token")

        return {
            'id': payload['id'],
            'role': payload['role'],
            'name': payload.get('name', '')
        }
