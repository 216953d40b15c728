"""
Authentication Middleware for GreenSpark Platform
Handles bearer token validation and role checks
"""

from functools import wraps
from flask import request
import logging

from greenspark.services import get_service
from greenspark.utils.error_handler import (
    AuthenticationError,
    AuthorizationError,
    handle_error,
)
from greenspark.utils.roles import Role, has_capability

logger = logging.getLogger(__name__)

PERMISSION_DENIED = 'You do not have permission to perform this action'

def _authenticate():
    """
    Verify the bearer token and attach the user to the request.
    Raises AuthenticationError when the token is missing or invalid.
    """
    if getattr(request, 'current_user', None):
        return

    # Get token from Authorization header
    auth_header = request.headers.get('Authorization')
    if not auth_header:
        raise AuthenticationError('Authorization header required')

    # Extract token (remove 'Bearer ' prefix)
    token = auth_header.replace('Bearer ', '', 1).strip()
    if not token:
        raise AuthenticationError('Valid token required')

    try:
        request.current_user = get_service('auth').verify_token(token)
    except AuthenticationError as e:
        logger.warning(f"Rejected token: {e.message}")
        raise

def require_auth(f):
    """
    Decorator to require authentication for API endpoints
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        try:
            _authenticate()
        except AuthenticationError as e:
            return handle_error(e)
        return f(*args, **kwargs)

    return decorated_function

def require_roles(*roles):
    """
    Decorator to require one of the given roles (case-insensitive).
    Always verifies the token first.
    """
    permitted = {Role.parse(role) for role in roles} - {None}

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                _authenticate()
            except AuthenticationError as e:
                return handle_error(e)

            user = request.current_user
            if Role.parse(user.get('role')) not in permitted:
                logger.warning(f"User {user.get('id')} with role '{user.get('role')}' denied, requires {sorted(r.value for r in permitted)}")
                return handle_error(AuthorizationError(PERMISSION_DENIED))

            return f(*args, **kwargs)

        return decorated_function
    return decorator

def require_capability(capability):
    """
    Decorator to require a capability granted by the user's role
    """
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                _authenticate()
            except AuthenticationError as e:
                return handle_error(e)

            user = request.current_user
            if not has_capability(user.get('role'), capability):
                logger.warning(f"User {user.get('id')} lacks capability '{capability}'")
                return handle_error(AuthorizationError(PERMISSION_DENIED))

            return f(*args, **kwargs)

        return decorated_function
    return decorator

def get_current_user():
    """
    Return the authenticated user attached by require_auth, or None
    """
    return getattr(request, 'current_user', None)
