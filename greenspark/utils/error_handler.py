"""
Error Handler for GreenSpark Platform
Centralized error handling and logging
"""

from datetime import datetime
from flask import jsonify
from google.api_core.exceptions import GoogleAPICallError
import logging
import traceback

logger = logging.getLogger(__name__)

class GreenSparkError(Exception):
    """Base exception class for GreenSpark platform"""
    def __init__(self, message, status_code=500, error_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code

class ValidationError(GreenSparkError):
    """Raised when input validation fails"""
    def __init__(self, message, field=None):
        super().__init__(message, status_code=400, error_code='VALIDATION_ERROR')
        self.field = field

class AlreadyCompletedError(GreenSparkError):
    """Raised when a user completes the same challenge twice"""
    def __init__(self, message='Challenge already completed'):
        super().__init__(message, status_code=400, error_code='ALREADY_COMPLETED')

class AuthenticationError(GreenSparkError):
    """Raised when authentication fails"""
    def __init__(self, message):
        super().__init__(message, status_code=401, error_code='AUTH_ERROR')

class InvalidCredentialsError(GreenSparkError):
    """Raised when email/password do not match a user"""
    def __init__(self, message='Invalid credentials'):
        super().__init__(message, status_code=401, error_code='INVALID_CREDENTIALS')

class AuthorizationError(GreenSparkError):
    """Raised when user lacks required permissions"""
    def __init__(self, message):
        super().__init__(message, status_code=403, error_code='PERMISSION_ERROR')

class NotFoundError(GreenSparkError):
    """Raised when requested resource is not found"""
    def __init__(self, message):
        super().__init__(message, status_code=404, error_code='NOT_FOUND')

class ConflictError(GreenSparkError):
    """Raised on duplicate email, title or unique pair"""
    def __init__(self, message):
        super().__init__(message, status_code=409, error_code='CONFLICT')

def handle_error(error):
    """
    Central error handler that converts exceptions to JSON responses
    """
    try:
        # Handle custom GreenSpark errors
        if isinstance(error, GreenSparkError):
            logger.warning(f"GreenSpark error: {error.message}")
            return jsonify({
                'error': error.message,
                'error_code': error.error_code,
                'status': 'error'
            }), error.status_code

        # Handle common Python exceptions
        elif isinstance(error, ValueError):
            logger.warning(f"Validation error: {str(error)}")
            return jsonify({
                'error': str(error),
                'error_code': 'VALIDATION_ERROR',
                'status': 'error'
            }), 400

        elif isinstance(error, KeyError):
            logger.warning(f"Missing key error: {str(error)}")
            return jsonify({
                'error': f'Missing required field: {str(error)}',
                'error_code': 'MISSING_FIELD',
                'status': 'error'
            }), 400

        # Handle Firestore / Google API errors
        elif isinstance(error, GoogleAPICallError):
            logger.error(f"Firestore error: {str(error)}")
            return jsonify({
                'error': 'Service temporarily unavailable',
                'error_code': 'SERVICE_ERROR',
                'status': 'error'
            }), 503

        # Handle connection errors
        elif isinstance(error, (ConnectionError, TimeoutError)):
            logger.error(f"Connection error: {str(error)}")
            return jsonify({
                'error': 'Service temporarily unavailable',
                'error_code': 'CONNECTION_ERROR',
                'status': 'error'
            }), 503

        # Handle all other exceptions
        else:
            # Log full traceback for debugging
            logger.error(f"Unhandled error: {str(error)}")
            logger.error(traceback.format_exc())

            return jsonify({
                'error': 'An unexpected error occurred',
                'error_code': 'INTERNAL_ERROR',
                'status': 'error'
            }), 500

    except Exception as e:
        # Failsafe error handling
        logger.critical(f"Error in error handler: {str(e)}")
        return jsonify({
            'error': 'Critical system error',
            'error_code': 'CRITICAL_ERROR',
            'status': 'error'
        }), 500

def log_api_call(endpoint, user_id=None, duration=None, status_code=200):
    """
    Log API call for monitoring
    """
    log_data = {
        'endpoint': endpoint,
        'user_id': user_id,
        'duration_ms': duration,
        'status_code': status_code,
        'timestamp': str(datetime.utcnow())
    }

    if status_code >= 500:
        logger.error(f"API call failed: {log_data}")
    elif status_code >= 400:
        logger.warning(f"API call rejected: {log_data}")
    else:
        logger.info(f"API call successful: {log_data}")

def validate_request_data(data, required_fields, optional_fields=None):
    """
    Validate request data against required and optional fields
    """
    if not data:
        raise ValidationError("Request body cannot be empty")

    # Check required fields
    missing_fields = []
    for field in required_fields:
        if field not in data or data[field] is None or data[field] == '':
            missing_fields.append(field)

    if missing_fields:
        raise ValidationError(f"Missing required fields: {', '.join(missing_fields)}")

    # Validate field types if specified
    if optional_fields:
        for field, expected_type in optional_fields.items():
            if field in data and data[field] is not None:
                if not isinstance(data[field], expected_type):
                    type_name = getattr(expected_type, '__name__', 'the expected type')
                    raise ValidationError(f"Field '{field}' must be of type {type_name}", field=field)

    return True
