from flask import request


def get_request_data():
    """JSON object body, or form fields for multipart uploads"""
    data = request.get_json(silent=True)
    if data is None and request.form:
        data = request.form.to_dict()
    return data if isinstance(data, dict) else {}


# Expected types of user fields accepted by auth and admin endpoints
USER_FIELD_TYPES = {'name': str, 'email': str, 'password': str, 'role': str}
