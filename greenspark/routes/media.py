"""
Media endpoints for videos, books and notes
"""

from flask import Blueprint, request, jsonify

from greenspark.routes import get_request_data
from greenspark.services import get_service
from greenspark.utils.auth_middleware import require_capability, get_current_user
from greenspark.utils.error_handler import handle_error

media_bp = Blueprint('media', __name__, url_prefix='/media')

MEDIA_KIND_PATTERN = '<any(videos, books, notes):kind>'

@media_bp.route(f'/{MEDIA_KIND_PATTERN}', methods=['GET'])
def list_media(kind):
    try:
        return jsonify(get_service('media').list_media(kind))
    except Exception as e:
        return handle_error(e)

@media_bp.route(f'/{MEDIA_KIND_PATTERN}/<media_id>', methods=['GET'])
def get_media(kind, media_id):
    try:
        return jsonify(get_service('media').get_media(kind, media_id))
    except Exception as e:
        return handle_error(e)

@media_bp.route(f'/{MEDIA_KIND_PATTERN}', methods=['POST'])
@require_capability('media:manage')
def create_media(kind):
    """Create a media item from a URL or a multipart file upload"""
    try:
        item = get_service('media').create_media(
            kind,
            get_request_data(),
            uploaded_by=get_current_user()['id'],
            file_storage=request.files.get('file')
        )
        return jsonify(item), 201
    except Exception as e:
        return handle_error(e)

@media_bp.route(f'/{MEDIA_KIND_PATTERN}/<media_id>', methods=['PUT'])
@require_capability('media:manage')
def update_media(kind, media_id):
    try:
        item = get_service('media').update_media(
            kind,
            media_id,
            get_request_data(),
            file_storage=request.files.get('file')
        )
        return jsonify(item)
    except Exception as e:
        return handle_error(e)

@media_bp.route(f'/{MEDIA_KIND_PATTERN}/<media_id>', methods=['DELETE'])
@require_capability('media:manage')
def delete_media(kind, media_id):
    try:
        return jsonify(get_service('media').delete_media(kind, media_id))
    except Exception as e:
        return handle_error(e)
