"""
Media Service for GreenSpark Platform
Handles videos, books and notes, including uploaded files
"""

from datetime import datetime
import os
import time
import logging

from firebase_admin import firestore
from werkzeug.utils import secure_filename

from greenspark.utils.error_handler import NotFoundError, ValidationError
from greenspark.utils.firestore_utils import doc_to_dict, get_document

logger = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = '/uploads/'

# Per media kind: editable fields, required fields and the field holding a file URL
MEDIA_KINDS = {
    'videos': {
        'label': 'Video',
        'fields': ('title', 'description', 'url'),
        'required': ('title', 'description', 'url'),
        'url_field': 'url',
    },
    'books': {
        'label': 'Book',
        'fields': ('title', 'description', 'file_url'),
        'required': ('title', 'file_url'),
        'url_field': 'file_url',
    },
    'notes': {
        'label': 'Note',
        'fields': ('title', 'content'),
        'required': ('title', 'content'),
        'url_field': None,
    },
}

class MediaService:
    def __init__(self, db, upload_folder):
        self.db = db
        self.upload_folder = upload_folder

    def _kind(self, kind):
        if kind not in MEDIA_KINDS:
            raise NotFoundError(f"Unknown media type: {kind}")
        return MEDIA_KINDS[kind]

    def save_upload(self, file_storage):
        """
        Store an uploaded file as <epoch-millis><extension> and return its URL
        """
        original_name = secure_filename(file_storage.filename or '')
        if not original_name:
            raise ValidationError("Uploaded file needs a filename", field='file')

        os.makedirs(self.upload_folder, exist_ok=True)
        _, extension = os.path.splitext(original_name)

        millis = int(time.time() * 1000)
        filename = f"{millis}{extension.lower()}"
        while os.path.exists(os.path.join(self.upload_folder, filename)):
            millis += 1
            filename = f"{millis}{extension.lower()}"

        file_storage.save(os.path.join(self.upload_folder, filename))

        logger.info(f"Stored upload {original_name} as {filename}")
        return f"{UPLOAD_URL_PREFIX}{filename}"

    def list_media(self, kind):
        """
        All items of a media kind, newest first
        """
        self._kind(kind)
        docs = self.db.collection(kind).order_by('created_at', direction=firestore.Query.DESCENDING).stream()
        return [doc_to_dict(doc) for doc in docs]

    def get_media(self, kind, media_id):
        media_type = self._kind(kind)
        media_doc = get_document(self.db.collection(kind), media_id)
        if media_doc is None:
            raise NotFoundError(f"{media_type['label']} not found")
        return doc_to_dict(media_doc)

    def create_media(self, kind, data, uploaded_by, file_storage=None):
        """
        Create a media item; an uploaded file replaces the URL field
        """
        media_type = self._kind(kind)
        data = dict(data or {})

        uploads_file = file_storage is not None and media_type['url_field'] is not None

        # A file stands in for the URL field; nothing is written until the rest is valid
        missing = [
            field for field in media_type['required']
            if not data.get(field) and not (uploads_file and field == media_type['url_field'])
        ]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        if uploads_file:
            data[media_type['url_field']] = self.save_upload(file_storage)

        now = datetime.utcnow()
        media_data = {field: data.get(field, '') for field in media_type['fields']}
        media_data.update({
            'uploaded_by': uploaded_by,
            'created_at': now,
            'updated_at': now
        })

        _, media_ref = self.db.collection(kind).add(media_data)

        logger.info(f"Created {kind} item {media_ref.id}: {media_data['title']}")

        media_data['id'] = media_ref.id
        return media_data

    def update_media(self, kind, media_id, update_data, file_storage=None):
        media_type = self._kind(kind)
        collection_ref = self.db.collection(kind)
        if get_document(collection_ref, media_id) is None:
            raise NotFoundError(f"{media_type['label']} not found")

        filtered_data = {
            k: v for k, v in (update_data or {}).items()
            if k in media_type['fields'] and v is not None
        }
        uploads_file = file_storage is not None and media_type['url_field'] is not None
        if uploads_file:
            filtered_data.pop(media_type['url_field'], None)

        for field in media_type['required']:
            if field in filtered_data and not filtered_data[field]:
                raise ValidationError(f"{field} cannot be empty", field=field)

        if uploads_file:
            filtered_data[media_type['url_field']] = self.save_upload(file_storage)

        filtered_data['updated_at'] = datetime.utcnow()
        collection_ref.document(media_id).update(filtered_data)

        logger.info(f"Updated {kind} item: {media_id}")
        return self.get_media(kind, media_id)

    def delete_media(self, kind, media_id):
        media_type = self._kind(kind)
        collection_ref = self.db.collection(kind)
        if get_document(collection_ref, media_id) is None:
            raise NotFoundError(f"{media_type['label']} not found")

        collection_ref.document(media_id).delete()
        logger.info(f"Deleted {kind} item: {media_id}")
        return {'message': f"{media_type['label']} deleted successfully"}
