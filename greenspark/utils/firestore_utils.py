"""
Firestore helpers for GreenSpark Platform
Firebase Admin initialisation, transactions and document conversion
"""

import os
import logging

from firebase_admin import initialize_app, get_app, credentials, firestore

logger = logging.getLogger(__name__)


def init_firestore(config):
    """
    Initialize the Firebase Admin SDK once and return a Firestore client
    """
    try:
        # Try to get the default app
        get_app()
    except ValueError:
        # For local development, use service account key
        cred_path = config.get('GOOGLE_APPLICATION_CREDENTIALS')
        options = {}
        if config.get('FIREBASE_PROJECT_ID'):
            options['projectId'] = config['FIREBASE_PROJECT_ID']

        try:
            if cred_path and os.path.exists(cred_path):
                initialize_app(credentials.Certificate(cred_path), options or None)
            else:
                # Use default credentials in production (or the emulator)
                initialize_app(options=options or None)
        except Exception as e:
            logger.error(f"Error initializing Firebase: {e}")
            raise

    return firestore.client()


def run_transaction(db, callback, *args, **kwargs):
    """
    Run callback(transaction, *args, **kwargs) inside a Firestore transaction.
    The client library retries the callback when the transaction is contended.
    """
    transaction = db.transaction()
    return firestore.transactional(callback)(transaction, *args, **kwargs)


def doc_to_dict(doc, hidden=()):
    """
    Convert a document snapshot into a JSON-ready dict with its id
    """
    data = doc.to_dict() or {}
    for field in hidden:
        data.pop(field, None)
    data['id'] = doc.id
    return data


def get_document(collection_ref, doc_id, transaction=None):
    """
    Fetch a document snapshot, or None when the id is empty or missing
    """
    if not doc_id or not isinstance(doc_id, str) or '/' in doc_id:
        return None
    snapshot = collection_ref.document(doc_id).get(transaction=transaction)
    if not snapshot.exists:
        return None
    return snapshot
