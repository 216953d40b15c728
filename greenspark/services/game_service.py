"""
Game Service for GreenSpark Platform
Handles the mini-game catalogue, best scores and score rewards
"""

from datetime import datetime
import math
import numbers
import logging

from firebase_admin import firestore

from greenspark.services.badge_service import award_eco_points
from greenspark.utils.error_handler import (
    ConflictError,
    NotFoundError,
    ValidationError,
)
from greenspark.utils.firestore_utils import doc_to_dict, get_document, run_transaction

logger = logging.getLogger(__name__)

# Simulation parameters and their defaults
GAME_DEFAULTS = {
    'base_points': 10,
    'max_pollution_goal': 20,
    'target_health': 90,
    'game_duration': 100,
}

def progress_id(game_id, student_id):
    """Progress records are keyed by their (game, student) pair"""
    return f"{game_id}_{student_id}"

def validate_score(score):
    """
    Scores are non-negative numbers, stored as integers
    """
    if isinstance(score, bool) or not isinstance(score, numbers.Real):
        raise ValidationError("Score must be a number", field='score')
    if not math.isfinite(score):
        raise ValidationError("Score must be a finite number", field='score')
    if score < 0:
        raise ValidationError("Score cannot be negative", field='score')
    return int(round(score))

def _validate_parameters(game_data):
    for field in GAME_DEFAULTS:
        value = game_data.get(field)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, numbers.Real) or not math.isfinite(value) or value < 0:
            raise ValidationError(f"{field} must be a non-negative number", field=field)

class GameService:
    def __init__(self, db):
        self.db = db
        self.games_ref = db.collection('games')
        self.progress_ref = db.collection('game_progress')
        self.users_ref = db.collection('users')

    def _ensure_title_available(self, title, game_id=None):
        for doc in self.games_ref.where('title', '==', title).limit(1).stream():
            if doc.id != game_id:
                raise ConflictError(f"A game titled '{title}' already exists")

    def get_all_games(self):
        """
        All games, newest first
        """
        games = self.games_ref.order_by('created_at', direction=firestore.Query.DESCENDING).stream()
        return [doc_to_dict(doc) for doc in games]

    def get_game(self, game_id):
        game_doc = get_document(self.games_ref, game_id)
        if game_doc is None:
            raise NotFoundError("Game not found")
        return doc_to_dict(game_doc)

    def create_game(self, game_data, uploaded_by):
        """
        Register a game (teacher/admin function)
        """
        game_data = game_data or {}
        for field in ('title', 'description', 'game_url'):
            if not game_data.get(field):
                raise ValidationError(f"{field} is required", field=field)
        _validate_parameters(game_data)

        title = game_data['title'].strip()
        self._ensure_title_available(title)

        now = datetime.utcnow()
        new_game = {
            'title': title,
            'description': game_data['description'],
            'game_url': game_data['game_url'],
            'uploaded_by': uploaded_by,
            'created_at': now,
            'updated_at': now
        }
        for field, default in GAME_DEFAULTS.items():
            value = game_data.get(field)
            new_game[field] = default if value is None else value

        _, game_ref = self.games_ref.add(new_game)

        logger.info(f"Created new game: {title} by user {uploaded_by}")

        new_game['id'] = game_ref.id
        return new_game

    def update_game(self, game_id, update_data):
        if get_document(self.games_ref, game_id) is None:
            raise NotFoundError("Game not found")

        allowed_fields = ['title', 'description', 'game_url'] + list(GAME_DEFAULTS)
        filtered_data = {
            k: v for k, v in (update_data or {}).items()
            if k in allowed_fields and v is not None
        }
        _validate_parameters(filtered_data)

        if 'title' in filtered_data:
            filtered_data['title'] = str(filtered_data['title']).strip()
            if not filtered_data['title']:
                raise ValidationError("Title cannot be empty", field='title')
            self._ensure_title_available(filtered_data['title'], game_id)

        filtered_data['updated_at'] = datetime.utcnow()
        self.games_ref.document(game_id).update(filtered_data)

        logger.info(f"Updated game: {game_id}")
        return self.get_game(game_id)

    def delete_game(self, game_id):
        if get_document(self.games_ref, game_id) is None:
            raise NotFoundError("Game not found")

        self.games_ref.document(game_id).delete()
        logger.info(f"Deleted game: {game_id}")
        return {'message': 'Game deleted successfully'}

    def submit_score(self, user_id, game_id, score):
        """
        Record a game score. Only improvement over the stored best earns
        eco points; the stored best never decreases.
        """
        score = validate_score(score)

        result = run_transaction(self.db, self._submit_in_transaction, user_id, game_id, score)

        logger.info(f"Score submitted - User: {user_id}, Game: {game_id}, Score: {score}, Points: {result['points_awarded']}")
        return result

    def _submit_in_transaction(self, transaction, user_id, game_id, score):
        game_doc = get_document(self.games_ref, game_id, transaction=transaction)
        if game_doc is None:
            raise NotFoundError("Game not found")

        user_doc = get_document(self.users_ref, user_id, transaction=transaction)
        if user_doc is None:
            raise NotFoundError("User not found")

        progress_ref = self.progress_ref.document(progress_id(game_id, user_id))
        progress_doc = progress_ref.get(transaction=transaction)

        now = datetime.utcnow()
        if progress_doc.exists:
            progress_data = progress_doc.to_dict()
            previous = progress_data.get('score', 0)
        else:
            progress_data = {
                'game_id': game_id,
                'student_id': user_id,
                'created_at': now
            }
            previous = 0

        best_score = max(previous, score)
        points_awarded = max(0, score - previous)

        progress_data.update({
            'score': best_score,
            'completed': True,
            'updated_at': now
        })
        transaction.set(progress_ref, progress_data)

        user_data = user_doc.to_dict()
        new_total = user_data.get('eco_points', 0)
        unlocked = []
        if points_awarded > 0:
            update_data, unlocked = award_eco_points(user_data, points_awarded)
            update_data['updated_at'] = now
            transaction.update(user_doc.reference, update_data)
            new_total = update_data['eco_points']

        return {
            'message': f"Score submitted successfully! You earned {points_awarded} Eco Points.",
            'points_awarded': points_awarded,
            'best_score': best_score,
            'new_total_points': new_total,
            'unlocked': unlocked
        }

    def get_progress(self, user_id, game_id):
        """
        A user's progress on a game, or a zero record when never played
        """
        if get_document(self.games_ref, game_id) is None:
            raise NotFoundError("Game not found")

        progress_doc = get_document(self.progress_ref, progress_id(game_id, user_id))
        if progress_doc is None:
            return {
                'game_id': game_id,
                'student_id': user_id,
                'score': 0,
                'completed': False
            }
        return doc_to_dict(progress_doc)
