"""
Challenge Service for GreenSpark Platform
Handles eco-challenges, completion tracking, and reward distribution
"""

from datetime import datetime
import logging

from greenspark.services.badge_service import award_eco_points
from greenspark.utils.error_handler import (
    AlreadyCompletedError,
    NotFoundError,
    ValidationError,
)
from greenspark.utils.firestore_utils import doc_to_dict, get_document, run_transaction

logger = logging.getLogger(__name__)

DEFAULT_ICON = '🌍'

def assignment_id(challenge_id, student_id):
    """Assignments are keyed by their (challenge, student) pair"""
    return f"{challenge_id}_{student_id}"

def _validate_points(points):
    if isinstance(points, bool) or not isinstance(points, int) or points <= 0:
        raise ValidationError("Points must be a positive integer", field='points')
    return points

class ChallengeService:
    def __init__(self, db):
        self.db = db
        self.challenges_ref = db.collection('challenges')
        self.users_ref = db.collection('users')
        self.assignments_ref = db.collection('assignments')

    def get_all_challenges(self):
        """
        Get all available challenges
        """
        challenges = [doc_to_dict(doc) for doc in self.challenges_ref.stream()]

        # Sort by creation date
        challenges.sort(key=lambda x: x.get('created_at') or datetime.min)
        return challenges

    def get_challenge(self, challenge_id):
        challenge_doc = get_document(self.challenges_ref, challenge_id)
        if challenge_doc is None:
            raise NotFoundError("Challenge not found")
        return doc_to_dict(challenge_doc)

    def create_challenge(self, title, points, description='', icon=None):
        """
        Create a new challenge (admin function)
        """
        now = datetime.utcnow()
        challenge_data = {
            'title': title,
            'description': description or '',
            'points': _validate_points(points),
            'icon': icon or DEFAULT_ICON,
            'created_at': now,
            'updated_at': now
        }

        _, challenge_ref = self.challenges_ref.add(challenge_data)

        logger.info(f"Created new challenge: {title}")

        challenge_data['id'] = challenge_ref.id
        return challenge_data

    def update_challenge(self, challenge_id, update_data):
        """
        Update title/description/points/icon of a challenge (admin function)
        """
        if get_document(self.challenges_ref, challenge_id) is None:
            raise NotFoundError("Challenge not found")

        allowed_fields = ['title', 'description', 'points', 'icon']
        filtered_data = {
            k: v for k, v in (update_data or {}).items()
            if k in allowed_fields and v is not None
        }

        if 'points' in filtered_data:
            _validate_points(filtered_data['points'])
        if 'title' in filtered_data and not filtered_data['title']:
            raise ValidationError("Title cannot be empty", field='title')

        filtered_data['updated_at'] = datetime.utcnow()
        self.challenges_ref.document(challenge_id).update(filtered_data)

        logger.info(f"Updated challenge: {challenge_id}")
        return self.get_challenge(challenge_id)

    def delete_challenge(self, challenge_id):
        if get_document(self.challenges_ref, challenge_id) is None:
            raise NotFoundError("Challenge not found")

        self.challenges_ref.document(challenge_id).delete()
        logger.info(f"Deleted challenge: {challenge_id}")
        return {'message': 'Challenge deleted successfully'}

    def complete_challenge(self, user_id, challenge_id):
        """
        Mark a challenge as completed for a user, award its points and
        evaluate badges. Reads and writes happen in one transaction.
        """
        if not challenge_id:
            raise ValidationError("challenge_id is required", field='challenge_id')

        result = run_transaction(self.db, self._complete_in_transaction, user_id, challenge_id)

        logger.info(f"Challenge completed - User: {user_id}, Challenge: {challenge_id}, Eco points: {result['eco_points']}")
        return result

    def _complete_in_transaction(self, transaction, user_id, challenge_id):
        challenge_doc = get_document(self.challenges_ref, challenge_id, transaction=transaction)
        if challenge_doc is None:
            raise NotFoundError("Challenge not found")

        user_doc = get_document(self.users_ref, user_id, transaction=transaction)
        if user_doc is None:
            raise NotFoundError("User not found")

        assignment_ref = self.assignments_ref.document(assignment_id(challenge_id, user_id))
        assignment_doc = assignment_ref.get(transaction=transaction)

        user_data = user_doc.to_dict()
        completed = list(user_data.get('completed') or [])
        if challenge_id in completed:
            raise AlreadyCompletedError()

        points = challenge_doc.to_dict().get('points', 0)
        update_data, unlocked = award_eco_points(user_data, points)
        completed.append(challenge_id)
        update_data['completed'] = completed
        update_data['updated_at'] = datetime.utcnow()

        transaction.update(user_doc.reference, update_data)

        if assignment_doc.exists and assignment_doc.to_dict().get('status') == 'assigned':
            transaction.update(assignment_ref, {
                'status': 'completed',
                'updated_at': datetime.utcnow()
            })

        return {
            'eco_points': update_data['eco_points'],
            'badges': update_data['badges'],
            'unlocked': unlocked
        }

    def seed_challenges(self):
        """
        Seed database with initial challenge data
        """
        sample_challenges = [
            {
                'title': 'Plant a Tree',
                'description': 'Plant a sapling in your school or neighbourhood and look after it',
                'points': 50,
                'icon': '🌱'
            },
            {
                'title': 'Plastic-Free Day',
                'description': 'Avoid using single-use plastics for one full day',
                'points': 20,
                'icon': '🛍️'
            },
            {
                'title': 'Switch Off Challenge',
                'description': 'Turn off lights and unplug chargers when not in use for a week',
                'points': 30,
                'icon': '💡'
            },
            {
                'title': 'Water Warrior',
                'description': 'Take shorter showers and report any leaky taps at home or school',
                'points': 25,
                'icon': '💧'
            },
            {
                'title': 'Recycling Champion',
                'description': 'Sort and recycle all household waste for a month',
                'points': 60,
                'icon': '♻️'
            }
        ]

        for challenge_data in sample_challenges:
            self.create_challenge(**challenge_data)

        logger.info("Seeded challenge database with sample data")
        return len(sample_challenges)
