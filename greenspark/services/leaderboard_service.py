"""
Leaderboard Service for GreenSpark Platform
Ranks users by eco points
"""

import logging

from firebase_admin import firestore

logger = logging.getLogger(__name__)

MAX_LEADERBOARD_SIZE = 10

class LeaderboardService:
    def __init__(self, db):
        self.db = db
        self.users_ref = db.collection('users')

    def get_leaderboard(self, limit=MAX_LEADERBOARD_SIZE):
        """
        Get the top users by eco points, highest first.
        The limit is clamped to 1..10.
        """
        limit = max(1, min(int(limit), MAX_LEADERBOARD_SIZE))

        users_query = self.users_ref.order_by(
            'eco_points', direction=firestore.Query.DESCENDING
        ).limit(limit)

        entries = []
        for rank, user_doc in enumerate(users_query.stream(), 1):
            user_data = user_doc.to_dict()
            entries.append({
                'rank': rank,
                'id': user_doc.id,
                'name': user_data.get('name', 'EcoWarrior'),
                'eco_points': user_data.get('eco_points', 0),
                'badges': user_data.get('badges', []),
                'role': user_data.get('role')
            })

        logger.debug(f"Built leaderboard with {len(entries)} entries")
        return entries
