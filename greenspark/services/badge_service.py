"""
Badge Service for GreenSpark Platform
Badges are named milestones unlocked once eco points cross a threshold
"""

import logging

logger = logging.getLogger(__name__)

# (eco points required, badge name), lowest first
BADGE_THRESHOLDS = (
    (50, 'Eco Starter'),
    (100, 'Eco Hero'),
    (200, 'Eco Champion'),
)

def get_all_badges():
    return [
        {'name': name, 'eco_points_required': threshold}
        for threshold, name in BADGE_THRESHOLDS
    ]

def evaluate_badges(eco_points, current_badges):
    """
    Check every threshold against the eco points total.

    Each check is independent and idempotent: a badge already held is never
    added twice and a single jump can unlock several badges.
    Returns (badges, unlocked) as new lists.
    """
    badges = list(current_badges or [])
    unlocked = []

    for threshold, name in BADGE_THRESHOLDS:
        if eco_points >= threshold and name not in badges:
            badges.append(name)
            unlocked.append(name)

    if unlocked:
        logger.info(f"Unlocked badges {unlocked} at {eco_points} eco points")

    return badges, unlocked

def award_eco_points(user_data, points):
    """
    Add points to a user document dict and evaluate badges.
    Returns the fields to write and the newly unlocked badges.
    """
    eco_points = user_data.get('eco_points', 0) + points
    badges, unlocked = evaluate_badges(eco_points, user_data.get('badges', []))
    return {'eco_points': eco_points, 'badges': badges}, unlocked
