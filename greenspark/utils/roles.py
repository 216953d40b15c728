"""
Roles and capabilities for GreenSpark Platform
"""

from enum import Enum


class Role(str, Enum):
    STUDENT = 'student'
    TEACHER = 'teacher'
    ADMIN = 'admin'

    @classmethod
    def parse(cls, value):
        """Return the Role for a case-insensitive name, or None"""
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


# Operations each role may perform
ROLE_CAPABILITIES = {
    Role.STUDENT: frozenset({
        'challenges:complete',
        'quizzes:submit',
        'games:play',
        'assignments:view_own',
    }),
    Role.TEACHER: frozenset({
        'challenges:complete',
        'quizzes:submit',
        'games:play',
        'students:view',
        'assignments:manage',
        'lessons:manage',
        'media:manage',
        'games:manage',
    }),
    Role.ADMIN: frozenset({
        'challenges:complete',
        'quizzes:submit',
        'games:play',
        'users:manage',
        'challenges:manage',
        'lessons:manage',
        'media:manage',
        'games:manage',
        'database:seed',
    }),
}


def has_capability(role, capability):
    parsed = Role.parse(role)
    if parsed is None:
        return False
    return capability in ROLE_CAPABILITIES[parsed]
