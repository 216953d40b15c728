"""
HTTP client for the GreenSpark API
"""

import logging

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = 'http://localhost:5000/api'
DEFAULT_TIMEOUT = 10


class ApiError(Exception):
    """Raised for any non-2xx API response"""
    def __init__(self, status_code, message, error_code=None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.error_code = error_code


class GreenSparkClient:
    """
    Thin wrapper over a requests session. Once logged in, every request
    carries the bearer token.
    """

    def __init__(self, base_url=DEFAULT_BASE_URL, token=None, session=None, timeout=DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout
        self.token = None
        self.set_token(token)

    def set_token(self, token):
        self.token = token
        if token:
            self.session.headers['Authorization'] = f'Bearer {token}'
        else:
            self.session.headers.pop('Authorization', None)

    def _request(self, method, path, **kwargs):
        url = f"{self.base_url}/{path.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)
        response = self.session.request(method, url, **kwargs)

        if not response.ok:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get('error') or body.get('message') or response.reason
            logger.warning(f"{method} {url} failed with {response.status_code}: {message}")
            raise ApiError(response.status_code, message, body.get('error_code'))

        if not response.content:
            return None
        return response.json()

    # ============= AUTH =============

    def register(self, name, email, password):
        return self._request('POST', '/auth/register', json={'name': name, 'email': email, 'password': password})

    def login(self, email, password):
        result = self._request('POST', '/auth/login', json={'email': email, 'password': password})
        self.set_token(result['token'])
        return result

    def logout(self):
        result = self._request('POST', '/auth/logout')
        self.set_token(None)
        return result

    def get_profile(self):
        return self._request('GET', '/auth/profile')

    def update_profile(self, **fields):
        return self._request('PUT', '/auth/profile', json=fields)

    # ============= CHALLENGES / LEADERBOARD =============

    def get_challenges(self):
        return self._request('GET', '/challenges')

    def get_badges(self):
        return self._request('GET', '/challenges/badges')

    def complete_challenge(self, challenge_id):
        return self._request('POST', '/challenges/complete', json={'challenge_id': challenge_id})

    def get_leaderboard(self, limit=None):
        params = {'limit': limit} if limit is not None else None
        return self._request('GET', '/leaderboard', params=params)

    def get_my_assignments(self):
        return self._request('GET', '/assignments/my-assignments')

    # ============= LEARN =============

    def get_lessons(self):
        return self._request('GET', '/learn/lessons')

    def get_lesson(self, lesson_id):
        return self._request('GET', f'/learn/lessons/{lesson_id}')

    def submit_quiz(self, quiz_id, answers):
        return self._request('POST', f'/learn/quizzes/{quiz_id}/submit', json={'answers': list(answers)})

    def get_managed_lessons(self):
        return self._request('GET', '/learn/admin/lessons')

    def create_lesson(self, title, category, content, questions=None):
        payload = {'title': title, 'category': category, 'content': content}
        if questions:
            payload['questions'] = questions
        return self._request('POST', '/learn/admin/lessons', json=payload)

    def update_lesson(self, lesson_id, **fields):
        return self._request('PUT', f'/learn/admin/lessons/{lesson_id}', json=fields)

    def delete_lesson(self, lesson_id):
        return self._request('DELETE', f'/learn/admin/lessons/{lesson_id}')

    # ============= GAMES =============

    def get_games(self):
        return self._request('GET', '/games')

    def get_game(self, game_id):
        return self._request('GET', f'/games/{game_id}')

    def create_game(self, **fields):
        return self._request('POST', '/games', json=fields)

    def update_game(self, game_id, **fields):
        return self._request('PUT', f'/games/{game_id}', json=fields)

    def delete_game(self, game_id):
        return self._request('DELETE', f'/games/{game_id}')

    def submit_score(self, game_id, score):
        return self._request('POST', f'/games/{game_id}/submit-score', json={'score': score})

    def get_game_progress(self, game_id):
        return self._request('GET', f'/games/{game_id}/progress')

    # ============= MEDIA =============

    def list_media(self, kind):
        return self._request('GET', f'/media/{kind}')

    def get_media(self, kind, media_id):
        return self._request('GET', f'/media/{kind}/{media_id}')

    def create_media(self, kind, file_path=None, **fields):
        """Create a media item; pass file_path to upload a file instead of a URL"""
        if file_path is None:
            return self._request('POST', f'/media/{kind}', json=fields)
        with open(file_path, 'rb') as fh:
            return self._request('POST', f'/media/{kind}', data=fields, files={'file': fh})

    def update_media(self, kind, media_id, **fields):
        return self._request('PUT', f'/media/{kind}/{media_id}', json=fields)

    def delete_media(self, kind, media_id):
        return self._request('DELETE', f'/media/{kind}/{media_id}')

    # ============= TEACHER =============

    def get_students(self):
        return self._request('GET', '/teacher/students')

    def get_assigned_students(self):
        return self._request('GET', '/teacher/assigned-students')

    def assign_challenge(self, challenge_id, student_id, due_date=None):
        payload = {'challenge_id': challenge_id, 'student_id': student_id}
        if due_date is not None:
            payload['due_date'] = due_date
        return self._request('POST', '/teacher/assignments', json=payload)

    def get_student_assignments(self, student_id):
        return self._request('GET', f'/teacher/students/{student_id}/assignments')

    def verify_assignment(self, assignment_id):
        return self._request('PUT', f'/teacher/assignments/{assignment_id}/verify')

    # ============= ADMIN =============

    def list_users(self):
        return self._request('GET', '/admin/users')

    def create_user(self, name, email, password, role):
        return self._request('POST', '/admin/users', json={
            'name': name, 'email': email, 'password': password, 'role': role
        })

    def update_user(self, user_id, **fields):
        return self._request('PUT', f'/admin/users/{user_id}', json=fields)

    def delete_user(self, user_id):
        return self._request('DELETE', f'/admin/users/{user_id}')

    def create_challenge(self, title, points, description='', icon=None):
        payload = {'title': title, 'points': points, 'description': description}
        if icon:
            payload['icon'] = icon
        return self._request('POST', '/admin/challenges', json=payload)

    def update_challenge(self, challenge_id, **fields):
        return self._request('PUT', f'/admin/challenges/{challenge_id}', json=fields)

    def delete_challenge(self, challenge_id):
        return self._request('DELETE', f'/admin/challenges/{challenge_id}')

    def seed_database(self):
        return self._request('POST', '/admin/seed')
