import pytest

from greenspark.utils.roles import Role, has_capability


class TestRoles:

    @pytest.mark.parametrize('value,expected', [
        ('student', Role.STUDENT),
        ('Teacher', Role.TEACHER),
        (' ADMIN ', Role.ADMIN),
        ('wizard', None),
        (None, None),
    ])
    def test_parse(self, value, expected):
        assert Role.parse(value) is expected

    def test_capabilities(self):
        assert has_capability('student', 'challenges:complete')
        assert not has_capability('student', 'media:manage')
        assert has_capability('teacher', 'assignments:manage')
        assert not has_capability('teacher', 'users:manage')
        assert has_capability('ADMIN', 'database:seed')
        assert not has_capability('ghost', 'games:play')


class TestAccessErrors:

    def test_missing_token_is_auth_error(self, client):
        response = client.get('/api/assignments/my-assignments')
        assert response.status_code == 401
        data = response.get_json()
        assert data['error_code'] == 'AUTH_ERROR'
        assert data['error'] == 'Authorization header required'

    def test_bad_token_is_auth_error(self, client):
        response = client.get('/api/auth/profile', headers={'Authorization': 'Bearer not-a-token'})
        assert response.status_code == 401
        assert response.get_json()['error_code'] == 'AUTH_ERROR'

    def test_wrong_role_is_permission_error(self, client, student):
        _, headers = student
        response = client.get('/api/teacher/students', headers=headers)
        assert response.status_code == 403
        data = response.get_json()
        assert data['error_code'] == 'PERMISSION_ERROR'
        assert data['status'] == 'error'

    def test_missing_capability_is_permission_error(self, client, teacher):
        _, headers = teacher
        response = client.get('/api/admin/users', headers=headers)
        assert response.status_code == 403
        assert response.get_json()['error_code'] == 'PERMISSION_ERROR'
