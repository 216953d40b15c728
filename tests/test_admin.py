class TestAdminUsers:

    def test_list_users_hides_hashes(self, client, admin, student):
        _, headers = admin
        response = client.get('/api/admin/users', headers=headers)

        assert response.status_code == 200
        users = response.get_json()
        assert len(users) == 2
        assert all('password_hash' not in u for u in users)

    def test_non_admin_forbidden(self, client, teacher):
        _, headers = teacher
        assert client.get('/api/admin/users', headers=headers).status_code == 403

    def test_create_user_with_role(self, client, admin):
        _, headers = admin
        response = client.post('/api/admin/users', headers=headers, json={
            'name': 'New Teacher', 'email': 'NT@example.com', 'password': 'pw', 'role': 'Teacher'
        })

        assert response.status_code == 201
        data = response.get_json()
        assert data['role'] == 'teacher'
        assert data['email'] == 'nt@example.com'

    def test_create_user_invalid_role(self, client, admin):
        _, headers = admin
        response = client.post('/api/admin/users', headers=headers, json={
            'name': 'X', 'email': 'x@example.com', 'password': 'pw', 'role': 'wizard'
        })
        assert response.status_code == 400

    def test_create_user_requires_role(self, client, admin):
        _, headers = admin
        response = client.post('/api/admin/users', headers=headers, json={
            'name': 'X', 'email': 'x@example.com', 'password': 'pw'
        })
        assert response.status_code == 400

    def test_update_user_role(self, client, admin, student):
        _, headers = admin
        student_id, _ = student
        response = client.put(f'/api/admin/users/{student_id}', headers=headers, json={'role': 'teacher'})

        assert response.status_code == 200
        assert response.get_json()['role'] == 'teacher'

    def test_create_user_non_string_email(self, client, admin):
        _, headers = admin
        response = client.post('/api/admin/users', headers=headers, json={
            'name': 'X', 'email': 99, 'password': 'pw', 'role': 'teacher'
        })
        assert response.status_code == 400

    def test_update_user_non_string_role(self, client, admin, student):
        _, headers = admin
        student_id, _ = student
        response = client.put(f'/api/admin/users/{student_id}', headers=headers, json={'role': 3})
        assert response.status_code == 400

    def test_update_missing_user(self, client, admin):
        _, headers = admin
        assert client.put('/api/admin/users/ghost', headers=headers, json={'name': 'G'}).status_code == 404

    def test_delete_user(self, client, admin, student):
        _, headers = admin
        student_id, _ = student

        assert client.delete(f'/api/admin/users/{student_id}', headers=headers).status_code == 200
        assert client.delete(f'/api/admin/users/{student_id}', headers=headers).status_code == 404

    def test_admin_cannot_delete_self(self, client, admin):
        admin_id, headers = admin
        assert client.delete(f'/api/admin/users/{admin_id}', headers=headers).status_code == 400


class TestAdminChallenges:

    def test_challenge_crud(self, client, admin):
        _, headers = admin

        response = client.post('/api/admin/challenges', headers=headers, json={'title': 'Bike Week', 'points': 40})
        assert response.status_code == 201
        challenge_id = response.get_json()['id']

        response = client.put(f'/api/admin/challenges/{challenge_id}', headers=headers, json={'points': 45})
        assert response.get_json()['points'] == 45

        assert len(client.get('/api/admin/challenges', headers=headers).get_json()) == 1

        assert client.delete(f'/api/admin/challenges/{challenge_id}', headers=headers).status_code == 200
        assert client.get('/api/challenges').get_json() == []

    def test_challenge_requires_positive_points(self, client, admin):
        _, headers = admin
        response = client.post('/api/admin/challenges', headers=headers, json={'title': 'Zero', 'points': 0})
        assert response.status_code == 400

    def test_teacher_cannot_create_challenge(self, client, teacher):
        _, headers = teacher
        response = client.post('/api/admin/challenges', headers=headers, json={'title': 'T', 'points': 5})
        assert response.status_code == 403


class TestSeed:

    def test_seed_in_development(self, client, admin):
        _, headers = admin
        response = client.post('/api/admin/seed', headers=headers)

        assert response.status_code == 200
        assert response.get_json()['challenges'] == 5
        assert len(client.get('/api/learn/lessons').get_json()) == 2

    def test_seed_blocked_outside_development(self, client, app, admin):
        app.config['ENVIRONMENT'] = 'production'
        _, headers = admin
        response = client.post('/api/admin/seed', headers=headers)
        assert response.status_code == 403
        assert response.get_json()['error_code'] == 'PERMISSION_ERROR'


class TestErrors:

    def test_unknown_endpoint(self, client):
        response = client.get('/api/does-not-exist')
        assert response.status_code == 404
        assert response.get_json()['error'] == 'Endpoint not found'

    def test_method_not_allowed(self, client):
        assert client.delete('/api/leaderboard').status_code == 405

    def test_empty_body_rejected(self, client, student):
        _, headers = student
        response = client.post('/api/challenges/complete', headers=headers)
        assert response.status_code == 400
