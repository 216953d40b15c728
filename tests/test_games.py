import pytest

from greenspark.services.game_service import GameService, validate_score
from greenspark.utils.error_handler import ConflictError, NotFoundError, ValidationError
from tests.fakes import MockFirestore


class TestGameService:

    def setup_method(self):
        self.db = MockFirestore()
        self.service = GameService(self.db)
        _, user_ref = self.db.collection('users').add({
            'name': 'Kid', 'role': 'student', 'eco_points': 0, 'badges': []
        })
        self.user_id = user_ref.id
        self.game = self.service.create_game({
            'title': 'Eco City',
            'description': 'Build a green city',
            'game_url': '/games/eco-city'
        }, uploaded_by='teacher-1')

    def test_create_game_defaults(self):
        assert self.game['base_points'] == 10
        assert self.game['max_pollution_goal'] == 20
        assert self.game['target_health'] == 90
        assert self.game['game_duration'] == 100
        assert self.game['uploaded_by'] == 'teacher-1'

    def test_duplicate_title_rejected(self):
        with pytest.raises(ConflictError):
            self.service.create_game({
                'title': 'Eco City', 'description': 'again', 'game_url': '/x'
            }, uploaded_by='teacher-1')

    def test_game_url_required(self):
        with pytest.raises(ValidationError):
            self.service.create_game({'title': 'No URL', 'description': 'd'}, uploaded_by='t')

    def test_scores_only_reward_improvement(self):
        first = self.service.submit_score(self.user_id, self.game['id'], 40)
        assert first['points_awarded'] == 40
        assert first['best_score'] == 40
        assert first['new_total_points'] == 40

        lower = self.service.submit_score(self.user_id, self.game['id'], 30)
        assert lower['points_awarded'] == 0
        assert lower['best_score'] == 40
        assert lower['new_total_points'] == 40

        higher = self.service.submit_score(self.user_id, self.game['id'], 70)
        assert higher['points_awarded'] == 30
        assert higher['best_score'] == 70
        assert higher['new_total_points'] == 70
        assert higher['unlocked'] == ['Eco Starter']

        same = self.service.submit_score(self.user_id, self.game['id'], 70)
        assert same['points_awarded'] == 0

    def test_one_progress_record_per_player(self):
        self.service.submit_score(self.user_id, self.game['id'], 5)
        self.service.submit_score(self.user_id, self.game['id'], 9)

        progress = self.db.dump('game_progress')
        assert list(progress) == [f"{self.game['id']}_{self.user_id}"]
        assert progress[f"{self.game['id']}_{self.user_id}"]['completed'] is True

    def test_progress_for_unplayed_game(self):
        progress = self.service.get_progress(self.user_id, self.game['id'])
        assert progress['score'] == 0
        assert progress['completed'] is False

    def test_score_for_missing_game(self):
        with pytest.raises(NotFoundError):
            self.service.submit_score(self.user_id, 'missing', 10)

    @pytest.mark.parametrize('score', [-1, 'ten', None, True, float('inf'), float('nan')])
    def test_invalid_scores(self, score):
        with pytest.raises(ValidationError):
            validate_score(score)

    def test_fractional_score_rounded(self):
        assert validate_score(12.6) == 13
        assert validate_score(0) == 0

    def test_update_game_title_conflict(self):
        other = self.service.create_game({
            'title': 'Ecosystem', 'description': 'd', 'game_url': '/e'
        }, uploaded_by='t')

        with pytest.raises(ConflictError):
            self.service.update_game(other['id'], {'title': 'Eco City'})

        updated = self.service.update_game(other['id'], {'game_duration': 50})
        assert updated['game_duration'] == 50


class TestGameEndpoints:

    def test_games_are_public(self, client, sample_game):
        response = client.get('/api/games')
        assert response.status_code == 200
        assert response.get_json()[0]['title'] == 'Recycle Rush'

        response = client.get(f"/api/games/{sample_game['id']}")
        assert response.get_json()['game_url'] == 'https://games.example.com/recycle-rush'

    def test_student_cannot_create_game(self, client, student):
        _, headers = student
        response = client.post('/api/games', headers=headers, json={
            'title': 'X', 'description': 'd', 'game_url': '/x'
        })
        assert response.status_code == 403

    def test_teacher_creates_game(self, client, teacher):
        teacher_id, headers = teacher
        response = client.post('/api/games', headers=headers, json={
            'title': 'Ecosystem', 'description': 'Balance it', 'game_url': '/eco', 'game_duration': 60
        })
        assert response.status_code == 201
        data = response.get_json()
        assert data['uploaded_by'] == teacher_id
        assert data['game_duration'] == 60

    def test_submit_score_flow(self, client, student, sample_game):
        _, headers = student
        url = f"/api/games/{sample_game['id']}/submit-score"

        assert client.post(url, headers=headers, json={'score': 40}).get_json()['points_awarded'] == 40
        assert client.post(url, headers=headers, json={'score': 70}).get_json()['points_awarded'] == 30
        assert client.post(url, headers=headers, json={'score': 50}).get_json()['points_awarded'] == 0

        progress = client.get(f"/api/games/{sample_game['id']}/progress", headers=headers).get_json()
        assert progress['score'] == 70

    def test_submit_negative_score(self, client, student, sample_game):
        _, headers = student
        response = client.post(f"/api/games/{sample_game['id']}/submit-score", headers=headers, json={'score': -5})
        assert response.status_code == 400

    def test_submit_infinite_score(self, client, student, sample_game):
        _, headers = student
        response = client.post(
            f"/api/games/{sample_game['id']}/submit-score",
            headers=headers,
            data='{"score": Infinity}',
            content_type='application/json'
        )
        assert response.status_code == 400
        assert response.get_json()['error_code'] == 'VALIDATION_ERROR'

    def test_delete_game(self, client, admin, sample_game):
        _, headers = admin
        assert client.delete(f"/api/games/{sample_game['id']}", headers=headers).status_code == 200
        assert client.get(f"/api/games/{sample_game['id']}").status_code == 404
