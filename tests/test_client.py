import random
from unittest.mock import Mock

import pytest

from greenspark.client import (
    ApiError,
    EcoCitySimulator,
    EcosystemSimulator,
    GreenSparkClient,
    RecycleRush,
)
from greenspark.client import games


def _response(status_code=200, json_data=None, reason='OK'):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason
    response.content = b'{}' if json_data is not None else b''
    response.json.return_value = json_data
    return response


@pytest.fixture
def session(mocker):
    session = mocker.Mock()
    session.headers = {}
    return session


class TestGreenSparkClient:

    def test_login_sets_bearer_header(self, session):
        session.request.return_value = _response(json_data={'token': 'abc', 'role': 'student', 'name': 'Sam'})
        client = GreenSparkClient('http://api.test/api/', session=session)

        client.login('sam@example.com', 'pw')

        session.request.assert_called_once_with(
            'POST', 'http://api.test/api/auth/login',
            json={'email': 'sam@example.com', 'password': 'pw'}, timeout=10
        )
        assert session.headers['Authorization'] == 'Bearer abc'

    def test_logout_clears_token(self, session):
        session.request.return_value = _response(json_data={'message': 'ok'})
        client = GreenSparkClient('http://api.test/api', token='abc', session=session)

        client.logout()

        assert 'Authorization' not in session.headers
        assert client.token is None

    def test_error_response_raises(self, session):
        session.request.return_value = _response(
            409, {'error': 'User already exists', 'error_code': 'CONFLICT'}, reason='CONFLICT'
        )
        client = GreenSparkClient('http://api.test/api', session=session)

        with pytest.raises(ApiError) as excinfo:
            client.register('Sam', 'sam@example.com', 'pw')

        assert excinfo.value.status_code == 409
        assert excinfo.value.message == 'User already exists'
        assert excinfo.value.error_code == 'CONFLICT'

    def test_submit_score_path(self, session):
        session.request.return_value = _response(json_data={'points_awarded': 5})
        client = GreenSparkClient('http://api.test/api', token='abc', session=session)

        client.submit_score('game-1', 5)

        session.request.assert_called_once_with(
            'POST', 'http://api.test/api/games/game-1/submit-score', json={'score': 5}, timeout=10
        )


class TestRecycleRush:

    def test_full_round(self):
        game = RecycleRush(rng=random.Random(1))
        assert game.status == games.READY

        game.start()
        correct = 0
        while game.is_playing:
            game.tick()
            if game.current_item is not None:
                name, category = game.current_item
                correct += game.sort_into(category)

        assert game.status == games.FINISHED
        assert game.time_left == 0
        assert game.final_score() == correct == 29

    def test_wrong_bin(self):
        game = RecycleRush(rng=random.Random(2))
        game.start()
        game.tick()
        name, category = game.current_item
        wrong = next(b for b in games.BINS if b != category)

        assert game.sort_into(wrong) is False
        assert game.score == 0
        # Item is consumed either way
        assert game.sort_into(category) is False

    def test_actions_ignored_before_start(self):
        game = RecycleRush()
        game.tick()
        assert game.time_left == 30
        assert game.sort_into('Recycle') is False

    def test_submit_requires_finished_game(self):
        with pytest.raises(RuntimeError):
            RecycleRush().submit(Mock(), 'game-1')


class TestEcoCitySimulator:

    def test_initial_state(self):
        city = EcoCitySimulator(rng=random.Random(3))
        assert city.resources['wealth'] == 500
        assert city.tile_at(8, 6) == games.FIELD
        assert len(city.grid) == games.GRID_HEIGHT
        assert len(city.grid[0]) == games.GRID_WIDTH
        assert city.final_score() == 500 + 90 * 5 - 10 * 5

    def test_one_year(self):
        city = EcoCitySimulator(rng=random.Random(3))
        city.start()
        city.tick()

        r = city.resources
        assert r['health'] == pytest.approx(89.5)
        assert r['energy'] == pytest.approx(75)
        assert r['water'] == pytest.approx(80)
        assert r['carbon'] == pytest.approx(16)
        assert city.year == 2

    def test_plant_on_field(self):
        city = EcoCitySimulator(rng=random.Random(3))
        city.start()

        assert city.plant() is True
        assert city.tile_at(8, 6) == games.PLANTED_TREE
        assert city.resources['wealth'] == 520
        assert city.resources['health'] == 95
        # Planted tile is no longer a field
        assert city.plant() is False

    def test_clean_polluted_river(self):
        city = EcoCitySimulator(rng=random.Random(3))
        city.start()
        city.grid[11][0] = games.POLLUTED_RIVER
        city.move(-20, 20)

        assert city.position == (0, 11)
        assert city.clean() is True
        assert city.tile_at(0, 11) == games.CLEAN_RIVER
        assert city.resources['carbon'] == 0
        assert city.resources['wealth'] == 515

    def test_ends_after_duration(self):
        city = EcoCitySimulator(game_duration=3, rng=random.Random(3))
        city.start()
        for _ in range(3):
            city.tick()
        assert city.status == games.FINISHED

        client = Mock()
        city.submit(client, 'game-1')
        score = client.submit_score.call_args[0][1]
        assert isinstance(score, int)
        assert score >= 0


class TestEcosystemSimulator:

    def test_first_tick(self):
        eco = EcosystemSimulator()
        eco.start()
        eco.tick()

        assert eco.health == pytest.approx(74)
        assert eco.pollution == pytest.approx(12.25)
        assert eco.score == 7
        assert eco.time_left == 59

    def test_actions_score_five(self):
        eco = EcosystemSimulator()
        eco.start()
        eco.plant_trees()
        eco.purify_water()

        assert eco.score == 10
        assert eco.pollution == 5
        assert eco.health == 77

    def test_final_score_includes_time_bonus(self):
        eco = EcosystemSimulator()
        eco.start()
        eco.educate()
        assert eco.final_score() == 5 + 60 * 10

    def test_runs_to_completion(self):
        eco = EcosystemSimulator()
        eco.start()
        while eco.is_playing:
            eco.tick()

        assert eco.status == games.FINISHED
        assert eco.final_score() >= 0
