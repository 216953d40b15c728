"""
Mini-game simulations played on the client.

Each session object owns its state; nothing is shared between sessions.
A session moves ready -> playing -> finished, advances one timer interval
per tick() and submits its final score through the API client.
"""

import math
import random
import logging

logger = logging.getLogger(__name__)

READY = 'ready'
PLAYING = 'playing'
FINISHED = 'finished'


class GameSession:
    name = 'game'

    def __init__(self, rng=None):
        self.rng = rng or random.Random()
        self.status = READY

    @property
    def is_playing(self):
        return self.status == PLAYING

    def start(self):
        self.reset()
        self.status = PLAYING
        logger.debug(f"{self.name} started")

    def reset(self):
        raise NotImplementedError

    def tick(self):
        raise NotImplementedError

    def final_score(self):
        raise NotImplementedError

    def finish(self):
        self.status = FINISHED
        logger.debug(f"{self.name} finished with score {self.final_score()}")

    def submit(self, client, game_id):
        """Post the final score, rounded and floored at zero"""
        if self.status != FINISHED:
            raise RuntimeError(f"{self.name} is not finished")
        score = max(0, int(round(self.final_score())))
        return client.submit_score(game_id, score)


# ============= RECYCLE RUSH =============

WASTE_ITEMS = (
    ('Plastic Bottle', 'Recycle'),
    ('Banana Peel', 'Compost'),
    ('Glass Jar', 'Recycle'),
    ('Paper Towel', 'Compost'),
    ('Old Newspaper', 'Recycle'),
    ('Apple Core', 'Compost'),
    ('Broken Plate', 'Trash'),
    ('Plastic Bag', 'Trash'),
    ('Aluminum Can', 'Recycle'),
    ('Egg Shells', 'Compost'),
)

BINS = ('Recycle', 'Compost', 'Trash')


class RecycleRush(GameSession):
    """Sort falling waste into the right bin before time runs out"""

    name = 'Recycle Rush'
    duration = 30

    def __init__(self, rng=None):
        super().__init__(rng)
        self.reset()

    def reset(self):
        self.score = 0
        self.time_left = self.duration
        self.current_item = None

    def tick(self):
        if not self.is_playing:
            return
        self.time_left -= 1
        self.current_item = self.rng.choice(WASTE_ITEMS)
        if self.time_left <= 0:
            self.time_left = 0
            self.current_item = None
            self.finish()

    def sort_into(self, bin_name):
        """Drop the current item into a bin; True when it was the right one"""
        if not self.is_playing or self.current_item is None:
            return False
        if bin_name not in BINS:
            raise ValueError(f"Unknown bin: {bin_name}")

        correct = bin_name == self.current_item[1]
        if correct:
            self.score += 1
        self.current_item = None
        return correct

    def final_score(self):
        return self.score


# ============= ECO CITY =============

GRID_WIDTH = 16
GRID_HEIGHT = 12

FIELD = 0
FOREST = 1
CLEAN_RIVER = 2
POLLUTED_RIVER = 3
PLANTED_TREE = 5

INITIAL_RESOURCES = {
    'wealth': 500,
    'population': 50,
    'carbon': 10,
    'health': 90,
    'energy': 100,
    'water': 100,
}


class EcoCitySimulator(GameSession):
    """
    Run a city for a number of years. Each tick is one year; the mayor
    walks the map planting trees on fields and cleaning polluted rivers.
    """

    name = 'Eco City Simulator'
    start_position = (8, 6)

    def __init__(self, game_duration=100, rng=None):
        super().__init__(rng)
        self.game_duration = game_duration
        self.reset()

    def reset(self):
        self.resources = dict(INITIAL_RESOURCES)
        self.year = 1
        self.position = self.start_position
        self.grid = self._generate_map()
        self.message = 'Welcome, Mayor!'

    def _generate_map(self):
        grid = []
        for z in range(GRID_HEIGHT):
            row = []
            for x in range(GRID_WIDTH):
                tile = FIELD
                if self.rng.random() < 0.15:
                    tile = FOREST
                if self.rng.random() < 0.05 and z > 5:
                    tile = POLLUTED_RIVER
                row.append(tile)
            grid.append(row)

        # The mayor always starts on open field
        x, z = self.start_position
        grid[z][x] = FIELD
        return grid

    def tile_at(self, x, z):
        return self.grid[z][x]

    def move(self, dx, dz):
        x, z = self.position
        x = max(0, min(GRID_WIDTH - 1, x + dx))
        z = max(0, min(GRID_HEIGHT - 1, z + dz))
        self.position = (x, z)
        return self.position

    def tick(self):
        if not self.is_playing:
            return

        r = self.resources
        r['health'] = max(0, r['health'] - r['carbon'] * 0.05)
        r['energy'] = max(0, r['energy'] - r['population'] * 0.5)
        r['water'] = max(0, r['water'] - r['population'] * 0.4)
        r['carbon'] = min(100, r['carbon'] + r['wealth'] * 0.01 + r['population'] * 0.02)

        if r['health'] <= 0:
            self.message = 'Ecosystem Collapse! Mission Failed.'
            self.finish()
        elif self.year >= self.game_duration:
            self.message = 'Sustainable Future Achieved! Mission Success.'
            self.finish()
        else:
            self.message = f'Year {self.year}: Monitoring City Status...'

        self.year += 1

    def plant(self):
        """Plant a tree on the current field tile"""
        if not self.is_playing:
            return False
        x, z = self.position
        if self.grid[z][x] != FIELD:
            self.message = 'Cannot plant here. Move to an open field.'
            return False

        self.grid[z][x] = PLANTED_TREE
        self.resources['wealth'] += 20
        self.resources['health'] = min(100, self.resources['health'] + 5)
        self.message = f'Planted a tree at ({x}, {z})! Health +5.'
        return True

    def clean(self):
        """Clean the polluted river under the mayor"""
        if not self.is_playing:
            return False
        x, z = self.position
        if self.grid[z][x] != POLLUTED_RIVER:
            self.message = 'No pollution found to clean here.'
            return False

        self.grid[z][x] = CLEAN_RIVER
        self.resources['wealth'] += 15
        self.resources['carbon'] = max(0, self.resources['carbon'] - 10)
        self.message = f'Cleaned pollution at ({x}, {z})! Carbon -10.'
        return True

    def final_score(self):
        r = self.resources
        return r['wealth'] + r['health'] * 5 - r['carbon'] * 5


# ============= ECOSYSTEM =============

# Pollution removed by each action
ACTION_POINTS = {
    'plant_trees': 1,
    'purify_water': 2,
}


class EcosystemSimulator(GameSession):
    """Keep an ecosystem healthy against rising pollution for a minute"""

    name = 'Ecosystem Simulator'
    duration = 60
    initial_health = 75
    initial_pollution = 10

    def __init__(self, rng=None):
        super().__init__(rng)
        self.reset()

    def reset(self):
        self.score = 0
        self.time_left = self.duration
        self.health = self.initial_health
        self.pollution = self.initial_pollution

    def tick(self):
        if not self.is_playing:
            return

        health = self.health
        self.time_left -= 1
        self.health = max(0, health - self.pollution * 0.1)
        # Pollution grows slower while the ecosystem is healthy
        self.pollution = min(100, self.pollution + 1 + (100 - health) * 0.05)
        self.score += math.floor(health / 10)

        if self.time_left <= 0 or self.health <= 0:
            self.time_left = max(0, self.time_left)
            self.finish()

    def _act(self):
        if not self.is_playing:
            return False
        self.score += 5
        return True

    def plant_trees(self):
        if not self._act():
            return False
        self.pollution = max(0, self.pollution - ACTION_POINTS['plant_trees'])
        self.health = min(100, self.health + 2)
        return True

    def purify_water(self):
        if not self._act():
            return False
        self.pollution = max(0, self.pollution - ACTION_POINTS['purify_water'] * 2)
        return True

    def educate(self):
        """Costs health now for a small pollution penalty"""
        if not self._act():
            return False
        self.pollution = min(100, self.pollution + 1)
        self.health = max(0, self.health - 5)
        return True

    def final_score(self):
        return self.score + self.time_left * 10
