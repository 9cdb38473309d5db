"""Tests for the per-tick simulation."""

import random

import pytest

from lanecross.config.settings import ObstacleSettings, ScoringSettings, Settings
from lanecross.core.events import EventBus, EventType
from lanecross.game import simulation as simulation_module
from lanecross.game.entities import BLUE_GEM, GREEN_GEM, STAR
from lanecross.game.simulation import (
    DEFAULT_POPULATION,
    GOAL_COLOR,
    HIT_COLOR,
    HUD_SCALE,
    PICKUP_COLOR,
    GameState,
    Simulation,
    build_collectables,
)
from lanecross.graphics.primitives import text_size
from tests.conftest import RecordingCanvas, hide_collectables, park_obstacles


def _first(sim, kind):
    return next(c for c in sim.state.collectables if c.kind is kind)


def _place(entity, col, row):
    entity.set_col(col)
    entity.set_row(row)


@pytest.fixture
def placements(monkeypatch):
    """Record every call to place_collectables made by the simulation."""
    calls = []
    real = simulation_module.place_collectables

    def spy(collectables, grid, rng):
        calls.append(len(collectables))
        return real(collectables, grid, rng)

    monkeypatch.setattr(simulation_module, "place_collectables", spy)
    return calls


class TestSetup:

    def test_initial_state(self, make_sim):
        sim = make_sim(obstacle_count=3)
        assert sim.score == 0
        assert sim.high_score == 0
        assert (sim.player.col, sim.player.row) == (2, 5)
        assert len(sim.state.obstacles) == 3
        assert len(sim.state.collectables) == 7
        assert sim.state.texts == []

    def test_build_collectables_catalog_order(self, grid):
        collectables = build_collectables(grid, {"star": 1, "blue_gem": 2, "green_gem": 1})
        assert [c.kind for c in collectables] == [BLUE_GEM, BLUE_GEM, GREEN_GEM, STAR]

    def test_build_collectables_unknown_kind(self, grid):
        with pytest.raises(KeyError):
            build_collectables(grid, {"ruby": 1})

    def test_too_many_collectables(self, grid, rng):
        with pytest.raises(ValueError):
            Simulation.create(grid, rng, population={"blue_gem": 16})

    def test_from_settings(self):
        settings = Settings(
            seed=3,
            obstacles=ObstacleSettings(count=2, min_speed=100, max_speed=120),
            scoring=ScoringSettings(goal_bonus=7),
            collectables={"star": 2},
        )
        sim = Simulation.from_settings(settings)
        assert len(sim.state.obstacles) == 2
        assert all(100 <= o.speed <= 120 for o in sim.state.obstacles)
        assert [c.kind for c in sim.state.collectables] == [STAR, STAR]
        assert sim.goal_bonus == 7

    def test_from_settings_seed_is_reproducible(self):
        settings = Settings(seed=11)
        a = Simulation.from_settings(settings)
        b = Simulation.from_settings(settings)
        assert [(c.col, c.row, c.is_visible) for c in a.state.collectables] == \
            [(c.col, c.row, c.is_visible) for c in b.state.collectables]


class TestInput:

    def test_move_applied_on_next_tick(self, make_sim):
        sim = make_sim()
        sim.queue_input("left")
        assert sim.pending_move == "left"
        assert sim.player.col == 2
        sim.tick(0.016)
        assert sim.player.col == 1
        assert sim.pending_move is None

    def test_later_move_wins(self, make_sim):
        sim = make_sim()
        sim.queue_input("left")
        sim.queue_input("right")
        sim.queue_input("jump")
        assert sim.pending_move == "right"
        sim.tick(0.016)
        assert sim.player.col == 3

    def test_no_move_without_input(self, make_sim):
        sim = make_sim()
        sim.tick(0.016)
        sim.tick(0.016)
        assert (sim.player.col, sim.player.row) == (2, 5)


class TestPickup:

    def test_collect_green_gem(self, make_sim):
        sim = make_sim()
        hide_collectables(sim)
        gem = _first(sim, GREEN_GEM)
        _place(gem, 2, 2)
        gem.is_visible = True
        _place(sim.player, 2, 2)

        sim.tick(0.016)

        assert sim.score == 3
        assert not gem.is_visible
        assert len(sim.state.texts) == 1
        text = sim.state.texts[0]
        assert text.text == "+3"
        assert text.remaining_duration == 0.5
        assert text.color == PICKUP_COLOR
        assert (text.col, text.row) == (2, 2)

    def test_one_pickup_per_tick(self, make_sim):
        sim = make_sim()
        hide_collectables(sim)
        gem = _first(sim, BLUE_GEM)
        star = _first(sim, STAR)
        for item in (gem, star):
            _place(item, 1, 3)
            item.is_visible = True
        _place(sim.player, 1, 3)

        sim.tick(0.016)
        assert sim.score == 1
        assert not gem.is_visible
        assert star.is_visible

        sim.tick(0.016)
        assert sim.score == 11
        assert not star.is_visible

    def test_hidden_item_is_not_collected(self, make_sim):
        sim = make_sim()
        hide_collectables(sim)
        _place(_first(sim, STAR), 2, 2)
        _place(sim.player, 2, 2)
        sim.tick(0.016)
        assert sim.score == 0
        assert sim.state.texts == []


class TestHit:

    def _setup_hit(self, make_sim, score, high_score):
        sim = make_sim(obstacle_count=1)
        hide_collectables(sim)
        _place(sim.player, 2, 2)
        bug = sim.state.obstacles[0]
        bug.speed = 0.0
        bug.set_row(2)
        bug.move_to_x(sim.player.x)
        sim.state.game.score = score
        sim.state.game.high_score = high_score
        return sim

    def test_hit_resets_round(self, make_sim, placements):
        sim = self._setup_hit(make_sim, score=7, high_score=4)
        placements.clear()

        sim.tick(0.016)

        assert sim.score == 0
        assert sim.high_score == 7
        assert (sim.player.col, sim.player.row) == (2, 5)
        assert placements == [7]
        text = sim.state.texts[-1]
        assert text.text == "!!!"
        assert text.color == HIT_COLOR
        assert (text.col, text.row) == (2, 2)

    def test_high_score_never_decreases(self, make_sim):
        sim = self._setup_hit(make_sim, score=2, high_score=10)
        sim.tick(0.016)
        assert sim.score == 0
        assert sim.high_score == 10

    def test_pickup_and_hit_in_same_tick(self, make_sim):
        sim = self._setup_hit(make_sim, score=0, high_score=0)
        gem = _first(sim, GREEN_GEM)
        _place(gem, 2, 2)
        gem.is_visible = True

        sim.tick(0.016)

        # Pickup counts toward the banked score
        assert sim.high_score == 3
        assert sim.score == 0
        assert [t.text for t in sim.state.texts] == ["+3", "!!!"]

    def test_hit_events(self, grid, rng):
        bus = EventBus()
        sim = Simulation.create(grid, rng, obstacle_count=1, event_bus=bus)
        hide_collectables(sim)
        _place(sim.player, 1, 1)
        bug = sim.state.obstacles[0]
        bug.speed = 0.0
        bug.set_row(1)
        bug.move_to_x(sim.player.x + 20)
        sim.state.game.score = 5

        sim.tick(0.016)

        hits = bus.get_history(EventType.PLAYER_HIT)
        assert len(hits) == 1
        assert hits[0].data == {"score": 5, "lane": 1}
        assert bus.get_history(EventType.HIGH_SCORE)[0].data == {"high_score": 5}


class TestGoal:

    def test_goal_awards_bonus(self, make_sim, placements):
        sim = make_sim(obstacle_count=1)
        park_obstacles(sim)
        hide_collectables(sim)
        bug = sim.state.obstacles[0]
        before = (bug.x, bug.row)
        _place(sim.player, 1, 0)
        placements.clear()
        sim.state.game.score = 4

        sim.tick(0.016)

        assert sim.score == 9
        assert sim.high_score == 0
        assert (sim.player.col, sim.player.row) == (2, 5)
        assert (bug.x, bug.row) == before
        assert placements == [7]
        text = sim.state.texts[-1]
        assert text.text == "+5"
        assert text.color == GOAL_COLOR
        assert (text.col, text.row) == (1, 0)

    def test_step_into_goal(self, make_sim):
        sim = make_sim()
        hide_collectables(sim)
        _place(sim.player, 2, 1)
        sim.queue_input("up")
        sim.tick(0.016)
        assert sim.score == 5
        assert sim.player.row == 5

    def test_goal_event(self, grid, rng):
        bus = EventBus()
        seen = []
        bus.subscribe(EventType.GOAL_REACHED, seen.append)
        sim = Simulation.create(grid, rng, obstacle_count=0, event_bus=bus)
        _place(sim.player, 0, 0)
        sim.tick(0.016)
        assert [e.data["score"] for e in seen] == [5]


class TestFeedbackTexts:

    def test_expired_texts_removed(self, make_sim):
        sim = make_sim()
        sim.spawn_text("+1", 0, 1, PICKUP_COLOR)
        sim.tick(0.4)
        assert len(sim.state.texts) == 1
        sim.tick(0.2)
        assert sim.state.texts == []

    def test_single_long_tick_removes_text(self, make_sim):
        sim = make_sim()
        sim.spawn_text("+1", 0, 1, PICKUP_COLOR)
        sim.tick(0.6)
        assert sim.state.texts == []


class TestRender:

    def test_draw_order(self, make_sim):
        sim = make_sim(obstacle_count=2)
        for collectable in sim.state.collectables:
            collectable.is_visible = True
        sim.spawn_text("+1", 0, 1, PICKUP_COLOR)
        canvas = RecordingCanvas()

        sim.render(canvas)
        calls = canvas.calls

        assert calls[0] == ("clear",)

        tiles = calls[1:31]
        expected = ["water-block"] * 5 + ["stone-block"] * 15 + ["grass-block"] * 10
        assert [c[1] for c in tiles] == expected
        assert (tiles[0][2], tiles[0][3]) == (0, 0)
        assert (tiles[-1][2], tiles[-1][3]) == (404, 415)

        assert calls[31] == ("text", "Score: 0", 0, 40, (0, 0, 0))
        assert calls[32] == ("text", "High Score: 0", 297, 40, (0, 0, 0))

        items = calls[33:40]
        assert all(c[0] == "image" for c in items)
        ys = [c[3] for c in items]
        assert ys == sorted(ys)

        assert calls[40][1] == "char-boy"
        assert [c[1] for c in calls[41:43]] == ["enemy-bug", "enemy-bug"]
        assert calls[43][:2] == ("text", "+1")
        assert len(calls) == 44

    def test_hidden_items_not_drawn(self, make_sim):
        sim = make_sim()
        hide_collectables(sim)
        canvas = RecordingCanvas()
        sim.render(canvas)
        sprites = {c[1] for c in canvas.images()}
        assert not sprites & {"gem-blue", "gem-green", "star"}

    @pytest.mark.parametrize("high_score", [0, 999, 123456])
    def test_high_score_fits_in_frame(self, make_sim, high_score):
        sim = make_sim()
        sim.state.game.high_score = high_score
        canvas = RecordingCanvas()
        sim.render(canvas)

        _, text, x, _, _ = canvas.texts()[1]
        assert text == f"High Score: {high_score}"
        assert x >= 0
        assert x + text_size(text, HUD_SCALE)[0] <= sim.state.grid.width

    def test_hud_texts_do_not_collide(self, make_sim):
        sim = make_sim()
        sim.state.game.score = 999
        sim.state.game.high_score = 999
        canvas = RecordingCanvas()
        sim.render(canvas)

        (_, score, score_x, _, _), (_, _, high_x, _, _) = canvas.texts()[:2]
        assert score_x + text_size(score, HUD_SCALE)[0] < high_x

    def test_tick_renders_when_given_canvas(self, make_sim):
        sim = make_sim()
        canvas = RecordingCanvas()
        sim.tick(0.0, canvas)
        assert canvas.calls[0] == ("clear",)
        assert sim.state.frame == 1
        sim.tick(0.0)
        assert sim.state.frame == 2


def test_bank_score():
    game = GameState(score=4, high_score=3)
    assert game.bank_score()
    assert (game.score, game.high_score) == (0, 4)
    game.score = 2
    assert not game.bank_score()
    assert (game.score, game.high_score) == (0, 4)


@pytest.mark.parametrize("seed", range(5))
def test_long_run_keeps_invariants(grid, seed):
    rng = random.Random(seed)
    sim = Simulation.create(grid, rng, obstacle_count=3, population=DEFAULT_POPULATION)
    moves = ["left", "right", "up", "down", None]
    best = 0

    for _ in range(600):
        sim.queue_input(rng.choice(moves))
        sim.tick(1 / 60)

        player = sim.player
        assert 0 <= player.col < grid.num_cols
        assert 0 <= player.row < grid.num_rows
        assert sim.score >= 0
        assert sim.high_score >= best
        best = sim.high_score

        cells = [(c.col, c.row) for c in sim.state.collectables]
        assert len(set(cells)) == len(cells)
        assert all(grid.is_lane_row(row) for _, row in cells)
        assert all(not t.expired for t in sim.state.texts)
        assert all(grid.is_lane_row(o.row) for o in sim.state.obstacles)


def test_status_lines(make_sim):
    sim = make_sim()
    lines = sim.status_lines()
    assert "Score: 0  High: 0" in lines
    assert "Player: col 2 row 5" in lines
