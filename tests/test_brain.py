import random

import pytest

from expectimax2048 import DIRECTIONS, DOWN, LEFT, RIGHT, UP, BoardState, apply_ghost_move

from conftest import rows_of, snapshot_from_rows


class TestScenarios:
    def test_single_tile_slides_right(self, make_state):
        state = make_state([
            [2, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ])
        assert state.move(RIGHT)
        assert state.grid.cell_content((3, 0)).value == 2
        assert len(state.grid.tiles()) == 2

    def test_pair_merges_left(self, make_state):
        state = make_state([
            [2, 2, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ])
        assert state.move(LEFT)
        assert state.grid.cell_content((0, 0)).value == 4
        assert state.score == 4

    def test_alternating_row_does_not_merge(self, make_state):
        state = make_state([
            [2, 4, 2, 4],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ])
        assert not state.ghost_move(LEFT)
        assert state.ghost_move(DOWN)
        assert rows_of(state)[3] == [2, 4, 2, 4]
        assert sum(map(sum, rows_of(state))) == 12


class TestMovement:
    @pytest.mark.parametrize("direction,expected", [
        (UP, [[4, 2, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]),
        (DOWN, [[0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [4, 2, 0, 0]]),
        (LEFT, [[2, 0, 0, 0], [4, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]),
        (RIGHT, [[0, 0, 0, 2], [0, 0, 0, 4], [0, 0, 0, 0], [0, 0, 0, 0]]),
    ])
    def test_each_direction(self, make_state, direction, expected):
        state = make_state([
            [2, 0, 0, 0],
            [2, 2, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ])
        assert state.ghost_move(direction)
        assert rows_of(state) == expected

    def test_full_row_merges_in_pairs(self, make_state):
        state = make_state([
            [2, 2, 2, 2],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ])
        assert state.ghost_move(LEFT)
        assert rows_of(state)[0] == [4, 4, 0, 0]

    def test_merged_tile_does_not_merge_again(self, make_state):
        state = make_state([
            [2, 2, 4, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ])
        assert state.ghost_move(LEFT)
        assert rows_of(state)[0] == [4, 4, 0, 0]

    def test_merge_closest_to_the_wall_first(self, make_state):
        state = make_state([
            [2, 2, 2, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ])
        assert state.ghost_move(RIGHT)
        assert rows_of(state)[0] == [0, 0, 2, 4]

    def test_merge_records_provenance(self, make_state):
        state = make_state([
            [2, 2, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ])
        left, right = state.grid.cell_content((0, 0)), state.grid.cell_content((1, 0))
        state.ghost_move(LEFT)
        merged = state.grid.cell_content((0, 0))
        assert set(merged.merged_from) == {left, right}

        # the next pass starts with clean provenance
        state.ghost_move(RIGHT)
        assert state.grid.cell_content((3, 0)).merged_from is None
        assert state.grid.cell_content((3, 0)).previous_position == (0, 0)

    def test_blocked_direction_leaves_grid_unchanged(self, make_state):
        rows = [
            [2, 4, 8, 16],
            [4, 8, 16, 32],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ]
        state = make_state(rows)
        before = state.serialize()
        assert not state.ghost_move(UP)
        assert not state.move(UP)
        assert not state.move(LEFT)
        assert state.serialize() == before
        assert state.score == 0

    def test_ghost_move_is_deterministic(self, make_state):
        rows = [
            [2, 0, 2, 4],
            [0, 4, 4, 0],
            [8, 0, 8, 8],
            [2, 2, 0, 2],
        ]
        for direction in DIRECTIONS:
            first, second = make_state(rows, seed=1), make_state(rows, seed=2)
            first.ghost_move(direction)
            second.ghost_move(direction)
            assert first.serialize() == second.serialize()

    def test_unknown_direction(self, make_state):
        state = make_state([[0] * 4] * 4)
        with pytest.raises(ValueError):
            state.ghost_move(4)


class TestScore:
    def test_ghost_moves_never_score(self, make_state):
        state = make_state([
            [2, 2, 4, 4],
            [8, 8, 0, 0],
            [2, 0, 2, 0],
            [0, 0, 0, 0],
        ])
        for direction in (LEFT, UP, RIGHT, DOWN):
            state.ghost_move(direction)
            assert state.score == 0
            state.reset()
            assert state.score == 0

    def test_real_moves_accumulate(self, make_state):
        state = make_state([
            [2, 2, 4, 4],
            [8, 8, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 0],
        ])
        assert state.move(LEFT)
        assert state.score == 4 + 8 + 16

    def test_merges_conserve_value(self, make_state):
        rows = [
            [2, 2, 4, 4],
            [8, 0, 8, 0],
            [2, 0, 0, 2],
            [4, 4, 4, 0],
        ]
        for direction in DIRECTIONS:
            state = make_state(rows, seed=direction)
            before = int(state.grid.to_array().sum())
            assert state.ghost_move(direction)
            assert int(state.grid.to_array().sum()) == before

            state.reset()
            assert state.move(direction)
            spawned = int(state.grid.to_array().sum()) - before
            assert spawned in (2, 4)


class TestReset:
    def test_reset_restores_snapshot(self, make_state):
        state = make_state([
            [2, 0, 0, 2],
            [0, 0, 0, 0],
            [0, 4, 0, 0],
            [0, 0, 0, 0],
        ])
        before = state.serialize()
        state.move(LEFT)
        state.ghost_move(DOWN)
        state.reset()
        assert state.serialize() == before
        assert state.score == 0
        state.reset()
        assert state.serialize() == before

    def test_reset_keeps_the_same_object(self, make_state):
        state = make_state([[2, 0, 0, 0]] + [[0] * 4] * 3)
        ident = id(state)
        state.ghost_move(RIGHT)
        state.reset()
        assert id(state) == ident

    def test_snapshot_of_state_is_independent(self, make_state):
        state = make_state([[2, 0, 0, 0]] + [[0] * 4] * 3)
        child = BoardState(state)
        child.ghost_move(RIGHT)
        assert state.grid.cell_content((0, 0)).value == 2
        assert child.grid.cell_content((3, 0)).value == 2


class TestSpawning:
    def test_add_random_tile_is_reproducible(self):
        a = BoardState(rng=random.Random(42))
        b = BoardState(rng=random.Random(42))
        for _ in range(5):
            a.add_random_tile()
            b.add_random_tile()
        assert a.serialize() == b.serialize()
        assert len(a.grid.tiles()) == 5
        assert all(tile.value in (2, 4) for tile in a.grid.tiles())

    def test_add_random_tile_on_full_board(self, make_state):
        state = make_state([[2, 4, 2, 4], [4, 2, 4, 2]] * 2)
        before = state.serialize()
        state.add_random_tile()
        assert state.serialize() == before

    def test_spawn_distribution(self):
        state = BoardState(rng=random.Random(7))
        fours = 0
        for _ in range(2000):
            state.add_random_tile()
            fours += state.max_tile() == 4
            state.reset()
        assert 100 < fours < 300

    def test_new_game_starts_with_two_tiles(self):
        state = BoardState.new_game(random.Random(3))
        assert len(state.grid.tiles()) == 2
        assert state.score == 0


class TestGameStatus:
    def test_stuck_board(self, make_state):
        state = make_state([[2, 4, 2, 4], [4, 2, 4, 2]] * 2)
        assert not state.moves_available()
        assert not state.tile_matches_available()
        assert not any(state.ghost_move(d) for d in DIRECTIONS)

    def test_full_board_with_a_match(self, make_state):
        state = make_state([[2, 4, 2, 4], [4, 2, 4, 2], [2, 4, 2, 4], [4, 2, 4, 4]])
        assert state.tile_matches_available()
        assert state.moves_available()

    def test_max_tile_and_won(self, make_state):
        state = make_state([[0] * 4] * 4)
        assert state.max_tile() == 0
        assert not state.won()
        state = make_state([[2048, 0, 0, 0]] + [[0] * 4] * 3)
        assert state.max_tile() == 2048
        assert state.won()
        assert not state.won(4096)


class TestApplyGhostMove:
    def test_returns_new_snapshot_and_leaves_input(self):
        snapshot = snapshot_from_rows([[2, 2, 0, 0]] + [[0] * 4] * 3)
        original = {"size": 4, "cells": [list(column) for column in snapshot["cells"]]}
        result, moved = apply_ghost_move(snapshot, RIGHT)
        assert moved
        assert result["cells"][3][0]["value"] == 4
        assert snapshot == original

    def test_reports_no_move(self):
        snapshot = snapshot_from_rows([[2, 4, 0, 0]] + [[0] * 4] * 3)
        result, moved = apply_ghost_move(snapshot, LEFT)
        assert not moved
        assert BoardState(result).serialize() == BoardState(snapshot).serialize()
