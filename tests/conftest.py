"""Shared fixtures for the 2048 engine tests.

Boards are written the way they look on screen: a list of rows from top
(y = 0) to bottom, each row listing x = 0..3, with 0 for an empty cell.
"""

import random

import pytest

from expectimax2048 import Agent, AgentConfig, BoardState


def snapshot_from_rows(rows):
    return {
        "size": 4,
        "cells": [[{"value": rows[y][x]} if rows[y][x] else None for y in range(4)] for x in range(4)],
    }


def rows_of(state):
    a = state.grid.to_array()
    return [[int(a[x, y]) for x in range(4)] for y in range(4)]


@pytest.fixture
def make_state():
    def _make(rows, seed=0):
        return BoardState(snapshot_from_rows(rows), rng=random.Random(seed))
    return _make


@pytest.fixture
def shallow_agent():
    return Agent(AgentConfig(depth=1))
