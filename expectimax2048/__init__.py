"""Expectimax move selection for 2048."""

from .agent import Agent, SearchStats
from .autoplay import GameResult, play_game
from .brain import DIRECTIONS, DOWN, LEFT, RIGHT, UP, BoardState, apply_ghost_move
from .config import AgentConfig
from .grid import Grid, InvalidSnapshotError
from .heuristics import evaluate_grid, grid_weight_score, smoothness_score
from .tile import Tile

__all__ = [
    "Agent",
    "AgentConfig",
    "BoardState",
    "DIRECTIONS",
    "DOWN",
    "GameResult",
    "Grid",
    "InvalidSnapshotError",
    "LEFT",
    "RIGHT",
    "SearchStats",
    "Tile",
    "UP",
    "apply_ghost_move",
    "evaluate_grid",
    "grid_weight_score",
    "play_game",
    "smoothness_score",
]
