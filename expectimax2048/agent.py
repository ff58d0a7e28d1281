import logging
from dataclasses import dataclass
from typing import Dict, Optional, Union

from .brain import DIRECTION_NAMES, DIRECTIONS, UP, BoardState
from .config import AgentConfig
from .heuristics import evaluate_grid
from .tile import Tile

logger = logging.getLogger(__name__)


@dataclass
class SearchStats:
    nodes: int = 0
    evaluations: int = 0


# Expectimax Agent

class Agent:
    """Fixed-depth expectimax player.

    MAX layers try the four moves with ``ghost_move``; CHANCE layers put a 2
    and a 4 into every empty cell in turn and average the results using the
    configured spawn weights. Leaves are scored with :meth:`evaluate`.
    """

    def __init__(self, config: Optional[AgentConfig] = None):
        self.config = config or AgentConfig()
        self.last_stats = SearchStats()

    @property
    def depth(self) -> int:
        return self.config.depth

    @depth.setter
    def depth(self, value: int):
        self.config = AgentConfig(
            depth=value,
            two_weight=self.config.two_weight,
            four_weight=self.config.four_weight,
            loss_score=self.config.loss_score,
        )

    def select_move(self, live_state: Union[BoardState, Dict]) -> int:
        """Return the direction code (0=up, 1=right, 2=down, 3=left) to play next.

        Falls back to ``UP`` when no direction moves anything.
        """
        self.last_stats = SearchStats()
        brain = BoardState(live_state)
        best_score: Optional[float] = None
        best_move = UP

        for direction in DIRECTIONS:
            if not brain.ghost_move(direction):
                continue
            score = self.expectimax(brain, self.depth, True)
            logger.debug("%s scores %.4f", DIRECTION_NAMES[direction], score)
            # later directions take exact ties
            if best_score is None or score >= best_score:
                best_score = score
                best_move = direction
            brain.reset()

        if best_score is None:
            logger.debug("no legal move, falling back to %s", DIRECTION_NAMES[best_move])
        logger.debug(
            "selected %s after %d nodes, %d evaluations",
            DIRECTION_NAMES[best_move], self.last_stats.nodes, self.last_stats.evaluations,
        )
        return best_move

    def expectimax(self, state: BoardState, depth: int, is_chance_layer: bool) -> float:
        self.last_stats.nodes += 1

        if depth == 0:
            return self.evaluate(state)

        if is_chance_layer:
            return self._chance_layer(state, depth)

        score = self._best_reply(state, depth)
        return self.config.loss_score if score is None else score

    def _chance_layer(self, state: BoardState, depth: int) -> float:
        available = state.grid.available_cells()
        if not available:
            # nowhere to spawn, so the position is scored as it stands
            return self.evaluate(state)

        total = 0.0
        for cell in available:
            for value, weight in self.config.spawn_weights:
                tile = Tile(cell, value)
                state.grid.insert_tile(tile)
                total += weight * self.expectimax(state, depth - 1, False)
                state.grid.remove_tile(tile)
        return total / len(available)

    def _best_reply(self, state: BoardState, depth: int) -> Optional[float]:
        """Best score over legal moves, or ``None`` when the board is stuck."""
        brain = BoardState(state)
        best: Optional[float] = None
        for direction in DIRECTIONS:
            if brain.ghost_move(direction):
                score = self.expectimax(brain, depth - 1, True)
                if best is None or score > best:
                    best = score
                brain.reset()
        return best

    def evaluate(self, state: BoardState) -> float:
        self.last_stats.evaluations += 1
        return evaluate_grid(state.grid.to_array())
