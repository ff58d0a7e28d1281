import numpy as np

# Weights per cell, indexed [x][y]; the largest weights sit at (0, 0) so the
# search keeps big tiles gathered in that corner.
# Values from https://codemyroad.wordpress.com/2014/05/14/2048-ai-the-intelligent-bot/
GRID_WEIGHTS = np.array([
    [0.135759, 0.121925, 0.102812, 0.099937],
    [0.0997992, 0.08884805, 0.076711, 0.0724143],
    [0.060654, 0.0562579, 0.037116, 0.0161889],
    [0.0125498, 0.00992495, 0.00575871, 0.00335193],
])

SMOOTHNESS_FACTOR = 0.25


def grid_weight_score(a: np.ndarray) -> float:
    return float(np.sum(a * GRID_WEIGHTS))


def smoothness_score(a: np.ndarray) -> float:
    """Reward orthogonal neighbours holding the same value.

    Each cell is compared with the neighbour at ``x - 1`` and ``y - 1`` only,
    so every adjacent pair counts once. Empty cells hold 0 and add nothing.
    """
    along_x = np.where(a[1:, :] == a[:-1, :], a[:-1, :], 0)
    along_y = np.where(a[:, 1:] == a[:, :-1], a[:, :-1], 0)
    return float(SMOOTHNESS_FACTOR * (np.sum(along_x) + np.sum(along_y)))


def evaluate_grid(a: np.ndarray) -> float:
    return grid_weight_score(a) + smoothness_score(a)
