import math
from dataclasses import dataclass


@dataclass
class AgentConfig:
    """Search settings for :class:`~expectimax2048.agent.Agent`."""

    depth: int = 4
    # probabilities of the environment spawning a 2 or a 4
    two_weight: float = 0.9
    four_weight: float = 0.1
    # what a chance layer scores for a reply position with no legal move
    loss_score: float = 0.0

    def __post_init__(self):
        if isinstance(self.depth, bool) or not isinstance(self.depth, int) or self.depth < 1:
            raise ValueError(f"depth must be a positive int, got {self.depth!r}")
        if self.two_weight < 0 or self.four_weight < 0:
            raise ValueError("spawn weights must be non-negative")
        if not math.isclose(self.two_weight + self.four_weight, 1.0):
            raise ValueError(f"spawn weights must sum to 1, got {self.two_weight} + {self.four_weight}")

    @property
    def spawn_weights(self):
        return ((2, self.two_weight), (4, self.four_weight))
