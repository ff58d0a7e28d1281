import argparse
import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Optional

from .agent import Agent
from .brain import DIRECTION_NAMES, BoardState
from .config import AgentConfig

logger = logging.getLogger(__name__)


@dataclass
class GameResult:
    score: int
    max_tile: int
    moves: int
    won: bool
    final_state: Dict


def play_game(agent: Agent, rng: Optional[random.Random] = None, seed: Optional[int] = None,
              max_moves: Optional[int] = None, target: Optional[int] = None) -> GameResult:
    """Let ``agent`` play one game from a fresh board until it can no longer move.

    Stops early once ``target`` is reached or after ``max_moves`` moves.
    """
    rng = rng or random.Random(seed)
    game = BoardState.new_game(rng)
    moves = 0

    while game.moves_available():
        if max_moves is not None and moves >= max_moves:
            break
        if target is not None and game.won(target):
            break
        direction = agent.select_move(game)
        if not game.move(direction):
            logger.warning("agent chose %s which does not move the board", DIRECTION_NAMES[direction])
            break
        moves += 1
        logger.debug("move %d: %s, score %d", moves, DIRECTION_NAMES[direction], game.score)

    return GameResult(
        score=game.score,
        max_tile=game.max_tile(),
        moves=moves,
        won=game.won(target or 2048),
        final_state=game.serialize(),
    )


def format_board(snapshot: Dict) -> str:
    size = snapshot["size"]
    rows = []
    for y in range(size):
        row = []
        for x in range(size):
            tile = snapshot["cells"][x][y]
            row.append(f"{tile['value']:>5}" if tile else "    .")
        rows.append("".join(row))
    return "\n".join(rows)


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Let the expectimax agent play 2048")
    p.add_argument("--games", type=int, default=1, help="how many games to play")
    p.add_argument("--depth", type=int, default=4, help="expectimax depth")
    p.add_argument("--seed", type=int, default=None, help="seed for tile spawns")
    p.add_argument("--max-moves", type=int, default=None, help="stop each game after this many moves")
    p.add_argument("--target", type=int, default=None, help="stop a game once this tile appears")
    p.add_argument("--quiet", action="store_true", help="do not print final boards")
    p.add_argument("--log-level", default="WARNING", help="logging level")
    args = p.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s | %(message)s")

    agent = Agent(AgentConfig(depth=args.depth))
    rng = random.Random(args.seed)
    results = []
    for i in range(args.games):
        result = play_game(agent, rng=rng, max_moves=args.max_moves, target=args.target)
        results.append(result)
        logger.info("game %d finished after %d moves", i + 1, result.moves)
        print(f"game {i + 1}: score={result.score} max_tile={result.max_tile} moves={result.moves} won={result.won}")
        if not args.quiet:
            print(format_board(result.final_state))

    if results:
        best = max(r.max_tile for r in results)
        avg = sum(r.score for r in results) / len(results)
        wins = sum(r.won for r in results)
        print(f"games={len(results)} avg_score={avg:.1f} best_tile={best} wins={wins}")
    return 0
