import random
from typing import Dict, List, Optional, Set, Tuple, Union

from .grid import BOARD_SIZE, Cell, Grid
from .tile import Tile

UP, RIGHT, DOWN, LEFT = 0, 1, 2, 3
DIRECTIONS = (UP, RIGHT, DOWN, LEFT)
DIRECTION_NAMES = {UP: "up", RIGHT: "right", DOWN: "down", LEFT: "left"}

VECTORS = {
    UP: (0, -1),
    RIGHT: (1, 0),
    DOWN: (0, 1),
    LEFT: (-1, 0),
}


def get_vector(direction: int) -> Tuple[int, int]:
    try:
        return VECTORS[direction]
    except KeyError:
        raise ValueError(f"direction must be one of {DIRECTIONS}, got {direction!r}") from None


def build_traversals(vector: Tuple[int, int], size: int = BOARD_SIZE) -> Tuple[List[int], List[int]]:
    xs = list(range(size))
    ys = list(range(size))
    # always traverse from the farthest cell in the chosen direction
    if vector[0] == 1:
        xs.reverse()
    if vector[1] == 1:
        ys.reverse()
    return xs, ys


class BoardState:
    """A private copy of a board that moves can be tried on and rolled back.

    The state is built from a snapshot (a ``BoardState``, a ``Grid`` or a
    serialized grid dict). ``move`` plays a real turn: tiles slide, merges
    add to ``score`` and a random tile spawns. ``ghost_move`` slides and
    merges only, leaving ``score`` alone and spawning nothing, which is what
    the search uses. ``reset`` puts the grid back to the snapshot.
    """

    def __init__(self, source: Union["BoardState", Grid, Dict, None] = None, rng: Optional[random.Random] = None):
        if isinstance(source, BoardState):
            self.previous_state = source.grid.serialize()
            rng = rng or source.rng
        elif isinstance(source, Grid):
            self.previous_state = source.serialize()
        elif source is None:
            self.previous_state = Grid(BOARD_SIZE).serialize()
        else:
            self.previous_state = Grid.from_snapshot(source).serialize()
        self.size = self.previous_state["size"]
        self.rng = rng or random.Random()
        self.reset()

    @classmethod
    def new_game(cls, rng: Optional[random.Random] = None) -> "BoardState":
        state = cls(rng=rng)
        state.start()
        return state

    def start(self):
        self.add_random_tile()
        self.add_random_tile()

    def reset(self):
        self.score = 0
        self.grid = Grid(self.previous_state["size"], self.previous_state["cells"])

    def serialize(self) -> Dict:
        return self.grid.serialize()

    def add_random_tile(self):
        if self.grid.cells_available():
            value = 2 if self.rng.random() < 0.9 else 4
            tile = Tile(self.grid.random_available_cell(self.rng), value)
            self.grid.insert_tile(tile)

    # Movement

    def move(self, direction: int) -> bool:
        moved = self._slide(direction, keep_score=True)
        if moved:
            self.add_random_tile()
        return moved

    def ghost_move(self, direction: int) -> bool:
        return self._slide(direction, keep_score=False)

    def _prepare_tiles(self):
        for tile in self.grid.tiles():
            tile.save_position()

    def _move_tile(self, tile: Tile, cell: Cell):
        self.grid.cells[tile.x][tile.y] = None
        self.grid.cells[cell[0]][cell[1]] = tile
        tile.update_position(cell)

    def _slide(self, direction: int, keep_score: bool) -> bool:
        vector = get_vector(direction)
        xs, ys = build_traversals(vector, self.size)
        merged_into: Set[Cell] = set()
        moved = False

        self._prepare_tiles()

        for x in xs:
            for y in ys:
                cell = (x, y)
                tile = self.grid.cell_content(cell)
                if tile is None:
                    continue

                farthest, nxt = self.find_farthest_position(cell, vector)
                target = self.grid.cell_content(nxt)

                # a tile produced by a merge this pass cannot merge again
                if target is not None and target.value == tile.value and nxt not in merged_into:
                    merged = Tile(nxt, tile.value * 2)
                    merged.merged_from = (tile, target)

                    self.grid.insert_tile(merged)
                    self.grid.remove_tile(tile)
                    tile.update_position(nxt)
                    merged_into.add(nxt)

                    if keep_score:
                        self.score += merged.value
                else:
                    self._move_tile(tile, farthest)

                if tile.position != cell:
                    moved = True

        return moved

    def find_farthest_position(self, cell: Cell, vector: Tuple[int, int]) -> Tuple[Cell, Cell]:
        # step along the vector until an obstacle is found
        while True:
            previous = cell
            cell = (previous[0] + vector[0], previous[1] + vector[1])
            if not self.grid.cell_available(cell):
                return previous, cell

    # Game status

    def tile_matches_available(self) -> bool:
        for x, y, tile in self.grid.each_cell():
            if tile is None:
                continue
            for dx, dy in ((1, 0), (0, 1)):
                other = self.grid.cell_content((x + dx, y + dy))
                if other is not None and other.value == tile.value:
                    return True
        return False

    def moves_available(self) -> bool:
        return self.grid.cells_available() or self.tile_matches_available()

    def max_tile(self) -> int:
        return max((tile.value for tile in self.grid.tiles()), default=0)

    def won(self, target: int = 2048) -> bool:
        return self.max_tile() >= target


def apply_ghost_move(snapshot: Dict, direction: int) -> Tuple[Dict, bool]:
    """Slide ``snapshot`` in ``direction`` without spawning; the input is left untouched."""
    state = BoardState(snapshot)
    moved = state.ghost_move(direction)
    return state.serialize(), moved
