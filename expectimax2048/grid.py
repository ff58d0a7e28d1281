import random
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from .tile import Tile

BOARD_SIZE = 4

Cell = Tuple[int, int]


class InvalidSnapshotError(ValueError):
    """Raised when a serialized grid cannot be turned back into a Grid."""


def _tile_value(entry) -> int:
    value = entry.get("value") if isinstance(entry, dict) else entry
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidSnapshotError(f"tile value must be an int, got {value!r}")
    value = int(value)
    if value < 2 or value & (value - 1):
        raise InvalidSnapshotError(f"tile value must be a power of two >= 2, got {value}")
    return value


class Grid:
    """Square board of optional tiles, addressed as ``cells[x][y]``."""

    def __init__(self, size: int = BOARD_SIZE, previous_state: Optional[Sequence] = None):
        if size != BOARD_SIZE:
            raise InvalidSnapshotError(f"only {BOARD_SIZE}x{BOARD_SIZE} boards are supported, got size {size}")
        self.size = size
        self.cells: List[List[Optional[Tile]]] = (
            self._from_state(previous_state) if previous_state is not None else self._empty()
        )

    @classmethod
    def from_snapshot(cls, snapshot: Dict) -> "Grid":
        try:
            size, cells = snapshot["size"], snapshot["cells"]
        except (KeyError, TypeError) as e:
            raise InvalidSnapshotError(f"snapshot needs 'size' and 'cells': {e}") from e
        return cls(size, cells)

    def _empty(self) -> List[List[Optional[Tile]]]:
        return [[None] * self.size for _ in range(self.size)]

    def _from_state(self, state: Sequence) -> List[List[Optional[Tile]]]:
        if len(state) != self.size or any(len(column) != self.size for column in state):
            raise InvalidSnapshotError(f"cells must be {self.size}x{self.size}")
        cells = self._empty()
        for x in range(self.size):
            for y in range(self.size):
                entry = state[x][y]
                if entry is None or entry == 0:
                    continue
                position = entry.get("position") if isinstance(entry, dict) else None
                if position is not None and (position.get("x"), position.get("y")) != (x, y):
                    raise InvalidSnapshotError(f"tile at ({x}, {y}) records position {position}")
                cells[x][y] = Tile((x, y), _tile_value(entry))
        return cells

    # Queries

    def random_available_cell(self, rng: Optional[random.Random] = None) -> Optional[Cell]:
        cells = self.available_cells()
        if not cells:
            return None
        return (rng or random).choice(cells)

    def available_cells(self) -> List[Cell]:
        return [(x, y) for x, y, tile in self.each_cell() if tile is None]

    def each_cell(self) -> Iterator[Tuple[int, int, Optional[Tile]]]:
        for x in range(self.size):
            for y in range(self.size):
                yield x, y, self.cells[x][y]

    def tiles(self) -> List[Tile]:
        return [tile for _, _, tile in self.each_cell() if tile is not None]

    def cells_available(self) -> bool:
        return bool(self.available_cells())

    def cell_available(self, cell: Cell) -> bool:
        return self.within_bounds(cell) and not self.cell_occupied(cell)

    def cell_occupied(self, cell: Cell) -> bool:
        return self.cell_content(cell) is not None

    def cell_content(self, cell: Cell) -> Optional[Tile]:
        if self.within_bounds(cell):
            return self.cells[cell[0]][cell[1]]
        return None

    def within_bounds(self, cell: Cell) -> bool:
        x, y = cell
        return 0 <= x < self.size and 0 <= y < self.size

    # Mutation

    def insert_tile(self, tile: Tile):
        self.cells[tile.x][tile.y] = tile

    def remove_tile(self, tile: Tile):
        self.cells[tile.x][tile.y] = None

    # Serialization

    def serialize(self) -> Dict:
        return {
            "size": self.size,
            "cells": [[tile.serialize() if tile else None for tile in column] for column in self.cells],
        }

    def to_array(self) -> np.ndarray:
        a = np.zeros((self.size, self.size), dtype=int)
        for x, y, tile in self.each_cell():
            if tile is not None:
                a[x, y] = tile.value
        return a

    def __repr__(self):
        return f"Grid({self.to_array().T.tolist()})"
