from typing import Dict, Optional, Tuple


class Tile:
    def __init__(self, position: Tuple[int, int], value: int = 2):
        self.x, self.y = position
        self.value = value
        self.previous_position: Optional[Tuple[int, int]] = None
        self.merged_from: Optional[Tuple["Tile", "Tile"]] = None

    @property
    def position(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def save_position(self):
        # called at the start of every move pass
        self.previous_position = (self.x, self.y)
        self.merged_from = None

    def update_position(self, cell: Tuple[int, int]):
        self.x, self.y = cell

    def serialize(self) -> Dict:
        return {"position": {"x": self.x, "y": self.y}, "value": self.value}

    def __repr__(self):
        return f"Tile({self.position}, {self.value})"
