"""
Fogwalk — world/exploration.py
ExplorationManager: Fog of War reveal map over the fixed-size world.
Once a tile is explored it stays explored for the rest of the session.
"""

import numpy as np


class ExplorationManager:
    def __init__(self, size: int):
        self.size = size
        self.explored = np.zeros((size, size), dtype=bool)

    def mark_explored(self, x: int, y: int) -> None:
        """Marks a specific world coordinate as explored. Off-grid is a no-op."""
        if 0 <= x < self.size and 0 <= y < self.size:
            self.explored[y, x] = True

    def is_explored(self, x: int, y: int) -> bool:
        """Returns True if the coordinate has been explored."""
        if 0 <= x < self.size and 0 <= y < self.size:
            return bool(self.explored[y, x])
        return False

    def reveal_around(self, x: int, y: int, radius: int = 1) -> None:
        """Explores the (2r+1)² square centred on (x, y), clipped to the world."""
        x0, x1 = max(0, x - radius), min(self.size, x + radius + 1)
        y0, y1 = max(0, y - radius), min(self.size, y + radius + 1)
        if x0 < x1 and y0 < y1:
            self.explored[y0:y1, x0:x1] = True

    def explored_count(self) -> int:
        return int(np.count_nonzero(self.explored))
