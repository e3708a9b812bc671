"""
Fogwalk — world/tiles.py
Tile and biome vocabularies shared by generation, simulation and rendering.
"""

from __future__ import annotations
from enum import Enum, IntEnum


class Tile(IntEnum):
    """Tile types stored in the world grid (uint8 backed)."""
    FLOOR = 0
    GRASS = 1
    LAVA = 2
    COIN = 3
    WALL = 4
    SHRINE = 5
    EXPLOSION = 6
    MOVING_HAZARD = 7

    @property
    def key(self) -> str:
        """Lowercase name used in TOML tables and HUD text ("moving_hazard")."""
        return self.name.lower()

    @classmethod
    def from_key(cls, key: str) -> "Tile":
        try:
            return cls[key.upper()]
        except KeyError:
            raise ValueError(f"Unknown tile type: {key!r}") from None


class Biome(str, Enum):
    NEON_CITY = "neon_city"
    LAVA_FIELDS = "lava_fields"
    CRYSTAL_GARDEN = "crystal_garden"
    VOID = "void"
    SAFE_ZONE = "safe_zone"


# Biomes drawn per region. SAFE_ZONE is only ever stamped.
SYNTHESIZED_BIOMES = (Biome.LAVA_FIELDS, Biome.CRYSTAL_GARDEN, Biome.NEON_CITY, Biome.VOID)

# Integer codes for the numpy biome map
BIOME_CODES = {biome: code for code, biome in enumerate(Biome)}
BIOME_BY_CODE = {code: biome for biome, code in BIOME_CODES.items()}

DAMAGING_TILES = frozenset({Tile.LAVA, Tile.MOVING_HAZARD})
