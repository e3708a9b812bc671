"""
Fogwalk — engine/data_loader.py
Data Loaders for TOML game configuration powered by Pydantic.
=============================================================================================
Stack:       Python 3.11+ | Pydantic v2 | tomllib
Status:      Core data validation and loading layer.

Every tunable number of world generation and simulation lives here. The
defaults are the canonical values; data/game.toml may override any of them.
"""

import tomllib
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator

from world.tiles import Biome, Tile, SYNTHESIZED_BIOMES

# Longest explosion countdown a cell may hold
MAX_EXPLOSION_TIMER = 180

# ================================================================================
# SCHEMAS
# ================================================================================

class FillRuleDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    tile: str    # tile key, e.g. "lava"
    below: float # cumulative threshold; first rule with roll < below wins

    @field_validator("tile")
    @classmethod
    def _known_tile(cls, value: str) -> str:
        Tile.from_key(value)
        return value

    @property
    def tile_type(self) -> Tile:
        return Tile.from_key(self.tile)


class BiomeDef(BaseModel):
    model_config = ConfigDict(frozen=True)
    id: Biome
    name: str
    description: str = ""
    region_weight: float = 0.0 # share of regions drawn as this biome; 0 = stamped only
    fill: List[FillRuleDef] = Field(default_factory=list)

    @field_validator("fill")
    @classmethod
    def _ascending_thresholds(cls, rules: List[FillRuleDef]) -> List[FillRuleDef]:
        previous = 0.0
        for rule in rules:
            if not previous < rule.below <= 1.0:
                raise ValueError(
                    f"fill thresholds must be strictly increasing within (0, 1]; got {rule.below} after {previous}"
                )
            previous = rule.below
        return rules


class WorldGenConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    world_size: int = Field(128, ge=16)
    region_size: int = Field(16, ge=1)
    noise_scale: float = 0.08
    noise_threshold: float = 0.8
    start: Tuple[int, int] = (64, 64)

    safe_zone_radius: int = 8

    # Rooms, treasure rooms and shrines share the same placement margin
    placement_margin: int = 10
    room_count: int = 12
    room_size_range: Tuple[int, int] = (4, 8)
    room_gap_chance: float = Field(0.2, ge=0.0, le=1.0)

    treasure_room_count: int = 6
    treasure_room_radius: int = 5
    treasure_coin_chance: float = Field(0.4, ge=0.0, le=1.0)

    path_count: int = 10
    shrine_count: int = 5

    hazard_count: int = 10
    hazard_attempts: int = 50
    hazard_margin: int = 15
    hazard_min_distance: float = 15.0
    hazard_path_length_range: Tuple[int, int] = (4, 8)
    hazard_move_speed: int = Field(30, ge=1)

    explosion_timer_range: Tuple[int, int] = (60, 180)

    @model_validator(mode="after")
    def _check_geometry(self) -> "WorldGenConfig":
        sx, sy = self.start
        if not (0 <= sx < self.world_size and 0 <= sy < self.world_size):
            raise ValueError(f"start {self.start} lies outside a {self.world_size}x{self.world_size} world")
        low, high = self.explosion_timer_range
        # high is exclusive
        if not 0 < low < high <= MAX_EXPLOSION_TIMER + 1:
            raise ValueError(
                f"explosion_timer_range must satisfy 0 < low < high <= {MAX_EXPLOSION_TIMER + 1}; "
                f"got {self.explosion_timer_range}"
            )
        for name in ("room_size_range", "hazard_path_length_range"):
            lo, hi = getattr(self, name)
            if not 0 < lo < hi:
                raise ValueError(f"{name} must satisfy 0 < low < high; got {(lo, hi)}")
        return self


class SimulationConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    initial_lives: int = Field(3, ge=1)
    hurt_ticks: int = 15
    respawn_hurt_ticks: int = 30
    shake_duration: int = 10
    shake_magnitude: int = 5
    hazard_check_interval: int = Field(5, ge=1)

    explosion_reset: int = Field(120, ge=1, le=MAX_EXPLOSION_TIMER)
    explosion_warning: int = 30
    explosion_detonation: int = Field(10, ge=1)

    @model_validator(mode="after")
    def _check_phases(self) -> "SimulationConfig":
        if not self.explosion_detonation <= self.explosion_warning <= self.explosion_reset:
            raise ValueError("explosion thresholds must satisfy detonation <= warning <= reset")
        return self


def _default_biomes() -> List[BiomeDef]:
    rule = FillRuleDef
    return [
        BiomeDef(
            id=Biome.LAVA_FIELDS, name="Lava Fields", region_weight=0.25,
            description="Lava pools and timed explosions between broken walls.",
            fill=[rule(tile="lava", below=0.20), rule(tile="wall", below=0.30),
                  rule(tile="coin", below=0.40), rule(tile="explosion", below=0.55)],
        ),
        BiomeDef(
            id=Biome.CRYSTAL_GARDEN, name="Crystal Garden", region_weight=0.30,
            description="Open grassland with scattered coins.",
            fill=[rule(tile="grass", below=0.50), rule(tile="coin", below=0.60)],
        ),
        BiomeDef(
            id=Biome.NEON_CITY, name="Neon City", region_weight=0.25,
            description="Dense walls, a few explosions.",
            fill=[rule(tile="wall", below=0.25), rule(tile="coin", below=0.35),
                  rule(tile="explosion", below=0.38)],
        ),
        BiomeDef(
            id=Biome.VOID, name="Void", region_weight=0.20,
            description="Mostly empty floor.",
            fill=[rule(tile="wall", below=0.05), rule(tile="coin", below=0.08)],
        ),
        BiomeDef(
            id=Biome.SAFE_ZONE, name="Safe Zone",
            description="Starting area. Never contains hazards from filling.",
            fill=[rule(tile="grass", below=0.30), rule(tile="coin", below=0.40)],
        ),
    ]


class GameConfig(BaseModel):
    model_config = ConfigDict(frozen=True)
    worldgen: WorldGenConfig = Field(default_factory=WorldGenConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    biomes: List[BiomeDef] = Field(default_factory=_default_biomes)

    @model_validator(mode="after")
    def _check_biomes(self) -> "GameConfig":
        ids = [b.id for b in self.biomes]
        if len(ids) != len(set(ids)):
            raise ValueError("duplicate biome ids")
        if Biome.SAFE_ZONE not in ids:
            raise ValueError("a safe_zone biome definition is required")
        if sum(b.region_weight for b in self.biomes if b.id in SYNTHESIZED_BIOMES) <= 0:
            raise ValueError("at least one synthesized biome needs a positive region_weight")
        return self

    def biome(self, biome_id: Biome) -> Optional[BiomeDef]:
        for b in self.biomes:
            if b.id == biome_id:
                return b
        return None

    def region_table(self) -> List[Tuple[float, Biome]]:
        """Cumulative (upper bound, biome) pairs in declaration order, normalised to 1.0."""
        weighted = [(b.region_weight, b.id) for b in self.biomes
                    if b.id in SYNTHESIZED_BIOMES and b.region_weight > 0]
        total = sum(w for w, _ in weighted)
        table = []
        running = 0.0
        for weight, biome_id in weighted:
            running += weight / total
            table.append((running, biome_id))
        return table

    def fill_tables(self) -> Dict[Biome, List[Tuple[float, Tile]]]:
        return {b.id: [(r.below, r.tile_type) for r in b.fill] for b in self.biomes}

# ================================================================================
# LOADERS & CACHE
# ================================================================================

_GAME_CONFIG_CACHE: Optional[GameConfig] = None

DATA_DIR = Path(__file__).parent.parent / "data"


def load_game_config(path: Path) -> GameConfig:
    """Loads and validates a game config TOML file. Not cached."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Game config not found: {path}")

    with open(path, "rb") as f:
        data = tomllib.load(f)

    return GameConfig(**data)


def get_game_config() -> GameConfig:
    """Loads data/game.toml, or the built-in defaults if absent. Cached globally."""
    global _GAME_CONFIG_CACHE
    if _GAME_CONFIG_CACHE is not None:
        return _GAME_CONFIG_CACHE

    path = DATA_DIR / "game.toml"
    if not path.exists():
        _GAME_CONFIG_CACHE = GameConfig()
    else:
        _GAME_CONFIG_CACHE = load_game_config(path)
    return _GAME_CONFIG_CACHE


def clear_config_cache() -> None:
    global _GAME_CONFIG_CACHE
    _GAME_CONFIG_CACHE = None
