"""Application configuration using pydantic-settings.

All balance values live here so the engine and any presentation layer read
the same numbers.
"""

from functools import lru_cache

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class RaceStats(BaseModel):
    """Default base stats for a race."""

    strength: int
    speed: int
    ki: int
    vitality: int


class Settings(BaseSettings):
    """Engine settings loaded from environment variables (prefix ``KI_ARENA_``)."""

    model_config = SettingsConfigDict(
        env_prefix="KI_ARENA_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    debug: bool = False
    log_level: str = "INFO"

    # Attacks
    normal_ki_cost: int = 30
    normal_strength_multiplier: float = 1.0
    normal_attack_name: str = "Basic Attack"
    ki_energy_ki_cost: int = 50
    ki_energy_strength_multiplier: float = 1.5
    special_ki_cost: int = 0

    # Special gate
    special_unlock_round: int = 3
    special_required_ki: int = 30
    special_low_health_ratio: float = 0.25

    # Dodge curve (defender speed -> probability)
    dodge_min_speed: int = 10
    dodge_max_speed: int = 100
    dodge_max_chance: float = 0.70

    # Condition thresholds
    injured_vitality_ratio: float = 0.10
    exhausted_ki_ratio: float = 0.10

    # Status effects
    effect_default_rounds: int = 2
    super_saiyan_strength_multiplier: float = 1.3
    super_saiyan_speed_multiplier: float = 1.2
    regen_ki_per_tick: int = 12
    regen_vitality_per_tick: int = 12
    leech_ki_per_tick: int = 12

    # Race defaults
    saiyan_stats: RaceStats = RaceStats(strength=20, speed=20, ki=100, vitality=120)
    namekian_stats: RaceStats = RaceStats(strength=18, speed=18, ki=110, vitality=130)
    android_stats: RaceStats = RaceStats(strength=16, speed=16, ki=9999, vitality=100)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
