"""Tests for settings loading."""

from ki_arena.config import Settings, get_settings


class TestSettings:
    """Tests for defaults and environment overrides."""

    def test_defaults(self, settings):
        assert settings.normal_ki_cost == 30
        assert settings.ki_energy_ki_cost == 50
        assert settings.special_unlock_round == 3
        assert settings.dodge_max_chance == 0.70
        assert settings.android_stats.ki == 9999

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("KI_ARENA_NORMAL_KI_COST", "10")
        monkeypatch.setenv("KI_ARENA_DEBUG", "true")

        settings = Settings(_env_file=None)

        assert settings.normal_ki_cost == 10
        assert settings.debug is True

    def test_env_override_race_stats(self, monkeypatch):
        monkeypatch.setenv("KI_ARENA_SAIYAN_STATS", '{"strength": 25, "speed": 20, "ki": 100, "vitality": 120}')

        settings = Settings(_env_file=None)

        assert settings.saiyan_stats.strength == 25

    def test_cached(self):
        assert get_settings() is get_settings()
