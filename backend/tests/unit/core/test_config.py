import pytest

from counselor_availability.core.config import Settings, _classify_site_mode


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        config = Settings(_env_file=None)

        assert config.default_slot_duration_minutes == 45
        assert config.default_buffer_time_minutes == 0
        assert config.default_session_price == 3000.0
        assert config.database_url.startswith("sqlite")

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_slot_duration_must_be_positive(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, default_slot_duration_minutes=0)

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("MAX_SLOT_RANGE_DAYS", "14")

        assert Settings(_env_file=None).max_slot_range_days == 14

    def test_production_refuses_sqlite(self):
        config = Settings(_env_file=None, environment="production", database_url="sqlite://")

        with pytest.raises(RuntimeError):
            config.get_database_url()

    def test_is_sqlite(self):
        assert Settings(_env_file=None, database_url="sqlite://").is_sqlite
        assert not Settings(
            _env_file=None, database_url="postgresql://localhost/availability"
        ).is_sqlite


@pytest.mark.parametrize(
    "raw,expected",
    [("prod", ("prod", True, False)), (" Local ", ("local", False, True)), (None, ("", False, False))],
)
def test_classify_site_mode(raw, expected):
    assert _classify_site_mode(raw) == expected
