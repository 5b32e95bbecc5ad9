"""Tests for ReservationEngineConfig."""

import pytest

from library_reservations.config import AdmissionMode, ReservationEngineConfig


class TestReservationEngineConfig:
    def test_defaults(self):
        config = ReservationEngineConfig()
        assert config.graphql_url is None
        assert config.admission_mode is AdmissionMode.NONE
        assert config.metrics_enabled is True

    def test_mode_from_string(self):
        config = ReservationEngineConfig(admission_mode="REDIS")
        assert config.admission_mode is AdmissionMode.REDIS

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            ReservationEngineConfig(admission_mode="global")

    @pytest.mark.parametrize(
        "field", ["request_timeout", "admission_acquire_timeout", "admission_lock_timeout"]
    )
    def test_timeouts_must_be_positive(self, field):
        with pytest.raises(ValueError, match=field):
            ReservationEngineConfig(**{field: 0})


class TestFromEnv:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in (
            "LIBRARY_GRAPHQL_URL",
            "LIBRARY_GRAPHQL_ADMIN_SECRET",
            "LIBRARY_GRAPHQL_AUTH_TOKEN",
            "LIBRARY_REQUEST_TIMEOUT",
            "LIBRARY_ADMISSION_MODE",
            "LIBRARY_METRICS_ENABLED",
            "REDIS_URL",
        ):
            monkeypatch.delenv(name, raising=False)

    def test_empty_environment(self):
        assert ReservationEngineConfig.from_env() == ReservationEngineConfig()

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("LIBRARY_GRAPHQL_URL", "https://library.example.com/v1/graphql")
        monkeypatch.setenv("LIBRARY_GRAPHQL_ADMIN_SECRET", "secret")
        monkeypatch.setenv("LIBRARY_REQUEST_TIMEOUT", "2.5")
        monkeypatch.setenv("LIBRARY_ADMISSION_MODE", "Local")
        monkeypatch.setenv("LIBRARY_METRICS_ENABLED", "false")
        monkeypatch.setenv("REDIS_URL", "redis://cache:6379")

        config = ReservationEngineConfig.from_env()

        assert config.graphql_url == "https://library.example.com/v1/graphql"
        assert config.graphql_admin_secret == "secret"
        assert config.request_timeout == 2.5
        assert config.admission_mode is AdmissionMode.LOCAL
        assert config.metrics_enabled is False
        assert config.redis_url == "redis://cache:6379"
