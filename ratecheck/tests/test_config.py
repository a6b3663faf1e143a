"""
Unit tests for harness configuration.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from shared.config import HarnessConfig, get_config
from shared.test_helpers import HARNESS_ENV_NAMES


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in HARNESS_ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


class TestHarnessConfig:
    """Test cases for HarnessConfig."""

    def test_defaults(self):
        config = HarnessConfig(_env_file=None)

        assert config.api_base_url == "http://localhost:8085"
        assert config.auth_base_url == "http://localhost:8084"
        assert config.username == "user_all"
        assert config.password == "123"
        assert config.burst_requests == 8
        assert config.users_path == "/api/v1/users"
        assert config.orders_path == "/api/v1/orders"
        assert config.window_ms == 1000
        assert config.align_margin_ms == 30
        assert config.request_timeout == 10.0

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("API_GW_BASE_URL", "http://gw:9000/")
        monkeypatch.setenv("BURST_REQUESTS", "12")
        monkeypatch.setenv("USERS_PATH", "/v2/users")
        monkeypatch.setenv("AUTH_USERNAME", "alice")

        config = HarnessConfig(_env_file=None)

        assert config.api_base_url == "http://gw:9000"
        assert config.burst_requests == 12
        assert config.users_path == "/v2/users"
        assert config.username == "alice"

    def test_identity_b_falls_back_to_identity_a(self):
        config = HarnessConfig(_env_file=None, username="alice", password="pw")
        assert config.identity_b_username == "alice"
        assert config.identity_b_password == "pw"

    def test_identity_b_explicit(self, monkeypatch):
        monkeypatch.setenv("AUTH_USERNAME_B", "bob")
        monkeypatch.setenv("AUTH_PASSWORD_B", "secret")
        config = HarnessConfig(_env_file=None)
        assert config.identity_b_username == "bob"
        assert config.identity_b_password == "secret"

    @pytest.mark.parametrize("field,value", [
        ("burst_requests", 1),
        ("window_ms", 0),
        ("align_margin_ms", -1),
        ("request_timeout", 0),
        ("users_path", "api/v1/users"),
    ])
    def test_invalid_values(self, field, value):
        with pytest.raises(PydanticValidationError):
            HarnessConfig(_env_file=None, **{field: value})

    def test_get_config_ignores_unset_overrides(self, monkeypatch):
        monkeypatch.setenv("BURST_REQUESTS", "10")
        config = get_config(burst_requests=None, api_base_url="http://override")
        assert config.burst_requests == 10
        assert config.api_base_url == "http://override"

    def test_log_level_normalised(self):
        assert HarnessConfig(_env_file=None, log_level="DEBUG").log_level == "debug"
        with pytest.raises(PydanticValidationError):
            HarnessConfig(_env_file=None, log_level="verbose")

    def test_cleared_env_names_cover_every_setting(self):
        aliases = {field.validation_alias for field in HarnessConfig.model_fields.values()}
        assert aliases == set(HARNESS_ENV_NAMES)
