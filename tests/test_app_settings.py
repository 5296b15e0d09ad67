"""
Tests for settings loading, static file serving and the server entry point.
"""

import sys

import pytest
from pydantic import ValidationError

from app import server
from app.configs.app_settings import Settings

from conftest import STATIC_DIR

REQUIRED = ["STRIPE_SECRET_KEY", "STRIPE_PUBLISHABLE_KEY", "STRIPE_WEBHOOK_SECRET", "SUBSCRIPTION_PLAN_ID", "STATIC_DIR"]


# =============================================================================
# Settings
# =============================================================================


class TestSettings:
    def test_loads_required_values_and_defaults(self):
        settings = Settings(_env_file=None)

        assert settings.STRIPE_PUBLISHABLE_KEY == "pk_test"
        assert settings.SUBSCRIPTION_PLAN_ID == "plan_X"
        assert settings.PORT == 4242
        assert settings.WEBHOOK_TOLERANCE_SECONDS == 300
        assert settings.STRIPE_API_TIMEOUT_SECONDS == 30
        assert settings.static_path == STATIC_DIR.resolve()

    @pytest.mark.parametrize("name", REQUIRED)
    def test_missing_required_value_refuses_to_load(self, monkeypatch, name):
        monkeypatch.delenv(name)

        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None)

        assert name in str(exc_info.value)

    @pytest.mark.parametrize("name", REQUIRED)
    def test_empty_required_value_refuses_to_load(self, monkeypatch, name):
        monkeypatch.setenv(name, "   ")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_static_dir_must_exist(self, monkeypatch, tmp_path):
        monkeypatch.setenv("STATIC_DIR", str(tmp_path / "nope"))

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_negative_webhook_tolerance_refuses_to_load(self, monkeypatch):
        monkeypatch.setenv("WEBHOOK_TOLERANCE_SECONDS", "-1")

        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None)

        assert "WEBHOOK_TOLERANCE_SECONDS" in str(exc_info.value)

    def test_zero_webhook_tolerance_is_allowed(self, monkeypatch):
        monkeypatch.setenv("WEBHOOK_TOLERANCE_SECONDS", "0")

        assert Settings(_env_file=None).WEBHOOK_TOLERANCE_SECONDS == 0

    def test_reads_dotenv_file(self, monkeypatch, tmp_path):
        monkeypatch.delenv("SUBSCRIPTION_PLAN_ID")
        env_file = tmp_path / ".env"
        env_file.write_text("SUBSCRIPTION_PLAN_ID=plan_from_file\n")

        assert Settings(_env_file=env_file).SUBSCRIPTION_PLAN_ID == "plan_from_file"


# =============================================================================
# Static files
# =============================================================================


class TestStaticFiles:
    def test_root_serves_index(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "Subscribe" in response.text

    def test_serves_files_from_static_dir(self, client):
        response = client.get("/script.js")

        assert response.status_code == 200
        assert "console.log" in response.text

    def test_unknown_file_is_404(self, client):
        assert client.get("/missing.css").status_code == 404

    def test_api_routes_win_over_static_files(self, client):
        assert client.get("/config").json()["publishableKey"] == "pk_test"


# =============================================================================
# Entry point
# =============================================================================


class TestServerMain:
    def test_runs_uvicorn_on_configured_port(self, monkeypatch):
        calls = []
        monkeypatch.setattr(server.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

        assert server.main() == 0
        assert calls == [("app.main:app", {"host": "0.0.0.0", "port": 4242, "log_level": "info"})]

    def test_missing_config_exits_non_zero(self, monkeypatch):
        monkeypatch.delenv("STRIPE_SECRET_KEY")
        monkeypatch.delitem(sys.modules, "app.configs.app_settings")
        monkeypatch.chdir(STATIC_DIR)

        assert server.main() == 1
