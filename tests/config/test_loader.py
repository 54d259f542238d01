# tests/config/test_loader.py
"""
Tests for the configuration loader.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
import pytest

from src.config.loader import (
    AuthSettings,
    DatabaseSettings,
    DeploymentSettings,
    OrderSettings,
    RabbitMQSettings,
    Settings,
    get_config_path,
    get_project_root,
    load_config_json,
)


class TestPaths:
    def test_root_contains_src_and_config(self) -> None:
        root = get_project_root()

        assert isinstance(root, Path)
        assert (root / "src").exists()
        assert (root / "config").exists()

    def test_config_path_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CONFIG_PATH", raising=False)

        assert get_config_path() == get_project_root() / "config" / "config.json"

    def test_config_path_override(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        custom = tmp_path / "custom.json"
        monkeypatch.setenv("CONFIG_PATH", str(custom))

        assert get_config_path() == custom


class TestLoadConfigJson:
    def test_loads_project_config(self, monkeypatch: pytest.MonkeyPatch, config_path: Path) -> None:
        monkeypatch.delenv("CONFIG_PATH", raising=False)

        config = load_config_json()

        assert config == json.loads(config_path.read_text(encoding="utf-8"))
        assert config["RABBITMQ_EXCHANGE"] == "app.exchange"

    def test_missing_file_raises(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("CONFIG_PATH", str(tmp_path / "absent.json"))

        with pytest.raises(FileNotFoundError):
            load_config_json()


class TestSections:
    def test_database_dsn(self) -> None:
        db = DatabaseSettings(DB_HOST="db", DB_PORT=5433, DB_NAME="food", DB_USER="u", DB_PASSWORD="p")

        assert db.dsn == "postgresql://u:p@db:5433/food"

    def test_database_password_falls_back_to_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DB_PASSWORD", "from_env")

        assert DatabaseSettings(DB_PASSWORD="").DB_PASSWORD == "from_env"

    def test_rabbitmq_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("RABBITMQ_PASSWORD", raising=False)
        rabbit = RabbitMQSettings(RABBITMQ_HOST="mq", RABBITMQ_USER="u", RABBITMQ_PASSWORD="p")

        assert rabbit.url == "amqp://u:p@mq:5672/"

    def test_jwt_secret_falls_back_to_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JWT_SECRET", "s3cret")

        assert AuthSettings().JWT_SECRET == "s3cret"

    def test_service_urls(self) -> None:
        deployment = DeploymentSettings(ORDER_SERVICE_HOST="orders", ORDER_SERVICE_PORT=9000)

        assert deployment.order_service_url == "http://orders:9000"
        assert deployment.customer_service_url == "http://customer_service:8081"

    def test_default_delivery_fee(self) -> None:
        assert OrderSettings().DEFAULT_DELIVERY_FEE == Decimal("2.99")


class TestSettingsFromConfigJson:
    def test_builds_every_section(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CONFIG_PATH", raising=False)
        monkeypatch.delenv("ORDER_SERVICE_PORT", raising=False)

        settings = Settings.from_config_json()

        assert settings.system.PROJECT_NAME == "food_delivery"
        assert settings.deployment.ORDER_SERVICE_PORT == 8083
        assert settings.orders.DEFAULT_DELIVERY_FEE == Decimal("2.99")
        assert settings.rabbitmq.RABBITMQ_EXCHANGE == "app.exchange"
        assert settings.http_client.PEER_TIMEOUT_SECONDS == 5.0

    def test_environment_overrides_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("CONFIG_PATH", raising=False)
        monkeypatch.setenv("ORDER_SERVICE_HOST", "localhost")
        monkeypatch.setenv("ORDER_SERVICE_PORT", "9083")
        monkeypatch.setenv("DB_HOST", "postgres")

        settings = Settings.from_config_json()

        assert settings.deployment.order_service_url == "http://localhost:9083"
        assert settings.database.DB_HOST == "postgres"

    def test_comment_keys_are_ignored(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"_comment_x": "doc", "PROJECT_NAME": "other"}), encoding="utf-8")
        monkeypatch.setenv("CONFIG_PATH", str(config_file))

        settings = Settings.from_config_json()

        assert settings.system.PROJECT_NAME == "other"
        assert settings.deployment.API_GATEWAY_PORT == 8080

    def test_delivery_fee_from_string(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"DEFAULT_DELIVERY_FEE": "4.50"}), encoding="utf-8")
        monkeypatch.setenv("CONFIG_PATH", str(config_file))

        settings = Settings.from_config_json()

        assert settings.orders.DEFAULT_DELIVERY_FEE == Decimal("4.50")
