# src/config/loader.py
"""
Project configuration loader.
config/config.json is the single source of truth.
Secrets and hosts are overridden from environment variables.
"""

from __future__ import annotations

import json
import os
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


# =============================================================================
# PATHS
# =============================================================================

def get_project_root() -> Path:
    """Returns the project root directory."""
    return Path(__file__).parent.parent.parent


def get_config_path() -> Path:
    """Returns the config file path, CONFIG_PATH wins if set."""
    override = os.getenv("CONFIG_PATH")
    if override:
        return Path(override)
    return get_project_root() / "config" / "config.json"


def load_config_json() -> dict[str, Any]:
    """Loads config.json into a dict."""
    config_path = get_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        return json.load(f)


# =============================================================================
# SETTINGS SECTIONS
# =============================================================================

class SystemSettings(BaseModel):
    """System settings."""
    PROJECT_NAME: str = "food_delivery"
    VERSION: str = "1.0.0"
    DEBUG: bool = True
    ENVIRONMENT: str = "development"
    COMPONENT_MODE: str = "api_gateway"


class DeploymentSettings(BaseModel):
    """Where each service listens and how peers reach it."""
    API_GATEWAY_HOST: str = "api_gateway"
    API_GATEWAY_PORT: int = 8080
    CUSTOMER_SERVICE_HOST: str = "customer_service"
    CUSTOMER_SERVICE_PORT: int = 8081
    RESTAURANT_SERVICE_HOST: str = "restaurant_service"
    RESTAURANT_SERVICE_PORT: int = 8082
    ORDER_SERVICE_HOST: str = "order_service"
    ORDER_SERVICE_PORT: int = 8083
    DELIVERY_SERVICE_HOST: str = "delivery_service"
    DELIVERY_SERVICE_PORT: int = 8084

    @property
    def customer_service_url(self) -> str:
        return f"http://{self.CUSTOMER_SERVICE_HOST}:{self.CUSTOMER_SERVICE_PORT}"

    @property
    def restaurant_service_url(self) -> str:
        return f"http://{self.RESTAURANT_SERVICE_HOST}:{self.RESTAURANT_SERVICE_PORT}"

    @property
    def order_service_url(self) -> str:
        return f"http://{self.ORDER_SERVICE_HOST}:{self.ORDER_SERVICE_PORT}"

    @property
    def delivery_service_url(self) -> str:
        return f"http://{self.DELIVERY_SERVICE_HOST}:{self.DELIVERY_SERVICE_PORT}"


class LoggingSettings(BaseModel):
    """Logging settings."""
    LOG_LEVEL: str = "DEBUG"
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = "logs/app.log"
    LOG_FORMAT: str = "colored"
    LOG_MAX_BYTES: int = 10485760


class DatabaseSettings(BaseModel):
    """PostgreSQL settings."""
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "food_delivery"
    DB_USER: str = "postgres"
    DB_PASSWORD: str = ""
    DB_MIN_POOL_SIZE: int = 2
    DB_MAX_POOL_SIZE: int = 10
    DB_COMMAND_TIMEOUT: int = 60
    DB_RETRY_ATTEMPTS: int = 3
    DB_RETRY_DELAY: float = 1.0

    @field_validator("DB_PASSWORD", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        """Falls back to the DB_PASSWORD environment variable."""
        if not v:
            return os.getenv("DB_PASSWORD", "")
        return v

    @property
    def dsn(self) -> str:
        """PostgreSQL DSN."""
        return (
            f"postgresql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )


class RabbitMQSettings(BaseModel):
    """RabbitMQ settings."""
    RABBITMQ_HOST: str = "localhost"
    RABBITMQ_PORT: int = 5672
    RABBITMQ_USER: str = "guest"
    RABBITMQ_PASSWORD: str = "guest"
    RABBITMQ_VHOST: str = "/"
    RABBITMQ_EXCHANGE: str = "app.exchange"
    RABBITMQ_PREFETCH_COUNT: int = 10

    @field_validator("RABBITMQ_PASSWORD", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        env_pass = os.getenv("RABBITMQ_PASSWORD", "")
        if env_pass:
            return env_pass
        return v

    @property
    def url(self) -> str:
        """AMQP connection URL."""
        return (
            f"amqp://{self.RABBITMQ_USER}:{self.RABBITMQ_PASSWORD}"
            f"@{self.RABBITMQ_HOST}:{self.RABBITMQ_PORT}{self.RABBITMQ_VHOST}"
        )


class AuthSettings(BaseModel):
    """Gateway token and password hashing settings."""
    JWT_SECRET: str = ""
    JWT_TTL_SECONDS: int = 86400
    PASSWORD_HASH_ITERATIONS: int = 260000

    @field_validator("JWT_SECRET", mode="before")
    @classmethod
    def get_from_env(cls, v: str) -> str:
        if not v:
            return os.getenv("JWT_SECRET", "")
        return v


class OrderSettings(BaseModel):
    """Order pricing defaults."""
    DEFAULT_DELIVERY_FEE: Decimal = Decimal("2.99")
    CURRENCY: str = "USD"


class HttpClientSettings(BaseModel):
    """Peer HTTP client settings."""
    PEER_TIMEOUT_SECONDS: float = 5.0


# =============================================================================
# SETTINGS
# =============================================================================

class Settings(BaseSettings):
    """
    Application settings.
    Aggregates every config section.
    """
    system: SystemSettings = Field(default_factory=SystemSettings)
    deployment: DeploymentSettings = Field(default_factory=DeploymentSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    rabbitmq: RabbitMQSettings = Field(default_factory=RabbitMQSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    orders: OrderSettings = Field(default_factory=OrderSettings)
    http_client: HttpClientSettings = Field(default_factory=HttpClientSettings)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @classmethod
    def from_config_json(cls) -> "Settings":
        """
        Builds Settings from config.json.
        Secrets and hosts are overridden from the environment.
        """
        config_data = load_config_json()

        # keys starting with _comment_ are documentation only
        data = {k: v for k, v in config_data.items() if not k.startswith("_comment_")}

        return cls(
            system=SystemSettings(
                PROJECT_NAME=data.get("PROJECT_NAME", "food_delivery"),
                VERSION=data.get("VERSION", "1.0.0"),
                DEBUG=data.get("DEBUG", True),
                ENVIRONMENT=os.getenv("ENVIRONMENT", data.get("ENVIRONMENT", "development")),
                COMPONENT_MODE=os.getenv("COMPONENT_MODE", data.get("COMPONENT_MODE", "api_gateway")),
            ),
            deployment=DeploymentSettings(
                API_GATEWAY_HOST=os.getenv("API_GATEWAY_HOST", data.get("API_GATEWAY_HOST", "api_gateway")),
                API_GATEWAY_PORT=int(os.getenv("API_GATEWAY_PORT", data.get("API_GATEWAY_PORT", 8080))),
                CUSTOMER_SERVICE_HOST=os.getenv("CUSTOMER_SERVICE_HOST", data.get("CUSTOMER_SERVICE_HOST", "customer_service")),
                CUSTOMER_SERVICE_PORT=int(os.getenv("CUSTOMER_SERVICE_PORT", data.get("CUSTOMER_SERVICE_PORT", 8081))),
                RESTAURANT_SERVICE_HOST=os.getenv("RESTAURANT_SERVICE_HOST", data.get("RESTAURANT_SERVICE_HOST", "restaurant_service")),
                RESTAURANT_SERVICE_PORT=int(os.getenv("RESTAURANT_SERVICE_PORT", data.get("RESTAURANT_SERVICE_PORT", 8082))),
                ORDER_SERVICE_HOST=os.getenv("ORDER_SERVICE_HOST", data.get("ORDER_SERVICE_HOST", "order_service")),
                ORDER_SERVICE_PORT=int(os.getenv("ORDER_SERVICE_PORT", data.get("ORDER_SERVICE_PORT", 8083))),
                DELIVERY_SERVICE_HOST=os.getenv("DELIVERY_SERVICE_HOST", data.get("DELIVERY_SERVICE_HOST", "delivery_service")),
                DELIVERY_SERVICE_PORT=int(os.getenv("DELIVERY_SERVICE_PORT", data.get("DELIVERY_SERVICE_PORT", 8084))),
            ),
            logging=LoggingSettings(
                LOG_LEVEL=os.getenv("LOG_LEVEL", data.get("LOG_LEVEL", "DEBUG")),
                LOG_TO_FILE=data.get("LOG_TO_FILE", False),
                LOG_FILE_PATH=data.get("LOG_FILE_PATH", "logs/app.log"),
                LOG_FORMAT=data.get("LOG_FORMAT", "colored"),
                LOG_MAX_BYTES=data.get("LOG_MAX_BYTES", 10485760),
            ),
            database=DatabaseSettings(
                DB_HOST=os.getenv("DB_HOST", data.get("DB_HOST", "localhost")),
                DB_PORT=int(os.getenv("DB_PORT", data.get("DB_PORT", 5432))),
                DB_NAME=os.getenv("DB_NAME", data.get("DB_NAME", "food_delivery")),
                DB_USER=os.getenv("DB_USER", data.get("DB_USER", "postgres")),
                DB_PASSWORD=os.getenv("DB_PASSWORD", data.get("DB_PASSWORD", "")),
                DB_MIN_POOL_SIZE=data.get("DB_MIN_POOL_SIZE", 2),
                DB_MAX_POOL_SIZE=data.get("DB_MAX_POOL_SIZE", 10),
                DB_COMMAND_TIMEOUT=data.get("DB_COMMAND_TIMEOUT", 60),
                DB_RETRY_ATTEMPTS=data.get("DB_RETRY_ATTEMPTS", 3),
                DB_RETRY_DELAY=data.get("DB_RETRY_DELAY", 1.0),
            ),
            rabbitmq=RabbitMQSettings(
                RABBITMQ_HOST=os.getenv("RABBITMQ_HOST", data.get("RABBITMQ_HOST", "localhost")),
                RABBITMQ_PORT=int(os.getenv("RABBITMQ_PORT", data.get("RABBITMQ_PORT", 5672))),
                RABBITMQ_USER=os.getenv("RABBITMQ_USER", data.get("RABBITMQ_USER", "guest")),
                RABBITMQ_PASSWORD=os.getenv("RABBITMQ_PASSWORD", data.get("RABBITMQ_PASSWORD", "guest")),
                RABBITMQ_VHOST=data.get("RABBITMQ_VHOST", "/"),
                RABBITMQ_EXCHANGE=data.get("RABBITMQ_EXCHANGE", "app.exchange"),
                RABBITMQ_PREFETCH_COUNT=data.get("RABBITMQ_PREFETCH_COUNT", 10),
            ),
            auth=AuthSettings(
                JWT_SECRET=os.getenv("JWT_SECRET", data.get("JWT_SECRET", "")),
                JWT_TTL_SECONDS=data.get("JWT_TTL_SECONDS", 86400),
                PASSWORD_HASH_ITERATIONS=data.get("PASSWORD_HASH_ITERATIONS", 260000),
            ),
            orders=OrderSettings(
                DEFAULT_DELIVERY_FEE=Decimal(str(data.get("DEFAULT_DELIVERY_FEE", "2.99"))),
                CURRENCY=data.get("CURRENCY", "USD"),
            ),
            http_client=HttpClientSettings(
                PEER_TIMEOUT_SECONDS=data.get("PEER_TIMEOUT_SECONDS", 5.0),
            ),
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Returns the cached settings singleton.
    """
    from dotenv import load_dotenv

    env_path = get_project_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    return Settings.from_config_json()


settings = get_settings()
