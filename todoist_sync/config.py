"""
Interface to configuration as persisted in .yaml file or provided through
the environment.
"""
from __future__ import annotations

import os
from logging import Logger
from pathlib import Path
from typing import Self

import dotenv
import yaml
from pydantic import BaseModel, field_validator

from .core import Session
from .core.session import DEFAULT_HOST, REQUEST_TIMEOUT

__all__ = [
    "Config",
]

ENV_PREFIX = "TODOIST_"
"""
Prefix of environment variables holding config fields.
"""


class Config(BaseModel):
    """
    Encapsulates info needed to connect to Todoist.
    """

    host: str = DEFAULT_HOST
    """
    Base URL of sync API.
    """

    token: str
    """
    API token.
    """

    timeout: float = REQUEST_TIMEOUT
    """
    Default request timeout in seconds.
    """

    @field_validator("token")
    def validate_token(cls, value: str) -> str:
        if not value:
            raise ValueError("token must be provided")
        return value

    @field_validator("timeout")
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError(f"timeout must be positive, got {value}")
        return value

    @classmethod
    def load_yaml(cls, file: Path) -> Self:
        """
        Load config from .yaml file, e.g.:

        ```yaml
        token: 0123456789abcdef
        timeout: 5
        ```
        """
        if not file.is_file():
            raise FileNotFoundError(f"Config file not found: '{file}'")

        with file.open() as fh:
            fields = yaml.safe_load(fh)

        if not isinstance(fields, dict):
            raise ValueError(f"Invalid config in '{file}': {fields}")

        return cls.model_validate(fields)

    @classmethod
    def from_env(cls) -> Self:
        """
        Get config from `TODOIST_HOST`, `TODOIST_TOKEN` and `TODOIST_TIMEOUT`
        environment variables, also loading them from `.env` if present.
        """
        dotenv.load_dotenv()

        fields: dict[str, str] = {"token": ""}

        for field in cls.model_fields:
            if value := os.environ.get(f"{ENV_PREFIX}{field.upper()}"):
                fields[field] = value

        return cls.model_validate(fields)

    def dump_yaml(self, file: Path):
        """
        Write config to .yaml file, in field order.
        """
        file.write_text(
            yaml.safe_dump(
                self.model_dump(mode="json"),
                default_flow_style=False,
                sort_keys=False,
            )
        )

    def create_session(self, *, logger: Logger | None = None) -> Session:
        """
        Get session from this config's fields.
        """
        return Session(
            self.token,
            self.host,
            timeout=self.timeout,
            logger=logger,
        )
