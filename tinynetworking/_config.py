from os import environ as env
from typing import Any, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError

from ._utils.constants import (
    ENV_DEBUG,
    ENV_DISABLE_SSL_VERIFY,
    ENV_FOLLOW_REDIRECTS,
    ENV_MAX_WORKERS,
    ENV_SSL_CERT_DIR,
    ENV_SSL_CERT_FILE,
    ENV_STANDARD_CERT_DIR,
    ENV_STANDARD_CERT_FILES,
    ENV_SYSTEM_CERTS,
    ENV_TIMEOUT,
)
from .models.exceptions import ConfigurationError

_TRUTHY = ("1", "true", "yes", "on")


def _first_env(*names: str) -> Optional[str]:
    for name in names:
        if env.get(name):
            return env[name]
    return None


class Config(BaseModel):
    timeout: float = Field(default=30.0, gt=0)
    follow_redirects: bool = True
    verify_ssl: bool = True
    system_certs: bool = True
    ssl_cert_file: Optional[str] = None
    ssl_cert_dir: Optional[str] = None
    max_workers: int = Field(default=4, ge=1)
    debug: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> "Config":
        """Builds a configuration from the environment.

        A ``.env`` file found from the working directory is loaded first.
        Keyword arguments take precedence over environment values. CA paths
        fall back to ``SSL_CERT_FILE``, ``REQUESTS_CA_BUNDLE`` and
        ``SSL_CERT_DIR``.

        Raises:
            ConfigurationError: If a value cannot be parsed.
        """
        load_dotenv(find_dotenv(usecwd=True))

        values: dict[str, Any] = {}
        if ENV_TIMEOUT in env:
            values["timeout"] = env[ENV_TIMEOUT]
        if ENV_FOLLOW_REDIRECTS in env:
            values["follow_redirects"] = env[ENV_FOLLOW_REDIRECTS]
        if ENV_DISABLE_SSL_VERIFY in env:
            values["verify_ssl"] = env[ENV_DISABLE_SSL_VERIFY].lower() not in _TRUTHY
        if ENV_SYSTEM_CERTS in env:
            values["system_certs"] = env[ENV_SYSTEM_CERTS]
        if ENV_MAX_WORKERS in env:
            values["max_workers"] = env[ENV_MAX_WORKERS]
        if ENV_DEBUG in env:
            values["debug"] = env[ENV_DEBUG].lower() in _TRUTHY

        cert_file = _first_env(ENV_SSL_CERT_FILE, *ENV_STANDARD_CERT_FILES)
        if cert_file is not None:
            values["ssl_cert_file"] = cert_file
        cert_dir = _first_env(ENV_SSL_CERT_DIR, ENV_STANDARD_CERT_DIR)
        if cert_dir is not None:
            values["ssl_cert_dir"] = cert_dir

        values.update(overrides)

        try:
            return cls(**values)
        except ValidationError as e:
            fields = ", ".join(str(error["loc"][0]) for error in e.errors())
            raise ConfigurationError(f"Invalid configuration for: {fields}") from e
