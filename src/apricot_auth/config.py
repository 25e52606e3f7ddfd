"""Configuration loading for apricot-auth.

Configuration lives in a YAML file, by default `~/.apricot-auth/config.yml`
or the path in the `APRICOT_AUTH_CONFIG` environment variable:

```yaml
wildapricot:
  client_id: ${WA_CLIENT_ID}
  client_secret: ${WA_CLIENT_SECRET}
  site_name: myassociation
  account_id: "123456"
  redirect_uri: https://example.com/auth/callback/wildapricot
  map_profile_to_user: myapp.auth:map_member
logging:
  level: INFO
```

String values may reference environment variables with `${ENV_VAR}`.
`map_profile_to_user` may name a callable as `module:attribute`; it is called
with the raw PascalCase `contacts/me` record and returns fields to override.
"""

import importlib
import os
import re
from collections.abc import Callable
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import Field

from apricot_auth.auth.models import WildApricotAuthConfigModel
from apricot_auth.models import AuthBaseModel

# No logging in this module as it's used to load the logging config

ENV_VAR_PATTERN = re.compile(r"\${([A-Za-z0-9_]+)}")

CONFIG_ENV_VAR = "APRICOT_AUTH_CONFIG"


class LoggingConfigModel(AuthBaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"


class ApricotAuthConfigModel(AuthBaseModel):
    """Top-level configuration file contents."""

    wildapricot: WildApricotAuthConfigModel
    logging: LoggingConfigModel = Field(default_factory=LoggingConfigModel)


def default_config_path() -> Path:
    return Path(os.environ.get(CONFIG_ENV_VAR, Path.home() / ".apricot-auth" / "config.yml"))


def resolve_env_var(value: str) -> str:
    """Resolve environment variable references in a string.

    Raises:
        ValueError: If a referenced environment variable is not set
    """
    result = value
    for env_var in ENV_VAR_PATTERN.findall(value):
        if env_var not in os.environ:
            raise ValueError(f"Environment variable {env_var} is not set")
        result = result.replace(f"${{{env_var}}}", os.environ[env_var])
    return result


def interpolate_env(config: Any) -> Any:
    """Recursively resolve `${ENV_VAR}` references in a parsed YAML document."""
    if isinstance(config, dict):
        return {key: interpolate_env(value) for key, value in config.items()}
    if isinstance(config, list):
        return [interpolate_env(item) for item in config]
    if isinstance(config, str):
        return resolve_env_var(config)
    return config


def import_callable(reference: str) -> Callable[..., Any]:
    """Import a callable given as `package.module:attribute`."""
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        raise ValueError(f"Invalid callable reference '{reference}', expected 'module:attribute'")

    target: Any = importlib.import_module(module_name)
    for attr in attr_path.split("."):
        target = getattr(target, attr)
    if not callable(target):
        raise ValueError(f"'{reference}' does not refer to a callable")
    return target


def load_config(path: Path | str | None = None) -> ApricotAuthConfigModel:
    """Load and validate the configuration file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the document is not a mapping, an environment variable
            is missing, or a callable reference cannot be imported
        pydantic.ValidationError: If the configuration is invalid
    """
    config_path = Path(path) if path is not None else default_config_path()
    if not config_path.exists():
        raise FileNotFoundError(f"apricot-auth config not found at {config_path}")

    with open(config_path) as f:
        config_data = yaml.safe_load(f) or {}

    if not isinstance(config_data, dict):
        raise ValueError("apricot-auth config must be a mapping")

    config_data = interpolate_env(config_data)

    provider_data = config_data.get("wildapricot")
    if isinstance(provider_data, dict):
        mapper = provider_data.get("map_profile_to_user")
        if isinstance(mapper, str):
            provider_data["map_profile_to_user"] = import_callable(mapper)

    return ApricotAuthConfigModel.model_validate(config_data)


def load_provider_config(path: Path | str | None = None) -> WildApricotAuthConfigModel:
    """Load only the Wild Apricot provider section."""
    return load_config(path).wildapricot


__all__ = [
    "ApricotAuthConfigModel",
    "LoggingConfigModel",
    "default_config_path",
    "import_callable",
    "interpolate_env",
    "load_config",
    "load_provider_config",
    "resolve_env_var",
]
