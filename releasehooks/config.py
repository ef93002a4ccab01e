"""Configuration management for releasehooks."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any
import yaml

from .errors import ConfigError
from .hooks.annotations import HOOK_ANNOTATION


@dataclass
class ClusterConfig:
    """Connection settings for the target API server."""
    server: str = ""
    token: str = ""
    namespace: str = "default"
    verify_tls: bool = True


@dataclass
class HookSettings:
    """How hooks are recognized and waited on."""
    timeout: float = 300.0
    poll_interval: float = 2.0
    strict_phases: bool = False
    annotation: str = HOOK_ANNOTATION


DEFAULT_CONFIG: Dict[str, Any] = {
    "cluster": {
        "server": "${KUBE_API_SERVER}",
        "token": "${KUBE_TOKEN}",
        "namespace": "default",
        "verify_tls": True,
    },
    "hooks": {
        "timeout": 300,
        "poll_interval": 2.0,
        "strict_phases": False,
        "annotation": HOOK_ANNOTATION,
    },
}


class ConfigManager:
    """Manage releasehooks configuration from YAML."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(
            config_path
            or os.getenv("RELEASEHOOKS_CONFIG")
            or "~/.config/releasehooks/config.yaml"
        ).expanduser()
        self.data = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from YAML file."""
        if not self.config_path.exists():
            self._create_default_config()

        return self._read_yaml()

    def _read_yaml(self) -> Dict[str, Any]:
        """Read and parse YAML file."""
        try:
            with open(self.config_path, "r") as f:
                content = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Error reading config {self.config_path}: {e}") from e

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigError(f"Config {self.config_path} must be a mapping")
        return content

    def _create_default_config(self) -> None:
        """Create default configuration file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, "w") as f:
            yaml.dump(DEFAULT_CONFIG, f, default_flow_style=False)

    def _resolve_env_var(self, value: Any) -> Any:
        """Resolve environment variable references like ${VAR_NAME}."""
        if not isinstance(value, str):
            return value
        if not value.startswith("${") or not value.endswith("}"):
            return value

        var_name = value[2:-1]
        return os.getenv(var_name, "")

    def _section(self, name: str) -> Dict[str, Any]:
        defaults = DEFAULT_CONFIG[name]
        config = self.data.get(name) or {}
        if not isinstance(config, dict):
            raise ConfigError(f"Config section '{name}' must be a mapping")
        return {**defaults, **config}

    def get_cluster_config(self) -> ClusterConfig:
        """Get API server connection settings."""
        section = self._section("cluster")
        return ClusterConfig(
            server=self._resolve_env_var(section.get("server")) or "",
            token=self._resolve_env_var(section.get("token")) or "",
            namespace=self._resolve_env_var(section.get("namespace")) or "default",
            verify_tls=bool(section.get("verify_tls", True)),
        )

    def get_hook_settings(self) -> HookSettings:
        """Get hook timeout, polling and phase policy settings."""
        section = self._section("hooks")
        try:
            return HookSettings(
                timeout=float(section["timeout"]),
                poll_interval=float(section["poll_interval"]),
                strict_phases=bool(section["strict_phases"]),
                annotation=str(section["annotation"]),
            )
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid hooks config: {e}") from e

