"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Optional, Union

import yaml

from .defaults import DefaultConfig, get_default_config

CONFIG_FILENAME = "planner.yaml"


def _apply_overrides(sections: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """
    Layer overrides onto config sections.

    Nested sections are merged key by key, so overriding one plan value keeps
    the rest of the plan defaults. Neither input is modified.
    """
    merged = dict(sections)
    for name, value in overrides.items():
        current = merged.get(name)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[name] = _apply_overrides(current, value)
        else:
            merged[name] = value
    return merged


@dataclass(frozen=True)
class ConfigLoader:
    """Resolves a user's planner settings from defaults, planner.yaml and call overrides."""

    config_dir: Path
    defaults: DefaultConfig

    @classmethod
    def create(cls, config_dir: Optional[Union[str, Path]] = None) -> "ConfigLoader":
        """Create a loader reading from config_dir, or the repository's config/ directory."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_user_config(self, user_id: str) -> dict[str, Any]:
        """
        Read the overrides planner.yaml lists under users.<user_id>.

        A missing file, or a user without an entry, yields no overrides.
        """
        config_file = self.config_dir / CONFIG_FILENAME
        if not config_file.exists():
            return {}

        with open(config_file) as f:
            document = yaml.safe_load(f) or {}

        return (document.get("users") or {}).get(user_id) or {}

    def merge_config(
        self,
        user_id: str,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Resolve the settings that apply to one user.

        Priority order:
        1. Call overrides (highest priority)
        2. User entry in planner.yaml
        3. Built-in defaults (lowest priority)
        """
        config = _apply_overrides(asdict(self.defaults), self.load_user_config(user_id))
        if overrides:
            config = _apply_overrides(config, overrides)
        return config
