"""Configuration module for jumpmcp.

Loads configuration from environment variables with sensible defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path


def _int_env(name: str, default: str, minimum: int, maximum: int | None = None) -> int:
    raw = os.getenv(name, default)
    try:
        value = int(raw)
        if value < minimum:
            raise ValueError(f"Value must be >= {minimum}, got {value}")
        if maximum is not None and value > maximum:
            raise ValueError(f"Value must be between {minimum} and {maximum}, got {value}")
    except ValueError as e:
        raise ValueError(f"Invalid {name} value '{raw}': {e}") from e
    return value


@dataclass
class Config:
    """Application configuration."""

    jump_root: Path
    jump_port: int
    jump_rules: Path
    max_recent: int
    max_suggestions: int

    @classmethod
    def from_env(cls, rules_override: Path | None = None) -> "Config":
        """Load configuration from environment variables.

        Args:
            rules_override: If provided, overrides the JUMP_RULES env var.
        """
        default_root = str(Path.home() / "vault")
        jump_root = Path(os.getenv("JUMP_ROOT", default_root)).expanduser()

        jump_port = _int_env("JUMP_PORT", "8080", 1, 65535)

        # Rules file - CLI flag takes precedence over env var
        if rules_override is not None:
            jump_rules = rules_override.expanduser()
        else:
            default_rules = str(jump_root / ".jump" / "rules.yaml")
            jump_rules = Path(os.getenv("JUMP_RULES", default_rules)).expanduser()

        # 0 disables recent documents entirely
        max_recent = _int_env("JUMP_MAX_RECENT", "4", 0)
        max_suggestions = _int_env("JUMP_MAX_SUGGESTIONS", "50", 1)

        return cls(
            jump_root=jump_root,
            jump_port=jump_port,
            jump_rules=jump_rules,
            max_recent=max_recent,
            max_suggestions=max_suggestions,
        )


# Global config instance (lazy loaded)
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
