import os
from dataclasses import dataclass, field

DEFAULT_LIMIT = 50
# Python's re module has no hard cap on groups; this bounds typos like $1000000.
MAX_GROUP_INDEX = 999


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


@dataclass
class Settings:
    root: str = field(default_factory=os.getcwd)  # relative globs resolve here
    default_limit: int = DEFAULT_LIMIT
    max_group_index: int = MAX_GROUP_INDEX
    encoding: str = "utf-8"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from REGEX_MCP_* environment variables."""
        return cls(
            root=os.environ.get("REGEX_MCP_ROOT") or os.getcwd(),
            default_limit=_env_int("REGEX_MCP_DEFAULT_LIMIT", DEFAULT_LIMIT),
            max_group_index=_env_int("REGEX_MCP_MAX_GROUP_INDEX", MAX_GROUP_INDEX),
            encoding=os.environ.get("REGEX_MCP_ENCODING") or "utf-8",
            log_level=(os.environ.get("REGEX_MCP_LOG_LEVEL") or "WARNING").upper(),
        )
