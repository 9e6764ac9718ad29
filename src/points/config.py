"""Configuration management for the points service."""

import logging
import os
import tomllib
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


def _find_repo_root(start_dir: Path) -> Path:
    """Find repository root by walking upward looking for .git or pyproject.toml."""
    current_dir = start_dir

    while True:
        if (current_dir / ".git").exists() or (current_dir / "pyproject.toml").exists():
            return current_dir

        parent_dir = current_dir.parent

        # Stop if we reach filesystem root
        if parent_dir == current_dir:
            return start_dir

        current_dir = parent_dir


def _load_repo_config_data(repo_root: Path) -> Optional[dict]:
    """Load repo config data from .points/config.toml if it exists."""
    config_file = repo_root / ".points" / "config.toml"

    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        # A malformed config file is ignored
        logger.warning(f"Ignoring unreadable config {config_file}: {e}")
        return None


def _get_repo_config_value(data: Optional[dict], keys: list[str]) -> Optional[object]:
    """Safely get a nested repo config value."""
    if not data:
        return None
    current = data
    for key in keys:
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def _first(*values):
    for value in values:
        if value is not None and value != "":
            return value
    return None


class PointsConfig(BaseModel):
    """Configuration for the points HTTP service."""

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=3000, ge=0, le=65535)
    log_level: str = Field(default="INFO")
    transactions_file: Optional[Path] = Field(
        default=None, description="JSON Lines file of transactions to load at startup"
    )

    model_config = {"frozen": True}

    @classmethod
    def from_env(
        cls,
        cli_host: Optional[str] = None,
        cli_port: Optional[int] = None,
        cli_transactions_file: Optional[str] = None,
        start_dir: Optional[Path] = None,
    ) -> "PointsConfig":
        """Resolve configuration with the following precedence:

        1. CLI options (if provided)
        2. POINTS_* environment variables
        3. repo-local .points/config.toml (walk upward from start_dir or CWD)
        4. Defaults

        Args:
            cli_host: Host from CLI --host option
            cli_port: Port from CLI --port option
            cli_transactions_file: Seed file from CLI --transactions option
            start_dir: Directory to start the repo root search from
        """
        repo_root = _find_repo_root(start_dir or Path.cwd())
        data = _load_repo_config_data(repo_root)

        host = _first(
            cli_host,
            os.environ.get("POINTS_HOST"),
            _get_repo_config_value(data, ["server", "host"]),
        )
        port = _first(
            cli_port,
            os.environ.get("POINTS_PORT"),
            _get_repo_config_value(data, ["server", "port"]),
        )
        log_level = _first(
            os.environ.get("POINTS_LOG_LEVEL"),
            _get_repo_config_value(data, ["server", "log_level"]),
        )
        # CLI and env paths are relative to CWD, config file paths to the repo root
        transactions_file = _first(
            cli_transactions_file,
            os.environ.get("POINTS_TRANSACTIONS_FILE"),
        )
        transactions_base = Path.cwd()
        if transactions_file is None:
            transactions_file = _get_repo_config_value(data, ["ledger", "transactions_file"])
            transactions_base = repo_root

        values: dict = {}
        if host is not None:
            values["host"] = str(host)
        if port is not None:
            # Raw value; pydantic reports a non-numeric port as a ValidationError
            values["port"] = port
        if log_level is not None:
            values["log_level"] = str(log_level).upper()
        if transactions_file is not None:
            path = Path(str(transactions_file)).expanduser()
            if not path.is_absolute():
                path = (transactions_base / path).resolve()
            values["transactions_file"] = path

        return cls(**values)
