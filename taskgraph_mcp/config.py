"""
Server configuration for taskgraph-mcp.

Supports configuration via:
1. Environment variables (highest priority)
2. TOML config file (taskgraph-mcp.toml)
3. Default values (lowest priority)

Environment variables:
- TASKGRAPH_MCP_TASKS_FILE: Path to the tasks.json file backing the JSON store
- TASKGRAPH_MCP_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
- TASKGRAPH_MCP_STRUCTURED_LOGGING: Emit JSON-line log records (true/false)
- TASKGRAPH_MCP_CYCLE_BREAK_POLICY: Edge chosen when breaking cycles (max-in-degree, closing-edge)
- TASKGRAPH_MCP_NEXT_TASK_TIEBREAK: Tie-break among equal priorities (dependents, dependencies)
- TASKGRAPH_MCP_HIGH_COMPLEXITY_THRESHOLD: Score at or above which a task is flagged in reports
- TASKGRAPH_MCP_CONFIG_FILE: Path to TOML config file
"""

import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from taskgraph_mcp.engine.complexity import DEFAULT_HIGH_COMPLEXITY_THRESHOLD
from taskgraph_mcp.engine.policies import (
    CYCLE_BREAK_POLICIES,
    DEFAULT_CYCLE_BREAK_POLICY,
    DEFAULT_TIEBREAK_POLICY,
    TIEBREAK_POLICIES,
    CycleBreakPolicy,
    TieBreakPolicy,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILES = ("taskgraph-mcp.toml", ".taskgraph-mcp.toml")


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _normalize_policy(value: str, valid: dict[str, Any], default: str, kind: str) -> str:
    normalized = str(value).strip().lower()
    if normalized not in valid:
        logger.warning(
            "Invalid %s '%s'. Falling back to '%s'. Valid options: %s",
            kind,
            value,
            default,
            ", ".join(sorted(valid)),
        )
        return default
    return normalized


class ServerConfig(BaseModel):
    """Server configuration with support for env vars and TOML overrides."""

    # Store configuration
    tasks_file: Path = Field(default=Path("tasks.json"))

    # Logging configuration
    log_level: str = "INFO"
    structured_logging: bool = False

    # Engine configuration
    cycle_break_policy: str = DEFAULT_CYCLE_BREAK_POLICY
    next_task_tiebreak: str = DEFAULT_TIEBREAK_POLICY
    high_complexity_threshold: float = DEFAULT_HIGH_COMPLEXITY_THRESHOLD

    @classmethod
    def from_env(cls, config_file: str | None = None) -> "ServerConfig":
        """
        Create configuration from environment variables and optional TOML file.

        Priority (highest to lowest):
        1. Environment variables
        2. TOML config file
        3. Default values
        """
        config = cls()

        toml_path = config_file or os.environ.get("TASKGRAPH_MCP_CONFIG_FILE")
        if toml_path:
            config._load_toml(Path(toml_path))
        else:
            for default_path in DEFAULT_CONFIG_FILES:
                if Path(default_path).exists():
                    config._load_toml(Path(default_path))
                    break

        config._load_env()
        return config

    def _load_toml(self, path: Path) -> None:
        """Load configuration from TOML file."""
        if not path.exists():
            logger.warning("Config file not found: %s", path)
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error("Failed to load config file %s: %s", path, e)
            return

        if "store" in data:
            store = data["store"]
            if "tasks_file" in store:
                self.tasks_file = Path(store["tasks_file"])

        if "logging" in data:
            log = data["logging"]
            if "level" in log:
                self.log_level = str(log["level"]).upper()
            if "structured" in log:
                self.structured_logging = _parse_bool(log["structured"])

        if "engine" in data:
            engine = data["engine"]
            if "cycle_break_policy" in engine:
                self.cycle_break_policy = _normalize_policy(
                    engine["cycle_break_policy"], CYCLE_BREAK_POLICIES, DEFAULT_CYCLE_BREAK_POLICY, "cycle break policy"
                )
            if "next_task_tiebreak" in engine:
                self.next_task_tiebreak = _normalize_policy(
                    engine["next_task_tiebreak"], TIEBREAK_POLICIES, DEFAULT_TIEBREAK_POLICY, "next task tie-break"
                )
            if "high_complexity_threshold" in engine:
                self.high_complexity_threshold = float(engine["high_complexity_threshold"])

    def _load_env(self) -> None:
        """Load configuration from environment variables."""
        if tasks_file := os.environ.get("TASKGRAPH_MCP_TASKS_FILE"):
            self.tasks_file = Path(tasks_file)

        if level := os.environ.get("TASKGRAPH_MCP_LOG_LEVEL"):
            self.log_level = level.upper()

        if structured := os.environ.get("TASKGRAPH_MCP_STRUCTURED_LOGGING"):
            self.structured_logging = _parse_bool(structured)

        if policy := os.environ.get("TASKGRAPH_MCP_CYCLE_BREAK_POLICY"):
            self.cycle_break_policy = _normalize_policy(
                policy, CYCLE_BREAK_POLICIES, DEFAULT_CYCLE_BREAK_POLICY, "cycle break policy"
            )

        if tiebreak := os.environ.get("TASKGRAPH_MCP_NEXT_TASK_TIEBREAK"):
            self.next_task_tiebreak = _normalize_policy(
                tiebreak, TIEBREAK_POLICIES, DEFAULT_TIEBREAK_POLICY, "next task tie-break"
            )

        if threshold := os.environ.get("TASKGRAPH_MCP_HIGH_COMPLEXITY_THRESHOLD"):
            try:
                self.high_complexity_threshold = float(threshold)
            except ValueError:
                logger.warning("Invalid TASKGRAPH_MCP_HIGH_COMPLEXITY_THRESHOLD: %s, using default", threshold)

    @property
    def cycle_breaker(self) -> CycleBreakPolicy:
        return CYCLE_BREAK_POLICIES.get(self.cycle_break_policy, CYCLE_BREAK_POLICIES[DEFAULT_CYCLE_BREAK_POLICY])

    @property
    def tiebreaker(self) -> TieBreakPolicy:
        return TIEBREAK_POLICIES.get(self.next_task_tiebreak, TIEBREAK_POLICIES[DEFAULT_TIEBREAK_POLICY])

    def setup_logging(self) -> None:
        """Configure logging based on settings. Records go to stderr; stdout carries MCP traffic."""
        level = getattr(logging, self.log_level, logging.INFO)

        if self.structured_logging:
            formatter = logging.Formatter(
                '{"timestamp":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}'
            )
        else:
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)

        root_logger = logging.getLogger("taskgraph_mcp")
        root_logger.setLevel(level)
        root_logger.handlers.clear()
        root_logger.addHandler(handler)


# Global configuration instance
_config: ServerConfig | None = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def set_config(config: ServerConfig | None) -> None:
    """Set the global configuration instance. ``None`` reloads it on next access."""
    global _config
    _config = config
