"""Configuration management for intentnet."""

import copy
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Dict, Any, List

import yaml
from pydantic import BaseModel, Field, field_validator

from intentnet.core.enums import RankingPolicy, TieBreak


logger = logging.getLogger(__name__)


class StoreConfig(BaseModel):
    """Configuration for the compatibility store."""
    path: str = "ObjectActionMap.map"
    learning_rate: float = Field(default=1.0, ge=0.0)
    default_prior: List[float] = Field(default_factory=lambda: [0.0, 0.0, 0.0, 5.0])
    autosave: bool = False  # Write the store whenever a session resolves

    @field_validator("default_prior")
    @classmethod
    def validate_prior(cls, v: List[float]) -> List[float]:
        if len(v) != 4:
            raise ValueError("default_prior needs exactly 4 values")
        if any(x < 0 for x in v) or sum(v) <= 0:
            raise ValueError("default_prior must be non-negative with a positive sum")
        return v


class NetworkConfig(BaseModel):
    """Configuration for scene graph construction."""
    distance_margin: float = Field(default=0.02, ge=0.0)


class InferenceConfig(BaseModel):
    """Configuration for belief propagation."""
    algorithm: str = "sumprod"  # sumprod or maxprod
    tolerance: float = 1e-8
    max_iterations: int = Field(default=1000, gt=0)
    damping: float = Field(default=0.0, ge=0.0, lt=1.0)

    @field_validator("algorithm")
    @classmethod
    def validate_algorithm(cls, v: str) -> str:
        if v not in ("sumprod", "maxprod"):
            raise ValueError(f"Unknown inference algorithm: {v}")
        return v


class RankingConfig(BaseModel):
    """Configuration for query ranking."""
    policy: RankingPolicy = RankingPolicy.BELIEF
    tie_break: TieBreak = TieBreak.RANDOM
    epsilon: float = 1e-8
    random_seed: Optional[int] = None  # None: seeded from the OS


class SessionConfig(BaseModel):
    """Configuration for interactive sessions."""
    learn_on_resolve: bool = True


class LoggingConfig(BaseModel):
    """Configuration for logging."""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_to_file: bool = True
    log_directory: str = "logs"
    log_file: str = "intentnet.log"
    max_log_size_mb: int = 100
    backup_count: int = 5

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        if not isinstance(logging.getLevelName(v.upper()), int):
            raise ValueError(f"Unknown log level: {v}")
        return v.upper()

    def build_handlers(self) -> List[logging.Handler]:
        """Console handler, plus a rotating file handler when enabled."""
        formatter = logging.Formatter(self.format)
        handlers: List[logging.Handler] = [logging.StreamHandler()]

        if self.log_to_file:
            log_dir = Path(self.log_directory)
            log_dir.mkdir(parents=True, exist_ok=True)
            handlers.append(RotatingFileHandler(
                log_dir / self.log_file,
                maxBytes=self.max_log_size_mb * 1024 * 1024,
                backupCount=self.backup_count,
            ))

        for handler in handlers:
            handler.setLevel(self.level)
            handler.setFormatter(formatter)
        return handlers


class IntentNetConfig(BaseModel):
    """Root configuration for intentnet."""

    # System settings
    project_name: str = "intentnet"
    version: str = "0.1.0"
    debug_mode: bool = False

    # Sub-configurations
    store: StoreConfig = Field(default_factory=StoreConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    inference: InferenceConfig = Field(default_factory=InferenceConfig)
    ranking: RankingConfig = Field(default_factory=RankingConfig)
    session: SessionConfig = Field(default_factory=SessionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def setup_logging(self) -> None:
        """Replace the root logger's handlers with the configured ones."""
        logging.basicConfig(
            level=self.logging.level,
            handlers=self.logging.build_handlers(),
            force=True,
        )
        destination = (
            Path(self.logging.log_directory) / self.logging.log_file
            if self.logging.log_to_file else "console only"
        )
        logger.info(f"Logging configured: level={self.logging.level}, output={destination}")


# ============================================================================
# Loading
# ============================================================================

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[3] / "config" / "default.yaml"


def _read_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.warning(f"Config file not found: {path}, using defaults")
        return {}
    logger.info(f"Loading config from {path}")
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level of a config file must be a mapping")
    return data


def load_config(
    config_path: Optional[str] = None,
    overrides: Optional[Dict[str, Any]] = None,
    configure_logging: bool = True
) -> IntentNetConfig:
    """Build a validated config from YAML plus dotted-key overrides.

    Args:
        config_path: YAML file; ``config/default.yaml`` of the repository when None
        overrides: e.g. ``{"ranking.policy": "count", "store.learning_rate": 0.5}``
        configure_logging: Install the logging handlers the config describes

    Example:
        >>> config = load_config(overrides={"ranking.random_seed": 7})
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = IntentNetConfig(**_apply_overrides(_read_yaml(path), overrides or {}))
    if configure_logging:
        config.setup_logging()
    return config


def _apply_overrides(
    config_dict: Dict[str, Any],
    overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """Return a copy of ``config_dict`` with dotted-key overrides set.

    ``{"inference.damping": 0.3}`` sets ``result["inference"]["damping"]``,
    creating intermediate sections as needed.
    """
    result = copy.deepcopy(config_dict)
    for dotted, value in overrides.items():
        *sections, leaf = dotted.split(".")
        target = result
        for section in sections:
            target = target.setdefault(section, {})
            if not isinstance(target, dict):
                raise ValueError(f"Cannot override {dotted!r}: {section!r} is not a section")
        target[leaf] = value
    return result
