"""Configuration loading and management for repo-affinity.

Configuration sources are merged in priority order (lowest to highest):
    1. Defaults (defined in RecommenderConfig)
    2. Global config (~/.repo-affinity.toml)
    3. Project config (./repo-affinity.toml)
    4. Explicit config file
    5. Environment variables (REPO_AFFINITY_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(min_user_rating=20)
    >>> config.min_user_rating
    20
    >>> config.max_rel_repo
    100
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError
from .scoring import DEFAULT_WEIGHTS

Verbosity = Literal["quiet", "normal", "verbose"]
AffinityMode = Literal["joined", "transpose"]
OutputFormat = Literal["tsv", "jsonl"]

ENV_PREFIX = "REPO_AFFINITY_"

_AFFINITY_MODES = ("joined", "transpose")
_OUTPUT_FORMATS = ("tsv", "jsonl")
_VERBOSITIES = ("quiet", "normal", "verbose")


@dataclass(frozen=True)
class RecommenderConfig:
    """Configuration for one recommendation run.

    Attributes:
        Input / output:
            data_dir: Directory holding the event files
            output: Path of the recommendation artifact
            output_format: Artifact format ("tsv" or "jsonl")

        Scoring:
            min_user_rating: Minimum accumulated score kept after aggregation
            max_rel_repo: Maximum entries per row after each truncation
            weights: Event category -> positive integer weight

        Propagation:
            affinity_mode: "joined" multiplies the separately aggregated
                repo->user matrix with user->repo; "transpose" uses the
                transpose of user->repo instead
            exclude_self_affinity: Drop (r, r) cells from repo->repo affinity
            workers: Threads used to shard row computation (1 = sequential)

        Output control:
            verbosity: Logging verbosity level
    """

    # Input / output
    data_dir: str = "./data"
    output: str = "output"
    output_format: OutputFormat = "tsv"

    # Scoring
    min_user_rating: int = 10
    max_rel_repo: int = 100
    weights: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))

    # Propagation
    affinity_mode: AffinityMode = "joined"
    exclude_self_affinity: bool = False
    workers: int = 1

    # Output control
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.min_user_rating < 0:
            raise InvalidConfigError(
                "min_user_rating", self.min_user_rating, "must be non-negative"
            )
        if self.max_rel_repo < 1:
            raise InvalidConfigError("max_rel_repo", self.max_rel_repo, "must be at least 1")
        if self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")

        if self.affinity_mode not in _AFFINITY_MODES:
            raise InvalidConfigError(
                "affinity_mode", self.affinity_mode, f"expected one of {', '.join(_AFFINITY_MODES)}"
            )
        if self.output_format not in _OUTPUT_FORMATS:
            raise InvalidConfigError(
                "output_format", self.output_format, f"expected one of {', '.join(_OUTPUT_FORMATS)}"
            )
        if self.verbosity not in _VERBOSITIES:
            raise InvalidConfigError(
                "verbosity", self.verbosity, f"expected one of {', '.join(_VERBOSITIES)}"
            )

        if not self.weights:
            raise InvalidConfigError("weights", self.weights, "weight table is empty")
        for category, weight in self.weights.items():
            # bool is an int subclass; reject it explicitly
            if isinstance(weight, bool) or not isinstance(weight, int) or weight < 1:
                raise InvalidConfigError(
                    f"weights.{category}", weight, "must be a positive integer"
                )

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir)

    @property
    def output_path(self) -> Path:
        return Path(self.output)


def load_config(config_file: Optional[Path] = None, **overrides) -> RecommenderConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options fall through.

    Returns:
        Validated RecommenderConfig instance

    Raises:
        ConfigurationError: If a config file is missing or invalid
        InvalidConfigError: If a merged value fails validation

    Example:
        >>> config = load_config(config_file=Path("custom.toml"), workers=4)
    """
    merged: dict = {}

    global_config = Path.home() / ".repo-affinity.toml"
    if global_config.exists():
        merged.update(_read_config_file(global_config, "global config"))

    project_config = Path.cwd() / "repo-affinity.toml"
    if project_config.exists():
        merged.update(_read_config_file(project_config, "project config"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_read_config_file(config_file, "config file"))

    merged.update(_load_env_vars())

    # Boolean verbosity flags from the CLI map onto the verbosity field
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    weights = merged.get("weights")
    if weights is not None and not isinstance(weights, dict):
        raise ConfigurationError(f"Invalid [weights] config: expected a table, got {weights!r}")

    try:
        return RecommenderConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _read_config_file(path: Path, label: str) -> dict:
    try:
        return _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid {label} '{path}': {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from REPO_AFFINITY_* environment variables.

    Every scalar field is supported, e.g. REPO_AFFINITY_MIN_USER_RATING=20 or
    REPO_AFFINITY_EXCLUDE_SELF_AFFINITY=true. The weight table can only be
    set from a config file.
    """
    type_hints = get_type_hints(RecommenderConfig)

    result: dict[str, Any] = {}

    for field_name in RecommenderConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise ConfigurationError(f"Invalid {env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type.

    Returns None for types that cannot come from the environment (dicts).

    Raises:
        ValueError: If value can't be parsed to the expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    if origin is dict or type_hint is dict:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load a TOML file and return the parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli is not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or the 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
