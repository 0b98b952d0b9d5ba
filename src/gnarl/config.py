"""Configuration loading and management for Gnarl.

Configuration sources are merged in priority order:
    1. Defaults (defined in AnalysisConfig / ScoringConfig)
    2. Global config (~/.gnarl.toml)
    3. Project config (./gnarl.toml)
    4. Explicit config file
    5. Environment variables (GNARL_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(threshold=10, penalty=3.0)
    >>> config.threshold
    10
    >>> config.scoring.subexpr_penalty
    1.7320508075688772
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import GnarlError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]
OutputFormat = Literal["text", "json"]

DEFAULT_PENALTY = 2.0
DEFAULT_SCALE = 20.0
DEFAULT_THRESHOLD = 30.0
DEFAULT_HORRID_THRESHOLD = 100.0


@dataclass(frozen=True)
class ScoringConfig:
    """Tuning values read by the scoring engine.

    Fixed for the duration of a run.

    Attributes:
        penalty: Multiplier applied to a control-structure body per level
            of nesting (>= 1.0)
        demi_penalty: Gentler multiplier for comparisons mixed with boolean
            operators and for nested parentheses. None (or any value below
            1.0) means sqrt(penalty)
        scale: Divisor that normalizes the raw score into the reported range
    """

    penalty: float = DEFAULT_PENALTY
    demi_penalty: Optional[float] = None
    scale: float = DEFAULT_SCALE

    def __post_init__(self) -> None:
        if self.penalty < 1.0:
            raise ValueError("penalty must be at least 1.0")
        if self.scale <= 0:
            raise ValueError("scale must be positive")

    @property
    def nesting_penalty(self) -> float:
        return self.penalty

    @property
    def subexpr_penalty(self) -> float:
        """Demi-nesting penalty, defaulting to the square root of the penalty."""
        if self.demi_penalty is None or self.demi_penalty < 1.0:
            return math.sqrt(self.penalty)
        return self.demi_penalty

    @property
    def scaling_factor(self) -> float:
        return self.scale


DEFAULT_SCORING = ScoringConfig()


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for a scoring run.

    Attributes:
        Scoring:
            scoring: Penalty and scaling values for the engine

        Reporting filter:
            threshold: Procedures scoring below this are not reported
            horrid_threshold: A procedure scoring above this fails the run
            ignore: Procedure names to skip without scoring

        Preprocessing:
            unifdef_args: Arguments for the preprocessor filter; when empty,
                files are read directly
            unifdef_exe: Preprocessor filter executable

        Output control:
            show_scores: Print the per-procedure score table
            histogram: Print the score histogram and summary statistics
            no_header: Suppress headings and trailing totals
            output_format: "text" or "json"
            verbosity: Logging verbosity level
    """

    scoring: ScoringConfig = field(default_factory=ScoringConfig)

    threshold: float = DEFAULT_THRESHOLD
    horrid_threshold: float = DEFAULT_HORRID_THRESHOLD
    ignore: list[str] = field(default_factory=list)

    unifdef_args: list[str] = field(default_factory=list)
    unifdef_exe: str = "unifdef"

    show_scores: bool = True
    histogram: bool = False
    no_header: bool = False
    output_format: OutputFormat = "text"
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.threshold < 0:
            raise ValueError("threshold must be non-negative")
        if self.horrid_threshold < 0:
            raise ValueError("horrid_threshold must be non-negative")
        if self.output_format not in ("text", "json"):
            raise ValueError("output_format must be 'text' or 'json'")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be quiet, normal or verbose")
        if not self.unifdef_exe:
            raise ValueError("unifdef_exe must not be empty")

    @property
    def report_threshold(self) -> float:
        """Lowest score still reported (rounded scores compare half a point low)."""
        return self.threshold - 0.5


_SCORING_KEYS = {f.name for f in fields(ScoringConfig)}


def load_config(config_file: Optional[Path] = None, **overrides) -> AnalysisConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). Scoring
            keys (penalty, demi_penalty, scale) may be given at top level.

    Returns:
        Validated AnalysisConfig instance

    Raises:
        GnarlError: If a config file is invalid or missing
        InvalidConfigError: If a value fails validation
    """
    merged: dict = {}

    global_config = Path.home() / ".gnarl.toml"
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise GnarlError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / "gnarl.toml"
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise GnarlError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise GnarlError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise GnarlError(f"Invalid config file '{config_file}': {e}")

    scoring: dict[str, Any] = {}
    section = merged.pop("scoring", None)
    if isinstance(section, dict):
        scoring.update(section)
    elif isinstance(section, ScoringConfig):
        scoring.update({f.name: getattr(section, f.name) for f in fields(ScoringConfig)})

    env_overrides = _load_env_vars()
    for key in list(env_overrides):
        if key in _SCORING_KEYS:
            scoring[key] = env_overrides.pop(key)
    merged.update(env_overrides)

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    for key in list(overrides):
        if key in _SCORING_KEYS:
            value = overrides.pop(key)
            if value is not None:
                scoring[key] = value
    merged.update({k: v for k, v in overrides.items() if v is not None})

    for key in ("penalty", "scale"):
        if key in scoring:
            _check_number(key, scoring[key])

    try:
        merged["scoring"] = ScoringConfig(**scoring)
    except TypeError as e:
        raise GnarlError(f"Invalid [scoring] config: {e}")
    except ValueError as e:
        raise InvalidConfigError("scoring", scoring, str(e))

    try:
        return AnalysisConfig(**merged)
    except TypeError as e:
        raise GnarlError(f"Invalid configuration: {e}")
    except ValueError as e:
        raise InvalidConfigError("analysis", merged, str(e))


def _check_number(key: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfigError(key, value, "expected a number")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from GNARL_* environment variables.

    Supported environment variables:
        GNARL_THRESHOLD: float
        GNARL_HORRID_THRESHOLD: float
        GNARL_UNIFDEF_EXE: str
        GNARL_SHOW_SCORES / GNARL_HISTOGRAM / GNARL_NO_HEADER: bool
        GNARL_OUTPUT_FORMAT: text/json
        GNARL_VERBOSITY: quiet/normal/verbose
        GNARL_PENALTY / GNARL_DEMI_PENALTY / GNARL_SCALE: float

    Returns:
        Dict of field_name -> parsed_value for any GNARL_* vars found.
    """
    type_hints = {**get_type_hints(AnalysisConfig), **get_type_hints(ScoringConfig)}

    result: dict[str, Any] = {}

    for field_name, type_hint in type_hints.items():
        if field_name == "scoring":
            continue
        env_key = f"GNARL_{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise GnarlError(f"Invalid {env_key}: {e}")

    return result


_TRUE = ("true", "1", "yes", "on")
_FALSE = ("false", "0", "no", "off")


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Convert one GNARL_* string to the field's type.

    Returns None for list fields, which are not settable from the
    environment.

    Raises:
        ValueError: If the string does not fit the field
    """
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:  # Optional[float]
        type_hint = next(t for t in args if t is not type(None))

    if getattr(type_hint, "__origin__", None) is list:
        return None

    if type_hint is bool:
        if value.lower() in _TRUE:
            return True
        if value.lower() in _FALSE:
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is float:
        return float(value)

    if getattr(type_hint, "__origin__", None) is Literal:
        if value not in type_hint.__args__:
            raise ValueError(f"expected one of {', '.join(type_hint.__args__)}, got '{value}'")
        return value

    return value


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        GnarlError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise GnarlError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
