"""
Run configuration of the annealing solver.

Two file formats are understood:

- plain ``key = value`` lines (blank lines and ``#`` comments ignored),
- a flat YAML mapping when the file ends in ``.yaml`` or ``.yml``.

Both go through :func:`parse_config`, which rejects unknown, duplicate,
missing or unparsable keys with a :class:`ConfigurationError`.
"""

import argparse
import math
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

import yaml

from ..errors import ConfigurationError
from ..problem import GenerationMethod, TSP
from ..sa.scheduler import COOLING_METHODS, Scheduler

REQUIRED_KEYS = (
    "initial_temperature",
    "minimum_temperature",
    "temperature_decay",
    "max_iterations",
    "generation_method",
    "cooling_method",
)
OPTIONAL_KEYS = ("seed", "time_limit", "legacy_moves")

KOPT_PATTERN = re.compile(r"(\d+)-opt")


@dataclass(frozen=True)
class AnnealingConfig:
    initial_temperature: float
    minimum_temperature: float
    temperature_decay: float
    max_iterations: int
    generation_method: GenerationMethod
    cooling_method: str
    k: Optional[int] = None
    seed: Optional[int] = None
    time_limit: Optional[float] = None
    legacy_moves: bool = True

    def __post_init__(self):
        if not (math.isfinite(self.initial_temperature) and self.initial_temperature > 0):
            raise ConfigurationError(
                f"initial_temperature must be a finite value > 0, got {self.initial_temperature}"
            )
        if not self.minimum_temperature >= 0:
            raise ConfigurationError(
                f"minimum_temperature must be >= 0, got {self.minimum_temperature}"
            )
        if self.max_iterations < 1:
            raise ConfigurationError(
                f"max_iterations must be a positive integer, got {self.max_iterations}"
            )
        if self.cooling_method not in COOLING_METHODS:
            raise ConfigurationError(f"Unknown cooling_method: {self.cooling_method}")
        # Build once so an invalid decay is reported before the run starts
        Scheduler(self.cooling_method, self.initial_temperature, self.temperature_decay)
        try:
            method = GenerationMethod(self.generation_method)
        except ValueError:
            raise ConfigurationError(
                f"Unknown generation_method: {self.generation_method}"
            )
        object.__setattr__(self, "generation_method", method)
        if method == GenerationMethod.KOPT:
            if self.k is None or self.k < 1:
                raise ConfigurationError(f"k-opt needs a positive k, got {self.k}")
            # Validates k >= 2 for the non-legacy move
            TSP.min_tour_length(method, self.k, self.legacy_moves)
        if self.seed is not None and not 0 <= self.seed < 2**64:
            raise ConfigurationError(f"seed must be in [0, 2**64), got {self.seed}")
        if self.time_limit is not None and not self.time_limit > 0:
            raise ConfigurationError(f"time_limit must be > 0, got {self.time_limit}")

    @property
    def generation_label(self) -> str:
        if self.generation_method == GenerationMethod.KOPT:
            return f"{self.k}-opt"
        return self.generation_method.value


# --------------------------------
# Value parsing
# --------------------------------


def _wrong(key: str, value: Any) -> ConfigurationError:
    return ConfigurationError(f"Wrong configuration: {key} = {value!r}")


def _parse_float(key: str, value: Any) -> float:
    if isinstance(value, bool):
        raise _wrong(key, value)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise _wrong(key, value)


def _parse_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise _wrong(key, value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise _wrong(key, value)
    raise _wrong(key, value)


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "on", "1"):
            return True
        if lowered in ("false", "no", "off", "0"):
            return False
    raise _wrong(key, value)


def parse_generation_method(value: Any) -> Tuple[GenerationMethod, Optional[int]]:
    """
    Parse 'Swap', 'Insert', 'Reverse' or '<k>-opt'.

    Returns:
        The move and, for k-opt, its k
    """
    text = str(value).strip()
    if text in ("Swap", "Insert", "Reverse"):
        return GenerationMethod(text), None
    match = KOPT_PATTERN.fullmatch(text)
    if match is None:
        raise ConfigurationError(f"Unknown configuration: generation_method = {text!r}")
    k = int(match.group(1))
    if k < 1:
        raise ConfigurationError(f"k-opt needs a positive k, got {text!r}")
    return GenerationMethod.KOPT, k


def parse_config(values: Mapping[str, Any]) -> AnnealingConfig:
    """
    Validate a raw key-value mapping and build the run configuration.

    Args:
        values: Mapping of configuration keys to raw (string or YAML) values

    Returns:
        Immutable AnnealingConfig

    Raises:
        ConfigurationError: On unknown, missing or unparsable keys
    """
    unknown = [key for key in values if key not in REQUIRED_KEYS + OPTIONAL_KEYS]
    if unknown:
        raise ConfigurationError(f"Unknown configuration: {', '.join(map(str, unknown))}")
    missing = [key for key in REQUIRED_KEYS if key not in values]
    if missing:
        raise ConfigurationError(f"Missing configuration: {', '.join(missing)}")

    method, k = parse_generation_method(values["generation_method"])
    cooling_method = str(values["cooling_method"]).strip()
    if cooling_method not in COOLING_METHODS:
        raise ConfigurationError(
            f"Unknown configuration: cooling_method = {cooling_method!r}"
        )

    return AnnealingConfig(
        initial_temperature=_parse_float(
            "initial_temperature", values["initial_temperature"]
        ),
        minimum_temperature=_parse_float(
            "minimum_temperature", values["minimum_temperature"]
        ),
        temperature_decay=_parse_float("temperature_decay", values["temperature_decay"]),
        max_iterations=_parse_int("max_iterations", values["max_iterations"]),
        generation_method=method,
        cooling_method=cooling_method,
        k=k,
        seed=_parse_int("seed", values["seed"]) if values.get("seed") is not None else None,
        time_limit=(
            _parse_float("time_limit", values["time_limit"])
            if values.get("time_limit") is not None
            else None
        ),
        legacy_moves=_parse_bool("legacy_moves", values.get("legacy_moves", True)),
    )


# --------------------------------
# File loading
# --------------------------------


def parse_key_values(lines: Iterable[str]) -> Dict[str, str]:
    """Collect 'key = value' lines into a mapping."""
    values: Dict[str, str] = {}
    for number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        key, value = key.strip(), value.strip()
        if not sep or not key or "=" in value:
            raise ConfigurationError(f"Invalid configuration line {number}: {raw!r}")
        if key in values:
            raise ConfigurationError(f"Duplicate configuration key: {key}")
        values[key] = value
    return values


def load_config(path: Union[str, Path]) -> AnnealingConfig:
    """
    Read a configuration file.

    Args:
        path: '.yaml'/'.yml' file or plain 'key = value' file

    Returns:
        Validated AnnealingConfig
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {path}: {exc}")

    if path.suffix.lower() in (".yaml", ".yml"):
        try:
            values = yaml.safe_load(content)
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in {path}: {exc}")
        if values is None:
            values = {}
        if not isinstance(values, dict):
            raise ConfigurationError(f"{path} must hold a mapping of keys to values")
    else:
        values = parse_key_values(content.splitlines())
    return parse_config(values)


# --------------------------------
# Command line
# --------------------------------


def get_script_arguments(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Search a short closed tour over a point set with simulated annealing.",
    )
    parser.add_argument(
        "--input",
        required=True,
        type=str,
        help="Point file (.xlsx or .csv), one point per row",
    )
    parser.add_argument(
        "--output",
        required=True,
        type=str,
        help="File receiving the iteration trace and final tour",
    )
    parser.add_argument(
        "--config",
        required=True,
        type=str,
        help="Configuration file ('key = value' lines or YAML)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Minimum level of console messages",
    )
    parser.add_argument(
        "--progress",
        action="store_true",
        help="Show a progress bar while annealing",
    )
    return parser.parse_args(argv)
