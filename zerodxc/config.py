"""
Run configuration for ZeroDXC.

:class:`XCSettings` gathers every parameter of one correlation/p-value run.
It validates plain values (positivity, separator codes) on construction;
checks that need the loaded data, such as column ranges and window
feasibility, happen in :func:`zerodxc.pvalue.run_xc_workflow`.
"""

import enum
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .diagram import WindowSpec
from .exceptions import ConfigurationError
from .surrogates.generators import DEFAULT_MAX_ITER, DEFAULT_TOLERANCE

try:  # pragma: no cover - optional dependency
    import yaml  # type: ignore
except ImportError:  # pragma: no cover
    yaml = None


SEPARATORS = {'t': '\t', 's': ' ', 'c': ','}


class RunMode(str, enum.Enum):
    """Which diagram a run produces."""

    CORRELATION = "correlation"
    PVALUE = "pvalue"


def resolve_run_mode(correlation: bool = False, pvalue: bool = False) -> RunMode:
    """
    Pick the run mode from the two output switches.

    The p-value diagram is the default and wins when both are requested.
    """
    if correlation and not pvalue:
        return RunMode.CORRELATION
    return RunMode.PVALUE


def separator_char(code: str) -> str:
    """Map a separator code (``t``, ``s``, ``c``) or literal to its character."""
    if code in SEPARATORS:
        return SEPARATORS[code]
    if code in SEPARATORS.values():
        return code
    raise ConfigurationError(
        f"unknown separator {code!r}; use t (TAB), s (space) or c (comma)")


class XCSettings(BaseModel):
    """Validated parameters of one run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    column_a: int = Field(ge=1)
    column_b: int = Field(ge=1)
    width_count: int = Field(ge=1)
    base_width: int = Field(ge=2)
    delay: int = Field(default=0, ge=0)
    trial_count: int = Field(default=100, ge=1)
    tolerance: float = Field(default=DEFAULT_TOLERANCE, gt=0)
    max_iter: int = Field(default=DEFAULT_MAX_ITER, ge=1)
    parallel: bool = False
    n_jobs: Optional[int] = Field(default=None, ge=1)
    seed: Optional[int] = Field(default=None, ge=0)
    separator: str = "t"
    mode: RunMode = RunMode.PVALUE

    @field_validator("separator")
    @classmethod
    def _known_separator(cls, value: str) -> str:
        separator_char(value)
        return value

    @property
    def separator_char(self) -> str:
        return separator_char(self.separator)

    @property
    def window_spec(self) -> WindowSpec:
        return WindowSpec(base_width=self.base_width,
                          width_count=self.width_count,
                          delay=self.delay)

    @property
    def jobs(self) -> int:
        """Worker threads for the parallel mode."""
        if self.n_jobs is not None:
            return self.n_jobs
        return os.cpu_count() or 1


def build_settings(**values: Any) -> XCSettings:
    """Construct :class:`XCSettings`, turning validation errors into ConfigurationError."""
    try:
        return XCSettings(**values)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or 'settings'}: {err['msg']}"
            for err in exc.errors())
        raise ConfigurationError(problems) from exc


def load_settings(path: Union[str, Path], **overrides: Any) -> XCSettings:
    """
    Load settings from a JSON or YAML file.

    Keyword ``overrides`` that are not None replace values from the file.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf8")
    except OSError as exc:
        raise ConfigurationError(f"cannot read configuration file '{path}': {exc}") from exc

    if path.suffix.lower() in {".yml", ".yaml"}:
        if yaml is None:
            raise ConfigurationError("PyYAML is required to read YAML configuration files")
        data = yaml.safe_load(text) or {}
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"invalid JSON in '{path}': {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigurationError(f"configuration file '{path}' must hold a mapping")

    data.update({k: v for k, v in overrides.items() if v is not None})
    return build_settings(**data)
