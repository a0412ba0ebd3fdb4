"""Run configuration and user default loading helpers."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Literal

import tomllib

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ScannerConfigError

CONFIG_FILE = Path.home() / ".config" / "migscan" / "config.toml"
DEFAULT_BINARY = "ora2pg"
SUMMARY_FILENAME = "dbs_scan.csv"

ReportFormat = Literal["html", "json"]


class ScannerDefaults(BaseModel):
    """User defaults stored in config.toml; command-line options win."""

    binary: str = DEFAULT_BINARY
    report_format: ReportFormat = "html"
    cost_unit: int = Field(default=5, ge=1)
    timeout: float | None = None


class RunConfig(BaseModel):
    """Process-wide options for one scan, fixed once the run starts."""

    model_config = ConfigDict(frozen=True)

    input_file: Path
    output_dir: Path
    report_format: ReportFormat = "html"
    dry_run: bool = False
    cost_unit: int = Field(default=5, ge=1)
    binary: str = DEFAULT_BINARY
    config_file: Path | None = None
    timeout: float | None = None

    @field_validator("report_format", mode="before")
    @classmethod
    def _normalize_format(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("timeout must be greater than zero")
        return value

    @property
    def summary_file(self) -> Path:
        """Shared CSV file every summary command appends to."""

        return self.output_dir / SUMMARY_FILENAME


def build_run_config(**options: object) -> RunConfig:
    """Validate options into a RunConfig, reporting problems as ScannerConfigError."""

    try:
        return RunConfig(**options)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise ScannerConfigError(f"Invalid options: {problems}") from exc


def resolve_binary(binpath: str | None, default: str = DEFAULT_BINARY) -> str:
    """Return an executable path for the assessment tool.

    A directory is joined with the default binary name, an explicit path must
    exist, and a bare command name is looked up on ``PATH``.
    """

    candidate = binpath or default
    path = Path(candidate).expanduser()
    if path.is_dir():
        path = path / Path(default).name
        candidate = str(path)
    if os.sep in candidate or (os.altsep and os.altsep in candidate):
        if not path.is_file():
            raise ScannerConfigError(f"Binary path '{candidate}' does not exist")
        return str(path)
    found = shutil.which(candidate)
    if found is None:
        raise ScannerConfigError(f"Could not find '{candidate}' on PATH; use --binpath")
    return found


def load_defaults() -> ScannerDefaults:
    """Load user defaults from disk; fall back to built-ins if missing or invalid."""

    try:
        data = _read_config_file()
    except FileNotFoundError:
        return ScannerDefaults()
    except (tomllib.TOMLDecodeError, OSError):
        return ScannerDefaults()
    try:
        return ScannerDefaults(**data)
    except ValidationError:
        return ScannerDefaults()


def _read_config_file() -> dict[str, object]:
    with CONFIG_FILE.open("rb") as handle:
        raw = tomllib.load(handle)
    data: dict[str, object] = {}
    binary = raw.get("binary")
    if isinstance(binary, str) and binary:
        data["binary"] = binary
    report_format = raw.get("format")
    if isinstance(report_format, str):
        data["report_format"] = report_format.lower()
    cost_unit = raw.get("cost_unit")
    if isinstance(cost_unit, int) and not isinstance(cost_unit, bool):
        data["cost_unit"] = cost_unit
    timeout = raw.get("timeout")
    if isinstance(timeout, (int, float)) and not isinstance(timeout, bool):
        data["timeout"] = float(timeout)
    return data


__all__ = [
    "CONFIG_FILE",
    "DEFAULT_BINARY",
    "RunConfig",
    "ReportFormat",
    "SUMMARY_FILENAME",
    "ScannerDefaults",
    "build_run_config",
    "load_defaults",
    "resolve_binary",
]
