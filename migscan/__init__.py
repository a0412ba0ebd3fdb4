"""Batch runner for database migration assessments driven by a DSN list."""

from __future__ import annotations

from .batch import BatchDriver, BatchSummary, parse_schema_listing
from .commands import CommandSynthesizer, safe_filename_component
from .config import RunConfig, build_run_config, load_defaults, resolve_binary
from .dsnlist import parse_dsn_list, read_dsn_list
from .errors import CommandExecutionError, DsnListError, MigscanError, ScannerConfigError
from .identifiers import resolve_identifiers
from .models import CommandKind, ConnectionRecord, EngineType, GeneratedCommand
from .runner import CommandOutcome, CommandRunner, SubprocessRunner

__all__ = [
    "BatchDriver",
    "BatchSummary",
    "CommandExecutionError",
    "CommandKind",
    "CommandOutcome",
    "CommandRunner",
    "CommandSynthesizer",
    "ConnectionRecord",
    "DsnListError",
    "EngineType",
    "GeneratedCommand",
    "MigscanError",
    "RunConfig",
    "ScannerConfigError",
    "SubprocessRunner",
    "build_run_config",
    "load_defaults",
    "parse_dsn_list",
    "parse_schema_listing",
    "read_dsn_list",
    "resolve_binary",
    "resolve_identifiers",
    "safe_filename_component",
]
