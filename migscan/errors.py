"""Exception types raised by migscan."""

from __future__ import annotations


class MigscanError(RuntimeError):
    """Base class for errors that abort a scan."""


class DsnListError(MigscanError):
    """Raised when the DSN list cannot be read or holds a malformed line."""


class ScannerConfigError(MigscanError):
    """Raised when run options are invalid (format, binary, output directory)."""


class CommandExecutionError(MigscanError):
    """Raised when the external tool cannot be spawned at all."""


__all__ = ["CommandExecutionError", "DsnListError", "MigscanError", "ScannerConfigError"]
