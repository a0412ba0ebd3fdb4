"""Subprocess execution of generated tool commands."""

from __future__ import annotations

import logging
import os
import subprocess
import time
from dataclasses import dataclass
from typing import Mapping, Protocol, runtime_checkable

from .errors import CommandExecutionError
from .models import GeneratedCommand

LOG = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandOutcome:
    """Result of one invocation; ``stdout`` is only set for captured runs."""

    command: GeneratedCommand
    returncode: int | None
    elapsed_ms: int
    stdout: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out


@runtime_checkable
class CommandRunner(Protocol):
    """Interface implemented by command runners."""

    def capture(self, command: GeneratedCommand, env: Mapping[str, str]) -> CommandOutcome:
        """Run ``command`` and return its standard output."""

    def run(self, command: GeneratedCommand, env: Mapping[str, str]) -> CommandOutcome:
        """Run ``command`` appending stdout and stderr to ``command.output``."""


class SubprocessRunner:
    """Runs commands with :mod:`subprocess`, one at a time.

    ``env`` entries are layered over the current environment for that
    single child process only; ``os.environ`` is never modified.
    """

    def __init__(self, *, timeout: float | None = None) -> None:
        self._timeout = timeout

    def capture(self, command: GeneratedCommand, env: Mapping[str, str]) -> CommandOutcome:
        started = time.perf_counter()
        try:
            completed = subprocess.run(
                list(command.argv),
                stdout=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=self._child_env(env),
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            LOG.warning("Command timed out", extra={"argv0": command.argv[0], "timeout": self._timeout})
            stdout = exc.stdout if isinstance(exc.stdout, str) else ""
            return CommandOutcome(command, None, _elapsed(started), stdout=stdout, timed_out=True)
        except OSError as exc:
            raise CommandExecutionError(f"Cannot run '{command.argv[0]}': {exc}") from exc
        outcome = CommandOutcome(command, completed.returncode, _elapsed(started), stdout=completed.stdout or "")
        _log_outcome(outcome)
        return outcome

    def run(self, command: GeneratedCommand, env: Mapping[str, str]) -> CommandOutcome:
        if command.output is None:
            return self.capture(command, env)
        started = time.perf_counter()
        mode = "ab" if command.append else "wb"
        try:
            handle = command.output.open(mode)
        except OSError as exc:
            raise CommandExecutionError(f"Cannot open '{command.output}': {exc}") from exc
        with handle:
            try:
                completed = subprocess.run(
                    list(command.argv),
                    stdout=handle,
                    stderr=subprocess.STDOUT,
                    env=self._child_env(env),
                    timeout=self._timeout,
                    check=False,
                )
            except subprocess.TimeoutExpired:
                LOG.warning(
                    "Command timed out",
                    extra={"argv0": command.argv[0], "timeout": self._timeout, "output": str(command.output)},
                )
                return CommandOutcome(command, None, _elapsed(started), timed_out=True)
            except OSError as exc:
                raise CommandExecutionError(f"Cannot run '{command.argv[0]}': {exc}") from exc
        outcome = CommandOutcome(command, completed.returncode, _elapsed(started))
        _log_outcome(outcome)
        return outcome

    @staticmethod
    def _child_env(env: Mapping[str, str]) -> dict[str, str]:
        merged = dict(os.environ)
        merged.update(env)
        return merged


def _elapsed(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _log_outcome(outcome: CommandOutcome) -> None:
    extra = {
        "kind": outcome.command.kind.value,
        "returncode": outcome.returncode,
        "elapsed_ms": outcome.elapsed_ms,
    }
    if outcome.ok:
        LOG.debug("Command finished", extra=extra)
    else:
        LOG.warning("Command exited with status %s", outcome.returncode, extra=extra)


__all__ = ["CommandOutcome", "CommandRunner", "SubprocessRunner"]
