"""Batch driver walking the DSN list and emitting tool invocations."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Mapping

from .commands import SCHEMA_PLACEHOLDER, CommandSynthesizer
from .config import RunConfig
from .errors import CommandExecutionError
from .identifiers import resolve_identifiers
from .models import ConnectionRecord, GeneratedCommand
from .runner import CommandRunner, SubprocessRunner

LOG = logging.getLogger(__name__)

Echo = Callable[[str], None]


@dataclass(slots=True)
class BatchSummary:
    """Counters reported once the batch completes."""

    records: int = 0
    skipped: int = 0
    schemas: int = 0
    commands: int = 0
    failures: int = 0


def parse_schema_listing(text: str) -> list[str]:
    """Schema names from SHOW_SCHEMA output (``<type> <name>`` per line)."""

    schemas: list[str] = []
    for line in text.splitlines():
        tokens = line.split()
        if len(tokens) >= 2:
            schemas.append(tokens[1])
    return schemas


class BatchDriver:
    """Runs records strictly in order, one subprocess at a time."""

    def __init__(
        self,
        config: RunConfig,
        runner: CommandRunner | None = None,
        *,
        synthesizer: CommandSynthesizer | None = None,
        echo: Echo = print,
    ) -> None:
        self._config = config
        self._runner = runner or SubprocessRunner(timeout=config.timeout)
        self._synthesizer = synthesizer or CommandSynthesizer(config)
        self._echo = echo
        self._header_pending = True
        self._summary = BatchSummary()

    def run(self, records: Iterable[ConnectionRecord]) -> BatchSummary:
        for record in records:
            if not resolve_identifiers(record):
                self._summary.skipped += 1
                continue
            self._summary.records += 1
            env = record.credentials
            try:
                if record.schema:
                    self._emit(record, record.schema, env)
                else:
                    self._discover(record, env)
            except CommandExecutionError as exc:
                self._summary.failures += 1
                LOG.error("%s", exc, extra={"line_number": record.line_number})
        LOG.info(
            "Scan finished: %d record(s), %d skipped, %d schema(s), %d command(s), %d failure(s)",
            self._summary.records,
            self._summary.skipped,
            self._summary.schemas,
            self._summary.commands,
            self._summary.failures,
        )
        return self._summary

    def _discover(self, record: ConnectionRecord, env: Mapping[str, str]) -> None:
        command = self._synthesizer.discovery(record)
        self._summary.commands += 1
        if self._config.dry_run:
            self._echo(command.render())
        outcome = self._runner.capture(command, env)
        if not outcome.ok:
            self._summary.failures += 1
        if self._config.dry_run:
            listing = outcome.stdout.rstrip("\n")
            if listing:
                self._echo(listing)
            self._emit(record, SCHEMA_PLACEHOLDER, env, template=True)
            return
        schemas = parse_schema_listing(outcome.stdout)
        if not schemas:
            LOG.warning("Schema discovery returned nothing", extra={"line_number": record.line_number})
        for schema in schemas:
            self._emit(record, schema, env)

    def _emit(self, record: ConnectionRecord, schema: str, env: Mapping[str, str], *, template: bool = False) -> None:
        header = self._header_pending
        self._header_pending = False
        commands = (
            self._synthesizer.summary(record, schema, header=header),
            self._synthesizer.detail(record, schema, template=template),
        )
        self._summary.schemas += 1
        for command in commands:
            self._dispatch(command, env)

    def _dispatch(self, command: GeneratedCommand, env: Mapping[str, str]) -> None:
        self._summary.commands += 1
        if self._config.dry_run:
            self._echo(command.render())
            return
        LOG.info("Running %s", command.render())
        try:
            outcome = self._runner.run(command, env)
        except CommandExecutionError as exc:
            self._summary.failures += 1
            LOG.error("%s", exc)
            return
        if not outcome.ok:
            self._summary.failures += 1


__all__ = ["BatchDriver", "BatchSummary", "parse_schema_listing"]
