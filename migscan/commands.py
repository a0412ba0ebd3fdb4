"""Build the assessment tool invocations for a connection record."""

from __future__ import annotations

import re
from pathlib import Path

from .config import RunConfig
from .models import CommandKind, ConnectionRecord, EngineType, GeneratedCommand

SCHEMA_PLACEHOLDER = "<SCHEMA>"

ENGINE_FLAGS: dict[EngineType, tuple[str, ...]] = {
    EngineType.MYSQL: ("-m",),
    EngineType.MSSQL: ("-M",),
    EngineType.ORACLE: (),
}

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]")
MAX_COMPONENT_LENGTH = 64


def safe_filename_component(text: str) -> str:
    """Make ``text`` usable as part of a single file name.

    Anything outside ``[A-Za-z0-9._-]`` becomes ``_``; empty or dot-only
    results collapse to ``_`` so the name can never walk out of the
    output directory. Results are cut to ``MAX_COMPONENT_LENGTH`` characters.
    """

    cleaned = _UNSAFE_FILENAME_CHARS.sub("_", text)[:MAX_COMPONENT_LENGTH]
    if not cleaned.strip("."):
        return "_"
    return cleaned


class CommandSynthesizer:
    """Turns a resolved ConnectionRecord into tool command lines."""

    def __init__(self, config: RunConfig) -> None:
        self._config = config

    def base_argv(self, record: ConnectionRecord) -> list[str]:
        """Binary, engine selector, DSN and optional config file."""

        argv = [self._config.binary, *ENGINE_FLAGS[record.engine_type], "-s", record.dsn]
        if self._config.config_file is not None:
            argv.extend(["-c", str(self._config.config_file)])
        return argv

    def discovery(self, record: ConnectionRecord) -> GeneratedCommand:
        """List the schemas the tool can see behind the DSN."""

        argv = [*self.base_argv(record), "-t", "SHOW_SCHEMA"]
        return GeneratedCommand(argv=tuple(argv), kind=CommandKind.DISCOVERY)

    def summary(self, record: ConnectionRecord, schema: str, *, header: bool = False) -> GeneratedCommand:
        """One CSV row for ``schema`` appended to the shared summary file."""

        argv = self._report_argv(record, schema, "--dump_as_sheet")
        if header:
            argv.append("--print_header")
        argv.extend(self._audit_argv(record))
        return GeneratedCommand(
            argv=tuple(argv),
            kind=CommandKind.SUMMARY,
            output=self._config.summary_file,
            append=True,
        )

    def detail(self, record: ConnectionRecord, schema: str, *, template: bool = False) -> GeneratedCommand:
        """Full report for ``schema`` in the configured format.

        With ``template`` the schema is a placeholder kept verbatim in the
        file name for display.
        """

        argv = self._report_argv(record, schema, f"--dump_as_{self._config.report_format}")
        argv.extend(self._audit_argv(record))
        return GeneratedCommand(
            argv=tuple(argv),
            kind=CommandKind.DETAIL,
            output=self.report_path(record, schema, template=template),
            append=True,
        )

    def report_filename(self, record: ConnectionRecord, schema: str, *, template: bool = False) -> str:
        name = schema if template else safe_filename_component(schema)
        host = safe_filename_component(record.resolved_host) if record.resolved_host else ""
        sid = safe_filename_component(record.resolved_sid)
        return f"{host}{sid}_{name}-report.{self._config.report_format}"

    def report_path(self, record: ConnectionRecord, schema: str, *, template: bool = False) -> Path:
        return self._config.output_dir / self.report_filename(record, schema, template=template)

    def _report_argv(self, record: ConnectionRecord, schema: str, dump_flag: str) -> list[str]:
        return [
            *self.base_argv(record),
            "-n",
            schema,
            "-t",
            "SHOW_REPORT",
            dump_flag,
            "--cost_unit_value",
            str(self._config.cost_unit),
            "--estimate_cost",
        ]

    @staticmethod
    def _audit_argv(record: ConnectionRecord) -> list[str]:
        if not record.audit_users:
            return []
        return ["--audit_user", record.audit_users]


__all__ = ["CommandSynthesizer", "ENGINE_FLAGS", "MAX_COMPONENT_LENGTH", "SCHEMA_PLACEHOLDER", "safe_filename_component"]
