"""Shared dataclasses used across parser, synthesizer and batch modules."""

from __future__ import annotations

import shlex
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class EngineType(str, Enum):
    """Database engine families understood by the assessment tool."""

    MYSQL = "MYSQL"
    ORACLE = "ORACLE"
    MSSQL = "MSSQL"


class CommandKind(str, Enum):
    DISCOVERY = "discovery"
    SUMMARY = "summary"
    DETAIL = "detail"


@dataclass(slots=True)
class ConnectionRecord:
    """One connection entry from the DSN list.

    ``resolved_sid`` and ``resolved_host`` start empty and are filled in by
    :func:`migscan.identifiers.resolve_identifiers` during the batch pass.
    """

    engine_type: EngineType
    schema: str
    dsn: str
    user: str
    password: str
    audit_users: str = ""
    resolved_sid: str = ""
    resolved_host: str = ""
    line_number: int = 0

    @property
    def credentials(self) -> dict[str, str]:
        """Environment entries the external tool reads its login from."""

        return {"ORA2PG_USER": self.user, "ORA2PG_PASSWD": self.password}

    def __repr__(self) -> str:
        return (
            f"ConnectionRecord(engine_type={self.engine_type.value!r}, schema={self.schema!r}, "
            f"dsn={self.dsn!r}, user={self.user!r}, line_number={self.line_number})"
        )


@dataclass(frozen=True, slots=True)
class GeneratedCommand:
    """A fully formed tool invocation plus where its output goes."""

    argv: tuple[str, ...]
    kind: CommandKind
    output: Path | None = None
    append: bool = True

    def render(self) -> str:
        """Shell-quoted form used for dry-run echoes."""

        line = shlex.join(self.argv)
        if self.output is None:
            return line
        operator = ">>" if self.append else ">"
        return f"{line} {operator} {shlex.quote(str(self.output))}"


__all__ = ["CommandKind", "ConnectionRecord", "EngineType", "GeneratedCommand"]
