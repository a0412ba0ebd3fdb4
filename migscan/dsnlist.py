"""DSN list parsing: one ConnectionRecord per engine-tagged CSV line."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .errors import DsnListError
from .models import ConnectionRecord, EngineType

LOG = logging.getLogger(__name__)

MIN_FIELDS = 5


def read_dsn_list(path: Path | str) -> list[ConnectionRecord]:
    """Read the whole CSV file and parse it before anything runs."""

    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise DsnListError(f"DSN list '{source}' does not exist") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise DsnListError(f"Cannot read DSN list '{source}': {exc}") from exc
    return parse_dsn_list(text.split("\n"))


def parse_dsn_list(lines: Iterable[str]) -> list[ConnectionRecord]:
    """Parse DSN list lines, skipping headers and anything not engine-tagged.

    Raises :class:`DsnListError` on the first malformed line so a bad file
    never produces partial work.
    """

    records: list[ConnectionRecord] = []
    for number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")
        engine = _engine_tag(line)
        if engine is None:
            if line.strip():
                LOG.debug("Skipping untagged line", extra={"line_number": number})
            continue
        fields = [field.strip() for field in line.replace('"', "").split(",")]
        if len(fields) < MIN_FIELDS:
            raise DsnListError(
                f"Malformed line {number}: expected at least {MIN_FIELDS} fields, got {len(fields)}"
            )
        _, schema, dsn, user, password, *rest = fields
        records.append(
            ConnectionRecord(
                engine_type=engine,
                schema=schema,
                dsn=dsn,
                user=user,
                password=password,
                audit_users=rest[0] if rest else "",
                line_number=number,
            )
        )
    LOG.debug("Parsed DSN list", extra={"records": len(records)})
    return records


def _engine_tag(line: str) -> EngineType | None:
    head = line.split(",", 1)[0].strip().strip('"').upper()
    try:
        return EngineType(head)
    except ValueError:
        return None


__all__ = ["parse_dsn_list", "read_dsn_list"]
