"""Derive sid and host tokens from free-form DSN strings."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .models import ConnectionRecord

LOG = logging.getLogger(__name__)

SCHEMA_SENTINEL = "schema"
HOST_SEPARATOR = "_"


@dataclass(frozen=True, slots=True)
class ExtractionRule:
    """Named pattern whose ``value`` group yields the identifier."""

    name: str
    pattern: re.Pattern[str]

    def extract(self, dsn: str) -> str | None:
        match = self.pattern.search(dsn)
        if match is None:
            return None
        value = match.group("value").strip()
        return value or None


# Evaluated top to bottom; the first rule that yields a value wins.
SID_RULES: tuple[ExtractionRule, ...] = (
    ExtractionRule("key_value", re.compile(r"(?:sid|database|service_name)=(?P<value>[^;]+)", re.IGNORECASE)),
    ExtractionRule("oracle_bare", re.compile(r"dbi:Oracle:(?P<value>[\w.$#-]+)$", re.IGNORECASE)),
    ExtractionRule("oracle_url", re.compile(r"dbi:Oracle://[^/]+/(?P<value>[^;/?]+)", re.IGNORECASE)),
)

HOST_RULES: tuple[ExtractionRule, ...] = (
    ExtractionRule("key_value", re.compile(r"(?:host|server)=(?P<value>[^;]+)", re.IGNORECASE)),
    ExtractionRule("oracle_url", re.compile(r"dbi:Oracle://(?P<value>[^/;]+)", re.IGNORECASE)),
)

_PORT_SUFFIX = re.compile(r":\d+$")


def first_match(rules: tuple[ExtractionRule, ...], dsn: str) -> str | None:
    """Return the value of the first rule matching ``dsn``."""

    for rule in rules:
        value = rule.extract(dsn)
        if value is not None:
            return value
    return None


def extract_sid(dsn: str) -> str | None:
    return first_match(SID_RULES, dsn)


def extract_host(dsn: str) -> str:
    """Host prefix for output file names, empty when the DSN names none."""

    host = first_match(HOST_RULES, dsn)
    if host is None:
        return ""
    host = _PORT_SUFFIX.sub("", host)
    if not host:
        return ""
    return host + HOST_SEPARATOR


def resolve_identifiers(record: ConnectionRecord) -> bool:
    """Populate ``resolved_sid``/``resolved_host`` in place.

    Returns ``False`` when the record has neither a resolvable sid nor an
    explicit schema; such a record must be skipped.
    """

    sid = extract_sid(record.dsn)
    if sid is None:
        if not record.schema:
            LOG.warning(
                "Cannot determine a database or schema from DSN; skipping record",
                extra={"line_number": record.line_number, "dsn": record.dsn},
            )
            return False
        sid = SCHEMA_SENTINEL
    record.resolved_sid = sid
    record.resolved_host = extract_host(record.dsn)
    return True


__all__ = [
    "ExtractionRule",
    "HOST_RULES",
    "HOST_SEPARATOR",
    "SCHEMA_SENTINEL",
    "SID_RULES",
    "extract_host",
    "extract_sid",
    "first_match",
    "resolve_identifiers",
]
