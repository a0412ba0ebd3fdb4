"""Shared fixtures: a stand-in for the assessment tool."""

from __future__ import annotations

import stat
import sys
from pathlib import Path

import pytest

FAKE_TOOL = '''\
import os
import sys

args = sys.argv[1:]
log = os.environ.get("FAKE_TOOL_LOG")
if log:
    with open(log, "a") as handle:
        handle.write(" ".join(args) + "\\n")
mode = args[args.index("-t") + 1]
if mode == "SHOW_SCHEMA":
    print("SCHEMA\\tHR")
    print("SCHEMA\\tSCOTT")
    sys.exit(0)
schema = args[args.index("-n") + 1]
user = os.environ.get("ORA2PG_USER", "")
if "--dump_as_sheet" in args:
    if "--print_header" in args:
        print("database;schema;user")
    print(f"db;{schema};{user}")
else:
    print(f"<report schema='{schema}'/>")
'''


@pytest.fixture
def fake_tool(tmp_path: Path) -> Path:
    """Executable wrapper that behaves like the assessment tool."""

    if sys.platform == "win32":
        pytest.skip("fake tool wrapper needs a POSIX shell")
    script = tmp_path / "fake_tool.py"
    script.write_text(FAKE_TOOL)
    wrapper = tmp_path / "bin" / "ora2pg"
    wrapper.parent.mkdir()
    wrapper.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{script}" "$@"\n')
    wrapper.chmod(wrapper.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return wrapper
