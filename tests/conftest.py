"""Shared fixtures."""
import textwrap

import pytest


@pytest.fixture
def write_doc(tmp_path):
    """Write a YAML document into a temporary cmd_ref directory."""
    cmd_ref_dir = tmp_path / "cmd_ref"
    cmd_ref_dir.mkdir()

    def _write(filename: str, content: str):
        path = cmd_ref_dir / filename
        path.write_text(textwrap.dedent(content))
        return path

    return _write
