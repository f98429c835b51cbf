"""Tests for the standalone config structure check."""

from pathlib import Path

from verify_config import verify_config_structure

EXAMPLE_CONFIG = Path(__file__).resolve().parent.parent / "config.example.yaml"


def test_example_config_is_valid(capsys):
    assert verify_config_structure(EXAMPLE_CONFIG) is True
    assert "1 alert recipient(s)" in capsys.readouterr().out


def test_missing_file(tmp_path, capsys):
    assert verify_config_structure(tmp_path / "absent.yaml") is False
    assert "not found" in capsys.readouterr().out


def test_reports_every_problem(tmp_path, capsys):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "email:\n  provider: pigeon\nlinks:\n  portal_url: portal.test\nsources: []\n"
    )

    assert verify_config_structure(config_file) is False

    out = capsys.readouterr().out
    assert "email.provider" in out
    assert "links.portal_url" in out
    assert "Unknown top-level key: sources" in out
