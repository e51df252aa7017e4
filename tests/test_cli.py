"""
CLI commands, driven through click's test runner.
"""

import pytest
from click.testing import CliRunner

from archmarket.auth import KeyRing, TokenManager
from archmarket.cli.__main__ import cli


@pytest.fixture
def runner(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for name in ("ARCHMARKET_AUTH__KEYS_FILE", "ARCHMARKET_DATABASE__URL"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


def _write_config(tmp_path, **sections):
    lines = []
    for section, values in sections.items():
        lines.append(f"{section}:")
        lines.extend(f"  {key}: '{value}'" for key, value in values.items())
    path = tmp_path / "archmarket.yaml"
    path.write_text("\n".join(lines) + "\n")
    return path


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "1.0.0" in result.output


def test_keygen_writes_ring(runner, tmp_path):
    result = runner.invoke(cli, ["keygen", "--out", "keys.json"], obj={})
    assert result.exit_code == 0, result.output
    assert "Wrote key ring" in result.output
    ring = KeyRing.from_file(tmp_path / "keys.json")
    token = TokenManager(ring).issue_access_token("u1")
    assert TokenManager(ring).validate_access_token(token)["sub"] == "u1"


def test_keygen_refuses_to_overwrite(runner, tmp_path):
    (tmp_path / "keys.json").write_text("{}")
    result = runner.invoke(cli, ["keygen", "--out", "keys.json"], obj={})
    assert result.exit_code == 1
    assert (tmp_path / "keys.json").read_text() == "{}"

    result = runner.invoke(cli, ["keygen", "--out", "keys.json", "--force"], obj={})
    assert result.exit_code == 0


def test_issue_token(runner, tmp_path):
    runner.invoke(cli, ["keygen", "--out", "keys.json"], obj={})
    config = _write_config(tmp_path, auth={"keys_file": tmp_path / "keys.json"})

    result = runner.invoke(
        cli, ["issue-token", "admin-1", "--role", "admin", "--config", str(config)], obj={}
    )
    assert result.exit_code == 0, result.output

    token = result.output.strip().splitlines()[-1]
    claims = TokenManager(KeyRing.from_file(tmp_path / "keys.json")).validate_access_token(token)
    assert claims["sub"] == "admin-1"
    assert claims["roles"] == ["admin"]


def test_issue_token_without_keys(runner):
    result = runner.invoke(cli, ["issue-token", "someone"], obj={})
    assert result.exit_code == 1


def test_init_db_and_seed(runner, tmp_path):
    db_path = tmp_path / "cli.db"
    config = _write_config(tmp_path, database={"url": f"sqlite:///{db_path}"})

    result = runner.invoke(cli, ["init-db", "--config", str(config)], obj={})
    assert result.exit_code == 0, result.output
    assert "Schema ready" in result.output
    assert db_path.exists()

    result = runner.invoke(cli, ["seed", "--config", str(config)], obj={})
    assert result.exit_code == 0, result.output
    assert "Inserted:" in result.output

    result = runner.invoke(cli, ["seed", "--config", str(config)], obj={})
    lines = {line.split(":")[0].strip(): line.split(":")[1].strip() for line in result.output.splitlines() if ":" in line}
    assert lines["Inserted"] == "0"
    assert lines["Skipped"] == "5"
