from __future__ import annotations

import io
import os
import subprocess
import sys
from pathlib import Path

import pytest

import git_authors.cli as cli_mod
from git_authors.cli import authored_dirs_main, authors_main, main
from git_authors.models import Settings


@pytest.fixture()
def captured_settings(monkeypatch) -> list[Settings]:
    seen: list[Settings] = []

    def fake_run(settings: Settings) -> int:
        seen.append(settings)
        return 0

    monkeypatch.setattr(cli_mod, "run_authors", fake_run)
    monkeypatch.setattr(cli_mod, "run_authored_dirs", fake_run)
    return seen


@pytest.fixture()
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "default_values.conf"
    path.write_text(
        'default_authors=("Jane Doe <jane@example.com>")\n'
        "default_ignored_dirs=(node_modules vendor)\n",
        encoding="utf-8",
    )
    return path


def test_help_exits_with_failure(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        authors_main(["-h"])
    assert exc.value.code == 1
    out = capsys.readouterr().out
    assert "usage: git-authors" in out
    assert "--ignore-dirs" in out

    with pytest.raises(SystemExit) as exc:
        authored_dirs_main(["--help"])
    assert exc.value.code == 1


def test_unknown_option_is_rejected(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        authors_main(["--bogus"])
    assert exc.value.code == 2
    err = capsys.readouterr().err
    assert "usage:" in err
    assert "--bogus" in err


def test_authored_dirs_rejects_author_only_flags() -> None:
    with pytest.raises(SystemExit) as exc:
        authored_dirs_main(["-d"])
    assert exc.value.code == 2


def test_multiple_directories_are_rejected(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        authors_main([str(tmp_path), str(tmp_path)])
    assert exc.value.code == 2
    assert "cannot specify multiple directories" in capsys.readouterr().err


def test_jobs_must_be_positive() -> None:
    with pytest.raises(SystemExit) as exc:
        authors_main(["--jobs", "0"])
    assert exc.value.code == 2


def test_missing_directory_fails(tmp_path: Path, config_file: Path, captured_settings: list[Settings], capsys) -> None:
    code = authors_main([str(tmp_path / "nope"), "--config", str(config_file), "--no-color"])

    assert code == 1
    assert captured_settings == []
    assert "does not exist" in capsys.readouterr().err


def test_authors_settings_from_config_and_flags(
    tmp_path: Path, config_file: Path, captured_settings: list[Settings], capsys
) -> None:
    code = authors_main(
        [str(tmp_path), "-c", str(config_file), "-i", "tmp, build", "-i", "vendor", "-d", "-q", "-j", "3", "--no-color"]
    )

    assert code == 0
    (settings,) = captured_settings
    assert settings.root == tmp_path
    assert settings.ignored_dirs == frozenset({"node_modules", "vendor", "tmp", "build"})
    assert settings.show_directories is True
    assert settings.quoted is True
    assert settings.jobs == 3
    assert settings.color is False
    assert f"Loading configuration from: {config_file}" in capsys.readouterr().out


def test_authors_defaults_to_cwd(tmp_path: Path, config_file: Path, captured_settings: list[Settings], monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    assert authors_main(["-c", str(config_file)]) == 0
    assert captured_settings[0].root.resolve() == tmp_path.resolve()


def test_authored_dirs_uses_default_authors_and_no_ignores(
    tmp_path: Path, config_file: Path, captured_settings: list[Settings]
) -> None:
    assert authored_dirs_main([str(tmp_path), "--config", str(config_file)]) == 0

    (settings,) = captured_settings
    assert settings.default_authors == frozenset({"Jane Doe <jane@example.com>"})
    assert settings.ignored_dirs == frozenset()


def test_missing_config_warns_and_continues(tmp_path: Path, captured_settings: list[Settings], capsys) -> None:
    assert authors_main([str(tmp_path), "--config", str(tmp_path / "absent.conf")]) == 0

    assert captured_settings[0].ignored_dirs == frozenset()
    assert "No configuration file found" in capsys.readouterr().err


def test_invalid_config_fails(tmp_path: Path, captured_settings: list[Settings], capsys) -> None:
    bad = tmp_path / "bad.conf"
    bad.write_text('default_authors=("Jane <jane@example.com>"\n', encoding="utf-8")

    assert authored_dirs_main([str(tmp_path), "--config", str(bad)]) == 1
    assert captured_settings == []
    assert "invalid configuration" in capsys.readouterr().err


def test_main_dispatches_commands(tmp_path: Path, config_file: Path, captured_settings: list[Settings], capsys) -> None:
    assert main(["authors", str(tmp_path), "-c", str(config_file)]) == 0
    assert main(["authored-dirs", str(tmp_path), "-c", str(config_file)]) == 0
    assert len(captured_settings) == 2

    assert main([]) == 1
    assert "commands:" in capsys.readouterr().out
    assert main(["nope"]) == 2


def test_module_entrypoint_help(tmp_path: Path) -> None:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(Path(__file__).resolve().parents[1] / "src")
    proc = subprocess.run(
        [sys.executable, "-m", "git_authors", "authors", "--help"],
        cwd=str(tmp_path),
        env=env,
        text=True,
        capture_output=True,
    )
    assert proc.returncode == 1
    assert "List all commit authors" in proc.stdout


def test_stdout_writes_undecodable_identities_back_as_bytes() -> None:
    raw = io.BytesIO()
    stream = io.TextIOWrapper(raw, encoding="utf-8")
    identity = b'"Jos\xe9 <jose@example.com>"'.decode("utf-8", errors="surrogateescape")

    cli_mod._write_raw_bytes(stream)
    print(identity, file=stream)
    stream.flush()

    assert raw.getvalue() == b'"Jos\xe9 <jose@example.com>"\n'
