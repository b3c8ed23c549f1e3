from __future__ import annotations

import shutil
from pathlib import Path

import orjson
import pytest

from cli import main
from settings.config import ConfigError, load_config, resolve_output_dir


def _write_minimal_repo(root: Path) -> None:
    (root / "pkg").mkdir(parents=True, exist_ok=True)
    (root / "pkg" / "__init__.py").write_text("", encoding="utf-8")
    (root / "pkg" / "module.py").write_text(
        '"""Minimal module."""\n',
        encoding="utf-8",
    )


def _write_broken_record(root: Path) -> None:
    (root / "pkg" / "bad.py").write_text(
        "from typing import Annotated\n"
        "\n"
        "from prcgen import prc\n"
        "\n"
        "\n"
        "@prc\n"
        "class Bad:\n"
        '    x: Annotated[int, prc(name="a", hash=1)]\n',
        encoding="utf-8",
    )


def _copy_mini_repo_fixture(root: Path) -> None:
    fixture_repo = Path(__file__).parent / "fixtures" / "mini_repo"
    shutil.copytree(fixture_repo, root)


def test_cli_generate_smoke(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_minimal_repo(repo_root)

    out_dir = tmp_path / "generated"
    exit_code = main(["generate", str(repo_root), "--out-dir", str(out_dir)])

    assert exit_code == 0
    assert (out_dir / "prc_manifest.json").is_file()
    assert not (out_dir / "pkg" / "module_prc.py").exists()


def test_generate_default_output_dir_from_fixture(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)

    exit_code = main(["generate", str(repo_root)])

    generated = repo_root / "game" / "params_prc.py"
    assert exit_code == 0
    assert generated.is_file()
    assert generated.read_text(encoding="utf-8").startswith(
        "# Generated by prcgen from game/params.py. Do not edit.\n"
    )
    assert not (repo_root / "game" / "plain_prc.py").exists()

    manifest = orjson.loads((repo_root / "prc_manifest.json").read_bytes())
    assert [record["record"] for record in manifest["records"]] == [
        "Header",
        "Child",
        "Fighter",
    ]


def test_generate_out_dir_flag_mirrors_source_tree(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)

    custom_out_dir = tmp_path / "custom-out"
    assert not custom_out_dir.exists(), "custom output dir must not pre-exist"
    exit_code = main(["generate", str(repo_root), "--out-dir", str(custom_out_dir)])

    assert exit_code == 0
    assert (custom_out_dir / "game" / "params_prc.py").is_file()
    assert not (repo_root / "game" / "params_prc.py").exists()


def test_generate_twice_does_not_scan_generated_modules(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)

    assert main(["generate", str(repo_root)]) == 0
    first = (repo_root / "game" / "params_prc.py").read_bytes()
    assert main(["generate", str(repo_root)]) == 0

    assert (repo_root / "game" / "params_prc.py").read_bytes() == first
    assert not (repo_root / "game" / "params_prc_prc.py").exists()


def test_cli_check_reports_diagnostics(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_minimal_repo(repo_root)
    _write_broken_record(repo_root)

    exit_code = main(["check", str(repo_root)])

    assert exit_code == 1
    captured = capsys.readouterr()
    assert "pkg/bad.py:8:" in captured.err
    assert "error[duplicate-field-attribute]" in captured.err
    assert not list(repo_root.rglob("*_prc.py"))


def test_cli_check_clean_tree(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)

    assert main(["check", str(repo_root)]) == 0
    assert not (repo_root / "prc_manifest.json").exists()


def test_cli_generate_skips_module_with_diagnostics(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)
    (repo_root / "pkg").mkdir()
    _write_broken_record(repo_root)

    exit_code = main(["generate", str(repo_root)])

    assert exit_code == 1
    assert "error[duplicate-field-attribute]" in capsys.readouterr().err
    assert (repo_root / "game" / "params_prc.py").is_file()
    assert not (repo_root / "pkg" / "bad_prc.py").exists()


def test_cli_verify_after_generate(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)
    assert main(["generate", str(repo_root)]) == 0

    assert main(["verify", str(repo_root)]) == 0

    generated = repo_root / "game" / "params_prc.py"
    generated.write_text(
        generated.read_text(encoding="utf-8") + "# edited\n", encoding="utf-8"
    )
    (repo_root / "prc_manifest.json").unlink()

    assert main(["verify", str(repo_root)]) == 1
    err = capsys.readouterr().err
    assert "mismatches: game/params_prc.py" in err
    assert "missing: prc_manifest.json" in err


def test_cli_verify_default_out_dir_reports_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_minimal_repo(repo_root)
    (repo_root / "prcgen.toml").write_text('output_dir = "generated"\n', encoding="utf-8")
    default_out_dir = (repo_root / load_config(repo_root).output_dir).resolve()

    monkeypatch.chdir(repo_root)
    exit_code = main(["verify"])

    assert exit_code == 2
    captured = capsys.readouterr()
    assert f"out-dir: {default_out_dir}" in captured.err
    assert "Output directory does not exist" in captured.err


def test_cli_verify_missing_out_dir_reports_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_minimal_repo(repo_root)

    out_dir = tmp_path / "missing-out"
    exit_code = main(["verify", str(repo_root), "--out-dir", str(out_dir)])

    assert exit_code == 2
    captured = capsys.readouterr()
    assert f"out-dir: {out_dir}" in captured.err
    assert "Output directory does not exist" in captured.err


def test_cli_invalid_config_exits_with_usage_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    (repo_root / "prcgen.toml").write_text("bogus = 1\n", encoding="utf-8")

    assert main(["check", str(repo_root)]) == 2
    assert "error: Invalid config" in capsys.readouterr().err


def test_resolve_output_dir_rejects_escape(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    with pytest.raises(ConfigError, match="escapes the root"):
        resolve_output_dir(repo_root, "../outside")


def test_generate_removes_module_of_record_that_stopped_deriving(
    tmp_path: Path,
) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)
    assert main(["generate", str(repo_root)]) == 0
    generated = repo_root / "game" / "params_prc.py"
    assert generated.is_file()

    params = repo_root / "game" / "params.py"
    params.write_text(
        params.read_text(encoding="utf-8").replace(
            "    magic: int\n", "    magic: Annotated[int, prc(bogus=1)]\n"
        ),
        encoding="utf-8",
    )

    assert main(["generate", str(repo_root)]) == 1
    assert not generated.exists()
    manifest = orjson.loads((repo_root / "prc_manifest.json").read_bytes())
    assert manifest["records"] == []


def test_generate_removes_module_of_deleted_source(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)
    handwritten = repo_root / "game" / "notes_prc.py"
    handwritten.write_text("NOTES = []\n", encoding="utf-8")
    assert main(["generate", str(repo_root)]) == 0

    (repo_root / "game" / "params.py").unlink()

    assert main(["generate", str(repo_root)]) == 0
    assert not (repo_root / "game" / "params_prc.py").exists()
    assert handwritten.read_text(encoding="utf-8") == "NOTES = []\n"
    assert main(["verify", str(repo_root)]) == 0


def test_generate_package_init_records(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    _copy_mini_repo_fixture(repo_root)
    (repo_root / "game" / "__init__.py").write_text(
        "from prcgen import prc\n\n\n@prc\nclass Version:\n    major: int\n",
        encoding="utf-8",
    )

    assert main(["generate", str(repo_root)]) == 0

    generated = repo_root / "game" / "_prc.py"
    assert generated.read_text(encoding="utf-8").startswith(
        "# Generated by prcgen from game/__init__.py. Do not edit.\n"
    )
    assert "from game import Version\n" in generated.read_text(encoding="utf-8")
