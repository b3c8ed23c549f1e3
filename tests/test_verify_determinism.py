from __future__ import annotations

from typing import TYPE_CHECKING

import pytest
from artifacts.write import GenerationReport, generate_all
from verify.verify import DeterminismResult, verify_determinism

if TYPE_CHECKING:
    from pathlib import Path

    from settings.config import PrcGenConfig

_HEADER = "# Generated by prcgen from {}. Do not edit.\n"


def _write_record_repo(root: Path) -> None:
    (root / "game").mkdir(parents=True, exist_ok=True)
    (root / "game" / "__init__.py").write_text("", encoding="utf-8")
    (root / "game" / "params.py").write_text(
        "from prcgen import prc\n"
        "\n"
        "\n"
        "@prc\n"
        "class Header:\n"
        "    magic: int\n",
        encoding="utf-8",
    )


def test_verify_determinism_requires_out_dir(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_record_repo(repo_root)

    missing_dir = tmp_path / "missing"
    with pytest.raises(FileNotFoundError, match="Output directory does not exist"):
        verify_determinism(root=repo_root, out_dir=missing_dir)


def test_verify_determinism_rejects_file_out_dir(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    out_file = tmp_path / "out.txt"
    out_file.write_text("", encoding="utf-8")

    with pytest.raises(NotADirectoryError):
        verify_determinism(root=repo_root, out_dir=out_file)


def test_verify_determinism_accepts_fresh_output(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_record_repo(repo_root)
    out_dir = tmp_path / "out"

    report = generate_all(root=repo_root, out_dir=out_dir)

    assert report.ok
    assert report.record_count == 1
    assert verify_determinism(root=repo_root, out_dir=out_dir) == DeterminismResult(
        ok=True
    )


def test_verify_determinism_reports_stale_generated_module(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_record_repo(repo_root)
    out_dir = tmp_path / "out"
    generate_all(root=repo_root, out_dir=out_dir)

    (out_dir / "old").mkdir()
    (out_dir / "old" / "gone_prc.py").write_text(
        _HEADER.format("old/gone.py"), encoding="utf-8"
    )
    (out_dir / "notes_prc.py").write_text("handwritten\n", encoding="utf-8")

    result = verify_determinism(root=repo_root, out_dir=out_dir)

    assert result == DeterminismResult(ok=False, extra=("old/gone_prc.py",))


def test_verify_determinism_relative_paths_and_sorted_mismatches(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()
    _write_record_repo(repo_root)

    out_dir = tmp_path / "out"
    out_dir.mkdir()

    for rel_path in ("b_prc.py", "a_prc.py"):
        path = out_dir / rel_path
        path.write_text(_HEADER.format(rel_path) + "original\n", encoding="utf-8")

    def _fake_generate_all(
        *, root: Path, out_dir: Path, config: PrcGenConfig | None = None
    ) -> GenerationReport:
        (out_dir / "a_prc.py").write_text(
            _HEADER.format("a_prc.py") + "original\n", encoding="utf-8"
        )
        (out_dir / "b_prc.py").write_text(
            _HEADER.format("b_prc.py") + "regenerated\n", encoding="utf-8"
        )
        (out_dir / "c_prc.py").write_text(
            _HEADER.format("c_prc.py") + "new\n", encoding="utf-8"
        )
        return GenerationReport(modules=[out_dir / "a_prc.py", out_dir / "b_prc.py"])

    monkeypatch.setattr("verify.verify.generate_all", _fake_generate_all)

    result = verify_determinism(root=repo_root, out_dir=out_dir)

    assert result == DeterminismResult(
        ok=False,
        mismatches=("b_prc.py",),
        missing=("c_prc.py",),
        extra=(),
    )
