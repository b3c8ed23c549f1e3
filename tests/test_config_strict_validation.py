from __future__ import annotations

from pathlib import Path

import pytest

from settings.config import ConfigError, PrcGenConfig, load_config, resolve_output_dir


def _write_config(repo_root: Path, toml_content: str) -> None:
    (repo_root / "prcgen.toml").write_text(toml_content, encoding="utf-8")


def test_unknown_section_rejected(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
[runtime]
path = "prc"
""".strip(),
    )

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_unknown_top_level_key_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "bogus_key = true")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_invalid_toml_rejected(tmp_path: Path) -> None:
    _write_config(tmp_path, "output_dir = ")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


@pytest.mark.parametrize("suffix", ["", "-prc", "_prc.gen", "prc/x"])
def test_module_suffix_must_be_identifier_characters(tmp_path: Path, suffix: str) -> None:
    _write_config(tmp_path, f'module_suffix = "{suffix}"')

    with pytest.raises(ConfigError, match="module_suffix"):
        load_config(tmp_path)


def test_valid_config_accepted(tmp_path: Path) -> None:
    _write_config(
        tmp_path,
        """
output_dir = "generated"
exclude = [".venv/**"]
module_suffix = "_params"
manifest = false
""".strip(),
    )

    config = load_config(tmp_path)

    assert config.output_dir == "generated"
    assert config.exclude == [".venv/**"]
    assert config.module_suffix == "_params"
    assert config.manifest is False


def test_missing_config_uses_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path) == PrcGenConfig()


def test_empty_config_accepted(tmp_path: Path) -> None:
    _write_config(tmp_path, "")

    config = load_config(tmp_path)

    assert config.output_dir == "."
    assert config.include == []
    assert config.exclude == []
    assert config.nested_gitignore is False
    assert config.module_suffix == "_prc"
    assert config.manifest is True


def test_resolve_output_dir_defaults_to_root(tmp_path: Path) -> None:
    assert resolve_output_dir(tmp_path, ".") == tmp_path.resolve()


@pytest.mark.parametrize("output_dir", ["", "~/out", "/abs/out"])
def test_resolve_output_dir_rejects_non_relative(tmp_path: Path, output_dir: str) -> None:
    with pytest.raises(ConfigError):
        resolve_output_dir(tmp_path, output_dir)
