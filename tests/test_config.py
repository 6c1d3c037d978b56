from pathlib import Path

import pytest

from brepjoin.config import (
    DEFAULT_TOLERANCE,
    ENV_TIE_BREAK,
    ENV_TOLERANCE,
    JoinSettings,
    default_settings,
    load_settings,
    resolve_settings,
    settings_from_mapping,
)


def test_defaults():
    settings = JoinSettings()
    assert settings.tolerance == DEFAULT_TOLERANCE == 1e-6
    assert settings.tie_break == "first"
    assert settings.arc_divisions == 1
    assert settings.on_degenerate == "drop"


@pytest.mark.parametrize("kwargs", [
    {"tolerance": 0.0},
    {"tolerance": -1e-6},
    {"tolerance": "small"},
    {"tie_break": "random"},
    {"arc_divisions": 0},
    {"on_degenerate": "ignore"},
])
def test_invalid_settings(kwargs):
    with pytest.raises(ValueError):
        JoinSettings(**kwargs)


def test_environment_overrides():
    env = {ENV_TOLERANCE: "1e-4", ENV_TIE_BREAK: " Strict "}
    settings = default_settings(env)
    assert settings.tolerance == pytest.approx(1e-4)
    assert settings.tie_break == "strict"
    assert default_settings({}) == JoinSettings()


def test_environment_from_process(monkeypatch):
    monkeypatch.setenv(ENV_TOLERANCE, "0.001")
    monkeypatch.delenv(ENV_TIE_BREAK, raising=False)
    assert default_settings().tolerance == pytest.approx(1e-3)
    assert resolve_settings().tolerance == pytest.approx(1e-3)


def test_bad_environment_tolerance():
    with pytest.raises(ValueError):
        default_settings({ENV_TOLERANCE: "tiny"})


def test_load_settings_from_yaml(tmp_path: Path):
    path = tmp_path / "join.yaml"
    path.write_text(
        "tolerance: 1.0e-5\n"
        "tie_break: strict\n"
        "arc_divisions: 8\n"
        "on_degenerate: raise\n",
        encoding="utf-8",
    )
    settings = load_settings(path, base=JoinSettings())
    assert settings == JoinSettings(tolerance=1e-5, tie_break="strict",
                                    arc_divisions=8, on_degenerate="raise")


def test_load_settings_partial_file_keeps_base(tmp_path: Path):
    path = tmp_path / "join.yaml"
    path.write_text("arc_divisions: 4\n", encoding="utf-8")
    base = JoinSettings(tolerance=1e-3)
    settings = load_settings(str(path), base=base)
    assert settings.tolerance == pytest.approx(1e-3)
    assert settings.arc_divisions == 4


def test_load_settings_empty_file(tmp_path: Path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_settings(path, base=JoinSettings()) == JoinSettings()


def test_load_settings_errors(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / "missing.yaml")

    path = tmp_path / "bad.yaml"
    path.write_text("tolerance: 1e-5\ncolour: red\n", encoding="utf-8")
    with pytest.raises(ValueError, match="colour"):
        load_settings(path, base=JoinSettings())

    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_settings(path, base=JoinSettings())


def test_settings_from_mapping_coerces_tolerance():
    settings = settings_from_mapping({"tolerance": "1e-4"}, base=JoinSettings())
    assert settings.tolerance == pytest.approx(1e-4)


def test_resolve_settings_ignores_none():
    base = JoinSettings(tie_break="strict")
    assert resolve_settings(base, tie_break=None) is base
    assert resolve_settings(base, arc_divisions=3).arc_divisions == 3
    assert base.with_overrides(on_degenerate="raise").on_degenerate == "raise"
