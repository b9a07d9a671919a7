"""Tests for readiness diagnostics."""

from __future__ import annotations

import types

import post_public_music.doctor as doctor_module
from post_public_music.settings_store import SETTINGS_FILE_NAME, SettingsStore


def _check(name: str, status: str, required: bool) -> doctor_module.DoctorCheck:
    return doctor_module.DoctorCheck(
        name=name, status=status, required=required, detail="detail"
    )


def test_doctor_ok_with_valid_settings(store) -> None:
    report = doctor_module.run_doctor(store.path.parent)
    assert report.exit_code == 0
    assert report.checks[0].status == "ok"
    assert "https://example.test/now" in report.checks[0].detail


def test_doctor_fails_without_settings(tmp_path) -> None:
    report = doctor_module.run_doctor(tmp_path)
    assert report.exit_code == 2
    assert report.checks[0].status == "missing"


def test_probe_settings_invalid_file(tmp_path) -> None:
    (tmp_path / SETTINGS_FILE_NAME).write_text("{", encoding="utf-8")
    check = doctor_module.probe_settings(SettingsStore(tmp_path))
    assert check.status == "error"
    assert check.hint is not None


def test_optional_mutagen_missing_does_not_fail(monkeypatch, tmp_path) -> None:
    monkeypatch.setattr(
        doctor_module, "probe_settings", lambda _store: _check("settings", "ok", True)
    )
    monkeypatch.setattr(
        doctor_module, "probe_pillow", lambda: _check("pillow", "ok", True)
    )
    monkeypatch.setattr(
        doctor_module, "probe_mutagen", lambda: _check("mutagen", "missing", False)
    )
    assert doctor_module.run_doctor(tmp_path).exit_code == 0


def test_probe_pillow_missing(monkeypatch) -> None:
    def fail_import(name: str):
        raise ImportError(name)

    monkeypatch.setattr(doctor_module.importlib, "import_module", fail_import)
    check = doctor_module.probe_pillow()
    assert check.status == "missing"
    assert check.required is True


def test_probe_mutagen_reports_version(monkeypatch) -> None:
    fake = types.SimpleNamespace(version_string="9.9")
    monkeypatch.setattr(doctor_module.importlib, "import_module", lambda name: fake)
    check = doctor_module.probe_mutagen()
    assert check.status == "ok"
    assert "9.9" in check.detail


def test_render_report_includes_result_and_hint(tmp_path) -> None:
    report = doctor_module.DoctorReport(
        storage_dir=tmp_path,
        checks=[
            doctor_module.DoctorCheck(
                name="settings",
                status="missing",
                required=True,
                detail="no settings file",
                hint="configure it",
            )
        ],
    )
    text = doctor_module.render_report(report)
    assert "[MISS] settings" in text
    assert "hint: configure it" in text
    assert "Result: FAIL" in text
