"""Readiness diagnostics for settings and image/tag dependencies."""

from __future__ import annotations

import importlib
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path
from typing import Literal

from .errors import SettingsInvalidError, SettingsMissingError
from .settings_store import SettingsStore

DoctorStatus = Literal["ok", "missing", "error"]


@dataclass(frozen=True)
class DoctorCheck:
    """One readiness check result."""

    name: str
    status: DoctorStatus
    required: bool
    detail: str
    hint: str | None = None


@dataclass(frozen=True)
class DoctorReport:
    """Collection of checks and the derived process exit code."""

    storage_dir: Path
    checks: list[DoctorCheck]

    @property
    def exit_code(self) -> int:
        """Return non-zero when any required check failed or is missing."""
        for check in self.checks:
            if check.required and check.status != "ok":
                return 2
        return 0


def run_doctor(storage_dir: Path) -> DoctorReport:
    checks = [
        probe_settings(SettingsStore(storage_dir)),
        probe_pillow(),
        probe_mutagen(),
    ]
    return DoctorReport(storage_dir=storage_dir, checks=checks)


def render_report(report: DoctorReport) -> str:
    """Render terminal-friendly diagnostics report text."""
    lines = [f"post-public-music doctor (storage={report.storage_dir})", ""]
    for check in report.checks:
        state = _status_token(check.status)
        req = "required" if check.required else "optional"
        lines.append(f"{state} {check.name:<9} [{req}] {check.detail}")
        if check.hint:
            lines.append(f"      hint: {check.hint}")
    lines.append("")
    lines.append("Result: OK" if report.exit_code == 0 else "Result: FAIL")
    return "\n".join(lines)


def probe_settings(store: SettingsStore) -> DoctorCheck:
    """Verify the settings file exists and validates."""
    try:
        settings = store.load()
    except SettingsMissingError:
        return DoctorCheck(
            name="settings",
            status="missing",
            required=True,
            detail=f"no settings file at {store.path}",
            hint="Run `post-public-music settings set --server-url URL --api-key KEY`.",
        )
    except SettingsInvalidError as exc:
        return DoctorCheck(
            name="settings",
            status="error",
            required=True,
            detail=str(exc),
            hint=f"Fix or remove '{store.path}' and configure again.",
        )
    return DoctorCheck(
        name="settings",
        status="ok",
        required=True,
        detail=f"endpoint {settings.server_url}",
    )


def probe_pillow() -> DoctorCheck:
    """Verify Pillow can encode PNG, which album art resizing relies on."""
    try:
        image_module = importlib.import_module("PIL.Image")
    except Exception as exc:
        return DoctorCheck(
            name="pillow",
            status="missing",
            required=True,
            detail=f"not importable ({exc.__class__.__name__})",
            hint="Install Python dependencies (pip install post-public-music).",
        )
    try:
        image_module.new("RGB", (1, 1)).save(BytesIO(), format="PNG")
    except Exception as exc:
        return DoctorCheck(
            name="pillow",
            status="error",
            required=True,
            detail=f"PNG encoding failed ({exc.__class__.__name__})",
            hint="Reinstall Pillow with zlib support.",
        )
    pil = importlib.import_module("PIL")
    version = getattr(pil, "__version__", None)
    detail = f"PNG encoder ok ({version})" if version else "PNG encoder ok"
    return DoctorCheck(name="pillow", status="ok", required=True, detail=detail)


def probe_mutagen() -> DoctorCheck:
    """Verify mutagen is importable for `publish FILE`."""
    try:
        module = importlib.import_module("mutagen")
    except Exception as exc:
        return DoctorCheck(
            name="mutagen",
            status="missing",
            required=False,
            detail=f"not importable ({exc.__class__.__name__})",
            hint="Needed only for publishing from an audio file.",
        )
    version = getattr(module, "version_string", None)
    detail = f"importable ({version})" if version else "importable"
    return DoctorCheck(name="mutagen", status="ok", required=False, detail=detail)


def _status_token(status: DoctorStatus) -> str:
    if status == "ok":
        return "[OK]"
    if status == "missing":
        return "[MISS]"
    return "[ERR]"
