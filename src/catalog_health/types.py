from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

Row = dict[str, Any]

LEVEL_ERR = "err"
LEVEL_WARN = "warn"


@dataclass(frozen=True)
class SheetData:
    headers: list[str]
    rows: list[Row]


@dataclass(frozen=True)
class SheetSnapshot:
    name: str
    exists: bool
    headers: list[str] = field(default_factory=list)
    rows: list[Row] = field(default_factory=list)
    read_error: str | None = None


@dataclass(frozen=True)
class Finding:
    level: str  # "err" | "warn"
    code: str
    message: str
    details: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"level": self.level, "code": self.code, "message": self.message}
        if self.details:
            out["details"] = self.details
        return out


@dataclass
class HealthReport:
    ok: bool
    sheets: dict[str, dict[str, Any]]
    counts: dict[str, int]
    checks: list[Finding]
    summary_notes: list[str]

    @property
    def errors(self) -> list[Finding]:
        return [c for c in self.checks if c.level == LEVEL_ERR]

    @property
    def warnings(self) -> list[Finding]:
        return [c for c in self.checks if c.level == LEVEL_WARN]

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "sheets": self.sheets,
            "counts": self.counts,
            "checks": [c.to_dict() for c in self.checks],
            "summaryNotes": list(self.summary_notes),
        }
