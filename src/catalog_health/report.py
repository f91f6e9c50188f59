from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Iterable

from . import i18n
from .checks import NOTE_FAILED, NOTE_PASSED
from .types import LEVEL_ERR, LEVEL_WARN, Finding, HealthReport

_GROUP_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("RESOURCE",), "resources"),
    (("VIDEO",), "video"),
    (("HTML",), "html"),
    (("LESSON",), "lessons"),
    (("QUIZ",), "quizzes"),
    (("QUESTION",), "questions"),
    (("COURSE",), "courses"),
    (("SHEET", "HEADER"), "sheets"),
)
_LESSON_WORD = re.compile(r"lesson", re.IGNORECASE)

# codes that share one template
_TEMPLATE_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^DUP_[A-Z]+_ID$"), "finding.DUP_ID"),
    (re.compile(r"^[A-Z]+_BAD_[A-Z]+$"), "finding.BAD_PARENT"),
    (re.compile(r"^MISSING_[A-Z]+_BILINGUAL$"), "finding.MISSING_BILINGUAL"),
)
_NOTE_KEYS = {NOTE_PASSED: "summary.passed", NOTE_FAILED: "summary.failed"}


def group_key(code: str | None, message: str | None = None) -> str:
    c = (code or "").upper()
    for needles, group in _GROUP_RULES:
        if any(n in c for n in needles):
            return group
    if _LESSON_WORD.search(message or ""):
        return "lessons"
    return "general"


def group_checks(checks: Iterable[Finding]) -> dict[str, list[Finding]]:
    groups: dict[str, list[Finding]] = {}
    for finding in checks:
        groups.setdefault(group_key(finding.code, finding.message), []).append(finding)
    return {key: groups[key] for key in sorted(groups)}


def _template_key(code: str) -> str | None:
    direct = f"finding.{code}"
    if i18n.has(direct):
        return direct
    for pattern, key in _TEMPLATE_PATTERNS:
        if pattern.match(code):
            return key
    return None


def _question_label(entry: dict[str, Any], lang: str) -> str:
    qid = entry.get("questionId", "")
    if not entry.get("choices"):
        return f"{qid} ({i18n.t('finding.no_choices', lang)})"
    return f"{qid} (correctIndex={entry.get('correctIndex')}, choices={entry.get('choices')})"


def _params(details: dict[str, Any] | None, lang: str) -> dict[str, str]:
    params: dict[str, str] = {}
    for key, value in (details or {}).items():
        if isinstance(value, list):
            if value and all(isinstance(v, dict) for v in value):
                params["ids"] = ", ".join(_question_label(v, lang) for v in value)
            else:
                params[key] = ", ".join(str(v) for v in value)
        else:
            params[key] = str(value)
    return params


def localize_finding(finding: Finding, lang: str) -> str:
    if lang == "en":
        return finding.message
    key = _template_key(finding.code)
    if key is None:
        return finding.message
    try:
        return i18n.t(key, lang, **_params(finding.details, lang))
    except (KeyError, IndexError, ValueError):
        return finding.message


def localize_note(note: str, lang: str) -> str:
    key = _NOTE_KEYS.get(note)
    return i18n.t(key, lang) if key else note


@dataclass(frozen=True)
class CheckItem:
    level: str
    code: str
    level_label: str
    message: str


@dataclass(frozen=True)
class CheckGroup:
    key: str
    label: str
    items: list[CheckItem]

    @property
    def count(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class SheetStatus:
    name: str
    level: str  # ok | warn | err
    label: str
    missing: list[str]


@dataclass(frozen=True)
class HealthView:
    lang: str
    ok: bool
    status_label: str
    error_count: int
    warning_count: int
    notes: list[str]
    sheets: list[SheetStatus]
    groups: list[CheckGroup]
    counts: dict[str, int]


def _sheet_level(info: dict[str, Any]) -> str:
    if not info.get("exists") or info.get("readError"):
        return LEVEL_ERR
    if info.get("missingHeaders"):
        return LEVEL_WARN
    return "ok"


def assemble(report: HealthReport, lang: str = "fr") -> HealthView:
    groups = [
        CheckGroup(
            key=key,
            label=i18n.t(f"group.{key}", lang),
            items=[
                CheckItem(f.level, f.code, i18n.t(f"status.{f.level}", lang), localize_finding(f, lang))
                for f in findings
            ],
        )
        for key, findings in group_checks(report.checks).items()
    ]
    sheets = []
    for name, info in report.sheets.items():
        level = _sheet_level(info)
        sheets.append(SheetStatus(name, level, i18n.t(f"status.{level}", lang), list(info.get("missingHeaders") or [])))
    return HealthView(
        lang=lang,
        ok=report.ok,
        status_label=i18n.t("status.ok" if report.ok else "status.err", lang),
        error_count=len(report.errors),
        warning_count=len(report.warnings),
        notes=[localize_note(n, lang) for n in report.summary_notes],
        sheets=sheets,
        groups=groups,
        counts=dict(report.counts),
    )


def render_text(view: HealthView) -> str:
    lang = view.lang
    lines = [
        f"{i18n.t('summary.overall', lang)}: {view.status_label}",
        f"{view.error_count} {i18n.t('summary.errors', lang)}, "
        f"{view.warning_count} {i18n.t('summary.warnings', lang)}",
    ]
    lines.extend(view.notes)
    if view.sheets:
        lines.append("")
        lines.append(f"== {i18n.t('section.sheets', lang)}")
        for sheet in view.sheets:
            missing = ", ".join(sheet.missing) or "-"
            lines.append(f"  {sheet.name}: {sheet.label} ({missing})")
    lines.append("")
    lines.append(f"== {i18n.t('section.checks', lang)}")
    if not view.groups:
        lines.append(f"  {i18n.t('common.empty', lang)}")
    for group in view.groups:
        lines.append(f"  {group.label} ({group.count})")
        for item in group.items:
            lines.append(f"    [{item.level_label}] {item.message}")
    lines.append("")
    lines.append(f"== {i18n.t('section.counts', lang)}")
    for key, value in view.counts.items():
        lines.append(f"  {key}: {value}")
    return "\n".join(lines)
