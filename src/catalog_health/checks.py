from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Sequence

from .parsers import (
    ResourceParseError,
    cell_text,
    has_dangerous_html,
    is_blank,
    is_http,
    parse_choices,
    parse_resources,
    to_int,
    video_type,
)
from .schema import (
    CHOICE_COLUMNS,
    CONTENT_COLUMNS,
    REQUIRED_LANGS,
    RESOURCE_COLUMNS,
    SCHEMAS,
    SCHEMAS_BY_KIND,
    SheetSchema,
    entity_code,
    missing_headers,
)
from .types import LEVEL_ERR, LEVEL_WARN, Finding, HealthReport, Row, SheetSnapshot

logger = logging.getLogger(__name__)

DEFAULT_DISPLAY_LIMIT = 20
BAD_INDEX_FALLBACK = -999
NOTE_PASSED = "All core checks passed."
NOTE_FAILED = "Some checks failed."


@dataclass
class LessonStats:
    lessons_with_video: int = 0
    lessons_with_resources: int = 0
    resource_issues: int = 0


@dataclass
class CheckContext:
    entities: dict[str, list[Row]]
    display_limit: int = DEFAULT_DISPLAY_LIMIT
    stats: LessonStats = field(default_factory=LessonStats)

    def rows(self, kind: str) -> list[Row]:
        return self.entities.get(kind, [])


def _err(code: str, message: str, **details: Any) -> Finding:
    return Finding(LEVEL_ERR, code, message, details or None)


def _warn(code: str, message: str, **details: Any) -> Finding:
    return Finding(LEVEL_WARN, code, message, details or None)


def _display_id(row: Row, key: str) -> str:
    return cell_text(row.get(key)) or "(blank)"


def check_sheets(
    sheets: Mapping[str, SheetSnapshot],
) -> tuple[list[Finding], dict[str, dict[str, Any]], set[str]]:
    """Header presence per sheet.

    Returns the findings, the ``sheets`` section of the report and the set of
    entity kinds whose rows may be used by the remaining checks.
    """
    findings: list[Finding] = []
    report: dict[str, dict[str, Any]] = {}
    usable: set[str] = set()
    for schema in SCHEMAS:
        name = schema.sheet
        snap = sheets.get(name)
        if snap is None or not snap.exists:
            report[name] = {"exists": False, "missingHeaders": list(schema.required)}
            findings.append(_err("MISSING_SHEET", f"Missing sheet: {name}", sheet=name))
            continue
        if snap.read_error:
            report[name] = {"exists": True, "headers": [], "missingHeaders": [], "readError": snap.read_error}
            findings.append(
                _err("SHEET_READ_ERROR", f"Cannot read sheet {name}: {snap.read_error}",
                     sheet=name, error=snap.read_error)
            )
            continue
        missing, missing_optional = missing_headers(schema, snap.headers)
        report[name] = {
            "exists": True,
            "headers": list(snap.headers),
            "missingHeaders": missing,
            "missingOptionalHeaders": missing_optional,
        }
        if missing:
            findings.append(
                _err("MISSING_HEADERS", f"Missing required headers in {name}: {', '.join(missing)}",
                     sheet=name, missing=missing)
            )
            continue
        usable.add(schema.kind)
        if missing_optional:
            findings.append(
                _warn("MISSING_OPTIONAL_HEADERS",
                      f"Optional headers missing in {name}: {', '.join(missing_optional)}",
                      sheet=name, missing=missing_optional)
            )
    return findings, report, usable


def check_unique(ctx: CheckContext) -> Iterable[Finding]:
    for schema in SCHEMAS:
        counter = Counter(
            v for v in (cell_text(row.get(schema.key)) for row in ctx.rows(schema.kind)) if v
        )
        dups = [v for v, n in counter.items() if n > 1]
        if dups:
            shown = dups[: ctx.display_limit]
            yield _err(
                f"DUP_{entity_code(schema)}_ID",
                f"Duplicate {schema.key}: {', '.join(shown)}",
                key=schema.key,
                values=shown,
                total=len(dups),
            )


def _keys(ctx: CheckContext, kind: str) -> set[str]:
    key = SCHEMAS_BY_KIND[kind].key
    return {v for v in (cell_text(row.get(key)) for row in ctx.rows(kind)) if v}


def _has_parent(row: Row, schema: SheetSchema, parent_keys: dict[str, set[str]]) -> bool:
    ref = schema.parent
    value = cell_text(row.get(ref.field))
    if value:
        return value in parent_keys[ref.parent_kind]
    if ref.legacy_field and ref.legacy_parent_kind:
        legacy = cell_text(row.get(ref.legacy_field))
        return bool(legacy) and legacy in parent_keys[ref.legacy_parent_kind]
    return False


def check_references(ctx: CheckContext) -> Iterable[Finding]:
    parent_keys: dict[str, set[str]] = {}
    for schema in SCHEMAS:
        ref = schema.parent
        if ref is None:
            continue
        for kind in (ref.parent_kind, ref.legacy_parent_kind):
            if kind and kind not in parent_keys:
                parent_keys[kind] = _keys(ctx, kind)
        bad = [
            _display_id(row, schema.key)
            for row in ctx.rows(schema.kind)
            if not _has_parent(row, schema, parent_keys)
        ]
        if bad:
            shown = bad[: ctx.display_limit]
            yield _err(
                ref.code,
                f"{schema.sheet} with unknown {ref.field}: {', '.join(shown)}",
                field=ref.field,
                ids=shown,
                total=len(bad),
            )


def check_correct_index(ctx: CheckContext) -> Iterable[Finding]:
    bad: list[dict[str, Any]] = []
    labels: list[str] = []
    for q in ctx.rows("questions"):
        qid = cell_text(q.get("questionId"))
        choice_count = max(len(parse_choices(q.get(col))) for col in CHOICE_COLUMNS)
        index = to_int(q.get("correctIndex"), BAD_INDEX_FALLBACK)
        if choice_count <= 0:
            labels.append(f"{qid} (no choices)")
        elif index < 0 or index >= choice_count:
            labels.append(f"{qid} (correctIndex={index}, choices={choice_count})")
        else:
            continue
        bad.append({"questionId": qid, "correctIndex": index, "choices": choice_count})
    if bad:
        yield _err(
            "BAD_CORRECT_INDEX",
            f"Questions with invalid correctIndex: {', '.join(labels[: ctx.display_limit])}",
            questions=bad[: ctx.display_limit],
            total=len(bad),
        )


def check_lesson_html(ctx: CheckContext) -> Iterable[Finding]:
    for lesson in ctx.rows("lessons"):
        columns = [col for col in CONTENT_COLUMNS if has_dangerous_html(lesson.get(col))]
        if columns:
            lid = cell_text(lesson.get("lessonId"))
            yield _err(
                "DANGEROUS_HTML",
                f"Lesson {lid}: dangerous HTML detected (<script/on*/javascript:)",
                lessonId=lid,
                columns=columns,
            )


def check_lesson_video(ctx: CheckContext) -> Iterable[Finding]:
    for lesson in ctx.rows("lessons"):
        url = cell_text(lesson.get("videoUrl"))
        if not url:
            continue
        ctx.stats.lessons_with_video += 1
        lid = cell_text(lesson.get("lessonId"))
        if not is_http(url):
            yield _warn("VIDEO_URL_NOT_HTTP", f"Lesson {lid}: videoUrl is not http(s)", lessonId=lid, url=url)
        elif video_type(url) == "link":
            yield _warn(
                "VIDEO_URL_FALLBACK",
                f"Lesson {lid}: videoUrl not recognized for embed (will fallback to open link)",
                lessonId=lid,
                url=url,
            )


def _resource_columns(lesson: Row) -> list[tuple[str, Any]]:
    columns: list[tuple[str, Any]] = [(col, parse_resources(lesson.get(col))) for col in RESOURCE_COLUMNS]
    files_url = cell_text(lesson.get("filesUrl"))
    if files_url:
        columns.append(("filesUrl", [{"label": "filesUrl", "url": files_url}]))
    return columns


def _resource_item_findings(lid: str, column: str, items: Sequence[Any]) -> Iterable[Finding]:
    seen: set[str] = set()
    for item in items:
        if isinstance(item, Mapping):
            url = cell_text(item.get("url"))
            label = cell_text(item.get("label"))
        else:
            url = label = ""
        if not url:
            yield _err("RESOURCE_MISSING_URL", f"Lesson {lid}: resource missing URL", lessonId=lid, column=column)
            continue
        if not is_http(url):
            yield _warn(
                "RESOURCE_URL_NOT_HTTP",
                f"Lesson {lid}: resource URL not http(s) -> {url}",
                lessonId=lid, column=column, url=url,
            )
        if not label:
            yield _warn(
                "RESOURCE_MISSING_LABEL",
                f"Lesson {lid}: resource missing label for {url}",
                lessonId=lid, column=column, url=url,
            )
        # duplicates are only meaningful inside one language column
        if url in seen:
            yield _warn(
                "RESOURCE_DUP_URL",
                f"Lesson {lid}: duplicate resource URL -> {url}",
                lessonId=lid, column=column, url=url,
            )
        seen.add(url)


def check_lesson_resources(ctx: CheckContext) -> Iterable[Finding]:
    for lesson in ctx.rows("lessons"):
        lid = cell_text(lesson.get("lessonId"))
        has_any = False
        for column, parsed in _resource_columns(lesson):
            if isinstance(parsed, ResourceParseError):
                ctx.stats.resource_issues += 1
                yield _warn(
                    "RESOURCES_BAD_JSON",
                    f"Lesson {lid}: resources JSON parse error",
                    lessonId=lid, column=column, error=parsed.error,
                )
                continue
            if parsed:
                has_any = True
            for finding in _resource_item_findings(lid, column, parsed):
                ctx.stats.resource_issues += 1
                yield finding
        if has_any:
            ctx.stats.lessons_with_resources += 1


def check_bilingual(ctx: CheckContext) -> Iterable[Finding]:
    for schema in SCHEMAS:
        prefix = schema.title_prefix
        if not prefix:
            continue
        ids = [
            _display_id(row, schema.key)
            for row in ctx.rows(schema.kind)
            if any(is_blank(row.get(f"{prefix}_{lang}")) for lang in REQUIRED_LANGS)
        ]
        if ids:
            shown = ids[: ctx.display_limit]
            yield _warn(
                f"MISSING_{entity_code(schema)}_BILINGUAL",
                f"Some {schema.kind} missing FR/EN {prefix}: {', '.join(shown)}",
                ids=shown,
                total=len(ids),
            )


CHECKS: tuple[Callable[[CheckContext], Iterable[Finding]], ...] = (
    check_unique,
    check_references,
    check_correct_index,
    check_lesson_html,
    check_lesson_video,
    check_lesson_resources,
    check_bilingual,
)


def run_health_check(
    entities: Mapping[str, Sequence[Row]],
    sheets: Mapping[str, SheetSnapshot] | None = None,
    *,
    display_limit: int = DEFAULT_DISPLAY_LIMIT,
) -> HealthReport:
    """Validate a catalog snapshot and return the full report.

    ``entities`` maps entity kind (``"domains"``, ``"modules"``, ...) to rows.
    When ``sheets`` is given, header presence is checked first and rows of
    unusable sheets are ignored. Data problems never raise; they become
    findings.
    """
    findings: list[Finding] = []
    sheet_report: dict[str, dict[str, Any]] = {}
    if sheets is not None:
        findings, sheet_report, usable = check_sheets(sheets)
    else:
        usable = {schema.kind for schema in SCHEMAS}

    ctx = CheckContext(
        entities={
            schema.kind: [r for r in entities.get(schema.kind) or () if isinstance(r, Mapping)]
            if schema.kind in usable
            else []
            for schema in SCHEMAS
        },
        display_limit=max(1, display_limit),
    )
    for check in CHECKS:
        findings.extend(list(check(ctx)))

    counts = {schema.kind: len(ctx.rows(schema.kind)) for schema in SCHEMAS}
    counts["lessonsWithVideo"] = ctx.stats.lessons_with_video
    counts["lessonsWithResources"] = ctx.stats.lessons_with_resources
    counts["resourceIssues"] = ctx.stats.resource_issues

    ok = not any(f.level == LEVEL_ERR for f in findings)
    report = HealthReport(
        ok=ok,
        sheets=sheet_report,
        counts=counts,
        checks=findings,
        summary_notes=[NOTE_PASSED if ok else NOTE_FAILED],
    )
    logger.debug(
        "health_report ok=%s errors=%s warnings=%s",
        ok,
        len(report.errors),
        len(report.warnings),
    )
    return report
