from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ParentRef:
    field: str
    parent_kind: str
    code: str
    # used only when ``field`` is blank on the child row
    legacy_field: str | None = None
    legacy_parent_kind: str | None = None


@dataclass(frozen=True)
class SheetSchema:
    sheet: str
    kind: str
    key: str
    required: tuple[str, ...]
    optional: tuple[str, ...] = ()
    parent: ParentRef | None = None
    title_prefix: str | None = None  # multilingual title/name column prefix


SCHEMAS: tuple[SheetSchema, ...] = (
    SheetSchema(
        sheet="Domains",
        kind="domains",
        key="domainId",
        required=("domainId", "name_fr", "name_en", "description_fr", "description_en", "order"),
        optional=("name_ar", "description_ar", "icon", "isActive"),
        title_prefix="name",
    ),
    SheetSchema(
        sheet="Modules",
        kind="modules",
        key="moduleId",
        required=("moduleId", "domainId", "title_fr", "title_en", "description_fr", "description_en", "order"),
        optional=("title_ar", "description_ar", "icon", "isActive"),
        parent=ParentRef("domainId", "domains", "MODULE_BAD_DOMAIN"),
        title_prefix="title",
    ),
    SheetSchema(
        sheet="Courses",
        kind="courses",
        key="courseId",
        required=(
            "courseId", "moduleId", "title_fr", "title_en",
            "description_fr", "description_en", "level", "order",
        ),
        optional=("title_ar", "description_ar", "isActive", "domainId"),
        parent=ParentRef(
            "moduleId", "modules", "COURSE_BAD_MODULE",
            legacy_field="domainId", legacy_parent_kind="domains",
        ),
        title_prefix="title",
    ),
    SheetSchema(
        sheet="Lessons",
        kind="lessons",
        key="lessonId",
        required=(
            "lessonId", "courseId", "title_fr", "title_en",
            "contentHtml_fr", "contentHtml_en", "videoUrl", "filesUrl", "order",
        ),
        optional=("title_ar", "contentHtml_ar", "resources_fr", "resources_en", "resources_ar"),
        parent=ParentRef("courseId", "courses", "LESSON_BAD_COURSE"),
        title_prefix="title",
    ),
    SheetSchema(
        sheet="Quizzes",
        kind="quizzes",
        key="quizId",
        required=("quizId", "lessonId", "title_fr", "title_en", "passingScore"),
        optional=("title_ar",),
        parent=ParentRef("lessonId", "lessons", "QUIZ_BAD_LESSON"),
        title_prefix="title",
    ),
    SheetSchema(
        sheet="Questions",
        kind="questions",
        key="questionId",
        required=(
            "questionId", "quizId", "question_fr", "question_en",
            "choices_fr", "choices_en", "correctIndex", "explanation_fr", "explanation_en",
        ),
        optional=("question_ar", "choices_ar", "explanation_ar"),
        parent=ParentRef("quizId", "quizzes", "QUESTION_BAD_QUIZ"),
        title_prefix="question",
    ),
)

SCHEMAS_BY_SHEET: dict[str, SheetSchema] = {s.sheet: s for s in SCHEMAS}
SCHEMAS_BY_KIND: dict[str, SheetSchema] = {s.kind: s for s in SCHEMAS}

LANGS = ("fr", "en", "ar")
REQUIRED_LANGS = ("fr", "en")
RESOURCE_COLUMNS = tuple(f"resources_{lang}" for lang in LANGS)
CONTENT_COLUMNS = tuple(f"contentHtml_{lang}" for lang in LANGS)
CHOICE_COLUMNS = tuple(f"choices_{lang}" for lang in LANGS)


def sheet_names() -> list[str]:
    return [s.sheet for s in SCHEMAS]


def missing_headers(schema: SheetSchema, headers) -> tuple[list[str], list[str]]:
    present = set(headers or ())
    return (
        [h for h in schema.required if h not in present],
        [h for h in schema.optional if h not in present],
    )


def entity_code(schema: SheetSchema) -> str:
    # "courseId" -> "COURSE"
    return schema.key[: -len("Id")].upper()
