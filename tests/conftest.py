import zipfile

import pytest

from catalog_health.schema import SCHEMAS
from catalog_health.types import SheetSnapshot


def _consistent_catalog() -> dict[str, list[dict]]:
    return {
        "domains": [
            {"domainId": "d1", "name_fr": "Informatique", "name_en": "Computing", "order": 1},
        ],
        "modules": [
            {"moduleId": "m1", "domainId": "d1", "title_fr": "Bases", "title_en": "Basics", "order": 1},
        ],
        "courses": [
            {"courseId": "c1", "moduleId": "m1", "title_fr": "VBA", "title_en": "VBA", "level": "A1", "order": 1},
        ],
        "lessons": [
            {
                "lessonId": "l1",
                "courseId": "c1",
                "title_fr": "Variables",
                "title_en": "Variables",
                "contentHtml_fr": "<p>ok</p>",
                "contentHtml_en": "<p>ok</p>",
                "videoUrl": "",
                "filesUrl": "",
                "order": 1,
            },
        ],
        "quizzes": [
            {"quizId": "q1", "lessonId": "l1", "title_fr": "Quiz", "title_en": "Quiz", "passingScore": 70},
        ],
        "questions": [
            {
                "questionId": "qq1",
                "quizId": "q1",
                "question_fr": "Quelle lettre ?",
                "question_en": "Which letter?",
                "choices_fr": '["A","B"]',
                "choices_en": "A|B",
                "correctIndex": 1,
            },
        ],
    }


@pytest.fixture
def catalog():
    return _consistent_catalog()


@pytest.fixture
def snapshots_for():
    """Build header snapshots for every sheet, all headers present by default."""

    def _build(entities, *, drop=None, absent=(), unreadable=()):
        drop = drop or {}
        out = {}
        for schema in SCHEMAS:
            if schema.sheet in absent:
                out[schema.sheet] = SheetSnapshot(name=schema.sheet, exists=False)
                continue
            if schema.sheet in unreadable:
                out[schema.sheet] = SheetSnapshot(name=schema.sheet, exists=True, read_error="boom")
                continue
            headers = [h for h in schema.required + schema.optional if h not in drop.get(schema.sheet, ())]
            out[schema.sheet] = SheetSnapshot(
                name=schema.sheet,
                exists=True,
                headers=headers,
                rows=list(entities.get(schema.kind, [])),
            )
        return out

    return _build


@pytest.fixture
def corrupt_first_sheet():
    """Replace the XML of the first worksheet of an .xlsx with a truncated document."""

    def _corrupt(path):
        with zipfile.ZipFile(path) as src:
            entries = {info.filename: src.read(info) for info in src.infolist()}
        entries["xl/worksheets/sheet1.xml"] = b"<worksheet><sheetData><row><c"
        with zipfile.ZipFile(path, "w", zipfile.ZIP_DEFLATED) as dst:
            for filename, data in entries.items():
                dst.writestr(filename, data)

    return _corrupt
