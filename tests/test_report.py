import pytest

from catalog_health.checks import run_health_check
from catalog_health.report import assemble, group_checks, group_key, localize_finding, render_text
from catalog_health.types import Finding


@pytest.mark.parametrize(
    "code,message,expected",
    [
        ("RESOURCE_DUP_URL", "", "resources"),
        ("RESOURCES_BAD_JSON", "", "resources"),
        ("VIDEO_URL_FALLBACK", "", "video"),
        ("DANGEROUS_HTML", "Lesson l1: dangerous", "html"),
        ("DUP_LESSON_ID", "", "lessons"),
        ("QUESTION_BAD_QUIZ", "", "quizzes"),
        ("MISSING_QUESTION_BILINGUAL", "", "questions"),
        ("COURSE_BAD_MODULE", "", "courses"),
        ("MISSING_SHEET", "", "sheets"),
        ("MISSING_OPTIONAL_HEADERS", "", "sheets"),
        ("SOMETHING", "Lesson l9 broke", "lessons"),
        ("MODULE_BAD_DOMAIN", "Modules with unknown domainId: m1", "general"),
        (None, None, "general"),
    ],
)
def test_group_key(code, message, expected):
    assert group_key(code, message) == expected


def test_group_checks_sorted_and_counted():
    checks = [
        Finding("warn", "VIDEO_URL_FALLBACK", "Lesson l1: videoUrl not recognized"),
        Finding("err", "RESOURCE_MISSING_URL", "Lesson l1: resource missing URL"),
        Finding("warn", "RESOURCE_DUP_URL", "Lesson l1: duplicate resource URL -> x"),
        Finding("err", "DUP_DOMAIN_ID", "Duplicate domainId: d1"),
    ]
    groups = group_checks(checks)
    assert list(groups) == ["general", "resources", "video"]
    assert [len(v) for v in groups.values()] == [1, 2, 1]


def test_assemble_localizes_french(catalog):
    catalog["courses"].append(dict(catalog["courses"][0]))
    catalog["lessons"][0]["resources_fr"] = "Doc::https://a.com|Doc::https://a.com"
    view = assemble(run_health_check(catalog), "fr")
    assert view.ok is False
    assert view.status_label == "Erreur"
    assert view.error_count == 1
    assert view.warning_count == 1
    assert view.notes == ["Certains contrôles ont échoué."]
    by_key = {g.key: g for g in view.groups}
    assert by_key["courses"].label == "Cours"
    assert by_key["courses"].items[0].message == "ID dupliqué (courseId) : c1"
    assert by_key["resources"].items[0].message == "Leçon l1 : URL de ressource dupliquée → https://a.com"
    assert by_key["resources"].count == 1


def test_english_keeps_original_messages(catalog):
    catalog["lessons"][0]["courseId"] = "zz"
    report = run_health_check(catalog)
    view = assemble(report, "en")
    assert view.groups[0].items[0].message == report.checks[0].message
    assert view.notes == ["Some checks failed."]


def test_localize_falls_back_to_message_for_unknown_code():
    finding = Finding("warn", "NEW_THING", "Something new")
    assert localize_finding(finding, "ar") == "Something new"


def test_localize_bad_correct_index_arabic(catalog):
    catalog["questions"][0]["correctIndex"] = 5
    report = run_health_check(catalog)
    assert localize_finding(report.checks[0], "ar") == (
        "أسئلة ذات correctIndex غير صالح: qq1 (correctIndex=5, choices=2)"
    )


def test_localize_bad_correct_index_french_without_choices(catalog):
    catalog["questions"].append({"questionId": "qq2", "quizId": "q1", "question_fr": "x", "question_en": "x"})
    catalog["questions"][0]["correctIndex"] = 2
    report = run_health_check(catalog)
    assert localize_finding(report.checks[0], "fr") == (
        "Questions avec correctIndex invalide : qq1 (correctIndex=2, choices=2), qq2 (aucun choix)"
    )


def test_duplicate_ids_localize_in_every_language():
    report = run_health_check({"courses": [{"courseId": "c1"}, {"courseId": "c1"}]})
    assert localize_finding(report.checks[0], "fr") == "ID dupliqué (courseId) : c1"
    assert localize_finding(report.checks[0], "ar") == "معرّف مكرر (courseId): c1"
    view = assemble(report, "ar")
    assert view.groups[0].key == "courses"
    assert view.error_count == 1


def test_sheet_status_levels(catalog, snapshots_for):
    sheets = snapshots_for(catalog, drop={"Courses": ("level",)}, absent=("Questions",))
    view = assemble(run_health_check(catalog, sheets), "en")
    levels = {s.name: s.level for s in view.sheets}
    assert levels["Domains"] == "ok"
    assert levels["Courses"] == "warn"
    assert levels["Questions"] == "err"


def test_render_text(catalog):
    catalog["lessons"][0]["videoUrl"] = "https://example.com/file.pdf"
    text = render_text(assemble(run_health_check(catalog), "en"))
    assert "Overall status: OK" in text
    assert "Video (1)" in text
    assert "[Warning] Lesson l1: videoUrl not recognized" in text
    assert "lessonsWithVideo: 1" in text


def test_render_text_empty(catalog):
    text = render_text(assemble(run_health_check(catalog), "fr"))
    assert "Aucun élément." in text
    assert "Tous les contrôles essentiels sont validés." in text
