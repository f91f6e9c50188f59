from __future__ import annotations

STRINGS: dict[str, dict[str, str]] = {
    "group.resources": {"fr": "Ressources", "en": "Resources", "ar": "الموارد"},
    "group.video": {"fr": "Vidéo", "en": "Video", "ar": "الفيديو"},
    "group.html": {"fr": "HTML", "en": "HTML", "ar": "HTML"},
    "group.lessons": {"fr": "Leçons", "en": "Lessons", "ar": "الدروس"},
    "group.quizzes": {"fr": "Quiz", "en": "Quizzes", "ar": "الاختبارات"},
    "group.questions": {"fr": "Questions", "en": "Questions", "ar": "الأسئلة"},
    "group.courses": {"fr": "Cours", "en": "Courses", "ar": "الدورات"},
    "group.sheets": {"fr": "Feuilles", "en": "Sheets", "ar": "الأوراق"},
    "group.general": {"fr": "Général", "en": "General", "ar": "عام"},
    "status.ok": {"fr": "OK", "en": "OK", "ar": "سليم"},
    "status.warn": {"fr": "Avertissement", "en": "Warning", "ar": "تحذير"},
    "status.err": {"fr": "Erreur", "en": "Error", "ar": "خطأ"},
    "summary.overall": {"fr": "État global", "en": "Overall status", "ar": "الحالة العامة"},
    "summary.errors": {"fr": "erreurs", "en": "errors", "ar": "أخطاء"},
    "summary.warnings": {"fr": "avertissements", "en": "warnings", "ar": "تحذيرات"},
    "summary.passed": {
        "fr": "Tous les contrôles essentiels sont validés.",
        "en": "All core checks passed.",
        "ar": "تم اجتياز جميع الفحوصات الأساسية.",
    },
    "summary.failed": {
        "fr": "Certains contrôles ont échoué.",
        "en": "Some checks failed.",
        "ar": "فشلت بعض الفحوصات.",
    },
    "section.sheets": {"fr": "Feuilles", "en": "Sheets", "ar": "الأوراق"},
    "section.checks": {"fr": "Contrôles", "en": "Checks", "ar": "الفحوصات"},
    "section.counts": {"fr": "Compteurs", "en": "Counts", "ar": "الأعداد"},
    "common.empty": {"fr": "Aucun élément.", "en": "Nothing to show.", "ar": "لا يوجد شيء لعرضه."},
    # finding templates, formatted from the finding details
    "finding.MISSING_SHEET": {
        "fr": "Feuille manquante : {sheet}",
        "en": "Missing sheet: {sheet}",
        "ar": "الورقة مفقودة: {sheet}",
    },
    "finding.SHEET_READ_ERROR": {
        "fr": "Lecture impossible de la feuille {sheet} : {error}",
        "en": "Cannot read sheet {sheet}: {error}",
        "ar": "تعذّرت قراءة الورقة {sheet}: {error}",
    },
    "finding.MISSING_HEADERS": {
        "fr": "En-têtes requis manquants dans {sheet} : {missing}",
        "en": "Missing required headers in {sheet}: {missing}",
        "ar": "أعمدة إلزامية ناقصة في {sheet}: {missing}",
    },
    "finding.MISSING_OPTIONAL_HEADERS": {
        "fr": "En-têtes optionnels manquants dans {sheet} : {missing}",
        "en": "Optional headers missing in {sheet}: {missing}",
        "ar": "أعمدة اختيارية ناقصة في {sheet}: {missing}",
    },
    "finding.DUP_ID": {
        "fr": "ID dupliqué ({key}) : {values}",
        "en": "Duplicate {key}: {values}",
        "ar": "معرّف مكرر ({key}): {values}",
    },
    "finding.BAD_PARENT": {
        "fr": "Références {field} inconnues : {ids}",
        "en": "Unknown {field} referenced by: {ids}",
        "ar": "مراجع {field} غير معروفة: {ids}",
    },
    "finding.BAD_CORRECT_INDEX": {
        "fr": "Questions avec correctIndex invalide : {ids}",
        "en": "Questions with invalid correctIndex: {ids}",
        "ar": "أسئلة ذات correctIndex غير صالح: {ids}",
    },
    "finding.no_choices": {"fr": "aucun choix", "en": "no choices", "ar": "لا توجد خيارات"},
    "finding.DANGEROUS_HTML": {
        "fr": "Leçon {lessonId} : HTML dangereux détecté (<script/on*/javascript:)",
        "en": "Lesson {lessonId}: dangerous HTML detected (<script/on*/javascript:)",
        "ar": "الدرس {lessonId}: تم اكتشاف HTML خطير (<script/on*/javascript:)",
    },
    "finding.VIDEO_URL_NOT_HTTP": {
        "fr": "Leçon {lessonId} : le lien vidéo n'est pas http(s)",
        "en": "Lesson {lessonId}: videoUrl is not http(s)",
        "ar": "الدرس {lessonId}: رابط الفيديو ليس http(s)",
    },
    "finding.VIDEO_URL_FALLBACK": {
        "fr": "Leçon {lessonId} : vidéo non intégrable (ouverture par lien)",
        "en": "Lesson {lessonId}: videoUrl not recognized for embed (will fallback to open link)",
        "ar": "الدرس {lessonId}: الفيديو غير قابل للتضمين (سيُفتح كرابط)",
    },
    "finding.RESOURCES_BAD_JSON": {
        "fr": "Leçon {lessonId} : JSON des ressources invalide ({column})",
        "en": "Lesson {lessonId}: resources JSON parse error ({column})",
        "ar": "الدرس {lessonId}: خطأ في JSON الموارد ({column})",
    },
    "finding.RESOURCE_MISSING_URL": {
        "fr": "Leçon {lessonId} : URL de ressource manquante",
        "en": "Lesson {lessonId}: resource missing URL",
        "ar": "الدرس {lessonId}: رابط المورد ناقص",
    },
    "finding.RESOURCE_URL_NOT_HTTP": {
        "fr": "Leçon {lessonId} : URL de ressource invalide (http/https) → {url}",
        "en": "Lesson {lessonId}: resource URL not http(s) -> {url}",
        "ar": "الدرس {lessonId}: رابط غير صالح (http/https) → {url}",
    },
    "finding.RESOURCE_MISSING_LABEL": {
        "fr": "Leçon {lessonId} : libellé manquant pour la ressource → {url}",
        "en": "Lesson {lessonId}: resource missing label for {url}",
        "ar": "الدرس {lessonId}: عنوان المورد ناقص → {url}",
    },
    "finding.RESOURCE_DUP_URL": {
        "fr": "Leçon {lessonId} : URL de ressource dupliquée → {url}",
        "en": "Lesson {lessonId}: duplicate resource URL -> {url}",
        "ar": "الدرس {lessonId}: رابط مورد مكرر → {url}",
    },
    "finding.MISSING_BILINGUAL": {
        "fr": "Traduction FR/EN manquante : {ids}",
        "en": "Missing FR/EN text: {ids}",
        "ar": "نص FR/EN ناقص: {ids}",
    },
}

def has(key: str) -> bool:
    return key in STRINGS

def t(key: str, lang: str, /, **params) -> str:
    text = STRINGS.get(key, {}).get(lang, STRINGS.get(key, {}).get("en", key))
    return text.format(**params) if params else text
