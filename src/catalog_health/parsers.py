from __future__ import annotations
import json
import re
from dataclasses import dataclass
from typing import Any

_HTTP = re.compile(r"^https?://", re.IGNORECASE)
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")

_YOUTUBE = (
    re.compile(r"youtu\.be/", re.IGNORECASE),
    re.compile(r"youtube\.com/watch\?v=", re.IGNORECASE),
    re.compile(r"youtube\.com/embed/", re.IGNORECASE),
)
_VIMEO = re.compile(r"vimeo\.com/", re.IGNORECASE)
_GDRIVE = re.compile(r"drive\.google\.com/", re.IGNORECASE)
_MP4 = re.compile(r"\.mp4(\?|$)", re.IGNORECASE)

_SCRIPT_TAG = re.compile(r"<\s*script\b", re.IGNORECASE)
_EVENT_HANDLER = re.compile(r"on[a-z]+\s*=\s*[\"']", re.IGNORECASE)
_JS_SCHEME = re.compile(r"javascript:", re.IGNORECASE)


@dataclass(frozen=True)
class ResourceParseError:
    # returned instead of raising when a resources cell looks like JSON but is not
    error: str


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def is_blank(value: Any) -> bool:
    return cell_text(value) == ""


def to_int(value: Any, fallback: int) -> int:
    if isinstance(value, bool):
        return fallback
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value == value and abs(value) != float("inf") else fallback
    m = _LEADING_INT.match(cell_text(value))
    return int(m.group(1)) if m else fallback


def _element_text(x: Any) -> str:
    if isinstance(x, str):
        return x
    return json.dumps(x, ensure_ascii=False)


def _split_clean(s: str, sep: str) -> list[str]:
    return [p.strip() for p in s.split(sep) if p.strip()]


def parse_choices(raw: Any) -> list[str]:
    """Decode a choices cell.

    Priority: sequence as-is, JSON array, pipe list, comma list.
    Malformed JSON degrades to delimiter splitting; never raises.
    """
    if isinstance(raw, (list, tuple)):
        return [_element_text(x) for x in raw]
    s = cell_text(raw)
    if not s:
        return []
    if s.startswith("["):
        try:
            parsed = json.loads(s)
        except ValueError:
            pass
        else:
            return [_element_text(x) for x in parsed] if isinstance(parsed, list) else []
    if "|" in s:
        return _split_clean(s, "|")
    return _split_clean(s, ",")


def parse_resources(raw: Any) -> list[Any] | ResourceParseError:
    """Decode a resources cell into ``[{"label": ..., "url": ...}, ...]``.

    Accepts a JSON array or ``Label::URL|Label::URL``. A cell that starts
    with ``[`` but is not valid JSON yields a ``ResourceParseError``.
    """
    if raw is None:
        return []
    if isinstance(raw, list):
        return raw
    s = cell_text(raw)
    if not s:
        return []
    if s.startswith("["):
        try:
            parsed = json.loads(s)
        except ValueError as exc:
            return ResourceParseError(str(exc))
        if isinstance(parsed, list):
            return parsed
    out: list[dict[str, str]] = []
    for segment in _split_clean(s, "|"):
        label, sep, url = segment.partition("::")
        if sep:
            out.append({"label": label.strip(), "url": url.strip()})
        else:
            out.append({"label": segment, "url": segment})
    return out


def is_http(url: Any) -> bool:
    return bool(_HTTP.match(cell_text(url)))


def video_type(url: Any) -> str:
    u = cell_text(url)
    if not u:
        return ""
    if any(p.search(u) for p in _YOUTUBE):
        return "youtube"
    if _VIMEO.search(u):
        return "vimeo"
    if _GDRIVE.search(u):
        return "gdrive"
    if _MP4.search(u):
        return "mp4"
    # valid but not embeddable; the player falls back to an open-link button
    return "link"


def has_dangerous_html(html: Any) -> bool:
    s = "" if html is None else str(html)
    if _SCRIPT_TAG.search(s):
        return True
    if _EVENT_HANDLER.search(s):
        return True
    return bool(_JS_SCHEME.search(s))
