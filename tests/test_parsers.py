import pytest

from catalog_health.parsers import (
    ResourceParseError,
    cell_text,
    has_dangerous_html,
    is_http,
    parse_choices,
    parse_resources,
    to_int,
    video_type,
)


def test_parse_choices_json_array():
    assert parse_choices('["A", "B", "C"]') == ["A", "B", "C"]
    assert parse_choices("[1, 2]") == ["1", "2"]


def test_parse_choices_pipe_round_trip():
    items = ["alpha", "bravo", "charlie delta"]
    assert parse_choices("|".join(items)) == items


def test_parse_choices_comma_and_blanks():
    assert parse_choices(" a , b ,, c ") == ["a", "b", "c"]
    assert parse_choices("a | | b") == ["a", "b"]
    assert parse_choices(None) == []
    assert parse_choices("   ") == []


def test_parse_choices_malformed_json_falls_back_to_splitting():
    assert parse_choices("[A|B") == ["[A", "B"]
    assert parse_choices("[x, y") == ["[x", "y"]


def test_parse_choices_sequence_and_non_list_json():
    assert parse_choices(["a", 2]) == ["a", "2"]
    assert parse_choices('["only"]') == ["only"]
    assert parse_choices(7) == ["7"]


def test_parse_resources_pipe_format():
    parsed = parse_resources("Slides::https://a.com/s.pdf | https://b.com")
    assert parsed == [
        {"label": "Slides", "url": "https://a.com/s.pdf"},
        {"label": "https://b.com", "url": "https://b.com"},
    ]


def test_parse_resources_splits_on_first_separator_only():
    assert parse_resources("A::https://x.com/a::b") == [{"label": "A", "url": "https://x.com/a::b"}]


def test_parse_resources_json_and_passthrough():
    assert parse_resources('[{"label": "L", "url": "https://x.com"}]') == [{"label": "L", "url": "https://x.com"}]
    items = [{"label": "x"}]
    assert parse_resources(items) is items
    assert parse_resources(None) == []
    assert parse_resources("") == []


def test_parse_resources_malformed_json_returns_marker():
    parsed = parse_resources("[not json but starts with [")
    assert isinstance(parsed, ResourceParseError)
    assert parsed.error


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://example.com", True),
        ("  HTTP://EXAMPLE.COM ", True),
        ("ftp://example.com", False),
        ("example.com", False),
        (None, False),
    ],
)
def test_is_http(url, expected):
    assert is_http(url) is expected


@pytest.mark.parametrize(
    "url,expected",
    [
        ("https://youtu.be/abc123", "youtube"),
        ("https://www.youtube.com/watch?v=abc", "youtube"),
        ("https://www.youtube.com/embed/abc", "youtube"),
        ("https://vimeo.com/12345", "vimeo"),
        ("https://drive.google.com/file/d/x/view", "gdrive"),
        ("https://cdn.example.com/v.MP4", "mp4"),
        ("https://cdn.example.com/v.mp4?t=3", "mp4"),
        ("https://example.com/file.pdf", "link"),
        ("https://www.youtube.com/channel/x", "link"),
        ("", ""),
        (None, ""),
    ],
)
def test_video_type(url, expected):
    assert video_type(url) == expected


def test_has_dangerous_html():
    assert has_dangerous_html("<p>ok</p><script>bad()</script>")
    assert has_dangerous_html("<SCRIPT src='x'>")
    assert has_dangerous_html('<img src="x" onerror="alert(1)">')
    assert has_dangerous_html("<a href='JavaScript:void(0)'>x</a>")
    assert not has_dangerous_html("<p>ok</p>")
    assert not has_dangerous_html(None)


def test_cell_text_and_to_int():
    assert cell_text(2.0) == "2"
    assert cell_text(2.5) == "2.5"
    assert cell_text("  x ") == "x"
    assert cell_text(None) == ""
    assert to_int("2", -1) == 2
    assert to_int(" 3abc", -1) == 3
    assert to_int(1.0, -1) == 1
    assert to_int("abc", -1) == -1
    assert to_int(None, -999) == -999
    assert to_int(True, -1) == -1
