"""
Tests for the two slide segmentation heuristics.
"""

import pytest

from models import SlideRecord
from slide_extractor import (
    extract_slides,
    extract_slides_by_bold_titles,
    extract_slides_by_headings,
    is_bold_only_title,
    normalize_text,
    parse_html,
)


def test_normalize_text():
    assert normalize_text("  a \n\t b  ") == "a b"
    assert normalize_text("") == ""


def test_bold_titles_split_paragraphs():
    html = (
        "<p><strong>Title A</strong></p><p>text1</p>"
        "<p><strong>Title B</strong></p><p>text2</p>"
    )
    assert extract_slides_by_bold_titles(html) == [
        SlideRecord(title="Title A", description="text1"),
        SlideRecord(title="Title B", description="text2"),
    ]


def test_bold_titles_drop_leading_content():
    html = "<p>intro</p><div>more intro</div><p><strong>First</strong></p><p>body</p>"
    slides = extract_slides_by_bold_titles(html)
    assert slides == [SlideRecord(title="First", description="body")]


def test_mixed_bold_paragraph_is_not_a_title():
    html = "<p><strong>Only</strong></p><p><strong>Note:</strong> read this</p>"
    slides = extract_slides_by_bold_titles(html)
    assert len(slides) == 1
    assert slides[0].title == "Only"
    assert slides[0].description == "Note: read this"


def test_bold_titles_join_blocks_with_blank_line():
    html = "<p><strong>T</strong></p><p>one</p><p>   </p><ul>\n<li>a</li>\n<li>b</li>\n</ul>"
    slides = extract_slides_by_bold_titles(html)
    assert slides[0].description == "one\n\na b"


def test_bold_title_without_content_has_empty_description():
    html = "<p><strong>A</strong></p><p><strong>B</strong></p><p>tail</p>"
    slides = extract_slides_by_bold_titles(html)
    assert slides == [
        SlideRecord(title="A", description=""),
        SlideRecord(title="B", description="tail"),
    ]


def test_bold_title_text_is_normalized():
    html = "<p> <strong>  Big \n  Idea </strong> </p><p>x</p>"
    assert extract_slides_by_bold_titles(html)[0].title == "Big Idea"


def test_bold_titles_without_any_title():
    assert extract_slides_by_bold_titles("<p>just text</p>") == []
    assert extract_slides_by_bold_titles("") == []


def test_is_bold_only_title():
    soup = parse_html("<p><strong>x</strong></p><div><strong>x</strong></div><p>x</p>")
    p_title, div, p_plain = soup.body.find_all(recursive=False)
    assert is_bold_only_title(p_title)
    assert not is_bold_only_title(div)
    assert not is_bold_only_title(p_plain)


def test_headings_split_document():
    html = "<h2>A</h2><p>x</p><h2>B</h2><p>y</p><p>z</p>"
    assert extract_slides_by_headings(html) == [
        SlideRecord(title="A", description="x"),
        SlideRecord(title="B", description="y\nz"),
    ]


def test_headings_keep_raw_text():
    html = "<h2> Intro </h2><pre>line 1\nline 2</pre><h3>sub</h3>"
    slides = extract_slides_by_headings(html)
    assert slides == [SlideRecord(title="Intro", description="line 1\nline 2\nsub")]


def test_headings_without_h2():
    assert extract_slides_by_headings("<h1>Top</h1><p>text</p>") == []


def test_heading_description_stops_at_parent_end():
    html = "<div><h2>Inside</h2><p>a</p></div><p>outside</p>"
    slides = extract_slides_by_headings(html)
    assert slides == [SlideRecord(title="Inside", description="a")]


def test_extract_slides_strategies():
    html = "<h2>H</h2><p><strong>B</strong></p><p>text</p>"
    assert [s.title for s in extract_slides(html, "headings")] == ["H"]
    assert [s.title for s in extract_slides(html, "bold-titles")] == ["B"]

    with pytest.raises(ValueError):
        extract_slides(html, "unknown")


def test_slide_record_is_immutable():
    slide = SlideRecord(title="t", description="d")
    with pytest.raises(Exception):
        slide.title = "other"
