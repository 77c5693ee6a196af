"""Tests for body markup helpers."""

from __future__ import annotations

import pytest

from newsbloggen.markup import (
    clean_html_to_text,
    extract_media_refs,
    is_well_formed,
    repair_markup,
    strip_code_fences,
    unwrap_document,
)


@pytest.mark.unit
class TestExtractMediaRefs:
    def test_collects_image_and_embed_locators(self) -> None:
        markup = (
            '<p>intro</p><img src="https://a/1.png" alt="x" />'
            '<video src="https://a/clip.mp4"></video>'
            '<iframe src="https://youtube.com/embed/1"></iframe>'
            '<object data="https://a/doc.pdf"></object>'
        )
        assert extract_media_refs(markup) == frozenset(
            {"https://a/1.png", "https://a/clip.mp4", "https://youtube.com/embed/1", "https://a/doc.pdf"}
        )

    def test_ignores_links_and_empty_sources(self) -> None:
        markup = '<a href="https://a/page">link</a><img src="" /><img alt="no src" />'
        assert extract_media_refs(markup) == frozenset()

    def test_duplicates_collapse_and_whitespace_is_stripped(self) -> None:
        markup = '<img src=" https://a/1.png " /><img src="https://a/1.png" />'
        assert extract_media_refs(markup) == frozenset({"https://a/1.png"})

    def test_empty_input(self) -> None:
        assert extract_media_refs("") == frozenset()
        assert extract_media_refs(None) == frozenset()


@pytest.mark.unit
class TestWellFormed:
    @pytest.mark.parametrize(
        "markup",
        [
            "<h2>Title</h2><p>Text <strong>bold</strong></p>",
            '<p>image</p><img src="x.png" alt="a" /><br>',
            "plain text",
            "<ul><li>one</li><li>two</li></ul>",
        ],
    )
    def test_balanced_markup(self, markup: str) -> None:
        assert is_well_formed(markup) is True

    @pytest.mark.parametrize(
        "markup",
        [
            "<p>unclosed",
            "<p><strong>crossed</p></strong>",
            "stray</div>",
        ],
    )
    def test_unbalanced_markup(self, markup: str) -> None:
        assert is_well_formed(markup) is False

    def test_repair_closes_dangling_elements(self) -> None:
        repaired = repair_markup("<h2>Title</h2><p>unclosed")
        assert is_well_formed(repaired)
        assert "unclosed" in repaired
        assert "<html" not in repaired and "<body" not in repaired

    def test_repair_closes_implied_paragraphs(self) -> None:
        assert repair_markup("<p>one<p>two") == "<p>one</p><p>two</p>"

    def test_repair_keeps_query_string_locators(self) -> None:
        url = "https://cdn.example.com/a.png?x=1&region=kr&param=2"
        repaired = repair_markup(f'<p>unclosed<img src="{url}" />')
        assert is_well_formed(repaired)
        assert extract_media_refs(repaired) == frozenset({url})


@pytest.mark.unit
class TestModelReplyCleanup:
    def test_strip_html_fence(self) -> None:
        assert strip_code_fences("```html\n<p>hi</p>\n```") == "<p>hi</p>"

    def test_strip_bare_fence(self) -> None:
        assert strip_code_fences("```\n<p>hi</p>\n```\n") == "<p>hi</p>"

    def test_unfenced_text_is_only_trimmed(self) -> None:
        assert strip_code_fences("  <p>hi</p>\n") == "<p>hi</p>"

    def test_unwrap_full_document(self) -> None:
        doc = "<html><head><title>t</title></head><body><h2>A</h2><p>b</p></body></html>"
        assert unwrap_document(doc) == "<h2>A</h2><p>b</p>"

    def test_fragment_is_untouched(self) -> None:
        fragment = '<h2>A</h2><img src="x.png" alt="a" />'
        assert unwrap_document(fragment) == fragment


@pytest.mark.unit
def test_clean_html_to_text_keeps_blocks_on_lines() -> None:
    text = clean_html_to_text("<h2>제목</h2><p>첫 문단 &amp; 내용</p><p>  둘째   문단 </p>")
    assert text.splitlines() == ["제목", "첫 문단 & 내용", "둘째 문단"]
