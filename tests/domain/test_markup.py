"""Tests for markup text helpers."""

from pubgate.domain.markup import (
    code_blocks,
    count_words,
    first_paragraph,
    h2_headings,
    reading_time,
    split_sentences,
    strip_code,
    strip_code_fences,
)


class TestCode:
    def test_strip_fences(self) -> None:
        assert strip_code_fences("a\n```py\nx = 1\n```\nb") == "a\n\nb"

    def test_strip_inline(self) -> None:
        assert strip_code("use `pip` now") == "use  now"

    def test_code_blocks(self) -> None:
        body = "```py\na\n```\ntext\n```\nb\n```"
        assert len(code_blocks(body)) == 2


class TestCounts:
    def test_words_exclude_code(self) -> None:
        assert count_words("one two\n```\nthree four five\n```\nsix") == 3

    def test_reading_time_minimum(self) -> None:
        assert reading_time("") == "1 min read"

    def test_reading_time_rounds_up(self) -> None:
        assert reading_time("word " * 201) == "2 min read"


class TestHeadingsAndSentences:
    def test_h2_only(self) -> None:
        body = "# Title\n## One\n### Sub\n## Two"
        assert h2_headings(body) == ["## One", "## Two"]

    def test_split_sentences(self) -> None:
        assert split_sentences("One. Two! Three?  ") == ["One", " Two", " Three"]


class TestFirstParagraph:
    def test_skips_imports_and_headings(self) -> None:
        body = "import X from 'x'\n\n## Intro\n\nThe first prose.\n\nSecond."
        assert first_paragraph(body) == "The first prose."

    def test_skips_jsx_and_code(self) -> None:
        body = "<Hero />\n\n```js\nx\n```\n\nProse here."
        assert first_paragraph(body) == "Prose here."

    def test_none(self) -> None:
        assert first_paragraph("## Only heading") == ""
