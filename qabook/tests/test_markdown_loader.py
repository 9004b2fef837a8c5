from __future__ import annotations

"""Markdown loader behavior tests."""

import pytest

from qabook.collection.errors import MalformedDocumentError, UnreadableSourceError
from qabook.collection.types import CodeSample
from qabook.loaders.markdown import (
    load_documents,
    load_markdown_bytes,
    load_markdown_file,
    parse_markdown,
)


def test_load_markdown_file_builds_sections_and_entries(ioc_doc) -> None:
    """Ensure headings map to sections and entries in order."""
    collection = load_markdown_file(ioc_doc)

    assert [section.name for section in collection.sections] == ["IoC"]
    entries = list(collection.entries())
    assert [entry.id for entry in entries] == ["what-is-inversion-of-control", "container"]
    assert entries[0].question == "What is Inversion of Control?"
    assert entries[0].answer.startswith("The container creates objects")
    assert entries[0].section == "IoC"
    assert entries[0].location.line == 3
    assert entries[1].location.line == 8
    assert collection.sources == (str(ioc_doc),)


def test_tags_line_and_code_samples_are_extracted(ioc_doc) -> None:
    """Ensure a leading Tags line is consumed and fences become code samples."""
    entry = load_markdown_file(ioc_doc).find("container")

    assert entry is not None
    assert entry.tags == ("core", "container")
    assert not entry.answer.lower().startswith("tags")
    assert entry.code_samples == [
        CodeSample(
            language="java",
            code="ApplicationContext ctx = new AnnotationConfigApplicationContext(AppConfig.class);",
        )
    ]


def test_headings_inside_code_fences_stay_in_answer() -> None:
    text = "# Beans\n\n## Show a comment\n\n~~~text\n# not a section\n## not a question\n~~~\n"

    collection = parse_markdown(text, source="fence.md")

    assert len(collection.sections) == 1
    entry = collection.sections[0].entries[0]
    assert "# not a section" in entry.answer
    assert "## not a question" in entry.answer


def test_deeper_headings_and_closing_hashes() -> None:
    text = "# Scopes ##\n\n## What scopes exist? ##\n\n### Singleton\n\nOne per container.\n"

    collection = parse_markdown(text, source="scopes.md")

    section = collection.sections[0]
    assert section.name == "Scopes"
    assert section.entries[0].question == "What scopes exist?"
    assert section.entries[0].answer == "### Singleton\n\nOne per container."


def test_custom_heading_levels_and_title() -> None:
    text = (
        "# Spring Interview Questions\n"
        "\n"
        "## Bean Scope & Thread Safety\n"
        "\n"
        "Scopes decide how many instances exist.\n"
        "\n"
        "### Are singleton beans thread safe?\n"
        "\n"
        "No, not by default.\n"
    )

    collection = parse_markdown(text, source="book.md", section_level=2, question_level=3)

    assert collection.title == "Spring Interview Questions"
    section = collection.sections[0]
    assert section.name == "Bean Scope & Thread Safety"
    assert section.intro == "Scopes decide how many instances exist."
    assert section.entries[0].id == "are-singleton-beans-thread-safe"


def test_question_before_section_is_malformed() -> None:
    with pytest.raises(MalformedDocumentError) as excinfo:
        parse_markdown("\n## Orphan question\n\nAnswer.\n", source="orphan.md")

    assert excinfo.value.source == "orphan.md"
    assert excinfo.value.line == 2
    assert "orphan.md:2" in str(excinfo.value)


def test_prose_before_section_is_malformed() -> None:
    with pytest.raises(MalformedDocumentError) as excinfo:
        parse_markdown("Intro text\n# Section\n", source="intro.md")

    assert excinfo.value.line == 1


def test_empty_section_heading_is_malformed() -> None:
    with pytest.raises(MalformedDocumentError) as excinfo:
        parse_markdown("# IoC\n\n## Q\n\nA\n\n#\n", source="empty.md")

    assert excinfo.value.line == 7


def test_unclosed_fence_reports_opening_line() -> None:
    text = "# IoC\n\n## Q\n\n```java\nclass A {}\n"

    with pytest.raises(MalformedDocumentError) as excinfo:
        parse_markdown(text, source="open.md")

    assert excinfo.value.line == 5


def test_invalid_heading_levels_are_rejected() -> None:
    with pytest.raises(MalformedDocumentError):
        parse_markdown("# S\n", source="levels.md", section_level=2, question_level=2)
    with pytest.raises(MalformedDocumentError):
        parse_markdown("# S\n", source="levels.md", section_level=1, question_level=7)


def test_blank_question_is_left_for_validation() -> None:
    collection = parse_markdown("# IoC\n\n##\n\nSome answer.\n", source="blank.md")

    entry = collection.sections[0].entries[0]
    assert entry.question == ""
    assert entry.id == ""


def test_non_ascii_question_gets_hashed_id() -> None:
    collection = parse_markdown("# IoC\n\n## 什么是依赖注入?\n\n答案。\n", source="zh.md")

    entry = collection.sections[0].entries[0]
    assert entry.id.startswith("q-")
    assert len(entry.id) == 12


def test_load_documents_preserves_order_and_keeps_sections_separate(write_doc) -> None:
    first = write_doc("a.md", "# IoC\n\n## One\n\nA1\n")
    second = write_doc("b.md", "# DI\n\n## Two\n\nA2\n\n# IoC\n\n## Three\n\nA3\n")

    collection = load_documents([first, second])

    assert [section.name for section in collection.sections] == ["IoC", "DI", "IoC"]
    assert [entry.id for entry in collection.entries()] == ["one", "two", "three"]
    assert collection.sources == (str(first), str(second))


def test_missing_file_is_unreadable(tmp_path) -> None:
    missing = tmp_path / "missing.md"

    with pytest.raises(UnreadableSourceError) as excinfo:
        load_markdown_file(missing)

    assert excinfo.value.source == str(missing)


def test_undecodable_bytes_are_unreadable() -> None:
    with pytest.raises(UnreadableSourceError):
        load_markdown_bytes(b"# IoC\n\xff\xfe\n", source="upload.md")


def test_crlf_and_bom_are_normalized() -> None:
    data = "\ufeff# IoC\r\n\r\n## Q\r\n\r\nA\r\n".encode("utf-8")

    collection = load_markdown_bytes(data, source="win.md")

    assert collection.sections[0].name == "IoC"
    assert collection.sections[0].entries[0].answer == "A"


def test_inline_triple_backtick_span_is_not_a_fence() -> None:
    text = "# IoC\n\n## Q\n\n```@Autowired``` wires beans.\n\n## R\n\nB.\n"

    collection = parse_markdown(text, source="span.md")

    entries = collection.sections[0].entries
    assert [entry.id for entry in entries] == ["q", "r"]
    assert entries[0].answer == "```@Autowired``` wires beans."
    assert entries[0].code_samples == []
