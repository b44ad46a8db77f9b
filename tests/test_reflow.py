import logging

import pytest

from prose_reflow.models import Document
from prose_reflow.reflow import TransformFault, analyze, reflow, reflow_text
from prose_reflow.rules import MalformedRulesetError, get_ruleset
from tests.utils import (
    SAMPLE_HELPFUL,
    SAMPLE_INFO,
    SAMPLE_INFO_REFLOWED,
    FlakyDocument,
)


def test_wrapped_paragraph_is_joined():
    text = "This is a line that\nwraps onto the next\nline."
    assert reflow_text(text, []) == "This is a line that wraps onto the next line."


def test_code_paragraph_is_left_alone():
    text = "(defun foo ()\n  (bar))"
    assert reflow_text(text, get_ruleset("info")) == text


def test_numbered_list_is_left_alone():
    text = "1. First item here.\n2. Second item here."
    assert reflow_text(text, get_ruleset("info")) == text
    assert reflow_text(text, []) == text


def test_lowercase_paragraph_is_left_alone():
    text = "not capitalized.\ncontinues here."
    assert reflow_text(text, []) == text


def test_paragraphs_are_joined_independently():
    text = "First para\nwraps here.\n\nSecond para\nwraps too.\n"
    assert reflow_text(text, get_ruleset("info")) == (
        "First para wraps here.\n\nSecond para wraps too.\n"
    )


def test_deep_indentation_vetoes_whole_paragraph():
    text = "This line is prose and\n         indented code here\nends fine."
    assert reflow_text(text, get_ruleset("info")) == text


def test_info_sample_document():
    assert reflow_text(SAMPLE_INFO, get_ruleset("info")) == SAMPLE_INFO_REFLOWED


def test_helpful_sample_document():
    """Section labels and source lines stay put; documentation text is joined."""
    result = reflow_text(SAMPLE_HELPFUL, get_ruleset("helpful"))
    assert "Frobnicate ARG, a value that was wrapped by the panel." in result
    assert "Signature\n(foo-frobnicate ARG &optional FORCE)" in result
    assert result.endswith("Source Code\n;; Defined in ~/foo/foo.el\n")


def test_single_bullet_item_is_joined():
    text = "• Single bullet item\nthat wraps."
    assert reflow_text(text, get_ruleset("info")) == "• Single bullet item that wraps."


def test_reflow_is_idempotent():
    for text, profile in ((SAMPLE_INFO, "info"), (SAMPLE_HELPFUL, "helpful")):
        once = reflow_text(text, get_ruleset(profile))
        assert reflow_text(once, get_ruleset(profile)) == once


def test_paragraph_boundaries_are_preserved():
    text = "Alpha\nbeta.\n\n\nGamma\ndelta.\n  \nEpsilon.\n"
    result = reflow_text(text, [])
    assert result == "Alpha beta.\n\n\nGamma delta.\n  \nEpsilon.\n"


def test_reflow_mutates_document_in_place():
    document = Document("Wrapped\nline.")
    assert reflow(document, get_ruleset("info")) is None
    assert document.text == "Wrapped line."


def test_malformed_ruleset_propagates():
    with pytest.raises(MalformedRulesetError):
        reflow(Document("Some\ntext."), ["(unclosed"])


def test_fault_is_contained_and_reported(caplog: pytest.LogCaptureFixture):
    """A read-only document produces one fault and is left untouched."""
    faults: list[TransformFault] = []
    document = Document("Wrapped\nline.\n\nAnother\none.", read_only=True)
    with caplog.at_level(logging.ERROR, logger="prose_reflow"):
        reflow(document, get_ruleset("info"), on_fault=faults.append)

    assert document.text == "Wrapped\nline.\n\nAnother\none."
    assert len(faults) == 1
    assert faults[0].offset == 0
    assert "Reflow stopped" in caplog.text


def test_fault_keeps_earlier_joins_and_stops_scan():
    faults: list[TransformFault] = []
    document = FlakyDocument("One\ntwo.\n\nThree\nfour.\n\nFive\nsix.", fail_after=1)
    reflow(document, [], on_fault=faults.append)

    assert document.text == "One two.\n\nThree\nfour.\n\nFive\nsix."
    assert len(faults) == 1
    assert isinstance(faults[0].__cause__, RuntimeError)


def test_analyze_reports_each_paragraph():
    verdicts = analyze(SAMPLE_INFO, get_ruleset("info"))
    assert [v.reason for v in verdicts] == ["forbidden", "prose", "list", "forbidden"]
    assert verdicts[2].marker_count == 3
    assert verdicts[0].forbidden_by is not None


@pytest.mark.parametrize("profile", ["none", "info"])
def test_list_after_lead_in_line_is_left_alone(profile: str):
    numbered = "Options are:\n1. First item.\n2. Second item."
    bulleted = "The mode provides\n• one command.\n• another command."
    assert reflow_text(numbered, get_ruleset(profile)) == numbered
    assert reflow_text(bulleted, get_ruleset(profile)) == bulleted
    assert reflow_text(numbered, []) == numbered


def test_unicode_space_around_break_is_joined():
    assert reflow_text("Some text\xa0\nwraps.", []) == "Some text wraps."
    assert reflow_text("Some text\n wraps.", []) == "Some text wraps."


def test_crlf_helpful_labels_stay_put():
    text = "Documentation\r\nReturn the value\r\nof the thing.\r\n"
    assert reflow_text(text, get_ruleset("helpful")) == text
