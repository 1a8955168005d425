"""Unit tests for final-answer extraction."""

import json

import pytest

from orchestrator.extraction import (
    EnvelopeExtractor,
    FencedBlockExtractor,
    LabeledSectionExtractor,
    ResultExtractor,
    extract_result,
)
from tests.stubs import COVER_LETTER, OPTIMIZED, final_answer_text


@pytest.mark.unit
def test_fenced_json_block_recovered_deep_equal():
    result = extract_result(final_answer_text())

    assert result.structured_payload == OPTIMIZED
    assert result.resume_data == OPTIMIZED["optimizedResumeData"]


@pytest.mark.unit
def test_no_fenced_block_leaves_payload_absent():
    result = extract_result("I could not produce a resume this time.")

    assert result.structured_payload is None
    assert result.resume_data is None
    assert result.free_text_sections == {}


@pytest.mark.unit
def test_malformed_block_is_skipped_and_next_block_wins():
    text = '```json\n{"broken": \n```\n\nRetry:\n```json\n{"ok": true}\n```'

    assert extract_result(text).structured_payload == {"ok": True}


@pytest.mark.unit
def test_only_malformed_block_does_not_raise():
    result = extract_result('```json\n{"summary": "missing brace"\n```')

    assert result.structured_payload is None


@pytest.mark.unit
def test_first_parseable_block_wins():
    text = '```json\n{"first": 1}\n```\n```json\n{"second": 2}\n```'

    assert FencedBlockExtractor().extract(text) == {"first": 1}


@pytest.mark.unit
def test_untagged_fence_and_scalar_json():
    assert FencedBlockExtractor().extract('```\n[1, 2]\n```') == [1, 2]
    # A bare number parses as JSON but is not structured data
    assert FencedBlockExtractor().extract("```\n42\n```") is None


@pytest.mark.unit
def test_non_dict_payload_has_no_resume_data():
    result = extract_result("```json\n[1, 2, 3]\n```")

    assert result.structured_payload == [1, 2, 3]
    assert result.resume_data is None


@pytest.mark.unit
def test_payload_without_wrapper_is_its_own_resume():
    inner = OPTIMIZED["optimizedResumeData"]
    result = extract_result(f"```json\n{json.dumps(inner)}\n```")

    assert result.resume_data == inner


@pytest.mark.unit
@pytest.mark.parametrize(
    "header",
    ["## Cover Letter", "**Cover Letter**", "Cover Letter:", "COVER LETTER", "### **Cover Letter:**"],
)
def test_labeled_section_header_variants(header):
    text = f"Intro.\n\n{header}\n\nThank you for considering me.\nBest,\nJane\n"

    assert LabeledSectionExtractor("cover letter").extract(text) == (
        "Thank you for considering me.\nBest,\nJane"
    )


@pytest.mark.unit
def test_labeled_section_stops_at_next_header_or_fence():
    text = "## Cover Letter\n\nBody line.\n\n## Notes\n\nOther stuff\n```json\n{}\n```"

    assert LabeledSectionExtractor("cover letter").extract(text) == "Body line."


@pytest.mark.unit
def test_labeled_section_requires_paragraph_break():
    text = "Cover Letter:\nDear Team, no blank line here."

    assert LabeledSectionExtractor("cover letter").extract(text) is None


@pytest.mark.unit
def test_envelope_fallback_without_header():
    text = (
        "```json\n{\"a\": 1}\n```\n\n"
        "Dear Hiring Manager,\n\nI would love to join Acme.\n\nKind regards,\nJane Doe\n\n"
        "Let me know if you need changes."
    )
    result = extract_result(text)

    assert result.cover_letter == (
        "Dear Hiring Manager,\n\nI would love to join Acme.\n\nKind regards,\nJane Doe"
    )


@pytest.mark.unit
def test_envelope_needs_valediction():
    assert EnvelopeExtractor().extract("Dear team,\nThis letter never ends") is None


@pytest.mark.unit
def test_labeled_section_wins_over_envelope():
    result = extract_result(final_answer_text())

    assert result.cover_letter == COVER_LETTER


@pytest.mark.unit
def test_trailing_rule_is_trimmed():
    text = "## Cover Letter\n\nHello there.\n\n---\n"

    assert extract_result(text).cover_letter == "Hello there."


@pytest.mark.unit
def test_extraction_is_idempotent():
    text = final_answer_text()

    assert extract_result(text) == extract_result(text)


@pytest.mark.unit
def test_empty_and_none_input():
    assert extract_result("").structured_payload is None
    assert extract_result(None).free_text_sections == {}


@pytest.mark.unit
def test_failing_strategy_is_contained():
    class Exploding(FencedBlockExtractor):
        name = "exploding"

        def extract(self, text):
            raise RuntimeError("boom")

    extractor = ResultExtractor(
        payload_extractors=[Exploding(), FencedBlockExtractor()],
        section_extractors={"cover_letter": [Exploding()]},
    )
    result = extractor.extract('```json\n{"x": 1}\n```')

    assert result.structured_payload == {"x": 1}
    assert "cover_letter" not in result.free_text_sections


@pytest.mark.unit
def test_inline_fence_mention_does_not_hide_block():
    text = 'I wrapped the data in a ``` fence as asked.\n\n```json\n{"a": 1}\n```\n'

    assert extract_result(text).structured_payload == {"a": 1}


@pytest.mark.unit
def test_indented_fence_is_recovered():
    text = 'Result:\n  ```json\n  {"a": [1, 2]}\n  ```\nThanks'

    assert FencedBlockExtractor().extract(text) == {"a": [1, 2]}


@pytest.mark.unit
@pytest.mark.parametrize(
    "letter, expected",
    [
        (
            "Dear Hiring Manager,\n\nI would love to join Acme.\n\nSincerely, Jane Doe\n\nAnything else?",
            "Dear Hiring Manager,\n\nI would love to join Acme.\n\nSincerely, Jane Doe",
        ),
        (
            "Dear Hiring Manager,\r\n\r\nI would love to join Acme.\r\n\r\nBest regards,\r\nJane Doe\r\n",
            "Dear Hiring Manager,\n\nI would love to join Acme.\n\nBest regards,\nJane Doe",
        ),
        (
            "To Whom It May Concern:\n\nI am applying for the backend role.\n\nRespectfully,\nJane Doe",
            "To Whom It May Concern:\n\nI am applying for the backend role.\n\nRespectfully,\nJane Doe",
        ),
        (
            "Hello Hiring Team,\n\nI am excited to apply.\n\nKind regards,\nJane Doe\n\n---",
            "Hello Hiring Team,\n\nI am excited to apply.\n\nKind regards,\nJane Doe",
        ),
    ],
)
def test_envelope_letter_shapes(letter, expected):
    text = '```json\n{"a": 1}\n```\n\n' + letter

    assert extract_result(text).cover_letter == expected


@pytest.mark.unit
def test_envelope_body_sentence_is_not_a_valediction():
    text = (
        "Dear Team,\n\nThank you for your time and consideration.\n\n"
        "Best regards,\nJane Doe"
    )

    assert EnvelopeExtractor().extract(text) == text


@pytest.mark.unit
def test_chatty_greeting_is_not_a_salutation():
    text = "Hi! Here is the result:\n\nAll done.\n\nRegards,\nThe assistant"

    assert EnvelopeExtractor().extract(text) is None
