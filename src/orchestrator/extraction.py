"""
src/orchestrator/extraction.py

Recover structured data and prose sections from the model's final answer.

Each strategy is a small Extractor tried in priority order:
- FencedBlockExtractor: first ``` block whose body parses as a JSON object/array
- LabeledSectionExtractor: an explicit header ("## Cover Letter") then a blank line
- EnvelopeExtractor: salutation ("Dear ...", "To Whom It May Concern:") through a valediction and signature

Nothing here raises. A strategy that fails or finds nothing yields None and the
field is left out of the ExtractedResult.
"""


import json
import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from orchestrator.models import ExtractedResult


FENCED_BLOCK = re.compile(
    r"^[ \t]*```[ \t]*([\w+-]*)[ \t]*\r?\n(.*?)^[ \t]*```",
    re.MULTILINE | re.DOTALL,
)

VALEDICTIONS = (
    "sincerely", "yours sincerely", "sincerely yours", "yours truly", "yours faithfully",
    "best regards", "kind regards", "warm regards", "warmest regards", "regards",
    "respectfully", "with appreciation", "best wishes", "best", "thank you",
)

TRAILING_RULE = re.compile(r"(?:\n[ \t]*(?:-{3,}|\*{3,}|_{3,})[ \t]*)+\s*$")

# "Dear ...", "To Whom It May Concern:", or a "Hello/Hi/Greetings ..." line ending in a comma or colon
SALUTATION = (
    r"(?:Dear\b[^\n]*"
    r"|To[ \t]+Whom[ \t]+It[ \t]+May[ \t]+Concern\b[^\n]*"
    r"|(?:Hello|Hi|Greetings)\b[^\n.!?]{0,60}[,:][ \t]*\r?)"
)

# Capitalised name of up to four words
INLINE_SIGNATURE = r"(?-i:[A-Z])[\w.'-]*(?:[ \t]+[\w.'-]+){0,3}"


def _tidy(body: str) -> Optional[str]:

    body = TRAILING_RULE.sub("", body.strip()).strip()

    return body or None


class Extractor(ABC):

    name: str = "extractor"

    @abstractmethod
    def extract(self, text: str) -> Optional[Any]:
        """Return the recovered value, or None when this strategy finds nothing."""


class FencedBlockExtractor(Extractor):

    name = "fenced_block"

    def extract(self, text: str) -> Optional[Any]:

        for m in FENCED_BLOCK.finditer(text):
            lang, body = m.group(1).lower(), m.group(2).strip()
            if not body:
                continue
            try:
                parsed = json.loads(body)
            except json.JSONDecodeError as e:
                logger.debug(f"[extract] fenced block ({lang or 'plain'}) is not JSON: {e}")
                continue
            if isinstance(parsed, (dict, list)):
                return parsed

        return None


class LabeledSectionExtractor(Extractor):
    """
    Header line naming the section, a blank line, then the body up to the next
    markdown header, fenced block or end of text.

    Accepted headers: "## Cover Letter", "**Cover Letter**", "Cover Letter:", "COVER LETTER".
    """

    name = "labeled_section"

    def __init__(self, label: str):

        words = r"[ \t]+".join(re.escape(w) for w in label.split())
        self.label = label
        self.pattern = re.compile(
            r"^[ \t]*(?:#{1,6}[ \t]*)?(?:\*\*|__)?[ \t]*" + words
            + r"[ \t]*(?:\*\*|__)?[ \t]*:?[ \t]*(?:\*\*|__)?[ \t]*\r?\n[ \t]*\r?\n"
            + r"(?P<body>.*?)(?=^[ \t]*#{1,6}[ \t]|^[ \t]*```|\Z)",
            re.IGNORECASE | re.MULTILINE | re.DOTALL,
        )

    def extract(self, text: str) -> Optional[str]:

        m = self.pattern.search(text)

        return _tidy(m.group("body")) if m else None


class EnvelopeExtractor(Extractor):
    """
    Letter body from the salutation line through the closing valediction and
    signature. The signature may follow the valediction on the same line
    ("Sincerely, Jane Doe") or on the next one.
    """

    name = "envelope"

    def __init__(self, valedictions: Sequence[str] = VALEDICTIONS):

        closings = "|".join(
            r"[ \t]+".join(re.escape(w) for w in v.split())
            for v in sorted(valedictions, key=len, reverse=True)
        )
        self.pattern = re.compile(
            r"^[ \t]*" + SALUTATION + r"\n"
            r".*?"
            r"^[ \t]*(?:" + closings + r")\b"
            r"(?:[ \t]*[,.!][ \t]*" + INLINE_SIGNATURE + r"[ \t]*\r?$"
            r"|[ \t]*[,.!]?[ \t]*\r?$(?:\n[ \t]*(?!```|#)\S[^\n]*)?)",
            re.IGNORECASE | re.MULTILINE | re.DOTALL,
        )

    def extract(self, text: str) -> Optional[str]:

        m = self.pattern.search(text)

        return _tidy(m.group(0)) if m else None


class ResultExtractor:
    """Runs payload and section strategies in priority order; first hit wins per field."""

    def __init__(self, payload_extractors: List[Extractor], section_extractors: Dict[str, List[Extractor]]):

        self.payload_extractors = payload_extractors
        self.section_extractors = section_extractors

    @staticmethod
    def _first(extractors: List[Extractor], text: str, field: str) -> Optional[Any]:

        for extractor in extractors:
            try:
                value = extractor.extract(text)
            except Exception:
                logger.opt(exception=True).warning(f"[extract] {extractor.name} failed on {field}")
                continue
            if value is not None:
                logger.debug(f"[extract] {field} recovered by {extractor.name}")
                return value

        logger.debug(f"[extract] {field} not found")

        return None

    def extract(self, text: Optional[str]) -> ExtractedResult:

        text = (text or "").replace("\r\n", "\n")
        payload = self._first(self.payload_extractors, text, "structured_payload")
        sections = {}

        for section, extractors in self.section_extractors.items():
            value = self._first(extractors, text, section)
            if value is not None:
                sections[section] = value

        return ExtractedResult(structured_payload=payload, free_text_sections=sections)


DEFAULT_EXTRACTOR = ResultExtractor(
    payload_extractors=[FencedBlockExtractor()],
    section_extractors={
        "cover_letter": [LabeledSectionExtractor("cover letter"), EnvelopeExtractor()],
    },
)


def extract_result(text: Optional[str]) -> ExtractedResult:

    return DEFAULT_EXTRACTOR.extract(text)
