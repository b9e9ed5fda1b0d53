"""
Local study-notes heuristics.

Builds a short summary, a list of key points and a glossary of terms from
extracted content nodes. Everything is computed from the nodes themselves;
no network service is involved.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import structlog
from bs4 import BeautifulSoup, Tag

from webscribe.extractor.models import ContentNode, Paragraph

logger = structlog.get_logger(__name__)

# Phrases that mark a sentence as worth keeping
SIGNAL_PHRASES: Tuple[str, ...] = (
    "important",
    "key",
    "note that",
    "remember",
    "definition",
    "defined as",
    "refers to",
    "means that",
    "is called",
    "known as",
    "in summary",
    "to summarize",
    "in conclusion",
    "therefore",
    "the goal",
    "the purpose",
    "the main",
    "this allows",
    "this means",
    "step 1",
    "step 2",
    "first,",
    "second,",
    "finally,",
    "however",
)

_SENTENCE = re.compile(r"[^.!?]*[.!?]")
_SENTENCE_END = re.compile(r"[.!?]")
_LEADING_PUNCTUATION = re.compile(r"^[:–—\s]+")


@dataclass(frozen=True)
class StudyNotes:
    summary: str = ""
    key_points: List[str] = field(default_factory=list)
    definitions: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.summary or self.key_points or self.definitions)


class NotesAnalyzer:
    """Derives study notes from content nodes.

    Args:
        min_paragraph_length: Paragraphs at or below this length are ignored
        summary_paragraph_length: Minimum length of a summary paragraph
        summary_max_length: Summary is cut here and ends with an ellipsis
        max_key_points: Upper bound on key points
        max_definitions: Upper bound on glossary entries
    """

    def __init__(
        self,
        min_paragraph_length: int = 60,
        summary_paragraph_length: int = 80,
        summary_max_length: int = 600,
        max_key_points: int = 8,
        max_definitions: int = 10,
    ) -> None:
        self.min_paragraph_length = min_paragraph_length
        self.summary_paragraph_length = summary_paragraph_length
        self.summary_max_length = summary_max_length
        self.max_key_points = max_key_points
        self.max_definitions = max_definitions

    def analyze(self, nodes: Sequence[ContentNode]) -> StudyNotes:
        paragraphs = [
            node.text.strip()
            for node in nodes
            if isinstance(node, Paragraph) and len(node.text.strip()) > self.min_paragraph_length
        ]
        notes = StudyNotes(
            summary=self.build_summary(paragraphs),
            key_points=self.extract_key_points(paragraphs),
            definitions=self.extract_definitions(nodes),
        )
        logger.debug(
            "Study notes built",
            summary_length=len(notes.summary),
            key_points=len(notes.key_points),
            definitions=len(notes.definitions),
        )
        return notes

    def build_summary(self, paragraphs: Sequence[str]) -> str:
        """Join the first two substantial paragraphs."""
        selected = [p for p in paragraphs if len(p) > self.summary_paragraph_length][:2]
        summary = " ".join(selected)
        if len(summary) > self.summary_max_length:
            return summary[: self.summary_max_length] + "…"
        return summary

    def extract_key_points(self, paragraphs: Sequence[str]) -> List[str]:
        """Sentences containing a signal phrase, deduplicated in order."""
        points: List[str] = []
        for paragraph in paragraphs:
            for sentence in _SENTENCE.findall(paragraph) or [paragraph]:
                lower = sentence.lower()
                if any(phrase in lower for phrase in SIGNAL_PHRASES):
                    clean = sentence.strip()
                    if 20 < len(clean) < 300 and clean not in points:
                        points.append(clean)
                if len(points) >= self.max_key_points:
                    return points
        return points

    def extract_definitions(self, nodes: Sequence[ContentNode]) -> List[Tuple[str, str]]:
        """Glossary entries from ``dfn``, ``abbr[title]`` and leading bold terms."""
        found: List[Tuple[str, str]] = []
        for node in nodes:
            if not isinstance(node, Paragraph) or not node.raw_markup:
                continue
            fragment = BeautifulSoup(f"<div>{node.raw_markup}</div>", "html.parser")
            found.extend(self._dfn_terms(fragment))
            found.extend(self._abbreviations(fragment))
            found.extend(self._bold_terms(fragment))
            if len(found) >= self.max_definitions:
                break

        definitions: List[Tuple[str, str]] = []
        seen = set()
        for term, definition in found:
            if term in seen:
                continue
            seen.add(term)
            definitions.append((term, definition))
        return definitions[: self.max_definitions]

    @staticmethod
    def _dfn_terms(fragment: BeautifulSoup) -> List[Tuple[str, str]]:
        entries = []
        for element in fragment.find_all("dfn"):
            term = element.get_text().strip()
            parent = element.parent.get_text().strip() if isinstance(element.parent, Tag) else ""
            if term and len(parent) > len(term):
                definition = _LEADING_PUNCTUATION.sub("", parent.replace(term, "", 1))
                entries.append((term, definition[:200]))
        return entries

    @staticmethod
    def _abbreviations(fragment: BeautifulSoup) -> List[Tuple[str, str]]:
        entries = []
        for element in fragment.select("abbr[title]"):
            abbreviation = element.get_text().strip()
            title = element.get("title")
            if abbreviation and isinstance(title, str) and title:
                entries.append((abbreviation, title))
        return entries

    @staticmethod
    def _bold_terms(fragment: BeautifulSoup) -> List[Tuple[str, str]]:
        entries = []
        for element in fragment.find_all(["strong", "b"]):
            # Only plain-text bold runs count as terms
            if element.find(True) is not None:
                continue
            raw = element.get_text()
            if not 2 <= len(raw) <= 40:
                continue
            term = raw.strip()
            if not (term[:1].isupper() or len(term.split(" ")) <= 4):
                continue
            after = "".join(
                sibling.get_text() if isinstance(sibling, Tag) else str(sibling) for sibling in element.next_siblings
            ).strip()
            definition = _LEADING_PUNCTUATION.sub("", _SENTENCE_END.split(after, 1)[0]).strip()
            if len(definition) > 10:
                entries.append((term, definition))
        return entries
