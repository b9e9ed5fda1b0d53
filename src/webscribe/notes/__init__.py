"""Study notes derived from extracted content."""

from .analyzer import SIGNAL_PHRASES, NotesAnalyzer, StudyNotes

__all__ = ["SIGNAL_PHRASES", "NotesAnalyzer", "StudyNotes"]
