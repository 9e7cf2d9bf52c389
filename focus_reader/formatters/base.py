"""Abstract base formatter and output container.

WHY: Every export consumes the same DocumentStructure but produces
different file content. This base class enforces a consistent interface
so the CLI and the API can work with any formatter generically.

HOW: BaseFormatter is an ABC with two requirements — a ``name`` property
and a ``format()`` method. FormatterOutput is a plain dataclass that
bundles a file suffix with its content and MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` returns a list so multi-file exports stay possible
- ``suffix`` starts with a hyphen, e.g. ``"-structure.json"``
- The caller is responsible for prepending the source filename stem
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from focus_reader.core.ir import DocumentStructure


@dataclass
class FormatterOutput:
    """One output file produced by a formatter.

    Attributes:
        suffix: File suffix appended to the source stem,
                e.g. ``"-outline.txt"`` → ``"essay-outline.txt"``.
        content: The file content.
        media_type: MIME type for the content, e.g. ``"application/json"``.
    """

    suffix: str
    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all output formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'Structure JSON'."""

    @property
    @abstractmethod
    def suffix(self) -> str:
        """Suffix of the (first) output file."""

    @abstractmethod
    def format(self, document: DocumentStructure) -> List[FormatterOutput]:
        """Convert a DocumentStructure into one or more output files."""
