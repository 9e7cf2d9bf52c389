"""Output formatter registry — pluggable export hub.

WHY: The CLI and the API need a single lookup to find the right
formatter by name. A central dict makes it trivial to add new formats:
create the formatter class, import it here, add one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["outline"]()``.

RULES:
- Keys are snake_case identifiers (used in CLI flags and API paths)
- Values are BaseFormatter subclasses (not instances)
- Every formatter must be constructible with no arguments
"""

from __future__ import annotations

from typing import Dict, Type

from focus_reader.formatters.base import BaseFormatter, FormatterOutput
from focus_reader.formatters.outline import OutlineFormatter
from focus_reader.formatters.structure_json import StructureJSONFormatter
from focus_reader.formatters.timeline import TimelineFormatter

FORMATTERS: Dict[str, Type[BaseFormatter]] = {
    "structure_json": StructureJSONFormatter,
    "outline": OutlineFormatter,
    "timeline": TimelineFormatter,
}

__all__ = ["BaseFormatter", "FORMATTERS", "FormatterOutput"]
