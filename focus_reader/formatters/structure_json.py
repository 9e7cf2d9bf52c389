"""Schema-validated JSON export of a DocumentStructure.

WHY: External collaborators (a web player, a persistence layer, another
language's UI) need the structured document in a stable wire form.
Validating against a bundled JSON schema before returning catches any
drift between the IR and the documented format.

HOW: DocumentStructure.to_dict() → jsonschema.validate() against
schemas/document_structure.schema.json → json.dumps with indent.

RULES:
- Output suffix: "-structure.json"; media type "application/json"
- Non-ASCII text is kept as-is (ensure_ascii=False)
- jsonschema.ValidationError propagates: an invalid export is a bug
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional

import jsonschema

from focus_reader.core.ir import DocumentStructure
from focus_reader.formatters.base import BaseFormatter, FormatterOutput

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "document_structure.schema.json"

_CACHED_SCHEMA: Optional[dict] = None


def get_schema() -> dict:
    """Load and cache the document structure JSON schema."""
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


class StructureJSONFormatter(BaseFormatter):
    """Formatter producing the full structure as validated JSON."""

    @property
    def name(self) -> str:
        return "Structure JSON"

    @property
    def suffix(self) -> str:
        return "-structure.json"

    def format(self, document: DocumentStructure) -> List[FormatterOutput]:
        """Serialize and validate the document.

        Raises:
            jsonschema.ValidationError: If the serialized document does
                not conform to the bundled schema.
        """
        payload = document.to_dict()
        jsonschema.validate(instance=payload, schema=get_schema())
        return [FormatterOutput(
            suffix=self.suffix,
            content=json.dumps(payload, indent=2, ensure_ascii=False),
            media_type="application/json",
        )]
