"""Plain text outline of detected sections.

WHY: Section detection is heuristic. A readable outline lets a person
check what the detector found (and where bullet pauses and section
boundary events will fall) before starting a session.

HOW: One block per section: a header line with the section number, kind,
title and inclusive word range, then the section's words joined by
single spaces. A blank line separates blocks.

RULES:
- Header format: "[N] KIND: title (words S-E)", N is 1-based
- Double newline between blocks, single trailing newline
- Output suffix: "-outline.txt"; media type "text/plain"
"""

from __future__ import annotations

from typing import List

from focus_reader.core.ir import DocumentStructure
from focus_reader.formatters.base import BaseFormatter, FormatterOutput


class OutlineFormatter(BaseFormatter):

    @property
    def name(self) -> str:
        return "Section Outline"

    @property
    def suffix(self) -> str:
        return "-outline.txt"

    def format(self, document: DocumentStructure) -> List[FormatterOutput]:
        blocks: List[str] = ["{} ({} words)".format(document.title, document.total_words)]
        for i, section in enumerate(document.sections):
            header = "[{n}] {kind}: {title} (words {start}-{end})".format(
                n=i + 1,
                kind=section.kind.value.upper(),
                title=section.title,
                start=section.start_word_index,
                end=section.end_word_index,
            )
            blocks.append("{}\n{}".format(header, document.section_text(i)))

        return [FormatterOutput(
            suffix=self.suffix,
            content="\n\n".join(blocks) + "\n",
            media_type="text/plain",
        )]
