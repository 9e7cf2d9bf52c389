"""Core structuring pipeline and intermediate representation modules.

WHY: The core package is the stable heart of the reader: the IR
dataclasses and the pipeline that turns raw text into them. Playback,
formatters, the CLI and the API all consume what this package produces.

HOW: ir.py defines the data structures, cleaner.py strips boilerplate,
sections.py locates structural sections, tokenizer.py builds timed word
units, and assembler.py merges everything into a DocumentStructure.

RULES:
- IR dataclasses are the contract for every consumer
- Every stage is a pure function of its input and config
- Section detection is a best-effort heuristic, not a parser
"""
