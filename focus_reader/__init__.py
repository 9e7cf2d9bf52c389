"""Focus Reader — one-word-at-a-time reading with adaptive pacing.

WHY: Reading long prose on a screen asks the eye to decide, hundreds of
times a minute, where to land next. Presenting words one at a time at a
controlled pace (RSVP) removes those decisions. The pace is only
comfortable when it adapts: long words, punctuation, bullets and sentence
ends each need a little more time.

HOW: Two-stage pipeline — structure (clean raw text, detect sections,
tokenize words into timed units) and play (a timing state machine that
walks the word sequence and emits display events). Formatters, the CLI,
and the HTTP API are thin layers over those two stages.

RULES:
- The DocumentStructure is the stable contract between structuring and playback
- Structuring is pure; playback owns its session and nothing else
- Nothing in this package persists state or renders pixels
"""

__version__ = "0.1.0"
