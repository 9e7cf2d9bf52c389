"""Word tokenization with ORP, base delay and punctuation pause.

WHY: The engine shows one token at a time and needs, per token, the
character to align with the reader's fixation point (ORP), a length-based
dwell baseline, and the extra pause that trailing punctuation deserves.
Computing these once at structuring time keeps the playback tick cheap.

HOW: The cleaned content is split on runs of whitespace. For each token
the ORP comes from a tier lookup on the punctuation-stripped length, the
base delay from a tier lookup on the raw length, and the punctuation
pause from the token's last character. All tiers come from
TokenizerConfig so they can be tuned without touching this module.

RULES:
- Zero-length tokens are discarded
- ORP tiers (stripped length): 1-2 → 0, 3-4 → 1, 5 → 2, 6-8 → 2,
  9-12 → 3, 13-16 → 4, above 16 → floor(length * 0.3)
- ORP is always < max(1, stripped length); 0 for tokens with no word characters
- Base delay (raw length): <=3 → 200, <=6 → 250, <=9 → 300, else 350
- Punctuation pause: ".", "!", "?" → 300; ",", ";", ":" → 150; else 0
- is_long_word: raw length > long_word_threshold (default 8)
"""

from __future__ import annotations

import math
import re
from typing import List, Optional

from focus_reader.config import TokenizerConfig
from focus_reader.core.ir import WordUnit

_NON_WORD_RE = re.compile(r"[^\w]")

_SENTENCE_ENDERS = (".", "!", "?")
_CLAUSE_ENDERS = (",", ";", ":")

DEFAULT_TOKENIZER_CONFIG = TokenizerConfig()


def strip_punctuation(token: str) -> str:
    """Remove every non-word character from a token."""
    return _NON_WORD_RE.sub("", token)


def calculate_orp(token: str, config: TokenizerConfig = DEFAULT_TOKENIZER_CONFIG) -> int:
    """Optimal Recognition Point index for a token.

    The index refers to the punctuation-stripped token.
    """
    length = len(strip_punctuation(token))
    if length == 0:
        return 0

    orp: Optional[int] = None
    for max_length, index in config.orp_tiers:
        if length <= max_length:
            orp = index
            break
    if orp is None:
        orp = math.floor(length * config.long_word_orp_ratio)

    return max(0, min(orp, length - 1))


def calculate_base_delay(token: str, config: TokenizerConfig = DEFAULT_TOKENIZER_CONFIG) -> int:
    """Length-based dwell baseline in ms, before any speed scaling."""
    length = len(token)
    for max_length, delay_ms in config.delay_tiers:
        if length <= max_length:
            return delay_ms
    return config.delay_fallback_ms


def calculate_punctuation_pause(token: str, config: TokenizerConfig = DEFAULT_TOKENIZER_CONFIG) -> int:
    if token.endswith(_SENTENCE_ENDERS):
        return config.sentence_pause_ms
    if token.endswith(_CLAUSE_ENDERS):
        return config.clause_pause_ms
    return 0


def make_word_unit(token: str, config: TokenizerConfig = DEFAULT_TOKENIZER_CONFIG) -> WordUnit:
    return WordUnit(
        text=token,
        orp=calculate_orp(token, config),
        base_delay_ms=calculate_base_delay(token, config),
        punctuation_pause_ms=calculate_punctuation_pause(token, config),
        is_long_word=len(token) > config.long_word_threshold,
    )


def tokenize(content: str, config: Optional[TokenizerConfig] = None) -> List[WordUnit]:
    """Split cleaned content into timed word units.

    Args:
        content: Cleaned document text.
        config: Tokenizer tuning; the module defaults when omitted.

    Returns:
        One WordUnit per whitespace-separated token, in document order.
    """
    cfg = config or DEFAULT_TOKENIZER_CONFIG
    return [make_word_unit(token, cfg) for token in content.split() if token]
