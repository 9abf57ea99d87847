"""Price and size extraction from listing messages.

Turns an arbitrary, human-written message body into classified price
mentions and size tokens. Every line is processed on its own by an ordered
table of segmenters; the first segmenter that yields a price wins:

1. ``dual_named``     - "Tomatodo 5.5 y bowl 7"
2. ``dual_bare``      - "16 y 18", "5.5 y 7 (taper)"
3. ``slash_segments`` - "78 color entero / metálico 84"
4. ``multi_number``   - lines with several numbers, sizes split out
5. ``single_line``    - the single-line matcher table

When no line yields a price the whole text is retried as one line. Finally,
unless the message contains an explicit ``S/`` amount, every price that is not
marked with ``$`` is treated as a plain foreign (USD) price.

The extractor holds no state besides its thresholds; a message is always
classified the same way.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Final

from ..config import ExtractionConfig
from ..models import Classification, Currency, PriceCandidate
from .patterns import (
    DUAL_BARE_RE,
    DUAL_NAMED_RE,
    LOCAL_MARKER_IN_TEXT_RE,
    NUMBER_TOKEN_RE,
    SLASH_SEPARATOR_RE,
    build_candidate,
    extract_single_line,
    is_quantity_label,
)
from .sizes import disambiguate

logger = logging.getLogger(__name__)

Segmenter = Callable[[str, ExtractionConfig], Classification | None]


def segment_dual_named(line: str, rules: ExtractionConfig) -> Classification | None:
    """Two named items joined by "y"/"and", each with its own price.

    An item labelled only with a quantity word ("Set 12") is a count, not a price.
    """
    match = DUAL_NAMED_RE.match(line)
    if not match:
        return None
    candidates = [
        build_candidate(match.group(amount), Currency.SOURCE_FX, match.group(name))
        for name, amount in ((1, 2), (3, 4))
        if not is_quantity_label(match.group(name))
    ]
    return Classification(candidates=[c for c in candidates if c is not None])


def segment_dual_bare(line: str, rules: ExtractionConfig) -> Classification | None:
    """Two bare prices joined by "y"/"and" sharing the trailing label."""
    match = DUAL_BARE_RE.match(line)
    if not match:
        return None
    label = match.group(3)
    candidates = [
        build_candidate(match.group(1), Currency.SOURCE_FX, label),
        build_candidate(match.group(2), Currency.SOURCE_FX, label),
    ]
    return Classification(candidates=[c for c in candidates if c is not None])


def segment_slash(line: str, rules: ExtractionConfig) -> Classification | None:
    """Variants separated by " / ", each read as a single line."""
    if not SLASH_SEPARATOR_RE.search(line):
        return None
    candidates: list[PriceCandidate] = []
    for part in SLASH_SEPARATOR_RE.split(line):
        candidate = extract_single_line(part)
        if candidate is not None:
            candidates.append(candidate)
    return Classification(candidates=candidates)


def segment_multi_number(line: str, rules: ExtractionConfig) -> Classification | None:
    """Lines with two or more numbers go through size/price disambiguation."""
    if len(NUMBER_TOKEN_RE.findall(line)) < 2:
        return None
    return disambiguate(line, rules)


def segment_single_line(line: str, rules: ExtractionConfig) -> Classification | None:
    candidate = extract_single_line(line)
    if candidate is None:
        return None
    return Classification(candidates=[candidate])


LINE_SEGMENTERS: Final[tuple[tuple[str, Segmenter], ...]] = (
    ("dual_named", segment_dual_named),
    ("dual_bare", segment_dual_bare),
    ("slash_segments", segment_slash),
    ("multi_number", segment_multi_number),
    ("single_line", segment_single_line),
)


class PriceExtractor:
    """Classifies listing text into price candidates and size tokens."""

    def __init__(self, rules: ExtractionConfig | None = None) -> None:
        """Initialize extractor.

        Args:
            rules: Size/price thresholds, defaults to ExtractionConfig().
        """
        self.rules = rules if rules is not None else ExtractionConfig()

    def classify(self, text: str | None) -> Classification:
        """Extract every price mention and size from a message body.

        Never raises: text without prices (for example an image-only post with
        an empty caption) yields an empty classification.

        Args:
            text: Message body or photo caption.

        Returns:
            Candidates in message order and de-duplicated sizes.
        """
        if not text or not text.strip():
            return Classification()

        candidates: list[PriceCandidate] = []
        sizes: list[str] = []

        for line in split_lines(text):
            result = self.classify_line(line)
            candidates.extend(result.candidates)
            sizes.extend(result.sizes)

        if not candidates:
            candidate = extract_single_line(text.strip())
            if candidate is not None:
                logger.debug("Whole-text fallback produced %s", candidate.amount)
                candidates.append(candidate)

        if not LOCAL_MARKER_IN_TEXT_RE.search(text):
            candidates = [_force_source_currency(candidate) for candidate in candidates]

        return Classification(candidates=candidates, sizes=list(dict.fromkeys(sizes)))

    def classify_line(self, line: str) -> Classification:
        """Run the line segmenters in order and return the first priced result.

        Args:
            line: A single stripped, non-empty line.

        Returns:
            The winning segmenter's classification, empty if none found a price.
        """
        for name, segmenter in LINE_SEGMENTERS:
            result = segmenter(line, self.rules)
            if result is not None and result.candidates:
                logger.debug(
                    "Line %r: %d price(s), %d size(s) via %s",
                    line,
                    len(result.candidates),
                    len(result.sizes),
                    name,
                )
                return result
        return Classification()


def split_lines(text: str) -> list[str]:
    """Split a message into its non-empty, stripped lines."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def _force_source_currency(candidate: PriceCandidate) -> PriceCandidate:
    # The source group posts USD prices unless an "S/" amount says otherwise
    if candidate.currency is Currency.LOCAL:
        return candidate.model_copy(update={"currency": Currency.SOURCE_FX})
    return candidate


def classify(text: str | None, rules: ExtractionConfig | None = None) -> Classification:
    """Classify a message body with a fresh extractor.

    Args:
        text: Message body or photo caption.
        rules: Optional thresholds, defaults to ExtractionConfig().

    Returns:
        Classification with candidates and sizes.
    """
    return PriceExtractor(rules).classify(text)
