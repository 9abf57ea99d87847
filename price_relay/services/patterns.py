"""Price patterns for single listing lines.

Holds the regular expressions shared by the extraction engine, the helpers
that turn matched text into amounts and product names, and the ordered table
of single-line matchers. Each matcher is a pure function that receives one
stripped line and returns a ``PriceCandidate`` or None. ``extract_single_line``
evaluates the table top to bottom and stops at the first match, so the order of
``SINGLE_LINE_MATCHERS`` decides which reading of an ambiguous line wins.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from typing import Final

from ..models import Currency, PriceCandidate

# A price literal: 19, 3.5, 27.99, 8,5, 1,299.99
NUMBER: Final = r"(?:\d{1,3}(?:,\d{3})+(?:\.\d+)?|\d+(?:[.,]\d+)?)"
LETTERS: Final = "A-Za-zÀ-ÖØ-öø-ÿ"
WORDS: Final = rf"[{LETTERS}]+(?:\s+[{LETTERS}]+)*?"
CONNECTOR: Final = r"(?:y|and)"
QUANTITY_WORDS: Final = r"(?:pares|par|pairs?|unidades|unidad|units?|pcs|pc|piezas?|pieces?|sets?|packs?)"

MAX_NAME_LENGTH: Final = 80

NUMBER_TOKEN_RE: Final = re.compile(rf"\b{NUMBER}\b")
TWO_DECIMAL_RE: Final = re.compile(r"\b\d+[.,]\d{2}\b")
GROUPED_NUMBER_RE: Final = re.compile(r"\d{1,3}(?:,\d{3})+(?:\.\d+)?")
LOCAL_MARKER_IN_TEXT_RE: Final = re.compile(r"S/\.?\s*\d", re.IGNORECASE)
SLASH_SEPARATOR_RE: Final = re.compile(r"\s+/\s+")

QUANTITY_LABEL_RE: Final = re.compile(rf"(?:\d+\s+)?{QUANTITY_WORDS}\.?", re.IGNORECASE)
QUANTITY_AFTER_RE: Final = re.compile(
    rf"\s*(?:{QUANTITY_WORDS}|compartimientos?)\b", re.IGNORECASE
)
QUANTITY_BEFORE_RE: Final = re.compile(rf"\b{QUANTITY_WORDS}\s*(?:de\s+)?$", re.IGNORECASE)
NON_NAME_RE: Final = re.compile(
    r"(?:usd|us\$?|d[oó]lares|dollars?|precio|price)\s*:?", re.IGNORECASE
)
TRAILING_MARK_RE: Final = re.compile(r"\s*(?:S/\.?|\$)$", re.IGNORECASE)

DUAL_NAMED_RE: Final = re.compile(
    rf"^({WORDS})\s+({NUMBER})\s+{CONNECTOR}\s+({WORDS})\s+({NUMBER})(?:\s+(.+))?$",
    re.IGNORECASE,
)
DUAL_BARE_RE: Final = re.compile(
    rf"^({NUMBER})\s+{CONNECTOR}\s+({NUMBER})(?:\s+(.+))?$", re.IGNORECASE
)

LEADING_SIGN_RE: Final = re.compile(rf"^\$\s*({NUMBER})(?:\s+(.+))?$")
EMBEDDED_SIGN_RE: Final = re.compile(rf"^(.+?)\s+\$\s*({NUMBER})(?:\s+(.+))?$")
TRAILING_SIGN_RE: Final = re.compile(rf"^(?:(.+?)\s+)?({NUMBER})\$(?:\s+(.+))?$")
LOCAL_MARKER_RE: Final = re.compile(
    rf"^(?:(.+?)\s+)?S/\.?\s*({NUMBER})(?:\s+(.+))?$", re.IGNORECASE
)
LEADING_AMOUNT_RE: Final = re.compile(rf"^({NUMBER})\s+(.+)$")
TRAILING_AMOUNT_RE: Final = re.compile(rf"^(.+?)\s+({NUMBER})\s*(?:\(.*\))?$")
BARE_AMOUNT_RE: Final = re.compile(rf"^({NUMBER})$")

# Keyword fallbacks with the currency each one implies
KEYWORD_PATTERNS: Final[tuple[tuple[re.Pattern[str], Currency], ...]] = (
    (re.compile(rf"\$\s*({NUMBER})"), Currency.SOURCE_FX_DIRECT),
    (re.compile(rf"({NUMBER})\s*(?:usd|d[oó]lares|dollars?)\b", re.IGNORECASE), Currency.SOURCE_FX),
    (re.compile(rf"\busd\s*({NUMBER})", re.IGNORECASE), Currency.SOURCE_FX),
    (re.compile(rf"\b(?:precio|price)\s*:?\s*({NUMBER})", re.IGNORECASE), Currency.SOURCE_FX),
    # A whole literal ending the line or a sentence: "cuesta 19.99!", "15. Color azul"
    (
        re.compile(r"(?<![\d.,])(\d+(?:[.,]\d{1,2})?)(?![\d.,]*\d)\s*(?:[.!?]+(?!\d)|$)"),
        Currency.SOURCE_FX,
    ),
)

Matcher = Callable[[str], PriceCandidate | None]


def parse_amount(raw: str | None) -> Decimal | None:
    """Convert a price literal to a positive Decimal.

    Args:
        raw: Literal such as ``"27.99"`` or ``"8,5"``.

    Returns:
        The amount, or None when the literal is not a positive number.
    """
    if not raw:
        return None
    try:
        amount = Decimal(normalize_literal(raw))
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount <= 0:
        return None
    return amount


def normalize_literal(raw: str) -> str:
    """Normalise a number literal: "1,299.99" to "1299.99", "8,5" to "8.5"."""
    text = raw.strip()
    if GROUPED_NUMBER_RE.fullmatch(text):
        return text.replace(",", "")
    return text.replace(",", ".")


def is_quantity_label(text: str | None) -> bool:
    """Check whether a label only states a quantity ("pares", "4 pares", "pack")."""
    if not text:
        return False
    return QUANTITY_LABEL_RE.fullmatch(collapse_whitespace(text)) is not None


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


def normalize_product_name(raw: str | None) -> str | None:
    """Clean a product label captured next to an amount.

    The label is trimmed, whitespace-collapsed, stripped of a trailing ``S/`` or
    ``$`` mark and capped at 80 characters.
    Labels that are only a quantity or only a currency/price word are treated
    as absent.

    Args:
        raw: Captured label text.

    Returns:
        Cleaned name or None.
    """
    if raw is None:
        return None
    name = TRAILING_MARK_RE.sub("", collapse_whitespace(raw))
    if not name or is_quantity_label(name) or NON_NAME_RE.fullmatch(name):
        return None
    return name[:MAX_NAME_LENGTH].rstrip()


def first_label(*labels: str | None) -> str | None:
    """Return the first label that survives name normalisation."""
    for label in labels:
        if normalize_product_name(label):
            return label
    return None


def is_counted(line: str, start: int, end: int) -> bool:
    """Check whether the number at ``line[start:end]`` is a count, not a price."""
    return bool(QUANTITY_AFTER_RE.match(line, end) or QUANTITY_BEFORE_RE.search(line[:start]))


def build_candidate(
    raw_amount: str | None,
    currency: Currency = Currency.SOURCE_FX,
    raw_name: str | None = None,
) -> PriceCandidate | None:
    """Create a candidate from matched text, None if the amount is unusable."""
    amount = parse_amount(raw_amount)
    if amount is None:
        return None
    return PriceCandidate(
        amount=amount, currency=currency, product_name=normalize_product_name(raw_name)
    )


def match_leading_sign(line: str) -> PriceCandidate | None:
    """``$50``, ``$28 mochila``."""
    match = LEADING_SIGN_RE.match(line)
    if not match:
        return None
    return build_candidate(match.group(1), Currency.SOURCE_FX_DIRECT, match.group(2))


def match_embedded_sign(line: str) -> PriceCandidate | None:
    """``mochila $28``, ``mochila $28 oferta``."""
    match = EMBEDDED_SIGN_RE.match(line)
    if not match:
        return None
    return build_candidate(
        match.group(2), Currency.SOURCE_FX_DIRECT, first_label(match.group(1), match.group(3))
    )


def match_trailing_sign(line: str) -> PriceCandidate | None:
    """``28$``, ``4 pares 8$``, ``28$ entra laptop``."""
    match = TRAILING_SIGN_RE.match(line)
    if not match:
        return None
    return build_candidate(
        match.group(2), Currency.SOURCE_FX_DIRECT, first_label(match.group(1), match.group(3))
    )


def match_local_marker(line: str) -> PriceCandidate | None:
    """``S/ 50``, ``S/. 50 mochila``, ``mochila S/ 20``."""
    match = LOCAL_MARKER_RE.match(line)
    if not match:
        return None
    return build_candidate(
        match.group(2), Currency.LOCAL, first_label(match.group(1), match.group(3))
    )


def match_leading_amount(line: str) -> PriceCandidate | None:
    """``76 mochila``, ``19 pijamas``; ``2 pares`` is a count, not a price."""
    match = LEADING_AMOUNT_RE.match(line)
    if not match or is_quantity_label(match.group(2)):
        return None
    return build_candidate(match.group(1), Currency.SOURCE_FX, match.group(2))


def match_trailing_amount(line: str) -> PriceCandidate | None:
    """``Mochila 76``, ``Medias 3.5``, ``Lonchera 27.99 (azul)``."""
    match = TRAILING_AMOUNT_RE.match(line)
    if not match or is_quantity_label(match.group(1)):
        return None
    return build_candidate(match.group(2), Currency.SOURCE_FX, match.group(1))


def match_bare_amount(line: str) -> PriceCandidate | None:
    """A line holding only a number: ``19``."""
    match = BARE_AMOUNT_RE.match(line)
    if not match:
        return None
    return build_candidate(match.group(1))


def match_keyword(line: str) -> PriceCandidate | None:
    """``($28)``, ``50 USD``, ``USD 50``, ``precio: 50`` or a bare decimal ending the line."""
    for pattern, currency in KEYWORD_PATTERNS:
        for match in pattern.finditer(line):
            if is_counted(line, match.start(1), match.end(1)):
                continue
            candidate = build_candidate(match.group(1), currency)
            if candidate is not None:
                return candidate
    return None


SINGLE_LINE_MATCHERS: Final[tuple[tuple[str, Matcher], ...]] = (
    ("leading_sign", match_leading_sign),
    ("embedded_sign", match_embedded_sign),
    ("trailing_sign", match_trailing_sign),
    ("local_marker", match_local_marker),
    ("leading_amount", match_leading_amount),
    ("trailing_amount", match_trailing_amount),
    ("bare_amount", match_bare_amount),
    ("keyword", match_keyword),
)


def extract_single_line(line: str) -> PriceCandidate | None:
    """Run the single-line matchers in order and return the first match.

    Args:
        line: One line (or line segment) of a listing.

    Returns:
        The first candidate produced, or None when no matcher applies.
    """
    text = line.strip()
    if not text:
        return None

    for _name, matcher in SINGLE_LINE_MATCHERS:
        candidate = matcher(text)
        if candidate is not None:
            return candidate
    return None
