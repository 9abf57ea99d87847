"""Size versus price disambiguation for lines with several numbers.

Listings often mix a price with shoe or clothing sizes ("39.99 us 6",
"49.99 8.5, 9.5, 11") or laptop sizes ("28$ entra laptop de 13"). This module
decides, for every number on such a line, whether it is a price, a size or a
count. It is a best-effort heuristic over free-form text, not a guarantee:

* a number is a clear price when it exceeds ``price_threshold`` or is written
  with exactly ``price_decimals`` decimals;
* a number in ``[size_min, size_max]`` written as an integer or a half
  (``size_step``) is a size when another number on the line is a clear price,
  or when the line carries a size cue (talla, us 6, mujer, a shoe brand...);
* numbers with a ``$`` sign are SOURCE_FX_DIRECT prices and numbers after
  ``S/`` are LOCAL prices; on a line with such marks the unmarked numbers are
  never prices;
* if sizing leaves the line without any price, one size is put back as the
  price, and a two-decimal literal always wins over in-range leftovers.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Final

from pydantic import BaseModel

from ..config import ExtractionConfig
from ..models import Classification, Currency, PriceCandidate
from .patterns import (
    NUMBER_TOKEN_RE,
    QUANTITY_AFTER_RE,
    TWO_DECIMAL_RE,
    normalize_literal,
    parse_amount,
)

SIZE_CONTEXT_RE: Final = re.compile(
    r"\b(?:tallas?|sizes?|us\s+\d|mujer|hombre|women|men|niñ[oa]s?|kids|"
    r"new\s+balance|nike|adidas|jordan|converse|vans|puma|asics|skechers|crocs|"
    r"entra\s+laptop|laptop\s+de|compartimientos?)\b",
    re.IGNORECASE,
)
# "49.99 8.5, 9.5, 11"
SIZE_LIST_RE: Final = re.compile(r",\s*\d+(?:[.,]\d+)?(?:\s*,\s*\d+(?:[.,]\d+)?)*\s*$")
SIZE_WORD_BEFORE_RE: Final = re.compile(r"\b(?:tallas?|sizes?|us)\s*$", re.IGNORECASE)
SIGN_BEFORE_RE: Final = re.compile(r"\$\s*$")
LOCAL_BEFORE_RE: Final = re.compile(r"S/\.?\s*$", re.IGNORECASE)


class NumberToken(BaseModel):
    """A number found on a line together with its surroundings.

    Attributes:
        raw: Literal as written.
        amount: Parsed value.
        start: Offset of the literal in the line.
        currency: Currency implied by an adjacent ``$``/``S/`` mark, if any.
        is_count: Whether a quantity word follows the number ("4 pares").
    """

    raw: str
    amount: Decimal
    start: int
    currency: Currency | None = None
    is_count: bool = False


def tokenize(line: str) -> list[NumberToken]:
    """Find all positive numbers on a line, in order."""
    tokens: list[NumberToken] = []
    for match in NUMBER_TOKEN_RE.finditer(line):
        amount = parse_amount(match.group(0))
        if amount is None:
            continue

        before = line[: match.start()]
        currency: Currency | None = None
        if SIGN_BEFORE_RE.search(before) or line.startswith("$", match.end()):
            currency = Currency.SOURCE_FX_DIRECT
        elif LOCAL_BEFORE_RE.search(before):
            currency = Currency.LOCAL

        tokens.append(
            NumberToken(
                raw=match.group(0),
                amount=amount,
                start=match.start(),
                currency=currency,
                is_count=QUANTITY_AFTER_RE.match(line, match.end()) is not None,
            )
        )
    return tokens


def has_price_decimals(token: NumberToken, rules: ExtractionConfig) -> bool:
    """Whether the literal is written with exactly the price decimals (29.99)."""
    _, separator, fraction = normalize_literal(token.raw).partition(".")
    return bool(separator) and len(fraction) == rules.price_decimals


def is_clear_price(token: NumberToken, rules: ExtractionConfig) -> bool:
    return token.amount > rules.price_threshold or has_price_decimals(token, rules)


def in_size_range(token: NumberToken, rules: ExtractionConfig) -> bool:
    return rules.size_min <= token.amount <= rules.size_max


def is_size_shaped(token: NumberToken, rules: ExtractionConfig) -> bool:
    """Whether the number could be a size: in range, integer or half step."""
    if has_price_decimals(token, rules) or not in_size_range(token, rules):
        return False
    return token.amount % rules.size_step == 0


def has_size_context(line: str) -> bool:
    return bool(SIZE_CONTEXT_RE.search(line) or SIZE_LIST_RE.search(line))


def _pick_restored_price(line: str, sizes: list[NumberToken]) -> NumberToken:
    # Prefer a number that is not written right after "talla"/"us"/"size"
    for token in sizes:
        if not SIZE_WORD_BEFORE_RE.search(line[: token.start]):
            return token
    return sizes[0]


def _to_candidate(token: NumberToken) -> PriceCandidate:
    return PriceCandidate(amount=token.amount, currency=token.currency or Currency.SOURCE_FX)


def disambiguate(line: str, rules: ExtractionConfig) -> Classification:
    """Split the numbers of one line into unnamed price candidates and sizes.

    Args:
        line: A listing line with several numbers.
        rules: Thresholds of the heuristic.

    Returns:
        Classification of the line. Candidates are empty only when every
        number on the line is a count.
    """
    tokens = [token for token in tokenize(line) if not token.is_count]
    if not tokens:
        return Classification()

    line_is_marked = any(token.currency is not None for token in tokens)
    size_context = has_size_context(line)

    prices: list[NumberToken] = []
    sizes: list[NumberToken] = []
    for index, token in enumerate(tokens):
        if token.currency is not None:
            prices.append(token)
            continue

        other_clear_price = any(
            is_clear_price(other, rules) for i, other in enumerate(tokens) if i != index
        )
        if is_size_shaped(token, rules) and (other_clear_price or size_context):
            sizes.append(token)
        elif not line_is_marked:
            prices.append(token)

    if not prices and sizes:
        restored = _pick_restored_price(line, sizes)
        sizes.remove(restored)
        prices.append(restored)

    if prices and all(in_size_range(token, rules) for token in prices):
        literal = TWO_DECIMAL_RE.search(line)
        if literal is not None:
            literal_token = next(
                (token for token in tokens if token.start == literal.start()), None
            )
            if literal_token is not None and prices != [literal_token]:
                sizes.extend(
                    token
                    for token in prices
                    if token is not literal_token and is_size_shaped(token, rules)
                )
                prices = [literal_token]

    return Classification(
        candidates=[_to_candidate(token) for token in prices],
        sizes=[normalize_literal(token.raw) for token in sorted(sizes, key=lambda t: t.start)],
    )
