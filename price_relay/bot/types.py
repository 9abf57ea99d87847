"""Typed structures shared across bot components."""

from __future__ import annotations

from typing import TypedDict

from ..models import ComputedPrice, PriceCandidate


class PricedLine(TypedDict):
    """One candidate with its computed sale price and rendered text."""

    candidate: PriceCandidate
    computed: ComputedPrice
    text: str


class RenderedListing(TypedDict):
    """Relay output for one source message."""

    has_price: bool
    lines: list[str]
    text: str
    priced: list[PricedLine]
    sizes: list[str]
