"""Response formatting for relayed listings.

Turns the body of a source-group message into the text posted in the target
group: one price line per candidate found by the extraction engine, priced
with the operation its currency tag calls for, and an optional sizes line.
"""

import logging

from ..config import ExtractionConfig, PricingConfig, config
from ..services.extraction import PriceExtractor
from ..services.pricing import quote
from .messages import (
    NAMED_PRICE_LINE,
    PRICE_LINE,
    SIZES_LINE,
    SIZES_SEPARATOR,
    START_MESSAGE,
)
from .types import PricedLine, RenderedListing

logger = logging.getLogger(__name__)


class ResponseFormatter:
    """Formats relay output for listings and bot commands."""

    def __init__(
        self,
        pricing: PricingConfig | None = None,
        extraction: ExtractionConfig | None = None,
    ) -> None:
        """Initialize response formatter.

        Args:
            pricing: Markup parameters, defaults to the global configuration.
            extraction: Extraction thresholds, defaults to the global configuration.
        """
        self._pricing = pricing
        self._extraction = extraction

    @property
    def pricing(self) -> PricingConfig:
        return self._pricing or config.pricing

    def format_listing(self, text: str | None) -> RenderedListing:
        """Render the price lines for a listing message.

        Args:
            text: Message body or photo caption from the source group.

        Returns:
            RenderedListing; ``text`` is empty when no price was found.
        """
        extractor = PriceExtractor(self._extraction or config.extraction)
        classification = extractor.classify(text)

        priced: list[PricedLine] = []
        for candidate in classification.candidates:
            computed = quote(candidate, self.pricing)
            line = self.format_price_line(candidate.product_name, computed.final_local_amount)
            if candidate.product_name:
                logger.info(f"{candidate.product_name}: {computed.breakdown_text}")
            else:
                logger.info(computed.breakdown_text)
            priced.append(PricedLine(candidate=candidate, computed=computed, text=line))

        lines = [item["text"] for item in priced]
        if priced and classification.sizes:
            lines.append(self.format_sizes_line(classification.sizes))

        return RenderedListing(
            has_price=bool(priced),
            lines=lines,
            text="\n".join(lines),
            priced=priced,
            sizes=classification.sizes,
        )

    def format_price_line(self, name: str | None, local_amount: int) -> str:
        """Format one ``💰 [name] Precio: S/ N`` line."""
        if name:
            return NAMED_PRICE_LINE.format(name=name, price=local_amount)
        return PRICE_LINE.format(price=local_amount)

    def format_sizes_line(self, sizes: list[str]) -> str:
        return SIZES_LINE.format(sizes=SIZES_SEPARATOR.join(sizes))

    def format_start_message(self) -> str:
        """Format the /start usage text with the configured formula values."""
        pricing = self.pricing
        return START_MESSAGE.format(
            tax_percent=f"{pricing.tax_percent:g}",
            shopper_fee_percent=f"{pricing.shopper_fee_percent:g}",
            profit_percent=f"{pricing.profit_percent:g}",
            shipping_fixed_amount=f"{pricing.shipping_fixed_amount:g}",
            fx_rate=f"{pricing.fx_rate:g}",
        )


# Global response formatter instance
response_formatter = ResponseFormatter()
