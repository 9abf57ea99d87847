"""Data models for the price relay bot.

Defines Pydantic models for the values produced while relaying a listing:
parsed price mentions, the per-message classification result and the
computed sale price. All models are created fresh per inbound message.
"""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class Currency(str, Enum):
    """Currency classification of a parsed price mention.

    Attributes:
        LOCAL: Amount already in local currency (marked with ``S/``).
        SOURCE_FX: Foreign amount that needs the full markup formula.
        SOURCE_FX_DIRECT: Foreign amount with an explicit ``$`` sign, only
            converted at the exchange rate.
    """

    LOCAL = "local"
    SOURCE_FX = "source_fx"
    SOURCE_FX_DIRECT = "source_fx_direct"


class PriceCandidate(BaseModel):
    """One price mention found in a message.

    Attributes:
        amount: Positive price amount as written in the message.
        currency: Currency classification of the amount.
        product_name: Optional product label next to the amount.
    """

    amount: Decimal = Field(gt=0)
    currency: Currency = Currency.SOURCE_FX
    product_name: str | None = Field(default=None, max_length=80)


class Classification(BaseModel):
    """Result of running the extraction engine over a message body.

    Attributes:
        candidates: Price mentions in message order.
        sizes: Numbers judged to be sizes, de-duplicated in first-seen order.
    """

    candidates: list[PriceCandidate] = Field(default_factory=list)
    sizes: list[str] = Field(default_factory=list)

    @property
    def has_price(self) -> bool:
        """Whether at least one price mention was found."""
        return bool(self.candidates)


class ComputedPrice(BaseModel):
    """Sale price computed for one candidate.

    Attributes:
        final_local_amount: Price in local currency, always rounded up.
        final_foreign_amount: Foreign total rounded to cents for display,
            None when the amount was already local.
        breakdown_text: Human readable trace of the calculation.
    """

    final_local_amount: int = Field(ge=0)
    final_foreign_amount: Decimal | None = None
    breakdown_text: str = ""
