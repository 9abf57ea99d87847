"""Sale price calculation service.

Converts a USD unit price into a PEN sale price with the shop's markup
formula. Each stage compounds on the previous subtotal:

1. Unit price + tax (e.g. 6.5%)
2. + shopper fee (e.g. 20%)
3. + profit (e.g. 15%)
4. + fixed shipping in USD (e.g. $10)
5. Total USD x exchange rate, rounded up to a whole sol

The local amount is always rounded up so the shop never sells at a loss.
Prices written with an explicit ``$`` are only converted, and prices already
in soles are passed through.
"""

from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal, InvalidOperation

from ..config import PricingConfig
from ..models import ComputedPrice, Currency, PriceCandidate

CENT = Decimal("0.01")
HUNDRED = Decimal("100")


def _to_decimal(value: Decimal | float | int | str, field: str) -> Decimal:
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation as e:
        raise ValueError(f"{field} must be a number, got {value!r}") from e
    if not result.is_finite() or result <= 0:
        raise ValueError(f"{field} must be a positive finite number, got {value!r}")
    return result


def _ceil(value: Decimal) -> int:
    return int(value.to_integral_value(rounding=ROUND_CEILING))


def _display(value: Decimal) -> str:
    """Format an amount for the breakdown: 10 stays 10, 24.697 becomes 24.70."""
    if value == value.to_integral_value():
        return str(value.quantize(Decimal("1")))
    return str(value.quantize(CENT, ROUND_HALF_UP))


def _percent(value: float) -> str:
    return f"{value:g}"


def price(unit_price: Decimal | float | int, config: PricingConfig) -> ComputedPrice:
    """Calculate the sale price of a USD unit price with the full markup.

    Args:
        unit_price: Listing price in USD, positive and finite.
        config: Markup percentages, shipping and exchange rate.

    Returns:
        ComputedPrice with the rounded-up PEN amount, the USD total rounded
        to cents and a breakdown trace.

    Raises:
        ValueError: If unit_price is not a positive finite number.
    """
    base = _to_decimal(unit_price, "unit_price")
    fx_rate = _to_decimal(config.fx_rate, "fx_rate")

    with_tax = base * (1 + Decimal(str(config.tax_percent)) / HUNDRED)
    with_shopper = with_tax * (1 + Decimal(str(config.shopper_fee_percent)) / HUNDRED)
    with_profit = with_shopper * (1 + Decimal(str(config.profit_percent)) / HUNDRED)
    total_foreign = with_profit + Decimal(str(config.shipping_fixed_amount))

    # Ceiling uses the unrounded total; cents rounding is for display only
    total_local = _ceil(total_foreign * fx_rate)
    final_foreign = total_foreign.quantize(CENT, ROUND_HALF_UP)

    breakdown = (
        f"Precio USD: ${_display(base)}"
        f" → +{_percent(config.tax_percent)}%"
        f" → +{_percent(config.shopper_fee_percent)}% shopper"
        f" → +{_percent(config.profit_percent)}% ganancia"
        f" → +${_percent(config.shipping_fixed_amount)} envío"
        f" = ${final_foreign} → S/ {total_local}"
    )

    return ComputedPrice(
        final_local_amount=total_local,
        final_foreign_amount=final_foreign,
        breakdown_text=breakdown,
    )


def direct_convert(amount: Decimal | float | int, fx_rate: Decimal | float) -> ComputedPrice:
    """Convert a ``$``-marked USD amount at the exchange rate, without markup.

    Args:
        amount: USD amount, positive and finite.
        fx_rate: Soles per USD.

    Returns:
        ComputedPrice with the rounded-up PEN amount.

    Raises:
        ValueError: If amount or fx_rate is not a positive finite number.
    """
    base = _to_decimal(amount, "amount")
    rate = _to_decimal(fx_rate, "fx_rate")
    total_local = _ceil(base * rate)

    return ComputedPrice(
        final_local_amount=total_local,
        final_foreign_amount=base.quantize(CENT, ROUND_HALF_UP),
        breakdown_text=f"Precio USD: ${_display(base)} × {rate} = S/ {total_local}",
    )


def pass_through(amount: Decimal | float | int) -> ComputedPrice:
    """Round an amount that is already in soles up to a whole sol.

    Raises:
        ValueError: If amount is not a positive finite number.
    """
    base = _to_decimal(amount, "amount")
    total_local = _ceil(base)

    return ComputedPrice(
        final_local_amount=total_local,
        breakdown_text=f"Precio S/: {_display(base)} = S/ {total_local}",
    )


def quote(candidate: PriceCandidate, config: PricingConfig) -> ComputedPrice:
    """Price a candidate with the operation its currency tag calls for.

    Args:
        candidate: Price mention from the extraction engine.
        config: Markup formula parameters.

    Returns:
        ComputedPrice for the candidate.
    """
    if candidate.currency is Currency.LOCAL:
        return pass_through(candidate.amount)
    if candidate.currency is Currency.SOURCE_FX_DIRECT:
        return direct_convert(candidate.amount, config.fx_rate)
    return price(candidate.amount, config)
