"""Tests for the single-line matchers, their order and name normalisation."""

from decimal import Decimal

import pytest

from price_relay.models import Currency
from price_relay.services import patterns
from price_relay.services.extraction import LINE_SEGMENTERS, PriceExtractor
from price_relay.services.patterns import (
    SINGLE_LINE_MATCHERS,
    extract_single_line,
    is_counted,
    is_quantity_label,
    normalize_product_name,
    parse_amount,
)


class TestMatcherOrder:
    """The table order decides which reading of an ambiguous line wins."""

    def test_single_line_matcher_order(self):
        assert [name for name, _ in SINGLE_LINE_MATCHERS] == [
            "leading_sign",
            "embedded_sign",
            "trailing_sign",
            "local_marker",
            "leading_amount",
            "trailing_amount",
            "bare_amount",
            "keyword",
        ]

    def test_line_segmenter_order(self):
        assert [name for name, _ in LINE_SEGMENTERS] == [
            "dual_named",
            "dual_bare",
            "slash_segments",
            "multi_number",
            "single_line",
        ]

    def test_signed_amount_beats_leading_amount(self):
        """``$28 mochila`` also fits leading_amount shape but the sign wins."""
        candidate = extract_single_line("$28 mochila")

        assert candidate.currency is Currency.SOURCE_FX_DIRECT

    def test_first_match_short_circuits(self, monkeypatch):
        calls = []

        def tracking(name, matcher):
            def wrapper(line):
                calls.append(name)
                return matcher(line)

            return name, wrapper

        monkeypatch.setattr(
            patterns,
            "SINGLE_LINE_MATCHERS",
            tuple(tracking(name, matcher) for name, matcher in SINGLE_LINE_MATCHERS),
        )

        patterns.extract_single_line("76 mochila")

        assert calls == [
            "leading_sign",
            "embedded_sign",
            "trailing_sign",
            "local_marker",
            "leading_amount",
        ]

    def test_dual_named_checked_before_single_line(self, extraction_rules):
        result = PriceExtractor(extraction_rules).classify_line("Tomatodo 5.5 y bowl 7")

        assert len(result.candidates) == 2


class TestSingleLineMatchers:
    """Test individual matchers on the shapes they own."""

    @pytest.mark.parametrize(
        "line, amount, currency, name",
        [
            ("$50", "50", Currency.SOURCE_FX_DIRECT, None),
            ("$ 12.5 gorra", "12.5", Currency.SOURCE_FX_DIRECT, "gorra"),
            ("mochila $28 oferta", "28", Currency.SOURCE_FX_DIRECT, "mochila"),
            ("28$ entra laptop", "28", Currency.SOURCE_FX_DIRECT, "entra laptop"),
            ("S/50", "50", Currency.LOCAL, None),
            ("S/. 50 mochila", "50", Currency.LOCAL, "mochila"),
            ("19 pijamas", "19", Currency.SOURCE_FX, "pijamas"),
            ("Medias 3.5", "3.5", Currency.SOURCE_FX, "Medias"),
            ("USD 45", "45", Currency.SOURCE_FX, None),
            ("Oferta especial 35 dólares hoy", "35", Currency.SOURCE_FX, None),
            ("mochila ($28)", "28", Currency.SOURCE_FX_DIRECT, None),
            ("Oferta:$30", "30", Currency.SOURCE_FX_DIRECT, None),
            ("Oferta 19.99!", "19.99", Currency.SOURCE_FX, None),
            ("cuesta 15. Color azul", "15", Currency.SOURCE_FX, None),
            ("Laptop 1,299", "1299", Currency.SOURCE_FX, "Laptop"),
            ("mochila S/ 20", "20", Currency.LOCAL, "mochila"),
        ],
    )
    def test_matcher_shapes(self, line, amount, currency, name):
        candidate = extract_single_line(line)

        assert candidate is not None, f"No candidate for {line!r}"
        assert candidate.amount == Decimal(amount)
        assert candidate.currency is currency
        assert candidate.product_name == name

    def test_quantity_label_falls_back_to_trailing_label(self):
        candidate = extract_single_line("4 pares 8$ medias")

        assert candidate.amount == Decimal("8")
        assert candidate.product_name == "medias"

    def test_leading_count_is_not_a_price(self):
        assert patterns.match_leading_amount("2 pares") is None
        assert patterns.match_trailing_amount("pares 2") is None

    def test_keyword_skips_counted_numbers(self):
        candidate = patterns.match_keyword("pack de 3 por 25 usd")

        assert candidate.amount == Decimal("25")

    @pytest.mark.parametrize("line", ["", "   ", "sin precio", "4 pares"])
    def test_lines_without_price(self, line):
        assert extract_single_line(line) is None


class TestNameNormalisation:
    """Test product label cleanup."""

    def test_whitespace_collapsed(self):
        assert normalize_product_name("  Mochila   azul\t grande ") == "Mochila azul grande"

    def test_trailing_currency_mark_stripped(self):
        assert normalize_product_name("mochila S/") == "mochila"
        assert normalize_product_name("gorra $") == "gorra"

    def test_name_capped(self):
        assert len(normalize_product_name("x" * 200)) == patterns.MAX_NAME_LENGTH

    @pytest.mark.parametrize("label", [None, "", "   ", "pares", "4 pares", "pack", "USD", "dólares", "precio:"])
    def test_non_names(self, label):
        assert normalize_product_name(label) is None

    def test_quantity_labels(self):
        assert is_quantity_label("3 unidades")
        assert is_quantity_label("Pares")
        assert not is_quantity_label("pantuflas")

    def test_counted_number(self):
        assert is_counted("4 pares 8", 0, 1)
        assert is_counted("pack de 3 por 25", 8, 9)
        assert not is_counted("mochila 8", 8, 9)


class TestParseAmount:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("27.99", Decimal("27.99")),
            ("8,5", Decimal("8.5")),
            (" 19 ", Decimal("19")),
            ("1,299.99", Decimal("1299.99")),
            ("1,299", Decimal("1299")),
        ],
    )
    def test_valid_literals(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "0", "0.00", "abc"])
    def test_unusable_literals(self, raw):
        assert parse_amount(raw) is None
