"""Tests for quantity parsing and multipliers."""

import pytest

from meal_nutrition.domain.errors import ConfigurationError
from meal_nutrition.domain.foods import QuantityExpr
from meal_nutrition.services.quantity import (
    approximate_grams,
    estimate_multiplier,
    parse_quantity,
    parse_standard_quantity,
)


@pytest.mark.parametrize(
    ("input_quantity", "standard_quantity", "expected"),
    [
        ("200g", "100g", 2.0),
        ("２００ｇ", "100g", 2.0),
        ("50グラム", "100g", 0.5),
        ("大さじ2", "大さじ1", 2.0),
        ("大匙3", "大さじ1", 3.0),
        ("お茶碗二杯", "1杯", 2.0),
        ("1.5カップ", "カップ1", 1.5),
        ("1カップ(200g)", "100g", 2.0),
        ("大さじ2(30g)", "大さじ1", 2.0),
    ],
)
def test_multiplier_ratios(
    input_quantity: str, standard_quantity: str, expected: float
) -> None:
    assert estimate_multiplier(input_quantity, standard_quantity) == pytest.approx(
        expected
    )


@pytest.mark.parametrize(
    ("input_quantity", "standard_quantity"),
    [
        ("適量", "1人前"),
        ("大さじ1", "カップ1"),
        ("1kg", "100g"),
        ("0g", "100g"),
        ("", "100g"),
        ("大さじ", "大さじ1"),
    ],
)
def test_multiplier_falls_back_to_one_serving(
    input_quantity: str, standard_quantity: str
) -> None:
    assert estimate_multiplier(input_quantity, standard_quantity) == 1.0


def test_parse_quantity_grams_take_priority() -> None:
    assert parse_quantity("1カップ(200g)") == QuantityExpr(grams=200)


def test_parse_quantity_canonicalizes_unit_spelling() -> None:
    assert parse_quantity("こさじ２") == QuantityExpr(unit="小さじ", amount=2)
    assert parse_quantity("ご飯 三杯") == QuantityExpr(unit="杯", amount=3)


def test_parse_quantity_rejects_unparsable_text() -> None:
    assert parse_quantity("適量") is None
    assert parse_quantity("十二個") is None
    assert parse_quantity(None) is None


def test_parse_standard_quantity() -> None:
    assert parse_standard_quantity(None) == QuantityExpr(grams=100)
    assert parse_standard_quantity("1人前") == QuantityExpr(unit="人前", amount=1)
    with pytest.raises(ConfigurationError):
        parse_standard_quantity("適量")


def test_approximate_grams() -> None:
    assert approximate_grams(QuantityExpr(grams=80)) == 80
    assert approximate_grams(QuantityExpr(unit="杯", amount=2)) == 300
    assert approximate_grams(QuantityExpr(unit="人前", amount=1)) is None


def test_quantity_expr_formatting() -> None:
    assert str(QuantityExpr(grams=100.0)) == "100g"
    assert str(QuantityExpr(unit="大さじ", amount=1.0)) == "大さじ1"
    assert str(QuantityExpr(unit="カップ", amount=1.5)) == "1.5カップ"


def test_quantity_expr_validation() -> None:
    with pytest.raises(ConfigurationError):
        QuantityExpr()
    with pytest.raises(ConfigurationError):
        QuantityExpr(grams=100, unit="杯", amount=1)
    with pytest.raises(ConfigurationError):
        QuantityExpr(grams=0)
    with pytest.raises(ConfigurationError):
        QuantityExpr(unit="杯", amount=-1)


def test_fractions_are_not_read_as_whole_amounts() -> None:
    assert estimate_multiplier("1/2個", "1個") == pytest.approx(0.5)
    assert estimate_multiplier("大さじ1/2", "大さじ1") == pytest.approx(0.5)
    assert estimate_multiplier("1/0個", "1個") == 1.0
    assert parse_quantity("1/2g") is None


def test_typed_standard_quantity_is_not_reparsed() -> None:
    standard = QuantityExpr(grams=1234567.0)

    assert str(standard) == "1234567g"
    assert estimate_multiplier("1234567g", standard) == pytest.approx(1.0)
    assert estimate_multiplier("100g", QuantityExpr(grams=33.3333333)) == (
        pytest.approx(100 / 33.3333333)
    )
    assert estimate_multiplier("大さじ2", QuantityExpr(unit="大さじ", amount=1)) == 2.0
    assert estimate_multiplier("大さじ2", QuantityExpr(grams=15)) == 1.0


def test_approximate_grams_uses_category_weights() -> None:
    slice_quantity = QuantityExpr(unit="切れ", amount=2)
    piece = QuantityExpr(unit="個", amount=1)

    assert approximate_grams(slice_quantity, "肉類") == 200
    assert approximate_grams(slice_quantity, "魚介類") == 160
    assert approximate_grams(slice_quantity) == 160
    assert approximate_grams(QuantityExpr(unit="カップ", amount=1), "穀類-米") == 150
    assert approximate_grams(QuantityExpr(unit="尾", amount=1), "魚介類") == 100
    assert approximate_grams(piece, "果物", "りんご") == 200
    assert approximate_grams(piece, "果物", "キウイ") == 50
    assert approximate_grams(piece, "野菜", "りんご") == 50
