"""
Tests for parsing and canonicalizing resource quantities
"""

# Standard
from decimal import Decimal

# Third Party
import pytest

# Local
from kubeoverride import quantity
from kubeoverride.exceptions import InvalidQuantityError, OverrideConfigError
from kubeoverride.quantity import (
    QUANTITY_EXPRESSION,
    Quantity,
    QuantityFormat,
    parse_quantity,
)

## Parsing #####################################################################


@pytest.mark.parametrize(
    ["raw", "value"],
    [
        ("100m", Decimal("0.1")),
        ("10Gi", Decimal(10 * 1024**3)),
        ("1Ki", Decimal(1024)),
        ("1.5k", Decimal(1500)),
        ("1e3", Decimal(1000)),
        ("+5", Decimal(5)),
        ("-2M", Decimal(-2000000)),
        (".5", Decimal("0.5")),
        ("0", Decimal(0)),
    ],
)
def test_parse_valid(raw, value):
    """Make sure valid quantity strings parse to the right numeric value"""
    assert Quantity.parse(raw).value == value


@pytest.mark.parametrize(
    "raw",
    [
        "10x",
        "",
        "Gi",
        "1.2.3",
        "10KB",
        "10 Gi",
        "1ki",
        "1e",
        "--1",
        "1Gi\n",
        "100m\n",
        "10\n",
        " 10",
        "10 ",
    ],
)
def test_parse_invalid(raw):
    """Make sure strings that don't match the grammar are rejected with an
    error that names the expected grammar
    """
    with pytest.raises(InvalidQuantityError) as err:
        Quantity.parse(raw)
    assert err.value.value == raw
    assert "quantities must match the regular expression" in str(err.value)
    assert QUANTITY_EXPRESSION in str(err.value)


def test_parse_non_string():
    """Make sure a non-string is rejected rather than coerced"""
    with pytest.raises(InvalidQuantityError):
        Quantity.parse(None)
    with pytest.raises(InvalidQuantityError):
        Quantity.parse(10)


def test_parse_number_rejected_after_grammar(monkeypatch):
    """Make sure a failure to compute the numeric value is reported as an
    invalid quantity rather than leaking a ValueError
    """

    def bad_parse(value):
        raise ValueError(f"Invalid number format: {value}")

    monkeypatch.setattr(quantity, "kube_parse_quantity", bad_parse)
    with pytest.raises(InvalidQuantityError) as err:
        Quantity.parse("1Gi")
    assert err.value.value == "1Gi"
    assert isinstance(err.value.__cause__, ValueError)


def test_invalid_quantity_is_config_error():
    """Make sure quantity errors are surfaced as user config errors"""
    with pytest.raises(OverrideConfigError) as err:
        parse_quantity("10x")
    assert err.value.is_fatal_error


def test_parse_passthrough():
    """Make sure parsing a Quantity returns it unchanged"""
    qty = Quantity.parse("1Gi")
    assert Quantity.parse(qty) is qty


def test_formats():
    """Make sure the format is inferred from the suffix"""
    assert Quantity.parse("1Gi").format == QuantityFormat.BINARY_SI
    assert Quantity.parse("1G").format == QuantityFormat.DECIMAL_SI
    assert Quantity.parse("1").format == QuantityFormat.DECIMAL_SI
    assert Quantity.parse("1E").format == QuantityFormat.DECIMAL_SI
    assert Quantity.parse("1e3").format == QuantityFormat.DECIMAL_EXPONENT


## Canonical Form ##############################################################


@pytest.mark.parametrize(
    ["raw", "canonical"],
    [
        ("100m", "100m"),
        ("10Gi", "10Gi"),
        ("1024Mi", "1Gi"),
        ("0.5Gi", "512Mi"),
        ("1.5Ki", "1536"),
        ("512", "512"),
        ("1.5k", "1500"),
        ("2000", "2k"),
        ("1.5", "1500m"),
        ("1e3", "1e3"),
        ("0Gi", "0"),
        ("0.1n", "1n"),
        ("-2048Ki", "-2Mi"),
    ],
)
def test_canonical(raw, canonical):
    """Make sure quantities serialize to the canonical form"""
    assert str(Quantity.parse(raw)) == canonical


def test_canonical_is_stable():
    """Make sure the canonical form parses back to the same quantity"""
    for raw in ["100m", "0.5Gi", "1.5k", "1e3", "10Gi"]:
        qty = Quantity.parse(raw)
        assert Quantity.parse(str(qty)) == qty
        assert str(Quantity.parse(str(qty))) == str(qty)


## Extreme Magnitudes ##########################################################


def test_large_exponent():
    """Make sure exponents far beyond the SI suffixes parse and keep their
    exponent form
    """
    qty = Quantity.parse("1e60")
    assert qty.value == Decimal("1e60")
    assert str(qty) == "1e60"
    assert repr(qty) == "Quantity('1e60')"


def test_large_decimal_si():
    """Make sure a value with many integer digits caps at the largest SI
    suffix
    """
    qty = Quantity.parse("1" + "0" * 70)
    assert qty.value == Decimal(10**70)
    assert str(qty) == "1" + "0" * 52 + "E"


def test_large_binary():
    """Make sure a huge binary quantity keeps exact integer digits"""
    qty = Quantity.parse("1" + "0" * 60 + "Ki")
    assert qty.value == Decimal(10**60 * 1024)


def test_tiny_exponent_rounds_up():
    """Make sure values below nano precision round up to one nano"""
    assert str(Quantity.parse("1e-60")) == "1e-9"
    assert Quantity.parse("1e-60").value == Decimal("1e-9")


## Equality ####################################################################


def test_equality_by_value():
    """Make sure quantities written differently compare equal by value"""
    assert Quantity.parse("1Gi") == Quantity.parse("1024Mi")
    assert Quantity.parse("1k") == "1000"
    assert Quantity.parse("1k") != "10x"
    assert Quantity.parse("1k") != Quantity.parse("1Ki")
    assert len({Quantity.parse("1Gi"), Quantity.parse("1024Mi")}) == 1
