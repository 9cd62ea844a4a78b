"""
Parsing and canonicalization of Kubernetes resource quantities (e.g. "10Gi",
"100m", "1e3").

The grammar matches the one enforced by the API server, so a size string that
passes here will not be rejected later when the object is applied. The
canonical string form follows the same rules the API server uses when it
serializes a quantity back out.
"""

# Standard
from decimal import ROUND_UP, Decimal, InvalidOperation, localcontext
from enum import Enum
from typing import Union
import re

# Third Party
from kubernetes.utils import parse_quantity as kube_parse_quantity

# First Party
import alog

# Local
from .exceptions import InvalidQuantityError

log = alog.use_channel("QNTY")

## Grammar #####################################################################

# The loose expression the API server reports to users when a quantity fails
# to parse
QUANTITY_EXPRESSION = "^([+-]?[0-9.]+)([eEinumkKMGTP]*[-+]?[0-9]*)$"

_QUANTITY_RE = re.compile(
    r"(?P<number>[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+))"
    r"(?P<suffix>[KMGTPE]i|[numkMGTPE]|[eE][+-]?[0-9]+)?"
)

_BINARY_SUFFIXES = {0: "", 10: "Ki", 20: "Mi", 30: "Gi", 40: "Ti", 50: "Pi", 60: "Ei"}
_DECIMAL_SUFFIXES = {
    -9: "n",
    -6: "u",
    -3: "m",
    0: "",
    3: "k",
    6: "M",
    9: "G",
    12: "T",
    15: "P",
    18: "E",
}
_NANO = Decimal("1e-9")

# Digits kept beyond the integer part: nine for nanos plus headroom
_EXTRA_DIGITS = 16


def _precision(value: Decimal) -> int:
    return max(64, value.adjusted() + _EXTRA_DIGITS)


class QuantityFormat(Enum):
    """The notation a quantity was written in, which is kept when it is
    serialized back out
    """

    BINARY_SI = "BinarySI"
    DECIMAL_SI = "DecimalSI"
    DECIMAL_EXPONENT = "DecimalExponent"


## Quantity ####################################################################


class Quantity:
    """A parsed resource quantity. Two quantities are equal when they hold the
    same numeric value, regardless of how they were written.
    """

    def __init__(self, value: Decimal, fmt: QuantityFormat = QuantityFormat.DECIMAL_SI):
        # Values are kept at nano precision, so the context needs room for every
        # integer digit plus the nine fractional ones
        with localcontext() as ctx:
            ctx.prec = _precision(value)
            self._value = (
                value.quantize(_NANO, rounding=ROUND_UP) if value else Decimal(0)
            )
        self._format = fmt

    @classmethod
    def parse(cls, value: Union[str, "Quantity"]) -> "Quantity":
        """Parse a quantity string

        Args:
            value:  Union[str, Quantity]
                The human-authored quantity (e.g. "10Gi")

        Returns:
            quantity:  Quantity
                The parsed quantity

        Raises:
            InvalidQuantityError: If value does not match the quantity grammar
        """
        if isinstance(value, Quantity):
            return value
        match = _QUANTITY_RE.fullmatch(value) if isinstance(value, str) else None
        if match is None:
            raise _invalid(value)

        suffix = match.group("suffix") or ""
        if suffix.endswith("i"):
            fmt = QuantityFormat.BINARY_SI
        elif suffix[:1] in ("e", "E") and len(suffix) > 1:
            fmt = QuantityFormat.DECIMAL_EXPONENT
        else:
            fmt = QuantityFormat.DECIMAL_SI
        log.debug4("Parsed quantity [%s] with suffix [%s] as %s", value, suffix, fmt)
        try:
            number = Decimal(kube_parse_quantity(value))
        except (ValueError, InvalidOperation) as err:
            raise _invalid(value) from err
        return cls(number, fmt)

    @property
    def value(self) -> Decimal:
        return self._value

    @property
    def format(self) -> QuantityFormat:
        return self._format

    def canonical(self) -> str:
        """Serialize to the canonical string form"""
        if not self._value:
            return "0"

        if (
            self._format == QuantityFormat.BINARY_SI
            and abs(self._value) >= 1024
            and self._value == self._value.to_integral_value()
        ):
            mantissa, exponent = int(self._value), 0
            while mantissa % 1024 == 0 and exponent < max(_BINARY_SUFFIXES):
                mantissa //= 1024
                exponent += 10
            return f"{mantissa}{_BINARY_SUFFIXES[exponent]}"

        # Decimal forms: integer mantissa with the largest power of 1000
        with localcontext() as ctx:
            ctx.prec = _precision(self._value)
            mantissa, exponent = int(self._value.scaleb(9)), -9
        # Only the SI suffixes cap the exponent
        max_exponent = (
            None
            if self._format == QuantityFormat.DECIMAL_EXPONENT
            else max(_DECIMAL_SUFFIXES)
        )
        while mantissa % 1000 == 0 and (
            max_exponent is None or exponent < max_exponent
        ):
            mantissa //= 1000
            exponent += 3
        if self._format == QuantityFormat.DECIMAL_EXPONENT:
            return f"{mantissa}e{exponent}" if exponent else str(mantissa)
        return f"{mantissa}{_DECIMAL_SUFFIXES[exponent]}"

    def __str__(self):
        return self.canonical()

    def __repr__(self):
        return f"Quantity({self.canonical()!r})"

    def __eq__(self, other):
        if isinstance(other, str):
            try:
                other = Quantity.parse(other)
            except InvalidQuantityError:
                return False
        if not isinstance(other, Quantity):
            return NotImplemented
        return self._value == other._value

    def __hash__(self):
        return hash(self._value)


def _invalid(value) -> InvalidQuantityError:
    return InvalidQuantityError(
        value,
        f"unable to parse quantity's suffix in [{value!r}]: quantities "
        f"must match the regular expression '{QUANTITY_EXPRESSION}'",
    )


def parse_quantity(value: Union[str, Quantity]) -> Quantity:
    """Shorthand for Quantity.parse"""
    return Quantity.parse(value)
