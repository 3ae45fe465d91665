"""
Text accumulation helpers shared by the definitions backends.

Output is collected as an ordered list of fragments and joined once at
the end. Each line is prefixed by the current indentation depth.
"""

import math
from decimal import Decimal
from typing import List


INDENT_UNIT = "  "


class TextBuilder:
    """
    Ordered fragment list plus an indentation depth counter.

    Block discipline:
        open_block() writes the header at the current depth, then increments
        close_block() decrements, then writes the closing brace
    """

    def __init__(self, indent_unit: str = INDENT_UNIT):
        self.fragments: List[str] = []
        self.depth = 0
        self.indent_unit = indent_unit

    def push(self, *fragments: str) -> None:
        self.fragments.extend(fragments)

    def indent(self) -> None:
        if self.depth:
            self.fragments.append(self.indent_unit * self.depth)

    def line(self, *fragments: str) -> None:
        """Write one indented line."""
        self.indent()
        self.fragments.extend(fragments)
        self.fragments.append("\n")

    def open_block(self, *header: str) -> None:
        self.line(*header, " {")
        self.depth += 1

    def close_block(self, suffix: str = "") -> None:
        self.depth -= 1
        self.line("}", suffix)

    def build(self) -> str:
        return "".join(self.fragments)


def format_integer(value: int) -> str:
    """Signed decimal."""
    return str(int(value))


def format_float(value: float) -> str:
    """
    Shortest decimal spelling of a float, laid out like JavaScript's
    Number.prototype.toString.

    Integral values drop the fractional part (2.0 -> "2"). Plain notation
    is used for decimal exponents in [-7, 21), scientific notation with an
    unpadded, signed exponent otherwise (1e21 -> "1e+21", 1.25e-7 -> "1.25e-7").
    Non-finite values use the NaN / Infinity / -Infinity literals,
    which both definitions formats accept.
    """
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"

    sign = "-" if value < 0 else ""
    # repr yields the shortest round-tripping digits
    _, digit_tuple, exponent = Decimal(repr(abs(value))).as_tuple()
    digits = "".join(map(str, digit_tuple)).rstrip("0")
    exponent += len(digit_tuple) - len(digits)
    k = len(digits)
    n = exponent + k  # value == 0.<digits> * 10**n

    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * -n + digits
    e = n - 1
    mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
    return f"{sign}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"
