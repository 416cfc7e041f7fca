"""Number formatting and modal output tracking for G-code words.

G-code words are modal: a value stays active on the controller until it is
changed. The classes in this module remember what was last written so that
unchanged words can be left out of the next block.

Example:
    >>> x = ModalVariable("X", NumberFormat(decimals=3))
    >>> x.format(10.0)
    'X10'
    >>> x.format(10.0)
    ''
    >>> x.reset()
    >>> x.format(10.0)
    'X10'
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional


@dataclass(frozen=True)
class NumberFormat:
    """Render numbers as fixed point text.

    Rounding is half away from zero on the shortest decimal text of the
    value, so ``1.0005`` becomes ``1.001`` and ``-1.0005`` becomes ``-1.001``
    at three decimals. A result of zero is always written without a sign.

    Attributes:
        decimals: Number of decimal places to round to
        trim_zeros: Drop trailing zeros and a dangling decimal point
        force_sign: Write a leading ``+`` on positive values
    """

    decimals: int = 3
    trim_zeros: bool = True
    force_sign: bool = False

    def __post_init__(self) -> None:
        """Validate the decimal count."""
        if self.decimals < 0:
            raise ValueError(f"decimals must be non-negative, got {self.decimals}")

    def format(self, value: float) -> str:
        """Format ``value`` according to this configuration."""
        quantum = Decimal(1).scaleb(-self.decimals)
        rounded = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)
        if rounded == 0:
            rounded = abs(rounded)

        text = f"{rounded:f}"
        if self.trim_zeros and "." in text:
            text = text.rstrip("0").rstrip(".")
        if self.force_sign and rounded > 0:
            text = "+" + text
        return text


class ModalVariable:
    """One modal G-code word (X, Y, Z, F, S, I, J, P...).

    The word is written only when its formatted text differs from the last
    written text, when the variable was reset, or when it is configured to
    always be written.

    Args:
        prefix: Word letter(s) written before the number
        number_format: Formatter for the numeric part
        force: Write the word on every call
    """

    def __init__(self, prefix: str, number_format: NumberFormat, force: bool = False):
        self.prefix = prefix
        self.number_format = number_format
        self.force = force
        self._last: Optional[str] = None

    @property
    def last(self) -> Optional[str]:
        """Text of the last written value, or None if nothing is active."""
        return self._last

    def format(self, value: Optional[float], reference: Optional[float] = None) -> str:
        """Format ``value`` as a word, or return '' if it is unchanged.

        Args:
            value: Value to write; None leaves the word out
            reference: Compare against this value instead of the last
                written one. Used for incremental words such as arc center
                offsets, whose natural floor is 0.

        Returns:
            The word text (e.g. "X12.5") or an empty string
        """
        if value is None:
            return ""

        text = self.number_format.format(value)
        if reference is not None:
            changed = text != self.number_format.format(reference)
        else:
            changed = text != self._last

        if not (changed or self.force or self._last is None):
            return ""

        self._last = text
        return self.prefix + text

    def reset(self) -> None:
        """Forget the last value so the next call is always written."""
        self._last = None

    def __repr__(self) -> str:
        return f"ModalVariable(prefix={self.prefix!r}, last={self._last!r}, force={self.force})"


class ModalGroup:
    """Mutually exclusive group of command codes (motion, distance, units).

    Args:
        letter: Command letter, "G" or "M"
    """

    def __init__(self, letter: str = "G"):
        self.letter = letter
        self._active: Optional[int] = None

    @property
    def active(self) -> Optional[int]:
        return self._active

    def format(self, code: int) -> str:
        """Return the command word if ``code`` is not already active."""
        if code == self._active:
            return ""
        self._active = code
        return f"{self.letter}{code}"

    def reset(self) -> None:
        """Forget the active code so the next call is always written."""
        self._active = None
