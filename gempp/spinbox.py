"""A numeric entry field shown in scientific notation, with input validation."""

from __future__ import annotations

import re
import sys
from enum import Enum

# Digits accepted after the decimal separator when typing (bound of the input field).
_INPUT_DECIMALS = 323
# Upper bound on the candidates examined when looking for an intermediate value.
_MAX_FAILURES = 500000

_INT64_MIN = -(2 ** 63)
_INT64_MAX = 2 ** 63 - 1
_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class ValidatorState(Enum):
    INVALID = 0
    INTERMEDIATE = 1
    ACCEPTABLE = 2


def _to_longlong(text: str) -> int:
    """Read a 64-bit integer; anything unreadable or out of range reads as 0."""
    text = text.strip()
    if not _INTEGER.fullmatch(text):
        return 0
    value = int(text)
    return value if _INT64_MIN <= value <= _INT64_MAX else 0


def is_intermediate_value_helper(num: int, minimum: int, maximum: int) -> int | None:
    """Find a number in [minimum, maximum] whose digits contain those of num in order.

    Returns the number found (num itself when it is already in range, or when
    the search gives up), or None when no such number exists.
    """
    if minimum <= num <= maximum:
        return num
    if num == 0:
        digits = [0]
    else:
        digits = [int(d) for d in reversed(str(abs(num)))]

    failures = 0
    for number in range(maximum, minimum - 1, -1):
        tmp = abs(number)
        matched = 0
        while tmp > 0:
            if digits[matched] == tmp % 10:
                matched += 1
                if matched == len(digits):
                    return number
            tmp //= 10
        if failures == _MAX_FAILURES:
            return num
        failures += 1
    return None


class ScienceSpinBox:
    """A bounded floating-point value displayed and typed in exponential form."""

    def __init__(
        self,
        decimals: int = 8,
        minimum: float = -sys.float_info.max,
        maximum: float = sys.float_info.max,
        prefix: str = "",
        suffix: str = "",
        delimiter: str = ".",
        thousand: str = ",",
    ) -> None:
        if not delimiter:
            raise ValueError("A decimal delimiter is required.")
        self.decimals = decimals
        self.minimum = minimum
        self.maximum = maximum
        self.prefix = prefix
        self.suffix = suffix
        self.delimiter = delimiter
        self.thousand = thousand
        self.special_value_text = ""
        self._value = 0.0
        self.value = 0.0
        self._cached_text: str | None = None
        self._cached_state = ValidatorState.INVALID
        self._cached_value = 0.0

    @property
    def value(self) -> float:
        return self._value

    @value.setter
    def value(self, value: float) -> None:
        self._value = min(max(float(value), self.minimum), self.maximum)

    # Stepping

    def step_by(self, steps: int) -> None:
        """Divide the value by ten for negative steps, multiply it by ten otherwise."""
        if steps < 0:
            self.step_down()
        else:
            self.step_up()

    def step_down(self) -> None:
        self.value = self.value / 10.0

    def step_up(self) -> None:
        self.value = self.value * 10.0

    # Conversion

    def text_from_value(self, value: float) -> str:
        """Format a value in exponential notation with the display decimals."""
        text = f"{value:.{self.decimals}e}"
        if self.delimiter != ".":
            text = text.replace(".", self.delimiter)
        if abs(value) >= 1000.0 and self.thousand:
            text = text.replace(self.thousand, "")
        return text

    def value_from_text(self, text: str) -> float:
        value, _ = self.validate_and_interpret(text, len(text))
        return value

    def validate(self, text: str, pos: int | None = None) -> ValidatorState:
        _, state = self.validate_and_interpret(text, pos)
        return state

    def fixup(self, text: str) -> str:
        """Remove the thousands separators from the text."""
        return text.replace(self.thousand, "") if self.thousand else text

    def stripped(self, text: str, pos: int = 0) -> tuple[str, int]:
        """Strip prefix, suffix and surrounding blanks; return text and moved cursor."""
        if not self.special_value_text or text != self.special_value_text:
            start = 0
            size = len(text)
            changed = False
            if self.prefix and text.startswith(self.prefix):
                start = len(self.prefix)
                size -= start
                changed = True
            if self.suffix and text.endswith(self.suffix):
                size -= len(self.suffix)
                changed = True
            if changed:
                text = text[start:] if size < 0 else text[start:start + size]
        before = len(text)
        text = text.strip()
        return text, pos - (before - len(text))

    # Validation

    def _parse(self, text: str) -> float | None:
        if self.delimiter != "." and "." in text:
            return None
        text = text.replace(self.delimiter, ".")
        if not _FLOAT.fullmatch(text):
            return None
        value = float(text)
        if value in (float("inf"), float("-inf")):
            return None
        return value

    def is_intermediate_value(self, text: str) -> bool:
        """Tell whether an out-of-range text may still become a value in range."""
        dec = 10 ** self.decimals
        maximum, minimum = self.maximum, self.minimum

        def split(number: float) -> tuple[int, int]:
            formatted = f"{number:.{_INPUT_DECIMALS}f}"
            dot = formatted.find(".")
            left = formatted if dot < 0 else formatted[:dot]
            return _to_longlong(left), _to_longlong(formatted[dot + 1:])

        min_left, min_right = split(minimum)
        max_left, max_right = split(maximum)

        dotindex = text.find(self.delimiter)
        negative = maximum < 0
        left = right = 0
        doleft = doright = True
        if dotindex == -1:
            left = _to_longlong(text)
            doright = False
        elif dotindex == 0 or (dotindex == 1 and text[0] == "+"):
            if negative:
                return False
            doleft = False
            right = _to_longlong(text[dotindex + 1:])
        elif dotindex == 1 and text[0] == "-":
            if not negative:
                return False
            doleft = False
            right = _to_longlong(text[dotindex + 1:])
        else:
            left = _to_longlong(text[:dotindex])
            if dotindex == len(text) - 1:
                doright = False
            else:
                right = _to_longlong(text[dotindex + 1:])

        if (left >= 0 and max_left < 0 and not text.startswith("-")) or (left < 0 and min_left >= 0):
            return False

        match = min_left
        if doleft:
            found = is_intermediate_value_helper(left, min_left, max_left)
            if found is None:
                return False
            match = found
        if not doright:
            return True

        if not doleft:
            if min_left == max_left:
                low, high = (max_right, min_right) if negative else (min_right, max_right)
                return is_intermediate_value_helper(abs(left), low, high) is not None
            if abs(max_left - min_left) == 1:
                return (
                    is_intermediate_value_helper(abs(left), min_right, 0 if negative else dec) is not None
                    or is_intermediate_value_helper(abs(left), dec if negative else 0, max_right) is not None
                )
            return is_intermediate_value_helper(abs(left), 0, dec) is not None

        if match != min_left:
            min_right = dec if negative else 0
        if match != max_left:
            max_right = 0 if negative else dec
        low, high = (max_right, min_right) if negative else (min_right, max_right)
        return is_intermediate_value_helper(right, low, high) is not None

    def _classify(self, copy: str, pos: int) -> tuple[ValidatorState, float, str]:
        maximum, minimum = self.maximum, self.minimum
        delimiter, thousand = self.delimiter, self.thousand
        plus = maximum >= 0
        minus = minimum <= 0
        length = len(copy)

        if length == 0:
            state = ValidatorState.INTERMEDIATE if maximum != minimum else ValidatorState.INVALID
            return state, minimum, copy
        if length == 1 and (
            copy == delimiter or (plus and copy == "+") or (minus and copy == "-")
        ):
            return ValidatorState.INTERMEDIATE, minimum, copy
        if length == 2 and copy[1] == delimiter and (
            (plus and copy[0] == "+") or (minus and copy[0] == "-")
        ):
            return ValidatorState.INTERMEDIATE, minimum, copy

        if copy[0] == thousand:
            return ValidatorState.INVALID, minimum, copy
        if length > 1:
            dec = copy.find(delimiter)
            if dec != -1:
                if dec + 1 < len(copy) and copy[dec + 1] == delimiter and pos == dec + 1:
                    # Typing a delimiter on the delimiter just moves past it.
                    copy = copy[:dec + 1] + copy[dec + 2:]
                if len(copy) - dec > _INPUT_DECIMALS + 1:
                    return ValidatorState.INVALID, minimum, copy
                if any(c.isspace() or c == thousand for c in copy[dec + 1:]):
                    return ValidatorState.INVALID, minimum, copy
            else:
                last, second = copy[length - 1], copy[length - 2]
                if (last == thousand or last.isspace()) and (second == thousand or second.isspace()):
                    return ValidatorState.INVALID, minimum, copy
                if last.isspace() and (not thousand.isspace() or second.isspace()):
                    return ValidatorState.INVALID, minimum, copy

        not_acceptable = False
        num = self._parse(copy)
        if num is None and thousand and thousand.isprintable():
            if maximum < 1000 and minimum > -1000 and thousand in copy:
                return ValidatorState.INVALID, minimum, copy
            if thousand * 2 in copy:
                return ValidatorState.INVALID, minimum, copy
            copy = copy.replace(thousand, "")
            num = self._parse(copy)
            if num is None:
                return ValidatorState.INVALID, minimum, copy
            not_acceptable = True

        if num is None:
            return ValidatorState.INVALID, minimum, copy
        if minimum <= num <= maximum:
            state = ValidatorState.INTERMEDIATE if not_acceptable else ValidatorState.ACCEPTABLE
            return state, num, copy
        if maximum == minimum:
            return ValidatorState.INVALID, num, copy
        if (num >= 0 and num > maximum) or (num < 0 and num < minimum):
            return ValidatorState.INVALID, num, copy
        if self.is_intermediate_value(copy):
            return ValidatorState.INTERMEDIATE, num, copy
        return ValidatorState.INVALID, num, copy

    def validate_and_interpret(self, text: str, pos: int | None = None) -> tuple[float, ValidatorState]:
        """Validate typed text; return the value it stands for and its state.

        A text that is not acceptable stands for the minimum when the maximum
        is positive, for the maximum otherwise.
        """
        if text and text == self._cached_text:
            return self._cached_value, self._cached_state
        if pos is None:
            pos = len(text)
        copy, pos = self.stripped(text, pos)
        state, num, copy = self._classify(copy, pos)
        if state is not ValidatorState.ACCEPTABLE:
            num = self.minimum if self.maximum > 0 else self.maximum
        self._cached_text = self.prefix + copy + self.suffix
        self._cached_state = state
        self._cached_value = num
        return num, state