# CalculatorEngine.py
"""""
Editing state behind the calculator display.

The UI holds one CalculatorEngine and forwards every button press or key to
one of its submit_*/memory_* methods. Each method returns a DisplayState
(primary_text, secondary_text, is_error) the UI renders as-is.

State
-----
- committed:        [operand, operator] pairs already confirmed, shown in the
                    secondary display (e.g. "12 + 4 ×")
- current_operand:  the number being edited, shown in the primary display
- error_flag:       set by a failed evaluation; only a reset clears it
- memory:           a single float or None, untouched by resets
"""""

import logging
import math
from collections import namedtuple
from decimal import Decimal

from . import error as E
from . import MathEngine

logger = logging.getLogger(__name__)

DEFAULT_MAX_DIGITS = 16
DIGITS = "0123456789"
PLACEHOLDERS = ("0", "-0")

DisplayState = namedtuple("DisplayState", ["primary_text", "secondary_text", "is_error"])


def count_digits(text):
    """Number of digits in text, ignoring sign, dot and exponent markers."""
    return sum(1 for char in text if char in DIGITS)


def operand_value(text):
    try:
        return float(text)
    except ValueError:
        return math.nan


def expression_operand(text, leading):
    """Return an operand the way it is spliced into the evaluated expression.

    Exponential display text is expanded to plain digits, since the tokenizer
    only knows digits and '.'. A negative operand after an operator is put in
    parentheses, otherwise '2 × -3' would tokenize as '2 × 0 − 3'.
    """
    if "e" in text:
        text = format(Decimal(text), "f")
    if text.startswith("-") and not leading:
        return f"({text})"
    return text


class CalculatorEngine:

    def __init__(self, max_digits=DEFAULT_MAX_DIGITS):
        if max_digits < 1:
            raise ValueError(f"max_digits must be at least 1, got {max_digits}")
        self.max_digits = max_digits
        self.memory = None
        self.committed = []
        self.current_operand = "0"
        self.error_flag = False
        self.failed_expression = ""
        # False right after an operator press until a new operand is typed
        self.operand_entered = False
        # True while the primary display shows a result: the next digit starts over
        self.replace_operand = False

    # --- Display ---

    def committed_text(self):
        return " ".join(f"{operand} {symbol}" for operand, symbol in self.committed)

    def display(self):
        if self.error_flag:
            return DisplayState(MathEngine.ERROR_TEXT, self.failed_expression, True)
        return DisplayState(self.current_operand, self.committed_text(), False)

    @property
    def has_memory(self):
        return self.memory is not None

    def _enter_error(self, error, expression):
        self.error_flag = True
        self.failed_expression = f"{expression} ="
        logger.warning("Calculation failed (%s): %s", error.code, E.describe(error))

    def _start_new_operand(self):
        if self.replace_operand:
            self.current_operand = "0"
            self.replace_operand = False

    # --- Operand editing ---

    def submit_digit(self, digit):
        if len(digit) != 1 or digit not in DIGITS:
            raise E.SyntaxError(f"'{digit}' is not a digit", code="3011")
        if self.error_flag:
            return self.display()

        self._start_new_operand()
        if self.current_operand in PLACEHOLDERS:
            self.current_operand = self.current_operand[:-1] + digit
        elif count_digits(self.current_operand) < self.max_digits:
            self.current_operand += digit
        self.operand_entered = True
        return self.display()

    def submit_decimal_point(self):
        if self.error_flag:
            return self.display()

        self._start_new_operand()
        if "." not in self.current_operand:
            self.current_operand += "."
        self.operand_entered = True
        return self.display()

    def submit_sign(self):
        if self.error_flag:
            return self.display()

        if self.current_operand.startswith("-"):
            self.current_operand = self.current_operand[1:]
        else:
            self.current_operand = "-" + self.current_operand
        self.operand_entered = True
        return self.display()

    def submit_percent(self):
        """Divide the current operand by 100 right away."""
        if self.error_flag:
            return self.display()

        value = operand_value(self.current_operand) / 100
        self.current_operand = MathEngine.format_number(value)
        self.operand_entered = True
        self.replace_operand = True
        return self.display()

    def submit_backspace(self):
        if self.error_flag:
            return self.display()

        # Exponential text cannot be edited digit by digit
        if "e" in self.current_operand:
            text = ""
        else:
            text = self.current_operand[:-1]
        if text in ("", "-"):
            text = "0"
        self.current_operand = text
        self.replace_operand = False
        return self.display()

    # --- Expression ---

    def submit_operator(self, symbol):
        canonical = MathEngine.canonical_operator(symbol)
        if canonical is None:
            raise E.CalculationError(f"{symbol}", code="3004")
        if self.error_flag:
            return self.display()

        if self.committed and not self.operand_entered:
            # Operator changed without a new operand in between
            self.committed[-1][1] = canonical
        else:
            operand = expression_operand(self.current_operand, leading=not self.committed)
            self.committed.append([operand, canonical])

        self.current_operand = "0"
        self.operand_entered = False
        self.replace_operand = False
        return self.display()

    def submit_equals(self):
        if self.error_flag:
            return self.display()

        parts = [self.committed_text()] if self.committed else []
        parts.append(expression_operand(self.current_operand, leading=not self.committed))
        expression = " ".join(parts)

        try:
            result = MathEngine.calculate(expression)
        except E.MathError as e:
            e.equation = expression
            self._enter_error(e, expression)
            return self.display()

        logger.debug("%s = %r", expression, result)
        self.current_operand = MathEngine.format_number(result)
        self.committed = []
        self.operand_entered = True
        self.replace_operand = True
        return self.display()

    # --- Clearing ---

    def submit_clear_entry(self):
        if self.error_flag:
            return self.submit_full_reset()

        self.current_operand = "0"
        self.replace_operand = False
        return self.display()

    def submit_full_reset(self):
        self.committed = []
        self.current_operand = "0"
        self.error_flag = False
        self.failed_expression = ""
        self.operand_entered = False
        self.replace_operand = False
        return self.display()

    # --- Memory register ---

    def memory_clear(self):
        self.memory = None
        return self.display()

    def memory_recall(self):
        if self.error_flag or self.memory is None:
            return self.display()

        self.current_operand = MathEngine.format_number(self.memory)
        self.operand_entered = True
        self.replace_operand = True
        return self.display()

    def memory_add(self):
        return self._update_memory(1)

    def memory_subtract(self):
        return self._update_memory(-1)

    def _update_memory(self, sign):
        if self.error_flag:
            return self.display()

        value = operand_value(self.current_operand)
        if not math.isfinite(value):
            return self.display()

        total = (self.memory or 0.0) + sign * value
        if not math.isfinite(total):
            logger.warning("Memory register overflow, keeping %r", self.memory)
            return self.display()

        self.memory = total
        logger.debug("Memory register now %r", self.memory)
        # The next digit starts a fresh operand, like after '='
        self.replace_operand = True
        return self.display()
