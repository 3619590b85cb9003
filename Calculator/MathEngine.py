# MathEngine.py
"""""
Expression engine for the calculator.

Pipeline
--------
1) Tokenizer: converts a raw input string into a flat list of Tokens, then
   rewrites unary minus so every operator position is binary.
2) Shunting-yard: reorders the infix Tokens into postfix (RPN) order.
3) Evaluator: walks the postfix Tokens with a float stack.
4) Formatter: renders a float for the primary display.

The evaluator never raises for arithmetic faults. Division by zero and
malformed input produce NaN, and it is up to the caller to treat a
non-finite result as an error (see calculate()).
"""""

import logging
import math
from decimal import Decimal, ROUND_HALF_EVEN
from enum import Enum

from . import error as E

logger = logging.getLogger(__name__)

# Fixed text shown in the primary display for any failed calculation
ERROR_TEXT = "Error"

# Canonical operator symbols. ASCII spellings are folded onto these at scan time.
PLUS = "+"
MINUS = "−"
TIMES = "×"
DIVIDE = "÷"

OPERATOR_ALIASES = {
    "+": PLUS,
    "-": MINUS,
    "−": MINUS,
    "×": TIMES,
    "*": TIMES,
    "÷": DIVIDE,
    "/": DIVIDE,
}

PRECEDENCE = {PLUS: 1, MINUS: 1, TIMES: 2, DIVIDE: 2}

NUMBER_CHARS = "0123456789."

# Display formatter limits
PLAIN_MIN = 1e-6
PLAIN_MAX = 1e12
MAX_PLAIN_LENGTH = 18
CAPPED_SIGNIFICANT_DIGITS = 16
EXPONENT_DIGITS = 8


def canonical_operator(symbol):
    """Return the canonical spelling of an operator, or None if unknown."""
    return OPERATOR_ALIASES.get(symbol)


# -----------------------------
# Token types
# -----------------------------

class TokenType(Enum):
    NUMBER = "number"
    OPERATOR = "operator"
    LEFT_PAREN = "left_paren"
    RIGHT_PAREN = "right_paren"


class Token:
    """A single lexical unit.

    Numbers keep the text they were scanned from; it is only parsed to a
    float by the evaluator.
    """
    def __init__(self, kind, text):
        self.kind = kind
        self.text = text

    @property
    def precedence(self):
        return PRECEDENCE.get(self.text, 0)

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return self.kind == other.kind and self.text == other.text

    def __hash__(self):
        return hash((self.kind, self.text))

    def __repr__(self):
        if self.kind == TokenType.NUMBER:
            return f"Number({self.text!r})"
        elif self.kind == TokenType.OPERATOR:
            return f"Operator({self.text!r})"
        elif self.kind == TokenType.LEFT_PAREN:
            return "LeftParen"
        return "RightParen"


def number(text):
    return Token(TokenType.NUMBER, text)


def operator(symbol):
    canonical = canonical_operator(symbol)
    if canonical is None:
        raise E.CalculationError(f"{symbol}", code="3004")
    return Token(TokenType.OPERATOR, canonical)


LEFT_PAREN = Token(TokenType.LEFT_PAREN, "(")
RIGHT_PAREN = Token(TokenType.RIGHT_PAREN, ")")


# -----------------------------
# Tokenizer
# -----------------------------

def scan(source):
    """Convert a raw input string into a token list (numbers, operators, parens).

    A number is a maximal run of digits and '.', but scanning stops in front
    of a second '.', which then starts the next token.
    """
    tokens = []
    b = 0

    while b < len(source):
        current_char = source[b]

        # --- Numbers: digits and decimal separator ---
        if current_char in NUMBER_CHARS:
            str_number = current_char
            has_dot = current_char == "."

            while b + 1 < len(source) and source[b + 1] in NUMBER_CHARS:
                if source[b + 1] == ".":
                    if has_dot:
                        break
                    has_dot = True
                b += 1
                str_number += source[b]

            tokens.append(number(str_number))

        # --- Whitespace (ignored) ---
        elif current_char.isspace():
            pass

        # --- Parentheses ---
        elif current_char == "(":
            tokens.append(LEFT_PAREN)
        elif current_char == ")":
            tokens.append(RIGHT_PAREN)

        # --- Operators ---
        elif canonical_operator(current_char) is not None:
            tokens.append(operator(current_char))

        else:
            raise E.SyntaxError(f"'{current_char}' at position {b}", code="3011", equation=source)

        b += 1

    return tokens


def normalize_unary_minus(tokens):
    """Rewrite each unary '−' as '0 −'.

    A minus is unary when it is the first token or follows an operator or a
    '('. The check looks at the previously emitted token, so it has to run
    after scanning.
    """
    normalized = []
    for token in tokens:
        if token.kind == TokenType.OPERATOR and token.text == MINUS:
            previous = normalized[-1] if normalized else None
            if previous is None or previous.kind in (TokenType.OPERATOR, TokenType.LEFT_PAREN):
                normalized.append(number("0"))
        normalized.append(token)
    return normalized


def tokenize(source):
    """Scan source and normalize unary minus. Raises error.SyntaxError."""
    tokens = normalize_unary_minus(scan(source))
    logger.debug("Tokens for %r: %s", source, tokens)
    return tokens


# -----------------------------
# Shunting-yard converter
# -----------------------------

def to_postfix(tokens):
    """Reorder infix tokens into postfix order.

    Mismatched parentheses are tolerated so a half-typed expression still
    evaluates: an unmatched ')' is dropped and unmatched '(' are discarded
    when the stack is flushed.
    """
    output = []
    stack = []

    for token in tokens:
        if token.kind == TokenType.NUMBER:
            output.append(token)

        elif token.kind == TokenType.OPERATOR:
            # Equal precedence pops too: all operators are left-associative
            while stack and stack[-1].kind == TokenType.OPERATOR and stack[-1].precedence >= token.precedence:
                output.append(stack.pop())
            stack.append(token)

        elif token.kind == TokenType.LEFT_PAREN:
            stack.append(token)

        elif token.kind == TokenType.RIGHT_PAREN:
            while stack and stack[-1].kind != TokenType.LEFT_PAREN:
                output.append(stack.pop())
            if stack:
                stack.pop()

    while stack:
        token = stack.pop()
        if token.kind == TokenType.OPERATOR:
            output.append(token)

    return output


def render_postfix(tokens):
    """Render a token list as space separated text, e.g. '2 3 4 × +'."""
    return " ".join(token.text for token in tokens)


# -----------------------------
# RPN evaluator
# -----------------------------

def parse_number(text):
    """Parse a scanned number; text that is not a number (e.g. '.') gives NaN."""
    try:
        return float(text)
    except ValueError:
        return math.nan


def apply_operator(symbol, a, b):
    """Apply a binary operator. Division by zero returns NaN instead of raising."""
    if symbol == PLUS:
        return a + b
    elif symbol == MINUS:
        return a - b
    elif symbol == TIMES:
        return a * b
    elif symbol == DIVIDE:
        if b == 0:
            return math.nan
        return a / b
    raise E.CalculationError(f"{symbol}", code="3004")


def evaluate(postfix, faults=None):
    """Evaluate postfix tokens and return a float.

    Returns NaN for division by zero and for malformed input (an operator
    without two operands, or anything other than exactly one value left on
    the stack). If a list is passed as faults, the error code of each fault
    is appended to it.
    """
    stack = []

    for token in postfix:
        if token.kind == TokenType.NUMBER:
            stack.append(parse_number(token.text))

        elif token.kind == TokenType.OPERATOR:
            if len(stack) < 2:
                logger.debug("Operator %s is missing an operand", token.text)
                if faults is not None:
                    faults.append("3012")
                return math.nan

            b = stack.pop()
            a = stack.pop()
            if token.text == DIVIDE and b == 0 and faults is not None:
                faults.append("3003")
            stack.append(apply_operator(token.text, a, b))

    if len(stack) != 1:
        logger.debug("Stack holds %d values after evaluation", len(stack))
        if faults is not None:
            faults.append("3012")
        return math.nan

    return stack[0]


# -----------------------------
# Display formatter
# -----------------------------

def plain_decimal(n):
    """Shortest round-trip digits of n, written without an exponent."""
    if n == 0:
        return "0"
    if n.is_integer():
        return str(int(n))
    # repr() gives the shortest string that round-trips; Decimal expands it positionally
    return format(Decimal(repr(n)), "f")


def significant_decimal(n, digits):
    """Round n to the given number of significant digits, without an exponent."""
    value = Decimal(repr(n))
    places = digits - 1 - value.adjusted()
    rounded = value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_EVEN)
    text = format(rounded, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_number(n):
    """Render a result for the primary display.

    - non-finite: ERROR_TEXT
    - zero or 1e-6 <= |n| < 1e12: plain decimal, capped to 16 significant
      digits once it gets longer than 18 characters
    - anything else: scientific notation with 8 significant digits
    """
    if not math.isfinite(n):
        return ERROR_TEXT

    magnitude = abs(n)
    if magnitude != 0 and not (PLAIN_MIN <= magnitude < PLAIN_MAX):
        return f"{n:.{EXPONENT_DIGITS - 1}e}"

    text = plain_decimal(n)
    if len(text) > MAX_PLAIN_LENGTH:
        text = significant_decimal(n, CAPPED_SIGNIFICANT_DIGITS)
    return text


# -----------------------------
# Public entry point
# -----------------------------

def calculate(problem):
    """Main API: tokenize → postfix → evaluate.

    Raises error.SyntaxError for unknown characters and
    error.CalculationError when the result is not finite.
    """
    tokens = tokenize(problem)
    postfix = to_postfix(tokens)
    logger.debug("Postfix: %s", render_postfix(postfix))

    faults = []
    result = evaluate(postfix, faults)

    if math.isinf(result):
        raise E.CalculationError("Number too big.", code="3026", equation=problem)
    if math.isnan(result):
        code = faults[0] if faults else "3012"
        if code == "3003":
            raise E.CalculationError("Division by zero", code=code, equation=problem)
        raise E.CalculationError(f"{problem}", code=code, equation=problem)

    logger.debug("Result for %r: %r", problem, result)
    return result


def test_main():
    """Simple REPL-like runner for manual testing of the engine."""
    print("Enter the problem: ")
    problem = input()
    try:
        print(format_number(calculate(problem)))
    except E.MathError as e:
        print(E.describe(e))


if __name__ == "__main__":
    # Allow running this module directly for quick CLI tests:
    #   python -m Calculator.MathEngine
    logging.basicConfig(level=logging.DEBUG)
    test_main()
