# error.py
"""""
Error types raised by the calculator engine.

Every error carries a 4-digit code (see ERROR_MESSAGES) and, once known, the
expression that produced it.
"""""


class MathError(Exception):
    def __init__(self, message, code="9999", equation=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.equation = equation

class SyntaxError(MathError):
    pass

class CalculationError(MathError):
    pass



Error_Dictionary= {

    "1" : "Missing Files",
    "3" : "Calculator Error",
    "4" : "UI Error",
    "5" : "Configuration Error",
    "9" : "Unexpected Error"

}

#Error Messages are structured in:
# 1. Digit: Main Error
# 2. Digit: Specification
# 3. and 4. Digit: Error Number



ERROR_MESSAGES = {
    "1000" : "Required file missing: ", # + File name

    "3003" : "Division by Zero",
    "3004" : "Invalid Operator: ", # + operator
    "3011" : "Unexpected Token: ", # + Token
    "3012" : "Invalid equation: ", # + Equation
    "3026" : "Number too big.",

    "4001" : "Clipboard does not contain a number.",

    "4501" : "Not all Settings could be saved: ", # + Error raising setting
    "4502" : "Setting out of range: ", # + Setting name

    "9999" : "Unexpected Error: " #+error
}


def describe(error):
    """Return the catalogue text for a MathError.

    Entries ending in ": " expect the error details appended.
    """
    base = ERROR_MESSAGES.get(error.code, ERROR_MESSAGES["9999"])
    if base.endswith(": "):
        return f"Error {error.code}: {base}{error.message}"
    return f"Error {error.code}: {base}"
