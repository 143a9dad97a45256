# backend/tutorverse/services/calculator.py - Arithmetic evaluator used as an LLM tool

"""Evaluate arithmetic expressions without executing code.

Supports ``+ - * /``, exponentiation (``^`` or ``**``, right associative),
unary signs, parentheses and decimal/scientific number literals. Any failure
yields ``NaN`` so a tool-calling model can see the failure and try again.
"""

import logging
import math
import re
from typing import List, Tuple

logger = logging.getLogger(__name__)

NAN = float("nan")
MAX_NESTING = 100

_TOKEN_RE = re.compile(
    r"\s*(?:"
    r"(?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
    r"|(?P<op>\*\*|[-+*/^()])"
    r")"
)


class ExpressionError(ValueError):
    """Raised by the parser for malformed or non-finite expressions"""


def tokenize(expression: str) -> List[Tuple[str, str]]:
    tokens = []
    pos = 0
    text = expression.rstrip()
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match or match.end() == pos:
            raise ExpressionError(f"Unexpected character {text[pos:].lstrip()[:1]!r} at position {pos}")
        if match.group("number") is not None:
            tokens.append(("number", match.group("number")))
        else:
            tokens.append(("op", match.group("op")))
        pos = match.end()
    return tokens


class _Parser:
    """Recursive-descent parser that evaluates while it parses.

    expr  := term (("+" | "-") term)*
    term  := unary (("*" | "/") unary)*
    unary := ("+" | "-") unary | power
    power := atom (("^" | "**") unary)?
    atom  := NUMBER | "(" expr ")"
    """

    def __init__(self, tokens: List[Tuple[str, str]]):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    def _peek(self) -> Tuple[str, str]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return ("end", "")

    def _take(self) -> Tuple[str, str]:
        token = self._peek()
        self.pos += 1
        return token

    def parse(self) -> float:
        if not self.tokens:
            raise ExpressionError("Empty expression")
        value = self._expr()
        kind, text = self._peek()
        if kind != "end":
            raise ExpressionError(f"Unexpected token {text!r}")
        return value

    def _expr(self) -> float:
        value = self._term()
        while self._peek() in (("op", "+"), ("op", "-")):
            _, op = self._take()
            right = self._term()
            value = value + right if op == "+" else value - right
        return value

    def _term(self) -> float:
        value = self._unary()
        while self._peek() in (("op", "*"), ("op", "/")):
            _, op = self._take()
            right = self._unary()
            if op == "*":
                value = value * right
            else:
                if right == 0:
                    raise ExpressionError("Division by zero")
                value = value / right
        return value

    def _unary(self) -> float:
        # every nested sign, exponent and parenthesis passes through here
        self.depth += 1
        if self.depth > MAX_NESTING:
            raise ExpressionError(f"Expression nested deeper than {MAX_NESTING} levels")
        try:
            if self._peek() in (("op", "+"), ("op", "-")):
                _, op = self._take()
                operand = self._unary()
                return operand if op == "+" else -operand
            return self._power()
        finally:
            self.depth -= 1

    def _power(self) -> float:
        base = self._atom()
        if self._peek() in (("op", "^"), ("op", "**")):
            self._take()
            exponent = self._unary()
            try:
                result = base ** exponent
            except (OverflowError, ZeroDivisionError) as e:
                raise ExpressionError(str(e)) from e
            if isinstance(result, complex):
                raise ExpressionError("Complex result")
            return result
        return base

    def _atom(self) -> float:
        kind, text = self._take()
        if kind == "number":
            return float(text)
        if (kind, text) == ("op", "("):
            value = self._expr()
            if self._take() != ("op", ")"):
                raise ExpressionError("Unbalanced parentheses")
            return value
        if kind == "end":
            raise ExpressionError("Unexpected end of expression")
        raise ExpressionError(f"Unexpected token {text!r}")


def evaluate(expression: str) -> float:
    """Evaluate an arithmetic expression, returning NaN on any failure."""
    if not isinstance(expression, str):
        logger.warning(f"Calculator received non-string input: {type(expression).__name__}")
        return NAN

    try:
        result = _Parser(tokenize(expression)).parse()
    except (ExpressionError, RecursionError) as e:
        logger.info(f"🧮 Could not evaluate {expression[:100]!r}: {e}")
        return NAN

    if not math.isfinite(result):
        logger.info(f"🧮 Non-finite result for {expression!r}")
        return NAN

    logger.debug(f"🧮 {expression!r} = {result}")
    return result
