"""
Normalización de expresiones escritas en la calculadora.

Convierte la notación de la interfaz (×, ÷, π, e, %, √, ^, !, multiplicación
implícita) en la forma canónica que interpreta FormulaEvaluator:

    números, + - * / **, paréntesis, llamadas con nombre, PI y E.

Las reglas se aplican sobre tokens, no sobre texto, así que el orden de las
sustituciones no altera el resultado. La normalización nunca falla: lo que
no se reconoce se copia tal cual y el error aparece al evaluar.
"""

import re
from typing import NamedTuple


NUMBER = "number"
NAME = "name"
CONST = "const"
OP = "op"
LPAREN = "lparen"
RPAREN = "rparen"
COMMA = "comma"
ROOT = "root"
UNKNOWN = "unknown"


class Token(NamedTuple):
    kind: str
    text: str


_TOKEN_RE = re.compile(
    r"""
      (?P<number>[0-9]+\.?[0-9]*|\.[0-9]+)
    | (?P<name>[A-Za-z]+)
    | (?P<pi>π)
    | (?P<op>\*\*|[-+*/^×÷−%!])
    | (?P<lparen>\()
    | (?P<rparen>\))
    | (?P<comma>,)
    | (?P<root>√)
    | (?P<space>\s+)
    | (?P<unknown>.)
    """,
    re.VERBOSE | re.DOTALL,
)

# Nombres que se leen como constantes (e ciega: gana sobre la notación 1e5)
_CONSTANT_NAMES = {"e": "E", "E": "E", "PI": "PI"}

_SYMBOLS = {
    "×": "*",
    "÷": "/",
    "−": "-",
    "^": "**",
    "%": "/100",
}

_SIGNS = {"+", "-", "−"}
_INTEGER_RE = re.compile(r"[0-9]+")


def tokenize_expression(text: str) -> list[Token]:
    """Divide la expresión en tokens; descarta los espacios."""
    tokens = []
    for match in _TOKEN_RE.finditer(text):
        kind = match.lastgroup
        value = match.group()
        if kind == "space":
            continue
        if kind == "pi":
            tokens.append(Token(CONST, "PI"))
        elif kind == NAME and value in _CONSTANT_NAMES:
            tokens.append(Token(CONST, _CONSTANT_NAMES[value]))
        else:
            tokens.append(Token(kind, value))
    return tokens


# ── Reescritura ──────────────────────────────────────────────────

# Cómo empieza y termina cada fragmento emitido; decide la
# multiplicación implícita entre dos fragmentos consecutivos.
_IMPLICIT_MULT = {
    (NUMBER, LPAREN),
    (NUMBER, CONST),
    (RPAREN, NUMBER),
    (RPAREN, LPAREN),
    ("percent", NUMBER),
    ("percent", CONST),
    ("percent", LPAREN),
}


class _Output:
    """Acumula fragmentos canónicos y recuerda cómo terminó el último."""

    def __init__(self):
        self._parts: list[str] = []
        self._last_kind = None

    def emit(self, text: str, start_kind, end_kind):
        if (self._last_kind, start_kind) in _IMPLICIT_MULT:
            self._parts.append("*")
        elif self._parts and self._glues(self._parts[-1], text):
            # Evita fundir dos números o dos nombres en uno solo
            self._parts.append(" ")
        self._parts.append(text)
        self._last_kind = end_kind

    @staticmethod
    def _glues(previous: str, text: str) -> bool:
        left, right = previous[-1], text[0]
        return (left.isalnum() or left == ".") and (right.isalnum() or right == ".")

    def text(self) -> str:
        return "".join(self._parts)


def _is_prefix_position(previous) -> bool:
    if previous is None:
        return True
    if previous.kind in (LPAREN, COMMA):
        return True
    return previous.kind == OP and previous.text not in ("!", "%")


def _integer_factorial_at(tokens: list[Token], index: int) -> bool:
    if index + 1 >= len(tokens):
        return False
    operand, bang = tokens[index], tokens[index + 1]
    return (
        operand.kind == NUMBER
        and _INTEGER_RE.fullmatch(operand.text) is not None
        and bang == Token(OP, "!")
    )


def normalize(raw: str) -> str:
    """Devuelve la forma canónica de ``raw``.

    Es idempotente: ``normalize(normalize(s)) == normalize(s)``.
    """
    tokens = tokenize_expression(raw)
    out = _Output()
    previous = None
    i = 0

    while i < len(tokens):
        tok = tokens[i]

        # -1! → factorial(-1): el signo prefijo pertenece al literal
        if (
            tok.kind == OP
            and tok.text in _SIGNS
            and _is_prefix_position(previous)
            and _integer_factorial_at(tokens, i + 1)
        ):
            sign = _SYMBOLS.get(tok.text, tok.text)
            out.emit(f"factorial({sign}{tokens[i + 1].text})", NUMBER, RPAREN)
            previous = tokens[i + 2]
            i += 3
            continue

        if _integer_factorial_at(tokens, i):
            out.emit(f"factorial({tok.text})", NUMBER, RPAREN)
            previous = tokens[i + 1]
            i += 2
            continue

        if tok.kind == ROOT:
            following = tokens[i + 1] if i + 1 < len(tokens) else None
            if following is not None and following.kind == NUMBER:
                out.emit(f"sqrt({following.text})", NAME, RPAREN)
                previous = following
                i += 2
                continue
            if following is not None and following.kind == LPAREN:
                out.emit("sqrt", NAME, NAME)
            else:
                out.emit(tok.text, UNKNOWN, UNKNOWN)
            previous = tok
            i += 1
            continue

        if tok.kind == OP:
            end_kind = "percent" if tok.text == "%" else OP
            out.emit(_SYMBOLS.get(tok.text, tok.text), OP, end_kind)
        else:
            out.emit(tok.text, tok.kind, tok.kind)

        previous = tok
        i += 1

    return out.text()
