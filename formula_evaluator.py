"""Parseo y evaluación de expresiones para la calculadora científica."""

import logging
import math
import random
from dataclasses import dataclass

from expression_normalizer import (
    COMMA,
    CONST,
    LPAREN,
    NAME,
    NUMBER,
    OP,
    RPAREN,
    Token,
    normalize,
    tokenize_expression,
)

logger = logging.getLogger(__name__)

RADIANS = "rad"
DEGREES = "deg"


def factorial(n):
    """Factorial iterativo en coma flotante.

    Devuelve NaN para negativos y ``inf`` si el producto desborda; quien
    llama decide que ambos son un error.
    """
    if n < 0:
        return math.nan
    if n != int(n):
        raise ValueError("factorial requiere un entero")
    if n in (0, 1):
        return 1.0

    result = 1.0
    for i in range(2, int(n) + 1):
        result *= i
        if math.isinf(result):
            break
    return result


class PythonMathProvider:
    """Provee funciones y constantes matemáticas en un namespace cerrado."""

    def __init__(self, angle_mode: str = RADIANS):
        self._angle_mode = RADIANS
        self.angle_mode = angle_mode

    @property
    def angle_mode(self) -> str:
        return self._angle_mode

    @angle_mode.setter
    def angle_mode(self, mode: str):
        if mode not in (RADIANS, DEGREES):
            raise ValueError("El modo debe ser 'rad' o 'deg'")
        self._angle_mode = mode

    def build_namespace(self) -> dict:
        to_radians = math.pi / 180 if self._angle_mode == DEGREES else 1
        from_radians = 180 / math.pi if self._angle_mode == DEGREES else 1

        def _trig(fn):
            def w(x):
                return fn(x * to_radians)

            return w

        def _inv_trig(fn):
            def w(x):
                return fn(x) * from_radians

            return w

        return {
            "PI": math.pi,
            "E": math.e,
            "factorial": factorial,
            "sin": _trig(math.sin),
            "cos": _trig(math.cos),
            "tan": _trig(math.tan),
            "asin": _inv_trig(math.asin),
            "acos": _inv_trig(math.acos),
            "atan": _inv_trig(math.atan),
            "sinh": math.sinh,
            "cosh": math.cosh,
            "tanh": math.tanh,
            "ln": math.log,
            "log": math.log10,
            "sqrt": math.sqrt,
            # Se llama en cada evaluación del nodo; no se cachea
            "rand": random.random,
        }


# ═════════════════════════════════════════════════════════════════
#  Árbol de la expresión
# ═════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class NumberNode:
    value: float


@dataclass(frozen=True)
class ConstantNode:
    name: str


@dataclass(frozen=True)
class UnaryOpNode:
    op: str
    operand: object


@dataclass(frozen=True)
class BinaryOpNode:
    op: str
    left: object
    right: object


@dataclass(frozen=True)
class CallNode:
    name: str
    args: tuple


class Parser:
    """Descenso recursivo sobre la forma canónica.

    Gramática (de menor a mayor precedencia)::

        expr  := term (('+' | '-') term)*
        term  := unary (('*' | '/') unary)*
        unary := ('+' | '-') unary | power
        power := atom ('**' unary)?
        atom  := NUMBER | CONST | NAME '(' [expr (',' expr)*] ')' | '(' expr ')'
    """

    def __init__(self, tokens: list[Token]):
        self._tokens = tokens
        self._pos = 0

    @classmethod
    def parse_text(cls, canonical: str):
        return cls(tokenize_expression(canonical)).parse()

    def parse(self):
        if not self._tokens:
            raise ValueError("Expresión vacía")
        node = self._expr()
        if self._peek() is not None:
            raise ValueError(f"Token inesperado: {self._peek().text}")
        return node

    # ── Utilidades ───────────────────────────────────────────────

    def _peek(self):
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def _advance(self) -> Token:
        tok = self._peek()
        if tok is None:
            raise ValueError("Expresión incompleta")
        self._pos += 1
        return tok

    def _accept_op(self, *ops):
        tok = self._peek()
        if tok is not None and tok.kind == OP and tok.text in ops:
            self._pos += 1
            return tok.text
        return None

    def _expect(self, kind: str, message: str):
        tok = self._peek()
        if tok is None or tok.kind != kind:
            raise ValueError(message)
        self._pos += 1
        return tok

    # ── Reglas ───────────────────────────────────────────────────

    def _expr(self):
        node = self._term()
        while True:
            op = self._accept_op("+", "-")
            if op is None:
                return node
            node = BinaryOpNode(op, node, self._term())

    def _term(self):
        node = self._unary()
        while True:
            op = self._accept_op("*", "/")
            if op is None:
                return node
            node = BinaryOpNode(op, node, self._unary())

    def _unary(self):
        op = self._accept_op("+", "-")
        if op is not None:
            return UnaryOpNode(op, self._unary())
        return self._power()

    def _power(self):
        base = self._atom()
        if self._accept_op("**"):
            # Asociativa por la derecha: 2**3**2 == 2**9
            return BinaryOpNode("**", base, self._unary())
        return base

    def _atom(self):
        tok = self._advance()

        if tok.kind == NUMBER:
            return NumberNode(float(tok.text))

        if tok.kind == CONST:
            return ConstantNode(tok.text)

        if tok.kind == NAME:
            self._expect(LPAREN, f"Falta '(' después de {tok.text}")
            return CallNode(tok.text, self._arguments())

        if tok.kind == LPAREN:
            node = self._expr()
            self._expect(RPAREN, "Falta ')'")
            return node

        raise ValueError(f"Token inesperado: {tok.text}")

    def _arguments(self) -> tuple:
        args = []
        tok = self._peek()
        if tok is not None and tok.kind == RPAREN:
            self._pos += 1
            return ()

        args.append(self._expr())
        while self._peek() is not None and self._peek().kind == COMMA:
            self._pos += 1
            args.append(self._expr())
        self._expect(RPAREN, "Falta ')'")
        return tuple(args)


# ═════════════════════════════════════════════════════════════════
#  Evaluador
# ═════════════════════════════════════════════════════════════════

class FormulaEvaluator:
    """Transforma expresiones de UI y evalúa su valor numérico.

    Errores:
        ValueError: sintaxis, identificador desconocido o dominio.
        ZeroDivisionError: división por cero.
        OverflowError: resultado demasiado grande.
    """

    def __init__(self, provider: PythonMathProvider):
        self._provider = provider

    def evaluate(self, expression: str) -> float:
        if not expression or not expression.strip():
            raise ValueError("Expresión vacía")

        canonical = normalize(expression)
        logger.debug("normalizado %r -> %r", expression, canonical)

        tree = Parser.parse_text(canonical)
        namespace = self._provider.build_namespace()
        return self._interpret(tree, namespace)

    def _interpret(self, node, namespace: dict) -> float:
        if isinstance(node, NumberNode):
            return node.value

        if isinstance(node, ConstantNode):
            value = namespace.get(node.name)
            if value is None or callable(value):
                raise ValueError(f"Identificador no permitido: {node.name}")
            return value

        if isinstance(node, UnaryOpNode):
            value = self._interpret(node.operand, namespace)
            return -value if node.op == "-" else value

        if isinstance(node, BinaryOpNode):
            # Las cadenas a+b+c... crecen por la izquierda: se recorren sin
            # recursión para no depender de su longitud
            pending = []
            while isinstance(node, BinaryOpNode) and node.op != "**":
                pending.append((node.op, node.right))
                node = node.left
            value = self._interpret(node, namespace)
            for op, right in reversed(pending):
                value = self._apply_binary(op, value, self._interpret(right, namespace))
            return value

        if isinstance(node, CallNode):
            fn = namespace.get(node.name)
            if fn is None:
                raise ValueError(f"Identificador no permitido: {node.name}")
            if not callable(fn):
                raise ValueError(f"{node.name} no es una función")
            args = [self._interpret(arg, namespace) for arg in node.args]
            try:
                return fn(*args)
            except TypeError as exc:
                raise ValueError(
                    f"Número de argumentos inválido para {node.name}"
                ) from exc

        raise ValueError(f"Nodo desconocido: {node!r}")

    @staticmethod
    def _apply_binary(op: str, left: float, right: float) -> float:
        if op == "+":
            return left + right
        if op == "-":
            return left - right
        if op == "*":
            return left * right
        if op == "/":
            return left / right
        if op == "**":
            # math.pow no produce complejos y desborda con OverflowError
            return math.pow(left, right)
        raise ValueError(f"Operador desconocido: {op}")
