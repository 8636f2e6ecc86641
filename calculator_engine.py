"""
Motor de cálculo para la calculadora científica.

Este módulo provee la clase CalculatorEngine, la frontera entre el
evaluador (que lanza excepciones) y la sesión (que solo distingue entre
número y error).

Contrato de interfaz:
    - evaluate(expression: str) -> EvaluationOutcome   (nunca lanza)
    - angle_mode: propiedad 'rad' | 'deg'
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from formula_evaluator import RADIANS, FormulaEvaluator, PythonMathProvider

logger = logging.getLogger(__name__)

ERROR_TEXT = "Error"
DECIMAL_PLACES = 10


@dataclass(frozen=True)
class EvaluationOutcome:
    """Resultado etiquetado: número finito o error, sin estados intermedios."""

    ok: bool
    value: Optional[float] = None
    text: str = ERROR_TEXT

    @classmethod
    def error(cls) -> "EvaluationOutcome":
        return cls(ok=False)


class CalculatorEngine:
    """Evalúa expresiones matemáticas con funciones científicas."""

    def __init__(self, angle_mode: str = RADIANS):
        self._provider = PythonMathProvider(angle_mode)
        self._evaluator = FormulaEvaluator(self._provider)

    # ── Propiedad: modo angular ──────────────────────────────────

    @property
    def angle_mode(self) -> str:
        return self._provider.angle_mode

    @angle_mode.setter
    def angle_mode(self, mode: str):
        self._provider.angle_mode = mode

    # ── Evaluación principal ─────────────────────────────────────

    def evaluate(self, expression: str) -> EvaluationOutcome:
        """Evalúa la expresión; todo fallo se reduce a un único Error."""
        try:
            value = self._evaluator.evaluate(expression)
        except (ValueError, ArithmeticError, TypeError, RecursionError) as exc:
            logger.debug("error evaluando %r: %s", expression, exc)
            return EvaluationOutcome.error()

        if not isinstance(value, (int, float)) or not math.isfinite(value):
            logger.debug("resultado no finito para %r: %r", expression, value)
            return EvaluationOutcome.error()

        return EvaluationOutcome(ok=True, value=value, text=self.format_result(value))

    # ── Formato del resultado ────────────────────────────────────

    @staticmethod
    def format_result(value: float) -> str:
        """Redondea a 10 decimales y quita los ceros sobrantes.

        Nunca usa notación científica.
        """
        text = f"{value:.{DECIMAL_PLACES}f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        if text in ("-0", ""):
            return "0"
        return text


def evaluate(expression: str, angle_mode: str = RADIANS) -> EvaluationOutcome:
    """Atajo: evalúa una expresión con un motor nuevo en el modo indicado."""
    return CalculatorEngine(angle_mode).evaluate(expression)
