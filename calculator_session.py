"""
Sesión de la calculadora: búfer de expresión, historial y modos.

Traduce las pulsaciones (del teclado en pantalla o del físico) en cambios
del búfer, calcula la vista previa en vivo y registra el historial al
pulsar '='. La interfaz solo pinta ``render()`` después de cada evento.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from calculator_engine import ERROR_TEXT, CalculatorEngine
from formula_evaluator import DEGREES, RADIANS

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50

# Últimos caracteres que completan un valor; solo entonces hay vista previa
PREVIEW_TRIGGERS = frozenset("0123456789).!%eπ")

FUNCTION_KEYS = (
    "sin", "cos", "tan",
    "asin", "acos", "atan",
    "sinh", "cosh", "tanh",
    "ln", "log", "√",
)

VALUE_KEYS = frozenset("0123456789+-×÷^!%().πe")

# Tecla principal → función que inserta con 2nd activo
SHIFTED_FUNCTIONS = {
    "sin": "asin",
    "cos": "acos",
    "tan": "atan",
    "ln": "sinh",
    "log": "cosh",
    "√": "tanh",
}

_KEYBOARD_ALIASES = {
    "*": "×",
    "/": "÷",
    "Enter": "=",
    "Return": "=",
    "KP_Enter": "=",
    "\r": "=",
    "=": "=",
    "Backspace": "DEL",
    "BackSpace": "DEL",
    "\b": "DEL",
    "Escape": "AC",
    "\x1b": "AC",
}
_KEYBOARD_PASSTHROUGH = frozenset("0123456789+-().^!%")


def translate_key(key: str) -> Optional[str]:
    """Traduce una tecla física al vocabulario de ``press``.

    Devuelve None si la tecla no tiene significado para la calculadora.
    """
    if key in _KEYBOARD_PASSTHROUGH:
        return key
    return _KEYBOARD_ALIASES.get(key)


@dataclass(frozen=True)
class HistoryEntry:
    expression_text: str
    result_text: str

    def __str__(self) -> str:
        return f"{self.expression_text} = {self.result_text}"


@dataclass(frozen=True)
class SessionSnapshot:
    """Estado visible tras una transición."""

    expression: str
    display: str
    preview: str
    shift: bool
    angle_mode: str
    history: tuple


class CalculatorSession:
    """Controlador de la calculadora, independiente de la interfaz."""

    def __init__(self, engine=None):
        self.engine = engine if engine is not None else CalculatorEngine()
        self.expression = ""
        self.preview = ""
        self.history: list[HistoryEntry] = []
        self.is_error = False
        self.shift = False

    # ── Estado visible ───────────────────────────────────────────

    @property
    def angle_mode(self) -> str:
        return self.engine.angle_mode

    @property
    def display(self) -> str:
        if self.is_error:
            return ERROR_TEXT
        return self.expression or "0"

    def render(self) -> SessionSnapshot:
        return SessionSnapshot(
            expression=self.expression,
            display=self.display,
            preview=self.preview,
            shift=self.shift,
            angle_mode=self.angle_mode,
            history=tuple(self.history),
        )

    # ── Entrada ──────────────────────────────────────────────────

    def press(self, key: str):
        """Aplica una tecla del vocabulario de la calculadora."""
        was_error = self.is_error
        self.is_error = False

        if key == "AC":
            self.expression = ""
            self.preview = ""
            return

        if key == "DEL":
            self.expression = self.expression[:-1]
            self._refresh_preview()
            return

        if key == "=":
            self._commit()
            return

        if key in FUNCTION_KEYS:
            self._start_or_append(f"{key}(", was_error)
        elif key == "rand":
            self._start_or_append("rand()", was_error)
        elif key in VALUE_KEYS:
            if self.expression == "0" and key != ".":
                self.expression = key
            elif was_error:
                self.expression = key
            else:
                self.expression += key
        else:
            self.is_error = was_error
            raise ValueError(f"Tecla desconocida: {key}")

        self._refresh_preview()

    def press_function(self, primary: str):
        """Pulsa la tecla de función ``primary`` respetando 2nd."""
        name = SHIFTED_FUNCTIONS.get(primary, primary) if self.shift else primary
        self.press(name)

    def press_keyboard(self, key: str) -> bool:
        """Adaptador del teclado físico; devuelve si la tecla se usó."""
        translated = translate_key(key)
        if translated is None:
            return False
        self.press(translated)
        return True

    def _start_or_append(self, text: str, was_error: bool):
        if self.expression == "0" or was_error:
            self.expression = text
        else:
            self.expression += text

    def _commit(self):
        if not self.expression:
            return

        outcome = self.engine.evaluate(self.expression)
        if not outcome.ok:
            logger.debug("'=' falló para %r", self.expression)
            self.is_error = True
            self.expression = ""
            self.preview = ""
            return

        entry = HistoryEntry(self.expression, outcome.text)
        self.history.insert(0, entry)
        del self.history[HISTORY_LIMIT:]
        logger.info("historial: %s", entry)

        self.expression = outcome.text
        self.preview = ""

    # ── Vista previa en vivo ─────────────────────────────────────

    def _refresh_preview(self):
        if not self.expression or self.expression[-1] not in PREVIEW_TRIGGERS:
            self.preview = ""
            return

        outcome = self.engine.evaluate(self.expression)
        # Los fallos durante la escritura no se muestran
        self.preview = outcome.text if outcome.ok else ""

    # ── Modos ────────────────────────────────────────────────────

    def toggle_shift(self):
        self.shift = not self.shift

    def toggle_angle_mode(self):
        if self.engine.angle_mode == RADIANS:
            self.engine.angle_mode = DEGREES
        else:
            self.engine.angle_mode = RADIANS
        self._refresh_preview()

    # ── Historial ────────────────────────────────────────────────

    def select_history(self, index: int):
        """Siembra el búfer con el resultado de la entrada ``index``."""
        entry = self.history[index]
        self.is_error = False
        self.expression = entry.result_text
        self._refresh_preview()

    def clear_history(self):
        self.history.clear()
