"""Punto de entrada de la calculadora científica.

Uso:
    python main.py            # arranca en radianes
    python main.py --deg      # arranca en grados
    python main.py --verbose  # registro DEBUG en consola
"""

import logging
import sys
import tkinter as tk

from calculator_engine import CalculatorEngine
from calculator_session import CalculatorSession
from calculator_ui import CalculatorApp
from formula_evaluator import DEGREES, RADIANS


WINDOW_GEOMETRY = "720x620"
WINDOW_MIN_SIZE = (640, 560)
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def main():
    logging.basicConfig(
        level=logging.DEBUG if "--verbose" in sys.argv else logging.WARNING,
        format=LOG_FORMAT,
    )

    engine = CalculatorEngine(DEGREES if "--deg" in sys.argv else RADIANS)

    root = tk.Tk()
    root.geometry(WINDOW_GEOMETRY)
    root.minsize(*WINDOW_MIN_SIZE)
    CalculatorApp(root, session=CalculatorSession(engine))
    root.mainloop()


if __name__ == "__main__":
    main()
