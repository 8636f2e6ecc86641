from calculator_engine import CalculatorEngine
from calculator_session import FUNCTION_KEYS, HISTORY_LIMIT, CalculatorSession
from expression_normalizer import normalize
from formula_evaluator import DEGREES, RADIANS
import sys


def _type(session: CalculatorSession, keys) -> CalculatorSession:
	for key in keys:
		session.press(key)
	return session


def _split_keys(expr: str) -> list[str]:
	"""Divide el texto en pulsaciones; las funciones ya incluyen su "("."""
	names = sorted(FUNCTION_KEYS + ("rand",), key=len, reverse=True)
	keys = []
	i = 0

	while i < len(expr):
		name = next((n for n in names if expr.startswith(n, i)), None)
		if name is None:
			keys.append(expr[i])
			i += 1
			continue
		keys.append(name)
		i += len(name)
		suffix = "()" if name == "rand" else "("
		if expr.startswith(suffix, i):
			i += len(suffix)

	return keys


def _walk(keys, *, angle_mode: str = RADIANS):
	session = CalculatorSession(CalculatorEngine(angle_mode))
	states = []

	for key in keys:
		try:
			session.press(key)
		except ValueError:
			states.append((key, "(ignored)", ""))
			continue
		states.append((key, session.display, session.preview))

	return session, states


def inspect_expression(expr: str, *, angle_mode: str = RADIANS) -> None:
	"""Imprime la forma canónica, el resultado y la vista previa tecla a tecla."""
	outcome = CalculatorEngine(angle_mode).evaluate(expr)
	_, states = _walk(_split_keys(expr), angle_mode=angle_mode)

	print("Expression inspection")
	print(f"expr:        {expr}")
	print(f"canonical:   {normalize(expr)}")
	print(f"angle mode:  {angle_mode}")
	print(f"result:      {outcome.text}")
	print("keystrokes:")
	for key, display, preview in states:
		shown = f"= {preview}" if preview else ""
		print(f"  {key!r:6} {display:<24} {shown}")


def run_regressions() -> None:
	checks: list[tuple[str, bool]] = []
	expected_actual: list[tuple[str, str, str]] = []

	session, states = _walk("3+4")
	checks.append((
		"no preview right after an operator",
		states[1] == ("+", "3+", ""),
	))
	checks.append((
		"preview once the value is complete",
		session.preview == "7",
	))

	_type(session, ["="])
	expected_actual.append(("3+4 =", "7", session.display))
	checks.append(("commit clears preview", session.preview == ""))
	checks.append(("commit records history", str(session.history[0]) == "3+4 = 7"))

	session.select_history(0)
	checks.append(("history seeds the result, not the expression", session.expression == "7"))

	session, _ = _walk(["2", "(", "3", "+", "4", ")", "="])
	expected_actual.append(("2(3+4)", "14", session.display))

	session, _ = _walk(["5", "!", "="])
	expected_actual.append(("5!", "120", session.display))

	session, _ = _walk(["-", "1", "!", "="])
	expected_actual.append(("-1!", "Error", session.display))
	checks.append(("error clears the buffer", session.expression == ""))
	_type(session, ["9"])
	checks.append(("first key after error starts fresh", session.display == "9"))

	session, _ = _walk(["1", "÷", "0", "="])
	expected_actual.append(("1÷0", "Error", session.display))

	session, _ = _walk(["sin", "9", "0", ")", "="], angle_mode=DEGREES)
	expected_actual.append(("sin(90) deg", "1", session.display))

	session = CalculatorSession()
	_type(session, ["sin", "9", "0", ")"])
	radians_preview = session.preview
	session.toggle_angle_mode()
	checks.append((
		"angle toggle changes the live preview",
		radians_preview != session.preview and session.preview == "1",
	))

	session = CalculatorSession()
	session.toggle_shift()
	session.press_function("sin")
	session.press_function("ln")
	checks.append(("2nd stays on after use", session.expression == "asin(sinh("))

	session = CalculatorSession()
	for n in range(60):
		_type(session, [str(n % 10), "+", "1", "="])
		session.press("AC")
	checks.append(("history capped", len(session.history) == HISTORY_LIMIT))
	checks.append(("newest first", str(session.history[0]) == "9+1 = 10"))

	failed = [name for name, ok in checks if not ok]
	for name, ok in checks:
		print(f"{name}: {'OK' if ok else 'FAIL'}")

	print("\nExpected vs Actual:")
	for label, expected, actual in expected_actual:
		status = "OK" if expected == actual else "FAIL"
		print(f"- {label}: {status}")
		print(f"  expected: {expected}")
		print(f"  actual:   {actual}")
		if expected != actual:
			failed.append(label)

	if failed:
		print("\nFAILED CHECKS:")
		for name in failed:
			print(f"- {name}")
		raise SystemExit(1)

	print("\nAll regression checks passed.")


if __name__ == "__main__":
	# Uso rápido:
	#   python regression_session_checks.py
	#   python regression_session_checks.py --inspect "2(3+4)"
	#   python regression_session_checks.py --inspect "sin(90)" --deg
	if "--inspect" in sys.argv:
		try:
			expr = sys.argv[sys.argv.index("--inspect") + 1]
		except (ValueError, IndexError):
			raise SystemExit("Missing expression after --inspect")

		inspect_expression(
			expr,
			angle_mode=DEGREES if "--deg" in sys.argv else RADIANS,
		)
	else:
		run_regressions()
