"""
Interfaz gráfica de la calculadora científica.

Usa tkinter. Toda la lógica vive en CalculatorSession; la ventana solo
traduce eventos en pulsaciones y vuelve a pintar el estado resultante.
"""

import tkinter as tk
from tkinter import font as tkfont

from calculator_session import SHIFTED_FUNCTIONS, CalculatorSession
from formula_evaluator import RADIANS


# ═════════════════════════════════════════════════════════════════
#  Aplicación principal
# ═════════════════════════════════════════════════════════════════

class CalculatorApp:
    """Ventana principal de la calculadora científica."""

    # ── Paleta de colores ────────────────────────────────────────
    C = {
        "bg":         "#1E1E2E",
        "display_bg": "#181825",
        "num":        "#313244",
        "num_fg":     "#CDD6F4",
        "op":         "#F38BA8",
        "op_fg":      "#1E1E2E",
        "func":       "#45475A",
        "func_fg":    "#CDD6F4",
        "special":    "#585B70",
        "special_fg": "#CDD6F4",
        "equals":     "#89B4FA",
        "equals_fg":  "#1E1E2E",
        "toggle_on":  "#A6E3A1",
        "expr_fg":    "#BAC2DE",
        "result_fg":  "#CDD6F4",
        "error_fg":   "#F38BA8",
        "preview_fg": "#89B4FA",
    }

    # ── Etiquetas de las funciones con 2nd activo ────────────────
    SHIFTED_LABELS = {
        "sin": "sin⁻¹",
        "cos": "cos⁻¹",
        "tan": "tan⁻¹",
        "ln":  "sinh",
        "log": "cosh",
        "√": "tanh",
    }

    # ── Definiciones del teclado ──────────────────────────────────
    #  Cada fila es una lista de (texto, acción, tipo_color, colspan, rowspan)
    #  acción: "key:<tecla>", "func:<función>", "shift"

    KEYPAD = [
        [("2nd", "shift", "special", 1, 1), ("RND", "key:rand", "func", 1, 1),
         ("e", "key:e", "func", 1, 1), ("AC", "key:AC", "special", 1, 1),
         ("DEL", "key:DEL", "special", 1, 1)],

        [("sin", "func:sin", "func", 1, 1), ("cos", "func:cos", "func", 1, 1),
         ("tan", "func:tan", "func", 1, 1), ("xʸ", "key:^", "func", 1, 1),
         ("÷", "key:÷", "op", 1, 1)],

        [("ln", "func:ln", "func", 1, 1), ("log", "func:log", "func", 1, 1),
         ("√", "func:√", "func", 1, 1), ("x!", "key:!", "func", 1, 1),
         ("×", "key:×", "op", 1, 1)],

        [("π", "key:π", "func", 1, 1), ("7", "key:7", "num", 1, 1),
         ("8", "key:8", "num", 1, 1), ("9", "key:9", "num", 1, 1),
         ("-", "key:-", "op", 1, 1)],

        [("(", "key:(", "func", 1, 1), ("4", "key:4", "num", 1, 1),
         ("5", "key:5", "num", 1, 1), ("6", "key:6", "num", 1, 1),
         ("+", "key:+", "op", 1, 1)],

        [(")", "key:)", "func", 1, 1), ("1", "key:1", "num", 1, 1),
         ("2", "key:2", "num", 1, 1), ("3", "key:3", "num", 1, 1),
         ("=", "key:=", "equals", 1, 2)],

        [("%", "key:%", "func", 1, 1), ("0", "key:0", "num", 2, 1),
         (".", "key:.", "num", 1, 1)],
    ]

    COLUMNS = 5

    # ────────────────────────────────────────────────────────────

    def __init__(self, root: tk.Tk, session=None):
        self.root = root
        self.root.title("Calculadora Científica")
        self.root.configure(bg=self.C["bg"])

        self.session = session if session is not None else CalculatorSession()
        self._func_buttons: dict[str, tk.Button] = {}

        self._init_fonts()
        self._create_display()
        self._create_toggle_bar()
        body = tk.Frame(self.root, bg=self.C["bg"])
        body.pack(fill="both", expand=True)
        self._create_keypad(body)
        self._create_history_panel(body)
        self._bind_keyboard()

        self._refresh()

    # ── Fuentes ──────────────────────────────────────────────────

    def _init_fonts(self):
        self._f_expr    = tkfont.Font(family="Consolas", size=12)
        self._f_result  = tkfont.Font(family="Consolas", size=26, weight="bold")
        self._f_preview = tkfont.Font(family="Consolas", size=12)
        self._f_btn     = tkfont.Font(family="Segoe UI", size=15)
        self._f_func    = tkfont.Font(family="Segoe UI", size=12)
        self._f_small   = tkfont.Font(family="Segoe UI", size=11)

    # ── Pantalla ─────────────────────────────────────────────────

    def _create_display(self):
        frame = tk.Frame(self.root, bg=self.C["display_bg"], padx=12, pady=8)
        frame.pack(fill="x", padx=6, pady=(6, 2))

        # Fórmula pequeña encima del valor principal
        self.expr_var = tk.StringVar()
        tk.Label(
            frame, textvariable=self.expr_var, font=self._f_expr,
            bg=self.C["display_bg"], fg=self.C["expr_fg"], anchor="e",
        ).pack(fill="x")

        self.display_var = tk.StringVar(value="0")
        self.display_label = tk.Label(
            frame, textvariable=self.display_var, font=self._f_result,
            bg=self.C["display_bg"], fg=self.C["result_fg"], anchor="e",
        )
        self.display_label.pack(fill="x")

        row = tk.Frame(frame, bg=self.C["display_bg"])
        row.pack(fill="x", pady=(2, 0))

        self.preview_var = tk.StringVar()
        tk.Label(
            row, textvariable=self.preview_var, font=self._f_preview,
            bg=self.C["display_bg"], fg=self.C["preview_fg"], anchor="w",
        ).pack(side="left")

        tk.Button(
            row, text="Copiar", font=self._f_small,
            bg=self.C["func"], fg=self.C["func_fg"],
            activebackground=self.C["special"], relief="flat",
            cursor="hand2", command=self._copy_result, padx=8,
        ).pack(side="right")

    # ── Barra de toggles (RAD/DEG) ───────────────────────────────

    def _create_toggle_bar(self):
        frame = tk.Frame(self.root, bg=self.C["bg"])
        frame.pack(fill="x", padx=6, pady=(2, 2))

        self.angle_btn = tk.Button(
            frame, text="RAD", font=self._f_small, width=6,
            bg=self.C["toggle_on"], fg=self.C["bg"],
            activebackground=self.C["toggle_on"], relief="flat",
            command=self._toggle_angle,
        )
        self.angle_btn.pack(side="left", padx=(0, 4))

    # ── Teclado ──────────────────────────────────────────────────

    def _create_keypad(self, parent):
        frame = tk.Frame(parent, bg=self.C["bg"])
        frame.pack(side="left", fill="both", expand=True, padx=6, pady=(2, 6))

        for c in range(self.COLUMNS):
            frame.columnconfigure(c, weight=1, uniform="key")

        occupied: set[tuple[int, int]] = set()
        for r, row_def in enumerate(self.KEYPAD):
            col_pos = 0
            for text, action, kind, colspan, rowspan in row_def:
                # Saltar celdas ocupadas por botones de varias filas
                while (r, col_pos) in occupied:
                    col_pos += 1
                btn = tk.Button(
                    frame, text=text,
                    font=self._f_func if kind == "func" else self._f_btn,
                    bg=self.C[kind], fg=self.C[f"{kind}_fg"],
                    activebackground=self.C["special"], relief="flat",
                    command=lambda a=action: self._on_action(a),
                )
                btn.grid(row=r, column=col_pos, columnspan=colspan,
                         rowspan=rowspan, sticky="nsew", padx=2, pady=2,
                         ipady=8)
                for dr in range(rowspan):
                    for dc in range(colspan):
                        occupied.add((r + dr, col_pos + dc))

                if action == "shift":
                    self.shift_btn = btn
                elif action.startswith("func:"):
                    self._func_buttons[action[5:]] = btn
                col_pos += colspan

        for r in range(len(self.KEYPAD)):
            frame.rowconfigure(r, weight=1)

    # ── Historial ────────────────────────────────────────────────

    def _create_history_panel(self, parent):
        frame = tk.Frame(parent, bg=self.C["display_bg"], padx=6, pady=6)
        frame.pack(side="right", fill="y", padx=(0, 6), pady=(2, 6))

        header = tk.Frame(frame, bg=self.C["display_bg"])
        header.pack(fill="x")
        tk.Label(
            header, text="Historial", font=self._f_small,
            bg=self.C["display_bg"], fg=self.C["expr_fg"],
        ).pack(side="left")
        tk.Button(
            header, text="Borrar", font=self._f_small,
            bg=self.C["func"], fg=self.C["func_fg"],
            activebackground=self.C["special"], relief="flat",
            command=self._clear_history,
        ).pack(side="right")

        self.history_list = tk.Listbox(
            frame, font=self._f_expr, width=24, activestyle="none",
            bg=self.C["display_bg"], fg=self.C["expr_fg"],
            selectbackground=self.C["func"], relief="flat",
            highlightthickness=0,
        )
        self.history_list.pack(fill="both", expand=True, pady=(4, 0))
        self.history_list.bind("<<ListboxSelect>>", self._on_history_select)

    # ── Atajos de teclado ────────────────────────────────────────

    def _bind_keyboard(self):
        self.root.bind("<Key>", self._on_keypress)

    def _on_keypress(self, event):
        # keysym para Return/BackSpace/Escape, char para el resto
        if not self.session.press_keyboard(event.keysym):
            if not event.char or not self.session.press_keyboard(event.char):
                return None
        self._refresh()
        return "break"

    # ── Acciones ─────────────────────────────────────────────────

    def _on_action(self, action: str):
        if action == "shift":
            self.session.toggle_shift()
        elif action.startswith("func:"):
            self.session.press_function(action[5:])
        elif action.startswith("key:"):
            self.session.press(action[4:])
        self._refresh()

    def _on_history_select(self, _event):
        selection = self.history_list.curselection()
        if not selection:
            return
        self.session.select_history(selection[0])
        self._refresh()

    def _clear_history(self):
        self.session.clear_history()
        self._refresh()

    def _toggle_angle(self):
        self.session.toggle_angle_mode()
        self._refresh()

    # ── Repintado ────────────────────────────────────────────────

    def _refresh(self):
        state = self.session.render()

        self.expr_var.set(state.expression)
        self.display_var.set(state.display)
        self.display_label.config(
            fg=self.C["error_fg"] if self.session.is_error else self.C["result_fg"]
        )
        self.preview_var.set(f"= {state.preview}" if state.preview else "")

        if state.angle_mode == RADIANS:
            self.angle_btn.config(text="RAD", bg=self.C["toggle_on"],
                                  fg=self.C["bg"])
        else:
            self.angle_btn.config(text="DEG", bg=self.C["op"],
                                  fg=self.C["op_fg"])

        if state.shift:
            self.shift_btn.config(bg=self.C["toggle_on"], fg=self.C["bg"])
        else:
            self.shift_btn.config(bg=self.C["special"],
                                  fg=self.C["special_fg"])
        for primary, btn in self._func_buttons.items():
            shifted = state.shift and primary in SHIFTED_FUNCTIONS
            btn.config(text=self.SHIFTED_LABELS[primary] if shifted else primary)

        self.history_list.delete(0, tk.END)
        for entry in state.history:
            self.history_list.insert(tk.END, str(entry))

    # ── Copiar resultado ─────────────────────────────────────────

    def _copy_result(self):
        text = self.session.display
        self.root.clipboard_clear()
        self.root.clipboard_append(text)
