"""
Calculator screen state.

Everything the screen needs between keystrokes lives on one
CalculatorSession: the typed buffer, the result being shown, the precision
and scientific-mode settings, whether the history panel is open, and the
history itself. The presentation layer owns the session and calls into it.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .config import PRECISION_CHOICES, Settings
from .evaluator import check_precision, evaluate
from .history import HistoryLedger

logger = logging.getLogger(__name__)

ERROR_MARKER = "Error"

KEYPAD_KEYS = ("7", "8", "9", "4", "5", "6", "1", "2", "3", "0", ".", "/", "*", "-", "+", "%")
SCIENTIFIC_KEYS = ("sin", "cos", "tan", "log", "sqrt", "(", ")")
CLEAR_KEYS = ("C", "AC")


@dataclass
class CalculatorSession:
    settings: Settings = field(default_factory=Settings)
    buffer: str = ""
    result: str = ""
    precision: Optional[int] = None
    scientific_mode: bool = False
    history_visible: bool = False
    ledger: HistoryLedger = field(default_factory=HistoryLedger)

    def __post_init__(self):
        if self.precision is None:
            self.precision = self.settings.precision
        check_precision(self.precision)

    @property
    def display(self) -> str:
        """What the calculator display shows: the result if there is one, else the input."""
        return self.result if self.result != "" else self.buffer

    # -------------------------
    # Keys
    # -------------------------
    def press(self, key: str) -> None:
        if key in CLEAR_KEYS:
            self.clear()
            return
        if key == "=":
            self.equals()
            return
        if key in SCIENTIFIC_KEYS and not self.scientific_mode:
            raise ValueError(f"'{key}' needs scientific mode")
        if key not in KEYPAD_KEYS and key not in SCIENTIFIC_KEYS:
            raise ValueError(f"Unknown key: {key!r}")
        self.buffer += key
        self.result = ""

    def set_buffer(self, text: str) -> None:
        """Replace the input with typed text and drop the shown result."""
        self.buffer = text
        self.result = ""

    def clear(self) -> None:
        self.buffer = ""
        self.result = ""

    def equals(self):
        outcome = evaluate(self.buffer, self.precision, self.settings.max_expression_length)
        logger.debug(f"{self.buffer!r} at precision {self.precision} -> {outcome}")
        if outcome.ok:
            self.result = outcome.value
            self.ledger.record(self.buffer, outcome.value)
        else:
            self.result = ERROR_MARKER
        return outcome

    # -------------------------
    # Settings
    # -------------------------
    def set_precision(self, precision: int) -> None:
        check_precision(precision)
        self.precision = precision

    def toggle_precision(self) -> int:
        low, high = PRECISION_CHOICES
        self.precision = high if self.precision == low else low
        return self.precision

    def toggle_scientific(self) -> bool:
        self.scientific_mode = not self.scientific_mode
        return self.scientific_mode

    # -------------------------
    # History
    # -------------------------
    def toggle_history(self) -> bool:
        self.history_visible = not self.history_visible
        return self.history_visible

    def clear_history(self) -> None:
        self.ledger.clear()

    def reuse_last_result(self) -> None:
        entry = self.ledger.latest()
        if entry is not None:
            self.set_buffer(entry.result)

    def reuse_last_expression(self) -> None:
        entry = self.ledger.latest()
        if entry is not None:
            self.set_buffer(entry.expression)
