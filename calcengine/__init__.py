"""Expression evaluation and history engine for a calculator screen."""

from .config import Settings, load_settings
from .evaluator import (
    DivisionByZeroError,
    Err,
    ErrorKind,
    EvalError,
    MathError,
    Ok,
    ParseError,
    UnknownNameError,
    compute,
    evaluate,
    format_result,
)
from .history import HistoryEntry, HistoryLedger
from .log import configure_logging
from .session import CalculatorSession

__all__ = [
    "CalculatorSession",
    "DivisionByZeroError",
    "Err",
    "ErrorKind",
    "EvalError",
    "HistoryEntry",
    "HistoryLedger",
    "MathError",
    "Ok",
    "ParseError",
    "Settings",
    "UnknownNameError",
    "compute",
    "configure_logging",
    "evaluate",
    "format_result",
    "load_settings",
]

__version__ = "0.1.0"
