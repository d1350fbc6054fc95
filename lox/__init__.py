from .errors import Diagnostic, LoxError, LoxRuntimeError, Phase
from .lox import Lox, RunResult

__all__ = ["Diagnostic", "Lox", "LoxError", "LoxRuntimeError", "Phase", "RunResult"]
