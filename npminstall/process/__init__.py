"""
Installation process selection and execution.

This package handles:
1. Reading the build signals and selecting a process
2. Deciding whether a cached layer can be reused
3. Running npm through an executable
"""

from .build_process import BuildProcess, stored_fingerprint
from .executor import Executable, Execution, SubprocessExecutable
from .resolver import BuildSignals, ProcessResolver, Selection, select_process

__all__ = [
    "BuildProcess",
    "BuildSignals",
    "Executable",
    "Execution",
    "ProcessResolver",
    "Selection",
    "SubprocessExecutable",
    "select_process",
    "stored_fingerprint",
]
