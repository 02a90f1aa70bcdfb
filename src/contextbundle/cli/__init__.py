"""
CLI support: output mode and machine-aware printing.
"""

from .config import CLIConfig
from .output import echo, get_console, print_error, print_json, print_metric

__all__ = [
    "CLIConfig",
    "echo",
    "get_console",
    "print_error",
    "print_json",
    "print_metric",
]
