"""
Snippet lookup, documentation checks and synthetic snippets.
"""

from .package import SnippetPackage, SnippetModule
from .documentation import id_is_documented
from .synthetic import synthetic_package_snippet, SYNTHETIC_PACKAGE_FILE

__all__ = [
    "SnippetPackage",
    "SnippetModule",
    "id_is_documented",
    "synthetic_package_snippet",
    "SYNTHETIC_PACKAGE_FILE",
]
