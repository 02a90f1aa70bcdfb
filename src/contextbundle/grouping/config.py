"""
Grouping Options Configuration.

Every boolean option can be defaulted from a CONTEXTBUNDLE_* environment
variable; explicit constructor arguments always win.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from contextbundle.tokens import CountTokensFunc, default_count_tokens


def _env_bool(key: str, default: bool) -> bool:
    """Read boolean from environment variable."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


@dataclass
class GroupOptions:
    """
    Configures how identifier groups are constructed for a package.

    Environment Variables:
        CONTEXTBUNDLE_INCLUDE_PACKAGE_DOCS: add a group for package-level docs
        CONTEXTBUNDLE_INCLUDE_TEST_FILES: keep identifiers declared in test files
        CONTEXTBUNDLE_INCLUDE_EXTERNAL_DEPS: attach signature-only groups for
            identifiers from other packages
        CONTEXTBUNDLE_CONSIDER_AMBIGUOUS_DOCUMENTED: treat anonymous and init
            identifiers as documented
        CONTEXTBUNDLE_CONSIDER_TEST_FUNCS_DOCUMENTED: treat test functions as documented
        CONTEXTBUNDLE_CONSIDER_CONST_BLOCKS_DOCUMENTING: a comment above a const
            block documents every const in it
    """

    include_package_docs: bool = field(default_factory=lambda: _env_bool(
        "CONTEXTBUNDLE_INCLUDE_PACKAGE_DOCS", False
    ))
    include_test_files: bool = field(default_factory=lambda: _env_bool(
        "CONTEXTBUNDLE_INCLUDE_TEST_FILES", False
    ))
    include_external_deps: bool = field(default_factory=lambda: _env_bool(
        "CONTEXTBUNDLE_INCLUDE_EXTERNAL_DEPS", False
    ))

    # Documentation policy
    consider_ambiguous_documented: bool = field(default_factory=lambda: _env_bool(
        "CONTEXTBUNDLE_CONSIDER_AMBIGUOUS_DOCUMENTED", False
    ))
    consider_test_funcs_documented: bool = field(default_factory=lambda: _env_bool(
        "CONTEXTBUNDLE_CONSIDER_TEST_FUNCS_DOCUMENTED", False
    ))
    consider_const_blocks_documenting: bool = field(default_factory=lambda: _env_bool(
        "CONTEXTBUNDLE_CONSIDER_CONST_BLOCKS_DOCUMENTING", False
    ))

    # Token counter for short and full views; None means default_count_tokens
    count_tokens: Optional[CountTokensFunc] = None

    @classmethod
    def for_documentation(cls, count_tokens: Optional[CountTokensFunc] = None) -> "GroupOptions":
        """Options used when building contexts for writing documentation."""
        return cls(
            include_package_docs=True,
            include_test_files=False,
            include_external_deps=True,
            consider_ambiguous_documented=True,
            consider_test_funcs_documented=True,
            consider_const_blocks_documenting=True,
            count_tokens=count_tokens,
        )

    def token_counter(self) -> CountTokensFunc:
        return self.count_tokens or default_count_tokens

    def to_dict(self) -> Dict[str, Any]:
        """Export the boolean options (for JSON output)."""
        return {
            "include_package_docs": self.include_package_docs,
            "include_test_files": self.include_test_files,
            "include_external_deps": self.include_external_deps,
            "consider_ambiguous_documented": self.consider_ambiguous_documented,
            "consider_test_funcs_documented": self.consider_test_funcs_documented,
            "consider_const_blocks_documenting": self.consider_const_blocks_documenting,
            "custom_token_counter": self.count_tokens is not None,
        }


# Global instance for convenience
_default_options: Optional[GroupOptions] = None


def get_group_options() -> GroupOptions:
    """Get the process-wide default grouping options."""
    global _default_options
    if _default_options is None:
        _default_options = GroupOptions()
    return _default_options


def reset_group_options() -> None:
    """Reset the default options (useful after env var changes or for testing)."""
    global _default_options
    _default_options = None
