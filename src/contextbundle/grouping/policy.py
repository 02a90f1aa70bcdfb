"""
Documentation policy: decides whether one identifier counts as documented.
"""

from contextbundle.identifiers import is_ambiguous_identifier
from contextbundle.schemas import Snippet
from contextbundle.snippets import id_is_documented
from .config import GroupOptions


def identifier_is_documented(snippet: Snippet, identifier: str, options: GroupOptions) -> bool:
    """
    Report whether `identifier` is documented, directly or artificially.

    Artificial documentation exists so that identifiers nobody should be
    asked to document (anonymous and init declarations, test functions) do
    not keep their groups, and every group depending on them, undocumented.

    Args:
        snippet: Snippet declaring the identifier
        identifier: Identifier to check
        options: Grouping options carrying the documentation policy

    Returns:
        True if the identifier is fully documented under the policy
    """
    block_docs_all_specs = snippet.is_const and options.consider_const_blocks_documenting
    _, full_docs = id_is_documented(snippet, identifier, block_docs_all_specs)
    if full_docs:
        return True

    if options.consider_ambiguous_documented and is_ambiguous_identifier(identifier):
        return True

    if options.consider_test_funcs_documented and snippet.kind == "func" and snippet.is_test_func:
        return True

    return False
