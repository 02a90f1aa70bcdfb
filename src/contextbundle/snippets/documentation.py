"""
Per-identifier documentation checks.
"""

from typing import Tuple

from contextbundle.schemas import Snippet


def id_is_documented(
    snippet: Snippet,
    identifier: str,
    block_docs_all_specs: bool = False,
) -> Tuple[bool, bool]:
    """
    Report whether an identifier is documented within its snippet.

    Documentation can live in three places: the block, the spec (or decl for
    non-blocks), and fields of structs/interfaces.

    Args:
        snippet: Snippet declaring the identifier
        identifier: Identifier to check
        block_docs_all_specs: Let a block-level comment document every spec
            in the block (e.g. one comment above `const ( ... )`)

    Returns:
        (any_docs, full_docs). any_docs needs docs in at least one place.
        full_docs additionally needs every field documented and, unless a
        block comment counts for all specs, the spec itself documented.
    """
    any_docs = False
    has_block = False

    for doc in snippet.docs:
        if doc.identifier == identifier:
            any_docs = True
        elif doc.identifier == "":
            any_docs = True
            has_block = True

    if not any_docs:
        return False, False

    missing_field = False
    missing_spec = False
    for missing in snippet.missing_docs:
        if missing.identifier != identifier:
            continue
        if missing.field:
            missing_field = True
        else:
            missing_spec = True

    if missing_field:
        return True, False
    if block_docs_all_specs:
        return True, has_block or not missing_spec
    return True, not missing_spec
