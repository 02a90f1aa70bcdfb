"""
Renders a context's groups into the text bundle sent to a model.

Example (the only added group is a var whose direct dep is a documented func):

    // code.go:

    // myFunc does...
    func myFunc() int

    // other.go:

    // myVar is...
    var myVar = myFunc()

"""

from typing import Dict, List, Sequence, Tuple

from contextbundle.grouping import IdentifierGroup
from contextbundle.schemas import Snippet
from .config import RENDER_CONFIG


def render_code(
    groups_with_full_bytes: Dict[IdentifierGroup, bool],
    added_groups: Sequence[IdentifierGroup],
) -> str:
    """
    Render the bundle text.

    Internal snippets are ordered by (file name, offset) under one banner per
    file, each rendered in full or short view per the inclusion map. External
    direct deps of the added groups follow in a trailing section, ordered by
    (import path, lead id), each snippet's public view emitted once.

    Args:
        groups_with_full_bytes: Inclusion map from calculate_groups_with_full_bytes
        added_groups: Explicitly added groups, the only source of external deps

    Returns:
        Rendered text
    """
    parts: List[str] = []
    separator = RENDER_CONFIG["snippet_separator"]

    internal: List[Tuple[Snippet, bool]] = []
    seen = set()
    for group, full in groups_with_full_bytes.items():
        if group.is_external:
            continue
        for snippet in group.distinct_snippets():
            if id(snippet) in seen:
                continue
            seen.add(id(snippet))
            internal.append((snippet, full))

    internal.sort(key=lambda item: (item[0].file_name, item[0].offset))

    current_file = None
    for snippet, full in internal:
        if snippet.file_name != current_file:
            current_file = snippet.file_name
            parts.append(RENDER_CONFIG["file_banner"].format(file_name=current_file))
        parts.append(snippet.full_view() if full else snippet.short_view())
        parts.append(separator)

    external: List[Tuple[str, Snippet]] = []
    seen_external = set()
    for group in added_groups:
        for dep in group.direct_deps:
            if not dep.is_external:
                continue
            for snippet in dep.distinct_snippets():
                if id(snippet) in seen_external:
                    continue
                seen_external.add(id(snippet))
                external.append((dep.external_import_path, snippet))

    if external:
        external.sort(key=lambda item: (item[0], item[1].ids[0]))
        parts.append(RENDER_CONFIG["external_header"])

        current_import = None
        for import_path, snippet in external:
            if import_path != current_import:
                current_import = import_path
                parts.append(RENDER_CONFIG["import_banner"].format(import_path=import_path))
            parts.append(snippet.public_view())
            parts.append(separator)

    return "".join(parts)
