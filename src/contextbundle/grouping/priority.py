from typing import List, Sequence

from .groups import IdentifierGroup


def prioritize_groups_for_documentation(groups: Sequence[IdentifierGroup]) -> List[IdentifierGroup]:
    """
    Filter for undocumented groups and order them by how easy and useful they are to document.

    A small group that everything uses and that has few undocumented
    dependencies comes first, so that its callers can be documented next.

    Sort keys:
        1. Undocumented direct deps (ascending)
        2. Fan-in, the number of used_by_deps (descending)
        3. body_tokens (ascending)
        4. Lead id (alphabetical)
    """
    def sort_key(group: IdentifierGroup):
        undocumented_deps = sum(1 for dep in group.direct_deps if not dep.is_documented)
        return (undocumented_deps, -len(group.used_by_deps), group.body_tokens, group.lead_id)

    return sorted((g for g in groups if not g.is_documented), key=sort_key)
