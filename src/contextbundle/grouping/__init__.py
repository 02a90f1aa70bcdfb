"""
Grouping engine: collapses a package's reference graph into a DAG of IdentifierGroups.
"""

from .config import GroupOptions, get_group_options, reset_group_options
from .policy import identifier_is_documented
from .groups import (
    IdentifierGroup,
    GroupingStats,
    build_groups,
    filter_groups_for_identifiers,
    sort_by_lead_id,
)
from .external import add_external_groups
from .priority import prioritize_groups_for_documentation

__all__ = [
    "GroupOptions",
    "get_group_options",
    "reset_group_options",
    "identifier_is_documented",
    "IdentifierGroup",
    "GroupingStats",
    "build_groups",
    "filter_groups_for_identifiers",
    "sort_by_lead_id",
    "add_external_groups",
    "prioritize_groups_for_documentation",
]
