"""
Context assembly: inclusion rules, cost, rendering, pruning and partitioning.
"""

from .context import Context, calculate_groups_with_full_bytes
from .render import render_code
from .prune import prune_context
from .partition import partition_identifiers
from .budget import build_budgeted_context
from .config import PRUNE_CONFIG, RENDER_CONFIG

__all__ = [
    "Context",
    "calculate_groups_with_full_bytes",
    "render_code",
    "prune_context",
    "partition_identifiers",
    "build_budgeted_context",
    "PRUNE_CONFIG",
    "RENDER_CONFIG",
]
