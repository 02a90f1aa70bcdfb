"""
Best-effort shrinking of a Context under a token budget.

Two strategies, chosen by the shape of the context:
- Package documentation: drop the package group's dependencies that expose
  no exported identifier (single pass).
- Everything else: drop the heaviest outside used_by dep of each added
  group, one per group per round, keeping at least a minimum number of
  used_by deps per group.

Both mutate the shared groups' edge lists and keep those mutations on failure.
"""

from typing import List, Optional, Set

from contextbundle.grouping import IdentifierGroup
from contextbundle.identifiers import PACKAGE_IDENTIFIER
from contextbundle.logging_config import logger
from contextbundle.tokens import format_token_count
from .config import PRUNE_CONFIG


def prune_context(context, token_budget: int) -> bool:
    """
    Mutate context (and its groups) so that context.cost() <= token_budget.

    Args:
        context: Context to shrink
        token_budget: Maximum acceptable cost

    Returns:
        True if the context fits the budget afterwards
    """
    if context.cost() <= token_budget:
        return True

    added = context.added_groups()
    if len(added) == 1 and ",".join(added[0].ids) == PACKAGE_IDENTIFIER:
        return _prune_package_context(context, added[0], token_budget)

    return _prune_used_by_deps(context, added, token_budget)


def _prune_package_context(context, package_group: IdentifierGroup, token_budget: int) -> bool:
    """Keep only the package group's deps that contain an exported identifier."""
    before = len(package_group.direct_deps)
    package_group.direct_deps = [
        dep for dep in package_group.direct_deps if dep.has_exported_identifier()
    ]
    context.recalculate()

    fits = context.cost() <= token_budget
    logger.debug(
        f"Pruned package context to exported API: {before} -> {len(package_group.direct_deps)} deps, "
        f"cost {format_token_count(context.cost())}, fits={fits}"
    )
    return fits


def _removal_cost(group: IdentifierGroup) -> int:
    # External groups never appear in used_by deps; guard anyway
    return group.snippet_tokens if group.is_external else group.body_tokens


def _pick_removable(group: IdentifierGroup, added: Set[int]) -> Optional[int]:
    """Index of the heaviest used_by dep outside the added groups, or None if none may go."""
    min_used_by = PRUNE_CONFIG["min_used_by_deps"]

    best_index = None
    best_cost = -1
    for index, user in enumerate(group.used_by_deps):
        if id(user) in added:
            continue
        cost = _removal_cost(user)
        if cost > best_cost:
            best_index = index
            best_cost = cost

    if best_index is None or len(group.used_by_deps) - 1 < min_used_by:
        return None
    return best_index


def _prune_used_by_deps(context, added: List[IdentifierGroup], token_budget: int) -> bool:
    added_ids = {id(g) for g in added}
    removed = 0

    while True:
        if context.cost() <= token_budget:
            return True

        progress = False
        for group in added:
            index = _pick_removable(group, added_ids)
            if index is None:
                continue

            user = group.used_by_deps[index]
            group.used_by_deps = group.used_by_deps[:index] + group.used_by_deps[index + 1:]
            context.recalculate()
            progress = True
            removed += 1
            logger.debug(f"Pruned used-by dep {user.lead_id} from {group.lead_id}")

            if context.cost() <= token_budget:
                return True

        if not progress:
            break

    logger.debug(
        f"Prune could not meet budget {format_token_count(token_budget)} after removing "
        f"{removed} used-by deps (cost {format_token_count(context.cost())})"
    )
    return False
