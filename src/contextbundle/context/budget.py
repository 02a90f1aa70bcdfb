"""
Budgeted context selection.

Greedily grows one Context from a prioritized list of candidate groups until
the next candidate no longer fits the token budget.
"""

from typing import List, Optional, Sequence

from contextbundle.exceptions import NoCandidateGroupsError, TokenBudgetExceededError
from contextbundle.grouping import IdentifierGroup, prioritize_groups_for_documentation
from contextbundle.logging_config import logger
from contextbundle.tokens import format_token_count
from .context import Context


def build_budgeted_context(
    groups: Sequence[IdentifierGroup],
    token_budget: int,
    candidates: Optional[Sequence[IdentifierGroup]] = None,
) -> Context:
    """
    Build a context of as many candidate groups as fit the budget.

    A candidate is eligible once all of its direct deps are documented, or
    once the context already carries its full text. After each addition,
    any free groups that are themselves candidates are added too.

    If no candidate fits, the cheapest eligible one is added alone and the
    context is pruned.

    Args:
        groups: Groups from one grouping run
        token_budget: Maximum context cost
        candidates: Groups to add, in priority order. Defaults to
            prioritize_groups_for_documentation(groups).

    Returns:
        Context with at least one added group and cost() <= token_budget

    Raises:
        NoCandidateGroupsError: No candidate was ever eligible
        TokenBudgetExceededError: The cheapest candidate could not be pruned
            into the budget
    """
    if candidates is None:
        candidates = prioritize_groups_for_documentation(groups)
    candidates = list(candidates)
    candidate_ids = {id(g) for g in candidates}

    context = Context()
    added = set()
    smallest: Optional[IdentifierGroup] = None
    smallest_cost = 0

    while True:
        group_added = False
        for group in candidates:
            if id(group) in added:
                continue
            if not (group.all_direct_deps_documented() or context.has_full_bytes(group)):
                continue

            additional_cost = context.additional_cost_for_group(group)
            if context.cost() + additional_cost <= token_budget:
                context.add_group(group)
                added.add(id(group))
                group_added = True
                _add_free_candidates(context, candidate_ids, added)
            elif smallest is None or additional_cost < smallest_cost:
                smallest = group
                smallest_cost = additional_cost

        if not group_added:
            break

    if context.added_groups():
        logger.debug(
            f"Built context of {len(context.added_groups())} groups, "
            f"cost {format_token_count(context.cost())} of {format_token_count(token_budget)}"
        )
        return context

    if smallest is None:
        raise NoCandidateGroupsError("no candidate group is eligible for a context")

    logger.info(
        f"Smallest group {','.join(smallest.ids)} needs {format_token_count(smallest_cost)} "
        f"({len(smallest.used_by_deps)} used-by deps); pruning"
    )
    context.add_group(smallest)
    if not context.prune(token_budget):
        logger.info(f"Prune failed, cost is still {format_token_count(context.cost())}")
        raise TokenBudgetExceededError(smallest_cost, token_budget)

    logger.info(f"Prune successful, cost {format_token_count(context.cost())}")
    return context


def _add_free_candidates(context: Context, candidate_ids: set, added: set) -> List[IdentifierGroup]:
    """Add free groups that are candidates until no more appear."""
    newly_added: List[IdentifierGroup] = []
    while True:
        free = [g for g in context.groups_for_free() if id(g) in candidate_ids]
        if not free:
            return newly_added
        for group in free:
            context.add_group(group)
            added.add(id(group))
            newly_added.append(group)
