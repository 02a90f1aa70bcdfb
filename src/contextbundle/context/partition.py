"""
Greedy partitioning of target identifiers into contexts.

Finding the fewest contexts that cover a set of identifiers is a set-cover
problem. The approximation used here starts a minimal context for the first
uncovered identifier, assigns it every other target it describes for free,
and moves on to the next uncovered identifier.
"""

from typing import Dict, List, Sequence

from contextbundle.grouping import IdentifierGroup
from contextbundle.logging_config import logger
from .context import Context


def partition_identifiers(
    groups: Sequence[IdentifierGroup],
    identifiers: Sequence[str],
) -> Dict[Context, List[str]]:
    """
    Group target identifiers by the context that describes them.

    Args:
        groups: Groups from one grouping run
        identifiers: Target identifiers, in priority order

    Returns:
        Mapping of Context to the identifiers it covers. Value lists are
        disjoint and follow the order of `identifiers`. Identifiers that
        belong to no group are dropped.
    """
    id_to_group: Dict[str, IdentifierGroup] = {}
    for group in groups:
        for identifier in group.ids:
            id_to_group[identifier] = group

    remaining = set(identifiers)
    contexts: Dict[Context, List[str]] = {}
    dropped = 0

    for identifier in identifiers:
        if identifier not in remaining:
            continue

        group = id_to_group.get(identifier)
        if group is None:
            remaining.discard(identifier)
            dropped += 1
            continue

        context = Context([group])
        covered_set = set(context.all_identifiers())

        covered = [identifier]
        remaining.discard(identifier)
        for candidate in identifiers:
            if candidate in remaining and candidate in covered_set:
                covered.append(candidate)
                remaining.discard(candidate)

        contexts[context] = covered

    logger.debug(
        f"Partitioned {len(identifiers)} identifiers into {len(contexts)} contexts "
        f"({dropped} without a group)"
    )
    return contexts
