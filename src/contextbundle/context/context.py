"""
Context: a budget-aware bundle of identifier groups.

A group is described by a Context when:
- the group itself has full bytes
- all of its used_by_deps have full bytes, so its usage can be seen
- all of its direct_deps are present, either with full bytes or, when the
  dependency is external or documented, as a short view
"""

from typing import Dict, Iterable, List, Optional

from contextbundle.grouping import IdentifierGroup
from .prune import prune_context
from .render import render_code


def calculate_groups_with_full_bytes(groups: Iterable[IdentifierGroup]) -> Dict[IdentifierGroup, bool]:
    """
    Decide which groups a context includes and at what detail.

    Returns:
        Mapping of every included group to True (full text) or False
        (short view). Groups absent from the mapping are not included.
    """
    groups = list(groups)
    full_bytes: Dict[IdentifierGroup, bool] = {}

    # Explicit groups and everything that uses them need full bytes
    for group in groups:
        full_bytes[group] = True
        for user in group.used_by_deps:
            full_bytes[user] = True

    for group in groups:
        for dep in group.direct_deps:
            if dep.is_external or dep.is_documented:
                # A short view suffices unless a stronger rule already applies
                full_bytes.setdefault(dep, False)
            else:
                full_bytes[dep] = True

    return full_bytes


def _identifiers_in(groups: Iterable[IdentifierGroup]) -> List[str]:
    ids: List[str] = []
    for group in groups:
        ids.extend(group.ids)
    return ids


class Context:
    """
    A bundle of code describing a set of explicitly added groups.

    The bundle may describe more groups than were added (see
    groups_for_free). Groups are shared by reference with every other Context
    built from the same grouping run, and prune() mutates their edge lists.
    """

    def __init__(self, groups: Optional[Iterable[IdentifierGroup]] = None):
        self._original_groups: List[IdentifierGroup] = list(groups or [])
        self._groups_with_full_bytes = calculate_groups_with_full_bytes(self._original_groups)

    def recalculate(self) -> None:
        """Rebuild the inclusion map after the groups or their edges change."""
        self._groups_with_full_bytes = calculate_groups_with_full_bytes(self._original_groups)

    def _is_added(self, group: IdentifierGroup) -> bool:
        return any(g is group for g in self._original_groups)

    def added_groups(self) -> List[IdentifierGroup]:
        """Groups explicitly added via the constructor or add_group()."""
        return list(self._original_groups)

    def groups_with_full_bytes(self) -> Dict[IdentifierGroup, bool]:
        """Copy of the inclusion map (group -> full text?)."""
        return dict(self._groups_with_full_bytes)

    def groups_for_free(self) -> List[IdentifierGroup]:
        """
        Groups that this context fully describes without having been added.

        A non-added group with full bytes is free when all of its used_by
        deps have full bytes and all of its direct deps are present (with
        full bytes if undocumented). This is a single-hop check: it does not
        compute the closure of free groups.

        Adding any returned group does not change cost().
        """
        free: List[IdentifierGroup] = []
        included = self._groups_with_full_bytes

        for group, has_full in included.items():
            if not has_full or self._is_added(group):
                continue

            if not all(included.get(user, False) for user in group.used_by_deps):
                continue

            deps_met = True
            for dep in group.direct_deps:
                if dep not in included:
                    deps_met = False
                    break
                if not dep.is_documented and not included[dep]:
                    deps_met = False
                    break

            if deps_met:
                free.append(group)

        return free

    def all_groups(self) -> List[IdentifierGroup]:
        """Added groups plus free groups. Short-view dependencies are not listed."""
        return self.added_groups() + self.groups_for_free()

    def added_identifiers(self) -> List[str]:
        return _identifiers_in(self._original_groups)

    def identifiers_for_free(self) -> List[str]:
        return _identifiers_in(self.groups_for_free())

    def all_identifiers(self) -> List[str]:
        return _identifiers_in(self.all_groups())

    def add_group(self, group: IdentifierGroup) -> None:
        """Add group explicitly; a no-op if it was already added."""
        if self._is_added(group):
            return
        self._original_groups.append(group)
        self.recalculate()

    def cost(self) -> int:
        """
        Estimate the token count of code().

        code() adds a few tokens for banners and newlines; callers needing
        accuracy should count tokens in code() directly.
        """
        total = 0
        for group, has_full in self._groups_with_full_bytes.items():
            if group.is_external:
                total += group.snippet_tokens
            elif has_full:
                total += group.body_tokens
            else:
                total += group.snippet_tokens
        return total

    def additional_cost_for_group(self, group: Optional[IdentifierGroup]) -> int:
        """
        Cost of adding group to this context.

        Zero when the group is None, already added, or free.
        """
        if group is None or self._is_added(group):
            return 0
        if any(g is group for g in self.groups_for_free()):
            return 0

        hypothetical = Context(self._original_groups + [group])
        return max(0, hypothetical.cost() - self.cost())

    def has_full_bytes(self, group: IdentifierGroup) -> bool:
        """True if group was added, or is included with its full text."""
        return self._is_added(group) or self._groups_with_full_bytes.get(group, False)

    def code(self) -> str:
        """Render the bundle text. See render.render_code."""
        return render_code(self._groups_with_full_bytes, self._original_groups)

    def prune(self, token_budget: int) -> bool:
        """
        Shrink the context until cost() <= token_budget.

        Mutates the edge lists of this context's groups, and keeps those
        changes even when it fails.

        Returns:
            True if the context now fits the budget
        """
        return prune_context(self, token_budget)

    def __repr__(self) -> str:
        return f"Context(added={self.added_identifiers()}, cost={self.cost()})"
