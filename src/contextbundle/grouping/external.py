"""
External dependency groups.

References that leave the package are attached to the referencing group as
signature-only groups, so their documentation can travel with a context.
External groups are never appended to the main group list.
"""

from typing import Dict, List, Optional

from contextbundle.exceptions import ExternalResolutionError, ImportNotInModuleError
from contextbundle.logging_config import logger
from contextbundle.schemas import ExternalID
from contextbundle.snippets import SnippetModule
from contextbundle.tokens import CountTokensFunc
from .groups import IdentifierGroup, sort_by_lead_id


def _new_external_group(ext_id: ExternalID, snippet, count_tokens: CountTokensFunc) -> IdentifierGroup:
    group = IdentifierGroup(
        ids=[ext_id.id],
        snippet_tokens=count_tokens(snippet.public_view()),
        is_documented=True,
        is_external=True,
        external_import_path=ext_id.import_path,
    )
    group.snippets[ext_id.id] = snippet
    return group


def add_external_groups(
    module: SnippetModule,
    graph,
    groups: List[IdentifierGroup],
    count_tokens: CountTokensFunc,
) -> int:
    """
    Attach external groups to the direct deps of `groups`.

    Args:
        module: Packages available for import-path lookup
        graph: Dependency graph providing external_identifiers_from()
        groups: Internal groups; their direct_deps are rewritten in place
        count_tokens: Counter applied to each external snippet's public view

    Returns:
        Number of distinct external groups created

    Raises:
        ExternalResolutionError: Loading an external package failed for a
            reason other than it being absent from the module
    """
    cache: Dict[ExternalID, Optional[IdentifierGroup]] = {}

    for group in groups:
        deps: Dict[IdentifierGroup, None] = dict.fromkeys(group.direct_deps)

        for identifier in group.ids:
            for ext_id in graph.external_identifiers_from(identifier):
                if ext_id not in cache:
                    cache[ext_id] = _resolve(module, ext_id, count_tokens)
                ext_group = cache[ext_id]
                if ext_group is not None:
                    deps[ext_group] = None

        if len(deps) != len(group.direct_deps):
            group.direct_deps = sort_by_lead_id(deps)

    created = sum(1 for g in cache.values() if g is not None)
    logger.debug(f"Resolved {created} external groups from {len(cache)} external references")
    return created


def _resolve(
    module: SnippetModule,
    ext_id: ExternalID,
    count_tokens: CountTokensFunc,
) -> Optional[IdentifierGroup]:
    """Build the external group for ext_id, or None if it is not available locally."""
    try:
        package = module.load_package(ext_id.import_path)
    except ImportNotInModuleError:
        return None
    except Exception as e:
        logger.error(f"Failed to load package {ext_id.import_path} for {ext_id.id}: {e}")
        raise ExternalResolutionError(ext_id.id, ext_id.import_path, str(e)) from e

    snippet = package.get_snippet(ext_id.id)
    if snippet is None:
        return None

    try:
        return _new_external_group(ext_id, snippet, count_tokens)
    except Exception as e:
        logger.error(f"Failed to build public view of {ext_id.import_path}.{ext_id.id}: {e}")
        raise ExternalResolutionError(ext_id.id, ext_id.import_path, str(e)) from e
