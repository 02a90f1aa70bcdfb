"""
contextbundle - token-budgeted code bundles for language models

Groups a package's declarations into a DAG of identifier groups and builds
contexts: bundles of code that describe requested identifiers in full, with
their dependencies abbreviated where documentation allows.
"""

__version__ = "0.3.0"

# Core exports
from contextbundle.schemas import Snippet, IdentifierDocumentation, ExternalID, PackageManifest
from contextbundle.graph import DependencyGraph
from contextbundle.snippets import SnippetPackage, SnippetModule
from contextbundle.grouping import (
    GroupOptions,
    IdentifierGroup,
    build_groups,
    filter_groups_for_identifiers,
    prioritize_groups_for_documentation,
)
from contextbundle.context import Context, partition_identifiers, build_budgeted_context
from contextbundle.manifest import load_manifest, LoadedPackage

__all__ = [
    "__version__",
    "Snippet",
    "IdentifierDocumentation",
    "ExternalID",
    "PackageManifest",
    "DependencyGraph",
    "SnippetPackage",
    "SnippetModule",
    "GroupOptions",
    "IdentifierGroup",
    "build_groups",
    "filter_groups_for_identifiers",
    "prioritize_groups_for_documentation",
    "Context",
    "partition_identifiers",
    "build_budgeted_context",
    "load_manifest",
    "LoadedPackage",
]
