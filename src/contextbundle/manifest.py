"""
Package manifests: JSON descriptions of a package's snippets and references.

A manifest stands in for a language front end. It lists the package's
snippets, its reference edges, and optionally the packages it imports so
that external references can be resolved.

Example:

    {
      "name": "shapes",
      "snippets": [
        {"ids": ["Area"], "file_name": "area.go", "offset": 10,
         "text": "// Area returns...\\nfunc Area(s Shape) float64",
         "full_text": "// Area returns...\\nfunc Area(s Shape) float64 { ... }",
         "docs": [{"identifier": "Area", "doc": "// Area returns..."}]}
      ],
      "uses": {"Area": ["Shape"]}
    }
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Union

from pydantic import ValidationError

from contextbundle.exceptions import ManifestError
from contextbundle.graph import DependencyGraph
from contextbundle.identifiers import is_package_identifier
from contextbundle.logging_config import logger
from contextbundle.schemas import PackageManifest
from contextbundle.snippets import SnippetModule, SnippetPackage


@dataclass
class LoadedPackage:
    """A package ready for grouping: its snippets, its graph, and the module around it."""
    package: SnippetPackage
    graph: DependencyGraph
    module: SnippetModule


def _package_from_manifest(manifest: PackageManifest) -> SnippetPackage:
    return SnippetPackage(
        name=manifest.name,
        snippets=manifest.snippets,
        import_path=manifest.import_path,
        is_test_package=manifest.is_test_package,
    )


def _add_dependencies(module: SnippetModule, dependencies: Iterable[PackageManifest]) -> None:
    for dependency in dependencies:
        module.add_package(_package_from_manifest(dependency))
        _add_dependencies(module, dependency.dependencies)


def build_from_manifest(manifest: PackageManifest) -> LoadedPackage:
    """
    Build the package, graph and module described by a validated manifest.

    Every declared identifier other than the package identifier becomes a
    graph node; the package identifier is handled by grouping itself.
    """
    package = _package_from_manifest(manifest)

    identifiers = [i for i in package.identifiers() if not is_package_identifier(i)]
    test_identifiers: List[str] = list(manifest.test_identifiers) + package.test_identifiers()

    graph = DependencyGraph(
        uses=manifest.uses,
        identifiers=identifiers,
        test_identifiers=test_identifiers,
        external_uses=manifest.external_uses,
    )

    module = SnippetModule()
    _add_dependencies(module, manifest.dependencies)

    return LoadedPackage(package=package, graph=graph, module=module)


def load_manifest(path: Union[str, Path]) -> LoadedPackage:
    """
    Load and validate a manifest file.

    Args:
        path: Path to a JSON manifest

    Returns:
        LoadedPackage for the manifest's package

    Raises:
        ManifestError: The file is missing, is not JSON, or does not match
            the manifest schema
    """
    path = Path(path)
    if not path.exists():
        raise ManifestError(str(path), "file not found")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        raise ManifestError(str(path), f"could not read JSON: {e}") from e

    try:
        manifest = PackageManifest.model_validate(data)
    except ValidationError as e:
        raise ManifestError(str(path), str(e)) from e

    loaded = build_from_manifest(manifest)
    logger.debug(
        f"Loaded manifest {path}: package {loaded.package.import_path}, "
        f"{len(loaded.graph)} identifiers, {len(loaded.module.import_paths())} dependency packages"
    )
    return loaded
