"""
Snippet lookup for a package and import-path resolution across packages.
"""

from typing import Dict, Iterable, List, Optional

from contextbundle.exceptions import ImportNotInModuleError
from contextbundle.schemas import Snippet


class SnippetPackage:
    """
    The snippets of one package, indexed by identifier.

    A block snippet is reachable through every identifier it declares.
    """

    def __init__(
        self,
        name: str,
        snippets: Iterable[Snippet],
        import_path: str = "",
        is_test_package: bool = False,
    ):
        self.name = name
        self.import_path = import_path or name
        self.is_test_package = is_test_package
        self._snippets: List[Snippet] = list(snippets)
        self._by_id: Dict[str, Snippet] = {}
        for snippet in self._snippets:
            for identifier in snippet.ids:
                self._by_id[identifier] = snippet

    def get_snippet(self, identifier: str) -> Optional[Snippet]:
        return self._by_id.get(identifier)

    def snippets(self) -> List[Snippet]:
        return list(self._snippets)

    def identifiers(self) -> List[str]:
        return sorted(self._by_id)

    def test_identifiers(self) -> List[str]:
        return sorted(i for i, s in self._by_id.items() if s.is_test)

    def __repr__(self) -> str:
        return f"SnippetPackage({self.import_path!r}, snippets={len(self._snippets)})"


class SnippetModule:
    """
    The set of packages that are available locally, keyed by import path.

    load_package raises ImportNotInModuleError for import paths that are not
    available; that is the only failure grouping treats as benign.
    """

    def __init__(self, packages: Iterable[SnippetPackage] = ()):
        self._packages: Dict[str, SnippetPackage] = {}
        for package in packages:
            self.add_package(package)

    def add_package(self, package: SnippetPackage) -> None:
        self._packages[package.import_path] = package

    def load_package(self, import_path: str) -> SnippetPackage:
        package = self._packages.get(import_path)
        if package is None:
            raise ImportNotInModuleError(import_path)
        return package

    def import_paths(self) -> List[str]:
        return sorted(self._packages)
