"""
Pytest configuration for the contextbundle test suite.

This conftest.py provides:
- Machine-mode logging (suppresses console output)
- Factories for snippets, packages and groups from compact declarations
- Manifest files on disk for CLI tests
"""

import json
import os
from typing import Dict, Iterable, List, Optional, Sequence, Union

import pytest

from contextbundle.logging_config import reset_logging, setup_logging
from contextbundle.schemas import ExternalID, IdentifierDocumentation, Snippet
from contextbundle.graph import DependencyGraph
from contextbundle.snippets import SnippetModule, SnippetPackage
from contextbundle.grouping import GroupOptions, IdentifierGroup, build_groups, reset_group_options
from contextbundle.cli import CLIConfig


# ============================================================================
# GLOBAL CONFIGURATION
# ============================================================================

def pytest_configure(config):
    """Configure pytest for machine-mode operation."""
    os.environ.setdefault("CONTEXTBUNDLE_MACHINE_MODE", "1")


# ============================================================================
# LOGGING FIXTURES
# ============================================================================

@pytest.fixture(autouse=True)
def setup_test_logging():
    """
    Machine mode by default - suppress console logs for clean test output.
    """
    reset_logging()
    setup_logging(level="DEBUG", suppress_console=True)


@pytest.fixture(autouse=True)
def reset_global_state():
    """Reset process-wide defaults touched by tests."""
    reset_group_options()
    CLIConfig.reset()
    yield
    reset_group_options()
    CLIConfig.reset()


# ============================================================================
# SNIPPET / PACKAGE FACTORIES
# ============================================================================

def _make_snippet(
    ids: Union[str, Sequence[str]],
    file_name: str = "code.go",
    offset: int = 0,
    text: Optional[str] = None,
    full_text: Optional[str] = None,
    documented: bool = True,
    **kwargs,
) -> Snippet:
    """
    Build a snippet with predictable views.

    The short view defaults to "func <lead>()" and the full view appends a
    body, so full views are always longer than short views.
    """
    if isinstance(ids, str):
        ids = [ids]
    ids = list(ids)
    if text is None:
        text = f"func {ids[0]}()"
    if full_text is None:
        full_text = text + " { body }"

    if documented:
        docs = [IdentifierDocumentation(identifier=i, doc=f"// {i} does things.") for i in ids]
        missing_docs: List[IdentifierDocumentation] = []
    else:
        docs = []
        missing_docs = [IdentifierDocumentation(identifier=i) for i in ids]

    kwargs.setdefault("docs", docs)
    kwargs.setdefault("missing_docs", missing_docs)
    return Snippet(
        ids=ids,
        file_name=file_name,
        offset=offset,
        text=text,
        full_text=full_text,
        **kwargs,
    )


def count_chars(text: str) -> int:
    """Token counter used by tests: one token per character."""
    return len(text)


def _options(**overrides) -> GroupOptions:
    """GroupOptions with every flag off and a character token counter."""
    values = dict(
        include_package_docs=False,
        include_test_files=False,
        include_external_deps=False,
        consider_ambiguous_documented=False,
        consider_test_funcs_documented=False,
        consider_const_blocks_documenting=False,
        count_tokens=count_chars,
    )
    values.update(overrides)
    return GroupOptions(**values)


def _group_of(groups: Iterable[IdentifierGroup], identifier: str) -> IdentifierGroup:
    """Find the group containing identifier (searching direct deps for external groups)."""
    for group in groups:
        if identifier in group.ids:
            return group
    for group in groups:
        for dep in group.direct_deps:
            if identifier in dep.ids:
                return dep
    raise AssertionError(f"no group contains {identifier!r}")


class PackageBuilder:
    """Collects snippets and edges, then runs grouping."""

    def __init__(self, name: str = "pkg", is_test_package: bool = False):
        self.name = name
        self.is_test_package = is_test_package
        self.snippets: List[Snippet] = []
        self.uses: Dict[str, List[str]] = {}
        self.external_uses: Dict[str, List[ExternalID]] = {}
        self.module = SnippetModule()

    def add(self, ids, uses: Sequence[str] = (), **kwargs) -> Snippet:
        kwargs.setdefault("offset", len(self.snippets) * 100)
        snippet = _make_snippet(ids, **kwargs)
        self.snippets.append(snippet)
        if uses:
            self.uses.setdefault(snippet.ids[0], []).extend(uses)
        return snippet

    def use(self, source: str, *targets: str) -> "PackageBuilder":
        self.uses.setdefault(source, []).extend(targets)
        return self

    def use_external(self, source: str, import_path: str, identifier: str) -> "PackageBuilder":
        self.external_uses.setdefault(source, []).append(ExternalID(import_path=import_path, id=identifier))
        return self

    def package(self) -> SnippetPackage:
        return SnippetPackage(self.name, self.snippets, is_test_package=self.is_test_package)

    def graph(self) -> DependencyGraph:
        identifiers = [i for s in self.snippets for i in s.ids if i != "package"]
        test_identifiers = [i for s in self.snippets if s.is_test for i in s.ids]
        return DependencyGraph(
            uses=self.uses,
            identifiers=identifiers,
            test_identifiers=test_identifiers,
            external_uses=self.external_uses,
        )

    def groups(self, **option_overrides) -> List[IdentifierGroup]:
        options = _options(**option_overrides)
        module = self.module if options.include_external_deps else None
        return build_groups(self.graph(), self.package(), options, module=module)


@pytest.fixture
def builder():
    """A fresh PackageBuilder for package "pkg"."""
    return PackageBuilder()


@pytest.fixture
def make_snippet():
    """Factory for snippets with predictable views (see _make_snippet)."""
    return _make_snippet


@pytest.fixture
def make_options():
    """Factory for GroupOptions with every flag off and a character token counter."""
    return _options


@pytest.fixture
def group_of():
    """Lookup of the group containing an identifier."""
    return _group_of


# ============================================================================
# MANIFEST FIXTURES
# ============================================================================

SHAPES_MANIFEST = {
    "name": "shapes",
    "import_path": "example.com/shapes",
    "snippets": [
        {
            "ids": ["package"],
            "kind": "package",
            "file_name": "doc.go",
            "text": "// Package shapes computes areas.\npackage shapes\n",
            "docs": [{"identifier": "package", "doc": "// Package shapes computes areas."}],
        },
        {
            "ids": ["Shape"],
            "kind": "type",
            "file_name": "shape.go",
            "offset": 10,
            "text": "// Shape is a 2D shape.\ntype Shape interface { Area() float64 }",
            "docs": [{"identifier": "Shape", "doc": "// Shape is a 2D shape."}],
        },
        {
            "ids": ["Square"],
            "kind": "type",
            "file_name": "shape.go",
            "offset": 90,
            "text": "type Square struct { Side float64 }",
        },
        {
            "ids": ["Square.Area"],
            "file_name": "shape.go",
            "offset": 150,
            "text": "func (s Square) Area() float64",
            "full_text": "func (s Square) Area() float64 { return math.Pow(s.Side, 2) }",
        },
        {
            "ids": ["Total"],
            "file_name": "total.go",
            "offset": 10,
            "text": "// Total sums areas.\nfunc Total(shapes []Shape) float64",
            "full_text": "// Total sums areas.\nfunc Total(shapes []Shape) float64 { t := 0.0; for _, s := range shapes { t += s.Area() }; return t }",
            "docs": [{"identifier": "Total", "doc": "// Total sums areas."}],
        },
    ],
    "uses": {
        "Square.Area": ["Square"],
        "Total": ["Shape"],
    },
    "external_uses": {
        "Square.Area": [{"import_path": "math", "id": "Pow"}],
    },
    "dependencies": [
        {
            "name": "math",
            "snippets": [
                {
                    "ids": ["Pow"],
                    "file_name": "pow.go",
                    "text": "// Pow returns x**y.\nfunc Pow(x, y float64) float64",
                    "full_text": "// Pow returns x**y.\nfunc Pow(x, y float64) float64 { ... }",
                    "public_text": "// Pow returns x**y.\nfunc Pow(x, y float64) float64",
                    "docs": [{"identifier": "Pow", "doc": "// Pow returns x**y."}],
                }
            ],
        }
    ],
}


@pytest.fixture
def shapes_manifest(tmp_path):
    """Write the shapes manifest to disk and return its path."""
    path = tmp_path / "shapes.json"
    path.write_text(json.dumps(SHAPES_MANIFEST))
    return path
