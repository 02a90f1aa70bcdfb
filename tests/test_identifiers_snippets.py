"""
Tests for identifier conventions, snippets, documentation policy and tokens.
"""

import os

import pytest

from contextbundle.identifiers import (
    PACKAGE_IDENTIFIER,
    is_ambiguous_identifier,
    is_anonymous_identifier,
    is_exported_identifier,
    is_init_identifier,
    is_package_identifier,
    package_identifier_per_file,
)
from contextbundle.schemas import IdentifierDocumentation, Snippet
from contextbundle.snippets import (
    SYNTHETIC_PACKAGE_FILE,
    SnippetModule,
    SnippetPackage,
    id_is_documented,
    synthetic_package_snippet,
)
from contextbundle.grouping import GroupOptions, get_group_options, identifier_is_documented, reset_group_options
from contextbundle.exceptions import ImportNotInModuleError
from contextbundle import tokens
from contextbundle.tokens import default_count_tokens, format_token_count, tiktoken_counter


class TestIdentifiers:
    """Naming conventions."""

    @pytest.mark.parametrize("identifier,expected", [
        ("Foo", True),
        ("foo", False),
        ("Foo.Bar", True),
        ("Foo.bar", False),
        ("foo.Bar", False),
        ("*Foo.Bar", False),
        ("*foo.Bar", False),
        ("_", False),
        ("", False),
    ])
    def test_is_exported(self, identifier, expected):
        assert is_exported_identifier(identifier) is expected

    def test_anonymous_and_init(self):
        assert is_anonymous_identifier("_")
        assert is_anonymous_identifier("_:a.go:3:5")
        assert is_anonymous_identifier("T._:a.go:9:1")
        assert not is_anonymous_identifier("under_score")
        assert is_init_identifier("init")
        assert is_init_identifier("init:a.go:12:6")
        assert not is_init_identifier("initialize")
        assert is_ambiguous_identifier("init:a.go:12:6")
        assert is_ambiguous_identifier("_")
        assert not is_ambiguous_identifier("Foo")

    def test_package_identifiers(self):
        assert PACKAGE_IDENTIFIER == "package"
        assert package_identifier_per_file("a.go") == "package:a.go"
        assert is_package_identifier("package")
        assert is_package_identifier("package:a.go")
        assert not is_package_identifier("packages")


class TestSnippet:
    """Snippet views."""

    def test_views_default_to_text(self):
        snippet = Snippet(ids=["A"], text="func A()")
        assert snippet.short_view() == "func A()"
        assert snippet.full_view() == "func A()"
        assert snippet.public_view() == "func A()"

    def test_explicit_views(self):
        snippet = Snippet(ids=["A"], text="s", full_text="f", public_text="p")
        assert (snippet.short_view(), snippet.full_view(), snippet.public_view()) == ("s", "f", "p")

    def test_ids_required(self):
        with pytest.raises(ValueError):
            Snippet(ids=[], text="x")

    def test_is_const(self):
        assert Snippet(ids=["A"], kind="value", is_var=False).is_const
        assert not Snippet(ids=["A"], kind="value").is_const
        assert not Snippet(ids=["A"], kind="func", is_var=False).is_const


class TestIdIsDocumented:
    """Documentation checks within one snippet."""

    def test_no_docs(self):
        snippet = Snippet(ids=["A"], missing_docs=[IdentifierDocumentation(identifier="A")])
        assert id_is_documented(snippet, "A") == (False, False)

    def test_direct_docs(self):
        snippet = Snippet(ids=["A"], docs=[IdentifierDocumentation(identifier="A", doc="// A.")])
        assert id_is_documented(snippet, "A") == (True, True)

    def test_undocumented_field(self):
        snippet = Snippet(
            ids=["T"],
            kind="type",
            docs=[IdentifierDocumentation(identifier="T", doc="// T.")],
            missing_docs=[IdentifierDocumentation(identifier="T", field="x")],
        )
        assert id_is_documented(snippet, "T") == (True, False)

    def test_block_docs(self):
        snippet = Snippet(
            ids=["A", "B"],
            kind="value",
            is_var=False,
            docs=[IdentifierDocumentation(identifier="", doc="// Limits.")],
            missing_docs=[IdentifierDocumentation(identifier="A"), IdentifierDocumentation(identifier="B")],
        )
        assert id_is_documented(snippet, "A") == (True, False)
        assert id_is_documented(snippet, "A", block_docs_all_specs=True) == (True, True)


class TestDocumentationPolicy:
    """identifier_is_documented honours each artificial-documentation option."""

    def _options(self, **kwargs):
        values = dict(
            consider_ambiguous_documented=False,
            consider_test_funcs_documented=False,
            consider_const_blocks_documenting=False,
        )
        values.update(kwargs)
        return GroupOptions(**values)

    def test_ambiguous(self):
        snippet = Snippet(ids=["init:a.go:1:1"], missing_docs=[IdentifierDocumentation(identifier="init:a.go:1:1")])
        assert not identifier_is_documented(snippet, "init:a.go:1:1", self._options())
        assert identifier_is_documented(snippet, "init:a.go:1:1", self._options(consider_ambiguous_documented=True))

    def test_test_funcs(self):
        snippet = Snippet(ids=["TestA"], is_test=True, is_test_func=True)
        assert not identifier_is_documented(snippet, "TestA", self._options())
        assert identifier_is_documented(snippet, "TestA", self._options(consider_test_funcs_documented=True))

    def test_test_func_flag_only_applies_to_funcs(self):
        snippet = Snippet(ids=["TestT"], kind="type", is_test_func=True)
        assert not identifier_is_documented(snippet, "TestT", self._options(consider_test_funcs_documented=True))

    def test_const_blocks(self):
        snippet = Snippet(
            ids=["A", "B"],
            kind="value",
            is_var=False,
            docs=[IdentifierDocumentation(identifier="", doc="// Limits.")],
            missing_docs=[IdentifierDocumentation(identifier="A"), IdentifierDocumentation(identifier="B")],
        )
        assert not identifier_is_documented(snippet, "A", self._options())
        assert identifier_is_documented(snippet, "A", self._options(consider_const_blocks_documenting=True))

    def test_var_blocks_never_count_block_docs(self):
        snippet = Snippet(
            ids=["a", "b"],
            kind="value",
            is_var=True,
            docs=[IdentifierDocumentation(identifier="", doc="// State.")],
            missing_docs=[IdentifierDocumentation(identifier="a")],
        )
        assert not identifier_is_documented(snippet, "a", self._options(consider_const_blocks_documenting=True))


class TestGroupOptions:
    """Env-driven configuration."""

    def setup_method(self):
        reset_group_options()
        for key in list(os.environ.keys()):
            if key.startswith("CONTEXTBUNDLE_INCLUDE") or key.startswith("CONTEXTBUNDLE_CONSIDER"):
                os.environ.pop(key, None)

    def teardown_method(self):
        self.setup_method()

    def test_defaults(self):
        options = get_group_options()
        assert not options.include_package_docs
        assert not options.include_external_deps
        assert options.token_counter() is default_count_tokens

    def test_env_var_override(self):
        os.environ["CONTEXTBUNDLE_INCLUDE_PACKAGE_DOCS"] = "true"
        os.environ["CONTEXTBUNDLE_CONSIDER_TEST_FUNCS_DOCUMENTED"] = "1"
        reset_group_options()
        options = get_group_options()
        assert options.include_package_docs
        assert options.consider_test_funcs_documented
        assert not options.include_test_files

    def test_singleton_pattern(self):
        assert get_group_options() is get_group_options()

    def test_for_documentation(self):
        options = GroupOptions.for_documentation(count_tokens=len)
        d = options.to_dict()
        assert d["include_package_docs"] and d["include_external_deps"]
        assert not d["include_test_files"]
        assert d["consider_ambiguous_documented"]
        assert d["consider_const_blocks_documenting"]
        assert d["custom_token_counter"]
        assert options.token_counter() is len


class TestSnippetPackage:
    """Lookup by identifier and import path."""

    def test_block_snippet_reachable_by_every_id(self):
        block = Snippet(ids=["A", "B"], kind="value", is_var=False)
        package = SnippetPackage("pkg", [block, Snippet(ids=["f"])])
        assert package.get_snippet("A") is block
        assert package.get_snippet("B") is block
        assert package.get_snippet("missing") is None
        assert package.identifiers() == ["A", "B", "f"]
        assert package.import_path == "pkg"

    def test_test_identifiers(self):
        package = SnippetPackage("pkg", [Snippet(ids=["TestA"], is_test=True), Snippet(ids=["A"])])
        assert package.test_identifiers() == ["TestA"]

    def test_module_lookup(self):
        other = SnippetPackage("strings", [Snippet(ids=["Join"])])
        module = SnippetModule([other])
        assert module.load_package("strings") is other
        assert module.import_paths() == ["strings"]
        with pytest.raises(ImportNotInModuleError):
            module.load_package("net/http")

    def test_synthetic_package_snippet(self):
        snippet = synthetic_package_snippet("shapes")
        assert snippet.ids == [PACKAGE_IDENTIFIER]
        assert snippet.file_name == SYNTHETIC_PACKAGE_FILE
        assert snippet.full_view() == "package shapes\n"
        assert snippet.short_view() == "package shapes\n"
        assert id_is_documented(snippet, PACKAGE_IDENTIFIER) == (False, False)


class TestTokens:
    """Token estimates and formatting."""

    def test_default_count_tokens(self):
        assert default_count_tokens("") == 0
        assert default_count_tokens("abc") == 0
        assert default_count_tokens("abcdefgh") == 2
        # Multi-byte characters count by UTF-8 length
        assert default_count_tokens("éé") == 1

    @pytest.mark.parametrize("count,expected", [
        (0, "0 toks"),
        (999, "999 toks"),
        (1000, "1.0k toks"),
        (1400, "1.4k toks"),
        (29900, "29.9k toks"),
        (45200, "45k toks"),
    ])
    def test_format_token_count(self, count, expected):
        assert format_token_count(count) == expected

    def test_tiktoken_counter(self, monkeypatch):
        class FakeEncoding:
            def encode(self, text):
                return text.split()

        requested = []

        def fake_get_encoding(name):
            requested.append(name)
            return FakeEncoding()

        monkeypatch.setattr(tokens.tiktoken, "get_encoding", fake_get_encoding)
        count = tiktoken_counter()
        assert requested == ["cl100k_base"]
        assert count("") == 0
        assert count("func A() int") == 3
