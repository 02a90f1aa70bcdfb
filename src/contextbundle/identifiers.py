"""
Identifier naming conventions shared by the graph, snippet and grouping layers.

Identifiers are plain strings:
- "Foo", "bar": package-level functions, types, vars and consts.
- "T.M" / "*T.M": methods (receiver, then member).
- "_:file.go:3:5", "T._:file.go:9:1", "init:file.go:12:6": names that are
  ambiguous on their own and carry their position.
- "package": the package itself (package-level documentation).
"""

PACKAGE_IDENTIFIER = "package"


def package_identifier_per_file(file_name: str) -> str:
    """Identifier for package documentation scoped to one file."""
    return f"{PACKAGE_IDENTIFIER}:{file_name}"


def is_package_identifier(identifier: str) -> bool:
    return identifier == PACKAGE_IDENTIFIER or identifier.startswith(PACKAGE_IDENTIFIER + ":")


def is_anonymous_identifier(identifier: str) -> bool:
    """True for "_", "_:file:line:col" and "T._:file:line:col" identifiers."""
    if identifier == "_" or identifier.startswith("_:"):
        return True
    return "._:" in identifier


def is_init_identifier(identifier: str) -> bool:
    return identifier == "init" or identifier.startswith("init:")


def is_ambiguous_identifier(identifier: str) -> bool:
    """Anonymous identifiers and init functions cannot be named uniquely without a position."""
    return is_anonymous_identifier(identifier) or is_init_identifier(identifier)


def _starts_upper(name: str) -> bool:
    return bool(name) and name[0].isupper()


def is_exported_identifier(identifier: str) -> bool:
    """
    Report whether an identifier is part of the public API.

    An identifier is exported when it starts with an uppercase letter. For
    "Receiver.Member" identifiers both sides must be uppercase-led, so
    pointer-receiver methods ("*T.M") are never exported.
    """
    if "." in identifier:
        receiver, member = identifier.split(".", 1)
        return _starts_upper(receiver) and _starts_upper(member)
    return _starts_upper(identifier)
