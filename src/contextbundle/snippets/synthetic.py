from contextbundle.identifiers import PACKAGE_IDENTIFIER
from contextbundle.schemas import IdentifierDocumentation, Snippet

SYNTHETIC_PACKAGE_FILE = "doc.go"


def synthetic_package_snippet(package_name: str) -> Snippet:
    """
    Placeholder snippet for a package that has no package documentation.

    It renders as a bare package clause in a (possibly non-existent) doc.go,
    so the package group still has a snippet for its only identifier and can
    be handed to a model with "document this package" instructions.
    """
    clause = f"package {package_name}\n"
    return Snippet(
        ids=[PACKAGE_IDENTIFIER],
        kind="package",
        file_name=SYNTHETIC_PACKAGE_FILE,
        offset=0,
        text=clause,
        full_text=clause,
        public_text=clause,
        missing_docs=[IdentifierDocumentation(identifier=PACKAGE_IDENTIFIER)],
    )
