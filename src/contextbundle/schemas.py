from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional, Literal


class IdentifierDocumentation(BaseModel):
    """
    Documentation attached to one identifier in a declaration.

    An empty identifier marks block-level documentation (a comment above
    `const ( ... )`). For struct/interface members, field names the member.
    """
    identifier: str = ""
    field: str = ""
    doc: str = ""


class Snippet(BaseModel):
    """
    A source-backed rendering of one or more identifiers.

    Several identifiers share one snippet when they are declared in the same
    block. Snippets are deduplicated by identity, never by value.
    """
    ids: List[str] = Field(min_length=1)
    kind: Literal["func", "type", "value", "package"] = "func"
    file_name: str = ""
    offset: int = 0
    text: str = ""  # docs + signature
    full_text: Optional[str] = None  # complete body; defaults to text
    public_text: Optional[str] = None  # view used as an external dependency; defaults to text
    docs: List[IdentifierDocumentation] = Field(default_factory=list)
    missing_docs: List[IdentifierDocumentation] = Field(default_factory=list)
    is_test: bool = False
    is_var: bool = True  # value snippets only: False for const declarations
    is_test_func: bool = False

    def short_view(self) -> str:
        return self.text

    def full_view(self) -> str:
        return self.full_text if self.full_text is not None else self.text

    def public_view(self) -> str:
        return self.public_text if self.public_text is not None else self.text

    @property
    def is_const(self) -> bool:
        return self.kind == "value" and not self.is_var


class ExternalID(BaseModel):
    """An identifier defined in another package."""
    model_config = ConfigDict(frozen=True)

    import_path: str
    id: str


class PackageManifest(BaseModel):
    """
    JSON description of a package: its snippets and reference edges.

    `uses` maps an identifier to the identifiers it references inside the
    package; `external_uses` maps it to identifiers in other packages, which
    are resolved against `dependencies`.
    """
    name: str
    import_path: str = ""
    is_test_package: bool = False
    snippets: List[Snippet] = Field(default_factory=list)
    uses: Dict[str, List[str]] = Field(default_factory=dict)
    test_identifiers: List[str] = Field(default_factory=list)
    external_uses: Dict[str, List[ExternalID]] = Field(default_factory=dict)
    dependencies: List["PackageManifest"] = Field(default_factory=list)


PackageManifest.model_rebuild()
