# Custom exceptions for contextbundle

from typing import List, Optional


class ContextBundleError(Exception):
    """Base exception for all application-specific errors."""
    pass


class MissingSnippetError(ContextBundleError):
    """Raised when the dependency graph reports an identifier that has no snippet."""
    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f"missing snippet for identifier {identifier!r}")


class ImportNotInModuleError(ContextBundleError):
    """Raised when an import path is not available in the local module."""
    def __init__(self, import_path: str):
        self.import_path = import_path
        super().__init__(f"import path {import_path!r} is not in module")


class ExternalResolutionError(ContextBundleError):
    """Raised when an external identifier cannot be resolved for a reason other than absence."""
    def __init__(self, identifier: str, import_path: str, reason: str):
        self.identifier = identifier
        self.import_path = import_path
        self.reason = reason
        super().__init__(
            f"failed to resolve external identifier {import_path}.{identifier}: {reason}"
        )


class SnippetLookupError(ContextBundleError, LookupError):
    """Raised when asking a group for the snippet of an identifier it does not contain."""
    def __init__(self, identifier: str, group_ids: Optional[List[str]] = None):
        self.identifier = identifier
        self.group_ids = list(group_ids or [])
        super().__init__(
            f"no snippet for id {identifier!r} in group {','.join(self.group_ids)!r}"
        )


class ConfigError(ContextBundleError):
    """Raised for configuration-related problems."""
    pass


class ManifestError(ContextBundleError):
    """Raised when a package manifest cannot be loaded or validated."""
    def __init__(self, path: str, message: str):
        self.path = path
        self.message = message
        super().__init__(f"Invalid manifest {path}: {message}")


class TokenBudgetExceededError(ContextBundleError):
    """Raised when even the cheapest candidate group cannot be pruned into the budget."""

    def __init__(self, required_tokens: int, budget_tokens: int):
        self.required_tokens = required_tokens
        self.budget_tokens = budget_tokens
        super().__init__(
            f"token budget exceeded: need {required_tokens:,} tokens, budget is {budget_tokens:,}"
        )


class NoCandidateGroupsError(ContextBundleError):
    """Raised when budgeted selection has no eligible group to start from."""
    pass
