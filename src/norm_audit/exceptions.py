"""
Norm Audit Exceptions

Error hierarchy for knowledge-base loading and configuration problems.
The scoring pipeline itself does not raise; lookup misses are skipped.
"""


class NormAuditError(Exception):
    """Base class for norm-audit errors."""

    def __init__(self, message: str = "norm-audit error"):
        self.message = message
        super().__init__(self.message)


class KnowledgeBaseError(NormAuditError):
    """Raised when the norm knowledge base cannot be read or validated."""


class KnowledgeBaseIntegrityError(KnowledgeBaseError):
    """Raised when the qualification graph has a cycle or a level inversion."""

    def __init__(self, message: str, violations=None):
        self.violations = list(violations or [])
        super().__init__(message)


class ConfigurationError(NormAuditError):
    """Raised when engine configuration values are invalid."""
