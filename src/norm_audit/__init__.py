"""
Norm Audit

Legal norm classification and risk-scoring engine. Matches case facts
against a multi-jurisdiction statutory knowledge base by deterministic
indicator and keyword matching. Results are assistive suggestions that
require human legal review.
"""

__version__ = "0.1.0"
