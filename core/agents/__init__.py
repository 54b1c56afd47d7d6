"""
Analysis agents: data validation, comparable selection, QC review and
market analysis behind one dispatch entrypoint.
"""

from .errors import AgentError, AgentInputError, UnknownAgentError
from .data_validator import DataValidationResult, ValidationIssue, validate_property_data
from .qc_reviewer import QCIssue, QCReviewResult, review_report
from .dispatch import AgentType, run_agent, resolve_agent_type

__all__ = [
    "AgentError",
    "AgentInputError",
    "UnknownAgentError",
    "DataValidationResult",
    "ValidationIssue",
    "validate_property_data",
    "QCIssue",
    "QCReviewResult",
    "review_report",
    "AgentType",
    "run_agent",
    "resolve_agent_type",
]
