"""
Agent errors.
"""


class AgentError(Exception):
    """Base class for agent failures."""


class UnknownAgentError(AgentError):
    """Raised when an agent type is not registered."""

    def __init__(self, agent_type: str):
        self.agent_type = agent_type
        super().__init__(f"Unknown agent type: {agent_type}")


class AgentInputError(AgentError, ValueError):
    """Raised when an agent payload is missing required parts."""
