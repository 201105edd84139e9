"""
Exception hierarchy for the agent cloud deployer.
"""

from typing import Dict, List, Optional


class AgentDeployError(RuntimeError):
    """Base exception for all deployment failures.

    Every failure that should abort the invocation derives from this class,
    so the CLI can report it with a single handler.
    """

    pass


class ConfigError(AgentDeployError):
    """Invalid or missing invocation input.

    Attributes:
        field: The input that caused the error
        message: Human-readable description
    """

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        self.message = message
        super().__init__(message)


class ApiError(AgentDeployError):
    """Non-2xx response or transport failure from the control-plane API.

    Attributes:
        operation: What was being attempted (e.g. "check agent")
        message: Reason extracted from the response body
        status_code: HTTP status, or None for transport failures
    """

    def __init__(
        self, operation: str, message: str, status_code: Optional[int] = None
    ) -> None:
        self.operation = operation
        self.message = message
        self.status_code = status_code
        super().__init__(f"Failed to {operation}: {message}")


class DeploymentFailedError(AgentDeployError):
    """The control plane reported errors for the active deployment."""

    def __init__(self, errors: List[Dict]) -> None:
        self.errors = errors
        summary = "; ".join(
            f"{e.get('code')}: {e.get('message')}" if isinstance(e, dict) else str(e)
            for e in errors
        )
        super().__init__(f"Deployment errors: {summary}")


class DeploymentTimeoutError(AgentDeployError):
    """The deployment did not become ready within the wait budget."""

    def __init__(self, timeout_seconds: int) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Deployment did not become ready within {timeout_seconds} seconds"
        )


class ImageBuildError(AgentDeployError):
    """A docker login, build or push step failed.

    Attributes:
        step: Which step failed ("init", "login", "build", "push")
        message: Human-readable description
    """

    def __init__(self, step: str, message: str) -> None:
        self.step = step
        self.message = message
        super().__init__(message)
