"""
Data models for the agent cloud deployer.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


def remove_empty_values(obj: Any) -> Any:
    """
    Drop keys whose value is None or an empty string, recursively.

    Nested dicts left empty after cleaning are dropped too. Lists and falsy
    scalars such as 0 and False are kept as they are: the API treats an
    omitted key as "leave unchanged", so only truly unset values may go.

    Args:
        obj: Value to clean; anything other than a dict is returned unchanged

    Returns:
        Cleaned copy of the dict
    """
    if not isinstance(obj, dict):
        return obj

    cleaned = {}
    for key, value in obj.items():
        if value is None or value == "":
            continue
        if isinstance(value, dict):
            nested = remove_empty_values(value)
            if nested:
                cleaned[key] = nested
        else:
            cleaned[key] = value
    return cleaned


@dataclass
class DeployPayload:
    """Create/update request body for an agent."""

    service_name: str
    image: str
    image_pull_secret_set: Optional[str] = None
    secret_set: Optional[str] = None
    region: Optional[str] = None
    min_agents: Optional[int] = None
    max_agents: Optional[int] = None
    enable_managed_keys: bool = False
    agent_profile: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the sparse wire format."""
        return remove_empty_values(
            {
                "serviceName": self.service_name,
                "image": self.image,
                "imagePullSecretSet": self.image_pull_secret_set,
                "secretSet": self.secret_set,
                "region": self.region,
                "autoScaling": {
                    "minAgents": self.min_agents,
                    "maxAgents": self.max_agents,
                },
                # Only an explicit opt-in is sent
                "enableIntegratedKeysProxy": self.enable_managed_keys or None,
                "agentProfile": self.agent_profile,
            }
        )


def _as_list(value: Any) -> List[Any]:
    """Normalize an errors field: null is empty, a lone entry becomes a list."""
    if not value:
        return []
    if isinstance(value, list):
        return list(value)
    return [value]


@dataclass
class AgentStatus:
    """Snapshot of an agent record as returned by the control plane."""

    service_name: Optional[str] = None
    active_deployment_id: Optional[str] = None
    available: Any = None
    ready: Any = None
    active_deployment_ready: Any = None
    errors: List[Dict] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AgentStatus":
        """
        Build a status view from an agent record.

        Args:
            data: Agent JSON body

        Returns:
            AgentStatus instance
        """
        return cls(
            service_name=data.get("serviceName"),
            active_deployment_id=data.get("activeDeploymentId") or None,
            available=data.get("available"),
            ready=data.get("ready"),
            active_deployment_ready=data.get("activeDeploymentReady"),
            errors=_as_list(data.get("errors")),
        )

    @property
    def is_available(self) -> bool:
        return self.available is True or self.ready is True

    @property
    def is_deployment_ready(self) -> bool:
        return self.active_deployment_ready is True


@dataclass
class DeployResult:
    """Outcome of a successful deployment run."""

    image: str
    service_name: str
    created: bool
    agent: Optional[Dict[str, Any]] = None
