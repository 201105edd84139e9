"""
Configuration management for the agent cloud deployer.
"""

import os
from dataclasses import dataclass
from typing import Optional

from errors import ConfigError

DEFAULT_API_URL = "https://api.pipecat.daily.co"

TRUE_VALUES = ("true", "True", "TRUE")
FALSE_VALUES = ("false", "False", "FALSE")


def get_input(name: str, default: str = "") -> str:
    """
    Read a CI action input from the environment.

    Actions expose inputs as INPUT_<NAME>, upper-cased with spaces replaced
    by underscores (hyphens are kept).

    Args:
        name: Input name as declared in action.yml (e.g. "api-key")
        default: Value when the input is unset or blank

    Returns:
        Trimmed input value
    """
    value = os.environ.get(f"INPUT_{name.replace(' ', '_').upper()}", "").strip()
    return value or default


def parse_bool(value, field: str = "input") -> bool:
    """Parse a YAML 1.2 core-schema boolean, the only forms CI inputs accept."""
    if isinstance(value, bool):
        return value
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    raise ConfigError(
        field,
        f'Input "{field}" does not meet YAML 1.2 "Core Schema" specification: '
        f"{value!r}. Support boolean input list: true | True | TRUE | false | False | FALSE",
    )


def parse_optional_int(value, field: str = "input") -> Optional[int]:
    """Parse an integer input; blank means unset."""
    if value is None or isinstance(value, int):
        return value
    value = str(value).strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigError(field, f'Input "{field}" must be an integer, got {value!r}')


@dataclass
class DeployConfig:
    """Configuration for a single agent deployment."""

    api_key: str
    agent_name: str
    image: str
    api_url: str = DEFAULT_API_URL

    # Docker build
    build: bool = True
    registry_username: Optional[str] = None
    registry_password: Optional[str] = None
    tag: Optional[str] = None
    dockerfile: str = "Dockerfile"
    docker_context: str = "."
    docker_build_args: Optional[str] = None

    # Deploy
    image_credentials: Optional[str] = None
    secret_set: Optional[str] = None
    region: Optional[str] = None
    min_agents: Optional[int] = None
    max_agents: Optional[int] = None
    agent_profile: Optional[str] = None
    enable_managed_keys: bool = False
    wait_for_ready: bool = True
    wait_timeout: int = 300

    verbose: bool = False

    @classmethod
    def from_args(cls, args) -> "DeployConfig":
        """
        Create configuration from command-line arguments.

        Args:
            args: Parsed argparse arguments

        Returns:
            DeployConfig instance
        """
        return cls(
            api_key=args.api_key,
            agent_name=args.agent_name,
            image=args.image,
            api_url=args.api_url,
            build=parse_bool(args.build, "build"),
            registry_username=args.registry_username,
            registry_password=args.registry_password,
            tag=args.tag,
            dockerfile=args.dockerfile,
            docker_context=args.docker_context,
            docker_build_args=args.docker_build_args,
            image_credentials=args.image_credentials,
            secret_set=args.secret_set,
            region=args.region,
            min_agents=parse_optional_int(args.min_agents, "min-agents"),
            max_agents=parse_optional_int(args.max_agents, "max-agents"),
            agent_profile=args.agent_profile,
            enable_managed_keys=parse_bool(
                args.enable_managed_keys, "enable-managed-keys"
            ),
            wait_for_ready=parse_bool(args.wait_for_ready, "wait-for-ready"),
            wait_timeout=parse_optional_int(args.wait_timeout, "wait-timeout"),
            verbose=args.verbose,
        )

    def validate(self) -> None:
        """
        Check required inputs.

        Raises:
            ConfigError: On the first missing or invalid input
        """
        for field, value in (
            ("api-key", self.api_key),
            ("agent-name", self.agent_name),
            ("image", self.image),
        ):
            if not value:
                raise ConfigError(field, f"Input required and not supplied: {field}")

        if self.wait_for_ready and (self.wait_timeout is None or self.wait_timeout <= 0):
            raise ConfigError(
                "wait-timeout",
                f'Input "wait-timeout" must be a positive number of seconds, '
                f"got {self.wait_timeout!r}",
            )

    def resolved_tag(self) -> str:
        """Image tag to build: explicit tag, else the commit SHA, else latest."""
        return self.tag or os.environ.get("GITHUB_SHA") or "latest"
