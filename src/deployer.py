"""
Deployment orchestration for a single agent.
"""

import json
import logging
from typing import Callable, Optional

from clients import AgentControlPlaneClient
from config import DeployConfig
from errors import ConfigError
from image_builder import ImageBuilder
from models import DeployPayload, DeployResult
from workflow import group

logger = logging.getLogger(__name__)


def has_tag(image: str) -> bool:
    """Whether an image reference carries a tag or digest on its last component."""
    last = image.rsplit("/", 1)[-1]
    return ":" in last or "@" in last


class AgentDeployer:
    """Builds (optionally), deploys and waits for one agent."""

    def __init__(
        self,
        config: DeployConfig,
        api: Optional[AgentControlPlaneClient] = None,
        builder_factory: Callable[[], ImageBuilder] = ImageBuilder,
    ):
        """
        Initialize the deployer.

        Args:
            config: Validated deployment configuration
            api: Control-plane client; built from the config when omitted
            builder_factory: Creates the image builder, only when building
        """
        self.config = config
        self.api = api or AgentControlPlaneClient(config.api_url, config.api_key)
        self.builder_factory = builder_factory

    def resolve_image(self) -> str:
        """
        Resolve the image reference to deploy.

        Returns:
            Fully tagged image reference

        Raises:
            ConfigError: If build is disabled and the image has no tag
            ImageBuildError: If login, build or push fails
        """
        cfg = self.config
        if not cfg.build:
            if not has_tag(cfg.image):
                raise ConfigError(
                    "image",
                    'The "image" input must include a tag (e.g. my-image:v1.0) '
                    'when "build" is not enabled. Either set build: true or '
                    "provide a tagged image. The tag is read from the last path "
                    "component, so a registry port (localhost:5000/bot) is not a tag.",
                )
            return cfg.image

        with group("Docker Build & Push"):
            builder = self.builder_factory()
            return builder.build_and_push(
                image=cfg.image,
                tag=cfg.resolved_tag(),
                dockerfile=cfg.dockerfile,
                context=cfg.docker_context,
                build_args=cfg.docker_build_args,
                registry_username=cfg.registry_username,
                registry_password=cfg.registry_password,
            )

    def build_payload(self, image: str) -> DeployPayload:
        cfg = self.config
        return DeployPayload(
            service_name=cfg.agent_name,
            image=image,
            image_pull_secret_set=cfg.image_credentials,
            secret_set=cfg.secret_set,
            region=cfg.region,
            min_agents=cfg.min_agents,
            max_agents=cfg.max_agents,
            enable_managed_keys=cfg.enable_managed_keys,
            agent_profile=cfg.agent_profile,
        )

    def run(self) -> DeployResult:
        """
        Execute the deployment: resolve image, create or update, then wait.

        Any failure aborts the remaining steps; nothing is rolled back.

        Returns:
            DeployResult describing the deployed agent
        """
        name = self.config.agent_name
        image = self.resolve_image()
        logger.info(f"Deploy image: {image}")

        with group("Deploy to agent cloud"):
            logger.info(f'Checking if agent "{name}" already exists...')
            is_update = self.api.check_agent(name) is not None

            if is_update:
                logger.info(f'Agent "{name}" exists, updating deployment')
            else:
                logger.info(f'Agent "{name}" not found, creating new deployment')

            payload = self.build_payload(image).to_dict()
            agent = self.api.deploy(payload, is_update)
            logger.info(f"Deployment {'updated' if is_update else 'created'} successfully")
            logger.debug(f"Deploy response: {json.dumps(agent, indent=2)}")

        if self.config.wait_for_ready:
            with group("Waiting for deployment readiness"):
                agent = self.api.poll_for_ready(name, self.config.wait_timeout)
        else:
            logger.info("Skipping readiness check (wait-for-ready is false)")

        return DeployResult(
            image=image, service_name=name, created=not is_update, agent=agent
        )
