"""
Container image build and push using the Docker SDK.
"""

import logging
import os
from typing import Dict, Optional

import docker
from docker.errors import APIError, BuildError, DockerException

from errors import ImageBuildError

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY = "docker.io"


def parse_registry(image: str) -> str:
    """
    Parse the registry hostname from an image name.

    A first path component containing a dot or a colon is a registry
    hostname (e.g. "ghcr.io", "localhost:5000"); anything else lives on
    Docker Hub.

    Args:
        image: Image name without tag (e.g. "ghcr.io/my-org/my-bot")

    Returns:
        Registry hostname
    """
    parts = image.split("/")
    if len(parts) > 1 and ("." in parts[0] or ":" in parts[0]):
        return parts[0]
    return DEFAULT_REGISTRY


def parse_build_args(build_args: Optional[str]) -> Dict[str, str]:
    """
    Parse newline-separated KEY=VALUE build arguments.

    A bare KEY takes its value from the environment and is skipped when
    the variable is unset, as `docker build --build-arg KEY` does.

    Args:
        build_args: Raw multi-line input

    Returns:
        Mapping suitable for the SDK's buildargs parameter
    """
    parsed: Dict[str, str] = {}
    for line in (build_args or "").splitlines():
        arg = line.strip()
        if not arg:
            continue
        key, sep, value = arg.partition("=")
        if sep:
            parsed[key] = value
        elif key in os.environ:
            parsed[key] = os.environ[key]
        else:
            logger.debug(f"Build arg {key} not set in environment, skipping")
    return parsed


class ImageBuilder:
    """Builds and pushes agent images through the local Docker daemon."""

    def __init__(self) -> None:
        """
        Connect to the Docker daemon using the environment configuration.

        Raises:
            ImageBuildError: If the Docker daemon is not available
        """
        try:
            self.client = docker.from_env()
        except DockerException as e:
            raise ImageBuildError("init", f"Docker is not available: {e}") from e

    def login(self, registry: str, username: str, password: str) -> None:
        """
        Log in to a container registry.

        Raises:
            ImageBuildError: If authentication fails
        """
        logger.info(f"Logging in to {registry}...")
        try:
            self.client.login(username=username, password=password, registry=registry)
        except DockerException as e:
            reason = e.explanation if isinstance(e, APIError) and e.explanation else e
            raise ImageBuildError(
                "login", f"Docker login to {registry} failed: {reason}"
            ) from e
        logger.info(f"Successfully logged in to {registry}")

    def build(
        self,
        image: str,
        tag: str,
        dockerfile: str = "Dockerfile",
        context: str = ".",
        build_args: Optional[Dict[str, str]] = None,
    ) -> str:
        """
        Build an image from a local context.

        Args:
            image: Image name without tag
            tag: Image tag
            dockerfile: Dockerfile path, relative to the working directory
            context: Build context directory
            build_args: Build-time variables

        Returns:
            Full image reference (image:tag)

        Raises:
            ImageBuildError: If the context is missing or the build fails
        """
        image_with_tag = f"{image}:{tag}"
        if not os.path.isdir(context):
            raise ImageBuildError("build", f"Build context not found: {context}")

        logger.info(f"Building Docker image: {image_with_tag}")
        try:
            _, build_logs = self.client.images.build(
                path=context,
                dockerfile=os.path.abspath(dockerfile),
                tag=image_with_tag,
                buildargs=build_args or {},
                rm=True,
            )
        except BuildError as e:
            for entry in e.build_log or []:
                if isinstance(entry, dict) and "stream" in entry:
                    logger.info(str(entry["stream"]).rstrip("\n"))
            raise ImageBuildError("build", f"Docker build failed: {e.msg}") from e
        except DockerException as e:
            raise ImageBuildError("build", f"Docker error during build: {e}") from e

        for entry in build_logs:
            if isinstance(entry, dict) and "stream" in entry:
                line = str(entry["stream"]).rstrip("\n")
                if line:
                    logger.info(line)

        logger.info(f"Successfully built {image_with_tag}")
        return image_with_tag

    def push(self, image: str, tag: str) -> str:
        """
        Push an image to its registry.

        The daemon reports push failures inside the progress stream rather
        than as an HTTP error, so every entry is inspected.

        Returns:
            Full image reference (image:tag)

        Raises:
            ImageBuildError: If the push fails
        """
        image_with_tag = f"{image}:{tag}"
        logger.info(f"Pushing Docker image: {image_with_tag}")
        try:
            for entry in self.client.images.push(
                image, tag=tag, stream=True, decode=True
            ):
                if "error" in entry:
                    raise ImageBuildError(
                        "push", f"Docker push failed: {entry['error']}"
                    )
                if entry.get("status") and not entry.get("progress"):
                    logger.debug(f"{entry.get('id', '')} {entry['status']}".strip())
        except DockerException as e:
            raise ImageBuildError("push", f"Docker error during push: {e}") from e

        logger.info(f"Successfully pushed {image_with_tag}")
        return image_with_tag

    def build_and_push(
        self,
        image: str,
        tag: str,
        dockerfile: str = "Dockerfile",
        context: str = ".",
        build_args: Optional[str] = None,
        registry_username: Optional[str] = None,
        registry_password: Optional[str] = None,
    ) -> str:
        """
        Log in (when credentials are given), build and push an image.

        Returns:
            Full image reference (image:tag) to deploy
        """
        if registry_username and registry_password:
            self.login(parse_registry(image), registry_username, registry_password)
        else:
            logger.info("No registry credentials provided, skipping docker login")

        self.build(image, tag, dockerfile, context, parse_build_args(build_args))
        return self.push(image, tag)
