"""Console entry point for the agent cloud deployer CLI."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List

from config import DEFAULT_API_URL, DeployConfig, get_input
from deployer import AgentDeployer
from errors import AgentDeployError
from log_utils import setup_logging
from workflow import set_failed, set_output

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    Every option defaults to the matching action input (INPUT_<NAME>), so the
    same entry point serves a shell and the container action.
    """
    parser = argparse.ArgumentParser(
        description="Build an agent image and deploy it to the agent cloud",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  # Build, push and deploy, waiting for readiness\n"
            "  agent-cloud-deploy --api-key $KEY --agent-name my-bot \\\n"
            "      --image ghcr.io/my-org/my-bot --tag v1\n\n"
            "  # Deploy a pre-built image without waiting\n"
            "  agent-cloud-deploy --api-key $KEY --agent-name my-bot \\\n"
            "      --image ghcr.io/my-org/my-bot:v1 --no-build --no-wait-for-ready"
        ),
    )

    required = parser.add_argument_group("required arguments")
    required.add_argument(
        "--api-key", default=get_input("api-key"), help="Agent cloud API key"
    )
    required.add_argument(
        "--agent-name",
        default=get_input("agent-name"),
        help="Name of the agent service to create or update",
    )
    required.add_argument(
        "--image",
        default=get_input("image"),
        help=(
            "Image name (without tag when building; with tag, e.g. "
            "my-image:v1.0, when --no-build is given)"
        ),
    )
    parser.add_argument(
        "--api-url",
        default=get_input("api-url", DEFAULT_API_URL),
        help=f"Control-plane base URL (default: {DEFAULT_API_URL})",
    )

    build = parser.add_argument_group("docker build")
    build.add_argument(
        "--build",
        action=argparse.BooleanOptionalAction,
        default=get_input("build", "true"),
        help="Build and push the image before deploying (default: true)",
    )
    build.add_argument("--registry-username", default=get_input("registry-username"))
    build.add_argument("--registry-password", default=get_input("registry-password"))
    build.add_argument(
        "--tag",
        default=get_input("tag"),
        help="Image tag (default: $GITHUB_SHA, else latest)",
    )
    build.add_argument("--dockerfile", default=get_input("dockerfile", "Dockerfile"))
    build.add_argument("--docker-context", default=get_input("docker-context", "."))
    build.add_argument(
        "--docker-build-args",
        default=get_input("docker-build-args"),
        help="Newline-separated KEY=VALUE build arguments",
    )

    deploy = parser.add_argument_group("deployment")
    deploy.add_argument(
        "--image-credentials",
        default=get_input("image-credentials"),
        help="Image pull secret set for private registries",
    )
    deploy.add_argument(
        "--secret-set",
        default=get_input("secret-set"),
        help="Secret set exposed to the agent at runtime",
    )
    deploy.add_argument("--region", default=get_input("region"))
    deploy.add_argument("--min-agents", default=get_input("min-agents"))
    deploy.add_argument("--max-agents", default=get_input("max-agents"))
    deploy.add_argument("--agent-profile", default=get_input("agent-profile"))
    deploy.add_argument(
        "--enable-managed-keys",
        action=argparse.BooleanOptionalAction,
        default=get_input("enable-managed-keys", "false"),
    )

    wait = parser.add_argument_group("readiness")
    wait.add_argument(
        "--wait-for-ready",
        action=argparse.BooleanOptionalAction,
        default=get_input("wait-for-ready", "true"),
        help="Poll until the deployment is ready (default: true)",
    )
    wait.add_argument(
        "--wait-timeout",
        default=get_input("wait-timeout", "300"),
        metavar="SECONDS",
        help="Maximum time to wait for readiness (default: 300)",
    )

    logging_group = parser.add_argument_group("logging and output")
    logging_group.add_argument("--verbose", action="store_true")
    logging_group.add_argument("--log-file", help="Also write logs to this file")

    return parser


def main(argv: List[str] | None = None) -> int:
    """CLI main; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(args=argv)

    setup_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        config = DeployConfig.from_args(args)
        config.validate()

        result = AgentDeployer(config).run()
    except AgentDeployError as e:
        return set_failed(str(e))

    set_output("image", result.image)
    set_output("service-name", result.service_name)

    logger.info(
        f'Deployment complete! Agent "{result.service_name}" deployed '
        f"with image {result.image}"
    )
    return 0


def run() -> None:
    """console_scripts entry point."""
    sys.exit(main())
