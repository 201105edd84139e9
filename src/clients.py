"""
REST API client for the agent control plane.
"""

import json
import logging
import math
import time
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

import requests

from errors import ApiError, DeploymentFailedError, DeploymentTimeoutError
from models import AgentStatus

logger = logging.getLogger(__name__)

USER_AGENT = "agent-cloud-deploy"


class AgentControlPlaneClient:
    """REST client for the agent management API (v1)."""

    POLL_INTERVAL = 5  # seconds

    def __init__(self, api_url: str, api_key: str, timeout_s: int = 60):
        """
        Initialize the control-plane client.

        Args:
            api_url: Base API URL (e.g. https://api.pipecat.daily.co)
            api_key: API key, sent as a Bearer token
            timeout_s: Per-request timeout in seconds
        """
        self.api_url = api_url.rstrip("/")
        self.timeout_s = timeout_s

        self.session = requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "User-Agent": USER_AGENT,
            }
        )

    def _agent_url(self, service_name: Optional[str] = None) -> str:
        """Construct the agents collection URL, or a single agent's URL."""
        if service_name is None:
            return f"{self.api_url}/v1/agents"
        return f"{self.api_url}/v1/agents/{quote(service_name, safe='')}"

    def _request(
        self, operation: str, method: str, url: str, **kwargs
    ) -> Tuple[int, Dict[str, Any]]:
        """
        Execute a single HTTP request and parse its JSON body.

        Args:
            operation: Description used in error messages
            method: HTTP method (GET, POST)
            url: Request URL
            **kwargs: Additional request parameters

        Returns:
            Tuple of (status_code, parsed body)

        Raises:
            ApiError: If the request could not be sent or no response arrived
        """
        logger.debug(f"{method} {url}")
        try:
            resp = self.session.request(method, url, timeout=self.timeout_s, **kwargs)
        except requests.RequestException as e:
            raise ApiError(operation, str(e)) from e

        logger.debug(f"{method} {url} -> {resp.status_code}")
        return resp.status_code, self._parse_body(resp)

    @staticmethod
    def _parse_body(resp: requests.Response) -> Dict[str, Any]:
        """Parse a JSON object body, wrapping anything else as rawBody."""
        try:
            result = resp.json()
        except ValueError:
            return {"rawBody": resp.text}
        if not isinstance(result, dict):
            return {"rawBody": resp.text}
        return result

    @staticmethod
    def _error_message(result: Dict[str, Any], status_code: int) -> str:
        """Extract the reason from an error body ({"error": ..., "code": ...})."""
        return result.get("error") or result.get("message") or f"HTTP {status_code}"

    def check_agent(self, service_name: str) -> Optional[Dict[str, Any]]:
        """
        Look up an agent by service name.

        Args:
            service_name: Agent/service name

        Returns:
            Agent record, or None if the agent does not exist

        Raises:
            ApiError: On any non-2xx status other than 404
        """
        status_code, result = self._request(
            "check agent", "GET", self._agent_url(service_name)
        )

        if status_code == 404:
            return None

        if not 200 <= status_code < 300:
            raise ApiError(
                "check agent", self._error_message(result, status_code), status_code
            )

        return result

    def deploy(self, payload: Dict[str, Any], update: bool) -> Dict[str, Any]:
        """
        Create or update an agent deployment.

        New agents are created with POST /v1/agents; existing agents are
        updated with POST /v1/agents/{serviceName}.

        Args:
            payload: Sparse deployment payload (see DeployPayload.to_dict)
            update: Update an existing agent instead of creating one

        Returns:
            Agent record from the response body

        Raises:
            ApiError: On any non-2xx status
        """
        operation = "update deployment" if update else "create deployment"
        url = self._agent_url(payload["serviceName"]) if update else self._agent_url()

        logger.debug(f"Payload: {json.dumps(payload, indent=2)}")

        status_code, result = self._request(operation, "POST", url, json=payload)

        if not 200 <= status_code < 300:
            raise ApiError(
                operation, self._error_message(result, status_code), status_code
            )

        return result

    def poll_for_ready(self, service_name: str, timeout_seconds: int) -> Dict[str, Any]:
        """
        Poll until the agent's active deployment is ready.

        The first check happens one interval after the call. An agent that
        is missing mid-poll is retried on the next attempt; server-reported
        errors fail immediately, even on an otherwise ready record.

        Args:
            service_name: Agent/service name
            timeout_seconds: Wait budget; sets the number of attempts

        Returns:
            The ready agent record

        Raises:
            DeploymentFailedError: If the agent reports deployment errors
            DeploymentTimeoutError: If attempts run out before readiness
            ApiError: If a status check fails
        """
        max_attempts = math.ceil(timeout_seconds / self.POLL_INTERVAL)
        deployment_id: Optional[str] = None

        logger.info(
            f"Waiting for deployment to be ready (timeout: {timeout_seconds}s)..."
        )

        for attempt in range(1, max_attempts + 1):
            time.sleep(self.POLL_INTERVAL)

            agent = self.check_agent(service_name)
            if agent is None:
                logger.warning(
                    f"Agent {service_name} not found during polling "
                    f"(attempt {attempt}/{max_attempts})"
                )
                continue

            status = AgentStatus.from_dict(agent)

            if status.active_deployment_id and not deployment_id:
                deployment_id = status.active_deployment_id
                logger.info(f"Deployment ID: {deployment_id}")

            if status.errors:
                raise DeploymentFailedError(status.errors)

            logger.info(
                f"Status check {attempt}/{max_attempts}: "
                f"available={status.is_available}, "
                f"deploymentReady={status.is_deployment_ready}"
            )

            if status.is_available and status.is_deployment_ready:
                logger.info("Deployment is ready!")
                return agent

        raise DeploymentTimeoutError(timeout_seconds)
