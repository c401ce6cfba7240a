"""
HTTP client for the SignalFx REST API.

Each call is one blocking round trip. There is no retry or backoff: a
transport failure or error status is raised to the caller straight away as
``APIError`` (``NotFoundError`` for 404).

Example:
    from sfxprovider.client import ClientContext
    from sfxprovider.config import load_config

    with ClientContext.from_config(load_config()) as ctx:
        rule = ctx.client.get_alert_muting_rule("Ex1abc")
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from sfxprovider.config import ProviderConfig
from sfxprovider.errors import APIError, ConfigurationError, NotFoundError
from sfxprovider.models import (
    AlertMutingRule,
    CreateUpdateAlertMutingRuleRequest,
    DashboardGroup,
)

logger = logging.getLogger(__name__)

ALERT_MUTING_PATH = "/v2/alertmuting"
DASHBOARD_GROUP_PATH = "/v2/dashboardgroup"

M = TypeVar("M", bound=BaseModel)


class SignalFxClient:
    """
    Client for the SignalFx alert muting and dashboard group APIs.

    Args:
        config: Provider configuration (API URL, token, timeout)
        transport: Optional httpx transport, used to substitute a fake API
    """

    def __init__(
        self,
        config: ProviderConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not config.auth_token:
            raise ConfigurationError(
                "No auth token configured. Set SFX_AUTH_TOKEN or pass --auth-token."
            )
        self.api_url = config.api_url
        self._http = httpx.Client(
            base_url=config.api_url,
            timeout=config.timeout_seconds,
            headers={
                "Content-Type": "application/json",
                "X-SF-Token": config.auth_token,
            },
            transport=transport,
        )

    def __enter__(self) -> "SignalFxClient":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    @staticmethod
    def _format_error(response: httpx.Response) -> str:
        """Format an API error response for human readability."""
        try:
            data = response.json()
            message = data.get("message", response.text) if isinstance(data, dict) else response.text
        except (json.JSONDecodeError, ValueError):
            message = response.text
        return message or response.reason_phrase

    def _request(
        self,
        operation: str,
        method: str,
        path: str,
        payload: Optional[dict] = None,
        response_model: Optional[Type[M]] = None,
    ) -> Any:
        """
        Execute one API call.

        Args:
            operation: Human-readable operation name used in errors
            method: HTTP method
            path: Path relative to the API URL
            payload: Optional JSON body
            response_model: Model the response body is validated into

        Returns:
            The validated ``response_model`` instance, or None when no model
            is given

        Raises:
            NotFoundError: On HTTP 404
            APIError: On any other error status, transport failure, or a
                response body that is not the expected JSON entity
        """
        try:
            response = self._http.request(method, path, json=payload)
        except httpx.RequestError as e:
            raise APIError(operation, None, f"cannot reach {self.api_url}: {e}") from e

        if response.status_code == 404:
            raise NotFoundError(operation, self._format_error(response))
        if response.is_error:
            raise APIError(operation, response.status_code, self._format_error(response))

        if response_model is None:
            return None

        try:
            data = response.json()
        except ValueError as e:
            raise APIError(
                operation, response.status_code, f"response is not valid JSON: {e}"
            ) from e
        try:
            return response_model.model_validate(data)
        except ValidationError as e:
            raise APIError(
                operation,
                response.status_code,
                f"unexpected response body: {e.error_count()} validation error(s): {e}",
            ) from e

    # Alert muting rules

    def create_alert_muting_rule(
        self, request: CreateUpdateAlertMutingRuleRequest
    ) -> AlertMutingRule:
        return self._request(
            "Create Alert Muting Rule",
            "POST",
            ALERT_MUTING_PATH,
            request.model_dump(by_alias=True),
            response_model=AlertMutingRule,
        )

    def get_alert_muting_rule(self, rule_id: str) -> AlertMutingRule:
        return self._request(
            "Get Alert Muting Rule", "GET", f"{ALERT_MUTING_PATH}/{rule_id}",
            response_model=AlertMutingRule,
        )

    def update_alert_muting_rule(
        self, rule_id: str, request: CreateUpdateAlertMutingRuleRequest
    ) -> AlertMutingRule:
        return self._request(
            "Update Alert Muting Rule",
            "PUT",
            f"{ALERT_MUTING_PATH}/{rule_id}",
            request.model_dump(by_alias=True),
            response_model=AlertMutingRule,
        )

    def delete_alert_muting_rule(self, rule_id: str) -> None:
        self._request(
            "Delete Alert Muting Rule", "DELETE", f"{ALERT_MUTING_PATH}/{rule_id}"
        )

    # Dashboard groups

    def create_dashboard_group(self, payload: dict) -> DashboardGroup:
        return self._request(
            "Create Dashboard Group", "POST", DASHBOARD_GROUP_PATH, payload,
            response_model=DashboardGroup,
        )

    def get_dashboard_group(self, group_id: str) -> DashboardGroup:
        return self._request(
            "Get Dashboard Group", "GET", f"{DASHBOARD_GROUP_PATH}/{group_id}",
            response_model=DashboardGroup,
        )

    def update_dashboard_group(self, group_id: str, payload: dict) -> DashboardGroup:
        return self._request(
            "Update Dashboard Group",
            "PUT",
            f"{DASHBOARD_GROUP_PATH}/{group_id}",
            payload,
            response_model=DashboardGroup,
        )

    def delete_dashboard_group(self, group_id: str) -> None:
        self._request(
            "Delete Dashboard Group", "DELETE", f"{DASHBOARD_GROUP_PATH}/{group_id}"
        )


@dataclass(frozen=True)
class ClientContext:
    """Read-only handle passed into every resource operation."""

    config: ProviderConfig
    client: SignalFxClient

    @classmethod
    def from_config(
        cls,
        config: ProviderConfig,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "ClientContext":
        return cls(config=config, client=SignalFxClient(config, transport=transport))

    def __enter__(self) -> "ClientContext":
        return self

    def __exit__(self, *args) -> None:
        self.client.close()
