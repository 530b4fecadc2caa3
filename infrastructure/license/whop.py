"""Whop implementation of LicenseOracle.

Looks up every membership for an email within one company and grants access
when any of them is in an accepted status (and, when a product filter is
configured, belongs to that product). Results are never cached, so a revoked
membership blocks the user's next login attempt.
"""

from typing import Any, Mapping, Optional

import httpx

from config import LicenseSettings
from errors import LicenseProviderError
from infrastructure.http_client import HttpClient
from shared.logging import get_logger, mask_email

log = get_logger(__name__)

# "completed" covers one-time / lifetime purchases
ACCEPTED_STATUSES = frozenset({"active", "trialing", "paid_subscriber", "completed"})


def membership_grants_access(
    membership: Mapping[str, Any], product_id: Optional[str] = None
) -> bool:
    status = membership.get("status")
    if not isinstance(status, str) or status not in ACCEPTED_STATUSES:
        return False
    if not product_id:
        return True
    return product_id in (membership.get("product_id"), membership.get("experience_id"))


class WhopLicenseOracle:
    def __init__(self, settings: LicenseSettings, http_client: HttpClient) -> None:
        self._settings = settings
        self._http = http_client

    async def _fetch_memberships(self, email: str) -> list:
        try:
            response = await self._http.get(
                f"{self._settings.whop_api_base}/memberships",
                params={"email": email, "company_id": self._settings.whop_company_id},
                headers={"Authorization": f"Bearer {self._settings.whop_api_key}"},
            )
        except httpx.HTTPError as e:
            raise LicenseProviderError("License check failed (Provider Error)") from e

        if not response.is_success:
            log.error(
                "license_provider_error",
                status_code=response.status_code,
                response=response.text[:200],
            )
            raise LicenseProviderError("License check failed (Provider Error)")

        try:
            body = response.json()
        except ValueError as e:
            log.error("license_provider_bad_payload", error=str(e))
            raise LicenseProviderError("License check failed (Provider Error)") from e

        memberships = body.get("data") if isinstance(body, dict) else None
        return memberships if isinstance(memberships, list) else []

    async def has_entitlement(self, email: str) -> bool:
        memberships = await self._fetch_memberships(email)
        product_id = self._settings.whop_product_id or None
        entitled = any(
            membership_grants_access(m, product_id)
            for m in memberships
            if isinstance(m, Mapping)
        )
        log.info(
            "license_checked",
            email=mask_email(email),
            memberships=len(memberships),
            entitled=entitled,
        )
        return entitled
