"""LicenseOracle protocol - the OTP flow depends on this, not on Whop."""

from typing import Protocol


class LicenseOracle(Protocol):
    async def has_entitlement(self, email: str) -> bool:
        """True if *email* currently holds a valid membership.

        Raises LicenseProviderError when the provider cannot answer.
        """
        ...
