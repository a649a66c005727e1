"""Balance query contracts."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from fairkit.contracts.common import text_or_none


class BalanceRequest(BaseModel):
    """Request for one token balance of one address."""

    chain: str = Field(..., description="Chain name (fair-testnet, ...)")
    address: Optional[str] = Field(None, description="Address to query (default: own wallet)")
    token: Optional[str] = Field(None, description="Symbol or address (default: native)")

    @field_validator("address", "token", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        return text_or_none(value)


class BalanceResult(BaseModel):
    """Balance in human-readable units."""

    chain: str = Field(..., description="Chain queried")
    address: str = Field(..., description="Address queried after normalization")
    token: str = Field(..., description="Native symbol, or the token reference as given")
    amount: str = Field(..., description="Decimal balance string")
