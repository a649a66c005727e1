"""Transfer contracts."""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from fairkit.contracts.common import text_or_none, to_bool


class TransferRequest(BaseModel):
    """Native or ERC-20 transfer to a recipient."""

    chain: str = Field(..., description="Chain name")
    to_address: Optional[str] = Field(None, description="Recipient address")
    amount: Optional[str] = Field(None, description="Decimal amount string, e.g. '1.0'")
    token: Optional[str] = Field(None, description="Symbol or address (default: native)")
    data: Optional[str] = Field(None, description="Extra 0x call data for native transfers")
    encrypt: bool = Field(default=False, description="Encrypt this transaction (manual mode)")

    @field_validator("to_address", "amount", "token", "data", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        return text_or_none(value)

    @field_validator("encrypt", mode="before")
    @classmethod
    def _coerce_flag(cls, value):
        return to_bool(value)


class TransferResult(BaseModel):
    """Outcome of a submitted transfer."""

    chain: str
    tx_hash: str
    recipient: str = Field(..., description="Recipient after normalization")
    token: str = Field(..., description="Native symbol, or the token reference as given")
    amount: str = Field(..., description="Amount echoed with at least one decimal place")
    data: Optional[str] = Field(None, description="Extra call data that was sent")
    encryption_requested: bool = Field(..., description="The request's own flag")
    encrypted: bool = Field(..., description="Whether encryption was actually applied")
