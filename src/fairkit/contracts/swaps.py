"""Swap contracts."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from fairkit.contracts.common import none_if_blank, text_or_none, to_bool


class SwapRequest(BaseModel):
    """Exact-input swap through the chain's Uniswap V2 router."""

    chain: str = Field(..., description="Chain name")
    input_token: Optional[str] = Field(None, description="Symbol or address to sell")
    output_token: Optional[str] = Field(None, description="Symbol or address to buy")
    amount: Optional[str] = Field(None, description="Decimal input amount string")
    slippage: Optional[Decimal] = Field(None, description="Slippage percent, 0-50 (default 0.5)")
    encrypt: bool = Field(default=False, description="Encrypt this swap (manual mode)")

    @field_validator("input_token", "output_token", "amount", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        return text_or_none(value)

    @field_validator("slippage", mode="before")
    @classmethod
    def _blank_slippage(cls, value):
        value = none_if_blank(value)
        if isinstance(value, str):
            return value.strip().rstrip("%")
        return value

    @field_validator("encrypt", mode="before")
    @classmethod
    def _coerce_flag(cls, value):
        return to_bool(value)


class SwapResult(BaseModel):
    """Outcome of a confirmed swap."""

    chain: str
    tx_hash: str
    route: str = Field(..., description="Router function used")
    input_token: str = Field(..., description="Input reference as given")
    output_token: str = Field(..., description="Output reference as given")
    amount_in: str = Field(..., description="Input amount echoed with a decimal place")
    amount_out: str = Field(..., description="Quoted output in output-token units")
    amount_out_min: str = Field(..., description="Minimum accepted output after slippage")
    approval_tx_hash: Optional[str] = Field(None, description="Approval sent before the swap")
    encryption_requested: bool = Field(..., description="The request's own flag")
    encrypted: bool = Field(..., description="Whether encryption was actually applied")
