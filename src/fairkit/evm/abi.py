"""Contract function descriptors for ERC-20 tokens and the Uniswap V2 router.

Only the functions this package calls are described. Encoding goes through
eth-abi so dynamic arguments (swap paths) are laid out correctly.
"""

from dataclasses import dataclass
from typing import Any, Sequence

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_utils import function_signature_to_4byte_selector
from web3 import Web3


def _normalize(abi_type: str, value: Any) -> Any:
    if abi_type == "address":
        return Web3.to_checksum_address(value)
    if abi_type == "address[]":
        return [Web3.to_checksum_address(v) for v in value]
    if abi_type.startswith("uint"):
        return int(value)
    return value


@dataclass(frozen=True)
class ContractFunction:
    """A callable contract function: name plus ABI input/output types."""

    name: str
    inputs: tuple[str, ...] = ()
    outputs: tuple[str, ...] = ()

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(self.inputs)})"

    @property
    def selector(self) -> bytes:
        return function_signature_to_4byte_selector(self.signature)

    def encode(self, args: Sequence[Any] = ()) -> str:
        """Encode call data as a 0x-prefixed hex string."""
        if len(args) != len(self.inputs):
            raise ValueError(
                f"{self.signature} takes {len(self.inputs)} arguments, got {len(args)}"
            )
        values = [_normalize(t, v) for t, v in zip(self.inputs, args)]
        return Web3.to_hex(self.selector + abi_encode(list(self.inputs), values))

    def decode(self, data: bytes) -> Any:
        """Decode return data; single outputs are unwrapped."""
        values = abi_decode(list(self.outputs), data)
        if len(values) == 1:
            return values[0]
        return values


# ======================
# ERC-20
# ======================

ERC20_BALANCE_OF = ContractFunction("balanceOf", ("address",), ("uint256",))
ERC20_DECIMALS = ContractFunction("decimals", (), ("uint8",))
ERC20_ALLOWANCE = ContractFunction("allowance", ("address", "address"), ("uint256",))
ERC20_APPROVE = ContractFunction("approve", ("address", "uint256"), ("bool",))
ERC20_TRANSFER = ContractFunction("transfer", ("address", "uint256"), ("bool",))

# ======================
# Uniswap V2 Router
# ======================

ROUTER_GET_AMOUNTS_OUT = ContractFunction(
    "getAmountsOut", ("uint256", "address[]"), ("uint256[]",)
)
ROUTER_SWAP_EXACT_ETH_FOR_TOKENS = ContractFunction(
    "swapExactETHForTokens",
    ("uint256", "address[]", "address", "uint256"),
    ("uint256[]",),
)
ROUTER_SWAP_EXACT_TOKENS_FOR_ETH = ContractFunction(
    "swapExactTokensForETH",
    ("uint256", "uint256", "address[]", "address", "uint256"),
    ("uint256[]",),
)
ROUTER_SWAP_EXACT_TOKENS_FOR_TOKENS = ContractFunction(
    "swapExactTokensForTokens",
    ("uint256", "uint256", "address[]", "address", "uint256"),
    ("uint256[]",),
)
