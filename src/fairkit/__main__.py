"""Command line entry point.

Usage:
    python -m fairkit chains
    python -m fairkit address
    python -m fairkit balance [--chain C] [--address A] [--token T]
    python -m fairkit quote IN OUT AMOUNT [--slippage S]
    python -m fairkit transfer TO AMOUNT [--token T] [--data 0x..] [--encrypt]
    python -m fairkit swap IN OUT AMOUNT [--slippage S] [--encrypt]
"""

import argparse
import asyncio
import json
import logging
import sys
from typing import Optional

from fairkit.chains import ChainRegistry
from fairkit.config import EncryptionMode, get_settings
from fairkit.contracts import BalanceRequest, SwapRequest, TransferRequest
from fairkit.errors import FairKitError
from fairkit.evm.rpc import RPCError
from fairkit.evm.wallet import create_wallet_provider
from fairkit.services import BalanceService, SwapService, TransferService
from fairkit.utils.locks import LockTimeoutError

logger = logging.getLogger(__name__)


def build_parser(default_chain: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="fairkit", description="EVM agent wallet operations")
    parser.add_argument("--chain", default=default_chain, help=f"Chain name (default: {default_chain})")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in EncryptionMode],
        help="Override the configured encryption mode",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("chains", help="List registered chains")
    commands.add_parser("address", help="Show the wallet address")

    balance = commands.add_parser("balance", help="Show a token balance")
    balance.add_argument("--address", help="Address to query (default: own wallet)")
    balance.add_argument("--token", help="Token symbol or address (default: native)")

    quote = commands.add_parser("quote", help="Quote a swap without sending it")
    quote.add_argument("input_token")
    quote.add_argument("output_token")
    quote.add_argument("amount")
    quote.add_argument("--slippage", help="Slippage percent (default 0.5)")

    transfer = commands.add_parser("transfer", help="Send native or ERC-20 tokens")
    transfer.add_argument("to_address")
    transfer.add_argument("amount")
    transfer.add_argument("--token", help="Token symbol or address (default: native)")
    transfer.add_argument("--data", help="Extra 0x call data for native transfers")
    transfer.add_argument("--encrypt", action="store_true", help="Encrypt the transaction")

    swap = commands.add_parser("swap", help="Swap through the chain's router")
    swap.add_argument("input_token")
    swap.add_argument("output_token")
    swap.add_argument("amount")
    swap.add_argument("--slippage", help="Slippage percent (default 0.5)")
    swap.add_argument("--encrypt", action="store_true", help="Encrypt the transaction")

    return parser


def _print(payload) -> None:
    print(json.dumps(payload, indent=2, default=str))


async def run(args: argparse.Namespace) -> None:
    settings = get_settings()
    mode = EncryptionMode(args.mode) if args.mode else None

    if args.command == "chains":
        registry = ChainRegistry(settings.chain_overrides)
        _print([
            {
                "name": chain.name,
                "chain_id": chain.chain_id,
                "native_symbol": chain.native_symbol,
                "rpc_url": chain.rpc_url,
                "router": chain.router_address,
                "tokens": dict(chain.tokens),
            }
            for chain in registry.all()
        ])
        return

    wallet = create_wallet_provider(settings)

    if args.command == "address":
        print(wallet.describe())

    elif args.command == "balance":
        request = BalanceRequest(chain=args.chain, address=args.address, token=args.token)
        result = await BalanceService(wallet).get_balance(request)
        _print(result.model_dump())

    elif args.command == "quote":
        request = SwapRequest(
            chain=args.chain,
            input_token=args.input_token,
            output_token=args.output_token,
            amount=args.amount,
            slippage=args.slippage,
        )
        prepared = await SwapService(wallet).prepare(request)
        _print({
            "chain": prepared.chain.name,
            "route": prepared.plan.route.value,
            "amount_in": args.amount,
            "amount_out": prepared.amount_out,
            "amount_out_min": prepared.amount_out_min,
            "slippage": str(prepared.quote.slippage),
        })

    elif args.command == "transfer":
        request = TransferRequest(
            chain=args.chain,
            to_address=args.to_address,
            amount=args.amount,
            token=args.token,
            data=args.data,
            encrypt=args.encrypt,
        )
        result = await TransferService(wallet).transfer(request, encryption_mode=mode)
        _print(result.model_dump())

    elif args.command == "swap":
        request = SwapRequest(
            chain=args.chain,
            input_token=args.input_token,
            output_token=args.output_token,
            amount=args.amount,
            slippage=args.slippage,
            encrypt=args.encrypt,
        )
        result = await SwapService(wallet).swap(request, encryption_mode=mode)
        _print(result.model_dump())


def main(argv: Optional[list[str]] = None) -> int:
    settings = get_settings()

    log_level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    args = build_parser(settings.default_chain).parse_args(argv)

    try:
        asyncio.run(run(args))
    except (FairKitError, RPCError, LockTimeoutError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
