"""fairkit: balances, transfers and Uniswap V2 swaps for an EVM agent wallet."""

__version__ = "0.1.0"
