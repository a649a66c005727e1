"""Prompt templates for parameter extraction.

Each template asks the model for a ``<response>`` block of flat key/value
tags, parsed by ``fairkit.agent.intents.parse_key_value_xml``.
"""

BALANCE_TEMPLATE = """Given the recent messages and wallet information below:

{recent_messages}

{wallet_info}

Extract the following information about the requested balance check:
- chain: The chain to check on. Default is "{default_chain}".
- token: The token symbol (e.g. "USDT", "USDC", "WFAIR", "SKL", "FAIR") or a token address starting with "0x". If left empty, default to the native token.
- address: Address to check the balance for. Optional; must be a valid Ethereum address starting with "0x".

If any field is not provided, use the default value. If no default value is specified, use null.

Respond with an XML block containing only the extracted values. Use key-value pairs:

<response>
    <chain>SUPPORTED_CHAIN</chain>
    <address>string or null</address>
    <token>string</token>
</response>
"""

TRANSFER_TEMPLATE = """Given the recent messages and wallet information below:

{recent_messages}

{wallet_info}

Extract the following information about the requested transfer:
- chain: If no chain name is given, default to "{default_chain}".
- toAddress: The recipient wallet address (required).
- amount: The amount to transfer (required).
- token: The token symbol to transfer (e.g. "USDT", "USDC", "WFAIR", "SKL"). Leave empty for the native token.
- isBite: true only if the user asks for the transaction to be encrypted with BITE, otherwise false.

Respond with an XML block containing only the extracted values:

<response>
    <chain>SUPPORTED_CHAIN</chain>
    <token>string or null</token>
    <amount>string or null</amount>
    <toAddress>string</toAddress>
    <isBite>boolean</isBite>
</response>
"""

SWAP_TEMPLATE = """Given the recent messages and wallet information below:

{recent_messages}

{wallet_info}

The user wants to swap tokens through the Uniswap V2 router. Extract the following information:
- chain: The blockchain name. If nothing is provided, use "{default_chain}".
- inputToken: The token to swap from (symbol or address).
- outputToken: The token to swap to (symbol or address).
- amount: The amount to swap.
- slippage: Optional slippage tolerance in percent (default 0.5).
- isBite: true only if the user asks for the swap to be encrypted with BITE, otherwise false.

Respond with an XML block containing only the extracted values:

<response>
    <chain>SUPPORTED_CHAIN</chain>
    <inputToken>TOKEN_SYMBOL_OR_ADDRESS</inputToken>
    <outputToken>TOKEN_SYMBOL_OR_ADDRESS</outputToken>
    <amount>AMOUNT</amount>
    <slippage>SLIPPAGE_PERCENTAGE</slippage>
    <isBite>boolean</isBite>
</response>
"""


def render_template(
    template: str,
    recent_messages: str,
    wallet_info: str,
    default_chain: str,
) -> str:
    return template.format(
        recent_messages=recent_messages,
        wallet_info=wallet_info,
        default_chain=default_chain,
    )
