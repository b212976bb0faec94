"""Generic contract call tool."""

from __future__ import annotations

import logging

from rootstock_mcp.chain import ChainClient
from rootstock_mcp.errors import InvalidAmountError
from rootstock_mcp.tools.abi import (
    coerce_function_args,
    find_function,
    is_payable,
    is_read_only,
    parse_abi,
    stringify_result,
)
from rootstock_mcp.tools.arguments import CallContractArgs
from rootstock_mcp.tools.common import require_account, transaction_result
from rootstock_mcp.tools.validators import normalize_address, parse_uint256

logger = logging.getLogger(__name__)


async def call_contract(client: ChainClient, args: CallContractArgs) -> str:
    """
    Call a function on a deployed contract.

    ``view``/``pure`` functions are queried and their decoded result returned as
    text. Any other function is simulated first and only submitted when the
    simulation succeeds; the transaction envelope is returned.

    Args:
        client: Chain client (override for testing).
        args: Parsed call_contract arguments.

    Returns:
        The call result as a string, or the JSON ``{hash, url}`` envelope.
    """
    abi = parse_abi(args.abi)
    address = normalize_address(args.contract_address, "contractAddress", strict=False)
    function_abi = find_function(abi, args.function_name, len(args.function_args or []))
    call_args = coerce_function_args(function_abi, args.function_args)

    if is_read_only(function_abi):
        result = await client.read_contract(address, [function_abi], args.function_name, call_args)
        return stringify_result(result)

    value = parse_uint256(args.value, "value") if args.value is not None else 0
    if value and not is_payable(function_abi):
        raise InvalidAmountError(
            f"Function {args.function_name} is not payable; value must be 0", field="value"
        )
    require_account(client)

    prepared = await client.simulate_contract(
        address, [function_abi], args.function_name, call_args, value=value
    )
    tx_hash = await client.write_contract(prepared)
    logger.info("Submitted %s on %s tx=%s", args.function_name, address, tx_hash)
    return transaction_result(client, tx_hash)
