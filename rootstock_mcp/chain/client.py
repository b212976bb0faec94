"""
Chain client capability used by every tool handler.

``ChainClient`` is the interface handlers depend on; ``Web3ChainClient`` is the
production implementation over ``AsyncWeb3``. RPC and revert failures are
translated into ``ChainRejectedError`` so the tool layer can report them with
the underlying message intact.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Protocol, Sequence

import aiohttp
from eth_account import Account
from eth_account.signers.local import LocalAccount
from eth_utils import to_checksum_address
from web3 import AsyncWeb3, Web3
from web3.exceptions import ContractLogicError, Web3Exception

from rootstock_mcp.config import RootstockConfig, default_config
from rootstock_mcp.errors import (
    ChainRejectedError,
    ChainUnreachableError,
    NoAccountError,
    ToolError,
)
from rootstock_mcp.networks import Network, select_network

logger = logging.getLogger(__name__)

Abi = List[Dict[str, Any]]


@dataclass(slots=True)
class PreparedTransaction:
    """Transaction parameters produced by a successful simulation."""

    params: Dict[str, Any]
    result: Any = None


class ChainClient(Protocol):
    """Capability interface for chain-bound operations."""

    network: Network

    @property
    def account_address(self) -> Optional[str]: ...

    @property
    def chain_id(self) -> int: ...

    async def read_contract(
        self, address: str, abi: Abi, function_name: str, args: Sequence[Any] = ()
    ) -> Any: ...

    async def simulate_contract(
        self,
        address: str,
        abi: Abi,
        function_name: str,
        args: Sequence[Any] = (),
        *,
        value: int = 0,
    ) -> PreparedTransaction: ...

    async def write_contract(self, prepared: PreparedTransaction) -> str: ...

    async def deploy_contract(self, abi: Abi, bytecode: str, args: Sequence[Any] = ()) -> str: ...

    async def get_gas_price(self) -> int: ...

    async def get_balance(self, address: str) -> int: ...

    def with_network(self, network: Network) -> "ChainClient": ...

    async def aclose(self) -> None: ...


@contextmanager
def _translate_rpc_errors(action: str) -> Iterator[None]:
    try:
        yield
    except ToolError:
        raise
    except ContractLogicError as exc:
        raise ChainRejectedError(f"{action} reverted: {exc}") from exc
    except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as exc:
        raise ChainUnreachableError(f"{action} failed: RPC endpoint unreachable ({exc})") from exc
    except (Web3Exception, ValueError) as exc:
        raise ChainRejectedError(f"{action} failed: {exc}") from exc


def load_account(private_key: Optional[str]) -> Optional[LocalAccount]:
    """Build the signing account; the key itself never reaches error messages."""
    if not private_key:
        return None
    try:
        return Account.from_key(private_key)
    except Exception:
        raise ValueError("Invalid private key format (key not shown for security)") from None


class Web3ChainClient:
    """Async Rootstock client bound to one network and at most one signing account."""

    def __init__(
        self,
        network: Network,
        *,
        account: Optional[LocalAccount] = None,
        timeout: float = default_config.timeout,
        web3: Optional[AsyncWeb3] = None,
    ) -> None:
        self.network = network
        self.account = account
        self._timeout = timeout
        self._w3 = web3 or AsyncWeb3(
            AsyncWeb3.AsyncHTTPProvider(
                network.rpc_url,
                request_kwargs={"timeout": aiohttp.ClientTimeout(total=timeout)},
            )
        )

    @property
    def account_address(self) -> Optional[str]:
        return self.account.address if self.account is not None else None

    @property
    def chain_id(self) -> int:
        return self.network.chain_id

    def _require_account(self) -> LocalAccount:
        if self.account is None:
            raise NoAccountError()
        return self.account

    def _function_call(self, address: str, abi: Abi, function_name: str, args: Sequence[Any]):
        contract = self._w3.eth.contract(address=to_checksum_address(address), abi=abi)
        return contract.get_function_by_name(function_name)(*args)

    async def read_contract(
        self, address: str, abi: Abi, function_name: str, args: Sequence[Any] = ()
    ) -> Any:
        with _translate_rpc_errors(f"Call to {function_name}"):
            return await self._function_call(address, abi, function_name, args).call()

    async def simulate_contract(
        self,
        address: str,
        abi: Abi,
        function_name: str,
        args: Sequence[Any] = (),
        *,
        value: int = 0,
    ) -> PreparedTransaction:
        sender = self._require_account()
        with _translate_rpc_errors(f"Simulation of {function_name}"):
            call = self._function_call(address, abi, function_name, args)
            base = {"from": sender.address, "value": value}
            result = await call.call(base)
            gas_price = await self._w3.eth.gas_price
            params = await call.build_transaction({**base, "gasPrice": gas_price})
        logger.debug("Simulated %s on %s", function_name, address)
        return PreparedTransaction(params=dict(params), result=result)

    async def write_contract(self, prepared: PreparedTransaction) -> str:
        sender = self._require_account()
        params = dict(prepared.params)
        with _translate_rpc_errors("Transaction submission"):
            if "nonce" not in params:
                params["nonce"] = await self._w3.eth.get_transaction_count(sender.address, "pending")
            signed = sender.sign_transaction(params)
            tx_hash = await self._w3.eth.send_raw_transaction(signed.raw_transaction)
        return Web3.to_hex(tx_hash)

    async def deploy_contract(self, abi: Abi, bytecode: str, args: Sequence[Any] = ()) -> str:
        sender = self._require_account()
        contract = self._w3.eth.contract(abi=abi, bytecode=bytecode)
        with _translate_rpc_errors("Deployment"):
            gas_price = await self._w3.eth.gas_price
            params = await contract.constructor(*args).build_transaction(
                {"from": sender.address, "gasPrice": gas_price}
            )
        return await self.write_contract(PreparedTransaction(params=dict(params)))

    async def get_gas_price(self) -> int:
        with _translate_rpc_errors("Gas price query"):
            return await self._w3.eth.gas_price

    async def get_balance(self, address: str) -> int:
        with _translate_rpc_errors("Balance query"):
            return await self._w3.eth.get_balance(to_checksum_address(address))

    def with_network(self, network: Network) -> "Web3ChainClient":
        return Web3ChainClient(network, account=self.account, timeout=self._timeout)

    async def aclose(self) -> None:
        await self._w3.provider.disconnect()


def build_client(config: RootstockConfig | None = None) -> Web3ChainClient:
    """Construct the shared client from configuration."""
    config = config or default_config
    network = select_network(config.use_testnet, config)
    return Web3ChainClient(network, account=load_account(config.private_key), timeout=config.timeout)


default_client = build_client()
