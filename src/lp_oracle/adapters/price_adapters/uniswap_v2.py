from __future__ import annotations

import asyncio
import logging

import requests
from eth_typing import URI
from web3 import Web3
from web3.exceptions import BadFunctionCallOutput, ContractLogicError, Web3Exception

from ...abi import load_uniswap_v2_pair_abi
from ...settings import SnapshotSettings
from ...units import scaled_to_float
from .base import (
    BasePoolReader,
    PairMismatchError,
    ReserveSnapshot,
    RpcFailureError,
    ZeroReserveError,
)

logger = logging.getLogger(__name__)

RPC_ERRORS = (
    Web3Exception,
    BadFunctionCallOutput,
    ContractLogicError,
    requests.exceptions.RequestException,
    ConnectionError,
    TimeoutError,
)


class Web3PoolReader(BasePoolReader):
    """Reads UniswapV2-style pair contracts over JSON-RPC.

    Every read of a run is pinned to one block: the configured
    ``block_number`` or the node's latest block, fetched once.
    """

    def __init__(self, config: SnapshotSettings, w3: Web3 | None = None):
        self.config = config
        self.w3 = w3 or Web3(
            Web3.HTTPProvider(
                URI(config.rpc_url), request_kwargs={"timeout": config.rpc_timeout}
            )
        )
        self._abi = load_uniswap_v2_pair_abi()
        self._block_number: int | None = config.block_number
        self._chain_verified = False
        self._lock = asyncio.Lock()

    @property
    def adapter_name(self) -> str:
        return "uniswap_v2"

    async def _prepare(self) -> int:
        """Verify the chain id and pin the block number, once per reader."""
        async with self._lock:
            if not self._chain_verified:
                chain_id = await asyncio.to_thread(lambda: self.w3.eth.chain_id)
                if chain_id != self.config.chain_id:
                    raise RpcFailureError(
                        f"RPC {self.config.rpc_url} serves chain {chain_id}, "
                        f"expected {self.config.chain_id}"
                    )
                self._chain_verified = True
            if self._block_number is None:
                self._block_number = await asyncio.to_thread(
                    lambda: self.w3.eth.block_number
                )
                logger.debug("Pinned reads to block %d", self._block_number)
            return self._block_number

    async def fetch_reserve_snapshot(self, pool_address: str) -> ReserveSnapshot:
        try:
            block_number = await self._prepare()
            pool = self.w3.eth.contract(
                address=Web3.to_checksum_address(pool_address), abi=self._abi
            )

            def _call(fn):
                return fn.call(block_identifier=block_number)

            token0, token1, reserves = await asyncio.gather(
                asyncio.to_thread(_call, pool.functions.token0()),
                asyncio.to_thread(_call, pool.functions.token1()),
                asyncio.to_thread(_call, pool.functions.getReserves()),
            )
        except RpcFailureError:
            raise
        except RPC_ERRORS as e:
            raise RpcFailureError(f"RPC read failed for LP {pool_address}: {e}") from e

        reserve0, reserve1, _ = reserves
        return ReserveSnapshot(
            token0=str(token0),
            token1=str(token1),
            reserve0=int(reserve0),
            reserve1=int(reserve1),
        )


class UniswapV2PriceResolver:
    """Derives a token's mid-price in quote units from pool reserves.

    price(token in quote) = (reserveQuote / 10**quoteDecimals)
                            / (reserveToken / 10**tokenDecimals)

    Fees and slippage are ignored; this is a point-in-time reference price.
    """

    def __init__(self, reader: BasePoolReader):
        self.reader = reader

    async def resolve(
        self,
        pool: str,
        target_token: str,
        target_decimals: int,
        quote_token: str,
        quote_decimals: int,
    ) -> float:
        """Return the price of ``target_token`` in units of ``quote_token``.

        Raises:
            RpcFailureError: If reading the pool fails.
            PairMismatchError: If the pool is not a target/quote pair.
            ZeroReserveError: If either reserve is zero.
        """
        snapshot = await self.reader.fetch_reserve_snapshot(pool)

        token0 = snapshot.token0.lower()
        token1 = snapshot.token1.lower()
        target = target_token.lower()
        quote = quote_token.lower()

        if token0 == target and token1 == quote:
            reserve_token, reserve_quote = snapshot.reserve0, snapshot.reserve1
        elif token1 == target and token0 == quote:
            reserve_token, reserve_quote = snapshot.reserve1, snapshot.reserve0
        else:
            raise PairMismatchError(pool, target_token, quote_token)

        if reserve_token == 0 or reserve_quote == 0:
            raise ZeroReserveError(f"LP {pool} has an empty reserve")

        rate = scaled_to_float(reserve_quote, quote_decimals) / scaled_to_float(
            reserve_token, target_decimals
        )
        logger.debug("LP %s: 1 %s = %s quote", pool, target_token, rate)
        return rate
