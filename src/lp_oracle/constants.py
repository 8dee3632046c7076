"""Default deployment addresses and endpoints."""

from typing import TypedDict


class TokenDefaults(TypedDict):
    address: str
    decimals: int
    pool: str


# DexScreener pair used as the reference USD feed (BSC, USD1/WBNB)
DEXSCREENER_REFERENCE_PAIR_URL = (
    "https://api.dexscreener.com/latest/dex/pairs/bsc/"
    "0x46b9217342CdC50c89FfA84A12Be45b2639eAf4A"
)
DEFAULT_REFERENCE_SYMBOL = "BNB"

DEFAULT_POLYGON_RPC_URL = "https://polygon.therpc.io"
POLYGON_CHAIN_ID = 137

# Wrapped POL on Polygon PoS
WPOL_ADDRESS = "0x0d500B1d8E8eF31E21C99d1Db9A6444d3ADf1270"
WPOL_DECIMALS = 18

DEFAULT_TOKENS: dict[str, TokenDefaults] = {
    "XBNB": {
        "address": "0xB174D17ebf4568968F3c68cdf0F8f72cBd8Cf72f",
        "decimals": 18,
        "pool": "0xACBa24735eCf93dE06d2B7191A813bcec9D4bbd9",
    },
    "B4NK": {
        "address": "0x297bF1a99662BF1cBCE13E7fF8ba435bED80860e",
        "decimals": 18,
        "pool": "0x8562f33725b7cDA95B46fa079D18Ff8f7ABE2a5C",
    },
}

DEFAULT_CURRENT_FILENAME = "price.json"
DEFAULT_LAST_GOOD_FILENAME = "price.last-good.json"

REFERENCE_UNAVAILABLE_MESSAGE = "reference rate unavailable"
