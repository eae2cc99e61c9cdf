"""Provider endpoints and per-asset chain constants."""

from typing import TypedDict


class AssetChains(TypedDict):
    decimals: int
    blockcypher: str | None
    blockchair: str | None


DEFAULT_COINGECKO_API_URL = "https://api.coingecko.com/api/v3"
DEFAULT_BLOCKCYPHER_API_URL = "https://api.blockcypher.com"
DEFAULT_BLOCKCHAIR_API_URL = "https://api.blockchair.com"

DEFAULT_CACHE_TTL_SECONDS = 300.0

# Keyed by canonical (CoinGecko id) asset name.
SUPPORTED_CHAINS: dict[str, AssetChains] = {
    "bitcoin": {"decimals": 8, "blockcypher": "btc", "blockchair": "bitcoin"},
    "litecoin": {"decimals": 8, "blockcypher": "ltc", "blockchair": "litecoin"},
    "dogecoin": {"decimals": 8, "blockcypher": "doge", "blockchair": "dogecoin"},
    "dash": {"decimals": 8, "blockcypher": "dash", "blockchair": "dash"},
    "bitcoin-cash": {
        "decimals": 8,
        "blockcypher": None,
        "blockchair": "bitcoin-cash",
    },
    "zcash": {"decimals": 8, "blockcypher": None, "blockchair": "zcash"},
    "ethereum": {"decimals": 18, "blockcypher": "eth", "blockchair": "ethereum"},
}

# Ticker shorthands accepted on input, resolved before building cache keys.
ASSET_ALIASES: dict[str, str] = {
    "btc": "bitcoin",
    "ltc": "litecoin",
    "doge": "dogecoin",
    "bch": "bitcoin-cash",
    "zec": "zcash",
    "eth": "ethereum",
}
