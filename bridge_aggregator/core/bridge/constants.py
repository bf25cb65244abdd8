"""Constants and chain metadata for bridge route aggregation."""

from typing import Any, Dict, List, Optional, Union

# Chains are identified by lowercase slugs; numeric ids are provider-facing.
ChainId = str

NATIVE_TOKEN = 'native'
NATIVE_PLACEHOLDER = '0x0000000000000000000000000000000000000000'
SOLANA_NATIVE_MINT = 'So11111111111111111111111111111111111111112'

CHAIN_METADATA: Dict[ChainId, Dict[str, Any]] = {
    'ethereum': {
        'name': 'Ethereum',
        'chain_id': 1,
        'aliases': ['ethereum', 'eth', 'mainnet', 'ethereum mainnet', 'l1'],
        'native_symbol': 'ETH',
        'native_token': NATIVE_PLACEHOLDER,
        'native_decimals': 18,
        'chain_type': 'evm',
    },
    'base': {
        'name': 'Base',
        'chain_id': 8453,
        'aliases': ['base', 'base mainnet'],
        'native_symbol': 'ETH',
        'native_token': NATIVE_PLACEHOLDER,
        'native_decimals': 18,
        'chain_type': 'evm',
    },
    'arbitrum': {
        'name': 'Arbitrum',
        'chain_id': 42161,
        'aliases': ['arbitrum', 'arb', 'arbitrum one'],
        'native_symbol': 'ETH',
        'native_token': NATIVE_PLACEHOLDER,
        'native_decimals': 18,
        'chain_type': 'evm',
    },
    'optimism': {
        'name': 'Optimism',
        'chain_id': 10,
        'aliases': ['optimism', 'op'],
        'native_symbol': 'ETH',
        'native_token': NATIVE_PLACEHOLDER,
        'native_decimals': 18,
        'chain_type': 'evm',
    },
    'polygon': {
        'name': 'Polygon',
        'chain_id': 137,
        'aliases': ['polygon', 'matic', 'matic pos'],
        'native_symbol': 'POL',
        'native_token': NATIVE_PLACEHOLDER,
        'native_decimals': 18,
        'chain_type': 'evm',
    },
    'bsc': {
        'name': 'BNB Smart Chain',
        'chain_id': 56,
        'aliases': ['bsc', 'bnb', 'bnb chain', 'binance smart chain'],
        'native_symbol': 'BNB',
        'native_token': NATIVE_PLACEHOLDER,
        'native_decimals': 18,
        'chain_type': 'evm',
    },
    'avalanche': {
        'name': 'Avalanche',
        'chain_id': 43114,
        'aliases': ['avalanche', 'avax', 'avalanche c-chain'],
        'native_symbol': 'AVAX',
        'native_token': NATIVE_PLACEHOLDER,
        'native_decimals': 18,
        'chain_type': 'evm',
    },
    # Non-EVM chains
    'solana': {
        'name': 'Solana',
        'chain_id': 792703809,
        'aliases': ['solana', 'sol'],
        'native_symbol': 'SOL',
        'native_token': SOLANA_NATIVE_MINT,
        'native_decimals': 9,
        'chain_type': 'solana',
    },
}

CHAIN_ALIAS_TO_ID: Dict[str, ChainId] = {
    alias: slug
    for slug, details in CHAIN_METADATA.items()
    for alias in details.get('aliases', [])
}

NUMERIC_CHAIN_TO_ID: Dict[int, ChainId] = {
    details['chain_id']: slug for slug, details in CHAIN_METADATA.items()
}

EVM_CHAINS: List[ChainId] = [
    slug for slug, details in CHAIN_METADATA.items() if details['chain_type'] == 'evm'
]

# Directed compatibility: which destinations can be reached from a source chain.
CHAIN_COMPATIBILITY: Dict[ChainId, List[ChainId]] = {
    slug: [
        target
        for target in CHAIN_METADATA
        if target != slug
    ]
    for slug in CHAIN_METADATA
}


def resolve_chain(value: Union[str, int, None]) -> Optional[ChainId]:
    """Map a slug, alias or numeric chain id onto a canonical chain slug."""

    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return NUMERIC_CHAIN_TO_ID.get(value)
    text = str(value).strip().lower()
    if not text:
        return None
    if text.isdigit():
        return NUMERIC_CHAIN_TO_ID.get(int(text))
    return CHAIN_ALIAS_TO_ID.get(text)


def numeric_chain_id(chain: Union[str, int, None]) -> Optional[int]:
    slug = resolve_chain(chain)
    if slug is None:
        return None
    return CHAIN_METADATA[slug]['chain_id']


def native_token(chain: Union[str, int, None]) -> Optional[str]:
    slug = resolve_chain(chain)
    if slug is None:
        return None
    return CHAIN_METADATA[slug]['native_token']
