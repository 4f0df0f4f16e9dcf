"""Futures contract specifications used to price P&L."""

import re
from typing import Optional

from propjournal.models import ContractSpec

CONTRACT_SPECS: dict[str, ContractSpec] = {
    spec.symbol: spec
    for spec in [
        # Stock index futures
        ContractSpec(symbol="ES", tick_size=0.25, tick_value=12.50),
        ContractSpec(symbol="NQ", tick_size=0.25, tick_value=5.00),
        ContractSpec(symbol="YM", tick_size=1.0, tick_value=5.00),
        ContractSpec(symbol="RTY", tick_size=0.10, tick_value=5.00),
        ContractSpec(symbol="MES", tick_size=0.25, tick_value=1.25),
        ContractSpec(symbol="MNQ", tick_size=0.25, tick_value=0.50),
        ContractSpec(symbol="MYM", tick_size=1.0, tick_value=0.50),
        ContractSpec(symbol="M2K", tick_size=0.10, tick_value=0.50),
        # Energy and metals
        ContractSpec(symbol="CL", tick_size=0.01, tick_value=10.00),
        ContractSpec(symbol="MCL", tick_size=0.01, tick_value=1.00),
        ContractSpec(symbol="GC", tick_size=0.10, tick_value=10.00),
        ContractSpec(symbol="MGC", tick_size=0.10, tick_value=1.00),
        ContractSpec(symbol="SI", tick_size=0.005, tick_value=25.00),
        # Grains
        ContractSpec(symbol="ZC", tick_size=0.25, tick_value=12.50),
        ContractSpec(symbol="ZS", tick_size=0.25, tick_value=12.50),
        ContractSpec(symbol="ZW", tick_size=0.25, tick_value=12.50),
    ]
}

DEFAULT_POINT_VALUE = 1.0

# Root, then month code, then a one or two digit year: ESZ3, NQH24, M2KM4.
_CONTRACT_CODE_RE = re.compile(r"^([A-Z0-9]+?)[FGHJKMNQUVXZ]\d{1,2}$")


def contract_root(contract: str) -> Optional[str]:
    """Strip the month/year suffix from a contract code (``ESZ3`` -> ``ES``)."""
    match = _CONTRACT_CODE_RE.match((contract or "").strip().upper())
    return match.group(1) if match else None


def get_contract_spec(symbol: str) -> Optional[ContractSpec]:
    return CONTRACT_SPECS.get((symbol or "").strip().upper())


def get_point_value(product: str, contract: str = "") -> float:
    """Currency value of a one-point move.

    Looks up the product code first, then the root of the contract code,
    and falls back to 1 for unlisted instruments.
    """
    spec = get_contract_spec(product)
    if spec is None:
        root = contract_root(contract)
        spec = get_contract_spec(root) if root else None
    return spec.point_value if spec else DEFAULT_POINT_VALUE
