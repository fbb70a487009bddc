"""
Transaction Plan Layer

Encodes route plans into signable transaction steps:
- AbiEncoder: Selector + eth-abi calldata from a JSON ABI
- TransactionPlanBuilder: Resolves amounts, minimums and quotes per step

Usage:
    from launchpad.core.execution import PlanAmounts, TransactionPlanBuilder

    builder = TransactionPlanBuilder()
    built = builder.build(plan, PlanAmounts(amount_in=10**18, recipient="0x..."))
    for step in built.steps:
        print(step.title, step.data)
"""

from .encoder import MAX_UINT256, AbiEncoder, CallEncoder, describe_arguments
from .models import (
    BuiltPlan,
    PlanAmounts,
    PlanWarning,
    TransactionStep,
    TransactionType,
)
from .tx_builder import TransactionPlanBuilder

__all__ = [
    "MAX_UINT256",
    "AbiEncoder",
    "BuiltPlan",
    "CallEncoder",
    "PlanAmounts",
    "PlanWarning",
    "TransactionPlanBuilder",
    "TransactionStep",
    "TransactionType",
    "describe_arguments",
]
