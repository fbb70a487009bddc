"""
Command plumbing shared by every launchpad operation.

A command validates its payload with a pydantic model, runs against a
CommandContext and always returns a CommandResult. Launchpad errors are
rendered into the result instead of escaping to the caller.
"""

import logging
import time
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Callable, ClassVar, Dict, List, Optional, Type

from pydantic import AfterValidator, BaseModel, BeforeValidator, Field
from pydantic import ValidationError as PydanticValidationError

from ...services.address import is_native
from ..amm.quote import MAX_UINT256
from ..errors import LaunchpadError, ValidationError
from ..execution.tx_builder import TransactionPlanBuilder
from ..registry.models import Chain
from ..registry.stores import ChainRegistry, DeploymentRegistry, PoolStore, PositionStore
from ..routing.models import Operation, PoolSnapshot, RoutePlan, RouteRequest
from ..routing.planner import RoutePlanner
from ..sessions.manager import SessionManager
from ..sessions.models import MetadataEntry


logger = logging.getLogger(__name__)


def _reject_float(value: Any) -> Any:
    # JSON numbers past 2**53 arrive as floats that have already lost wei precision
    if isinstance(value, float):
        raise ValueError("amounts must be integers or decimal strings, not floats")
    return value


def _check_uint256(value: int) -> int:
    if value > MAX_UINT256:
        raise ValueError("amount exceeds the uint256 range")
    return value


# Base-unit amount as the router sees it
WeiAmount = Annotated[int, BeforeValidator(_reject_float), AfterValidator(_check_uint256), Field(ge=0)]


class CommandType(str, Enum):
    """Operations an agent can request."""
    CREATE_POOL = "create_pool"
    ADD_LIQUIDITY = "add_liquidity"
    REMOVE_LIQUIDITY = "remove_liquidity"
    SWAP = "swap"
    SWAP_QUOTE = "swap_quote"
    POOL_INFO = "pool_info"


class MetadataItem(BaseModel):
    key: str = Field(min_length=1)
    value: str


class CommandRequest(BaseModel):
    """Fields every command accepts."""
    chain_id: Optional[str] = Field(default=None, description="Chain to plan for (defaults to the active chain)")


class SessionCommandRequest(CommandRequest):
    """Fields for commands that end in a signing session."""
    slippage_percent: Optional[Decimal] = Field(
        default=None, ge=0, lt=100, description="Slippage tolerance in percent (default from settings)"
    )
    metadata: List[MetadataItem] = Field(default_factory=list, description="Extra display metadata for the signing page")

    def metadata_entries(self) -> List[MetadataEntry]:
        return [MetadataEntry(item.key, item.value) for item in self.metadata]


@dataclass
class CommandContext:
    """Collaborators a command needs. The chain is resolved per request and passed down."""
    chains: ChainRegistry
    deployments: DeploymentRegistry
    pools: PoolStore
    positions: PositionStore
    sessions: SessionManager
    planner: RoutePlanner = field(default_factory=RoutePlanner)
    builder: TransactionPlanBuilder = field(default_factory=TransactionPlanBuilder)
    clock: Callable[[], int] = field(default=lambda: int(time.time()))

    def resolve_chain(self, chain_id: Optional[str] = None) -> Chain:
        chain = self.chains.get(chain_id) if chain_id else self.chains.active_chain()
        if not chain.is_evm:
            raise ValidationError(
                f"Chain {chain.id} is {chain.chain_type.value}; only EVM chains are supported",
                details={"chain_id": chain.id, "chain_type": chain.chain_type.value},
            )
        return chain

    def pool_snapshot(self, chain: Chain, weth: str, token_a: str, token_b: str) -> PoolSnapshot:
        """Load the direct pool and both legs through the wrapped native token."""
        side_a = weth if is_native(token_a) else token_a
        side_b = weth if is_native(token_b) else token_b
        candidates = [self.pools.by_token_pair(chain.id, side_a, side_b)]
        if weth:
            candidates.append(self.pools.by_token_pair(chain.id, side_a, weth))
            candidates.append(self.pools.by_token_pair(chain.id, weth, side_b))
        return PoolSnapshot.of(candidates)

    def plan(self, chain: Chain, operation: Operation, token_a: str, token_b: str) -> RoutePlan:
        deployment = self.deployments.by_chain(chain.id)
        snapshot = self.pool_snapshot(chain, deployment.weth_address, token_a, token_b)
        return self.planner.plan(RouteRequest(operation, token_a, token_b), deployment, snapshot, self.clock())


@dataclass
class CommandResult:
    success: bool
    data: Dict[str, Any] = field(default_factory=dict)
    error: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"success": self.success}
        if self.success:
            result["data"] = self.data
        else:
            result["error"] = self.error
        return result


def _pydantic_errors(exc: PydanticValidationError) -> List[Dict[str, str]]:
    return [
        {"field": ".".join(str(part) for part in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]


class Command:
    """Base class for launchpad commands."""

    command_type: ClassVar[CommandType]
    request_model: ClassVar[Type[BaseModel]] = CommandRequest
    description: ClassVar[str] = ""

    def run(self, request: Any, context: CommandContext) -> Dict[str, Any]:
        raise NotImplementedError

    def execute(self, payload: Optional[Dict[str, Any]], context: CommandContext) -> CommandResult:
        try:
            request = self.request_model.model_validate(payload or {})
        except PydanticValidationError as e:
            error = ValidationError(
                f"Invalid {self.command_type.value} request",
                details={"errors": _pydantic_errors(e)},
            )
            logger.info(f"Rejected {self.command_type.value} request: {error.details['errors']}")
            return CommandResult(success=False, error=error.to_dict())

        try:
            data = self.run(request, context)
        except LaunchpadError as e:
            logger.warning(f"{self.command_type.value} failed ({e.category.value}): {e.message}")
            return CommandResult(success=False, error=e.to_dict())

        return CommandResult(success=True, data=data)

    def describe(self) -> Dict[str, Any]:
        return {
            "type": self.command_type.value,
            "description": self.description,
            "schema": self.request_model.model_json_schema(),
        }
