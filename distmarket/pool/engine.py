"""Pool state engine.

PoolEngine owns the state of one pool. Every public operation runs under the
pool's lock: it builds a Transition from the current state, carries out the
transition's side effects through the collaborators, and only then swaps the
new state in. If a collaborator raises, inbound transfers already made are
refunded, the old state stays in place and the error propagates.

Distinct PoolEngine instances share nothing and can be driven in parallel.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

import structlog

from distmarket.curves.gaussian import GaussianCurve
from distmarket.errors import AlreadyInitialized, InvariantViolation, NotInitialized
from distmarket.models.pool import PoolRecord

from . import transitions
from .config import DEFAULT_POOL_CONFIG, PoolConfig
from .interfaces import CollateralTransfer, PositionRegistry
from .state import PoolState, PoolStatus
from .transitions import Transition, TransferDirection, TransferRequest

logger = structlog.get_logger()


@dataclass(frozen=True)
class LiquidityReceipt:
    """Result of initialize / add_liquidity.

    Attributes:
        shares: LP shares minted to the caller
        position_id: Id of the LP position minted to the caller
    """

    shares: int
    position_id: int


@dataclass(frozen=True)
class TradeReceipt:
    """Result of a trade.

    Attributes:
        position_id: Id of the trader position
        fee: Fee charged
        required_collateral: Worst-case loss the collateral had to cover
        collateral_added: Collateral added to the pool (amount - fee)
    """

    position_id: int
    fee: int
    required_collateral: int
    collateral_added: int


class PoolEngine:
    """Single distribution market pool.

    Attributes:
        pool_id: Identifier used in log context
        config: Fee and tolerance configuration
    """

    def __init__(
        self,
        registry: PositionRegistry,
        transfers: CollateralTransfer,
        config: PoolConfig | None = None,
        *,
        pool_id: str = "pool",
        state: PoolState | None = None,
    ) -> None:
        """Create an engine for one pool.

        Args:
            registry: Position registry collaborator
            transfers: Collateral transfer collaborator
            config: Pool configuration. Uses DEFAULT_POOL_CONFIG if not provided.
            pool_id: Identifier used in log context
            state: Existing state to resume from (see restore()). None starts
                an uninitialized pool.
        """
        self.pool_id = pool_id
        self.config = config or DEFAULT_POOL_CONFIG
        self._registry = registry
        self._transfers = transfers
        self._state = state
        self._lock = threading.RLock()

    @classmethod
    def restore(
        cls,
        record: PoolRecord,
        registry: PositionRegistry,
        transfers: CollateralTransfer,
        config: PoolConfig | None = None,
        *,
        pool_id: str = "pool",
    ) -> PoolEngine:
        """Rebuild an engine from a persisted record."""
        return cls(registry, transfers, config, pool_id=pool_id, state=record.to_state())

    # --- Read access ---

    @property
    def status(self) -> PoolStatus:
        return PoolStatus.UNINITIALIZED if self._state is None else PoolStatus.ACTIVE

    @property
    def state(self) -> PoolState:
        """Current pool state.

        Raises:
            NotInitialized: If the pool has not been initialized
        """
        state = self._state
        if state is None:
            raise NotInitialized(f"pool {self.pool_id} is not initialized")
        return state

    def shares_of(self, owner: str) -> int:
        return self.state.shares_of(owner)

    def snapshot(self) -> PoolRecord:
        """Persistable record of the current state."""
        with self._lock:
            return PoolRecord.from_state(self.state)

    def check_invariants(self) -> None:
        """Verify every pool invariant.

        Raises:
            InvariantViolation: Listing each broken invariant
        """
        problems = self.state.invariant_violations(self.config.l2_tolerance)
        if problems:
            raise InvariantViolation("; ".join(problems))

    # --- Operations ---

    def initialize(
        self,
        initializer: str,
        k: int,
        b: int,
        k_to_b_ratio: int,
        curve: GaussianCurve,
        min_sigma: int,
    ) -> LiquidityReceipt:
        """Initialize the pool and mint the full share supply to initializer."""
        with self._lock:
            if self._state is not None:
                raise AlreadyInitialized(f"pool {self.pool_id} is already initialized")
            transition = transitions.initialize(
                initializer, k, b, k_to_b_ratio, curve, min_sigma, self.config
            )
            position_id = self._apply_mint(transition)
            logger.info(
                "pool_initialized",
                pool_id=self.pool_id,
                initializer=initializer,
                collateral=b,
                l2_bound=transition.state.l2_bound,
                mu=curve.mu,
                sigma=curve.sigma,
                lam=curve.lam,
            )
            return LiquidityReceipt(shares=transition.result, position_id=position_id)

    def add_liquidity(self, caller: str, amount: int) -> LiquidityReceipt:
        """Add collateral (an exact multiple of the current collateral)."""
        with self._lock:
            transition = transitions.add_liquidity(self.state, caller, amount)
            position_id = self._apply_mint(transition)
            logger.info(
                "liquidity_added",
                pool_id=self.pool_id,
                caller=caller,
                amount=amount,
                shares=transition.result,
                collateral=transition.state.collateral,
            )
            return LiquidityReceipt(shares=transition.result, position_id=position_id)

    def remove_liquidity(self, caller: str, shares: int) -> int:
        """Burn LP shares and return the collateral paid out."""
        with self._lock:
            transition = transitions.remove_liquidity(self.state, caller, shares)
            self._apply(transition)
            logger.info(
                "liquidity_removed",
                pool_id=self.pool_id,
                caller=caller,
                shares=shares,
                amount=transition.result,
                collateral=transition.state.collateral,
            )
            return transition.result

    def trade(
        self,
        caller: str,
        amount: int,
        new_curve: GaussianCurve,
        critical_point: int,
    ) -> TradeReceipt:
        """Move the market to new_curve, posting amount as collateral."""
        with self._lock:
            transition = transitions.trade(
                self.state, caller, amount, new_curve, critical_point, self.config
            )
            position_id = self._apply_mint(transition)
            logger.info(
                "pool_trade",
                pool_id=self.pool_id,
                caller=caller,
                amount=amount,
                fee=transition.fee,
                required_collateral=transition.required_collateral,
                mu=new_curve.mu,
                sigma=new_curve.sigma,
            )
            return TradeReceipt(
                position_id=position_id,
                fee=transition.fee,
                required_collateral=transition.required_collateral,
                collateral_added=transition.result,
            )

    def withdraw(self, caller: str, position_id: int, amount: int, outcome: int) -> int:
        """Redeem amount of a position's collateral at the realized outcome.

        Returns:
            Payout transferred to the caller
        """
        with self._lock:
            state = self.state
            position = self._registry.position_of(position_id)
            owner = self._registry.owner_of(position_id)
            transition = transitions.withdraw(
                state, caller, position_id, position, owner, amount, outcome
            )
            self._apply(transition)
            logger.info(
                "position_withdrawn",
                pool_id=self.pool_id,
                caller=caller,
                position_id=position_id,
                amount=amount,
                outcome=outcome,
                payout=transition.result,
                available=transition.state.available,
            )
            return transition.result

    def transfer_shares(self, sender: str, recipient: str, shares: int) -> None:
        """Move LP shares between accounts."""
        with self._lock:
            transition = transitions.transfer_shares(self.state, sender, recipient, shares)
            self._apply(transition)
            logger.debug(
                "shares_transferred",
                pool_id=self.pool_id,
                sender=sender,
                recipient=recipient,
                shares=shares,
            )

    # --- Effects ---

    def _apply(self, transition: Transition) -> int | None:
        """Run the transition's effects, then commit its state.

        Order: inbound transfers, mint, outbound transfers. A failure at any
        step refunds the inbound transfers already made and leaves the state
        untouched.

        Returns:
            Id of the minted position, if the transition mints one
        """
        inbound = [t for t in transition.transfers if t.direction is TransferDirection.IN]
        outbound = [t for t in transition.transfers if t.direction is TransferDirection.OUT]

        completed: list[TransferRequest] = []
        try:
            for request in inbound:
                self._transfers.transfer_in(request.account, request.amount)
                completed.append(request)

            position_id = None
            if transition.mint is not None:
                position_id = self._registry.mint(transition.mint)

            for request in outbound:
                self._transfers.transfer_out(request.account, request.amount)
        except Exception as err:
            logger.warning(
                "pool_effects_failed",
                pool_id=self.pool_id,
                refunds=len(completed),
                error=str(err),
            )
            self._refund(completed, err)
            raise

        self._state = transition.state
        return position_id

    def _refund(self, completed: list[TransferRequest], cause: Exception) -> None:
        """Return inbound transfers after a failed effect.

        A refund that fails is logged and chained onto cause, which is then
        re-raised so the original failure stays the one callers see.
        """
        for request in reversed(completed):
            try:
                self._transfers.transfer_out(request.account, request.amount)
            except Exception as refund_err:
                logger.error(
                    "pool_refund_failed",
                    pool_id=self.pool_id,
                    account=request.account,
                    amount=request.amount,
                    error=str(refund_err),
                )
                raise cause from refund_err

    def _apply_mint(self, transition: Transition) -> int:
        position_id = self._apply(transition)
        if position_id is None:
            raise RuntimeError("transition did not mint a position")
        return position_id
