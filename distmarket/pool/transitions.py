"""Pure state transitions for a distribution market pool.

Each function takes the current PoolState and the call's inputs, checks every
precondition, and returns a Transition: the next state plus the side effects
(position mint, collateral transfers) the engine must carry out before the
next state may be committed. Nothing here mutates its inputs, so a raised
error always leaves the pool exactly as it was.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import structlog

from distmarket.constants import ONE_18
from distmarket.curves.gaussian import ZERO_CURVE, GaussianCurve, evaluate, l2_norm
from distmarket.errors import (
    InsufficientBacking,
    InsufficientCollateral,
    InsufficientShares,
    InvalidAmount,
    InvalidParameters,
    InvariantViolation,
    Unauthorized,
)
from distmarket.math.fixed_point import add, mul, mul_div, sub, sub_unsigned

from .collateral import backing_required, required_collateral, trade_fee
from .config import DEFAULT_POOL_CONFIG, PoolConfig
from .state import PoolState, Position

logger = structlog.get_logger()


class TransferDirection(Enum):
    """Direction of a collateral movement, seen from the pool."""

    IN = "in"
    OUT = "out"


@dataclass(frozen=True)
class TransferRequest:
    """Collateral the transfer collaborator must move."""

    direction: TransferDirection
    account: str
    amount: int


@dataclass(frozen=True)
class Transition:
    """Result of a state transition.

    Attributes:
        state: Pool state to commit once all effects succeed
        result: Operation result (shares minted, collateral returned, payout)
        mint: Position to mint, if any
        transfers: Collateral movements, executed in order
        fee: Trade fee charged
        required_collateral: Worst-case loss the trade had to cover
    """

    state: PoolState
    result: int = 0
    mint: Position | None = None
    transfers: tuple[TransferRequest, ...] = ()
    fee: int = 0
    required_collateral: int = 0


def matches_bound(curve: GaussianCurve, k: int, l2_tolerance: int) -> bool:
    """True if the curve's self-norm equals k within the relative tolerance."""
    norm = l2_norm(curve, ZERO_CURVE)
    return abs(norm - k) <= mul(k, l2_tolerance)


def _rounding_unit(collateral: int) -> int:
    # k_to_b_ratio is truncated before it is scaled by b, so k may drift by b / ONE_18 units
    return collateral // ONE_18 + 1


def _require_positive(name: str, value: int) -> None:
    if not isinstance(value, int) or value <= 0:
        raise InvalidParameters(f"{name} must be a positive int, got {value!r}")


def initialize(
    initializer: str,
    k: int,
    b: int,
    k_to_b_ratio: int,
    curve: GaussianCurve,
    min_sigma: int,
    config: PoolConfig = DEFAULT_POOL_CONFIG,
) -> Transition:
    """Create the pool state and mint the initial share supply to the initializer.

    Raises:
        InvalidParameters: If any parameter is out of range, k disagrees with
            k_to_b_ratio * b, the curve's norm is not k, or the curve's peak
            exceeds b
    """
    _require_positive("k", k)
    _require_positive("b", b)
    _require_positive("k_to_b_ratio", k_to_b_ratio)
    _require_positive("min_sigma", min_sigma)

    if curve.sigma < min_sigma:
        raise InvalidParameters(f"sigma {curve.sigma} below min_sigma {min_sigma}")
    if curve.lam == 0:
        raise InvalidParameters("curve lambda must be positive")

    expected_k = mul(k_to_b_ratio, b)
    if abs(expected_k - k) > _rounding_unit(b):
        raise InvalidParameters(f"k {k} != k_to_b_ratio * b {expected_k}")

    if not matches_bound(curve, k, config.l2_tolerance):
        raise InvalidParameters(
            f"curve norm {l2_norm(curve, ZERO_CURVE)} does not match k {k}"
        )

    peak = backing_required(curve)
    if peak > b:
        raise InvalidParameters(f"curve peak {peak} exceeds collateral {b}")

    shares = config.initial_shares
    state = PoolState(
        curve=curve,
        collateral=b,
        l2_bound=expected_k,
        k_to_b_ratio=k_to_b_ratio,
        min_sigma=min_sigma,
        total_shares=shares,
        shares={initializer: shares},
    )
    return Transition(
        state=state,
        result=shares,
        mint=Position(owner=initializer, collateral=b, initial_curve=curve, shares=shares),
        transfers=(TransferRequest(TransferDirection.IN, initializer, b),),
    )


def add_liquidity(state: PoolState, caller: str, amount: int) -> Transition:
    """Add collateral in an exact multiple of the current collateral.

    Contributing y * b grows b and lambda by (1 + y) and mints y * total_shares
    (or amount, when no shares are outstanding).

    Raises:
        InvalidAmount: If amount is not a positive multiple of b
    """
    b = state.collateral
    if amount <= 0 or amount % b != 0:
        logger.debug("add_liquidity_rejected", amount=amount, collateral=b)
        raise InvalidAmount(f"amount {amount} is not a positive multiple of collateral {b}")

    multiple = amount // b
    minted = amount if state.total_shares == 0 else multiple * state.total_shares
    new_b = add(b, amount)

    shares = dict(state.shares)
    shares[caller] = shares.get(caller, 0) + minted
    new_state = state.with_collateral(new_b).evolve(
        total_shares=state.total_shares + minted,
        shares=shares,
    )

    # LP slice of the grown pool curve
    position = Position(
        owner=caller,
        collateral=amount,
        initial_curve=new_state.curve.scaled(amount, new_b),
        shares=minted,
    )
    return Transition(
        state=new_state,
        result=minted,
        mint=position,
        transfers=(TransferRequest(TransferDirection.IN, caller, amount),),
    )


def remove_liquidity(state: PoolState, caller: str, shares: int) -> Transition:
    """Burn LP shares for their pro-rata slice of the available collateral.

    Raises:
        InvalidAmount: If shares is not positive or would drain the pool
        InsufficientShares: If caller holds fewer than shares
    """
    if shares <= 0:
        raise InvalidAmount(f"shares must be positive, got {shares}")
    held = state.shares_of(caller)
    if shares > held:
        raise InsufficientShares(f"{caller} holds {held} shares, requested {shares}")
    if shares >= state.total_shares:
        raise InvalidAmount("cannot remove all outstanding shares")

    amount = mul_div(shares, state.available, state.total_shares)
    new_b = sub_unsigned(state.collateral, amount)

    ledger = dict(state.shares)
    remaining = held - shares
    if remaining:
        ledger[caller] = remaining
    else:
        del ledger[caller]

    new_state = state.with_collateral(new_b).evolve(
        total_shares=state.total_shares - shares,
        shares=ledger,
    )
    return Transition(
        state=new_state,
        result=amount,
        transfers=(TransferRequest(TransferDirection.OUT, caller, amount),),
    )


def trade(
    state: PoolState,
    caller: str,
    amount: int,
    new_curve: GaussianCurve,
    critical_point: int,
    config: PoolConfig = DEFAULT_POOL_CONFIG,
) -> Transition:
    """Move the market curve to new_curve.

    The trader posts amount for the position new_curve - curve. The fee
    (proportional to the L2 distance moved) stays in the pool outside b; the
    net amount is added to b and is the position's collateral.

    Raises:
        InvalidAmount: If amount is negative
        InvalidParameters: If new_curve.sigma is below min_sigma
        InvariantViolation: If new_curve's norm does not match k
        InsufficientBacking: If the current curve at the critical point, or the
            resized new curve's peak, exceeds the collateral
        InsufficientCollateral: If amount does not cover the worst-case loss or the fee
    """
    if amount < 0:
        raise InvalidAmount(f"amount must be non-negative, got {amount}")
    if new_curve.sigma < state.min_sigma:
        raise InvalidParameters(f"sigma {new_curve.sigma} below min_sigma {state.min_sigma}")

    if not matches_bound(new_curve, state.l2_bound, config.l2_tolerance):
        logger.debug(
            "trade_rejected",
            reason="l2_norm_mismatch",
            norm=l2_norm(new_curve, ZERO_CURVE),
            l2_bound=state.l2_bound,
        )
        raise InvariantViolation(
            f"curve norm {l2_norm(new_curve, ZERO_CURVE)} does not match k {state.l2_bound}"
        )

    backing = evaluate(state.curve, critical_point)
    if backing > state.available:
        raise InsufficientBacking(
            f"backing {backing} at critical point exceeds collateral {state.available}"
        )

    required = required_collateral(state.curve, new_curve, critical_point)
    if amount < required:
        logger.debug("trade_rejected", reason="insufficient_collateral", amount=amount, required=required)
        raise InsufficientCollateral(f"amount {amount} below required collateral {required}")

    fee = trade_fee(state.curve, new_curve, config.fee_rate)
    if fee > amount:
        raise InsufficientCollateral(f"amount {amount} does not cover fee {fee}")

    net = sub(amount, fee)
    new_state = state.with_collateral(add(state.collateral, net), curve=new_curve)

    peak = backing_required(new_state.curve)
    if peak > new_state.available:
        raise InsufficientBacking(f"curve peak {peak} exceeds collateral {new_state.available}")

    position = Position(
        owner=caller,
        collateral=net,
        initial_curve=state.curve,
        target_curve=new_curve,
    )
    return Transition(
        state=new_state,
        result=net,
        mint=position,
        transfers=(TransferRequest(TransferDirection.IN, caller, amount),),
        fee=fee,
        required_collateral=required,
    )


def withdraw(
    state: PoolState,
    caller: str,
    position_id: int,
    position: Position,
    owner: str,
    amount: int,
    outcome: int,
) -> Transition:
    """Redeem part of a position at the realized outcome.

    A trader position pays its settlement value
    (collateral - initial(outcome) + target(outcome)) pro-rated by
    amount / collateral. An LP position burns the same fraction of the shares
    minted with it and pays those shares' slice of the residual
    available - curve(outcome). Every payout is recorded in paid_out and must
    fit in the available collateral.

    Raises:
        Unauthorized: If caller is not the position's owner
        InvalidAmount: If amount is not positive or exceeds the unredeemed collateral
        InsufficientShares: If caller no longer holds the LP shares being redeemed
        InsufficientBacking: If the pool cannot cover the payout
    """
    if owner != caller:
        raise Unauthorized(f"{caller} does not own position {position_id}")
    if amount <= 0:
        raise InvalidAmount(f"amount must be positive, got {amount}")

    redeemed = state.redeemed_of(position_id)
    remaining = sub(position.collateral, redeemed)
    if amount > remaining:
        raise InvalidAmount(
            f"amount {amount} exceeds remaining collateral {remaining} of position {position_id}"
        )

    ledger = dict(state.redeemed)
    ledger[position_id] = add(redeemed, amount)
    changes: dict[str, object] = {"redeemed": ledger}

    if position.is_lp:
        burn = mul_div(position.shares, amount, position.collateral)
        held = state.shares_of(caller)
        if burn > held:
            raise InsufficientShares(
                f"{caller} holds {held} shares, position {position_id} needs {burn}"
            )
        payout = 0
        if burn:
            residual = max(0, sub(state.available, evaluate(state.curve, outcome)))
            payout = mul_div(burn, residual, state.total_shares)
            shares = dict(state.shares)
            if held == burn:
                del shares[caller]
            else:
                shares[caller] = held - burn
            changes.update(shares=shares, total_shares=state.total_shares - burn)
    else:
        payout = mul_div(position.value_at(outcome), amount, position.collateral)

    if payout > state.available:
        logger.debug("withdraw_rejected", payout=payout, available=state.available)
        raise InsufficientBacking(f"payout {payout} exceeds available collateral {state.available}")
    changes["paid_out"] = add(state.paid_out, payout)

    transfers = (TransferRequest(TransferDirection.OUT, caller, payout),) if payout else ()
    return Transition(
        state=state.evolve(**changes),
        result=payout,
        transfers=transfers,
    )


def transfer_shares(state: PoolState, sender: str, recipient: str, shares: int) -> Transition:
    """Move LP shares between accounts.

    Raises:
        InvalidAmount: If shares is not positive
        InsufficientShares: If sender holds fewer than shares
    """
    if shares <= 0:
        raise InvalidAmount(f"shares must be positive, got {shares}")
    held = state.shares_of(sender)
    if shares > held:
        raise InsufficientShares(f"{sender} holds {held} shares, requested {shares}")

    ledger = dict(state.shares)
    if held == shares:
        del ledger[sender]
    else:
        ledger[sender] = held - shares
    ledger[recipient] = ledger.get(recipient, 0) + shares
    return Transition(state=state.evolve(shares=ledger), result=shares)
