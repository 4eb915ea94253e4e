"""In-memory collaborators.

Reference implementations of PositionRegistry and CollateralTransfer for
simulations and tests. Neither is thread-safe on its own; the engine calls
them while holding its pool lock.
"""

from __future__ import annotations

import structlog

from distmarket.errors import Unauthorized
from distmarket.math.errors import Underflow

from .state import Position

logger = structlog.get_logger()


class InMemoryPositionRegistry:
    """Position registry backed by dicts.

    Position ids are assigned sequentially starting at 1.
    """

    def __init__(self) -> None:
        self._positions: dict[int, Position] = {}
        self._owners: dict[int, str] = {}
        self._next_id = 1

    def mint(self, position: Position) -> int:
        """Store a position and assign it to its owner."""
        position_id = self._next_id
        self._next_id += 1
        self._positions[position_id] = position
        self._owners[position_id] = position.owner
        logger.debug("position_minted", position_id=position_id, owner=position.owner)
        return position_id

    def position_of(self, position_id: int) -> Position:
        return self._positions[position_id]

    def owner_of(self, position_id: int) -> str:
        return self._owners[position_id]

    def transfer(self, position_id: int, sender: str, recipient: str) -> None:
        """Transfer ownership of a position.

        Raises:
            KeyError: If the position does not exist
            Unauthorized: If sender is not the current owner
        """
        if self._owners[position_id] != sender:
            raise Unauthorized(f"{sender} does not own position {position_id}")
        self._owners[position_id] = recipient

    def __len__(self) -> int:
        return len(self._positions)


class InMemoryCollateralLedger:
    """Collateral token balances with a pool account.

    Attributes:
        pool_account: Name of the account holding pool collateral
    """

    def __init__(
        self,
        balances: dict[str, int] | None = None,
        pool_account: str = "pool",
    ) -> None:
        self.pool_account = pool_account
        self._balances: dict[str, int] = dict(balances or {})

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    def credit(self, account: str, amount: int) -> None:
        """Mint collateral to an account (test and simulation setup)."""
        self._balances[account] = self.balance_of(account) + amount

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        available = self.balance_of(sender)
        if amount > available:
            raise Underflow(f"{sender} balance {available} below transfer amount {amount}")
        self._balances[sender] = available - amount
        self._balances[recipient] = self.balance_of(recipient) + amount

    def transfer_in(self, account: str, amount: int) -> None:
        self._move(account, self.pool_account, amount)

    def transfer_out(self, account: str, amount: int) -> None:
        self._move(self.pool_account, account, amount)
