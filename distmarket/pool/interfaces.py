"""Collaborator interfaces consumed by the pool engine.

The engine never owns positions or moves collateral itself. It requests
mints from a PositionRegistry and transfers from a CollateralTransfer;
either collaborator signals failure by raising.
"""

from __future__ import annotations

from typing import Protocol

from .state import Position


class PositionRegistry(Protocol):
    """Ownership registry for minted positions."""

    def mint(self, position: Position) -> int:
        """Mint a position to position.owner.

        Returns:
            The new position id
        """
        ...

    def position_of(self, position_id: int) -> Position:
        """Look up a minted position.

        Raises:
            KeyError: If the position does not exist
        """
        ...

    def owner_of(self, position_id: int) -> str:
        """Current owner of a position (may differ from position.owner after a transfer)."""
        ...


class CollateralTransfer(Protocol):
    """Moves the backing asset between accounts and the pool."""

    def transfer_in(self, account: str, amount: int) -> None:
        """Pull amount from account into the pool. Raises on failure."""
        ...

    def transfer_out(self, account: str, amount: int) -> None:
        """Pay amount from the pool to account. Raises on failure."""
        ...
