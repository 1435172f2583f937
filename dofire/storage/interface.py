"""
Abstract storage interface.

The API talks to storage only through Repository, so the Supabase backend
can be swapped for the in-memory one in tests and local development.
Every method is scoped to the authenticated user's id.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from dofire.core.cursor import CursorData
from dofire.models import Investment, PortfolioAgg, Profile
from dofire.schemas.investment import CreateInvestmentCommand, InvestmentListQuery
from dofire.schemas.profile import CreateProfileCommand


class StorageError(Exception):
    """Unexpected failure talking to the storage backend."""

    def __init__(self, message: str, original: Optional[BaseException] = None):
        super().__init__(message)
        self.original = original


class ConflictError(StorageError):
    """Unique constraint violation (e.g. a second profile for the same user)."""


class ConstraintViolationError(StorageError):
    """Check constraint violation; ``field`` names the column when known."""

    def __init__(self, message: str, field: Optional[str] = None, original: Optional[BaseException] = None):
        super().__init__(message, original)
        self.field = field


class Repository(ABC):
    """Persistence operations needed by the DoFIRE API."""

    # --- profiles ---

    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[Profile]:
        """Return the user's profile, or None if it does not exist."""

    @abstractmethod
    def create_profile(self, user_id: str, command: CreateProfileCommand) -> Profile:
        """
        Insert a profile for the user.

        Raises:
            ConflictError: if the user already has a profile
            ConstraintViolationError: if the row breaks a check constraint
        """

    @abstractmethod
    def update_profile(self, user_id: str, changes: Dict[str, Any]) -> Optional[Profile]:
        """Apply ``changes`` and bump updated_at. None if there is no profile."""

    # --- investments ---

    @abstractmethod
    def list_investments(
        self,
        user_id: str,
        query: InvestmentListQuery,
        cursor: Optional[CursorData],
        limit: int,
    ) -> List[Investment]:
        """
        Up to ``limit`` investments matching the query filters, ordered by the
        query's sort option with id as tie-breaker, strictly after ``cursor``.
        """

    @abstractmethod
    def get_investment(self, user_id: str, investment_id: str) -> Optional[Investment]:
        """Return one investment, or None if missing or owned by someone else."""

    @abstractmethod
    def create_investment(self, user_id: str, command: CreateInvestmentCommand) -> Investment:
        """
        Insert an investment.

        Raises:
            ConstraintViolationError: if the row breaks a check constraint
        """

    @abstractmethod
    def update_investment(
        self, user_id: str, investment_id: str, changes: Dict[str, Any]
    ) -> Optional[Investment]:
        """Apply ``changes``; None if the investment does not exist."""

    @abstractmethod
    def delete_investment(self, user_id: str, investment_id: str) -> bool:
        """Delete an investment. False when nothing matched."""

    # --- aggregation / health ---

    @abstractmethod
    def get_portfolio_agg(self, user_id: str) -> PortfolioAgg:
        """Per-type sums and shares; zero-filled when the user has no investments."""

    @abstractmethod
    def ping(self) -> None:
        """Cheap round trip to the backend. Raises StorageError on failure."""
