"""Account domain service."""

from decimal import Decimal
from typing import Optional
from tagledger.database.base import Database
from tagledger.domain.entities import Account as AccountEntity, AccountType
from tagledger.domain.errors import (
    AccountNotFoundError,
    ConflictError,
    ValidationError,
    account_not_found,
)
from tagledger.utils.amount_parser import to_minor_units


def normalize_currency(currency: str) -> str:
    """Return an upper-case three-letter currency code.

    Raises:
        ValidationError: If the code is not three letters
    """
    code = currency.strip().upper()
    if len(code) != 3 or not code.isalpha():
        raise ValidationError(f"Invalid currency code '{currency}'")
    return code


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        name: str,
        account_type: AccountType,
        currency: str = "LKR",
        description: Optional[str] = None,
        balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a new account.

        Args:
            name: Account name
            account_type: ASSET, LIABILITY, INCOME or EXPENSE
            currency: Currency code of the account
            description: Optional description
            balance: Opening balance, rounded to minor units

        Returns:
            Account ID

        Raises:
            ConflictError: If account name already exists
            ValidationError: If the currency code is invalid
        """
        if self.db.get_account_by_name(name) is not None:
            raise ConflictError(f"Account with name '{name}' already exists")

        return self.db.create_account(
            name=name,
            account_type=AccountType(account_type),
            currency=normalize_currency(currency),
            description=description,
            balance=to_minor_units(Decimal(balance)),
        )

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID or raise AccountNotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_not_found(account_id))
        return account

    def get_account_by_name(self, name: str) -> Optional[AccountEntity]:
        """Get account by name."""
        return self.db.get_account_by_name(name)

    def list_accounts(self, account_type: Optional[AccountType] = None) -> list[AccountEntity]:
        """List accounts.

        Args:
            account_type: Optional type filter

        Returns:
            List of account entities
        """
        return self.db.list_accounts(account_type=account_type)
