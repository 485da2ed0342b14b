"""Tag domain service."""

from decimal import Decimal
from typing import Optional

from tagledger.database.base import Database
from tagledger.domain.entities import (
    AccountType,
    Tag as TagEntity,
    TagAssetTotal,
    TagSummary,
)
from tagledger.domain.errors import ConflictError, TagNotFoundError, ValidationError, tag_not_found


class TagService:
    """Service for managing tags."""

    def __init__(self, db: Database):
        """Initialize tag service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_tag(
        self, name: str, description: Optional[str] = None, color: Optional[str] = None
    ) -> int:
        """Create a tag.

        Args:
            name: Unique tag name
            description: Optional description
            color: Optional display color (e.g. "#FF5733")

        Returns:
            Tag ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a tag with the same name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Tag name cannot be empty")
        if self.db.get_tag_by_name(name) is not None:
            raise ConflictError(f"Tag with name '{name}' already exists")
        return self.db.create_tag(name=name, description=description, color=color)

    def get_tag(self, tag_id: int) -> Optional[TagEntity]:
        """Get tag by ID."""
        return self.db.get_tag(tag_id)

    def require_tag(self, tag_id: int) -> TagEntity:
        """Get tag by ID or raise TagNotFoundError."""
        tag = self.db.get_tag(tag_id)
        if tag is None:
            raise TagNotFoundError(tag_not_found(tag_id))
        return tag

    def get_tag_by_name(self, name: str) -> Optional[TagEntity]:
        """Get tag by name."""
        return self.db.get_tag_by_name(name)

    def list_tags(self) -> list[TagEntity]:
        """List all tags ordered by name."""
        return self.db.list_tags()

    def get_tag_asset_totals(self, tag_id: int) -> list[TagAssetTotal]:
        """Net movement (debits - credits) of a tag's transactions per asset account.

        Raises:
            TagNotFoundError: If the tag does not exist
        """
        self.require_tag(tag_id)
        totals = []
        for account_id, debits, credits in self.db.get_tag_entry_totals(
            tag_id, account_type=AccountType.ASSET
        ):
            account = self.db.get_account(account_id)
            totals.append(
                TagAssetTotal(
                    account_id=account_id,
                    account_name=account.name if account else str(account_id),
                    total=debits - credits,
                )
            )
        return totals

    def get_tag_summary(self, tag_id: int) -> TagSummary:
        """Tagged transactions with per-asset-account totals.

        Raises:
            TagNotFoundError: If the tag does not exist
        """
        tag = self.require_tag(tag_id)
        asset_totals = self.get_tag_asset_totals(tag_id)
        return TagSummary(
            tag=tag,
            transactions=self.db.list_transactions(tag_id=tag_id),
            asset_totals=asset_totals,
            total_amount=sum((t.total for t in asset_totals), Decimal("0")),
        )
