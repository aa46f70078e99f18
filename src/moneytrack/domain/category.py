"""Category domain service."""

from typing import Optional

from moneytrack.database.base import Database
from moneytrack.domain.entities import Category, CategoryKind
from moneytrack.domain.errors import ConflictError, category_exists
from moneytrack.domain.validation import parse_category_kind, require_text


# Default category set, each with an explicit kind
DEFAULT_CATEGORIES = (
    Category(name="Food", kind=CategoryKind.EXPENSE),
    Category(name="Transport", kind=CategoryKind.EXPENSE),
    Category(name="Housing", kind=CategoryKind.EXPENSE),
    Category(name="Health", kind=CategoryKind.EXPENSE),
    Category(name="Education", kind=CategoryKind.EXPENSE),
    Category(name="Entertainment", kind=CategoryKind.EXPENSE),
    Category(name="Shopping", kind=CategoryKind.EXPENSE),
    Category(name="Other", kind=CategoryKind.EXPENSE),
    Category(name="Salary", kind=CategoryKind.INCOME),
    Category(name="Freelance", kind=CategoryKind.INCOME),
    Category(name="Investments", kind=CategoryKind.INCOME),
    Category(name="Extra Income", kind=CategoryKind.INCOME),
)


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(self, name: str, kind: CategoryKind | str) -> int:
        """Create a category.

        Args:
            name: Category name, unique
            kind: "income" or "expense"

        Returns:
            Category ID

        Raises:
            ValidationError: If name is blank or kind is unknown
            ConflictError: If a category with this name exists
        """
        name = require_text(name, "name")
        kind = parse_category_kind(kind)
        if self.db.get_category_by_name(name) is not None:
            raise ConflictError(category_exists(name))
        return self.db.create_category(name=name, kind=kind)

    def get_category(self, name: str) -> Optional[Category]:
        """Get category by name."""
        return self.db.get_category_by_name(name)

    def list_categories(self, kind: Optional[CategoryKind | str] = None) -> list[Category]:
        """List categories, optionally only those of one kind."""
        if kind is not None:
            kind = parse_category_kind(kind)
        return self.db.list_categories(kind=kind)

    def get_kind(self, name: str) -> Optional[CategoryKind]:
        """Return the kind of a named category, or None if it is not registered."""
        category = self.db.get_category_by_name(name)
        return category.kind if category else None

    def initialize_defaults(self) -> tuple[int, int]:
        """Create the default categories that do not exist yet.

        Returns:
            Tuple of (created, skipped) counts
        """
        created = 0
        skipped = 0
        for category in DEFAULT_CATEGORIES:
            if self.db.get_category_by_name(category.name) is not None:
                skipped += 1
                continue
            self.db.create_category(name=category.name, kind=category.kind)
            created += 1
        return created, skipped
