"""Category domain service."""

from finkeep.database.base import Database
from finkeep.domain.entities import Category, CategoryType
from finkeep.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_number_not_found,
    duplicate_category_number,
)


class CategoryService:
    """Service for managing categories.

    Categories are shared by all users and addressed from outside by their
    stable numeric code rather than their database ID.
    """

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self, number: int, name: str, category_type: CategoryType = CategoryType.GENERAL
    ) -> int:
        """Create a category.

        Args:
            number: Stable numeric code
            name: Category name
            category_type: GENERAL or INVESTMENT

        Returns:
            Category ID

        Raises:
            ConflictError: If the number or name is already taken
        """
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty")
        if self.db.get_category_by_number(number) is not None:
            raise ConflictError(duplicate_category_number(number))
        for cat in self.db.list_categories():
            if cat.name == name:
                raise ConflictError(f"Category with name '{name}' already exists")

        return self.db.create_category(number=number, name=name, category_type=CategoryType(category_type))

    def resolve(self, number: int) -> Category:
        """Look up a category by its numeric code.

        Raises:
            NotFoundError: If no category has this number
        """
        category = self.db.get_category_by_number(number)
        if category is None:
            raise NotFoundError(category_number_not_found(number))
        return category

    def list_categories(self) -> list[Category]:
        """List all categories ordered by number."""
        return self.db.list_categories()
