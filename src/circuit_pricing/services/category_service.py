"""
Category Service - CRUD operations for category markup policies.
Handles reading/writing categories.csv.
"""
import csv
import logging
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field

from ..engine.models import Category

log = logging.getLogger(__name__)

CATEGORY_TYPES = ('Circuit', 'Network', 'Managed Services', 'AI', 'VOIP')


@dataclass
class ValidationResult:
    """Result of category validation."""
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


class CategoryService:
    """Service for managing category markup policies."""

    CSV_COLUMNS = ['id', 'name', 'type', 'minimum_markup', 'is_active', 'description']

    def __init__(self, categories_csv_path: Path):
        self.categories_csv_path = categories_csv_path

    def list_categories(self, include_inactive: bool = True) -> list[Category]:
        """List all categories from CSV, in file order."""
        categories = []
        if not self.categories_csv_path.exists():
            return categories

        with open(self.categories_csv_path, 'r', encoding='utf-8', newline='') as f:
            reader = csv.DictReader(f)
            for row in reader:
                if not (row.get('name') or '').strip():
                    continue
                category = Category.from_record(row)
                if include_inactive or category.is_active:
                    categories.append(category)

        return categories

    def get_category(self, category_id: str) -> Optional[Category]:
        """Get a single category by ID."""
        for category in self.list_categories():
            if category.id == category_id:
                return category
        return None

    def create_category(self, category: Category) -> Category:
        """Create a new category."""
        if not category.id:
            category.id = self._generate_category_id()

        if self.get_category(category.id):
            raise ValueError(f"Category with ID '{category.id}' already exists")

        validation = self.validate_category(category)
        if not validation.valid:
            raise ValueError("; ".join(validation.errors))

        categories = self.list_categories()
        categories.append(category)
        self._write_categories(categories)

        log.info("Created category %s (%s, markup %s%%)", category.id, category.name, category.minimum_markup)
        return category

    def update_category(self, category_id: str, updates: dict) -> Category:
        """Update an existing category."""
        categories = self.list_categories()

        for i, category in enumerate(categories):
            if category.id == category_id:
                break
        else:
            raise KeyError(f"Category with ID '{category_id}' not found")

        record = category.to_record()
        for key, value in updates.items():
            if key in record and key != 'id':
                record[key] = value
        updated = Category.from_record(record)

        validation = self.validate_category(updated)
        if not validation.valid:
            raise ValueError("; ".join(validation.errors))

        categories[i] = updated
        self._write_categories(categories)

        log.info("Updated category %s", category_id)
        return updated

    def delete_category(self, category_id: str) -> bool:
        """Delete a category."""
        categories = self.list_categories()
        original_count = len(categories)
        categories = [c for c in categories if c.id != category_id]

        if len(categories) == original_count:
            raise KeyError(f"Category with ID '{category_id}' not found")

        self._write_categories(categories)

        log.info("Deleted category %s", category_id)
        return True

    def validate_category(self, category: Category) -> ValidationResult:
        """Validate a category before saving."""
        result = ValidationResult(valid=True)

        # Required fields
        if not category.name or not category.name.strip():
            result.errors.append("Name is required")
            result.valid = False

        if category.minimum_markup is not None and category.minimum_markup < 0:
            result.errors.append("Minimum markup cannot be negative")
            result.valid = False

        if category.minimum_markup is None or category.minimum_markup == 0:
            result.warnings.append("No minimum markup: agents will see carrier cost")

        if category.type and category.type not in CATEGORY_TYPES:
            result.warnings.append(
                f"Unknown category type '{category.type}' (expected one of {', '.join(CATEGORY_TYPES)})"
            )

        # Names must be unique, case-insensitively
        if category.name:
            for existing in self.list_categories():
                if existing.id == category.id:
                    continue
                if existing.name.strip().lower() == category.name.strip().lower():
                    result.errors.append(f"Category name '{category.name}' already exists")
                    result.valid = False
                    break

        return result

    def _generate_category_id(self) -> str:
        """Generate a unique category ID."""
        existing_ids = {c.id for c in self.list_categories()}
        counter = len(existing_ids) + 1
        candidate = f"CAT-{counter}"
        while candidate in existing_ids:
            counter += 1
            candidate = f"CAT-{counter}"
        return candidate

    def _write_categories(self, categories: list[Category]):
        """Write categories back to CSV."""
        self.categories_csv_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.categories_csv_path, 'w', encoding='utf-8', newline='') as f:
            writer = csv.DictWriter(f, fieldnames=self.CSV_COLUMNS)
            writer.writeheader()
            for category in categories:
                writer.writerow(category.to_record())

    def get_stats(self) -> dict:
        """Get statistics about categories."""
        categories = self.list_categories()
        active = [c for c in categories if c.is_active]
        with_markup = [c for c in active if c.minimum_markup and c.minimum_markup > 0]
        by_type = {}
        for c in categories:
            key = c.type or 'Untyped'
            by_type[key] = by_type.get(key, 0) + 1

        return {
            'total': len(categories),
            'active': len(active),
            'inactive': len(categories) - len(active),
            'with_markup': len(with_markup),
            'by_type': by_type,
        }
