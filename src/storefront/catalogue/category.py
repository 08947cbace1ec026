"""Category aggregate root for product categorization."""

import re
from datetime import datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String

from storefront.domain import storefront


def slugify(name: str) -> str:
    """Lowercase, runs of anything but letters and digits collapse to a hyphen."""
    return re.sub(r"[^a-z0-9]+", "-", (name or "").lower()).strip("-")


@storefront.aggregate
class Category:
    """A descriptive grouping of products.

    Categories form a tree through `parent_category_id`. Products refer to a
    category by name, so renaming a category does not move its products.
    """

    name: String(required=True, max_length=50, unique=True)
    slug: String(max_length=60)
    description: String(max_length=500)
    image: String(max_length=500)
    parent_category_id: Identifier()
    display_order: Integer(default=0)
    is_active: Boolean(default=True)
    created_at: DateTime(default=datetime.now)
    updated_at: DateTime(default=datetime.now)

    @classmethod
    def create(cls, name, description=None, image=None, parent_category_id=None, display_order=0):
        from storefront.catalogue.events import CategoryCreated

        now = datetime.now()
        category = cls(
            name=name.strip(),
            slug=slugify(name),
            description=description,
            image=image,
            parent_category_id=parent_category_id,
            display_order=display_order or 0,
            created_at=now,
            updated_at=now,
        )
        category.raise_(
            CategoryCreated(
                category_id=category.id,
                name=category.name,
                slug=category.slug,
                parent_category_id=parent_category_id,
            )
        )
        return category

    def update_details(self, name=None, description=None, image=None, parent_category_id=None, display_order=None):
        if parent_category_id is not None and parent_category_id == self.id:
            raise ValidationError({"parent_category_id": ["A category cannot be its own parent"]})

        if name is not None:
            self.name = name.strip()
            self.slug = slugify(name)
        if description is not None:
            self.description = description
        if image is not None:
            self.image = image
        if parent_category_id is not None:
            self.parent_category_id = parent_category_id
        if display_order is not None:
            self.display_order = display_order

        self.updated_at = datetime.now()

    def deactivate(self):
        from storefront.catalogue.events import CategoryDeactivated

        if not self.is_active:
            raise ValidationError({"is_active": ["Category is already inactive"]})

        self.is_active = False
        self.updated_at = datetime.now()
        self.raise_(CategoryDeactivated(category_id=self.id, name=self.name))
