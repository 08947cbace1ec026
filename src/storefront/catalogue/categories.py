"""Admin category management."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.catalogue.category import Category
from storefront.catalogue.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Category")
class CreateCategory:
    name: String(required=True, max_length=50)
    description: String(max_length=500)
    image: String(max_length=500)
    parent_category_id: Identifier()
    display_order: Integer(default=0)


@storefront.command(part_of="Category")
class UpdateCategory:
    category_id: Identifier(required=True)
    name: String(max_length=50)
    description: String(max_length=500)
    image: String(max_length=500)
    parent_category_id: Identifier()
    display_order: Integer()


@storefront.command(part_of="Category")
class DeleteCategory:
    """Deactivates the category. Refused while active products still use it."""

    category_id: Identifier(required=True)


@storefront.command_handler(part_of=Category)
class CategoryManagementHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)

        if repo.find_by_name(command.name) is not None:
            raise ValidationError({"name": ["Category already exists"]})
        if command.parent_category_id:
            repo.get(command.parent_category_id)

        category = Category.create(
            name=command.name,
            description=command.description,
            image=command.image,
            parent_category_id=command.parent_category_id,
            display_order=command.display_order,
        )
        repo.add(category)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if command.name is not None:
            existing = repo.find_by_name(command.name)
            if existing is not None and existing.id != category.id:
                raise ValidationError({"name": ["Category already exists"]})
        if command.parent_category_id:
            repo.get(command.parent_category_id)

        category.update_details(
            name=command.name,
            description=command.description,
            image=command.image,
            parent_category_id=command.parent_category_id,
            display_order=command.display_order,
        )
        repo.add(category)

    @handle(DeleteCategory)
    def delete_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        in_use = current_domain.repository_for(Product).count_in_category(category.name)
        if in_use:
            raise ValidationError({"category": [f"Cannot delete category with {in_use} products"]})

        category.deactivate()
        repo.add(category)
