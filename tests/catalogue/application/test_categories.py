"""Application tests for admin category management."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError

from storefront.catalogue.categories import CreateCategory, DeleteCategory, UpdateCategory
from storefront.catalogue.category import Category


def _create(name, **fields):
    return current_domain.process(CreateCategory(name=name, **fields), asynchronous=False)


class TestCreateCategory:
    def test_create(self):
        category_id = _create("Skincare", description="Face and body")

        category = current_domain.repository_for(Category).get(category_id)
        assert category.slug == "skincare"

    def test_duplicate_name(self):
        _create("Skincare")
        with pytest.raises(ValidationError):
            _create("Skincare")

    def test_unknown_parent(self):
        with pytest.raises(ObjectNotFoundError):
            _create("Serums", parent_category_id="missing")


class TestUpdateCategory:
    def test_rename(self):
        category_id = _create("Skin")

        current_domain.process(UpdateCategory(category_id=category_id, name="Skin Care"), asynchronous=False)

        assert current_domain.repository_for(Category).get(category_id).slug == "skin-care"

    def test_rename_onto_existing_name(self):
        _create("Skincare")
        other = _create("Makeup")

        with pytest.raises(ValidationError):
            current_domain.process(UpdateCategory(category_id=other, name="Skincare"), asynchronous=False)


class TestDeleteCategory:
    def test_unused_category_is_deactivated(self):
        category_id = _create("Fragrance")

        current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)

        repo = current_domain.repository_for(Category)
        assert repo.get(category_id).is_active is False
        assert repo.active() == []

    def test_category_in_use_cannot_be_deleted(self, make_product):
        category_id = _create("Skincare")
        make_product(category="Skincare")

        with pytest.raises(ValidationError) as exc:
            current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
        assert "1 products" in exc.value.messages["category"][0]


class TestCategoryTree:
    def test_children_nest_under_parents(self):
        face = _create("Face", display_order=1)
        _create("Serums", parent_category_id=face, display_order=1)
        _create("Lips", display_order=2)

        tree = current_domain.repository_for(Category).tree()

        assert [node["category"].name for node in tree] == ["Face", "Lips"]
        assert [child["category"].name for child in tree[0]["children"]] == ["Serums"]

    def test_find_by_slug(self):
        _create("Body Care")
        assert current_domain.repository_for(Category).find_by_slug("body-care").name == "Body Care"
