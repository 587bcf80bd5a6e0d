"""Categories — per-owner note labels at categories/{id}.

Invariants:
    - Names are unique per owner, compared case-insensitively after strip()
    - update is a full overwrite and keeps the stored owner
    - Deleting a category leaves notes that carry its name untouched
"""

import logging

from syncnote.core.errors import (
    CategoryExistsError, ErrorContext, NotFoundError, ValidationError,
)
from syncnote.core.paths import CATEGORIES, join_path
from syncnote.core.store_protocols import TreeStore
from syncnote.core.timestamps import Clock, now_ms
from syncnote.schemas.category import Category
from syncnote.services.boundary import returns_bool, returns_result

logger = logging.getLogger(__name__)


class CategoryStore:
    def __init__(self, store: TreeStore, clock: Clock = now_ms):
        self.store = store
        self.clock = clock

    async def _owned(self, owner_id: str) -> list[Category]:
        children = await self.store.query_equal(CATEGORIES, "userId", owner_id)
        categories = []
        for key, document in children.items():
            if not isinstance(document, dict):
                continue
            try:
                categories.append(Category.from_document(key, document))
            except ValueError as e:
                logger.warning(f"Skipping malformed category {key}: {e}")
        categories.sort(key=lambda c: c.name.casefold())
        return categories

    @staticmethod
    def _clash(categories: list[Category], name: str, skip_id: str | None = None) -> bool:
        wanted = name.strip().casefold()
        return any(
            c.name.strip().casefold() == wanted and c.id != skip_id
            for c in categories
        )

    @returns_result("create_category")
    async def create(
        self, owner_id: str, name: str, color: str | None = None,
    ) -> Category:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Category name is required", "name")
        if not owner_id:
            raise ValidationError("Category owner is required", "owner_id")
        if self._clash(await self._owned(owner_id), name):
            raise CategoryExistsError(name, ErrorContext(account_id=owner_id))

        category_id = await self.store.push_id(CATEGORIES)
        category = Category(
            id=category_id, owner_id=owner_id, name=name, color=color,
            created_at=self.clock(),
        )
        await self.store.write(join_path(CATEGORIES, category_id), category.to_document())
        logger.info(f"Category created: {name}", extra={"account_id": owner_id})
        return category

    @returns_result("list_categories")
    async def list_for_owner(self, owner_id: str) -> list[Category]:
        """Categories of `owner_id`, ordered by name."""
        return await self._owned(owner_id)

    @returns_bool("update_category")
    async def update(self, category: Category) -> bool:
        if not category.id:
            raise ValidationError("Category id is required for update", "id")
        name = (category.name or "").strip()
        if not name:
            raise ValidationError("Category name is required", "name")
        document = await self.store.read(join_path(CATEGORIES, category.id))
        if not isinstance(document, dict):
            raise NotFoundError("Category", category.id)
        current = Category.from_document(category.id, document)
        if self._clash(await self._owned(current.owner_id), name, skip_id=category.id):
            raise CategoryExistsError(name)

        category.owner_id = current.owner_id
        category.name = name
        await self.store.write(join_path(CATEGORIES, category.id), category.to_document())
        return True

    @returns_bool("delete_category")
    async def delete(self, category_id: str) -> bool:
        if not category_id:
            raise ValidationError("Category id is required", "category_id")
        await self.store.write(join_path(CATEGORIES, category_id), None)
        logger.info("Category deleted")
        return True
