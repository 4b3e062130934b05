"""Category hierarchy linearization.

Walks a category's parent chain up to the channel's navigation category.
Parent references are not enforced by the store, so the walk stops on
missing parents and on cycles. Lookups are cached per hierarchy, which
lives for one export call.
"""

import structlog

from searchfeed.catalog.repository import CategoryRepository
from searchfeed.domain.entities import Category

logger = structlog.get_logger()

# Upper bound for parent chains; real catalogs stay far below it
MAX_CATEGORY_DEPTH = 64


class CategoryHierarchy:
    """Collects the ancestors of a category.

    Example usage:
        hierarchy = CategoryHierarchy(CategoryRepository(session), root_id)
        ancestors = await hierarchy.ancestors_of(category)
    """

    def __init__(
        self,
        repository: CategoryRepository,
        root_category_id: str | None,
        max_depth: int = MAX_CATEGORY_DEPTH,
    ) -> None:
        """Initialize hierarchy.

        Args:
            repository: Category lookups.
            root_category_id: Navigation category of the channel, never returned.
            max_depth: Maximum number of ancestors to collect.
        """
        self.repository = repository
        self.root_category_id = root_category_id
        self.max_depth = max_depth
        self._categories: dict[str, Category | None] = {}

    async def ancestors_of(self, category: Category) -> list[Category]:
        """Get the ancestors of a category, nearest first.

        The walk stops below the root category, at a category without
        parent, at a parent that cannot be found, or when a category
        repeats.

        Args:
            category: Category to start from, not part of the result.

        Returns:
            Ancestor categories ordered from parent to topmost.
        """
        ancestors: list[Category] = []
        visited = {category.id}
        current = category

        while current.parent_id and current.parent_id != self.root_category_id:
            if current.parent_id in visited or len(ancestors) >= self.max_depth:
                logger.warning(
                    "Category hierarchy cycle detected",
                    category_id=category.id,
                    parent_id=current.parent_id,
                    depth=len(ancestors),
                )
                break

            parent = await self._get_category(current.parent_id)
            if parent is None:
                break

            visited.add(parent.id)
            ancestors.append(parent)
            current = parent

        return ancestors

    async def _get_category(self, category_id: str) -> Category | None:
        """Get a category, looking each id up at most once."""
        if category_id not in self._categories:
            self._categories[category_id] = await self.repository.get_by_id(category_id)
        return self._categories[category_id]
