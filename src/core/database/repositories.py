from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from loggers import get_logger
from src.core.filtering.sqlalchemy_builder import SelectQueryBuilder
from src.core.filtering.translator import FilterSortTranslator
from src.core.pagination.schemas import PaginationParams

logger = get_logger(__name__)

T = TypeVar("T")


class FilterSortRepository(Generic[T]):
    """
    Repository listing a mapped model through the filter/sort translator.

    Subclasses declare ``model`` and the public field allow-list. Column
    expressions are written against ``alias``, e.g. ``{"name": "d.name"}``.
    """

    model: type[T]
    alias: str = "d"
    allowed_fields: Mapping[str, str] = MappingProxyType({})
    search_fields: Sequence[str] = ()
    default_sort: tuple[str, str] | None = None

    def __init__(self) -> None:
        if not hasattr(self, "model"):
            raise NotImplementedError("Subclasses must define class variable 'model'")
        self.translator = FilterSortTranslator(
            self.allowed_fields, default_sort=self.default_sort
        )

    def build_query(self, params: PaginationParams) -> SelectQueryBuilder:
        entity = aliased(self.model, name=self.alias)
        builder = SelectQueryBuilder(select(entity))
        self.translator.apply_search(builder, params.search, self.search_fields)
        self.translator.apply(builder, params.filters, params.sort)
        return builder

    async def get_filtered_page(
        self, session: AsyncSession, params: PaginationParams
    ) -> tuple[list[T], int]:
        """Retrieve one page of filtered, sorted records and the filtered total."""
        builder = self.build_query(params)

        query = builder.statement.offset(params.start).limit(params.limit)
        result = await session.execute(query)
        items: list[Any] = list(result.unique().scalars().all())

        total_result = await session.execute(builder.count_statement())
        total = int(total_result.scalar_one())

        logger.debug(
            "%s page %s fetched: %s of %s records.",
            self.model.__name__,
            params.page,
            len(items),
            total,
        )
        return items, total
