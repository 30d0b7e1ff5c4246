"""
Query construction for resource listings and aggregates.

Every user-supplied value is bound as a parameter. Column identifiers only
ever come from ``SORT_COLUMNS``.
"""

from typing import Any, Dict, List

from sqlalchemy import ColumnElement, Select, and_, func, or_, select

from app.db.models.resource import Resource
from app.schemas.resources import ResourceFilters, SortField, SortOrder

SORT_COLUMNS: Dict[SortField, Any] = {
    SortField.ID: Resource.id,
    SortField.NAME: Resource.name,
    SortField.CATEGORY: Resource.category,
    SortField.STATUS: Resource.status,
    SortField.CREATED_AT: Resource.created_at,
    SortField.UPDATED_AT: Resource.updated_at,
}


def build_conditions(filters: ResourceFilters) -> List[ColumnElement[bool]]:
    """Return the conjunctive predicates selected by ``filters``."""
    conditions: List[ColumnElement[bool]] = []

    if filters.category is not None:
        conditions.append(Resource.category == filters.category)

    if filters.status is not None:
        conditions.append(Resource.status == filters.status.value)

    if filters.search is not None:
        conditions.append(
            or_(
                Resource.name.icontains(filters.search, autoescape=True),
                Resource.description.icontains(filters.search, autoescape=True),
            )
        )

    return conditions


def _apply_filters(query: Select, filters: ResourceFilters) -> Select:
    conditions = build_conditions(filters)
    if conditions:
        query = query.where(and_(*conditions))
    return query


def build_list_query(filters: ResourceFilters) -> Select:
    """
    Select one page of resources.

    Rows with equal sort keys are ordered by ascending id so that pages never
    overlap or skip rows.
    """
    column = SORT_COLUMNS[filters.sort_by]
    ordering = column.desc() if filters.sort_order == SortOrder.DESC else column.asc()

    query = _apply_filters(select(Resource), filters)
    query = query.order_by(ordering)
    if filters.sort_by != SortField.ID:
        query = query.order_by(Resource.id.asc())

    return query.limit(filters.limit).offset(filters.offset)


def build_count_query(filters: ResourceFilters) -> Select:
    """Count the rows matching ``filters``, ignoring limit and offset."""
    return _apply_filters(select(func.count(Resource.id)), filters)


def build_status_counts_query() -> Select:
    return select(Resource.status, func.count(Resource.id)).group_by(Resource.status)


def build_category_counts_query() -> Select:
    return (
        select(Resource.category, func.count(Resource.id))
        .where(Resource.category.is_not(None))
        .group_by(Resource.category)
        .order_by(Resource.category)
    )
