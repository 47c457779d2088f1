"""Composable catalog filters.

A search request is turned into a list of small clause objects, each of
which knows how to render itself as a ``Q``. The builder AND-s them
together, so adding a new filter means adding a clause type and one line
in :meth:`GlassesSpecificationBuilder.clauses`.
"""

from dataclasses import dataclass
from decimal import Decimal
from functools import reduce
import operator

from django.db.models import Q


@dataclass(frozen=True)
class GlassesSearchParameters:
    names: tuple[str, ...] = ()
    colors: tuple[str, ...] = ()
    models: tuple[str, ...] = ()
    manufacturers: tuple[str, ...] = ()
    identifiers: tuple[str, ...] = ()
    categories: tuple[int, ...] = ()
    min_price: Decimal | None = None
    max_price: Decimal | None = None


@dataclass(frozen=True)
class FieldInClause:
    """Case-insensitive match of ``field`` against any of ``values``."""

    field: str
    values: tuple[str, ...] = ()

    def to_q(self) -> Q:
        return reduce(operator.or_, (Q(**{f'{self.field}__iexact': v}) for v in self.values))


@dataclass(frozen=True)
class PriceRangeClause:
    min_price: Decimal | None = None
    max_price: Decimal | None = None

    def to_q(self) -> Q:
        q = Q()
        if self.min_price is not None:
            q &= Q(price__gte=self.min_price)
        if self.max_price is not None:
            q &= Q(price__lte=self.max_price)
        return q


@dataclass(frozen=True)
class CategoryClause:
    category_ids: tuple[int, ...] = ()

    def to_q(self) -> Q:
        return Q(categories__id__in=self.category_ids)


class GlassesSpecificationBuilder:
    """Translate :class:`GlassesSearchParameters` into a single ``Q``."""

    TEXT_FIELDS = (
        ('names', 'name'),
        ('colors', 'color'),
        ('models', 'model'),
        ('manufacturers', 'manufacturer'),
        ('identifiers', 'identifier'),
    )

    def clauses(self, params: GlassesSearchParameters) -> list:
        result = []
        for attr, model_field in self.TEXT_FIELDS:
            values = tuple(v for v in getattr(params, attr) if v)
            if values:
                result.append(FieldInClause(model_field, values))
        if params.categories:
            result.append(CategoryClause(tuple(params.categories)))
        if params.min_price is not None or params.max_price is not None:
            result.append(PriceRangeClause(params.min_price, params.max_price))
        return result

    def build(self, params: GlassesSearchParameters) -> Q:
        return reduce(operator.and_, (c.to_q() for c in self.clauses(params)), Q())
