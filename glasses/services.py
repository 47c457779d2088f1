"""Catalog service for glasses."""

import logging

from django.db import transaction

from core.exceptions import EntityNotFoundException

from .models import Glasses
from .specifications import GlassesSearchParameters, GlassesSpecificationBuilder


logger = logging.getLogger(__name__)

# Fields a partial update may overwrite. Anything else in the payload is ignored.
UPDATABLE_FIELDS = ('name', 'price', 'identifier', 'color', 'model', 'manufacturer')


def merge_glasses(glasses, data):
    """Copy the non-null updatable values of ``data`` onto ``glasses``.

    Returns the list of changed field names. ``categories`` is handled
    separately by the caller since it is a relation.
    """
    changed = []
    for name in UPDATABLE_FIELDS:
        value = data.get(name)
        if value is None:
            continue
        if getattr(glasses, name) != value:
            setattr(glasses, name, value)
            changed.append(name)
    return changed


class GlassesService:
    """Lookups, writes and search over the glasses catalog."""

    def __init__(self, specification_builder=None):
        self.specification_builder = specification_builder or GlassesSpecificationBuilder()

    def _base_queryset(self):
        return Glasses.objects.prefetch_related('categories')

    def _get(self, **lookup):
        try:
            return self._base_queryset().get(**lookup)
        except Glasses.DoesNotExist:
            key, value = next(iter(lookup.items()))
            raise EntityNotFoundException(f"Can't find glasses with {key}: {value}")

    def with_variations(self, glasses):
        glasses.variations = list(Glasses.objects.variations_of(glasses))
        return glasses

    def find_all(self):
        return self._base_queryset().active()

    def get_by_id(self, glasses_id):
        # Deleted glasses stay reachable here for order history.
        return self.with_variations(self._get(pk=glasses_id))

    def find_by_identifier(self, identifier):
        return self.with_variations(self._get(identifier=identifier))

    @transaction.atomic
    def save(self, data):
        categories = data.get('categories')
        glasses = Glasses.objects.create(**{name: data[name] for name in UPDATABLE_FIELDS if name in data})
        if categories:
            glasses.categories.set(categories)
        logger.info('Created glasses id=%s identifier=%s', glasses.id, glasses.identifier)
        return glasses

    @transaction.atomic
    def update(self, glasses_id, data):
        glasses = self._get(pk=glasses_id)
        changed = merge_glasses(glasses, data)
        if changed:
            glasses.save(update_fields=changed)
        if data.get('categories') is not None:
            glasses.categories.set(data['categories'])
        logger.info('Updated glasses id=%s fields=%s', glasses.id, changed)
        return glasses

    def delete_by_id(self, glasses_id):
        glasses = self._get(pk=glasses_id)
        glasses.is_deleted = True
        glasses.save(update_fields=['is_deleted'])
        logger.info('Soft-deleted glasses id=%s', glasses.id)

    def search_glasses_by_parameters(self, params: GlassesSearchParameters):
        predicate = self.specification_builder.build(params)
        return self.find_all().filter(predicate).distinct()
