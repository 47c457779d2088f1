"""Database models for the glasses catalog."""

from django.db import models


class Category(models.Model):
    """Catalog category (e.g. Sunglasses, Optical frames)."""

    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True, default='')

    class Meta:
        verbose_name_plural = "Categories"
        ordering = ['name']

    def __str__(self):
        return self.name


class GlassesQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_deleted=False)

    def variations_of(self, glasses):
        """Other live glasses sharing ``glasses``' model and manufacturer."""
        return (
            self.active()
            .filter(model=glasses.model, manufacturer=glasses.manufacturer)
            .exclude(pk=glasses.pk)
            .order_by('id')
        )


class Glasses(models.Model):
    """A pair of glasses sold in the store.

    Deleting is a flag flip (``is_deleted``); the row stays so that order
    items placed earlier can still show what was bought.
    """

    name = models.CharField(max_length=255)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    identifier = models.CharField(max_length=64, unique=True)
    color = models.CharField(max_length=64)
    model = models.CharField(max_length=128)
    manufacturer = models.CharField(max_length=128)
    categories = models.ManyToManyField(Category, related_name='glasses', blank=True)
    is_deleted = models.BooleanField(default=False)

    objects = GlassesQuerySet.as_manager()

    class Meta:
        verbose_name_plural = "Glasses"
        ordering = ['id']
        indexes = [
            models.Index(fields=['model', 'manufacturer'], name='glasses_model_manufacturer_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.manufacturer} {self.model}, {self.color})"
