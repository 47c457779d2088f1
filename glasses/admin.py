"""Django admin configuration for the glasses catalog."""

from django.contrib import admin

from .models import Category, Glasses


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ('name', 'description')
    search_fields = ('name',)


@admin.register(Glasses)
class GlassesAdmin(admin.ModelAdmin):
    """Admin configuration for glasses, including soft-deleted rows."""

    list_display = ('identifier', 'name', 'manufacturer', 'model', 'color', 'price', 'is_deleted')
    list_filter = ('is_deleted', 'manufacturer', 'categories')
    search_fields = ('identifier', 'name', 'model', 'manufacturer')
    filter_horizontal = ('categories',)
    actions = ['soft_delete', 'restore']

    @admin.action(description='Mark selected glasses as deleted')
    def soft_delete(self, request, queryset):
        queryset.update(is_deleted=True)

    @admin.action(description='Restore selected glasses')
    def restore(self, request, queryset):
        queryset.update(is_deleted=False)
