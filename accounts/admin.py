from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import PasswordVerificationCode, TemporaryUser, User


@admin.register(User)
class CustomUserAdmin(UserAdmin):
    """User admin keyed by email instead of username."""

    model = User
    ordering = ('email',)
    list_display = ['email', 'first_name', 'last_name', 'phone_number', 'is_staff']
    search_fields = ('email', 'first_name', 'last_name')

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Personal info', {'fields': ('first_name', 'last_name', 'phone_number')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Important dates', {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'password1', 'password2'),
        }),
    )


@admin.register(TemporaryUser)
class TemporaryUserAdmin(admin.ModelAdmin):
    """Guest checkout identities (read-mostly)."""

    list_display = ('id', 'email', 'first_name', 'last_name', 'phone_number', 'created_at')
    search_fields = ('email', 'last_name')


@admin.register(PasswordVerificationCode)
class PasswordVerificationCodeAdmin(admin.ModelAdmin):
    list_display = ('user', 'created_at', 'is_used')
    readonly_fields = ('user', 'code', 'created_at')
