from django.contrib import admin
from .models import Category, MenuItem, ItemVariant, Addon, CategoryAddon, ItemAddon


class CategoryAddonInline(admin.TabularInline):
    model = CategoryAddon
    extra = 0


class ItemVariantInline(admin.TabularInline):
    model = ItemVariant
    extra = 0


class ItemAddonInline(admin.TabularInline):
    model = ItemAddon
    extra = 0


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "display_order", "is_active")
    list_filter = ("is_active",)
    search_fields = ("name",)
    inlines = [CategoryAddonInline]


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "base_price", "has_variants", "is_available")
    list_filter = ("category", "has_variants", "is_available")
    search_fields = ("name",)
    inlines = [ItemVariantInline, ItemAddonInline]


@admin.register(Addon)
class AddonAdmin(admin.ModelAdmin):
    list_display = ("name", "price", "addon_group", "is_available")
    list_filter = ("addon_group", "is_available")
    search_fields = ("name",)
