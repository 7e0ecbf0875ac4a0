from django.contrib import admin

from .models import Page


@admin.register(Page)
class PageAdmin(admin.ModelAdmin):
    list_display = ("title", "slug", "modified")
    prepopulated_fields = {"slug": ("title",)}
    raw_id_fields = ("hero", "banner")
    filter_horizontal = ("gallery",)
    search_fields = ("title", "slug")
