from django.contrib import admin

from .models import MediaUsage


@admin.register(MediaUsage)
class MediaUsageAdmin(admin.ModelAdmin):
    list_display = ("media", "source_type", "source_id", "field_name", "created")
    list_filter = ("source_type",)
    raw_id_fields = ("media",)
    search_fields = ("media__name", "field_name")
