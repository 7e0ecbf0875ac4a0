from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from .models import Media, MediaSource


@admin.register(Media)
class MediaAdmin(admin.ModelAdmin):
    list_display = ("name", "source", "remote_id", "created", "dam_migration_link")
    list_filter = ("source",)
    search_fields = ("name", "remote_id")
    readonly_fields = ("created", "modified", "dam_metadata")

    @admin.display(description="DAM")
    def dam_migration_link(self, obj: Media) -> str:
        """
        Link image media to the screen which uploads them to the DAM.
        """
        if obj.source != MediaSource.IMAGE:
            return ""
        return format_html(
            '<a href="{}">Upload to DAM</a>',
            reverse("dam_migrate:migrate-media", kwargs={"pk": obj.pk}),
        )
