from .models import MediaUsage


class UsageIndex:
    """
    Lists the entities and fields which reference a media record
    """

    def list_references(self, content_id):
        """
        Return the known references to the media record ``content_id``.

        Returns:
            dict: ``{entity_type: {entity_id: [{"field_name": str}, ...]}}``
            where ``entity_type`` is a model label such as ``"pages.page"``.
        """
        usages = (
            MediaUsage.objects.filter(media_id=content_id)
            .select_related("source_type")
            .order_by("source_type__app_label", "source_type__model", "source_id")
        )

        sources = {}
        for usage in usages:
            entity_usage = sources.setdefault(usage.entity_type, {}).setdefault(
                usage.source_id, []
            )
            entity_usage.append({"field_name": usage.field_name})
        return sources
