from django.contrib.contenttypes.models import ContentType
from django.db import models


class MediaUsage(models.Model):
    """
    Records that a field of some entity references a media record
    """

    created = models.DateTimeField(auto_now_add=True)

    media = models.ForeignKey(
        "media.Media", on_delete=models.CASCADE, related_name="usages"
    )

    source_type = models.ForeignKey(ContentType, on_delete=models.CASCADE)
    source_id = models.PositiveIntegerField()
    field_name = models.CharField(max_length=255)

    class Meta:
        unique_together = (("media", "source_type", "source_id", "field_name"),)
        indexes = [
            models.Index(fields=["source_type", "source_id"], name="usage_source_idx")
        ]

    def __str__(self):
        return "MediaUsage(media=%s, source=%s:%s, field=%s)" % (
            self.media_id,
            self.source_type.model,
            self.source_id,
            self.field_name,
        )

    @property
    def entity_type(self):
        return "%s.%s" % (self.source_type.app_label, self.source_type.model)
