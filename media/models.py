import os.path

from django.core.exceptions import ValidationError
from django.db import models
from django.urls import reverse

metadata_default = dict


class MediaSource(models.TextChoices):
    IMAGE = "image", "Image"
    DAM = "dam", "DAM asset"


class Media(models.Model):
    """
    A local media record.

    Image media keep their file in local storage. DAM media only hold the
    identifier of the remote asset plus the metadata the DAM materialized for
    it once its asynchronous indexing finished.
    """

    created = models.DateTimeField(auto_now_add=True)
    modified = models.DateTimeField(auto_now=True)

    source = models.CharField(
        max_length=10, choices=MediaSource.choices, default=MediaSource.IMAGE
    )
    name = models.CharField(max_length=255)

    image = models.ImageField(upload_to="images/%Y/%m", max_length=255, blank=True)

    # Identifier of the asset on the DAM
    remote_id = models.CharField(max_length=255, blank=True, db_index=True)
    dam_metadata = models.JSONField(default=metadata_default, blank=True)

    class Meta:
        verbose_name_plural = "media"
        ordering = ("-created",)

    def __str__(self):
        return self.name

    def clean(self):
        if self.source == MediaSource.DAM and not self.remote_id:
            raise ValidationError({"remote_id": "DAM media require a remote ID"})
        if self.source == MediaSource.IMAGE and not self.image:
            raise ValidationError({"image": "Image media require an image file"})

    def get_absolute_url(self):
        return reverse("media:media-detail", kwargs={"pk": self.pk})

    @property
    def source_file_path(self):
        """
        Absolute path of the local file backing this media, or ``None`` when
        the media has no local file or its storage has no filesystem path
        """
        if not self.image:
            return None
        try:
            return self.image.path
        except NotImplementedError:
            return None

    @property
    def source_file_name(self):
        if not self.image:
            return ""
        return os.path.basename(self.image.name)
