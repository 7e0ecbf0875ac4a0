from django.db import models

from media.fields import MediaReferenceField, MediaReferencesField


class Page(models.Model):
    """
    A content page illustrated by media records
    """

    created = models.DateTimeField(auto_now_add=True)
    modified = models.DateTimeField(auto_now=True)

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True, allow_unicode=True)
    body = models.TextField(blank=True)

    hero = MediaReferenceField(
        "media.Media",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="hero_pages",
    )
    gallery = MediaReferencesField(
        "media.Media", blank=True, related_name="gallery_pages"
    )
    # Holds a per-language banner, so it is never rewritten globally
    banner = MediaReferenceField(
        "media.Media",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="banner_pages",
        translatable=True,
    )

    def __str__(self):
        return self.title
