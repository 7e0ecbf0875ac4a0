import django.db.models.deletion
from django.db import migrations, models

import media.fields


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("media", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Page",
            fields=[
                (
                    "id",
                    models.AutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("created", models.DateTimeField(auto_now_add=True)),
                ("modified", models.DateTimeField(auto_now=True)),
                ("title", models.CharField(max_length=255)),
                (
                    "slug",
                    models.SlugField(allow_unicode=True, max_length=255, unique=True),
                ),
                ("body", models.TextField(blank=True)),
                (
                    "hero",
                    media.fields.MediaReferenceField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="hero_pages",
                        to="media.media",
                    ),
                ),
                (
                    "gallery",
                    media.fields.MediaReferencesField(
                        blank=True, related_name="gallery_pages", to="media.media"
                    ),
                ),
                (
                    "banner",
                    media.fields.MediaReferenceField(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="banner_pages",
                        to="media.media",
                        translatable=True,
                    ),
                ),
            ],
        ),
    ]
