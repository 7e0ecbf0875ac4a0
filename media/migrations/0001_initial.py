from django.db import migrations, models

import media.models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Media",
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
                (
                    "source",
                    models.CharField(
                        choices=[("image", "Image"), ("dam", "DAM asset")],
                        default="image",
                        max_length=10,
                    ),
                ),
                ("name", models.CharField(max_length=255)),
                (
                    "image",
                    models.ImageField(
                        blank=True, max_length=255, upload_to="images/%Y/%m"
                    ),
                ),
                (
                    "remote_id",
                    models.CharField(blank=True, db_index=True, max_length=255),
                ),
                (
                    "dam_metadata",
                    models.JSONField(blank=True, default=media.models.metadata_default),
                ),
            ],
            options={
                "verbose_name_plural": "media",
                "ordering": ("-created",),
            },
        ),
    ]
