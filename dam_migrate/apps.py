from django.apps import AppConfig


class DamMigrateConfig(AppConfig):
    name = "dam_migrate"
    verbose_name = "DAM migration"
