from django.apps import AppConfig


class UsageConfig(AppConfig):
    name = "usage"
    verbose_name = "Media usage"

    def ready(self):
        from . import handlers  # NOQA
