from django.urls import path

from . import views

app_name = "dam_migrate"

urlpatterns = [
    path(
        "<int:pk>/migrate/",
        views.MigrateMediaView.as_view(),
        name="migrate-media",
    ),
]
