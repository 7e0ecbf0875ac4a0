from django.urls import path

from . import views

app_name = "media"

urlpatterns = [
    path("<int:pk>/", views.MediaDetailView.as_view(), name="media-detail"),
]
