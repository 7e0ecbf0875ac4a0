from django.contrib.admin.views.decorators import staff_member_required
from django.utils.decorators import method_decorator
from django.views.generic import DetailView

from .models import Media


@method_decorator(staff_member_required, name="dispatch")
class MediaDetailView(DetailView):
    model = Media
    template_name = "media/media_detail.html"
    context_object_name = "media"
