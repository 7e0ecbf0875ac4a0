from logging import getLogger

from django.apps import apps
from django.conf import settings
from django.contrib import messages
from django.contrib.admin.views.decorators import staff_member_required
from django.contrib.auth.decorators import permission_required
from django.http import Http404, HttpRequest, HttpResponse
from django.shortcuts import redirect
from django.urls import reverse
from django.utils.decorators import method_decorator
from django.views.decorators.cache import never_cache
from django.views.generic.edit import FormView
from requests.exceptions import RequestException

from dam.client import DamClient
from dam.exceptions import DamApiError, UnableToConnectError
from media.models import Media, MediaSource
from media.store import ContentStore

from .config import retry_policy_from_settings
from .forms import MigrateMediaForm
from .pipeline import MessagesReporter, UploadOrchestrator
from .uploader import UploadRequest

logger = getLogger(__name__)

UNSUPPORTED_SOURCE_MESSAGE = "Only image migration is supported at the moment."
USAGE_NOT_INSTALLED_MESSAGE = (
    "The usage app is not installed. Media will only be uploaded, but not "
    "replaced in the host entities."
)
MEDIA_MISSING_MESSAGE = "There was an error while uploading this media."


def usage_installed():
    return apps.is_installed("usage")


def get_usage_index():
    """
    Return the usage index, or ``None`` when usage tracking is not installed
    """
    if not usage_installed():
        return None

    from usage.index import UsageIndex

    return UsageIndex()


@method_decorator(never_cache, name="dispatch")
@method_decorator(staff_member_required, name="dispatch")
@method_decorator(
    permission_required("media.add_media", raise_exception=True), name="dispatch"
)
class MigrateMediaView(FormView):
    """
    Upload a local image media record to the DAM and replace it everywhere it
    is referenced.

    GET shows a confirmation form with the DAM brands the user may upload to.
    Without a valid DAM session the form is replaced by a login prompt, and
    non-image media only get an explanation. POST runs the migration and
    redirects to the new DAM media record on success.
    """

    form_class = MigrateMediaForm
    template_name = "dam_migrate/migrate_form.html"

    def setup(self, request: HttpRequest, *args, **kwargs) -> None:
        super().setup(request, *args, **kwargs)
        self.client = DamClient.from_session(request.session)
        self.brands = None

    def dispatch(self, request: HttpRequest, *args, **kwargs) -> HttpResponse:
        self.media = Media.objects.filter(pk=kwargs["pk"]).first()
        if self.media is None:
            if request.method == "POST":
                messages.error(request, MEDIA_MISSING_MESSAGE)
                return redirect(reverse("admin:media_media_changelist"))
            raise Http404("No media found matching the query")
        return super().dispatch(request, *args, **kwargs)

    @property
    def is_supported(self) -> bool:
        return self.media.source == MediaSource.IMAGE

    def get(self, request: HttpRequest, *args, **kwargs) -> HttpResponse:
        if self.is_supported and not usage_installed():
            messages.warning(request, USAGE_NOT_INSTALLED_MESSAGE)
        return super().get(request, *args, **kwargs)

    def post(self, request: HttpRequest, *args, **kwargs) -> HttpResponse:
        if not self.is_supported or not self.client.has_valid_session():
            return self.render_to_response(self.get_context_data())
        return super().post(request, *args, **kwargs)

    def get_brands(self) -> list:
        """
        Fetch the DAM brands once per request; failures leave the list empty
        and are shown to the user.
        """
        if self.brands is None:
            self.brands = []
            try:
                self.brands = self.client.list_brands()
            except (RequestException, DamApiError):
                logger.exception("Unable to list brands from %s", self.client)
                messages.error(self.request, UnableToConnectError.user_message)
        return self.brands

    def get_form_kwargs(self) -> dict:
        kwargs = super().get_form_kwargs()
        if self.is_supported and self.client.has_valid_session():
            kwargs["brands"] = self.get_brands()
        return kwargs

    def get_context_data(self, **kwargs) -> dict:
        has_session = self.client.has_valid_session()
        if not self.is_supported or not has_session:
            # No form is offered in these cases
            kwargs.setdefault("form", None)
        context = super().get_context_data(**kwargs)
        context.update(
            {
                "media": self.media,
                "is_supported": self.is_supported,
                "unsupported_message": UNSUPPORTED_SOURCE_MESSAGE,
                "has_dam_session": has_session,
                "dam_login_url": settings.DAM["OAUTH_LOGIN_URL"],
            }
        )
        return context

    def form_valid(self, form: MigrateMediaForm) -> HttpResponse:
        upload_request = UploadRequest(
            file_path=self.media.source_file_path or "",
            brand_id=form.cleaned_data["brand"],
            display_name=self.media.name,
        )
        orchestrator = UploadOrchestrator(
            self.client,
            ContentStore(),
            usage_index=get_usage_index(),
            retry_policy=retry_policy_from_settings(),
            reporter=MessagesReporter(self.request),
            user=self.request.user,
        )
        result = orchestrator.run(upload_request, self.media.pk)

        if result.succeeded:
            return redirect(result.redirect_url)
        return self.render_to_response(self.get_context_data(form=form))
