import time
from unittest import mock

from django.contrib.auth.models import User
from django.contrib.messages import get_messages
from django.test import TestCase
from django.urls import reverse
from requests.exceptions import ConnectionError as RequestsConnectionError

from dam.client import SESSION_EXPIRES_KEY, SESSION_TOKEN_KEY, DamClient
from dam.exceptions import UnableToConnectError
from dam_migrate.pipeline import SUCCESS_MESSAGE
from dam_migrate.views import (
    MEDIA_MISSING_MESSAGE,
    UNSUPPORTED_SOURCE_MESSAGE,
    USAGE_NOT_INSTALLED_MESSAGE,
)
from media.models import Media, MediaSource
from media.tests.utils import create_dam_media, create_media
from pages.models import Page
from pages.tests.utils import create_page

BRANDS = [
    {"id": "brand-1", "name": "Main", "subBrands": [{"id": "sub-1", "name": "Events"}]},
]


def message_texts(response):
    return [str(message) for message in get_messages(response.wsgi_request)]


class MigrateMediaViewTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_superuser(
            username="admin", email="admin@example.com", password="secret"
        )
        self.client.force_login(self.user)
        self.login_dam()

        self.media = create_media(name="Sunset")
        self.url = reverse("dam_migrate:migrate-media", kwargs={"pk": self.media.pk})

        patcher = mock.patch.object(DamClient, "list_brands", return_value=BRANDS)
        self.mock_list_brands = patcher.start()
        self.addCleanup(patcher.stop)

    def login_dam(self, expires=None):
        session = self.client.session
        session[SESSION_TOKEN_KEY] = "token"
        session[SESSION_EXPIRES_KEY] = expires or time.time() + 3600
        session.save()

    def test_anonymous_user_is_redirected_to_login(self):
        self.client.logout()

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 302)
        self.assertIn(reverse("admin:login"), response["Location"])

    def test_staff_without_permission_is_forbidden(self):
        User.objects.create_user(username="editor", password="secret", is_staff=True)
        self.client.login(username="editor", password="secret")

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 403)

    def test_get_shows_brand_form(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "dam_migrate/migrate_form.html")
        form = response.context["form"]
        self.assertEqual(
            form.fields["brand"].choices,
            [("brand-1", "Main"), ("sub-1", "- Events")],
        )
        self.assertTrue(response.context["has_dam_session"])
        self.assertContains(response, "Do you want to upload this media to the DAM?")
        self.assertNotIn(USAGE_NOT_INSTALLED_MESSAGE, message_texts(response))

    def test_get_missing_media(self):
        url = reverse("dam_migrate:migrate-media", kwargs={"pk": self.media.pk + 100})
        response = self.client.get(url)
        self.assertEqual(response.status_code, 404)

    def test_post_missing_media(self):
        url = reverse("dam_migrate:migrate-media", kwargs={"pk": self.media.pk + 100})

        response = self.client.post(url, {"brand": "brand-1"})

        self.assertRedirects(
            response,
            reverse("admin:media_media_changelist"),
            fetch_redirect_response=False,
        )
        self.assertIn(MEDIA_MISSING_MESSAGE, message_texts(response))

    def test_dam_media_is_not_supported(self):
        media = create_dam_media()
        url = reverse("dam_migrate:migrate-media", kwargs={"pk": media.pk})

        response = self.client.get(url)

        self.assertEqual(response.status_code, 200)
        self.assertIsNone(response.context["form"])
        self.assertContains(response, UNSUPPORTED_SOURCE_MESSAGE)
        self.mock_list_brands.assert_not_called()

    def test_post_for_dam_media_does_nothing(self):
        media = create_dam_media()
        url = reverse("dam_migrate:migrate-media", kwargs={"pk": media.pk})

        with mock.patch.object(DamClient, "upload_asset") as mock_upload:
            response = self.client.post(url, {"brand": "brand-1"})

        self.assertEqual(response.status_code, 200)
        mock_upload.assert_not_called()

    def test_without_dam_session_shows_login_link(self):
        self.login_dam(expires=time.time() - 10)

        response = self.client.get(self.url)

        self.assertIsNone(response.context["form"])
        self.assertFalse(response.context["has_dam_session"])
        self.assertContains(response, 'href="/dam/oauth/"')
        self.mock_list_brands.assert_not_called()

    @mock.patch("dam_migrate.views.usage_installed", return_value=False)
    def test_get_warns_without_usage_tracking(self, mock_usage_installed):
        response = self.client.get(self.url)

        self.assertIn(USAGE_NOT_INSTALLED_MESSAGE, message_texts(response))

    def test_unreachable_dam(self):
        self.mock_list_brands.side_effect = UnableToConnectError("refused")

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context["form"].fields["brand"].choices, [])
        self.assertIn(UnableToConnectError.user_message, message_texts(response))

    def test_brand_request_failure(self):
        self.mock_list_brands.side_effect = RequestsConnectionError("refused")

        response = self.client.get(self.url)

        self.assertIn(UnableToConnectError.user_message, message_texts(response))

    def test_post_requires_valid_brand(self):
        with mock.patch.object(DamClient, "upload_asset") as mock_upload:
            response = self.client.post(self.url, {"brand": "unknown"})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context["form"].errors)
        mock_upload.assert_not_called()

    @mock.patch.object(DamClient, "fetch_metadata", return_value={"name": "sunset"})
    @mock.patch.object(
        DamClient, "upload_asset", return_value={"success": True, "mediaid": "ABC-1"}
    )
    def test_post_migrates_media(self, mock_upload, mock_fetch):
        page = create_page(title="Home", hero=self.media)

        response = self.client.post(self.url, {"brand": "sub-1"})

        new_media = Media.objects.get(source=MediaSource.DAM)
        self.assertRedirects(
            response, new_media.get_absolute_url(), fetch_redirect_response=False
        )
        self.assertEqual(new_media.remote_id, "ABC-1")
        self.assertEqual(new_media.name, "Sunset")
        self.assertEqual(Page.objects.get(pk=page.pk).hero_id, new_media.pk)
        self.assertIn(SUCCESS_MESSAGE, message_texts(response))

        upload_request = mock_upload.call_args[0][0]
        self.assertEqual(upload_request.brand_id, "sub-1")
        self.assertEqual(upload_request.file_path, self.media.image.path)
        mock_fetch.assert_called_once_with("ABC-1")

    @mock.patch.object(DamClient, "upload_asset", return_value={"success": False})
    def test_post_failed_upload_rerenders_form(self, mock_upload):
        response = self.client.post(self.url, {"brand": "brand-1"})

        self.assertEqual(response.status_code, 200)
        self.assertIsNotNone(response.context["form"])
        self.assertFalse(Media.objects.filter(source=MediaSource.DAM).exists())
        self.assertTrue(
            any(
                "There was an error while uploading this media" in text
                for text in message_texts(response)
            )
        )
