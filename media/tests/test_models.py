from django.core.exceptions import ValidationError
from django.test import TestCase

from media.fields import is_translatable
from media.models import Media, MediaSource
from media.tests.utils import create_dam_media, create_media
from pages.models import Page


class MediaTests(TestCase):
    def test_image_media_requires_image(self):
        media = Media(name="No file", source=MediaSource.IMAGE)
        with self.assertRaises(ValidationError) as cm:
            media.full_clean()
        self.assertIn("image", cm.exception.message_dict)

    def test_dam_media_requires_remote_id(self):
        media = Media(name="No asset", source=MediaSource.DAM)
        with self.assertRaises(ValidationError) as cm:
            media.full_clean()
        self.assertIn("remote_id", cm.exception.message_dict)

    def test_source_file(self):
        media = create_media(name="Sunset")

        self.assertTrue(media.source_file_path.endswith(media.source_file_name))
        self.assertTrue(media.source_file_name.endswith(".gif"))

    def test_dam_media_has_no_source_file(self):
        media = create_dam_media()

        self.assertIsNone(media.source_file_path)
        self.assertEqual(media.source_file_name, "")
        self.assertEqual(media.dam_metadata, {})

    def test_absolute_url(self):
        media = create_media()
        self.assertEqual(media.get_absolute_url(), f"/media/{media.pk}/")

    def test_str(self):
        self.assertEqual(str(create_media(name="Sunset", do_save=False)), "Sunset")


class TranslatableFieldTests(TestCase):
    def test_flag(self):
        self.assertTrue(is_translatable(Page._meta.get_field("banner")))
        self.assertFalse(is_translatable(Page._meta.get_field("hero")))
        self.assertFalse(is_translatable(Page._meta.get_field("gallery")))
        self.assertFalse(is_translatable(Page._meta.get_field("title")))

    def test_deconstruct(self):
        name, path, args, kwargs = Page._meta.get_field("banner").deconstruct()
        self.assertTrue(kwargs["translatable"])
        self.assertEqual(path, "media.fields.MediaReferenceField")

        name, path, args, kwargs = Page._meta.get_field("hero").deconstruct()
        self.assertNotIn("translatable", kwargs)
