from django.test import TestCase

from media.tests.utils import create_media
from pages.tests.utils import create_page
from usage.index import UsageIndex


class UsageIndexTests(TestCase):
    def setUp(self):
        self.media = create_media(name="Sunset")
        self.index = UsageIndex()

    def test_unused_media(self):
        self.assertEqual(self.index.list_references(self.media.pk), {})

    def test_groups_by_entity_type_and_id(self):
        home = create_page(title="Home", hero=self.media, gallery=[self.media])
        about = create_page(title="About", banner=self.media)

        references = self.index.list_references(self.media.pk)

        self.assertEqual(list(references), ["pages.page"])
        pages = references["pages.page"]
        self.assertEqual(
            sorted(usage["field_name"] for usage in pages[home.pk]),
            ["gallery", "hero"],
        )
        self.assertEqual(pages[about.pk], [{"field_name": "banner"}])

    def test_other_media_not_listed(self):
        other = create_media(name="Other")
        create_page(title="Home", hero=other)

        self.assertEqual(self.index.list_references(self.media.pk), {})
