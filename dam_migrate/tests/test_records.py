from unittest import mock

from django.db import IntegrityError
from django.test import TestCase

from dam_migrate.exceptions import PersistenceFailed
from dam_migrate.poller import MaterializedRecord
from dam_migrate.records import MEDIA_ENTITY_TYPE, create_local_record
from media.models import Media, MediaSource
from media.store import ContentStore


class CreateLocalRecordTests(TestCase):
    def setUp(self):
        self.store = ContentStore()
        self.record = MaterializedRecord(
            "ABC-1", {"name": "sunset.jpg", "width": 640, "height": 480}
        )

    def test_creates_dam_media(self):
        media = create_local_record(self.store, self.record, display_name="Sunset")

        media.refresh_from_db()
        self.assertEqual(media.source, MediaSource.DAM)
        self.assertEqual(media.name, "Sunset")
        self.assertEqual(media.remote_id, "ABC-1")
        self.assertEqual(media.dam_metadata["width"], 640)
        self.assertFalse(media.image)

    def test_name_falls_back_to_dam_name(self):
        media = create_local_record(self.store, self.record)
        self.assertEqual(media.name, "sunset.jpg")

    def test_name_falls_back_to_remote_id(self):
        media = create_local_record(self.store, MaterializedRecord("ABC-2", {"a": 1}))
        self.assertEqual(media.name, "ABC-2")

    def test_empty_metadata(self):
        with self.assertRaises(PersistenceFailed):
            create_local_record(self.store, MaterializedRecord("ABC-1", {}))
        self.assertFalse(Media.objects.exists())

    def test_invalid_record(self):
        with self.assertRaises(PersistenceFailed) as cm:
            create_local_record(self.store, MaterializedRecord("", {"name": "x"}))

        self.assertEqual(cm.exception.kind, "PersistenceFailed")
        self.assertFalse(Media.objects.exists())

    def test_database_error(self):
        store = mock.MagicMock()
        store.create.side_effect = IntegrityError("duplicate")

        with self.assertRaisesRegex(PersistenceFailed, "ABC-1") as cm:
            create_local_record(store, self.record)

        self.assertEqual(cm.exception.details["remote_id"], "ABC-1")
        self.assertEqual(store.create.call_args[0][0], MEDIA_ENTITY_TYPE)
