from django.core.files.uploadedfile import SimpleUploadedFile

from media.models import Media, MediaSource

# 1x1 transparent GIF
TEST_IMAGE_BYTES = (
    b"GIF89a\x01\x00\x01\x00\x80\x00\x00\x00\x00\x00\xff\xff\xff!\xf9\x04\x01"
    b"\x00\x00\x00\x00,\x00\x00\x00\x00\x01\x00\x01\x00\x00\x02\x02D\x01\x00;"
)


def create_test_image(name="test.gif"):
    return SimpleUploadedFile(name, TEST_IMAGE_BYTES, content_type="image/gif")


def create_media(*, name="Test Media", source=MediaSource.IMAGE, do_save=True, **kwargs):
    if source == MediaSource.IMAGE and "image" not in kwargs:
        kwargs["image"] = create_test_image()
    if source == MediaSource.DAM and "remote_id" not in kwargs:
        kwargs["remote_id"] = "remote-asset-1"
    media = Media(name=name, source=source, **kwargs)
    media.full_clean()
    if do_save:
        media.save()
    return media


def create_dam_media(*, name="Test DAM Media", **kwargs):
    return create_media(name=name, source=MediaSource.DAM, **kwargs)
