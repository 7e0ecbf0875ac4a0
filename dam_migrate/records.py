from logging import getLogger

from django.core.exceptions import ValidationError
from django.db import DatabaseError

from media.models import MediaSource

from .exceptions import PersistenceFailed

logger = getLogger(__name__)

MEDIA_ENTITY_TYPE = "media.media"


def create_local_record(store, record, display_name=""):
    """
    Create the local DAM media record for a materialized DAM asset.

    The name is ``display_name`` if given, otherwise the DAM's own name for
    the asset, falling back to the asset ID.

    Raises:
        PersistenceFailed: The store refused to create the record.
    """
    if not record.fields:
        raise PersistenceFailed(
            f"No metadata to create local media for DAM asset {record.remote_id}",
            remote_id=record.remote_id,
        )

    name = display_name or record.fields.get("name") or record.remote_id
    fields = {
        "source": MediaSource.DAM,
        "name": str(name)[:255],
        "remote_id": record.remote_id,
        "dam_metadata": dict(record.fields),
    }

    try:
        media = store.create(MEDIA_ENTITY_TYPE, fields)
    except (ValidationError, DatabaseError) as exc:
        logger.exception(
            "Unable to create local media for DAM asset %s", record.remote_id
        )
        raise PersistenceFailed(
            f"The file was uploaded as DAM asset {record.remote_id}, but the local "
            f"media could not be saved: {exc}",
            remote_id=record.remote_id,
        ) from exc

    logger.info("Created media %s for DAM asset %s", media.pk, record.remote_id)
    return media
