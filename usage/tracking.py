from functools import lru_cache
from logging import getLogger

from django.contrib.contenttypes.models import ContentType
from django.db import transaction

from media.models import Media

from .models import MediaUsage

logger = getLogger(__name__)


@lru_cache(maxsize=None)
def media_reference_fields(model):
    """
    Return the forward relation fields of ``model`` which point at Media
    """
    if model is Media or model is MediaUsage or model._meta.auto_created:
        return ()
    return tuple(
        field
        for field in model._meta.get_fields()
        if field.is_relation
        and field.concrete
        and not field.auto_created
        and field.related_model is Media
    )


def referenced_media(instance):
    """
    Return the set of ``(media_id, field_name)`` pairs ``instance`` currently
    references
    """
    references = set()
    for field in media_reference_fields(type(instance)):
        if field.many_to_many:
            media_ids = getattr(instance, field.name).values_list("pk", flat=True)
        else:
            media_id = getattr(instance, field.attname)
            media_ids = [] if media_id is None else [media_id]
        references.update((media_id, field.name) for media_id in media_ids)
    return references


def track_usage(instance):
    """
    Bring the usage rows for ``instance`` in line with the media it references
    """
    if not media_reference_fields(type(instance)) or instance.pk is None:
        return

    source_type = ContentType.objects.get_for_model(instance)
    wanted = referenced_media(instance)

    with transaction.atomic():
        existing = MediaUsage.objects.filter(
            source_type=source_type, source_id=instance.pk
        )
        current = {}
        for usage in existing:
            current[(usage.media_id, usage.field_name)] = usage.pk

        stale = [pk for key, pk in current.items() if key not in wanted]
        if stale:
            MediaUsage.objects.filter(pk__in=stale).delete()

        MediaUsage.objects.bulk_create(
            [
                MediaUsage(
                    media_id=media_id,
                    source_type=source_type,
                    source_id=instance.pk,
                    field_name=field_name,
                )
                for media_id, field_name in sorted(wanted - current.keys())
            ]
        )

    logger.debug(
        "Tracked %d media references for %s %s",
        len(wanted),
        source_type.model,
        instance.pk,
    )


def clear_usage(instance):
    if not media_reference_fields(type(instance)):
        return
    MediaUsage.objects.filter(
        source_type=ContentType.objects.get_for_model(instance),
        source_id=instance.pk,
    ).delete()
