from logging import getLogger

from django.db.models.signals import m2m_changed, post_delete, post_save
from django.dispatch import receiver

from .tracking import clear_usage, media_reference_fields, track_usage

logger = getLogger(__name__)


@receiver(post_save, dispatch_uid="usage_track_on_save")
def track_usage_on_save(sender, instance, raw=False, **kwargs):
    # Fixture loading saves rows before their relations exist
    if raw or not media_reference_fields(sender):
        return
    track_usage(instance)


@receiver(post_delete, dispatch_uid="usage_clear_on_delete")
def clear_usage_on_delete(sender, instance, **kwargs):
    if media_reference_fields(sender):
        clear_usage(instance)


@receiver(m2m_changed, dispatch_uid="usage_track_on_m2m_change")
def track_usage_on_m2m_change(
    sender, instance, action, reverse, model, pk_set, **kwargs
):
    """
    Re-track the owning side of a many-to-many media relation when it changes.

    For reverse changes (``media.gallery_pages.add(page)``) the owning rows are
    the ones listed in ``pk_set``; a reverse clear does not provide them, so
    they are collected before the clear happens.
    """
    if not reverse:
        if action in ("post_add", "post_remove", "post_clear") and (
            media_reference_fields(type(instance))
        ):
            track_usage(instance)
        return

    if not media_reference_fields(model):
        return

    if action == "pre_clear":
        instance._usage_pending_sources = list(
            sender.objects.filter(**{_reverse_lookup(sender, instance): instance.pk})
            .values_list(_source_column(sender, model), flat=True)
            .distinct()
        )
    elif action in ("post_add", "post_remove"):
        for source in model._default_manager.filter(pk__in=pk_set or ()):
            track_usage(source)
    elif action == "post_clear":
        pending = getattr(instance, "_usage_pending_sources", [])
        for source in model._default_manager.filter(pk__in=pending):
            track_usage(source)
        instance._usage_pending_sources = []


def _fk_to(through, model):
    for field in through._meta.get_fields():
        if field.many_to_one and field.related_model is model:
            return field
    raise LookupError(
        "%s has no foreign key to %s" % (through._meta.label, model._meta.label)
    )


def _reverse_lookup(through, instance):
    return _fk_to(through, type(instance)).attname


def _source_column(through, model):
    return _fk_to(through, model).attname
