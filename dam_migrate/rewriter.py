from logging import getLogger
from typing import NamedTuple

from media.store import ENTITY_REFERENCE
from mediahub.logging import MediaHubLogger

from .exceptions import ReferenceRewriteWarning
from .records import MEDIA_ENTITY_TYPE

logger = getLogger(__name__)
structured_logger = MediaHubLogger.get_logger(__name__)


class RewriteReport(NamedTuple):
    #: ``(entity_type, entity_id)`` of every entity which was saved
    updated: list
    warnings: list


def _same_id(left, right):
    return str(left) == str(right)


def rewrite_references(
    store, usage_index, old_id, new_id, target_type=MEDIA_ENTITY_TYPE
):
    """
    Repoint every known reference to ``old_id`` at ``new_id``.

    The usage index may be stale, so entities which cannot be loaded are
    skipped. Translatable fields and values which are not references to
    ``target_type`` are left alone. Each changed entity is saved once, after
    all of its fields were processed; a failed save is reported as a warning
    and does not stop the remaining entities from being saved.

    Running this again with the same arguments changes nothing.

    Returns:
        RewriteReport: The saved entities and the warnings raised on the way.
    """
    warnings = []
    # Keyed by identity so an entity referenced from several fields is saved
    # once
    touched = {}

    for entity_type, entity_usages in usage_index.list_references(old_id).items():
        for entity_id, field_usages in entity_usages.items():
            try:
                entity = store.load(entity_type, entity_id)
            except Exception as exc:
                logger.exception("Unable to load %s %s", entity_type, entity_id)
                entity = None
                load_error = str(exc)
            else:
                load_error = "not found"

            if not entity:
                warning = ReferenceRewriteWarning(
                    f"Skipped {entity_type} {entity_id} which references media "
                    f"{old_id}: it could not be loaded ({load_error})",
                    entity_type=entity_type,
                    entity_id=entity_id,
                )
                structured_logger.warning(
                    "Skipped referencing entity which could not be loaded.",
                    event_code="media_reference_entity_missing",
                    reason=load_error,
                    reason_code="entity_load_failed",
                    entity_type=entity_type,
                    entity_id=entity_id,
                    old_media_id=old_id,
                )
                warnings.append(warning)
                continue

            for field_usage in field_usages:
                for item in entity.get(field_usage["field_name"]):
                    # The field must exist and hold references
                    if not item or item.item_type != ENTITY_REFERENCE:
                        continue

                    if target_type and item.target_type not in (None, target_type):
                        continue

                    # Translatable fields are not supported
                    if item.translatable:
                        continue

                    if _same_id(item.target_id, old_id):
                        item.repoint(new_id)
                        touched[id(entity)] = (entity_type, entity_id, entity)

    updated = []
    for entity_type, entity_id, entity in touched.values():
        try:
            store.save(entity)
        except Exception as exc:
            logger.exception(
                "Unable to save %s %s after repointing media %s to %s",
                entity_type,
                entity_id,
                old_id,
                new_id,
            )
            warnings.append(
                ReferenceRewriteWarning(
                    f"Could not replace media {old_id} with {new_id} in "
                    f"{entity_type} {entity_id}: {exc}",
                    entity_type=entity_type,
                    entity_id=entity_id,
                )
            )
        else:
            updated.append((entity_type, entity_id))

    structured_logger.info(
        "Media references rewritten.",
        event_code="media_references_rewritten",
        old_media_id=old_id,
        new_media_id=new_id,
        updated_count=len(updated),
        warning_count=len(warnings),
    )
    return RewriteReport(updated, warnings)
