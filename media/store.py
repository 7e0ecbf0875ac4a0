"""
Content store adapter over the Django ORM.

Entities are addressed by their model label (``"pages.page"``) and primary
key. Loaded entities expose their fields as lists of items so reference values
can be inspected and repointed independently of whether the underlying field
is a foreign key or a many-to-many relation. Repointed values are only written
when the entity is saved through the store.
"""

from logging import getLogger

from django.apps import apps
from django.core.exceptions import FieldDoesNotExist, ObjectDoesNotExist
from django.db import transaction

from .fields import is_translatable

logger = getLogger(__name__)

ENTITY_REFERENCE = "entity_reference"


class FieldItem:
    """A single value held by an entity field"""

    def __init__(
        self,
        entity,
        field,
        target_id,
        item_type=ENTITY_REFERENCE,
        target_type=None,
    ):
        self.entity = entity
        self.field = field
        self.target_id = target_id
        self.item_type = item_type
        self.target_type = target_type

    def __repr__(self):
        return "FieldItem(field=%s, item_type=%s, target_id=%s)" % (
            self.field.name,
            self.item_type,
            self.target_id,
        )

    @property
    def field_name(self):
        return self.field.name

    @property
    def translatable(self):
        return is_translatable(self.field)

    def repoint(self, target_id):
        self.entity.record_repoint(self, target_id)
        self.target_id = target_id


class ContentEntity:
    """
    Wraps a model instance, tracking reference changes until it is saved
    """

    def __init__(self, instance):
        self.instance = instance
        self._fk_changes = {}
        self._m2m_changes = []

    def __repr__(self):
        return "ContentEntity(%s, %s)" % (self.entity_type, self.entity_id)

    @property
    def entity_type(self):
        return self.instance._meta.label_lower

    @property
    def entity_id(self):
        return self.instance.pk

    @property
    def pk(self):
        return self.instance.pk

    @property
    def has_changes(self):
        return bool(self._fk_changes or self._m2m_changes)

    def get(self, field_name):
        """
        Return the items held by ``field_name``.

        Unknown fields and empty single-valued relations have no items.
        Non-relation fields return one item whose type is the field's internal
        type, so callers can tell them apart from references.
        """
        try:
            field = self.instance._meta.get_field(field_name)
        except FieldDoesNotExist:
            return []

        if field.auto_created and not field.concrete:
            # Reverse relations are owned by the other side
            return []

        if field.many_to_many:
            target_type = field.related_model._meta.label_lower
            manager = getattr(self.instance, field.name)
            return [
                FieldItem(self, field, pk, target_type=target_type)
                for pk in manager.order_by("pk").values_list("pk", flat=True)
            ]

        if field.many_to_one or field.one_to_one:
            target_id = getattr(self.instance, field.attname)
            if target_id is None:
                return []
            return [
                FieldItem(
                    self,
                    field,
                    target_id,
                    target_type=field.related_model._meta.label_lower,
                )
            ]

        return [
            FieldItem(
                self,
                field,
                getattr(self.instance, field.attname),
                item_type=field.get_internal_type(),
            )
        ]

    def record_repoint(self, item, target_id):
        if item.field.many_to_many:
            self._m2m_changes.append((item.field.name, item.target_id, target_id))
        else:
            self._fk_changes[item.field.attname] = target_id

    def apply_changes(self):
        for attname, target_id in self._fk_changes.items():
            setattr(self.instance, attname, target_id)
        self.instance.save()

        for field_name, old_id, new_id in self._m2m_changes:
            manager = getattr(self.instance, field_name)
            manager.remove(old_id)
            manager.add(new_id)

        self._fk_changes = {}
        self._m2m_changes = []


class ContentStore:
    """
    Loads, creates and saves entities of any installed model
    """

    def get_model(self, entity_type):
        return apps.get_model(entity_type)

    def load(self, entity_type, entity_id):
        """
        Return a ContentEntity for the given type and ID, or ``None`` when the
        type is unknown or the row no longer exists
        """
        try:
            model = self.get_model(entity_type)
            instance = model._default_manager.get(pk=entity_id)
        except (LookupError, ValueError, ObjectDoesNotExist):
            logger.warning(
                "Unable to load %s %s from the content store", entity_type, entity_id
            )
            return None
        return ContentEntity(instance)

    def create(self, entity_type, fields):
        """
        Create, validate and save a new instance of ``entity_type``

        Raises:
            LookupError: ``entity_type`` is not an installed model.
            ValidationError: The field values did not pass model validation.
            DatabaseError: The row could not be written.
        """
        model = self.get_model(entity_type)
        instance = model(**fields)
        instance.full_clean()
        instance.save()
        return instance

    def save(self, entity):
        """
        Persist the pending changes of a ContentEntity in its own transaction
        """
        with transaction.atomic():
            entity.apply_changes()
