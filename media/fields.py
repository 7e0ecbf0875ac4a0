from django.db import models


class TranslatableFieldMixin:
    """
    Adds a ``translatable`` flag to a relation field definition.

    A translatable reference holds a per-language value, so it must not be
    rewritten from a language-agnostic context such as a media migration.
    """

    def __init__(self, *args, translatable=False, **kwargs):
        self.translatable = translatable
        super().__init__(*args, **kwargs)

    def deconstruct(self):
        name, path, args, kwargs = super().deconstruct()
        if self.translatable:
            kwargs["translatable"] = True
        return name, path, args, kwargs


class MediaReferenceField(TranslatableFieldMixin, models.ForeignKey):
    """A single-valued reference from any content type to a media record"""


class MediaReferencesField(TranslatableFieldMixin, models.ManyToManyField):
    """A multi-valued reference from any content type to media records"""


def is_translatable(field):
    return bool(getattr(field, "translatable", False))
