class MigrationError(Exception):
    """
    Base class for the failures which end a media migration.

    ``kind`` names the failure for the user-facing result and the structured
    logs. The message always carries the identifiers needed to finish the
    migration by hand, since nothing is rolled back automatically.
    """

    kind = "MigrationError"

    def __init__(self, message, **details):
        super().__init__(message)
        self.details = details


class UploadFailed(MigrationError):
    """
    The DAM rejected the upload or could not be reached. Nothing was created
    on either side.
    """

    kind = "UploadFailed"


class MetadataNotReady(MigrationError):
    """
    The DAM accepted the upload but never returned metadata for it within the
    retry budget.

    The remote asset is left behind without a local media record.
    """

    kind = "MetadataNotReady"


class PersistenceFailed(MigrationError):
    """Creating the local media record failed."""

    kind = "PersistenceFailed"


class ReferenceRewriteWarning(Warning):
    """
    A referencing entity could not be loaded or saved while repointing its
    references. Reported, never raised by the rewriter.
    """

    kind = "ReferenceRewriteWarning"

    def __init__(self, message, entity_type=None, entity_id=None):
        super().__init__(message)
        self.entity_type = entity_type
        self.entity_id = entity_id
