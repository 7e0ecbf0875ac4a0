from logging import getLogger
from typing import NamedTuple, Optional

from django.contrib import messages
from django.db import models

from mediahub.logging import MediaHubLogger

from .exceptions import MigrationError
from .poller import RetryPolicy, poll_metadata
from .records import create_local_record
from .rewriter import rewrite_references
from .uploader import upload_asset

logger = getLogger(__name__)
structured_logger = MediaHubLogger.get_logger(__name__)

SUCCESS_MESSAGE = "Successfully uploaded media."
USAGE_UNAVAILABLE_MESSAGE = (
    "Media usage tracking is not installed. Media will only be uploaded, but not "
    "replaced in the host entities."
)


class Stage(models.TextChoices):
    START = "start", "Start"
    UPLOADED = "uploaded", "Uploaded"
    POLLED = "polled", "Metadata received"
    RECORD_CREATED = "record_created", "Local media created"
    REFERENCES_REWRITTEN = "references_rewritten", "References replaced"
    DONE = "done", "Done"
    FAILED = "failed", "Failed"


class UploadResult(NamedTuple):
    #: Terminal stage, either ``Stage.DONE`` or ``Stage.FAILED``
    stage: str
    #: Every stage reached, in order
    stages: tuple
    record: Optional[models.Model] = None
    #: Kind of the error which ended a failed run, e.g. ``"UploadFailed"``
    reason: Optional[str] = None
    error: Optional[Exception] = None
    warnings: tuple = ()
    redirect_url: Optional[str] = None

    @property
    def succeeded(self):
        return self.stage == Stage.DONE


class NullReporter:
    """Discards user-facing messages"""

    def status(self, message):
        pass

    def warning(self, message):
        pass

    def error(self, message):
        pass


class MessagesReporter:
    """Shows user-facing messages through the Django messages framework"""

    def __init__(self, request):
        self.request = request

    def status(self, message):
        messages.success(self.request, message)

    def warning(self, message):
        messages.warning(self.request, message)

    def error(self, message):
        messages.error(self.request, message)


class UploadOrchestrator:
    """
    Migrates one local media record to the DAM.

    The run is strictly linear: upload the file, poll until the DAM has
    materialized the asset's metadata, create the local DAM media record and
    finally repoint references from the old media record to the new one.
    A failure before the local record exists ends the run; failures while
    repointing references are reported as warnings.

    The usage index is optional. Without it references are left untouched and
    a single notice says so.
    """

    def __init__(
        self,
        client,
        store,
        usage_index=None,
        retry_policy=None,
        reporter=None,
        user=None,
    ):
        self.client = client
        self.store = store
        self.usage_index = usage_index
        self.retry_policy = retry_policy or RetryPolicy()
        self.reporter = reporter or NullReporter()
        self.user = user

    def run(self, upload_request, source_id):
        """
        Migrate the media record ``source_id`` whose file is described by
        ``upload_request``.

        Returns:
            UploadResult: ``stage`` is ``Stage.DONE`` with the new record and
            its URL, or ``Stage.FAILED`` with the error which ended the run.
        """
        usage_index = self.usage_index
        run_logger = structured_logger.bind(user=self.user, source_media_id=source_id)
        stages = [Stage.START]

        try:
            handle = upload_asset(self.client, upload_request)
            stages.append(Stage.UPLOADED)
            run_logger.info(
                "DAM accepted media upload.",
                event_code="dam_upload_accepted",
                remote_id=handle.remote_id,
                brand_id=upload_request.brand_id,
            )

            record = poll_metadata(self.client, handle, self.retry_policy)
            stages.append(Stage.POLLED)

            media = create_local_record(
                self.store, record, display_name=upload_request.display_name
            )
            stages.append(Stage.RECORD_CREATED)
        except MigrationError as exc:
            return self._fail(run_logger, stages, exc)

        self.reporter.status(SUCCESS_MESSAGE)

        warnings = []
        if usage_index is None:
            self.reporter.warning(USAGE_UNAVAILABLE_MESSAGE)
        else:
            rewritten, warnings = self._rewrite(usage_index, source_id, media.pk)
            if rewritten:
                stages.append(Stage.REFERENCES_REWRITTEN)

        stages.append(Stage.DONE)
        run_logger.info(
            "Media migrated to the DAM.",
            event_code="dam_migration_done",
            media=media,
            warning_count=len(warnings),
        )
        return UploadResult(
            stage=Stage.DONE,
            stages=tuple(stages),
            record=media,
            warnings=tuple(warnings),
            redirect_url=media.get_absolute_url(),
        )

    def _rewrite(self, usage_index, old_id, new_id):
        """
        Returns ``(rewritten, warnings)``; ``rewritten`` is false when the
        rewriter itself failed and no reference was examined.
        """
        rewritten = False
        try:
            report = rewrite_references(self.store, usage_index, old_id, new_id)
        except Exception as exc:
            logger.exception(
                "Unable to replace references to media %s with %s", old_id, new_id
            )
            warnings = [
                f"References to media {old_id} could not be replaced with "
                f"{new_id}: {exc}"
            ]
        else:
            warnings = [str(warning) for warning in report.warnings]
            rewritten = True

        for warning in warnings:
            self.reporter.warning(warning)
        return rewritten, warnings

    def _fail(self, run_logger, stages, exc):
        failed_stage = stages[-1]
        run_logger.error(
            "Media migration to the DAM failed.",
            event_code="dam_migration_failed",
            reason=str(exc),
            reason_code=exc.kind,
            failed_after=failed_stage,
            **{k: v for k, v in exc.details.items() if isinstance(v, str)},
        )
        self.reporter.error(str(exc))
        stages.append(Stage.FAILED)
        return UploadResult(
            stage=Stage.FAILED,
            stages=tuple(stages),
            reason=exc.kind,
            error=exc,
        )
