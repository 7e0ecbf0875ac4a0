"""
Design
======

Migrating a local image media record to the DAM works like this:

1. A staff member opens the migration screen for an image media record, picks
   the DAM brand the asset belongs to and submits. The DAM requires an OAuth
   session; without one the screen only offers to log in.
2. The file is uploaded to the DAM. The DAM accepts the bytes and returns the
   new asset's ID, but indexes the asset asynchronously.
3. The DAM is polled for the asset's metadata a bounded number of times with a
   fixed delay in between (``settings.DAM_MIGRATE``). If the metadata never
   shows up the migration stops here and the remote asset is left without a
   local record; it has to be cleaned up or imported by hand.
4. A new local media record is created for the DAM asset, holding its ID and
   metadata.
5. If the ``usage`` app is installed, every entity field which references the
   old media record is repointed at the new one. Entities are saved one at a
   time, each in its own transaction, so one failure does not undo the
   others; failures are reported as warnings. Translatable fields are never
   touched.
6. The staff member is redirected to the new media record.

The steps live in separate modules (``uploader``, ``poller``, ``records``,
``rewriter``) and are sequenced by ``pipeline.UploadOrchestrator``, which only
talks to its collaborators (DAM client, content store, usage index, message
reporter) through the objects it is given.
"""
