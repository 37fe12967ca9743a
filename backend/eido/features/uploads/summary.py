"""
Uploads feature: status projection for a batch of jobs.
"""

from collections import Counter
from typing import Iterable

from eido.features.uploads.schemas import BatchSummary, JobStatus

DEFAULT_DISMISS_SECONDS = 5


def summarize_batch(
    statuses: Iterable[JobStatus | str],
    dismiss_after: int = DEFAULT_DISMISS_SECONDS,
) -> BatchSummary:
    """Count a batch and pick its header text.

    Priority: anything still running wins, then errors, then the completed
    count. An errored job never changes how its siblings are counted.
    """
    counts = Counter(JobStatus.parse(s) for s in statuses)
    total = sum(counts.values())

    completed = counts[JobStatus.COMPLETE]
    processing = counts[JobStatus.PROCESSING]
    uploading = counts[JobStatus.PENDING] + counts[JobStatus.UPLOADING]
    errors = counts[JobStatus.ERROR]
    in_progress = any(not s.is_terminal for s in counts)
    has_errors = errors > 0

    if in_progress:
        if processing > 0:
            header = f"Processing {processing} of {total}..."
        else:
            header = f"Uploading {uploading} of {total}..."
    elif has_errors:
        header = f"Upload complete with {errors} error(s)"
    else:
        header = f"{completed} of {total} uploads complete"

    auto_dismiss = total > 0 and not in_progress and not has_errors

    return BatchSummary(
        total=total,
        completed=completed,
        processing=processing,
        uploading=uploading,
        errors=errors,
        in_progress=in_progress,
        has_errors=has_errors,
        header=header,
        auto_dismiss_after=dismiss_after if auto_dismiss else None,
    )
