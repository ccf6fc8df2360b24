"""
Batch Coordinator: sequential conversion of the selected images.

Selected indices are processed in ascending order, one at a time, with a
progress notification after each item. The batch is all-or-nothing: the
first codec failure aborts the queue and no partial result list escapes.
"""

import asyncio
import inspect
from typing import Awaitable, Callable, Optional, Sequence, Union

from utilities import Print, format_file_size

from .engine import ConversionEngine
from .errors import BatchAborted, BatchCancelled, CodecFailure, EmptySelection, InvalidInput
from .models import (
    BatchOutcome,
    BatchSummary,
    EncodingOptions,
    LoadedImage,
    ResizePolicy,
)
from .selection import SelectionSet

ProgressCallback = Callable[[int, int], Union[None, Awaitable[None]]]


class BatchCoordinator:
    """
    Drives a ConversionEngine over a selection.

    Attributes:
        engine: ConversionEngine used for every item
    """

    def __init__(self, engine: ConversionEngine):
        self.engine = engine

    async def run_batch(
        self,
        images: Sequence[LoadedImage],
        selection: SelectionSet,
        policy: ResizePolicy,
        options: EncodingOptions,
        progress: Optional[ProgressCallback] = None,
        cancel: Optional[asyncio.Event] = None
    ) -> BatchOutcome:
        """
        Convert every selected image in ascending index order.

        Args:
            images: Loaded images, indexed by the selection
            selection: Which images to convert
            policy: Resize policy applied to each image
            options: Output format and quality
            progress: Called with (completed, total) after each item;
                      may be a plain function or a coroutine function
            cancel: Checked between items; when set, the batch stops

        Returns:
            BatchOutcome(results, summary)

        Raises:
            EmptySelection: If nothing is selected
            InvalidInput: If a selected index has no image
            BatchAborted: If any item fails to convert
            BatchCancelled: If cancel was set before the batch finished
        """
        if selection.size() == 0:
            raise EmptySelection()

        queue = selection.indices()
        for index in queue:
            if index >= len(images):
                raise InvalidInput(
                    f"Selected index {index} has no loaded image ({len(images)} loaded)"
                )

        total = len(queue)
        results = []
        Print("STATE", f"Batch converting {total} file{'s' if total != 1 else ''} "
                       f"to {options.output_format.value.upper()}")

        for completed, index in enumerate(queue):
            if cancel is not None and cancel.is_set():
                Print("WARNING", f"Batch cancelled after {completed}/{total}")
                raise BatchCancelled(completed, total)

            image = images[index]
            try:
                result = await self.engine.convert(image, policy, options)
            except CodecFailure as e:
                Print("FAILURE", f"{e}; batch aborted, {completed} of {total} completed")
                raise BatchAborted(e, index, completed, total) from e

            results.append(result)
            Print("PROGRESS", f"Converted {completed + 1}/{total}: {image.name}")
            if progress is not None:
                await notify_progress(progress, completed + 1, total)

        summary = BatchSummary.from_results(results)
        Print("COMPLETED",
            f"Batch: {summary.count} files, "
            f"{format_file_size(summary.total_original)} -> {format_file_size(summary.total_new)}"
        )
        return BatchOutcome(results, summary)


async def notify_progress(progress: ProgressCallback, completed: int, total: int) -> None:
    outcome = progress(completed, total)
    if inspect.isawaitable(outcome):
        await outcome
