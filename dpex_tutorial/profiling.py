# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Device side timing of submitted commands.

Every command submitted to a ``CommandStream`` returns an ``OperationEvent``.
Once the command has completed, the event exposes the device clock values at
which the command started and ended, in nanoseconds. ``ProfilingReport``
collects labelled events and formats their durations.
"""

import logging

from dpex_tutorial.exceptions import TransferError

_logger = logging.getLogger(__name__)

COPY_A = "copy A"
COPY_B = "copy B"
READ_C = "read C"
KERNEL = "kernel"

REPORT_LABELS = (COPY_A, COPY_B, READ_C, KERNEL)


def format_duration(label, ns):
    return f"{label} took {ns} ns to complete."


class OperationEvent:
    """Wraps the ``dpctl.SyclEvent`` of one submitted command.

    Args:
        sycl_event: The event returned by the runtime.
        name (str): A short description of the command, used in logs.
        error (type): The ``TutorialError`` subclass raised when the
            timestamps of the completed command are inconsistent.
    """

    def __init__(self, sycl_event, name="", error=TransferError):
        self.sycl_event = sycl_event
        self.name = name
        self.error = error

    def wait(self):
        self.sycl_event.wait()

    @property
    def start(self):
        self.wait()
        return int(self.sycl_event.profiling_info_start)

    @property
    def end(self):
        self.wait()
        return int(self.sycl_event.profiling_info_end)

    def duration_ns(self):
        """Returns ``end - start`` once the command has completed."""
        self.wait()
        start = int(self.sycl_event.profiling_info_start)
        end = int(self.sycl_event.profiling_info_end)
        if end < start:
            raise self.error(
                f"Event {self.name!r} ended at {end} before it started at "
                f"{start}"
            )
        return end - start

    def __repr__(self):
        return f"OperationEvent({self.name!r})"


class ProfilingReport:
    """An ordered collection of labelled durations.

    A label may be given several events, in which case the reported value is
    the sum of their durations.
    """

    def __init__(self):
        self._entries = {}

    def add(self, label, *events):
        if not events:
            raise ValueError(f"No event given for {label!r}")
        self._entries.setdefault(label, []).extend(events)

    @property
    def labels(self):
        return list(self._entries)

    def events(self, label):
        return list(self._entries[label])

    def duration_ns(self, label):
        total = sum(event.duration_ns() for event in self._entries[label])
        _logger.debug("%s: %d ns", label, total)
        return total

    def durations(self):
        return {label: self.duration_ns(label) for label in self._entries}

    def format_lines(self):
        return [
            format_duration(label, self.duration_ns(label))
            for label in self._entries
        ]
