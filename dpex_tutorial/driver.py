# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""The tutorial pipeline: select a device, build the kernel sources, copy two
int32 vectors to the device, run ``multadd`` over them, read the result back
and time every step with device events.

Every runtime handle is acquired inside one ``contextlib.ExitStack`` so that it
is released on every exit path, in the reverse order of acquisition.
"""

import contextlib
import logging
import sys
from typing import NamedTuple

import numpy as np

from dpex_tutorial import config
from dpex_tutorial import device as dev
from dpex_tutorial import kernel as krn
from dpex_tutorial import memory as mem
from dpex_tutorial import profiling
from dpex_tutorial.exceptions import ProgramBuildError, TransferError
from dpex_tutorial.program import build, load_sources

_logger = logging.getLogger(__name__)

MULTADD_KERNEL = "multadd"
ADD_KERNEL = "add"


def make_default_dataset(length=None):
    """Returns the input vectors ``A[i] = i`` and ``B[i] = (i + 1) % 3``."""
    length = config.VECTOR_LENGTH if length is None else length
    a = np.arange(length, dtype=np.int32)
    b = ((a + 1) % 3).astype(np.int32)
    return a, b


def reference_multadd(a, b):
    """Host side result of the reference ``multadd`` kernel."""
    return (a * b + b).astype(np.int32)


def format_vector(vector):
    return "[" + ", ".join(str(int(x)) for x in vector) + "]"


class PipelineResult(NamedTuple):
    platform_name: str
    device_name: str
    a: np.ndarray
    b: np.ndarray
    c: np.ndarray
    durations: dict

    def format_lines(self):
        lines = [
            f"Running on {self.platform_name}, {self.device_name}",
            f"A = {format_vector(self.a)}",
            f"B = {format_vector(self.b)}",
            f"C = {format_vector(self.c)}",
        ]
        lines.extend(
            profiling.format_duration(label, ns)
            for label, ns in self.durations.items()
        )
        return lines


def report_build_failure(error, out=None):
    """Prints the status, options and log of every device of a failed build."""
    out = sys.stdout if out is None else out
    for diagnostic in error.diagnostics:
        for line in diagnostic.format_lines():
            print(line, file=out)


def run_pipeline(
    selection=None,
    sources=None,
    a=None,
    b=None,
    launch_add=None,
    out=None,
):
    """Runs the tutorial pipeline on the selected device.

    Args:
        selection (DeviceSelection, optional): Defaults to platform 0,
            device 0.
        sources (list, optional): Kernel source paths. Defaults to
            ``config.KERNEL_SOURCES``.
        a, b (numpy.ndarray, optional): The input vectors. Defaults to
            ``make_default_dataset()``.
        launch_add (bool, optional): Also launch the ``add`` kernel. Defaults
            to ``config.LAUNCH_ADD_KERNEL``.
        out (file, optional): Where build diagnostics are printed. Defaults to
            ``sys.stdout``.

    Returns:
        PipelineResult: The vectors and the four labelled durations.

    Raises:
        TutorialError: The first error any stage reports. A and B of
            different lengths raise ``TransferError``.
    """
    selection = dev.DeviceSelection() if selection is None else selection
    sources = config.KERNEL_SOURCES if sources is None else sources
    launch_add = config.LAUNCH_ADD_KERNEL if launch_add is None else launch_add
    if a is None or b is None:
        a, b = make_default_dataset()
    a = np.ascontiguousarray(a, dtype=np.int32)
    b = np.ascontiguousarray(b, dtype=np.int32)
    if a.shape != b.shape or a.ndim != 1:
        raise TransferError(
            f"A and B must be vectors of the same length, got {a.shape} and "
            f"{b.shape}"
        )
    c = np.zeros_like(a)
    n = len(a)

    with contextlib.ExitStack() as stack:
        context = stack.enter_context(
            dev.get_context(selection.platform_index, selection.device_index)
        )
        stream = stack.enter_context(context.create_command_stream())

        try:
            program = build(context, load_sources(sources))
        except ProgramBuildError as exc:
            report_build_failure(exc, out)
            raise

        buffer_a = stack.enter_context(mem.alloc(context, a.nbytes))
        buffer_b = stack.enter_context(mem.alloc(context, b.nbytes))
        buffer_c = stack.enter_context(mem.alloc(context, c.nbytes))

        copy_event_a = mem.write(stream, buffer_a, a)
        copy_event_b = mem.write(stream, buffer_b, b)

        kernel_mult = krn.get_kernel(program, MULTADD_KERNEL)
        kernel_mult.set_args(buffer_a, buffer_b, buffer_c)

        kernel_add = krn.get_kernel(program, ADD_KERNEL)
        kernel_add.set_args(buffer_c, buffer_b, buffer_c)

        kernel_events = [krn.launch_1d(stream, kernel_mult, n)]
        if launch_add:
            kernel_events.append(krn.launch_1d(stream, kernel_add, n))
        else:
            _logger.debug("Kernel %s bound but not launched", ADD_KERNEL)

        read_event_c = mem.read(stream, buffer_c, c)

        report = profiling.ProfilingReport()
        report.add(profiling.COPY_A, copy_event_a)
        report.add(profiling.COPY_B, copy_event_b)
        report.add(profiling.READ_C, read_event_c)
        report.add(profiling.KERNEL, *kernel_events)

        return PipelineResult(
            platform_name=context.platform_name,
            device_name=context.device_name,
            a=a,
            b=b,
            c=c,
            durations=report.durations(),
        )
