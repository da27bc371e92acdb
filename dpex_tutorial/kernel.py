# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Kernel lookup, positional argument binding and 1-D range submission."""

import ctypes
import logging

import dpctl
import numpy as np

from dpex_tutorial.exceptions import KernelLaunchError, KernelNotFoundError
from dpex_tutorial.memory import DeviceBuffer
from dpex_tutorial.profiling import OperationEvent

_logger = logging.getLogger(__name__)


def as_kernel_arg(value):
    """Converts a bound value into what ``dpctl.SyclQueue.submit`` expects.

    Device buffers are passed as their USM memory object. Scalars are passed
    as ``ctypes`` values: Python ints as ``int``, Python floats as ``float``
    and NumPy scalars with their own width.

    Raises:
        TypeError: If the value is neither a ``DeviceBuffer`` nor a scalar.
    """
    if isinstance(value, DeviceBuffer):
        if value.usm_memory is None:
            raise TypeError("the device buffer was released")
        return value.usm_memory
    if isinstance(value, ctypes._SimpleCData):
        return value
    if isinstance(value, np.generic):
        ctype = np.ctypeslib.as_ctypes_type(value.dtype)
        return ctype(value.item())
    if isinstance(value, (bool, int)):
        return ctypes.c_int(int(value))
    if isinstance(value, float):
        return ctypes.c_float(value)
    raise TypeError(
        f"Unsupported kernel argument of type {type(value).__name__}. "
        "Only device buffers and scalars can be bound."
    )


class Kernel:
    """A named entry point of a ``ProgramArtifact`` and its bound arguments.

    Arguments are latched: they stay bound across launches until rebound.
    """

    def __init__(self, program, name, sycl_kernel):
        self.program = program
        self.name = name
        self.sycl_kernel = sycl_kernel
        self.num_args = sycl_kernel.num_args
        self._args = [None] * self.num_args

    @property
    def context(self):
        return self.program.context

    def bind(self, index, value):
        """Binds ``value`` to the parameter at position ``index``.

        Raises:
            KernelLaunchError: If the index is outside the parameter list,
                the value has an unsupported type, or a buffer belongs to
                another context.
        """
        if not 0 <= index < self.num_args:
            raise KernelLaunchError(
                f'Kernel "{self.name}" has {self.num_args} parameters, '
                f"cannot bind argument {index}"
            )
        if isinstance(value, DeviceBuffer) and value.context is not self.context:
            raise KernelLaunchError(
                f'Argument {index} of kernel "{self.name}" was allocated in '
                "another context"
            )
        try:
            self._args[index] = as_kernel_arg(value)
        except TypeError as exc:
            raise KernelLaunchError(
                f'Argument {index} of kernel "{self.name}": {exc}'
            ) from exc

    def set_args(self, *values):
        for index, value in enumerate(values):
            self.bind(index, value)

    def bound_args(self):
        missing = [i for i, arg in enumerate(self._args) if arg is None]
        if missing:
            raise KernelLaunchError(
                f'Kernel "{self.name}" launched with unbound arguments '
                f"{missing}"
            )
        return list(self._args)

    def __repr__(self):
        return f"Kernel({self.name!r}, num_args={self.num_args})"


def get_kernel(program, name):
    """Looks up the kernel ``name`` in a built program.

    Raises:
        KernelNotFoundError: If the program does not declare ``name``.
    """
    if not program.has_kernel(name):
        raise KernelNotFoundError(name)
    return Kernel(program, name, program.get_sycl_kernel(name))


def launch_1d(stream, kernel, global_size, local_size=None):
    """Submits ``global_size`` work items of ``kernel`` to ``stream``.

    Args:
        stream (CommandStream): The stream the launch is submitted to.
        kernel (Kernel): A kernel with every argument bound.
        global_size (int): Number of work items.
        local_size (int, optional): Work-group size. ``None`` lets the
            runtime choose.

    Returns:
        OperationEvent: The event of the launch.

    Raises:
        KernelLaunchError: If the launch is malformed or the runtime refuses
            it.
    """
    if kernel.context is not stream.context:
        raise KernelLaunchError(
            f'Kernel "{kernel.name}" belongs to another context than the '
            "command stream"
        )
    if global_size <= 0:
        raise KernelLaunchError(
            f'Invalid global size {global_size} for kernel "{kernel.name}"'
        )
    if local_size is not None and (
        local_size <= 0 or global_size % local_size
    ):
        raise KernelLaunchError(
            f"Local size {local_size} does not divide global size "
            f'{global_size} for kernel "{kernel.name}"'
        )

    args = kernel.bound_args()
    lrange = None if local_size is None else [local_size]
    try:
        sycl_event = stream.queue.submit(
            kernel.sycl_kernel, args, [global_size], lrange
        )
    except (dpctl.SyclKernelSubmitError, TypeError, ValueError) as exc:
        raise KernelLaunchError(
            f'Submission of kernel "{kernel.name}" failed: {exc}'
        ) from exc
    _logger.debug(
        "Submitted %s over %d work items (local size %s)",
        kernel.name,
        global_size,
        "auto" if local_size is None else local_size,
    )
    return OperationEvent(
        sycl_event, f"kernel {kernel.name}", error=KernelLaunchError
    )
