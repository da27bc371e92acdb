# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Device buffers and the blocking host to device and device to host copies
submitted to a ``CommandStream``.
"""

import enum
import logging

import dpctl.memory as dpctl_mem
import numpy as np

from dpex_tutorial.exceptions import BufferAllocationError, TransferError
from dpex_tutorial.profiling import OperationEvent

_logger = logging.getLogger(__name__)


class MemoryAccess(enum.Enum):
    """How kernels are meant to access a buffer.

    The tag is informational: USM device allocations carry no access flags, so
    it is recorded on the buffer and logged but never enforced.
    """

    READ_WRITE = "read_write"
    READ_ONLY = "read_only"
    WRITE_ONLY = "write_only"


class DeviceBuffer:
    """A linear region of device USM memory allocated in a
    ``ComputeContext``.

    Use it as a context manager to release the allocation when the block
    exits.
    """

    def __init__(self, context, nbytes, access=MemoryAccess.READ_WRITE):
        if nbytes <= 0:
            raise BufferAllocationError(
                f"Cannot allocate a device buffer of {nbytes} bytes"
            )
        self.context = context
        self.nbytes = nbytes
        self.access = access
        try:
            self.usm_memory = dpctl_mem.MemoryUSMDevice(
                nbytes, queue=context.queue
            )
        except (dpctl_mem.USMAllocationError, MemoryError) as exc:
            raise BufferAllocationError(
                f"Allocation of {nbytes} bytes on "
                f'"{context.device_name}" failed: {exc}'
            ) from exc
        _logger.debug(
            "Allocated %d bytes (%s) on %s",
            nbytes,
            access.value,
            context.device_name,
        )

    def release(self):
        self.usm_memory = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.release()


def alloc(context, nbytes, access=MemoryAccess.READ_WRITE):
    """Allocates ``nbytes`` of device memory in ``context``.

    Raises:
        BufferAllocationError: If the runtime refuses the allocation.
    """
    return DeviceBuffer(context, nbytes, access)


def _check_transfer(stream, buffer, host, nbytes, direction):
    if buffer.usm_memory is None:
        raise TransferError(f"{direction}: the device buffer was released")
    if buffer.context is not stream.context:
        raise TransferError(
            f"{direction}: the device buffer belongs to another context"
        )
    if not isinstance(host, np.ndarray) or not host.flags.c_contiguous:
        raise TransferError(
            f"{direction}: the host vector must be a C-contiguous "
            "numpy.ndarray"
        )
    if nbytes > buffer.nbytes or nbytes > host.nbytes:
        raise TransferError(
            f"{direction}: {nbytes} bytes requested, the device buffer holds "
            f"{buffer.nbytes} and the host vector {host.nbytes}"
        )


def _submit_copy(stream, dst, src, nbytes, blocking, name):
    try:
        sycl_event = stream.queue.memcpy_async(dst, src, nbytes)
        event = OperationEvent(sycl_event, name)
        if blocking:
            event.wait()
    except (RuntimeError, TypeError, ValueError) as exc:
        raise TransferError(f"{name} failed: {exc}") from exc
    _logger.debug("%s: %d bytes (blocking=%s)", name, nbytes, blocking)
    return event


def write(stream, buffer, host, nbytes=None, blocking=True):
    """Copies ``nbytes`` of the host vector ``host`` into ``buffer``.

    Args:
        stream (CommandStream): The stream the copy is submitted to.
        buffer (DeviceBuffer): The destination.
        host (numpy.ndarray): The source, C-contiguous.
        nbytes (int, optional): Defaults to ``host.nbytes``.
        blocking (bool, optional): Wait for the copy to complete before
            returning. Defaults to True.

    Returns:
        OperationEvent: The event of the copy command.

    Raises:
        TransferError: If the copy is malformed or the runtime reports an
            error.
    """
    nbytes = host.nbytes if nbytes is None else nbytes
    _check_transfer(stream, buffer, host, nbytes, "write")
    return _submit_copy(
        stream, buffer.usm_memory, host, nbytes, blocking, "write buffer"
    )


def read(stream, buffer, host, nbytes=None, blocking=True):
    """Copies ``nbytes`` of ``buffer`` into the host vector ``host``.

    Raises:
        TransferError: If the copy is malformed or the runtime reports an
            error.
    """
    nbytes = host.nbytes if nbytes is None else nbytes
    _check_transfer(stream, buffer, host, nbytes, "read")
    if not host.flags.writeable:
        raise TransferError("read: the host vector is not writeable")
    return _submit_copy(
        stream, host, buffer.usm_memory, nbytes, blocking, "read buffer"
    )
