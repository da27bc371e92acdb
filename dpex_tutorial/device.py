# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Platform and device discovery, device selection and the compute context
and command stream objects built on top of the selected device.

Platforms are indexed in the order ``dpctl.get_platforms()`` reports them,
restricted to the backend named by ``config.BACKEND``. Devices are indexed in
the order the platform reports them.
"""

import logging
from typing import NamedTuple

import dpctl

from dpex_tutorial import config
from dpex_tutorial.exceptions import (
    RuntimeUnavailableError,
    SelectionOutOfRangeError,
)

_logger = logging.getLogger(__name__)


class DeviceSelection(NamedTuple):
    """A (platform, device) index pair chosen on the command line."""

    platform_index: int = 0
    device_index: int = 0


class DeviceInfo(NamedTuple):
    name: str
    vendor: str
    device_type: str
    driver_version: str
    max_compute_units: int
    global_mem_size: int


def _backend_matches(platform, backend):
    if backend == "all":
        return True
    return platform.backend.name == backend


def get_platforms(backend=None):
    """Returns the list of SYCL platforms of the configured backend.

    Raises:
        RuntimeUnavailableError: If the SYCL runtime cannot be queried.
    """
    backend = config.BACKEND if backend is None else backend
    try:
        platforms = dpctl.get_platforms()
    except (RuntimeError, ValueError) as exc:
        raise RuntimeUnavailableError(
            f"Unable to query SYCL platforms: {exc}"
        ) from exc
    return [p for p in platforms if _backend_matches(p, backend)]


def get_devices(platform):
    try:
        return list(platform.get_devices())
    except (RuntimeError, ValueError) as exc:
        raise RuntimeUnavailableError(
            f'Unable to query devices of platform "{platform.name}": {exc}'
        ) from exc


def _select(platforms, platform_index, device_index):
    if not 0 <= platform_index < len(platforms):
        raise SelectionOutOfRangeError(
            "platform", platform_index, len(platforms)
        )
    platform = platforms[platform_index]
    devices = get_devices(platform)
    if not 0 <= device_index < len(devices):
        raise SelectionOutOfRangeError("device", device_index, len(devices))
    return platform, devices[device_index]


def device_info(device):
    """Collects the descriptive properties of a ``dpctl.SyclDevice``."""
    return DeviceInfo(
        name=device.name,
        vendor=device.vendor,
        device_type=device.device_type.name,
        driver_version=device.driver_version,
        max_compute_units=device.max_compute_units,
        global_mem_size=device.global_mem_size,
    )


def list_platforms_devices():
    """Returns a human readable listing of every platform of the configured
    backend and, indented below it, of each of its devices.

    The indices shown are the ones accepted by the ``-p`` and ``-d`` command
    line options. The function does not raise: runtime failures are reported
    inside the returned text.
    """
    try:
        platforms = get_platforms()
    except RuntimeUnavailableError as exc:
        return f"No platforms available: {exc.message}"

    if not platforms:
        return f'No platforms found for the "{config.BACKEND}" backend!'

    lines = [f"Found {len(platforms)} platform(s)!"]
    for i, platform in enumerate(platforms):
        lines.append(
            f"Platform {i}, {platform.name}, version: {platform.version}, "
            f"vendor: {platform.vendor}"
        )
        try:
            devices = get_devices(platform)
        except RuntimeUnavailableError as exc:
            lines.append(f"  {exc.message}")
            continue
        for j, device in enumerate(devices):
            info = device_info(device)
            lines.append(
                f"  Device {j}, {info.name}, version: {info.driver_version}, "
                f"vendor: {info.vendor}, type: {info.device_type}, "
                f"compute units: {info.max_compute_units}"
            )
    return "\n".join(lines)


def describe(platform_index, device_index):
    """Returns the ``(platform_name, device_name)`` pair of a selection.

    Raises:
        SelectionOutOfRangeError: If either index is not available.
        RuntimeUnavailableError: If the SYCL runtime cannot be queried.
    """
    platform, device = _select(get_platforms(), platform_index, device_index)
    return platform.name, device.name


def get_platform_name(platform_index):
    platforms = get_platforms()
    if not 0 <= platform_index < len(platforms):
        raise SelectionOutOfRangeError(
            "platform", platform_index, len(platforms)
        )
    return platforms[platform_index].name


def get_device_name(platform_index, device_index):
    return describe(platform_index, device_index)[1]


class ComputeContext:
    """The selected device, the SYCL context created for it, and a plain queue
    used to build programs and allocate device memory in that context.

    Use it as a context manager; leaving the ``with`` block drops every
    runtime handle it holds.
    """

    def __init__(self, platform, device):
        self.platform = platform
        self.device = device
        try:
            self.sycl_context = dpctl.SyclContext(device)
            self.queue = dpctl.SyclQueue(self.sycl_context, device)
        except (
            dpctl.SyclContextCreationError,
            dpctl.SyclQueueCreationError,
        ) as exc:
            raise RuntimeUnavailableError(
                f'Unable to create a context for "{device.name}": {exc}'
            ) from exc

    @property
    def platform_name(self):
        return self.platform.name

    @property
    def device_name(self):
        return self.device.name

    @property
    def devices(self):
        return list(self.sycl_context.get_devices())

    def create_command_stream(self):
        """Creates a profiling enabled command stream on this context."""
        return CommandStream(self)

    def close(self):
        self.queue = None
        self.sycl_context = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __repr__(self):
        return f"ComputeContext({self.platform_name!r}, {self.device_name!r})"


class CommandStream:
    """An in-order SYCL queue that records start and end timestamps for every
    submitted command.

    Args:
        context (ComputeContext): The context the queue is created in.
    """

    def __init__(self, context):
        self.context = context
        try:
            self.queue = dpctl.SyclQueue(
                context.sycl_context,
                context.device,
                property=["enable_profiling", "in_order"],
            )
        except dpctl.SyclQueueCreationError as exc:
            raise RuntimeUnavailableError(
                "Unable to create a profiling queue for "
                f'"{context.device_name}": {exc}'
            ) from exc

    def finish(self):
        """Blocks until every submitted command has completed."""
        self.queue.wait()

    def close(self):
        if self.queue is not None:
            self.queue.wait()
        self.queue = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()


def get_context(platform_index, device_index):
    """Resolves a (platform, device) index pair into a ``ComputeContext``.

    Raises:
        SelectionOutOfRangeError: If either index is not available.
        RuntimeUnavailableError: If the SYCL runtime cannot be queried or
            refuses to create a context.
    """
    platform, device = _select(get_platforms(), platform_index, device_index)
    _logger.debug(
        "Selected platform %d (%s), device %d (%s)",
        platform_index,
        platform.name,
        device_index,
        device.name,
    )
    return ComputeContext(platform, device)
