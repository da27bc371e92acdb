# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""
A first host program for a SYCL device: select a device, build OpenCL C
kernels from source, copy two vectors to the device, run a data-parallel
multiply-add over them and time every step with device events.
"""

from . import config
from ._version import __version__
from .device import (
    CommandStream,
    ComputeContext,
    DeviceSelection,
    describe,
    get_context,
    list_platforms_devices,
)
from .driver import PipelineResult, make_default_dataset, run_pipeline
from .exceptions import TutorialError
from .kernel import Kernel, get_kernel, launch_1d
from .memory import DeviceBuffer, MemoryAccess, alloc, read, write
from .profiling import OperationEvent, ProfilingReport
from .program import BuildDiagnostic, ProgramArtifact, build, load_sources

__all__ = [
    "config",
    "CommandStream",
    "ComputeContext",
    "DeviceSelection",
    "describe",
    "get_context",
    "list_platforms_devices",
    "PipelineResult",
    "make_default_dataset",
    "run_pipeline",
    "TutorialError",
    "Kernel",
    "get_kernel",
    "launch_1d",
    "DeviceBuffer",
    "MemoryAccess",
    "alloc",
    "read",
    "write",
    "OperationEvent",
    "ProfilingReport",
    "BuildDiagnostic",
    "ProgramArtifact",
    "build",
    "load_sources",
]
