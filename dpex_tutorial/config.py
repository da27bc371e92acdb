# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""
The config options tweak how the tutorial pipeline selects its device, which
kernel sources it builds and how much it logs.

There are two ways of setting these config options:

- Config options can be directly set programmatically, *e.g.*,

    .. code-block:: python

        from dpex_tutorial import config

        config.LAUNCH_ADD_KERNEL = 1

- The options can also be set globally using environment flags. The name of the
  environment variable for every config option is annotated next to its
  definition.

    .. code-block:: bash

        export DPEX_TUTORIAL_BUILD_KERNEL_OPTIONS="-cl-fast-relaxed-math"

"""

from __future__ import annotations

import logging
import os
import warnings
from typing import Annotated

_KERNELS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "kernels")

DEFAULT_KERNEL_SOURCE = os.path.join(_KERNELS_DIR, "my_kernels.cl")

DEFAULT_VECTOR_LENGTH = 100


def _readenv(name, ctor, default):
    """Read values from the system environment variable list.

    Args:
        name (str): The name of the env variable.
        ctor (type): The type of the env variable.
        default (int,float,str): The default value of the env variable.

    Returns:
        int,float,string: The environment variable value of the specified type.
    """

    value = os.environ.get(name)
    if value is None:
        return default() if callable(default) else default
    try:
        return ctor(value)
    except Exception:
        logging.exception(
            "env variable %s defined but failed to parse '%s'" % (name, value)
        )
        return default() if callable(default) else default


def _pathlist(value):
    paths = [p for p in value.split(os.pathsep) if p]
    if not paths:
        raise ValueError("empty kernel source list")
    return paths


def _vector_length(value):
    length = int(value)
    if length <= 0:
        warnings.warn(
            "DPEX_TUTORIAL_VECTOR_LENGTH must be positive, got %d. "
            "Falling back to %d." % (length, DEFAULT_VECTOR_LENGTH),
            UserWarning,
        )
        return DEFAULT_VECTOR_LENGTH
    return length


DEBUG: Annotated[
    int,
    "Enables debug logging of every pipeline stage on stderr",
    "default = 0",
    "ENVIRONMENT FLAG: DPEX_TUTORIAL_DEBUG",
] = _readenv("DPEX_TUTORIAL_DEBUG", int, 0)

BACKEND: Annotated[
    str,
    "SYCL backend whose platforms are enumerated and selectable with -p. "
    "The tutorial kernels are OpenCL C sources, so only backends that can "
    "compile from source are useful here.",
    'default = "opencl"',
    "ENVIRONMENT FLAG: DPEX_TUTORIAL_BACKEND",
] = _readenv("DPEX_TUTORIAL_BACKEND", str, "opencl")

KERNEL_SOURCES: Annotated[
    list,
    "Kernel source files concatenated, in order, into the device program. "
    "Separate several paths with os.pathsep.",
    "default = <package>/kernels/my_kernels.cl",
    "ENVIRONMENT FLAG: DPEX_TUTORIAL_KERNEL_SOURCES",
] = _readenv(
    "DPEX_TUTORIAL_KERNEL_SOURCES", _pathlist, lambda: [DEFAULT_KERNEL_SOURCE]
)

BUILD_KERNEL_OPTIONS: Annotated[
    str,
    "Extra flags passed to the device driver compiler when the program is "
    "built from source",
    'default = ""',
    "ENVIRONMENT FLAG: DPEX_TUTORIAL_BUILD_KERNEL_OPTIONS",
] = _readenv("DPEX_TUTORIAL_BUILD_KERNEL_OPTIONS", str, "")

VECTOR_LENGTH: Annotated[
    int,
    "Number of elements in the A, B and C vectors of the default dataset",
    "default = 100",
    "ENVIRONMENT FLAG: DPEX_TUTORIAL_VECTOR_LENGTH",
] = _readenv("DPEX_TUTORIAL_VECTOR_LENGTH", _vector_length, DEFAULT_VECTOR_LENGTH)

LAUNCH_ADD_KERNEL: Annotated[
    int,
    "Also launches the add kernel after multadd and includes its duration in "
    "the reported kernel time. Off by default, which keeps the add kernel "
    "constructed and bound but never submitted.",
    "default = 0",
    "ENVIRONMENT FLAG: DPEX_TUTORIAL_LAUNCH_ADD_KERNEL",
] = _readenv("DPEX_TUTORIAL_LAUNCH_ADD_KERNEL", int, 0)
