# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Loads OpenCL C kernel sources from disk and builds them into a device
program for a ``ComputeContext``.
"""

import enum
import logging
from typing import NamedTuple

import dpctl.program as dpctl_prog

from dpex_tutorial import config
from dpex_tutorial.exceptions import KernelSourceIOError, ProgramBuildError

_logger = logging.getLogger(__name__)


class BuildStatus(enum.IntEnum):
    """OpenCL program build status codes."""

    SUCCESS = 0
    NONE = -1
    ERROR = -2
    IN_PROGRESS = -3


class SourceFragment(NamedTuple):
    path: str
    text: str


class SourceBundle(tuple):
    """An ordered collection of ``SourceFragment`` objects."""

    @property
    def paths(self):
        return [fragment.path for fragment in self]

    def concatenate(self):
        """Joins every fragment, in order, into one program source string."""
        return "\n".join(fragment.text for fragment in self)


class BuildDiagnostic(NamedTuple):
    """Build information reported for one device of the context."""

    device_name: str
    status: BuildStatus
    options: str
    log: str

    def format_lines(self):
        return [
            f"Build Status: {int(self.status)}",
            f"Build Options:\t{self.options}",
            f"Build Log:\t {self.log}",
        ]


class ProgramArtifact:
    """A device program built from a ``SourceBundle``.

    Args:
        context (ComputeContext): The context the program was built in.
        sycl_program (dpctl.program.SyclProgram): The built program.
        options (str): The options the program was built with.
    """

    def __init__(self, context, sycl_program, options):
        self.context = context
        self.sycl_program = sycl_program
        self.options = options

    def has_kernel(self, name):
        return self.sycl_program.has_sycl_kernel(name)

    def get_sycl_kernel(self, name):
        return self.sycl_program.get_sycl_kernel(name)


def load_sources(paths):
    """Reads every kernel source file in ``paths``, preserving their order.

    Raises:
        KernelSourceIOError: If any of the files is missing or unreadable.
    """
    fragments = []
    for path in paths:
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            reason = exc.strerror if isinstance(exc, OSError) else str(exc)
            raise KernelSourceIOError(path, reason) from exc
        _logger.debug("Loaded %d characters from %s", len(text), path)
        fragments.append(SourceFragment(path, text))
    return SourceBundle(fragments)


def _diagnose(context, options, exc):
    log = str(exc).strip() or "(the runtime did not report a build log)"
    return [
        BuildDiagnostic(
            device_name=device.name,
            status=BuildStatus.ERROR,
            options=options,
            log=log,
        )
        for device in context.devices
    ]


def build(context, bundle, options=None):
    """Compiles ``bundle`` for the device of ``context``.

    Args:
        context (ComputeContext): The context to build the program in.
        bundle (SourceBundle): The kernel sources.
        options (str, optional): Compiler flags. Defaults to
            ``config.BUILD_KERNEL_OPTIONS``.

    Returns:
        ProgramArtifact: The built program.

    Raises:
        ProgramBuildError: If the compilation fails. The error carries one
            ``BuildDiagnostic`` per device of the context.
    """
    options = config.BUILD_KERNEL_OPTIONS if options is None else options
    _logger.debug(
        "Building %s for %s with options %r",
        bundle.paths,
        context.device_name,
        options,
    )
    try:
        sycl_program = dpctl_prog.create_program_from_source(
            context.queue, bundle.concatenate(), options
        )
    except dpctl_prog.SyclProgramCompilationError as exc:
        raise ProgramBuildError(_diagnose(context, options, exc)) from exc
    return ProgramArtifact(context, sycl_program, options)
