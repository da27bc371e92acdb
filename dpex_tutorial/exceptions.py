# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""The module defines the custom error classes used in dpex_tutorial.

Every error carries a short ``kind`` mnemonic that the command line driver
prints next to the message, e.g. ``ERROR: <message>, kBuildFailed``.
"""


class TutorialError(Exception):
    """Base class of every error raised by the tutorial pipeline.

    Args:
        message (str): Human readable description of what failed.
    """

    kind = "kUnknown"

    def __init__(self, message) -> None:
        self.message = message
        super().__init__(self.message)

    def format_line(self):
        """Returns the single diagnostic line printed on stderr."""
        return f"ERROR: {self.message}, {self.kind}"


class SelectionOutOfRangeError(TutorialError):
    """Exception raised when the requested platform or device index does not
    exist.

    Args:
        what (str): Either ``"platform"`` or ``"device"``.
        index (int): The requested index.
        count (int): Number of platforms or devices that were discovered.
    """

    kind = "kSelectionOutOfRange"

    def __init__(self, what, index, count) -> None:
        self.what = what
        self.index = index
        self.count = count
        super().__init__(
            f"Requested {what} {index} is not available, "
            f"{count} {what}(s) found"
        )


class RuntimeUnavailableError(TutorialError):
    """Exception raised when the SYCL runtime cannot be queried for platforms
    and devices, or refuses to create a context or queue."""

    kind = "kRuntimeUnavailable"


class KernelSourceIOError(TutorialError):
    """Exception raised when a kernel source file cannot be read.

    Args:
        path (str): The path that failed.
        reason (str): The OS level reason.
    """

    kind = "kIoError"

    def __init__(self, path, reason) -> None:
        self.path = path
        super().__init__(f'Cannot read kernel source "{path}": {reason}')


class ProgramBuildError(TutorialError):
    """Exception raised when the device program fails to compile.

    Args:
        diagnostics (list): One ``BuildDiagnostic`` per device of the context.
    """

    kind = "kBuildFailed"

    def __init__(self, diagnostics, message="Device program build failed"):
        self.diagnostics = list(diagnostics)
        super().__init__(message)


class KernelNotFoundError(TutorialError):
    """Exception raised when a kernel name is not present in a built program.

    Args:
        kernel_name (str): The requested entry point.
    """

    kind = "kKernelNotFound"

    def __init__(self, kernel_name) -> None:
        self.kernel_name = kernel_name
        super().__init__(
            f'Kernel "{kernel_name}" is not declared in the device program'
        )


class BufferAllocationError(TutorialError):
    """Exception raised when a device buffer allocation is refused."""

    kind = "kAllocFailed"


class TransferError(TutorialError):
    """Exception raised when a host to device or device to host copy fails."""

    kind = "kTransferFailed"


class KernelLaunchError(TutorialError):
    """Exception raised when a kernel cannot be submitted, is submitted with
    incomplete or mismatched arguments, or reports an execution failure."""

    kind = "kLaunchFailed"
