# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

import io

import numpy as np
import pytest

from dpex_tutorial import driver, profiling
from dpex_tutorial.device import DeviceSelection
from dpex_tutorial.exceptions import (
    KernelNotFoundError,
    KernelSourceIOError,
    ProgramBuildError,
    TransferError,
)
from dpex_tutorial.program import BuildDiagnostic, BuildStatus
from dpex_tutorial.tests.conftest import FakeEvent, FakeSyclKernel


def test_default_dataset():
    a, b = driver.make_default_dataset(100)
    assert a.dtype == np.int32 and b.dtype == np.int32
    assert len(a) == len(b) == 100
    assert list(a[:4]) == [0, 1, 2, 3]
    assert list(b[:6]) == [1, 2, 0, 1, 2, 0]


def test_reference_values():
    c = driver.reference_multadd(*driver.make_default_dataset(100))
    assert list(c[:5]) == [1, 4, 0, 1, 10]
    assert c[99] == 199


def test_format_vector():
    assert driver.format_vector(np.array([0, -1, 2], dtype=np.int32)) == (
        "[0, -1, 2]"
    )
    assert driver.format_vector([]) == "[]"


def test_pipeline_result(fake_runtime, kernel_source):
    result = driver.run_pipeline(sources=[kernel_source])

    a, b = driver.make_default_dataset()
    np.testing.assert_array_equal(result.a, a)
    np.testing.assert_array_equal(result.b, b)
    np.testing.assert_array_equal(result.c, driver.reference_multadd(a, b))
    assert len(result.a) == len(result.b) == len(result.c)
    assert list(result.durations) == list(profiling.REPORT_LABELS)
    assert all(ns >= 0 for ns in result.durations.values())


def test_pipeline_submission_order(fake_runtime, kernel_source):
    driver.run_pipeline(sources=[kernel_source], launch_add=False)
    assert fake_runtime.log == [
        ("memcpy", "write"),
        ("memcpy", "write"),
        ("submit", "multadd"),
        ("memcpy", "read"),
    ]


def test_pipeline_launches_add_when_asked(fake_runtime, kernel_source):
    result = driver.run_pipeline(sources=[kernel_source], launch_add=True)

    a, b = driver.make_default_dataset()
    np.testing.assert_array_equal(result.c, driver.reference_multadd(a, b) + b)
    assert ("submit", "add") in fake_runtime.log
    assert result.durations[profiling.KERNEL] == 14


def test_pipeline_uses_selection(fake_runtime, kernel_source):
    driver.run_pipeline(DeviceSelection(1, 2), sources=[kernel_source])
    assert fake_runtime.selections == [(1, 2)]


def test_pipeline_custom_vectors(fake_runtime, kernel_source):
    a = np.array([1, 2, 3])
    b = np.array([4, 5, 6])
    result = driver.run_pipeline(sources=[kernel_source], a=a, b=b)
    assert list(result.c) == [8, 15, 24]


def test_pipeline_rejects_mismatched_vectors(fake_runtime, kernel_source):
    with pytest.raises(TransferError) as excinfo:
        driver.run_pipeline(
            sources=[kernel_source], a=np.arange(3), b=np.arange(4)
        )
    assert excinfo.value.kind == "kTransferFailed"


def test_pipeline_releases_context_on_error(fake_runtime, tmp_path):
    with pytest.raises(KernelSourceIOError):
        driver.run_pipeline(sources=[str(tmp_path / "missing.cl")])
    assert fake_runtime.context.closed


def test_pipeline_missing_kernel(fake_runtime, kernel_source):
    fake_runtime.kernels = [FakeSyclKernel("multadd", lambda *args: None)]
    with pytest.raises(KernelNotFoundError):
        driver.run_pipeline(sources=[kernel_source])
    assert fake_runtime.context.closed


def test_pipeline_build_failure_prints_diagnostics(fake_runtime, kernel_source):
    fake_runtime.build_error = ProgramBuildError(
        [BuildDiagnostic("Fake Device", BuildStatus.ERROR, "", "syntax error")]
    )
    out = io.StringIO()

    with pytest.raises(ProgramBuildError):
        driver.run_pipeline(sources=[kernel_source], out=out)

    assert out.getvalue().splitlines() == [
        "Build Status: -2",
        "Build Options:\t",
        "Build Log:\t syntax error",
    ]
    assert fake_runtime.log == []


def test_result_lines(fake_runtime, kernel_source):
    a = np.array([0, 1], dtype=np.int32)
    b = np.array([1, 2], dtype=np.int32)
    lines = driver.run_pipeline(sources=[kernel_source], a=a, b=b).format_lines()
    assert lines == [
        "Running on Fake Platform, Fake Device",
        "A = [0, 1]",
        "B = [1, 2]",
        "C = [1, 4]",
        "copy A took 7 ns to complete.",
        "copy B took 7 ns to complete.",
        "read C took 7 ns to complete.",
        "kernel took 7 ns to complete.",
    ]


def test_result_timing_lines_match_report():
    report = profiling.ProfilingReport()
    report.add(profiling.COPY_A, profiling.OperationEvent(FakeEvent(0, 5)))
    report.add(profiling.KERNEL, profiling.OperationEvent(FakeEvent(10, 19)))
    result = driver.PipelineResult(
        "P", "D", np.zeros(1), np.zeros(1), np.zeros(1), report.durations()
    )
    assert result.format_lines()[4:] == report.format_lines()
