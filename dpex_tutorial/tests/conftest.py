#! /usr/bin/env python

# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Fixtures shared by the tests.

The ``fake_runtime`` fixture replaces the parts of dpctl the pipeline talks to
with small host side stand-ins, so that the orchestration can be tested on
machines without any SYCL device. USM allocations become byte arrays, copies
become slice assignments and the two tutorial kernels are evaluated with
NumPy.
"""

import itertools

import numpy as np
import pytest

from dpex_tutorial import device as dev
from dpex_tutorial import driver
from dpex_tutorial import memory as mem
from dpex_tutorial.program import ProgramArtifact
from dpex_tutorial.tests._helper import BROKEN_KERNELS, REFERENCE_KERNELS


class FakeEvent:
    def __init__(self, start, end):
        self.profiling_info_start = start
        self.profiling_info_end = end
        self.waited = False

    def wait(self):
        self.waited = True


class FakeUSM:
    def __init__(self, nbytes, queue=None):
        self.nbytes = nbytes
        self.queue = queue
        self.data = np.zeros(nbytes, dtype=np.uint8)


def _as_bytes(obj):
    if isinstance(obj, FakeUSM):
        return obj.data
    return obj.view(np.uint8).reshape(-1)


def _as_int32(obj):
    return obj.data.view(np.int32)


class FakeQueue:
    """Records every submission as ``(kind, name)`` in ``log``."""

    def __init__(self):
        self.log = []
        self._clock = itertools.count(1000, 10)

    def _event(self):
        start = next(self._clock)
        return FakeEvent(start, start + 7)

    def memcpy_async(self, dst, src, count):
        _as_bytes(dst)[:count] = _as_bytes(src)[:count]
        kind = "read" if isinstance(src, FakeUSM) else "write"
        self.log.append(("memcpy", kind))
        return self._event()

    def submit(self, kernel, args, gS, lS=None):
        kernel.fn(*[_as_int32(a) for a in args], gS[0])
        self.log.append(("submit", kernel.name))
        return self._event()

    def wait(self):
        pass


def _multadd(a, b, c, n):
    c[:n] = a[:n] * b[:n] + b[:n]


def _add(a, b, c, n):
    c[:n] = a[:n] + b[:n]


class FakeSyclKernel:
    def __init__(self, name, fn, num_args=3):
        self.name = name
        self.fn = fn
        self.num_args = num_args


class FakeSyclProgram:
    def __init__(self, kernels):
        self.kernels = {k.name: k for k in kernels}

    def has_sycl_kernel(self, name):
        return name in self.kernels

    def get_sycl_kernel(self, name):
        return self.kernels[name]


class FakeDevice:
    name = "Fake Device"


class FakeStream:
    def __init__(self, context):
        self.context = context
        self.queue = context.stream_queue
        self.closed = False

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


class FakeContext:
    platform_name = "Fake Platform"
    device_name = FakeDevice.name

    def __init__(self):
        self.queue = FakeQueue()
        self.stream_queue = FakeQueue()
        self.devices = [FakeDevice()]
        self.closed = False

    def create_command_stream(self):
        return FakeStream(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True


class FakeRuntime:
    def __init__(self):
        self.context = FakeContext()
        self.kernels = [
            FakeSyclKernel("multadd", _multadd),
            FakeSyclKernel("add", _add),
        ]
        self.selections = []
        self.build_error = None

    @property
    def log(self):
        return self.context.stream_queue.log

    def get_context(self, platform_index, device_index):
        self.selections.append((platform_index, device_index))
        return self.context

    def build(self, context, bundle, options=""):
        if self.build_error is not None:
            raise self.build_error
        return ProgramArtifact(context, FakeSyclProgram(self.kernels), options)


@pytest.fixture
def fake_runtime(monkeypatch):
    runtime = FakeRuntime()
    monkeypatch.setattr(dev, "get_context", runtime.get_context)
    monkeypatch.setattr(driver, "build", runtime.build)
    monkeypatch.setattr(mem.dpctl_mem, "MemoryUSMDevice", FakeUSM)
    return runtime


@pytest.fixture
def fake_context():
    return FakeContext()


@pytest.fixture
def kernel_source(tmp_path):
    path = tmp_path / "my_kernels.cl"
    path.write_text(REFERENCE_KERNELS)
    return str(path)


@pytest.fixture
def broken_kernel_source(tmp_path):
    path = tmp_path / "broken.cl"
    path.write_text(BROKEN_KERNELS)
    return str(path)
