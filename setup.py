# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0


import os
import re

from setuptools import find_packages, setup

"""Top level setup.py file.

    This will install the dpex_tutorial package together with its kernel
    sources and tests.

    `install` command:
        ~$ pip install .

    `develop` command:
        ~$ pip install -e .

    To uninstall:
        ~$ pip uninstall dpex-tutorial
"""


def get_version():
    """Read the version string out of dpex_tutorial/_version.py."""
    here = os.path.dirname(os.path.abspath(__file__))
    with open(os.path.join(here, "dpex_tutorial", "_version.py")) as f:
        match = re.search(r'^__version__ = "([^"]+)"', f.read(), re.M)
    if not match:
        raise Exception("Unsupported version")

    return match.group(1)


# Main setup
setup(
    name="dpex-tutorial",
    version=get_version(),
    description="A first SYCL host program: build OpenCL C kernels, move "
    "data to a device and time every step with device events",
    license="Apache 2.0",
    packages=find_packages(".", include=["dpex_tutorial", "dpex_tutorial.*"]),
    package_data={"dpex_tutorial": ["kernels/*.cl"]},
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "dpctl>=0.15",
        "numpy",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "dpex-tutorial = dpex_tutorial.cli:main",
        ],
    },
)
