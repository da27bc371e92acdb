# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

import sys

from dpex_tutorial.cli import main

sys.exit(main())
