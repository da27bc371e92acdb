# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Command line entry point of the tutorial.

    dpex-tutorial [-p PLATFORM] [-d DEVICE] [-l] [-h]

Only the exact tokens ``-p``, ``-d``, ``-l`` and ``-h`` are options; anything
else is ignored. ``-p`` and ``-d`` take the next token as their value whatever
it looks like. ``-l`` prints the platform and device listing where it appears
and the pipeline still runs afterwards. ``-h`` prints the usage on stderr and
exits before the SYCL runtime is touched.
"""

import argparse
import logging
import re
import sys

from dpex_tutorial import config
from dpex_tutorial.device import DeviceSelection, list_platforms_devices
from dpex_tutorial.driver import run_pipeline
from dpex_tutorial.exceptions import TutorialError

_logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def atoi(text):
    """Parses a leading integer like C ``atoi``: ``"3x"`` is 3, ``"x"`` is 0."""
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def build_parser():
    """Returns the parser whose help text is printed for ``-h``.

    Parsing itself is done token by token in ``parse_args``.
    """
    parser = argparse.ArgumentParser(
        prog="dpex-tutorial",
        description="Runs C = multadd(A, B) on a SYCL device and reports "
        "device side timings.",
        usage="%(prog)s [-p PLATFORM] [-d DEVICE] [-l] [-h]",
        add_help=False,
    )
    parser.add_argument("-p", metavar="PLATFORM", help="select platform")
    parser.add_argument("-d", metavar="DEVICE", help="select device")
    parser.add_argument(
        "-l", action="store_true", help="list all platforms and devices"
    )
    parser.add_argument("-h", action="store_true", help="print this message")
    return parser


def parse_args(argv=None, out=None):
    """Parses the command line, ignoring any token it does not know.

    Raises:
        SystemExit: With status 0 when ``-h`` is found.

    Returns:
        DeviceSelection: The requested platform and device indices.
    """
    argv = sys.argv[1:] if argv is None else list(argv)
    out = sys.stdout if out is None else out
    platform_index = 0
    device_index = 0

    i = 0
    while i < len(argv):
        token = argv[i]
        if token == "-p" and i < len(argv) - 1:
            i += 1
            platform_index = atoi(argv[i])
        elif token == "-d" and i < len(argv) - 1:
            i += 1
            device_index = atoi(argv[i])
        elif token == "-l":
            print(list_platforms_devices(), file=out)
        elif token == "-h":
            parser = build_parser()
            parser.print_help(sys.stderr)
            parser.exit(0)
        else:
            _logger.debug("Ignoring unknown argument %r", token)
        i += 1

    return DeviceSelection(platform_index, device_index)


def main(argv=None, out=None, err=None):
    """Runs the tutorial and returns the process exit status."""
    out = sys.stdout if out is None else out
    err = sys.stderr if err is None else err

    if config.DEBUG:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )

    try:
        selection = parse_args(argv, out)
    except SystemExit as exc:
        return exc.code or 0

    try:
        result = run_pipeline(selection, out=out)
    except TutorialError as exc:
        print(exc.format_line(), file=err)
        return 1

    for line in result.format_lines():
        print(line, file=out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
