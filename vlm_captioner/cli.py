"""Command-line surface — argument parsing and caption output."""
import argparse
import csv
import logging
import sys
import time
from typing import Optional, Sequence, TextIO

from vlm_captioner.captioner import Captioner
from vlm_captioner.constants import (
    CLI_DESCRIPTION,
    CSV_HEADER,
    MSG_CAPTION_FAILED,
    MSG_CAPTION_OK,
    MULTI_LINE_FORMAT,
    PROG_NAME,
)
from vlm_captioner.errors import CaptionError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROG_NAME, description=CLI_DESCRIPTION)
    parser.add_argument("images", nargs="+", metavar="IMAGE", help="image file(s) to caption")
    parser.add_argument("-c", "--csv", action="store_true", help="output as CSV")
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


class PlainWriter:
    """One caption per line; prefixed with its path when several images are given."""

    def __init__(self, out: TextIO, multi: bool) -> None:
        self._out = out
        self._multi = multi

    def write(self, image_path: str, caption: str) -> None:
        match self._multi:
            case True:
                print(MULTI_LINE_FORMAT % (image_path, caption), file=self._out)
            case False:
                print(caption, file=self._out)


class CsvWriter:

    def __init__(self, out: TextIO) -> None:
        self._writer = csv.writer(out, lineterminator="\n")
        self._writer.writerow(CSV_HEADER)

    def write(self, image_path: str, caption: str) -> None:
        self._writer.writerow((image_path, caption))


async def run(
    captioner: Captioner,
    image_paths: Sequence[str],
    csv_output: bool = False,
    timeout: Optional[float] = None,
    out: Optional[TextIO] = None,
) -> int:
    """Caption each path in order, skipping failures. Returns the number captioned."""
    out = out or sys.stdout
    writer = CsvWriter(out) if csv_output else PlainWriter(out, multi=len(image_paths) > 1)

    captioned = 0
    for image_path in image_paths:
        start = time.monotonic()
        try:
            caption = await captioner.caption(image_path, timeout=timeout)
        except CaptionError as e:
            logger.error(MSG_CAPTION_FAILED, image_path, e)
            continue
        logger.info(MSG_CAPTION_OK, image_path, time.monotonic() - start)
        writer.write(image_path, caption.strip())
        captioned += 1
    return captioned
