"""Batch verification of chain files.

A chain file is named ``<hex-spec>-<fanin>-<steps>.bln`` and holds blocks of
non-blank lines separated by blank lines, one chain per block.
"""

from __future__ import annotations

import pathlib
import typing

from blnverify.chain.verifier import ChainVerifier
from blnverify.core.logging import BlnLogger, getLogger
from blnverify.core.stats import BatchStatistics, BlockResult

logger = getLogger("BLN")

CHAIN_SUFFIX = ".bln"


def chain_filename(hex_spec: str, fanin: int, steps: int) -> str:
    """File name holding the chains for *hex_spec* (``"e8-3-1.bln"``)."""
    return f"{hex_spec}-{fanin}-{steps}{CHAIN_SUFFIX}"


def read_blocks(
    lines: typing.Iterable[str],
) -> typing.Iterator[tuple[int, list[str]]]:
    """Yield ``(first_line_number, trimmed_lines)`` for every block.

    Line numbers are 1-based. Runs of blank lines count as one separator.
    """
    block: list[str] = []
    start = 0
    for number, raw in enumerate(lines, start=1):
        line = raw.strip()
        if not line:
            if block:
                yield start, block
            block = []
            continue
        if not block:
            start = number
        block.append(line)
    if block:
        yield start, block


def verify_blocks(
    lines: typing.Iterable[str],
    verifier: ChainVerifier,
    stats: BatchStatistics | None = None,
) -> BatchStatistics:
    """Verify every block in *lines* and accumulate the counts."""
    stats = stats if stats is not None else BatchStatistics()
    for number, (first_line, block) in enumerate(read_blocks(lines), start=1):
        BlnLogger.update_block(number)
        try:
            verdict = verifier.verify(block)
        finally:
            BlnLogger.reset_block()
        if not verdict.accepted:
            logger.debug(
                "block %d (line %d) rejected: %s", number, first_line, verdict.error
            )
        stats.record(BlockResult(block=number, first_line=first_line, verdict=verdict))
    return stats


def verify_file(
    path: str | pathlib.Path, verifier: ChainVerifier
) -> BatchStatistics:
    """Verify every chain block stored in *path*.

    Raises:
        FileNotFoundError: If *path* does not exist.
    """
    path = pathlib.Path(path)
    logger.info("Verifying chains in %s", path)
    with path.open("r", encoding="utf-8") as fp:
        return verify_blocks(fp, verifier)
