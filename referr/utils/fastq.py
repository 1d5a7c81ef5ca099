"""Functions for working with FASTQ files."""

from pathlib import Path
from typing import Iterable, List, Optional, Union

import numpy as np
import skbio.io
from skbio import DNA

from referr.types import ReadRecord


def read_record_from_skbio(record: DNA) -> ReadRecord:
    """Convert a scikit-bio record with phred qualities to a ReadRecord."""
    metadata = getattr(record, "metadata", {}) or {}
    quality = record.positional_metadata["quality"].to_numpy(dtype=np.int64)
    return ReadRecord(
        identifier=metadata.get("id") or "",
        sequence=str(record),
        quality=quality,
    )


def read_fastq(file_path: Union[str, Path], phred_offset: int = 33) -> List[ReadRecord]:
    """Read a FASTQ file (plain or gzip-compressed) into ReadRecords.

    Reads containing ambiguity codes raise DataIntegrityError.
    """
    records = skbio.io.read(
        str(file_path),
        format="fastq",
        phred_offset=phred_offset,
        constructor=DNA,
        lowercase=True,
    )
    return [read_record_from_skbio(record) for record in records]


def write_fastq(
    reads: Iterable[ReadRecord],
    file_path: Union[str, Path],
    phred_offset: int = 33,
    compression: Optional[str] = None,
) -> None:
    """Write ReadRecords as FASTQ; ``compression="gzip"`` gzips the output."""
    io_kwargs = {} if compression is None else {"compression": compression}
    records = (
        DNA(
            read.sequence,
            metadata={"id": read.identifier, "description": ""},
            positional_metadata={"quality": read.quality},
        )
        for read in reads
    )
    skbio.io.write(
        records,
        format="fastq",
        into=str(file_path),
        phred_offset=phred_offset,
        **io_kwargs,
    )


__all__ = ["read_fastq", "write_fastq", "read_record_from_skbio"]
