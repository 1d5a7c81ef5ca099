"""Readers for reference sequence tables (FASTA or two-column TSV/CSV)."""

from pathlib import Path
from typing import List, Optional, Union

import pandas as pd
import skbio.io
from skbio import DNA

from referr.types import ReferenceSequence

FASTA_SUFFIXES = {".fa", ".fasta", ".fna", ".fas"}
REFERENCE_COLUMNS = ("ref_id", "ref_seq")


def reference_from_skbio(record: DNA) -> ReferenceSequence:
    """Convert a scikit-bio record to a ReferenceSequence."""
    metadata = getattr(record, "metadata", {}) or {}
    return ReferenceSequence(identifier=metadata.get("id") or "", sequence=str(record))


def read_reference_fasta(file_path: Union[str, Path]) -> List[ReferenceSequence]:
    """Read a FASTA file of reference sequences."""
    return [
        reference_from_skbio(record)
        for record in skbio.io.read(
            str(file_path), format="fasta", constructor=DNA, lowercase=True
        )
    ]


def read_reference_table(
    file_path: Union[str, Path], sep: Optional[str] = None
) -> List[ReferenceSequence]:
    """Read a delimited table with ``ref_id`` and ``ref_seq`` columns.

    The separator defaults to a comma for ``.csv`` files and a tab otherwise.
    Tables without a header are read positionally.
    """
    path = Path(file_path)
    if sep is None:
        sep = "," if path.suffix.lower() == ".csv" else "\t"
    df = pd.read_csv(path, sep=sep, dtype=str)
    if not set(REFERENCE_COLUMNS).issubset(df.columns):
        df = pd.read_csv(path, sep=sep, dtype=str, header=None)
        if df.shape[1] < 2:
            raise ValueError(
                f"Reference table {path} needs columns {list(REFERENCE_COLUMNS)}"
            )
        df = df.iloc[:, :2]
        df.columns = list(REFERENCE_COLUMNS)
    df = df.dropna(subset=list(REFERENCE_COLUMNS))
    return [
        ReferenceSequence(identifier=str(row.ref_id), sequence=str(row.ref_seq).strip())
        for row in df.itertuples(index=False)
    ]


def read_references(file_path: Union[str, Path]) -> List[ReferenceSequence]:
    """Read references from FASTA or a delimited table, chosen by file suffix."""
    path = Path(file_path)
    suffixes = [s.lower() for s in path.suffixes if s.lower() != ".gz"]
    if suffixes and suffixes[-1] in FASTA_SUFFIXES:
        return read_reference_fasta(path)
    return read_reference_table(path)


__all__ = [
    "read_references",
    "read_reference_fasta",
    "read_reference_table",
]
