"""Collapse raw reads into unique sequences."""

from __future__ import annotations

from typing import Dict, List, Sequence

import numpy as np

from referr.types import Dereplication, ReadRecord, UniqueSequence


def dereplicate(reads: Sequence[ReadRecord]) -> Dereplication:
    """Group identical reads.

    Uniques are ordered by decreasing count, ties in order of first appearance.
    Each unique carries the per-position mean quality of its reads, and
    ``read_map[i]`` is the unique index of ``reads[i]``.
    """
    first_seen: Dict[str, int] = {}
    members: List[List[int]] = []
    for read_index, read in enumerate(reads):
        slot = first_seen.get(read.sequence)
        if slot is None:
            slot = len(members)
            first_seen[read.sequence] = slot
            members.append([])
        members[slot].append(read_index)

    order = sorted(range(len(members)), key=lambda slot: -len(members[slot]))
    read_map = np.empty(len(reads), dtype=np.int64)
    uniques: List[UniqueSequence] = []
    for unique_index, slot in enumerate(order):
        indices = members[slot]
        sequence = reads[indices[0]].sequence
        profile = np.mean(np.vstack([reads[i].quality for i in indices]), axis=0)
        uniques.append(
            UniqueSequence(
                index=unique_index,
                sequence=sequence,
                count=len(indices),
                quality_profile=profile,
            )
        )
        read_map[indices] = unique_index

    return Dereplication(uniques=uniques, read_map=read_map)


__all__ = ["dereplicate"]
