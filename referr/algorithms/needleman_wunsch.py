"""Needleman-Wunsch global alignment with a linear gap penalty and free end gaps."""

from __future__ import annotations

from typing import List, Tuple

import numpy as np

from referr.algorithms.base import PairwiseAligner
from referr.types import GAP, PairwiseAlignment

DIAG, UP, LEFT = 0, 1, 2

MATCH_SCORE = 5
MISMATCH_SCORE = -4
GAP_SCORE = -8


def _as_bytes(seq: str) -> np.ndarray:
    return np.frombuffer(seq.encode("ascii"), dtype=np.uint8)


class NeedlemanWunschAligner(PairwiseAligner):
    """Global aligner; each row of the DP grid is filled with numpy.

    Ties prefer the diagonal move, then a gap in ``y``, then a gap in ``x``. With
    ``ends_free`` leading and trailing gaps cost nothing.
    """

    def __init__(
        self,
        match: int = MATCH_SCORE,
        mismatch: int = MISMATCH_SCORE,
        gap: int = GAP_SCORE,
        ends_free: bool = True,
    ) -> None:
        if gap > 0:
            raise ValueError(f"gap must be a penalty (<= 0), got {gap}")
        self.match = match
        self.mismatch = mismatch
        self.gap = gap
        self.ends_free = ends_free

    def _initialize_dp_matrices(self, n: int, m: int) -> Tuple[np.ndarray, np.ndarray]:
        """Allocate score and pointer grids and seed the first row and column."""
        H = np.zeros((n + 1, m + 1), dtype=np.int64)
        Psi = np.zeros((n + 1, m + 1), dtype=np.int8)
        if not self.ends_free:
            H[:, 0] = self.gap * np.arange(n + 1)
            H[0, :] = self.gap * np.arange(m + 1)
        Psi[1:, 0] = UP
        Psi[0, 1:] = LEFT
        return H, Psi

    def _fill_interior(
        self, H: np.ndarray, Psi: np.ndarray, x: np.ndarray, y: np.ndarray
    ) -> None:
        """Run the recurrences row by row.

        Horizontal moves inside a row are resolved with a running maximum:
        ``H[i, j] = max_k(cand[k] + gap * (j - k))``.
        """
        m = len(y)
        cols = np.arange(m + 1, dtype=np.int64)
        for i in range(1, len(x) + 1):
            subst = np.where(y == x[i - 1], self.match, self.mismatch)
            diag = H[i - 1, :-1] + subst
            up = H[i - 1, 1:] + self.gap
            best = np.maximum(diag, up)
            step = np.where(diag >= up, DIAG, UP)

            cand = np.empty(m + 1, dtype=np.int64)
            cand[0] = H[i, 0]
            cand[1:] = best
            run = np.maximum.accumulate(cand - self.gap * cols) + self.gap * cols

            H[i, 1:] = run[1:]
            Psi[i, 1:] = np.where(run[1:] > best, LEFT, step)

    def _compute_termination(self, H: np.ndarray) -> Tuple[int, int, int]:
        """Return the cell where the traceback starts and its score."""
        n, m = H.shape[0] - 1, H.shape[1] - 1
        if not self.ends_free:
            return n, m, int(H[n, m])

        best_i, best_j, best = n, m, H[n, m]
        j = int(np.argmax(H[n, :]))
        if H[n, j] > best:
            best_i, best_j, best = n, j, H[n, j]
        i = int(np.argmax(H[:, m]))
        if H[i, m] > best:
            best_i, best_j, best = i, m, H[i, m]
        return best_i, best_j, int(best)

    def _traceback(
        self, Psi: np.ndarray, x_seq: str, y_seq: str, i: int, j: int
    ) -> Tuple[str, str]:
        """Follow pointers from (i, j) back to the origin."""
        aligned_x: List[str] = []
        aligned_y: List[str] = []

        # trailing overhang past the end cell
        for k in range(len(x_seq) - 1, i - 1, -1):
            aligned_x.append(x_seq[k])
            aligned_y.append(GAP)
        for k in range(len(y_seq) - 1, j - 1, -1):
            aligned_x.append(GAP)
            aligned_y.append(y_seq[k])

        while i > 0 or j > 0:
            move = Psi[i, j]
            if move == DIAG:
                aligned_x.append(x_seq[i - 1])
                aligned_y.append(y_seq[j - 1])
                i -= 1
                j -= 1
            elif move == UP:
                aligned_x.append(x_seq[i - 1])
                aligned_y.append(GAP)
                i -= 1
            else:
                aligned_x.append(GAP)
                aligned_y.append(y_seq[j - 1])
                j -= 1

        aligned_x.reverse()
        aligned_y.reverse()
        return "".join(aligned_x), "".join(aligned_y)

    def align(self, x_seq: str, y_seq: str) -> PairwiseAlignment:
        """Compute the global alignment of ``y_seq`` against ``x_seq``."""
        x = _as_bytes(x_seq)
        y = _as_bytes(y_seq)

        H, Psi = self._initialize_dp_matrices(len(x), len(y))
        self._fill_interior(H, Psi, x, y)

        i, j, score = self._compute_termination(H)
        aligned_x, aligned_y = self._traceback(Psi, x_seq, y_seq, i, j)
        return PairwiseAlignment(aligned_x=aligned_x, aligned_y=aligned_y, score=score)


__all__ = ["NeedlemanWunschAligner"]
