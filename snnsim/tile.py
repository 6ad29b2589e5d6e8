"""Tiles mapped onto the multiplier array."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SparseVN:
    """A sparse cluster; folding needs one extra multiplier as forwarder."""

    size: int
    folding: bool

    def vn_size(self) -> int:
        """Number of multipliers the cluster occupies."""
        return self.size + 1 if self.folding else self.size


@dataclass(frozen=True)
class Tile:
    """Tile dimensions of a convolution (or GEMM) mapped onto the array."""

    t_r: int
    t_s: int
    t_c: int
    t_k: int
    t_g: int
    t_n: int
    t_x_: int
    t_y_: int
    folding: bool = False

    @classmethod
    def for_gemm(cls, t_m: int, t_n: int, t_k: int, folding: bool) -> "Tile":
        """Express a GEMM tile in convolution terms."""
        return cls(
            t_r=1, t_s=t_k, t_c=1, t_k=t_n, t_g=1, t_n=1, t_x_=t_m, t_y_=1,
            folding=folding,
        )

    def vn_size(self) -> int:
        """Size of the dot product computed by one virtual neuron."""
        return self.t_r * self.t_s * self.t_c

    def num_vns(self) -> int:
        """Number of virtual neurons in the tile."""
        return self.t_k * self.t_g * self.t_n * self.t_x_ * self.t_y_