# Copyright (c) Facebook, Inc. and its affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
from dataclasses import dataclass, replace
from typing import Callable, Sequence, Union

from .layout import *

#
# Structure
#
# A structure is the complete addressing contract for one logical
# array view: an Extent, a Layout and a channel offset. Channels let
# several interleaved arrays (e.g. the R, G and B planes of an image)
# share one buffer - the canonical layout steps by the channel count
# innermost, and each channel is addressed by a structure whose
# channel offset selects it.
#
# Structures never own or touch a buffer. The derivations below
# (sub-ranges, strides, transposition, channel selection and
# projection) are pure offset arithmetic, so any number of
# structures may alias the same buffer region. view.py wraps them
# as composable View and Projection values.
#

RawExtent = Union[Extent, int, Sequence[int]]


def as_extent(x: RawExtent) -> Extent:
    if isinstance(x, Extent):
        return x
    if isinstance(x, int):
        return Extent(x)
    return Extent(*x)


@dataclass(frozen=True)
class Structure:
    extent: Extent
    layout: Layout
    channel: int = 0

    def __post_init__(self):
        if self.extent is None:
            raise ValueError("structure extent is required")
        if self.layout is None:
            raise ValueError("structure layout is required")
        if self.extent.ndim != self.layout.ndim:
            msg = f"extent ndim {self.extent.ndim} != layout ndim {self.layout.ndim}"
            raise ValueError(msg)
        if self.channel < 0:
            raise ValueError(f"channel must be >= 0, got {self.channel}")

    # canonical structure: zero start, row-major strides
    # scaled by the number of interleaved channels
    @staticmethod
    def of(x: RawExtent, channels: int = 1) -> "Structure":
        ext = as_extent(x)
        if channels < 1:
            raise ValueError(f"number of channels must be >= 1, got {channels}")
        if not mult_safe(ext.size(), channels):
            raise BoundsError(f"extent {ext} with {channels} channels is out of bounds")
        layout = Layout(Index.zero(ext.ndim), canonical_strides(ext, channels))
        return Structure(ext, layout)

    @property
    def ndim(self) -> int:
        return self.extent.ndim

    def size(self) -> int:
        return self.extent.size()

    def offset(self, *index) -> int:
        return self.layout.offset(*index) + self.channel

    def index(self, offset: int) -> Index:
        return self.layout.index(offset - self.channel)

    def view(self, v: Callable[["Structure"], "Structure"]) -> "Structure":
        return v(self)

    def project(self, p: Callable[["Structure"], "Structure"]) -> "Structure":
        return p(self)

    #
    # derivations
    #

    # the given sub-range, re-based at its start
    def sub(self, r: Range) -> "Structure":
        r.check_within(self.extent)
        start, stride = self.layout.start, self.layout.stride
        new_start = Index(*(b + k * i for b, k, i in zip(start, stride, r.start)))
        return Structure(r.extent, Layout(new_start, stride), self.channel)

    # everything from the given index to the far edge
    def from_start(self, start: Index) -> "Structure":
        if start.ndim != self.ndim:
            raise ValueError(f"start ndim {start.ndim} != structure ndim {self.ndim}")
        if any(s < 0 or s > n for s, n in zip(start, self.extent)):
            raise BoundsError(f"start {start} out of bounds for extent {self.extent}")
        rest = Extent(*(n - s for n, s in zip(self.extent, start)))
        return self.sub(Range(start, rest))

    # every k-th element along each dimension
    def strided(self, stride: Stride) -> "Structure":
        if stride.ndim != self.ndim:
            raise ValueError(f"stride ndim {stride.ndim} != structure ndim {self.ndim}")
        if any(k < 1 for k in stride):
            raise BoundsError(f"view strides must be positive: {stride}")
        ext = Extent(*((n - 1) // k + 1 if n != 0 else 0 for n, k in zip(self.extent, stride)))
        steps = Stride(*(a * k for a, k in zip(self.layout.stride, stride)))
        return Structure(ext, Layout(self.layout.start, steps), self.channel)

    # swap two axes. start entries stay put - only their sum matters
    def transpose(self, x: int = 0, y: int = 1) -> "Structure":
        x, y = wrap_dim(x, self.ndim), wrap_dim(y, self.ndim)
        dims, steps = list(self.extent), list(self.layout.stride)
        dims[x], dims[y] = dims[y], dims[x]
        steps[x], steps[y] = steps[y], steps[x]
        layout = Layout(self.layout.start, Stride(*steps))
        return Structure(Extent(*dims), layout, self.channel)

    def with_channel(self, channel: int) -> "Structure":
        if channel == self.channel:
            return self
        return replace(self, channel=channel)

    #
    # fix one coordinate, dropping its axis. the fixed axis'
    # contribution to the offset is folded into the start of
    # the first remaining axis.
    #
    def fix(self, axis: int, index: int) -> "Structure":
        if self.ndim < 2:
            raise ValueError(f"can't project a structure of ndim {self.ndim}")
        axis = wrap_dim(axis, self.ndim)
        n = self.extent[axis]
        if index < 0 or index >= n:
            msg = f"index {index} out of bounds for axis {axis} of extent {self.extent}"
            raise BoundsError(msg)
        start, stride = self.layout.start, self.layout.stride
        fixed = start[axis] + index * stride[axis]
        keep = [d for d in range(self.ndim) if d != axis]
        new_start = [start[d] for d in keep]
        new_start[0] += fixed
        layout = Layout(Index(*new_start), Stride(*(stride[d] for d in keep)))
        return Structure(Extent(*(self.extent[d] for d in keep)), layout, self.channel)

    #
    # misc
    #

    # canonical structure of the same extent (e.g. for a copy target)
    def like(self) -> "Structure":
        return Structure.of(self.extent)

    # canonical structure for a copy of the given sub-range
    def copy(self, r: Range) -> "Structure":
        r.check_within(self.extent)
        return Structure.of(r.extent)

    def is_canonical(self) -> bool:
        return self.channel == 0 and self.layout == Structure.of(self.extent).layout

    # largest offset addressed, -1 if the structure is empty
    def max_offset(self) -> int:
        if self.size() == 0:
            return -1
        far = Index(*(n - 1 for n in self.extent))
        return self.offset(far)

    def check_buffer(self, length: int):
        top = self.max_offset()
        if top >= length:
            msg = f"buffer of length {length} too small for structure, max offset {top}"
            raise ValueError(msg)

    # whether index() inverts offset() for this structure
    def is_invertible(self) -> bool:
        return is_nested(self.extent, self.layout.stride)

    def __str__(self) -> str:
        start, stride = self.layout.start, self.layout.stride
        return f"Structure(extent={self.extent}, start={start}, stride={stride}, channel={self.channel})"
