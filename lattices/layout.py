# Copyright (c) Facebook, Inc. and its affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
from dataclasses import dataclass
from typing import List, Tuple

from .extent import *

#
# Layout - the offset mapping function
#
# A Layout pairs a start Index with a Stride. Each start entry is
# the contribution of its dimension to the base offset, so the
# base offset of the layout is the sum of the start entries (this
# lets sub-range views shift each dimension independently).
#
# offset() is the forward map, index() its arithmetic inverse.
# index() divides by the strides outermost first, carrying the
# remainder inward - it is only correct for strides nested in
# that order, which is what canonical_strides() builds and what
# range and stride views preserve. Transposes can break the
# nesting; see is_nested().
#


@dataclass(frozen=True)
class Layout:
    start: Index
    stride: Stride

    def __post_init__(self):
        if self.start is None or self.stride is None:
            raise ValueError("layout start and stride are required")
        if self.start.ndim != self.stride.ndim:
            msg = f"start ndim {self.start.ndim} != stride ndim {self.stride.ndim}"
            raise ValueError(msg)

    @property
    def ndim(self) -> int:
        return self.start.ndim

    def base(self) -> int:
        return sum(self.start.dims)

    # note: unchecked - positions outside the extent map to
    # offsets outside the addressable region
    def offset(self, *index) -> int:
        if len(index) == 1 and isinstance(index[0], Index):
            index = index[0].dims
        o = 0
        for s, i, k in zip(self.start.dims, index, self.stride.dims):
            o += s + i * k
        return o

    # note: only valid for offsets produced by offset()
    def index(self, offset: int) -> Index:
        rem = offset - self.base()
        ix: List[int] = []
        for k in self.stride.dims:
            i = rem // k if k != 0 else 0
            rem -= i * k
            ix.append(i)
        return Index(*ix)


# row-major nesting, innermost step == channels
def canonical_strides(extent: Extent, channels: int = 1) -> Stride:
    dims: Tuple[int, ...] = ()
    inner = channels
    for outer in reversed(extent.dims):
        dims = (inner, *dims)
        inner *= outer
    return Stride(*dims)


#
# strides are nested if every step clears the whole span covered by
# the dimensions inside it. zero steps are only harmless on
# dimensions that can't move.
#
def nesting_violations(extent: Extent, stride: Stride) -> List[str]:
    if extent.ndim != stride.ndim:
        return [f"extent ndim {extent.ndim} != stride ndim {stride.ndim}"]
    if extent.size() == 0:
        return []
    msgs = []
    span = 0
    for d in reversed(range(extent.ndim)):
        n, k = extent[d], stride[d]
        if k == 0:
            if n > 1:
                msgs += [f"dim {d}: zero stride on extent {n}"]
        elif k <= span:
            msgs += [f"dim {d}: stride {k} <= span {span} of inner dims"]
        span += k * (n - 1)
    return msgs


def is_nested(extent: Extent, stride: Stride) -> bool:
    return len(nesting_violations(extent, stride)) == 0


def check_nesting(extent: Extent, stride: Stride, fatal=True):
    msgs = nesting_violations(extent, stride)
    if len(msgs) > 0:
        msg = "\n".join([f"strides {stride} are not nested for extent {extent}:"] + msgs)
        if fatal:
            raise ValueError(msg)
        print(msg)
