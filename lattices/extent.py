# Copyright (c) Facebook, Inc. and its affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
from dataclasses import dataclass
from functools import reduce
from itertools import product
from operator import mul
from typing import (
    Iterator,
    Tuple,
    Union,
    overload,
)

#
# Extent, Index, Stride and Range - the value tuples the offset
# mapping layers are built from. All of them are immutable: the
# constructors promote and validate their arguments, nothing
# mutates them afterwards.
#

# offsets are torch.long values, so this bounds every addressable size
INDEX_MAX = 2**63 - 1


# raised whenever a requested extent, range, view or projection
# doesn't fit the structure it's built from
class BoundsError(IndexError):
    pass


def wrap_dim(n: int, ndim: int) -> int:
    if n < 0:
        n += ndim
    if n < 0 or n >= ndim:
        raise ValueError(f"dimension {n} out of range for ndim {ndim}")
    return n


def mult_safe(*values: int) -> bool:
    return reduce(mul, values, 1) <= INDEX_MAX


#
# Dims - common base of the fixed-length int tuples below.
# Equality is structural but class-sensitive, so Extent(2, 3)
# != Index(2, 3).
#


@dataclass(frozen=True)
class Dims:
    dims: Tuple[int, ...]

    def __init__(self, *dims: int):
        if len(dims) == 0:
            raise ValueError(f"{type(self).__name__}: dimensionality must not be zero")
        object.__setattr__(self, "dims", tuple(int(d) for d in dims))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({', '.join(str(d) for d in self.dims)})"

    def __str__(self) -> str:
        return f"[{', '.join(str(d) for d in self.dims)}]"

    def __len__(self):
        return len(self.dims)

    @overload
    def __getitem__(self, i: int) -> int:
        ...

    @overload
    def __getitem__(self, i: slice) -> Tuple[int, ...]:
        ...

    def __getitem__(self, i: Union[int, slice]) -> Union[int, Tuple[int, ...]]:
        return self.dims[i]

    # note: here for mypy. Python only needs __len__ and __getitem__
    def __iter__(self) -> Iterator[int]:
        for i in range(len(self)):
            yield self[i]

    @property
    def ndim(self) -> int:
        return len(self.dims)


class Extent(Dims):
    def __init__(self, *dims: int):
        super().__init__(*dims)
        if any(d < 0 for d in self.dims) or not mult_safe(*self.dims):
            raise BoundsError(f"extent is out of bounds: {self}")

    def size(self) -> int:
        return reduce(mul, self.dims, 1)

    # every index of the extent, row-major
    def indexes(self) -> Iterator["Index"]:
        return iter(Range.of(self))


class Index(Dims):
    @staticmethod
    def zero(ndim: int) -> "Index":
        return Index(*([0] * ndim))

    def __add__(self, x: "Index") -> "Index":
        if len(x) != len(self):
            raise ValueError(f"len(x) {len(x)} != len(self) {len(self)}")
        return Index(*(a + b for a, b in zip(self.dims, x)))

    def __sub__(self, x: "Index") -> "Index":
        if len(x) != len(self):
            raise ValueError(f"len(x) {len(x)} != len(self) {len(self)}")
        return Index(*(a - b for a, b in zip(self.dims, x)))


class Stride(Dims):
    def __init__(self, *dims: int):
        super().__init__(*dims)
        if any(d < 0 for d in self.dims):
            raise BoundsError(f"strides must not be negative: {self}")


#
# Range - a rectangular sub-region: a start Index plus an Extent.
# Whether the region fits is only known relative to a containing
# extent, see check_within().
#


@dataclass(frozen=True)
class Range:
    start: Index
    extent: Extent

    def __post_init__(self):
        if self.start is None or self.extent is None:
            raise ValueError("range start and extent are required")
        if self.start.ndim != self.extent.ndim:
            msg = f"start ndim {self.start.ndim} != extent ndim {self.extent.ndim}"
            raise ValueError(msg)
        if any(s < 0 for s in self.start):
            raise BoundsError(f"range start is out of bounds: {self.start}")

    @staticmethod
    def of(extent: Extent) -> "Range":
        return Range(Index.zero(extent.ndim), extent)

    # [start, end) - a negative width surfaces as a BoundsError from Extent
    @staticmethod
    def between(start: Index, end: Index) -> "Range":
        return Range(start, Extent(*(end - start)))

    def __str__(self) -> str:
        spans = [f"{s}..{s + e}" for s, e in zip(self.start, self.extent)]
        return f"[{', '.join(spans)}]"

    @property
    def ndim(self) -> int:
        return self.start.ndim

    @property
    def end(self) -> Index:
        return Index(*(s + e for s, e in zip(self.start, self.extent)))

    def size(self) -> int:
        return self.extent.size()

    def contains(self, index: Index) -> bool:
        return len(index) == self.ndim and all(
            s <= i < s + e for i, s, e in zip(index, self.start, self.extent)
        )

    def check_within(self, extent: Extent) -> "Range":
        if extent.ndim != self.ndim:
            raise ValueError(f"range ndim {self.ndim} != extent ndim {extent.ndim}")
        if any(e > x for e, x in zip(self.end, extent)):
            raise BoundsError(f"range {self} out of bounds for extent {extent}")
        return self

    def __iter__(self) -> Iterator[Index]:
        spans = [range(s, s + e) for s, e in zip(self.start, self.extent)]
        for ix in product(*spans):
            yield Index(*ix)
