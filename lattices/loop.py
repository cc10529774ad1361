# Copyright (c) Facebook, Inc. and its affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
from dataclasses import dataclass
from itertools import product
from typing import Callable, Iterator, Tuple, Union

from .extent import *

#
# Loop - ordered traversal of a Range
#
# A Precedence orders the axes from fastest (innermost) to slowest
# (outermost). Row-major traversal over an N-d range is precedence
# (N-1, ..., 0), column-major is (0, ..., N-1). A backward loop visits
# the same indexes in exactly the reverse order.
#


@dataclass(frozen=True)
class Precedence:
    order: Tuple[int, ...]

    def __init__(self, *order: int):
        if sorted(order) != list(range(len(order))):
            raise ValueError(f"precedence must be a permutation of axes, got {order}")
        object.__setattr__(self, "order", tuple(order))

    # axis 0 fastest
    @staticmethod
    def regular(ndim: int) -> "Precedence":
        return Precedence(*range(ndim))

    # last axis fastest
    @staticmethod
    def reverse(ndim: int) -> "Precedence":
        return Precedence(*reversed(range(ndim)))

    @property
    def ndim(self) -> int:
        return len(self.order)


@dataclass(frozen=True)
class Loop:
    region: Range
    precedence: Precedence
    backward: bool = False

    def __post_init__(self):
        if self.region.ndim != self.precedence.ndim:
            msg = f"range ndim {self.region.ndim} != precedence ndim {self.precedence.ndim}"
            raise ValueError(msg)

    def __len__(self) -> int:
        return self.region.size()

    def __iter__(self) -> Iterator[Index]:
        outer_first = self.precedence.order[::-1]
        spans = []
        for d in outer_first:
            s, n = self.region.start[d], self.region.extent[d]
            spans.append(range(s + n - 1, s - 1, -1) if self.backward else range(s, s + n))
        ix = [0] * self.region.ndim
        for coords in product(*spans):
            for d, i in zip(outer_first, coords):
                ix[d] = i
            yield Index(*ix)

    def for_each(self, action: Callable[..., None]):
        for ix in self:
            action(*ix)

    def any_match(self, pred: Callable[..., bool]) -> bool:
        return any(pred(*ix) for ix in self)

    def all_match(self, pred: Callable[..., bool]) -> bool:
        return all(pred(*ix) for ix in self)

    def none_match(self, pred: Callable[..., bool]) -> bool:
        return not self.any_match(pred)


def as_range(x: Union[Range, Extent]) -> Range:
    return x if isinstance(x, Range) else Range.of(x)


def row_major(x: Union[Range, Extent], backward=False) -> Loop:
    r = as_range(x)
    return Loop(r, Precedence.reverse(r.ndim), backward)


def col_major(x: Union[Range, Extent], backward=False) -> Loop:
    r = as_range(x)
    return Loop(r, Precedence.regular(r.ndim), backward)
