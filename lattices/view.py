# Copyright (c) Facebook, Inc. and its affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
from dataclasses import dataclass
from typing import Callable, Union

from .structure import *

#
# View
# Projection
#
# Both are pure Structure -> Structure functions wrapped as values,
# so they can be built once and applied to any number of
# structures. A View keeps the dimensionality and addresses a subset
# of the input's offsets; a Projection fixes one coordinate and
# drops its axis.
#
# Composition follows function composition: a.compose(b) applies b
# first. The composite of a view and a projection is a projection,
# since it changes dimensionality.
#

StructureFn = Callable[[Structure], Structure]


@dataclass(frozen=True)
class Transform:
    fn: StructureFn

    def __call__(self, s: Structure) -> Structure:
        return self.fn(s)

    def apply(self, s: Structure) -> Structure:
        return self.fn(s)

    # other first, then self
    def compose(self, other: "Transform") -> "Transform":
        f, g = self.fn, other.fn
        cls = Projection if isinstance(self, Projection) or isinstance(other, Projection) else View
        return cls(lambda s: f(g(s)))

    # self first, then other
    def and_then(self, other: "Transform") -> "Transform":
        return other.compose(self)


class View(Transform):
    @staticmethod
    def of(x: Union[Range, Index, Extent, Stride]) -> "View":
        if isinstance(x, Range):
            return View(lambda s: s.sub(x))
        if isinstance(x, Index):
            return View(lambda s: s.from_start(x))
        if isinstance(x, Extent):
            r = Range.of(x)
            return View(lambda s: s.sub(r))
        if isinstance(x, Stride):
            # validated when built, not when applied
            if any(k < 1 for k in x):
                raise BoundsError(f"view strides must be positive: {x}")
            return View(lambda s: s.strided(x))
        raise ValueError(f"can't build a view from {type(x).__name__}: {x}")

    @staticmethod
    def transpose(x: int = 0, y: int = 1) -> "View":
        return View(lambda s: s.transpose(x, y))

    @staticmethod
    def channel(c: int) -> "View":
        if c < 0:
            raise ValueError(f"channel must be >= 0, got {c}")
        return View(lambda s: s.with_channel(c))


class Projection(Transform):
    @staticmethod
    def of(axis: int, index: int) -> "Projection":
        if index < 0:
            raise BoundsError(f"projection index must be >= 0, got {index}")
        return Projection(lambda s: s.fix(axis, index))

    # outer axis of a 3d structure
    @staticmethod
    def slice(k: int) -> "Projection":
        return Projection.of(-3, k)

    @staticmethod
    def row(k: int) -> "Projection":
        return Projection.of(-2, k)

    @staticmethod
    def col(k: int) -> "Projection":
        return Projection.of(-1, k)


TRANSPOSE = View.transpose()
