# Copyright (c) Facebook, Inc. and its affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
from dataclasses import dataclass
from numbers import Number
from typing import Any, Iterator, List, Sequence, Tuple, Union

import torch

from .context import *
from .view import *

#
# Grid
#
# A grid is a simple association of a linear data store with a
# Structure. The store is either a 1d torch.Tensor (numeric grids)
# or a plain list (object grids). Everything that doesn't touch
# elements is delegated to the structure. Every derived grid shares
# the store of the grid it was derived from, so writes through one
# are visible through all.
#

Data = Union[torch.Tensor, List[Any]]


@dataclass
class Grid:
    data: Data
    structure: Structure

    def __init__(self, data: Data, s: Union[Structure, RawExtent]):
        self.data = data
        self.structure = s if isinstance(s, Structure) else Structure.of(s)
        self.structure.check_buffer(len(data))

    @property
    def extent(self) -> Extent:
        return self.structure.extent

    @property
    def ndim(self) -> int:
        return self.structure.ndim

    def numel(self) -> int:
        return self.structure.size()

    def __len__(self) -> int:
        return self.extent[0]

    # projections along axis 0, or the elements of a 1d grid
    def __iter__(self) -> Iterator:
        for i in range(len(self)):
            yield self[i] if self.ndim == 1 else self.project(Projection.of(0, i))

    def _offset(self, index: Any) -> int:
        if isinstance(index, Index):
            ix: Tuple[int, ...] = index.dims
        elif isinstance(index, tuple):
            ix = index
        else:
            ix = (index,)
        if len(ix) != self.ndim:
            raise ValueError(f"index {ix} has {len(ix)} dims, grid has {self.ndim}")
        return self.structure.offset(*ix)

    # note: unchecked beyond the bounds of the store itself
    def __getitem__(self, index: Any):
        x = self.data[self._offset(index)]
        return x.item() if isinstance(self.data, torch.Tensor) else x

    def __setitem__(self, index: Any, value: Any):
        self.data[self._offset(index)] = value

    #
    # derived grids
    #

    def view(self, v: StructureFn) -> "Grid":
        return Grid(self.data, self.structure.view(v))

    def project(self, p: StructureFn) -> "Grid":
        return Grid(self.data, self.structure.project(p))

    def transpose(self, x: int = 0, y: int = 1) -> "Grid":
        return Grid(self.data, self.structure.transpose(x, y))

    def channel(self, c: int) -> "Grid":
        return self.view(View.channel(c))

    #
    # element traversal
    #

    # store offsets of all elements, row-major
    def addresses(self) -> torch.Tensor:
        s = self.structure
        addrs = torch.tensor(s.layout.base() + s.channel, dtype=torch.long)
        for n, k in zip(s.extent, s.layout.stride):
            addrs = addrs.unsqueeze(-1) + torch.arange(n, dtype=torch.long) * k
        return addrs.reshape(-1)

    def values(self) -> Data:
        addrs = self.addresses()
        if isinstance(self.data, torch.Tensor):
            return self.data[addrs]
        return [self.data[a] for a in addrs.tolist()]

    def tolist(self) -> List:
        if self.ndim == 1:
            vals = self.values()
            return vals.tolist() if isinstance(vals, torch.Tensor) else vals
        return [g.tolist() for g in self]

    # note: the store may be larger than the extent, e.g. when
    # it's shared with other channels
    def is_initial(self) -> bool:
        return self.structure.is_canonical() and self.numel() == len(self.data)

    def eval(self) -> "Grid":
        return self if self.is_initial() else self.clone()

    def clone(self) -> "Grid":
        return Grid(self.values(), Structure.of(self.extent))

    def fill(self, value: Any) -> "Grid":
        if isinstance(self.data, torch.Tensor):
            self.data[self.addresses()] = value
        else:
            for a in self.addresses().tolist():
                self.data[a] = value
        return self

    # values are gathered before anything is written, so
    # overlapping source and target are fine
    def assign(self, other: "Grid") -> "Grid":
        if other.extent != self.extent:
            raise ValueError(f"can't assign extent {other.extent} to extent {self.extent}")
        vals = other.values()
        if isinstance(self.data, torch.Tensor):
            if not isinstance(vals, torch.Tensor):
                vals = torch.tensor(vals, dtype=self.data.dtype)
            self.data[self.addresses()] = vals.to(self.data.dtype)
        else:
            vals = vals.tolist() if isinstance(vals, torch.Tensor) else vals
            for a, v in zip(self.addresses().tolist(), vals):
                self.data[a] = v
        return self

    def equals(self, other: "Grid", context: NumericalContext = DEFAULT_CONTEXT) -> bool:
        if not isinstance(other, Grid) or other.extent != self.extent:
            return False
        a, b = self.values(), other.values()
        if isinstance(a, torch.Tensor) and isinstance(b, torch.Tensor):
            return context.allclose(a, b)
        a = a.tolist() if isinstance(a, torch.Tensor) else a
        b = b.tolist() if isinstance(b, torch.Tensor) else b
        return all(
            context.equals(x, y) if isinstance(x, Number) and isinstance(y, Number) else x == y
            for x, y in zip(a, b)
        )

    def __eq__(self, other) -> bool:
        return self.equals(other, ZERO_EPSILON)

    def __str__(self) -> str:
        return f"Grid({self.tolist()}, {self.structure})"


#
# builders
#


# nested lists -> (dims, flat values)
def flatten(x: Sequence) -> Tuple[Tuple[int, ...], List]:
    if not isinstance(x, (list, tuple)):
        return (), [x]
    if len(x) == 0:
        return (0,), []
    parts = [flatten(y) for y in x]
    inner = set(dims for dims, _ in parts)
    if len(inner) != 1:
        raise ValueError(f"nested lists must be rectangular, got inner extents {inner}")
    dims = (len(x), *parts[0][0])
    return dims, [v for _, vals in parts for v in vals]


def is_numeric(vals: List) -> bool:
    return all(isinstance(v, (bool, Number)) for v in vals)


#
# build a grid from nested lists or a tensor. with channels > 1 the
# innermost dimension of the values holds the channels, e.g. a
# (H, W, 3) tensor becomes an (H, W) grid over 3 interleaved channels.
# lists of non-numeric values build object grids.
#
def grid(values: Union[torch.Tensor, Sequence], dtype=None, channels: int = 1) -> Grid:
    if isinstance(values, torch.Tensor):
        dims = tuple(values.shape)
        data: Data = values.reshape(-1).to(dtype) if dtype is not None else values.reshape(-1)
    else:
        dims, flat = flatten(values)
        data = torch.tensor(flat, dtype=dtype) if is_numeric(flat) else flat
    if len(dims) == 0:
        raise ValueError("grid values must have at least one dimension")
    if channels > 1:
        if len(dims) < 2 or dims[-1] != channels:
            raise ValueError(f"innermost dimension of {dims} must hold {channels} channels")
        dims = dims[:-1]
    return Grid(data, Structure.of(Extent(*dims), channels))


def full(*dims: int, value, dtype=None, channels: int = 1) -> Grid:
    s = Structure.of(Extent(*dims), channels)
    return Grid(torch.full((s.size() * channels,), value, dtype=dtype), s)


def zeros(*dims: int, dtype=None, channels: int = 1) -> Grid:
    return full(*dims, value=0.0, dtype=dtype, channels=channels)


def arange(*dims: int, start=0, dtype=torch.long, channels: int = 1) -> Grid:
    s = Structure.of(Extent(*dims), channels)
    n = s.size() * channels
    return Grid(torch.arange(start=start, end=start + n, dtype=dtype), s)
