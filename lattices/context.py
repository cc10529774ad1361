# Copyright (c) Facebook, Inc. and its affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
from dataclasses import dataclass

import torch

#
# NumericalContext - the tolerance approximate comparisons run under.
# There is no global default that code consults implicitly: whatever
# compares values takes a context as a parameter.
#


@dataclass(frozen=True)
class NumericalContext:
    epsilon: float = 1e-9

    def __post_init__(self):
        object.__setattr__(self, "epsilon", abs(self.epsilon))

    def equals(self, a: float, b: float) -> bool:
        return abs(a - b) <= self.epsilon

    def is_zero(self, x: float) -> bool:
        return abs(x) <= self.epsilon

    def is_greater_zero(self, x: float) -> bool:
        return x > self.epsilon

    def is_smaller_zero(self, x: float) -> bool:
        return x < -self.epsilon

    # element-wise, absolute tolerance only
    def allclose(self, a: torch.Tensor, b: torch.Tensor) -> bool:
        if a.shape != b.shape:
            return False
        if not (a.is_floating_point() or b.is_floating_point()):
            return bool(torch.equal(a.long(), b.long()))
        return torch.allclose(a.double(), b.double(), rtol=0.0, atol=self.epsilon)


DEFAULT_CONTEXT = NumericalContext()
ZERO_EPSILON = NumericalContext(0.0)
