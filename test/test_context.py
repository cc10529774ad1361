# Copyright (c) Facebook, Inc. and its affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
from unittest import TestCase, main

import torch

from lattices.context import *


class TestNumericalContext(TestCase):
    def test_default(self):
        self.assertEqual(DEFAULT_CONTEXT.epsilon, 1e-9)
        self.assertEqual(ZERO_EPSILON.epsilon, 0.0)

    def test_epsilon_is_absolute(self):
        self.assertEqual(NumericalContext(-0.5).epsilon, 0.5)

    def test_scalars(self):
        ctx = NumericalContext(0.01)
        self.assertTrue(ctx.equals(1.0, 1.005))
        self.assertFalse(ctx.equals(1.0, 1.02))
        self.assertTrue(ctx.is_zero(-0.005))
        self.assertTrue(ctx.is_greater_zero(0.02))
        self.assertFalse(ctx.is_greater_zero(0.005))
        self.assertTrue(ctx.is_smaller_zero(-0.02))
        self.assertFalse(ctx.is_smaller_zero(-0.005))

    def test_exact(self):
        self.assertTrue(ZERO_EPSILON.equals(0.5, 0.5))
        self.assertFalse(ZERO_EPSILON.equals(0.5, 0.5 + 1e-12))

    def test_allclose(self):
        a = torch.tensor([1.0, 2.0, 3.0], dtype=torch.float64)
        b = a + 1e-12
        self.assertTrue(DEFAULT_CONTEXT.allclose(a, b))
        self.assertFalse(ZERO_EPSILON.allclose(a, b))
        self.assertFalse(DEFAULT_CONTEXT.allclose(a, a[:2]))

    def test_allclose_integral(self):
        a = torch.arange(4)
        self.assertTrue(ZERO_EPSILON.allclose(a, torch.arange(4, dtype=torch.int32)))
        self.assertFalse(DEFAULT_CONTEXT.allclose(a, a + 1))


if __name__ == "__main__":
    main()
