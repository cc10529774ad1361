# Copyright (c) Facebook, Inc. and its affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
from unittest import TestCase, main

from lattices.structure import *


class TestCanonical(TestCase):
    def test_of(self):
        s = Structure.of(Extent(3, 4))
        self.assertEqual(s.layout, Layout(Index(0, 0), Stride(4, 1)))
        self.assertEqual(s.channel, 0)
        self.assertEqual(s.size(), 12)
        self.assertEqual(s.ndim, 2)

    def test_raw_extent(self):
        self.assertEqual(Structure.of((3, 4)), Structure.of(Extent(3, 4)))
        self.assertEqual(Structure.of(7), Structure.of(Extent(7)))

    def test_channels(self):
        s = Structure.of((100, 200), channels=3)
        self.assertEqual(s.layout.stride, Stride(600, 3))
        with self.assertRaises(ValueError):
            Structure.of((3, 4), channels=0)

    def test_channel_overflow(self):
        with self.assertRaises(BoundsError):
            Structure.of((2**31, 2**31), channels=4)

    def test_invalid(self):
        with self.assertRaises(ValueError):
            Structure(Extent(3), None)
        with self.assertRaises(ValueError):
            Structure(None, Layout(Index(0), Stride(1)))
        with self.assertRaises(ValueError):
            Structure(Extent(3, 4), Layout(Index(0), Stride(1)))
        with self.assertRaises(ValueError):
            Structure(Extent(3), Layout(Index(0), Stride(1)), -1)


class TestOffsets(TestCase):
    def test_row_major(self):
        s = Structure.of((3, 4))
        self.assertEqual(s.offset(0, 0), 0)
        self.assertEqual(s.offset(1, 2), 6)
        self.assertEqual(s.offset(Index(2, 3)), 11)

    def test_round_trip(self):
        for s in [Structure.of((4, 5, 6)), Structure.of((7, 3), channels=3)]:
            for ix in s.extent.indexes():
                self.assertEqual(s.index(s.offset(ix)), ix)

    def test_channel_offset(self):
        s = Structure.of((7, 3), channels=3).with_channel(2)
        self.assertEqual(s.offset(0, 0), 2)
        self.assertEqual(s.offset(1, 1), 14)
        for ix in s.extent.indexes():
            self.assertEqual(s.index(s.offset(ix)), ix)

    def test_max_offset(self):
        self.assertEqual(Structure.of((3, 4)).max_offset(), 11)
        self.assertEqual(Structure.of((3, 4), channels=3).max_offset(), 33)
        self.assertEqual(Structure.of((3, 0)).max_offset(), -1)

    def test_check_buffer(self):
        s = Structure.of((3, 4), channels=3)
        s.check_buffer(36)
        s.check_buffer(34)
        with self.assertRaises(ValueError):
            s.check_buffer(33)
        Structure.of((0,)).check_buffer(0)


class TestDerived(TestCase):
    def test_sub(self):
        s = Structure.of((100, 200), channels=3)
        v = s.sub(Range(Index(0, 4), Extent(34, 32)))
        self.assertEqual(v.extent, Extent(34, 32))
        self.assertEqual(v.layout.start, Index(0, 12))
        for ix in [Index(0, 0), Index(5, 7), Index(33, 31)]:
            self.assertEqual(v.offset(ix), s.offset(ix + Index(0, 4)))
        with self.assertRaises(BoundsError):
            s.sub(Range(Index(90, 0), Extent(11, 1)))

    def test_transpose(self):
        s = Structure.of((3, 4))
        t = s.transpose()
        self.assertEqual(t.extent, Extent(4, 3))
        self.assertEqual(t.layout.stride, Stride(1, 4))
        for i, j in Range.of(s.extent):
            self.assertEqual(t.offset(j, i), s.offset(i, j))
        self.assertEqual(t.transpose(), s)
        self.assertEqual(Structure.of((2, 3, 4)).transpose(0, -1).extent, Extent(4, 3, 2))

    def test_strided(self):
        s = Structure.of((100, 200))
        v = s.strided(Stride(2, 2))
        self.assertEqual(v.extent, Extent(50, 100))
        self.assertEqual(v.layout.stride, Stride(400, 2))
        self.assertEqual(v.offset(3, 5), s.offset(6, 10))
        self.assertEqual(Structure.of((5, 0)).strided(Stride(2, 3)).extent, Extent(3, 0))

    def test_fix(self):
        s = Structure.of((2, 3, 4))
        p = s.fix(0, 1)
        self.assertEqual(p.extent, Extent(3, 4))
        for j, k in Range.of(p.extent):
            self.assertEqual(p.offset(j, k), s.offset(1, j, k))
        with self.assertRaises(BoundsError):
            s.fix(0, 2)
        with self.assertRaises(ValueError):
            Structure.of(5).fix(0, 0)

    def test_like_and_copy(self):
        s = Structure.of((10, 10)).transpose()
        self.assertEqual(s.like(), Structure.of((10, 10)))
        self.assertEqual(s.copy(Range(Index(2, 2), Extent(3, 4))), Structure.of((3, 4)))
        with self.assertRaises(BoundsError):
            s.copy(Range(Index(8, 8), Extent(3, 3)))

    def test_invertible(self):
        s = Structure.of((3, 4))
        self.assertTrue(s.is_invertible())
        self.assertTrue(s.is_canonical())
        self.assertFalse(s.transpose().is_invertible())
        self.assertFalse(s.transpose().is_canonical())


if __name__ == "__main__":
    main()
