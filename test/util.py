# Copyright (c) Facebook, Inc. and its affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.
from typing import List

#
# shared test helpers
#


# interleaved object store: element i of channel c is tagged
# "v_i" for c == 0 and "v_i_c{c + 1}" otherwise
def tagged(n: int, channels: int = 1) -> List[str]:
    return [tag(i, c) for i in range(n) for c in range(channels)]


def tag(i: int, c: int = 0) -> str:
    return f"v_{i}" if c == 0 else f"v_{i}_c{c + 1}"
