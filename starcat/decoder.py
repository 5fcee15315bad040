"""Fixed-width scalar decoding from raw catalog bytes.

Every value in a catalog is one of four scalar kinds. Decoding goes through
numpy dtypes carrying an explicit byte order, so floats are a reinterpretation
of the stored IEEE-754 bits and never a numeric conversion.
"""
from enum import Enum

import numpy as np


class ByteOrder(Enum):
    LITTLE = "<"
    BIG = ">"

    @property
    def opposite(self) -> "ByteOrder":
        return ByteOrder.BIG if self is ByteOrder.LITTLE else ByteOrder.LITTLE

    @property
    def label(self) -> str:
        return "little-endian" if self is ByteOrder.LITTLE else "big-endian"


class ScalarKind(Enum):
    INT16 = ("i", 2)
    INT32 = ("i", 4)
    FLOAT32 = ("f", 4)
    FLOAT64 = ("f", 8)

    def __init__(self, code: str, width: int):
        self.code = code
        self.width = width


def dtype_for(kind: ScalarKind, byte_order: ByteOrder) -> np.dtype:
    """numpy dtype for `kind` stored in `byte_order`, e.g. '>f8'."""
    return np.dtype(f"{byte_order.value}{kind.code}{kind.width}")


def decode(data: bytes, offset: int, kind: ScalarKind, byte_order: ByteOrder) -> int | float:
    """Decode one scalar of `kind` starting at `offset`.

    The caller guarantees that `offset + kind.width` lies inside `data`.
    Integers come back as int, floats as (double precision) float.
    """
    value = np.frombuffer(data, dtype=dtype_for(kind, byte_order), count=1, offset=offset)[0]
    return value.item()
