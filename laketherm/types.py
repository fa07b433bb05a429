"""Typing definitions for laketherm."""

from typing import Any, TypeVar

import numpy as np

Shape = TypeVar("Shape", bound=tuple[int, ...])

ArrayFloat32 = np.ndarray[tuple[int], np.dtype[np.float32]]
ArrayFloat64 = np.ndarray[tuple[int], np.dtype[np.float64]]
ArrayFloat = ArrayFloat32 | ArrayFloat64

ArrayInt32 = np.ndarray[tuple[int], np.dtype[np.int32]]
ArrayInt64 = np.ndarray[tuple[int], np.dtype[np.int64]]
ArrayInt = ArrayInt32 | ArrayInt64

ArrayBool = np.ndarray[tuple[int], np.dtype[np.bool_]]

Array = np.ndarray[tuple[int], Any]  # General array type

TwoDArrayFloat64 = np.ndarray[tuple[int, int], np.dtype[np.float64]]
TwoDArrayInt32 = np.ndarray[tuple[int, int], np.dtype[np.int32]]
