"""
Column Builders
===============

Append-only builders for fixed-size-list arrow columns.

Each builder accumulates one value per row and produces a
`FixedSizeListArray` on finish(). With list_size=1 every row holds a
single-element list, which is the layout used for per-frame metadata.

Design Rules:
    - append() validates before mutating (a rejected value leaves the
      builder untouched)
    - capacity is a sizing hint only, never a limit
    - finish() hands the values over and resets the builder
"""

from typing import Any, List, Sequence, Union

import numpy as np
import pyarrow as pa


class FixedSizeListBuilder:
    """
    Builder for a `fixed_size_list<value_type>[list_size]` column.

    Attributes:
        value_type: Arrow type of the list elements
        list_size: Number of elements per row
        capacity: Expected row count (hint)

    Example:
        height = FixedSizeListBuilder(pa.uint32(), capacity=100)
        height.append(480)
        column = height.finish()
    """

    def __init__(
        self,
        value_type: pa.DataType,
        list_size: int = 1,
        capacity: int = 0,
    ) -> None:
        """
        Initialize builder.

        Args:
            value_type: Arrow type of the list elements. Integer, floating
                point and string types are supported.
            list_size: Elements per row. Must be >= 1.
            capacity: Expected number of rows. Must be >= 0.
        """
        if list_size < 1:
            raise ValueError("list_size must be >= 1")
        if capacity < 0:
            raise ValueError("capacity must be >= 0")
        if not (
            pa.types.is_integer(value_type)
            or pa.types.is_floating(value_type)
            or pa.types.is_string(value_type)
        ):
            raise ValueError(f"Unsupported value type: {value_type}")

        self.value_type = value_type
        self.list_size = list_size
        self.capacity = capacity
        self._values: List[Any] = []

    def __len__(self) -> int:
        """Number of rows appended so far."""
        return len(self._values) // self.list_size

    def append(self, value: Union[Any, Sequence[Any]]) -> None:
        """
        Append one row.

        Args:
            value: A scalar when list_size is 1, otherwise a sequence of
                exactly list_size elements

        Raises:
            ValueError: If the row has the wrong size or a value does not
                fit value_type. The builder is unchanged in that case.
        """
        row = [value] if self.list_size == 1 else list(value)
        if len(row) != self.list_size:
            raise ValueError(
                f"Expected {self.list_size} values per row, got {len(row)}"
            )
        for item in row:
            self._check(item)

        self._values.extend(row)

    def _check(self, item: Any) -> None:
        vt = self.value_type
        if pa.types.is_string(vt):
            if not isinstance(item, str):
                raise ValueError(f"Expected str, got {type(item).__name__}")
            return

        if pa.types.is_integer(vt):
            if isinstance(item, bool) or not isinstance(item, (int, np.integer)):
                raise ValueError(f"Expected int, got {type(item).__name__}")
            info = np.iinfo(vt.to_pandas_dtype())
            if not info.min <= item <= info.max:
                raise ValueError(f"Value {item} out of range for {vt}")
            return

        if not isinstance(item, (int, float, np.number)) or isinstance(item, bool):
            raise ValueError(f"Expected number, got {type(item).__name__}")

    def finish(self) -> pa.FixedSizeListArray:
        """
        Build the column and reset the builder.

        Returns:
            FixedSizeListArray with len(self) rows
        """
        values = self._values
        self._values = []

        if pa.types.is_string(self.value_type):
            flat = pa.array(values, type=self.value_type)
        else:
            flat = pa.array(
                np.asarray(values, dtype=self.value_type.to_pandas_dtype()),
                type=self.value_type,
            )
        return pa.FixedSizeListArray.from_arrays(flat, self.list_size)
