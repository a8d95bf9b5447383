from .loaders import RowLoader, RowRecords, load_rows, load_rows_async, read_delimited
from .normalize import coerce_1d_numeric, delimited_source_separator, object_form_columns, row_column

__all__ = [
    "RowLoader",
    "RowRecords",
    "coerce_1d_numeric",
    "delimited_source_separator",
    "load_rows",
    "load_rows_async",
    "object_form_columns",
    "read_delimited",
    "row_column",
]
