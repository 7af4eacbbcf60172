from collections.abc import Iterable, Mapping
from typing import Any

from tabulate import tabulate


def _format_cell(cell: Mapping[str, Any], column: str) -> Any:
    # example: for column 'metadata.name'
    # cell = item['metadata']['name']
    raw_data: Any = cell
    for token in column.split("."):
        if not isinstance(raw_data, Mapping):
            return ""
        raw_data = raw_data.get(token) or {}
    if raw_data == {}:
        return ""
    if isinstance(raw_data, list):
        return "\n".join(str(i) for i in raw_data)
    return raw_data


def format_table(
    content: Iterable[Mapping[str, Any]],
    columns: Iterable[str],
    table_format: str = "simple",
) -> str:
    columns = list(columns)
    headers = [column.upper() for column in columns]
    table_data = [[_format_cell(item, column) for column in columns] for item in content]
    return tabulate(table_data, headers=headers, tablefmt=table_format)
