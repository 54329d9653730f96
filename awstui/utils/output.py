"""Output formatting utilities for aws-tui"""

import json
import yaml
import click
from typing import Any, Dict, List, Optional, Union
from datetime import datetime

MAX_CELL_WIDTH = 50


def _to_plain(data: Any) -> Any:
    """Convert datetimes so YAML output stays readable"""
    if isinstance(data, datetime):
        return data.isoformat()
    if isinstance(data, dict):
        return {k: _to_plain(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [_to_plain(v) for v in data]
    return data


def _cell(value: Any) -> str:
    if value is None or value == '':
        return '-'
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, bool):
        return 'yes' if value else 'no'
    if isinstance(value, (list, tuple)):
        return ', '.join(str(v) for v in value) or '-'
    return str(value)[:MAX_CELL_WIDTH]


class OutputFormatter:
    """Format output in different formats (table, json, yaml)"""

    def __init__(self, format: str = 'table'):
        self.format = format

    def output(self, data: Any, title: Optional[str] = None, headers: Optional[List[str]] = None):
        """Output data in the configured format"""
        if self.format == 'json':
            click.echo(json.dumps(data, indent=2, default=str))
        elif self.format == 'yaml':
            click.echo(yaml.safe_dump(_to_plain(data), default_flow_style=False, allow_unicode=True))
        else:
            self._output_table(data, title, headers)

    def _output_table(self, data: Any, title: Optional[str] = None, headers: Optional[List[str]] = None):
        if title:
            click.echo(f"\n{title}")
            click.echo("=" * len(title))

        if isinstance(data, dict):
            self._print_dict_table(data)
        elif isinstance(data, list):
            if data and isinstance(data[0], dict):
                self._print_list_table(data, headers)
            elif data:
                for item in data:
                    click.echo(f"  - {item}")
            else:
                click.echo("  (no data)")
        else:
            click.echo(data)

    def _print_dict_table(self, data: Dict[str, Any], indent: int = 0):
        """Print dictionary as key-value table"""
        max_key_len = max(len(str(k)) for k in data.keys()) if data else 0

        for key, value in data.items():
            key_str = str(key).ljust(max_key_len)
            pad = '  ' * indent
            if isinstance(value, dict):
                click.echo(f"{pad}{key_str}:")
                self._print_dict_table(value, indent + 1)
            elif isinstance(value, list) and value and isinstance(value[0], dict):
                click.echo(f"{pad}{key_str}:")
                for item in value:
                    click.echo(f"{'  ' * (indent + 1)}-")
                    self._print_dict_table(item, indent + 2)
            else:
                click.echo(f"{pad}{key_str}: {_cell(value)}")

    def _print_list_table(self, data: List[Dict], headers: Optional[List[str]] = None):
        """Print list of dicts as table"""
        columns = headers or list(data[0].keys())
        rows = [[_cell(row.get(col)) for col in columns] for row in data]

        widths = [
            max([len(col)] + [len(row[i]) for row in rows])
            for i, col in enumerate(columns)
        ]

        click.echo("  " + "  ".join(col.upper().ljust(w) for col, w in zip(columns, widths)))
        click.echo("  " + "  ".join("-" * w for w in widths))
        for row in rows:
            click.echo("  " + "  ".join(cell.ljust(w) for cell, w in zip(row, widths)))


def format_datetime(dt: Union[datetime, str, None]) -> str:
    """Format datetime for display"""
    if dt is None:
        return '-'
    if isinstance(dt, str):
        try:
            dt = datetime.fromisoformat(dt.replace('Z', '+00:00'))
        except ValueError:
            return dt

    return dt.strftime('%Y-%m-%d %H:%M:%S')


def format_size(size_bytes: Optional[float]) -> str:
    """Format bytes to human readable size"""
    if size_bytes is None:
        return '-'
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size_bytes < 1024:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024
    return f"{size_bytes:.1f} PB"
