"""
Generic table harness used by list screens.

A DataTable combines column definitions, row data and a settings bag. It can
search, filter, sort and page the rows, edit single cells, reorder rows and
columns, and list the row actions a caller is allowed to use. Edited or
reordered rows are handed back to the caller; nothing here persists rows.
"""
import math
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

COLUMN_KINDS = ('text', 'number', 'date', 'boolean')
PAGE_SIZE_OPTIONS = (10, 50, 100, 500)
DEFAULT_PAGE_SIZE = 50

TRUE_VALUES = {'true', '1', 'yes', 'y', 'on'}
FALSE_VALUES = {'false', '0', 'no', 'n', 'off'}


class TableError(ValueError):
    """Raised when the table is asked for something its settings or columns do not allow"""


def array_move(items, from_index, to_index):
    """Return a copy of ``items`` with one element moved"""
    size = len(items)
    if not 0 <= from_index < size or not 0 <= to_index < size:
        raise TableError(f"Cannot move position {from_index} to {to_index} in a list of {size}")
    moved = list(items)
    moved.insert(to_index, moved.pop(from_index))
    return moved


def is_empty(value):
    return value is None or (isinstance(value, str) and not value.strip())


def to_bool(value):
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float, Decimal)):
        return value != 0
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise TableError(f"'{value}' is not a boolean")


def to_number(value):
    if isinstance(value, bool):
        raise TableError(f"'{value}' is not a number")
    try:
        number = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise TableError(f"'{value}' is not a number")
    if not number.is_finite():
        raise TableError(f"'{value}' is not a number")
    return number


def to_date(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        raise TableError(f"'{value}' is not an ISO date")


@dataclass
class Column:
    key: str
    header: str = ''
    kind: str = 'text'
    sortable: bool = True
    filterable: bool = True
    editable: bool = False
    hidden: bool = False
    width: Optional[int] = None

    def __post_init__(self):
        if self.kind not in COLUMN_KINDS:
            raise TableError(f"Unknown column kind '{self.kind}' for '{self.key}'")
        if not self.header:
            self.header = self.key

    @classmethod
    def from_dict(cls, data):
        return cls(
            key=data.get('key') or data.get('accessorKey'),
            header=data.get('header', ''),
            kind=data.get('kind') or data.get('type') or 'text',
            sortable=data.get('sortable', data.get('enableSorting', True)),
            filterable=data.get('filterable', data.get('enableColumnFilter', True)),
            editable=data.get('editable', False),
            hidden=data.get('hidden', False),
            width=data.get('width', data.get('size')),
        )

    def coerce(self, value):
        """Convert a raw value to this column's kind"""
        if is_empty(value):
            return None
        if self.kind == 'number':
            return to_number(value)
        if self.kind == 'boolean':
            return to_bool(value)
        if self.kind == 'date':
            return to_date(value)
        return str(value)

    def sort_value(self, value):
        """(0, typed value) when the value fits the column kind, else (1, text)"""
        if self.kind == 'text':
            return (0, str(value).lower())
        try:
            return (0, self.coerce(value))
        except TableError:
            return (1, str(value).lower())


@dataclass
class TableSettings:
    page_size: int = DEFAULT_PAGE_SIZE
    enable_sorting: bool = True
    enable_column_filters: bool = True
    enable_column_resizing: bool = True
    enable_column_visibility: bool = True
    enable_row_reorder: bool = False
    enable_column_reorder: bool = True
    enable_inline_edit: bool = False
    enable_row_selection: bool = False

    FIELD_MAP = {
        'pageSize': 'page_size',
        'enableSorting': 'enable_sorting',
        'enableColumnFilters': 'enable_column_filters',
        'enableColumnResizing': 'enable_column_resizing',
        'enableColumnVisibility': 'enable_column_visibility',
        'enableRowReorder': 'enable_row_reorder',
        'enableColumnReorder': 'enable_column_reorder',
        'enableInlineEdit': 'enable_inline_edit',
        'enableRowSelection': 'enable_row_selection',
    }

    def __post_init__(self):
        if self.page_size not in PAGE_SIZE_OPTIONS:
            raise TableError(
                f"Page size {self.page_size} is not one of {', '.join(str(size) for size in PAGE_SIZE_OPTIONS)}"
            )

    @classmethod
    def from_dict(cls, data=None):
        data = data or {}
        return cls(**{attr: data[camel] for camel, attr in cls.FIELD_MAP.items() if camel in data})

    def as_dict(self):
        return {camel: getattr(self, attr) for camel, attr in self.FIELD_MAP.items()}


@dataclass
class TableQuery:
    search: str = ''
    sorting: List[Dict[str, Any]] = field(default_factory=list)
    filters: Dict[str, Any] = field(default_factory=dict)
    page: int = 1
    page_size: Optional[int] = None

    @classmethod
    def from_dict(cls, data=None):
        data = data or {}
        return cls(
            search=data.get('search') or '',
            sorting=list(data.get('sorting') or []),
            filters=dict(data.get('filters') or {}),
            page=int(data.get('page') or 1),
            page_size=data.get('pageSize'),
        )


@dataclass
class TablePage:
    rows: List[Dict[str, Any]]
    total: int
    page: int
    page_size: int
    total_pages: int

    def as_dict(self):
        return {
            'rows': self.rows,
            'total': self.total,
            'page': self.page,
            'pageSize': self.page_size,
            'totalPages': self.total_pages,
        }


DEFAULT_ACTIONS = (
    ('view', 'View', 'canView'),
    ('edit', 'Edit', 'canEdit'),
    ('delete', 'Delete', 'canDelete'),
)


class DataTable:
    """Columns + rows + settings, with the operations list screens need"""

    def __init__(self, columns, rows, settings=None, accessor_id='id'):
        self.columns = [column if isinstance(column, Column) else Column.from_dict(column) for column in columns]
        keys = [column.key for column in self.columns]
        if len(set(keys)) != len(keys):
            raise TableError('Column keys must be unique')
        self._by_key = {column.key: column for column in self.columns}
        self.rows = list(rows)
        self.settings = settings or TableSettings()
        self.accessor_id = accessor_id
        self.column_order = keys
        self.column_visibility = {column.key: not column.hidden for column in self.columns}
        self.column_sizing = {column.key: column.width for column in self.columns if column.width}

    def column(self, key):
        try:
            return self._by_key[key]
        except KeyError:
            raise TableError(f"Unknown column '{key}'")

    def visible_columns(self):
        return [self._by_key[key] for key in self.column_order if self.column_visibility.get(key, True)]

    def apply_layout(self, column_visibility=None, column_sizing=None, column_order=None):
        """Apply a saved layout, ignoring columns that no longer exist"""
        if column_visibility and self.settings.enable_column_visibility:
            for key, visible in column_visibility.items():
                if key in self._by_key:
                    self.column_visibility[key] = bool(visible)
        if column_sizing and self.settings.enable_column_resizing:
            for key, width in column_sizing.items():
                if key in self._by_key and width:
                    self.column_sizing[key] = int(width)
        if column_order and self.settings.enable_column_reorder:
            known = [key for key in column_order if key in self._by_key]
            missing = [key for key in self.column_order if key not in known]
            self.column_order = known + missing

    def usable_sorting(self, sorting):
        """Saved sort entries that still name a sortable column; none when sorting is disabled"""
        if not self.settings.enable_sorting:
            return []
        usable = []
        for order in sorting or []:
            if not isinstance(order, dict):
                continue
            column = self._by_key.get(order.get('id') or order.get('key'))
            if column is not None and column.sortable:
                usable.append(order)
        return usable

    # Querying

    def search(self, rows, term):
        """Case-insensitive match over visible, filterable columns"""
        term = (term or '').strip().lower()
        if not term:
            return list(rows)
        columns = [column for column in self.visible_columns() if column.filterable]
        return [
            row for row in rows
            if any(term in self._search_text(row.get(column.key)) for column in columns)
        ]

    @staticmethod
    def _search_text(value):
        # 0 and False are searchable values
        return '' if value is None else str(value).lower()

    def _matches(self, column, value, criterion):
        if column.kind == 'text':
            return str(criterion).lower() in self._search_text(value)

        if column.kind in ('number', 'date'):
            convert = to_number if column.kind == 'number' else to_date
            if is_empty(value):
                return False
            current = convert(value)
            if isinstance(criterion, dict):
                low = criterion.get('min', criterion.get('from'))
                high = criterion.get('max', criterion.get('to'))
                if not is_empty(low) and current < convert(low):
                    return False
                if not is_empty(high) and current > convert(high):
                    return False
                return True
            return current == convert(criterion)

        if is_empty(value):
            return False
        return to_bool(value) == to_bool(criterion)

    def filter(self, rows, filters):
        """Per-column filters: text contains, number/date exact or range, boolean"""
        filters = {key: value for key, value in (filters or {}).items() if not is_empty(value)}
        if not filters:
            return list(rows)
        if not self.settings.enable_column_filters:
            raise TableError('Column filters are disabled for this table')

        for key in filters:
            if not self.column(key).filterable:
                raise TableError(f"Column '{key}' is not filterable")

        return [
            row for row in rows
            if all(self._matches(self.column(key), row.get(key), criterion) for key, criterion in filters.items())
        ]

    def sort(self, rows, sorting):
        """Stable multi-key sort; unparseable values go after typed ones, empty values last"""
        rows = list(rows)
        if not sorting:
            return rows
        if not self.settings.enable_sorting:
            raise TableError('Sorting is disabled for this table')

        for order in reversed(sorting):
            key = order.get('id') or order.get('key')
            column = self.column(key)
            if not column.sortable:
                raise TableError(f"Column '{key}' is not sortable")
            keyed = [(column.sort_value(row.get(key)), row) for row in rows if not is_empty(row.get(key))]
            empty = [row for row in rows if is_empty(row.get(key))]
            keyed.sort(key=lambda pair: pair[0], reverse=bool(order.get('desc')))
            typed = [row for sort_key, row in keyed if sort_key[0] == 0]
            untyped = [row for sort_key, row in keyed if sort_key[0] == 1]
            rows = typed + untyped + empty
        return rows

    def paginate(self, rows, page=1, page_size=None):
        page_size = int(page_size or self.settings.page_size)
        if page_size not in PAGE_SIZE_OPTIONS:
            raise TableError(f"Page size {page_size} is not allowed")
        total = len(rows)
        total_pages = max(1, math.ceil(total / page_size))
        page = min(max(int(page or 1), 1), total_pages)
        start = (page - 1) * page_size
        return TablePage(
            rows=list(rows[start:start + page_size]),
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
        )

    def query(self, query=None):
        query = query or TableQuery()
        rows = self.search(self.rows, query.search)
        rows = self.filter(rows, query.filters)
        rows = self.sort(rows, query.sorting)
        return self.paginate(rows, query.page, query.page_size)

    # Editing

    def _row_index(self, row_id):
        for index, row in enumerate(self.rows):
            if str(row.get(self.accessor_id)) == str(row_id):
                return index
        raise TableError(f"No row with {self.accessor_id} '{row_id}'")

    def edit_cell(self, row_id, key, value):
        """Set one cell, coerced to the column kind; returns the updated row"""
        if not self.settings.enable_inline_edit:
            raise TableError('Inline editing is disabled for this table')
        column = self.column(key)
        if not column.editable:
            raise TableError(f"Column '{key}' is not editable")

        index = self._row_index(row_id)
        row = dict(self.rows[index])
        row[key] = column.coerce(value)
        self.rows[index] = row
        return row

    def reorder_rows(self, from_index, to_index):
        if not self.settings.enable_row_reorder:
            raise TableError('Row reordering is disabled for this table')
        self.rows = array_move(self.rows, from_index, to_index)
        return self.rows

    def move_column(self, key, to_index):
        if not self.settings.enable_column_reorder:
            raise TableError('Column reordering is disabled for this table')
        self.column(key)
        self.column_order = array_move(self.column_order, self.column_order.index(key), to_index)
        return self.column_order

    def row_actions(self, row, permissions=None, custom_actions=None):
        """View/edit/delete plus custom actions, filtered by the caller's permissions"""
        permissions = permissions or {}
        row_id = row.get(self.accessor_id)
        actions = [
            {'action': action, 'label': label, 'rowId': row_id}
            for action, label, permission in DEFAULT_ACTIONS
            if permissions.get(permission)
        ]
        for custom in custom_actions or []:
            permission = custom.get('permission')
            if permission and not permissions.get(permission):
                continue
            actions.append({'action': custom['action'], 'label': custom.get('label', custom['action']), 'rowId': row_id})
        return actions
