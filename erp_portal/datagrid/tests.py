"""
Test suite for the table harness
Tests: search/filter/sort/paging, inline edit, reorder, row actions, saved layouts, API endpoints
"""
from decimal import Decimal

from django.core.cache import cache
from django.test import SimpleTestCase, TestCase
from rest_framework import status

from erp_portal.core.models import AuditLog
from erp_portal.core.test_utils import AuthenticatedAPIClient
from erp_portal.datagrid.models import GridLayout
from erp_portal.datagrid.table import (
    Column,
    DataTable,
    TableError,
    TableQuery,
    TableSettings,
    array_move,
)

COLUMNS = [
    {'key': 'id', 'kind': 'number'},
    {'key': 'name', 'header': 'Customer'},
    {'key': 'amount', 'kind': 'number', 'editable': True},
    {'key': 'dueDate', 'kind': 'date'},
    {'key': 'active', 'kind': 'boolean'},
    {'key': 'notes', 'hidden': True},
]

ROWS = [
    {'id': 1, 'name': 'Acme', 'amount': 100.5, 'dueDate': '2024-03-01', 'active': True, 'notes': 'priority'},
    {'id': 2, 'name': 'beta', 'amount': 20, 'dueDate': '2024-01-15', 'active': False, 'notes': ''},
    {'id': 3, 'name': 'Cargo', 'amount': None, 'dueDate': '2024-02-10', 'active': True, 'notes': 'acme related'},
    {'id': 4, 'name': 'delta', 'amount': 20, 'dueDate': None, 'active': True, 'notes': ''},
]


def ids(rows):
    return [row['id'] for row in rows]


class ColumnAndSettingsTests(SimpleTestCase):
    """Test column definitions and the settings bag"""

    def test_header_defaults_to_key(self):
        self.assertEqual(Column('amount').header, 'amount')
        self.assertEqual(Column.from_dict({'accessorKey': 'name', 'header': 'Customer'}).header, 'Customer')

    def test_unknown_kind_rejected(self):
        with self.assertRaises(TableError):
            Column('amount', kind='currency')

    def test_coerce_by_kind(self):
        self.assertEqual(Column('a', kind='number').coerce('12.50'), Decimal('12.50'))
        self.assertIs(Column('a', kind='boolean').coerce('no'), False)
        self.assertEqual(str(Column('a', kind='date').coerce('2024-03-01T10:00:00')), '2024-03-01')
        self.assertIsNone(Column('a', kind='number').coerce('  '))
        with self.assertRaises(TableError):
            Column('a', kind='number').coerce('abc')

    def test_page_size_options(self):
        self.assertEqual(TableSettings().page_size, 50)
        with self.assertRaises(TableError):
            TableSettings(page_size=25)

    def test_settings_from_camel_case(self):
        settings = TableSettings.from_dict({'pageSize': 100, 'enableInlineEdit': True})
        self.assertEqual(settings.page_size, 100)
        self.assertTrue(settings.enable_inline_edit)
        self.assertFalse(settings.enable_row_reorder)
        self.assertEqual(settings.as_dict()['pageSize'], 100)

    def test_duplicate_column_keys_rejected(self):
        with self.assertRaises(TableError):
            DataTable([{'key': 'id'}, {'key': 'id'}], [])

    def test_array_move(self):
        self.assertEqual(array_move(['a', 'b', 'c'], 0, 2), ['b', 'c', 'a'])
        with self.assertRaises(TableError):
            array_move(['a'], 0, 3)


class TableQueryTests(SimpleTestCase):
    """Test search, filters, sorting and paging"""

    def setUp(self):
        self.table = DataTable(COLUMNS, ROWS)

    def test_search_ignores_hidden_columns(self):
        self.assertEqual(ids(self.table.search(ROWS, 'ACME')), [1])

    def test_blank_search_returns_everything(self):
        self.assertEqual(ids(self.table.search(ROWS, '  ')), [1, 2, 3, 4])

    def test_text_filter_contains(self):
        self.assertEqual(ids(self.table.filter(ROWS, {'name': 'TA'})), [2, 4])

    def test_number_range_filter_skips_empty_values(self):
        self.assertEqual(ids(self.table.filter(ROWS, {'amount': {'min': 20, 'max': 50}})), [2, 4])

    def test_number_exact_filter(self):
        self.assertEqual(ids(self.table.filter(ROWS, {'amount': '100.50'})), [1])

    def test_boolean_filter(self):
        self.assertEqual(ids(self.table.filter(ROWS, {'active': 'false'})), [2])

    def test_date_range_filter(self):
        self.assertEqual(ids(self.table.filter(ROWS, {'dueDate': {'from': '2024-02-01'}})), [1, 3])

    def test_filters_disabled(self):
        table = DataTable(COLUMNS, ROWS, settings=TableSettings(enable_column_filters=False))
        with self.assertRaises(TableError):
            table.filter(ROWS, {'name': 'a'})

    def test_filter_on_unfilterable_column(self):
        table = DataTable([{'key': 'id', 'filterable': False}], ROWS)
        with self.assertRaises(TableError):
            table.filter(ROWS, {'id': 1})

    def test_sort_puts_empty_values_last(self):
        self.assertEqual(ids(self.table.sort(ROWS, [{'id': 'amount', 'desc': False}])), [2, 4, 1, 3])
        self.assertEqual(ids(self.table.sort(ROWS, [{'id': 'amount', 'desc': True}])), [1, 2, 4, 3])

    def test_multi_key_sort(self):
        sorting = [{'id': 'amount', 'desc': False}, {'id': 'name', 'desc': True}]
        self.assertEqual(ids(self.table.sort(ROWS, sorting)), [4, 2, 1, 3])

    def test_text_sort_is_case_insensitive(self):
        self.assertEqual(ids(self.table.sort(ROWS, [{'id': 'name'}])), [1, 2, 3, 4])

    def test_sort_on_unsortable_column(self):
        table = DataTable([{'key': 'id', 'sortable': False}], ROWS)
        with self.assertRaises(TableError):
            table.sort(ROWS, [{'id': 'id'}])

    def test_sort_unknown_column(self):
        with self.assertRaises(TableError):
            self.table.sort(ROWS, [{'id': 'missing'}])

    def test_unparseable_values_sort_after_typed_values(self):
        rows = [{'id': 1, 'amount': 10}, {'id': 2, 'amount': 'N/A'}, {'id': 3, 'amount': 5}, {'id': 4, 'amount': None}]
        self.assertEqual(ids(self.table.sort(rows, [{'id': 'amount'}])), [3, 1, 2, 4])
        self.assertEqual(ids(self.table.sort(rows, [{'id': 'amount', 'desc': True}])), [1, 3, 2, 4])

        flags = [{'id': 1, 'active': 'maybe'}, {'id': 2, 'active': True}, {'id': 3, 'active': False}]
        self.assertEqual(ids(self.table.sort(flags, [{'id': 'active'}])), [3, 2, 1])

    def test_search_matches_zero_and_false(self):
        rows = [{'id': 1, 'amount': 0, 'active': True}, {'id': 2, 'amount': 5, 'active': False}]
        self.assertEqual(ids(self.table.search(rows, '0')), [1])
        self.assertEqual(ids(self.table.search(rows, 'false')), [2])

    def test_usable_sorting_drops_stale_entries(self):
        table = DataTable([{'key': 'id', 'sortable': False}, {'key': 'amount', 'kind': 'number'}], ROWS)
        sorting = [{'id': 'oldCol'}, {'id': 'id'}, {'id': 'amount', 'desc': True}]
        self.assertEqual(table.usable_sorting(sorting), [{'id': 'amount', 'desc': True}])

        table = DataTable(COLUMNS, ROWS, settings=TableSettings(enable_sorting=False))
        self.assertEqual(table.usable_sorting([{'id': 'amount'}]), [])

    def test_paginate_clamps_page(self):
        rows = [{'id': number} for number in range(1, 13)]
        table = DataTable(COLUMNS, rows, settings=TableSettings(page_size=10))

        page = table.paginate(rows, page=2)
        self.assertEqual(ids(page.rows), [11, 12])
        self.assertEqual(page.total_pages, 2)

        self.assertEqual(table.paginate(rows, page=9).page, 2)
        self.assertEqual(table.paginate(rows, page=0).page, 1)
        self.assertEqual(table.paginate([], page=3).total_pages, 1)

    def test_paginate_rejects_odd_page_size(self):
        with self.assertRaises(TableError):
            self.table.paginate(ROWS, page_size=7)

    def test_query_runs_the_pipeline(self):
        query = TableQuery.from_dict({
            'search': 'a',
            'filters': {'active': True},
            'sorting': [{'id': 'name', 'desc': True}],
            'pageSize': 10,
        })
        page = self.table.query(query)
        self.assertEqual(ids(page.rows), [4, 3, 1])
        self.assertEqual(page.as_dict()['total'], 3)


class TableEditingTests(SimpleTestCase):
    """Test inline edit, reorder, layout and row actions"""

    def setUp(self):
        settings = TableSettings(enable_inline_edit=True, enable_row_reorder=True)
        self.table = DataTable(COLUMNS, ROWS, settings=settings)

    def test_edit_cell_coerces_value(self):
        row = self.table.edit_cell('2', 'amount', '35.5')
        self.assertEqual(row['amount'], Decimal('35.5'))
        self.assertEqual(self.table.rows[1]['amount'], Decimal('35.5'))
        # The caller's rows are untouched
        self.assertEqual(ROWS[1]['amount'], 20)

    def test_edit_cell_rejections(self):
        with self.assertRaises(TableError):
            self.table.edit_cell(2, 'name', 'Beta')
        with self.assertRaises(TableError):
            self.table.edit_cell(99, 'amount', 1)
        with self.assertRaises(TableError):
            self.table.edit_cell(2, 'amount', 'abc')

    def test_edit_cell_needs_inline_edit(self):
        with self.assertRaises(TableError):
            DataTable(COLUMNS, ROWS).edit_cell(2, 'amount', 1)

    def test_reorder_rows(self):
        self.assertEqual(ids(self.table.reorder_rows(0, 2)), [2, 3, 1, 4])
        with self.assertRaises(TableError):
            self.table.reorder_rows(0, 10)
        with self.assertRaises(TableError):
            DataTable(COLUMNS, ROWS).reorder_rows(0, 1)

    def test_move_column(self):
        self.assertEqual(
            self.table.move_column('active', 0),
            ['active', 'id', 'name', 'amount', 'dueDate', 'notes'],
        )

    def test_visible_columns_follow_layout(self):
        self.assertNotIn('notes', [column.key for column in self.table.visible_columns()])

        self.table.apply_layout(
            column_visibility={'notes': True, 'name': False, 'ghost': True},
            column_sizing={'amount': 180},
            column_order=['amount', 'ghost', 'notes'],
        )
        self.assertEqual(
            [column.key for column in self.table.visible_columns()],
            ['amount', 'notes', 'id', 'dueDate', 'active'],
        )
        self.assertEqual(self.table.column_sizing, {'amount': 180})

    def test_row_actions_filtered_by_permissions(self):
        actions = self.table.row_actions(
            ROWS[0],
            {'canView': True, 'canDelete': True, 'canApprove': False},
            [{'action': 'approve', 'permission': 'canApprove'}, {'action': 'print', 'label': 'Print'}],
        )
        self.assertEqual([action['action'] for action in actions], ['view', 'delete', 'print'])
        self.assertEqual(actions[0]['rowId'], 1)


class GridLayoutAPITests(TestCase):
    """Test saved grid layouts"""

    url = '/api/v1/datagrid/layouts/1/2/invoices/'

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_identity(user_id=7, company_id=3)

    def test_unsaved_layout_returns_defaults(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIsNone(response.data['id'])
        self.assertEqual(response.data['page_size'], 50)
        self.assertEqual(response.data['sort'], [])

    def test_save_and_update_layout(self):
        payload = {'sort': [{'id': 'amount', 'desc': True}], 'column_visibility': {'name': False}, 'page_size': 10}
        response = self.client.put(self.url, payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(AuditLog.objects.filter(action='layout_update', company_id='3').count(), 1)

        self.assertEqual(self.client.get(self.url).data['page_size'], 10)

        response = self.client.put(self.url, {'page_size': 100}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        # The cached copy is dropped on save
        data = self.client.get(self.url).data
        self.assertEqual(data['page_size'], 100)
        self.assertEqual(data['sort'], [{'id': 'amount', 'desc': True}])
        self.assertEqual(GridLayout.objects.count(), 1)

    def test_layouts_are_per_user(self):
        GridLayout.objects.create(
            user_id='7', company_id='3', module_id=1, transaction_id=2, grid_name='invoices', page_size=500
        )
        other = AuthenticatedAPIClient()
        other.authenticate_identity(user_id=8, company_id=3)
        self.assertEqual(other.get(self.url).data['page_size'], 50)
        self.assertEqual(self.client.get(self.url).data['page_size'], 500)

    def test_invalid_layout_rejected(self):
        response = self.client.put(self.url, {'sort': [{'desc': True}]}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('sort', response.data)

        response = self.client.put(self.url, {'page_size': 25}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.put(self.url, {'column_sizing': {'name': -5}}, format='json')
        self.assertIn('column_sizing', response.data)

    def test_reset_layout(self):
        self.client.put(self.url, {'page_size': 10}, format='json')
        self.client.get(self.url)

        response = self.client.delete(self.url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(AuditLog.objects.filter(action='layout_reset').count(), 1)
        self.assertEqual(self.client.get(self.url).data['page_size'], 50)

    def test_reset_without_layout_does_not_audit(self):
        response = self.client.delete(self.url)
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(AuditLog.objects.filter(action='layout_reset').exists())

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class DataTableAPITests(TestCase):
    """Test query, edit and reorder endpoints"""

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_identity(user_id=7, company_id=3)

    def test_query(self):
        payload = {
            'columns': COLUMNS,
            'rows': ROWS,
            'sorting': [{'id': 'amount', 'desc': False}],
            'pageSize': 10,
        }
        response = self.client.post('/api/v1/datagrid/query/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(ids(response.data['rows']), [2, 4, 1, 3])
        self.assertEqual(response.data['pageSize'], 10)
        self.assertEqual(response.data['columns'], ['id', 'name', 'amount', 'dueDate', 'active'])
        self.assertNotIn('rowActions', response.data)

    def test_query_applies_saved_layout(self):
        GridLayout.objects.create(
            user_id='7', company_id='3', module_id=1, transaction_id=2, grid_name='invoices',
            sort=[{'id': 'amount', 'desc': True}], column_visibility={'name': False}, page_size=10,
        )
        payload = {'columns': COLUMNS, 'rows': ROWS, 'moduleId': 1, 'transactionId': 2, 'gridName': 'invoices'}
        response = self.client.post('/api/v1/datagrid/query/', payload, format='json')
        self.assertEqual(ids(response.data['rows']), [1, 2, 4, 3])
        self.assertEqual(response.data['pageSize'], 10)
        self.assertEqual(response.data['columns'], ['id', 'amount', 'dueDate', 'active'])

    def test_query_sorts_mixed_number_column(self):
        rows = [{'id': 1, 'amount': 10}, {'id': 2, 'amount': 'N/A'}, {'id': 3, 'amount': 5}]
        payload = {'columns': COLUMNS, 'rows': rows, 'sorting': [{'id': 'amount'}]}
        response = self.client.post('/api/v1/datagrid/query/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(ids(response.data['rows']), [3, 1, 2])

    def test_query_ignores_stale_layout_sort(self):
        GridLayout.objects.create(
            user_id='7', company_id='3', module_id=1, transaction_id=2, grid_name='invoices',
            sort=[{'id': 'oldCol'}, {'id': 'amount', 'desc': True}],
        )
        payload = {'columns': COLUMNS, 'rows': ROWS, 'moduleId': 1, 'transactionId': 2, 'gridName': 'invoices'}
        response = self.client.post('/api/v1/datagrid/query/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(ids(response.data['rows']), [1, 2, 4, 3])

        payload['settings'] = {'enableSorting': False}
        response = self.client.post('/api/v1/datagrid/query/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(ids(response.data['rows']), [1, 2, 3, 4])

    def test_query_with_row_actions(self):
        payload = {
            'columns': COLUMNS,
            'rows': ROWS[:1],
            'permissions': {'canView': True, 'canEdit': True},
        }
        response = self.client.post('/api/v1/datagrid/query/', payload, format='json')
        self.assertEqual([action['action'] for action in response.data['rowActions']['1']], ['view', 'edit'])

    def test_layout_reference_must_be_complete(self):
        payload = {'columns': COLUMNS, 'rows': ROWS, 'moduleId': 1}
        response = self.client.post('/api/v1/datagrid/query/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_table_errors_use_error_envelope(self):
        payload = {'columns': COLUMNS, 'rows': ROWS, 'settings': {'pageSize': 25}}
        response = self.client.post('/api/v1/datagrid/query/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('error', response.data)

    def test_edit_cell(self):
        payload = {
            'columns': COLUMNS,
            'rows': ROWS,
            'settings': {'enableInlineEdit': True},
            'rowId': '3',
            'key': 'amount',
            'value': '42.10',
        }
        response = self.client.post('/api/v1/datagrid/edit/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['row']['amount'], Decimal('42.10'))
        self.assertEqual(response.data['rows'][2]['amount'], Decimal('42.10'))

    def test_edit_cell_disabled(self):
        payload = {'columns': COLUMNS, 'rows': ROWS, 'rowId': '3', 'key': 'amount', 'value': 1}
        response = self.client.post('/api/v1/datagrid/edit/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Inline editing is disabled for this table')

    def test_reorder_rows_and_columns(self):
        payload = {
            'columns': COLUMNS,
            'rows': ROWS,
            'settings': {'enableRowReorder': True},
            'fromIndex': 3,
            'toIndex': 0,
        }
        response = self.client.post('/api/v1/datagrid/reorder/', payload, format='json')
        self.assertEqual(ids(response.data['rows']), [4, 1, 2, 3])

        payload = {'columns': COLUMNS, 'rows': ROWS, 'column': 'notes', 'toIndex': 1}
        response = self.client.post('/api/v1/datagrid/reorder/', payload, format='json')
        self.assertEqual(response.data['columnOrder'], ['id', 'notes', 'name', 'amount', 'dueDate', 'active'])

    def test_reorder_needs_a_source(self):
        payload = {'columns': COLUMNS, 'rows': ROWS, 'toIndex': 1}
        response = self.client.post('/api/v1/datagrid/reorder/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
