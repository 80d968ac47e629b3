"""The /backend service, exercised through Flask's test client."""

from spendwise import db
from spendwise.server import create_app


def _client(tmp_path):
    db_path = tmp_path / 'spendwise.db'
    app = create_app(db_path)
    app.config['TESTING'] = True
    return app.test_client(), db_path


def _post(client, action, **fields):
    return client.post('/backend', query_string={'action': action}, data=fields).get_json()


def _get(client, action, **params):
    return client.get('/backend', query_string={'action': action, **params}).get_json()


def test_empty_database(tmp_path):
    client, _ = _client(tmp_path)
    assert _get(client, 'get-data') == {'status': 'success', 'income': 0.0, 'expenses': []}


def test_income_keeps_latest_value(tmp_path):
    client, _ = _client(tmp_path)
    assert _post(client, 'set-income', amount='4000')['status'] == 'success'
    assert _post(client, 'set-income', amount='5000')['status'] == 'success'
    assert _get(client, 'get-data')['income'] == 5000.0

    assert _post(client, 'set-income', amount='0')['status'] == 'error'
    assert _post(client, 'set-income', amount='lots')['status'] == 'error'
    assert _get(client, 'get-data')['income'] == 5000.0

    assert _post(client, 'reset-income')['status'] == 'success'
    assert _get(client, 'get-data')['income'] == 0.0


def test_add_edit_delete_expense(tmp_path):
    client, db_path = _client(tmp_path)
    added = _post(client, 'add-expense', name='Lunch', amount='200', category='food',
                  timestamp='2024-03-05T13:00:00')
    assert added['status'] == 'success'
    expense_id = added['id']

    [row] = _get(client, 'get-data')['expenses']
    assert row == {'id': expense_id, 'name': 'Lunch', 'amount': 200.0, 'category': 'Food',
                   'timestamp': '2024-03-05T13:00:00'}

    edited = _post(client, 'edit-expense', id=str(expense_id), name='Team lunch', amount='260', category='Food')
    assert edited == {'status': 'success'}
    assert _get(client, 'get-data')['expenses'][0]['amount'] == 260.0

    assert _post(client, 'delete-expense', id=str(expense_id)) == {'status': 'success'}
    assert db.count_expenses(db_path) == 0


def test_add_expense_rejects_invalid_input(tmp_path):
    client, db_path = _client(tmp_path)
    assert _post(client, 'add-expense', name='', amount='10', category='Food')['status'] == 'error'
    assert _post(client, 'add-expense', name='Tea', amount='-1', category='Food')['status'] == 'error'
    assert _post(client, 'add-expense', name='Tea', amount='10', category='Snacks')['status'] == 'error'
    assert _post(client, 'add-expense', name='Tea', amount='10', category='Food',
                 timestamp='not-a-date')['status'] == 'error'
    assert db.count_expenses(db_path) == 0


def test_delete_requires_positive_id(tmp_path):
    client, _ = _client(tmp_path)
    for bad in ('0', '-3', 'abc', ''):
        assert _post(client, 'delete-expense', id=bad) == {'status': 'error', 'message': 'Invalid ID'}
    assert _post(client, 'delete-expense', id='42') == {'status': 'error', 'message': 'Expense not found'}


def test_edit_unknown_expense(tmp_path):
    client, _ = _client(tmp_path)
    result = _post(client, 'edit-expense', id='7', name='X', amount='5', category='Other')
    assert result == {'status': 'error', 'message': 'Expense not found'}


def test_get_expenses_filters_by_month(tmp_path):
    client, _ = _client(tmp_path)
    _post(client, 'add-expense', name='Feb rent', amount='9000', category='Bills', timestamp='2024-02-01T10:00:00')
    _post(client, 'add-expense', name='Mar rent', amount='9000', category='Bills', timestamp='2024-03-01T10:00:00')

    march = _get(client, 'get-expenses', month='2024-03')
    assert [e['name'] for e in march['expenses']] == ['Mar rent']
    assert len(_get(client, 'get-expenses')['expenses']) == 2
    assert _get(client, 'get-expenses', month='March')['status'] == 'error'


def test_unknown_action_does_not_mutate(tmp_path):
    client, db_path = _client(tmp_path)
    _post(client, 'add-expense', name='Tea', amount='10', category='Food')

    assert _post(client, 'drop-everything', id='1') == {'status': 'invalid-action'}
    assert _get(client, '') == {'status': 'invalid-action'}
    assert client.get('/backend').get_json() == {'status': 'invalid-action'}
    assert db.count_expenses(db_path) == 1
