import pytest

from soqlkit import exc
from soqlkit.query_builder import QueryBuilder, Ordering, SortingDirection
from soqlkit.testing.query_text import selected_fields


@pytest.mark.parametrize(('paths', 'expected_fields'), [
    # Same field, different case: first spelling wins
    (['Name', 'NAME'], ['Name']),
    (['name', 'Name'], ['name']),
    # Whitespace is ignored when comparing
    (['Name', ' name '], ['Name']),
    # Dotted paths too
    (['Account.Name', 'account.name', 'ACCOUNT.NAME'], ['Account.Name']),
    # Different fields stay
    (['Name', 'Id'], ['Id', 'Name']),
])
def test_select_field_dedup(paths: list[str], expected_fields: list[str]):
    """ Test: fields are de-duplicated case-insensitively """
    q = QueryBuilder('Account')
    for path in paths:
        q.select_field(path)
    assert q.get_selected_fields() == expected_fields

    # Same thing, in one call
    assert QueryBuilder('Account').select_fields(paths).get_selected_fields() == expected_fields


@pytest.mark.parametrize(('paths', 'expected_text'), [
    ([' Name '], 'SELECT Name FROM Account'),
    (['\tName\n', 'Id '], 'SELECT Id, Name FROM Account'),
    ([' name ', 'Name'], 'SELECT name FROM Account'),
])
def test_select_field_trimmed(paths: list[str], expected_text: str):
    """ Test: surrounding whitespace never reaches the query text """
    assert QueryBuilder('Account').select_fields(paths).to_query_text() == expected_text


@pytest.mark.parametrize('path', ['', '   ', None])
def test_select_empty_field(path):
    """ Test: blank field names fail """
    with pytest.raises(exc.EmptyFieldNameError):
        QueryBuilder('Account').select_field(path)


@pytest.mark.parametrize('table', ['', '  ', None])
def test_invalid_table(table):
    with pytest.raises(exc.InvalidTableError):
        QueryBuilder(table)


def test_sort_fields():
    """ Test: sorted and unsorted field output """
    paths = ['LastName', 'FirstName', 'Account.Name', 'AccountId']

    # Sorted: related fields stay next to their reference field
    q = QueryBuilder('Contact').select_fields(paths)
    assert q.get_selected_fields() == ['AccountId', 'Account.Name', 'FirstName', 'LastName']
    assert q.to_query_text() == 'SELECT AccountId, Account.Name, FirstName, LastName FROM Contact'

    # Unsorted: insertion order
    q.set_sort_fields(False)
    assert q.get_sort_fields() is False
    assert q.get_selected_fields() == paths
    assert selected_fields(q) == paths


@pytest.mark.parametrize(('build', 'expected_text'), [
    # Empty: Id is selected
    (lambda q: q, 'SELECT Id FROM Account'),
    # Fields
    (lambda q: q.select_fields(['Name', 'Id']), 'SELECT Id, Name FROM Account'),
    # WHERE
    (lambda q: q.set_condition("Name = 'Acme'"), "SELECT Id FROM Account WHERE Name = 'Acme'"),
    # Blank WHERE is skipped
    (lambda q: q.set_condition('  '), 'SELECT Id FROM Account'),
    (lambda q: q.set_condition(None), 'SELECT Id FROM Account'),
    # ORDER BY
    (lambda q: q.add_ordering('Name'), 'SELECT Id FROM Account ORDER BY Name ASC NULLS FIRST'),
    (lambda q: q.add_ordering('Name', SortingDirection.DESC, True).add_ordering('Id'),
     'SELECT Id FROM Account ORDER BY Name DESC NULLS LAST, Id ASC NULLS FIRST'),
    # LIMIT, OFFSET
    (lambda q: q.set_limit(10), 'SELECT Id FROM Account LIMIT 10'),
    (lambda q: q.set_offset(20), 'SELECT Id FROM Account OFFSET 20'),
    (lambda q: q.set_limit(0).set_offset(0), 'SELECT Id FROM Account'),
    # Negative values are not validated here
    (lambda q: q.set_limit(-1), 'SELECT Id FROM Account LIMIT -1'),
    # Everything
    (lambda q: q.select_field('Name').set_condition('Industry != null').add_ordering('Name').set_limit(5).set_offset(10),
     'SELECT Name FROM Account WHERE Industry != null ORDER BY Name ASC NULLS FIRST LIMIT 5 OFFSET 10'),
])
def test_query_text(build, expected_text: str):
    """ Test: clauses are rendered, empty clauses are omitted """
    q = build(QueryBuilder('Account'))
    assert q.to_query_text() == expected_text
    assert str(q) == expected_text


def test_accessors():
    q = QueryBuilder('Account').set_condition('Name != null').set_limit(3).set_offset(6)
    assert q.get_table() == 'Account'
    assert q.get_condition() == 'Name != null'
    assert q.get_where_clause() == 'WHERE Name != null'
    assert q.get_limit() == 3
    assert q.get_offset() == 6
    assert QueryBuilder('Account').get_where_clause() == ''


def test_ordering():
    """ Test: add_ordering() appends, set_ordering() replaces """
    q = QueryBuilder('Account')
    assert q.get_ordering_clause() == ''

    # Append
    q.add_ordering('Name').add_ordering(Ordering('Industry', SortingDirection.DESC))
    assert [o.get_field() for o in q.get_orderings()] == ['Name', 'Industry']
    assert q.get_ordering_clause() == 'ORDER BY Name ASC NULLS FIRST, Industry DESC NULLS FIRST'

    # Replace
    q.set_ordering('Id', SortingDirection.DESC, nulls_last=True)
    assert q.get_ordering_clause() == 'ORDER BY Id DESC NULLS LAST'

    # get_orderings() gives a copy
    q.get_orderings().clear()
    assert len(q.get_orderings()) == 1


def test_subqueries():
    """ Test: subqueries are rendered in parentheses, in the order they were added """
    q = QueryBuilder('Account').select_field('Name')
    contacts = q.subselect_query('Contacts').select_field('LastName')
    q.subselect_query('Opportunities')

    # Same relationship: same subquery
    assert q.subselect_query('Contacts') is contacts
    contacts.set_limit(5)

    assert contacts.is_subquery
    assert list(q.get_subqueries()) == ['Contacts', 'Opportunities']
    assert q.to_query_text() == (
        'SELECT Name, (SELECT LastName FROM Contacts LIMIT 5), (SELECT Id FROM Opportunities) FROM Account'
    )

    # Only subqueries: no Id
    q = QueryBuilder('Account')
    q.subselect_query('Contacts')
    assert q.to_query_text() == 'SELECT (SELECT Id FROM Contacts) FROM Account'


def test_subquery_table():
    """ Test: the subquery remembers the child type, but selects from the relationship """
    q = QueryBuilder('Account')
    contacts = q.subselect_query('Contacts', table='Contact')
    assert contacts.get_table() == 'Contact'
    assert contacts.to_query_text() == 'SELECT Id FROM Contacts'


def test_subquery_inherits_sort_fields():
    q = QueryBuilder('Account').set_sort_fields(False)
    assert q.subselect_query('Contacts').get_sort_fields() is False


def test_subquery_depth():
    """ Test: subqueries cannot have subqueries """
    q = QueryBuilder('Account')
    contacts = q.subselect_query('Contacts')

    with pytest.raises(exc.InvalidSubqueryRelationshipError):
        contacts.subselect_query('Cases')

    with pytest.raises(exc.InvalidSubqueryRelationshipError):
        q.subselect_query('')


def test_deep_clone():
    """ Test: the clone and the original are independent """
    q = QueryBuilder('Account').select_field('Name').set_condition('Name != null').set_limit(10).add_ordering('Name')
    q.subselect_query('Contacts').select_field('LastName')
    original_text = q.to_query_text()

    clone = q.deep_clone()
    assert clone == q
    assert clone.to_query_text() == original_text
    assert clone.subselect_query('Contacts') is not q.subselect_query('Contacts')

    # Modify the clone
    clone.set_limit(1).set_offset(2).select_field('Industry').add_ordering('Id').set_condition(None)
    clone.subselect_query('Contacts').select_field('Email')
    clone.subselect_query('Opportunities')

    # The original did not change
    assert q.to_query_text() == original_text
    assert clone != q

    # Modify the original
    q.select_field('Id')
    assert 'Id' not in selected_fields(clone)


def test_equality():
    """ Test: equal when same table, same number of fields, same text """
    a = QueryBuilder('Account').select_fields(['Name', 'Id'])
    b = QueryBuilder('Account').select_fields(['Id', 'Name'])
    assert a == b

    # Different table
    assert a != QueryBuilder('Contact').select_fields(['Name', 'Id'])

    # Different fields
    assert a != QueryBuilder('Account').select_fields(['Name'])

    # Not a builder
    assert a != 'SELECT Id, Name FROM Account'
