import pytest

from soqlkit.schema import StaticSchema, SASchema

from .util import models


@pytest.fixture(scope='session')
def schema() -> StaticSchema:
    """ A CRM-like schema: accounts, contacts, cases, tasks """
    return StaticSchema.from_dict(CRM_SCHEMA)


@pytest.fixture(scope='session')
def sa_schema() -> SASchema:
    """ Schema over the SqlAlchemy test models """
    return SASchema(models.Base)


def ref(name: str, relationship_name: str, *reference_to: str) -> dict:
    """ Reference field definition """
    return {'name': name, 'relationship_name': relationship_name, 'reference_to': list(reference_to)}


CRM_SCHEMA = {
    'Account': {
        'fields': ['Id', 'Name', 'Industry', ref('OwnerId', 'Owner', 'User'), ref('ParentId', 'Parent', 'Account')],
        'children': {'Contacts': 'Contact', 'Opportunities': 'Opportunity', 'ChildAccounts': 'Account'},
        'field_sets': {'Summary': ['Id', 'Name'], 'WithOwner': ['Name', 'Owner.Name']},
    },
    'Contact': {
        'fields': ['Id', 'Name', 'FirstName', 'LastName', 'Title', 'Email', ref('AccountId', 'Account', 'Account')],
        'children': {'Cases': 'Case', 'Tasks': 'Task'},
        'field_sets': {'Basic': ['FirstName', 'LastName']},
    },
    'Opportunity': {
        'fields': ['Id', 'Name', 'Amount', ref('AccountId', 'Account', 'Account')],
    },
    'Case': {
        'fields': ['Id', 'Subject', ref('ContactId', 'Contact', 'Contact'), ref('OwnerId', 'Owner', 'User', 'Group')],
    },
    'Task': {
        'fields': ['Id', 'Subject', ref('WhoId', 'Who', 'Contact', 'Lead')],
    },
    'Lead': {
        'fields': ['Id', 'Name', 'Company'],
    },
    'User': {
        'fields': ['Id', 'Name', 'Email', ref('ManagerId', 'Manager', 'User')],
    },
    'Group': {
        'fields': ['Id', 'Name', 'Type'],
    },
}
