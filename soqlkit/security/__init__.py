""" Access control: object-level and field-level read permissions """

from .base import AccessControl, AllowAll
from .policy import AccessPolicy, ALL_FIELDS
