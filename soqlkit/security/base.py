from __future__ import annotations


class AccessControl:
    """ Access control service: object-level and field-level read permissions

    Every check either returns, or raises an AccessDeniedError.
    Builders only call these methods; they never catch the errors.
    """

    def check_object_readable(self, type_name: str) -> None:
        """ Fail with ObjectAccessError if the object type is not readable """
        raise NotImplementedError

    def check_field_readable(self, type_name: str, field_name: str) -> None:
        """ Fail with FieldAccessError if the field is not readable """
        raise NotImplementedError


class AllowAll(AccessControl):
    """ Grants read access to everything """

    def check_object_readable(self, type_name: str) -> None:
        pass

    def check_field_readable(self, type_name: str, field_name: str) -> None:
        pass
