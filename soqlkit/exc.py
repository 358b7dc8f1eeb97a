from typing import Optional


class BaseQueryBuilderError(Exception):
    pass


class InvalidTableError(BaseQueryBuilderError):
    """ Query mentioned an invalid object type

    Reported when the root type of a builder is not known to the schema
    """

    def __init__(self, type_name: Optional[str]):
        self.type_name = type_name

        super().__init__(f'Invalid object type: "{type_name}"')


class InvalidFieldError(BaseQueryBuilderError):
    """ Query mentioned an invalid field name

    Reported when a field mentioned by name is not found on the type, or when a field handle is missing
    """

    def __init__(self, type_name: Optional[str], field_name: Optional[str], message: Optional[str] = None):
        self.type_name = type_name
        self.field_name = field_name

        super().__init__(message or f'Invalid field "{field_name}" for "{type_name}"')


class EmptyFieldNameError(InvalidFieldError):
    """ A blank field name was given """

    def __init__(self, type_name: Optional[str] = None):
        super().__init__(type_name, '', message='Field name cannot be empty')


class NonReferenceFieldError(InvalidFieldError):
    """ A field in the middle of a dotted path is not a reference field

    Example: "Name.Title": "Name" does not point to another object, so there's nothing to traverse
    """

    def __init__(self, type_name: str, field_name: str, path: str):
        self.path = path

        super().__init__(type_name, field_name,
                         message=f'Field "{field_name}" of "{type_name}" is not a reference field, cannot traverse "{path}"')


class InvalidFieldSetError(BaseQueryBuilderError):
    """ A field set cannot be used with this query """

    def __init__(self, field_set_name: str, err: str):
        self.field_set_name = field_set_name

        super().__init__(f'Invalid field set "{field_set_name}": {err}')


class InvalidSubqueryRelationshipError(BaseQueryBuilderError):
    """ A subquery was requested through an unknown relationship, or nested too deep """

    def __init__(self, type_name: Optional[str], relationship: Optional[str], err: Optional[str] = None):
        self.type_name = type_name
        self.relationship = relationship

        super().__init__(err or f'Invalid child relationship "{relationship}" for "{type_name}"')


class AccessDeniedError(BaseQueryBuilderError, PermissionError):
    """ The access control service refused to grant read access """


class ObjectAccessError(AccessDeniedError):
    def __init__(self, type_name: str):
        self.type_name = type_name

        super().__init__(f'No read access to object "{type_name}"')


class FieldAccessError(AccessDeniedError):
    def __init__(self, type_name: str, field_name: str):
        self.type_name = type_name
        self.field_name = field_name

        super().__init__(f'No read access to field "{field_name}" of "{type_name}"')
