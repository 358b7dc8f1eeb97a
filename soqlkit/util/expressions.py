def split_field_path(path: str) -> list[str]:
    """ Split a dot-notation field path into segments

    Example:
        split_field_path('Name') #-> ['Name']
        split_field_path('Account.Owner.Name') #-> ['Account', 'Owner', 'Name']
    """
    return [segment.strip() for segment in path.strip().split('.')]


def is_cross_object_path(path: str) -> bool:
    """ Does the path traverse references? """
    return '.' in path.strip()
