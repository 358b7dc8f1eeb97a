from functools import wraps


# Borrowed from: funcy
def collecting(func):
    """ Convert a generator to a list-returning function

    Example:
        @collecting
        def clauses():
            yield 'SELECT Id'
            yield 'FROM Account'
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        return list(
            func(*args, **kwargs)
        )
    return wrapper
