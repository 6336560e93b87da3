import functools


def singleton(func):
    """
    Decorator for a lazily-initialised, process-wide resource factory.

    The first call builds the resource and stashes it in
    ``func._instance``; every later call returns that object and ignores
    its arguments.  ``wrapper.reset()`` forgets the instance so tests can
    rebuild it.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        if not hasattr(func, "_instance"):
            func._instance = func(*args, **kwargs)
        return func._instance

    def reset() -> None:
        if hasattr(func, "_instance"):
            del func._instance

    wrapper.reset = reset
    return wrapper
