empty = object()


def new_method_proxy(func):
    def inner(self, *args):
        if self._wrapped is empty:
            self._setup()
        return func(self._wrapped, *args)

    return inner


class LazyObject:
    """
    A wrapper that delays building the wrapped object until first use.

    Subclasses must implement `_setup`, which assigns `self._wrapped`.
    """

    _wrapped = None

    def __init__(self):
        self._wrapped = empty

    __getattr__ = new_method_proxy(getattr)

    def __setattr__(self, name, value):
        if name == "_wrapped":
            # Assign to __dict__ to avoid infinite __setattr__ loops.
            self.__dict__["_wrapped"] = value
        else:
            if self._wrapped is empty:
                self._setup()
            setattr(self._wrapped, name, value)

    def _setup(self):
        raise NotImplementedError(
            "subclasses of LazyObject must provide a _setup() method"
        )

    __dir__ = new_method_proxy(dir)
