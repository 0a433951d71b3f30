""" Utility methods broadly applicable across the codebase. """

from typing import Any

def fullname(o:Any) -> str:
    # from https://stackoverflow.com/a/2020083/553580
    # the module name is explicitly excluded from __qualname__ so we have to
    # put it back together ourselves

    if isinstance(o, type):
        klass = o
    else:
        klass = o.__class__

    module = klass.__module__
    if module is None or module == str.__class__.__module__:
        return klass.__qualname__  # Avoid reporting __builtin__
    else:
        return module + '.' + klass.__qualname__
