"""Default textual rendering of Python exceptions.

An exception is rendered as an s-expression whose head is its qualified
type name, e.g. ``(myapp.errors.Failure "disk full" (4 2))``, or as the
bare qualified name when it carries no arguments. This is the form the
capture heuristics know how to take apart.

Exceptions can take control of their rendering:

- defining ``__sexp__()`` returning an s-expression (or a plain value
  convertible by :func:`flare.core.sexp.of_value`);
- overriding ``__str__``, in which case ``str(exc)`` is used verbatim and
  the capture heuristics fall back to the raw text.
"""

from . import sexp


def qualified_name(exc_type: type) -> str:
    """Return ``module.QualName`` for an exception type.

    Builtin exceptions are left unqualified.
    """
    if exc_type.__module__ == "builtins":
        return exc_type.__qualname__
    return f"{exc_type.__module__}.{exc_type.__qualname__}"


def short_type_name(exc: BaseException) -> str:
    """Return the bare type identifier of an exception."""
    return qualified_name(type(exc)).split(".")[-1]


def exception_to_sexp(exc: BaseException) -> sexp.Sexp | None:
    """Return the structured form of an exception, if it has one."""
    to_sexp = getattr(exc, "__sexp__", None)
    if callable(to_sexp):
        return sexp.of_value(to_sexp())
    if type(exc).__str__ is not BaseException.__str__:
        return None
    head = sexp.Atom(qualified_name(type(exc)))
    if not exc.args:
        return head
    return sexp.SexpList((head, *(sexp.of_value(arg) for arg in exc.args)))


def exception_to_string(exc: BaseException) -> str:
    """Render an exception the way the capture heuristics expect to read it."""
    structured = exception_to_sexp(exc)
    if structured is None:
        return str(exc)
    return sexp.to_string(structured)
