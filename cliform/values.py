"""
Form-state collector.

Reads the current raw value of every live field out of a widget mapping and normalizes
it per field kind, whatever kind of widget produced it (text box, checkbox, number
spinner, tag list).

Widget keys
- main fields: the field name ("verbose")
- subcommand fields: "{subcommand}-{field}" ("sub1-arg1")

Normalization
- Bool: bool as-is; "on"/"true"/"yes"/"1" (any case) are true, any other string is false.
- Counter: kept as given (int or str); counting happens at serialization.
- Vec: tuple of stripped, non-blank strings (a bare string is a single item).
- String/Integer/Enum: str(value), None becomes "".

Values are recomputed for every pass and never cached across edits.
"""
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .schema import FieldKind
from .selection import Selection

_TRUTHY = frozenset({"on", "true", "yes", "1"})


def widget_key(field, /, subcommand=None):
    """
    Return the widget identity of a field (optionally scoped to a subcommand).

    subcommand may be a descriptor or a name.
    """
    if subcommand is None:
        return field.name
    return f"{getattr(subcommand, "name", subcommand)}-{field.name}"


def normalize(field, value, /):
    """
    Normalize one raw widget value according to the field kind.
    """
    match field.kind:
        case FieldKind.BOOL:
            if isinstance(value, str):
                return value.strip().lower() in _TRUTHY
            return bool(value)
        case FieldKind.COUNTER:
            return "" if value is None else value
        case FieldKind.VEC:
            if value is None:
                return ()
            if isinstance(value, str) or not isinstance(value, Iterable):
                value = (value,)
            return tuple(item for item in map(lambda x: str(x).strip(), value) if item)
        case FieldKind.STRING | FieldKind.INTEGER | FieldKind.ENUM:
            return "" if value is None else str(value)
        case _:
            raise RuntimeError("unreachable")


class FormValues(Mapping):
    """
    Read-only snapshot of the collected values, keyed by widget key.

    Keys for fields whose widget was not present are absent (not empty).
    """
    __slots__ = ("_values",)

    def __init__(self, values=(), /):
        self._values = MappingProxyType(dict(values))

    def __getitem__(self, key, /):
        return self._values[key]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def lookup(self, field, /, subcommand=None):
        """
        Return the value of field (in the given subcommand scope), or None when absent.
        """
        return self._values.get(widget_key(field, subcommand))

    def present(self, field, /, subcommand=None):
        """
        Whether a value was collected for field in the given scope.
        """
        return widget_key(field, subcommand) in self._values

    def __repr__(self):
        return f"form-values({dict(self._values)!r})"


def collect(schema, widgets, selection=None, /):
    """
    Collect normalized values of the live field set from a widget mapping.

    Parameters
    - schema: Schema describing the fields.
    - widgets: Mapping[str, object] from widget key to raw widget value.
    - selection: Selection | str | None choosing the live subcommand.

    Returns
    - FormValues with one entry per live field whose widget is present.
    """
    if not isinstance(widgets, Mapping):
        raise TypeError("collect() 'widgets' must be a mapping")
    selection = Selection.coerce(schema, selection)

    values = {}
    for subcommand, field in selection.fields():
        try:
            raw = widgets[key := widget_key(field, subcommand)]
        except KeyError:
            continue
        values[key] = normalize(field, raw)
    return FormValues(values)


__all__ = (
    "FormValues",
    "widget_key",
    "normalize",
    "collect",
)
