"""
Argument serializer.

serialize(schema, values, selection) maps the collected form state to the argument
vector handed to the bound function. It is a pure function of its inputs.

Ordering, per scope (main command first, then the selected subcommand)
1. flagged fields in declaration order:
   • Bool     → flag once when true
   • Counter  → flag repeated N times (N parsed as a non-negative integer, otherwise 0)
   • Vec      → flag, value for every collected value in order
   • String/Integer/Enum → flag, value when the trimmed value is non-empty
2. positional values in declaration order:
   • Vec      → every collected value in order, without a flag
   • Bool/Counter → nothing (no flag to emit)
   • String/Integer/Enum → the trimmed value when non-empty

The selected subcommand's name sits between the two scopes as a single token:

    [main flags...] [main positionals...] SUBCOMMAND [sub flags...] [sub positionals...]

Example
    >>> serialize(schema, {"tag": ["a", "b"], "path": "x.txt"})
    ['--tag', 'a', '--tag', 'b', 'x.txt']
"""
from .schema import FieldKind
from .selection import Selection
from .values import FormValues, collect, widget_key


def count(value, /):
    """
    Parse a counter value; negative numbers and parse failures count as zero.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return max(value, 0)
    try:
        return max(int(str(value).strip()), 0)
    except ValueError:
        return 0


def emit(field, value, /):
    """
    Return the tokens a single flagged field contributes.
    """
    flag = field.flag
    match field.kind:
        case FieldKind.BOOL:
            return [flag] if value else []
        case FieldKind.COUNTER:
            return [flag] * count(value)
        case FieldKind.VEC:
            tokens = []
            for item in value:
                tokens.extend((flag, item))
            return tokens
        case FieldKind.STRING | FieldKind.INTEGER | FieldKind.ENUM:
            if value := str(value).strip():
                return [flag, value]
            return []
        case _:
            raise RuntimeError("unreachable")


def place(field, value, /):
    """
    Return the tokens a single positional field contributes.

    Vec items follow one another without a flag; Bool and Counter positionals have
    no flag to repeat and contribute nothing.
    """
    match field.kind:
        case FieldKind.BOOL | FieldKind.COUNTER:
            return []
        case FieldKind.VEC:
            return list(value)
        case FieldKind.STRING | FieldKind.INTEGER | FieldKind.ENUM:
            if value := str(value).strip():
                return [value]
            return []
        case _:
            raise RuntimeError("unreachable")


def _scope(fields, values, scope, /):
    tokens = []
    positionals = []
    for field in fields:
        try:
            value = values[widget_key(field, scope)]
        except KeyError:
            continue
        if field.positional:
            positionals.extend(place(field, value))
            continue
        tokens.extend(emit(field, value))
    return tokens + positionals


def serialize(schema, values, selection=None, /):
    """
    Build the ordered argument token list.

    Parameters
    - schema: Schema.
    - values: FormValues, or a raw widget mapping (collected on the fly).
    - selection: Selection | str | None.

    Returns
    - list[str] of argument tokens.
    """
    selection = Selection.coerce(schema, selection)
    if not isinstance(values, FormValues):
        values = collect(schema, values, selection)

    tokens = _scope(schema.fields, values, None)
    if (subcommand := selection.subcommand) is not None:
        tokens.append(subcommand.name)
        tokens.extend(_scope(subcommand.fields, values, subcommand.name))
    return tokens


__all__ = (
    "count",
    "emit",
    "place",
    "serialize",
)
