"""
Validation engine.

validate(schema, values, selection) walks the live field set (main fields, then the
selected subcommand's fields) and returns every violation as data:

- Bool and Counter fields are exempt (a checkbox or a counter has no “empty” state).
- String, Integer and Enum fields fail with FieldRequiredError when required and the
  trimmed value is empty.
- Vec fields fail with AtLeastOneValueRequiredError when required and no value was collected.
- Fields without a collected value (widget not rendered) are skipped.

Nothing is raised and nothing short-circuits: one pass reports all failing fields.
"""
from .faults import FieldRequiredError, AtLeastOneValueRequiredError
from .schema import FieldKind
from .selection import Selection
from .values import FormValues, collect, widget_key


def check(field, value, /, subcommand=None):
    """
    Return the validation error of a single field value, or None when it passes.
    """
    if not field.required:
        return None
    match field.kind:
        case FieldKind.BOOL | FieldKind.COUNTER:
            return None
        case FieldKind.VEC:
            if not value:
                return AtLeastOneValueRequiredError(field, subcommand)
            return None
        case FieldKind.STRING | FieldKind.INTEGER | FieldKind.ENUM:
            if not str(value).strip():
                return FieldRequiredError(field, subcommand)
            return None
        case _:
            raise RuntimeError("unreachable")


def validate(schema, values, selection=None, /):
    """
    Validate the collected values of the live field set.

    Parameters
    - schema: Schema.
    - values: FormValues, or a raw widget mapping (collected on the fly).
    - selection: Selection | str | None.

    Returns
    - list[ValidationError] in field declaration order (main fields first).
    """
    selection = Selection.coerce(schema, selection)
    if not isinstance(values, FormValues):
        values = collect(schema, values, selection)

    errors = []
    for subcommand, field in selection.fields():
        scope = None if subcommand is None else subcommand.name
        try:
            value = values[widget_key(field, scope)]
        except KeyError:
            continue
        if (error := check(field, value, scope)) is not None:
            errors.append(error)
    return errors


__all__ = (
    "check",
    "validate",
)
