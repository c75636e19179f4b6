"""
Session: the single owner of a form's mutable state.

A Session binds a read-only Schema to:
- the current widget values (keyed by widget key, see values.widget_key),
- the subcommand Selection,
- readiness of the bound function (set by the one-time asynchronous load),
- the busy flag guarding against re-entrant invocations,
- the error markings left by the last validation,
- the last Outcome and the status line.

Control flow of run()
    not ready  → ModuleNotReadyError outcome (retry once load() completed)
    busy       → SessionBusyError outcome
    validate   → failing fields are marked; "Validation Error:" + one line per error
    serialize  → tokens handed to the bound function
    result     → absent / str / structured value (JSON) rendered through the styled renderer
    exception  → InvocationError outcome ("Error:" + message)

Options
- colorful / fancy: rich rendering of surfaced faults.
- shell: print surfaced faults to stderr (rich) instead of only recording them.
- strict: raise surfaced faults instead of returning an error outcome.
- messages: overrides of the status/output texts (merged over __main__.__messages__).

Everything runs on the caller's thread; load() is the only coroutine.
"""
import inspect
import json
import logging
from types import MappingProxyType
from typing import NamedTuple

from .ansi import StyledSpan, render, to_html, to_text
from .faults import *
from .schema import FieldKind
from .selection import Selection
from .serializer import serialize
from .utils import *
from .validation import validate
from .values import collect, widget_key

logger = logging.getLogger(__name__)

MESSAGES = {
    "loading": "Loading module...",
    "loaded": "Module loaded successfully!",
    "load-failed": "Failed to load module: ",
    "not-ready": "Module not ready yet. Please wait...",
    "busy": "Function is already running. Please wait...",
    "running": "Running function...",
    "success": "Function executed successfully!",
    "success-no-return": "Function executed successfully (no return value)",
    "error-occurred": "Error occurred",
    "fix-validation": "Please fix validation errors",
    "validation-error": "Validation Error:",
    "error": "Error:",
    "no-output": 'No output yet. Fill in the form and click "Run".',
}


class Status(NamedTuple):
    """
    Status line: a message and its kind ("", "loading", "success" or "error").
    """
    message: str = ""
    kind: str = ""


class Outcome(NamedTuple):
    """
    Result of a run.

    - success: whether the bound function completed.
    - text: the displayed text (function output, or the error block).
    - spans: styled spans of text (error blocks are a single plain span).
    - faults: validation errors or the session fault that stopped the run.
    """
    success: bool
    text: str
    spans: list
    faults: tuple = ()

    def html(self, palette=Unset):
        return to_html(self.spans, palette)

    def __rich__(self):
        return to_text(self.spans)


def _initial(field, /):
    if field.default is not None:
        if field.kind is FieldKind.VEC:
            return list(field.default) if not isinstance(field.default, str) else [field.default]
        return field.default
    match field.kind:
        case FieldKind.BOOL:
            return False
        case FieldKind.COUNTER:
            return 0
        case FieldKind.VEC:
            return []
        case FieldKind.STRING | FieldKind.INTEGER | FieldKind.ENUM:
            return ""
        case _:
            raise RuntimeError("unreachable")


class Session:
    """
    Form state and invocation control for one schema and one bound function.

    Parameters
    - schema: Schema.
    - function: Callable[[list[str]], object] | Unset. Supplying it marks the session ready;
      otherwise load() must provide it.
    """

    def __init__(
            self,
            schema,
            function=Unset,
            /,
            *,
            colorful=True,
            fancy=False,
            shell=False,
            strict=False,
            messages=Unset,
    ):
        if function is not Unset and not callable(function):
            raise TypeError("session 'function' must be callable")
        self._selection = Selection(schema)
        self._schema = schema
        self._function = function
        self._ready = function is not Unset
        self._busy = False
        self._options = {"colorful": bool(colorful), "fancy": bool(fancy)}
        self._shell = bool(shell)
        self._strict = bool(strict)
        self._messages = preference("__messages__", MESSAGES) | dict(coalesce(messages, {}))

        self._fields = {}
        for field in schema.fields:
            self._fields[widget_key(field)] = field
        for subcommand in schema.subcommands.values():
            for field in subcommand.fields:
                self._fields[widget_key(field, subcommand)] = field

        self._widgets = {}
        self._markings = set()
        self._output = None
        self._status = Status()
        self.reset()

    # ── state ───────────────────────────────────────────────────────────────

    @property
    def schema(self):
        return self._schema

    @property
    def selection(self):
        return self._selection.active

    @property
    def ready(self):
        return self._ready

    @property
    def busy(self):
        return self._busy

    @property
    def widgets(self):
        return MappingProxyType(self._widgets)

    @property
    def markings(self):
        """
        Widget keys marked as erroneous by the last run.
        """
        return frozenset(self._markings)

    @property
    def output(self):
        """
        The last Outcome, or None before the first run (and after reset).
        """
        return self._output

    @property
    def placeholder(self):
        return self._messages["no-output"]

    @property
    def status(self):
        return self._status

    # ── edits ───────────────────────────────────────────────────────────────

    def _field(self, key, /):
        try:
            return self._fields[key]
        except KeyError:
            raise KeyError(f"unknown widget {key!r}") from None

    def edit(self, key, value, /):
        """
        Set the raw value of a widget.

        Vec widgets always hold a list: a string becomes a single item, None empties it.
        """
        if self._field(key).kind is FieldKind.VEC:
            if value is None:
                value = []
            elif isinstance(value, str):
                value = [value]
            else:
                value = list(value)
        self._widgets[key] = value

    def append(self, key, value, /):
        """
        Add an item to a Vec widget; blank items are ignored. Returns whether it was added.
        """
        if self._field(key).kind is not FieldKind.VEC:
            raise TypeError(f"widget {key!r} does not hold multiple values")
        if not (value := str(value).strip()):
            return False
        self._widgets[key].append(value)
        return True

    def remove(self, key, index, /):
        """
        Remove the item at index from a Vec widget and return it.
        """
        if self._field(key).kind is not FieldKind.VEC:
            raise TypeError(f"widget {key!r} does not hold multiple values")
        return self._widgets[key].pop(index)

    def select(self, name, /):
        """
        Select a subcommand (None deselects); unknown names leave the selection unchanged.
        """
        return self._selection.select(name)

    # ── passes ──────────────────────────────────────────────────────────────

    def values(self):
        return collect(self._schema, self._widgets, self._selection)

    def validate(self):
        return validate(self._schema, self.values(), self._selection)

    def arguments(self):
        return serialize(self._schema, self.values(), self._selection)

    # ── lifecycle ───────────────────────────────────────────────────────────

    async def load(self, loader, /):
        """
        Await the one-time load of the bound function.

        loader may be an awaitable, or a callable returning an awaitable or the function.
        A callable result of the load becomes the bound function. Returns whether the
        session is ready afterwards; a failed load is reported in the status line.
        """
        self._status = Status(self._messages["loading"], "loading")
        try:
            result = loader() if callable(loader) and not inspect.isawaitable(loader) else loader
            if inspect.isawaitable(result):
                result = await result
        except Exception as exception:
            logger.warning("module load failed: %s", exception)
            self._status = Status(self._messages["load-failed"] + str(exception), "error")
            return self._ready

        if callable(result):
            self._function = result
        if self._function is Unset:
            logger.warning("module load provided no function")
            self._status = Status(self._messages["load-failed"] + "no function bound", "error")
            return self._ready

        self._ready = True
        self._status = Status(self._messages["loaded"], "success")
        return True

    def _surface(self, fault, /):
        if self._strict or self._shell:
            trigger(fault, strict=self._strict, **self._options)

    def _fail(self, fault, text, status, /, faults=Unset):
        self._status = Status(self._messages[status], "error")
        self._output = Outcome(False, text, [StyledSpan(text)], tuple(coalesce(faults, (fault,))))
        self._surface(fault)
        return self._output

    def _format(self, result, /):
        if result is None:
            return self._messages["success-no-return"]
        if isinstance(result, str):
            return result
        try:
            return json.dumps(result, indent=2)
        except (TypeError, ValueError):
            return str(result)

    def run(self):
        """
        Validate, serialize, invoke and render; returns the Outcome (also kept in output).
        """
        if not self._ready:
            fault = ModuleNotReadyError(self._messages["not-ready"])
            return self._fail(fault, fault.message, "not-ready")
        if self._busy:
            fault = SessionBusyError(self._messages["busy"])
            return self._fail(fault, fault.message, "busy")

        self._markings.clear()
        values = self.values()
        if errors := validate(self._schema, values, self._selection):
            self._markings.update(error.key for error in errors)
            text = "\n".join([self._messages["validation-error"], *(error.message for error in errors)])
            return self._fail(ValidationExit(errors), text, "fix-validation", errors)

        tokens = serialize(self._schema, values, self._selection)
        logger.debug("running with %r", tokens)
        self._busy = True
        self._status = Status(self._messages["running"], "loading")
        try:
            result = self._function(tokens)
        except Exception as exception:
            logger.warning("invocation failed: %s", exception)
            fault = InvocationError.wrap(exception)
        else:
            fault = None
        finally:
            self._busy = False

        if fault is not None:
            return self._fail(fault, self._messages["error"] + "\n" + fault.message, "error-occurred")

        text = self._format(result)
        self._status = Status(self._messages["success"], "success")
        self._output = Outcome(True, text, render(text))
        return self._output

    def reset(self):
        """
        Return to the initial state: widget defaults, no selection, no markings, no output.
        """
        self._widgets = {key: _initial(field) for key, field in self._fields.items()}
        self._selection.clear()
        self._markings.clear()
        self._output = None
        self._status = Status()

    def __repr__(self):
        return f"session(selection={self.selection!r}, ready={self._ready!r}, busy={self._busy!r})"


__all__ = (
    "MESSAGES",
    "Status",
    "Outcome",
    "Session",
)
