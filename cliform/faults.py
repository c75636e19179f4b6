"""
cliform faults (validation errors, session errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- ValidationError: per-field, non-fatal fault. Collected exhaustively by the validation
  engine and returned as data; it carries the field identity so the caller can mark it.
- SessionException: runtime faults of a session (module not ready, busy, invocation error).
- ValidationExit: group of validation errors rendered as a single block.
- trigger(): central entry point to surface a fault (raise in strict mode, print otherwise).

Rendering
- Every fault renders itself for rich (__rich__): a "[ code | title ]" header, the message
  and an optional hint, colorized unless colorful=False.
- Styles can be overridden by the host through __styles__ in __main__, and code labels
  through __codes__ (see FaultCode.normalize).
"""
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import *
from .values import widget_key

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - validation (211xx): FIELD_REQUIRED, AT_LEAST_ONE_VALUE_REQUIRED
    - session (221xx): MODULE_NOT_READY, SESSION_BUSY
    - delegated (22131): INVOCATION_ERROR (raised by the bound function)
    """
    # --- validation errors (21xxx) ---
    FIELD_REQUIRED              = 21101
    AT_LEAST_ONE_VALUE_REQUIRED = 21102

    # --- session errors (22xxx) ---
    MODULE_NOT_READY            = 22101
    SESSION_BUSY                = 22102

    # --- delegated errors (22xxx) ---
    INVOCATION_ERROR            = 22131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__ to
        override numeric ids with friendlier labels.
        """
        return str(preference("__codes__", {}).get(self, self.value))


_STYLES = {
    "code": "bold #00E5FF",
    "error-title": "bold #FF4DA6",
    "error-message": "#C8C8D0",
    "hint-arrow": "#9CE19C dim",
    "hint": "italic #9CE19C",
}


class Fault:
    """
    Rendering/triggering behaviour shared by every fault.

    Subclasses define __code__ and __title__; instances carry a message and a
    read-only options mapping (colorful, fancy, strict, hint, ...).
    """
    __code__ = Unset
    __title__ = "fault"

    def __rich__(self):
        styles = preference("__styles__", _STYLES)
        colorful = self.options.get("colorful", True)

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            return Text(str(fragment), styles.get(style, "") if colorful else "")

        header = Text.assemble(
            "[ ",
            text(self.__code__.normalize(), "code"),
            " | ",
            text(self.__title__.title(), "error-title"),
            " ]",
        )
        message = text(self.message, "error-message")
        parts = [message]
        if hint := self.options.get("hint"):
            parts.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*parts), title=header, title_align="left")
        return Group(header, *parts)

    def __trigger__(self):
        if self.options.get("strict", False):
            raise self from self.__cause__
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        clone = type(self).__new__(type(self))
        clone.__dict__.update(self.__dict__)
        clone.args = self.args
        clone.__cause__ = self.__cause__
        clone.options = MappingProxyType({**self.options, **overrides})
        return clone


class ValidationError(Fault, Exception):
    """
    A single failing field.

    Attributes
    - field: the FieldDescriptor that failed.
    - subcommand: name of the subcommand scope, or None for main fields.
    - key: widget key of the field (what the caller marks as erroneous).
    - label: display name used in the message.
    """
    __template__ = "Field {label!r}: invalid value"

    def __init__(self, field, /, subcommand=None, **options):
        self.field = field
        self.subcommand = subcommand
        self.key = widget_key(field, subcommand)
        self.label = field.label
        self.message = self.__template__.format(label=self.label)
        self.options = MappingProxyType(options)
        super().__init__(self.message)

    def __eq__(self, other):
        if not isinstance(other, ValidationError):
            return NotImplemented
        return (type(self), self.key, self.message) == (type(other), other.key, other.message)

    def __hash__(self):
        return hash((type(self), self.key, self.message))

    def __repr__(self):
        return f"{type(self).__name__}({self.label!r})"


class FieldRequiredError(ValidationError):
    __code__ = FaultCode.FIELD_REQUIRED
    __title__ = "field required"
    __template__ = 'Field "{label}": Required field is empty'


class AtLeastOneValueRequiredError(ValidationError):
    __code__ = FaultCode.AT_LEAST_ONE_VALUE_REQUIRED
    __title__ = "at least one value required"
    __template__ = 'Field "{label}": At least one value is required'


class SessionException(Fault, Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = coalesce(message, self.__title__)
        self.options = MappingProxyType(options)
        super().__init__(self.message)


class ModuleNotReadyError(SessionException):
    __code__ = FaultCode.MODULE_NOT_READY
    __title__ = "module not ready"


class SessionBusyError(SessionException):
    __code__ = FaultCode.SESSION_BUSY
    __title__ = "invocation in progress"


class InvocationError(SessionException):
    """
    The bound function raised; the original exception is kept as __cause__ and in 'cause'.
    """
    __code__ = FaultCode.INVOCATION_ERROR
    __title__ = "invocation error"

    @classmethod
    def wrap(cls, exception, /, **options):
        fault = cls(str(exception) or type(exception).__name__, **options)
        fault.cause = exception
        fault.__cause__ = exception
        return fault


class ValidationExit(ExceptionGroup):
    """
    Group of validation errors surfaced together (one line per error).
    """

    def __new__(cls, errors, /, **options):
        return super().__new__(cls, "validation error", tuple(errors))

    def __init__(self, errors, /, **options):
        super().__init__("validation error", tuple(errors))
        self.options = MappingProxyType(options)

    def lines(self):
        """
        Return the messages of the grouped errors, in collection order.
        """
        return [error.message for error in self.exceptions]

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        styles = preference("__styles__", _STYLES)
        header = Text.assemble("[ ", Text("Validation Error", styles["error-title"] if colorful else ""), " ]")
        renders = [error.__replace__(**self.options) for error in self.exceptions]
        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __trigger__(self):
        if self.options.get("strict", False):
            raise self from None
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods.
    - options are merged into the fault via __replace__(**options) before triggering.
    - strict=True raises the fault; otherwise it is printed to stderr through rich.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


__all__ = (
    "FaultCode",
    "Fault",
    "ValidationError",
    "FieldRequiredError",
    "AtLeastOneValueRequiredError",
    "SessionException",
    "ModuleNotReadyError",
    "SessionBusyError",
    "InvocationError",
    "ValidationExit",
    "trigger",
)
