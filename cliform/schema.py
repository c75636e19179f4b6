r"""
cliform schema model: fields, field kinds, and subcommands.

Overview
- FieldKind: closed enumeration of argument kinds (String, Integer, Enum, Bool, Counter, Vec).
- FieldDescriptor: one argument of a command (positional when it has neither a long nor a short flag).
- SubcommandDescriptor: a named sub-mode carrying its own ordered field list.
- Schema: the main field list plus the subcommands of a command; loaded once, read-only.

Loading
- Schema.load(mapping) accepts the configuration shape produced by the page generator:
    {
        "fields": [
            {"name": "verbose", "long": "verbose", "short": "v", "required": false,
             "field_type": {"type": "Counter"}, "is_positional": false},
            ...
        ],
        "subcommands": [{"name": "sub1", "fields": [...]}, ...]
    }
- Schema.loads(text) does the same from JSON text.

Validation highlights
- Names must be non-empty strings; duplicate names in one scope are rejected.
- Long flags are stored without their leading dashes ("--out" and "out" are the same flag).
- Short flags must be exactly one character (after removing a leading dash).
- Descriptors are sealed and expose read-only properties only.

Quick example:
    >>> schema = Schema(
    ...     [FieldDescriptor("input"), FieldDescriptor("tag", "tag", kind=FieldKind.VEC)],
    ...     [SubcommandDescriptor("run", [FieldDescriptor("dry", "dry-run", kind=FieldKind.BOOL)])],
    ... )
    >>> schema.fields[1].flag
    '--tag'
"""
import enum
import functools
import json
import operator
from collections.abc import Iterable, Mapping

from .utils import *


class FieldKind(enum.Enum):
    """
    Semantic type of a single argument.

    The member values are the tags used by the schema input ("String", "Vec", ...).
    Code branching on a kind must use a match statement over every member.
    """
    STRING = "String"
    INTEGER = "Integer"
    ENUM = "Enum"
    BOOL = "Bool"
    COUNTER = "Counter"
    VEC = "Vec"

    @classmethod
    def parse(cls, tag, /):
        """
        Resolve a kind from its tag (case-insensitive) or return a FieldKind as-is.

        Raises
        - TypeError when the tag is not a string.
        - ValueError when the tag names no known kind.
        """
        if isinstance(tag, cls):
            return tag
        if not isinstance(tag, str):
            raise TypeError("field kind must be a string tag")
        for kind in cls:
            if kind.value.lower() == tag.strip().lower():
                return kind
        raise ValueError(f"unknown field kind {tag!r}")

    @property
    def exempt(self):
        """
        Whether the kind has no “empty” state (checkbox or counter), hence no required check.
        """
        return self in (FieldKind.BOOL, FieldKind.COUNTER)


class DescriptorType(type):
    """
    Metaclass for schema descriptors.

    Responsibilities
    - Derive __typename__ ("field-descriptor") for messages.
    - Publish every name in __introspectable__ as a read-only property (see mirror()).
    - Provide stable __repr__/__rich_repr__ implementations.
    - Seal concrete descriptors against subclassing.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": typename(name),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        @rename("__init_subclass__")
        def __init_subclass__(cls, **options):  # NOQA: F-841
            raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
        self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _check_name(cls, value, field, /):
    if not isinstance(value, str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    if not (value := value.strip()):
        raise ValueError(f"{cls.__typename__} {field!r} must be a non-empty string")
    return value


def _check_text(cls, value, field, /):
    if value is Unset:
        return None
    if not isinstance(value, str):
        raise TypeError(f"{cls.__typename__} {field!r} must be a string")
    return value


def _check_unique(cls, items, scope, /):
    seen = set()
    for item in items:
        if item.name in seen:
            raise ValueError(f"{cls.__typename__} {scope} name {item.name!r} is already in use")
        seen.add(item.name)


class FieldDescriptor(metaclass=DescriptorType):
    """
    One argument of a command or subcommand.

    Fields
    - name: unique identifier within its scope (also the widget key stem).
    - long / short: flag names without dashes; None when absent. A field with
      neither is positional.
    - required: whether an empty value is a validation error (ignored for Bool/Counter).
    - kind: FieldKind.
    - label: display name used in validation messages (defaults to name).
    - default: initial widget value, or None when the widget starts empty.
    - choices: allowed values of an Enum field (informational; values are not checked).
    - descr: short help text, or None.
    """
    __introspectable__ = (
        "name",
        "long",
        "short",
        "required",
        "kind",
        "label",
        "default",
        "choices",
        "descr",
    )

    def __new__(
            cls,
            name,
            /,
            long=Unset,
            short=Unset,
            *,
            required=False,
            kind=FieldKind.STRING,
            label=Unset,
            default=Unset,
            choices=(),
            descr=Unset,
    ):
        self = super().__new__(cls)
        self._name = _check_name(cls, name, "name")

        if long is not Unset and long is not None:
            long = _check_name(cls, long, "long").lstrip("-")
            if not long:
                raise ValueError(f"{cls.__typename__} 'long' must name a flag")
        self._long = coalesce(long)

        if short is not Unset and short is not None:
            short = _check_name(cls, short, "short").removeprefix("-")
            if len(short) != 1:
                raise ValueError(f"{cls.__typename__} 'short' must be a single character")
        self._short = coalesce(short)

        if not isinstance(required, bool):
            raise TypeError(f"{cls.__typename__} 'required' must be a boolean")
        self._required = required
        self._kind = FieldKind.parse(kind)
        self._label = _check_name(cls, coalesce(label, self._name), "label")

        if isinstance(choices, str) or not isinstance(choices, Iterable):
            raise TypeError(f"{cls.__typename__} 'choices' must be an iterable of strings")
        self._choices = tuple(map(str, choices))
        self._default = coalesce(default)
        self._descr = _check_text(cls, descr, "descr")
        return self

    @property
    def positional(self):
        """
        True when the field is identified by position (no long or short flag).
        """
        return self._long is None and self._short is None

    @property
    def flag(self):
        """
        Flag token: "--long" when a long flag exists, else "-s"; None for positionals.
        """
        if self._long is not None:
            return "--" + self._long
        if self._short is not None:
            return "-" + self._short
        return None

    @classmethod
    def load(cls, mapping, /):
        """
        Build a descriptor from its configuration mapping.

        Recognized keys
        - name (required), long, short, required, label, default, help, is_positional
        - field_type: {"type": <tag>, "choices": [...]} or a bare tag string
        - kind: accepted in place of field_type

        Labels default to the long flag name, then to the field name.
        A truthy is_positional drops any flag names.
        """
        if not isinstance(mapping, Mapping):
            raise TypeError(f"{cls.__typename__} configuration must be a mapping")
        try:
            name = mapping["name"]
        except KeyError:
            raise ValueError(f"{cls.__typename__} configuration requires a 'name'") from None

        kind = mapping.get("field_type", mapping.get("kind", FieldKind.STRING.value))
        choices = ()
        if isinstance(kind, Mapping):
            choices = kind.get("choices", kind.get("variants", ())) or ()
            kind = kind.get("type", FieldKind.STRING.value)

        long = mapping.get("long") or Unset
        short = mapping.get("short") or Unset
        if mapping.get("is_positional", False):
            long = short = Unset

        return cls(
            name,
            long,
            short,
            required=bool(mapping.get("required", False)),
            kind=kind,
            label=mapping.get("label") or (long.lstrip("-") if long else name),
            default=mapping.get("default", Unset),
            choices=choices,
            descr=mapping.get("help") or Unset,
        )


class SubcommandDescriptor(metaclass=DescriptorType):
    """
    A named sub-mode of a command with its own ordered fields.
    """
    __introspectable__ = (
        "name",
        "fields",
        "descr",
    )

    def __new__(cls, name, /, fields=(), *, descr=Unset):
        self = super().__new__(cls)
        self._name = _check_name(cls, name, "name")
        self._fields = list(fields)
        if not all(isinstance(field, FieldDescriptor) for field in self._fields):
            raise TypeError(f"{cls.__typename__} 'fields' must contain field descriptors")
        _check_unique(cls, self._fields, "field")
        self._descr = _check_text(cls, descr, "descr")
        return self

    @classmethod
    def load(cls, mapping, /):
        if not isinstance(mapping, Mapping):
            raise TypeError(f"{cls.__typename__} configuration must be a mapping")
        try:
            name = mapping["name"]
        except KeyError:
            raise ValueError(f"{cls.__typename__} configuration requires a 'name'") from None
        return cls(
            name,
            map(FieldDescriptor.load, mapping.get("fields") or ()),
            descr=mapping.get("help") or Unset,
        )


class Schema(metaclass=DescriptorType):
    """
    Declarative description of a command: ordered main fields plus subcommands.

    The schema is read-only for the whole session; every pass (collect, validate,
    serialize) reads it but never writes it.
    """
    __introspectable__ = (
        "fields",
        "subcommands",
    )

    def __new__(cls, fields=(), subcommands=()):
        self = super().__new__(cls)
        self._fields = list(fields)
        if not all(isinstance(field, FieldDescriptor) for field in self._fields):
            raise TypeError(f"{cls.__typename__} 'fields' must contain field descriptors")
        _check_unique(cls, self._fields, "field")

        subcommands = list(subcommands)
        if not all(isinstance(subcommand, SubcommandDescriptor) for subcommand in subcommands):
            raise TypeError(f"{cls.__typename__} 'subcommands' must contain subcommand descriptors")
        _check_unique(cls, subcommands, "subcommand")
        self._subcommands = {subcommand.name: subcommand for subcommand in subcommands}
        return self

    def subcommand(self, name, /):
        """
        Return the subcommand descriptor registered under name, or None.
        """
        return self._subcommands.get(name)

    @classmethod
    def load(cls, mapping, /):
        """
        Build a schema from its configuration mapping ({"fields": [...], "subcommands": [...]}).
        """
        if not isinstance(mapping, Mapping):
            raise TypeError(f"{cls.__typename__} configuration must be a mapping")
        return cls(
            map(FieldDescriptor.load, mapping.get("fields") or ()),
            map(SubcommandDescriptor.load, mapping.get("subcommands") or ()),
        )

    @classmethod
    def loads(cls, text, /):
        """
        Build a schema from JSON text.
        """
        return cls.load(json.loads(text))


__all__ = (
    "FieldKind",
    "FieldDescriptor",
    "SubcommandDescriptor",
    "Schema",
)
