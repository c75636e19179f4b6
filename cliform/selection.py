"""
Subcommand selection state machine.

States
- NoSelection: no subcommand is live; only the main fields participate.
- Selected(name): exactly the named subcommand's fields participate alongside the main fields.

Transitions
- select(None) / select("")  → NoSelection
- select(known name)         → Selected(name)
- select(unknown name)       → unchanged (lenient: a schema mismatch must not break the form)

The live field set is what the collector reads and what validation and serialization walk;
fields of every other subcommand are excluded from those passes, not merely hidden.
"""
import logging

from .schema import Schema

logger = logging.getLogger(__name__)


class Selection:
    """
    Tracks at most one active subcommand for a given schema.

    Parameters
    - schema: Schema whose subcommands may be selected.

    Notes
    - active is the selected subcommand name, or None in the NoSelection state.
    - Instances are owned by a Session; nothing here is process-global.
    """
    __slots__ = ("_schema", "_active")

    def __init__(self, schema, /, active=None):
        if not isinstance(schema, Schema):
            raise TypeError("selection 'schema' must be a schema")
        self._schema = schema
        self._active = None
        self.select(active)

    @property
    def schema(self):
        return self._schema

    @property
    def active(self):
        """
        Name of the selected subcommand, or None.
        """
        return self._active

    @property
    def subcommand(self):
        """
        Descriptor of the selected subcommand, or None.
        """
        if self._active is None:
            return None
        return self._schema.subcommand(self._active)

    def select(self, name, /):
        """
        Apply a selection transition and return the resulting active name.
        """
        if name is None or name == "":
            if self._active is not None:
                logger.debug("subcommand %r deselected", self._active)
            self._active = None
        elif self._schema.subcommand(name) is not None:
            logger.debug("subcommand %r selected", name)
            self._active = name
        else:
            logger.debug("ignoring unknown subcommand %r", name)
        return self._active

    def clear(self):
        """
        Return to the NoSelection state.
        """
        return self.select(None)

    def is_live(self, name, /):
        """
        Whether the fields of subcommand name currently participate.
        """
        return name is not None and name == self._active

    def fields(self):
        """
        Yield (subcommand, field) pairs for the live field set.

        Main fields come first with subcommand None, followed by the selected
        subcommand's fields in declaration order.
        """
        for field in self._schema.fields:
            yield None, field
        if (subcommand := self.subcommand) is not None:
            for field in subcommand.fields:
                yield subcommand, field

    @classmethod
    def coerce(cls, schema, selection, /):
        """
        Accept a Selection, a subcommand name, or None and return a Selection over schema.

        A Selection bound to another schema is rejected to keep passes consistent.
        """
        if isinstance(selection, cls):
            if selection.schema is not schema:
                raise ValueError("selection is bound to a different schema")
            return selection
        if selection is None or isinstance(selection, str):
            return cls(schema, selection)
        raise TypeError("selection must be a selection, a subcommand name or None")

    def __repr__(self):
        if self._active is None:
            return "selection(NoSelection)"
        return f"selection(Selected({self._active!r}))"


__all__ = (
    "Selection",
)
