"""
Objax program model
===================
What the front-end extracts from a parsed program: classes with their
field lists. Instances and methods have a slot in the model but are
never produced yet; the grammar has no statement that creates them.

Lookups by name use first-match semantics: names are not required to
be unique and the earliest declaration wins.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class FieldDefinition:
    name:          str
    default_value: Any = None           # literal defaults are not evaluated yet

    @property
    def has_default(self) -> bool:
        return self.default_value is not None

    def to_dict(self) -> dict:
        return {'name': self.name, 'defaultValue': self.default_value}


@dataclass
class MethodDefinition:
    name:       str
    parameters: List[str] = field(default_factory=list)
    body:       str = ''

    def to_dict(self) -> dict:
        return {'name': self.name, 'parameters': list(self.parameters), 'body': self.body}


@dataclass
class InstanceDefinition:
    name:       str
    class_name: str
    properties: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {'name': self.name, 'className': self.class_name,
                'properties': dict(self.properties)}


@dataclass
class ClassDefinition:
    name:    str
    fields:  List[FieldDefinition] = field(default_factory=list)
    methods: List[MethodDefinition] = field(default_factory=list)

    def get_field(self, name: str) -> Optional[FieldDefinition]:
        """First field called ``name``."""
        return next((f for f in self.fields if f.name == name), None)

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def to_dict(self) -> dict:
        return {
            'name':    self.name,
            'fields':  [f.to_dict() for f in self.fields],
            'methods': [m.to_dict() for m in self.methods],
        }

    def __repr__(self):
        return f"ClassDefinition({self.name!r}, fields={self.field_names})"


@dataclass
class Program:
    """
    Result of executing one source string.

    ``errors`` is non-empty only when tokenizing or parsing failed (or an
    internal fault was caught); in that case ``classes`` and ``instances``
    are empty.
    """
    classes:   List[ClassDefinition] = field(default_factory=list)
    instances: List[InstanceDefinition] = field(default_factory=list)
    errors:    List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def get_class(self, name: str) -> Optional[ClassDefinition]:
        """First class called ``name``."""
        return next((c for c in self.classes if c.name == name), None)

    def to_dict(self) -> dict:
        return {
            'classes':   [c.to_dict() for c in self.classes],
            'instances': [i.to_dict() for i in self.instances],
            'errors':    list(self.errors),
        }


# what ObjaxFrontend.execute() returns
ExecutionResult = Program
