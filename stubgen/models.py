"""Renderer-ready descriptors produced by one generation pass.

Descriptors stay mutable while post-processing runs and are frozen with
``freeze()`` before they are handed to the renderer.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Sequence


class FrozenDescriptorError(AttributeError):
    """Raised when a frozen descriptor is modified."""


class _Freezable:
    _frozen: bool = False

    def __setattr__(self, name: str, value: Any) -> None:
        if self._frozen:
            raise FrozenDescriptorError(
                f"{type(self).__name__} is frozen; cannot set {name!r}"
            )
        super().__setattr__(name, value)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self):
        object.__setattr__(self, "_frozen", True)
        return self


@dataclass(frozen=True)
class EnumVariant:
    identifier: str
    default_value: str
    value: str


class EnumVariantTable(OrderedDict):
    """Raw enum value -> EnumVariant, in declaration order."""

    @property
    def identifiers(self) -> list[str]:
        return [v.identifier for v in self.values()]


@dataclass
class PropertyDescriptor(_Freezable):
    raw_name: str
    normalized_name: str
    type_string: str
    example: str | None = None
    is_enum: bool = False
    required: bool = False
    description: str | None = None
    annotation: str | None = None
    data_format: str | None = None
    enum_name: str | None = None
    variants: EnumVariantTable | None = None


@dataclass
class ModelDescriptor(_Freezable):
    name: str
    file_name: str
    raw_name: str = ""
    # Raw definition name until post-processing turns it into a type name.
    parent_name: str | None = None
    description: str | None = None
    properties: Sequence[PropertyDescriptor] = field(default_factory=list)
    imports: Sequence[str] = field(default_factory=list)
    # Set for non-object definitions: the type the definition stands for.
    alias_type: str | None = None
    variants: EnumVariantTable | None = None

    def freeze(self):
        for prop in self.properties:
            prop.freeze()
        self.properties = tuple(self.properties)
        self.imports = tuple(self.imports)
        return super().freeze()


@dataclass
class ParameterDescriptor(_Freezable):
    raw_name: str
    normalized_name: str
    type_string: str
    location: str = "query"
    required: bool = False
    example: str | None = None
    description: str | None = None
    annotation: str | None = None
    data_format: str | None = None


@dataclass
class OperationDescriptor(_Freezable):
    raw_id: str
    normalized_id: str
    path: str
    group_tag: str
    method: str = "get"
    summary: str | None = None
    parameters: Sequence[ParameterDescriptor] = field(default_factory=list)

    def freeze(self):
        for param in self.parameters:
            param.freeze()
        self.parameters = tuple(self.parameters)
        return super().freeze()
