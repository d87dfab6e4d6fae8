from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import List, Mapping, Optional, Tuple

from .customization import Customizations
from .docs import ModuleDoc

Since = str


class GenerationError(Exception):
    pass


class MarshalError(GenerationError):
    def __init__(self, c_function: str, c_type: str, what: str = "parameter"):
        super().__init__(f"{c_function}: unable to marshal {what} of type {c_type!r}")
        self.c_function = c_function
        self.c_type = c_type


class InheritanceCycleError(GenerationError):
    def __init__(self, chain: List[str]):
        super().__init__("inheritance cycle: " + " -> ".join(chain))
        self.chain = chain


@dataclass(frozen=True)
class Parameter:
    type: str
    name: str
    is_varargs: bool = False


VARARGS = Parameter("", "...", is_varargs=True)


@dataclass(frozen=True)
class Method:
    name: str
    cname: str
    return_type: str
    parameters: Tuple[Parameter, ...] = ()
    shared: bool = False
    deprecated: bool = False

    @property
    def has_varargs(self) -> bool:
        return any(p.is_varargs for p in self.parameters)


@dataclass(frozen=True)
class Constructor:
    name: str
    cname: str
    parameters: Tuple[Parameter, ...] = ()

    @property
    def has_varargs(self) -> bool:
        return any(p.is_varargs for p in self.parameters)


@dataclass(frozen=True)
class Property:
    name: str
    cname: str
    type: str


@dataclass(frozen=True)
class Signal:
    name: str
    cname: str
    return_type: str = "void"
    parameters: Tuple[Parameter, ...] = ()


@dataclass(frozen=True)
class Object:
    name: str
    cname: str
    parent: str = ""
    implements: Tuple[str, ...] = ()
    constructors: Tuple[Constructor, ...] = ()
    methods: Tuple[Method, ...] = ()
    properties: Tuple[Property, ...] = ()
    signals: Tuple[Signal, ...] = ()
    deprecated: bool = False


class EnumVariety(Enum):
    ENUM = "enum"
    FLAGS = "flags"


@dataclass(frozen=True)
class EnumMember:
    name: str
    cname: str


@dataclass(frozen=True)
class Enumeration:
    name: str
    cname: str
    variety: EnumVariety = EnumVariety.ENUM
    members: Tuple[EnumMember, ...] = ()


class MiscKind(Enum):
    STRUCT = "struct"
    BOXED = "boxed"
    CLASS = "class"
    ALIAS = "alias"
    CALLBACK = "callback"


@dataclass(frozen=True)
class Misc:
    kind: MiscKind
    name: str
    cname: str


@dataclass(frozen=True)
class Namespace:
    name: str
    objects: Tuple[Object, ...] = ()
    enums: Tuple[Enumeration, ...] = ()
    misc: Tuple[Misc, ...] = ()


API = List[Namespace]


@dataclass(frozen=True)
class MethodInfo:
    cname: str
    shortcname: Optional[str] = None
    unsafe: bool = False

    @property
    def call_name(self) -> str:
        return self.shortcname if self.shortcname else self.cname


@dataclass(frozen=True)
class ModuleInfo:
    name: str = ""
    context_prefix: str = ""
    methods: Tuple[MethodInfo, ...] = ()
    exports: Tuple[str, ...] = ()
    imports: Tuple[Tuple[str, str], ...] = ()


@dataclass
class Model:
    api: API
    module_docs: Mapping[str, ModuleDoc] = field(default_factory=OrderedDict)
    module_infos: Mapping[str, ModuleInfo] = field(default_factory=OrderedDict)
    customizations: Customizations = field(default_factory=Customizations)

    @cached_property
    def objects(self) -> OrderedDict[str, Object]:
        result = OrderedDict()
        for namespace in self.api:
            for obj in namespace.objects:
                result.setdefault(obj.cname, obj)
        return result

    @cached_property
    def symbol_failures(self) -> OrderedDict[str, InheritanceCycleError]:
        return OrderedDict()

    @cached_property
    def known_symbols(self):
        from .symbols import make_known_symbols

        return make_known_symbols(
            self.api, self.customizations, self.symbol_failures
        )

    def module_doc_for(self, obj: Object) -> ModuleDoc:
        doc = self.module_docs.get(obj.cname)
        if doc is None:
            return ModuleDoc(obj.cname)
        return doc

    def module_info_for(self, obj: Object) -> ModuleInfo:
        info = self.module_infos.get(obj.cname)
        if info is None:
            return ModuleInfo(obj.name)
        return info
