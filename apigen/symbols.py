from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple, Union

if sys.version_info >= (3, 11):
    from typing import assert_never
else:
    from typing_extensions import assert_never

from .customization import Customizations
from .logging import get_logger
from .model import API, EnumVariety, InheritanceCycleError, Misc, MiscKind, Object

log = get_logger("symbols")


@dataclass(frozen=True)
class SymEnumType:
    kind: EnumVariety


@dataclass(frozen=True)
class SymEnumValue:
    pass


@dataclass(frozen=True)
class SymObjectType:
    parents: Tuple[str, ...]


@dataclass(frozen=True)
class SymStructType:
    pass


@dataclass(frozen=True)
class SymBoxedType:
    pass


@dataclass(frozen=True)
class SymClassType:
    pass


@dataclass(frozen=True)
class SymTypeAlias:
    pass


@dataclass(frozen=True)
class SymCallbackType:
    pass


CSymbol = Union[
    SymEnumType,
    SymEnumValue,
    SymObjectType,
    SymStructType,
    SymBoxedType,
    SymClassType,
    SymTypeAlias,
    SymCallbackType,
]
KnownSymbols = Mapping[str, CSymbol]

SYM_ENUM_VALUE = SymEnumValue()
SYM_STRUCT_TYPE = SymStructType()
SYM_BOXED_TYPE = SymBoxedType()
SYM_CLASS_TYPE = SymClassType()
SYM_TYPE_ALIAS = SymTypeAlias()
SYM_CALLBACK_TYPE = SymCallbackType()


def make_known_symbols(
    api: API,
    custom: Optional[Customizations] = None,
    failures: Optional[Dict[str, InheritanceCycleError]] = None,
) -> Dict[str, CSymbol]:
    """Classify every declared C name.

    Without a failures map an inheritance cycle raises. With one, each object
    caught in a cycle is recorded there and left out of the table.
    """
    custom = custom or Customizations()

    object_map: Dict[str, Object] = {}
    for namespace in api:
        for obj in namespace.objects:
            object_map.setdefault(obj.cname, obj)

    symbols: Dict[str, CSymbol] = {}

    def add(cname: str, symbol: CSymbol) -> None:
        # The first declaration of a name wins.
        symbols.setdefault(cname, symbol)

    for namespace in api:
        for enum in namespace.enums:
            add(enum.cname, SymEnumType(enum.variety))
        for obj in namespace.objects:
            try:
                kind = object_kind(obj, object_map, custom.root_object_type)
            except InheritanceCycleError as e:
                if failures is None:
                    raise
                log.error("%s: %s", obj.cname, e)
                failures.setdefault(obj.cname, e)
                continue
            add(obj.cname, kind)
        for enum in namespace.enums:
            for member in enum.members:
                add(member.cname, SYM_ENUM_VALUE)
        for misc in namespace.misc:
            add(misc.cname, misc_to_symbol(misc))

    return symbols


def object_kind(obj: Object, object_map: Mapping[str, Object], root: str) -> CSymbol:
    parents = object_parents(obj, object_map, root)
    if root in parents:
        return SymObjectType(tuple(parents))
    return SYM_STRUCT_TYPE


def object_parents(obj: Object, object_map: Mapping[str, Object], root: str) -> List[str]:
    chain = [obj.cname]
    current = obj
    while current.cname != root and current.parent:
        parent_name = current.parent
        if parent_name in chain:
            raise InheritanceCycleError(chain + [parent_name])
        if parent_name == root:
            chain.append(parent_name)
            break
        parent = object_map.get(parent_name)
        if parent is None:
            log.warning(
                "unresolved parent type %s of %s, assuming it is not an object type",
                parent_name,
                obj.cname,
            )
            break
        chain.append(parent_name)
        current = parent
    return chain


def misc_to_symbol(misc: Misc) -> CSymbol:
    kind = misc.kind
    if kind is MiscKind.STRUCT:
        return SYM_STRUCT_TYPE
    elif kind is MiscKind.BOXED:
        return SYM_BOXED_TYPE
    elif kind is MiscKind.CLASS:
        return SYM_CLASS_TYPE
    elif kind is MiscKind.ALIAS:
        return SYM_TYPE_ALIAS
    elif kind is MiscKind.CALLBACK:
        return SYM_CALLBACK_TYPE
    else:
        assert_never(kind)