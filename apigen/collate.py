from __future__ import annotations

import sys
from dataclasses import replace
from typing import (Callable, Dict, List, Optional, Sequence, Tuple, TypeVar,
                    Union)

from .customization import Customizations
from .docs import DocFuncXRef, DocParaText, DocText, FuncDoc, PropDoc, SignalDoc
from .logging import get_logger
from .model import (Constructor, Method, MethodInfo, ModuleInfo, Object,
                    Parameter, Property, Signal)
from .names import c_func_name_to_hs_name, lower_case_first_char, strip_prefix

log = get_logger("collate")

T = TypeVar("T")

MethodEntry = Tuple[Method, Optional[FuncDoc], Optional[MethodInfo]]
GetterSetter = Tuple[Method, Method]
PropertyImpl = Union[Property, GetterSetter]
PropertyEntry = Tuple[PropertyImpl, Optional[PropDoc]]
SignalEntry = Tuple[Signal, Optional[SignalDoc]]

# Synthesized getter/setter properties have no natural position.
SYNTHESIZED_PROPERTY_INDEX = sys.maxsize


def dash_to_underscore(name: str) -> str:
    return name.replace("-", "_")


def canonical_signal_name(name: str) -> str:
    return dash_to_underscore(name)


def canonical_property_name(name: str) -> str:
    return dash_to_underscore(name)


def index_by(items: Sequence[T], key: Callable[[T], str]) -> Dict[str, Tuple[T, int]]:
    result: Dict[str, Tuple[T, int]] = {}
    for index, item in enumerate(items, start=1):
        result.setdefault(key(item), (item, index))
    return result


def methods(
    obj: Object,
    docs: Sequence[FuncDoc],
    infos: Sequence[MethodInfo],
    sort_by_existing: bool = True,
) -> List[MethodEntry]:
    doc_map = index_by(docs, lambda doc: doc.name)
    info_map = index_by(infos, lambda info: info.cname)
    end_doc_index = len(docs) + 1
    end_info_index = len(infos) + 1

    keyed = []
    for method in obj.methods:
        if method.has_varargs:
            log.debug("%s: skipping varargs method", method.cname)
            continue
        if method.deprecated and method.cname not in info_map:
            log.debug("%s: skipping deprecated method not bound before", method.cname)
            continue

        doc, doc_index = doc_map.get(method.cname, (None, end_doc_index))
        info, info_index = info_map.get(method.cname, (None, end_info_index))
        if sort_by_existing:
            key = (info_index, doc_index)
        else:
            key = (doc_index, info_index)
        keyed.append((key, (munge_method(obj, method), doc, info)))

    keyed.sort(key=lambda entry: entry[0])
    return [entry for _, entry in keyed]


def munge_method(obj: Object, method: Method) -> Method:
    if method.shared:
        parameters = method.parameters
    else:
        self_param = Parameter(f"{obj.cname}*", "self")
        parameters = (self_param,) + tuple(method.parameters)
    return replace(method, name=obj.name + method.name, parameters=parameters)


def constructors(
    obj: Object,
    docs: Sequence[FuncDoc],
    infos: Sequence[MethodInfo],
    custom: Optional[Customizations] = None,
) -> List[MethodEntry]:
    doc_map = {doc.name: delete_return_doc(doc) for doc in reversed(docs)}
    info_map = index_by(infos, lambda info: info.cname)
    end_info_index = len(infos) + 1

    keyed = []
    for ctor in obj.constructors:
        if ctor.has_varargs:
            log.debug("%s: skipping varargs constructor", ctor.cname)
            continue
        info, info_index = info_map.get(ctor.cname, (None, end_info_index))
        keyed.append(
            (
                info_index,
                (munge_constructor(obj, ctor, custom), doc_map.get(ctor.cname), info),
            )
        )

    keyed.sort(key=lambda entry: entry[0])
    return [entry for _, entry in keyed]


def delete_return_doc(doc: FuncDoc) -> FuncDoc:
    # Constructor return value docs never say more than "a new Foo".
    return replace(doc, params=tuple(p for p in doc.params if p.name != "Returns"))


def munge_constructor(
    obj: Object, ctor: Constructor, custom: Optional[Customizations] = None
) -> Method:
    return Method(
        name=c_func_name_to_hs_name(ctor.cname, custom),
        cname=ctor.cname,
        return_type=f"{obj.cname}*",
        parameters=tuple(ctor.parameters),
        shared=False,
        deprecated=False,
    )


def properties(obj: Object, docs: Sequence[PropDoc]) -> List[PropertyEntry]:
    doc_map: Dict[str, PropDoc] = {}
    for doc in docs:
        doc_map.setdefault(canonical_property_name(doc.name), doc)

    pairs: Dict[str, GetterSetter] = {}
    for getter, setter in sorted(
        methods_that_look_like_properties(obj), key=lambda pair: pair[0].name
    ):
        pairs.setdefault(property_suffix(getter), (getter, setter))

    declared = sorted(
        enumerate(obj.properties, start=1), key=lambda entry: entry[1].name
    )
    declared_names = {prop.name for _, prop in declared}

    keyed: List[Tuple[int, PropertyEntry]] = []

    for suffix, (getter, setter) in pairs.items():
        if suffix not in declared_names:
            keyed.append(
                (
                    SYNTHESIZED_PROPERTY_INDEX,
                    ((getter, setter), extra_prop_documentation(getter, setter)),
                )
            )

    for index, prop in declared:
        pair = pairs.get(prop.name)
        if pair is not None:
            doc = doc_map.get(canonical_property_name(prop.cname))
            keyed.append((index, (pair, doc)))

    for index, prop in declared:
        if prop.name not in pairs:
            doc = doc_map.get(canonical_property_name(prop.cname))
            keyed.append((index, (prop, doc)))

    keyed.sort(key=lambda entry: entry[0])
    return [entry for _, entry in keyed]


def property_suffix(method: Method) -> str:
    return method.name[3:]


def property_name(impl: PropertyImpl) -> str:
    if isinstance(impl, Property):
        return impl.name
    getter, _ = impl
    return property_suffix(getter)


def methods_that_look_like_properties(obj: Object) -> List[GetterSetter]:
    getters = [
        m for m in obj.methods if not m.deprecated and m.name.startswith("Get")
    ]
    setters = [
        m for m in obj.methods if not m.deprecated and m.name.startswith("Set")
    ]

    result = []
    for getter in getters:
        setter = next(
            (s for s in setters if property_suffix(s) == property_suffix(getter)), None
        )
        if setter is not None and _looks_like_accessor_pair(getter, setter):
            result.append((getter, setter))
    return result


def _looks_like_accessor_pair(getter: Method, setter: Method) -> bool:
    return (
        len(getter.parameters) == 0
        and len(setter.parameters) == 1
        and setter.return_type == "void"
    )


def extra_prop_documentation(getter: Method, setter: Method) -> PropDoc:
    name = lower_case_first_char(property_suffix(getter))
    return PropDoc(
        "",
        (
            DocParaText(
                (
                    DocText(f"'{name}' property. See "),
                    DocFuncXRef(getter.cname),
                    DocText(" and "),
                    DocFuncXRef(setter.cname),
                )
            ),
        ),
    )


def signals(obj: Object, docs: Sequence[SignalDoc]) -> List[SignalEntry]:
    doc_map: Dict[str, SignalDoc] = {}
    for doc in docs:
        doc_map.setdefault(canonical_signal_name(doc.name), doc)
    return [
        (signal, doc_map.get(canonical_signal_name(signal.cname)))
        for signal in obj.signals
    ]


def varargs_functions(obj: Object) -> List[str]:
    return [c.cname for c in obj.constructors if c.has_varargs] + [
        m.cname for m in obj.methods if m.has_varargs
    ]


def munge_method_info(obj: Object, module_info: ModuleInfo) -> ModuleInfo:
    if not module_info.context_prefix:
        return module_info
    prefix = module_info.context_prefix + "_"
    cnames = [c.cname for c in obj.constructors] + [m.cname for m in obj.methods]
    short_names = {strip_prefix(cname, prefix) for cname in cnames if cname.startswith(prefix)}

    def fix(info: MethodInfo) -> MethodInfo:
        if info.cname in short_names:
            return replace(info, cname=prefix + info.cname)
        return info

    return replace(module_info, methods=tuple(fix(info) for info in module_info.methods))
