from __future__ import annotations

import itertools
import re
import sys
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from . import collate
from .customization import Customizations
from .docs import (DocArg, DocLiteral, DocText, FuncDoc, ModuleDoc, PropDoc,
                   SignalDoc, Spans, since_of)
from .formatting import DocFormatter
from .logging import get_logger
from .marshal import (Direction, MarshaledParameter, gen_marshal_parameter,
                      gen_marshal_property, gen_marshal_result,
                      convert_signal_type, indent, normalize_c_type)
from .model import (GenerationError, Method, MethodInfo, Model, ModuleInfo,
                    Object, Parameter, Property, Signal, Since)
from .names import (c_func_name_to_hs_name, c_param_name_to_hs_name,
                    c_type_name_to_hs_type, hs_param_name,
                    lower_case_first_char, to_studly_caps)
from .symbols import KnownSymbols

log = get_logger("codegen")

SECTION_RULE = "--------------------"
FIXME_MERGE_DOCS = " {FIXME: merge return value docs} "
VERSION_PATTERN = re.compile(r"(\d+)\.(\d+)(?:\.(\d+))?")


@dataclass(frozen=True)
class Fragment:
    text: str
    since: Since = ""
    deprecated: bool = False


@dataclass(frozen=True)
class GeneratedModule:
    name: str
    exports: str
    imports: str
    body: str
    todo: str

    def render(self) -> str:
        return (
            f"module {self.name} (\n{self.exports}\n  ) where\n\n"
            f"{self.imports}\n\n{self.body}\n{self.todo}\n"
        )


@dataclass
class GenerationResult:
    modules: OrderedDict[str, GeneratedModule] = field(default_factory=OrderedDict)
    failures: OrderedDict[str, GenerationError] = field(default_factory=OrderedDict)


def generate_all(model: Model) -> GenerationResult:
    symbols = model.known_symbols
    result = GenerationResult()
    for obj in model.objects.values():
        cycle = model.symbol_failures.get(obj.cname)
        if cycle is not None:
            result.failures[obj.cname] = cycle
            continue
        try:
            result.modules[obj.cname] = generate_module(
                symbols,
                model.customizations,
                obj,
                model.module_doc_for(obj),
                model.module_info_for(obj),
            )
        except GenerationError as e:
            log.error("%s: generation failed: %s", obj.cname, e)
            result.failures[obj.cname] = e
    return result


def generate_module(
    symbols: KnownSymbols,
    custom: Customizations,
    obj: Object,
    module_doc: ModuleDoc,
    module_info: ModuleInfo,
) -> GeneratedModule:
    module_info = collate.munge_method_info(obj, module_info)
    return GeneratedModule(
        module_info.name or obj.name,
        gen_exports(custom, obj, module_doc, module_info),
        gen_imports(custom, module_info),
        gen_module_body(symbols, custom, obj, module_doc, module_info),
        gen_todo_items(obj),
    )


def gen_function(
    symbols: KnownSymbols,
    custom: Customizations,
    is_constructor: bool,
    method: Method,
    doc: Optional[FuncDoc],
    info: Optional[MethodInfo],
) -> str:
    function_name = c_func_name_to_hs_name(method.cname, custom)
    handle_nulls = custom.maybe_null_result(method.cname) or any(
        custom.maybe_null_parameter(method.cname, hs_param_name(p.name))
        for p in method.parameters
    )
    formatter = DocFormatter(symbols, custom, handle_nulls)
    param_docs = param_doc_map(custom, method.cname, doc)

    marshaled: List[Tuple[Parameter, str, MarshaledParameter]] = []
    for param in method.parameters:
        name = hs_param_name(param.name)
        marshaled.append(
            (
                param,
                name,
                gen_marshal_parameter(symbols, custom, method.cname, name, param.type),
            )
        )

    constraints: List[str] = []
    for _, _, m in marshaled:
        if m.constraint is not None and m.constraint not in constraints:
            constraints.append(m.constraint)

    inputs = [(p, name, m) for p, name, m in marshaled if m.direction != Direction.OUT]
    outputs = [
        (p, name, m)
        for p, name, m in marshaled
        if m.direction in (Direction.OUT, Direction.INOUT)
    ]

    result = gen_marshal_result(
        symbols, custom, method.cname, is_constructor, method.return_type
    )
    returns_doc = param_docs.get("Returns")
    if not outputs:
        return_type = (f"IO {paren_type(result.type)}", returns_doc)
    else:
        types = [m.type for _, _, m in outputs]
        if result.type != "()":
            types.insert(0, result.type)
        docs = merge_param_docs(
            method.cname, returns_doc, [param_docs.get(p.name) for p, _, _ in outputs]
        )
        if len(types) == 1:
            return_type = (f"IO {paren_type(types[0])}", docs)
        else:
            return_type = (f"IO ({', '.join(types)})", docs)

    param_types = [(m.type, param_docs.get(p.name)) for p, _, m in inputs]
    signature = format_constraints(constraints) + format_param_types(
        formatter, param_types + [return_type]
    )

    call_name = info.call_name if info is not None else method.cname
    unsafe = info.unsafe if info is not None else False
    body = gen_call(call_name, unsafe)
    for _, _, m in marshaled:
        body = m.glue(body)
    if not outputs:
        body = result.glue(body)
    else:
        body = gen_out_parameter_body(result.glue(body), result.type != "()", outputs)

    doc_text = formatter.format_declaration(doc.paragraphs if doc is not None else ())
    param_names = "".join(f"{name} " for _, name, _ in inputs)
    return (
        doc_text
        + f"{function_name} :: {signature}\n"
        + f"{function_name} {param_names}="
        + indent(1)
        + body
    )


def gen_call(cname: str, unsafe: bool) -> str:
    if unsafe:
        return f"{{# call unsafe {cname} #}}"
    return f"{{# call {cname} #}}"


def gen_out_parameter_body(
    call: str,
    has_result: bool,
    outputs: Sequence[Tuple[Parameter, str, MarshaledParameter]],
) -> str:
    glue = [m.out for _, _, m in outputs]
    if not glue or any(g is None for g in glue):
        raise GenerationError("output parameter without out glue")

    befores = [g.before for g in glue]
    befores[-1] += " do"

    if has_result:
        statement = "result <-" + indent(2) + call.replace("\n", "\n  ")
        fragments = ["result"]
    else:
        statement = call.replace("\n", "\n  ")
        fragments = []
    fragments += [g.fragment for g in glue]

    lines = befores + [statement] + [g.after for g in glue]
    lines.append(f"return ({', '.join(fragments)})")
    return indent(1).join(lines)


def format_constraints(constraints: Sequence[str]) -> str:
    if not constraints:
        return ""
    if len(constraints) == 1:
        return f"{constraints[0]} => "
    return f"({', '.join(constraints)}) => "


def format_param_types(
    formatter: DocFormatter, param_types: Sequence[Tuple[str, Optional[Spans]]]
) -> str:
    column = max(len(t) for t, _ in param_types)
    width = formatter.custom.line_width - column - 8
    continuation = "\n" + " " * (column + 5) + "-- "

    def format_doc(t: str, doc: Spans) -> str:
        padding = " " * (column - len(t))
        lines = formatter.wrap_spans(doc, width)
        return f"{t}{padding} -- ^ " + continuation.join(lines)

    out = []
    previous_had_doc = False
    for i, (t, doc) in enumerate(param_types):
        if i == 0:
            if doc is None:
                out.append(t)
            else:
                out.append("\n    " + format_doc(t, doc))
        elif doc is None:
            out.append(("\n -> " if previous_had_doc else " -> ") + t)
        else:
            out.append("\n -> " + format_doc(t, doc))
        previous_had_doc = doc is not None
    return "".join(out)


def param_doc_map(
    custom: Customizations, c_function: str, doc: Optional[FuncDoc]
) -> Dict[str, Spans]:
    result: Dict[str, Spans] = {}
    if doc is None:
        return result
    for param_doc in doc.params:
        if custom.nuke_parameter_documentation(
            c_function, c_param_name_to_hs_name(param_doc.name)
        ):
            continue
        if param_doc.name == "Returns":
            spans = (DocText("returns "),) + tuple(param_doc.paragraph)
        else:
            spans = (DocArg(param_doc.name), DocText(" - ")) + tuple(
                param_doc.paragraph
            )
        result.setdefault(param_doc.name, spans)
    return result


def merge_param_docs(
    c_function: str, doc: Optional[Spans], docs: Sequence[Optional[Spans]]
) -> Optional[Spans]:
    present = [d for d in [doc, *docs] if d is not None]
    if not present:
        return None
    if len(present) == 1:
        return present[0]

    log.warning("%s: return value docs need merging by hand", c_function)
    var_names = [
        c_param_name_to_hs_name(d[0].name) if d and isinstance(d[0], DocArg) else "_"
        for d in present
    ]
    merged: Spans = (
        DocLiteral("(" + ", ".join(var_names) + ")"),
        DocText(FIXME_MERGE_DOCS),
    )
    for d in present:
        merged += tuple(d)
    return merged


def paren_type(t: str) -> str:
    if " " in t and not t.startswith(("(", "[")):
        return f"({t})"
    return t


def gen_module_body(
    symbols: KnownSymbols,
    custom: Customizations,
    obj: Object,
    module_doc: ModuleDoc,
    module_info: ModuleInfo,
) -> str:
    fragments = (
        section_header("Interfaces", gen_implements(custom, obj))
        + section_header(
            "Constructors",
            gen_constructors(
                symbols, custom, obj, module_doc.functions, module_info.methods
            ),
        )
        + section_header(
            "Methods",
            gen_methods(symbols, custom, obj, module_doc.functions, module_info.methods),
        )
        + section_header(
            "Properties", gen_properties(symbols, custom, obj, module_doc.properties)
        )
        + section_header(
            "Signals", gen_signals(symbols, custom, obj, module_doc.signals)
        )
    )
    fragments = [
        adjust_deprecated_and_since_version(obj, module_doc, f) for f in fragments
    ]
    return do_version_ifdefs(custom, "\n\n", fragments)


def section_header(name: str, entries: List[Fragment]) -> List[Fragment]:
    if not entries:
        return []
    return [Fragment(f"{SECTION_RULE}\n-- {name}")] + entries


def adjust_deprecated_and_since_version(
    obj: Object, module_doc: ModuleDoc, fragment: Fragment
) -> Fragment:
    return Fragment(
        fragment.text,
        max_since(module_doc.since, fragment.since),
        obj.deprecated or fragment.deprecated,
    )


def version_key(since: Since) -> Tuple[int, ...]:
    return tuple(int(part) for part in re.findall(r"\d+", since))


def max_since(a: Since, b: Since) -> Since:
    return b if version_key(b) > version_key(a) else a


def do_version_ifdefs(
    custom: Customizations, separator: str, fragments: Sequence[Fragment]
) -> str:
    blocks = []
    for (since, deprecated), group in itertools.groupby(
        fragments, key=lambda f: (f.since, f.deprecated)
    ):
        text = separator.join(f.text for f in group)
        text = ifdef_deprecated(custom, deprecated, text)
        text = since_version(custom, since, text)
        blocks.append(text)
    return separator.join(blocks)


def since_version(custom: Customizations, since: Since, body: str) -> str:
    m = VERSION_PATTERN.fullmatch(since)
    if m is None:
        return body
    major, minor, micro = m.groups()
    return f"#if {custom.version_macro}({major},{minor},{micro or 0})\n{body}\n#endif"


def ifdef_deprecated(custom: Customizations, deprecated: bool, body: str) -> str:
    if not deprecated:
        return body
    return f"#ifndef {custom.deprecated_macro}\n{body}\n#endif"


def gen_implements(custom: Customizations, obj: Object) -> List[Fragment]:
    return [
        Fragment(f"instance {c_type_name_to_hs_type(iface, custom)}Class {obj.name}")
        for iface in obj.implements
    ]


def gen_constructors(
    symbols: KnownSymbols,
    custom: Customizations,
    obj: Object,
    docs: Sequence[FuncDoc],
    infos: Sequence[MethodInfo],
) -> List[Fragment]:
    return [
        Fragment(gen_function(symbols, custom, True, ctor, doc, info), since_of(doc))
        for ctor, doc, info in collate.constructors(obj, docs, infos, custom)
    ]


def gen_methods(
    symbols: KnownSymbols,
    custom: Customizations,
    obj: Object,
    docs: Sequence[FuncDoc],
    infos: Sequence[MethodInfo],
) -> List[Fragment]:
    return [
        Fragment(
            gen_function(symbols, custom, False, method, doc, info),
            since_of(doc),
            method.deprecated,
        )
        for method, doc, info in collate.methods(obj, docs, infos, True)
    ]


def gen_properties(
    symbols: KnownSymbols,
    custom: Customizations,
    obj: Object,
    docs: Sequence[PropDoc],
) -> List[Fragment]:
    fragments = []
    for impl, doc in collate.properties(obj, docs):
        if isinstance(impl, Property):
            text = gen_attr_from_property(symbols, custom, obj, impl, doc)
        else:
            getter, setter = impl
            text = gen_attr_from_getter_setter(symbols, custom, obj, getter, setter, doc)
        fragments.append(Fragment(text, since_of(doc)))
    return fragments


def gen_attr(
    symbols: KnownSymbols,
    custom: Customizations,
    obj: Object,
    doc: Optional[PropDoc],
    property_name: str,
    property_type: str,
    getter: str,
    setter: str,
) -> str:
    formatter = DocFormatter(symbols, custom, False)
    doc_text = formatter.format_declaration(doc.paragraphs if doc is not None else ())
    t = paren_type(property_type)
    if custom.leaf_class(obj.cname):
        signature = f"{property_name} :: Attr {obj.name} {t}"
    else:
        signature = f"{property_name} :: {obj.name}Class self => Attr self {t}"
    return (
        doc_text
        + signature
        + "\n"
        + f"{property_name} = Attr"
        + indent(1)
        + getter
        + indent(1)
        + setter
    )


def gen_attr_from_property(
    symbols: KnownSymbols,
    custom: Customizations,
    obj: Object,
    prop: Property,
    doc: Optional[PropDoc],
) -> str:
    property_name = lower_case_first_char(obj.name + prop.name)
    property_type, gvalue = gen_marshal_property(
        symbols, custom, f"{obj.cname}:{prop.cname}", prop.type
    )
    getter_head = "(\\obj -> do "
    getter = (
        f'{getter_head}{gvalue} result <- objectGetProperty obj "{prop.cname}"'
        + "\n"
        + " " * (2 + len(getter_head))
        + "return result)"
    )
    setter = f'(\\obj val -> objectSetProperty obj "{prop.cname}" ({gvalue} val))'
    return gen_attr(
        symbols, custom, obj, doc, property_name, property_type, getter, setter
    )


def gen_attr_from_getter_setter(
    symbols: KnownSymbols,
    custom: Customizations,
    obj: Object,
    getter: Method,
    setter: Method,
    doc: Optional[PropDoc],
) -> str:
    property_name = lower_case_first_char(obj.name + collate.property_suffix(getter))
    property_type = gen_marshal_result(
        symbols, custom, getter.cname, False, getter.return_type
    ).type
    return gen_attr(
        symbols,
        custom,
        obj,
        doc,
        property_name,
        property_type,
        c_func_name_to_hs_name(getter.cname, custom),
        c_func_name_to_hs_name(setter.cname, custom),
    )


def gen_signals(
    symbols: KnownSymbols,
    custom: Customizations,
    obj: Object,
    docs: Sequence[SignalDoc],
) -> List[Fragment]:
    return [
        Fragment(gen_signal(symbols, custom, obj, signal, doc), since_of(doc))
        for signal, doc in collate.signals(obj, docs)
    ]


def signal_name(signal: Signal) -> str:
    return to_studly_caps(collate.canonical_signal_name(signal.cname))


def gen_signal(
    symbols: KnownSymbols,
    custom: Customizations,
    obj: Object,
    signal: Signal,
    doc: Optional[SignalDoc],
) -> str:
    params = list(signal.parameters)
    # The emitting object is implicit in the handler.
    if params and normalize_c_type(params[0].type) == f"{obj.cname}*":
        params = params[1:]

    converted = [
        convert_signal_type(symbols, custom, signal.cname, p.type) for p in params
    ]
    categories = [category for category, _ in converted] or ["NONE"]
    param_types = [t for _, t in converted]
    return_category, return_type = convert_signal_type(
        symbols, custom, signal.cname, signal.return_type
    )
    connect_call = "_".join(categories) + "__" + return_category

    handler_result = f"IO {paren_type(return_type)}"
    if param_types:
        handler = "(" + " -> ".join(param_types + [handler_result]) + ")"
    else:
        handler = handler_result

    name = signal_name(signal)
    formatter = DocFormatter(symbols, custom, False)
    doc_text = formatter.format_declaration(doc.paragraphs if doc is not None else ())
    return (
        doc_text
        + f"on{name}, after{name} :: {obj.name}Class self => self\n"
        + f" -> {handler}\n"
        + " -> IO (ConnectId self)\n"
        + f'on{name} = connect_{connect_call} "{signal.cname}" False\n'
        + f'after{name} = connect_{connect_call} "{signal.cname}" True'
    )


def gen_exports(
    custom: Customizations, obj: Object, module_doc: ModuleDoc, module_info: ModuleInfo
) -> str:
    export_index: Dict[str, int] = {}
    for index, name in enumerate(module_info.exports, start=1):
        export_index.setdefault(name, index)

    def export_position(name: str) -> int:
        return export_index.get(name, sys.maxsize)

    def section(name: str, entries: List[Fragment]) -> List[Fragment]:
        if not entries:
            return []
        return [Fragment(""), Fragment(f"-- * {name}")] + entries

    fragments = [
        Fragment("-- * Types"),
        Fragment(f"  {obj.name},"),
        Fragment(f"  {obj.name}Class,"),
        Fragment(f"  castTo{obj.name},"),
    ]

    ctors = []
    for ctor, doc, _ in collate.constructors(obj, module_doc.functions, [], custom):
        name = c_func_name_to_hs_name(ctor.cname, custom)
        ctors.append((export_position(name), Fragment(f"  {name},", since_of(doc))))
    ctors.sort(key=lambda entry: entry[0])
    fragments += section("Constructors", [f for _, f in ctors])

    methods = []
    for method, doc, _ in collate.methods(
        obj, module_doc.functions, module_info.methods, False
    ):
        name = c_func_name_to_hs_name(method.cname, custom)
        methods.append(
            (
                export_position(name),
                Fragment(f"  {name},", since_of(doc), method.deprecated),
            )
        )
    methods.sort(key=lambda entry: entry[0])
    fragments += section("Methods", [f for _, f in methods])

    props = [
        Fragment(
            f"  {lower_case_first_char(obj.name + collate.property_name(impl))},",
            since_of(doc),
        )
        for impl, doc in collate.properties(obj, module_doc.properties)
    ]
    fragments += section("Properties", props)

    sigs = []
    for signal, doc in collate.signals(obj, module_doc.signals):
        name = signal_name(signal)
        sigs.append(
            (
                export_position(f"on{name}"),
                Fragment(f"  on{name},\n  after{name},", since_of(doc)),
            )
        )
    sigs.sort(key=lambda entry: entry[0])
    fragments += section("Signals", [f for _, f in sigs])

    fragments = [
        adjust_deprecated_and_since_version(obj, module_doc, f) for f in fragments
    ]
    return do_version_ifdefs(custom, "\n", fragments)


def gen_imports(custom: Customizations, module_info: ModuleInfo) -> str:
    if not module_info.imports:
        std = list(custom.default_std_imports)
        extra = list(custom.default_extra_imports)
    else:
        std = [
            line
            for module, line in module_info.imports
            if module in custom.known_std_modules
        ]
        extra = [
            line
            for module, line in module_info.imports
            if module not in custom.known_std_modules
        ]
    text = "\n".join(std) + "\n\n" if std else ""
    return text + "\n".join(extra)


def gen_todo_items(obj: Object) -> str:
    names = collate.varargs_functions(obj)
    if not names:
        return ""
    return (
        "\n-- TODO: the following varargs functions were not bound\n"
        + "\n".join(f"--   {name}" for name in names)
        + "\n--"
    )
