from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, NamedTuple, Optional, Tuple

from .customization import Customizations
from .model import EnumVariety, MarshalError
from .names import c_type_name_to_hs_type
from .symbols import (KnownSymbols, SymBoxedType, SymClassType, SymEnumType,
                      SymObjectType, SymStructType, SymTypeAlias)

GlueInserter = Callable[[str], str]


class Direction(Enum):
    IN = "in"
    OUT = "out"
    INOUT = "inout"


class Primitive(NamedTuple):
    hs_type: str
    to_c: str
    from_c: str
    signal_category: str
    gvalue: str


_INT = Primitive("Int", "fromIntegral", "fromIntegral", "INT", "GVint")
_UINT = Primitive("Int", "fromIntegral", "fromIntegral", "WORD", "GVuint")
_INT64 = Primitive("Int", "fromIntegral", "fromIntegral", "INT64", "GVint64")
_UINT64 = Primitive("Int", "fromIntegral", "fromIntegral", "WORD64", "GVuint64")
_DOUBLE = Primitive("Double", "realToFrac", "realToFrac", "DOUBLE", "GVdouble")
_FLOAT = Primitive("Double", "realToFrac", "realToFrac", "FLOAT", "GVfloat")

PRIMITIVES = {
    "gboolean": Primitive("Bool", "fromBool", "toBool", "BOOL", "GVboolean"),
    "gint": _INT,
    "int": _INT,
    "glong": _INT,
    "long": _INT,
    "gshort": _INT,
    "gint8": _INT,
    "gint16": _INT,
    "gint32": _INT,
    "guint": _UINT,
    "guint8": _UINT,
    "guint16": _UINT,
    "guint32": _UINT,
    "gulong": _UINT,
    "gushort": _UINT,
    "gint64": _INT64,
    "gssize": _INT64,
    "guint64": _UINT64,
    "gsize": _UINT64,
    "gdouble": _DOUBLE,
    "double": _DOUBLE,
    "gfloat": _FLOAT,
    "float": _FLOAT,
    "gunichar": Primitive("Char", "(fromIntegral . ord)", "(chr . fromIntegral)", "CHAR", "GVuint"),
}

STRING_BASE_TYPES = {"gchar", "char"}
POINTER_BASE_TYPES = {"gpointer", "gconstpointer"}


@dataclass(frozen=True)
class OutParameterGlue:
    before: str
    after: str
    fragment: str


@dataclass(frozen=True)
class MarshaledParameter:
    constraint: Optional[str]
    direction: Direction
    type: str
    glue: GlueInserter
    out: Optional[OutParameterGlue] = None


@dataclass(frozen=True)
class MarshaledResult:
    type: str
    glue: GlueInserter


def indent(level: int) -> str:
    return "\n" + "  " * level


def normalize_c_type(c_type: str) -> str:
    t = c_type.replace("const-", "const ").strip()
    t = re.sub(r"\s*\*", "*", t)
    return re.sub(r"\s+", " ", t)


def split_c_type(c_type: str) -> Tuple[str, int, bool]:
    t = normalize_c_type(c_type)
    is_const = t.startswith("const ")
    if is_const:
        t = t[len("const ") :]
    depth = len(t) - len(t.rstrip("*"))
    return (t.rstrip("*"), depth, is_const)


def append_arg(arg: str) -> GlueInserter:
    return lambda body: body + indent(2) + arg


def wrap_with(prelude: str, arg: str) -> GlueInserter:
    return lambda body: prelude + indent(1) + body + indent(2) + arg


def gen_marshal_parameter(
    symbols: KnownSymbols,
    custom: Customizations,
    c_function: str,
    name: str,
    c_type: str,
) -> MarshaledParameter:
    base, depth, is_const = split_c_type(c_type)
    sym = symbols.get(base)
    nullable = custom.maybe_null_parameter(c_function, name)
    ptr = f"{name}Ptr"

    if depth == 0:
        prim = PRIMITIVES.get(base)
        if prim is not None:
            return MarshaledParameter(
                None, Direction.IN, prim.hs_type, append_arg(f"({prim.to_c} {name})")
            )
        if base in POINTER_BASE_TYPES:
            return MarshaledParameter(None, Direction.IN, "Ptr ()", append_arg(name))
        if isinstance(sym, SymEnumType):
            hs = c_type_name_to_hs_type(base, custom)
            if sym.kind is EnumVariety.FLAGS:
                return MarshaledParameter(
                    None,
                    Direction.IN,
                    f"[{hs}]",
                    append_arg(f"((fromIntegral . fromFlags) {name})"),
                )
            return MarshaledParameter(
                None,
                Direction.IN,
                hs,
                append_arg(f"((fromIntegral . fromEnum) {name})"),
            )

    elif depth == 1:
        if base in STRING_BASE_TYPES:
            if nullable:
                return MarshaledParameter(
                    None,
                    Direction.IN,
                    "Maybe String",
                    wrap_with(f"maybeWith withUTFString {name} $ \\{ptr} ->", ptr),
                )
            return MarshaledParameter(
                None,
                Direction.IN,
                "String",
                wrap_with(f"withUTFString {name} $ \\{ptr} ->", ptr),
            )

        prim = PRIMITIVES.get(base)
        if prim is not None and not is_const:
            return _pointer_parameter(
                custom, c_function, name, prim.hs_type, prim.to_c, prim.from_c
            )

        if isinstance(sym, SymEnumType) and not is_const:
            hs = c_type_name_to_hs_type(base, custom)
            if sym.kind is EnumVariety.FLAGS:
                return _pointer_parameter(
                    custom,
                    c_function,
                    name,
                    f"[{hs}]",
                    "(fromIntegral . fromFlags)",
                    "(toFlags . fromIntegral)",
                )
            return _pointer_parameter(
                custom,
                c_function,
                name,
                hs,
                "(fromIntegral . fromEnum)",
                "(toEnum . fromIntegral)",
            )

        if isinstance(sym, SymObjectType):
            hs = c_type_name_to_hs_type(base, custom)
            if nullable:
                arg = f"(maybe ({hs} nullForeignPtr) to{hs} {name})"
            else:
                arg = f"(to{hs} {name})"
            if custom.leaf_class(base):
                hs_type = f"Maybe {hs}" if nullable else hs
                return MarshaledParameter(None, Direction.IN, hs_type, append_arg(arg))
            hs_type = f"Maybe {name}" if nullable else name
            return MarshaledParameter(
                f"{hs}Class {name}", Direction.IN, hs_type, append_arg(arg)
            )

        if isinstance(sym, (SymStructType, SymTypeAlias)):
            hs = c_type_name_to_hs_type(base, custom)
            return MarshaledParameter(
                None, Direction.IN, hs, wrap_with(f"with {name} $ \\{ptr} ->", ptr)
            )

        if isinstance(sym, (SymBoxedType, SymClassType)):
            hs = c_type_name_to_hs_type(base, custom)
            return MarshaledParameter(
                None,
                Direction.IN,
                hs,
                wrap_with(f"with{hs} {name} $ \\{ptr} ->", ptr),
            )

    elif depth == 2 and not is_const:
        if base in STRING_BASE_TYPES:
            return MarshaledParameter(
                None,
                Direction.OUT,
                "String",
                append_arg(ptr),
                OutParameterGlue(
                    f"alloca $ \\{ptr} ->",
                    f"{name} <- peek {ptr} >>= readUTFString",
                    name,
                ),
            )
        if isinstance(sym, SymObjectType):
            hs = c_type_name_to_hs_type(base, custom)
            return MarshaledParameter(
                None,
                Direction.OUT,
                hs,
                append_arg(ptr),
                OutParameterGlue(
                    f"alloca $ \\{ptr} ->",
                    f"{name} <- peek {ptr} >>= makeNewGObject mk{hs} . return",
                    name,
                ),
            )

    raise MarshalError(c_function, c_type)


def _pointer_parameter(
    custom: Customizations,
    c_function: str,
    name: str,
    hs_type: str,
    to_c: str,
    from_c: str,
) -> MarshaledParameter:
    ptr = f"{name}Ptr"
    after = f"{name} <- peek {ptr}"
    fragment = f"{from_c} {name}"
    if custom.is_inout_parameter(c_function, name):
        return MarshaledParameter(
            None,
            Direction.INOUT,
            hs_type,
            append_arg(ptr),
            OutParameterGlue(f"with ({to_c} {name}) $ \\{ptr} ->", after, fragment),
        )
    return MarshaledParameter(
        None,
        Direction.OUT,
        hs_type,
        append_arg(ptr),
        OutParameterGlue(f"alloca $ \\{ptr} ->", after, fragment),
    )


def gen_marshal_result(
    symbols: KnownSymbols,
    custom: Customizations,
    c_function: str,
    is_constructor: bool,
    c_type: str,
) -> MarshaledResult:
    base, depth, is_const = split_c_type(c_type)
    sym = symbols.get(base)
    nullable = custom.maybe_null_result(c_function)

    if depth == 0:
        if base == "void":
            return MarshaledResult("()", lambda body: body)
        prim = PRIMITIVES.get(base)
        if prim is not None:
            return MarshaledResult(prim.hs_type, _lift(prim.from_c))
        if base in POINTER_BASE_TYPES:
            return MarshaledResult("Ptr ()", lambda body: body)
        if isinstance(sym, SymEnumType):
            hs = c_type_name_to_hs_type(base, custom)
            if sym.kind is EnumVariety.FLAGS:
                return MarshaledResult(f"[{hs}]", _lift("(toFlags . fromIntegral)"))
            return MarshaledResult(hs, _lift("(toEnum . fromIntegral)"))

    elif depth == 1:
        if base in STRING_BASE_TYPES:
            reader = "peekUTFString" if is_const else "readUTFString"
            if nullable:
                return MarshaledResult("Maybe String", _bind(f"maybePeek {reader}"))
            return MarshaledResult("String", _bind(reader))

        if isinstance(sym, SymObjectType):
            hs = c_type_name_to_hs_type(base, custom)
            if not is_constructor:
                maker = "makeNewGObject"
            elif custom.floating_object_type in sym.parents:
                maker = "makeNewObject"
            else:
                maker = "constructNewGObject"
            if nullable:
                return MarshaledResult(
                    f"Maybe {hs}",
                    lambda body: f"maybeNull ({maker} mk{hs}) $" + indent(1) + body,
                )
            return MarshaledResult(
                hs, lambda body: f"{maker} mk{hs} $" + indent(1) + body
            )

        if isinstance(sym, (SymStructType, SymTypeAlias)):
            hs = c_type_name_to_hs_type(base, custom)
            return MarshaledResult(hs, _bind("peek"))

        if isinstance(sym, (SymBoxedType, SymClassType)):
            hs = c_type_name_to_hs_type(base, custom)
            return MarshaledResult(hs, _bind(f"makeNew{hs}"))

    raise MarshalError(c_function, c_type, "result")


def _lift(conversion: str) -> GlueInserter:
    return lambda body: f"liftM {conversion} $" + indent(1) + body


def _bind(reader: str) -> GlueInserter:
    return lambda body: body + indent(1) + f">>= {reader}"


def gen_marshal_property(
    symbols: KnownSymbols, custom: Customizations, owner: str, c_type: str
) -> Tuple[str, str]:
    base, depth, _ = split_c_type(c_type)
    sym = symbols.get(base)

    if depth == 0:
        prim = PRIMITIVES.get(base)
        if prim is not None:
            return (prim.hs_type, prim.gvalue)
        if base in POINTER_BASE_TYPES:
            return ("Ptr ()", "GVpointer")
        if isinstance(sym, SymEnumType):
            hs = c_type_name_to_hs_type(base, custom)
            if sym.kind is EnumVariety.FLAGS:
                return (f"[{hs}]", "GVflags")
            return (hs, "GVenum")
    elif depth == 1:
        if base in STRING_BASE_TYPES:
            return ("String", "GVstring")
        if isinstance(sym, SymObjectType):
            return (c_type_name_to_hs_type(base, custom), "GVobject")
        if isinstance(sym, (SymBoxedType, SymStructType)):
            return (c_type_name_to_hs_type(base, custom), "GVboxed")

    raise MarshalError(owner, c_type, "property")


def convert_signal_type(
    symbols: KnownSymbols, custom: Customizations, owner: str, c_type: str
) -> Tuple[str, str]:
    base, depth, _ = split_c_type(c_type)
    sym = symbols.get(base)

    if depth == 0:
        if base == "void":
            return ("NONE", "()")
        prim = PRIMITIVES.get(base)
        if prim is not None:
            return (prim.signal_category, prim.hs_type)
        if base in POINTER_BASE_TYPES:
            return ("PTR", "Ptr ()")
        if isinstance(sym, SymEnumType):
            hs = c_type_name_to_hs_type(base, custom)
            if sym.kind is EnumVariety.FLAGS:
                return ("FLAGS", f"[{hs}]")
            return ("ENUM", hs)
    elif depth == 1:
        if base in STRING_BASE_TYPES:
            return ("STRING", "String")
        if isinstance(sym, SymObjectType):
            return ("OBJECT", c_type_name_to_hs_type(base, custom))
        if isinstance(sym, (SymBoxedType, SymStructType, SymTypeAlias)):
            return ("BOXED", c_type_name_to_hs_type(base, custom))
        if base in POINTER_BASE_TYPES or sym is not None:
            return ("PTR", "Ptr ()")

    raise MarshalError(owner, c_type, "signal argument")
