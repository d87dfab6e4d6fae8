from __future__ import annotations

from typing import List, Optional

from .customization import Customizations

HASKELL_KEYWORDS = {
    "case",
    "class",
    "data",
    "default",
    "deriving",
    "do",
    "else",
    "foreign",
    "if",
    "import",
    "in",
    "infix",
    "infixl",
    "infixr",
    "instance",
    "let",
    "module",
    "newtype",
    "of",
    "then",
    "type",
    "where",
}

# Types whose C name is already their Haskell name.
UNPREFIXED_TYPES = {"GObject"}

_DEFAULTS = Customizations()


def split_by(sep: str, text: str) -> List[str]:
    return [word for word in text.split(sep) if word]


def lower_case_first_char(name: str) -> str:
    return name[:1].lower() + name[1:]


def upper_case_first_char(name: str) -> str:
    return name[:1].upper() + name[1:]


def to_studly_caps(name: str) -> str:
    return "".join(upper_case_first_char(word) for word in split_by("_", name))


def strip_known_prefix(name: str, prefixes: List[str]) -> str:
    for prefix in sorted(prefixes, key=len, reverse=True):
        rest = name[len(prefix) :]
        if name.startswith(prefix) and rest[:1].isupper():
            return rest
    return name


def c_func_name_to_hs_name(
    cname: str, custom: Optional[Customizations] = None
) -> str:
    custom = custom or _DEFAULTS
    words = [custom.fix_c_function_name(word) for word in split_by("_", cname)]
    studly = "".join(upper_case_first_char(word) for word in words)
    return lower_case_first_char(strip_known_prefix(studly, custom.known_prefixes))


def c_param_name_to_hs_name(cname: str) -> str:
    return lower_case_first_char(to_studly_caps(cname))


def c_type_name_to_hs_type(
    cname: str, custom: Optional[Customizations] = None
) -> str:
    custom = custom or _DEFAULTS
    if cname in UNPREFIXED_TYPES:
        return cname
    return strip_known_prefix(cname, custom.known_prefixes)


def c_const_name_to_hs_name(
    cname: str, custom: Optional[Customizations] = None
) -> str:
    custom = custom or _DEFAULTS
    studly = "".join(word.capitalize() for word in split_by("_", cname))
    return strip_known_prefix(studly, custom.known_prefixes)


def change_illegal_names(name: str) -> str:
    if name in HASKELL_KEYWORDS:
        return name + "'"
    return name


def hs_param_name(cname: str) -> str:
    return change_illegal_names(c_param_name_to_hs_name(cname))


def strip_prefix(cname: str, prefix: str) -> str:
    if cname.startswith(prefix):
        return cname[len(prefix) :]
    return cname
