from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class DocText:
    text: str


@dataclass(frozen=True)
class DocArg:
    name: str


@dataclass(frozen=True)
class DocLiteral:
    text: str


@dataclass(frozen=True)
class DocEmphasis:
    text: str


@dataclass(frozen=True)
class DocFuncXRef:
    cname: str


@dataclass(frozen=True)
class DocTypeXRef:
    cname: str


@dataclass(frozen=True)
class DocOtherXRef:
    text: str


DocParaSpan = Union[
    DocText, DocArg, DocLiteral, DocEmphasis, DocFuncXRef, DocTypeXRef, DocOtherXRef
]
Spans = Tuple[DocParaSpan, ...]


@dataclass(frozen=True)
class DocParaText:
    spans: Spans


@dataclass(frozen=True)
class DocParaProgram:
    text: str


@dataclass(frozen=True)
class DocParaTitle:
    title: str


@dataclass(frozen=True)
class DocParaDefItem:
    term: Spans
    spans: Spans


@dataclass(frozen=True)
class DocParaListItem:
    spans: Spans


DocPara = Union[DocParaText, DocParaProgram, DocParaTitle, DocParaDefItem, DocParaListItem]


@dataclass(frozen=True)
class ParamDoc:
    name: str
    paragraph: Spans = ()


@dataclass(frozen=True)
class FuncDoc:
    name: str
    paragraphs: Tuple[DocPara, ...] = ()
    params: Tuple[ParamDoc, ...] = ()
    since: str = ""


@dataclass(frozen=True)
class PropDoc:
    name: str
    paragraphs: Tuple[DocPara, ...] = ()
    since: str = ""


@dataclass(frozen=True)
class SignalDoc:
    name: str
    paragraphs: Tuple[DocPara, ...] = ()
    since: str = ""


@dataclass(frozen=True)
class ModuleDoc:
    name: str
    summary: str = ""
    description: Tuple[DocPara, ...] = ()
    functions: Tuple[FuncDoc, ...] = ()
    properties: Tuple[PropDoc, ...] = ()
    signals: Tuple[SignalDoc, ...] = ()
    since: str = ""


def text_para(text: str) -> DocParaText:
    return DocParaText((DocText(text),))


def since_of(doc: Optional[Union[FuncDoc, PropDoc, SignalDoc]]) -> str:
    return doc.since if doc is not None else ""
