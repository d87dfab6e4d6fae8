from __future__ import annotations

import re
import sys
import textwrap
from typing import List, Sequence

if sys.version_info >= (3, 11):
    from typing import assert_never
else:
    from typing_extensions import assert_never

from .customization import Customizations
from .docs import (DocArg, DocEmphasis, DocFuncXRef, DocLiteral, DocOtherXRef,
                   DocPara, DocParaDefItem, DocParaListItem, DocParaProgram,
                   DocParaSpan, DocParaText, DocParaTitle, DocText, DocTypeXRef)
from .names import (c_const_name_to_hs_name, c_func_name_to_hs_name,
                    c_type_name_to_hs_type, hs_param_name)
from .symbols import KnownSymbols, SymEnumValue

HADDOCK_SPECIAL_CHARS = re.compile(r'([/@<`"\\])')
TRAILING_PUNCTUATION = re.compile(r"^(.*?)([.,;:)]*)$")
C_FUNCTION_CALL = re.compile(r"^([a-z][a-z0-9]*_[a-z0-9_]*)\(\)([.,;:)]*)$")

# Column at which the first wrapped line of a paragraph starts ("-- | ").
FIRST_LINE_COLUMN = 3


class DocFormatter:
    def __init__(
        self, symbols: KnownSymbols, custom: Customizations, handle_nulls: bool
    ):
        self.symbols = symbols
        self.custom = custom
        self.handle_nulls = handle_nulls

    def format_declaration(self, paragraphs: Sequence[DocPara]) -> str:
        content: List[str] = []
        for para in paragraphs:
            para_lines = self.format_paragraph(para)
            if not any(line.strip() for line in para_lines):
                continue
            if content:
                content.append("")
            content += para_lines
        if not content:
            return ""
        lines = [("-- | " + content[0]).rstrip()]
        lines += [f"-- {line}".rstrip() for line in content[1:]]
        lines.append("--")
        return "\n".join(lines) + "\n"

    def format_paragraph(self, para: DocPara) -> List[str]:
        width = self.custom.line_width - FIRST_LINE_COLUMN
        if isinstance(para, DocParaText):
            return self.wrap_spans(para.spans, width)
        elif isinstance(para, DocParaProgram):
            return ["> " + line for line in para.text.splitlines()]
        elif isinstance(para, DocParaTitle):
            return ["* " + escape_haddock(para.title)]
        elif isinstance(para, DocParaDefItem):
            term = self.format_spans(para.term)
            return self.wrap_words([f"[{term}]"] + self.words(para.spans), width)
        elif isinstance(para, DocParaListItem):
            return self.wrap_words(["*"] + self.words(para.spans), width)
        else:
            assert_never(para)

    def wrap_spans(
        self,
        spans: Sequence[DocParaSpan],
        width: int,
        initial_column: int = FIRST_LINE_COLUMN,
    ) -> List[str]:
        return self.wrap_words(self.words(spans), width, initial_column)

    def wrap_words(
        self, words: List[str], width: int, initial_column: int = FIRST_LINE_COLUMN
    ) -> List[str]:
        if not words:
            return [""]
        wrapper = textwrap.TextWrapper(
            width=max(width, 1),
            initial_indent=" " * initial_column,
            break_long_words=False,
            break_on_hyphens=False,
        )
        lines = wrapper.wrap(" ".join(words))
        lines[0] = lines[0][initial_column:]
        return lines

    def words(self, spans: Sequence[DocParaSpan]) -> List[str]:
        return [self.munge_word(word) for word in self.format_spans(spans).split()]

    def format_spans(self, spans: Sequence[DocParaSpan]) -> str:
        return "".join(self.format_span(span) for span in spans)

    def format_span(self, span: DocParaSpan) -> str:
        if isinstance(span, DocText):
            return escape_haddock(span.text)
        elif isinstance(span, DocArg):
            return f"@{hs_param_name(span.name)}@"
        elif isinstance(span, DocLiteral):
            return self.format_literal(span.text)
        elif isinstance(span, DocEmphasis):
            return f"/{escape_haddock(span.text)}/"
        elif isinstance(span, DocFuncXRef):
            return f"'{c_func_name_to_hs_name(span.cname, self.custom)}'"
        elif isinstance(span, DocTypeXRef):
            if span.cname in self.symbols:
                return f"'{c_type_name_to_hs_type(span.cname, self.custom)}'"
            return f"@{escape_haddock(span.cname)}@"
        elif isinstance(span, DocOtherXRef):
            return f"'{span.text}'"
        else:
            assert_never(span)

    def format_literal(self, text: str) -> str:
        if text == "TRUE":
            return "@True@"
        if text == "FALSE":
            return "@False@"
        if text == "NULL":
            return "@Nothing@" if self.handle_nulls else "@NULL@"
        return f"@{escape_haddock(text)}@"

    def munge_word(self, word: str) -> str:
        call = C_FUNCTION_CALL.match(word)
        if call is not None:
            cname, trailer = call.groups()
            return f"'{c_func_name_to_hs_name(cname, self.custom)}'{trailer}"
        core, trailer = TRAILING_PUNCTUATION.match(word).groups()
        if core in {"TRUE", "FALSE", "NULL"}:
            return self.format_literal(core) + trailer
        if isinstance(self.symbols.get(core), SymEnumValue):
            return f"'{c_const_name_to_hs_name(core, self.custom)}'{trailer}"
        return word


def escape_haddock(text: str) -> str:
    return HADDOCK_SPECIAL_CHARS.sub(r"\\\1", text)
