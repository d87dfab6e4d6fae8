from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass, field
from typing import FrozenSet, List, Mapping, Tuple

DEFAULT_KNOWN_PREFIXES = ["Gtk", "Gdk", "Pango", "Atk", "G"]

DEFAULT_KNOWN_STD_MODULES = ["Maybe", "Monad", "Char", "List", "Data.IORef"]


@dataclass
class Customizations:
    known_prefixes: List[str] = field(
        default_factory=lambda: list(DEFAULT_KNOWN_PREFIXES)
    )
    function_name_fixes: Mapping[str, str] = field(default_factory=OrderedDict)
    nullable_results: FrozenSet[str] = frozenset()
    nullable_parameters: Mapping[str, FrozenSet[str]] = field(
        default_factory=OrderedDict
    )
    inout_parameters: Mapping[str, FrozenSet[str]] = field(default_factory=OrderedDict)
    nuked_parameter_docs: Mapping[str, FrozenSet[str]] = field(
        default_factory=OrderedDict
    )
    leaf_classes: FrozenSet[str] = frozenset()
    root_object_type: str = "GObject"
    floating_object_type: str = "GtkObject"
    version_macro: str = "GTK_CHECK_VERSION"
    deprecated_macro: str = "DISABLE_DEPRECATED"
    known_std_modules: List[str] = field(
        default_factory=lambda: list(DEFAULT_KNOWN_STD_MODULES)
    )
    default_std_imports: List[str] = field(
        default_factory=lambda: ["import Monad\t(liftM)"]
    )
    default_extra_imports: List[str] = field(
        default_factory=lambda: [
            "import System.Glib.FFI",
            "{#import Graphics.UI.Gtk.Types#}",
            "-- CHECKME: extra imports may be required",
        ]
    )
    line_width: int = 80

    def maybe_null_result(self, c_function: str) -> bool:
        return c_function in self.nullable_results

    def maybe_null_parameter(self, c_function: str, param_name: str) -> bool:
        return param_name in self.nullable_parameters.get(c_function, ())

    def is_inout_parameter(self, c_function: str, param_name: str) -> bool:
        return param_name in self.inout_parameters.get(c_function, ())

    def nuke_parameter_documentation(self, c_function: str, param_name: str) -> bool:
        return param_name in self.nuked_parameter_docs.get(c_function, ())

    def leaf_class(self, c_type: str) -> bool:
        return c_type in self.leaf_classes

    def fix_c_function_name(self, word: str) -> str:
        return self.function_name_fixes.get(word, word)


def load_customizations() -> Customizations:
    return Customizations(
        function_name_fixes=OrderedDict(
            [
                ("hadjustment", "hAdjustment"),
                ("vadjustment", "vAdjustment"),
                ("hscrollbar", "hScrollbar"),
                ("vscrollbar", "vScrollbar"),
                ("uri", "URI"),
                ("uris", "URIs"),
            ]
        ),
        nullable_results=frozenset(
            [
                "gtk_widget_get_parent",
                "gtk_widget_get_toplevel",
                "gtk_window_get_focus",
                "gtk_window_get_title",
                "gtk_button_get_image",
                "gtk_label_get_mnemonic_widget",
                "gtk_notebook_get_tab_label",
                "gtk_entry_get_completion",
            ]
        ),
        nullable_parameters=_param_table(
            [
                ("gtk_button_set_image", ["image"]),
                ("gtk_window_set_focus", ["focus"]),
                ("gtk_window_set_transient_for", ["parent"]),
                ("gtk_label_set_mnemonic_widget", ["widget"]),
                ("gtk_notebook_append_page", ["tabLabel"]),
                ("gtk_entry_set_completion", ["completion"]),
            ]
        ),
        inout_parameters=_param_table(
            [
                ("gtk_text_iter_forward_search", ["matchStart", "matchEnd"]),
            ]
        ),
        nuked_parameter_docs=_param_table(
            [
                ("gtk_widget_get_size_request", ["widget"]),
                ("gtk_window_get_size", ["window"]),
            ]
        ),
        leaf_classes=frozenset(
            [
                "GtkAccelGroup",
                "GtkAdjustment",
                "GtkArrow",
                "GtkCalendar",
                "GtkClipboard",
                "GtkDrawingArea",
                "GtkEntryCompletion",
                "GtkFileChooserButton",
                "GtkHSeparator",
                "GtkImage",
                "GtkProgressBar",
                "GtkSizeGroup",
                "GtkSpinner",
                "GtkStatusbar",
                "GtkTextMark",
                "GtkTooltips",
                "GtkVSeparator",
            ]
        ),
    )


def _param_table(entries: List[Tuple[str, List[str]]]) -> Mapping[str, FrozenSet[str]]:
    return OrderedDict((function, frozenset(params)) for function, params in entries)
