from apigen.customization import Customizations
from apigen.docs import (DocText, FuncDoc, ModuleDoc, ParamDoc, PropDoc,
                         SignalDoc, text_para)
from apigen.model import (VARARGS, Constructor, Enumeration, EnumMember,
                          EnumVariety, Method, Misc, MiscKind, Namespace,
                          Object, Parameter, Property, Signal)
from apigen.symbols import make_known_symbols

GTK_OBJECT = Object("Object", "GtkObject", parent="GObject")

GTK_WIDGET = Object(
    "Widget",
    "GtkWidget",
    parent="GtkObject",
    implements=("AtkImplementorIface",),
    methods=(
        Method("Show", "gtk_widget_show", "void"),
        Method(
            "SetSizeRequest",
            "gtk_widget_set_size_request",
            "void",
            (Parameter("gint", "width"), Parameter("gint", "height")),
        ),
        Method(
            "GetSizeRequest",
            "gtk_widget_get_size_request",
            "void",
            (Parameter("gint*", "width"), Parameter("gint*", "height")),
        ),
        Method("GetName", "gtk_widget_get_name", "const-gchar*"),
        Method(
            "SetName", "gtk_widget_set_name", "void", (Parameter("const-gchar*", "name"),)
        ),
        Method("GetTooltipText", "gtk_widget_get_tooltip_text", "gchar*"),
        Method(
            "SetTooltipText",
            "gtk_widget_set_tooltip_text",
            "void",
            (Parameter("const-gchar*", "text"),),
        ),
        Method("HideAll", "gtk_widget_hide_all", "void", deprecated=True),
        Method(
            "StyleGet",
            "gtk_widget_style_get",
            "void",
            (Parameter("const-gchar*", "first_property_name"), VARARGS),
        ),
        Method(
            "GetDefaultDirection",
            "gtk_widget_get_default_direction",
            "GtkTextDirection",
            shared=True,
        ),
    ),
    properties=(
        Property("Name", "name", "gchar*"),
        Property("Visible", "visible", "gboolean"),
        Property("HasDefault", "has_default", "gboolean"),
    ),
    signals=(
        Signal("Show", "show", "void", (Parameter("GtkWidget*", "widget"),)),
        Signal(
            "SizeAllocate",
            "size_allocate",
            "void",
            (Parameter("GtkWidget*", "widget"), Parameter("GtkAllocation*", "allocation")),
        ),
        Signal(
            "MnemonicActivate",
            "mnemonic-activate",
            "gboolean",
            (Parameter("GtkWidget*", "widget"), Parameter("gboolean", "arg1")),
        ),
    ),
)

GTK_CONTAINER = Object(
    "Container",
    "GtkContainer",
    parent="GtkWidget",
    methods=(
        Method("Add", "gtk_container_add", "void", (Parameter("GtkWidget*", "widget"),)),
    ),
)

GTK_BUTTON = Object(
    "Button",
    "GtkButton",
    parent="GtkContainer",
    constructors=(
        Constructor("New", "gtk_button_new"),
        Constructor(
            "NewWithLabel",
            "gtk_button_new_with_label",
            (Parameter("const-gchar*", "label"),),
        ),
        Constructor(
            "NewFromFormat",
            "gtk_button_new_from_format",
            (Parameter("const-gchar*", "format"), VARARGS),
        ),
    ),
    methods=(
        Method("Clicked", "gtk_button_clicked", "void"),
        Method("GetRelief", "gtk_button_get_relief", "GtkReliefStyle"),
        Method(
            "SetRelief",
            "gtk_button_set_relief",
            "void",
            (Parameter("GtkReliefStyle", "newstyle"),),
        ),
    ),
    properties=(Property("Label", "label", "gchar*"),),
    signals=(Signal("Clicked", "clicked", "void", (Parameter("GtkButton*", "button"),)),),
)

GTK_SPINNER = Object(
    "Spinner",
    "GtkSpinner",
    parent="GtkWidget",
    constructors=(Constructor("New", "gtk_spinner_new"),),
    methods=(Method("Start", "gtk_spinner_start", "void"),),
)

GTK_ENUMS = (
    Enumeration(
        "ReliefStyle",
        "GtkReliefStyle",
        EnumVariety.ENUM,
        (
            EnumMember("Normal", "GTK_RELIEF_NORMAL"),
            EnumMember("Half", "GTK_RELIEF_HALF"),
            EnumMember("None", "GTK_RELIEF_NONE"),
        ),
    ),
    Enumeration(
        "TextDirection",
        "GtkTextDirection",
        EnumVariety.ENUM,
        (EnumMember("Ltr", "GTK_TEXT_DIR_LTR"), EnumMember("Rtl", "GTK_TEXT_DIR_RTL")),
    ),
    Enumeration(
        "AttachOptions",
        "GtkAttachOptions",
        EnumVariety.FLAGS,
        (EnumMember("Expand", "GTK_EXPAND"), EnumMember("Fill", "GTK_FILL")),
    ),
)

GTK_MISC = (
    Misc(MiscKind.STRUCT, "Rectangle", "GdkRectangle"),
    Misc(MiscKind.BOXED, "Requisition", "GtkRequisition"),
    Misc(MiscKind.ALIAS, "Allocation", "GtkAllocation"),
    Misc(MiscKind.CALLBACK, "Callback", "GtkCallback"),
    Misc(MiscKind.CLASS, "WidgetClass", "GtkWidgetClass"),
)

FOO = Object(
    "Foo",
    "FooStruct",
    methods=(
        Method("GetWidth", "foo_get_width", "int"),
        Method("SetWidth", "foo_set_width", "void", (Parameter("int", "width"),)),
    ),
)

GTK_NAMESPACE = Namespace(
    "Gtk",
    objects=(GTK_OBJECT, GTK_WIDGET, GTK_CONTAINER, GTK_BUTTON, GTK_SPINNER),
    enums=GTK_ENUMS,
    misc=GTK_MISC,
)
FOO_NAMESPACE = Namespace("Foo", objects=(FOO,))

API = [GTK_NAMESPACE, FOO_NAMESPACE]


def func_doc(name, text, params=(), since=""):
    return FuncDoc(
        name,
        (text_para(text),),
        tuple(ParamDoc(pname, (DocText(ptext),)) for pname, ptext in params),
        since,
    )


WIDGET_DOC = ModuleDoc(
    "GtkWidget",
    functions=(
        func_doc("gtk_widget_show", "Flags a widget to be displayed."),
        func_doc(
            "gtk_widget_set_size_request",
            "Sets the minimum size of a widget.",
            [
                ("widget", "a GtkWidget"),
                ("width", "width to request"),
                ("height", "height to request"),
            ],
        ),
        func_doc(
            "gtk_widget_get_size_request",
            "Gets the size request that was explicitly set.",
            [
                ("widget", "a GtkWidget"),
                ("width", "return location for width"),
                ("height", "return location for height"),
            ],
        ),
        func_doc("gtk_widget_get_name", "Retrieves the name of a widget.", since="2.4"),
        func_doc("gtk_widget_set_name", "Sets the name of a widget.", since="2.4"),
    ),
    properties=(
        PropDoc("has-default", (text_para("Whether the widget is the default widget."),)),
        PropDoc("visible", (text_para("Whether the widget is visible."),)),
    ),
    signals=(
        SignalDoc("size-allocate", (text_para("Emitted on size allocation."),), "2.6"),
    ),
)

BUTTON_DOC = ModuleDoc(
    "GtkButton",
    functions=(
        FuncDoc(
            "gtk_button_new_with_label",
            (text_para("Creates a GtkButton widget with a GtkLabel child."),),
            (
                ParamDoc("label", (DocText("The text you want the GtkLabel to hold."),)),
                ParamDoc("Returns", (DocText("The newly created GtkButton widget."),)),
            ),
        ),
        func_doc("gtk_button_clicked", "Emits a clicked signal."),
    ),
)


def custom():
    return Customizations()


def known_symbols():
    return make_known_symbols(API, custom())


__all__ = [
    "API",
    "BUTTON_DOC",
    "FOO",
    "GTK_BUTTON",
    "GTK_CONTAINER",
    "GTK_SPINNER",
    "GTK_WIDGET",
    "WIDGET_DOC",
    "custom",
    "func_doc",
    "known_symbols",
]
