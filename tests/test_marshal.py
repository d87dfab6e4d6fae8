import unittest
from collections import OrderedDict

from apigen.customization import Customizations
from apigen.marshal import (Direction, convert_signal_type, gen_marshal_parameter,
                            gen_marshal_property, gen_marshal_result,
                            normalize_c_type, split_c_type)
from apigen.model import MarshalError
from apigen.symbols import SymObjectType

from .data import custom, known_symbols

CALL = "{# call f #}"


class TestCTypes(unittest.TestCase):
    def test_normalize(self):
        self.assertEqual(normalize_c_type("const-gchar*"), "const gchar*")
        self.assertEqual(normalize_c_type("GtkWidget *"), "GtkWidget*")
        self.assertEqual(normalize_c_type("gchar * *"), "gchar**")

    def test_split(self):
        self.assertEqual(split_c_type("gchar**"), ("gchar", 2, False))
        self.assertEqual(split_c_type("const-gchar*"), ("gchar", 1, True))
        self.assertEqual(split_c_type("gint"), ("gint", 0, False))


class TestMarshalParameter(unittest.TestCase):
    def setUp(self):
        self.symbols = known_symbols()
        self.custom = custom()

    def marshal(self, name, c_type, custom=None):
        return gen_marshal_parameter(
            self.symbols, custom or self.custom, "f", name, c_type
        )

    def test_primitive(self):
        m = self.marshal("width", "gint")
        self.assertEqual((m.constraint, m.direction, m.type), (None, Direction.IN, "Int"))
        self.assertEqual(m.glue(CALL), CALL + "\n    (fromIntegral width)")

        m = self.marshal("flag", "gboolean")
        self.assertEqual(m.type, "Bool")
        self.assertEqual(m.glue(CALL), CALL + "\n    (fromBool flag)")

    def test_enum_and_flags(self):
        m = self.marshal("relief", "GtkReliefStyle")
        self.assertEqual(m.type, "ReliefStyle")
        self.assertEqual(m.glue(CALL), CALL + "\n    ((fromIntegral . fromEnum) relief)")

        m = self.marshal("options", "GtkAttachOptions")
        self.assertEqual(m.type, "[AttachOptions]")
        self.assertEqual(
            m.glue(CALL), CALL + "\n    ((fromIntegral . fromFlags) options)"
        )

    def test_string(self):
        m = self.marshal("label", "const-gchar*")
        self.assertEqual(m.type, "String")
        self.assertEqual(
            m.glue(CALL),
            "withUTFString label $ \\labelPtr ->\n  " + CALL + "\n    labelPtr",
        )

    def test_nullable_string(self):
        nullable = Customizations(
            nullable_parameters=OrderedDict([("f", frozenset(["label"]))])
        )
        m = self.marshal("label", "const-gchar*", nullable)
        self.assertEqual(m.type, "Maybe String")
        self.assertTrue(m.glue(CALL).startswith("maybeWith withUTFString label $"))

    def test_out_parameter(self):
        m = self.marshal("width", "gint*")
        self.assertEqual(m.direction, Direction.OUT)
        self.assertEqual(m.type, "Int")
        self.assertEqual(m.glue(CALL), CALL + "\n    widthPtr")
        self.assertEqual(m.out.before, "alloca $ \\widthPtr ->")
        self.assertEqual(m.out.after, "width <- peek widthPtr")
        self.assertEqual(m.out.fragment, "fromIntegral width")

    def test_enum_out_parameter(self):
        m = self.marshal("relief", "GtkReliefStyle*")
        self.assertEqual(m.direction, Direction.OUT)
        self.assertEqual(m.out.fragment, "(toEnum . fromIntegral) relief")

    def test_inout_parameter(self):
        inout = Customizations(inout_parameters=OrderedDict([("f", frozenset(["x"]))]))
        m = self.marshal("x", "gint*", inout)
        self.assertEqual(m.direction, Direction.INOUT)
        self.assertEqual(m.out.before, "with (fromIntegral x) $ \\xPtr ->")

    def test_object(self):
        m = self.marshal("widget", "GtkWidget*")
        self.assertEqual(m.constraint, "WidgetClass widget")
        self.assertEqual(m.type, "widget")
        self.assertEqual(m.glue(CALL), CALL + "\n    (toWidget widget)")

    def test_leaf_object(self):
        leaf = Customizations(leaf_classes=frozenset(["GtkWidget"]))
        m = self.marshal("widget", "GtkWidget*", leaf)
        self.assertIsNone(m.constraint)
        self.assertEqual(m.type, "Widget")

    def test_nullable_object(self):
        nullable = Customizations(
            nullable_parameters=OrderedDict([("f", frozenset(["widget"]))])
        )
        m = self.marshal("widget", "GtkWidget*", nullable)
        self.assertEqual(m.constraint, "WidgetClass widget")
        self.assertEqual(m.type, "Maybe widget")
        self.assertEqual(
            m.glue(CALL),
            CALL + "\n    (maybe (Widget nullForeignPtr) toWidget widget)",
        )

    def test_struct_and_boxed(self):
        m = self.marshal("rect", "GdkRectangle*")
        self.assertEqual(m.type, "Rectangle")
        self.assertEqual(
            m.glue(CALL), "with rect $ \\rectPtr ->\n  " + CALL + "\n    rectPtr"
        )

        m = self.marshal("requisition", "GtkRequisition*")
        self.assertEqual(m.type, "Requisition")
        self.assertTrue(m.glue(CALL).startswith("withRequisition requisition $"))

    def test_string_out_parameter(self):
        m = self.marshal("text", "gchar**")
        self.assertEqual(m.direction, Direction.OUT)
        self.assertEqual(m.out.after, "text <- peek textPtr >>= readUTFString")

    def test_unknown_type(self):
        with self.assertRaises(MarshalError) as ctx:
            self.marshal("table", "GHashTable*")
        self.assertEqual(ctx.exception.c_type, "GHashTable*")
        self.assertEqual(ctx.exception.c_function, "f")


class TestMarshalResult(unittest.TestCase):
    def setUp(self):
        self.symbols = known_symbols()
        self.custom = custom()

    def marshal(self, c_type, is_constructor=False, custom=None, symbols=None):
        return gen_marshal_result(
            symbols or self.symbols, custom or self.custom, "f", is_constructor, c_type
        )

    def test_void(self):
        r = self.marshal("void")
        self.assertEqual(r.type, "()")
        self.assertEqual(r.glue(CALL), CALL)

    def test_primitive(self):
        r = self.marshal("gboolean")
        self.assertEqual(r.type, "Bool")
        self.assertEqual(r.glue(CALL), "liftM toBool $\n  " + CALL)

    def test_enum(self):
        r = self.marshal("GtkReliefStyle")
        self.assertEqual(r.type, "ReliefStyle")
        self.assertEqual(r.glue(CALL), "liftM (toEnum . fromIntegral) $\n  " + CALL)

    def test_strings(self):
        self.assertEqual(
            self.marshal("const-gchar*").glue(CALL), CALL + "\n  >>= peekUTFString"
        )
        self.assertEqual(self.marshal("gchar*").glue(CALL), CALL + "\n  >>= readUTFString")

        nullable = Customizations(nullable_results=frozenset(["f"]))
        r = self.marshal("const-gchar*", custom=nullable)
        self.assertEqual(r.type, "Maybe String")
        self.assertEqual(r.glue(CALL), CALL + "\n  >>= maybePeek peekUTFString")

    def test_objects(self):
        r = self.marshal("GtkWidget*")
        self.assertEqual(r.type, "Widget")
        self.assertEqual(r.glue(CALL), "makeNewGObject mkWidget $\n  " + CALL)

        r = self.marshal("GtkButton*", is_constructor=True)
        self.assertEqual(r.glue(CALL), "makeNewObject mkButton $\n  " + CALL)

        symbols = {"GtkSettings": SymObjectType(("GtkSettings", "GObject"))}
        r = self.marshal("GtkSettings*", is_constructor=True, symbols=symbols)
        self.assertEqual(r.glue(CALL), "constructNewGObject mkSettings $\n  " + CALL)

    def test_nullable_object(self):
        nullable = Customizations(nullable_results=frozenset(["f"]))
        r = self.marshal("GtkWidget*", custom=nullable)
        self.assertEqual(r.type, "Maybe Widget")
        self.assertEqual(r.glue(CALL), "maybeNull (makeNewGObject mkWidget) $\n  " + CALL)

    def test_struct_and_boxed(self):
        self.assertEqual(self.marshal("GdkRectangle*").glue(CALL), CALL + "\n  >>= peek")
        r = self.marshal("GtkRequisition*")
        self.assertEqual(r.type, "Requisition")
        self.assertEqual(r.glue(CALL), CALL + "\n  >>= makeNewRequisition")

    def test_unknown_type(self):
        with self.assertRaisesRegex(MarshalError, "result"):
            self.marshal("GHashTable*")


class TestMarshalPropertiesAndSignals(unittest.TestCase):
    def setUp(self):
        self.symbols = known_symbols()
        self.custom = custom()

    def prop(self, c_type):
        return gen_marshal_property(self.symbols, self.custom, "GtkWidget:p", c_type)

    def signal(self, c_type):
        return convert_signal_type(self.symbols, self.custom, "s", c_type)

    def test_property_types(self):
        self.assertEqual(self.prop("gchar*"), ("String", "GVstring"))
        self.assertEqual(self.prop("gboolean"), ("Bool", "GVboolean"))
        self.assertEqual(self.prop("guint"), ("Int", "GVuint"))
        self.assertEqual(self.prop("GtkReliefStyle"), ("ReliefStyle", "GVenum"))
        self.assertEqual(self.prop("GtkAttachOptions"), ("[AttachOptions]", "GVflags"))
        self.assertEqual(self.prop("GtkWidget*"), ("Widget", "GVobject"))
        self.assertEqual(self.prop("GtkRequisition*"), ("Requisition", "GVboxed"))
        with self.assertRaises(MarshalError):
            self.prop("GHashTable*")

    def test_signal_types(self):
        self.assertEqual(self.signal("void"), ("NONE", "()"))
        self.assertEqual(self.signal("gboolean"), ("BOOL", "Bool"))
        self.assertEqual(self.signal("gint"), ("INT", "Int"))
        self.assertEqual(self.signal("guint"), ("WORD", "Int"))
        self.assertEqual(self.signal("const-gchar*"), ("STRING", "String"))
        self.assertEqual(self.signal("GtkReliefStyle"), ("ENUM", "ReliefStyle"))
        self.assertEqual(self.signal("GtkAttachOptions"), ("FLAGS", "[AttachOptions]"))
        self.assertEqual(self.signal("GtkWidget*"), ("OBJECT", "Widget"))
        self.assertEqual(self.signal("GtkAllocation*"), ("BOXED", "Allocation"))
        self.assertEqual(self.signal("gpointer"), ("PTR", "Ptr ()"))
        self.assertEqual(self.signal("GtkCallback*"), ("PTR", "Ptr ()"))
        with self.assertRaises(MarshalError):
            self.signal("GHashTable*")


if __name__ == "__main__":
    unittest.main()
