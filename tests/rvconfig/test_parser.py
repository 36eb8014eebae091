"""Tests for parsing token streams into class declaration trees."""

from rvconfig import (
    RVConfigArray, RVConfigAssignKind, RVConfigDiagnosticKind, RVConfigNumber, RVConfigParser, RVConfigSeverity,
    RVConfigString, RVConfigTokenizer, RVConfigUnresolved
)


def parse(text, report_unquoted_strings=True):
    tokens = RVConfigTokenizer().tokenize(text, "test.hpp")
    parser = RVConfigParser(tokens, "test.hpp", report_unquoted_strings)
    classes, diagnostics = parser.parse()
    return classes, diagnostics, parser


def kinds(diagnostics):
    return [d.kind for d in diagnostics]


class TestRVConfigParserDeclarations:
    """Test class declarations and their members."""

    def test_forward_declaration(self):
        """Test a class without a body is a forward declaration."""
        classes, diagnostics, _parser = parse("class ItemCore;")
        assert diagnostics == []
        assert len(classes) == 1
        assert classes[0].is_forward
        assert classes[0].base is None
        assert classes[0].qualified_name == "ItemCore"

    def test_forward_declaration_with_base(self):
        """Test a forward declaration may name a base."""
        classes, _diagnostics, _parser = parse("class A: B;")
        assert classes[0].is_forward
        assert classes[0].base == "B"

    def test_empty_body(self):
        """Test an empty body is a full definition."""
        classes, diagnostics, _parser = parse("class A {};")
        assert diagnostics == []
        assert not classes[0].is_forward

    def test_nested_classes_are_qualified(self):
        """Test nested classes get qualified names and keep their written base."""
        classes, _diagnostics, _parser = parse(
            "class CfgWeapons { class ItemCore; class Bandage: ItemCore { class ItemInfo: Info { mass = 1; }; }; };"
        )
        weapons = classes[0]
        assert [c.qualified_name for c in weapons.classes] == ["CfgWeapons/ItemCore", "CfgWeapons/Bandage"]
        bandage = weapons.classes[1]
        assert bandage.base == "ItemCore"
        assert bandage.classes[0].qualified_name == "CfgWeapons/Bandage/ItemInfo"
        assert bandage.classes[0].base == "Info"
        assert [n.qualified_name for n in weapons.walk()] == [
            "CfgWeapons", "CfgWeapons/ItemCore", "CfgWeapons/Bandage", "CfgWeapons/Bandage/ItemInfo"
        ]

    def test_positions_are_recorded(self):
        """Test declarations remember where they were written."""
        classes, _diagnostics, _parser = parse("class A {\n    class B {};\n};")
        nested = classes[0].classes[0]
        assert nested.source_id == "test.hpp"
        assert (nested.position.line, nested.position.column) == (2, 5)
        assert str(nested.position) == "test.hpp:2:5"

    def test_property_values(self):
        """Test numbers, strings and arrays parse to values."""
        classes, diagnostics, _parser = parse(
            'class A { mass = 0.6; name = "Field Dressing"; list[] = {1, "two", {3}}; };'
        )
        assert diagnostics == []
        props = classes[0].properties
        assert props["mass"].value == RVConfigNumber(0.6)
        assert props["name"].value == RVConfigString("Field Dressing")
        assert props["list"].value == RVConfigArray((
            RVConfigNumber(1.0), RVConfigString("two"), RVConfigArray((RVConfigNumber(3.0),))
        ))
        assert props["list"].is_array
        assert props["list"].kind == RVConfigAssignKind.SET

    def test_array_trailing_comma_and_empty_array(self):
        """Test arrays accept a trailing comma and may be empty."""
        classes, diagnostics, _parser = parse("class A { a[] = {1, 2,}; b[] = {}; };")
        assert diagnostics == []
        assert classes[0].properties["a"].value.length() == 2
        assert classes[0].properties["b"].value == RVConfigArray(())

    def test_append_assignment(self):
        """Test += records an append assignment."""
        classes, _diagnostics, _parser = parse("class A { items[] += {1}; };")
        assignment = classes[0].properties["items"]
        assert assignment.kind == RVConfigAssignKind.APPEND
        assert assignment.is_array

    def test_delete_statement(self):
        """Test delete statements are collected on the class."""
        classes, diagnostics, _parser = parse("class A: B { delete ItemInfo; };")
        assert diagnostics == []
        assert [d.name for d in classes[0].deletes] == ["ItemInfo"]

    def test_unresolved_macro_value(self):
        """Test a macro call left unexpanded becomes an unresolved value."""
        classes, _diagnostics, _parser = parse("class A { author = ECSTRING(common,ACETeam); };")
        value = classes[0].properties["author"].value
        assert isinstance(value, RVConfigUnresolved)
        assert value.raw == "ECSTRING(common,ACETeam)"
        assert value.to_python() == "commonACETeam"

    def test_enum(self):
        """Test enum entries auto-increment from the last value."""
        _classes, diagnostics, parser = parse("enum { destructNo, destructBuilding = 4, destructEngine };")
        assert diagnostics == []
        assert parser.enums == {
            "destructNo": RVConfigNumber(0.0),
            "destructBuilding": RVConfigNumber(4.0),
            "destructEngine": RVConfigNumber(5.0),
        }


class TestRVConfigParserDiagnostics:
    """Test that problems are recorded and parsing carries on."""

    def test_unquoted_string_warning(self):
        """Test bare-word values are strings with a warning."""
        classes, diagnostics, _parser = parse("class A { sound = click; };")
        assert classes[0].properties["sound"].value == RVConfigString("click")
        assert kinds(diagnostics) == [RVConfigDiagnosticKind.UNQUOTED_STRING]
        assert diagnostics[0].severity == RVConfigSeverity.WARNING

    def test_unquoted_string_warning_can_be_disabled(self):
        """Test the unquoted-string warning is optional."""
        _classes, diagnostics, _parser = parse("class A { sound = click; };", report_unquoted_strings=False)
        assert diagnostics == []

    def test_duplicate_property_last_wins(self):
        """Test a repeated property keeps the last value and is reported."""
        classes, diagnostics, _parser = parse("class A { x = 1; y = 2; x = 3; };")
        props = classes[0].properties
        assert props["x"].value == RVConfigNumber(3.0)
        assert list(props) == ["y", "x"]
        assert kinds(diagnostics) == [RVConfigDiagnosticKind.DUPLICATE_PROPERTY]

    def test_array_mismatch(self):
        """Test array markers and array values must agree."""
        _classes, diagnostics, _parser = parse("class A { a[] = 1; b = {1}; };")
        assert kinds(diagnostics) == [RVConfigDiagnosticKind.ARRAY_MISMATCH, RVConfigDiagnosticKind.ARRAY_MISMATCH]

    def test_missing_semicolon_after_property(self):
        """Test a missing ';' is reported and the following members are still parsed."""
        classes, diagnostics, _parser = parse("class A {\n    x = 1\n    y = 2;\n    z = 3;\n};")
        assert kinds(diagnostics) == [RVConfigDiagnosticKind.SYNTAX_ERROR]
        assert diagnostics[0].line == 3
        assert "z" in classes[0].properties

    def test_missing_semicolon_after_class_body(self):
        """Test a class body without its closing ';' is kept."""
        classes, diagnostics, _parser = parse("class A { x = 1; }\nclass B {};")
        assert [c.name for c in classes] == ["A", "B"]
        assert kinds(diagnostics) == [RVConfigDiagnosticKind.SYNTAX_ERROR]

    def test_unterminated_body(self):
        """Test a body that runs to the end of input is reported."""
        classes, diagnostics, _parser = parse("class A { x = 1;")
        assert classes[0].properties["x"].value == RVConfigNumber(1.0)
        assert kinds(diagnostics) == [RVConfigDiagnosticKind.SYNTAX_ERROR]
        assert "Unterminated" in diagnostics[0].message

    def test_stray_top_level_tokens(self):
        """Test properties and stray braces at the top level are rejected."""
        classes, diagnostics, _parser = parse("x = 1;\n}\nclass A {};")
        assert [c.name for c in classes] == ["A"]
        assert kinds(diagnostics) == [RVConfigDiagnosticKind.SYNTAX_ERROR, RVConfigDiagnosticKind.SYNTAX_ERROR]

    def test_error_inside_array_keeps_rest_of_class(self):
        """Test a malformed array is skipped as a whole and the class body carries on."""
        classes, diagnostics, _parser = parse(
            "class A { bad[] = {1 2}; after = 5; class N { x = 1; }; };\nclass B {};"
        )
        assert kinds(diagnostics) == [RVConfigDiagnosticKind.SYNTAX_ERROR]
        assert [c.name for c in classes] == ["A", "B"]
        assert list(classes[0].properties) == ["after"]
        assert [c.name for c in classes[0].classes] == ["N"]

    def test_error_inside_nested_array(self):
        """Test recovery from an error in an inner array skips the outer array too."""
        classes, diagnostics, _parser = parse("class A { bad[] = {{1 2}, 3}; after = 5; };")
        assert kinds(diagnostics) == [RVConfigDiagnosticKind.SYNTAX_ERROR]
        assert list(classes[0].properties) == ["after"]

    def test_unclosed_array_stops_at_statement_end(self):
        """Test an array left open is abandoned at the end of its statement."""
        classes, diagnostics, _parser = parse("class A { bad[] = {1, 2; after = 5; };")
        assert kinds(diagnostics) == [RVConfigDiagnosticKind.SYNTAX_ERROR]
        assert list(classes[0].properties) == ["after"]

    def test_error_inside_nested_body_keeps_outer_class(self):
        """Test an error in a nested class body does not end the enclosing class."""
        classes, diagnostics, _parser = parse(
            "class A { class N { x = ; y = 1; }; after = 5; class M {}; };"
        )
        assert kinds(diagnostics) == [RVConfigDiagnosticKind.SYNTAX_ERROR]
        outer = classes[0]
        assert list(outer.properties) == ["after"]
        assert [c.name for c in outer.classes] == ["N", "M"]
        assert list(outer.classes[0].properties) == ["y"]

    def test_top_level_delete_is_rejected(self):
        """Test delete is only accepted inside a class body."""
        classes, diagnostics, _parser = parse("delete Foo;\nclass A {};")
        assert [c.name for c in classes] == ["A"]
        assert kinds(diagnostics) == [RVConfigDiagnosticKind.SYNTAX_ERROR]
        assert "delete" in diagnostics[0].message

    def test_bad_member_skips_to_statement_end(self):
        """Test a malformed member does not lose the rest of the class."""
        classes, diagnostics, _parser = parse("class A { x = ; class B { y = 2; }; };")
        assert kinds(diagnostics) == [RVConfigDiagnosticKind.SYNTAX_ERROR]
        assert [c.name for c in classes[0].classes] == ["B"]
