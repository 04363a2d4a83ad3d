"""
Tests for the kdlnode parser: document structure, argument/property
disambiguation, slashdash comments and structural errors.

Author: xwest
"""

import unittest
import sys
import os
import tempfile

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from kdlnode.config import ParserConfig
from kdlnode.lexer.reader import Reader
from kdlnode.lexer.errors import InvalidSyntaxError, LexerError
from kdlnode.parser.parser import Parser, parse, parse_file
from kdlnode.parser.nodes import Node, Value
from kdlnode.lexer.errors import ERROR_CODES
from kdlnode.lexer.tokens import SourceLocation
from kdlnode.parser.errors import ParseError, PARSER_ERROR_CODES


def _values(*literals):
    return [Value(literal) for literal in literals]


class TestDocumentStructure(unittest.TestCase):
    """Nodes, children and terminators."""
    
    def test_positional_arguments(self):
        nodes = parse("node 1 2 3")
        self.assertEqual(len(nodes), 1)
        self.assertEqual(nodes[0].name, "node")
        self.assertEqual(nodes[0].args, _values(1, 2, 3))
    
    def test_property(self):
        nodes = parse("node key=1")
        self.assertEqual(nodes[0].props, {"key": Value(1)})
        self.assertEqual(nodes[0].args, [])
    
    def test_children_block(self):
        nodes = parse("node { child1; child2 }")
        expected = Node("node", children=[Node("child1"), Node("child2")])
        self.assertEqual(nodes, [expected])
    
    def test_nested_block_comment_inside_node(self):
        nodes = parse('node /* a /* b */ c */ "arg"')
        self.assertEqual(nodes[0].args, _values("arg"))
    
    def test_empty_documents(self):
        self.assertEqual(parse(""), [])
        self.assertEqual(parse("  \n\n  // only a comment"), [])
        self.assertEqual(parse("/* block */\r\n"), [])
    
    def test_newlines_and_semicolons_end_nodes(self):
        nodes = parse("a 1\nb 2; c\r\nd")
        self.assertEqual([node.name for node in nodes], ["a", "b", "c", "d"])
        self.assertEqual(nodes[1].args, _values(2))
    
    def test_comments_between_nodes(self):
        nodes = parse("// heading\nnode 1 // trailing\n/* gap */ other")
        self.assertEqual([node.name for node in nodes], ["node", "other"])
        self.assertEqual(nodes[0].args, _values(1))
    
    def test_line_continuation_joins_lines(self):
        nodes = parse("node 1 \\\n    2 \\ // comment\n    3")
        self.assertEqual(nodes[0].args, _values(1, 2, 3))
    
    def test_multiline_children(self):
        text = "parent {\n    child 1\n\n    other {\n        leaf\n    }\n}\nsibling\n"
        nodes = parse(text)
        self.assertEqual([node.name for node in nodes], ["parent", "sibling"])
        parent = nodes[0]
        self.assertEqual([child.name for child in parent.children], ["child", "other"])
        self.assertEqual(parent.children[1].children, [Node("leaf")])
    
    def test_depth_returns_to_zero(self):
        reader = Reader("a { b { c } }\nd")
        Parser(reader).parse()
        self.assertEqual(reader.depth, 0)
    
    def test_trailing_content_after_children_is_accepted(self):
        """
        NOTE: arguments and a second block after a children block are
        accepted; pin this down if a stricter grammar is adopted.
        """
        nodes = parse("a { } 1 { b }")
        self.assertEqual(nodes[0].args, _values(1))
        self.assertEqual(nodes[0].children, [Node("b")])
    
    def test_node_locations(self):
        nodes = parse("a\n  b")
        self.assertEqual((nodes[1].location.line, nodes[1].location.column), (2, 3))


class TestArgumentsAndProperties(unittest.TestCase):
    """Identifier-versus-value disambiguation."""
    
    def test_literal_kinds(self):
        nodes = parse('node "s" r#"raw"# -1 2.5 0xff true false null')
        self.assertEqual(nodes[0].args, _values("s", "raw", -1, 2.5, 255, True, False, None))
    
    def test_keyword_property_values(self):
        nodes = parse("node on=true off=false none=null")
        self.assertEqual(nodes[0].props, {"on": Value(True), "off": Value(False), "none": Value(None)})
    
    def test_quoted_names(self):
        nodes = parse('"my node" "my key"=1 r"raw key"=2')
        self.assertEqual(nodes[0].name, "my node")
        self.assertEqual(nodes[0].props, {"my key": Value(1), "raw key": Value(2)})
    
    def test_node_name_may_contain_equals(self):
        self.assertEqual(parse("a=b 1")[0].name, "a=b")
    
    def test_repeated_property_last_write_wins(self):
        nodes = parse("node a=1 b=2 a=3")
        self.assertEqual(nodes[0].props, {"a": Value(3), "b": Value(2)})
    
    def test_arguments_and_properties_interleave(self):
        nodes = parse('node 1 key="v" 2')
        self.assertEqual(nodes[0].args, _values(1, 2))
        self.assertEqual(nodes[0].props, {"key": Value("v")})
    
    def test_type_hints(self):
        nodes = parse('(tag)node (u8)1 (t)"x" key=(date)"2020-01-01"')
        node = nodes[0]
        self.assertEqual(node.type_hint, "tag")
        self.assertEqual(node.args, [Value(1, "u8"), Value("x", "t")])
        self.assertEqual(node.props["key"], Value("2020-01-01", "date"))
    
    def test_literals_of_different_types_are_not_equal(self):
        self.assertNotEqual(parse("n true"), parse("n 1"))
        self.assertNotEqual(parse("n 1"), parse("n 1.0"))
        self.assertNotEqual(parse("n k=false"), parse("n k=0"))
        self.assertEqual(parse("n 0x10"), parse("n 16"))
    
    def test_value_equality(self):
        """Type and hint matter; location does not."""
        here = SourceLocation("<string>", 1, 3, 2)
        self.assertEqual(Value(1, location=here), Value(1))
        self.assertNotEqual(Value(True), Value(1))
        self.assertNotEqual(Value(None), Value(False))
        self.assertNotEqual(Value(1, "u8"), Value(1))
        self.assertNotEqual(Value("1"), "1")
    
    def test_value_touching_terminator(self):
        nodes = parse("a 1;b 2{c}")
        self.assertEqual(nodes[0].args, _values(1))
        self.assertEqual(nodes[1].children, [Node("c")])


class TestSlashdash(unittest.TestCase):
    """'/-' comments out the next node, argument, property or children block."""
    
    def test_slashdash_node(self):
        self.assertEqual(parse('/-node "arg"'), [])
        nodes = parse("/-a { b }\nc")
        self.assertEqual(nodes, [Node("c")])
    
    def test_slashdash_node_in_children(self):
        nodes = parse("a { /-b; c }")
        self.assertEqual(nodes[0].children, [Node("c")])
    
    def test_slashdash_argument(self):
        nodes = parse("node 1 /-2 /- (u8)3 4")
        self.assertEqual(nodes[0].args, _values(1, 4))
    
    def test_slashdash_property(self):
        nodes = parse("node /-key=1 other=2")
        self.assertEqual(nodes[0].props, {"other": Value(2)})
    
    def test_slashdash_children(self):
        nodes = parse("node /-{ a; b } 1")
        self.assertEqual(nodes[0].children, [])
        self.assertEqual(nodes[0].args, _values(1))
    
    def test_discarded_content_must_still_be_valid(self):
        with self.assertRaises(ParseError) as ctx:
            parse("/-node arg")
        self.assertEqual(ctx.exception.code, "P003")
        with self.assertRaises(LexerError):
            parse("node /-1abc")
        with self.assertRaises(ParseError):
            parse("node /-{ ; }")
    
    def test_slashdash_at_end_inside_children(self):
        for source in ("a { /-", "a { b /-", "a { b { } /-  "):
            with self.subTest(source=source):
                with self.assertRaises(ParseError) as ctx:
                    parse(source)
                self.assertEqual(ctx.exception.code, "P004")
                self.assertIn("<string>:1:3", ctx.exception.diagnostic.help_text)
    
    def test_slashdash_at_end_of_input(self):
        for source in ("/-", "node /-", "node /-   "):
            with self.subTest(source=source):
                with self.assertRaises(ParseError) as ctx:
                    parse(source)
                self.assertEqual(ctx.exception.code, "P010")


class TestParseErrors(unittest.TestCase):
    """Structural errors and their codes."""
    
    def _code(self, source, **config):
        with self.assertRaises(InvalidSyntaxError) as ctx:
            parse(source, ParserConfig(**config))
        return ctx.exception
    
    def test_stray_semicolon(self):
        self.assertEqual(self._code(";").code, "P001")
        self.assertEqual(self._code("node;;").code, "P001")
    
    def test_top_level_closing_brace(self):
        exc = self._code("}")
        self.assertEqual(exc.code, "P002")
        exc = self._code("a 1\n}")
        self.assertEqual(exc.code, "P002")
        self.assertEqual((exc.location.line, exc.location.column), (2, 1))
    
    def test_bare_identifier_argument(self):
        exc = self._code("node arg")
        self.assertEqual(exc.code, "P003")
        self.assertIsInstance(exc, ParseError)
        self.assertEqual(exc.token.value, "arg")
        self.assertIn('Quote it: "arg"', exc.diagnostic.suggestions)
    
    def test_unterminated_children(self):
        self.assertEqual(self._code("node {").code, "P004")
        exc = self._code("a {\n  b 1")
        self.assertEqual(exc.code, "P004")
        self.assertIn("<string>:1:3", exc.diagnostic.help_text)
    
    def test_junk_after_identifier(self):
        self.assertEqual(self._code('node key"x"').code, "P005")
    
    def test_junk_after_value(self):
        self.assertEqual(self._code('node 1"x"').code, "P006")
        self.assertEqual(self._code('node "a"(t)1').code, "P005")
    
    def test_junk_after_property_value(self):
        exc = self._code('node key=1"x"')
        self.assertEqual(exc.code, "P007")
        self.assertIn("'key'", exc.message)
    
    def test_bare_property_value(self):
        self.assertEqual(self._code("node key=value").code, "L008")
    
    def test_invalid_node_names(self):
        self.assertEqual(self._code("true 1").code, "L005")
        self.assertEqual(self._code("1node").code, "L005")
    
    def test_nesting_limit(self):
        exc = self._code("a { b { c { } } }", max_depth=2)
        self.assertEqual(exc.code, "P008")
        nodes = parse("a { b { } }", ParserConfig(max_depth=2))
        self.assertEqual(nodes[0].children, [Node("b")])
    
    def test_nesting_past_interpreter_stack(self):
        """A limit the call stack cannot honour still ends in P008."""
        text = "a{" * 1500 + "}" * 1500
        exc = self._code(text, max_depth=100000)
        self.assertEqual(exc.code, "P008")
        self.assertIsInstance(exc.__cause__, RecursionError)
    
    def test_every_code_is_documented(self):
        cases = [
            ('"abc', {}, "L002"),
            ("n 1x", {}, "L003"),
            (b"n \xff", {}, "L004"),
            ("true", {}, "L005"),
            (r'n "\q"', {}, "L006"),
            ("n (u8 1", {}, "L007"),
            ("n k=v", {}, "L008"),
            ("n /* x", {}, "L009"),
            (";", {}, "P001"),
            ("}", {}, "P002"),
            ("n arg", {}, "P003"),
            ("n {", {}, "P004"),
            ('n k"x"', {}, "P005"),
            ('n 1"x"', {}, "P006"),
            ('n k=1"x"', {}, "P007"),
            ("a { b { } }", {"max_depth": 1}, "P008"),
            ("/-", {}, "P010"),
        ]
        for source, config, code in cases:
            with self.subTest(code=code):
                self.assertEqual(self._code(source, **config).code, code)
        documented = set(ERROR_CODES) | set(PARSER_ERROR_CODES)
        self.assertEqual({code for _, _, code in cases}, documented)
    
    def test_filename_in_diagnostics(self):
        exc = self._code("}", filename="app.kdl")
        self.assertIn("app.kdl:1:1", str(exc))


class TestConvenienceFunctions(unittest.TestCase):
    
    def test_parse_bytes(self):
        nodes = parse('node "café"'.encode('utf-8'))
        self.assertEqual(nodes[0].args, _values("café"))
    
    def test_parse_invalid_utf8(self):
        with self.assertRaises(LexerError) as ctx:
            parse(b"node \xff")
        self.assertEqual(ctx.exception.code, "L004")
    
    def test_parse_file(self):
        with tempfile.NamedTemporaryFile("wb", suffix=".kdl", delete=False) as f:
            f.write(b"title \"Hello\"\nlimit (u8)255\n")
            path = f.name
        try:
            nodes = parse_file(path)
            self.assertEqual([node.name for node in nodes], ["title", "limit"])
            self.assertEqual(nodes[1].args, [Value(255, "u8")])
        finally:
            os.unlink(path)
    
    def test_parse_file_reports_path(self):
        with tempfile.NamedTemporaryFile("wb", suffix=".kdl", delete=False) as f:
            f.write(b"node {\n")
            path = f.name
        try:
            with self.assertRaises(ParseError) as ctx:
                parse_file(path, ParserConfig(max_depth=4))
            self.assertEqual(ctx.exception.location.filename, path)
        finally:
            os.unlink(path)
    
    def test_to_dict(self):
        node = parse('(t)node 1 k=(u8)2 { child }')[0]
        self.assertEqual(node.to_dict(), {
            "name": "node",
            "type": "t",
            "args": [{"value": 1}],
            "props": {"k": {"type": "u8", "value": 2}},
            "children": [{"name": "child", "args": [], "props": {}, "children": []}],
        })


if __name__ == "__main__":
    unittest.main()
