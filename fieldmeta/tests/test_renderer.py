"""
Unit tests for renderer.py

Tests document layout, escaping, empty forms and nesting well-formedness.
"""

import io
import json
import unittest

from fieldmeta.models import MetadataDatabase
from fieldmeta.renderer import encode_string, render_document, write_document


POINT_DOCUMENT = """[
    {
        "name": "ns::Point",
        "fields":
        [
            {
                "type": "int",
                "variable": "ns::Point::x"
            },
            {
                "type": "int",
                "variable": "ns::Point::y"
            }
        ]
    }
]
"""


def _point_database() -> MetadataDatabase:
    database = MetadataDatabase()
    point = database.add_type("ns::Point")
    point.add_field("int", "ns::Point::x")
    point.add_field("int", "ns::Point::y")
    return database


def _check_nesting(test: unittest.TestCase, document: str) -> None:
    """Every opener has a closer at the same indent; no trailing commas."""
    stack = []
    lines = document.rstrip("\n").split("\n")
    for i, line in enumerate(lines):
        stripped = line.strip()
        indent = len(line) - len(line.lstrip(" "))
        if stripped in ("[", "{"):
            if stack:
                test.assertGreater(indent, stack[-1][1], f"line {i} not nested deeper")
            stack.append((stripped, indent))
        elif stripped.rstrip(",") in ("]", "}"):
            opener, opener_indent = stack.pop()
            test.assertEqual({"[": "]", "{": "}"}[opener], stripped.rstrip(","))
            test.assertEqual(indent, opener_indent, f"line {i} closes at wrong indent")
        if stripped.endswith(","):
            test.assertLess(i + 1, len(lines))
            test.assertNotIn(lines[i + 1].strip(), ("]", "}"), f"trailing comma at line {i}")
    test.assertEqual(stack, [])


class TestRenderDocument(unittest.TestCase):
    """Test the rendered document text."""

    def test_point_document_exact(self):
        self.assertEqual(render_document(_point_database()), POINT_DOCUMENT)

    def test_empty_database(self):
        self.assertEqual(render_document(MetadataDatabase()), "[\n]\n")
        self.assertEqual(json.loads(render_document(MetadataDatabase())), [])

    def test_empty_fields_renders_empty_array(self):
        database = MetadataDatabase()
        database.add_type("Empty")
        database.add_type("AlsoEmpty")
        document = render_document(database)

        self.assertEqual(document.count('"fields": []'), 2)
        parsed = json.loads(document)
        self.assertEqual(parsed, [
            {"name": "Empty", "fields": []},
            {"name": "AlsoEmpty", "fields": []},
        ])

    def test_order_preserved(self):
        database = MetadataDatabase()
        for type_name in ("Z", "A", "M"):
            record = database.add_type(type_name)
            for member in ("q", "b", "k"):
                record.add_field("int", f"{type_name}::{member}")

        parsed = json.loads(render_document(database))

        self.assertEqual([t["name"] for t in parsed], ["Z", "A", "M"])
        for entry in parsed:
            self.assertEqual(
                [f["variable"] for f in entry["fields"]],
                [f"{entry['name']}::{m}" for m in ("q", "b", "k")],
            )

    def test_strings_are_escaped(self):
        database = MetadataDatabase()
        record = database.add_type('Quote"Name')
        record.add_field('const char [6] = "a\\b"', "Quote::weird\tname")

        parsed = json.loads(render_document(database))

        self.assertEqual(parsed[0]["name"], 'Quote"Name')
        self.assertEqual(parsed[0]["fields"][0]["type"], 'const char [6] = "a\\b"')
        self.assertEqual(parsed[0]["fields"][0]["variable"], "Quote::weird\tname")

    def test_non_ascii_kept(self):
        self.assertEqual(encode_string("Größe"), '"Größe"')

    def test_nesting_well_formed(self):
        database = _point_database()
        database.add_type("Empty")
        other = database.add_type("ns::Line")
        other.add_field("ns::Point", "ns::Line::from")
        _check_nesting(self, render_document(database))

    def test_nesting_well_formed_with_custom_indent(self):
        document = render_document(_point_database(), indent_step=2)
        _check_nesting(self, document)
        self.assertIn('\n  {\n    "name": "ns::Point"', document)
        self.assertEqual(json.loads(document), json.loads(POINT_DOCUMENT))

    def test_invalid_indent(self):
        with self.assertRaises(ValueError):
            render_document(MetadataDatabase(), indent_step=0)


class TestWriteDocument(unittest.TestCase):
    """Test writing to a stream."""

    def test_write_to_stream(self):
        buffer = io.StringIO()
        write_document(_point_database(), buffer)
        self.assertEqual(buffer.getvalue(), POINT_DOCUMENT)


if __name__ == "__main__":
    unittest.main()
