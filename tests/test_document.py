from __future__ import annotations

import dataclasses
import io
import unittest

from config import RenderConfig
from document import ShapeEntry, VectorDocument, parse_document
from errors import ColorSyntaxError, InvalidDocumentError, PathSyntaxError, SchemaError
from path_data import ClosePath, LineTo, MoveTo


def vector_xml(body: str = "", width: str = "24dp", height: str = "24dp",
               viewport_width: str = "24", viewport_height: str = "24") -> bytes:
    attrs = ['xmlns:android="http://schemas.android.com/apk/res/android"']
    if width is not None:
        attrs.append(f'android:width="{width}"')
    if height is not None:
        attrs.append(f'android:height="{height}"')
    if viewport_width is not None:
        attrs.append(f'android:viewportWidth="{viewport_width}"')
    if viewport_height is not None:
        attrs.append(f'android:viewportHeight="{viewport_height}"')
    return f'<vector {" ".join(attrs)}>{body}</vector>'.encode("utf-8")


SQUARE = '<path android:fillColor="#FF0000" android:pathData="M0,0 L24,0 L24,24 L0,24 Z"/>'


class DocumentSizeTests(unittest.TestCase):
    def test_dp_size_at_density(self) -> None:
        doc = parse_document(io.BytesIO(vector_xml(width="48dp", height="32dp")))
        self.assertEqual((doc.output_width_px, doc.output_height_px), (48, 32))

        doc = parse_document(vector_xml(width="48dp", height="32dp"), RenderConfig(density=2.0))
        self.assertEqual((doc.output_width_px, doc.output_height_px), (96, 64))

    def test_fractional_dp_is_truncated(self) -> None:
        doc = parse_document(vector_xml(width="24.7dp", height="10DP"))
        self.assertEqual((doc.output_width_px, doc.output_height_px), (24, 10))

    def test_non_dp_units_fall_back_to_default(self) -> None:
        config = RenderConfig(default_width_dp=10, default_height_dp=20, density=1.5)
        doc = parse_document(vector_xml(width="48px", height="3in"), config)
        self.assertEqual((doc.output_width_px, doc.output_height_px), (15, 30))

    def test_missing_size_falls_back_to_default(self) -> None:
        doc = parse_document(vector_xml(width=None, height=None))
        self.assertEqual((doc.output_width_px, doc.output_height_px), (128, 128))

    def test_viewport_values(self) -> None:
        doc = parse_document(vector_xml(viewport_width="108.5", viewport_height="54"))
        self.assertEqual((doc.viewport_width, doc.viewport_height), (108.5, 54.0))


class DocumentValidationTests(unittest.TestCase):
    def test_zero_viewport_is_rejected_regardless_of_shapes(self) -> None:
        for vw, vh in [("0", "24"), ("24", "0"), ("0", "0")]:
            with self.subTest(viewport=(vw, vh)):
                with self.assertRaises(InvalidDocumentError) as ctx:
                    parse_document(vector_xml(SQUARE, viewport_width=vw, viewport_height=vh))
                self.assertIn("must be > 0", str(ctx.exception))

    def test_missing_or_negative_viewport_is_rejected(self) -> None:
        with self.assertRaises(InvalidDocumentError):
            parse_document(vector_xml(viewport_width=None))
        with self.assertRaises(InvalidDocumentError) as ctx:
            parse_document(vector_xml(viewport_height="-5"))
        self.assertEqual(ctx.exception.viewport_height, -5.0)
        with self.assertRaises(InvalidDocumentError):
            parse_document(vector_xml(viewport_width="wide"))

    def test_wrong_root(self) -> None:
        with self.assertRaises(SchemaError):
            parse_document(b'<svg viewBox="0 0 24 24"><path d="M0 0"/></svg>')

    def test_path_errors_propagate(self) -> None:
        with self.assertRaises(PathSyntaxError):
            parse_document(vector_xml('<path android:fillColor="#000" android:pathData="M0 0 X1 1"/>'))

    def test_color_errors_propagate(self) -> None:
        with self.assertRaises(ColorSyntaxError):
            parse_document(vector_xml('<path android:fillColor="#12" android:pathData="M0 0 L1 1"/>'))


class DocumentShapeTests(unittest.TestCase):
    def test_shape_entry(self) -> None:
        doc = parse_document(vector_xml(SQUARE))
        self.assertEqual(len(doc.shapes), 1)
        shape = doc.shapes[0]
        self.assertEqual(shape.fill_color, (255, 0, 0, 255))
        self.assertEqual(shape.fill_rule, "nonzero")
        self.assertEqual(shape.segments[0], MoveTo(0.0, 0.0))
        self.assertEqual(shape.segments[1], LineTo(24.0, 0.0))
        self.assertEqual(shape.segments[-1], ClosePath(0.0, 0.0))

    def test_shapes_without_fill_or_data_are_skipped(self) -> None:
        body = (
            '<path android:pathData="M0,0 L24,0 L24,24 Z"/>'
            '<path android:fillColor="#00FF00"/>'
            '<path android:fillColor="#0000FF" android:pathData="   "/>'
            '<path android:fillColor=" " android:pathData="M0 0 L1 1"/>'
            + SQUARE
        )
        doc = parse_document(vector_xml(body))
        self.assertEqual([s.fill_color for s in doc.shapes], [(255, 0, 0, 255)])

    def test_shapes_keep_document_order_through_groups(self) -> None:
        body = (
            '<path android:fillColor="#000001" android:pathData="M0 0 L1 1"/>'
            '<group android:rotation="45" android:translateX="3">'
            '<path android:fillColor="#000002" android:pathData="M0 0 L1 1"/>'
            '</group>'
            '<path android:fillColor="#000003" android:strokeColor="#fff" android:pathData="M0 0 L1 1"/>'
        )
        doc = parse_document(vector_xml(body))
        self.assertEqual([s.fill_color[2] for s in doc.shapes], [1, 2, 3])

    def test_angle_bracket_in_path_name(self) -> None:
        body = '<path android:name="a>b" android:fillColor="#FF0000" android:pathData="M0 0 L1 0 L1 1 Z"/>'
        doc = parse_document(vector_xml(body))
        self.assertEqual(len(doc.shapes), 1)
        self.assertEqual(doc.shapes[0].fill_color, (255, 0, 0, 255))

    def test_fill_type(self) -> None:
        body = (
            '<path android:fillColor="#000" android:fillType="evenOdd" android:pathData="M0 0 L1 1"/>'
            '<path android:fillColor="#000" android:fillType="nonZero" android:pathData="M0 0 L1 1"/>'
            '<path android:fillColor="#000" android:fillType="sideways" android:pathData="M0 0 L1 1"/>'
        )
        doc = parse_document(vector_xml(body))
        self.assertEqual([s.fill_rule for s in doc.shapes], ["evenodd", "nonzero", "nonzero"])

    def test_document_is_immutable(self) -> None:
        doc = parse_document(vector_xml(SQUARE))
        self.assertIsInstance(doc, VectorDocument)
        self.assertIsInstance(doc.shapes, tuple)
        self.assertIsInstance(doc.shapes[0], ShapeEntry)
        with self.assertRaises(dataclasses.FrozenInstanceError):
            doc.viewport_width = 1.0
        with self.assertRaises(dataclasses.FrozenInstanceError):
            doc.shapes[0].fill_color = (0, 0, 0, 0)


if __name__ == "__main__":
    unittest.main()
