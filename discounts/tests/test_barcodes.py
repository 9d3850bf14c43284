import base64
from unittest.mock import patch

from django.test import TestCase

from discounts.barcodes import (
    BarcodeTarget,
    draw_barcode,
    draw_barcodes,
    is_drawable,
    normalize_ean,
)


class NormalizeEanTest(TestCase):
    def test_non_digits_are_stripped(self):
        self.assertEqual(normalize_ean("80-00500037508x"), "8000500037508")
        self.assertEqual(normalize_ean(" 4 001686 301081 "), "4001686301081")
        self.assertEqual(normalize_ean(""), "")
        self.assertEqual(normalize_ean(None), "")

    def test_drawable_only_with_exactly_thirteen_digits(self):
        self.assertTrue(is_drawable("8000500037508"))
        self.assertTrue(is_drawable("80-00500037508x"))
        self.assertFalse(is_drawable("12345"))
        self.assertFalse(is_drawable("80005000375080"))
        self.assertFalse(is_drawable("abc"))


class DrawBarcodeTest(TestCase):
    @patch('discounts.barcodes._render_svg', return_value=b'<svg/>')
    def test_draw_attempted_for_thirteen_digits_after_stripping(self, render):
        image = draw_barcode("80-00500037508x")

        render.assert_called_once_with("8000500037508")
        self.assertEqual(image, "data:image/svg+xml;base64," + base64.b64encode(b'<svg/>').decode('ascii'))

    @patch('discounts.barcodes._render_svg')
    def test_short_code_is_skipped_silently(self, render):
        image = draw_barcode("12345")

        render.assert_not_called()
        self.assertIsNone(image)

    @patch('discounts.barcodes._render_svg', side_effect=RuntimeError("renderer down"))
    def test_renderer_failure_is_logged_not_raised(self, render):
        with self.assertLogs('discounts.barcodes', level='ERROR') as logs:
            image = draw_barcode("8000500037508")

        self.assertIsNone(image)
        self.assertIn("8000500037508", logs.output[0])

    def test_real_render_produces_svg(self):
        image = draw_barcode("8000500037508")

        self.assertTrue(image.startswith("data:image/svg+xml;base64,"))
        svg = base64.b64decode(image.split(",", 1)[1])
        self.assertIn(b"<svg", svg)

    def test_real_render_of_code_with_separators(self):
        image = draw_barcode("80-00500037508x")

        self.assertEqual(image, draw_barcode("8000500037508"))
        svg = base64.b64decode(image.split(",", 1)[1])
        self.assertIn(b"<svg", svg)

    def test_wrong_check_digit_is_not_drawn(self):
        with self.assertLogs('discounts.barcodes', level='ERROR'):
            image = draw_barcode("8712566401234")

        self.assertIsNone(image)


class DrawBarcodesTest(TestCase):
    @patch('discounts.barcodes._render_svg', return_value=b'<svg/>')
    def test_each_target_is_drawn_by_position(self, render):
        targets = [
            BarcodeTarget(index=0, ean_code="8000500037508"),
            BarcodeTarget(index=1, ean_code="12345"),
            BarcodeTarget(index=2, ean_code="5449000000996"),
        ]

        drawn = draw_barcodes(targets)

        self.assertEqual(drawn, 2)
        self.assertEqual([t.element_id for t in targets], ["barcode-0", "barcode-1", "barcode-2"])
        self.assertEqual([t.drawn for t in targets], [True, False, True])
        self.assertEqual(render.call_count, 2)
