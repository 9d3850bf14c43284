from datetime import date

from django.template import Context, Template
from django.test import TestCase

from discounts.products import FALLBACK_IMAGE_URL, Product
from discounts.templatetags.discount_tags import parse_valid_until, product_image, valid_until


class ValidUntilFilterTest(TestCase):
    def test_iso_date_is_formatted(self):
        self.assertEqual(valid_until("2024-02-15"), "15.02.2024")

    def test_german_date_is_formatted(self):
        self.assertEqual(valid_until("15.02.2024"), "15.02.2024")
        self.assertEqual(parse_valid_until("15/02/2024"), date(2024, 2, 15))

    def test_datetime_is_reduced_to_date(self):
        self.assertEqual(valid_until("2024-02-15T10:30:00"), "15.02.2024")

    def test_unparsable_text_is_shown_verbatim(self):
        self.assertEqual(valid_until("solange Vorrat reicht"), "solange Vorrat reicht")
        self.assertEqual(valid_until("2024-02-30"), "2024-02-30")
        self.assertEqual(valid_until(""), "")

    def test_filter_in_template(self):
        rendered = Template("{% load discount_tags %}{{ value|valid_until }}").render(Context({'value': "2024-02-25"}))

        self.assertEqual(rendered, "25.02.2024")


class ProductImageFilterTest(TestCase):
    def test_image_url_is_kept(self):
        product = Product(name="n", discount="d", valid_until="", ean_code="e", image="http://img")

        self.assertEqual(product_image(product), "http://img")

    def test_blank_image_uses_fallback(self):
        product = Product(name="n", discount="d", valid_until="", ean_code="e", image="  ")

        self.assertEqual(product_image(product), FALLBACK_IMAGE_URL)
