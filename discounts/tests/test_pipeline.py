from unittest.mock import patch

import requests
from django.test import TestCase

from discounts.pipeline import DIAGNOSTICS, SOURCE_DEMO, SOURCE_LIVE, acquire_products
from discounts.products import DEMO_PRODUCTS, Product
from discounts.spreadsheet import SpreadsheetParseError
from discounts.tests.fakes import SAMPLE_CSV, make_client, make_response


class DemoDatasetTest(TestCase):
    def test_demo_dataset_is_six_fixed_products(self):
        self.assertEqual(len(DEMO_PRODUCTS), 6)
        self.assertEqual(DEMO_PRODUCTS[0], Product(
            name="Nutella 750g Glas",
            discount="-2,50 €",
            valid_until="2024-02-15",
            ean_code="8000500037508",
            image="https://images.unsplash.com/photo-1558961363-fa8fdf82db35?w=300&h=200&fit=crop",
        ))
        self.assertEqual(
            [p.ean_code for p in DEMO_PRODUCTS],
            ["8000500037508", "5449000000996", "7622210951052", "4001686301081", "9002490100059", "8712566401234"],
        )
        self.assertEqual(DEMO_PRODUCTS[3].name, "Haribo Goldbären 200g")
        self.assertEqual(DEMO_PRODUCTS[5].discount, "-0,25 €")


class AcquireProductsTest(TestCase):
    def test_all_attempts_unsuccessful_falls_back_to_demo(self):
        # Arrange
        client, session = make_client(make_response(403), make_response(403), make_response(500))

        # Act
        result = acquire_products(client=client)

        # Assert
        self.assertEqual(result.products, DEMO_PRODUCTS)
        self.assertEqual(len(result.products), 6)
        self.assertEqual(result.diagnostic, DIAGNOSTICS['restricted'])
        self.assertIn("restricted", result.diagnostic)
        self.assertEqual(result.source, SOURCE_DEMO)
        self.assertTrue(result.is_demo)
        self.assertIsNotNone(result.completed_at)
        self.assertEqual(session.get.call_count, 3)

    def test_direct_fetch_with_single_valid_row(self):
        client, session = make_client(make_response(200, SAMPLE_CSV))

        result = acquire_products(client=client)

        self.assertEqual(result.products, (Product(
            name="Nutella",
            discount="-2.50",
            valid_until="2024-02-15",
            ean_code="8000500037508",
            image="http://img",
        ),))
        self.assertIsNone(result.diagnostic)
        self.assertEqual(result.source, SOURCE_LIVE)
        self.assertEqual(session.get.call_count, 1)

    def test_parse_error_falls_back_with_distinct_diagnostic(self):
        client, _ = make_client(make_response(200, 'h1,h2\n"a"b,c\n'))

        result = acquire_products(client=client)

        self.assertEqual(result.products, DEMO_PRODUCTS)
        self.assertEqual(result.diagnostic, DIAGNOSTICS['parse'])
        self.assertIn("parsing failed", result.diagnostic)
        self.assertNotEqual(result.diagnostic, DIAGNOSTICS['restricted'])

    def test_parser_reported_error_falls_back(self):
        client, _ = make_client(make_response(200, SAMPLE_CSV))

        with patch('discounts.pipeline.parse_csv', side_effect=SpreadsheetParseError("bad quoting")):
            result = acquire_products(client=client)

        self.assertEqual(result.products, DEMO_PRODUCTS)
        self.assertEqual(result.diagnostic, DIAGNOSTICS['parse'])

    def test_no_valid_rows_falls_back_with_empty_diagnostic(self):
        csv_text = "h1,h2,h3,h4,h5,h6,h7,h8\n,,-2.50,,,2024-02-15,8000500037508,\n,Short,row\n"
        client, _ = make_client(make_response(200, csv_text))

        result = acquire_products(client=client)

        self.assertEqual(result.products, DEMO_PRODUCTS)
        self.assertEqual(result.diagnostic, DIAGNOSTICS['empty'])
        self.assertEqual(result.diagnostic, "Using demo data - please check spreadsheet access")

    def test_header_only_sheet_falls_back_with_empty_diagnostic(self):
        client, _ = make_client(make_response(200, "h1,h2,h3,h4,h5,h6,h7,h8\n"))

        result = acquire_products(client=client)

        self.assertEqual(result.diagnostic, DIAGNOSTICS['empty'])

    def test_network_failure_falls_back_with_network_diagnostic(self):
        client, _ = make_client(
            requests.exceptions.ConnectionError(),
            requests.exceptions.ConnectionError(),
            requests.exceptions.ConnectionError(),
        )

        result = acquire_products(client=client)

        self.assertEqual(result.products, DEMO_PRODUCTS)
        self.assertEqual(result.diagnostic, DIAGNOSTICS['network'])

    def test_relay_envelope_feeds_parser(self):
        client, _ = make_client(
            make_response(404),
            make_response(502),
            make_response(200, json_data={'contents': SAMPLE_CSV}),
        )

        result = acquire_products(client=client)

        self.assertEqual(result.source, SOURCE_LIVE)
        self.assertEqual([p.name for p in result.products], ["Nutella"])

    def test_unexpected_error_never_escapes(self):
        client, _ = make_client(make_response(200, SAMPLE_CSV))

        with patch('discounts.pipeline.rows_to_products', side_effect=RuntimeError("bug")):
            result = acquire_products(client=client)

        self.assertEqual(result.products, DEMO_PRODUCTS)
        self.assertIsNotNone(result.diagnostic)

    def test_diagnostics_are_distinct_per_stage(self):
        messages = [DIAGNOSTICS[k] for k in ('restricted', 'network', 'parse', 'empty')]

        self.assertEqual(len(set(messages)), 4)
