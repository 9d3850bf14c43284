"""
Réponses HTTP factices pour les tests du client tableur.
"""
import json
from unittest.mock import MagicMock

import requests

from discounts.spreadsheet import SpreadsheetClient

SAMPLE_CSV = "h1,h2,h3,h4,h5,h6,h7,h8\n,Nutella,-2.50,,,2024-02-15,8000500037508,http://img"


def make_response(status=200, text='', json_data=None):
    response = requests.Response()
    response.status_code = status
    if json_data is not None:
        text = json.dumps(json_data)
    response._content = text.encode('utf-8')
    response.encoding = 'utf-8'
    return response


def make_client(*responses):
    """Client dont la session renvoie les réponses (ou lève les exceptions) dans l'ordre."""
    session = MagicMock()
    session.get.side_effect = list(responses)
    client = SpreadsheetClient(spreadsheet_id='sheet-id', sheet_gid='42', timeout=5, session=session)
    return client, session
