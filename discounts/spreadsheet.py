"""
Client HTTP pour l'export CSV du Google Sheet des promotions.

Le tableur est d'abord interrogé directement. Si la réponse n'est pas
exploitable, la même URL est redemandée via deux relais CORS publics :
- corsproxy.io renvoie le corps tel quel
- allorigins.win enveloppe le corps dans un JSON (champ "contents")
"""
import logging
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import quote

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

EXPORT_URL = "https://docs.google.com/spreadsheets/d/{spreadsheet_id}/export?format=csv&gid={sheet_gid}"


class SpreadsheetError(Exception):
    """Erreur de récupération ou de lecture du tableur."""
    kind = 'unknown'

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class SpreadsheetAccessError(SpreadsheetError):
    """Aucune tentative (directe ou relais) n'a renvoyé de réponse exploitable."""
    kind = 'restricted'


class SpreadsheetUnreachableError(SpreadsheetError):
    """Toutes les tentatives ont échoué au niveau réseau."""
    kind = 'network'


class SpreadsheetParseError(SpreadsheetError):
    """Le contenu récupéré n'est pas un CSV lisible."""
    kind = 'parse'


@dataclass(frozen=True)
class Relay:
    """
    Relais CORS : l'URL d'origine est encodée puis injectée dans le template.

    Si envelope_field est défini, la réponse est un JSON et le CSV brut
    se trouve dans ce champ.
    """
    name: str
    url_template: str
    envelope_field: Optional[str] = None

    def wrap(self, url: str) -> str:
        return self.url_template.format(url=quote(url, safe=''))


CORS_RELAYS = (
    Relay(name='corsproxy', url_template="https://corsproxy.io/?{url}"),
    Relay(name='allorigins', url_template="https://api.allorigins.win/get?url={url}", envelope_field='contents'),
)


class SpreadsheetClient:
    """
    Récupère le texte CSV du tableur avec repli sur les relais CORS.

    Usage:
        client = SpreadsheetClient()
        csv_text = client.fetch_csv_text()
    """

    def __init__(
        self,
        spreadsheet_id: str = None,
        sheet_gid: str = None,
        timeout: int = None,
        relays=CORS_RELAYS,
        session: requests.Session = None
    ):
        self.spreadsheet_id = spreadsheet_id or settings.DISCOUNTS_SPREADSHEET_ID
        self.sheet_gid = sheet_gid or settings.DISCOUNTS_SHEET_GID
        self.timeout = timeout or settings.DISCOUNTS_FETCH_TIMEOUT
        self.relays = tuple(relays)
        self.session = session or requests.Session()

    @property
    def csv_url(self) -> str:
        return EXPORT_URL.format(spreadsheet_id=self.spreadsheet_id, sheet_gid=self.sheet_gid)

    def fetch_csv_text(self) -> str:
        """
        Retourne le CSV brut du tableur.

        La première tentative exploitable interrompt la chaîne : les relais
        suivants ne sont jamais contactés.

        Raises:
            SpreadsheetAccessError: Au moins un serveur a répondu, mais aucune
                réponse n'était exploitable
            SpreadsheetUnreachableError: Aucune tentative n'a abouti au niveau réseau
        """
        attempts = [('direct', self.csv_url, None)]
        attempts += [(relay.name, relay.wrap(self.csv_url), relay.envelope_field) for relay in self.relays]

        answered = False
        failures: List[str] = []

        for name, url, envelope_field in attempts:
            try:
                response = self.session.get(url, timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                logger.warning(f"[{name}] Erreur réseau: {e}")
                failures.append(f"{name}: {e.__class__.__name__}")
                continue

            answered = True

            if not response.ok:
                logger.warning(f"[{name}] Réponse HTTP {response.status_code}")
                failures.append(f"{name}: HTTP {response.status_code}")
                continue

            if envelope_field is None:
                logger.info(f"[{name}] CSV récupéré ({len(response.content)} octets)")
                return self._decode(response)

            text = self._unwrap(response, envelope_field)
            if text is None:
                logger.warning(f"[{name}] Enveloppe JSON invalide")
                failures.append(f"{name}: enveloppe invalide")
                continue

            logger.info(f"[{name}] CSV récupéré via enveloppe JSON ({len(text)} caractères)")
            return text

        detail = ", ".join(failures)
        if answered:
            raise SpreadsheetAccessError(f"Spreadsheet access restricted ({detail})")
        raise SpreadsheetUnreachableError(f"Spreadsheet not reachable ({detail})")

    @staticmethod
    def _decode(response: requests.Response) -> str:
        return response.content.decode('utf-8-sig', errors='replace')

    @staticmethod
    def _unwrap(response: requests.Response, field: str) -> Optional[str]:
        try:
            data = response.json()
        except ValueError:
            return None
        if not isinstance(data, dict):
            return None
        contents = data.get(field)
        if not isinstance(contents, str):
            return None
        return contents.lstrip('\ufeff')
