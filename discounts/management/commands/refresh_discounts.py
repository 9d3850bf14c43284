"""
Commande Django pour rafraîchir les promotions manuellement
"""

from django.core.management.base import BaseCommand

from discounts.refresh import request_refresh
from discounts.state import RunStateStore
from discounts.tasks import refresh_discounts


class Command(BaseCommand):
    help = 'Rafraîchit les promotions depuis le Google Sheet'

    def add_arguments(self, parser):
        parser.add_argument(
            '--async',
            action='store_true',
            help='Exécuter la tâche de manière asynchrone via Celery',
        )

    def handle(self, *args, **options):
        if options.get('async'):
            state = request_refresh()
            self.stdout.write(
                self.style.SUCCESS(f"Rafraîchissement lancé en arrière-plan (jeton: {state.token})")
            )
            return

        state = RunStateStore().begin()
        self.stdout.write("Récupération du tableur...")

        result = refresh_discounts(state.token)

        if result['status'] == 'error':
            self.stdout.write(self.style.ERROR(f"✗ Erreur: {result.get('message', 'Inconnue')}"))
            return

        if result['status'] == 'superseded':
            self.stdout.write(self.style.WARNING("Un rafraîchissement plus récent a été lancé, résultat ignoré"))
            return

        if result['diagnostic']:
            self.stdout.write(self.style.WARNING(f"⚠️  {result['diagnostic']} ({result['failure']})"))

        self.stdout.write(
            self.style.SUCCESS(
                f"✓ {result['products']} produits publiés (source: {result['source']})"
            )
        )
