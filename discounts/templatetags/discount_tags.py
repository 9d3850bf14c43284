"""
Filtres de template pour les cartes produit.
"""
from datetime import datetime

from django import template
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from ..products import FALLBACK_IMAGE_URL

register = template.Library()

# Formats acceptés en plus de l'ISO 8601
DATE_INPUT_FORMATS = ('%d.%m.%Y', '%d/%m/%Y', '%d.%m.%y', '%Y/%m/%d')


def parse_valid_until(value):
    """Convertit le texte du tableur en date, None si illisible."""
    text = (value or '').strip()
    if not text:
        return None

    try:
        parsed = parse_date(text)
        if parsed is None:
            moment = parse_datetime(text)
            if moment is not None:
                if timezone.is_aware(moment):
                    moment = timezone.localtime(moment)
                parsed = moment.date()
    except ValueError:
        # Format ISO mais date impossible (ex: 2024-02-30)
        return None

    if parsed is not None:
        return parsed

    for fmt in DATE_INPUT_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


@register.filter
def valid_until(value):
    """
    Affiche la date de validité au format dd.mm.yyyy.

    Un texte qui n'est pas une date est affiché tel quel.
    """
    parsed = parse_valid_until(value)
    if parsed is None:
        return value
    return parsed.strftime('%d.%m.%Y')


@register.filter
def product_image(product):
    """URL de l'image du produit, ou l'image de repli si elle est vide."""
    image = (getattr(product, 'image', '') or '').strip()
    return image or FALLBACK_IMAGE_URL


@register.simple_tag
def fallback_image_url():
    return FALLBACK_IMAGE_URL
