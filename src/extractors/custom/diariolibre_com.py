"""
Extractor para diariolibre.com
"""

import logging
import re

from extractors.base import ExtractorDefinition


logger = logging.getLogger(__name__)

# Abreviaturas de meses en español

MONTHS = {
    'ene': 1, 'feb': 2, 'mar': 3, 'abr': 4, 'may': 5, 'jun': 6,
    'jul': 7, 'ago': 8, 'sep': 9, 'sept': 9, 'oct': 10, 'nov': 11, 'dic': 12,
}


def parse_diariolibre_date(date_text):
    """
    Convierte una fecha de Diario Libre a RFC 3339.
    Entrada: "nov. 15, 2025 | 12:01 a. m."
    Salida: "2025-11-15T00:01:00-04:00"

    Devuelve None si el texto no parece una fecha de Diario Libre.
    """
    if not date_text:
        return None

    match = re.search(r'(\w+)\.?\s+(\d+),\s+(\d{4})', date_text)
    if not match:
        logger.debug("Unrecognized diariolibre date %r", date_text)
        return None

    month = MONTHS.get(match.group(1).lower())
    if month is None:
        return None
    day = int(match.group(2))
    year = int(match.group(3))

    hour = minute = 0
    time_match = re.search(r'(\d+):(\d+)\s*(a\.|p\.)\s*m\.', date_text)
    if time_match:
        hour = int(time_match.group(1))
        minute = int(time_match.group(2))
        period = time_match.group(3)

        # Convertir formato 12h a 24h
        if period == 'p.' and hour != 12:
            hour += 12
        elif period == 'a.' and hour == 12:
            hour = 0

    # Hora de República Dominicana (GMT-4)
    return f"{year:04d}-{month:02d}-{day:02d}T{hour:02d}:{minute:02d}:00-04:00"


# Selectores CSS para los campos del artículo

EXTRACTOR = ExtractorDefinition(
    domain='www.diariolibre.com',
    supported_domains=('diariolibre.com',),
    name='Diario Libre',
    title={'selectors': ['h1']},
    dek={'selectors': ['div.subtitle > p']},
    author={'selectors': ['address.author strong']},
    date_published={
        'selectors': [
            ['time#detail-datetime', 'datetime'],
            ['time#detail-datetime a:nth-of-type(2)', None, parse_diariolibre_date],
        ],
    },
    content={
        'selectors': ['div.detail-body'],
        'clean': ['.nota-incrustada', '.component', '.social-embed', '.tags-container', '.author-info'],
    },
    extend={
        'location': {'selectors': ['time#detail-datetime a:first-child']},
        'tags': {'selectors': ['div.tags-container a'], 'allow_multiple': True},
        'category': {'selectors': ['ul.breadcrumb li'], 'allow_multiple': True},
    },
)
