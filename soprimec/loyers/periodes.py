"""
Arithmétique des périodes de facturation.

Une période est un mois identifié par une chaîne ``AAAA-MM``. Le mois est
toujours sur deux chiffres, ce qui rend l'ordre lexicographique identique à
l'ordre chronologique : les périodes peuvent être comparées et triées comme
des chaînes.
"""
import re
from datetime import date

from dateutil.relativedelta import relativedelta
from django.conf import settings

from .exceptions import PeriodeInvalideError

PERIODE_RE = r'^\d{4}-(0[1-9]|1[0-2])$'

MOIS_FR = [
    'Janvier', 'Février', 'Mars', 'Avril', 'Mai', 'Juin',
    'Juillet', 'Août', 'Septembre', 'Octobre', 'Novembre', 'Décembre',
]

JOUR_ECHEANCE = 10

_periode_pattern = re.compile(PERIODE_RE)


def jour_echeance_configure():
    """Jour d'exigibilité du loyer courant, lu dans ``SOPRIMEC['JOUR_ECHEANCE']``."""
    return getattr(settings, 'SOPRIMEC', {}).get('JOUR_ECHEANCE', JOUR_ECHEANCE)


def periode_de(d):
    """Formate une date en période ``AAAA-MM``."""
    return f"{d.year:04d}-{d.month:02d}"


def parse_periode(periode):
    """Retourne le premier jour du mois désigné par ``periode``."""
    if not isinstance(periode, str) or not _periode_pattern.match(periode):
        raise PeriodeInvalideError(f"Période invalide : {periode!r} (format attendu AAAA-MM)")
    annee, mois = periode.split('-')
    return date(int(annee), int(mois), 1)


def periode_suivante(periode):
    return periode_de(parse_periode(periode) + relativedelta(months=1))


def nom_mois(index):
    """Nom français du mois, ``index`` de 0 (janvier) à 11 (décembre)."""
    return MOIS_FR[index]


def libelle_periode(periode):
    """Ex: ``'2024-03'`` -> ``'Mars 2024'``."""
    d = parse_periode(periode)
    return f"{nom_mois(d.month - 1)} {d.year}"


def periode_limite(aujourdhui, jour_echeance=JOUR_ECHEANCE):
    """
    Dernière période exigible à la date ``aujourdhui``.

    Le loyer du mois en cours n'est dû qu'à partir du ``jour_echeance`` du
    mois ; avant cette date, la limite est le mois précédent.
    """
    debut_mois = date(aujourdhui.year, aujourdhui.month, 1)
    if aujourdhui.day >= jour_echeance:
        return periode_de(debut_mois)
    return periode_de(debut_mois - relativedelta(months=1))


def iter_periodes(debut, fin):
    """Parcourt les périodes de ``debut`` à ``fin`` incluses, dans l'ordre."""
    courante = parse_periode(debut)
    derniere = parse_periode(fin)
    while courante <= derniere:
        yield periode_de(courante)
        courante += relativedelta(months=1)
