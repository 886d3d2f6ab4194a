"""
Calculateurs de reporting pour le portefeuille locatif.

Ce module contient:
- RapportCalculator.tableau_de_bord: occupation, loyers attendus, arriérés, rappels
- RapportCalculator.liste_arrieres: locataires ayant des arriérés
- RapportCalculator.rapport_periode: attendu / encaissé / impayés / net d'un mois
"""
import logging

from .calculators import ArrieresCalculator
from .models import Bien, Locataire, Paiement
from .periodes import jour_echeance_configure, parse_periode

logger = logging.getLogger(__name__)


def _pourcentage(partie, total):
    if not total:
        return 0
    return round(partie / total * 100)


class RapportCalculator:
    """Agrégats calculés à partir des biens, locataires, paiements et charges."""

    @staticmethod
    def liste_arrieres(locataires, paiements_par_locataire, aujourdhui):
        """
        Retourne les locataires actifs ayant des arriérés, avec le détail du calcul.

        Returns:
            list: [{'locataire': Locataire, **arrieres}, ...] pour total > 0
        """
        resultat = []
        for locataire in locataires:
            if locataire.statut != Locataire.Statut.ACTIF:
                continue
            if not locataire.date_entree:
                logger.warning(f"Arriérés non calculés pour {locataire} : date d'entrée manquante")
                continue
            arrieres = ArrieresCalculator.calculer(
                locataire, paiements_par_locataire.get(locataire.code, []), aujourdhui, jour_echeance_configure()
            )
            if arrieres['total'] > 0:
                resultat.append({'locataire': locataire, **arrieres})
        return resultat

    @staticmethod
    def tableau_de_bord(biens, locataires, paiements_par_locataire, aujourdhui):
        """
        Indicateurs globaux du portefeuille.

        Args:
            biens: Tous les biens
            locataires: Tous les locataires (seuls les actifs sont comptés)
            paiements_par_locataire (dict): code locataire -> paiements
            aujourdhui (date): Date du calcul

        Returns:
            dict: total_biens, loues, taux, loyers_attendus, locataires_actifs,
                total_arrieres, rappels_count, arrieres
        """
        biens = list(biens)
        actifs = [l for l in locataires if l.statut == Locataire.Statut.ACTIF]
        loues = sum(1 for b in biens if b.statut == Bien.Statut.LOUE)

        arrieres = RapportCalculator.liste_arrieres(actifs, paiements_par_locataire, aujourdhui)
        # Un rappel est émis pour chaque locataire ayant au moins un mois impayé
        rappels_count = sum(1 for a in arrieres if a['mois_impayes'])

        return {
            'total_biens': len(biens),
            'loues': loues,
            'taux': _pourcentage(loues, len(biens)),
            'loyers_attendus': sum(l.loyer for l in actifs),
            'locataires_actifs': len(actifs),
            'total_arrieres': sum(a['total'] for a in arrieres),
            'rappels_count': rappels_count,
            'arrieres': arrieres,
        }

    @staticmethod
    def rapport_periode(periode, locataires, paiements, charges):
        """
        Rapport financier d'un mois.

        Args:
            periode (str): Mois au format AAAA-MM
            locataires: Locataires (seuls les actifs comptent dans l'attendu)
            paiements: Paiements (filtrés ici sur la période et le statut Payé)
            charges: Charges (filtrées ici sur le mois de leur date)

        Returns:
            dict: loyers_attendus, loyers_encaisses, impayes, taux, total_charges, net
        """
        debut = parse_periode(periode)

        loyers_attendus = sum(l.loyer for l in locataires if l.statut == Locataire.Statut.ACTIF)
        loyers_encaisses = sum(
            p.montant for p in paiements
            if p.periode == periode and p.statut == Paiement.Statut.PAYE
        )
        total_charges = sum(
            c.montant for c in charges
            if c.date and c.date.year == debut.year and c.date.month == debut.month
        )

        rapport = {
            'periode': periode,
            'loyers_attendus': loyers_attendus,
            'loyers_encaisses': loyers_encaisses,
            'impayes': loyers_attendus - loyers_encaisses,
            'taux': _pourcentage(loyers_encaisses, loyers_attendus),
            'total_charges': total_charges,
            'net': loyers_encaisses - total_charges,
        }
        logger.debug(f"Rapport {periode}: {rapport}")
        return rapport
