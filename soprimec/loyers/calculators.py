"""
Calculateurs des arriérés de loyer et de la répartition des paiements.

Les calculs sont des fonctions pures : ils reçoivent le locataire, l'historique
de ses paiements et la date du jour, et n'interrogent jamais la base de
données ni l'horloge. Les écritures sont faites par ``services``.
"""
from collections import defaultdict
from datetime import date
import logging

from .exceptions import LocataireIntrouvableError, MontantInvalideError, PreconditionError
from .models import Locataire, Paiement
from .periodes import (
    JOUR_ECHEANCE, iter_periodes, libelle_periode, periode_de, periode_limite, periode_suivante,
)

logger = logging.getLogger(__name__)


class ArrieresCalculator:
    """Calcul des mois impayés (ou partiellement payés) d'un locataire."""

    @staticmethod
    def resultat_vide():
        return {'mois_impayes': [], 'total': 0, 'dernier_mois_paye': None}

    @staticmethod
    def montants_par_periode(paiements):
        """
        Cumule les paiements au statut ``Payé`` par période.

        Plusieurs paiements partiels d'une même période s'additionnent ; les
        paiements en attente ou annulés sont ignorés.
        """
        cumul = defaultdict(int)
        for paiement in paiements:
            if paiement.statut == Paiement.Statut.PAYE:
                cumul[paiement.periode] += paiement.montant
        return dict(cumul)

    @staticmethod
    def date_entree(locataire):
        """Date d'entrée du locataire, ou PreconditionError si absente ou illisible."""
        valeur = locataire.date_entree
        if isinstance(valeur, str) and valeur:
            try:
                valeur = date.fromisoformat(valeur)
            except ValueError:
                raise PreconditionError(f"Date d'entrée invalide pour {locataire} : {valeur!r}")
        if not isinstance(valeur, date):
            raise PreconditionError(f"Date d'entrée manquante pour {locataire}")
        return valeur

    @staticmethod
    def calculer(locataire, paiements, aujourdhui, jour_echeance=JOUR_ECHEANCE):
        """
        Calcule les arriérés d'un locataire à la date ``aujourdhui``.

        Les mois sont parcourus du mois d'entrée jusqu'au dernier mois exigible
        (le mois courant n'est dû qu'à partir du ``jour_echeance``).

        Args:
            locataire: Instance de Locataire (statut, date_entree, loyer)
            paiements: Paiements du locataire (tous statuts confondus)
            aujourdhui (date): Date du calcul
            jour_echeance (int): Jour du mois où le loyer courant devient exigible

        Returns:
            dict: {
                'mois_impayes': [{'periode', 'mois', 'reste', 'avance'}, ...],
                'total': int,
                'dernier_mois_paye': {'periode', 'mois'} ou None
            }
                - reste: montant encore dû pour la période
                - avance: montant déjà versé pour la période
                - dernier_mois_paye: dernier mois soldé précédant le premier impayé
        """
        if locataire.statut != Locataire.Statut.ACTIF:
            return ArrieresCalculator.resultat_vide()

        debut = periode_de(ArrieresCalculator.date_entree(locataire))
        fin = periode_limite(aujourdhui, jour_echeance)
        if debut > fin:
            return ArrieresCalculator.resultat_vide()

        payes = ArrieresCalculator.montants_par_periode(paiements)
        loyer = locataire.loyer
        mois_impayes = []
        dernier_mois_paye = None
        total = 0

        for periode in iter_periodes(debut, fin):
            paye = payes.get(periode, 0)
            if paye >= loyer:
                # Seul un mois soldé sans impayé avant lui compte
                if not mois_impayes:
                    dernier_mois_paye = {'periode': periode, 'mois': libelle_periode(periode)}
            else:
                reste = loyer - paye
                mois_impayes.append({
                    'periode': periode,
                    'mois': libelle_periode(periode),
                    'reste': reste,
                    'avance': paye,
                })
                total += reste

        logger.debug(f"Arriérés {locataire.code} au {aujourdhui}: {len(mois_impayes)} mois, {total} FCFA")
        return {'mois_impayes': mois_impayes, 'total': total, 'dernier_mois_paye': dernier_mois_paye}


class RepartitionCalculator:
    """Répartition d'un nouveau paiement sur les mois dus puis sur les mois à venir."""

    @staticmethod
    def verifier_montant(montant):
        if isinstance(montant, bool) or not isinstance(montant, int) or montant <= 0:
            raise MontantInvalideError(montant)

    @staticmethod
    def repartir(locataire, paiements, montant, aujourdhui, jour_echeance=JOUR_ECHEANCE):
        """
        Répartit ``montant`` sur les périodes du locataire, du plus ancien impayé au plus récent.

        Le reliquat éventuel est affecté en une seule ligne à la période qui
        suit le dernier impayé ; si le locataire est à jour, au mois calendaire
        courant s'il n'est pas encore soldé, sinon au mois suivant.

        Args:
            locataire: Instance de Locataire, ou None si la référence est introuvable
            paiements: Paiements existants du locataire
            montant (int): Montant versé, strictement positif
            aujourdhui (date): Date du paiement

        Returns:
            list: [{'periode': str, 'montant': int}, ...] dans l'ordre d'affectation.
                La somme des montants est toujours égale à ``montant``.

        Raises:
            MontantInvalideError: montant non entier ou non positif
            LocataireIntrouvableError: locataire absent
            PreconditionError: locataire inactif ou sans date d'entrée
        """
        RepartitionCalculator.verifier_montant(montant)

        if locataire is None:
            raise LocataireIntrouvableError()
        if locataire.statut != Locataire.Statut.ACTIF:
            raise PreconditionError(f"Le locataire {locataire} n'est pas actif")

        paiements = list(paiements)
        arrieres = ArrieresCalculator.calculer(locataire, paiements, aujourdhui, jour_echeance)
        mois_impayes = arrieres['mois_impayes']

        lignes = []
        restant = montant
        for mois in mois_impayes:
            if restant <= 0:
                break
            applique = min(restant, mois['reste'])
            lignes.append({'periode': mois['periode'], 'montant': applique})
            restant -= applique

        if restant > 0:
            if mois_impayes:
                cible = periode_suivante(mois_impayes[-1]['periode'])
            else:
                # Mois calendaire réel, sans décalage d'échéance
                periode_courante = periode_de(aujourdhui)
                deja_paye = ArrieresCalculator.montants_par_periode(paiements).get(periode_courante, 0)
                if deja_paye < locataire.loyer:
                    cible = periode_courante
                else:
                    cible = periode_suivante(periode_courante)
            lignes.append({'periode': cible, 'montant': restant})

        logger.debug(f"Répartition {montant} FCFA pour {locataire.code}: {lignes}")
        return lignes
