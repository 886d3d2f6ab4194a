"""
Génération des rappels de loyers impayés.
"""
import logging

from django.conf import settings

from .calculators import ArrieresCalculator
from .periodes import jour_echeance_configure

logger = logging.getLogger(__name__)

MESSAGE_ARRIERES = (
    "Bonjour Mr/Mme {nom}, l'agence {agence} vous rappelle que vous avez des arriérés "
    "de {montant} FCFA pour les mois de {mois}. {dernier}"
    "Merci de régulariser votre situation auprès de l'agence au {telephone}."
)


def format_fcfa(montant, devise=False):
    """Formate un montant entier : 1 250 000 (ou 1 250 000 FCFA)."""
    try:
        texte = f"{int(montant):,}".replace(",", " ")
    except (ValueError, TypeError):
        texte = "0"
    return f"{texte} FCFA" if devise else texte


def libelle_mois_impayes(mois_impayes):
    """Liste lisible des mois impayés, avec le reste dû des mois partiellement payés."""
    libelles = []
    for mois in mois_impayes:
        if mois['avance'] > 0:
            libelles.append(f"{mois['mois']} (reste {format_fcfa(mois['reste'], devise=True)})")
        else:
            libelles.append(mois['mois'])
    return ', '.join(libelles)


def _parametres_agence():
    config = getattr(settings, 'SOPRIMEC', {})
    return (
        config.get('AGENCE_NOM', 'SOPRIMEC'),
        config.get('AGENCE_TELEPHONE', ''),
        jour_echeance_configure(),
    )


def construire_rappel(locataire, arrieres, agence, telephone):
    """Construit le rappel d'un locataire à partir de ses arriérés déjà calculés."""
    mois_liste = libelle_mois_impayes(arrieres['mois_impayes'])
    dernier = arrieres['dernier_mois_paye']
    dernier_info = f"Dernier mois payé: {dernier['mois']}. " if dernier else ""
    nb_mois = len(arrieres['mois_impayes'])

    return {
        'locataire': locataire,
        'type': 'arrieres',
        'badge': 'badge-danger',
        'label': f"{nb_mois} mois impayé(s)",
        'montant': arrieres['total'],
        'mois': mois_liste,
        'dernier_mois_paye': dernier['mois'] if dernier else None,
        'message': MESSAGE_ARRIERES.format(
            nom=locataire.nom,
            agence=agence,
            montant=format_fcfa(arrieres['total']),
            mois=mois_liste,
            dernier=dernier_info,
            telephone=telephone,
        ),
    }


def generer_rappels(locataires, paiements_par_locataire, aujourdhui):
    """
    Génère un rappel par locataire actif ayant au moins un mois impayé.

    Aucune écriture n'est faite : le résultat ne dépend que des arriérés au
    jour ``aujourdhui``. Le mois courant non encore exigible n'apparaît pas,
    le mois courant exigible et impayé figure dans la liste des mois.

    Args:
        locataires: Locataires à examiner (les inactifs sont ignorés)
        paiements_par_locataire (dict): code locataire -> liste de paiements
        aujourdhui (date): Date du calcul

    Returns:
        list: Liste de dict {locataire, type, badge, label, montant, mois,
            dernier_mois_paye, message}
    """
    agence, telephone, jour_echeance = _parametres_agence()
    rappels = []

    for locataire in locataires:
        if locataire.est_actif and not locataire.date_entree:
            logger.warning(f"Rappel impossible pour {locataire} : date d'entrée manquante")
            continue
        arrieres = ArrieresCalculator.calculer(
            locataire, paiements_par_locataire.get(locataire.code, []), aujourdhui, jour_echeance
        )
        if arrieres['mois_impayes']:
            rappels.append(construire_rappel(locataire, arrieres, agence, telephone))

    logger.info(f"{len(rappels)} rappel(s) générés au {aujourdhui}")
    return rappels
