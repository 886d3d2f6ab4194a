"""
Opérations d'écriture de la gestion locative.

Chaque opération s'exécute dans une transaction unique : en cas d'erreur,
aucune écriture partielle n'est conservée.
"""
import logging
import re

from django.db import transaction

from .calculators import RepartitionCalculator
from .exceptions import BienOccupeError, LocataireIntrouvableError, PreconditionError
from .models import Bien, Charge, Entretien, Locataire, Paiement
from .periodes import jour_echeance_configure

logger = logging.getLogger(__name__)

PREFIXES = {
    Bien: 'B',
    Locataire: 'L',
    Paiement: 'P',
    Charge: 'C',
    Entretien: 'INT',
}

# Largeur du suffixe numérique ; 3 chiffres pour les autres préfixes
LARGEURS = {'P': 4, 'C': 4}


def _numero_max(modele):
    champ = modele._meta.pk.name
    numeros = [0]
    for valeur in modele.objects.values_list(champ, flat=True):
        m = re.search(r'\d+', valeur)
        if m:
            numeros.append(int(m.group()))
    return max(numeros)


def formater_numero(prefixe, numero):
    return f"{prefixe}{numero:0{LARGEURS.get(prefixe, 3)}d}"


def prochain_numero(modele):
    """
    Prochain identifiant libre d'une table.

    Suffixe numérique le plus élevé existant + 1, complété à 4 chiffres pour
    les paiements et les charges, 3 chiffres sinon (B001, P0001, INT001...).
    """
    prefixe = PREFIXES[modele]
    return formater_numero(prefixe, _numero_max(modele) + 1)


def paiements_payes(locataire):
    return list(
        Paiement.objects.filter(locataire=locataire, statut=Paiement.Statut.PAYE).order_by('periode', 'numero')
    )


def paiements_par_locataire(locataires=None):
    """Paiements ``Payé`` groupés par code locataire, triés par période."""
    qs = Paiement.objects.filter(statut=Paiement.Statut.PAYE).order_by('periode', 'numero')
    if locataires is not None:
        qs = qs.filter(locataire__in=[l.code for l in locataires])
    groupes = {}
    for paiement in qs:
        groupes.setdefault(paiement.locataire_id, []).append(paiement)
    return groupes


def _locataire_actif_du_bien(bien, exclure=None):
    qs = Locataire.objects.filter(bien=bien, statut=Locataire.Statut.ACTIF)
    if exclure is not None:
        qs = qs.exclude(pk=exclure.pk)
    return qs.first()


# ─── Biens ───────────────────────────────────────────────────────────────────

@transaction.atomic
def creer_bien(**donnees):
    donnees.pop('code', None)
    bien = Bien.objects.create(code=prochain_numero(Bien), **donnees)
    logger.info(f"Bien créé : {bien}")
    return bien


@transaction.atomic
def supprimer_bien(code):
    bien = Bien.objects.select_for_update().filter(pk=code).first()
    if bien is None:
        return False
    occupant = _locataire_actif_du_bien(bien)
    if occupant:
        raise BienOccupeError(bien.code, occupant.code)
    bien.delete()
    logger.info(f"Bien supprimé : {code}")
    return True


# ─── Locataires ──────────────────────────────────────────────────────────────

@transaction.atomic
def signer_bail(**donnees):
    """
    Enregistre un nouveau locataire sur un bien et passe le bien en ``Loué``.

    Le loyer du bien est repris si aucun loyer n'est fourni. Un bien ne peut
    avoir qu'un seul locataire actif.
    """
    donnees.pop('code', None)
    donnees.pop('statut', None)
    if not donnees.get('date_entree'):
        raise PreconditionError("La date d'entrée est obligatoire pour signer un bail.")

    bien = donnees.pop('bien', None)
    if bien is not None and not isinstance(bien, Bien):
        bien = Bien.objects.filter(pk=bien).first()
    if bien is None:
        raise PreconditionError("Le bien loué est obligatoire pour signer un bail.")

    bien = Bien.objects.select_for_update().get(pk=bien.pk)
    occupant = _locataire_actif_du_bien(bien)
    if occupant:
        raise BienOccupeError(bien.code, occupant.code)

    if donnees.get('loyer') is None:
        donnees['loyer'] = bien.loyer

    locataire = Locataire.objects.create(
        code=prochain_numero(Locataire), bien=bien, statut=Locataire.Statut.ACTIF, **donnees
    )
    bien.statut = Bien.Statut.LOUE
    bien.save(update_fields=['statut'])

    logger.info(f"Bail signé : {locataire} sur {bien.code} ({locataire.loyer} FCFA/mois)")
    return locataire


def _liberer_bien(locataire):
    if locataire.bien_id and not _locataire_actif_du_bien(locataire.bien_id, exclure=locataire):
        Bien.objects.filter(pk=locataire.bien_id).update(statut=Bien.Statut.VACANT)


@transaction.atomic
def resilier_bail(code):
    """Passe le locataire en ``Inactif``, libère son contrat et remet le bien en ``Vacant``."""
    locataire = Locataire.objects.select_for_update().filter(pk=code).first()
    if locataire is None:
        raise LocataireIntrouvableError(code)

    _liberer_bien(locataire)
    locataire.statut = Locataire.Statut.INACTIF
    locataire.contrat = None
    locataire.save(update_fields=['statut', 'contrat'])

    logger.info(f"Bail résilié : {locataire}")
    return locataire


@transaction.atomic
def supprimer_locataire(code):
    locataire = Locataire.objects.select_for_update().filter(pk=code).first()
    if locataire is None:
        return False
    _liberer_bien(locataire)
    locataire.delete()
    logger.info(f"Locataire supprimé : {code}")
    return True


# ─── Paiements ───────────────────────────────────────────────────────────────

@transaction.atomic
def enregistrer_paiement(code_locataire, montant, aujourdhui, date=None, mode=Paiement.Mode.ESPECES,
                         reference='', jour_echeance=None):
    """
    Enregistre un versement et le répartit sur les mois dus.

    Une ligne ``Paiement`` est créée par période couverte ; les paiements
    existants ne sont jamais modifiés.

    Args:
        code_locataire (str): Code du locataire
        montant (int): Montant versé
        aujourdhui (date): Date du jour (détermine les mois exigibles)
        date (date): Date du versement, ``aujourdhui`` par défaut
        mode (str): Mode de paiement
        reference (str): Référence libre (n° de chèque, transaction...)
        jour_echeance (int): Jour d'exigibilité, ``SOPRIMEC['JOUR_ECHEANCE']`` par défaut

    Returns:
        list: Paiements créés, dans l'ordre de répartition
    """
    RepartitionCalculator.verifier_montant(montant)

    locataire = Locataire.objects.select_for_update().filter(pk=code_locataire).first()
    if locataire is None:
        raise LocataireIntrouvableError(code_locataire)

    if jour_echeance is None:
        jour_echeance = jour_echeance_configure()
    lignes = RepartitionCalculator.repartir(
        locataire, paiements_payes(locataire), montant, aujourdhui, jour_echeance
    )

    numero = _numero_max(Paiement)
    crees = []
    for ligne in lignes:
        numero += 1
        crees.append(Paiement(
            numero=formater_numero(PREFIXES[Paiement], numero),
            locataire=locataire,
            periode=ligne['periode'],
            montant=ligne['montant'],
            date=date or aujourdhui,
            mode=mode,
            reference=reference,
            statut=Paiement.Statut.PAYE,
        ))
    Paiement.objects.bulk_create(crees)

    logger.info(
        f"Paiement de {montant} FCFA pour {locataire.code} réparti sur "
        f"{', '.join(p.periode for p in crees)}"
    )
    return crees


@transaction.atomic
def supprimer_paiement(numero):
    supprimes, _ = Paiement.objects.filter(pk=numero).delete()
    if supprimes:
        logger.info(f"Paiement supprimé : {numero}")
    return bool(supprimes)


# ─── Charges et entretiens ───────────────────────────────────────────────────

@transaction.atomic
def creer_charge(**donnees):
    donnees.pop('numero', None)
    charge = Charge.objects.create(numero=prochain_numero(Charge), **donnees)
    logger.info(f"Charge créée : {charge}")
    return charge


@transaction.atomic
def creer_entretien(**donnees):
    donnees.pop('numero', None)
    entretien = Entretien.objects.create(numero=prochain_numero(Entretien), **donnees)
    logger.info(f"Entretien créé : {entretien}")
    return entretien


# ─── Import ──────────────────────────────────────────────────────────────────

@transaction.atomic
def importer_donnees(donnees, serializers):
    """
    Remplace le contenu des tables présentes dans ``donnees``.

    Les tables absentes du fichier sont conservées, y compris leur lien vers
    un bien réimporté sous le même code.

    Args:
        donnees (dict): {'biens': [...], 'locataires': [...], 'paiements': [...],
            'charges': [...], 'entretiens': [...]}
        serializers (dict): nom de table -> classe de serializer validant les lignes

    Returns:
        dict: nombre de lignes importées par table
    """
    ordre = ['biens', 'locataires', 'paiements', 'charges', 'entretiens']
    modeles = {
        'biens': Bien, 'locataires': Locataire, 'paiements': Paiement,
        'charges': Charge, 'entretiens': Entretien,
    }

    # La suppression des biens met à NULL les références (SET_NULL)
    liens = {}
    if 'biens' in donnees:
        for table in ('locataires', 'charges', 'entretiens'):
            if table not in donnees:
                liens[table] = list(
                    modeles[table].objects.exclude(bien=None).values_list('pk', 'bien_id')
                )

    # Suppression des dépendants avant les biens
    for table in reversed(ordre):
        if table in donnees:
            modeles[table].objects.all().delete()

    compte = {}
    for table in ordre:
        if table not in donnees:
            continue
        serializer = serializers[table](data=donnees[table], many=True)
        serializer.is_valid(raise_exception=True)
        modeles[table].objects.bulk_create(
            [modeles[table](**ligne) for ligne in serializer.validated_data]
        )
        compte[table] = len(serializer.validated_data)

    if liens:
        codes = set(Bien.objects.values_list('code', flat=True))
        for table, references in liens.items():
            par_bien = {}
            for pk, bien_id in references:
                if bien_id in codes:
                    par_bien.setdefault(bien_id, []).append(pk)
                else:
                    logger.warning(f"Import : {table} {pk} perd son bien {bien_id}, absent du fichier")
            for bien_id, pks in par_bien.items():
                modeles[table].objects.filter(pk__in=pks).update(bien_id=bien_id)

    logger.info(f"Import terminé : {compte}")
    return compte
