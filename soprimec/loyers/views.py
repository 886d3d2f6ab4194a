"""
API JSON de la gestion locative (Django REST framework).

Les vues restent fines : validation des entrées, appel aux calculateurs ou aux
services, sérialisation du résultat. La date du jour est lue ici et transmise
explicitement aux calculs.
"""
import csv
import logging

from django.http import HttpResponse
from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import action, api_view
from rest_framework.response import Response

from . import services
from .calculators import ArrieresCalculator
from .exceptions import LocataireIntrouvableError
from .models import Bien, Locataire, Paiement, Charge, Entretien
from .pdf_generator import PDFGenerator
from .periodes import jour_echeance_configure, parse_periode
from .rappels import generer_rappels
from .rapports import RapportCalculator
from .serializers import (
    BienSerializer, LocataireSerializer, PaiementSerializer, NouveauPaiementSerializer,
    ChargeSerializer, EntretienSerializer, ArrieresSerializer, LocataireArrieresSerializer,
    RappelSerializer, IMPORT_SERIALIZERS,
)

logger = logging.getLogger(__name__)

METHODES = ['get', 'post', 'delete', 'head', 'options']


def _aujourdhui():
    return timezone.localdate()


def _arrieres(locataire, aujourdhui):
    return ArrieresCalculator.calculer(
        locataire, services.paiements_payes(locataire), aujourdhui, jour_echeance_configure()
    )


def _reponse_pdf(contenu, filename):
    response = HttpResponse(contenu, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


# ============================================================================
# RESSOURCES
# ============================================================================

class BienViewSet(viewsets.ModelViewSet):
    queryset = Bien.objects.all()
    serializer_class = BienSerializer
    http_method_names = METHODES

    def perform_create(self, serializer):
        serializer.instance = services.creer_bien(**serializer.validated_data)

    def perform_destroy(self, instance):
        services.supprimer_bien(instance.code)


class LocataireViewSet(viewsets.ModelViewSet):
    queryset = Locataire.objects.select_related('bien')
    serializer_class = LocataireSerializer
    http_method_names = METHODES

    def perform_create(self, serializer):
        serializer.instance = services.signer_bail(**serializer.validated_data)

    def perform_destroy(self, instance):
        services.supprimer_locataire(instance.code)

    @action(detail=True, methods=['post'])
    def resilier(self, request, pk=None):
        locataire = services.resilier_bail(pk)
        return Response(LocataireSerializer(locataire).data)

    @action(detail=True, methods=['get'])
    def arrieres(self, request, pk=None):
        locataire = self.get_object()
        return Response(ArrieresSerializer(_arrieres(locataire, _aujourdhui())).data)

    @action(detail=True, methods=['get'])
    def relance(self, request, pk=None):
        """Lettre de relance PDF du locataire (404 s'il n'a aucun impayé)."""
        locataire = self.get_object()
        aujourdhui = _aujourdhui()
        rappels = generer_rappels([locataire], {locataire.code: services.paiements_payes(locataire)}, aujourdhui)
        if not rappels:
            return Response({'error': "Aucun impayé pour ce locataire"}, status=status.HTTP_404_NOT_FOUND)

        pdf_content = PDFGenerator(locataire).generer_relance(rappels[0], aujourdhui)
        nom = locataire.nom.upper().replace(" ", "_")
        return _reponse_pdf(pdf_content, f"Relance_{nom}_{aujourdhui.isoformat()}.pdf")


class PaiementViewSet(viewsets.ModelViewSet):
    queryset = Paiement.objects.select_related('locataire__bien')
    serializer_class = PaiementSerializer
    http_method_names = METHODES

    def get_queryset(self):
        qs = super().get_queryset()
        locataire = self.request.query_params.get('locataire')
        periode = self.request.query_params.get('periode')
        if locataire:
            qs = qs.filter(locataire=locataire)
        if periode:
            qs = qs.filter(periode=periode)
        return qs

    def create(self, request, *args, **kwargs):
        """Répartit un versement sur les mois dus ; une ligne créée par période couverte."""
        serializer = NouveauPaiementSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        donnees = serializer.validated_data

        crees = services.enregistrer_paiement(
            donnees['locataire'],
            donnees['montant'],
            _aujourdhui(),
            date=donnees.get('date'),
            mode=donnees['mode'],
            reference=donnees['reference'],
        )
        return Response(
            {'created': PaiementSerializer(crees, many=True).data, 'count': len(crees)},
            status=status.HTTP_201_CREATED,
        )

    def perform_destroy(self, instance):
        services.supprimer_paiement(instance.numero)

    @action(detail=True, methods=['get'])
    def quittance(self, request, pk=None):
        paiement = self.get_object()
        pdf_content = PDFGenerator(paiement.locataire).generer_quittance(paiement, _aujourdhui())
        return _reponse_pdf(pdf_content, f"Quittance_{paiement.numero}_{paiement.periode}.pdf")


class ChargeViewSet(viewsets.ModelViewSet):
    queryset = Charge.objects.select_related('bien')
    serializer_class = ChargeSerializer
    http_method_names = METHODES

    def perform_create(self, serializer):
        serializer.instance = services.creer_charge(**serializer.validated_data)


class EntretienViewSet(viewsets.ModelViewSet):
    queryset = Entretien.objects.select_related('bien')
    serializer_class = EntretienSerializer
    http_method_names = METHODES

    def perform_create(self, serializer):
        serializer.instance = services.creer_entretien(**serializer.validated_data)


# ============================================================================
# ARRIÉRÉS, RAPPELS, TABLEAU DE BORD
# ============================================================================

def _locataires_actifs():
    return list(Locataire.objects.filter(statut=Locataire.Statut.ACTIF).select_related('bien'))


@api_view(['GET'])
def arrieres_liste(request):
    """Locataires actifs ayant des arriérés."""
    locataires = _locataires_actifs()
    resultat = RapportCalculator.liste_arrieres(
        locataires, services.paiements_par_locataire(locataires), _aujourdhui()
    )
    return Response(LocataireArrieresSerializer(resultat, many=True).data)


@api_view(['GET'])
def arrieres_locataire(request, code):
    locataire = Locataire.objects.filter(pk=code).first()
    if locataire is None:
        raise LocataireIntrouvableError(code)
    return Response(ArrieresSerializer(_arrieres(locataire, _aujourdhui())).data)


@api_view(['GET'])
def rappels(request):
    locataires = _locataires_actifs()
    resultat = generer_rappels(locataires, services.paiements_par_locataire(locataires), _aujourdhui())
    return Response(RappelSerializer(resultat, many=True).data)


@api_view(['GET'])
def dashboard(request):
    locataires = _locataires_actifs()
    donnees = RapportCalculator.tableau_de_bord(
        Bien.objects.all(), locataires, services.paiements_par_locataire(locataires), _aujourdhui()
    )
    donnees['arrieres'] = LocataireArrieresSerializer(donnees['arrieres'], many=True).data
    return Response(donnees)


@api_view(['GET'])
def rapport_periode(request, periode):
    debut = parse_periode(periode)
    rapport = RapportCalculator.rapport_periode(
        periode,
        Locataire.objects.filter(statut=Locataire.Statut.ACTIF),
        Paiement.objects.filter(periode=periode),
        Charge.objects.filter(date__year=debut.year, date__month=debut.month),
    )
    return Response(rapport)


# ============================================================================
# EXPORT / IMPORT
# ============================================================================

@api_view(['GET'])
def export_json(request):
    data = {
        'biens': BienSerializer(Bien.objects.all(), many=True).data,
        'locataires': LocataireSerializer(Locataire.objects.all(), many=True).data,
        'paiements': PaiementSerializer(Paiement.objects.all(), many=True).data,
        'charges': ChargeSerializer(Charge.objects.all(), many=True).data,
        'entretiens': EntretienSerializer(Entretien.objects.all(), many=True).data,
    }
    filename = f"soprimec_backup_{_aujourdhui().isoformat()}.json"
    return Response(data, headers={'Content-Disposition': f'attachment; filename={filename}'})


@api_view(['POST'])
def import_json(request):
    compte = services.importer_donnees(request.data, IMPORT_SERIALIZERS)
    return Response({'ok': True, 'importes': compte})


@api_view(['GET'])
def export_csv(request):
    """Liste des locataires avec leur bien et leurs arriérés du jour."""
    aujourdhui = _aujourdhui()
    locataires = list(Locataire.objects.select_related('bien'))
    paiements = services.paiements_par_locataire(locataires)

    response = HttpResponse(content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = 'attachment; filename=soprimec_locataires.csv'

    writer = csv.writer(response)
    writer.writerow(['Code', 'Nom', 'Téléphone', 'Bien', 'Immeuble', 'Appartement', 'Adresse', 'Loyer', 'Arriérés', 'Statut'])
    for locataire in locataires:
        bien = locataire.bien
        total = ''
        if locataire.date_entree:
            total = ArrieresCalculator.calculer(
                locataire, paiements.get(locataire.code, []), aujourdhui, jour_echeance_configure()
            )['total']
        writer.writerow([
            locataire.code,
            locataire.nom,
            locataire.telephone,
            locataire.bien_id or '',
            bien.immeuble if bien else '',
            bien.appartement if bien else '',
            bien.adresse if bien else '',
            locataire.loyer,
            total,
            locataire.statut,
        ])

    logger.info(f"Export CSV : {len(locataires)} locataire(s)")
    return response
