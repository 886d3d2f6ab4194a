from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    BienViewSet,
    LocataireViewSet,
    PaiementViewSet,
    ChargeViewSet,
    EntretienViewSet,
    arrieres_liste,
    arrieres_locataire,
    rappels,
    dashboard,
    rapport_periode,
    export_json,
    import_json,
    export_csv,
)

router = DefaultRouter()
router.register(r'biens', BienViewSet)
router.register(r'locataires', LocataireViewSet)
router.register(r'paiements', PaiementViewSet)
router.register(r'charges', ChargeViewSet)
router.register(r'entretiens', EntretienViewSet)

urlpatterns = [
    # Arriérés et rappels
    path('arrieres/', arrieres_liste, name='arrieres_liste'),
    path('arrieres/<str:code>/', arrieres_locataire, name='arrieres_locataire'),
    path('rappels/', rappels, name='rappels'),

    # Reporting
    path('dashboard/', dashboard, name='dashboard'),
    path('rapports/<str:periode>/', rapport_periode, name='rapport_periode'),

    # Export / import
    path('export/json/', export_json, name='export_json'),
    path('import/json/', import_json, name='import_json'),
    path('export/csv/', export_csv, name='export_csv'),

    # API
    path('', include(router.urls)),
]
