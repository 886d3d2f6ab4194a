"""
Exceptions personnalisées pour l'application de gestion locative.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger(__name__)


class GestionLocativeError(Exception):
    """Opération refusée : aucune écriture n'a été conservée."""

    status_code = status.HTTP_400_BAD_REQUEST


class MontantInvalideError(GestionLocativeError):
    """Exception levée quand un montant de paiement n'est pas strictement positif."""

    def __init__(self, montant):
        self.montant = montant
        super().__init__(f"Montant invalide : {montant!r}. Le montant doit être un entier strictement positif.")


class LocataireIntrouvableError(GestionLocativeError):
    """Exception levée quand la référence d'un locataire ne correspond à aucun enregistrement."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, code=None):
        self.code = code
        message = "Locataire introuvable"
        if code:
            message += f" : {code}"
        super().__init__(message)


class PreconditionError(GestionLocativeError):
    """Exception levée quand les données d'entrée ne permettent pas le calcul (date d'entrée absente, locataire inactif...)."""

    def __init__(self, message):
        super().__init__(message)


class BienOccupeError(GestionLocativeError):
    """Exception levée quand un bien est encore loué à un locataire actif."""

    def __init__(self, bien, locataire=None):
        self.bien = bien
        self.locataire = locataire

        message = f"Le bien {bien} est loué à un locataire actif"
        if locataire:
            message += f" ({locataire})"
        super().__init__(message + ".")


class PeriodeInvalideError(GestionLocativeError):
    """Exception levée quand une période n'est pas au format AAAA-MM."""

    def __init__(self, message):
        super().__init__(message)


def api_exception_handler(exc, context):
    """
    Gestionnaire d'exceptions Django REST framework.

    Traduit les erreurs métier en réponses ``{'error': message}`` et annule la
    transaction de la requête en cours.
    """
    if isinstance(exc, GestionLocativeError):
        view = context.get('view')
        logger.warning(f"Opération refusée ({view.__class__.__name__ if view else '-'}) : {exc}")
        set_rollback()
        return Response({'error': str(exc)}, status=exc.status_code)
    return exception_handler(exc, context)
