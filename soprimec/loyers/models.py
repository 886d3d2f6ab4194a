from django.core.validators import RegexValidator
from django.db import models

from .periodes import PERIODE_RE


class Bien(models.Model):
    class Statut(models.TextChoices):
        VACANT = 'Vacant', 'Vacant'
        LOUE = 'Loué', 'Loué'

    code = models.CharField(max_length=10, primary_key=True)
    type = models.CharField(max_length=50, verbose_name="Type de bien", help_text="Ex: Appartement, Villa, Studio")
    immeuble = models.CharField(max_length=200, blank=True, default='')
    appartement = models.CharField(max_length=100, blank=True, default='')
    adresse = models.CharField(max_length=255)
    ville = models.CharField(max_length=100, default='Dakar')
    surface = models.CharField(max_length=20, blank=True, default='', verbose_name="Surface (m²)")
    chambres = models.CharField(max_length=10, blank=True, default='')
    loyer = models.PositiveBigIntegerField(default=0, verbose_name="Loyer mensuel (FCFA)")
    charges = models.PositiveBigIntegerField(default=0, verbose_name="Charges mensuelles (FCFA)")
    statut = models.CharField(max_length=10, choices=Statut.choices, default=Statut.VACANT)
    proprietaire = models.CharField(max_length=200, blank=True, default='', verbose_name="Propriétaire")
    notes = models.TextField(blank=True, default='')

    def __str__(self):
        libelle = " - ".join(x for x in (self.immeuble, self.appartement) if x)
        return f"{self.code} {libelle or self.adresse}"

    class Meta:
        verbose_name = "Bien"
        verbose_name_plural = "Biens"
        ordering = ['code']


class Locataire(models.Model):
    class Statut(models.TextChoices):
        ACTIF = 'Actif', 'Actif'
        INACTIF = 'Inactif', 'Inactif'

    code = models.CharField(max_length=10, primary_key=True)
    nom = models.CharField(max_length=200)
    telephone = models.CharField(max_length=30, verbose_name="Téléphone")
    email = models.EmailField(blank=True, default='')
    cni = models.CharField(max_length=30, blank=True, default='', verbose_name="N° CNI")
    profession = models.CharField(max_length=100, blank=True, default='')
    bien = models.ForeignKey(Bien, on_delete=models.SET_NULL, null=True, blank=True, related_name='locataires')
    date_entree = models.DateField(null=True, blank=True, verbose_name="Date d'entrée")
    duree_bail = models.PositiveSmallIntegerField(default=12, verbose_name="Durée du bail (mois)")
    # Copié depuis le bien à la signature, peut ensuite diverger du loyer du bien
    loyer = models.PositiveBigIntegerField(default=0, verbose_name="Loyer mensuel (FCFA)")
    caution = models.PositiveBigIntegerField(default=0, verbose_name="Caution (FCFA)")
    statut = models.CharField(max_length=10, choices=Statut.choices, default=Statut.ACTIF)
    contrat = models.CharField(max_length=255, null=True, blank=True, default=None, verbose_name="Contrat (document)")

    @property
    def est_actif(self):
        return self.statut == self.Statut.ACTIF

    def __str__(self):
        return f"{self.code} {self.nom}"

    class Meta:
        verbose_name = "Locataire"
        verbose_name_plural = "Locataires"
        ordering = ['code']


class Paiement(models.Model):
    """Ligne du journal des paiements. Jamais modifiée après création."""

    class Statut(models.TextChoices):
        PAYE = 'Payé', 'Payé'
        EN_ATTENTE = 'En attente', 'En attente'
        ANNULE = 'Annulé', 'Annulé'

    class Mode(models.TextChoices):
        ESPECES = 'Espèces', 'Espèces'
        VIREMENT = 'Virement', 'Virement'
        CHEQUE = 'Chèque', 'Chèque'
        MOBILE = 'Mobile Money', 'Mobile Money'

    numero = models.CharField(max_length=12, primary_key=True)
    locataire = models.ForeignKey(Locataire, on_delete=models.CASCADE, related_name='paiements')
    periode = models.CharField(
        max_length=7,
        validators=[RegexValidator(PERIODE_RE, "Période attendue au format AAAA-MM.")],
        help_text="Mois facturé, format AAAA-MM",
    )
    montant = models.PositiveBigIntegerField(default=0, verbose_name="Montant (FCFA)")
    date = models.DateField(null=True, blank=True, verbose_name="Date de paiement")
    mode = models.CharField(max_length=20, choices=Mode.choices, default=Mode.ESPECES)
    reference = models.CharField(max_length=100, blank=True, default='')
    statut = models.CharField(max_length=12, choices=Statut.choices, default=Statut.PAYE)

    def __str__(self):
        return f"{self.numero} - {self.locataire_id} {self.periode} ({self.montant} FCFA)"

    class Meta:
        verbose_name = "Paiement"
        verbose_name_plural = "Paiements"
        ordering = ['periode', 'numero']
        indexes = [models.Index(fields=['locataire', 'periode'], name='loyers_paiement_loc_per_idx')]


class Charge(models.Model):
    class Statut(models.TextChoices):
        PAYE = 'Payé', 'Payé'
        EN_ATTENTE = 'En attente', 'En attente'

    numero = models.CharField(max_length=12, primary_key=True)
    bien = models.ForeignKey(Bien, on_delete=models.SET_NULL, null=True, blank=True, related_name='charges_bien')
    categorie = models.CharField(max_length=100, verbose_name="Catégorie", help_text="Ex: Électricité/SENELEC, Eau/SDE")
    date = models.DateField(null=True, blank=True)
    montant = models.PositiveBigIntegerField(default=0, verbose_name="Montant (FCFA)")
    fournisseur = models.CharField(max_length=200, blank=True, default='')
    reference = models.CharField(max_length=100, blank=True, default='')
    description = models.TextField(blank=True, default='')
    statut = models.CharField(max_length=12, choices=Statut.choices, default=Statut.PAYE)

    def __str__(self):
        return f"{self.numero} - {self.categorie} ({self.montant} FCFA)"

    class Meta:
        verbose_name = "Charge"
        verbose_name_plural = "Charges"
        ordering = ['-date', 'numero']


class Entretien(models.Model):
    class Urgence(models.TextChoices):
        BASSE = 'Basse', 'Basse'
        MOYENNE = 'Moyenne', 'Moyenne'
        HAUTE = 'Haute', 'Haute'
        URGENTE = 'Urgente', 'Urgente'

    class Statut(models.TextChoices):
        PLANIFIE = 'Planifié', 'Planifié'
        EN_COURS = 'En cours', 'En cours'
        TERMINE = 'Terminé', 'Terminé'
        ANNULE = 'Annulé', 'Annulé'

    numero = models.CharField(max_length=12, primary_key=True)
    bien = models.ForeignKey(Bien, on_delete=models.SET_NULL, null=True, blank=True, related_name='entretiens')
    categorie = models.CharField(max_length=100, verbose_name="Catégorie", help_text="Ex: Plomberie, Électricité, Peinture")
    urgence = models.CharField(max_length=10, choices=Urgence.choices, default=Urgence.BASSE)
    date_demande = models.DateField(null=True, blank=True, verbose_name="Date de la demande")
    date_prevue = models.DateField(null=True, blank=True, verbose_name="Date prévue")
    prestataire = models.CharField(max_length=200, blank=True, default='')
    cout = models.PositiveBigIntegerField(default=0, verbose_name="Coût (FCFA)")
    description = models.TextField(blank=True, default='')
    statut = models.CharField(max_length=10, choices=Statut.choices, default=Statut.PLANIFIE)

    def __str__(self):
        return f"{self.numero} - {self.categorie} ({self.get_urgence_display()})"

    class Meta:
        verbose_name = "Entretien"
        verbose_name_plural = "Entretiens"
        ordering = ['-date_demande', 'numero']
