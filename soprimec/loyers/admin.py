from django.contrib import admin
from django.shortcuts import redirect
from django.utils import timezone
from django.utils.safestring import mark_safe

from . import services
from .calculators import ArrieresCalculator
from .forms import LocataireAdminForm, PaiementAdminForm
from .models import Bien, Locataire, Paiement, Charge, Entretien
from .periodes import jour_echeance_configure
from .rappels import format_fcfa


# Personnalisation de l'interface (complétée par Jazzmin dans settings.py)
admin.site.site_header = "SOPRIMEC - Gestion Locative"
admin.site.site_title = "Administration SOPRIMEC"
admin.site.index_title = "Tableau de Bord"


def _badge(texte, couleur):
    return mark_safe(
        f'<span style="background-color: {couleur}; color: white; padding: 3px 10px; '
        f'border-radius: 3px; font-weight: bold;">{texte}</span>'
    )


class LocataireInline(admin.TabularInline):
    model = Locataire
    extra = 0
    fields = ('code', 'nom', 'telephone', 'date_entree', 'loyer', 'statut')
    readonly_fields = fields
    can_delete = False
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False


class PaiementInline(admin.TabularInline):
    model = Paiement
    extra = 0
    fields = ('numero', 'periode', 'montant', 'date', 'mode', 'statut')
    readonly_fields = fields
    ordering = ['-periode']
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Bien)
class BienAdmin(admin.ModelAdmin):
    list_display = ('code', 'type', 'immeuble', 'appartement', 'ville', 'get_loyer', 'get_statut_badge', 'proprietaire')
    list_filter = ('statut', 'type', 'ville')
    search_fields = ('code', 'immeuble', 'appartement', 'adresse', 'proprietaire')
    readonly_fields = ('code', 'statut')
    inlines = [LocataireInline]

    def get_loyer(self, obj):
        return format_fcfa(obj.loyer, devise=True)
    get_loyer.short_description = 'Loyer'
    get_loyer.admin_order_field = 'loyer'

    def get_statut_badge(self, obj):
        if obj.statut == Bien.Statut.LOUE:
            return _badge("Loué", "#28a745")
        return _badge("Vacant", "#6c757d")
    get_statut_badge.short_description = 'Statut'
    get_statut_badge.admin_order_field = 'statut'

    def save_model(self, request, obj, form, change):
        if change:
            super().save_model(request, obj, form, change)
            return
        bien = services.creer_bien(**{f: form.cleaned_data[f] for f in form.cleaned_data})
        obj.pk = bien.pk

    def delete_model(self, request, obj):
        services.supprimer_bien(obj.code)


@admin.register(Locataire)
class LocataireAdmin(admin.ModelAdmin):
    form = LocataireAdminForm
    list_display = ('code', 'nom', 'telephone', 'bien', 'date_entree', 'get_loyer', 'get_arrieres', 'get_statut_badge')
    list_filter = ('statut', ('date_entree', admin.DateFieldListFilter))
    search_fields = ('code', 'nom', 'telephone', 'cni', 'bien__code', 'bien__immeuble')
    readonly_fields = ('code', 'statut')
    date_hierarchy = 'date_entree'
    inlines = [PaiementInline]
    actions = ['resilier', 'telecharger_relance']

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('bien').prefetch_related('paiements')

    def get_readonly_fields(self, request, obj=None):
        # Bien et date d'entrée fixés à la signature ; changer de bien passe par une résiliation
        if obj is not None:
            return self.readonly_fields + ('bien', 'date_entree')
        return self.readonly_fields

    def get_loyer(self, obj):
        return format_fcfa(obj.loyer, devise=True)
    get_loyer.short_description = 'Loyer'
    get_loyer.admin_order_field = 'loyer'

    def get_arrieres(self, obj):
        """Total des arriérés au jour, en rouge s'il est non nul."""
        if not obj.est_actif or not obj.date_entree:
            return "-"
        arrieres = ArrieresCalculator.calculer(
            obj, obj.paiements.all(), timezone.localdate(), jour_echeance_configure()
        )
        if arrieres['total'] > 0:
            return mark_safe(f'<span style="color: #dc3545; font-weight: bold;">{format_fcfa(arrieres["total"], devise=True)}</span>')
        return format_fcfa(0, devise=True)
    get_arrieres.short_description = 'Arriérés'

    def get_statut_badge(self, obj):
        if obj.est_actif:
            return _badge("✓ Actif", "#28a745")
        return _badge("✗ Inactif", "#dc3545")
    get_statut_badge.short_description = 'Statut'
    get_statut_badge.admin_order_field = 'statut'

    def save_model(self, request, obj, form, change):
        if change:
            super().save_model(request, obj, form, change)
            return
        locataire = services.signer_bail(**form.cleaned_data)
        obj.pk = locataire.pk

    def delete_model(self, request, obj):
        services.supprimer_locataire(obj.code)

    @admin.action(description="Résilier le bail (locataire inactif, bien vacant)")
    def resilier(self, request, queryset):
        for locataire in queryset:
            services.resilier_bail(locataire.code)
        self.message_user(request, f"{queryset.count()} bail(aux) résilié(s).")

    @admin.action(description="Télécharger la lettre de relance PDF")
    def telecharger_relance(self, request, queryset):
        if queryset.count() != 1:
            self.message_user(request, "Veuillez sélectionner un seul locataire.", level='warning')
            return
        return redirect('locataire-relance', pk=queryset.first().pk)


@admin.register(Paiement)
class PaiementAdmin(admin.ModelAdmin):
    form = PaiementAdminForm
    list_display = ('numero', 'locataire', 'periode', 'get_montant', 'date', 'mode', 'statut')
    list_filter = ('statut', 'mode', 'periode')
    search_fields = ('numero', 'locataire__code', 'locataire__nom', 'reference')
    ordering = ['-numero']
    fields = ('locataire', 'montant', 'date', 'mode', 'reference')

    def get_montant(self, obj):
        return format_fcfa(obj.montant, devise=True)
    get_montant.short_description = 'Montant'
    get_montant.admin_order_field = 'montant'

    def has_change_permission(self, request, obj=None):
        # Journal des paiements : ajout et suppression uniquement
        return obj is None and super().has_change_permission(request)

    def save_model(self, request, obj, form, change):
        """Le montant saisi est réparti sur les mois dus du locataire."""
        donnees = form.cleaned_data
        crees = services.enregistrer_paiement(
            donnees['locataire'].code,
            donnees['montant'],
            timezone.localdate(),
            date=donnees.get('date'),
            mode=donnees['mode'],
            reference=donnees.get('reference', ''),
        )
        obj.pk = crees[0].pk
        self.message_user(request, f"Paiement réparti sur : {', '.join(p.periode for p in crees)}")


@admin.register(Charge)
class ChargeAdmin(admin.ModelAdmin):
    list_display = ('numero', 'date', 'categorie', 'bien', 'fournisseur', 'get_montant', 'statut')
    list_filter = ('statut', 'categorie', ('date', admin.DateFieldListFilter))
    search_fields = ('numero', 'categorie', 'fournisseur', 'reference', 'bien__code')
    readonly_fields = ('numero',)
    date_hierarchy = 'date'

    def get_montant(self, obj):
        return format_fcfa(obj.montant, devise=True)
    get_montant.short_description = 'Montant'
    get_montant.admin_order_field = 'montant'

    def save_model(self, request, obj, form, change):
        if change:
            super().save_model(request, obj, form, change)
            return
        obj.pk = services.creer_charge(**form.cleaned_data).pk


@admin.register(Entretien)
class EntretienAdmin(admin.ModelAdmin):
    list_display = ('numero', 'bien', 'categorie', 'get_urgence_badge', 'date_demande', 'date_prevue', 'prestataire', 'statut')
    list_filter = ('statut', 'urgence', 'categorie')
    search_fields = ('numero', 'categorie', 'prestataire', 'description', 'bien__code')
    readonly_fields = ('numero',)

    COULEURS_URGENCE = {
        Entretien.Urgence.BASSE: '#6c757d',
        Entretien.Urgence.MOYENNE: '#17a2b8',
        Entretien.Urgence.HAUTE: '#fd7e14',
        Entretien.Urgence.URGENTE: '#dc3545',
    }

    def get_urgence_badge(self, obj):
        return _badge(obj.get_urgence_display(), self.COULEURS_URGENCE.get(obj.urgence, '#6c757d'))
    get_urgence_badge.short_description = 'Urgence'
    get_urgence_badge.admin_order_field = 'urgence'

    def save_model(self, request, obj, form, change):
        if change:
            super().save_model(request, obj, form, change)
            return
        obj.pk = services.creer_entretien(**form.cleaned_data).pk
