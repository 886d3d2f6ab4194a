from django import forms

from .models import Locataire, Paiement


class LocataireAdminForm(forms.ModelForm):
    """Signature de bail depuis l'admin : bien et date d'entrée obligatoires, bien libre."""

    class Meta:
        model = Locataire
        exclude = ['code', 'statut']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not self.instance.pk:
            self.fields['bien'].required = True
            self.fields['date_entree'].required = True
            self.fields['loyer'].required = False
            self.fields['loyer'].help_text = "Laisser vide pour reprendre le loyer du bien."

    def clean_loyer(self):
        loyer = self.cleaned_data.get('loyer')
        if loyer is None:
            bien = self.cleaned_data.get('bien')
            loyer = bien.loyer if bien else 0
        return loyer

    def clean(self):
        cleaned_data = super().clean()
        bien = cleaned_data.get('bien')
        if bien and not self.instance.pk:
            occupe = Locataire.objects.filter(bien=bien, statut=Locataire.Statut.ACTIF).exists()
            if occupe:
                self.add_error('bien', "Ce bien est déjà loué à un locataire actif.")
        return cleaned_data


class PaiementAdminForm(forms.ModelForm):
    """Saisie d'un versement, réparti ensuite sur les mois dus."""

    class Meta:
        model = Paiement
        fields = ['locataire', 'montant', 'date', 'mode', 'reference']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['locataire'].queryset = Locataire.objects.filter(statut=Locataire.Statut.ACTIF)
        self.fields['montant'].widget.attrs['min'] = 1

    def clean_montant(self):
        montant = self.cleaned_data['montant']
        if montant is None or montant <= 0:
            raise forms.ValidationError("Le montant doit être strictement positif.")
        return montant

    def clean_locataire(self):
        locataire = self.cleaned_data['locataire']
        if not locataire.date_entree:
            raise forms.ValidationError("Ce locataire n'a pas de date d'entrée.")
        return locataire
