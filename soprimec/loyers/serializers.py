from rest_framework import serializers

from .models import Bien, Locataire, Paiement, Charge, Entretien


class BienSerializer(serializers.ModelSerializer):
    class Meta:
        model = Bien
        fields = '__all__'
        read_only_fields = ['code', 'statut']


class LocataireSerializer(serializers.ModelSerializer):
    class Meta:
        model = Locataire
        fields = '__all__'
        read_only_fields = ['code', 'statut', 'contrat']
        extra_kwargs = {
            'bien': {'required': True, 'allow_null': False},
            'date_entree': {'required': True, 'allow_null': False},
        }


class PaiementSerializer(serializers.ModelSerializer):
    class Meta:
        model = Paiement
        fields = '__all__'


class NouveauPaiementSerializer(serializers.Serializer):
    """Versement à répartir sur les mois dus du locataire."""

    locataire = serializers.CharField(max_length=10)
    montant = serializers.IntegerField()
    date = serializers.DateField(required=False, allow_null=True)
    mode = serializers.ChoiceField(choices=Paiement.Mode.choices, default=Paiement.Mode.ESPECES)
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')


class ChargeSerializer(serializers.ModelSerializer):
    class Meta:
        model = Charge
        fields = '__all__'
        read_only_fields = ['numero']


class EntretienSerializer(serializers.ModelSerializer):
    class Meta:
        model = Entretien
        fields = '__all__'
        read_only_fields = ['numero']


class MoisImpayeSerializer(serializers.Serializer):
    periode = serializers.CharField()
    mois = serializers.CharField()
    reste = serializers.IntegerField()
    avance = serializers.IntegerField()


class DernierMoisPayeSerializer(serializers.Serializer):
    periode = serializers.CharField()
    mois = serializers.CharField()


class ArrieresSerializer(serializers.Serializer):
    mois_impayes = MoisImpayeSerializer(many=True)
    total = serializers.IntegerField()
    dernier_mois_paye = DernierMoisPayeSerializer(allow_null=True)


class LocataireArrieresSerializer(ArrieresSerializer):
    locataire = LocataireSerializer()


class RappelSerializer(serializers.Serializer):
    locataire = LocataireSerializer()
    type = serializers.CharField()
    badge = serializers.CharField()
    label = serializers.CharField()
    montant = serializers.IntegerField()
    mois = serializers.CharField()
    dernier_mois_paye = serializers.CharField(allow_null=True)
    message = serializers.CharField()


# Serializers d'import : les identifiants sont fournis par le fichier

class BienImportSerializer(serializers.ModelSerializer):
    class Meta:
        model = Bien
        fields = '__all__'


class LocataireImportSerializer(serializers.ModelSerializer):
    class Meta:
        model = Locataire
        fields = '__all__'


class PaiementImportSerializer(serializers.ModelSerializer):
    class Meta:
        model = Paiement
        fields = '__all__'


class ChargeImportSerializer(serializers.ModelSerializer):
    class Meta:
        model = Charge
        fields = '__all__'


class EntretienImportSerializer(serializers.ModelSerializer):
    class Meta:
        model = Entretien
        fields = '__all__'


IMPORT_SERIALIZERS = {
    'biens': BienImportSerializer,
    'locataires': LocataireImportSerializer,
    'paiements': PaiementImportSerializer,
    'charges': ChargeImportSerializer,
    'entretiens': EntretienImportSerializer,
}
