import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Bien',
            fields=[
                ('code', models.CharField(max_length=10, primary_key=True, serialize=False)),
                ('type', models.CharField(help_text='Ex: Appartement, Villa, Studio', max_length=50, verbose_name='Type de bien')),
                ('immeuble', models.CharField(blank=True, default='', max_length=200)),
                ('appartement', models.CharField(blank=True, default='', max_length=100)),
                ('adresse', models.CharField(max_length=255)),
                ('ville', models.CharField(default='Dakar', max_length=100)),
                ('surface', models.CharField(blank=True, default='', max_length=20, verbose_name='Surface (m²)')),
                ('chambres', models.CharField(blank=True, default='', max_length=10)),
                ('loyer', models.PositiveBigIntegerField(default=0, verbose_name='Loyer mensuel (FCFA)')),
                ('charges', models.PositiveBigIntegerField(default=0, verbose_name='Charges mensuelles (FCFA)')),
                ('statut', models.CharField(choices=[('Vacant', 'Vacant'), ('Loué', 'Loué')], default='Vacant', max_length=10)),
                ('proprietaire', models.CharField(blank=True, default='', max_length=200, verbose_name='Propriétaire')),
                ('notes', models.TextField(blank=True, default='')),
            ],
            options={
                'verbose_name': 'Bien',
                'verbose_name_plural': 'Biens',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='Locataire',
            fields=[
                ('code', models.CharField(max_length=10, primary_key=True, serialize=False)),
                ('nom', models.CharField(max_length=200)),
                ('telephone', models.CharField(max_length=30, verbose_name='Téléphone')),
                ('email', models.EmailField(blank=True, default='', max_length=254)),
                ('cni', models.CharField(blank=True, default='', max_length=30, verbose_name='N° CNI')),
                ('profession', models.CharField(blank=True, default='', max_length=100)),
                ('date_entree', models.DateField(blank=True, null=True, verbose_name="Date d'entrée")),
                ('duree_bail', models.PositiveSmallIntegerField(default=12, verbose_name='Durée du bail (mois)')),
                ('loyer', models.PositiveBigIntegerField(default=0, verbose_name='Loyer mensuel (FCFA)')),
                ('caution', models.PositiveBigIntegerField(default=0, verbose_name='Caution (FCFA)')),
                ('statut', models.CharField(choices=[('Actif', 'Actif'), ('Inactif', 'Inactif')], default='Actif', max_length=10)),
                ('contrat', models.CharField(blank=True, default=None, max_length=255, null=True, verbose_name='Contrat (document)')),
                ('bien', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='locataires', to='loyers.bien')),
            ],
            options={
                'verbose_name': 'Locataire',
                'verbose_name_plural': 'Locataires',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='Paiement',
            fields=[
                ('numero', models.CharField(max_length=12, primary_key=True, serialize=False)),
                ('periode', models.CharField(help_text='Mois facturé, format AAAA-MM', max_length=7, validators=[django.core.validators.RegexValidator('^\\d{4}-(0[1-9]|1[0-2])$', 'Période attendue au format AAAA-MM.')])),
                ('montant', models.PositiveBigIntegerField(default=0, verbose_name='Montant (FCFA)')),
                ('date', models.DateField(blank=True, null=True, verbose_name='Date de paiement')),
                ('mode', models.CharField(choices=[('Espèces', 'Espèces'), ('Virement', 'Virement'), ('Chèque', 'Chèque'), ('Mobile Money', 'Mobile Money')], default='Espèces', max_length=20)),
                ('reference', models.CharField(blank=True, default='', max_length=100)),
                ('statut', models.CharField(choices=[('Payé', 'Payé'), ('En attente', 'En attente'), ('Annulé', 'Annulé')], default='Payé', max_length=12)),
                ('locataire', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='paiements', to='loyers.locataire')),
            ],
            options={
                'verbose_name': 'Paiement',
                'verbose_name_plural': 'Paiements',
                'ordering': ['periode', 'numero'],
                'indexes': [models.Index(fields=['locataire', 'periode'], name='loyers_paiement_loc_per_idx')],
            },
        ),
        migrations.CreateModel(
            name='Charge',
            fields=[
                ('numero', models.CharField(max_length=12, primary_key=True, serialize=False)),
                ('categorie', models.CharField(help_text='Ex: Électricité/SENELEC, Eau/SDE', max_length=100, verbose_name='Catégorie')),
                ('date', models.DateField(blank=True, null=True)),
                ('montant', models.PositiveBigIntegerField(default=0, verbose_name='Montant (FCFA)')),
                ('fournisseur', models.CharField(blank=True, default='', max_length=200)),
                ('reference', models.CharField(blank=True, default='', max_length=100)),
                ('description', models.TextField(blank=True, default='')),
                ('statut', models.CharField(choices=[('Payé', 'Payé'), ('En attente', 'En attente')], default='Payé', max_length=12)),
                ('bien', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='charges_bien', to='loyers.bien')),
            ],
            options={
                'verbose_name': 'Charge',
                'verbose_name_plural': 'Charges',
                'ordering': ['-date', 'numero'],
            },
        ),
        migrations.CreateModel(
            name='Entretien',
            fields=[
                ('numero', models.CharField(max_length=12, primary_key=True, serialize=False)),
                ('categorie', models.CharField(help_text='Ex: Plomberie, Électricité, Peinture', max_length=100, verbose_name='Catégorie')),
                ('urgence', models.CharField(choices=[('Basse', 'Basse'), ('Moyenne', 'Moyenne'), ('Haute', 'Haute'), ('Urgente', 'Urgente')], default='Basse', max_length=10)),
                ('date_demande', models.DateField(blank=True, null=True, verbose_name='Date de la demande')),
                ('date_prevue', models.DateField(blank=True, null=True, verbose_name='Date prévue')),
                ('prestataire', models.CharField(blank=True, default='', max_length=200)),
                ('cout', models.PositiveBigIntegerField(default=0, verbose_name='Coût (FCFA)')),
                ('description', models.TextField(blank=True, default='')),
                ('statut', models.CharField(choices=[('Planifié', 'Planifié'), ('En cours', 'En cours'), ('Terminé', 'Terminé'), ('Annulé', 'Annulé')], default='Planifié', max_length=10)),
                ('bien', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='entretiens', to='loyers.bien')),
            ],
            options={
                'verbose_name': 'Entretien',
                'verbose_name_plural': 'Entretiens',
                'ordering': ['-date_demande', 'numero'],
            },
        ),
    ]
