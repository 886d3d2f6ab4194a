from datetime import date
from unittest import mock

from django.test import TestCase, override_settings

from loyers import services
from loyers.exceptions import (
    BienOccupeError, LocataireIntrouvableError, MontantInvalideError, PreconditionError,
)
from loyers.models import Bien, Charge, Entretien, Locataire, Paiement
from loyers.serializers import IMPORT_SERIALIZERS


class NumerotationTests(TestCase):

    def test_premiers_numeros(self):
        self.assertEqual(services.prochain_numero(Bien), 'B001')
        self.assertEqual(services.prochain_numero(Locataire), 'L001')
        self.assertEqual(services.prochain_numero(Paiement), 'P0001')
        self.assertEqual(services.prochain_numero(Charge), 'C0001')
        self.assertEqual(services.prochain_numero(Entretien), 'INT001')

    def test_suffixe_le_plus_eleve_plus_un(self):
        Bien.objects.create(code='B003', type='Studio', adresse='Mermoz')
        Bien.objects.create(code='B010', type='Studio', adresse='Ouakam')
        Bien.objects.create(code='B7', type='Studio', adresse='Fann')
        self.assertEqual(services.prochain_numero(Bien), 'B011')


class BailTests(TestCase):

    def setUp(self):
        self.bien = services.creer_bien(type='Appartement', adresse='Sacré-Coeur 3', loyer=250000)

    def test_creer_bien(self):
        self.assertEqual(self.bien.code, 'B001')
        self.assertEqual(self.bien.statut, Bien.Statut.VACANT)

    def test_signer_bail(self):
        locataire = services.signer_bail(nom='Awa Diop', telephone='77 000 00 00',
                                         bien=self.bien, date_entree=date(2024, 1, 5))
        self.bien.refresh_from_db()
        self.assertEqual(locataire.code, 'L001')
        self.assertEqual(locataire.statut, Locataire.Statut.ACTIF)
        self.assertEqual(locataire.loyer, 250000)
        self.assertEqual(self.bien.statut, Bien.Statut.LOUE)

    def test_signer_bail_loyer_nul_explicite(self):
        locataire = services.signer_bail(nom='Awa Diop', telephone='77 000 00 00', bien=self.bien,
                                         date_entree=date(2024, 1, 5), loyer=0)
        self.assertEqual(locataire.loyer, 0)

    def test_signer_bail_loyer_negocie(self):
        locataire = services.signer_bail(nom='Awa Diop', telephone='77 000 00 00', bien=self.bien.code,
                                         date_entree=date(2024, 1, 5), loyer=230000)
        self.assertEqual(locataire.loyer, 230000)

    def test_signer_bail_sans_date_entree(self):
        with self.assertRaises(PreconditionError):
            services.signer_bail(nom='Awa Diop', telephone='77 000 00 00', bien=self.bien)
        self.assertFalse(Locataire.objects.exists())

    def test_bien_deja_loue(self):
        services.signer_bail(nom='Awa Diop', telephone='77', bien=self.bien, date_entree=date(2024, 1, 5))
        with self.assertRaises(BienOccupeError):
            services.signer_bail(nom='Moussa Fall', telephone='78', bien=self.bien, date_entree=date(2024, 2, 1))
        self.assertEqual(Locataire.objects.count(), 1)

    def test_resilier_bail(self):
        locataire = services.signer_bail(nom='Awa Diop', telephone='77', bien=self.bien,
                                         date_entree=date(2024, 1, 5), contrat='contrats/L001.pdf')
        services.resilier_bail(locataire.code)

        locataire.refresh_from_db()
        self.bien.refresh_from_db()
        self.assertEqual(locataire.statut, Locataire.Statut.INACTIF)
        self.assertIsNone(locataire.contrat)
        self.assertEqual(self.bien.statut, Bien.Statut.VACANT)

    def test_resilier_bail_inconnu(self):
        with self.assertRaises(LocataireIntrouvableError):
            services.resilier_bail('L999')

    def test_supprimer_bien_occupe(self):
        services.signer_bail(nom='Awa Diop', telephone='77', bien=self.bien, date_entree=date(2024, 1, 5))
        with self.assertRaises(BienOccupeError):
            services.supprimer_bien(self.bien.code)
        self.assertTrue(Bien.objects.filter(pk=self.bien.code).exists())

    def test_supprimer_bien_apres_resiliation(self):
        locataire = services.signer_bail(nom='Awa Diop', telephone='77', bien=self.bien, date_entree=date(2024, 1, 5))
        services.resilier_bail(locataire.code)
        self.assertTrue(services.supprimer_bien(self.bien.code))
        locataire.refresh_from_db()
        self.assertIsNone(locataire.bien)

    def test_supprimer_locataire_libere_le_bien(self):
        locataire = services.signer_bail(nom='Awa Diop', telephone='77', bien=self.bien, date_entree=date(2024, 1, 5))
        self.assertTrue(services.supprimer_locataire(locataire.code))
        self.bien.refresh_from_db()
        self.assertEqual(self.bien.statut, Bien.Statut.VACANT)
        self.assertFalse(services.supprimer_locataire(locataire.code))


class EnregistrerPaiementTests(TestCase):

    def setUp(self):
        bien = services.creer_bien(type='Appartement', adresse='Sacré-Coeur 3', loyer=250000)
        self.locataire = services.signer_bail(nom='Awa Diop', telephone='77', bien=bien, date_entree=date(2024, 1, 5))
        Paiement.objects.create(numero='P0007', locataire=self.locataire, periode='2024-01', montant=150000)

    def test_repartition_sur_plusieurs_mois(self):
        crees = services.enregistrer_paiement(self.locataire.code, 150000, date(2024, 2, 15),
                                              mode=Paiement.Mode.MOBILE, reference='OM-123')

        self.assertEqual([(p.numero, p.periode, p.montant) for p in crees], [
            ('P0008', '2024-01', 100000),
            ('P0009', '2024-02', 50000),
        ])
        p = Paiement.objects.get(pk='P0009')
        self.assertEqual(p.statut, Paiement.Statut.PAYE)
        self.assertEqual(p.mode, Paiement.Mode.MOBILE)
        self.assertEqual(p.reference, 'OM-123')
        self.assertEqual(p.date, date(2024, 2, 15))
        # Le paiement existant n'est pas modifié
        self.assertEqual(Paiement.objects.get(pk='P0007').montant, 150000)

    def test_date_du_versement(self):
        crees = services.enregistrer_paiement(self.locataire.code, 100000, date(2024, 2, 15), date=date(2024, 2, 14))
        self.assertEqual(crees[0].date, date(2024, 2, 14))

    @override_settings(SOPRIMEC={'JOUR_ECHEANCE': 5})
    def test_jour_echeance_configure(self):
        # Le 7 mars, mars est exigible dès le 5
        Paiement.objects.create(numero='P0008', locataire=self.locataire, periode='2024-02', montant=250000)
        crees = services.enregistrer_paiement(self.locataire.code, 500000, date(2024, 3, 7))
        self.assertEqual([(p.periode, p.montant) for p in crees], [
            ('2024-01', 100000),
            ('2024-03', 250000),
            ('2024-04', 150000),
        ])

    def test_montant_invalide(self):
        with self.assertRaises(MontantInvalideError):
            services.enregistrer_paiement(self.locataire.code, 0, date(2024, 2, 15))
        self.assertEqual(Paiement.objects.count(), 1)

    def test_locataire_inconnu(self):
        with self.assertRaises(LocataireIntrouvableError):
            services.enregistrer_paiement('L999', 1000, date(2024, 2, 15))

    def test_locataire_inactif(self):
        services.resilier_bail(self.locataire.code)
        with self.assertRaises(PreconditionError):
            services.enregistrer_paiement(self.locataire.code, 1000, date(2024, 2, 15))

    def test_echec_d_ecriture_annule_tout(self):
        with mock.patch.object(Paiement.objects, 'bulk_create', side_effect=RuntimeError("disque plein")):
            with self.assertRaises(RuntimeError):
                services.enregistrer_paiement(self.locataire.code, 400000, date(2024, 2, 15))
        self.assertEqual(Paiement.objects.count(), 1)

    def test_supprimer_paiement(self):
        self.assertTrue(services.supprimer_paiement('P0007'))
        self.assertFalse(services.supprimer_paiement('P0007'))


class ChargesEntretiensTests(TestCase):

    def test_numerotation(self):
        charge = services.creer_charge(categorie='Eau/SDE', montant=15000, date=date(2024, 2, 3))
        entretien = services.creer_entretien(categorie='Plomberie', urgence=Entretien.Urgence.HAUTE)
        self.assertEqual(charge.numero, 'C0001')
        self.assertEqual(entretien.numero, 'INT001')


class ImportTests(TestCase):

    def test_importer_remplace_les_tables(self):
        Bien.objects.create(code='B050', type='Villa', adresse='Almadies')
        donnees = {
            'biens': [{'code': 'B001', 'type': 'Studio', 'adresse': 'Mermoz', 'loyer': 150000, 'statut': 'Loué'}],
            'locataires': [{'code': 'L001', 'nom': 'Awa Diop', 'telephone': '77', 'bien': 'B001',
                            'date_entree': '2024-01-05', 'loyer': 150000}],
            'paiements': [{'numero': 'P0001', 'locataire': 'L001', 'periode': '2024-01', 'montant': 150000}],
        }

        compte = services.importer_donnees(donnees, IMPORT_SERIALIZERS)

        self.assertEqual(compte, {'biens': 1, 'locataires': 1, 'paiements': 1})
        self.assertEqual(list(Bien.objects.values_list('code', flat=True)), ['B001'])
        self.assertEqual(Paiement.objects.get().locataire_id, 'L001')

    def test_import_des_seuls_biens_conserve_les_liens(self):
        bien = services.creer_bien(type='Studio', adresse='Mermoz', loyer=150000)
        locataire = services.signer_bail(nom='Awa Diop', telephone='77', bien=bien, date_entree=date(2024, 1, 5))
        charge = services.creer_charge(categorie='Eau/SDE', montant=15000, date=date(2024, 2, 3), bien=bien)
        entretien = services.creer_entretien(categorie='Plomberie', bien=bien)

        services.importer_donnees(
            {'biens': [{'code': 'B001', 'type': 'Studio', 'adresse': 'Mermoz', 'loyer': 160000, 'statut': 'Loué'}]},
            IMPORT_SERIALIZERS,
        )

        locataire.refresh_from_db()
        charge.refresh_from_db()
        entretien.refresh_from_db()
        self.assertEqual(locataire.bien_id, 'B001')
        self.assertEqual(charge.bien_id, 'B001')
        self.assertEqual(entretien.bien_id, 'B001')
        self.assertEqual(Bien.objects.get().loyer, 160000)

    def test_import_sans_le_bien_d_un_locataire(self):
        bien = services.creer_bien(type='Studio', adresse='Mermoz', loyer=150000)
        locataire = services.signer_bail(nom='Awa Diop', telephone='77', bien=bien, date_entree=date(2024, 1, 5))

        with self.assertLogs('loyers.services', 'WARNING') as logs:
            services.importer_donnees(
                {'biens': [{'code': 'B002', 'type': 'Villa', 'adresse': 'Almadies', 'loyer': 500000}]},
                IMPORT_SERIALIZERS,
            )

        locataire.refresh_from_db()
        self.assertIsNone(locataire.bien_id)
        self.assertIn('B001', logs.output[0])
