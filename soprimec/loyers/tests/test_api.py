from datetime import date
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from rest_framework.test import APIClient

from loyers import services
from loyers.models import Bien, Locataire, Paiement

AUJOURDHUI = date(2024, 2, 15)


class ApiTestCase(TestCase):

    def setUp(self):
        self.client = APIClient()
        user = get_user_model().objects.create_user(username='gestion', password='soprimec')
        self.client.force_authenticate(user=user)

        patcher = mock.patch('loyers.views._aujourdhui', return_value=AUJOURDHUI)
        patcher.start()
        self.addCleanup(patcher.stop)

        self.bien = services.creer_bien(type='Appartement', immeuble='Résidence Fann', appartement='A2',
                                        adresse='Fann Hock', loyer=250000)
        self.locataire = services.signer_bail(nom='Awa Diop', telephone='77 000 00 00',
                                              bien=self.bien, date_entree=date(2024, 1, 5))
        Paiement.objects.create(numero='P0001', locataire=self.locataire, periode='2024-01', montant=150000)


class AuthentificationTests(TestCase):

    def test_acces_refuse_sans_authentification(self):
        response = APIClient().get('/api/arrieres/')
        self.assertIn(response.status_code, (401, 403))


class RessourcesApiTests(ApiTestCase):

    def test_creer_bien(self):
        response = self.client.post('/api/biens/', {'type': 'Studio', 'adresse': 'Mermoz', 'loyer': 150000}, format='json')
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['code'], 'B002')
        self.assertEqual(response.data['statut'], 'Vacant')

    def test_signer_bail(self):
        bien = services.creer_bien(type='Studio', adresse='Mermoz', loyer=150000)
        response = self.client.post('/api/locataires/', {
            'nom': 'Moussa Fall', 'telephone': '78 000 00 00', 'bien': bien.code, 'date_entree': '2024-02-01',
        }, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['code'], 'L002')
        self.assertEqual(response.data['loyer'], 150000)
        bien.refresh_from_db()
        self.assertEqual(bien.statut, Bien.Statut.LOUE)

    def test_signer_bail_bien_occupe(self):
        response = self.client.post('/api/locataires/', {
            'nom': 'Moussa Fall', 'telephone': '78', 'bien': self.bien.code, 'date_entree': '2024-02-01',
        }, format='json')
        self.assertEqual(response.status_code, 400)
        self.assertIn('error', response.data)
        self.assertEqual(Locataire.objects.count(), 1)

    def test_supprimer_bien_occupe(self):
        response = self.client.delete(f'/api/biens/{self.bien.code}/')
        self.assertEqual(response.status_code, 400)
        self.assertTrue(Bien.objects.filter(pk=self.bien.code).exists())

    def test_resilier(self):
        response = self.client.post(f'/api/locataires/{self.locataire.code}/resilier/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['statut'], 'Inactif')
        self.bien.refresh_from_db()
        self.assertEqual(self.bien.statut, Bien.Statut.VACANT)

    def test_modification_par_put_refusee(self):
        response = self.client.put(f'/api/biens/{self.bien.code}/', {'type': 'Villa', 'adresse': 'X'}, format='json')
        self.assertEqual(response.status_code, 405)


class PaiementsApiTests(ApiTestCase):

    def test_enregistrer_paiement(self):
        response = self.client.post('/api/paiements/', {
            'locataire': self.locataire.code, 'montant': 150000, 'mode': 'Mobile Money',
        }, format='json')

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(
            [(p['periode'], p['montant']) for p in response.data['created']],
            [('2024-01', 100000), ('2024-02', 50000)],
        )

    def test_montant_invalide(self):
        for montant in [0, -100]:
            with self.subTest(montant=montant):
                response = self.client.post('/api/paiements/', {'locataire': self.locataire.code, 'montant': montant},
                                            format='json')
                self.assertEqual(response.status_code, 400)
                self.assertIn('error', response.data)
        self.assertEqual(Paiement.objects.count(), 1)

    def test_montant_non_numerique(self):
        response = self.client.post('/api/paiements/', {'locataire': self.locataire.code, 'montant': 'abc'},
                                    format='json')
        self.assertEqual(response.status_code, 400)

    def test_locataire_inconnu(self):
        response = self.client.post('/api/paiements/', {'locataire': 'L999', 'montant': 1000}, format='json')
        self.assertEqual(response.status_code, 404)

    def test_filtre_par_locataire(self):
        response = self.client.get('/api/paiements/', {'locataire': self.locataire.code})
        self.assertEqual(response.status_code, 200)
        self.assertEqual([p['numero'] for p in response.data], ['P0001'])

    def test_quittance_pdf(self):
        response = self.client.get('/api/paiements/P0001/quittance/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertTrue(response.content.startswith(b'%PDF'))

    def test_supprimer_paiement(self):
        response = self.client.delete('/api/paiements/P0001/')
        self.assertEqual(response.status_code, 204)
        self.assertFalse(Paiement.objects.exists())


class ArrieresApiTests(ApiTestCase):

    def test_arrieres_locataire(self):
        response = self.client.get(f'/api/locataires/{self.locataire.code}/arrieres/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['total'], 350000)
        self.assertEqual(response.data['mois_impayes'][0], {
            'periode': '2024-01', 'mois': 'Janvier 2024', 'reste': 100000, 'avance': 150000,
        })
        self.assertIsNone(response.data['dernier_mois_paye'])

        response = self.client.get(f'/api/arrieres/{self.locataire.code}/')
        self.assertEqual(response.data['total'], 350000)

    def test_arrieres_locataire_inconnu(self):
        response = self.client.get('/api/arrieres/L999/')
        self.assertEqual(response.status_code, 404)
        self.assertIn('error', response.data)

    def test_liste_arrieres(self):
        response = self.client.get('/api/arrieres/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['locataire']['code'], self.locataire.code)

    def test_rappels(self):
        response = self.client.get('/api/rappels/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data[0]['label'], '2 mois impayé(s)')
        self.assertEqual(response.data[0]['montant'], 350000)

    def test_relance_pdf(self):
        response = self.client.get(f'/api/locataires/{self.locataire.code}/relance/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertIn('Relance_AWA_DIOP_2024-02-15.pdf', response['Content-Disposition'])

    def test_relance_sans_impaye(self):
        services.enregistrer_paiement(self.locataire.code, 350000, AUJOURDHUI)
        response = self.client.get(f'/api/locataires/{self.locataire.code}/relance/')
        self.assertEqual(response.status_code, 404)


class ReportingApiTests(ApiTestCase):

    def test_dashboard(self):
        response = self.client.get('/api/dashboard/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['total_biens'], 1)
        self.assertEqual(response.data['taux'], 100)
        self.assertEqual(response.data['total_arrieres'], 350000)
        self.assertEqual(response.data['rappels_count'], 1)

    def test_rapport_periode(self):
        response = self.client.get('/api/rapports/2024-01/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['loyers_encaisses'], 150000)
        self.assertEqual(response.data['impayes'], 100000)

    def test_rapport_periode_invalide(self):
        response = self.client.get('/api/rapports/2024-13/')
        self.assertEqual(response.status_code, 400)


class ExportImportApiTests(ApiTestCase):

    def test_export_json_puis_import(self):
        export = self.client.get('/api/export/json/')
        self.assertEqual(export.status_code, 200)
        self.assertEqual(len(export.data['paiements']), 1)

        Paiement.objects.all().delete()
        response = self.client.post('/api/import/json/', export.data, format='json')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data['importes']['paiements'], 1)
        self.assertEqual(Paiement.objects.get().montant, 150000)

    def test_export_csv(self):
        response = self.client.get('/api/export/csv/')
        self.assertEqual(response.status_code, 200)
        lignes = response.content.decode('utf-8').strip().splitlines()
        self.assertEqual(len(lignes), 2)
        self.assertIn('350000', lignes[1])
