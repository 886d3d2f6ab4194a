"""
Générateur PDF des documents remis aux locataires (lettre de relance, quittance).
"""
from io import BytesIO
import logging

from django.conf import settings
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import cm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from .periodes import libelle_periode
from .rappels import format_fcfa

logger = logging.getLogger(__name__)


class PDFGenerator:
    """
    Génération des PDFs d'un locataire.

    Mutualise l'en-tête, les cadres agence/locataire et la mise en page.
    """

    def __init__(self, locataire):
        self.locataire = locataire
        self.p = None
        config = getattr(settings, 'SOPRIMEC', {})
        self.agence = config.get('AGENCE_NOM', 'SOPRIMEC')
        self.telephone = config.get('AGENCE_TELEPHONE', '')
        self.ville = config.get('AGENCE_VILLE', 'Dakar')

    def _draw_header_standard(self, titre, sous_titre=""):
        """Dessine l'en-tête gris avec titre centré."""
        self.p.setFillColor(colors.HexColor("#E0E0E0"))
        self.p.rect(1*cm, 26*cm, 19*cm, 2.5*cm, fill=1, stroke=0)
        self.p.setFillColor(colors.black)

        self.p.setFont("Helvetica-Bold", 16)
        self.p.drawCentredString(10.5*cm, 27.2*cm, titre)

        if sous_titre:
            self.p.setFont("Helvetica", 11)
            self.p.drawCentredString(10.5*cm, 26.4*cm, sous_titre)

    def _draw_cadre(self, x, titre, lignes):
        self.p.setStrokeColor(colors.grey)
        self.p.rect(x, 21.5*cm, 9*cm, 3.5*cm)

        self.p.setFillColor(colors.HexColor("#F5F5F5"))
        self.p.rect(x, 24.2*cm, 9*cm, 0.8*cm, fill=1, stroke=1)
        self.p.setFillColor(colors.black)
        self.p.setFont("Helvetica-Bold", 11)
        self.p.drawCentredString(x + 4.5*cm, 24.4*cm, titre)

        self.p.setFont("Helvetica", 10)
        y_text = 23.5*cm
        for ligne in lignes:
            self.p.drawString(x + 0.5*cm, y_text, ligne)
            y_text -= 0.5*cm

    def _draw_agence_locataire_boxes(self):
        """Cadres AGENCE (gauche) et LOCATAIRE (droite)."""
        self._draw_cadre(1*cm, "AGENCE", [self.agence, self.ville, f"Tél. {self.telephone}"])

        bien = self.locataire.bien
        lignes = [self.locataire.nom, f"Tél. {self.locataire.telephone}"]
        if bien:
            lignes.append(" - ".join(x for x in (bien.immeuble, bien.appartement) if x) or bien.code)
            lignes.append(f"{bien.adresse}, {bien.ville}")
        self._draw_cadre(11*cm, "LOCATAIRE", lignes)

    def _draw_ligne(self, y, label, montant, bold=False):
        self.p.setFont("Helvetica-Bold" if bold else "Helvetica", 10)
        self.p.drawString(3*cm, y, label)
        self.p.drawRightString(18*cm, y, format_fcfa(montant, devise=True))
        return y - 0.6*cm

    def _draw_fait_a(self, y, aujourdhui):
        self.p.setFont("Helvetica", 9)
        self.p.drawString(2*cm, y, f"Fait à {self.ville}, le {aujourdhui.strftime('%d/%m/%Y')}")

    def _terminer(self, buffer):
        self.p.showPage()
        self.p.save()
        pdf_content = buffer.getvalue()
        buffer.close()
        return pdf_content

    def _check_and_new_page(self, y, titre, min_height=3*cm):
        """
        Passe à une nouvelle page si ``y`` descend sous ``min_height``.

        Returns:
            float: Position Y sur la page courante ou sur la nouvelle page
        """
        if y < min_height:
            self.p.showPage()
            self.p.setFont("Helvetica-Bold", 10)
            self.p.drawString(2*cm, 28*cm, f"{titre} (suite)")
            return 26.5*cm
        return y

    def generer_relance(self, rappel, aujourdhui):
        """
        Génère la lettre de relance d'un locataire en retard de paiement.

        La liste des mois se poursuit sur les pages suivantes si nécessaire.

        Args:
            rappel (dict): Rappel issu de ``rappels.generer_rappels``
            aujourdhui (date): Date portée sur la lettre

        Returns:
            bytes: Contenu du PDF généré
        """
        logger.info(f"Génération lettre de relance pour {self.locataire}")

        buffer = BytesIO()
        self.p = canvas.Canvas(buffer, pagesize=A4)
        titre = "LETTRE DE RELANCE"

        self._draw_header_standard(titre, rappel['label'])
        self._draw_agence_locataire_boxes()

        y = 19*cm
        self.p.setFont("Helvetica-Bold", 12)
        self.p.drawString(2*cm, y, "MOIS IMPAYÉS")
        y -= 1*cm

        for mois in rappel['mois'].split(', '):
            y = self._check_and_new_page(y, titre)
            self.p.setFont("Helvetica", 10)
            self.p.drawString(3*cm, y, mois)
            y -= 0.6*cm

        y = self._check_and_new_page(y - 0.3*cm, titre, min_height=4*cm)
        self.p.setStrokeColor(colors.black)
        self.p.line(3*cm, y, 18*cm, y)
        y -= 0.7*cm
        y = self._draw_ligne(y, "TOTAL DÛ", rappel['montant'], bold=True)

        lignes = simpleSplit(rappel['message'], "Helvetica-Oblique", 9, 17*cm)
        y = self._check_and_new_page(y - 1*cm, titre, min_height=len(lignes)*0.45*cm + 3*cm)
        text = self.p.beginText(2*cm, y)
        text.setFont("Helvetica-Oblique", 9)
        for ligne in lignes:
            text.textLine(ligne)
            y -= 0.45*cm
        self.p.drawText(text)

        self._draw_fait_a(y - 0.7*cm, aujourdhui)
        pdf_content = self._terminer(buffer)

        logger.info(f"Lettre de relance générée : {len(pdf_content)} bytes")
        return pdf_content

    def generer_quittance(self, paiement, aujourdhui):
        """
        Génère la quittance d'un paiement.

        Args:
            paiement: Instance de Paiement du locataire
            aujourdhui (date): Date portée sur la quittance

        Returns:
            bytes: Contenu du PDF généré
        """
        logger.info(f"Génération quittance {paiement.numero} pour {self.locataire}")

        buffer = BytesIO()
        self.p = canvas.Canvas(buffer, pagesize=A4)

        self._draw_header_standard("QUITTANCE DE LOYER", f"Période : {libelle_periode(paiement.periode)}")
        self._draw_agence_locataire_boxes()

        y = 19*cm
        self.p.setFont("Helvetica-Bold", 12)
        self.p.drawString(2*cm, y, f"DÉTAIL DU PAIEMENT N° {paiement.numero}")
        y -= 1*cm

        y = self._draw_ligne(y, "Loyer mensuel", self.locataire.loyer)
        y = self._draw_ligne(y, f"Versement ({paiement.mode})", paiement.montant)

        y -= 0.3*cm
        self.p.setStrokeColor(colors.black)
        self.p.line(3*cm, y, 18*cm, y)
        y -= 0.7*cm
        y = self._draw_ligne(y, "TOTAL PAYÉ", paiement.montant, bold=True)

        y -= 1*cm
        self.p.setFont("Helvetica-Oblique", 9)
        self.p.drawString(
            2*cm, y,
            f"L'agence {self.agence} certifie avoir reçu la somme indiquée ci-dessus au titre du loyer."
        )

        self._draw_fait_a(y - 0.7*cm, aujourdhui)
        pdf_content = self._terminer(buffer)

        logger.info(f"Quittance générée : {len(pdf_content)} bytes")
        return pdf_content
