"""Catalogue of the documents a doctor uploads for credentialing"""

from enum import Enum


class DocumentGroup(str, Enum):
    PERSONAL = "personal"
    PROFESSIONAL = "professional"
    SPECIALIST = "specialist"


DOCUMENT_CATALOGUE: dict[DocumentGroup, dict[str, str]] = {
    DocumentGroup.PERSONAL: {
        "rg": "RG (identity card)",
        "cpf": "CPF",
        "photo": "3x4 photo",
        "proof_of_residence": "Proof of residence",
    },
    DocumentGroup.PROFESSIONAL: {
        "crm": "CRM registration",
        "curriculum": "Curriculum vitae",
        "criminal_record": "Criminal record certificate",
        "ethical_record": "Ethical record certificate (CRM)",
        "debt_record": "Debt clearance certificate (CRM)",
        "graduation_certificate": "Medical degree certificate",
    },
    DocumentGroup.SPECIALIST: {
        "rqe": "RQE registration",
        "post_grad_certificate": "Residency or post-graduate certificate",
        "specialist_title": "Specialist title",
        "recommendation_letter": "Recommendation letter",
    },
}

REQUIRED_GROUPS = (DocumentGroup.PERSONAL, DocumentGroup.PROFESSIONAL)


def group_of(doc_type: str):
    for group, documents in DOCUMENT_CATALOGUE.items():
        if doc_type in documents:
            return group
    return None


def missing_required(uploaded) -> dict[str, list[str]]:
    """Required document types not yet uploaded, per group (empty groups omitted)"""
    missing = {}
    for group in REQUIRED_GROUPS:
        absent = [doc for doc in DOCUMENT_CATALOGUE[group] if doc not in uploaded]
        if absent:
            missing[group.value] = absent
    return missing
