"""Symptom classification and persistence.

Classification sits behind :class:`SymptomClassifier` so the fixed-rule
placeholder can be swapped for a model-backed classifier without touching
:meth:`SymptomAnalyzer.record`.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, Tuple
import logging
import os

from auth import SessionContext
from exceptions import ValidationError
from models import Severity, SymptomCheck
from store import Store
from validators.business_rules import get_business_rules

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    condition: str
    severity: str
    recommendations: Tuple[str, ...] = ()
    confidence: int = 0

    def __post_init__(self):
        # shared instances must not be editable through their recommendation list
        object.__setattr__(self, "recommendations", tuple(self.recommendations))


class SymptomClassifier(Protocol):
    def classify(self, symptoms: List[str]) -> Classification:
        ...


def normalize_symptoms(symptoms: Optional[Iterable[str]]) -> List[str]:
    """Trimmed, non-blank, first occurrence wins. Raises when nothing is left."""
    cleaned: List[str] = []
    for symptom in symptoms or []:
        if not isinstance(symptom, str):
            raise ValidationError("Symptoms must be text")
        symptom = symptom.strip()
        if symptom and symptom not in cleaned:
            cleaned.append(symptom)
    if not cleaned:
        raise ValidationError("Please add at least one symptom")
    return cleaned


class FixedRuleClassifier:
    """Placeholder policy: the same outcome for every symptom set"""

    RESULT = Classification(
        condition="Common Cold",
        severity=Severity.LOW.value,
        recommendations=(
            "Get plenty of rest",
            "Stay hydrated",
            "Consider over-the-counter pain relievers",
            "Consult a doctor if symptoms worsen",
        ),
        confidence=85,
    )

    def classify(self, symptoms: List[str]) -> Classification:
        return self.RESULT


class KeywordRuleClassifier:
    """Keyword lookup against a small symptom table; the most severe match wins"""

    SYMPTOM_RULES = {
        "chest pain": ("Possible cardiac issue", Severity.HIGH, "Seek emergency care immediately"),
        "shortness of breath": ("Respiratory distress", Severity.HIGH, "See a doctor today"),
        "severe headache": ("Acute headache", Severity.HIGH, "See a doctor today"),
        "fever": ("Viral infection", Severity.MEDIUM, "Monitor your temperature regularly"),
        "dizziness": ("Vertigo", Severity.MEDIUM, "Avoid driving until it settles"),
        "abdominal pain": ("Gastritis", Severity.MEDIUM, "Eat small, bland meals"),
        "cough": ("Upper respiratory infection", Severity.LOW, "Drink warm fluids"),
        "sore throat": ("Pharyngitis", Severity.LOW, "Gargle with warm salt water"),
        "fatigue": ("General fatigue", Severity.LOW, "Aim for 7-9 hours of sleep"),
    }
    ORDER = [Severity.LOW, Severity.MEDIUM, Severity.HIGH]

    def classify(self, symptoms: List[str]) -> Classification:
        condition, severity = "Common Cold", Severity.LOW
        matched = False
        advice: List[str] = []
        for symptom in symptoms:
            lowered = symptom.lower()
            for keyword, (label, level, tip) in self.SYMPTOM_RULES.items():
                if keyword in lowered:
                    if not matched or self.ORDER.index(level) > self.ORDER.index(severity):
                        condition, severity, matched = label, level, True
                    if tip not in advice:
                        advice.append(tip)
                    break

        advice.append("Consult a doctor if symptoms worsen")
        return Classification(condition=condition, severity=severity.value, recommendations=advice, confidence=70)


CLASSIFIERS = {
    "fixed": FixedRuleClassifier,
    "keyword": KeywordRuleClassifier,
}


def default_classifier() -> SymptomClassifier:
    name = os.getenv("SYMPTOM_CLASSIFIER", "fixed").lower()
    if name not in CLASSIFIERS:
        raise ValueError(f"Unknown SYMPTOM_CLASSIFIER: {name}")
    return CLASSIFIERS[name]()


class SymptomAnalyzer:
    def __init__(self, store: Store, classifier: Optional[SymptomClassifier] = None):
        self.store = store
        self.classifier = classifier or default_classifier()

    def classify(self, symptoms: Iterable[str]) -> Classification:
        return self.classifier.classify(normalize_symptoms(symptoms))

    def record(self, ctx: SessionContext, symptoms: Iterable[str], classification: Classification) -> SymptomCheck:
        """Persist one check. The stored row is never updated afterwards."""
        symptoms = normalize_symptoms(symptoms)
        delimiter = get_business_rules().RECOMMENDATION_DELIMITER

        check = self.store.insert(SymptomCheck(
            user_id=ctx.user_id,
            symptoms=symptoms,
            ai_diagnosis=classification.condition,
            severity_level=classification.severity,
            recommendations=delimiter.join(classification.recommendations),
        ))
        logger.info(f"Symptom check {check.id} recorded for user {ctx.user_id} ({check.severity_level})")
        return check

    def analyze(self, ctx: SessionContext, symptoms: Iterable[str]) -> Tuple[SymptomCheck, Classification]:
        symptoms = normalize_symptoms(symptoms)
        classification = self.classifier.classify(symptoms)
        return self.record(ctx, symptoms, classification), classification

    def history(self, ctx: SessionContext) -> List[SymptomCheck]:
        return self.store.select_all(
            SymptomCheck,
            SymptomCheck.user_id == ctx.user_id,
            order_by=[SymptomCheck.created_at.desc()],
        )
