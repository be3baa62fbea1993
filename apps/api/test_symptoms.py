"""Symptom classification and history"""
import pytest

from exceptions import ValidationError
from models import SymptomCheck
from services.symptom_analyzer import (
    FixedRuleClassifier, KeywordRuleClassifier, SymptomAnalyzer, default_classifier, normalize_symptoms
)


def test_fixed_rule_result():
    classification = FixedRuleClassifier().classify(["headache"])
    assert classification.condition == "Common Cold"
    assert classification.severity == "low"
    assert classification.confidence == 85
    assert len(classification.recommendations) == 4


def test_fixed_rule_ignores_input():
    classifier = FixedRuleClassifier()
    assert classifier.classify(["chest pain"]) == classifier.classify(["sneezing", "cough"])


def test_fixed_rule_result_cannot_be_edited_by_callers():
    classifier = FixedRuleClassifier()
    first = classifier.classify(["cough"])
    with pytest.raises(AttributeError):
        first.recommendations.append("Take antibiotics")
    assert classifier.classify(["fever"]).recommendations[-1] == "Consult a doctor if symptoms worsen"
    assert len(classifier.classify(["fever"]).recommendations) == 4


def test_keyword_recommendations_are_a_tuple():
    assert isinstance(KeywordRuleClassifier().classify(["fever"]).recommendations, tuple)


def test_normalize_strips_and_dedupes():
    assert normalize_symptoms([" fever ", "", "fever", "cough"]) == ["fever", "cough"]


@pytest.mark.parametrize("symptoms", [[], None, ["", "   "]])
def test_empty_symptom_list_rejected(symptoms):
    with pytest.raises(ValidationError, match="at least one symptom"):
        normalize_symptoms(symptoms)


def test_keyword_rule_most_severe_match_wins():
    classification = KeywordRuleClassifier().classify(["Mild cough", "Chest pain when walking"])
    assert classification.severity == "high"
    assert classification.condition == "Possible cardiac issue"
    assert classification.recommendations[-1] == "Consult a doctor if symptoms worsen"


def test_keyword_rule_without_match_falls_back():
    classification = KeywordRuleClassifier().classify(["itchy elbow"])
    assert classification.condition == "Common Cold"
    assert classification.severity == "low"


def test_default_classifier_from_environment(monkeypatch):
    monkeypatch.setenv("SYMPTOM_CLASSIFIER", "keyword")
    assert isinstance(default_classifier(), KeywordRuleClassifier)
    monkeypatch.delenv("SYMPTOM_CLASSIFIER")
    assert isinstance(default_classifier(), FixedRuleClassifier)


def test_unknown_classifier_name(monkeypatch):
    monkeypatch.setenv("SYMPTOM_CLASSIFIER", "oracle")
    with pytest.raises(ValueError):
        default_classifier()


def test_analyze_persists_one_check(store, ctx):
    analyzer = SymptomAnalyzer(store, FixedRuleClassifier())
    check, classification = analyzer.analyze(ctx, ["headache", "fever"])

    assert check.symptoms == ["headache", "fever"]
    assert check.ai_diagnosis == "Common Cold"
    assert check.severity_level == "low"
    assert check.recommendations == "; ".join(FixedRuleClassifier.RESULT.recommendations)
    assert classification is FixedRuleClassifier.RESULT
    assert store.count(SymptomCheck, SymptomCheck.user_id == ctx.user_id) == 1


def test_analyze_empty_list_writes_nothing(store, ctx):
    with pytest.raises(ValidationError):
        SymptomAnalyzer(store, FixedRuleClassifier()).analyze(ctx, [])
    assert store.count(SymptomCheck) == 0


def test_history_is_per_user(store, ctx, other_ctx):
    analyzer = SymptomAnalyzer(store, FixedRuleClassifier())
    analyzer.analyze(ctx, ["cough"])
    analyzer.analyze(other_ctx, ["fatigue"])
    assert [check.symptoms for check in analyzer.history(ctx)] == [["cough"]]


def test_analyze_endpoint(client, auth_headers):
    response = client.post("/api/symptoms/analyze", json={"symptoms": ["headache"]}, headers=auth_headers)
    assert response.status_code == 201
    body = response.json()
    assert body["diagnosis"]["condition"] == "Common Cold"
    assert body["check"]["symptoms"] == ["headache"]

    history = client.get("/api/symptoms", headers=auth_headers).json()
    assert [item["id"] for item in history] == [body["check"]["id"]]


def test_analyze_endpoint_empty_list(client, auth_headers):
    response = client.post("/api/symptoms/analyze", json={"symptoms": []}, headers=auth_headers)
    assert response.status_code == 400

    notifications = client.get("/api/notifications", headers=auth_headers).json()
    assert [n["title"] for n in notifications] == ["Error"]
