"""Unit tests — compliance scoring (pure, no database)."""
import random
from types import SimpleNamespace

from auditready.models.enums import RequirementStatus
from auditready.services.compliance_score import ComplianceSummary, summarize, weighted_score

F = RequirementStatus.FULFILLED
P = RequirementStatus.PARTIALLY_FULFILLED
N = RequirementStatus.NOT_FULFILLED
NA = RequirementStatus.NOT_APPLICABLE


def test_empty_input_is_fully_compliant():
    s = summarize([])
    assert s.total == 0
    assert s.progress == 100
    assert s.compliance_score == 100


def test_all_not_applicable_is_fully_compliant():
    s = summarize([NA, NA, NA])
    assert s.not_applicable == 3
    assert s.applicable == 0
    assert s.progress == 100
    assert s.compliance_score == 100


def test_partial_counts_half_and_rounds_half_up():
    # (2 + 0.5) / 4 = 62.5 %
    s = summarize([F, F, P, N])
    assert (s.fulfilled, s.partially_fulfilled, s.not_fulfilled, s.not_applicable) == (2, 1, 1, 0)
    assert s.applicable == 4
    assert s.compliance_score == 63
    assert s.progress == 63


def test_not_applicable_excluded_from_denominator():
    s = summarize([F] * 5 + [NA] * 5)
    assert s.applicable == 5
    assert s.compliance_score == 100


def test_nothing_fulfilled_scores_zero():
    assert summarize([N, N]).compliance_score == 0


def test_counts_sum_to_total():
    statuses = [F, P, N, NA, F, NA, N, N]
    s = summarize(statuses)
    assert s.fulfilled + s.partially_fulfilled + s.not_fulfilled + s.not_applicable == s.total
    assert s.total == len(statuses)


def test_order_does_not_matter():
    statuses = [F, F, F, P, P, N, NA, NA, N, P]
    expected = summarize(statuses)
    rng = random.Random(7)
    for _ in range(10):
        shuffled = statuses[:]
        rng.shuffle(shuffled)
        assert summarize(shuffled) == expected


def test_idempotent():
    statuses = [F, P, N]
    assert summarize(statuses) == summarize(statuses)


def test_accepts_rows_dicts_and_strings():
    rows = [
        SimpleNamespace(status="fulfilled"),
        {"status": "partially-fulfilled"},
        "not-fulfilled",
        NA,
    ]
    s = summarize(rows)
    assert s.status_counts() == {
        "fulfilled": 1,
        "partially_fulfilled": 1,
        "not_fulfilled": 1,
        "not_applicable": 1,
    }
    assert s.compliance_score == 50


def test_accepts_generator():
    s = summarize(st for st in [F, N])
    assert s.total == 2
    assert s.compliance_score == 50


def test_unrecognized_status_counts_toward_nothing():
    s = summarize([F, "pending", {"status": None}, SimpleNamespace()])
    assert s.unrecognized == 3
    assert s.total == 1
    assert s.applicable == 1
    assert s.compliance_score == 100


def test_only_unrecognized_behaves_like_empty():
    s = summarize(["bogus"])
    assert s.total == 0
    assert s.compliance_score == 100


def test_weighted_score_rounding_boundaries():
    assert weighted_score(0, 1, 4) == 13      # 12.5 -> 13
    assert weighted_score(1, 0, 3) == 33      # 33.33.. -> 33
    assert weighted_score(2, 0, 3) == 67      # 66.66.. -> 67
    assert weighted_score(0, 1, 8) == 6       # 6.25 -> 6
    assert weighted_score(0, 0, 0) == 100


def test_summary_defaults_match_empty_input():
    assert ComplianceSummary() == summarize([])
