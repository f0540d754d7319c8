"""Tests for the finding log."""

import random

from siliconscan.findings import FindingLog, Severity


def test_record_increments_one_counter():
    log = FindingLog()
    log.record(Severity.WARNING, "w")
    assert log.summary() == (0, 1, 0)
    log.record(Severity.CRITICAL, "c", "fix it")
    assert log.summary() == (1, 1, 0)
    log.record(Severity.INFO, "i")
    assert log.summary() == (1, 1, 1)


def test_counters_match_findings_at_every_step():
    """Counters stay in lockstep with the findings and sum to their length."""
    rng = random.Random(7)
    log = FindingLog()
    for i in range(200):
        log.record(rng.choice(list(Severity)), f"finding {i}")
        critical, warning, info = log.summary()
        assert critical + warning + info == len(log)
        for sev, n in zip(Severity, (critical, warning, info)):
            assert n == sum(1 for f in log.findings if f.severity is sev)


def test_insertion_order_preserved():
    log = FindingLog()
    for msg in ("a", "b", "c"):
        log.record(Severity.INFO, msg)
    assert [f.message for f in log.findings] == ["a", "b", "c"]


def test_remedy_defaults_to_empty():
    log = FindingLog()
    f = log.record(Severity.INFO, "x", None)
    assert f.remedy == ""


def test_by_stage_and_highest_severity():
    log = FindingLog()
    assert log.highest_severity() is None
    log.record(Severity.INFO, "i", stage="containers")
    log.record(Severity.WARNING, "w", stage="path")
    assert log.highest_severity() is Severity.WARNING
    assert [f.message for f in log.by_stage("path")] == ["w"]
    log.record(Severity.CRITICAL, "c", stage="architecture")
    assert log.highest_severity() is Severity.CRITICAL


def test_accepts_severity_string():
    log = FindingLog()
    log.record("CRITICAL", "c")
    assert log.critical_count == 1


def test_findings_is_a_snapshot():
    log = FindingLog()
    log.record(Severity.INFO, "a")
    snapshot = log.findings
    log.record(Severity.INFO, "b")
    assert len(snapshot) == 1
