"""Unit tests for the proof inspector."""

import pytest

from greenloop.core.errors import ConflictError, ValidationError
from greenloop.services.proof_inspector import ProofInspector, paginate


@pytest.fixture
def populated(ledger, clock):
    ledger.add_evidence("file", "0.0.700567", "Soil sample report", source="Proof Upload")
    clock.advance(1)
    ledger.add_evidence("tx", "0.0.4455@1700000000.1", "Escrow release", source="Orders")
    clock.advance(1)
    ledger.add_evidence("token", "0.0.600222#1", "Claim badge", source="ClaimsHelper")
    clock.advance(1)
    ledger.add_evidence("file", "0.0.700999", "Drone imagery", source="Proof Upload")
    return ledger


def test_starts_collapsed_and_toggles(ledger):
    inspector = ProofInspector(ledger)
    assert inspector.collapsed is True
    assert inspector.toggle() is False
    assert inspector.collapsed is False
    assert inspector.toggle() is True


def test_view_without_filters_lists_everything(populated):
    view = ProofInspector(populated).view()
    assert view.total == 4
    assert view.filtered == 4
    assert [r.label for r in view.items] == [
        "Drone imagery",
        "Claim badge",
        "Escrow release",
        "Soil sample report",
    ]
    assert view.can_clear is True


def test_search_matches_label_case_insensitively(populated):
    view = ProofInspector(populated).view(search="SOIL")
    assert [r.label for r in view.items] == ["Soil sample report"]


def test_search_matches_evidence_id(populated):
    view = ProofInspector(populated).view(search="600222")
    assert [r.label for r in view.items] == ["Claim badge"]


def test_filters_are_anded(populated):
    inspector = ProofInspector(populated)
    assert inspector.view(kind="file", source="Proof Upload").filtered == 2
    assert inspector.view(kind="file", source="Orders").filtered == 0
    assert [r.label for r in inspector.view(kind="file", search="drone").items] == ["Drone imagery"]


def test_unique_sources_in_first_seen_order(populated):
    assert ProofInspector(populated).view().sources == ["Proof Upload", "ClaimsHelper", "Orders"]


def test_pagination(populated):
    view = ProofInspector(populated).view(offset=1, limit=2)
    assert [r.label for r in view.items] == ["Claim badge", "Escrow release"]
    assert view.filtered == 4


def test_paginate_rejects_bad_bounds():
    with pytest.raises(ValidationError):
        paginate([], offset=-1)
    with pytest.raises(ValidationError):
        paginate([], limit=0)


def test_clear_all_empties_ledger(populated):
    inspector = ProofInspector(populated)
    assert inspector.clear_all() == 4
    assert len(populated) == 0
    assert inspector.view().can_clear is False


def test_clear_all_on_empty_ledger_is_refused(ledger):
    with pytest.raises(ConflictError):
        ProofInspector(ledger).clear_all()


def test_items_carry_display_time(populated):
    view = ProofInspector(populated).view()
    assert [r.display_time for r in view.items] == ["12:00:03", "12:00:02", "12:00:01", "12:00:00"]
    assert view.model_dump(by_alias=True)["items"][0]["displayTime"] == "12:00:03"


def test_search_term_is_matched_as_typed(populated):
    inspector = ProofInspector(populated)
    assert inspector.view(search="  ").filtered == 0
    assert inspector.view(search=" soil").filtered == 0
    assert [r.label for r in inspector.view(search="sample report").items] == ["Soil sample report"]
