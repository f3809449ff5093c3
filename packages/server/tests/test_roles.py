"""
Unit tests for the role lattice, the invitation state machine and request
schema validation (no DB needed).
"""

from __future__ import annotations

import itertools

import pytest
from pydantic import ValidationError

from roadmap_hub_shared.schemas.common import ROLE_LEVELS, Role, role_at_least, role_level
from roadmap_hub_shared.schemas.invitations import (
    INVITATION_TRANSITIONS,
    InvitationStatus,
    InviteRequest,
    can_transition,
    normalize_email,
)
from roadmap_hub_shared.schemas.organizations import OrgCreateRequest


class TestRoleLattice:
    def test_total_order(self):
        assert role_level(Role.ADMIN) > role_level(Role.EDITOR) > role_level(Role.VIEWER)
        assert role_level(None) == 0

    def test_every_role_has_a_level(self):
        assert set(ROLE_LEVELS) == set(Role)

    def test_reflexive(self):
        for role in Role:
            assert role_at_least(role, role)

    def test_admin_satisfies_everything(self):
        for role in Role:
            assert role_at_least(Role.ADMIN, role)

    def test_viewer_only_satisfies_viewer(self):
        assert role_at_least(Role.VIEWER, Role.VIEWER)
        assert not role_at_least(Role.VIEWER, Role.EDITOR)
        assert not role_at_least(Role.VIEWER, Role.ADMIN)

    def test_non_member_satisfies_nothing(self):
        for role in Role:
            assert not role_at_least(None, role)

    def test_accepts_stored_strings(self):
        assert role_at_least("editor", Role.VIEWER)
        assert not role_at_least("editor", "admin")

    def test_transitive(self):
        for a, b, c in itertools.product(Role, repeat=3):
            if role_at_least(a, b) and role_at_least(b, c):
                assert role_at_least(a, c)

    def test_unknown_role_rejected(self):
        with pytest.raises(ValueError):
            role_level("owner")


class TestInvitationTransitions:
    def test_pending_can_resolve_either_way(self):
        assert can_transition(InvitationStatus.PENDING, InvitationStatus.ACCEPTED)
        assert can_transition(InvitationStatus.PENDING, InvitationStatus.DECLINED)

    def test_terminal_states(self):
        for terminal in (InvitationStatus.ACCEPTED, InvitationStatus.DECLINED):
            assert INVITATION_TRANSITIONS[terminal] == []
            for target in InvitationStatus:
                assert not can_transition(terminal, target)

    def test_no_return_to_pending(self):
        assert not can_transition(InvitationStatus.PENDING, InvitationStatus.PENDING)

    def test_accepts_stored_strings(self):
        assert can_transition("pending", "accepted")
        assert not can_transition("declined", "accepted")


class TestSchemas:
    def test_invite_email_normalized(self):
        req = InviteRequest(email="  Bob@Example.COM ")
        assert req.email == "bob@example.com"
        assert req.role == Role.VIEWER

    def test_invite_rejects_bad_email(self):
        with pytest.raises(ValidationError):
            InviteRequest(email="not-an-email", role="editor")

    def test_invite_rejects_unknown_role(self):
        with pytest.raises(ValidationError):
            InviteRequest(email="bob@example.com", role="owner")

    def test_org_name_stripped(self):
        assert OrgCreateRequest(name="  Acme  ").name == "Acme"

    def test_org_name_blank_rejected(self):
        with pytest.raises(ValidationError):
            OrgCreateRequest(name="   ")

    def test_org_name_too_long(self):
        with pytest.raises(ValidationError):
            OrgCreateRequest(name="x" * 101)

    def test_normalize_email(self):
        assert normalize_email(" A@B.Co ") == "a@b.co"
