"""Unit tests for shared authorization types and decisions."""

import pytest

from shared_kernel.authorization import (
    AuthorizationDecision,
    Capability,
    DecisionSource,
    PermissionLevel,
    format_resource,
    format_subject,
)


class TestPermissionLevel:
    """Tests for the READ < WRITE < OWNER order."""

    def test_ordinals_follow_declaration_order(self):
        """READ is lowest and OWNER highest."""
        assert [lvl.ordinal for lvl in PermissionLevel] == [0, 1, 2]

    @pytest.mark.parametrize(
        ("held", "required", "expected"),
        [
            (PermissionLevel.OWNER, PermissionLevel.READ, True),
            (PermissionLevel.WRITE, PermissionLevel.WRITE, True),
            (PermissionLevel.READ, PermissionLevel.WRITE, False),
            (PermissionLevel.WRITE, PermissionLevel.OWNER, False),
        ],
    )
    def test_satisfies(self, held, required, expected):
        """A held level satisfies anything at or below it."""
        assert held.satisfies(required) is expected

    def test_values_are_lowercase(self):
        """Stored values are stable lowercase strings."""
        assert PermissionLevel.OWNER == "owner"
        assert Capability.MANAGE_MEMBERS == "manage_members"


class TestAuthorizationDecision:
    """Tests for the Allow/Deny decision value."""

    def test_allow_is_truthy_and_carries_match(self):
        """An Allow reports where and how it matched."""
        decision = AuthorizationDecision.allow(
            source=DecisionSource.RESOURCE_GRANT,
            matched_resource_id="01ROOT",
            depth=2,
        )

        assert decision
        assert decision.allowed
        assert decision.matched_resource_id == "01ROOT"
        assert decision.depth == 2
        assert decision.reason is None

    def test_deny_is_falsy_with_reason(self):
        """A Deny defaults to the generic reason."""
        decision = AuthorizationDecision.deny()

        assert not decision
        assert decision.reason == "insufficient permission"
        assert decision.source is None

    def test_decision_is_immutable(self):
        """Decisions cannot be altered after the fact."""
        decision = AuthorizationDecision.deny()

        with pytest.raises(AttributeError):
            decision.allowed = True


class TestFormatting:
    """Tests for identifier formatting helpers."""

    def test_format_resource(self):
        assert format_resource("abc") == "resource:abc"

    def test_format_subject(self):
        assert format_subject("abc") == "subject:abc"
