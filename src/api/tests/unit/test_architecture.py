"""Architecture tests using pytest-archon.

These tests enforce layer boundaries inside the IAM bounded context and
keep the shared kernel and cross-cutting infrastructure independent of it.
"""

from pytest_archon import archrule


class TestIAMDomainLayerBoundaries:
    """Tests that the domain layer has no forbidden dependencies."""

    def test_domain_does_not_import_infrastructure(self):
        """Domain layer should not depend on infrastructure.

        Aggregates and the capability table are pure business logic and
        should not know about ORM models or repositories.
        """
        (
            archrule("iam_domain_no_infrastructure")
            .match("iam.domain*")
            .should_not_import("iam.infrastructure*", "infrastructure*")
            .check("iam")
        )

    def test_domain_does_not_import_application(self):
        """Domain objects should be usable without application services."""
        (
            archrule("iam_domain_no_application")
            .match("iam.domain*")
            .should_not_import("iam.application*")
            .check("iam")
        )

    def test_domain_does_not_import_sqlalchemy(self):
        """Domain objects should be persistence-agnostic."""
        (
            archrule("iam_domain_no_sqlalchemy")
            .match("iam.domain*")
            .should_not_import("sqlalchemy*")
            .check("iam")
        )


class TestIAMPortsLayerBoundaries:
    """Tests that the ports layer has no forbidden dependencies."""

    def test_ports_does_not_import_infrastructure(self):
        """Ports define interfaces and must not know their implementations."""
        (
            archrule("iam_ports_no_infrastructure")
            .match("iam.ports*")
            .should_not_import("iam.infrastructure*")
            .check("iam")
        )

    def test_ports_does_not_import_application(self):
        """Ports should not depend on the services that use them."""
        (
            archrule("iam_ports_no_application")
            .match("iam.ports*")
            .should_not_import("iam.application*")
            .check("iam")
        )


class TestIAMApplicationLayerBoundaries:
    """Tests that application services depend on ports, not adapters."""

    def test_application_does_not_import_infrastructure(self):
        """Services receive repositories through their port protocols."""
        (
            archrule("iam_application_no_infrastructure")
            .match("iam.application*")
            .should_not_import("iam.infrastructure*")
            .check("iam")
        )


class TestSharedKernelIsolation:
    """Tests that shared building blocks stay context-free."""

    def test_shared_kernel_does_not_import_iam(self):
        """The shared kernel must not depend on any bounded context."""
        (
            archrule("shared_kernel_no_iam")
            .match("shared_kernel*")
            .should_not_import("iam*")
            .check("shared_kernel")
        )

    def test_infrastructure_does_not_import_iam(self):
        """Cross-cutting infrastructure must not depend on IAM."""
        (
            archrule("infrastructure_no_iam")
            .match("infrastructure*")
            .should_not_import("iam*")
            .check("infrastructure")
        )
