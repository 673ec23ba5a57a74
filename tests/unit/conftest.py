"""Shared test fixtures."""

import pytest

from dictionary_wiki.config import BOOKMARKS_KEY, DEFINITIONS_KEY, NOTIFICATIONS_KEY
from dictionary_wiki.core.export.exporter import tree_to_data
from dictionary_wiki.core.tree.primitives import Tree
from dictionary_wiki.models.definition import Definition, Revision, Snapshot
from dictionary_wiki.wiki import Wiki
from tests.unit.fakes import FIXED_NOW, FakeAssistant, FakeStore, SequentialIds

AUTH_V1 = Snapshot(
    name="Auth Decision Date",
    module="Authorizations",
    keywords=("authorization", "decision date"),
    description="<p>The date a final decision is made.</p>",
    usage="<p>Used in regulatory reports.</p>",
)

AUTH_V2 = Snapshot(
    name="Auth Decision Date",
    module="Authorizations",
    keywords=("authorization", "decision date", "SLA"),
    description="<p>The date a final decision is made for an authorization request.</p>",
    usage="<p>Used in regulatory reports.</p>",
)


def build_tree() -> Tree:
    """Two modules, three levels deep, one archived leaf, one relation."""
    auth = Definition(
        id="1.1.1",
        name="Auth Decision Date",
        module="Authorizations",
        keywords=AUTH_V2.keywords,
        description=AUTH_V2.description,
        usage=AUTH_V2.usage,
        revisions=(
            Revision(
                ticket_id="MPM-1234",
                date="2023-01-15",
                developer="J. Doe",
                description="Initial creation.",
                snapshot=AUTH_V1,
            ),
            Revision(
                ticket_id="MPM-1290",
                date="2023-05-20",
                developer="A. Smith",
                description="Clarified description.",
                snapshot=AUTH_V2,
            ),
        ),
    )
    mapping = Definition(
        id="1.1.2",
        name="Service Type Mapping",
        module="Authorizations",
        keywords=("service type", "mapping"),
        description="<p>Maps procedure codes to service categories.</p>",
        related_definitions=("1.1.1",),
    )
    claim_status = Definition(
        id="1.2.1",
        name="Claim Adjudication Status",
        module="Claims",
        keywords=("claim", "adjudication"),
        description="<p>The final status of a claim.</p>",
        is_archived=True,
    )
    member = Definition(
        id="1",
        name="Member Management",
        module="Core",
        children=(
            Definition(
                id="1.1",
                name="Authorizations",
                module="Member Management",
                children=(auth, mapping),
            ),
            Definition(
                id="1.2",
                name="Claims",
                module="Member Management",
                children=(claim_status,),
            ),
        ),
    )
    provider = Definition(
        id="2",
        name="Provider",
        module="Core",
        children=(
            Definition(
                id="2.1",
                name="Contracted Rates",
                module="Provider",
                keywords=("provider", "rates"),
                description="<p>Negotiated payment amounts for in-network providers.</p>",
                technical_details="<p>Stored in <code>FEE_SCHEDULES</code>.</p>",
            ),
            Definition(
                id="2.2",
                name="Network Tiers",
                module="Provider",
                keywords=("tier",),
                description="<p>Preferred and standard provider tiers.</p>",
            ),
        ),
    )
    return (member, provider)


@pytest.fixture
def sample_tree() -> Tree:
    return build_tree()


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore(
        {
            DEFINITIONS_KEY: tree_to_data(build_tree()),
            NOTIFICATIONS_KEY: [],
            BOOKMARKS_KEY: [],
        }
    )


@pytest.fixture
def fake_assistant() -> FakeAssistant:
    return FakeAssistant()


@pytest.fixture
def wiki(fake_store: FakeStore, fake_assistant: FakeAssistant) -> Wiki:
    """A loaded wiki over the sample tree with deterministic ids and clock."""
    w = Wiki(
        fake_store,
        assistant=fake_assistant,
        id_factory=SequentialIds(),
        clock=lambda: FIXED_NOW,
        user_name="tester",
    )
    w.load()
    return w
