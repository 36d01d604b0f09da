"""pytest configuration and shared fixtures.

Provides an ASGI test client for the FastAPI app and small factories
for workflow node/edge payloads in the camelCase shape the graph editor
sends.
"""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from flowcheck.main import app

NodeFactory = Callable[..., dict[str, Any]]
EdgeFactory = Callable[..., dict[str, Any]]

# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


# =============================================================================
# HTTP CLIENT
# =============================================================================


@pytest_asyncio.fixture
async def async_client() -> AsyncGenerator[AsyncClient]:
    """Async HTTP client for testing API endpoints.

    Uses ASGI transport to test the FastAPI app without running a server.
    Dependency overrides set by a test are cleared afterwards.

    Example:
        async def test_quick(async_client):
            response = await async_client.post(
                "/api/v1/validation/workflows/quick", json={"nodes": [], "edges": []}
            )
            assert response.status_code == 200
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


# =============================================================================
# WORKFLOW PAYLOAD FACTORIES
# =============================================================================


@pytest.fixture
def make_node() -> NodeFactory:
    """Factory for node payloads.

    Keyword arguments become the node's data bag, so camelCase keys are
    passed as-is: ``make_node("a", "action", actionId="send_email")``.
    """

    def _make_node(node_id: str, node_type: str, **data: Any) -> dict[str, Any]:
        return {"id": node_id, "type": node_type, "data": data}

    return _make_node


@pytest.fixture
def make_edge() -> EdgeFactory:
    """Factory for edge payloads. The id defaults to ``e-<source>-<target>``."""

    def _make_edge(
        source: str, target: str, edge_id: str | None = None
    ) -> dict[str, Any]:
        return {
            "id": edge_id or f"e-{source}-{target}",
            "source": source,
            "target": target,
        }

    return _make_edge


@pytest.fixture
def valid_workflow(
    make_node: NodeFactory, make_edge: EdgeFactory
) -> dict[str, list[dict[str, Any]]]:
    """Fully configured linear workflow: start -> approval -> action -> end.

    Every node has a label and a description, so validation yields no
    findings at all.
    """
    nodes = [
        make_node("start", "start", label="New request", description="Form submitted"),
        make_node(
            "approve",
            "approval",
            label="Manager approval",
            description="Line manager signs off",
            approverRole="manager",
        ),
        make_node(
            "notify",
            "action",
            label="Send email",
            description="Notify the requester",
            actionId="send_email",
        ),
        make_node("end", "end", label="Done", description="Request closed"),
    ]
    edges = [
        make_edge("start", "approve"),
        make_edge("approve", "notify"),
        make_edge("notify", "end"),
    ]
    return {"nodes": nodes, "edges": edges}


@pytest.fixture
def linear_chain(make_node: NodeFactory, make_edge: EdgeFactory):
    """Factory for a labelled, described chain start -> n1 -> ... -> end."""

    def _linear_chain(length: int) -> dict[str, list[dict[str, Any]]]:
        ids = ["start", *[f"n{i}" for i in range(1, length - 1)], "end"]
        nodes = [make_node("start", "start", label="Start", description="Trigger")]
        nodes.extend(
            make_node(
                node_id,
                "action",
                label=f"Step {node_id}",
                description="Chain step",
                actionId="send_email",
            )
            for node_id in ids[1:-1]
        )
        nodes.append(make_node("end", "end", label="End", description="Terminator"))
        edges = [make_edge(a, b) for a, b in zip(ids, ids[1:], strict=False)]
        return {"nodes": nodes, "edges": edges}

    return _linear_chain
