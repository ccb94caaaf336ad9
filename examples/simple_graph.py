"""A simple example building a two-node document graph on the in-memory contract."""

import asyncio
from pathlib import Path

from docgraph import ChainEndpoint, GraphClient, InMemoryChain

CONTENT_DIR = Path(__file__).parent / "content"


async def main():
    """Create two documents, link them, and walk the edge both ways."""
    chain = InMemoryChain("docs.hypha")
    graph = GraphClient(ChainEndpoint.of(chain), "docs.hypha")

    member = await graph.create_document("johnnyhypha1", CONTENT_DIR / "member.json")
    proposal = await graph.create_document("johnnyhypha1", CONTENT_DIR / "proposal.json")
    print(f"member:   {member.hash}")
    print(f"proposal: {proposal.hash}")

    await graph.create_edge("johnnyhypha1", member.hash, proposal.hash, "owns")

    for edge in await graph.get_edges_from_by_name(member, "owns"):
        owned = await graph.get_document(edge.to_node)
        print(f"member owns: {owned.get_content('details', 'title').value.value}")

    for edge in await graph.get_edges_to(proposal):
        print(f"proposal is '{edge.edge_name}' of {edge.from_node}")


if __name__ == "__main__":
    asyncio.run(main())
