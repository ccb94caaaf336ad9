"""Tests for document and edge operations against the in-memory contract.

This module verifies:
- Creating a document from a content file and reading it back
- The creator in the file is always replaced, other fields ride along
- Creating edges and querying them by direction and by name
- Query shapes sent to the edges and documents tables
- Empty results: no edges is an empty list, no documents is NotFoundError
- Looking a document up by hash
"""

import json

import pytest

from docgraph.chain.memory import hash_content_groups
from docgraph.errors import NotFoundError, SubmissionError
from docgraph.graph import (
    EDGE_QUERY_LIMIT,
    create_document,
    get_edges_from,
    get_last_document,
)

CONTRACT = "docs.hypha"
CREATOR = "johnnyhypha1"


class TestCreateDocument:
    """Tests for create_document and the read-back of the new document."""

    @pytest.mark.asyncio
    async def test_created_document_matches_file(self, graph, write_doc, groups_for) -> None:
        """The returned document carries the file's content groups and the supplied creator."""
        doc = await graph.create_document(CREATOR, write_doc("Hello"))

        assert doc.creator == CREATOR
        assert [g.model_dump(mode="json") for g in doc.content_groups] == groups_for("Hello")
        assert doc.hash == hash_content_groups(groups_for("Hello"))
        assert doc.contract == CONTRACT

    @pytest.mark.asyncio
    async def test_last_document_is_the_created_one(self, graph, write_doc) -> None:
        """get_last_document after a creation returns that same document."""
        await graph.create_document(CREATOR, write_doc("First"))
        second = await graph.create_document(CREATOR, write_doc("Second"))

        last = await graph.get_last_document()
        assert last.hash == second.hash
        assert last.content_groups == second.content_groups

    @pytest.mark.asyncio
    async def test_creator_in_file_is_overwritten(self, graph, chain, write_doc) -> None:
        """A creator field present in the file never reaches the chain."""
        doc = await graph.create_document(CREATOR, write_doc("Hello", creator="mallory12345"))

        assert doc.creator == CREATOR
        sent = json.loads(bytes.fromhex(chain.transactions[-1][0].data))
        assert sent["creator"] == CREATOR

    @pytest.mark.asyncio
    async def test_extra_fields_are_sent_unchanged(self, graph, chain, write_doc) -> None:
        """Top-level fields the client does not model are passed through to the action."""
        await graph.create_document(CREATOR, write_doc("Hello", notes={"draft": True}))

        sent = json.loads(bytes.fromhex(chain.transactions[-1][0].data))
        assert sent["notes"] == {"draft": True}

    @pytest.mark.asyncio
    async def test_single_action_authorized_by_creator(self, graph, chain, write_doc) -> None:
        """Creation submits one 'create' action authorized by creator@active."""
        await graph.create_document(CREATOR, write_doc("Hello"))

        assert len(chain.transactions) == 1
        (action,) = chain.transactions[0]
        assert action.account == CONTRACT
        assert action.name == "create"
        assert [(p.actor, p.permission) for p in action.authorization] == [(CREATOR, "active")]

    @pytest.mark.asyncio
    async def test_duplicate_content_is_rejected(self, graph, write_doc) -> None:
        """The contract refuses a second document with identical content."""
        await graph.create_document(CREATOR, write_doc("Same"))

        with pytest.raises(SubmissionError, match="document exists already"):
            await graph.create_document(CREATOR, write_doc("Same"))

    @pytest.mark.asyncio
    async def test_module_function_takes_endpoint(self, endpoint, write_doc) -> None:
        """The module-level functions work with an explicit endpoint and contract."""
        doc = await create_document(endpoint, CONTRACT, CREATOR, str(write_doc("Plain")))
        last = await get_last_document(endpoint, CONTRACT)
        assert last.hash == doc.hash


class TestEdges:
    """Tests for edge creation and the four edge queries."""

    @pytest.mark.asyncio
    async def test_edge_is_visible_from_both_ends(self, graph, write_doc) -> None:
        """An edge A->B named E is found from A by name and to B by name exactly once."""
        a = await graph.create_document(CREATOR, write_doc("A"))
        b = await graph.create_document(CREATOR, write_doc("B"))

        await graph.create_edge(CREATOR, a.hash, b.hash, "owns")

        from_a = await graph.get_edges_from_by_name(a, "owns")
        to_b = await graph.get_edges_to_by_name(b, "owns")
        assert [e.to_node for e in from_a] == [b.hash]
        assert [e.from_node for e in to_b] == [a.hash]

    @pytest.mark.asyncio
    async def test_create_edge_returns_transaction_id(self, graph, chain, write_doc) -> None:
        """create_edge returns the executor's transaction result."""
        a = await graph.create_document(CREATOR, write_doc("A"))
        b = await graph.create_document(CREATOR, write_doc("B"))

        trx = await graph.create_edge(CREATOR, a.hash, b.hash, "owns")

        assert isinstance(trx, str) and len(trx) == 64
        (action,) = chain.transactions[-1]
        assert action.name == "newedge"
        assert json.loads(bytes.fromhex(action.data)) == {
            "from_node": a.hash,
            "to_node": b.hash,
            "edge_name": "owns",
        }

    @pytest.mark.asyncio
    async def test_name_filter_is_exact(self, graph, write_doc) -> None:
        """By-name queries drop edges with other names; unfiltered queries keep them."""
        a = await graph.create_document(CREATOR, write_doc("A"))
        b = await graph.create_document(CREATOR, write_doc("B"))
        c = await graph.create_document(CREATOR, write_doc("C"))
        await graph.create_edge(CREATOR, a.hash, b.hash, "owns")
        await graph.create_edge(CREATOR, a.hash, c.hash, "memberof")
        await graph.create_edge(CREATOR, a.hash, c.hash, "owns")

        assert len(await graph.get_edges_from(a)) == 3
        owned = await graph.get_edges_from_by_name(a, "owns")
        assert sorted(e.to_node for e in owned) == sorted([b.hash, c.hash])
        assert await graph.get_edges_from_by_name(a, "own") == []
        assert [e.from_node for e in await graph.get_edges_to_by_name(c, "memberof")] == [a.hash]

    @pytest.mark.asyncio
    async def test_document_without_edges_returns_empty_list(self, graph, write_doc) -> None:
        """No matching edges is an empty list, not an error."""
        lonely = await graph.create_document(CREATOR, write_doc("Lonely"))

        assert await graph.get_edges_from(lonely) == []
        assert await graph.get_edges_to(lonely) == []
        assert await graph.get_edges_from_by_name(lonely, "owns") == []

    @pytest.mark.asyncio
    async def test_direction_is_respected(self, graph, write_doc) -> None:
        """An edge A->B is not an edge from B or to A."""
        a = await graph.create_document(CREATOR, write_doc("A"))
        b = await graph.create_document(CREATOR, write_doc("B"))
        await graph.create_edge(CREATOR, a.hash, b.hash, "owns")

        assert await graph.get_edges_from(b) == []
        assert await graph.get_edges_to(a) == []

    @pytest.mark.asyncio
    async def test_edge_query_shape(self, graph, chain, write_doc) -> None:
        """Edge queries are equality lookups on the from (2) or to (3) sha256 index."""
        a = await graph.create_document(CREATOR, write_doc("A"))

        await graph.get_edges_from(a)
        from_query = chain.queries[-1]
        await graph.get_edges_to(a)
        to_query = chain.queries[-1]

        for query, position in ((from_query, "2"), (to_query, "3")):
            assert query.code == CONTRACT
            assert query.scope == CONTRACT
            assert query.table == "edges"
            assert query.index_position == position
            assert query.key_type == "sha256"
            assert query.lower_bound == query.upper_bound == a.hash
            assert query.limit == EDGE_QUERY_LIMIT

    @pytest.mark.asyncio
    async def test_edge_to_missing_document_is_rejected(self, graph, write_doc) -> None:
        """The contract refuses edges whose nodes do not exist."""
        a = await graph.create_document(CREATOR, write_doc("A"))

        with pytest.raises(SubmissionError, match="document not found"):
            await graph.create_edge(CREATOR, a.hash, "ab" * 32, "owns")

    @pytest.mark.asyncio
    async def test_module_function_edges(self, endpoint, graph, write_doc) -> None:
        a = await graph.create_document(CREATOR, write_doc("A"))
        assert await get_edges_from(endpoint, CONTRACT, a) == []


class TestDocumentLookups:
    """Tests for get_last_document and get_document."""

    @pytest.mark.asyncio
    async def test_empty_contract_raises_not_found(self, graph) -> None:
        """With no documents, get_last_document raises NotFoundError instead of indexing."""
        with pytest.raises(NotFoundError) as exc_info:
            await graph.get_last_document()

        assert exc_info.value.operation == "get_last_document"
        assert exc_info.value.details["contract"] == CONTRACT

    @pytest.mark.asyncio
    async def test_last_document_query_shape(self, graph, chain) -> None:
        """The latest document is one row of the documents table in reverse order."""
        with pytest.raises(NotFoundError):
            await graph.get_last_document()

        query = chain.queries[-1]
        assert query.table == "documents"
        assert query.reverse is True
        assert query.limit == 1

    @pytest.mark.asyncio
    async def test_get_document_by_hash(self, graph, chain, write_doc) -> None:
        """A document can be fetched by hash through the documents hash index."""
        a = await graph.create_document(CREATOR, write_doc("A"))
        await graph.create_document(CREATOR, write_doc("B"))

        found = await graph.get_document(a.hash)

        assert found == a
        query = chain.queries[-1]
        assert query.index_position == "2"
        assert query.key_type == "sha256"
        assert query.lower_bound == query.upper_bound == a.hash

    @pytest.mark.asyncio
    async def test_get_unknown_document_raises_not_found(self, graph, write_doc) -> None:
        await graph.create_document(CREATOR, write_doc("A"))

        with pytest.raises(NotFoundError) as exc_info:
            await graph.get_document("00" * 32)

        assert exc_info.value.details["hash"] == "00" * 32

    @pytest.mark.asyncio
    async def test_reads_are_not_cached(self, graph, write_doc) -> None:
        """Every read goes back to the contract, so later writes are visible."""
        a = await graph.create_document(CREATOR, write_doc("A"))
        assert await graph.get_edges_from(a) == []

        b = await graph.create_document(CREATOR, write_doc("B"))
        await graph.create_edge(CREATOR, a.hash, b.hash, "owns")

        assert len(await graph.get_edges_from(a)) == 1
        assert (await graph.get_last_document()).hash == b.hash
