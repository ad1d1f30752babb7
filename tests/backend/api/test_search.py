import asyncio


class TestSearchAPI:

    def test_contains_search(self, client):
        response = client.get("/api/search/", params={"query": "Cat"})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["query"] == "cat"
        assert body["empty_query"] is False
        assert body["count"] == 3
        assert [row["id"] for row in body["data"]] == [1, 2, 6]
        assert body["message"] == "3 entries found."
        assert body["took_ms"] >= 0

    def test_exact_mode(self, client):
        body = client.get("/api/search/", params={"query": "cat", "mode": "exact"}).json()
        assert [row["id"] for row in body["data"]] == [1]
        assert body["message"] == "1 entry found."

    def test_field_restriction(self, client):
        body = client.get("/api/search/", params={"query": "noun", "field": "types"}).json()
        assert [row["id"] for row in body["data"]] == [1, 3, 6]

    def test_second_language_match(self, client):
        body = client.get("/api/search/", params={"query": "നായ"}).json()
        assert [row["fromContent"] for row in body["data"]] == ["dog, domestic"]

    def test_no_match(self, client):
        body = client.get("/api/search/", params={"query": "zebra"}).json()
        assert body["success"] is True
        assert body["count"] == 0
        assert body["message"].startswith("No entries found")

    def test_blank_query_is_empty_query(self, client):
        for params in ({}, {"query": "   "}):
            body = client.get("/api/search/", params=params).json()
            assert body["empty_query"] is True
            assert body["data"] == []
            assert body["message"] == "Start typing to search."

    def test_invalid_mode_is_422(self, client):
        assert client.get("/api/search/", params={"query": "cat", "mode": "fuzzy"}).status_code == 422

    def test_not_ready_is_503(self, client_for, make_session, retrieval_error):
        session = make_session(error=retrieval_error)
        asyncio.run(session.load())
        response = client_for(session).get("/api/search/", params={"query": "cat"})
        assert response.status_code == 503
        assert "Failed to load data" in response.json()["detail"]


class TestSearchWebSocket:

    def test_keystroke_burst_gets_one_reply(self, client_for, make_session):
        session = make_session(debounce_ms=200)
        asyncio.run(session.load())
        client = client_for(session)
        with client.websocket_connect("/api/search/ws") as ws:
            for text in ("c", "ca", "cat"):
                ws.send_text(text)
            reply = ws.receive_json()
            assert reply["query"] == "cat"
            assert [row["id"] for row in reply["data"]] == [1, 2, 6]

            ws.send_text("dog")
            reply = ws.receive_json()
            assert reply["query"] == "dog"
            assert reply["count"] == 1

    def test_blank_frame_reports_empty_query(self, client_for, make_session):
        session = make_session(debounce_ms=10)
        asyncio.run(session.load())
        with client_for(session).websocket_connect("/api/search/ws") as ws:
            ws.send_text("  ")
            reply = ws.receive_json()
            assert reply["empty_query"] is True
            assert reply["data"] == []

    def test_not_ready_reports_status(self, client_for, make_session):
        with client_for(make_session()).websocket_connect("/api/search/ws") as ws:
            ws.send_text("cat")
            reply = ws.receive_json()
            assert reply["success"] is False
            assert reply["status"] == "idle"

    def test_concurrent_clients_get_their_own_results(self, client_for, make_session):
        session = make_session(debounce_ms=300)
        asyncio.run(session.load())
        client = client_for(session)
        with client.websocket_connect("/api/search/ws") as first, \
                client.websocket_connect("/api/search/ws") as second:
            first.send_text("cat")
            second.send_text("dog")
            first_reply = first.receive_json()
            second_reply = second.receive_json()
        assert first_reply["query"] == "cat"
        assert [row["id"] for row in first_reply["data"]] == [1, 2, 6]
        assert second_reply["query"] == "dog"
        assert [row["id"] for row in second_reply["data"]] == [3]

    def test_http_search_does_not_change_stream_reply(self, client_for, make_session):
        session = make_session(debounce_ms=200)
        asyncio.run(session.load())
        client = client_for(session)
        with client.websocket_connect("/api/search/ws") as ws:
            ws.send_text("cat")
            assert client.get("/api/search/", params={"query": "dog"}).json()["query"] == "dog"
            reply = ws.receive_json()
        assert reply["query"] == "cat"
        assert reply["count"] == 3
