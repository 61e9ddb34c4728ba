from freight_booking.application.listing import ListParams, pagination_meta


def test_list_params_defaults():
    params = ListParams.from_query()
    assert params.page == 1
    assert params.limit == 10
    assert params.sort_by == "id"
    assert params.descending is True
    assert params.offset == 0


def test_list_params_clamps_page_and_limit():
    assert ListParams.from_query(page=0).page == 1
    assert ListParams.from_query(page=-4).page == 1
    assert ListParams.from_query(limit=500).limit == 100
    assert ListParams.from_query(limit=0).limit == 1
    assert ListParams.from_query(page=3, limit=20).offset == 40


def test_list_params_order_and_search():
    assert ListParams.from_query(order="asc").descending is False
    assert ListParams.from_query(order="sideways").descending is True
    assert ListParams.from_query(search="   ").search is None
    assert ListParams.from_query(search=" Dakar ").search == "Dakar"


def test_pagination_meta():
    meta = pagination_meta(ListParams.from_query(page=2, limit=10), total=25)
    assert meta == {
        "page": 2,
        "limit": 10,
        "total": 25,
        "totalPages": 3,
        "hasNext": True,
        "hasPrev": True,
    }

    empty = pagination_meta(ListParams.from_query(), total=0)
    assert empty["totalPages"] == 0
    assert empty["hasNext"] is False
    assert empty["hasPrev"] is False


def test_limit_is_clamped_over_http(client, reservation_payload):
    client.post("/api/reservations", json=reservation_payload())
    resp = client.get("/api/reservations", params={"limit": 500, "page": 0})
    assert resp.status_code == 200
    pagination = resp.json()["pagination"]
    assert pagination["limit"] == 100
    assert pagination["page"] == 1
    assert pagination["total"] == 1
    assert pagination["totalPages"] == 1


def test_pages_split_rows(client, create_slot):
    for _ in range(5):
        create_slot()

    first = client.get("/api/creneaux", params={"limit": 2, "order": "ASC"}).json()
    last = client.get("/api/creneaux", params={"limit": 2, "page": 3, "order": "ASC"}).json()

    assert len(first["data"]) == 2
    assert first["pagination"] == {
        "page": 1, "limit": 2, "total": 5, "totalPages": 3, "hasNext": True, "hasPrev": False,
    }
    assert len(last["data"]) == 1
    assert last["pagination"]["hasNext"] is False
    assert last["data"][0]["id"] > first["data"][1]["id"]


def test_non_numeric_page_is_rejected(client):
    resp = client.get("/api/colis", params={"page": "deux"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Paramètre invalide: page"}
