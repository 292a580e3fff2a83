"""
句子 API 测试：覆盖接口契约和端到端场景
"""
from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from sentence_clipboard.main import create_app
from sentence_clipboard.services.sentence_service import SAMPLE_SENTENCES

COLLECTION_METHODS = "GET, POST, OPTIONS"
ITEM_METHODS = "GET, PUT, DELETE, POST, OPTIONS"


def _assert_api_headers(resp, methods: str) -> None:
    assert resp.headers["content-type"] == "application/json"
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.headers["access-control-allow-methods"] == methods
    assert resp.headers["access-control-allow-headers"] == "Content-Type"


def _create(client: TestClient, content: str, group: str | None = None) -> dict:
    body = {"content": content}
    if group is not None:
        body["group"] = group
    resp = client.post("/api/sentences", json=body)
    assert resp.status_code == 201
    return resp.json()


def _reset(client: TestClient) -> None:
    """删除示例数据，从空库开始"""
    for item in client.get("/api/sentences").json():
        assert client.delete(f"/api/sentences/{item['id']}").status_code == 200


def test_fresh_start_seeds_sample_sentences(client: TestClient, data_file) -> None:
    """场景 1：全新启动写入两条示例句子"""
    resp = client.get("/api/sentences")

    assert resp.status_code == 200
    _assert_api_headers(resp, COLLECTION_METHODS)
    data = resp.json()
    assert [item["content"] for item in data] == SAMPLE_SENTENCES
    assert all(item["group"] == "默认" for item in data)
    assert all(item["copy_count"] == 0 for item in data)
    assert len(json.loads(data_file.read_text(encoding="utf-8"))) == 2


def test_create_and_list(client: TestClient) -> None:
    """场景 2：添加后列表多出一条"""
    before = client.get("/api/sentences").json()

    resp = client.post("/api/sentences", json={"content": "hi"})

    assert resp.status_code == 201
    _assert_api_headers(resp, COLLECTION_METHODS)
    created = resp.json()
    assert created["group"] == "默认"
    assert created["copy_count"] == 0
    assert created["id"] == max(item["id"] for item in before) + 1
    assert set(created) == {"id", "content", "group", "copy_count", "created_at", "updated_at"}

    after = client.get("/api/sentences").json()
    assert len(after) == len(before) + 1
    assert sum(1 for item in after if item["id"] == created["id"]) == 1


def test_copy_driven_ordering(client: TestClient) -> None:
    """场景 3：复制次数决定排序"""
    _reset(client)
    a = _create(client, "A")
    b = _create(client, "B")
    c = _create(client, "C")

    for _ in range(2):
        resp = client.post(f"/api/sentences/{b['id']}/copy")
        assert resp.status_code == 200
    resp = client.post(f"/api/sentences/{a['id']}/copy")

    assert resp.json() == {"message": "复制成功", "content": "A"}
    _assert_api_headers(resp, ITEM_METHODS)

    data = client.get("/api/sentences").json()
    assert [item["id"] for item in data] == [b["id"], a["id"], c["id"]]
    assert [item["copy_count"] for item in data] == [2, 1, 0]


def test_update_group_moves_record(client: TestClient) -> None:
    """场景 4：修改分组后按新分组可见"""
    created = _create(client, "工作用语")

    resp = client.put(f"/api/sentences/{created['id']}", json={"group": "work"})

    assert resp.status_code == 200
    assert resp.json() == {"message": "更新成功"}
    _assert_api_headers(resp, ITEM_METHODS)

    work_ids = [item["id"] for item in client.get("/api/sentences", params={"group": "work"}).json()]
    default_ids = [item["id"] for item in client.get("/api/sentences", params={"group": "默认"}).json()]
    assert created["id"] in work_ids
    assert created["id"] not in default_ids

    all_ids = [item["id"] for item in client.get("/api/sentences", params={"group": "全部"}).json()]
    assert created["id"] in all_ids


def test_update_keeps_content_and_copy_count(client: TestClient) -> None:
    created = _create(client, "保持不变")
    client.post(f"/api/sentences/{created['id']}/copy")

    resp = client.put(f"/api/sentences/{created['id']}", json={})
    assert resp.status_code == 200

    record = next(item for item in client.get("/api/sentences").json() if item["id"] == created["id"])
    assert record["content"] == "保持不变"
    assert record["copy_count"] == 1
    assert record["created_at"] == created["created_at"]


def test_delete_then_not_found(client: TestClient) -> None:
    """场景 5：重复删除返回 404"""
    created = _create(client, "bye")

    resp = client.delete(f"/api/sentences/{created['id']}")
    assert resp.status_code == 200
    assert resp.json() == {"message": "删除成功"}

    resp = client.delete(f"/api/sentences/{created['id']}")
    assert resp.status_code == 404
    assert resp.text == "句子不存在"
    _assert_api_headers(resp, ITEM_METHODS)


@pytest.mark.parametrize(
    "method, path",
    [
        ("PUT", "/api/sentences/999"),
        ("DELETE", "/api/sentences/999"),
        ("POST", "/api/sentences/999/copy"),
    ],
)
def test_unknown_id_returns_404(client: TestClient, method: str, path: str) -> None:
    resp = client.request(method, path, json={"content": "x"})

    assert resp.status_code == 404
    assert resp.text == "句子不存在"


def test_empty_content_returns_400(client: TestClient) -> None:
    """场景 6：内容为空"""
    before = client.get("/api/sentences").json()

    resp = client.post("/api/sentences", json={"content": ""})

    assert resp.status_code == 400
    assert resp.text == "内容不能为空"
    _assert_api_headers(resp, COLLECTION_METHODS)
    assert client.get("/api/sentences").json() == before


@pytest.mark.parametrize(
    "body",
    [
        b"{not json",
        b"",
        b"[1, 2]",
        b'{"content": 123}',
    ],
)
def test_malformed_body_returns_400(client: TestClient, body: bytes) -> None:
    """场景 6：请求体无法解析"""
    resp = client.post(
        "/api/sentences",
        content=body,
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 400
    assert resp.text.startswith("无效的请求数据")


def test_update_malformed_body_returns_400(client: TestClient) -> None:
    created = _create(client, "x")

    resp = client.put(
        f"/api/sentences/{created['id']}",
        content=b"oops",
        headers={"Content-Type": "application/json"},
    )

    assert resp.status_code == 400
    assert resp.text.startswith("无效的请求数据")


@pytest.mark.parametrize(
    "method, path",
    [
        ("PUT", "/api/sentences/abc"),
        ("DELETE", "/api/sentences/1.5"),
        ("POST", "/api/sentences/abc/copy"),
        ("GET", "/api/sentences/abc"),
        ("POST", "/api/sentences/"),
    ],
)
def test_invalid_id_returns_400(client: TestClient, method: str, path: str) -> None:
    resp = client.request(method, path)

    assert resp.status_code == 400
    assert resp.text == "无效的ID"
    _assert_api_headers(resp, ITEM_METHODS)


@pytest.mark.parametrize(
    "method, path, methods",
    [
        ("PUT", "/api/sentences", COLLECTION_METHODS),
        ("DELETE", "/api/sentences", COLLECTION_METHODS),
        ("GET", "/api/sentences/1", ITEM_METHODS),
        ("POST", "/api/sentences/1", ITEM_METHODS),
        ("GET", "/api/sentences/1/copy", ITEM_METHODS),
    ],
)
def test_method_mismatch_returns_405(client: TestClient, method: str, path: str, methods: str) -> None:
    resp = client.request(method, path)

    assert resp.status_code == 405
    _assert_api_headers(resp, methods)


@pytest.mark.parametrize(
    "path, methods",
    [
        ("/api/sentences", COLLECTION_METHODS),
        ("/api/sentences/1", ITEM_METHODS),
        ("/api/sentences/1/copy", ITEM_METHODS),
    ],
)
def test_options_returns_cors_without_mutation(client: TestClient, data_file, path: str, methods: str) -> None:
    before = data_file.read_bytes()

    resp = client.options(path)

    assert resp.status_code == 200
    assert resp.content == b""
    _assert_api_headers(resp, methods)
    assert data_file.read_bytes() == before


def test_unknown_path_returns_404(client: TestClient) -> None:
    assert client.get("/nope").status_code == 404
    assert client.get("/api/unknown").status_code == 404


def test_root_serves_index(client: TestClient) -> None:
    resp = client.get("/")

    assert resp.status_code == 200
    assert "句子剪贴板" in resp.text


def test_static_files(client: TestClient) -> None:
    resp = client.get("/static/app.js")

    assert resp.status_code == 200
    assert "console.log" in resp.text
    assert client.get("/static/missing.js").status_code == 404


def test_health(client: TestClient) -> None:
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "healthy"}


def test_persistence_across_restart(settings) -> None:
    """场景 7：重启后顺序、复制次数和 ID 不变"""
    with TestClient(create_app(settings)) as client:
        _reset(client)
        a = _create(client, "A")
        b = _create(client, "B")
        c = _create(client, "C")
        client.post(f"/api/sentences/{b['id']}/copy")
        client.post(f"/api/sentences/{b['id']}/copy")
        client.post(f"/api/sentences/{a['id']}/copy")
        before = client.get("/api/sentences").json()

    with TestClient(create_app(settings)) as client:
        after = client.get("/api/sentences").json()
        assert after == before
        assert [item["id"] for item in after] == [b["id"], a["id"], c["id"]]
        assert [item["copy_count"] for item in after] == [2, 1, 0]

        # 下一个 ID 为现有最大 ID + 1
        assert _create(client, "D")["id"] == c["id"] + 1


def test_corrupt_snapshot_is_not_seeded_over(settings, data_file) -> None:
    data_file.write_text("garbage", encoding="utf-8")

    with TestClient(create_app(settings)) as client:
        assert client.get("/api/sentences").json() == []

    assert data_file.read_text(encoding="utf-8") == "garbage"
