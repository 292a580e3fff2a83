"""
Acceptance smoke checks for sentence-clipboard.

Runs the end-to-end scenarios against a throwaway data file, so the real
./sentences.json is never touched.

Usage:
  PYTHONPATH=src python scripts/acceptance_smoke.py
  PYTHONPATH=src python scripts/acceptance_smoke.py --keep-data
"""

from __future__ import annotations

import argparse
import shutil
import sys
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from fastapi.testclient import TestClient


@dataclass
class CheckResult:
    name: str
    passed: bool
    detail: str


def _ok(name: str, detail: str) -> CheckResult:
    return CheckResult(name=name, passed=True, detail=detail)


def _fail(name: str, detail: str) -> CheckResult:
    return CheckResult(name=name, passed=False, detail=detail)


def run_check(name: str, fn: Callable[[], CheckResult]) -> CheckResult:
    try:
        return fn()
    except Exception as exc:  # pragma: no cover - smoke tool
        return _fail(name, f"exception: {exc}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Run acceptance smoke checks.")
    parser.add_argument(
        "--keep-data",
        action="store_true",
        help="Keep the temporary data directory and print its path.",
    )
    args = parser.parse_args()

    from sentence_clipboard.core import Settings
    from sentence_clipboard.main import create_app

    work_dir = Path(tempfile.mkdtemp(prefix="sentence-clipboard-smoke-"))
    static_dir = Path(__file__).resolve().parent.parent / "static"
    settings = Settings(
        data_file=str(work_dir / "sentences.json"),
        static_dir=str(static_dir),
    )
    results: list[CheckResult] = []
    ids: dict[str, int] = {}

    with TestClient(create_app(settings)) as client:

        def check_fresh_start() -> CheckResult:
            resp = client.get("/api/sentences")
            data = resp.json()
            if resp.status_code != 200 or len(data) != 2:
                return _fail("fresh start", f"status={resp.status_code}, body={resp.text[:200]}")
            if any(item["group"] != "默认" or item["copy_count"] != 0 for item in data):
                return _fail("fresh start", f"unexpected seed: {resp.text[:200]}")
            return _ok("fresh start", "two sample sentences seeded")

        def check_create() -> CheckResult:
            before = client.get("/api/sentences").json()
            resp = client.post("/api/sentences", json={"content": "hi"})
            if resp.status_code != 201:
                return _fail("create", f"status={resp.status_code}, body={resp.text[:200]}")
            created = resp.json()
            expected_id = max(item["id"] for item in before) + 1
            if created["id"] != expected_id or created["group"] != "默认":
                return _fail("create", f"unexpected record: {created}")
            return _ok("create", f"id={created['id']}")

        def check_ordering() -> CheckResult:
            for item in client.get("/api/sentences").json():
                client.delete(f"/api/sentences/{item['id']}")
            for name in ("A", "B", "C"):
                ids[name] = client.post("/api/sentences", json={"content": name}).json()["id"]
            client.post(f"/api/sentences/{ids['B']}/copy")
            client.post(f"/api/sentences/{ids['B']}/copy")
            client.post(f"/api/sentences/{ids['A']}/copy")
            order = [item["content"] for item in client.get("/api/sentences").json()]
            if order != ["B", "A", "C"]:
                return _fail("copy ordering", f"order={order}")
            return _ok("copy ordering", "B, A, C")

        def check_bad_input() -> CheckResult:
            empty = client.post("/api/sentences", json={"content": ""})
            broken = client.post(
                "/api/sentences",
                content=b"{oops",
                headers={"Content-Type": "application/json"},
            )
            if empty.status_code != 400 or empty.text != "内容不能为空":
                return _fail("bad input", f"empty content: {empty.status_code} {empty.text}")
            if broken.status_code != 400 or not broken.text.startswith("无效的请求数据"):
                return _fail("bad input", f"invalid json: {broken.status_code} {broken.text}")
            return _ok("bad input", "400 for empty content and invalid JSON")

        results.append(run_check("fresh start", check_fresh_start))
        results.append(run_check("create", check_create))
        results.append(run_check("copy ordering", check_ordering))
        results.append(run_check("bad input", check_bad_input))

    with TestClient(create_app(settings)) as client:

        def check_restart() -> CheckResult:
            data = client.get("/api/sentences").json()
            got = [(item["content"], item["id"], item["copy_count"]) for item in data]
            expected = [("B", ids["B"], 2), ("A", ids["A"], 1), ("C", ids["C"], 0)]
            if got != expected:
                return _fail("restart", f"got={got}")
            return _ok("restart", "order, ids and copy counts preserved")

        results.append(run_check("restart", check_restart))

    passed = sum(1 for item in results if item.passed)
    failed = len(results) - passed

    print("\nAcceptance Smoke Report")
    print("=" * 24)
    for item in results:
        status = "PASS" if item.passed else "FAIL"
        print(f"[{status}] {item.name}: {item.detail}")

    print("-" * 24)
    print(f"passed={passed}, failed={failed}, total={len(results)}")

    if args.keep_data:
        print(f"data kept in {work_dir}")
    else:
        shutil.rmtree(work_dir, ignore_errors=True)
    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
