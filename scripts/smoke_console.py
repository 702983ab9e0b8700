# Integration smoke test for a running console + backend
# Run:  python scripts/smoke_console.py
# Needs: CONSOLE_URL (default http://127.0.0.1:8100), CRISMA_USERNAME, CRISMA_PASSWORD

import os, sys
import requests

BASE = os.getenv("CONSOLE_URL", "http://127.0.0.1:8100")
USER = os.getenv("CRISMA_USERNAME", "admin")
PASSWORD = os.getenv("CRISMA_PASSWORD", "")


def main():
    print(f"→ Using console {BASE}")
    s = requests.Session()

    r = s.get(f"{BASE}/health"); r.raise_for_status()
    h = r.json()
    print(f"✓ Health {h['status']} (backend {h['backend']['status']})")
    if not h["backend"]["status"] == "ok":
        sys.exit("✗ Backend is not reachable from the console")

    if h["session"] != "active":
        r = s.post(f"{BASE}/session/login", json={"username": USER, "password": PASSWORD})
        if r.status_code != 200:
            sys.exit(f"✗ Login failed: {r.status_code} {r.text}")
        print(f"✓ Logged in as {r.json()['user']['username']}")

    r = s.get(f"{BASE}/dashboard"); r.raise_for_status()
    stats = r.json()["stats"]
    print(f"✓ Dashboard: {stats['participant_count']} participants, "
          f"{stats['catechist_count']} catechists, {stats['active_group_count']} active groups")

    r = s.get(f"{BASE}/participants", params={"refresh": "true"}); r.raise_for_status()
    people = r.json()
    names = [p["full_name"] for p in people["items"]]
    assert names == sorted(names, key=str.casefold), "participants not sorted by name"
    print(f"✓ Participants: {people['total']} loaded, sorted")

    if names:
        q = names[0][:3]
        r = s.get(f"{BASE}/participants", params={"q": q}); r.raise_for_status()
        hits = r.json()["items"]
        assert all(q.lower() in p["full_name"].lower() for p in hits), "search returned non-matches"
        print(f"✓ Search '{q}' → {len(hits)} hit(s)")

    r = s.get(f"{BASE}/groups"); r.raise_for_status()
    groups = r.json()["items"]
    print(f"✓ Groups: {len(groups)}")
    if groups:
        gid = groups[0]["id"]
        r = s.get(f"{BASE}/groups/{gid}"); r.raise_for_status()
        g = r.json()
        member_ids = {m["id"] for m in g["members"]}
        cand_ids = {c["id"] for c in g["available_candidates"]}
        assert not (member_ids & cand_ids), "candidate list overlaps members"
        print(f"✓ Group {gid}: {len(member_ids)} members, {len(cand_ids)} candidates")

    r = s.get(f"{BASE}/catechists"); r.raise_for_status()
    print(f"✓ Catechists: {r.json()['total']}")

    print("✅ Console smoke passed")


if __name__ == "__main__":
    main()
