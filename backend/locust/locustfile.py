"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags crud         # Create/read/update/delete cycle
  locust -f locustfile.py --tags throughput   # Read-heavy listing
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import random
from datetime import datetime, timezone, timedelta

from locust import HttpUser, task, between, tag

# Shared state
EVENT_IDS = []


def future_date():
    when = datetime.now(timezone.utc) + timedelta(days=random.randint(1, 90))
    return when.strftime("%Y-%m-%dT%H:%M:%SZ")


def event_payload():
    return {
        "title": f"Event {random.randint(1, 10000)}",
        "date": future_date(),
        "location": "Venue",
        "description": "Load test event",
    }


class CrudUser(HttpUser):
    """
    TEST 1: Full lifecycle per user

    Run: locust -f locustfile.py --tags crud -u 50 -r 10 --run-time 60s

    Every step must answer with its documented status; anything else is a failure.
    """
    wait_time = between(0.1, 0.5)

    @tag("crud")
    @task
    def lifecycle(self):
        resp = self.client.post("/events", json=event_payload())
        if resp.status_code != 201:
            return
        event_id = resp.json()["eventId"]
        EVENT_IDS.append(event_id)

        self.client.get(f"/events/{event_id}", name="/events/{id}")
        self.client.put(
            f"/events/{event_id}",
            json={"title": "Renamed", "location": None},
            name="/events/{id}",
        )
        self.client.post(
            f"/events/{event_id}/upload-url",
            json={"contentType": "image/jpeg"},
            name="/events/{id}/upload-url",
        )
        with self.client.delete(f"/events/{event_id}", name="/events/{id}", catch_response=True) as resp:
            if resp.status_code == 204:
                EVENT_IDS.remove(event_id)
                resp.success()
            else:
                resp.failure(f"Expected 204, got {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - listing and detail reads

    Run once per backend (STORE_BACKEND=sql, then redis) and compare:
      - Avg response time
      - Requests/sec
      - P95/P99 latency
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_events(self):
        resp = self.client.get("/events")
        if resp.status_code == 200:
            for event in resp.json().get("items", []):
                if event["eventId"] not in EVENT_IDS:
                    EVENT_IDS.append(event["eventId"])

    @tag("throughput", "read")
    @task(3)
    def get_event_detail(self):
        if EVENT_IDS:
            self.client.get(f"/events/{random.choice(EVENT_IDS)}", name="/events/{id}")

    @tag("throughput")
    @task(1)
    def create_event(self):
        self.client.post("/events", json=event_payload())

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def expect(self, resp, *codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_event(self):
        with self.client.get("/events/does-not-exist", name="/events/{id}", catch_response=True) as resp:
            self.expect(resp, 404)

    @tag("edge")
    @task
    def empty_title(self):
        with self.client.post("/events", json={"title": "   ", "date": future_date()}, catch_response=True) as resp:
            self.expect(resp, 400)

    @tag("edge")
    @task
    def impossible_date(self):
        with self.client.post("/events", json={"title": "x", "date": "2026-02-30"}, catch_response=True) as resp:
            self.expect(resp, 400)

    @tag("edge")
    @task
    def oversized_description(self):
        payload = {"title": "x", "date": future_date(), "description": "d" * 2001}
        with self.client.post("/events", json=payload, catch_response=True) as resp:
            self.expect(resp, 400)

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/events", data="not json at all", catch_response=True) as resp:
            self.expect(resp, 400)

    @tag("edge")
    @task
    def unsupported_upload_type(self):
        event_id = random.choice(EVENT_IDS) if EVENT_IDS else "missing"
        with self.client.post(
            f"/events/{event_id}/upload-url",
            json={"contentType": "application/pdf"},
            name="/events/{id}/upload-url",
            catch_response=True,
        ) as resp:
            self.expect(resp, 400)
