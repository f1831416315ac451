"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test participant cap under contention
  locust -f locustfile.py --tags throughput   # Test event page reads
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests
"""

import random
import string
from locust import HttpUser, task, between, tag, events
from datetime import datetime, timezone, timedelta

# Shared state
EVENT_IDS = []
CONCURRENCY_EVENT_ID = None

CONCURRENCY_GROUP_SIZE_LIMIT = 3
CONCURRENCY_MAX_PARTICIPANTS = 10


def random_name(prefix: str) -> str:
    return f"{prefix} " + "".join(random.choices(string.ascii_lowercase, k=6))


def random_email():
    return f"load_{random.randint(10000, 99999)}@example.com"


def future_date() -> str:
    return (datetime.now(timezone.utc) + timedelta(days=30)).isoformat()


def group_payload(event_id: str, size: int) -> dict:
    return {
        "event_id": event_id,
        "creator_name": random_name("Creator"),
        "creator_email": random_email(),
        "group_name": random_name("Group"),
        "accepts_others": random.random() < 0.5,
        "members": [{"name": random_name("Member")} for _ in range(size)],
    }


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    """Setup: Create event with a small participant cap for the concurrency test."""
    print("\n" + "="*60)
    print("SETUP: Creating concurrency test event...")
    print("="*60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - 100 users -> 10 places

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify:
      GET /api/events/<id>  ->  total_participants
    Should be <= 10
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        if CONCURRENCY_EVENT_ID:
            return
        resp = self.client.post("/api/events", json={
            "name": "Concurrency Test Event",
            "date_time": future_date(),
            "location": "Load Test Hall",
            "group_size_limit": CONCURRENCY_GROUP_SIZE_LIMIT,
            "max_participants": CONCURRENCY_MAX_PARTICIPANTS,
        })
        if resp.status_code == 201 and not CONCURRENCY_EVENT_ID:
            globals()["CONCURRENCY_EVENT_ID"] = resp.json()["id"]
            print(f"\nCreated event {CONCURRENCY_EVENT_ID} with {CONCURRENCY_MAX_PARTICIPANTS} places\n")

    @tag("concurrency")
    @task
    def register_group(self):
        """All users fight for the same 10 places."""
        if not CONCURRENCY_EVENT_ID:
            return

        size = random.randint(1, CONCURRENCY_GROUP_SIZE_LIMIT)
        with self.client.post("/api/groups",
            json=group_payload(CONCURRENCY_EVENT_ID, size),
            name="/api/groups [contended]",
            catch_response=True
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            elif resp.status_code == 409:
                resp.success()  # Expected: event full or version conflict
            else:
                resp.failure(f"Unexpected: {resp.status_code}")

    @tag("concurrency")
    @task
    def verify_cap(self):
        """The participant total never exceeds the cap."""
        if not CONCURRENCY_EVENT_ID:
            return

        with self.client.get(f"/api/events/{CONCURRENCY_EVENT_ID}",
            name="/api/events/{id} [verify]",
            catch_response=True
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Unexpected: {resp.status_code}")
            elif resp.json()["total_participants"] > CONCURRENCY_MAX_PARTICIPANTS:
                resp.failure(f"Over capacity: {resp.json()['total_participants']}")
            else:
                resp.success()


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Event page reads

    Run: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s

    Compare:
      - Avg response time of the JSON endpoint vs the rendered page
      - Requests/sec
      - P95/P99 latency
    """
    wait_time = between(0.1, 0.5)

    def on_start(self):
        if EVENT_IDS:
            return
        resp = self.client.post("/api/events", json={
            "name": random_name("Throughput"),
            "date_time": future_date(),
            "location": "Load Test Hall",
            "group_size_limit": 5,
            "max_participants": 1000,
        })
        if resp.status_code == 201:
            event_id = resp.json()["id"]
            EVENT_IDS.append(event_id)
            for _ in range(20):
                self.client.post("/api/groups", json=group_payload(event_id, random.randint(1, 5)))

    @tag("throughput", "read")
    @task(5)
    def list_events(self):
        page = random.randint(1, 5)
        self.client.get(f"/api/events?page={page}&limit=20", name="/api/events")

    @tag("throughput", "read")
    @task(5)
    def get_event_groups(self):
        if EVENT_IDS:
            event_id = random.choice(EVENT_IDS)
            self.client.get(f"/api/events/{event_id}/groups", name="/api/events/{id}/groups")

    @tag("throughput", "read")
    @task(3)
    def event_page(self):
        """Rendered page: two in-process API calls plus templating."""
        if EVENT_IDS:
            event_id = random.choice(EVENT_IDS)
            query = random.choice(["", "group", "zzz"])
            status = random.choice(["all", "open", "closed"])
            self.client.get(f"/event/{event_id}?q={query}&status={status}", name="/event/{id}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        """Monitor system health."""
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def _expect(self, resp, statuses):
        if resp.status_code in statuses:
            resp.success()
        else:
            resp.failure(f"Expected {statuses}, got {resp.status_code}")

    @tag("edge")
    @task
    def invalid_event_id(self):
        """Register for a non-existent event."""
        with self.client.post("/api/groups",
            json=group_payload("no-such-event", 1),
            catch_response=True
        ) as resp:
            self._expect(resp, [404])

    @tag("edge")
    @task
    def empty_roster_name(self):
        """Member names shorter than two characters."""
        payload = group_payload("no-such-event", 1)
        payload["members"] = [{"name": "x"}]
        with self.client.post("/api/groups", json=payload, catch_response=True) as resp:
            self._expect(resp, [422])

    @tag("edge")
    @task
    def zero_group_size(self):
        """Event with a group size limit of zero."""
        with self.client.post("/api/events",
            json={
                "name": "Broken Event",
                "date_time": future_date(),
                "location": "Nowhere",
                "group_size_limit": 0,
                "max_participants": 10,
            },
            catch_response=True
        ) as resp:
            self._expect(resp, [422])

    @tag("edge")
    @task
    def huge_roster(self):
        """Register an absurd number of members."""
        if not CONCURRENCY_EVENT_ID:
            return
        with self.client.post("/api/groups",
            json=group_payload(CONCURRENCY_EVENT_ID, 500),
            name="/api/groups [huge]",
            catch_response=True
        ) as resp:
            self._expect(resp, [400, 409])

    @tag("edge")
    @task
    def malformed_json(self):
        """Send garbage data."""
        with self.client.post("/api/groups",
            data="not json at all",
            headers={"Content-Type": "application/json"},
            catch_response=True
        ) as resp:
            self._expect(resp, [400, 422])

    @tag("edge")
    @task
    def missing_group(self):
        with self.client.delete("/api/groups/999999", catch_response=True) as resp:
            self._expect(resp, [404])
