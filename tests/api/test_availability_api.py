"""
API tests for the weekly availability calendar.
"""


def _book(client, headers, client_id, days, start, end):
    response = client.post(
        "/api/v1/schedules",
        json={"client_id": client_id, "days_of_week": days, "start_time": start, "end_time": end},
        headers=headers,
    )
    assert response.status_code == 201


def _spans(slots):
    return [(s["start_time"], s["end_time"]) for s in slots]


class TestAvailability:

    def test_empty_week(self, client, headers):
        data = client.get("/api/v1/availability", headers=headers).json()

        assert (data["working_day_start"], data["working_day_end"]) == ("06:00", "22:00")
        assert data["min_free_slot_minutes"] == 30
        assert [d["day_name"] for d in data["days"]] == [
            "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
        ]
        for day in data["days"]:
            assert day["booked"] == []
            assert day["free"] == [{"start_time": "06:00", "end_time": "22:00", "duration_minutes": 960}]

    def test_bookings_across_clients(self, client, headers, new_client):
        ana, ben = new_client(name="Ana"), new_client(name="Ben")
        _book(client, headers, ana, [1], "07:00", "08:00")
        _book(client, headers, ben, [1], "18:00", "19:00")
        _book(client, headers, ben, [1], "18:30", "19:00")

        monday = client.get("/api/v1/availability", headers=headers).json()["days"][1]

        assert [(b["client_name"], b["start_time"]) for b in monday["booked"]] == [
            ("Ana", "07:00"), ("Ben", "18:00"), ("Ben", "18:30"),
        ]
        assert _spans(monday["free"]) == [("06:00", "07:00"), ("08:00", "18:00"), ("19:00", "22:00")]

    def test_uses_configured_window(self, client, headers, settings, new_client):
        settings.working_day_start = "08:00"
        settings.working_day_end = "12:00"
        settings.min_free_slot_minutes = 60
        _book(client, headers, new_client(), [2], "09:00", "10:30")

        data = client.get("/api/v1/availability", headers=headers).json()

        assert data["min_free_slot_minutes"] == 60
        assert _spans(data["days"][2]["free"]) == [("08:00", "09:00"), ("10:30", "12:00")]

    def test_other_trainers_bookings_are_excluded(self, client, headers, new_client):
        _book(client, headers, new_client(), [1], "06:00", "22:00")

        data = client.get("/api/v1/availability", headers={**headers, "X-User-Id": "trainer-2"}).json()

        assert data["days"][1]["booked"] == []
        assert len(data["days"][1]["free"]) == 1
