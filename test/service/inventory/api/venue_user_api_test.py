import pytest

from inventory_test_constants import EVENT_END, EVENT_START


@pytest.mark.api
class TestUserApi:
    async def test_bootstrap_first_admin(self, async_client) -> None:
        # Given: an empty database
        # When: the first user registers as admin without an actor
        response = await async_client.post(
            '/users', json={'email': 'Root@Example.com', 'name': 'Root', 'role': 'admin'}
        )

        # Then
        assert response.status_code == 201
        admin = response.json()
        assert admin['email'] == 'root@example.com'
        assert admin['role'] == 'admin'

        # And: the next organizer needs that admin
        response = await async_client.post(
            '/users', json={'email': 'org@example.com', 'role': 'organizer'}
        )
        assert response.status_code == 403

        response = await async_client.post(
            '/users',
            json={'email': 'org@example.com', 'role': 'organizer'},
            headers={'X-User-Id': str(admin['id'])},
        )
        assert response.status_code == 201

    async def test_attendee_self_registration(self, async_client, admin) -> None:
        response = await async_client.post('/users', json={'email': 'fan@example.com'})

        assert response.status_code == 201
        assert response.json()['role'] == 'attendee'

    async def test_change_role(self, async_client, admin, attendee, auth_headers) -> None:
        forbidden = await async_client.patch(
            f'/users/{attendee.id}/role', json={'role': 'admin'}, headers=auth_headers(attendee)
        )
        promoted = await async_client.patch(
            f'/users/{attendee.id}/role', json={'role': 'organizer'}, headers=auth_headers(admin)
        )

        assert forbidden.status_code == 403
        assert promoted.status_code == 200
        assert promoted.json()['role'] == 'organizer'

    async def test_get_user(self, async_client, attendee, auth_headers) -> None:
        response = await async_client.get(f'/users/{attendee.id}', headers=auth_headers(attendee))
        missing = await async_client.get('/users/9999', headers=auth_headers(attendee))

        assert response.status_code == 200
        assert response.json()['email'] == attendee.email
        assert missing.status_code == 404


@pytest.mark.api
class TestVenueApi:
    async def test_create_and_get(self, async_client, organizer, auth_headers) -> None:
        response = await async_client.post(
            '/venues', json={'name': 'Harbour Arena', 'capacity': 1200}, headers=auth_headers(organizer)
        )
        assert response.status_code == 201
        venue = response.json()
        assert venue['status'] == 'active'

        response = await async_client.get(f'/venues/{venue["id"]}')
        assert response.status_code == 200
        assert response.json()['capacity'] == 1200

    async def test_invalid_capacity(self, async_client, organizer, auth_headers) -> None:
        response = await async_client.post(
            '/venues', json={'name': 'Closet', 'capacity': 0}, headers=auth_headers(organizer)
        )

        assert response.status_code == 422

    async def test_availability(self, async_client, seed, organizer, venue) -> None:
        event = await seed.event(organizer=organizer, venue=venue)

        by_day = await async_client.get(
            f'/venues/{venue.id}/availability', params={'date': '2026-03-15'}
        )
        by_window = await async_client.get(
            f'/venues/{venue.id}/availability',
            params={'start': EVENT_END.isoformat(), 'end': '2026-03-15T23:30:00+00:00'},
        )
        overlapping = await async_client.get(
            f'/venues/{venue.id}/availability',
            params={'start': EVENT_START.isoformat(), 'end': EVENT_END.isoformat()},
        )

        assert by_day.status_code == 200
        assert [b['event_id'] for b in by_day.json()['bookings']] == [event.id]
        assert by_day.json()['has_conflict'] is None
        assert by_window.json()['has_conflict'] is False
        assert overlapping.json()['has_conflict'] is True

    async def test_availability_needs_a_query(self, async_client, venue) -> None:
        response = await async_client.get(f'/venues/{venue.id}/availability')

        assert response.status_code == 422

    async def test_close_and_delete(
        self, async_client, seed, organizer, venue, auth_headers
    ) -> None:
        await seed.event(organizer=organizer, venue=venue)

        blocked = await async_client.delete(f'/venues/{venue.id}', headers=auth_headers(organizer))
        closed = await async_client.patch(
            f'/venues/{venue.id}/status', json={'status': 'closed'}, headers=auth_headers(organizer)
        )
        empty = await seed.venue(name='Empty Hall')
        deleted = await async_client.delete(f'/venues/{empty.id}', headers=auth_headers(organizer))

        assert blocked.status_code == 409
        assert closed.status_code == 200
        assert closed.json()['status'] == 'closed'
        assert deleted.status_code == 204
        assert (await async_client.get(f'/venues/{empty.id}')).status_code == 404


@pytest.mark.api
class TestPlatformEndpoints:
    async def test_health(self, async_client) -> None:
        response = await async_client.get('/health')

        assert response.status_code == 200
        assert response.json()['status'] == 'healthy'

    async def test_metrics(self, async_client) -> None:
        response = await async_client.get('/metrics')

        assert response.status_code == 200
        assert 'inventory_ticket_purchases_total' in response.text
