"""Tests for the PokeLeague HTTP API.

Every test gets a freshly seeded league: six Pokemon, eight trainers, three
battles and the ``admin`` / ``trainer`` sample accounts.
"""

import pytest


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


class TestAuthEndpoints:
    """Tests for /api/auth."""

    def test_register(self, client):
        resp = client.post(
            "/api/auth/register",
            json={
                "username": "newuser",
                "password": "password123",
                "confirm_password": "password123",
                "email": "newuser@example.com",
            },
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["token"]
        assert data["user"]["username"] == "newuser"
        assert data["user"]["role"] == "User"
        assert "password_hash" not in data["user"]

    def test_register_duplicate_username_conflicts(self, client):
        resp = client.post(
            "/api/auth/register",
            json={
                "username": "ADMIN",
                "password": "password123",
                "confirm_password": "password123",
                "email": "someone@example.com",
            },
        )
        assert resp.status_code == 409

    def test_register_invalid(self, client):
        resp = client.post(
            "/api/auth/register",
            json={
                "username": "ab",
                "password": "password123",
                "confirm_password": "password123",
                "email": "ab@example.com",
            },
        )
        assert resp.status_code == 400
        assert "Username" in resp.json()["detail"]

    def test_login(self, client):
        resp = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["user"]["role"] == "Admin"
        assert data["user"]["last_login_at"] is not None
        assert data["expires_at"]

    def test_login_wrong_password(self, client):
        resp = client.post("/api/auth/login", json={"username": "admin", "password": "wrong"})
        assert resp.status_code == 401
        assert resp.headers["www-authenticate"] == "Bearer"

    def test_login_empty_fields(self, client):
        resp = client.post("/api/auth/login", json={"username": "", "password": ""})
        assert resp.status_code == 400

    def test_oauth2_token_form(self, client):
        resp = client.post("/api/auth/token", data={"username": "trainer", "password": "trainer123"})
        assert resp.status_code == 200
        assert resp.json()["token_type"] == "bearer"
        assert resp.json()["access_token"]

    def test_validate(self, client, trainer_headers):
        resp = client.get("/api/auth/validate", headers=trainer_headers)
        assert resp.status_code == 200
        data = resp.json()
        assert data["valid"] is True
        assert data["username"] == "trainer"
        assert data["role"] == "Trainer"

    def test_validate_without_token(self, client):
        assert client.get("/api/auth/validate").status_code == 401

    def test_validate_bad_token(self, client):
        resp = client.get("/api/auth/validate", headers={"Authorization": "Bearer garbage"})
        assert resp.status_code == 401

    def test_refresh(self, client, trainer_headers):
        resp = client.post("/api/auth/refresh", headers=trainer_headers)
        assert resp.status_code == 200
        assert resp.json()["user"]["username"] == "trainer"

    def test_me(self, client, admin_headers):
        resp = client.get("/api/auth/me", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["username"] == "admin"

    def test_change_password(self, client, trainer_headers):
        resp = client.post(
            "/api/auth/change-password",
            json={"current_password": "trainer123", "new_password": "newsecret1"},
            headers=trainer_headers,
        )
        assert resp.status_code == 204
        resp = client.post("/api/auth/login", json={"username": "trainer", "password": "newsecret1"})
        assert resp.status_code == 200

    def test_change_password_wrong_current(self, client, trainer_headers):
        resp = client.post(
            "/api/auth/change-password",
            json={"current_password": "nope", "new_password": "newsecret1"},
            headers=trainer_headers,
        )
        assert resp.status_code == 400


class TestAdminEndpoints:
    def test_list_users_as_admin(self, client, admin_headers):
        resp = client.get("/api/auth/users", headers=admin_headers)
        assert resp.status_code == 200
        assert {u["username"] for u in resp.json()} == {"admin", "trainer"}

    def test_list_users_forbidden_for_trainer(self, client, trainer_headers):
        resp = client.get("/api/auth/users", headers=trainer_headers)
        assert resp.status_code == 403
        assert "permission" in resp.json()["detail"]

    def test_update_role(self, client, admin_headers):
        resp = client.put("/api/auth/users/2/role", json={"role": "Admin"}, headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["role"] == "Admin"

    def test_update_role_unknown_user(self, client, admin_headers):
        resp = client.put("/api/auth/users/99/role", json={"role": "Admin"}, headers=admin_headers)
        assert resp.status_code == 404

    def test_update_role_invalid(self, client, admin_headers):
        resp = client.put("/api/auth/users/2/role", json={"role": "Champion"}, headers=admin_headers)
        assert resp.status_code == 400


class TestPokemonEndpoints:
    """Tests for /api/pokemon."""

    def test_requires_token(self, client):
        assert client.get("/api/pokemon").status_code == 401

    def test_list(self, client, user_headers):
        resp = client.get("/api/pokemon", headers=user_headers)
        assert resp.status_code == 200
        assert len(resp.json()) == 6

    def test_get_by_id_and_name(self, client, user_headers):
        assert client.get("/api/pokemon/1", headers=user_headers).json()["name"] == "Pikachu"
        assert client.get("/api/pokemon/name/psyduck", headers=user_headers).json()["id"] == 6
        assert client.get("/api/pokemon/999", headers=user_headers).status_code == 404

    def test_queries(self, client, user_headers):
        electric = client.get("/api/pokemon/type/Electric", headers=user_headers).json()
        assert {p["name"] for p in electric} == {"Pikachu", "Raichu"}
        levels = client.get("/api/pokemon/level", params={"min": 40, "max": 50}, headers=user_headers).json()
        assert {p["name"] for p in levels} == {"Charizard", "Blastoise", "Venusaur"}
        static = client.get("/api/pokemon/ability/static", headers=user_headers).json()
        assert len(static) == 2

    def test_level_range_inverted(self, client, user_headers):
        resp = client.get("/api/pokemon/level", params={"min": 50, "max": 10}, headers=user_headers)
        assert resp.status_code == 400

    def test_create_update_delete(self, client, user_headers):
        resp = client.post(
            "/api/pokemon",
            json={"name": "Eevee", "type": "Normal", "level": 10, "ability": "Adaptability"},
            headers=user_headers,
        )
        assert resp.status_code == 201
        pokemon_id = resp.json()["id"]
        assert pokemon_id == 7

        resp = client.put(
            f"/api/pokemon/{pokemon_id}",
            json={"name": "Vaporeon", "type": "Water", "level": 30, "ability": "Water Absorb"},
            headers=user_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["name"] == "Vaporeon"

        assert client.delete(f"/api/pokemon/{pokemon_id}", headers=user_headers).status_code == 204
        assert client.get(f"/api/pokemon/{pokemon_id}", headers=user_headers).status_code == 404

    def test_create_invalid_level(self, client, user_headers):
        resp = client.post("/api/pokemon", json={"name": "Eevee", "level": 101}, headers=user_headers)
        assert resp.status_code == 400

    def test_level_up_and_ability(self, client, user_headers):
        assert client.patch("/api/pokemon/1/level-up", headers=user_headers).json()["level"] == 26
        resp = client.patch("/api/pokemon/1/ability", json={"ability": "Lightning Rod"}, headers=user_headers)
        assert resp.json()["ability"] == "Lightning Rod"


class TestTrainerEndpoints:
    """Tests for /api/trainer."""

    def test_list_needs_trainer_or_admin(self, client, user_headers, trainer_headers, admin_headers):
        assert client.get("/api/trainer", headers=user_headers).status_code == 403
        assert len(client.get("/api/trainer", headers=trainer_headers).json()) == 8
        assert client.get("/api/trainer", headers=admin_headers).status_code == 200

    def test_lookups(self, client, user_headers):
        assert client.get("/api/trainer/1", headers=user_headers).json()["name"] == "Ash Ketchum"
        assert client.get("/api/trainer/name/misty", headers=user_headers).json()["id"] == 2
        kanto = client.get("/api/trainer/region/Kanto", headers=user_headers).json()
        assert len(kanto) == 4
        assert client.get("/api/trainer/99", headers=user_headers).status_code == 404

    def test_create_update_delete(self, client, user_headers):
        resp = client.post(
            "/api/trainer",
            json={"name": "Iris", "age": 10, "region": "Unova", "badge_count": 0},
            headers=user_headers,
        )
        assert resp.status_code == 201
        trainer_id = resp.json()["id"]

        resp = client.put(
            f"/api/trainer/{trainer_id}",
            json={"name": "Iris", "age": 11, "region": "Unova", "badge_count": 8},
            headers=user_headers,
        )
        assert resp.json()["badge_count"] == 8
        assert client.delete(f"/api/trainer/{trainer_id}", headers=user_headers).status_code == 204

    def test_create_invalid(self, client, user_headers):
        resp = client.post("/api/trainer", json={"name": "Iris", "age": -1}, headers=user_headers)
        assert resp.status_code == 400

    def test_team_management(self, client, user_headers):
        resp = client.post("/api/trainer/2/pokemon", json={"pokemon_id": 6}, headers=user_headers)
        assert resp.status_code == 200
        assert [p["name"] for p in resp.json()["pokemon_team"]] == ["Psyduck"]

        resp = client.delete("/api/trainer/2/pokemon/6", headers=user_headers)
        assert resp.json()["pokemon_team"] == []
        assert client.delete("/api/trainer/2/pokemon/6", headers=user_headers).status_code == 404

    def test_team_full(self, client, user_headers):
        for _ in range(5):
            client.post("/api/trainer/1/pokemon", json={"pokemon_id": 2}, headers=user_headers)
        resp = client.post("/api/trainer/1/pokemon", json={"pokemon_id": 3}, headers=user_headers)
        assert resp.status_code == 400

    def test_statistics(self, client, user_headers):
        stats = client.get("/api/trainer/1/statistics", headers=user_headers).json()
        assert stats["total_battles"] == 2
        assert (stats["wins"], stats["losses"], stats["draws"]) == (1, 1, 0)
        assert stats["win_rate"] == 0.5
        assert stats["favorite_opponent"] == "Misty"

    def test_battles(self, client, user_headers):
        assert len(client.get("/api/trainer/1/battles", headers=user_headers).json()) == 2
        assert len(client.get("/api/trainer/4/battles/1", headers=user_headers).json()) == 1
        assert client.get("/api/trainer/99/battles", headers=user_headers).status_code == 404


class TestBattleEndpoints:
    """Tests for /api/battle."""

    def test_list_and_get(self, client, user_headers):
        assert len(client.get("/api/battle", headers=user_headers).json()) == 3
        battle = client.get("/api/battle/1", headers=user_headers).json()
        assert battle["location"] == "Cerulean City Gym"
        assert battle["result"] == "Completed"
        assert client.get("/api/battle/99", headers=user_headers).status_code == 404

    def test_recent(self, client, user_headers):
        assert len(client.get("/api/battle/recent", params={"days": 5}, headers=user_headers).json()) == 2
        assert len(client.get("/api/battle/recent", headers=user_headers).json()) == 3
        assert client.get("/api/battle/recent", params={"days": -1}, headers=user_headers).status_code == 400

    def test_summary(self, client, user_headers):
        summary = client.get("/api/battle/statistics", headers=user_headers).json()
        assert summary["total_battles"] == 3
        assert summary["completed_battles"] == 2
        assert summary["draw_battles"] == 1

    def test_lifecycle(self, client, user_headers):
        resp = client.post(
            "/api/battle",
            json={"trainer1_id": 2, "trainer2_id": 3, "location": "Pewter Gym"},
            headers=user_headers,
        )
        assert resp.status_code == 201
        battle = resp.json()
        assert battle["result"] == "InProgress"
        battle_id = battle["id"]

        assert client.patch(f"/api/battle/{battle_id}/start", headers=user_headers).status_code == 200

        resp = client.post(
            f"/api/battle/{battle_id}/rounds",
            json={"pokemon1_id": 6, "pokemon2_id": 4, "winner_pokemon_id": 4, "description": "Vine Whip"},
            headers=user_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["rounds"][0]["winner_pokemon_name"] == "Venusaur"

        resp = client.patch(f"/api/battle/{battle_id}/winner", json={"winner_id": 3}, headers=user_headers)
        assert resp.json()["result"] == "Completed"
        assert resp.json()["winner_name"] == "Brock"

        resp = client.post(
            f"/api/battle/{battle_id}/rounds",
            json={"pokemon1_id": 6, "pokemon2_id": 4},
            headers=user_headers,
        )
        assert resp.status_code == 400

        resp = client.patch(f"/api/battle/{battle_id}/notes", json={"notes": "Rematch soon"}, headers=user_headers)
        assert resp.json()["notes"] == "Rematch soon"

        assert client.delete(f"/api/battle/{battle_id}", headers=user_headers).status_code == 204

    def test_create_against_self(self, client, user_headers):
        resp = client.post("/api/battle", json={"trainer1_id": 1, "trainer2_id": 1}, headers=user_headers)
        assert resp.status_code == 400

    def test_create_unknown_trainer(self, client, user_headers):
        resp = client.post("/api/battle", json={"trainer1_id": 1, "trainer2_id": 99}, headers=user_headers)
        assert resp.status_code == 404

    def test_winner_not_participant(self, client, user_headers):
        battle_id = client.post(
            "/api/battle", json={"trainer1_id": 2, "trainer2_id": 3}, headers=user_headers
        ).json()["id"]
        resp = client.patch(f"/api/battle/{battle_id}/winner", json={"winner_id": 5}, headers=user_headers)
        assert resp.status_code == 400

    @pytest.mark.parametrize("action", ["draw", "cancel"])
    def test_finished_battle_rejects_changes(self, client, user_headers, action):
        battle_id = client.post(
            "/api/battle", json={"trainer1_id": 2, "trainer2_id": 3}, headers=user_headers
        ).json()["id"]
        assert client.patch(f"/api/battle/{battle_id}/{action}", headers=user_headers).status_code == 200
        assert client.patch(f"/api/battle/{battle_id}/draw", headers=user_headers).status_code == 400
        assert client.patch(f"/api/battle/{battle_id}/cancel", headers=user_headers).status_code == 400


class TestMonitoring:
    def test_statistics_counts_requests(self, client, user_headers):
        client.get("/api/pokemon", headers=user_headers)
        client.get("/api/pokemon", headers=user_headers)
        resp = client.get("/api/monitoring/statistics", headers=user_headers)
        assert resp.status_code == 200
        report = resp.json()
        endpoints = {e["endpoint"]: e for e in report["endpoints"]}
        assert endpoints["GET /api/pokemon"]["count"] == 2
        assert endpoints["GET /api/pokemon"]["error_count"] == 0
        assert report["total_requests"] >= 3

    def test_requires_token(self, client):
        assert client.get("/api/monitoring/statistics").status_code == 401
