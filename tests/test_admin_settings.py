from invoice_ma.models import Account, GlobalSetting


def _headers(account):
    return {"X-Account-Id": str(account.id)}


def test_admin_adds_credits(client, db_session, admin_account, make_account):
    account = make_account(credits=0, email="tenant@example.ma")

    response = client.post(
        f"/api/admin/users/{account.id}/credits",
        json={"amount": 10},
        headers=_headers(admin_account),
    )

    assert response.status_code == 200
    assert response.json() == {"credits": 10}
    db_session.expire_all()
    assert db_session.get(Account, account.id).credits == 10


def test_credit_top_up_must_be_positive(client, admin_account, make_account):
    account = make_account(email="tenant@example.ma")

    response = client.post(
        f"/api/admin/users/{account.id}/credits",
        json={"amount": 0},
        headers=_headers(admin_account),
    )

    assert response.status_code == 422


def test_credit_top_up_unknown_user(client, admin_account):
    response = client.post(
        "/api/admin/users/999/credits",
        json={"amount": 5},
        headers=_headers(admin_account),
    )

    assert response.status_code == 404
    assert response.json()["message"] == "User not found."


def test_non_admin_rejected(client, make_account):
    account = make_account(email="tenant@example.ma")

    response = client.post(
        f"/api/admin/users/{account.id}/credits",
        json={"amount": 10},
        headers=_headers(account),
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Admin access required."
    assert client.get("/api/admin/data", headers=_headers(account)).status_code == 403


def test_admin_data_lists_users_and_default_settings(
    client, admin_account, make_account
):
    make_account(email="tenant@example.ma")

    response = client.get("/api/admin/data", headers=_headers(admin_account))

    assert response.status_code == 200
    body = response.json()
    assert [user["email"] for user in body["users"]] == [
        admin_account.email,
        "tenant@example.ma",
    ]
    assert set(body["settings"]) == {
        "theme_settings",
        "global_notification",
        "admin_general_settings",
    }
    general = body["settings"]["admin_general_settings"]
    assert general["registration"] == {"allowRegistration": True, "initialCredits": 5}
    assert general["mail"]["pass"] == ""


def test_setting_update_merges_over_stored_value(client, db_session, admin_account):
    first = client.put(
        "/api/admin/settings/theme_settings",
        json={"primaryColor": "#111111", "colorMode": "dark"},
        headers=_headers(admin_account),
    )
    second = client.put(
        "/api/admin/settings/theme_settings",
        json={"fontFamily": "Cairo"},
        headers=_headers(admin_account),
    )

    assert first.status_code == 200
    assert second.status_code == 200
    theme = second.json()
    assert theme["primaryColor"] == "#111111"
    assert theme["colorMode"] == "dark"
    assert theme["fontFamily"] == "Cairo"
    assert theme["borderRadius"] == "lg"
    assert db_session.get(GlobalSetting, "theme_settings").value == theme


def test_invalid_setting_value_rejected(client, admin_account):
    response = client.put(
        "/api/admin/settings/theme_settings",
        json={"colorMode": "purple"},
        headers=_headers(admin_account),
    )

    assert response.status_code == 422
    assert "message" in response.json()


def test_unknown_setting_key(client, admin_account):
    response = client.get(
        "/api/admin/settings/not_a_setting", headers=_headers(admin_account)
    )

    assert response.status_code == 404


def test_admin_updates_tenant_company_settings(client, admin_account, make_account):
    account = make_account(email="tenant@example.ma")

    response = client.post(
        f"/api/admin/users/{account.id}/settings",
        json={"ice": "002233445000011", "invoice_number_prefix": "FAC-{YEAR}-"},
        headers=_headers(admin_account),
    )

    assert response.status_code == 200
    assert response.json()["ice"] == "002233445000011"
    assert response.json()["invoice_number_prefix"] == "FAC-{YEAR}-"


def test_registration_uses_general_settings(client, db_session, admin_account):
    client.put(
        "/api/admin/settings/admin_general_settings",
        json={
            "registration": {"allowRegistration": True, "initialCredits": 12},
            "defaultInvoice": {"currency": "EUR", "taxRate": "10"},
        },
        headers=_headers(admin_account),
    )

    response = client.post(
        "/api/accounts",
        json={
            "name": "Salma",
            "company_name": "Salma Design",
            "phone": "+212 611 111 111",
            "email": "Salma@Example.ma",
        },
    )

    assert response.status_code == 201
    assert response.json()["credits"] == 12
    assert response.json()["email"] == "salma@example.ma"
    account = db_session.get(Account, response.json()["id"])
    assert account.company_settings.name == "Salma Design"
    assert account.company_settings.default_currency.value == "EUR"


def test_registration_closed(client, admin_account):
    client.put(
        "/api/admin/settings/admin_general_settings",
        json={"registration": {"allowRegistration": False}},
        headers=_headers(admin_account),
    )

    response = client.post(
        "/api/accounts",
        json={
            "name": "Late",
            "company_name": "Late SARL",
            "phone": "0600000000",
            "email": "late@example.ma",
        },
    )

    assert response.status_code == 403
    assert response.json()["message"] == "Registration is currently disabled."


def test_duplicate_registration(client, make_account):
    make_account(email="taken@example.ma")

    response = client.post(
        "/api/accounts",
        json={
            "name": "Again",
            "company_name": "Again SARL",
            "phone": "0600000000",
            "email": "TAKEN@example.ma",
        },
    )

    assert response.status_code == 409
