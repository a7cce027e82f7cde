"""Tests for per-meter and tenant billing."""

from decimal import Decimal

from submeter.models import Tenant

METER_URL = "/api/billing/meters/{}/period-end/{}"
TENANT_URL = "/api/billing/tenants/{}/period-end/{}"


class TestMeterBilling:
    """Tests for the per-meter billing endpoint."""

    def test_ct_multiplier_with_vat_and_withholding(self, client, building, add_meter) -> None:
        """Test (101.50 - 100.00) x 80 at 10.00/kWh with 12% VAT and 1% WT."""
        add_meter(
            "MTR-CT",
            "STL-1",
            multiplier="80",
            readings={"2025-01-15": "100.00", "2025-02-10": "101.50"},
        )

        response = client.get(METER_URL.format("MTR-CT", "2025-02-20"))

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["meter"]["meter_type"] == "electric"
        assert data["stall"] == {
            "stall_id": "STL-1",
            "building_id": "BLDG-1",
            "tenant_id": "TNT-1",
        }
        assert data["tenant"]["vat_code"] == "V-12"
        assert data["indices"]["prev_date"] == "2025-01-15"
        assert data["indices"]["curr_date"] == "2025-02-10"
        billing = data["billing"]
        assert billing["consumption"] == "120.00"
        assert billing["base"] == "1200.00"
        assert billing["vat"] == "144.00"
        assert billing["wt"] == "1.44"
        assert billing["penalty"] == "0.00"
        assert billing["total"] == "1342.56"

    def test_period_uses_calendar_months(self, client, building, add_meter) -> None:
        """Test the reported windows are the month-to-date and the previous full month."""
        add_meter("MTR-1", "STL-1", readings={"2025-01-31": "10", "2025-02-20": "30"})

        data = client.get(METER_URL.format("MTR-1", "2025-02-20")).json()

        assert data["period"]["current"] == {"start": "2025-02-01", "end": "2025-02-20"}
        assert data["period"]["previous"] == {"start": "2025-01-01", "end": "2025-01-31"}

    def test_latest_reading_in_each_window_is_used(self, client, building, add_meter) -> None:
        """Test earlier readings and readings after the end date are ignored."""
        add_meter(
            "MTR-1",
            "STL-1",
            readings={
                "2025-01-05": "100",
                "2025-01-28": "110",
                "2025-02-03": "115",
                "2025-02-18": "130",
                "2025-02-25": "999",
            },
        )

        data = client.get(METER_URL.format("MTR-1", "2025-02-20")).json()

        assert data["indices"]["prev_index"] == "110.00"
        assert data["indices"]["curr_index"] == "130.00"
        assert data["billing"]["consumption"] == "20.00"

    def test_rollover_bills_minimum(self, client, building, add_meter) -> None:
        """Test a meter that wrapped around bills the building minimum."""
        add_meter("MTR-1", "STL-1", readings={"2025-01-31": "9999.00", "2025-02-15": "5.00"})

        billing = client.get(METER_URL.format("MTR-1", "2025-02-20")).json()["billing"]

        assert billing["consumption"] == "5.00"
        assert billing["base"] == "50.00"
        assert billing["vat"] == "6.00"
        assert billing["wt"] == "0.06"
        assert billing["total"] == "55.94"

    def test_fractional_vat_code_matches_whole_percent(
        self, client, test_db, building, add_meter
    ) -> None:
        """Test a VAT code stored as 0.12 bills the same as one stored as 12."""
        add_meter("MTR-1", "STL-1", readings={"2025-01-31": "100", "2025-02-15": "150"})
        whole = client.get(METER_URL.format("MTR-1", "2025-02-20")).json()["billing"]

        tenant = test_db.query(Tenant).filter(Tenant.id == "TNT-1").first()
        tenant.vat_code = "V-FRAC"
        test_db.commit()
        fraction = client.get(METER_URL.format("MTR-1", "2025-02-20")).json()["billing"]

        assert whole == fraction
        assert whole["vat"] == "60.00"

    def test_penalty_rate_for_flagged_tenant(self, client, building, add_meter) -> None:
        """Test the penalty applies to a penalty-subject tenant in either notation."""
        add_meter(
            "MTR-W", "STL-3", meter_type="water", readings={"2025-01-31": "10", "2025-02-15": "20"}
        )
        url = METER_URL.format("MTR-W", "2025-02-20")

        for rate in ("2", "0.02"):
            billing = client.get(url, params={"penalty_rate": rate}).json()["billing"]
            assert billing["base"] == "300.00"
            assert billing["vat"] == "0.00"
            assert billing["penalty"] == "6.00"
            assert billing["total"] == "306.00"

        billing = client.get(url).json()["billing"]
        assert billing["penalty"] == "0.00"
        assert billing["total"] == "300.00"

    def test_penalty_ignored_for_unflagged_tenant(self, client, building, add_meter) -> None:
        """Test tenants not subject to penalty never get one."""
        add_meter("MTR-1", "STL-1", readings={"2025-01-31": "100", "2025-02-15": "150"})

        billing = client.get(
            METER_URL.format("MTR-1", "2025-02-20"), params={"penalty_rate": "5"}
        ).json()["billing"]

        assert billing["penalty"] == "0.00"

    def test_negative_penalty_rate_rejected(self, client, building, add_meter) -> None:
        """Test a negative penalty rate fails request validation."""
        add_meter("MTR-1", "STL-1", readings={"2025-01-31": "100", "2025-02-15": "150"})

        response = client.get(
            METER_URL.format("MTR-1", "2025-02-20"), params={"penalty_rate": "-1"}
        )

        assert response.status_code == 422

    def test_invalid_end_date(self, client, building) -> None:
        """Test a malformed date is rejected before any lookup."""
        response = client.get(METER_URL.format("NOPE", "2025-2-20"))

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid end_date format. Use YYYY-MM-DD."

    def test_unknown_meter(self, client, building) -> None:
        """Test a missing meter is a 404."""
        response = client.get(METER_URL.format("NOPE", "2025-02-20"))

        assert response.status_code == 404
        assert response.json()["detail"] == "Meter not found"

    def test_meter_type_checked_before_stall(self, client, building, add_meter) -> None:
        """Test an unsupported type wins over a vacant stall."""
        add_meter(
            "MTR-X", "STL-4", meter_type="steam", readings={"2025-01-31": "1", "2025-02-15": "2"}
        )

        response = client.get(METER_URL.format("MTR-X", "2025-02-20"))

        assert response.status_code == 400
        assert response.json()["detail"] == "Unsupported meter type: steam"

    def test_unsupported_meter_type(self, client, building, add_meter) -> None:
        """Test an unknown stored meter type is a 400."""
        add_meter(
            "MTR-X", "STL-1", meter_type="steam", readings={"2025-01-31": "1", "2025-02-15": "2"}
        )

        response = client.get(METER_URL.format("MTR-X", "2025-02-20"))

        assert response.status_code == 400
        assert response.json()["detail"] == "Unsupported meter type: steam"

    def test_vacant_stall(self, client, building, add_meter) -> None:
        """Test a meter in a stall without a tenant cannot be billed."""
        add_meter("MTR-V", "STL-4", readings={"2025-01-31": "1", "2025-02-15": "2"})

        response = client.get(METER_URL.format("MTR-V", "2025-02-20"))

        assert response.status_code == 404
        assert response.json()["detail"] == "Stall has no tenant; nothing to bill"

    def test_missing_previous_reading(self, client, building, add_meter) -> None:
        """Test a meter without a reading last month is a 422 naming the window."""
        add_meter("MTR-1", "STL-1", readings={"2025-02-10": "100"})

        response = client.get(METER_URL.format("MTR-1", "2025-02-20"))

        assert response.status_code == 422
        assert response.json()["detail"] == "No readings for 2025-01-01..2025-01-31"

    def test_missing_current_reading(self, client, building, add_meter) -> None:
        """Test a meter without a reading this month is a 422 naming the window."""
        add_meter("MTR-1", "STL-1", readings={"2025-01-10": "100"})

        response = client.get(METER_URL.format("MTR-1", "2025-02-20"))

        assert response.status_code == 422
        assert response.json()["detail"] == "No readings for 2025-02-01..2025-02-20"

    def test_unknown_vat_code(self, client, test_db, building, add_meter) -> None:
        """Test a tenant pointing at a missing VAT code is a 404."""
        add_meter("MTR-1", "STL-1", readings={"2025-01-31": "100", "2025-02-15": "150"})
        tenant = test_db.query(Tenant).filter(Tenant.id == "TNT-1").first()
        tenant.vat_code = "V-GONE"
        test_db.commit()

        response = client.get(METER_URL.format("MTR-1", "2025-02-20"))

        assert response.status_code == 404
        assert response.json()["detail"] == "VAT code 'V-GONE' not found"


class TestTenantBilling:
    """Tests for the tenant roll-up endpoint."""

    def test_partial_failure_is_reported_inline(self, client, building, add_meter) -> None:
        """Test one failing meter does not fail the tenant bill."""
        add_meter("MTR-A", "STL-1", readings={"2025-02-10": "100"})
        add_meter(
            "MTR-B",
            "STL-2",
            meter_type="water",
            readings={"2025-01-20": "50", "2025-02-15": "60"},
        )

        response = client.get(TENANT_URL.format("TNT-1", "2025-02-20"))

        assert response.status_code == 200
        data = response.json()
        assert data["tenant_id"] == "TNT-1"
        assert data["end_date"] == "2025-02-20"
        failed, billed = data["meters"]
        assert failed == {
            "status": "error",
            "meter_id": "MTR-A",
            "stall_id": "STL-1",
            "status_code": 422,
            "error": "No readings for 2025-01-01..2025-01-31",
        }
        assert billed["status"] == "ok"
        assert billed["billing"]["base"] == "300.00"
        assert billed["billing"]["vat"] == "36.00"
        assert billed["billing"]["wt"] == "0.36"
        assert billed["billing"]["total"] == "335.64"
        assert list(data["totals_by_type"]) == ["water"]
        assert data["grand_totals"]["total"] == "335.64"

    def test_totals_by_type(self, client, building, add_meter) -> None:
        """Test totals are summed per utility and overall."""
        add_meter("MTR-E1", "STL-1", readings={"2025-01-31": "100", "2025-02-15": "150"})
        add_meter("MTR-E2", "STL-2", readings={"2025-01-31": "0", "2025-02-15": "20"})
        add_meter(
            "MTR-W", "STL-2", meter_type="water", readings={"2025-01-31": "0", "2025-02-15": "3"}
        )

        data = client.get(TENANT_URL.format("TNT-1", "2025-02-20")).json()

        electric = data["totals_by_type"]["electric"]
        assert electric["base"] == "700.00"
        assert electric["vat"] == "84.00"
        water = data["totals_by_type"]["water"]
        assert water["base"] == "90.00"
        grand = data["grand_totals"]
        assert Decimal(grand["base"]) == Decimal("790.00")
        assert Decimal(grand["total"]) == Decimal(electric["total"]) + Decimal(water["total"])

    def test_scope_excludes_all_stalls(self, client, building, add_meter) -> None:
        """Test a caller scoped to other buildings gets a 403."""
        add_meter("MTR-1", "STL-1", readings={"2025-01-31": "100", "2025-02-15": "150"})

        response = client.get(
            TENANT_URL.format("TNT-1", "2025-02-20"), headers={"X-Building-Scope": "BLDG-9"}
        )

        assert response.status_code == 403
        assert response.json()["detail"] == "No accessible stalls in your assigned buildings"

    def test_scope_including_building(self, client, building, add_meter) -> None:
        """Test a scope listing the tenant's building is allowed."""
        add_meter("MTR-1", "STL-1", readings={"2025-01-31": "100", "2025-02-15": "150"})

        response = client.get(
            TENANT_URL.format("TNT-1", "2025-02-20"),
            headers={"X-Building-Scope": "BLDG-9, BLDG-1"},
        )

        assert response.status_code == 200

    def test_unknown_tenant(self, client, building) -> None:
        """Test a missing tenant is a 404."""
        response = client.get(TENANT_URL.format("TNT-9", "2025-02-20"))

        assert response.status_code == 404
        assert response.json()["detail"] == "Tenant not found"

    def test_tenant_without_meters(self, client, building) -> None:
        """Test a tenant whose stalls have no meters is a 404."""
        response = client.get(TENANT_URL.format("TNT-2", "2025-02-20"))

        assert response.status_code == 404
        assert response.json()["detail"] == "No meters found for this tenant (within your scope)"

    def test_tenant_without_stalls(self, client, test_db, building) -> None:
        """Test a tenant with no stalls is a 404."""
        test_db.add(Tenant(id="TNT-3", name="New Lessee", building_id="BLDG-1"))
        test_db.commit()

        response = client.get(TENANT_URL.format("TNT-3", "2025-02-20"))

        assert response.status_code == 404
        assert response.json()["detail"] == "No stalls found for this tenant"

    def test_invalid_end_date(self, client, building) -> None:
        """Test date validation runs before the tenant lookup."""
        response = client.get(TENANT_URL.format("TNT-9", "not-a-date"))

        assert response.status_code == 400
