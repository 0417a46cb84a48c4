# =============================================================================
# ORDER BACK OFFICE - TEST ORDER LIST FILTERS
# =============================================================================

from datetime import date, datetime, timezone

import pytest

from backoffice.core.errors import InvalidFormat
from backoffice.database.models import Order
from backoffice.services.order_filters import (
    In,
    OrderQuery,
    Range,
    build_order_filter,
    find_orders,
    resolve_ids,
    to_where_clauses,
)

pytestmark = pytest.mark.integration

# Полночь по Ташкенту (UTC+5) в UTC
JAN_1 = datetime(2023, 12, 31, 19, 0, tzinfo=timezone.utc)
JAN_2 = datetime(2024, 1, 1, 19, 0, tzinfo=timezone.utc)
MAR_1 = datetime(2024, 2, 29, 19, 0, tzinfo=timezone.utc)
JUN_1 = datetime(2024, 5, 31, 19, 0, tzinfo=timezone.utc)


class TestResolveIds:
    """Поиск клиентов/сотрудников по подстроке имени."""

    async def test_case_insensitive_substring(self, session, seed):
        ids = await resolve_ids(session, "customer", "ann")
        assert set(ids) == {seed.ann.id, seed.joanna.id}

    async def test_no_match_is_empty(self, session, seed):
        assert await resolve_ids(session, "customer", "zzz") == []

    async def test_wildcards_are_literal(self, session, seed):
        assert await resolve_ids(session, "customer", "%") == []
        assert await resolve_ids(session, "employee", "_") == []

    async def test_employee_kind(self, session, seed):
        ids = await resolve_ids(session, "employee", "BOSS")
        assert ids == [seed.boss.id]


class TestBuildOrderFilter:
    async def test_empty_query(self, session, seed):
        assert await build_order_filter(session, OrderQuery()) == {}

    async def test_empty_strings_are_ignored(self, session, seed):
        query = OrderQuery(customer_name="", order_date="", status="")
        assert await build_order_filter(session, query) == {}

    async def test_customer_name_and_status(self, session, seed):
        predicate = await build_order_filter(session, OrderQuery(customer_name="ann", status="Pending"))
        assert predicate["status"] == "Pending"
        assert isinstance(predicate["customer_id"], In)
        assert set(predicate["customer_id"].values) == {seed.ann.id, seed.joanna.id}

    async def test_unknown_employee_selects_nothing(self, session, seed):
        predicate = await build_order_filter(session, OrderQuery(employee_name="nobody"))
        assert predicate == {"employee_id": In(())}

    async def test_single_date_rules(self, session, seed):
        after = await build_order_filter(session, OrderQuery(order_after_date="01/03/2024"))
        before = await build_order_filter(session, OrderQuery(order_before_date="01/06/2024"))
        exact = await build_order_filter(session, OrderQuery(order_date="01/01/2024"))
        assert after == {"order_date": Range(gte=MAR_1)}
        assert before == {"order_date": Range(lt=JUN_1)}
        assert exact == {"order_date": Range(gte=JAN_1, lt=JAN_2)}

    async def test_order_date_wins_over_both(self, session, seed):
        all_three = await build_order_filter(
            session,
            OrderQuery(order_date="01/01/2024", order_before_date="01/06/2024", order_after_date="01/03/2024"),
        )
        only_exact = await build_order_filter(session, OrderQuery(order_date="01/01/2024"))
        assert all_three == only_exact

    async def test_before_wins_over_after(self, session, seed):
        both = await build_order_filter(
            session, OrderQuery(order_before_date="01/06/2024", order_after_date="01/03/2024")
        )
        only_before = await build_order_filter(session, OrderQuery(order_before_date="01/06/2024"))
        assert both == only_before

    async def test_overridden_date_is_still_validated(self, session, seed):
        with pytest.raises(InvalidFormat) as exc:
            await build_order_filter(
                session, OrderQuery(order_date="01/01/2024", order_after_date="31-02-2024")
            )
        assert "orderAfterDate" in exc.value.message

    async def test_first_invalid_field_is_reported(self, session, seed):
        with pytest.raises(InvalidFormat) as exc:
            await build_order_filter(
                session, OrderQuery(order_date="bad", order_before_date="also bad")
            )
        assert exc.value.message == "Invalid orderBeforeDate format. Accepted format: DD/MM/YYYY"

    @pytest.mark.parametrize(
        "field, attr, value",
        [
            ("orderAfterDate", "order_after_date", "01/01/0001"),
            ("orderBeforeDate", "order_before_date", "01/01/0001"),
            ("orderDate", "order_date", "01/01/0001"),
            ("orderDate", "order_date", "31/12/9999"),
        ],
    )
    async def test_bounds_outside_datetime_range(self, session, seed, field, attr, value):
        with pytest.raises(InvalidFormat) as exc:
            await build_order_filter(session, OrderQuery(**{attr: value}))
        assert exc.value.message == f"Invalid {field} format. Accepted format: DD/MM/YYYY"

    async def test_extreme_dates_within_range(self, session, seed):
        after = await build_order_filter(session, OrderQuery(order_after_date="31/12/9999"))
        before = await build_order_filter(session, OrderQuery(order_before_date="02/01/0001"))
        assert after["order_date"].gte == datetime(9999, 12, 30, 19, 0, tzinfo=timezone.utc)
        assert before["order_date"].lt.date() == date(1, 1, 1)


class TestFindOrders:
    def test_where_clauses(self):
        predicate = {"status": "Pending", "order_date": Range(gte=JAN_1, lt=JAN_2), "customer_id": In(())}
        assert len(to_where_clauses(predicate)) == 4

    async def test_day_filter_uses_local_calendar_day(self, session, seed, make_order):
        # 10:00 UTC = 15:00 по Ташкенту 1 января; 20:00 UTC = уже 2 января по Ташкенту
        morning = await make_order(seed.ann, seed.clerk, datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc))
        late = await make_order(seed.ann, seed.clerk, datetime(2024, 1, 1, 20, 0, tzinfo=timezone.utc))

        jan_1 = await build_order_filter(session, OrderQuery(order_date="01/01/2024"))
        jan_2 = await build_order_filter(session, OrderQuery(order_date="02/01/2024"))

        assert [o.id for o in await find_orders(session, jan_1, limit=10)] == [morning.id]
        assert [o.id for o in await find_orders(session, jan_2, limit=10)] == [late.id]

    async def test_limit_and_offset(self, session, seed, make_order):
        for day in (1, 2, 3):
            await make_order(seed.bob, seed.clerk, datetime(2024, 2, day, 12, 0, tzinfo=timezone.utc))
        page = await find_orders(session, {}, limit=2, offset=1)
        assert len(page) == 2
        assert all(isinstance(o, Order) for o in page)
        # сначала новые
        assert page[0].order_date > page[1].order_date
