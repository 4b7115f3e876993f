"""Statement-level tests for RoutingRuleRepository; no database needed."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.dialects import postgresql

from lead_router.repositories.routing_rule_repository import RoutingRuleRepository


def _result(rows=(), scalar=None) -> MagicMock:
    result = MagicMock()
    result.scalars.return_value.all.return_value = list(rows)
    result.scalar.return_value = scalar
    result.scalar_one_or_none.return_value = rows[0] if rows else None
    return result


def _sql(db: AsyncMock, call: int = 0) -> str:
    statement = db.execute.await_args_list[call].args[0]
    return str(
        statement.compile(
            dialect=postgresql.dialect(), compile_kwargs={"literal_binds": True}
        )
    )


class TestListActive:
    @pytest.mark.asyncio
    async def test_orders_by_priority_desc_then_id_asc(self):
        db = AsyncMock()
        db.execute = AsyncMock(return_value=_result())

        await RoutingRuleRepository(db).list_active(3)

        sql = _sql(db)
        assert (
            "ORDER BY lead_routing_rules.priority DESC, lead_routing_rules.id ASC"
            in sql
        )
        assert "lead_routing_rules.company_id = 3" in sql
        assert "lead_routing_rules.is_active IS true" in sql

    @pytest.mark.asyncio
    async def test_returns_rows_in_query_order(self):
        rows = [MagicMock(id=2), MagicMock(id=1)]
        db = AsyncMock()
        db.execute = AsyncMock(return_value=_result(rows))

        assert await RoutingRuleRepository(db).list_active(3) == rows


class TestListRules:
    @pytest.mark.asyncio
    async def test_page_uses_evaluation_order_and_filters(self):
        db = AsyncMock()
        db.execute = AsyncMock(side_effect=[_result(scalar=7), _result()])

        _, total = await RoutingRuleRepository(db).list_rules(
            3, offset=20, limit=10, is_active=False, search="dubai"
        )

        assert total == 7
        page_sql = _sql(db, 1)
        assert (
            "ORDER BY lead_routing_rules.priority DESC, lead_routing_rules.id ASC"
            in page_sql
        )
        assert "lead_routing_rules.is_active IS false" in page_sql
        assert "ILIKE '%%dubai%%'" in page_sql or "ILIKE '%dubai%'" in page_sql
        assert "LIMIT 10 OFFSET 20" in page_sql


class TestGetById:
    @pytest.mark.asyncio
    async def test_scoped_to_company(self):
        db = AsyncMock()
        db.execute = AsyncMock(return_value=_result())

        assert await RoutingRuleRepository(db).get_by_id(9, 3) is None

        sql = _sql(db)
        assert "lead_routing_rules.id = 9" in sql
        assert "lead_routing_rules.company_id = 3" in sql
