"""
Unit tests for CRM sales line cleaning.

Tests integer date validation and sales/price repair.
"""

from datetime import date

import pytest

from src.core.schema.raw import RAW_SALES_SCHEMA
from src.transform import transform_sales

pytestmark = pytest.mark.unit


def sales_line(order_dt=20101229, sales=100, quantity=2, price=50, number="SO1"):
    return (number, "BK-1", 11000, order_dt, 20110105, 20110110, sales, quantity, price)


def transform(spark, rows):
    df = spark.createDataFrame(rows, RAW_SALES_SCHEMA)
    return {r["sls_ord_num"]: r for r in transform_sales(df).collect()}


class TestSalesDates:
    """Tests for yyyyMMdd integer dates"""

    def test_valid_dates_are_parsed(self, spark_session):
        """Test that 8-digit dates in range become dates"""
        row = transform(spark_session, [sales_line()])["SO1"]

        assert row["sls_order_dt"] == date(2010, 12, 29)
        assert row["sls_ship_dt"] == date(2011, 1, 5)
        assert row["sls_due_dt"] == date(2011, 1, 10)

    def test_invalid_dates_become_null(self, spark_session):
        """Test zero, negative, short, out of range and null dates"""
        rows = transform(spark_session, [
            sales_line(order_dt=0, number="zero"),
            sales_line(order_dt=-20101229, number="negative"),
            sales_line(order_dt=32154, number="short"),
            sales_line(order_dt=20501231, number="too_late"),
            sales_line(order_dt=18991231, number="too_early"),
            sales_line(order_dt=None, number="missing"),
        ])

        assert all(row["sls_order_dt"] is None for row in rows.values())

    def test_impossible_calendar_date_becomes_null(self, spark_session):
        """Test that an 8-digit value that is not a real day is nulled"""
        row = transform(spark_session, [sales_line(order_dt=20101341)])["SO1"]

        assert row["sls_order_dt"] is None


class TestSalesMeasures:
    """Tests for sales and price repair"""

    @pytest.mark.parametrize(
        "sales,quantity,price,expected_sales,expected_price",
        [
            (100, 2, 50, 100, 50),      # consistent, untouched
            (-10, 2, 50, 100, 50),      # negative sales recomputed
            (None, 1, 13, 13, 13),      # missing sales recomputed
            (99, 2, 50, 100, 50),       # inconsistent sales recomputed
            (26, 2, None, 26, 13),      # missing price derived
            (30, 2, -15, 30, 15),       # negative price flipped
            (40, 0, None, 40, None),    # zero quantity leaves price unknown
            (0, 3, 0, 0, 0),            # zero price stays zero
            (100, 3, 10, 30, 10),       # sales follow quantity times price
            (100, 2, None, 100, 50),    # price derived from consistent sales
        ],
    )
    def test_measures_are_repaired(self, spark_session, sales, quantity, price, expected_sales, expected_price):
        """Test each measure repair case"""
        row = transform(spark_session, [sales_line(sales=sales, quantity=quantity, price=price)])["SO1"]

        assert row["sls_sales"] == expected_sales
        assert row["sls_quantity"] == quantity
        assert row["sls_price"] == expected_price

    def test_price_is_derived_from_raw_sales(self, spark_session):
        """Test that a missing price uses the raw sales value, not the repaired one"""
        row = transform(spark_session, [sales_line(sales=-10, quantity=2, price=None)])["SO1"]

        assert row["sls_price"] == -5
        assert row["sls_sales"] is None

    def test_one_line_per_raw_line(self, spark_session):
        """Test that duplicate order numbers are kept"""
        df = spark_session.createDataFrame([sales_line(), sales_line()], RAW_SALES_SCHEMA)

        assert transform_sales(df).count() == 2
