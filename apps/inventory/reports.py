"""
Inventory reporting functionality.

- Inventory valuation (asset value at cost and at selling price)
- Low stock and out of stock alerts
- Sales movement: best sellers, stagnant products and unsold products
"""

from decimal import Decimal

from django.db.models import Sum
from django.utils import timezone

from apps.core.store_config import StoreConfig
from apps.sales.models import SaleItem

from .models import Product

TOP_PRODUCTS_LIMIT = 5


class InventoryReportGenerator:
    """Generate inventory reports for a store."""

    def __init__(self, store, config=None):
        """
        Initialize report generator for a specific store.

        Args:
            store: The store to generate reports for
            config: Optional StoreConfig, loaded from the store when omitted
        """
        self.store = store
        self.config = config or StoreConfig.from_store(store)

    def _products(self):
        return Product.objects.filter(store=self.store)

    @staticmethod
    def _build_item_data(product):
        return {
            "id": str(product.id),
            "name": product.name,
            "brand": product.brand,
            "category": product.category,
            "stock": product.stock,
            "cost_price": float(product.cost_price),
            "price": float(product.price),
        }

    def get_inventory_valuation_report(self):
        """
        Generate inventory valuation report.

        Shows total inventory value at cost and selling price,
        broken down by category.

        Returns:
            dict: Report data with summary and details
        """
        products = list(self._products())

        total_cost_value = sum((p.calculate_total_value() for p in products), Decimal("0.00"))
        total_selling_value = sum(
            (p.calculate_total_selling_value() for p in products), Decimal("0.00")
        )
        potential_profit = total_selling_value - total_cost_value

        # Group by category
        category_breakdown = {}
        for product in products:
            cat_name = product.category or "Uncategorized"
            if cat_name not in category_breakdown:
                category_breakdown[cat_name] = {
                    "category": cat_name,
                    "product_count": 0,
                    "total_stock": 0,
                    "cost_value": Decimal("0.00"),
                    "selling_value": Decimal("0.00"),
                }

            category_breakdown[cat_name]["product_count"] += 1
            category_breakdown[cat_name]["total_stock"] += product.stock
            category_breakdown[cat_name]["cost_value"] += product.calculate_total_value()
            category_breakdown[cat_name]["selling_value"] += product.calculate_total_selling_value()

        return {
            "report_type": "inventory_valuation",
            "generated_at": timezone.now().isoformat(),
            "summary": {
                "total_products": len(products),
                "total_stock": sum(p.stock for p in products),
                "total_cost_value": float(total_cost_value),
                "total_selling_value": float(total_selling_value),
                "potential_profit": float(potential_profit),
            },
            "by_category": [
                {
                    **data,
                    "cost_value": float(data["cost_value"]),
                    "selling_value": float(data["selling_value"]),
                }
                for data in category_breakdown.values()
            ],
        }

    def get_low_stock_alert_report(self):
        """
        Generate low stock alert report.

        Products with stock at or below the store's low stock threshold are
        listed as low stock; products with no stock at all are listed apart.

        Returns:
            dict: Report data with low stock and out of stock products
        """
        threshold = self.config.low_stock_alert
        products = self._products()

        out_of_stock_items = [
            self._build_item_data(p) for p in products.filter(stock=0).order_by("name")
        ]
        low_stock_items = [
            self._build_item_data(p)
            for p in products.filter(stock__gt=0, stock__lte=threshold).order_by("stock", "name")
        ]

        return {
            "report_type": "low_stock_alert",
            "generated_at": timezone.now().isoformat(),
            "filters": {"threshold": threshold},
            "summary": {
                "total_alerts": len(low_stock_items) + len(out_of_stock_items),
                "out_of_stock_count": len(out_of_stock_items),
                "low_stock_count": len(low_stock_items),
            },
            "out_of_stock_items": out_of_stock_items,
            "low_stock_items": low_stock_items,
        }

    def get_sales_movement_report(self, limit=TOP_PRODUCTS_LIMIT):
        """
        Generate sales movement report from the sales ledger.

        Quantities sold are summed per product over every recorded sale.
        Best sellers are the ``limit`` products with the highest quantity
        sold; stagnant products are the ``limit`` lowest among products that
        sold at least once; unsold products never appear on a sale.

        Returns:
            dict: Report data with best sellers, stagnant and unsold products
        """
        sold_rows = (
            SaleItem.objects.filter(sale__store=self.store, product__isnull=False)
            .order_by()
            .values("product_id")
            .annotate(quantity_sold=Sum("quantity"), revenue=Sum("line_total"))
        )
        sold = {row["product_id"]: row for row in sold_rows}

        products = {p.id: p for p in self._products()}

        movement = []
        for product_id, row in sold.items():
            product = products.get(product_id)
            if product is None:
                continue
            movement.append(
                {
                    **self._build_item_data(product),
                    "quantity_sold": row["quantity_sold"],
                    "revenue": float(row["revenue"] or 0),
                }
            )

        best_sellers = sorted(movement, key=lambda x: (-x["quantity_sold"], x["name"]))[:limit]
        stagnant = sorted(movement, key=lambda x: (x["quantity_sold"], x["name"]))[:limit]
        unsold = [
            self._build_item_data(product)
            for product_id, product in sorted(products.items(), key=lambda kv: kv[1].name)
            if product_id not in sold
        ]

        return {
            "report_type": "sales_movement",
            "generated_at": timezone.now().isoformat(),
            "summary": {
                "products_sold": len(movement),
                "unsold_count": len(unsold),
                "total_quantity_sold": sum(item["quantity_sold"] for item in movement),
            },
            "best_sellers": best_sellers,
            "stagnant_items": stagnant,
            "unsold_items": unsold,
        }

    def get_full_report(self):
        """Bundle every inventory report into one payload."""
        return {
            "valuation": self.get_inventory_valuation_report(),
            "low_stock": self.get_low_stock_alert_report(),
            "movement": self.get_sales_movement_report(),
        }
