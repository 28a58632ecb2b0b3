"""
Checkout pricing for the POS.

Pure functions that turn cart lines plus a discount and a tax adjustment
into a SettlementResult. Nothing here touches the database or reads store
settings; callers pass everything in.

Composition:

    subtotal       = sum(unit_price * quantity)
    discount       = clamp(adjustment(subtotal), 0, subtotal)
    taxable_amount = subtotal - discount
    tax            = max(adjustment(taxable_amount), 0)
    grand_total    = taxable_amount + tax

Every amount is quantized to two decimal places (ROUND_HALF_UP) before it
is composed, so ``grand_total == subtotal - discount + tax`` holds exactly.
Unusable adjustment values (NaN, infinity, unparseable text) count as zero.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Iterable, Optional

ZERO = Decimal("0.00")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")
# Largest amount a DecimalField(max_digits=14, decimal_places=2) column holds
MAX_AMOUNT = Decimal("999999999999.99")


class AdjustmentKind:
    """How an adjustment value is applied to its base amount."""

    FIXED = "FIXED"
    PERCENTAGE = "PERCENTAGE"

    CHOICES = [
        (FIXED, "Fixed amount"),
        (PERCENTAGE, "Percentage"),
    ]

    # Spellings accepted from API clients and older exports
    ALIASES = {
        "fixed": FIXED,
        "amount": FIXED,
        "rp": FIXED,
        "percentage": PERCENTAGE,
        "percent": PERCENTAGE,
        "%": PERCENTAGE,
    }

    @classmethod
    def parse(cls, raw: Any) -> str:
        """Return the canonical kind for ``raw``; unknown values mean FIXED."""
        if raw is None:
            return cls.FIXED
        return cls.ALIASES.get(str(raw).strip().lower(), cls.FIXED)


def normalize_value(raw: Any) -> Decimal:
    """
    Convert user input to a finite Decimal.

    Accepts str, int, float, Decimal or None. Anything that does not parse
    to a finite number becomes zero.

    Examples:
        >>> normalize_value("10.5")
        Decimal('10.5')
        >>> normalize_value(float("nan"))
        Decimal('0')
        >>> normalize_value("abc")
        Decimal('0')
    """
    if raw is None or isinstance(raw, bool):
        return Decimal("0")
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            return Decimal("0")
    try:
        value = raw if isinstance(raw, Decimal) else Decimal(str(raw))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("0")
    if not value.is_finite():
        return Decimal("0")
    return value


def quantize_amount(value: Decimal) -> Decimal:
    """Round a monetary amount to the currency's minor unit."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class AdjustmentSpec:
    """
    A discount or tax: a kind plus a value.

    PERCENTAGE values are read on a 0-100 scale. The value is normalised on
    construction to a finite Decimal in [0, MAX_AMOUNT], rounded to two
    places, so the value recorded on a sale is exactly the one applied.
    """

    kind: str = AdjustmentKind.FIXED
    value: Decimal = Decimal("0")

    def __post_init__(self):
        value = min(max(normalize_value(self.value), ZERO), MAX_AMOUNT)
        object.__setattr__(self, "kind", AdjustmentKind.parse(self.kind))
        object.__setattr__(self, "value", quantize_amount(value))

    @classmethod
    def none(cls) -> "AdjustmentSpec":
        return cls(AdjustmentKind.FIXED, Decimal("0"))

    @classmethod
    def fixed(cls, value: Any) -> "AdjustmentSpec":
        return cls(AdjustmentKind.FIXED, value)

    @classmethod
    def percentage(cls, value: Any) -> "AdjustmentSpec":
        return cls(AdjustmentKind.PERCENTAGE, value)

    @property
    def is_percentage(self) -> bool:
        return self.kind == AdjustmentKind.PERCENTAGE

    def apply_to(self, base: Decimal) -> Decimal:
        """Raw (unclamped, quantized) amount this adjustment yields on ``base``."""
        if self.is_percentage:
            return quantize_amount(min(base * self.value / HUNDRED, MAX_AMOUNT))
        return self.value


# The same shape describes both sides of the calculation
DiscountSpec = AdjustmentSpec
TaxSpec = AdjustmentSpec


@dataclass(frozen=True)
class CartLine:
    """
    One product entry in a cart.

    Name, price, cost, brand and category are captured when the line is
    built, so the sale records what was charged even if the product is
    edited later. ``stock`` is the stock level observed at that moment.
    """

    product_id: Any
    name: str
    unit_price: Decimal
    quantity: int
    unit_cost: Decimal = ZERO
    brand: str = ""
    category: str = ""
    stock: Optional[int] = None

    def __post_init__(self):
        if self.quantity < 1:
            raise ValueError(f"Quantity for {self.name} must be at least 1")
        unit_price = normalize_value(self.unit_price)
        unit_cost = normalize_value(self.unit_cost)
        if unit_price < 0 or unit_cost < 0:
            raise ValueError(f"Prices for {self.name} must not be negative")
        object.__setattr__(self, "unit_price", quantize_amount(unit_price))
        object.__setattr__(self, "unit_cost", quantize_amount(unit_cost))

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def line_cost(self) -> Decimal:
        return self.unit_cost * self.quantity

    @classmethod
    def from_product(cls, product, quantity: int) -> "CartLine":
        """Snapshot a Product (or anything shaped like one) into a cart line."""
        return cls(
            product_id=product.id,
            name=product.name,
            unit_price=product.price,
            quantity=quantity,
            unit_cost=product.cost_price,
            brand=product.brand,
            category=product.category,
            stock=product.stock,
        )


@dataclass(frozen=True)
class SettlementResult:
    """Totals for a cart. All amounts are non-negative Decimals."""

    subtotal: Decimal = ZERO
    discount_amount: Decimal = ZERO
    taxable_amount: Decimal = ZERO
    tax_amount: Decimal = ZERO
    grand_total: Decimal = ZERO
    discount: AdjustmentSpec = field(default_factory=AdjustmentSpec.none)
    tax: AdjustmentSpec = field(default_factory=AdjustmentSpec.none)

    def as_dict(self) -> Dict[str, str]:
        """Amounts as strings, ready for a JSON response."""
        return {
            "subtotal": str(self.subtotal),
            "discount_type": self.discount.kind,
            "discount_value": str(self.discount.value),
            "discount_amount": str(self.discount_amount),
            "taxable_amount": str(self.taxable_amount),
            "tax_type": self.tax.kind,
            "tax_value": str(self.tax.value),
            "tax_amount": str(self.tax_amount),
            "grand_total": str(self.grand_total),
        }


def compute_subtotal(lines: Iterable[CartLine]) -> Decimal:
    """Sum of unit_price * quantity over all lines. An empty cart is zero."""
    return quantize_amount(sum((line.line_total for line in lines), ZERO))


def compute_discount(subtotal: Decimal, spec: Optional[AdjustmentSpec]) -> Decimal:
    """Discount amount, clamped to the range [0, subtotal]."""
    if spec is None:
        return ZERO
    amount = spec.apply_to(subtotal)
    return min(max(amount, ZERO), subtotal)


def compute_tax(taxable_amount: Decimal, spec: Optional[AdjustmentSpec]) -> Decimal:
    """
    Tax amount on ``taxable_amount``.

    Clamped below at zero only: a fixed tax larger than the taxable amount
    is charged in full.
    """
    if spec is None:
        return ZERO
    return max(spec.apply_to(taxable_amount), ZERO)


def calculate(
    lines: Iterable[CartLine],
    discount: Optional[AdjustmentSpec] = None,
    tax: Optional[AdjustmentSpec] = None,
) -> SettlementResult:
    """
    Compute every total for a cart.

    An empty cart totals zero whatever the adjustments, so a fixed tax is
    never charged on nothing.
    """
    lines = list(lines)
    discount = discount or AdjustmentSpec.none()
    tax = tax or AdjustmentSpec.none()

    if not lines:
        return SettlementResult(discount=discount, tax=tax)

    subtotal = compute_subtotal(lines)
    discount_amount = compute_discount(subtotal, discount)
    taxable_amount = subtotal - discount_amount
    tax_amount = compute_tax(taxable_amount, tax)

    return SettlementResult(
        subtotal=subtotal,
        discount_amount=discount_amount,
        taxable_amount=taxable_amount,
        tax_amount=tax_amount,
        grand_total=taxable_amount + tax_amount,
        discount=discount,
        tax=tax,
    )
