"""Static-rate currency conversion anchored on one base currency."""

from __future__ import annotations

from collections.abc import Mapping

from ..errors import UnsupportedCurrency

ANCHOR_CURRENCY = "DKK"

# Units of anchor currency per 1 unit of currency
DEFAULT_RATES: dict[str, float] = {
    "DKK": 1.0,
    "EUR": 7.44,
    "USD": 6.84,
}

# en-US display style: symbol prefix where one exists, ISO code otherwise
_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "DKK": "DKK ",
    "SEK": "SEK ",
    "NOK": "NOK ",
}


class CurrencyConverter:
    """Converts amounts between currencies using a fixed rate table.

    The rate table is injectable so that rates can come from configuration
    instead of the built-in defaults.
    """

    def __init__(
        self,
        rates: Mapping[str, float] | None = None,
        anchor: str = ANCHOR_CURRENCY,
    ) -> None:
        table = dict(DEFAULT_RATES if rates is None else rates)
        if anchor not in table:
            raise ValueError(f"Anchor currency {anchor!r} missing from rate table")
        if table[anchor] != 1.0:
            raise ValueError(
                f"Anchor currency {anchor!r} must have rate 1.0, got {table[anchor]}"
            )
        for code, rate in table.items():
            if rate <= 0:
                raise ValueError(f"Rate for {code!r} must be positive, got {rate}")
        self._rates = table
        self._anchor = anchor

    @property
    def anchor(self) -> str:
        return self._anchor

    @property
    def currencies(self) -> list[str]:
        return list(self._rates)

    @property
    def rates(self) -> dict[str, float]:
        return dict(self._rates)

    def supports(self, currency: str) -> bool:
        return currency in self._rates

    def convert(self, amount: float, from_currency: str, to_currency: str) -> float:
        """Convert ``amount`` from one currency to another.

        Same-currency conversion returns the amount untouched. Otherwise the
        amount is routed through the anchor currency.

        Raises:
            UnsupportedCurrency: Naming ``from_currency`` if it is unknown,
                else ``to_currency``.
        """
        if from_currency == to_currency:
            return amount

        if from_currency not in self._rates:
            raise UnsupportedCurrency(from_currency)
        if to_currency not in self._rates:
            raise UnsupportedCurrency(to_currency)

        amount_in_anchor = amount * self._rates[from_currency]
        return amount_in_anchor / self._rates[to_currency]

    def to_anchor(self, amount: float, currency: str) -> float:
        return self.convert(amount, currency, self._anchor)


def format_currency(amount: float, currency: str) -> str:
    """Render an amount with two decimals, e.g. ``$6.84`` or ``DKK 24.95``.

    Codes without a known symbol fall back to ``"12.50 XYZ"``.
    """
    symbol = _SYMBOLS.get(currency)
    if symbol is None:
        return f"{amount:.2f} {currency}"
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


_default_converter = CurrencyConverter()


def convert(amount: float, from_currency: str, to_currency: str) -> float:
    """Convert using the built-in rate table."""
    return _default_converter.convert(amount, from_currency, to_currency)
